"""Set algebra between expected and actual ``use_repo`` imports."""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Tuple

from ..metadata.resolver import ExpectedImports
from ..models import ModuleExtensionUsage


@dataclass(frozen=True)
class ImportDiff:
    """Actual imports of a usage and how they differ from the expected imports."""

    expected: ExpectedImports
    actual_regular: FrozenSet[str]
    actual_dev: FrozenSet[str]
    imports_to_add: Tuple[str, ...]
    imports_to_remove: Tuple[str, ...]
    dev_imports_to_add: Tuple[str, ...]
    dev_imports_to_remove: Tuple[str, ...]

    @property
    def actual_all(self) -> FrozenSet[str]:
        return self.actual_regular | self.actual_dev

    def is_empty(self) -> bool:
        return not (
            self.imports_to_add
            or self.imports_to_remove
            or self.dev_imports_to_add
            or self.dev_imports_to_remove
        )


def actual_imports(usage: ModuleExtensionUsage, *, dev: bool) -> FrozenSet[str]:
    """Union of repo names imported by all proxies with the given dev status."""
    return frozenset(
        repo
        for proxy in usage.proxies
        if proxy.dev_dependency == dev
        for repo in proxy.imported_repos()
    )


def compute_diff(usage: ModuleExtensionUsage, expected: ExpectedImports) -> ImportDiff:
    actual_regular = actual_imports(usage, dev=False)
    actual_dev = actual_imports(usage, dev=True)
    return ImportDiff(
        expected=expected,
        actual_regular=actual_regular,
        actual_dev=actual_dev,
        imports_to_add=tuple(sorted(expected.regular - actual_regular)),
        imports_to_remove=tuple(sorted(actual_regular - expected.regular)),
        dev_imports_to_add=tuple(sorted(expected.dev - actual_dev)),
        dev_imports_to_remove=tuple(sorted(actual_dev - expected.dev)),
    )


__all__ = ["ImportDiff", "actual_imports", "compute_diff"]
