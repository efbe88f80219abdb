"""Resolution of declared direct dependencies against the generated repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, FrozenSet, Optional, Sequence

from .declaration import DIRECT_DEPS, DIRECT_DEV_DEPS, ExtensionMetadata, UseAllRepos
from .errors import ErrorKind, ExtensionMetadataError


@dataclass(frozen=True)
class ExpectedImports:
    """Concrete sets of repos the root module should import, per category."""

    regular: FrozenSet[str]
    dev: FrozenSet[str]

    @property
    def all(self) -> FrozenSet[str]:
        return self.regular | self.dev


def root_module_direct_deps(
    metadata: ExtensionMetadata, all_repos: AbstractSet[str]
) -> Optional[FrozenSet[str]]:
    """Return the expected regular imports, or ``None`` when the extension has no opinion."""
    if metadata.use_all_repos is UseAllRepos.REGULAR:
        return frozenset(all_repos)
    if metadata.use_all_repos is UseAllRepos.DEV:
        return frozenset()
    return _checked_explicit(metadata.explicit_root_module_direct_deps, all_repos, DIRECT_DEPS)


def root_module_direct_dev_deps(
    metadata: ExtensionMetadata, all_repos: AbstractSet[str]
) -> Optional[FrozenSet[str]]:
    """Return the expected dev imports, or ``None`` when the extension has no opinion."""
    if metadata.use_all_repos is UseAllRepos.REGULAR:
        return frozenset()
    if metadata.use_all_repos is UseAllRepos.DEV:
        return frozenset(all_repos)
    return _checked_explicit(
        metadata.explicit_root_module_direct_dev_deps, all_repos, DIRECT_DEV_DEPS
    )


def resolve_expected_imports(
    metadata: ExtensionMetadata, all_repos: AbstractSet[str]
) -> Optional[ExpectedImports]:
    """Combine the metadata with the generated repos into expected import sets."""
    dev = root_module_direct_dev_deps(metadata, all_repos)
    regular = root_module_direct_deps(metadata, all_repos)
    if regular is None and dev is None:
        return None
    if regular is None or dev is None:
        raise AssertionError("direct deps and direct dev deps must be resolved together")
    return ExpectedImports(regular=regular, dev=dev)


def _checked_explicit(
    explicit: Optional[Sequence[str]], all_repos: AbstractSet[str], what: str
) -> Optional[FrozenSet[str]]:
    if explicit is None:
        return None
    invalid = [name for name in explicit if name not in all_repos]
    if invalid:
        raise ExtensionMetadataError(
            ErrorKind.UNKNOWN_REPOSITORY,
            f"{what} contained the following repositories not generated by the extension: "
            + ", ".join(invalid),
        )
    return frozenset(explicit)


__all__ = [
    "ExpectedImports",
    "resolve_expected_imports",
    "root_module_direct_deps",
    "root_module_direct_dev_deps",
]
