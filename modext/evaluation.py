"""Loading of extension evaluation documents (YAML or JSON)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, FrozenSet, Mapping, Optional

import yaml

from .config import as_bool
from .fixup.reconcile import DEFAULT_FIX_COMMAND, generate_fixup
from .logging import get_logger
from .metadata.declaration import DIRECT_DEPS, DIRECT_DEV_DEPS, ExtensionMetadata
from .models import Location, ModuleExtensionUsage, RootModuleFileFixup, UsageProxy

_logger = get_logger("evaluation")


class EvaluationFileError(RuntimeError):
    """Raised when an evaluation document does not have the expected shape."""


@dataclass(frozen=True)
class Evaluation:
    """One run of a module extension together with the root module's usage of it."""

    usage: ModuleExtensionUsage
    metadata: ExtensionMetadata
    generated_repos: FrozenSet[str]

    def check(self, *, fix_command: str = DEFAULT_FIX_COMMAND) -> Optional[RootModuleFileFixup]:
        return generate_fixup(
            self.metadata, self.usage, self.generated_repos, fix_command=fix_command
        )


def load_evaluation(path: Path) -> Evaluation:
    """Read and parse an evaluation document from disk."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Evaluation file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise EvaluationFileError(f"Failed to parse {path.name}: {exc}") from exc
    _logger.debug("Loaded evaluation document %s", path)
    return parse_evaluation(data)


def parse_evaluation(data: Any) -> Evaluation:
    """Build an :class:`Evaluation` from an already-decoded document.

    Raises :class:`ExtensionMetadataError` when the ``metadata`` block is invalid.
    """
    if not isinstance(data, Mapping):
        raise EvaluationFileError("evaluation document must contain a mapping at the root")

    extension = _require_mapping(data, "extension")
    bzl_file = _require_str(extension, "bzl_file", "extension")
    name = _require_str(extension, "name", "extension")

    generated = data.get("generated_repos") or []
    if not isinstance(generated, list) or not all(isinstance(r, str) for r in generated):
        raise EvaluationFileError("generated_repos must be a list of strings")

    raw_proxies = data.get("proxies")
    if not isinstance(raw_proxies, list) or not raw_proxies:
        raise EvaluationFileError("proxies must be a non-empty list")
    proxies = [_parse_proxy(entry, index) for index, entry in enumerate(raw_proxies)]

    metadata_data = data.get("metadata") or {}
    if not isinstance(metadata_data, Mapping):
        raise EvaluationFileError("metadata must be a mapping")
    metadata = ExtensionMetadata.create(
        metadata_data.get(DIRECT_DEPS),
        metadata_data.get(DIRECT_DEV_DEPS),
        reproducible=_require_bool(metadata_data, "reproducible", "metadata"),
    )

    return Evaluation(
        usage=ModuleExtensionUsage(
            extension_bzl_file=bzl_file, extension_name=name, proxies=tuple(proxies)
        ),
        metadata=metadata,
        generated_repos=frozenset(generated),
    )


def _parse_proxy(entry: Any, index: int) -> UsageProxy:
    where = f"proxies[{index}]"
    if not isinstance(entry, Mapping):
        raise EvaluationFileError(f"{where} must be a mapping")
    file = _require_str(entry, "file", where)
    proxy_name = entry.get("name") or ""
    if not isinstance(proxy_name, str):
        raise EvaluationFileError(f"{where}.name must be a string")

    imports = entry.get("imports") or {}
    if isinstance(imports, list):
        if not all(isinstance(repo, str) for repo in imports):
            raise EvaluationFileError(f"{where}.imports must be a list of strings")
        imports = {repo: repo for repo in imports}
    if not isinstance(imports, Mapping):
        raise EvaluationFileError(f"{where}.imports must be a mapping or a list")
    pairs: Dict[str, str] = {}
    for alias, repo in imports.items():
        if not isinstance(alias, str) or not isinstance(repo, str):
            raise EvaluationFileError(f"{where}.imports must map strings to strings")
        pairs[alias] = repo

    return UsageProxy.create(
        file,
        proxy_name,
        dev_dependency=_require_bool(entry, "dev_dependency", where),
        imports=pairs,
        location=Location(file, _as_int(entry.get("line")), _as_int(entry.get("column"))),
    )


def _require_mapping(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key)
    if not isinstance(value, Mapping):
        raise EvaluationFileError(f"{key} must be a mapping")
    return value


def _require_str(data: Mapping[str, Any], key: str, where: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise EvaluationFileError(f"{where}.{key} must be a non-empty string")
    return value


def _require_bool(data: Mapping[str, Any], key: str, where: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    parsed = as_bool(value)
    if parsed is None:
        raise EvaluationFileError(f"{where}.{key} must be a boolean, got {value!r}")
    return parsed


def _as_int(value: Any) -> int:
    return value if isinstance(value, int) and not isinstance(value, bool) else 0


__all__ = [
    "Evaluation",
    "EvaluationFileError",
    "load_evaluation",
    "parse_evaluation",
]
