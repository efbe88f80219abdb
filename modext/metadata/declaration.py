"""Validated form of the metadata a module extension reports about its repositories."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from ..repo_name import (
    InvalidRepoNameError,
    is_valid_user_provided_repo_name,
    validate_user_provided_repo_name,
)
from .errors import ErrorKind, ExtensionMetadataError, malformed

ALL = "all"

DIRECT_DEPS = "root_module_direct_deps"
DIRECT_DEV_DEPS = "root_module_direct_dev_deps"


class UseAllRepos(Enum):
    """Whether every generated repository is a direct dependency of one category."""

    NO = "no"
    REGULAR = "regular"
    DEV = "dev"


@dataclass(frozen=True)
class ExtensionMetadata:
    """Direct dependencies the extension expects the root module to import.

    Instances are built through :meth:`create`, which validates the raw values passed to
    ``extension_metadata``. ``None`` for both explicit tuples means the extension has no
    opinion unless ``use_all_repos`` says otherwise.
    """

    explicit_root_module_direct_deps: Optional[Tuple[str, ...]]
    explicit_root_module_direct_dev_deps: Optional[Tuple[str, ...]]
    use_all_repos: UseAllRepos
    reproducible: bool

    def __post_init__(self) -> None:
        deps = self.explicit_root_module_direct_deps
        dev_deps = self.explicit_root_module_direct_dev_deps
        if self.use_all_repos is not UseAllRepos.NO and (deps is not None or dev_deps is not None):
            raise ValueError("explicit direct deps cannot be combined with use_all_repos")
        if (deps is None) != (dev_deps is None):
            raise ValueError("explicit direct deps and dev deps must both be set or both be None")
        if deps is not None and dev_deps is not None:
            if len(set(deps)) != len(deps) or len(set(dev_deps)) != len(dev_deps):
                raise ValueError("explicit direct deps must not contain duplicates")
            if set(deps) & set(dev_deps):
                raise ValueError("explicit direct deps and dev deps must be disjoint")
            invalid = [
                name
                for name in (*deps, *dev_deps)
                if not is_valid_user_provided_repo_name(name)
            ]
            if invalid:
                raise ValueError(f"invalid repo names in explicit direct deps: {', '.join(invalid)}")

    @classmethod
    def create(
        cls,
        root_module_direct_deps: Any = None,
        root_module_direct_dev_deps: Any = None,
        reproducible: bool = False,
    ) -> "ExtensionMetadata":
        """Validate raw ``root_module_direct_deps``/``root_module_direct_dev_deps`` values.

        Each value is ``None`` (unset), the string ``"all"`` or a list of repository names.
        Raises :class:`ExtensionMetadataError` for any other combination.
        """
        deps, dev_deps = root_module_direct_deps, root_module_direct_dev_deps
        if deps is None and dev_deps is None:
            return cls(None, None, UseAllRepos.NO, reproducible)

        # "all" pairs only with an empty list; None is rejected below.
        if deps == ALL and _is_empty_list(dev_deps):
            return cls(None, None, UseAllRepos.REGULAR, reproducible)
        if dev_deps == ALL and _is_empty_list(deps):
            return cls(None, None, UseAllRepos.DEV, reproducible)

        if deps == ALL or dev_deps == ALL:
            raise malformed(
                f'if one of {DIRECT_DEPS} and {DIRECT_DEV_DEPS} is "all", '
                "the other must be an empty list"
            )
        if isinstance(deps, str) or isinstance(dev_deps, str):
            raise malformed(
                f'{DIRECT_DEPS} and {DIRECT_DEV_DEPS} must be None, "all", or a list of strings'
            )
        if (deps is None) != (dev_deps is None):
            raise malformed(
                f"{DIRECT_DEPS} and {DIRECT_DEV_DEPS} must both be specified or both be "
                "unspecified"
            )

        direct_deps = _collect_names(_cast_str_sequence(deps, DIRECT_DEPS), DIRECT_DEPS)
        direct_dev_deps = _collect_names(
            _cast_str_sequence(dev_deps, DIRECT_DEV_DEPS),
            DIRECT_DEV_DEPS,
            other=direct_deps,
        )
        return cls(tuple(direct_deps), tuple(direct_dev_deps), UseAllRepos.NO, reproducible)


REPRODUCIBLE = ExtensionMetadata(None, None, UseAllRepos.NO, True)


def _is_empty_list(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and len(value) == 0


def _type_name(value: Any) -> str:
    if value is None:
        return "NoneType"
    if isinstance(value, (list, tuple)):
        return "list"
    if isinstance(value, dict):
        return "dict"
    return type(value).__name__


def _cast_str_sequence(value: Any, what: str) -> Sequence[str]:
    if not isinstance(value, (list, tuple)):
        raise malformed(f"for {what}, got {_type_name(value)}, want sequence")
    for index, item in enumerate(value):
        if not isinstance(item, str):
            raise malformed(
                f"at index {index} of {what}, got element of type {_type_name(item)}, "
                "want string"
            )
    return value


def _collect_names(
    names: Iterable[str], what: str, *, other: Sequence[str] = ()
) -> List[str]:
    collected: List[str] = []
    seen = set()
    other_names = set(other)
    for name in names:
        try:
            validate_user_provided_repo_name(name)
        except InvalidRepoNameError as exc:
            raise malformed(f"in {what}: {exc}") from exc
        if name in other_names:
            raise ExtensionMetadataError(
                ErrorKind.CROSS_CATEGORY_ENTRY,
                f"in {what}: entry '{name}' is also in {DIRECT_DEPS}",
            )
        if name in seen:
            raise ExtensionMetadataError(
                ErrorKind.DUPLICATE_ENTRY, f"in {what}: duplicate entry '{name}'"
            )
        seen.add(name)
        collected.append(name)
    return collected


__all__ = [
    "ALL",
    "DIRECT_DEPS",
    "DIRECT_DEV_DEPS",
    "ExtensionMetadata",
    "REPRODUCIBLE",
    "UseAllRepos",
]
