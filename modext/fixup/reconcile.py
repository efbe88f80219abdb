"""Compares an extension's reported direct dependencies with the root module's imports."""

from __future__ import annotations

from typing import AbstractSet, Iterable, List, Optional

from ..logging import get_logger
from ..metadata.declaration import DIRECT_DEPS, DIRECT_DEV_DEPS, ExtensionMetadata
from ..metadata.errors import ErrorKind, ExtensionMetadataError
from ..metadata.resolver import ExpectedImports, resolve_expected_imports
from ..models import Event, ModuleExtensionUsage, RootModuleFileFixup
from .commands import emit_commands
from .diff import ImportDiff, compute_diff

DEFAULT_FIX_COMMAND = "bazel mod tidy"

INVALID_IMPORTS_HEADING = (
    "Imported, but not created by the extension (will cause the build to fail):"
)
MISSING_IMPORTS_HEADING = (
    "Not imported, but reported as direct dependencies by the extension (may cause the"
    " build to fail):"
)
NON_DEV_IMPORTS_OF_DEV_DEPS_HEADING = (
    "Imported as a regular dependency, but reported as a dev dependency by the extension"
    " (may cause the build to fail when used by other modules):"
)
DEV_IMPORTS_OF_NON_DEV_DEPS_HEADING = (
    "Imported as a dev dependency, but reported as a regular dependency by the extension"
    " (may cause the build to fail when used by other modules):"
)
INDIRECT_DEP_IMPORTS_HEADING = (
    "Imported, but reported as indirect dependencies by the extension:"
)

_logger = get_logger("fixup")


def generate_fixup(
    metadata: ExtensionMetadata,
    usage: ModuleExtensionUsage,
    all_repos: AbstractSet[str],
    *,
    fix_command: str = DEFAULT_FIX_COMMAND,
) -> Optional[RootModuleFileFixup]:
    """Return the fixup for ``usage``, or ``None`` when its imports already match.

    Raises :class:`ExtensionMetadataError` when the metadata names unknown repositories or
    expects imports of a kind the root module never declares.
    """
    all_repos = frozenset(all_repos)
    expected = resolve_expected_imports(metadata, all_repos)
    if expected is None:
        _logger.debug("Extension %s reports no direct deps", usage.extension_name)
        return None
    check_policy(usage, expected)
    return reconcile(usage, expected, all_repos, fix_command=fix_command)


def check_policy(usage: ModuleExtensionUsage, expected: ExpectedImports) -> None:
    if not usage.has_non_dev_use_extension and expected.regular:
        raise ExtensionMetadataError(
            ErrorKind.POLICY_VIOLATION,
            f"{DIRECT_DEPS} must be empty if the root module contains no usages with "
            "dev_dependency = False",
        )
    if not usage.has_dev_use_extension and expected.dev:
        raise ExtensionMetadataError(
            ErrorKind.POLICY_VIOLATION,
            f"{DIRECT_DEV_DEPS} must be empty if the root module contains no usages with "
            "dev_dependency = True",
        )


def reconcile(
    usage: ModuleExtensionUsage,
    expected: ExpectedImports,
    all_repos: AbstractSet[str],
    *,
    fix_command: str = DEFAULT_FIX_COMMAND,
) -> Optional[RootModuleFileFixup]:
    all_repos = frozenset(all_repos)
    diff = compute_diff(usage, expected)
    _logger.debug(
        "Extension %s: +%d/-%d imports, +%d/-%d dev imports",
        usage.extension_name,
        len(diff.imports_to_add),
        len(diff.imports_to_remove),
        len(diff.dev_imports_to_add),
        len(diff.dev_imports_to_remove),
    )
    if diff.is_empty():
        return None

    message = compose_message(usage, diff, all_repos, fix_command=fix_command)
    commands = emit_commands(usage, diff)
    _logger.info(
        "use_repo imports of %s need %d edit(s)",
        usage.extension_name,
        sum(len(values) for values in commands.values()),
    )
    return RootModuleFileFixup(
        module_file_path_to_commands=commands,
        usage=usage,
        warning=Event.warn(usage.proxies[0].location, message),
    )


def compose_message(
    usage: ModuleExtensionUsage,
    diff: ImportDiff,
    all_repos: AbstractSet[str],
    *,
    fix_command: str = DEFAULT_FIX_COMMAND,
) -> str:
    """Render the warning shown to users when ``use_repo`` calls are out of date."""
    all_repos = frozenset(all_repos)
    expected = diff.expected
    actual_all = diff.actual_all
    expected_all = expected.all

    sections = [
        (INVALID_IMPORTS_HEADING, actual_all - all_repos),
        (MISSING_IMPORTS_HEADING, expected_all - actual_all),
        (NON_DEV_IMPORTS_OF_DEV_DEPS_HEADING, expected.dev & diff.actual_regular),
        (DEV_IMPORTS_OF_NON_DEV_DEPS_HEADING, expected.regular & diff.actual_dev),
        (INDIRECT_DEP_IMPORTS_HEADING, (actual_all & all_repos) - expected_all),
    ]

    parts: List[str] = [
        f"The module extension {usage.extension_name} defined in {usage.extension_bzl_file} "
        "reported incorrect imports of repositories via use_repo():\n\n"
    ]
    for heading, repos in sections:
        if repos:
            parts.append(_section(heading, repos))
    parts.append(f"Fix the use_repo calls by running '{fix_command}'.")
    return "".join(parts)


def _section(heading: str, repos: Iterable[str]) -> str:
    return f"{heading}\n    {', '.join(sorted(repos))}\n\n"


__all__ = [
    "DEFAULT_FIX_COMMAND",
    "check_policy",
    "compose_message",
    "generate_fixup",
    "reconcile",
]
