"""Builds the ``use_repo`` edit commands consumed by the module file editor."""

from __future__ import annotations

from typing import Dict, Iterable, List

from ..models import ModuleExtensionUsage, UNNAMED_USAGE_LABEL, UsageProxy
from .diff import ImportDiff

USE_REPO_ADD = "use_repo_add"
USE_REPO_REMOVE = "use_repo_remove"


def make_use_repo_command(action: str, proxy_name: str, repos: Iterable[str]) -> str:
    parts = [action, proxy_name or UNNAMED_USAGE_LABEL]
    parts.extend(sorted(repos))
    return " ".join(parts)


def first_proxy(usage: ModuleExtensionUsage, *, dev: bool) -> UsageProxy:
    """Return the first proxy in declaration order with the given dev status."""
    for proxy in usage.proxies:
        if proxy.dev_dependency == dev:
            return proxy
    kind = "dev" if dev else "non-dev"
    raise LookupError(
        f"usage of {usage.extension_name} has no {kind} proxy to add imports to"
    )


def emit_commands(usage: ModuleExtensionUsage, diff: ImportDiff) -> Dict[str, List[str]]:
    """Group add/remove commands by the module file that owns each proxy.

    Additions go to the first proxy of the matching kind; removals are scoped to every
    proxy that actually imports a repo to remove.
    """
    commands: Dict[str, List[str]] = {}

    def _put(proxy: UsageProxy, command: str) -> None:
        commands.setdefault(proxy.containing_module_file_path, []).append(command)

    if diff.imports_to_add:
        proxy = first_proxy(usage, dev=False)
        _put(proxy, make_use_repo_command(USE_REPO_ADD, proxy.proxy_name, diff.imports_to_add))
    if diff.dev_imports_to_add:
        proxy = first_proxy(usage, dev=True)
        _put(
            proxy,
            make_use_repo_command(USE_REPO_ADD, proxy.proxy_name, diff.dev_imports_to_add),
        )

    for proxy in usage.proxies:
        removable = set(
            diff.dev_imports_to_remove if proxy.dev_dependency else diff.imports_to_remove
        )
        to_remove = removable.intersection(proxy.imported_repos())
        if to_remove:
            _put(proxy, make_use_repo_command(USE_REPO_REMOVE, proxy.proxy_name, to_remove))

    return commands


__all__ = [
    "USE_REPO_ADD",
    "USE_REPO_REMOVE",
    "emit_commands",
    "first_proxy",
    "make_use_repo_command",
]
