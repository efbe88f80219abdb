"""Core data models shared across modext components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Tuple

UNNAMED_USAGE_LABEL = "_unnamed_usage"


@dataclass(frozen=True)
class Location:
    """Source position of a declaration inside a module file."""

    file: str
    line: int = 0
    column: int = 0

    def __str__(self) -> str:
        if not self.line:
            return self.file
        if not self.column:
            return f"{self.file}:{self.line}"
        return f"{self.file}:{self.line}:{self.column}"


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class Event:
    """Diagnostic handed to the event sink."""

    severity: Severity
    location: Location
    message: str

    @classmethod
    def warn(cls, location: Location, message: str) -> "Event":
        return cls(severity=Severity.WARNING, location=location, message=message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "severity": self.severity.value,
            "location": str(self.location),
            "message": self.message,
        }


@dataclass(frozen=True)
class UsageProxy:
    """One ``use_repo`` site: the repositories a module imports from an extension proxy."""

    containing_module_file_path: str
    proxy_name: str
    dev_dependency: bool
    imports: Tuple[Tuple[str, str], ...]
    location: Location

    @classmethod
    def create(
        cls,
        containing_module_file_path: str,
        proxy_name: str = "",
        *,
        dev_dependency: bool = False,
        imports: Mapping[str, str] | Iterable[str] = (),
        location: Location | None = None,
    ) -> "UsageProxy":
        """Build a proxy; a bare iterable of names imports each repo under its own name."""
        if isinstance(imports, Mapping):
            pairs = tuple((str(alias), str(repo)) for alias, repo in imports.items())
        else:
            pairs = tuple((str(repo), str(repo)) for repo in imports)
        return cls(
            containing_module_file_path=containing_module_file_path,
            proxy_name=proxy_name,
            dev_dependency=dev_dependency,
            imports=pairs,
            location=location or Location(containing_module_file_path),
        )

    @property
    def label(self) -> str:
        return self.proxy_name or UNNAMED_USAGE_LABEL

    def imported_repos(self) -> List[str]:
        """Return the canonical repo names imported here, in declaration order."""
        return [repo for _, repo in self.imports]

    def import_mapping(self) -> Dict[str, str]:
        return dict(self.imports)


@dataclass(frozen=True)
class ModuleExtensionUsage:
    """All proxies of one extension declared by the root module, in declaration order."""

    extension_bzl_file: str
    extension_name: str
    proxies: Tuple[UsageProxy, ...]
    has_dev_use_extension: bool = field(init=False)
    has_non_dev_use_extension: bool = field(init=False)

    def __post_init__(self) -> None:
        proxies = tuple(self.proxies)
        if not proxies:
            raise ValueError(
                f"usage of {self.extension_name} from {self.extension_bzl_file} has no proxies"
            )
        object.__setattr__(self, "proxies", proxies)
        object.__setattr__(
            self, "has_dev_use_extension", any(p.dev_dependency for p in proxies)
        )
        object.__setattr__(
            self, "has_non_dev_use_extension", any(not p.dev_dependency for p in proxies)
        )


@dataclass(frozen=True)
class RootModuleFileFixup:
    """Edits needed to bring the root module's ``use_repo`` calls in line with the extension."""

    module_file_path_to_commands: Dict[str, List[str]]
    usage: ModuleExtensionUsage
    warning: Event

    def commands(self) -> List[str]:
        """Return every command across files, in emission order."""
        return [
            command
            for commands in self.module_file_path_to_commands.values()
            for command in commands
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "extension": {
                "bzl_file": self.usage.extension_bzl_file,
                "name": self.usage.extension_name,
            },
            "commands": {
                path: list(commands)
                for path, commands in self.module_file_path_to_commands.items()
            },
            "warning": self.warning.to_dict(),
        }
