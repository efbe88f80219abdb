"""Extension metadata: validated declarations and expected-import resolution."""

from .declaration import ALL, REPRODUCIBLE, ExtensionMetadata, UseAllRepos
from .errors import ErrorKind, ExtensionMetadataError
from .resolver import ExpectedImports, resolve_expected_imports

__all__ = [
    "ALL",
    "REPRODUCIBLE",
    "ErrorKind",
    "ExpectedImports",
    "ExtensionMetadata",
    "ExtensionMetadataError",
    "UseAllRepos",
    "resolve_expected_imports",
]
