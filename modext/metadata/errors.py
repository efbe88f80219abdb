"""Error types raised while validating extension metadata."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict


class ErrorKind(Enum):
    """Category of a metadata validation failure."""

    MALFORMED_DECLARATION = "malformed_declaration"
    DUPLICATE_ENTRY = "duplicate_entry"
    CROSS_CATEGORY_ENTRY = "cross_category_entry"
    UNKNOWN_REPOSITORY = "unknown_repository"
    POLICY_VIOLATION = "policy_violation"


class ExtensionMetadataError(RuntimeError):
    """Raised when extension metadata cannot be validated or applied.

    ``message`` is shown to users verbatim.
    """

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "kind": self.kind.value,
            "message": self.message,
        }


def malformed(message: str) -> ExtensionMetadataError:
    return ExtensionMetadataError(ErrorKind.MALFORMED_DECLARATION, message)


__all__ = ["ErrorKind", "ExtensionMetadataError", "malformed"]
