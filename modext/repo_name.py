"""Validation of user-provided repository names."""

from __future__ import annotations

import re

_VALID_USER_PROVIDED_NAME = re.compile(r"[a-zA-Z][-.\w]*", re.ASCII)


class InvalidRepoNameError(ValueError):
    """Raised when a repository name does not match the allowed syntax."""


def is_valid_user_provided_repo_name(name: str) -> bool:
    return _VALID_USER_PROVIDED_NAME.fullmatch(name) is not None


def validate_user_provided_repo_name(name: str) -> None:
    """Raise ``InvalidRepoNameError`` unless ``name`` can be used as a repository name."""
    if not is_valid_user_provided_repo_name(name):
        raise InvalidRepoNameError(
            f"invalid user-provided repo name '{_sanitize_control_chars(name)}': valid names "
            "may contain only A-Z, a-z, 0-9, '-', '_', '.', and must start with a letter"
        )


def _sanitize_control_chars(value: str) -> str:
    return "".join(
        char if char.isprintable() else f"\\u{ord(char):04x}" for char in value
    )


__all__ = [
    "InvalidRepoNameError",
    "is_valid_user_provided_repo_name",
    "validate_user_provided_repo_name",
]
