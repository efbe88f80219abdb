"""Tests for modext.metadata.declaration."""

from __future__ import annotations

import pytest

from modext.metadata import ErrorKind, ExtensionMetadata, ExtensionMetadataError, UseAllRepos
from modext.metadata.declaration import REPRODUCIBLE


def _error(deps, dev_deps) -> ExtensionMetadataError:
    with pytest.raises(ExtensionMetadataError) as excinfo:
        ExtensionMetadata.create(deps, dev_deps)
    return excinfo.value


def test_both_unset_has_no_opinion() -> None:
    metadata = ExtensionMetadata.create(None, None, reproducible=True)

    assert metadata.explicit_root_module_direct_deps is None
    assert metadata.explicit_root_module_direct_dev_deps is None
    assert metadata.use_all_repos is UseAllRepos.NO
    assert metadata.reproducible is True
    assert metadata == REPRODUCIBLE


def test_all_regular_with_empty_dev_list() -> None:
    metadata = ExtensionMetadata.create("all", [])

    assert metadata.use_all_repos is UseAllRepos.REGULAR
    assert metadata.explicit_root_module_direct_deps is None
    assert metadata.explicit_root_module_direct_dev_deps is None


def test_all_dev_with_empty_regular_list() -> None:
    metadata = ExtensionMetadata.create([], "all")

    assert metadata.use_all_repos is UseAllRepos.DEV
    assert metadata.explicit_root_module_direct_deps is None


@pytest.mark.parametrize(
    ("deps", "dev_deps"),
    [("all", ["x"]), ("all", None), (["x"], "all"), ("all", "all")],
)
def test_all_requires_empty_sibling(deps, dev_deps) -> None:
    error = _error(deps, dev_deps)

    assert error.kind is ErrorKind.MALFORMED_DECLARATION
    assert error.message == (
        'if one of root_module_direct_deps and root_module_direct_dev_deps is "all", '
        "the other must be an empty list"
    )


def test_bare_string_is_rejected() -> None:
    error = _error("foo", [])

    assert error.message == (
        'root_module_direct_deps and root_module_direct_dev_deps must be None, "all", '
        "or a list of strings"
    )


def test_only_one_side_specified() -> None:
    error = _error(["foo"], None)

    assert error.kind is ErrorKind.MALFORMED_DECLARATION
    assert error.message == (
        "root_module_direct_deps and root_module_direct_dev_deps must both be specified "
        "or both be unspecified"
    )
    assert _error(None, []).message == error.message


def test_explicit_lists_preserve_order() -> None:
    metadata = ExtensionMetadata.create(["foo", "bar"], ["baz"])

    assert metadata.explicit_root_module_direct_deps == ("foo", "bar")
    assert metadata.explicit_root_module_direct_dev_deps == ("baz",)
    assert metadata.use_all_repos is UseAllRepos.NO
    assert metadata.reproducible is False


def test_duplicate_regular_entry() -> None:
    error = _error(["foo", "foo"], [])

    assert error.kind is ErrorKind.DUPLICATE_ENTRY
    assert str(error) == "in root_module_direct_deps: duplicate entry 'foo'"


def test_duplicate_dev_entry() -> None:
    error = _error([], ["bar", "bar"])

    assert error.kind is ErrorKind.DUPLICATE_ENTRY
    assert error.message == "in root_module_direct_dev_deps: duplicate entry 'bar'"


def test_entry_in_both_lists() -> None:
    error = _error(["foo"], ["foo"])

    assert error.kind is ErrorKind.CROSS_CATEGORY_ENTRY
    assert error.message == (
        "in root_module_direct_dev_deps: entry 'foo' is also in root_module_direct_deps"
    )


def test_invalid_repo_name_is_prefixed_with_argument() -> None:
    error = _error(["1foo"], [])

    assert error.kind is ErrorKind.MALFORMED_DECLARATION
    assert error.message.startswith(
        "in root_module_direct_deps: invalid user-provided repo name '1foo'"
    )


def test_non_string_element() -> None:
    error = _error(["foo", 3], [])

    assert error.message == (
        "at index 1 of root_module_direct_deps, got element of type int, want string"
    )


def test_non_sequence_value() -> None:
    error = _error([], {"foo": "bar"})

    assert error.message == "for root_module_direct_dev_deps, got dict, want sequence"


def test_direct_construction_enforces_disjointness() -> None:
    with pytest.raises(ValueError):
        ExtensionMetadata(("foo",), ("foo",), UseAllRepos.NO, False)
    with pytest.raises(ValueError):
        ExtensionMetadata(("foo",), (), UseAllRepos.REGULAR, False)


def test_direct_construction_rejects_invalid_repo_names() -> None:
    with pytest.raises(ValueError):
        ExtensionMetadata(("1bad",), (), UseAllRepos.NO, False)
