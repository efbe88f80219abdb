"""Tests for modext.fixup.reconcile."""

from __future__ import annotations

import pytest

from modext.fixup import generate_fixup
from modext.metadata import ErrorKind, ExtensionMetadata, ExtensionMetadataError
from modext.models import Location, Severity
from tests._fixtures.usage_builder import UsageBuilder, apply_fixup


def test_no_opinion_produces_no_fixup(usage_builder: UsageBuilder) -> None:
    usage = usage_builder.proxy(["anything"]).build()

    assert generate_fixup(ExtensionMetadata.create(), usage, {"foo"}) is None


def test_missing_regular_import(usage_builder: UsageBuilder) -> None:
    usage = usage_builder.proxy(["foo"], name="ext").build()
    metadata = ExtensionMetadata.create(["foo", "bar"], [])

    fixup = generate_fixup(metadata, usage, {"foo", "bar", "baz"})

    assert fixup is not None
    assert fixup.module_file_path_to_commands == {"MODULE.bazel": ["use_repo_add ext bar"]}
    assert fixup.usage is usage
    assert fixup.warning.severity is Severity.WARNING
    assert fixup.warning.location == Location("MODULE.bazel", 1, 5)
    assert fixup.warning.message == (
        "The module extension ext defined in //:extensions.bzl reported incorrect imports "
        "of repositories via use_repo():\n\n"
        "Not imported, but reported as direct dependencies by the extension (may cause the "
        "build to fail):\n"
        "    bar\n\n"
        "Fix the use_repo calls by running 'bazel mod tidy'."
    )


def test_all_regular_already_imported(usage_builder: UsageBuilder) -> None:
    usage = usage_builder.proxy(["a", "b"]).build()

    assert generate_fixup(ExtensionMetadata.create("all", []), usage, {"a", "b"}) is None


def test_import_not_created_by_extension(usage_builder: UsageBuilder) -> None:
    usage = usage_builder.proxy(["x"], name="ext").build()
    metadata = ExtensionMetadata.create([], [])

    fixup = generate_fixup(metadata, usage, {"y"})

    assert fixup is not None
    assert (
        "Imported, but not created by the extension (will cause the build to fail):\n"
        "    x\n\n" in fixup.warning.message
    )
    assert fixup.module_file_path_to_commands == {"MODULE.bazel": ["use_repo_remove ext x"]}


def test_every_category_is_reported_in_order() -> None:
    usage = (
        UsageBuilder(bzl_file="@rules_foo//:ext.bzl", name="foo_ext")
        .proxy({"lib": "lib", "ghost": "ghost", "tool": "tool", "extra": "extra"}, name="foo")
        .proxy({"testlib": "testlib", "runtime": "runtime"}, name="foo_dev", dev=True)
        .build()
    )
    metadata = ExtensionMetadata.create(["lib", "runtime", "missing"], ["tool", "testlib"])
    generated = {"lib", "tool", "extra", "testlib", "runtime", "missing"}

    fixup = generate_fixup(metadata, usage, generated)

    assert fixup is not None
    assert fixup.warning.message == (
        "The module extension foo_ext defined in @rules_foo//:ext.bzl reported incorrect "
        "imports of repositories via use_repo():\n\n"
        "Imported, but not created by the extension (will cause the build to fail):\n"
        "    ghost\n\n"
        "Not imported, but reported as direct dependencies by the extension (may cause the "
        "build to fail):\n"
        "    missing\n\n"
        "Imported as a regular dependency, but reported as a dev dependency by the extension "
        "(may cause the build to fail when used by other modules):\n"
        "    tool\n\n"
        "Imported as a dev dependency, but reported as a regular dependency by the extension "
        "(may cause the build to fail when used by other modules):\n"
        "    runtime\n\n"
        "Imported, but reported as indirect dependencies by the extension:\n"
        "    extra\n\n"
        "Fix the use_repo calls by running 'bazel mod tidy'."
    )
    assert fixup.module_file_path_to_commands == {
        "MODULE.bazel": [
            "use_repo_add foo missing runtime",
            "use_repo_add foo_dev tool",
            "use_repo_remove foo extra ghost tool",
            "use_repo_remove foo_dev runtime",
        ]
    }


def test_custom_fix_command(usage_builder: UsageBuilder) -> None:
    usage = usage_builder.proxy(["a"]).build()

    fixup = generate_fixup(
        ExtensionMetadata.create([], []), usage, {"a"}, fix_command="tool mod tidy"
    )

    assert fixup is not None
    assert fixup.warning.message.endswith("Fix the use_repo calls by running 'tool mod tidy'.")
    assert "Imported, but reported as indirect dependencies by the extension:\n    a\n\n" in (
        fixup.warning.message
    )


def test_regular_deps_require_non_dev_usage(usage_builder: UsageBuilder) -> None:
    usage = usage_builder.proxy(["a"], dev=True).build()

    with pytest.raises(ExtensionMetadataError) as excinfo:
        generate_fixup(ExtensionMetadata.create(["a"], []), usage, {"a"})

    assert excinfo.value.kind is ErrorKind.POLICY_VIOLATION
    assert excinfo.value.message == (
        "root_module_direct_deps must be empty if the root module contains no usages with "
        "dev_dependency = False"
    )


def test_dev_deps_require_dev_usage(usage_builder: UsageBuilder) -> None:
    usage = usage_builder.proxy(["a"]).build()

    with pytest.raises(ExtensionMetadataError) as excinfo:
        generate_fixup(ExtensionMetadata.create([], "all"), usage, {"a"})

    assert excinfo.value.message == (
        "root_module_direct_dev_deps must be empty if the root module contains no usages "
        "with dev_dependency = True"
    )


def test_empty_expectation_allowed_without_matching_usage(usage_builder: UsageBuilder) -> None:
    usage = usage_builder.proxy(["a"], dev=True).build()

    assert generate_fixup(ExtensionMetadata.create([], "all"), usage, {"a"}) is None


def test_unknown_repository_is_raised_before_policy(usage_builder: UsageBuilder) -> None:
    usage = usage_builder.proxy(["a"], dev=True).build()

    with pytest.raises(ExtensionMetadataError) as excinfo:
        generate_fixup(ExtensionMetadata.create(["b"], []), usage, {"a"})

    assert excinfo.value.kind is ErrorKind.UNKNOWN_REPOSITORY


def test_applying_fixup_converges() -> None:
    usage = (
        UsageBuilder()
        .proxy(["a", "stale"], name="ext")
        .proxy(["b"], name="ext_dev", dev=True, file="deps/extra.MODULE.bazel")
        .proxy({"alias": "a", "c": "c"}, name="ext2")
        .build()
    )
    metadata = ExtensionMetadata.create(["a", "c", "d"], ["e"])
    generated = {"a", "b", "c", "d", "e", "stale"}

    fixup = generate_fixup(metadata, usage, generated)
    assert fixup is not None

    repaired = apply_fixup(usage, fixup)

    assert generate_fixup(metadata, repaired, generated) is None


def test_output_is_deterministic(usage_builder: UsageBuilder) -> None:
    usage = usage_builder.proxy(["q", "p", "z"], name="ext").build()
    metadata = ExtensionMetadata.create(["m", "k"], [])
    generated = {"k", "m", "p", "q", "z"}

    first = generate_fixup(metadata, usage, generated)
    second = generate_fixup(metadata, usage, set(reversed(sorted(generated))))

    assert first is not None and second is not None
    assert first.module_file_path_to_commands == second.module_file_path_to_commands
    assert first.warning.message == second.warning.message
    assert first.commands() == ["use_repo_add ext k m", "use_repo_remove ext p q z"]
