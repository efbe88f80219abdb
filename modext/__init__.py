"""Bookkeeping of module extension repositories imported by the root module."""

from .fixup import generate_fixup
from .metadata import ExtensionMetadata, ExtensionMetadataError
from .models import Event, Location, ModuleExtensionUsage, RootModuleFileFixup, UsageProxy

__all__ = [
    "Event",
    "ExtensionMetadata",
    "ExtensionMetadataError",
    "Location",
    "ModuleExtensionUsage",
    "RootModuleFileFixup",
    "UsageProxy",
    "generate_fixup",
]
