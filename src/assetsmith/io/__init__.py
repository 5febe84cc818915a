"""Registry and image I/O layer for assetsmith.

This module handles everything that touches files or textual formats.
It provides a clean abstraction layer between Pillow, luaparser, the Luau/JSON
registry formats and the domain models.

Key responsibilities:
- Decode registries from Luau modules or JSON documents
- Emit the runtime module and the type declaration module
- Probe image dimensions from headers
- Decode and encode RGBA pixel arrays
- Run the upstream asset sync tool

Key classes:
- RegistryParser: Registry text -> Registry
- RegistryEmitter: Registry -> runtime and declaration modules
- DimensionProbe: Image header -> (width, height)
- PillowCodec: PNG bytes <-> RGBA arrays
- CommandSyncer: Runs the upstream sync command
"""

from assetsmith.io.codec import ImageCodec, PillowCodec
from assetsmith.io.probe import DimensionProbe
from assetsmith.io.reader import RegistryFormat, RegistryParser, load_registry
from assetsmith.io.upstream import AssetSyncer, CommandSyncer, SyncResult
from assetsmith.io.writer import EmittedModules, RegistryEmitter, verify_consistency, write_modules

__all__ = [
    "AssetSyncer",
    "CommandSyncer",
    "DimensionProbe",
    "EmittedModules",
    "ImageCodec",
    "PillowCodec",
    "RegistryEmitter",
    "RegistryFormat",
    "RegistryParser",
    "SyncResult",
    "load_registry",
    "verify_consistency",
    "write_modules",
]
