"""Assetsmith - Maintain a catalog of 2D image assets for a game runtime.

Assetsmith tracks every source image of a game project: its measured
dimensions and an optional highlight (outlined) variant. The catalog is
re-emitted as a Luau runtime module and a TypeScript declaration module
that always describe the same entries.

Example:
    $ assetsmith highlight assets/images
    $ assetsmith sync --auto-highlight

The first command writes ``name-highlight.png`` next to every ``name.png``;
the second refreshes ``assets.luau`` and ``assets.d.ts``.
"""

__version__ = "0.1.0"
__author__ = "Dimosthenis Kaponis"

__all__ = ["__author__", "__version__"]
