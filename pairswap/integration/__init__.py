"""
Integration layer (imperative shell): asset transfer collaborators and pool
snapshots.

`snapshot` depends on `pairswap.core`; import it as `pairswap.integration.snapshot`.
"""

from .assets import AssetHandle, AssetTransfer, Checkpointable, InMemoryAsset

__all__ = [
    "AssetHandle",
    "AssetTransfer",
    "Checkpointable",
    "InMemoryAsset",
]
