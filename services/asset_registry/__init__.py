"""
Asset Registry

Catalog of tradable assets and their latest simulated quotes.
"""

from .registry import AssetRegistry
from .csv_loader import AssetCSVLoader, DEFAULT_ASSETS_CSV

__all__ = ["AssetRegistry", "AssetCSVLoader", "DEFAULT_ASSETS_CSV"]
