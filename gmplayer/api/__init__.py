"""
Catalog API Layer.

This package handles all communication with the remote music catalog.
"""

from .auth import CatalogAuthenticator
from .client import CatalogAPIClient

__all__ = ["CatalogAPIClient", "CatalogAuthenticator"]
