"""Kitchen Utils - Ingredient identity resolution for kitchen catalogs."""

__version__ = "0.1.0"

from . import catalog, exceptions, ingredients

__all__ = ["catalog", "exceptions", "ingredients"]
