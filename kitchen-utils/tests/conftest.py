from decimal import Decimal

import pytest

from kitchen_utils.ingredients.models import CatalogEntry


@pytest.fixture
def catalog():
    return [
        CatalogEntry("1", "Tomato", "each", Decimal("0.50"), "Produce"),
        CatalogEntry("2", "Roma Tomato", "each", Decimal("0.65"), "Produce"),
        CatalogEntry("3", "Cherry Tomatoes", "g", Decimal("0.02"), "Produce"),
        CatalogEntry("4", "Coriander", "bunch", Decimal("2.00"), "Spices"),
        CatalogEntry("5", "Olive Oil", "ml", Decimal("0.01"), "Pantry"),
        CatalogEntry("6", "Chicken Breast", "g", Decimal("0.012"), "Protein"),
        CatalogEntry("7", "Tomato Paste", "g", Decimal("0.008"), "Pantry"),
        CatalogEntry("8", "Red Wine Vinegar", "ml", Decimal("0.005"), "Pantry"),
    ]
