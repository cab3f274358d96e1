"""Pytest configuration and shared fixtures."""

import pytest

from zoodiet.normalize.records import FeedingRecord, ItemKind

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (require real exports)"
    )
    config.addinivalue_line("markers", "slow: marks tests as slow running")


# =============================================================================
# Feeding Record Fixtures
# =============================================================================

RECORD_DEFAULTS = {
    "site_name": "Main Zoo",
    "animal_id": "A1",
    "common_name": "Asiatic Lion",
    "scientific_name": "Panthera leo persica",
    "enclosure_name": "Lion Enclosure",
    "feed_type_name": "Meat",
    "ingredient_name": "Beef",
    "item_kind": ItemKind.PLAIN,
    "item_name": None,
    "group_name": "Carnivores",
    "quantity": 1.5,
    "unit": "kg",
    "quantity_in_grams": 1500.0,
    "meal_start_time": "07:00 am",
}


@pytest.fixture
def make_record():
    """Factory for feeding records with sensible defaults."""

    def _make(**overrides) -> FeedingRecord:
        values = {**RECORD_DEFAULTS, **overrides}
        if values["item_name"] is None and not values["item_kind"].is_composite:
            values["item_name"] = values["ingredient_name"]
        return FeedingRecord(**values)

    return _make


@pytest.fixture
def sample_records(make_record):
    """
    A small feeding day.

    Main Zoo 07:00 am: two lions on 1.5 kg beef, one tiger on 2 kg beef and a
    lemur on a fruit salad recipe. Safari Park 11:30 am: a gecko on crickets.
    """
    fruit_salad = {
        "animal_id": "L1",
        "common_name": "Ring-tailed Lemur",
        "scientific_name": "Lemur catta",
        "enclosure_name": "Lemur Island",
        "feed_type_name": "Fruits",
        "item_kind": ItemKind.RECIPE,
        "item_name": "Fruit Salad Mix",
        "group_name": "Primates",
        "prep_type": "Chopped",
    }
    return [
        make_record(animal_id="A1"),
        make_record(animal_id="A2"),
        make_record(
            animal_id="T1",
            common_name="Bengal Tiger",
            scientific_name="Panthera tigris tigris",
            enclosure_name="Tiger Enclosure",
            quantity=2.0,
            quantity_in_grams=2000.0,
        ),
        make_record(ingredient_name="Apple", quantity=0.1, quantity_in_grams=100.0, **fruit_salad),
        make_record(ingredient_name="Banana", quantity=0.3, quantity_in_grams=300.0, **fruit_salad),
        make_record(
            site_name="Safari Park",
            animal_id="G1",
            common_name="Leopard Gecko",
            scientific_name="Eublepharis macularius",
            enclosure_name="Reptile House",
            feed_type_name="Insects",
            ingredient_name="Crickets",
            group_name="Reptiles",
            quantity=10.0,
            unit="pieces",
            quantity_in_grams=0.0,
            meal_start_time="11:30 am",
        ),
    ]


@pytest.fixture
def sheet_row_dicts():
    """Raw spreadsheet rows as they come out of an export."""
    base = {
        "site_name": "Main Zoo",
        "animal_id": 1001.0,
        "common_name": "Ring-tailed Lemur",
        "scientific_name": "Lemur catta",
        "section_name": "Primates Section",
        "user_enclosure_name": "Lemur Island",
        "Feed type name": "Fruits",
        "diet_name": "Lemur Standard Diet",
        "diet_no": 512.0,
        "type": "Recipe",
        "type_name": "Fruit Salad Mix",
        "group_name": "Primates",
        "base_uom_name": "kg",
        "base_uom_name_gram": "gram",
        "preparation_type_name": "Chopped",
        "meal_start_time": "07:00 am",
        "meal_end_time": "08:00 am",
        "cut_size_name": "Small cubes",
        "feeding_date": "03/23/2025",
    }
    return [
        {**base, "ingredient_name": "Apple", "ingredient_qty": 0.1, "ingredient_qty_gram": 100},
        {**base, "ingredient_name": "Banana", "ingredient_qty": "0.3", "ingredient_qty_gram": "300"},
        {
            **base,
            "animal_id": 1002.0,
            "type": "Ingredient",
            "type_name": None,
            "ingredient_name": "Crickets",
            "ingredient_qty": 12,
            "base_uom_name": "pieces",
            "ingredient_qty_gram": None,
            "base_uom_name_gram": None,
            "preparation_type_name": "",
            "cut_size_name": float("nan"),
        },
    ]
