"""Unit tests for the kitchen packing list."""

import pytest

from zoodiet.normalize.records import ItemKind
from zoodiet.reports.packing import (
    TimeSlot,
    build_packing_list,
    filter_by_slot,
    time_slot,
)


class TestTimeSlot:
    """Tests for time_slot."""

    @pytest.mark.parametrize(
        "meal_time,expected",
        [
            ("07:00 am", TimeSlot.MORNING),
            ("11:30 am", TimeSlot.MORNING),
            ("12:00 pm", TimeSlot.AFTERNOON),
            ("03:00 pm", TimeSlot.AFTERNOON),
            ("14:00", TimeSlot.AFTERNOON),
            ("06:30 pm", TimeSlot.EVENING),
            ("12:15 am", TimeSlot.EVENING),
            ("05:00", TimeSlot.EVENING),
        ],
    )
    def test_slots(self, meal_time, expected):
        assert time_slot(meal_time) is expected

    def test_unparseable(self):
        """Test times without a leading hour match every slot."""
        assert time_slot("N/A") is TimeSlot.ALL
        assert time_slot(None) is TimeSlot.ALL


class TestBuildPackingList:
    """Tests for build_packing_list."""

    def test_entries_ordered_by_site_enclosure_species(self, sample_records):
        entries = build_packing_list(sample_records)

        assert [(e.site_name, e.enclosure_name) for e in entries] == [
            ("Main Zoo", "Lemur Island"),
            ("Main Zoo", "Lion Enclosure"),
            ("Main Zoo", "Tiger Enclosure"),
            ("Safari Park", "Reptile House"),
        ]

    def test_entry_id(self, sample_records):
        entry = build_packing_list(sample_records)[1]
        assert entry.id == "Main Zoo|Lion Enclosure|Asiatic Lion|07:00 am|Beef"
        assert entry.site_name == "Main Zoo"

    def test_totals_and_animal_count(self, sample_records):
        lions = build_packing_list(sample_records)[1]

        assert lions.animal_count == 2
        assert lions.total_quantity == pytest.approx(3.0)
        assert lions.total_grams == pytest.approx(3000)
        assert lions.total_display == "3.00 kg"
        assert lions.time_slot is TimeSlot.MORNING

    def test_recipe_entry(self, sample_records):
        """Test recipe ingredients are listed with their share of the weight."""
        lemur = build_packing_list(sample_records)[0]

        assert lemur.item_name == "Fruit Salad Mix"
        assert lemur.item_kind is ItemKind.RECIPE
        assert lemur.total_display == "400 gram"
        assert [(i.name, i.percentage) for i in lemur.ingredients] == [
            ("Apple", pytest.approx(25)),
            ("Banana", pytest.approx(75)),
        ]
        assert lemur.ingredients[0].display == "100 gram"
        assert lemur.ingredients[0].preparation == "Chopped"

    def test_count_entry(self, sample_records):
        gecko = build_packing_list(sample_records)[3]
        assert gecko.total_display == "10.00 pieces"
        assert gecko.ingredients[0].percentage == 0.0

    def test_mixed_unit_combo(self, make_record):
        """Test weighed and counted parts of a combo are totalled per unit."""
        combo = {"item_kind": ItemKind.COMBO, "item_name": "Carnivore Mix"}
        records = [
            make_record(ingredient_name="Beef", quantity=0.3, quantity_in_grams=300, **combo),
            make_record(
                ingredient_name="Crickets", quantity=20, unit="piece", quantity_in_grams=0, **combo
            ),
        ]
        (entry,) = build_packing_list(records)

        assert entry.total_display == "300 gram, 20.00 piece"
        assert entry.total_quantity is None
        assert entry.unit is None
        assert entry.total_grams == pytest.approx(300)
        assert [i.display for i in entry.ingredients] == ["300 gram", "20.00 piece"]
        assert [i.percentage for i in entry.ingredients] == [pytest.approx(100), 0.0]

    def test_single_unit_fields(self, sample_records):
        gecko = build_packing_list(sample_records)[3]
        assert gecko.unit == "pieces"
        assert gecko.total_quantity == pytest.approx(10)

    def test_meals_split_entries(self, make_record):
        records = [make_record(meal_start_time="07:00 am"), make_record(meal_start_time="06:30 pm")]
        entries = build_packing_list(records)
        assert len(entries) == 2
        assert {e.animal_count for e in entries} == {1}

    def test_filter_by_slot(self, sample_records):
        entries = build_packing_list(sample_records)
        assert len(filter_by_slot(entries, TimeSlot.MORNING)) == 4
        assert filter_by_slot(entries, TimeSlot.EVENING) == []
        assert len(filter_by_slot(entries)) == 4

    def test_empty(self):
        assert build_packing_list([]) == []
