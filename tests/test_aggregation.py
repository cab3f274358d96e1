"""Unit tests for the aggregation engine."""

import pytest

from zoodiet.aggregate.engine import (
    aggregate,
    by_total_grams,
    distinct_values,
    filter_records,
    make_key,
    partition,
)
from zoodiet.normalize.records import MISSING
from zoodiet.normalize.units import Measure


class TestAggregate:
    """Tests for aggregate."""

    def test_every_record_lands_in_one_group(self, sample_records):
        """Test group sizes add up to the number of input records."""
        groups = aggregate(sample_records, ["site_name", "ingredient_name"])
        assert sum(group.size for group in groups) == len(sample_records)
        assert len({group.key for group in groups}) == len(groups)

    def test_units_are_never_merged(self, make_record):
        """Test kg and piece quantities of one key accumulate apart."""
        records = [
            make_record(ingredient_name="Rabbit", quantity=1.0, unit="kg", quantity_in_grams=1000),
            make_record(ingredient_name="Rabbit", quantity=2.0, unit="piece", quantity_in_grams=0),
            make_record(ingredient_name="Rabbit", quantity=0.5, unit="kg", quantity_in_grams=500),
        ]
        (group,) = aggregate(records, ["ingredient_name"])

        assert set(group.totals) == {"kg", "piece"}
        assert group.totals["kg"].quantity == pytest.approx(1.5)
        assert group.totals["kg"].quantity_in_grams == pytest.approx(1500)
        assert group.totals["piece"].quantity == pytest.approx(2.0)
        assert group.single_unit is None
        assert group.unit_quantity is None
        assert group.measure == Measure(grams=1500, counts={"piece": 2.0})

    def test_single_unit_group(self, make_record):
        (group,) = aggregate([make_record(), make_record()], ["ingredient_name"])
        assert group.single_unit == "kg"
        assert group.unit_quantity == pytest.approx(3.0)

    def test_missing_unit_and_key(self, make_record):
        """Test blank keys and units are grouped under N/A, not dropped."""
        records = [make_record(group_name=None, unit=None), make_record(group_name="  ")]
        (group,) = aggregate(records, ["group_name"])
        assert group.key == (MISSING,)
        assert set(group.totals) == {MISSING, "kg"}

    def test_entity_tracking(self, sample_records):
        """Test distinct animals, species, enclosures and sites per group."""
        groups = {g.key: g for g in aggregate(sample_records, ["feed_type_name"], track_entities=True)}

        meat = groups[("Meat",)]
        assert meat.animal_count == 3
        assert meat.species_count == 2
        assert meat.enclosure_count == 2
        assert meat.site_count == 1

    def test_entities_not_tracked_by_default(self, sample_records):
        (group, *_) = aggregate(sample_records, ["feed_type_name"])
        assert group.animal_count == 0

    def test_sorted_by_key_case_insensitive(self, make_record):
        records = [
            make_record(ingredient_name="banana"),
            make_record(ingredient_name="Apple"),
            make_record(ingredient_name="carrot"),
        ]
        groups = aggregate(records, ["ingredient_name"])
        assert [g.key[0] for g in groups] == ["Apple", "banana", "carrot"]

    def test_first_seen_order(self, make_record):
        records = [make_record(ingredient_name="Zucchini"), make_record(ingredient_name="Apple")]
        groups = aggregate(records, ["ingredient_name"], sort_key=None)
        assert [g.key[0] for g in groups] == ["Zucchini", "Apple"]

    def test_heaviest_first(self, sample_records):
        groups = aggregate(sample_records, ["ingredient_name"], sort_key=by_total_grams, reverse=True)
        assert [g.key[0] for g in groups][:2] == ["Beef", "Banana"]
        assert groups[0].total_grams == pytest.approx(5000.0)

    def test_callable_selector(self, sample_records):
        """Test callables work as key fields, e.g. the diet item key."""
        groups = aggregate(sample_records, [lambda r: r.item_key])
        assert ("Fruit Salad Mix",) in {g.key for g in groups}

    def test_empty_input(self):
        assert aggregate([], ["site_name"]) == []


class TestHelpers:
    """Tests for partition, distinct_values and filter_records."""

    def test_make_key(self, make_record):
        assert make_key(make_record(section_name=None), ["site_name", "section_name"]) == (
            "Main Zoo",
            MISSING,
        )

    def test_partition_keeps_first_seen_order(self, sample_records):
        buckets = partition(sample_records, "site_name")
        assert list(buckets) == ["Main Zoo", "Safari Park"]
        assert len(buckets["Main Zoo"]) == 5

    def test_distinct_values(self, sample_records):
        assert distinct_values(sample_records, "group_name") == ["Carnivores", "Primates", "Reptiles"]

    def test_filter_exact(self, sample_records):
        assert len(filter_records(sample_records, site_name="Safari Park")) == 1

    def test_filter_ignores_blank_criteria(self, sample_records):
        assert len(filter_records(sample_records, site_name=None, feed_type_name="")) == len(
            sample_records
        )

    def test_filter_any_of(self, sample_records):
        records = filter_records(sample_records, ingredient_name=["Apple", "Crickets"])
        assert {r.ingredient_name for r in records} == {"Apple", "Crickets"}

    def test_filter_common_name_substring(self, sample_records):
        """Test species filter is a case-insensitive substring match."""
        records = filter_records(sample_records, common_name="tig")
        assert {r.common_name for r in records} == {"Bengal Tiger"}
