"""
Unit tests for record normalization, deduplication and ordering.
"""

import pytest

from harvester.core.exceptions import ConfigurationError
from harvester.records.models import SENTINEL, FieldSpec, RecordSchema
from harvester.records.normalizer import dedupe_records, normalize, normalize_record
from harvester.sites.ibba import BROKER_SCHEMA
from harvester.sites.igdb import GAME_SCHEMA

FIRM_SCHEMA = RecordSchema(fields=(FieldSpec("firm", sources=("company", "firmName")),))


@pytest.fixture
def raw_games():
    return [
        {"name": "Hades II", "gameLink": "https://www.igdb.com/games/hades-ii",
         "profileImage": None, "releaseDate": "Oct 2026",
         "genre": ["Roguelike", "  "], "platforms": "PC", "trailerLink": ""},
        {"name": "   ", "gameLink": None},
    ]


class TestNormalizeRecord:
    """Test suite for single-record normalization."""

    def test_totality(self, raw_games):
        """Test that every schema field is present and none is empty."""
        for raw in raw_games:
            record = normalize_record(raw, GAME_SCHEMA)
            assert set(record) == set(GAME_SCHEMA.field_names)
            for value in record.values():
                assert value
                if isinstance(value, list):
                    assert all(v for v in value)

    def test_sources_mapped(self, raw_games):
        record = normalize_record(raw_games[0], GAME_SCHEMA)
        assert record["name"] == "Hades II"
        assert record["link"] == "https://www.igdb.com/games/hades-ii"
        assert record["release_date"] == "Oct 2026"

    def test_sentinel_for_missing(self, raw_games):
        record = normalize_record(raw_games[1], GAME_SCHEMA)
        assert record["name"] == SENTINEL
        assert record["image"] == SENTINEL
        assert record["trailer_link"] == SENTINEL

    def test_multi_fields_are_lists(self, raw_games):
        record = normalize_record(raw_games[0], GAME_SCHEMA)
        assert record["genre"] == ["Roguelike"]
        assert record["platforms"] == ["PC"]
        assert record["publishers"] == [SENTINEL]

    def test_name_parts_joined(self):
        record = normalize_record(
            {"company": "Acme", "first_name": " Ada ", "last_name": "Lovelace", "email": None},
            BROKER_SCHEMA,
        )
        assert record == {"firm": "Acme", "contact_person": "Ada Lovelace", "email": SENTINEL}

    def test_single_name_part(self):
        record = normalize_record({"first_name": "Grace"}, BROKER_SCHEMA)
        assert record["contact_person"] == "Grace"

    def test_no_name_parts(self):
        record = normalize_record({"first_name": None, "last_name": ""}, BROKER_SCHEMA)
        assert record["contact_person"] == SENTINEL

    def test_extra_keys_dropped(self):
        record = normalize_record({"company": "Acme", "internal_id": 7}, FIRM_SCHEMA)
        assert record == {"firm": "Acme"}

    def test_custom_sentinel(self):
        schema = RecordSchema(fields=(FieldSpec("x"),), sentinel="-")
        assert normalize_record({}, schema) == {"x": "-"}


class TestNormalizeProperties:
    """Test suite for determinism and idempotence."""

    def test_deterministic(self, raw_games):
        assert normalize(raw_games, GAME_SCHEMA) == normalize(raw_games, GAME_SCHEMA)

    def test_idempotent(self, raw_games):
        once = normalize(raw_games, GAME_SCHEMA)
        assert normalize(once, GAME_SCHEMA) == once

    def test_idempotent_for_brokers(self):
        once = normalize([{"firmName": "Acme", "first_name": "Ada", "last_name": "L"}], BROKER_SCHEMA)
        assert normalize(once, BROKER_SCHEMA) == once

    def test_input_not_mutated(self, raw_games):
        snapshot = [dict(r) for r in raw_games]
        normalize(raw_games, GAME_SCHEMA, sort_key="name", dedupe=True)
        assert raw_games == snapshot

    def test_source_order_kept_without_sort_key(self):
        records = normalize([{"company": "b"}, {"company": "A"}, {"company": "c"}], FIRM_SCHEMA)
        assert [r["firm"] for r in records] == ["b", "A", "c"]


class TestSorting:
    """Test suite for case-insensitive ordering."""

    def test_case_insensitive_sort(self):
        records = [{"company": "Charlie"}, {"company": "alpha"}, {"company": "Bravo"}]
        result = normalize(records, FIRM_SCHEMA, sort_key="firm")
        assert [r["firm"] for r in result] == ["alpha", "Bravo", "Charlie"]

    def test_sort_is_stable(self):
        records = [
            {"company": "acme", "firmName": "1"},
            {"company": "ACME", "firmName": "2"},
            {"company": "Acme", "firmName": "3"},
        ]
        result = normalize(records, FIRM_SCHEMA, sort_key="firm")
        assert [r["firm"] for r in result] == ["acme", "ACME", "Acme"]

    def test_unknown_sort_key_rejected(self):
        with pytest.raises(ConfigurationError):
            normalize([{"company": "x"}], FIRM_SCHEMA, sort_key="firmName")

    def test_sort_by_list_field(self):
        records = normalize(
            [{"name": "b", "genre": ["Shooter"]}, {"name": "a", "genre": ["action", "RPG"]}],
            GAME_SCHEMA,
            sort_key="genre",
        )
        assert [r["name"] for r in records] == ["a", "b"]


class TestDedupe:
    """Test suite for duplicate removal."""

    def test_duplicates_removed_first_kept(self):
        records = [{"company": "Acme"}, {"company": " Acme "}, {"company": "Bravo"}]
        result = normalize(records, FIRM_SCHEMA, dedupe=True)
        assert [r["firm"] for r in result] == ["Acme", "Bravo"]

    def test_no_dedupe_by_default(self):
        records = [{"company": "Acme"}, {"company": "Acme"}]
        assert len(normalize(records, FIRM_SCHEMA)) == 2

    def test_list_fields_compared(self):
        records = [
            {"genre": ["RPG"], "platforms": ["PC"]},
            {"genre": ["RPG"], "platforms": ["PC"]},
            {"genre": ["RPG"], "platforms": ["Switch"]},
        ]
        canonical = [normalize_record(r, GAME_SCHEMA) for r in records]
        assert len(dedupe_records(canonical, GAME_SCHEMA.field_names)) == 2
