"""
Unit tests for the pure extraction functions.

Extractors run over static markup, so no browser is needed.
"""

import pytest

from harvester.extraction.api import parse_broker_directory
from harvester.extraction.detail import extract_game_details
from harvester.extraction.dom import (
    extract_broker_cards,
    extract_game_listing,
    extract_link_inventory,
    find_emails,
    _soup,
)

LISTING_URL = "https://www.igdb.com/games/coming_soon"


class TestGameListing:
    """Test suite for the IGDB listing extractor."""

    def test_grid_items_in_document_order(self, game_grid_html):
        records = extract_game_listing(game_grid_html, LISTING_URL)
        assert [r["name"] for r in records] == ["Hades II", "Hollow Knight: Silksong", "Slay the Spire 2"]

    def test_grid_links_and_images_absolute(self, game_grid_html):
        first = extract_game_listing(game_grid_html, LISTING_URL)[0]
        assert first["gameLink"] == "https://www.igdb.com/games/hades-ii"
        assert first["profileImage"] == "https://images.igdb.com/covers/hades-ii.jpg"
        assert first["releaseDate"] == "Oct 2026"

    def test_media_layout_fallback(self, game_media_html):
        records = extract_game_listing(game_media_html, LISTING_URL)
        assert len(records) == 2
        assert records[0] == {
            "name": "Tunic",
            "gameLink": "https://www.igdb.com/games/tunic",
            "profileImage": "https://images.igdb.com/covers/tunic.jpg",
            "releaseDate": "2026-11-02",
        }

    def test_missing_elements_are_none(self, game_media_html):
        second = extract_game_listing(game_media_html, LISTING_URL)[1]
        assert second["name"] == "Untitled"
        assert second["profileImage"] is None
        assert second["releaseDate"] is None

    def test_empty_page(self):
        assert extract_game_listing("<html><body></body></html>", LISTING_URL) == []


class TestGameDetails:
    """Test suite for the detail-page extractor."""

    def test_groups_and_scalars(self, game_detail_page):
        details = extract_game_details(game_detail_page, "https://www.igdb.com/games/hades-ii")
        assert details["genre"] == ["Roguelike", "Action"]
        assert details["platforms"] == ["PC", "Switch"]
        assert details["publishers"] == ["Supergiant"]
        assert details["releaseDate"] == "Oct 19, 2026"
        assert details["trailerLink"] == "https://www.youtube.com/watch?v=abc123"

    def test_bare_page_gives_empty_groups(self):
        details = extract_game_details('<div class="game-page"></div>', "https://www.igdb.com/games/x")
        assert details == {
            "genre": [],
            "platforms": [],
            "publishers": [],
            "releaseDate": None,
            "trailerLink": None,
        }


class TestBrokerCards:
    """Test suite for the IBBA search results extractor."""

    def test_cards(self, broker_cards_html):
        records = extract_broker_cards(broker_cards_html, "https://www.ibba.org/")
        assert records == [
            {"firmName": "Acme Business Advisors", "contactName": "Ada Lovelace", "email": "ada@acme.example"},
            {"firmName": "Bravo Brokers", "contactName": "Grace Hopper", "email": None},
        ]


class TestBrokerApi:
    """Test suite for the brokers API payload parser."""

    def test_list_payload(self, broker_payload):
        records = parse_broker_directory(broker_payload)
        assert len(records) == 3
        assert records[0] == {
            "company": "Acme Business Advisors",
            "first_name": "Ada",
            "last_name": "Lovelace",
            "email": "ada@acme.example",
        }

    def test_blank_values_become_none(self, broker_payload):
        records = parse_broker_directory(broker_payload)
        assert records[1]["email"] is None
        assert records[1]["last_name"] is None
        assert records[2]["company"] is None

    @pytest.mark.parametrize("key", ["data", "brokers", "items", "results"])
    def test_wrapped_payload(self, key):
        records = parse_broker_directory({key: [{"company": "Acme"}]})
        assert records[0]["company"] == "Acme"

    @pytest.mark.parametrize("payload", [None, "brokers", {"total": 3}])
    def test_unexpected_shape_rejected(self, payload):
        with pytest.raises(ValueError):
            parse_broker_directory(payload)


class TestLinkInventory:
    """Test suite for the generic inventory extractor."""

    def test_inventory(self, inventory_html):
        records = extract_link_inventory(inventory_html, "https://example.com/")
        links = [r["value"] for r in records if r["kind"] == "link"]
        images = [r["value"] for r in records if r["kind"] == "image"]
        emails = [r["value"] for r in records if r["kind"] == "email"]

        assert links == ["https://example.com/about"]
        assert images == ["https://example.com/logo.png"]
        assert set(emails) == {"info@example.com", "sales@example.com", "press@example.com"}

    def test_kinds_grouped_in_order(self, inventory_html):
        kinds = [r["kind"] for r in extract_link_inventory(inventory_html, "https://example.com/")]
        assert kinds == sorted(kinds, key=["link", "image", "email"].index)

    def test_find_emails_unique(self):
        soup = _soup('<p>a@b.io and a@b.io</p><a href="mailto:a@b.io">x</a>')
        assert find_emails(soup) == ["a@b.io"]
