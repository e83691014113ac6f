"""
Pytest Configuration and Shared Fixtures

This file contains pytest configuration and fixtures that are available
to all tests in the test suite.
"""

import os
import pytest
from pathlib import Path
from typing import Any, Dict, List

from harvester.core.config import HarvestConfig

HARVEST_ENV_VARS = (
    "HEADLESS", "EVASION_ENABLED", "USER_AGENT", "NAV_TIMEOUT_MS",
    "CHALLENGE_TIMEOUT_MS", "CLEARANCE_TIMEOUT_MS", "READY_TIMEOUT_MS",
    "SCROLL_INTERVAL_MS", "DETAIL_TIMEOUT_MS", "DETAIL_READY_TIMEOUT_MS",
    "DETAIL_DELAY_MS", "ENHANCEMENT_CAP", "SORT_KEY", "DEDUPE",
    "PERSIST_PARTIAL", "RUN_DEADLINE_S", "SITE", "SEARCH_QUERY",
    "EXPORT_CSV", "OUT_DIR", "LOG_DIR", "LOG_LEVEL",
)


# ============================================================================
# Paths and Directories
# ============================================================================

@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def test_output_dir(tmp_path: Path) -> Path:
    """Create a temporary output directory for tests."""
    output_dir = tmp_path / "results"
    output_dir.mkdir(exist_ok=True)
    return output_dir


@pytest.fixture
def harvest_config(tmp_path: Path) -> HarvestConfig:
    """Return a fast configuration writing under tmp_path."""
    return HarvestConfig(
        headless=True,
        challenge_timeout_ms=50,
        clearance_timeout_ms=100,
        ready_timeout_ms=50,
        scroll_interval_ms=0,
        detail_timeout_ms=100,
        detail_ready_timeout_ms=50,
        detail_delay_ms=0,
        out_dir=tmp_path / "results",
        log_dir=tmp_path / "logs",
    )


@pytest.fixture
def clean_env(tmp_path: Path):
    """
    Empty .env file with no harvester variables in the environment.

    load_dotenv writes into os.environ, so the variables are removed again
    after the test.
    """
    saved = {name: os.environ.pop(name) for name in HARVEST_ENV_VARS if name in os.environ}
    env_file = tmp_path / ".env"
    env_file.write_text("", "utf-8")
    yield env_file
    for name in HARVEST_ENV_VARS:
        os.environ.pop(name, None)
    os.environ.update(saved)


# ============================================================================
# Sample Markup Fixtures
# ============================================================================

def _game_grid_item(slug: str, title: str, release: str) -> str:
    return f"""
        <div class="gameGridItem">
            <div class="gameGridImage"><img src="//images.igdb.com/covers/{slug}.jpg"></div>
            <div class="gameGridTitle"><a href="/games/{slug}">{title}</a></div>
            <div class="gameGridReleaseDate">{release}</div>
        </div>
    """


@pytest.fixture
def game_grid_html() -> str:
    """Return an IGDB coming-soon page in the grid layout."""
    items = "".join([
        _game_grid_item("hades-ii", "Hades II", "Oct 2026"),
        _game_grid_item("hollow-knight-silksong", "Hollow Knight: Silksong", "Nov 2026"),
        _game_grid_item("slay-the-spire-2", "Slay the Spire 2", "Dec 2026"),
    ])
    return f"""
    <html>
        <head><title>Coming Soon - IGDB</title></head>
        <body><div class="gameGridContainer">{items}</div></body>
    </html>
    """


@pytest.fixture
def game_media_html() -> str:
    """Return an IGDB listing in the older .media layout."""
    return """
    <html><body>
        <div class="media">
            <img data-src="https://images.igdb.com/covers/tunic.jpg">
            <div class="media-body">
                <a href="/games/tunic">Tunic</a>
                <time datetime="2026-11-02">Nov 2, 2026</time>
            </div>
        </div>
        <div class="media">
            <div class="media-body"><a href="/games/untitled">Untitled</a></div>
        </div>
    </body></html>
    """


def _game_detail_html(genres: List[str], platforms: List[str], publisher: str, release: str) -> str:
    genre_links = "".join(f'<a href="/genres/{g.lower()}">{g}</a>' for g in genres)
    platform_links = "".join(f'<a href="/platforms/{p.lower()}">{p}</a>' for p in platforms)
    return f"""
    <html><body>
        <div class="game-page">
            <div class="game-genres">{genre_links}</div>
            <div class="game-platforms">{platform_links}</div>
            <div class="game-companies"><a href="/companies/{publisher.lower()}">{publisher}</a></div>
            <span class="game-release-date">{release}</span>
            <a class="trailer-link" href="https://www.youtube.com/watch?v=abc123">Watch trailer</a>
        </div>
    </body></html>
    """


@pytest.fixture
def game_detail_page() -> str:
    """Return a game detail page."""
    return _game_detail_html(["Roguelike", "Action"], ["PC", "Switch"], "Supergiant", "Oct 19, 2026")


@pytest.fixture
def broker_cards_html() -> str:
    """Return an IBBA search results page."""
    return """
    <html><body>
        <div class="broker-card">
            <h3 class="firm-name">Acme Business Advisors</h3>
            <span class="contact-name">Ada Lovelace</span>
            <a href="mailto:ada@acme.example?subject=Hello">Email</a>
        </div>
        <div class="broker-result">
            <h3 class="company-name">Bravo Brokers</h3>
            <span class="broker-name">Grace Hopper</span>
        </div>
    </body></html>
    """


@pytest.fixture
def inventory_html() -> str:
    """Return a plain page for the generic link inventory."""
    return """
    <html><body>
        <a href="/about">About</a>
        <a href="/about">About again</a>
        <a href="mailto:info@example.com">Mail us</a>
        <a href="javascript:void(0)">Menu</a>
        <img src="/logo.png">
        <p>Write to sales@example.com for pricing.</p>
        <span data-email="press@example.com">Press</span>
    </body></html>
    """


@pytest.fixture
def broker_payload() -> List[Dict[str, Any]]:
    """Return a brokers API response."""
    return [
        {"company": "Acme Business Advisors", "first_name": "Ada", "last_name": "Lovelace",
         "email": "ada@acme.example"},
        {"company": "Bravo Brokers", "first_name": "Grace", "last_name": None, "email": ""},
        "not-a-broker",
        {"company": " ", "first_name": None, "last_name": None, "email": None},
    ]


# ============================================================================
# Test Markers
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )
