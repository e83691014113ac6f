"""
IGDB upcoming-games profile: listing page plus one detail page per game.
"""

from harvester.extraction.detail import extract_game_details
from harvester.extraction.dom import extract_game_listing
from harvester.records.models import FieldSpec, RecordSchema
from harvester.sites.base import DetailSpec, SiteProfile

GAME_SCHEMA = RecordSchema(fields=(
    FieldSpec("name", sources=("title",)),
    FieldSpec("link", sources=("gameLink",)),
    FieldSpec("image", sources=("profileImage",)),
    FieldSpec("release_date", sources=("releaseDate",)),
    FieldSpec("genre", multi=True),
    FieldSpec("platforms", multi=True),
    FieldSpec("publishers", multi=True),
    FieldSpec("trailer_link", sources=("trailerLink",)),
))

GAME_DETAIL = DetailSpec(
    link_field="gameLink",
    ready_selector=".game-page",
    extract=extract_game_details,
    placeholder_fields=("genre", "platforms", "publishers", "trailerLink"),
    list_fields=("genre", "platforms", "publishers"),
)

IGDB = SiteProfile(
    name="igdb",
    domains=("igdb.com",),
    schema=GAME_SCHEMA,
    extract_html=extract_game_listing,
    detail=GAME_DETAIL,
    ready_selector=".gameGridContainer, .media",
)
