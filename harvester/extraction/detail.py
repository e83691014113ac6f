"""
Detail-page extraction.

Detail extractors return the fields found on an item's secondary page. Group
fields are lists (possibly empty); scalar fields are None when absent. The
enhancer decides how these merge into the base record.
"""

from typing import Dict, List, Optional, Union

from harvester.extraction.dom import _soup, _text
from harvester.utils.url_utils import absolute_url

DetailFields = Dict[str, Union[None, str, List[str]]]

TRAILER_SELECTOR = 'a[href*="youtube"], a[href*="trailer"], .trailer-link'


def _texts(soup, selector: str) -> List[str]:
    return [t for t in (_text(el) for el in soup.select(selector)) if t]


def extract_game_details(html: str, base_url: str) -> DetailFields:
    """
    Categorical groups, refined release date and trailer of a game page.

    Returns:
        {"genre": [...], "platforms": [...], "publishers": [...],
         "releaseDate": str | None, "trailerLink": str | None}

    Example:
        >>> html = '<div class="game-page"><div class="game-genres"><a>RPG</a></div></div>'
        >>> extract_game_details(html, "https://www.igdb.com/games/x")["genre"]
        ['RPG']
    """
    soup = _soup(html)

    trailer: Optional[str] = None
    trailer_el = soup.select_one(TRAILER_SELECTOR)
    if trailer_el is not None:
        trailer = absolute_url(base_url, trailer_el.get("href"))

    return {
        "genre": _texts(soup, ".game-genres a"),
        "platforms": _texts(soup, ".game-platforms a, .platforms a"),
        "publishers": _texts(soup, '.game-companies a[href*="companies"]'),
        "releaseDate": _text(soup.select_one(".game-release-date, .release-date")),
        "trailerLink": trailer,
    }
