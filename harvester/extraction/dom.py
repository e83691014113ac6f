"""
List extraction over rendered page markup.

Every extractor is a pure function of (html, base_url) returning RawRecords
in document order. A missing element inside an item yields a None field for
that item; it never aborts the extraction.
"""

import re
from typing import Iterable, List, Optional
from bs4 import BeautifulSoup, Tag

from harvester.records.models import RawRecord
from harvester.utils.url_utils import absolute_url


HTML_PARSER = "html.parser"

EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")

BROKER_CARD_SELECTOR = ".broker-result, .broker-card, .result-item"
GAME_GRID_SELECTOR = ".gameGridContainer .gameGridItem"
GAME_MEDIA_SELECTOR = ".media"


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", HTML_PARSER)


def _text(el: Optional[Tag]) -> Optional[str]:
    if el is None:
        return None
    text = el.get_text(" ", strip=True)
    return text or None


def first_text(scope: Tag, selectors: Iterable[str]) -> Optional[str]:
    """
    Text of the first selector that matches with non-empty content.

    Example:
        >>> card = _soup('<div><span class="broker-name">Ada</span></div>')
        >>> first_text(card, [".contact-name", ".broker-name"])
        'Ada'
    """
    for selector in selectors:
        text = _text(scope.select_one(selector))
        if text:
            return text
    return None


def mailto_address(scope: Tag) -> Optional[str]:
    """Address of the first mailto: link, without query parameters."""
    anchor = scope.select_one('a[href^="mailto:"]')
    if anchor is None:
        return None
    address = anchor.get("href", "")[len("mailto:"):].split("?")[0].strip()
    return address or None


def _image_src(img: Optional[Tag], base_url: str) -> Optional[str]:
    if img is None:
        return None
    src = img.get("src") or img.get("data-src")
    return absolute_url(base_url, src)


def extract_broker_cards(html: str, base_url: str) -> List[RawRecord]:
    """
    Broker result cards from the IBBA directory search page.

    Args:
        html: Rendered page markup
        base_url: URL of the page (unused for text fields, kept for the
            common extractor signature)

    Returns:
        One record per card: firmName, contactName, email

    Example:
        >>> html = '<div class="broker-card"><h3 class="firm-name">Acme</h3></div>'
        >>> extract_broker_cards(html, "https://www.ibba.org/")
        [{'firmName': 'Acme', 'contactName': None, 'email': None}]
    """
    records: List[RawRecord] = []
    for card in _soup(html).select(BROKER_CARD_SELECTOR):
        records.append({
            "firmName": first_text(card, [".firm-name", ".company-name"]),
            "contactName": first_text(card, [".contact-name", ".broker-name"]),
            "email": mailto_address(card),
        })
    return records


def _game_grid_records(soup: BeautifulSoup, base_url: str) -> List[RawRecord]:
    records: List[RawRecord] = []
    for item in soup.select(GAME_GRID_SELECTOR):
        anchor = item.select_one(".gameGridTitle a")
        release = _text(item.select_one(".gameGridReleaseDate"))
        records.append({
            "name": _text(anchor),
            "gameLink": absolute_url(base_url, anchor.get("href")) if anchor else None,
            "profileImage": _image_src(item.select_one(".gameGridImage img"), base_url),
            "releaseDate": release,
        })
    return records


def _game_media_records(soup: BeautifulSoup, base_url: str) -> List[RawRecord]:
    records: List[RawRecord] = []
    for card in soup.select(GAME_MEDIA_SELECTOR):
        anchor = card.select_one(".media-body a")
        time_el = card.select_one("time")
        records.append({
            "name": _text(anchor),
            "gameLink": absolute_url(base_url, anchor.get("href")) if anchor else None,
            "profileImage": _image_src(card.select_one("img"), base_url),
            "releaseDate": (time_el.get("datetime") or _text(time_el)) if time_el else None,
        })
    return records


def extract_game_listing(html: str, base_url: str) -> List[RawRecord]:
    """
    Upcoming games from an IGDB listing page.

    Reads the grid layout (.gameGridItem) and falls back to the list layout
    (.media cards) when the page has no grid.

    Returns:
        One record per game: name, gameLink, profileImage, releaseDate
    """
    soup = _soup(html)
    records = _game_grid_records(soup, base_url)
    if records:
        return records
    return _game_media_records(soup, base_url)


def _unique(values: Iterable[Optional[str]]) -> List[str]:
    seen = set()
    out: List[str] = []
    for v in values:
        if v and v not in seen:
            seen.add(v)
            out.append(v)
    return out


def find_emails(soup: BeautifulSoup) -> List[str]:
    """
    Email addresses visible anywhere on the page.

    Sources, in order: body text, mailto: links, data-email/data-mail
    attributes, and elements whose class or id mentions email.
    """
    found: List[str] = []

    body = soup.body or soup
    found.extend(EMAIL_RE.findall(body.get_text(" ")))

    for anchor in soup.select('a[href^="mailto:"]'):
        address = anchor.get("href", "")[len("mailto:"):].split("?")[0].strip()
        if EMAIL_RE.fullmatch(address):
            found.append(address)

    for el in soup.select("[data-email], [data-mail]"):
        value = (el.get("data-email") or el.get("data-mail") or "").strip()
        if EMAIL_RE.fullmatch(value):
            found.append(value)

    for el in soup.select('.email, .contact-email, .e-mail, [class*="email"], [id*="email"]'):
        found.extend(EMAIL_RE.findall(el.get_text(" ")))

    return _unique(found)


def extract_link_inventory(html: str, base_url: str) -> List[RawRecord]:
    """
    Generic inventory of links, images and email addresses.

    Returns:
        Records of the form {"kind": "link"|"image"|"email", "value": ...};
        links first, then images, then emails, each without repeats

    Example:
        >>> extract_link_inventory('<a href="/about">About</a>', "https://example.com/")
        [{'kind': 'link', 'value': 'https://example.com/about'}]
    """
    soup = _soup(html)
    links = _unique(absolute_url(base_url, a.get("href")) for a in soup.select("a[href]"))
    images = _unique(absolute_url(base_url, img.get("src")) for img in soup.select("img[src]"))
    emails = find_emails(soup)

    records: List[RawRecord] = []
    records.extend({"kind": "link", "value": v} for v in links if not v.startswith("mailto:"))
    records.extend({"kind": "image", "value": v} for v in images)
    records.extend({"kind": "email", "value": v} for v in emails)
    return records
