"""
Attribute inference for record-store catalog items.

The commerce system only knows a name, a price and an optional
description. Category, format and condition grades are inferred
here from that free text with keyword rules.

Every function in this module is pure and total: same input,
same output, no I/O.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from dataclasses import dataclass, replace
import re
from typing import Iterable, Optional

from ..entities import ItemDetail


UNCATEGORIZED = "Uncategorized"
DEFAULT_GENRE = "Rock"
DEFAULT_FORMAT = "Vinyl"

MERCH_TERMS = ("t-shirt", "shirt", "poster", "book")


@dataclass(frozen=True)
class PartialAttributes:
    """Inferred attributes; None when nothing could be inferred."""
    category: Optional[str] = None
    format: Optional[str] = None
    condition_sleeve: Optional[str] = None
    condition_media: Optional[str] = None


# Ordered: first match wins.
FORMAT_RULES = (
    ("7\"", ('7"', "7 inch", "7-inch", "45")),
    ("10\"", ('10"', "10 inch", "10-inch")),
    ("12\"", ('12"', "12 inch", "12-inch")),
    ("Box Set", ("box set", "boxset")),
    ("Cassette", ("cassette", "tape")),
    ("CD", ("cd", "compact disc")),
    ("LP", ("lp",)),
    ("Digital", ("digital", "download")),
    ("Vinyl", ("vinyl",)),
)

CATEGORY_RULES = (
    ("45", ('7"', "7 inch", "45")),
    ("Box Set", ("box set", "boxset")),
    ("Cassettes", ("cassette",)),
    ("CDs", ("cd", "compact disc")),
    ("DVDs", ("dvd",)),
    ("VHS", ("vhs",)),
    ("T-Shirts", ("t-shirt", "shirt")),
    ("Poster", ("poster",)),
    ("Book", ("book",)),
    ("Puzzle", ("puzzle",)),
    ("Crates", ("crates",)),
    ("Sleeves", ("sleeves",)),
    ("Cleaner", ("cleaner", "spin clean")),
    ("Slip Mat", ("slip mat", "slipmat")),
    ("Equipment", ("equipment", "turntable", "receiver", "speaker")),
    ("Boombox", ("boombox",)),
    ("Record Store Day", ("record store day", "rsd")),
)

GENRE_RULES = (
    ("Punk/Ska", ("punk", "ska")),
    ("Metal", ("metal",)),
    ("Indie", ("indie",)),
    ("Jazz", ("jazz",)),
    ("Bluegrass", ("bluegrass",)),
    ("Blues", ("blues",)),
    ("Rap/Hip-Hop", ("hip-hop", "hip hop", "rap")),
    ("Electronic", ("electronic",)),
    ("Country", ("country",)),
    ("Folk", ("folk",)),
    ("Funk/Soul", ("funk", "soul")),
    ("Reggae", ("reggae",)),
    ("Soundtracks", ("soundtrack",)),
    ("Compilations", ("compilation",)),
    ("Singer-Songwriter", ("singer-songwriter", "songwriter")),
    ("Industrial", ("industrial",)),
    ("Pop", ("pop",)),
)

CONDITION_RULES = (
    ("Near Mint (NM)", ("near mint", "nm", "m-")),
    ("Mint (M)", ("mint", "sealed", "new")),
    ("Very Good Plus (VG+)", ("very good plus", "very good+", "vg+")),
    ("Very Good (VG)", ("very good", "vg")),
    ("Good Plus (G+)", ("good plus", "good+", "g+")),
    ("Good (G)", ("good",)),
    ("Fair (F)", ("fair",)),
    ("Poor (P)", ("poor",)),
)

MUSIC_FORMAT_TERMS = ("lp", '12"', '7"', '10"', "cd", "cassette", "vinyl", "record", "single", "ep", "album")
NON_MUSIC_TERMS = (
    "t-shirt", "shirt", "poster", "book", "puzzle", "turntable", "receiver", "speaker",
    "cleaner", "crates", "sleeves", "dvd", "equipment", "accessories", "merchandise",
)
MUSIC_DESCRIPTION_TERMS = (
    "album", "release", "vinyl", "record", "lp", "cd", "cassette",
    "track", "song", "artist", "band", "label",
)
MUSIC_GENRE_TERMS = (
    "rock", "jazz", "blues", "hip-hop", "rap", "r&b", "soul", "funk", "electronic", "house",
    "techno", "dance", "pop", "country", "folk", "classical", "soundtrack", "metal", "punk",
    "indie", "alternative",
)

_ARTIST_TITLE = re.compile(r"^[^-]+ - [^-]+")
_NUMERIC_PAIR = re.compile(r"^\d+\s*-\s*\d+")
_FORMAT_SUFFIX = re.compile(r"\s*-\s*(vinyl|lp|cd|cassette|record)\b.*$", re.IGNORECASE)

_pattern_cache = {}


def _term_pattern(term: str) -> "re.Pattern[str]":
    pattern = _pattern_cache.get(term)
    if pattern is None:
        pattern = re.compile(r"(?<![a-z0-9])" + re.escape(term) + r"s?(?![a-z0-9])")
        _pattern_cache[term] = pattern
    return pattern


def contains_term(text: str, term: str) -> bool:
    """Case-insensitive keyword match that respects word boundaries."""
    return _term_pattern(term.lower()).search(text.lower()) is not None


def _contains_any(text: str, terms: Iterable[str]) -> bool:
    return any(contains_term(text, term) for term in terms)


def _first_rule(text: str, rules) -> Optional[str]:
    for value, terms in rules:
        if _contains_any(text, terms):
            return value
    return None


def _combined(name: str, description: Optional[str]) -> str:
    return f"{name or ''} {description or ''}".lower()


def looks_like_release(name: str, description: Optional[str] = None) -> bool:
    """'Artist - Title' names that are not merchandise."""
    text = _combined(name, description)
    return " - " in (name or "") and not _contains_any(text, MERCH_TERMS)


def infer_format(name: str, description: Optional[str] = None) -> Optional[str]:
    text = _combined(name, description)
    explicit = _first_rule(text, FORMAT_RULES)
    if explicit:
        return explicit
    if _contains_any(text, MERCH_TERMS):
        return None
    if looks_like_release(name, description):
        return "LP"
    return DEFAULT_FORMAT


def infer_category(name: str, description: Optional[str] = None) -> str:
    text = _combined(name, description)

    if contains_term(text, "33") and contains_term(text, "new"):
        return "33New"
    if contains_term(text, "33") and contains_term(text, "used"):
        return "33Used"

    category = _first_rule(text, CATEGORY_RULES)
    if category:
        return category

    if contains_term(text, "vinyl") and contains_term(text, "new"):
        return "New Vinyl"
    if contains_term(text, "vinyl") and contains_term(text, "used"):
        return "Used Vinyl"

    if looks_like_release(name, description):
        return _first_rule(text, GENRE_RULES) or DEFAULT_GENRE

    return UNCATEGORIZED


def infer_condition(name: str, description: Optional[str] = None) -> Optional[str]:
    return _first_rule(_combined(name, description), CONDITION_RULES)


def infer_attributes(name: str, description: Optional[str] = None) -> PartialAttributes:
    """
    Infer category, format and condition grades from free text.

    Args:
        name: Item name as listed in the commerce system
        description: Optional free-text description

    Returns:
        PartialAttributes with every field that could be inferred
    """
    condition = infer_condition(name, description)
    return PartialAttributes(
        category=infer_category(name, description),
        format=infer_format(name, description),
        condition_sleeve=condition,
        condition_media=condition,
    )


def merge_with_inferred(detail: ItemDetail, inferred: PartialAttributes) -> ItemDetail:
    """
    Fill gaps in an explicit detail with inferred attributes.

    Supplied values always win. An explicit "Uncategorized" counts
    as missing.
    """
    category = detail.category
    if not category or category == UNCATEGORIZED:
        category = inferred.category or category
    return replace(
        detail,
        category=category,
        format=detail.format or inferred.format,
        condition_sleeve=detail.condition_sleeve or inferred.condition_sleeve,
        condition_media=detail.condition_media or inferred.condition_media,
    )


def is_music_product(
    name: str,
    description: Optional[str] = None,
    category: Optional[str] = None,
    format: Optional[str] = None,
) -> bool:
    """Whether an item is worth an enrichment lookup."""
    name_text = (name or "").lower()
    description_text = (description or "").lower()
    category_text = (category or "").lower()
    format_text = (format or "").lower()

    if format_text and _contains_any(format_text, MUSIC_FORMAT_TERMS):
        return True
    if category_text and _contains_any(category_text, NON_MUSIC_TERMS):
        return False
    if _contains_any(name_text, NON_MUSIC_TERMS):
        return False
    if _ARTIST_TITLE.match(name_text) and not _NUMERIC_PAIR.match(name_text):
        return True
    if description_text and _contains_any(description_text, MUSIC_DESCRIPTION_TERMS):
        return True
    if category_text and _contains_any(category_text, MUSIC_GENRE_TERMS):
        return True
    return False


def search_query_for(name: str) -> str:
    """Strip trailing format suffixes ("- Vinyl", "- LP" ...) from a name."""
    return _FORMAT_SUFFIX.sub("", name or "").strip()
