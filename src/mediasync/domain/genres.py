"""Genre classification: raw labels -> normalized keys -> umbrella categories.

Pure and total. Nothing here raises; labels the taxonomy does not know simply
contribute no umbrella, and a track whose labels contribute nothing is
classified as ``Unknown``.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

UNKNOWN_GENRE: Final[str] = "Unknown"
UNKNOWN_NORMALIZED: Final[str] = "unknown"

_SPLIT_PATTERN: Final[re.Pattern[str]] = re.compile(r"[,;]")
_WHITESPACE: Final[re.Pattern[str]] = re.compile(r"\s+")
_EDGE_PUNCTUATION: Final[str] = "()[]{}.,;:!?"


@dataclass(frozen=True, slots=True)
class GenreClassification:
    raw: tuple[str, ...]
    normalized: tuple[str, ...]
    umbrella: tuple[str, ...]


def split_genres(labels: Iterable[str]) -> list[str]:
    """Split composite labels ("techno, electro; minimal") into single labels."""

    pieces: list[str] = []
    for label in labels:
        for piece in _SPLIT_PATTERN.split(label):
            stripped = piece.strip()
            if stripped:
                pieces.append(stripped)
    return pieces


def normalize_genre(label: str) -> str:
    """Return the lookup/dedup key for ``label``.

    Case, hyphens, dots, ``&`` vs ``and``, parenthesised suffixes and
    diacritics are all folded away, so "Hip-Hop" and "hip hop" share a key.
    """

    normalized = label.lower().strip()

    paren = normalized.find("(")
    if paren != -1:
        normalized = normalized[:paren].strip()

    normalized = normalized.strip(_EDGE_PUNCTUATION)
    normalized = normalized.replace("-", " ").replace(".", " ").replace("&", "and")
    normalized = _WHITESPACE.sub(" ", normalized)
    return _strip_diacritics(normalized).strip()


def resolve_umbrella(label: str) -> str | None:
    """Map a label to its umbrella category, or ``None`` when the taxonomy has no entry."""

    return _UMBRELLA_BY_KEY.get(normalize_genre(label))


def classify_genres(labels: Iterable[str]) -> GenreClassification:
    """Split, normalize and bucket ``labels``; each projection is deduplicated in order.

    Labels that normalize to nothing (``"(Live)"``) stay in ``raw`` only.
    """

    raw = _dedupe(split_genres(labels))
    normalized = _dedupe(key for key in (normalize_genre(label) for label in raw) if key)
    umbrella = _dedupe(
        umbrella for umbrella in (resolve_umbrella(label) for label in raw) if umbrella is not None
    )
    return GenreClassification(
        raw=raw,
        normalized=normalized,
        umbrella=umbrella or (UNKNOWN_GENRE,),
    )


def _strip_diacritics(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(char for char in decomposed if not unicodedata.combining(char))


def _dedupe(values: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(values))


UMBRELLA_TAXONOMY: Final[Mapping[str, tuple[str, ...]]] = {
    "Electronic": (
        "acid house", "acid jazz", "acid techno", "acid trance", "acidcore", "acid breaks",
        "afro house", "ambient", "ambient dub", "ambient techno", "ambient trance", "bass",
        "bass music", "breakbeat", "breaks", "big beat", "chillout", "chillwave", "club",
        "dance", "darkstep", "deep house", "disco house", "downtempo", "drum & bass",
        "drum n bass", "drum and bass", "dnb", "d'n'b", "dub", "dub techno", "dubstep", "edm",
        "electro", "electro house", "electronica", "electronic", "electronique",
        "experimental electronic", "future bass", "future house", "garage", "grime",
        "hard house", "hard trance", "hardcore", "hardcore breaks", "hardstyle", "house",
        "idm", "industrial", "jungle", "jump up", "liquid funk", "melodic house",
        "melodic house and techno", "melodic techno", "minimal", "minimal techno",
        "minimal tech house", "neurofunk", "peak time techno", "progressive house",
        "progressive trance", "psybient", "psytrance", "synthwave", "tech house", "techno",
        "trance", "uk garage", "vaporwave", "dancefloor drum and bass", "ambient house",
        "atmospheric drum and bass", "bass house", "big room house", "breakbeat hardcore",
        "breakcore", "breakstep", "brostep", "chillstep", "complextro", "dark ambient",
        "drumstep", "electroclash", "electropop", "fidget house", "glitch", "glitch hop",
        "happy hardcore", "liquid drum and bass", "speedcore", "techstep",
    ),
    "Rock": (
        "alternative", "alternative rock", "alternative metal", "art rock", "blues rock",
        "classic rock", "garage rock", "glam rock", "hard rock", "indie rock", "math rock",
        "nu metal", "pop.rock", "post-hardcore", "progressive rock", "psychedelic rock", "rock",
        "soft rock", "stoner rock", "symphonic rock", "acid rock", "acoustic rock",
        "arena rock", "country rock", "dance-rock", "deathrock", "desert rock",
        "electronic rock", "folk rock", "gothic rock", "noise rock", "post-rock", "shoegaze",
        "southern rock", "surf rock", "yacht rock",
    ),
    "Punk": (
        "punk", "pop punk", "anarcho-punk", "ska punk", "crust punk", "d-beat",
        "hardcore punk", "oi!", "post-punk",
    ),
    "Metal": (
        "metal", "black metal", "death metal", "doom metal", "folk metal", "heavy metal",
        "industrial metal", "melodic death metal", "metalcore", "power metal",
        "progressive metal", "speed metal", "thrash metal", "atmospheric black metal",
        "blackened death metal", "brutal death metal", "deathcore", "drone metal",
        "funeral doom metal", "gothic metal", "groove metal", "melodic black metal",
        "post-metal", "sludge metal", "symphonic metal",
    ),
    "Hip-Hop": (
        "abstract hip hop", "alternative hip hop", "aussie hip-hop", "boom bap",
        "conscious hip hop", "dirty south", "east coast hip hop", "gangsta rap", "g-funk",
        "hip hop", "hiphop", "mc raggamuffin hip-hop", "pop rap", "rap", "rap and hip-hop",
        "trap", "trip hop", "turntablism", "west coast hip hop", "cloud rap", "drill",
        "emo rap", "experimental hip hop", "hardcore hip hop", "mumble rap", "phonk",
        "plugg nb", "rage", "soundcloud rap", "trap metal",
    ),
    "R&B": (
        "r&b", "funk", "neo soul", "soul", "contemporary r&b", "contemporary r and b",
        "deep funk", "motown", "quiet storm", "southern soul",
    ),
    "Pop": (
        "pop", "alternative pop", "chamber pop", "country pop", "dance pop", "indie pop",
        "j-pop", "jpop", "k-pop", "synthpop", "art pop", "baroque pop", "bedroom pop",
        "britpop", "bubblegum pop", "dream pop", "jangle pop", "new wave", "power pop",
    ),
    "Blues": (
        "blues", "acoustic blues", "chicago blues", "delta blues", "electric blues",
        "texas blues",
    ),
    "Classical": (
        "classical", "baroque", "classique", "concerto", "concertos pour clavier",
        "musique concertante", "opera", "romantic", "romantic classical", "symphonic",
        "chamber music", "chamber", "medieval", "renaissance", "sonata", "symphony",
    ),
    "Folk": (
        "folk", "acoustic", "singer-songwriter", "alternative folk", "appalachian folk",
        "celtic folk", "contemporary folk", "indie folk", "traditional folk",
    ),
    "Country": (
        "country", "bluegrass", "americana", "alternative country", "honky tonk",
        "outlaw country", "texas country",
    ),
    "Jazz": (
        "jazz", "bebop", "fusion", "j-fusion", "jazz fusion", "smooth jazz", "afro-cuban jazz",
        "avant-garde jazz", "cool jazz", "free jazz", "gypsy jazz", "hard bop", "latin jazz",
        "swing", "vocal jazz",
    ),
    "Reggae": (
        "reggae", "reggea", "ragga", "roots reggae", "ska", "dancehall", "lovers rock",
        "rocksteady",
    ),
    "Latin": (
        "latin", "reggaeton", "salsa", "bachata", "cumbia", "bossa nova", "merengue", "samba",
        "tango",
    ),
    "Soundtrack": ("soundtrack", "ost", "video game music"),
    "World": (
        "world", "afrobeat", "afrobeats", "asian music", "asie", "japon", "j-rock", "klezmer",
        "musiques du monde", "bhangra", "fado", "flamenco", "gamelan", "qawwali", "raï",
    ),
    UNKNOWN_GENRE: ("unknown",),
}

# keys go through the same normalization as incoming labels so both sides agree
_UMBRELLA_BY_KEY: Final[dict[str, str]] = {
    normalize_genre(label): umbrella
    for umbrella, labels in UMBRELLA_TAXONOMY.items()
    for label in labels
}
