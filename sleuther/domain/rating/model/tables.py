"""Open-license and open-format lookup tables.

Loaded once and never mutated: ``DEFAULT_TABLES`` is frozen, and
``RatingTables.extended`` returns a new instance.
"""

import re
from dataclasses import dataclass, field
from functools import cached_property
from types import MappingProxyType
from typing import Iterable, Mapping

OPEN_LICENSES: tuple[str, ...] = (
    "Creative Commons",
    "CC BY",
    "CC0",
    "CC Zero",
    "Open Data Commons",
    "ODC-By",
    "ODbL",
    "PDDL",
    "Public Domain",
    "Open Government Licence",
    "Open Government License",
    "OGL",
    "Open Database License",
    "Against DRM",
    "GNU Free Documentation License",
    "GFDL",
    "Talis Community License",
)

# Star level -> format names. Each level is more structured than the last:
# 2 = open, non-proprietary documents and tables; 3 = structured,
# machine-readable data and services; 4 = linked data.
OPEN_FORMATS: Mapping[int, tuple[str, ...]] = MappingProxyType(
    {
        2: ("CSV", "TSV", "TXT", "XLS", "XLSX", "ODS", "PDF", "DOCX", "ODT", "ZIP", "SHP"),
        3: (
            "JSON",
            "XML",
            "GeoJSON",
            "KML",
            "KMZ",
            "GML",
            "WMS",
            "WFS",
            "WCS",
            "API",
            "ESRI REST",
            "NetCDF",
            "Parquet",
        ),
        4: ("RDF", "RDFa", "RDF/XML", "JSON-LD", "Turtle", "TTL", "N-Triples", "N3", "SPARQL", "OWL"),
    }
)

FORMAT_LEVELS: tuple[int, ...] = (2, 3, 4)


def phrase_pattern(phrase: str) -> re.Pattern[str]:
    """Case-insensitive pattern matching ``phrase`` as a standalone keyword.

    Spaces, hyphens and underscores inside the phrase are interchangeable,
    and the phrase must not be glued to surrounding letters or digits.
    """
    words = [re.escape(w) for w in re.split(r"[\s\-_]+", phrase.strip()) if w]
    body = r"[\s\-_]*".join(words)
    return re.compile(rf"(?<![A-Za-z0-9]){body}(?![A-Za-z0-9])", re.IGNORECASE)


def _dedupe(items: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(i.strip() for i in items if i and i.strip()))


@dataclass(frozen=True)
class RatingTables:
    """Immutable license and format tables with precompiled matchers."""

    licenses: tuple[str, ...] = OPEN_LICENSES
    formats: Mapping[int, tuple[str, ...]] = field(default_factory=lambda: OPEN_FORMATS)

    def __post_init__(self) -> None:
        unknown = set(self.formats) - set(FORMAT_LEVELS)
        if unknown:
            raise ValueError(f"Format star levels must be in {FORMAT_LEVELS}, got {sorted(unknown)}")
        if not isinstance(self.formats, MappingProxyType):
            frozen = MappingProxyType({k: tuple(v) for k, v in self.formats.items()})
            object.__setattr__(self, "formats", frozen)

    def extended(
        self,
        licenses: Iterable[str] = (),
        formats: Mapping[int, Iterable[str]] | None = None,
    ) -> "RatingTables":
        """A new table set with extra license phrases and bucket formats."""
        unknown = set(formats or {}) - set(FORMAT_LEVELS)
        if unknown:
            raise ValueError(f"Format star levels must be in {FORMAT_LEVELS}, got {sorted(unknown)}")
        merged = {
            level: _dedupe([*self.formats.get(level, ()), *(formats or {}).get(level, ())])
            for level in FORMAT_LEVELS
        }
        return RatingTables(
            licenses=_dedupe([*self.licenses, *licenses]),
            formats=MappingProxyType(merged),
        )

    @cached_property
    def license_patterns(self) -> tuple[tuple[str, re.Pattern[str]], ...]:
        return tuple((phrase, phrase_pattern(phrase)) for phrase in self.licenses)

    @cached_property
    def format_patterns(self) -> tuple[tuple[int, str, re.Pattern[str]], ...]:
        """Format matchers, highest star level first."""
        return tuple(
            (level, name, phrase_pattern(name))
            for level in sorted(self.formats, reverse=True)
            for name in self.formats[level]
        )

    def match_license(self, text: str | None) -> str | None:
        """The first open-license phrase found in ``text``."""
        if not text:
            return None
        for phrase, pattern in self.license_patterns:
            if pattern.search(text):
                return phrase
        return None

    def match_format(self, text: str | None) -> tuple[int, str] | None:
        """The highest (star level, format name) found in ``text``."""
        if not text:
            return None
        for level, name, pattern in self.format_patterns:
            if pattern.search(text):
                return level, name
        return None


DEFAULT_TABLES = RatingTables()
