"""URL extraction from a record's distributions."""

from urllib.parse import urlsplit

from sleuther.domain.record.model.aggregate import Record

KNOWN_PROTOCOLS: tuple[str, ...] = ("http", "https", "ftp")


def url_scheme(url: str) -> str:
    """Lower-cased scheme of ``url``, or an empty string if it has none."""
    try:
        return urlsplit(url).scheme.lower()
    except ValueError:
        return ""


def is_known_protocol(url: str) -> bool:
    return url_scheme(url) in KNOWN_PROTOCOLS


def extract_urls(record: Record) -> tuple[str, ...]:
    """Deduplicated, protocol-filtered access/download URLs of a record.

    URLs keep the order in which they first appear across distributions,
    access URL before download URL.

    Raises:
        MalformedAspectError: If the distribution payloads are malformed.
    """
    seen: dict[str, None] = {}
    for distribution in record.distributions():
        strings = distribution.strings
        for url in (strings.access_url, strings.download_url):
            if url and is_known_protocol(url):
                seen.setdefault(url, None)
    return tuple(seen)
