"""
Identifier extraction for citation count lookups.

Pulls a DOI, an arXiv identifier or a title/author/year tuple out of a
record. Absence is signalled with ``MissingIdentifierError`` or
``InsufficientMetadataError`` so the resolver can record it and move on to
the next identifier kind.
"""

import re
from dataclasses import dataclass
from urllib.parse import quote

from citecount.counts.resolution_types import IdentifierKind
from citecount.errors import InsufficientMetadataError, MissingIdentifierError
from citecount.services.record_store import RecordStore
from citecount.utilities.schemas import BibliographicRecord, Creator

MAX_TITLE_LENGTH = 1000
MAX_AUTHOR_LENGTH = 100
ELLIPSIS = '...'

# Characters encodeURIComponent leaves alone
_URI_COMPONENT_SAFE = "-_.!~*'()"

ARXIV_PATTERN = re.compile(
    r'(?:arxiv\.org/(?:abs|pdf)/|arxiv:)'
    r'(?P<id>[a-z.-]+/\d+|\d+\.\d+)'
    r'(?P<version>v\d+)?',
    re.IGNORECASE,
)

YEAR_PATTERN = re.compile(r'^(?:c\. )?(\d{4})')


@dataclass(frozen=True)
class TitleAuthorYear:
    """Search key for providers that support title/author/year lookups."""

    title: str
    author: str | None = None
    year: str | None = None


def encode_uri_component(value: str) -> str:
    """Percent-encode a single URL path or query component."""
    return quote(value, safe=_URI_COMPONENT_SAFE)


def _read_field(
    record: BibliographicRecord, name: str, store: RecordStore | None
) -> str:
    if store is None:
        return record.get_field(name)
    return store.get_field(record, name) or ''


def _read_creators(
    record: BibliographicRecord, store: RecordStore | None
) -> list[Creator]:
    if store is None:
        return list(record.creators)
    return list(store.get_creators(record) or [])


def extract_doi(record: BibliographicRecord, store: RecordStore | None = None) -> str:
    """
    Return the record's DOI, encoded for use in a URL.

    Raises:
        MissingIdentifierError: If the record has no DOI.
    """
    doi = _read_field(record, 'doi', store).strip()
    if not doi:
        raise MissingIdentifierError(IdentifierKind.DOI.label)
    return encode_uri_component(doi)


def extract_preprint_id(
    record: BibliographicRecord, store: RecordStore | None = None
) -> str:
    """
    Return the arXiv identifier embedded in the record's URL field.

    Matches both ``arxiv.org/abs/<id>`` (or ``/pdf/``) paths and inline
    ``arXiv:<id>`` prefixes, for new-style (``2101.00001``) and old-style
    (``hep-th/9901001``) identifiers. A trailing version suffix is matched
    but not returned, since providers index the unversioned identifier.

    Raises:
        MissingIdentifierError: If no arXiv identifier is found.
    """
    match = ARXIV_PATTERN.search(_read_field(record, 'url', store))
    if not match:
        raise MissingIdentifierError(IdentifierKind.PREPRINT.label)
    return encode_uri_component(match.group('id'))


def _truncate(value: str, limit: int, marker: str = '') -> str:
    if len(value) <= limit:
        return value
    return value[:limit] + marker


def _extract_year(record: BibliographicRecord, store: RecordStore | None) -> str | None:
    year = _read_field(record, 'year', store).strip()
    if year:
        return year

    match = YEAR_PATTERN.match(_read_field(record, 'date', store).strip())
    return match.group(1) if match else None


def _extract_author(record: BibliographicRecord, store: RecordStore | None) -> str | None:
    creators = _read_creators(record, store)
    if not creators:
        return None

    first = creators[0]
    author = first.last_name or first.name
    if not author:
        return None
    return _truncate(author.strip(), MAX_AUTHOR_LENGTH)


def extract_title_author_year(
    record: BibliographicRecord, store: RecordStore | None = None
) -> TitleAuthorYear:
    """
    Build a title/author/year search key from the record.

    The title is capped at ``MAX_TITLE_LENGTH`` characters followed by an
    ellipsis and the author at ``MAX_AUTHOR_LENGTH`` characters, which keeps
    query strings inside provider limits.

    Raises:
        InsufficientMetadataError: Unless a title and at least one of author
            or year are present.
    """
    title = _read_field(record, 'title', store).strip()
    author = _extract_author(record, store)
    year = _extract_year(record, store)

    if not title or not (author or year):
        raise InsufficientMetadataError()

    return TitleAuthorYear(
        title=_truncate(title, MAX_TITLE_LENGTH, ELLIPSIS),
        author=author,
        year=year,
    )


EXTRACTORS = {
    IdentifierKind.DOI: extract_doi,
    IdentifierKind.PREPRINT: extract_preprint_id,
    IdentifierKind.TITLE_AUTHOR_YEAR: extract_title_author_year,
}


def extract_identifier(
    record: BibliographicRecord,
    kind: IdentifierKind,
    store: RecordStore | None = None,
) -> str | TitleAuthorYear:
    """
    Run the extractor registered for ``kind``.

    Fields and creators are read through ``store`` when one is given, so a
    host store that keeps record data elsewhere is honoured.
    """
    return EXTRACTORS[kind](record, store)
