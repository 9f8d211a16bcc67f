from __future__ import annotations

from dataclasses import dataclass

from app.services.healthcare.errors import InvalidReference

DOCUMENTS_PREFIX = "#/results/documents/"
ENTITIES_SEGMENT = "/entities/"

_ASCII_DIGITS = frozenset("0123456789")
# int() refuses very long digit strings; no real document gets near this
MAX_INDEX_DIGITS = 9


@dataclass(frozen=True)
class EntityReference:
    document_index: int
    entity_index: int


def _scan_digits(s: str, pos: int) -> int:
    """
    Return the position right after the run of ASCII digits starting at pos.
    """
    end = pos
    n = len(s)
    while end < n and s[end] in _ASCII_DIGITS:
        end += 1

    return end


def split_reference(reference: str) -> EntityReference:
    """
    Single left-to-right pass over the fixed grammar:
        '#/results/documents/' DIGITS '/entities/' DIGITS <end>
    Nothing is ever re-scanned, so cost is linear in len(reference).
    """
    if not isinstance(reference, str) or not reference.startswith(DOCUMENTS_PREFIX):
        raise InvalidReference(str(reference), "missing documents prefix")

    pos = len(DOCUMENTS_PREFIX)
    doc_end = _scan_digits(reference, pos)
    if doc_end == pos:
        raise InvalidReference(reference, "missing document index")
    if doc_end - pos > MAX_INDEX_DIGITS:
        raise InvalidReference(reference, "document index too large")

    if not reference.startswith(ENTITIES_SEGMENT, doc_end):
        raise InvalidReference(reference, "missing entities segment")

    pos = doc_end + len(ENTITIES_SEGMENT)
    ent_end = _scan_digits(reference, pos)
    if ent_end == pos:
        raise InvalidReference(reference, "missing entity index")
    if ent_end - pos > MAX_INDEX_DIGITS:
        raise InvalidReference(reference, "entity index too large")

    if ent_end != len(reference):
        raise InvalidReference(reference, "trailing characters")

    return EntityReference(
        document_index=int(reference[len(DOCUMENTS_PREFIX) : doc_end]),
        entity_index=int(reference[pos:ent_end]),
    )


def parse_reference(reference: str, entity_count: int) -> int:
    """
    Entity index addressed by reference. The document index is not
    cross-checked against the enclosing document.
    """
    ref = split_reference(reference)
    if ref.entity_index >= entity_count:
        raise InvalidReference(reference, f"entity index out of range for {entity_count} entities")

    return ref.entity_index


def format_reference(document_index: int, entity_index: int) -> str:
    return f"{DOCUMENTS_PREFIX}{document_index}{ENTITIES_SEGMENT}{entity_index}"
