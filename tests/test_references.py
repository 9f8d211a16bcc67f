import time

import pytest

from app.services.healthcare.errors import InvalidReference
from app.services.healthcare.references import (
    format_reference,
    parse_reference,
    split_reference,
)


@pytest.mark.parametrize(
    "reference,count,expected",
    [
        ("#/results/documents/0/entities/0", 1, 0),
        ("#/results/documents/0/entities/7", 8, 7),
        ("#/results/documents/12/entities/3", 4, 3),
        ("#/results/documents/0/entities/007", 8, 7),
    ],
)
def test_parse_well_formed(reference, count, expected):
    assert parse_reference(reference, count) == expected


def test_document_index_is_parsed_but_not_checked():
    r = split_reference("#/results/documents/42/entities/1")
    assert r.document_index == 42
    assert r.entity_index == 1

    # document 42 does not need to exist
    assert parse_reference("#/results/documents/42/entities/1", 2) == 1


@pytest.mark.parametrize(
    "reference",
    [
        "entities/0",
        "",
        "#/results/documents//entities/0",
        "#/results/documents/0/entities/",
        "#/results/documents/0/entities/1a",
        "#/results/documents/0/entities/1 ",
        " #/results/documents/0/entities/1",
        "#/Results/documents/0/entities/1",
        "#/results/documents/0/relations/1",
        "#/results/documents/a/entities/1",
        "#/results/documents/0/entities/-1",
        "#/results/documents/0/entities/1/",
        "#/results/documents/0/entities/١",  # arabic-indic digit one
    ],
)
def test_malformed_reference_raises(reference):
    with pytest.raises(InvalidReference) as exc:
        parse_reference(reference, 10)

    assert exc.value.reference == reference


def test_out_of_range_raises():
    with pytest.raises(InvalidReference) as exc:
        parse_reference("#/results/documents/0/entities/2", 2)

    assert "out of range" in str(exc.value)
    assert exc.value.reference == "#/results/documents/0/entities/2"


def test_empty_document_rejects_every_reference():
    with pytest.raises(InvalidReference):
        parse_reference("#/results/documents/0/entities/0", 0)


def test_pathological_input_is_fast():
    evil = "#/results/documents/" + "1" * 200_000 + "/entities/" + "2" * 200_000 + "x"

    t0 = time.perf_counter()
    with pytest.raises(InvalidReference):
        parse_reference(evil, 10)

    assert time.perf_counter() - t0 < 1.0


def test_format_reference_parses_back():
    assert format_reference(3, 5) == "#/results/documents/3/entities/5"
    assert parse_reference(format_reference(3, 5), 6) == 5


def test_huge_index_is_invalid_reference_not_value_error():
    with pytest.raises(InvalidReference) as exc:
        parse_reference("#/results/documents/0/entities/" + "9" * 5000, 10)

    assert "too large" in str(exc.value)
