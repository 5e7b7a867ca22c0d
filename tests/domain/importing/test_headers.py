from __future__ import annotations

from kinfolk.domain.importing import ImportField, header_token, resolve_headers


def test_header_token_ignores_case_and_punctuation() -> None:
    assert header_token("Year of Birth") == "yearofbirth"
    assert header_token("year_of_birth") == "yearofbirth"
    assert header_token("Spouse(s)") == "spouses"


def test_resolve_headers_maps_known_aliases() -> None:
    header_map = resolve_headers(
        ["Full Name", "birthYear", "died", "Living Place", "Spouse(s)", "children", "Notes"]
    )

    assert header_map.columns == {
        "Full Name": ImportField.FULL_NAME,
        "birthYear": ImportField.YEAR_OF_BIRTH,
        "died": ImportField.YEAR_OF_DEATH,
        "Living Place": ImportField.LIVING_PLACE,
        "Spouse(s)": ImportField.SPOUSES,
        "children": ImportField.CHILDREN,
    }
    assert "Notes" not in header_map.columns


def test_first_header_per_field_wins() -> None:
    header_map = resolve_headers(["name", "Full Name"])

    assert header_map.columns == {"name": ImportField.FULL_NAME}
    assert header_map.fields == frozenset({ImportField.FULL_NAME})


def test_extract_returns_canonical_values() -> None:
    header_map = resolve_headers(["Full Name", "Year of Birth", "Parents"])

    values = header_map.extract({"Full Name": "Ann", "Year of Birth": "1950", "Other": "x"})

    assert values == {ImportField.FULL_NAME: "Ann", ImportField.YEAR_OF_BIRTH: "1950"}
