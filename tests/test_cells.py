from datetime import datetime, timezone

import pytest

from notion_tables.cells import decode_cell, plain_text
from notion_tables.errors import ConversionError, MalformedEnvelopeError, UnsupportedKindError
from notion_tables.models import CellKind


def _fragments(*texts):
    return [{"type": "text", "plain_text": text, "text": {"content": text}} for text in texts]


def test_title_concatenates_fragments_in_source_order():
    raw = {"id": "title", "type": "title", "title": _fragments("zeta ", "alpha ", "mu")}

    cell = decode_cell("Name", raw)

    assert cell.name == "Name"
    assert cell.kind is CellKind.TITLE
    assert cell.value == "zeta alpha mu"


@pytest.mark.parametrize("kind", ["title", "text", "rich_text"])
def test_text_kinds_with_empty_fragment_list(kind):
    cell = decode_cell("Notes", {"type": kind, kind: []})

    assert cell.kind == CellKind(kind)
    assert cell.value == ""


def test_plain_text_falls_back_to_text_content():
    fragments = [{"type": "text", "text": {"content": "Hello "}}, {"plain_text": "World"}]

    assert plain_text(fragments) == "Hello World"


def test_missing_discriminator_yields_untyped_cell():
    cell = decode_cell("admin", {"id": "xyz"})

    assert cell.kind is None
    assert cell.value is None
    assert cell.raw_source == '{"id": "xyz"}'


def test_unknown_discriminator_raises_with_literal_tag():
    with pytest.raises(UnsupportedKindError) as excinfo:
        decode_cell("Gadget", {"type": "widget", "widget": {}})

    assert excinfo.value.kind == "widget"
    assert "widget" in str(excinfo.value)


def test_multi_select_projects_names_in_order():
    raw = {
        "type": "multi_select",
        "multi_select": [
            {"id": "1", "name": "Urgent", "color": "red"},
            {"id": "2", "name": "Backend", "color": "blue"},
        ],
    }

    assert decode_cell("Tags", raw).value == ("Urgent", "Backend")


def test_people_falls_back_to_id_when_name_hidden():
    raw = {
        "type": "people",
        "people": [
            {"object": "user", "id": "u-1", "name": "Ada Lovelace"},
            {"object": "user", "id": "u-2"},
        ],
    }

    assert decode_cell("Person", raw).value == ("Ada Lovelace", "u-2")


def test_relation_projects_ids():
    raw = {"type": "relation", "relation": [{"id": "p-1"}, {"id": "p-2"}]}

    assert decode_cell("Projects", raw).value == ("p-1", "p-2")


@pytest.mark.parametrize("kind", ["multi_select", "people", "relation"])
def test_list_kinds_with_empty_list(kind):
    assert decode_cell("x", {"type": kind, kind: []}).value == ()


def test_select_returns_option_name():
    raw = {"type": "select", "select": {"id": "s", "name": "In progress", "color": "yellow"}}

    assert decode_cell("Status", raw).value == "In progress"


def test_select_null_decodes_to_empty_string():
    cell = decode_cell("Status", {"type": "select", "select": None})

    assert cell.kind is CellKind.SELECT
    assert cell.value == ""


def test_status_is_read_like_select():
    raw = {"type": "status", "status": {"name": "Done"}}

    assert decode_cell("State", raw).value == "Done"


@pytest.mark.parametrize("number, expected", [(42, 42), (3.5, 3.5), ("7", 7), ("2.25", 2.25)])
def test_number_values(number, expected):
    assert decode_cell("Count", {"type": "number", "number": number}).value == expected


def test_number_null_decodes_to_zero():
    cell = decode_cell("Count", {"type": "number", "number": None})

    assert cell.kind is CellKind.NUMBER
    assert cell.value == 0


def test_number_rejects_non_numeric_text():
    with pytest.raises(ConversionError):
        decode_cell("Count", {"type": "number", "number": "lots"})


def test_checkbox_values():
    assert decode_cell("Done", {"type": "checkbox", "checkbox": True}).value is True
    assert decode_cell("Done", {"type": "checkbox", "checkbox": False}).value is False
    assert decode_cell("Done", {"type": "checkbox", "checkbox": "True"}).value is True


@pytest.mark.parametrize(
    "raw",
    [
        {"type": "checkbox", "checkbox": None},
        {"type": "checkbox"},
        {"type": "checkbox", "checkbox": "maybe"},
    ],
)
def test_checkbox_must_be_present_and_well_formed(raw):
    # number tolerates an absent value, checkbox does not
    with pytest.raises(ConversionError):
        decode_cell("Done", raw)


def test_date_parses_start():
    raw = {"type": "date", "date": {"start": "2021-09-01T10:30:00.000+00:00", "end": None}}

    value = decode_cell("When", raw).value

    assert value == datetime(2021, 9, 1, 10, 30, tzinfo=timezone.utc)


def test_date_only_start():
    raw = {"type": "date", "date": {"start": "2021-09-01"}}

    assert decode_cell("When", raw).value == datetime(2021, 9, 1)


def test_date_null_decodes_to_empty_string():
    assert decode_cell("When", {"type": "date", "date": None}).value == ""


def test_date_with_garbage_raises_conversion_error():
    with pytest.raises(ConversionError):
        decode_cell("When", {"type": "date", "date": {"start": "next tuesday"}})


def test_created_time_accepts_zulu_suffix():
    raw = {"type": "created_time", "created_time": "2022-03-01T19:05:00.000Z"}

    assert decode_cell("Created", raw).value == datetime(
        2022, 3, 1, 19, 5, tzinfo=timezone.utc
    )


@pytest.mark.parametrize(
    "kind, value",
    [
        ("url", "https://example.com/not validated"),
        ("email", "not-an-email"),
        ("phone_number", "+33 1 23 45 67 89"),
    ],
)
def test_scalar_strings_pass_through(kind, value):
    assert decode_cell("c", {"type": kind, kind: value}).value == value


def test_scalar_string_null_is_empty():
    assert decode_cell("Link", {"type": "url", "url": None}).value == ""


@pytest.mark.parametrize("kind", ["files", "rollup"])
def test_files_and_rollup_are_placeholders(kind):
    raw = {"type": kind, kind: {"type": "number", "number": 3}}

    cell = decode_cell("x", raw)

    assert cell.kind == CellKind(kind)
    assert cell.value is None


@pytest.mark.parametrize(
    "formula, expected",
    [
        ({"type": "string", "string": "hello"}, "hello"),
        ({"type": "number", "number": 12}, "12"),
        ({"type": "number", "number": 12.0}, "12"),
        ({"type": "number", "number": 1.5}, "1.5"),
        ({"type": "boolean", "boolean": True}, ""),
        (None, ""),
    ],
)
def test_formula_prefers_string_then_number(formula, expected):
    assert decode_cell("f", {"type": "formula", "formula": formula}).value == expected


def test_raw_source_keeps_serialized_payload():
    raw = {"id": "a", "type": "email", "email": "été@example.com"}

    assert decode_cell("Mail", raw).raw_source == (
        '{"id": "a", "type": "email", "email": "été@example.com"}'
    )


def test_decoding_is_deterministic():
    raw = {"type": "rich_text", "rich_text": _fragments("b", "a", "c")}

    assert decode_cell("t", raw) == decode_cell("t", raw)


def test_property_value_must_be_an_object():
    with pytest.raises(MalformedEnvelopeError):
        decode_cell("N", None)


@pytest.mark.parametrize(
    "raw",
    [
        {"type": "select", "select": "Done"},
        {"type": "title", "title": ["plain string"]},
        {"type": "rich_text", "rich_text": {"plain_text": "not a list"}},
        {"type": "multi_select", "multi_select": "a,b"},
        {"type": "relation", "relation": [None]},
        {"type": "date", "date": "2021-09-01"},
        {"type": "formula", "formula": "=1+1"},
    ],
)
def test_badly_shaped_sub_objects_raise_conversion_error(raw):
    with pytest.raises(ConversionError):
        decode_cell("x", raw)


def test_select_with_null_name_is_empty_string():
    assert decode_cell("S", {"type": "select", "select": {"name": None}}).value == ""
