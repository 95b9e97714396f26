"""
Tests for document identity and payload derivation.
"""

from datetime import datetime, timedelta, timezone

from search_sync.indexing.bulk import upsert_action
from search_sync.indexing.document import (
    document_id,
    document_ref,
    format_timestamp,
    indexed_payload,
)


def test_single_column_key_is_used_as_is():
    assert document_id((42,)) == 42
    assert document_id(("abc",)) == "abc"


def test_composite_key_is_joined_in_key_order():
    assert document_id((1, 2)) == "1_2"
    assert document_id(("b", "a", 3)) == "b_a_3"


def test_missing_key_is_surfaced():
    assert document_id((None,)) is None
    assert document_id((1, None)) == "1_"
    assert document_id(None) is None


def test_document_ref():
    ref = document_ref((7,), "documents", "doc")
    assert (ref.index, ref.type_name, ref.id) == ("documents", "doc", 7)
    assert document_ref((7,), "documents").type_name is None


def test_timestamps_are_rendered_with_offset():
    value = datetime(2019, 12, 4, 21, 26, 12, tzinfo=timezone(timedelta(hours=2)))
    assert format_timestamp(value) == "2019-12-04T21:26:12+02:00"
    assert format_timestamp(value.replace(tzinfo=timezone.utc)) == "2019-12-04T21:26:12+00:00"


def test_naive_timestamps_get_local_offset():
    rendered = format_timestamp(datetime(2019, 12, 4, 21, 26, 12, 999))
    assert rendered.startswith("2019-12-04T21:26:12")
    assert rendered[19] in "+-"
    assert len(rendered) == len("2019-12-04T21:26:12+00:00")


def test_indexed_payload_only_rewrites_timestamps():
    created = datetime(2020, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    values = {"id": 1, "title": "Hello", "active": True, "created_at": created, "tags": None}

    payload = indexed_payload(values)

    assert payload == {
        "id": 1,
        "title": "Hello",
        "active": True,
        "created_at": "2020-01-02T03:04:05+00:00",
        "tags": None,
    }
    assert values["created_at"] is created
    assert indexed_payload(values) == payload


def test_upsert_action():
    ref = document_ref((1, 2), "documents-20200101.000000")
    action = upsert_action(ref, {"title": "x"})
    assert action == {
        "_op_type": "update",
        "_index": "documents-20200101.000000",
        "_id": "1_2",
        "doc": {"title": "x"},
        "doc_as_upsert": True,
    }
    assert upsert_action(document_ref((1,), "i", "doc"), {})["_type"] == "doc"
