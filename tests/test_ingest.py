from __future__ import annotations

import json
from io import BytesIO

import pytest

from chatcal.ingest import RawDocument, classify, expected_formats_message, ingest, load_document
from chatcal.errors import MalformedJSONError
from tests.conftest import make_record


CHATGPT_EXPORT = json.dumps({
    "conversations": [
        {
            "title": "T",
            "create_time": 1700000000,
            "mapping": {"a": {"message": {"author": {"role": "user"}, "content": {"parts": ["hello world"]}}}},
        }
    ]
})

DEEPSEEK_EXPORT = json.dumps({
    "chat_list": [
        {"chat_id": "d1", "messages": [{"role": "user", "content": "one"}]},
        {"chat_id": "d2", "messages": [{"role": "user", "content": "two"}]},
    ]
})


class TestClassify:

    def test_filename_hint(self):
        assert classify({}, "My_ChatGPT_export.json") == "chatgpt"
        assert classify([], "deepseek-2024.json") == "deepseek"

    def test_platforms_are_tried_in_registry_order(self):
        assert classify({"conversations": []}, "deepseek.json") == "chatgpt"
        assert classify({"chat_list": []}, "chatgpt.json") == "chatgpt"
        assert classify({"chat_list": []}, "deepseek.json") == "deepseek"

    def test_top_level_fields(self):
        assert classify({"conversations": []}, "export.json") == "chatgpt"
        assert classify({"chat_list": []}, "export.json") == "deepseek"
        assert classify({"chats": []}, "export.json") == "deepseek"

    def test_nested_data_fields(self):
        assert classify({"data": {"conversations": []}}) == "chatgpt"
        assert classify({"data": {"chat_list": []}}) == "deepseek"

    def test_unrecognized(self):
        assert classify([], "export.json") is None
        assert classify({"foo": 1}, "") is None
        assert classify("just a string", "x.json") is None


def test_load_document_rejects_invalid_json():
    with pytest.raises(MalformedJSONError):
        load_document("{not json")


def test_batch_with_invalid_second_document():
    result = ingest([], [
        RawDocument("export.json", CHATGPT_EXPORT),
        RawDocument("broken.json", "{this is not json"),
    ])

    ok, bad = result.outcomes
    assert ok.ok and ok.count == 1 and ok.platform == "chatgpt"
    assert ok.message == "Loaded 1 ChatGPT conversations from export.json"
    assert not bad.ok
    assert bad.error_code == "MALFORMED_JSON"
    assert bad.message.startswith("Error loading broken.json:")
    assert [r.content for r in result.collection] == ["user: hello world"]
    assert result.total_imported == 1
    assert result.failed == [bad]


def test_unrecognized_format_does_not_stop_the_batch():
    result = ingest([], [
        RawDocument("mystery.json", json.dumps({"foo": []})),
        RawDocument("export.json", DEEPSEEK_EXPORT),
    ])
    first, second = result.outcomes
    assert first.error_code == "UNRECOGNIZED_FORMAT"
    assert expected_formats_message() in first.message
    assert "ChatGPT or DeepSeek" in first.message
    assert second.ok and second.count == 2


def test_chatgpt_export_with_deepseek_in_its_name():
    doc = json.dumps({"conversations": [{"title": "T", "conversation": "hello"}]})
    (outcome,) = ingest([], [RawDocument("deepseek_conversations.json", doc)]).outcomes
    assert outcome.ok
    assert outcome.platform == "chatgpt"
    assert outcome.count == 1


def test_container_not_found_is_a_document_failure():
    result = ingest([], [RawDocument("chatgpt-export.json", json.dumps({"foo": 1}))])
    (outcome,) = result.outcomes
    assert not outcome.ok
    assert outcome.platform == "chatgpt"
    assert outcome.error_code == "CONTAINER_NOT_FOUND"
    assert result.collection == ()


def test_records_are_appended_in_document_then_emission_order():
    prior = [make_record("existing")]
    result = ingest(prior, [
        RawDocument("a.json", DEEPSEEK_EXPORT),
        RawDocument("b.json", CHATGPT_EXPORT),
    ])
    assert [r.id for r in result.collection] == ["existing", "d1", "d2", "conv_0"]


def test_input_collection_is_not_mutated():
    prior = [make_record("existing")]
    snapshot = list(prior)
    ingest(prior, [RawDocument("a.json", DEEPSEEK_EXPORT)])
    assert prior == snapshot


def test_reimport_keeps_duplicate_ids():
    first = ingest([], [RawDocument("a.json", DEEPSEEK_EXPORT)])
    second = ingest(first.collection, [RawDocument("a.json", DEEPSEEK_EXPORT)])
    assert [r.id for r in second.collection] == ["d1", "d2", "d1", "d2"]


def test_payload_kinds():
    result = ingest([], [
        RawDocument("bom.json", b"\xef\xbb\xbf" + DEEPSEEK_EXPORT.encode("utf-8")),
        RawDocument("stream.json", BytesIO(CHATGPT_EXPORT.encode("utf-8"))),
        ("tuple.json", DEEPSEEK_EXPORT),
        RawDocument("latin1.json", b"\xff\xfe\x00garbage"),
    ])
    assert [o.ok for o in result.outcomes] == [True, True, True, False]
    assert result.outcomes[-1].error_code == "MALFORMED_JSON"
    assert result.total_imported == 5


def test_skipped_entries_are_reported():
    doc = json.dumps({"chat_list": [{"messages": [{"role": "user", "content": "ok"}]}, "bad"]})
    (outcome,) = ingest([], [RawDocument("x.json", doc)]).outcomes
    assert outcome.ok
    assert outcome.count == 1
    assert len(outcome.skipped) == 1


def test_summary_message():
    result = ingest([], [RawDocument("a.json", DEEPSEEK_EXPORT)])
    assert result.summary_message() == "Successfully imported 2 conversations from 1 file(s)"
    empty = ingest([], [RawDocument("a.json", "[]")])
    assert empty.summary_message() == "No conversations imported from 1 file(s)"
    data = result.to_dict()
    assert data["totalImported"] == 2
    assert data["outcomes"][0]["count"] == 2
