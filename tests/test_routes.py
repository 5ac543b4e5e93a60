from __future__ import annotations

import json
from io import BytesIO

from chatcal import create_app
from tests.conftest import TestConfig


CHATGPT_EXPORT = json.dumps({
    "conversations": [
        {
            "title": "Python help",
            "create_time": 1700000000,
            "mapping": {"a": {"message": {"author": {"role": "user"}, "content": {"parts": ["debug my python code"]}}}},
        }
    ]
}).encode("utf-8")


def _upload(client, *files):
    data = {"files": [(BytesIO(raw), name) for name, raw in files]}
    return client.post("/api/import", data=data, content_type="multipart/form-data")


def test_import_reports_per_file_outcomes(client):
    resp = _upload(client, ("chatgpt.json", CHATGPT_EXPORT), ("bad.json", b"not json"))
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["totalImported"] == 1
    assert body["success"] is False
    assert [o["ok"] for o in body["outcomes"]] == [True, False]
    assert body["outcomes"][1]["errorCode"] == "MALFORMED_JSON"
    assert body["message"] == "Successfully imported 1 conversations from 2 file(s)"


def test_import_without_files(client):
    resp = client.post("/api/import", data={}, content_type="multipart/form-data")
    assert resp.status_code == 400


def test_scope_toggle(client):
    _upload(client, ("chatgpt.json", CHATGPT_EXPORT))
    assert client.get("/api/conversations").get_json()["total"] == 0
    body = client.get("/api/conversations?cross=1").get_json()
    assert body["total"] == 1
    rec = body["conversations"][0]
    assert rec["platform"] == "chatgpt"
    assert rec["userId"] == "user-chatgpt"
    assert "coding" in rec["tags"]


def test_search_and_platform_filters(client):
    _upload(client, ("chatgpt.json", CHATGPT_EXPORT))
    assert client.get("/api/conversations?cross=1&q=PYTHON").get_json()["total"] == 1
    assert client.get("/api/conversations?cross=1&q=rust").get_json()["total"] == 0
    assert client.get("/api/conversations?cross=1&platforms=deepseek").get_json()["total"] == 0
    assert client.get("/api/conversations?cross=1&platforms=").get_json()["total"] == 0


def test_get_and_star_conversation(client):
    _upload(client, ("chatgpt.json", CHATGPT_EXPORT))
    assert client.get("/api/conversations/conv_0").get_json()["starred"] is False

    resp = client.post("/api/conversations/conv_0/star")
    assert resp.status_code == 200
    assert resp.get_json()["conversation"]["starred"] is True
    assert client.get("/api/conversations/conv_0").get_json()["starred"] is True

    assert client.post("/api/conversations/nope/star").status_code == 404
    assert client.get("/api/conversations/nope").status_code == 404


def test_calendar_and_analytics(client):
    _upload(client, ("chatgpt.json", CHATGPT_EXPORT))
    body = client.get("/api/calendar?cross=1&year=2023&month=11").get_json()
    assert sum(len(v) for v in body["days"].values()) == 1
    # Nov 1st 2023 was a Wednesday
    assert body["grid"][:4] == [None, None, None, "2023-11-01"]
    assert len(body["grid"]) == 33

    assert client.get("/api/calendar?year=2023&month=13").status_code == 400

    stats = client.get("/api/analytics?cross=1").get_json()
    assert stats["totalConversations"] == 1
    assert stats["platformCounts"] == {"chatgpt": 1}


def test_export_downloads_filtered_json(client):
    _upload(client, ("chatgpt.json", CHATGPT_EXPORT))
    resp = client.get("/api/export?cross=1&format=json")
    assert resp.status_code == 200
    assert "ai-conversations-json.json" in resp.headers["Content-Disposition"]
    data = json.loads(resp.data)
    assert [r["id"] for r in data] == ["conv_0"]


def test_platforms_and_reset(client):
    _upload(client, ("chatgpt.json", CHATGPT_EXPORT))
    body = client.get("/api/platforms").get_json()
    assert body["counts"]["chatgpt"] == 1
    assert body["platforms"]["deepseek"]["name"] == "DeepSeek"

    resp = client.post("/api/reset", json={"samples": True, "seed": 7})
    assert resp.get_json()["total"] == 16
    assert client.get("/api/platforms").get_json()["counts"]["chatgpt"] == 5


def test_reset_parses_the_samples_flag(client):
    assert client.post("/api/reset", json={"samples": "false"}).get_json()["total"] == 0
    assert client.post("/api/reset", json={"samples": False}).get_json()["total"] == 0
    assert client.post("/api/reset", json={"samples": "yes", "seed": 1}).get_json()["total"] == 16


def test_oversized_upload_is_rejected():
    class SmallUploads(TestConfig):
        MAX_CONTENT_LENGTH = 64

    client = create_app(SmallUploads).test_client()
    resp = _upload(client, ("chatgpt.json", CHATGPT_EXPORT))
    assert resp.status_code == 413
