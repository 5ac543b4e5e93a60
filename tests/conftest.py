from __future__ import annotations

from datetime import datetime
from typing import Sequence

import pytest

from chatcal import create_app
from chatcal.records import NormalizedRecord
from config import Config


class TestConfig(Config):
    __test__ = False

    TESTING = True
    DEBUG = False
    SEED_SAMPLE_DATA = False
    SAMPLE_SEED = None
    IMPORT_WATCH_DIR = None
    LOG_LEVEL = "WARNING"


@pytest.fixture
def app():
    return create_app(TestConfig)


@pytest.fixture
def client(app):
    return app.test_client()


def make_record(
    record_id: str,
    platform: str = "chatgpt",
    date: datetime | None = None,
    title: str = "Title",
    content: str = "user: hello",
    tags: Sequence[str] = ("general",),
    starred: bool = False,
    quality: float = 3.0,
) -> NormalizedRecord:
    when = (date or datetime(2024, 1, 5, 12, 0)).astimezone()
    return NormalizedRecord(
        id=record_id,
        platform=platform,
        title=title,
        date=when,
        summary=content[:150],
        content=content,
        tags=tuple(tags),
        starred=starred,
        quality=quality,
        relationships=(),
        user_id="user-test",
        extracted_at=when,
    )
