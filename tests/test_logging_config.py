"""Tests for log record stamping, redaction and JSON output."""

import json
import logging

from studyroom.core.logging_config import (
    _JsonFormatter,
    _RedactingFilter,
    _RequestContextFilter,
    owner_id_var,
    request_id_var,
)


def _render(msg, *args, **extra) -> dict:
    record = logging.LogRecord("studyroom.test", logging.INFO, __file__, 1, msg, args, None)
    record.__dict__.update(extra)
    _RequestContextFilter().filter(record)
    _RedactingFilter().filter(record)
    return json.loads(_JsonFormatter().format(record))


class TestJsonOutput:

    def test_request_context_and_extras(self):
        rid_token = request_id_var.set("req-42")
        owner_token = owner_id_var.set("owner-a")
        try:
            entry = _render("Review recorded", item_id="it-1", review_stage=2)
        finally:
            request_id_var.reset(rid_token)
            owner_id_var.reset(owner_token)

        assert entry["message"] == "Review recorded"
        assert entry["service"] == "studyroom"
        assert entry["request_id"] == "req-42"
        assert entry["owner_id"] == "owner-a"
        assert entry["item_id"] == "it-1"
        assert entry["review_stage"] == 2

    def test_outside_a_request_has_no_context_keys(self):
        entry = _render("Workspace created")
        assert "request_id" not in entry
        assert "owner_id" not in entry

    def test_explicit_owner_extra_wins(self):
        entry = _render("Seeding default workspace", owner_id="owner-b")
        assert entry["owner_id"] == "owner-b"


class TestRedaction:

    def test_bearer_token_in_args(self):
        entry = _render("auth header %s", "Bearer abcdefghijklmnopqrstuvwxyz.123")
        assert "abcdefghijklmnopqrstuvwxyz" not in entry["message"]
        assert entry["message"] == "auth header Bearer ***"

    def test_database_password(self):
        entry = _render("Connecting to postgresql://study:hunter2secret@db:5432/study")
        assert "hunter2secret" not in entry["message"]
        assert "postgresql://study:***@db" in entry["message"]
