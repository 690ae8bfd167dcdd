import json
import logging
from datetime import datetime

from app.core.logging import (
    RequestContextFilter,
    StructuredFormatter,
    bind_log_context,
    reset_log_context,
    start_log_context,
)


def make_record(**extra):
    record = logging.LogRecord("sociopedia.test", logging.INFO, __file__, 1, "hello", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_structured_timestamp_is_timezone_aware():
    line = json.loads(StructuredFormatter().format(make_record()))

    assert datetime.fromisoformat(line["timestamp"]).utcoffset() is not None
    assert line["message"] == "hello"


def test_request_context_is_stamped_on_records():
    token = start_log_context(request_id="req-1")
    try:
        bind_log_context(user_id="u-1")
        record = make_record()
        RequestContextFilter().filter(record)
    finally:
        reset_log_context(token)

    line = json.loads(StructuredFormatter().format(record))
    assert line["request_id"] == "req-1"
    assert line["user_id"] == "u-1"


def test_explicit_extra_wins_over_request_context():
    token = start_log_context(user_id="from-context")
    try:
        record = make_record(user_id="from-extra")
        RequestContextFilter().filter(record)
    finally:
        reset_log_context(token)

    assert record.user_id == "from-extra"


def test_context_cleared_after_reset():
    token = start_log_context(request_id="req-2")
    reset_log_context(token)

    record = make_record()
    RequestContextFilter().filter(record)
    assert not hasattr(record, "request_id")
