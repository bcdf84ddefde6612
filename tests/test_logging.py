from __future__ import annotations

import logging

from salonbot.main import ContextFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("salonbot.test", logging.INFO, __file__, 1, "WOULD_SEND_REPLY", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_context_formatter_appends_reply_text():
    formatter = ContextFormatter("%(levelname)s:%(name)s:%(message)s")

    line = formatter.format(_record(phone="+911234567890", reply_text="See you at 5"))

    assert line == "INFO:salonbot.test:WOULD_SEND_REPLY | phone=+911234567890 reply_text=See you at 5"


def test_context_formatter_skips_empty_fields():
    formatter = ContextFormatter("%(message)s")

    assert formatter.format(_record(phone="", reply_text=None)) == "WOULD_SEND_REPLY"
