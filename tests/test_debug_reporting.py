from __future__ import annotations

import logging
from dataclasses import dataclass

import fakeredis

from scriptcore.core.entry import ScriptEntry
from scriptcore.debug import CompositeReporter, LoggingReporter
from scriptcore.streams import DebugStream, RedisStreamReporter


@dataclass
class _Script:
    name: str
    debug: bool = True

    def should_debug(self) -> bool:
        return self.debug


def test_stream_reporter_appends_reports_and_errors() -> None:
    r = fakeredis.FakeRedis(decode_responses=True)
    rep = RedisStreamReporter(r=r, queue_id="q1")

    rep.report(ScriptEntry("narrate", script=_Script("greeter")), "NARRATE", "Narrating='hi'  ")
    rep.report_error("Narrated to non-existent or offline player!")

    entries = r.xrange(DebugStream(queue_id="q1").key)
    assert len(entries) == 2

    _, first = entries[0]
    assert first["type"] == "report"
    assert first["command"] == "NARRATE"
    assert first["summary"] == "Narrating='hi'"
    assert first["script"] == "greeter"

    _, second = entries[1]
    assert second["type"] == "error"
    assert "offline" in second["message"]


def test_logging_reporter_honours_script_debug_flag(caplog) -> None:
    rep = LoggingReporter()

    with caplog.at_level(logging.INFO, logger="scriptcore.debug"):
        rep.report(ScriptEntry("narrate", script=_Script("quiet", debug=False)), "NARRATE", "hidden")
        rep.report(ScriptEntry("narrate", script=_Script("loud")), "NARRATE", "shown")
        rep.report_error("bad thing")

    messages = [rec.getMessage() for rec in caplog.records]
    assert not any("hidden" in m for m in messages)
    assert any("shown" in m for m in messages)
    assert any("bad thing" in m and rec.levelno == logging.ERROR for m, rec in zip(messages, caplog.records))


def test_disabled_logging_reporter_still_logs_errors(caplog) -> None:
    rep = LoggingReporter(enabled=False)

    with caplog.at_level(logging.INFO, logger="scriptcore.debug"):
        rep.report(None, "NARRATE", "quiet")
        rep.report_error("still visible")

    messages = [rec.getMessage() for rec in caplog.records]
    assert messages == ["ERROR! still visible"]


def test_composite_reporter_survives_failing_sink(reporter) -> None:
    class _Broken:
        def report(self, entry, command_name, summary) -> None:
            raise RuntimeError("sink down")

        def report_error(self, message) -> None:
            raise RuntimeError("sink down")

    rep = CompositeReporter([_Broken(), reporter])
    rep.report(None, "NARRATE", "x")
    rep.report_error("y")

    assert reporter.reports == [("NARRATE", "x")]
    assert reporter.errors == ["y"]
