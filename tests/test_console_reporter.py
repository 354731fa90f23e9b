"""Tests for rendering classification events."""

import io

import pytest

from core.coordinator import ClassificationEvent, DedupSummary
from core.similarity import Classification
from utils.console_reporter import ConsoleReporter


class FakeTerminal(io.StringIO):
    def isatty(self):
        return True


def event(classification, matched=None, discarded=None, index=1):
    return ClassificationEvent(
        index=index,
        total=3,
        path="b.png",
        hash_hex="00ff",
        classification=classification,
        matched_path=matched,
        discarded_path=discarded
    )


def test_unique_line():
    stream = io.StringIO()
    ConsoleReporter(stream).on_event(event(Classification.UNIQUE))

    assert stream.getvalue() == "1/3 00ff\n"


def test_duplicate_and_similar_lines():
    stream = io.StringIO()
    reporter = ConsoleReporter(stream)

    reporter.on_event(event(Classification.DUPLICATE, matched="a.png", index=2))
    reporter.on_event(event(Classification.SIMILAR, matched="a.png", index=3))

    assert stream.getvalue().splitlines() == [
        "2/3 00ff dup b.png == a.png",
        "3/3 00ff sim b.png ~= a.png",
    ]


def test_deletion_is_reported():
    stream = io.StringIO()
    ConsoleReporter(stream).on_event(
        event(Classification.DUPLICATE, matched="a.png", discarded="a.png")
    )

    assert "  del a.png" in stream.getvalue().splitlines()


def test_terminal_overwrites_unique_lines_and_uses_color():
    stream = FakeTerminal()
    reporter = ConsoleReporter(stream)

    reporter.on_event(event(Classification.UNIQUE))
    reporter.on_event(event(Classification.DUPLICATE, matched="a.png", index=2))

    output = stream.getvalue()
    assert output.startswith("1/3 \x1b[90m00ff\x1b[m\r")
    assert "\x1b[91mdup\x1b[m b.png == a.png\n" in output


def test_color_can_be_disabled_on_terminal():
    stream = FakeTerminal()
    ConsoleReporter(stream, color=False).on_event(event(Classification.UNIQUE))

    assert "\x1b[" not in stream.getvalue()


def test_summary():
    stream = io.StringIO()
    summary = DedupSummary(total=3, duplicate=1, similar=1, unique=1)

    ConsoleReporter(stream).print_summary(summary)

    assert stream.getvalue().startswith("1 dup, 1 sim, 1 uniq")


def test_summary_with_deletions():
    summary = DedupSummary(duplicate=2, deleted=["a.png", "b.png"], space_reclaimed=2048)

    text = ConsoleReporter(io.StringIO()).format_summary(summary)

    assert "Deleted 2 files, reclaimed 2.00 KB" in text


def test_bar_style_prints_only_matches():
    stream = io.StringIO()
    reporter = ConsoleReporter(stream, progress_style="bar")

    reporter.on_event(event(Classification.UNIQUE))
    reporter.on_event(event(Classification.SIMILAR, matched="a.png", index=2))
    reporter.close()

    output = stream.getvalue()
    assert "sim b.png ~= a.png" in output
    assert "1/3 00ff" not in output


def test_unknown_progress_style():
    with pytest.raises(ValueError):
        ConsoleReporter(io.StringIO(), progress_style="fancy")
