"""Tests for the per-file processing step."""

import time

import pytest

from isobatch.runner.cancellation import CancellationToken
from isobatch.runner.processing import DelayProcessor, process_folder


@pytest.mark.unit
def test_process_folder_visits_every_file_in_name_order(tmp_path, processor_factory):
    for name in ("c.txt", "a.txt", "b.txt"):
        (tmp_path / name).write_text(name)
    processor = processor_factory()

    outcome = process_folder(tmp_path, processor, CancellationToken())

    assert [path.name for path in processor.seen] == ["a.txt", "b.txt", "c.txt"]
    assert outcome.processed == ["a.txt", "b.txt", "c.txt"]
    assert outcome.skipped == []
    assert outcome.cancelled is False


@pytest.mark.unit
def test_process_folder_stops_when_cancelled(tmp_path, processor_factory):
    for name in ("a.txt", "b.txt", "c.txt"):
        (tmp_path / name).write_text(name)
    token = CancellationToken()

    def cancel_after_first(path):
        token.cancel("test")

    processor = processor_factory(on_file=cancel_after_first)

    outcome = process_folder(tmp_path, processor, token)

    assert outcome.cancelled is True
    assert outcome.processed == ["a.txt"]
    assert outcome.skipped == ["b.txt", "c.txt"]


@pytest.mark.unit
def test_process_folder_already_cancelled(tmp_path, processor_factory):
    (tmp_path / "a.txt").write_text("a")
    token = CancellationToken()
    token.cancel()
    processor = processor_factory()

    outcome = process_folder(tmp_path, processor, token)

    assert processor.seen == []
    assert outcome.cancelled is True
    assert outcome.skipped == ["a.txt"]


@pytest.mark.unit
def test_process_folder_propagates_processor_errors(tmp_path, processor_factory):
    (tmp_path / "bad.txt").write_text("x")
    processor = processor_factory(fail_on="bad.txt")

    with pytest.raises(RuntimeError, match="bad.txt"):
        process_folder(tmp_path, processor, CancellationToken())


@pytest.mark.unit
def test_delay_processor_sleeps(monkeypatch, tmp_path):
    calls = []
    monkeypatch.setattr(time, "sleep", lambda seconds: calls.append(seconds))

    DelayProcessor(0.25).process_file(tmp_path / "any")
    DelayProcessor(0).process_file(tmp_path / "any")

    assert calls == [0.25]


@pytest.mark.unit
def test_delay_processor_rejects_negative_delay():
    with pytest.raises(ValueError):
        DelayProcessor(-1)


@pytest.mark.unit
def test_cancellation_token_is_idempotent():
    token = CancellationToken()
    assert token.cancelled is False
    assert token.wait(0) is False

    token.cancel("first")
    token.cancel("second")
    token.stop()

    assert token.cancelled is True
    assert token.reason == "first"
    assert token.wait(0) is True
