import logging
import threading

import pytest

from backends import GenerationError
from conftest import FakeStreamingGenerator, FakeTextGenerator
from content import ContentBrief, ContentRecord
from library import ContentLibrary, Debouncer, LiveAnalyzer, RecordNotFoundError, open_workspace
from scoring import analyze_seo
from settings import update_preferences

ARTICLE = "<h1>Raised Garden Beds</h1><h2>Wood</h2><p>Cedar lasts. See <a href=\"/blog/cedar\">cedar</a>.</p>"


class TestContentLibrary:

    def test_save_assigns_id_and_score(self, library, record):
        library.save(record)
        assert record.id.startswith("content_")
        assert record.seo_score == analyze_seo(record).overall_score

        loaded = library.load(record.id)
        assert loaded == record
        assert loaded.word_count == record.word_count

    def test_ids_are_unique(self, library):
        first = library.save(ContentRecord(title="a", body="a"))
        second = library.save(ContentRecord(title="b", body="b"))
        assert first.id != second.id

    def test_save_keeps_existing_id(self, library, record):
        library.save(record)
        record_id = record.id
        record.title = "Changed"
        library.save(record)
        assert record.id == record_id
        assert library.load(record_id).title == "Changed"

    def test_list_newest_first(self, library):
        library.save(ContentRecord(title="old", body="x", created_at="2024-01-01T00:00:00"))
        library.save(ContentRecord(title="new", body="x", created_at="2024-06-01T00:00:00"))
        assert [r.title for r in library.list_records()] == ["new", "old"]

    def test_list_skips_corrupt_files(self, library, blobs, caplog):
        library.save(ContentRecord(title="good", body="x"))
        blobs.write_blob("content/content_broken.json", "{not json")
        with caplog.at_level(logging.WARNING, logger="library"):
            records = library.list_records()
        assert [r.title for r in records] == ["good"]
        assert "content_broken.json" in caplog.text

    def test_load_missing(self, library):
        with pytest.raises(RecordNotFoundError):
            library.load("content_0")

    def test_delete(self, library, record):
        library.save(record)
        library.delete(record.id)
        assert library.list_records() == []
        with pytest.raises(RecordNotFoundError):
            library.delete(record.id)


class TestAutoSave:

    def test_update_saves_on_flush(self, library, record):
        library.save(record)
        library.update(record, title="First edit")
        library.update(record, title="Second edit")
        assert library.load(record.id).title != "Second edit"

        library.flush_autosave()
        assert library.load(record.id).title == "Second edit"

    def test_update_validates_fields(self, library, record):
        with pytest.raises(TypeError):
            library.update(record, colour="red")


class TestCreateFromBrief:

    def test_saves_generated_draft(self, library):
        record, analysis = library.create_from_brief(ContentBrief(keyword="garden beds"), FakeTextGenerator(ARTICLE))
        assert record.title == "Raised Garden Beds"
        assert record.status == "draft"
        assert record.seo_score == analysis.overall_score
        assert library.load(record.id).body == ARTICLE

    def test_failure_stores_nothing(self, library):
        backend = FakeTextGenerator(GenerationError("AI service error: timeout"))
        with pytest.raises(GenerationError):
            library.create_from_brief(ContentBrief(keyword="garden beds"), backend)
        assert library.list_records() == []

    def test_streaming(self, library):
        progress = []
        record, _ = library.create_from_brief(
            ContentBrief(keyword="garden beds"),
            FakeStreamingGenerator(["<h1>Beds</h1>", "<p>Build one.</p>"]),
            stream=True,
            on_progress=lambda chunk, pct: progress.append(pct),
        )
        assert record.body == "<h1>Beds</h1><p>Build one.</p>"
        assert progress[-1] == 100
        assert library.load(record.id).title == "Beds"


class TestDebouncer:

    def test_only_last_call_runs(self):
        calls = []
        done = threading.Event()

        def func(value):
            calls.append(value)
            done.set()

        debouncer = Debouncer(0.05, func)
        debouncer.call(1)
        debouncer.call(2)
        debouncer.call(3)
        assert done.wait(2)
        assert calls == [3]
        assert not debouncer.pending

    def test_flush_and_cancel(self):
        calls = []
        debouncer = Debouncer(60, calls.append)

        debouncer.call("a")
        assert debouncer.pending
        debouncer.flush()
        assert calls == ["a"]

        debouncer.call("b")
        debouncer.cancel()
        debouncer.flush()
        assert calls == ["a"]


class TestLiveAnalyzer:

    def test_analyzes_snapshot_of_last_edit(self, record):
        results = []
        analyzer = LiveAnalyzer(results.append, delay=60)

        analyzer.content_changed(record)
        expected = analyze_seo(record)
        record.body = ""
        analyzer.flush()

        assert results == [expected]
        assert analyzer.latest == expected

    def test_cancel(self, record):
        results = []
        analyzer = LiveAnalyzer(results.append, delay=60)
        analyzer.content_changed(record)
        analyzer.cancel()
        analyzer.flush()
        assert results == []


def test_open_workspace_uses_saved_preferences(tmp_path):
    ws = open_workspace(tmp_path)
    assert isinstance(ws.library, ContentLibrary)
    update_preferences(ws.kv, auto_save_interval=5)

    again = open_workspace(tmp_path)
    assert again.library._autosave.delay == 5
    assert not again.identity.is_signed_in()
