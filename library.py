"""
Content library: saved drafts, auto-save and debounced re-analysis.
"""

import dataclasses
import json
import logging
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from backends import BlobStore, JsonKeyValueStore, LocalBlobStore, LocalIdentity, TextGenerator, open_stores
from config import DEBOUNCE, PREFERENCES, STORAGE
from content import ContentBrief, ContentRecord, now_iso
from generator import ProgressCallback, generate_content, generate_content_streaming
from scoring import SEOAnalysis, analyze_seo
from settings import load_preferences

logger = logging.getLogger(__name__)


class RecordNotFoundError(Exception):
    pass


class Debouncer:
    """Trailing-edge debounce: `func` runs once, `delay` seconds after the last call."""

    def __init__(self, delay: float, func: Callable):
        self.delay = delay
        self.func = func
        self._timer: threading.Timer | None = None
        self._pending: tuple | None = None
        self._lock = threading.Lock()

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def call(self, *args, **kwargs):
        with self._lock:
            if self._timer:
                self._timer.cancel()
            self._pending = (args, kwargs)
            self._timer = threading.Timer(self.delay, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def _take(self) -> tuple | None:
        with self._lock:
            if self._timer:
                self._timer.cancel()
            pending, self._pending, self._timer = self._pending, None, None
        return pending

    def _fire(self):
        pending = self._take()
        if pending:
            args, kwargs = pending
            self.func(*args, **kwargs)

    def cancel(self):
        self._take()

    def flush(self):
        """Run the pending call now, if there is one."""
        self._fire()


class LiveAnalyzer:
    """Recomputes the SEO analysis shortly after the last edit."""

    def __init__(self, on_analysis: Callable[[SEOAnalysis], None],
                 delay: float = DEBOUNCE["analysis_seconds"]):
        self.on_analysis = on_analysis
        self.latest: SEOAnalysis | None = None
        self._debouncer = Debouncer(delay, self._analyze)

    def content_changed(self, record: ContentRecord):
        # snapshot, later edits must not leak into a queued analysis
        self._debouncer.call(dataclasses.replace(record))

    def _analyze(self, record: ContentRecord):
        self.latest = analyze_seo(record)
        self.on_analysis(self.latest)

    def flush(self):
        self._debouncer.flush()

    def cancel(self):
        self._debouncer.cancel()


class ContentLibrary:
    def __init__(self, blobs: BlobStore, auto_save_interval: float = PREFERENCES["auto_save_interval"]):
        self.blobs = blobs
        self._autosave = Debouncer(auto_save_interval, self.save)

    def _path(self, record_id: str) -> str:
        return f"{STORAGE['content_prefix']}{record_id}.json"

    def _exists(self, record_id: str) -> bool:
        return self._path(record_id) in self.blobs.list_blobs(STORAGE["content_prefix"])

    def new_id(self) -> str:
        stamp = int(time.time() * 1000)
        while self._exists(f"{STORAGE['id_prefix']}{stamp}"):
            stamp += 1
        return f"{STORAGE['id_prefix']}{stamp}"

    def save(self, record: ContentRecord) -> ContentRecord:
        if not record.id:
            record.id = self.new_id()
        record.updated_at = now_iso()
        record.seo_score = analyze_seo(record).overall_score
        self.blobs.write_blob(self._path(record.id), json.dumps(record.to_dict(), indent=2))
        logger.debug("Saved %s", record.id)
        return record

    def load(self, record_id: str) -> ContentRecord:
        try:
            text = self.blobs.read_blob(self._path(record_id))
        except FileNotFoundError as e:
            raise RecordNotFoundError(f"No saved content with id '{record_id}'") from e
        return ContentRecord.from_dict(json.loads(text))

    def list_records(self) -> list[ContentRecord]:
        records = []
        for name in self.blobs.list_blobs(STORAGE["content_prefix"]):
            if not name.endswith(".json"):
                continue
            try:
                records.append(ContentRecord.from_dict(json.loads(self.blobs.read_blob(name))))
            except (json.JSONDecodeError, TypeError) as e:
                logger.warning("Failed to load content file %s: %s", name, e)
        return sorted(records, key=lambda r: r.created_at, reverse=True)

    def delete(self, record_id: str) -> None:
        try:
            self.blobs.delete_blob(self._path(record_id))
        except FileNotFoundError as e:
            raise RecordNotFoundError(f"No saved content with id '{record_id}'") from e

    def update(self, record: ContentRecord, **changes) -> ContentRecord:
        """Edit a record in place and schedule an auto-save."""
        record.update(**changes)
        self._autosave.call(record)
        return record

    def flush_autosave(self):
        self._autosave.flush()

    def create_from_brief(self, brief: ContentBrief, backend: TextGenerator, stream: bool = False,
                          on_progress: ProgressCallback | None = None) -> tuple[ContentRecord, SEOAnalysis]:
        """Generate, score and save a new draft. Nothing is stored if generation fails."""
        if stream:
            record = generate_content_streaming(brief, backend, on_progress or (lambda chunk, pct: None))
        else:
            record = generate_content(brief, backend)
        analysis = analyze_seo(record)
        self.save(record)
        return record, analysis


@dataclass
class Workspace:
    blobs: LocalBlobStore
    kv: JsonKeyValueStore
    identity: LocalIdentity
    library: ContentLibrary


def open_workspace(home: str | Path | None = None) -> Workspace:
    blobs, kv = open_stores(home)
    prefs = load_preferences(kv)
    return Workspace(
        blobs=blobs,
        kv=kv,
        identity=LocalIdentity(kv),
        library=ContentLibrary(blobs, auto_save_interval=prefs.auto_save_interval),
    )
