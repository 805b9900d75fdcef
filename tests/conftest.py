import pytest

from backends import GenerationError, JsonKeyValueStore, LocalBlobStore
from content import ContentRecord
from library import ContentLibrary


class FakeTextGenerator:
    """Returns a canned reply (or raises it) and records every call."""

    def __init__(self, response):
        self.response = response
        self.calls = []

    def generate_text(self, prompt, **options):
        self.calls.append((prompt, options))
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


class FakeStreamingGenerator(FakeTextGenerator):
    def __init__(self, chunks):
        super().__init__("".join(c for c in chunks if isinstance(c, str)))
        self.chunks = chunks

    def stream_text(self, prompt, **options):
        self.calls.append((prompt, options))
        yield from self.chunks


class KeywordRoutedGenerator:
    """Fails for prompts that mention any of `failing` keywords."""

    def __init__(self, failing=()):
        self.failing = failing

    def generate_text(self, prompt, **options):
        for keyword in self.failing:
            if f'"{keyword}"' in prompt:
                raise GenerationError(f"backend down for {keyword}")
        keyword = prompt.split('"')[1]
        return f"<h1>All About {keyword}</h1><p>{keyword} explained.</p>"


@pytest.fixture
def blobs(tmp_path):
    return LocalBlobStore(tmp_path / "blobs")


@pytest.fixture
def kv(tmp_path):
    return JsonKeyValueStore(tmp_path / "kv.json")


@pytest.fixture
def library(blobs):
    return ContentLibrary(blobs, auto_save_interval=60)


@pytest.fixture
def record():
    return ContentRecord(
        title="Indoor Herb Garden: A Beginner's Guide to Growing Herbs",
        body=(
            "<h1>Indoor Herb Garden</h1>"
            "<h2>Choosing herbs</h2><p>Basil and mint grow well inside.</p>"
            "<h2>Light</h2><p>Give them sun. See <a href=\"/blog/grow-lights\">grow lights</a>.</p>"
            "<h3>Watering</h3><p>Water when the soil is dry.</p>"
        ),
        keyword="herb",
        meta_description="Learn how to start an indoor herb garden with simple steps.",
    )
