"""
External collaborators: identity, blob and key-value storage, text generation.

Everything that talks to the outside world is passed in as one of the
interfaces below so the library, generator and publisher can run against
fakes. The local implementations keep data under a single directory.
"""

import json
import logging
import uuid
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Iterator, Protocol

import anthropic

from config import DATA_DIR, GENERATION, STORAGE

logger = logging.getLogger(__name__)


class GenerationError(Exception):
    """The text backend failed or produced nothing usable."""


class NotSignedInError(Exception):
    pass


@dataclass
class User:
    id: str
    username: str
    email: str = ""
    preferences: dict = field(default_factory=dict)


class IdentityProvider(Protocol):
    def sign_in(self, username: str, email: str = "") -> User: ...
    def sign_out(self) -> None: ...
    def get_user(self) -> User | None: ...
    def is_signed_in(self) -> bool: ...
    def update_profile(self, **changes) -> User: ...


class BlobStore(Protocol):
    def read_blob(self, path: str) -> str: ...
    def write_blob(self, path: str, text: str) -> None: ...
    def list_blobs(self, prefix: str = "") -> list[str]: ...
    def delete_blob(self, path: str) -> None: ...


class KeyValueStore(Protocol):
    def get(self, key: str, default=None): ...
    def set(self, key: str, value) -> None: ...
    def delete(self, key: str) -> None: ...


class TextGenerator(Protocol):
    def generate_text(self, prompt: str, **options): ...


# ── Local storage ────────────────────────────────────────────────────────────

class LocalBlobStore:
    def __init__(self, root: str | Path):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, path: str) -> Path:
        full = (self.root / path).resolve()
        if not full.is_relative_to(self.root.resolve()):
            raise ValueError(f"Blob path escapes store root: {path}")
        return full

    def read_blob(self, path: str) -> str:
        return self._path(path).read_text()

    def write_blob(self, path: str, text: str) -> None:
        full = self._path(path)
        full.parent.mkdir(parents=True, exist_ok=True)
        full.write_text(text)

    def list_blobs(self, prefix: str = "") -> list[str]:
        base = self._path(prefix)
        if not base.is_dir():
            return []
        root = self.root.resolve()
        return sorted(str(p.relative_to(root)) for p in base.iterdir() if p.is_file())

    def delete_blob(self, path: str) -> None:
        self._path(path).unlink()


class JsonKeyValueStore:
    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        return json.loads(self.path.read_text() or "{}")

    def _dump(self, data: dict) -> None:
        self.path.write_text(json.dumps(data, indent=2))

    def get(self, key: str, default=None):
        return self._load().get(key, default)

    def set(self, key: str, value) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)

    def delete(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._dump(data)


def open_stores(home: str | Path | None = None) -> tuple[LocalBlobStore, JsonKeyValueStore]:
    home = Path(home) if home else DATA_DIR
    return LocalBlobStore(home / STORAGE["blob_dir"]), JsonKeyValueStore(home / STORAGE["kv_file"])


class LocalIdentity:
    """Single-user session kept in the key-value store."""

    SESSION_KEY = "session_user"

    def __init__(self, kv: KeyValueStore):
        self.kv = kv

    def sign_in(self, username: str, email: str = "") -> User:
        user = User(id=uuid.uuid5(uuid.NAMESPACE_URL, username).hex, username=username, email=email)
        self.kv.set(self.SESSION_KEY, asdict(user))
        logger.info("Signed in as %s", username)
        return user

    def sign_out(self) -> None:
        self.kv.delete(self.SESSION_KEY)

    def get_user(self) -> User | None:
        data = self.kv.get(self.SESSION_KEY)
        return User(**data) if data else None

    def is_signed_in(self) -> bool:
        return self.get_user() is not None

    def update_profile(self, **changes) -> User:
        user = self.get_user()
        if user is None:
            raise NotSignedInError("Sign in before updating the profile")
        for name, value in changes.items():
            if name == "id" or not hasattr(user, name):
                raise TypeError(f"Cannot update profile field: {name}")
            setattr(user, name, value)
        self.kv.set(self.SESSION_KEY, asdict(user))
        return user


# ── Text generation ──────────────────────────────────────────────────────────

class AnthropicTextGenerator:
    def __init__(self, client: anthropic.Anthropic | None = None):
        self.client = client or anthropic.Anthropic()

    def _request(self, prompt: str, model: str | None, max_tokens: int | None,
                 temperature: float | None) -> dict:
        return {
            "model": model or GENERATION["model"],
            "max_tokens": max_tokens or GENERATION["max_tokens"],
            "temperature": GENERATION["temperature"] if temperature is None else temperature,
            "messages": [{"role": "user", "content": prompt}],
        }

    def generate_text(self, prompt: str, model: str | None = None, max_tokens: int | None = None,
                      temperature: float | None = None) -> str:
        try:
            message = self.client.messages.create(**self._request(prompt, model, max_tokens, temperature))
        except anthropic.APIError as e:
            raise GenerationError(f"AI service error: {e}") from e
        return "".join(block.text for block in message.content if block.type == "text")

    def stream_text(self, prompt: str, model: str | None = None, max_tokens: int | None = None,
                    temperature: float | None = None) -> Iterator[str]:
        try:
            with self.client.messages.stream(**self._request(prompt, model, max_tokens, temperature)) as stream:
                yield from stream.text_stream
        except anthropic.APIError as e:
            raise GenerationError(f"AI service error: {e}") from e
