"""
User preferences and saved WordPress connections.

Both live in the key-value store. Connections are kept under one key each
plus an index key listing their names, so they can be enumerated.
"""

from dataclasses import asdict, dataclass, field, fields

from backends import KeyValueStore
from config import PREFERENCES, WORDPRESS
from content import now_iso

PREFERENCES_KEY = "user_preferences"
CONNECTION_INDEX_KEY = "wp_connections"
THEMES = ("light", "dark")


class ConnectionNotFoundError(Exception):
    pass


@dataclass
class UserPreferences:
    theme: str = PREFERENCES["theme"]
    default_ai_model: str = PREFERENCES["default_ai_model"]
    default_word_count: int = PREFERENCES["default_word_count"]
    auto_save_interval: int = PREFERENCES["auto_save_interval"]


@dataclass
class WordPressConnection:
    name: str
    url: str
    auth_type: str
    credentials: dict = field(default_factory=dict)
    is_active: bool = True
    created_at: str = field(default_factory=now_iso)
    last_test_at: str | None = None

    def __post_init__(self):
        self.url = self.url.rstrip("/")
        if self.auth_type not in WORDPRESS["auth_types"]:
            raise ValueError(
                f"Unsupported authentication type: {self.auth_type} "
                f"(expected one of {', '.join(WORDPRESS['auth_types'])})"
            )


# ── Preferences ──────────────────────────────────────────────────────────────

def load_preferences(kv: KeyValueStore) -> UserPreferences:
    saved = kv.get(PREFERENCES_KEY) or {}
    known = {f.name for f in fields(UserPreferences)}
    return UserPreferences(**{k: v for k, v in saved.items() if k in known})


def update_preferences(kv: KeyValueStore, **updates) -> UserPreferences:
    prefs = load_preferences(kv)
    known = {f.name for f in fields(UserPreferences)}
    unknown = set(updates) - known
    if unknown:
        raise ValueError(f"Unknown preferences: {', '.join(sorted(unknown))}")
    if "theme" in updates and updates["theme"] not in THEMES:
        raise ValueError(f"Theme must be one of {', '.join(THEMES)}")
    for name, value in updates.items():
        setattr(prefs, name, value)
    kv.set(PREFERENCES_KEY, asdict(prefs))
    return prefs


# ── WordPress connections ────────────────────────────────────────────────────

def _connection_key(name: str) -> str:
    return f"wp_connection_{name}"


def list_connections(kv: KeyValueStore) -> list[WordPressConnection]:
    connections = []
    for name in kv.get(CONNECTION_INDEX_KEY) or []:
        data = kv.get(_connection_key(name))
        if data:
            connections.append(WordPressConnection(**data))
    return connections


def get_connection(kv: KeyValueStore, name: str) -> WordPressConnection:
    data = kv.get(_connection_key(name))
    if not data:
        raise ConnectionNotFoundError(f"No WordPress connection named '{name}'")
    return WordPressConnection(**data)


def add_connection(kv: KeyValueStore, connection: WordPressConnection) -> WordPressConnection:
    names = kv.get(CONNECTION_INDEX_KEY) or []
    if connection.name in names:
        raise ValueError(f"WordPress connection '{connection.name}' already exists")
    kv.set(_connection_key(connection.name), asdict(connection))
    kv.set(CONNECTION_INDEX_KEY, names + [connection.name])
    return connection


def remove_connection(kv: KeyValueStore, name: str) -> None:
    names = kv.get(CONNECTION_INDEX_KEY) or []
    if name not in names:
        raise ConnectionNotFoundError(f"No WordPress connection named '{name}'")
    kv.delete(_connection_key(name))
    kv.set(CONNECTION_INDEX_KEY, [n for n in names if n != name])


def mark_tested(kv: KeyValueStore, name: str) -> WordPressConnection:
    connection = get_connection(kv, name)
    connection.last_test_at = now_iso()
    kv.set(_connection_key(name), asdict(connection))
    return connection
