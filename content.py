"""
Content records and generation briefs.
"""

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime

from config import CONTENT_TYPES, GENERATION, PREFERENCES
from scoring import count_words

STATUSES = ("draft", "published")


def now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


@dataclass
class ContentBrief:
    keyword: str
    content_type: str = "article"
    target_length: int = PREFERENCES["default_word_count"]
    tone: str = "professional"
    audience: str = "general readers"
    model: str = GENERATION["model"]
    custom_prompt: str | None = None
    affiliate_links: str | None = None

    def __post_init__(self):
        if self.content_type not in CONTENT_TYPES:
            raise ValueError(
                f"Unknown content type: {self.content_type} "
                f"(available: {', '.join(CONTENT_TYPES)})"
            )


@dataclass
class ContentRecord:
    title: str
    body: str
    keyword: str | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    content_type: str = "article"
    status: str = "draft"
    id: str | None = None
    seo_score: int | None = None
    created_at: str = field(default_factory=now_iso)
    updated_at: str = field(default_factory=now_iso)
    published_to: list[str] = field(default_factory=list)

    @property
    def word_count(self) -> int:
        # derived from body on every read, never stored
        return count_words(self.body)

    def update(self, **changes) -> "ContentRecord":
        names = {f.name for f in fields(self)}
        unknown = set(changes) - names
        if unknown:
            raise TypeError(f"Unknown content fields: {', '.join(sorted(unknown))}")
        if "status" in changes and changes["status"] not in STATUSES:
            raise ValueError(f"Invalid status: {changes['status']}")
        for name, value in changes.items():
            setattr(self, name, value)
        self.updated_at = now_iso()
        return self

    def to_dict(self) -> dict:
        data = asdict(self)
        data["word_count"] = self.word_count
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ContentRecord":
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})
