"""
Content generation: prompt the text backend and turn its reply into a draft.

Backends answer in several shapes (a bare string, {"text"}, {"content"},
{"message": {"content"}}). The reply is resolved once into one of the
response variants below and only plain text travels further.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable

from backends import GenerationError, TextGenerator
from config import GENERATION
from content import ContentBrief, ContentRecord
from markup import first_h1
from prompts import get_generation_prompt
from scoring import count_words, strip_tags

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int], None]


@dataclass(frozen=True)
class PlainText:
    text: str


@dataclass(frozen=True)
class ContentWrapped:
    content: str

    @property
    def text(self) -> str:
        return self.content


@dataclass(frozen=True)
class MessageWrapped:
    content: str

    @property
    def text(self) -> str:
        return self.content


GenerationResponse = PlainText | ContentWrapped | MessageWrapped


def _join_blocks(content) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            block.get("text", "") if isinstance(block, dict) else str(block)
            for block in content
        )
    raise GenerationError(f"Unexpected content type from AI service: {type(content).__name__}")


def parse_response(raw) -> GenerationResponse:
    if isinstance(raw, str):
        return PlainText(raw)
    if isinstance(raw, dict):
        message = raw.get("message")
        if isinstance(message, dict) and message.get("content"):
            return MessageWrapped(_join_blocks(message["content"]))
        if raw.get("text"):
            return PlainText(raw["text"])
        if raw.get("content"):
            return ContentWrapped(_join_blocks(raw["content"]))
    raise GenerationError("Unexpected response format from AI service")


def chunk_text(chunk) -> str:
    if isinstance(chunk, str):
        return chunk
    if isinstance(chunk, dict):
        delta = chunk.get("delta") or {}
        return chunk.get("text") or chunk.get("content") or delta.get("text") or ""
    return ""


def extract_content(response: str) -> str:
    stripped = response.strip()
    if stripped.startswith("```") and stripped.endswith("```") and "\n" in stripped:
        start = stripped.index("\n") + 1
        end = stripped.rindex("```")
        return stripped[start:end].strip()
    return stripped


def extract_title(content: str) -> str | None:
    h1 = first_h1(content)
    if h1 is not None:
        # an empty <h1> still counts as the title slot
        return h1 or None

    for line in content.split("\n"):
        if line.startswith("# "):
            return line[2:].strip()

    first_line = content.split("\n")[0]
    if first_line and len(first_line) < GENERATION["max_first_line_title"]:
        return strip_tags(first_line).strip()
    return None


def _options(brief: ContentBrief) -> dict:
    return {
        "model": brief.model,
        "max_tokens": GENERATION["max_tokens"],
        "temperature": GENERATION["temperature"],
    }


def _build_record(brief: ContentBrief, text: str) -> ContentRecord:
    body = extract_content(text)
    if not body:
        raise GenerationError("AI service returned empty content")
    title = extract_title(body) or GENERATION["fallback_title"].format(keyword=brief.keyword)
    record = ContentRecord(
        title=title,
        body=body,
        keyword=brief.keyword,
        content_type=brief.content_type,
        status="draft",
    )
    logger.info("Content generated successfully, word count: %d", count_words(body))
    return record


def generate_content(brief: ContentBrief, backend: TextGenerator) -> ContentRecord:
    prompt = get_generation_prompt(brief)
    logger.info("Generating content with AI model: %s", brief.model)

    start_time = time.time()
    raw = backend.generate_text(prompt, **_options(brief))
    logger.debug("Generation took %.1fs", time.time() - start_time)

    return _build_record(brief, parse_response(raw).text)


def generate_content_streaming(brief: ContentBrief, backend: TextGenerator,
                               on_progress: ProgressCallback) -> ContentRecord:
    """Generate a draft while reporting (chunk, percent) to `on_progress`.

    Backends without `stream_text` are called once and the reply is replayed
    in small word chunks so callers always see incremental progress.
    """
    prompt = get_generation_prompt(brief)
    cap = GENERATION["stream_progress_cap"]
    parts = []
    logger.info("Generating streaming content with AI model: %s", brief.model)

    if hasattr(backend, "stream_text"):
        expected = GENERATION["stream_expected_chunks"]
        for chunk in backend.stream_text(prompt, **_options(brief)):
            text = chunk_text(chunk)
            if text:
                parts.append(text)
                on_progress(text, min(len(parts) * cap // expected, cap))
    else:
        raw = backend.generate_text(prompt, **_options(brief))
        words = parse_response(raw).text.split(" ")
        step = GENERATION["replay_chunk_words"]
        for i in range(0, len(words), step):
            chunk = " ".join(words[i:i + step]) + " "
            parts.append(chunk)
            on_progress(chunk, min((i + step) * cap // len(words), cap))

    on_progress("", 100)
    return _build_record(brief, "".join(parts))
