import pytest

from backends import GenerationError
from conftest import FakeStreamingGenerator, FakeTextGenerator
from content import ContentBrief
from generator import (
    ContentWrapped,
    MessageWrapped,
    PlainText,
    extract_content,
    extract_title,
    generate_content,
    generate_content_streaming,
    parse_response,
)
from prompts import get_generation_prompt

ARTICLE = "<h1>Indoor Herb Garden Guide</h1><h2>Light</h2><p>Herbs like sun.</p>"


class TestParseResponse:

    def test_plain_string(self):
        assert parse_response("hello") == PlainText("hello")

    def test_text_field(self):
        assert parse_response({"text": "hello"}) == PlainText("hello")

    def test_content_field(self):
        resp = parse_response({"content": "hello"})
        assert resp == ContentWrapped("hello")
        assert resp.text == "hello"

    def test_content_blocks_are_joined(self):
        resp = parse_response({"content": [{"type": "text", "text": "Hel"}, {"type": "text", "text": "lo"}]})
        assert resp.text == "Hello"

    def test_message_wins_over_other_fields(self):
        resp = parse_response({"message": {"content": "from message"}, "text": "from text"})
        assert resp == MessageWrapped("from message")
        assert resp.text == "from message"

    @pytest.mark.parametrize("raw", [{}, {"text": ""}, {"usage": {"total_tokens": 1}}, 42, None])
    def test_unknown_shapes(self, raw):
        with pytest.raises(GenerationError, match="Unexpected response format"):
            parse_response(raw)


class TestExtraction:

    def test_extract_content_strips_code_fence(self):
        assert extract_content("```html\n<h1>X</h1>\n```") == "<h1>X</h1>"
        assert extract_content("  <h1>X</h1>  ") == "<h1>X</h1>"

    def test_title_from_h1(self):
        assert extract_title("<p>intro</p><h1>My <em>Title</em></h1>") == "My Title"

    def test_title_from_markdown_heading(self):
        assert extract_title("Intro line\n# Markdown Title\n\nbody") == "Markdown Title"

    def test_title_from_first_line(self):
        assert extract_title("<p>Plain first line</p>\nmore") == "Plain first line"

    def test_no_title_when_first_line_too_long(self):
        assert extract_title("x" * 250) is None

    def test_empty_h1_means_no_title(self):
        assert extract_title("<h1></h1>\n# Markdown Title\nbody") is None
        assert extract_title("<h1> <em></em> </h1><p>Short line</p>") is None


class TestGenerateContent:

    def test_builds_draft(self):
        backend = FakeTextGenerator(ARTICLE)
        brief = ContentBrief(keyword="herb garden", content_type="guide", model="test-model")
        record = generate_content(brief, backend)

        assert record.title == "Indoor Herb Garden Guide"
        assert record.body == ARTICLE
        assert record.keyword == "herb garden"
        assert record.content_type == "guide"
        assert record.status == "draft"
        prompt, options = backend.calls[0]
        assert prompt == get_generation_prompt(brief)
        assert options["model"] == "test-model"

    def test_wrapped_response(self):
        backend = FakeTextGenerator({"message": {"content": ARTICLE}})
        record = generate_content(ContentBrief(keyword="herbs"), backend)
        assert record.title == "Indoor Herb Garden Guide"

    def test_fallback_title(self):
        # one long line, no heading
        backend = FakeTextGenerator("word " * 60)
        record = generate_content(ContentBrief(keyword="herbs"), backend)
        assert record.title == "Complete Guide to herbs"

    def test_empty_h1_falls_back_to_keyword_title(self):
        backend = FakeTextGenerator("<h1></h1><p>Herbs need light.</p>")
        record = generate_content(ContentBrief(keyword="herbs"), backend)
        assert record.title == "Complete Guide to herbs"

    def test_empty_reply_fails(self):
        with pytest.raises(GenerationError, match="empty content"):
            generate_content(ContentBrief(keyword="herbs"), FakeTextGenerator("   \n "))

    def test_backend_error_propagates(self):
        backend = FakeTextGenerator(GenerationError("AI service error: overloaded"))
        with pytest.raises(GenerationError, match="overloaded"):
            generate_content(ContentBrief(keyword="herbs"), backend)


class TestGenerateContentStreaming:

    def test_streams_chunks_with_progress(self):
        backend = FakeStreamingGenerator([
            "<h1>T</h1>",
            {"text": "<p>a</p>"},
            {"delta": {"text": "<p>b</p>"}},
            {"usage": {}},
        ])
        progress = []
        record = generate_content_streaming(ContentBrief(keyword="herbs"), backend,
                                            lambda chunk, pct: progress.append((chunk, pct)))

        assert record.body == "<h1>T</h1><p>a</p><p>b</p>"
        assert record.title == "T"
        assert progress == [("<h1>T</h1>", 1), ("<p>a</p>", 3), ("<p>b</p>", 5), ("", 100)]

    def test_replays_non_streaming_backend(self):
        backend = FakeTextGenerator("one two three four five six seven")
        progress = []
        record = generate_content_streaming(ContentBrief(keyword="herbs"), backend,
                                            lambda chunk, pct: progress.append((chunk, pct)))

        assert record.body == "one two three four five six seven"
        assert progress == [
            ("one two three four five ", 67),
            ("six seven ", 95),
            ("", 100),
        ]

    def test_empty_stream_fails_after_completion_signal(self):
        progress = []
        with pytest.raises(GenerationError):
            generate_content_streaming(ContentBrief(keyword="herbs"), FakeStreamingGenerator([]),
                                       lambda chunk, pct: progress.append(pct))
        assert progress == [100]


class TestPrompt:

    def test_includes_brief_fields(self):
        brief = ContentBrief(
            keyword="drip irrigation", content_type="tutorial", target_length=1200,
            tone="friendly", audience="home gardeners",
            custom_prompt="Mention water savings.", affiliate_links="https://a.example, https://b.example",
        )
        prompt = get_generation_prompt(brief)
        assert 'about "drip irrigation"' in prompt
        assert "1200 words" in prompt
        assert "home gardeners" in prompt
        assert "Mention water savings." in prompt
        assert "- https://b.example" in prompt
