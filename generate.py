#!/usr/bin/env python3
"""
Generate an SEO draft from a brief, score it and save it to the library.

Usage:
    python generate.py --keyword "indoor herb garden"
    python generate.py --keyword "best trail running shoes" --type review --length 1800 --stream
"""

import argparse
import json
import sys

from backends import AnthropicTextGenerator, GenerationError
from config import CONTENT_TYPES, configure_logging
from content import ContentBrief
from generator import generate_content, generate_content_streaming
from library import open_workspace
from scoring import analyze_seo
from settings import load_preferences


def print_progress(chunk: str, percent: int):
    bar_len = percent // 5
    bar = "█" * bar_len + "░" * (20 - bar_len)
    print(f"\r  {bar} {percent:3d}%", end="", flush=True)
    if percent == 100:
        print()


def main():
    parser = argparse.ArgumentParser(description="Generate an SEO-scored draft")
    parser.add_argument("--keyword", required=True, help="Target search keyword")
    parser.add_argument("--type", dest="content_type", default="article",
                        help=f"Content type: {', '.join(CONTENT_TYPES)}")
    parser.add_argument("--length", type=int, default=None, help="Target length in words")
    parser.add_argument("--tone", default="professional", help="Writing tone")
    parser.add_argument("--audience", default="general readers", help="Target audience")
    parser.add_argument("--model", default=None, help="Anthropic model (default: from preferences)")
    parser.add_argument("--prompt", dest="custom_prompt", default=None, help="Extra instructions for the writer")
    parser.add_argument("--links", dest="affiliate_links", default=None, help="Comma-separated links to include")
    parser.add_argument("--stream", action="store_true", help="Stream the reply and show progress")
    parser.add_argument("--no-save", action="store_true", help="Print the draft instead of saving it")
    parser.add_argument("--json", action="store_true", help="Print the analysis as JSON")

    args = parser.parse_args()
    configure_logging()
    ws = open_workspace()
    prefs = load_preferences(ws.kv)

    try:
        brief = ContentBrief(
            keyword=args.keyword,
            content_type=args.content_type,
            target_length=args.length or prefs.default_word_count,
            tone=args.tone,
            audience=args.audience,
            model=args.model or prefs.default_ai_model,
            custom_prompt=args.custom_prompt,
            affiliate_links=args.affiliate_links,
        )
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    backend = AnthropicTextGenerator()
    print(f"▶ Generating {brief.content_type} for '{brief.keyword}' with {brief.model}...")

    try:
        if args.no_save:
            if args.stream:
                record = generate_content_streaming(brief, backend, print_progress)
            else:
                record = generate_content(brief, backend)
            analysis = analyze_seo(record)
        else:
            record, analysis = ws.library.create_from_brief(
                brief, backend, stream=args.stream, on_progress=print_progress,
            )
    except GenerationError as e:
        print(f"  ✗ AI content generation failed: {e}")
        sys.exit(1)

    if args.json:
        print(json.dumps(analysis.to_dict(), indent=2))
    else:
        print(f"\n  Title:      {record.title}")
        print(f"  Word count: {record.word_count}\n")
        print(analysis.summary())

    if args.no_save:
        print(f"\n{record.body}")
    else:
        print(f"\n  Saved as {record.id}")


if __name__ == "__main__":
    main()
