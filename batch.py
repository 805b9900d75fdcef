#!/usr/bin/env python3
"""
Batch runner: generate and save SEO drafts for several keywords.

Usage:
    python batch.py --type guide --keywords "compost bin" "raised garden beds" "drip irrigation"
    python batch.py --type listicle --keywords-file keywords.txt --length 1500
"""

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path

from backends import AnthropicTextGenerator, GenerationError, TextGenerator
from config import CONTENT_TYPES, DATA_DIR, configure_logging
from content import ContentBrief
from library import ContentLibrary, open_workspace
from settings import load_preferences


def run_batch(keywords: list[str], library: ContentLibrary, backend: TextGenerator,
              content_type: str = "article", target_length: int = 2000,
              model: str | None = None, verbose: bool = True) -> list[dict]:
    results = []
    for i, keyword in enumerate(keywords, 1):
        if verbose:
            print(f"\n{'─'*70}")
            print(f"  [{i}/{len(keywords)}] {keyword}")
            print(f"{'─'*70}")
        brief_kwargs = {"keyword": keyword, "content_type": content_type, "target_length": target_length}
        if model:
            brief_kwargs["model"] = model
        try:
            record, analysis = library.create_from_brief(ContentBrief(**brief_kwargs), backend)
        except GenerationError as e:
            if verbose:
                print(f"  ✗ Error: {e}")
            results.append({"keyword": keyword, "status": "error", "error": str(e)})
            continue
        if verbose:
            print(f"  ✓ {record.id}: {analysis.overall_score}/100  {record.title}")
        results.append({
            "keyword": keyword, "status": "success", "id": record.id,
            "title": record.title, "score": analysis.overall_score,
            "word_count": record.word_count,
            "suggestions": [s.title for s in analysis.suggestions],
        })
    return results


def print_summary(results: list[dict]):
    print(f"\n\n{'='*70}")
    print(f"  BATCH RESULTS")
    print(f"{'='*70}\n")
    success = [r for r in results if r["status"] == "success"]
    print(f"  Successful: {len(success)}/{len(results)}")
    if success:
        avg_score = sum(r["score"] for r in success) / len(success)
        print(f"  Avg score:  {avg_score:.1f}/100\n")
        for r in sorted(success, key=lambda x: x["score"], reverse=True):
            bar_len = int(r["score"] / 2.5)
            bar = "█" * bar_len + "░" * (40 - bar_len)
            print(f"  {r['keyword'][:24]:<24} {bar} {r['score']}")


def main():
    parser = argparse.ArgumentParser(description="Batch generate SEO drafts")
    parser.add_argument("--type", dest="content_type", default="article",
                        help=f"Content type: {', '.join(CONTENT_TYPES)}")
    parser.add_argument("--keywords", nargs="+", help="Keywords to write about")
    parser.add_argument("--keywords-file", help="File with one keyword per line")
    parser.add_argument("--length", type=int, default=None, help="Target length in words")
    parser.add_argument("--model", default=None, help="Anthropic model")

    args = parser.parse_args()
    configure_logging()

    keywords = list(args.keywords or [])
    if args.keywords_file:
        keywords += [k.strip() for k in Path(args.keywords_file).read_text().splitlines() if k.strip()]
    if not keywords:
        print("Specify --keywords or --keywords-file")
        sys.exit(1)
    if args.content_type not in CONTENT_TYPES:
        print(f"Unknown content type: {args.content_type}")
        print(f"Available: {', '.join(CONTENT_TYPES)}")
        sys.exit(1)

    ws = open_workspace()
    prefs = load_preferences(ws.kv)

    print(f"\n{'='*70}")
    print(f"  BATCH SEO CONTENT GENERATION")
    print(f"  Content type: {args.content_type}")
    print(f"  Keywords:     {len(keywords)}")
    print(f"{'='*70}\n")

    results = run_batch(
        keywords, ws.library, AnthropicTextGenerator(),
        content_type=args.content_type,
        target_length=args.length or prefs.default_word_count,
        model=args.model or prefs.default_ai_model,
    )
    print_summary(results)

    report_path = DATA_DIR / "reports" / f"batch_report_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"
    report_path.parent.mkdir(parents=True, exist_ok=True)
    report_path.write_text(json.dumps(results, indent=2))
    print(f"\n  Report: {report_path}")
    print(f"{'='*70}\n")


if __name__ == "__main__":
    main()
