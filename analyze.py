#!/usr/bin/env python3
"""
Score a draft file or a saved record, or list the library.

Usage:
    python analyze.py --input drafts/herb-garden.md
    python analyze.py --input page.html --keyword "herb garden" --json
    python analyze.py --id content_1718000000000
    python analyze.py --list
"""

import argparse
import json
import sys

from config import configure_logging
from library import RecordNotFoundError, open_workspace
from markup import load_record
from scoring import analyze_seo


def main():
    parser = argparse.ArgumentParser(description="SEO score for a draft")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--input", help="Markdown (with optional frontmatter) or HTML file")
    source.add_argument("--id", dest="record_id", help="Saved content id")
    source.add_argument("--list", action="store_true", help="List saved content with scores")
    parser.add_argument("--keyword", default=None, help="Target keyword (overrides frontmatter)")
    parser.add_argument("--meta-description", default=None, help="Meta description (overrides frontmatter)")
    parser.add_argument("--json", action="store_true", help="Print the analysis as JSON")

    args = parser.parse_args()
    configure_logging()

    if args.list:
        records = open_workspace().library.list_records()
        if not records:
            print("No saved content.")
        for r in records:
            score = "--" if r.seo_score is None else f"{r.seo_score:3d}"
            print(f"  {r.id:<22} {score}  {r.status:<9} {r.word_count:>5}w  {r.title}")
        return

    if args.input:
        try:
            record = load_record(args.input)
        except FileNotFoundError:
            print(f"Error: {args.input} not found")
            sys.exit(1)
    else:
        try:
            record = open_workspace().library.load(args.record_id)
        except RecordNotFoundError as e:
            print(f"Error: {e}")
            sys.exit(1)

    if args.keyword:
        record.keyword = args.keyword
    if args.meta_description:
        record.meta_description = args.meta_description

    analysis = analyze_seo(record)
    if args.json:
        print(json.dumps(analysis.to_dict(), indent=2))
    else:
        print(f"\n  {record.title} ({record.word_count} words)\n")
        print(analysis.summary())


if __name__ == "__main__":
    main()
