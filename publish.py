#!/usr/bin/env python3
"""
Publishes saved drafts to a WordPress site over its REST API.

Usage:
    python publish.py --id content_1718000000000 --site myblog
    python publish.py --id content_1718000000000 --site myblog --status publish --tags "seo, writing"
    python publish.py --test-site myblog
"""

import argparse
import base64
import json
import logging
import sys
from dataclasses import dataclass

import requests

from config import WORDPRESS, configure_logging
from content import ContentRecord
from library import ContentLibrary, RecordNotFoundError, open_workspace
from settings import ConnectionNotFoundError, WordPressConnection, get_connection, mark_tested

logger = logging.getLogger(__name__)


class PublishError(Exception):
    def __init__(self, status: int | None, message: str):
        self.status = status
        self.message = message
        super().__init__(f"WordPress API error: {status} - {message}" if status else message)


@dataclass
class PublishResult:
    post_id: int | None
    url: str | None


def build_auth_header(connection: WordPressConnection) -> str:
    credentials = connection.credentials or {}
    if connection.auth_type == "oauth2":
        return f"Bearer {credentials.get('accessToken', '')}"
    if connection.auth_type == "jwt":
        return f"Bearer {credentials.get('token', '')}"
    if connection.auth_type in ("basic", "application_password"):
        pair = f"{credentials.get('username', '')}:{credentials.get('password', '')}"
        return f"Basic {base64.b64encode(pair.encode('utf-8')).decode('ascii')}"
    raise PublishError(None, f"Unsupported authentication type: {connection.auth_type}")


def build_post_payload(record: ContentRecord, status: str = "draft",
                       category: str | None = None, tags: str | None = None) -> dict:
    if status not in WORDPRESS["post_statuses"]:
        raise ValueError(f"Invalid post status: {status}")
    return {
        "title": record.title,
        "content": record.body,
        "excerpt": record.body[:WORDPRESS["excerpt_length"]] + "...",
        "status": status,
        "categories": [category] if category else [],
        "tags": [tag.strip() for tag in tags.split(",")] if tags else [],
        "meta": {
            "_yoast_wpseo_title": record.meta_title or record.title,
            "_yoast_wpseo_metadesc": record.meta_description or "",
        },
    }


def _error_message(response: requests.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        data = {}
    if isinstance(data, dict) and data.get("message"):
        return data["message"]
    return response.reason or "Unknown error"


def publish_content(record: ContentRecord, connection: WordPressConnection, status: str = "draft",
                    category: str | None = None, tags: str | None = None) -> PublishResult:
    payload = build_post_payload(record, status, category, tags)
    url = f"{connection.url}{WORDPRESS['posts_path']}"
    headers = {
        "Content-Type": "application/json",
        "Authorization": build_auth_header(connection),
    }

    logger.info("Publishing '%s' to %s", record.title, url)
    try:
        response = requests.post(url, headers=headers, json=payload, timeout=WORDPRESS["timeout"])
    except requests.RequestException as e:
        logger.error("WordPress publish error: %s", e)
        raise PublishError(None, str(e)) from e

    if not response.ok:
        error = PublishError(response.status_code, _error_message(response))
        logger.error("WordPress publish error: %s", error)
        raise error

    result = response.json()
    return PublishResult(post_id=result.get("id"), url=result.get("link"))


def publish_record(library: ContentLibrary, record_id: str, connection: WordPressConnection,
                   status: str = "draft", category: str | None = None,
                   tags: str | None = None) -> PublishResult:
    """Publish a saved draft. Only a live WordPress post marks the record published."""
    record = library.load(record_id)
    result = publish_content(record, connection, status, category, tags)
    published_to = list(record.published_to)
    if connection.name not in published_to:
        published_to.append(connection.name)
    changes = {"published_to": published_to}
    if status == "publish":
        changes["status"] = "published"
    record.update(**changes)
    library.save(record)
    return result


def check_connection(connection: WordPressConnection) -> bool:
    try:
        response = requests.get(
            f"{connection.url}{WORDPRESS['me_path']}",
            headers={"Authorization": build_auth_header(connection)},
            timeout=WORDPRESS["timeout"],
        )
    except (requests.RequestException, PublishError) as e:
        logger.error("WordPress connection test failed: %s", e)
        return False
    return response.ok


def _get_taxonomy(connection: WordPressConnection, path: str) -> list[dict]:
    try:
        response = requests.get(
            f"{connection.url}{path}",
            headers={"Authorization": build_auth_header(connection)},
            timeout=WORDPRESS["timeout"],
        )
        response.raise_for_status()
    except (requests.RequestException, PublishError) as e:
        logger.warning("Failed to fetch %s from %s: %s", path, connection.name, e)
        return []
    return response.json()


def get_categories(connection: WordPressConnection) -> list[dict]:
    return _get_taxonomy(connection, WORDPRESS["categories_path"])


def get_tags(connection: WordPressConnection) -> list[dict]:
    return _get_taxonomy(connection, WORDPRESS["tags_path"])


def main():
    parser = argparse.ArgumentParser(description="Publish saved drafts to WordPress")
    parser.add_argument("--id", dest="record_id", help="Saved content id (see: python analyze.py --list)")
    parser.add_argument("--site", help="Name of a saved WordPress connection")
    parser.add_argument("--status", default="draft", choices=WORDPRESS["post_statuses"],
                        help="WordPress post status (default: draft)")
    parser.add_argument("--category", default=None, help="Category id")
    parser.add_argument("--tags", default=None, help="Comma-separated tags")
    parser.add_argument("--dry-run", action="store_true", help="Print the JSON payload instead of posting")
    parser.add_argument("--test-site", default=None, help="Check credentials for a saved connection and exit")
    parser.add_argument("--list-categories", action="store_true", help="List the site's categories and tags")

    args = parser.parse_args()
    configure_logging()
    ws = open_workspace()

    try:
        if args.test_site:
            connection = get_connection(ws.kv, args.test_site)
            ok = check_connection(connection)
            if ok:
                mark_tested(ws.kv, connection.name)
            print(f"{connection.name}: {'✓ connected' if ok else '✗ connection failed'}")
            sys.exit(0 if ok else 1)

        if not args.site:
            parser.error("--site is required")
        connection = get_connection(ws.kv, args.site)

        if args.list_categories:
            for cat in get_categories(connection):
                print(f"  category {cat.get('id')}: {cat.get('name')}")
            for tag in get_tags(connection):
                print(f"  tag      {tag.get('id')}: {tag.get('name')}")
            return

        if not args.record_id:
            parser.error("--id is required")

        if args.dry_run:
            record = ws.library.load(args.record_id)
            print(json.dumps(build_post_payload(record, args.status, args.category, args.tags), indent=2))
            return

        result = publish_record(ws.library, args.record_id, connection,
                                status=args.status, category=args.category, tags=args.tags)
    except (RecordNotFoundError, ConnectionNotFoundError, PublishError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"Published: post {result.post_id}")
    print(f"URL:       {result.url}")


if __name__ == "__main__":
    main()
