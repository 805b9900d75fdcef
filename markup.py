"""
Frontmatter parsing and a small markdown-to-HTML converter for drafts
written outside the generator.
"""

import html
import re
from pathlib import Path

import yaml

from content import ContentRecord
from scoring import strip_tags

H1_RE = re.compile(r'<h1[^>]*>(.*?)</h1>', re.IGNORECASE | re.DOTALL)


def parse_frontmatter(content: str) -> tuple[dict, str]:
    frontmatter = {}
    body = content
    fm_match = re.match(r'^---\s*\n(.*?)\n---\s*\n(.*)$', content, re.DOTALL)
    if fm_match:
        try:
            frontmatter = yaml.safe_load(fm_match.group(1)) or {}
        except yaml.YAMLError:
            frontmatter = {}
        if not isinstance(frontmatter, dict):
            frontmatter = {}
        body = fm_match.group(2)
    return frontmatter, body


def inline_format(text: str) -> str:
    # Links: [text](url)
    text = re.sub(r'\[([^\]]+)\]\(([^\)]+)\)', r'<a href="\2">\1</a>', text)
    # Bold: **text**
    text = re.sub(r'\*\*([^*]+)\*\*', r'<strong>\1</strong>', text)
    # Italic: *text*
    text = re.sub(r'\*([^*]+)\*', r'<em>\1</em>', text)
    return text


def markdown_to_html(body: str) -> str:
    """Convert markdown body to HTML. Handles headings, paragraphs, links, bold, italic and lists."""
    html_lines = []
    paragraph_lines = []
    open_list = None

    def flush_paragraph():
        if paragraph_lines:
            html_lines.append(f'<p>{inline_format(" ".join(paragraph_lines))}</p>')
            paragraph_lines.clear()

    def close_list():
        nonlocal open_list
        if open_list:
            html_lines.append(f'</{open_list}>')
            open_list = None

    def open_new_list(tag: str):
        nonlocal open_list
        if open_list != tag:
            close_list()
            html_lines.append(f'<{tag}>')
            open_list = tag

    for line in body.strip().split('\n'):
        stripped = line.strip()

        if not stripped:
            flush_paragraph()
            close_list()
            continue

        h_match = re.match(r'^(#{1,6})\s+(.+)$', stripped)
        if h_match:
            flush_paragraph()
            close_list()
            level = len(h_match.group(1))
            html_lines.append(f'<h{level}>{inline_format(h_match.group(2))}</h{level}>')
            continue

        ul_match = re.match(r'^[-*]\s+(.+)$', stripped)
        if ul_match:
            flush_paragraph()
            open_new_list('ul')
            html_lines.append(f'<li>{inline_format(ul_match.group(1))}</li>')
            continue

        ol_match = re.match(r'^\d+\.\s+(.+)$', stripped)
        if ol_match:
            flush_paragraph()
            open_new_list('ol')
            html_lines.append(f'<li>{inline_format(ol_match.group(1))}</li>')
            continue

        close_list()
        paragraph_lines.append(stripped)

    flush_paragraph()
    close_list()
    return '\n'.join(html_lines)


def first_h1(text: str) -> str | None:
    match = H1_RE.search(text)
    if match:
        return html.unescape(strip_tags(match.group(1))).strip()
    return None


def load_record(path: str | Path) -> ContentRecord:
    """Read a draft from disk.

    Markdown files may carry YAML frontmatter (title, keyword, meta_title,
    description or meta_description, content_type) and are converted to
    HTML so heading and link tags are visible to the scorer. Anything else
    is treated as HTML.
    """
    path = Path(path)
    text = path.read_text()

    if path.suffix.lower() in (".md", ".markdown"):
        frontmatter, body_md = parse_frontmatter(text)
        body = markdown_to_html(body_md)
        title = frontmatter.get("title") or first_h1(body) or path.stem
        return ContentRecord(
            title=str(title),
            body=body,
            keyword=frontmatter.get("keyword"),
            meta_title=frontmatter.get("meta_title"),
            meta_description=frontmatter.get("meta_description") or frontmatter.get("description"),
            content_type=frontmatter.get("content_type", "article"),
        )

    return ContentRecord(title=first_h1(text) or path.stem, body=text)
