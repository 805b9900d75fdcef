"""
Configuration for the SEO content engine
"""

import logging
import os
from fractions import Fraction
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# ── Paths / environment ─────────────────────────────────────────────────────
ROOT_DIR = Path(__file__).resolve().parent
DATA_DIR = Path(os.getenv("CONTENT_ENGINE_HOME", ROOT_DIR / "data"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

SCORING = {
    "title": {
        # (min_len, max_len or None, points); first match wins
        "length_bands": [(50, 60, 40), (40, 70, 30), (30, None, 20)],
        "keyword_points": 40,
        # (max_index, points); first match wins
        "position_bands": [(10, 20), (30, 10)],
    },
    "meta_description": {
        "length_bands": [(150, 160, 50), (120, 170, 40), (100, None, 30)],
        "keyword_points": 30,
        "cta_points": 20,
        "cta_pattern": r"\b(learn|discover|find|get|download|try|start|explore)\b",
    },
    "keyword_density": {
        "no_keyword_score": 50,
        # (low, high, low_inclusive, score) in percent; first match wins
        "bands": [
            (1, 2, True, 100),
            (0.5, 3, True, 80),
            (0.2, 4, True, 60),
            (0, 5, False, 40),
        ],
        "fallback_score": 20,
    },
    "readability": {
        "base": 206.835,
        "sentence_factor": 1.015,
        "syllable_factor": 84.6,
        # (min_flesch, score); first match wins, anything lower gets the floor
        "bands": [(80, 100), (70, 90), (60, 80), (50, 70), (40, 60)],
        "floor": 50,
    },
    "headings": {
        "single_h1_points": 30,
        "multiple_h1_points": 10,
        "h2_range": (2, 8),
        "h2_range_points": 40,
        "h2_some_points": 30,
        "h3_points": 30,
    },
    "length": {
        # (min_words, max_words or None, score)
        "bands": [
            (1500, 3000, 100),
            (1000, 4000, 90),
            (800, None, 80),
            (500, None, 70),
            (300, None, 60),
        ],
        "fallback_score": 40,
    },
    "weights": {
        "title": Fraction(20, 100),
        "meta": Fraction(15, 100),
        "keyword": Fraction(20, 100),
        "readability": Fraction(15, 100),
        "heading": Fraction(15, 100),
        "length": Fraction(15, 100),
    },
    "thresholds": {
        "title": 80,
        "meta": 80,
        "keyword": 80,
        "readability": 70,
    },
}

RECOMMENDATIONS = {
    "title": {
        "type": "warning",
        "title": "Optimize Title Tag",
        "description": "Include your target keyword near the beginning and keep it between 50-60 characters.",
        "priority": "high",
    },
    "meta": {
        "type": "warning",
        "title": "Improve Meta Description",
        "description": "Write a compelling meta description (150-160 characters) that includes your target keyword.",
        "priority": "high",
    },
    "keyword": {
        "type": "info",
        "title": "Adjust Keyword Density",
        "description": "Aim for 1-2% keyword density throughout your content.",
        "priority": "medium",
    },
    "internal_links": {
        "type": "error",
        "title": "Add Internal Links",
        "description": "Include 2-3 internal links to related content to improve SEO and user experience.",
        "priority": "medium",
    },
    "readability": {
        "type": "info",
        "title": "Improve Readability",
        "description": "Use shorter sentences and simpler vocabulary to improve readability score.",
        "priority": "low",
    },
}

GENERATION = {
    "model": "claude-sonnet-4-5-20250929",
    "max_tokens": 4000,
    "temperature": 0.7,
    "fallback_title": "Complete Guide to {keyword}",
    "max_first_line_title": 200,
    # streamed chunks expected before progress saturates
    "stream_expected_chunks": 50,
    "stream_progress_cap": 95,
    "replay_chunk_words": 5,
}

CONTENT_TYPES = {
    "article": "In-depth article covering the topic from several angles",
    "guide": "Step-by-step guide that walks the reader through the topic",
    "review": "Balanced review with pros, cons and a clear verdict",
    "listicle": "Numbered list article with a short section per item",
    "tutorial": "Hands-on tutorial with concrete, reproducible steps",
}

WORDPRESS = {
    "posts_path": "/wp-json/wp/v2/posts",
    "me_path": "/wp-json/wp/v2/users/me",
    "categories_path": "/wp-json/wp/v2/categories",
    "tags_path": "/wp-json/wp/v2/tags",
    "excerpt_length": 200,
    "auth_types": ["oauth2", "jwt", "basic", "application_password"],
    "post_statuses": ["draft", "publish", "future"],
    "timeout": 30,
}

STORAGE = {
    "blob_dir": "blobs",
    "kv_file": "kv.json",
    "content_prefix": "content/",
    "id_prefix": "content_",
}

PREFERENCES = {
    "theme": "light",
    "default_ai_model": GENERATION["model"],
    "default_word_count": 2000,
    "auto_save_interval": 30,
}

DEBOUNCE = {
    "analysis_seconds": 0.5,
}


def configure_logging():
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
