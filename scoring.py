"""
SEO Scoring Engine for content records.

Pure functions only: every score is recomputed from the record it is given,
nothing is cached and nothing is written anywhere.
"""

import math
import re
from dataclasses import dataclass, field
from fractions import Fraction

from config import RECOMMENDATIONS, SCORING

TAG_RE = re.compile(r'<[^>]*>')
SENTENCE_SPLIT_RE = re.compile(r'[.!?]+')
ANCHOR_RE = re.compile(r'<a[^>]*href=[^>]*>', re.IGNORECASE)
CTA_RE = re.compile(SCORING["meta_description"]["cta_pattern"], re.IGNORECASE | re.ASCII)
HEADING_RES = {
    level: re.compile(rf'<{level}[^>]*>', re.IGNORECASE)
    for level in ("h1", "h2", "h3")
}


@dataclass
class Recommendation:
    type: str
    title: str
    description: str
    priority: str


@dataclass
class SEOMetrics:
    keyword_density: float
    title_optimization: int
    meta_description: int
    heading_structure: str
    readability_score: int
    internal_links: int


@dataclass
class SEOAnalysis:
    overall_score: int
    title_score: int
    meta_score: int
    keyword_score: int
    readability_score: int
    heading_score: int
    length_score: int
    metrics: SEOMetrics
    suggestions: list[Recommendation] = field(default_factory=list)

    def sub_scores(self) -> dict[str, int]:
        return {
            "title": self.title_score,
            "meta": self.meta_score,
            "keyword": self.keyword_score,
            "readability": self.readability_score,
            "heading": self.heading_score,
            "length": self.length_score,
        }

    def to_dict(self) -> dict:
        return {
            "overall_score": self.overall_score,
            "title_score": self.title_score,
            "meta_score": self.meta_score,
            "keyword_score": self.keyword_score,
            "readability_score": self.readability_score,
            "heading_score": self.heading_score,
            "length_score": self.length_score,
            "metrics": {
                "keyword_density": round(self.metrics.keyword_density, 2),
                "title_optimization": self.metrics.title_optimization,
                "meta_description": self.metrics.meta_description,
                "heading_structure": self.metrics.heading_structure,
                "readability_score": self.metrics.readability_score,
                "internal_links": self.metrics.internal_links,
            },
            "suggestions": [
                {
                    "type": s.type,
                    "title": s.title,
                    "description": s.description,
                    "priority": s.priority,
                }
                for s in self.suggestions
            ],
        }

    def summary(self) -> str:
        lines = [f"═══ SEO SCORE: {self.overall_score}/100 ═══", ""]
        for name, score in self.sub_scores().items():
            bar_len = score // 5
            bar = "█" * bar_len + "░" * (20 - bar_len)
            lines.append(f"  {name:<14} {bar} {score}")
        lines.append("")
        lines.append(f"  Keyword density:   {self.metrics.keyword_density:.2f}%")
        lines.append(f"  Heading structure: {self.metrics.heading_structure}")
        lines.append(f"  Internal links:    {self.metrics.internal_links}")
        if self.suggestions:
            lines.append("")
            lines.append("  SUGGESTIONS:")
            for s in self.suggestions:
                lines.append(f"    [{s.type}/{s.priority}] {s.title}: {s.description}")
        return "\n".join(lines)


# ── Text metrics ─────────────────────────────────────────────────────────────

def strip_tags(text: str) -> str:
    return TAG_RE.sub('', text)


def split_words(text: str) -> list[str]:
    return strip_tags(text).split()


def count_words(text: str) -> int:
    return len(split_words(text))


def count_sentences(text: str) -> int:
    return len([s for s in SENTENCE_SPLIT_RE.split(strip_tags(text)) if s.strip()])


def count_syllables(text: str) -> int:
    """Rough syllable estimate for a whole text, not a dictionary lookup.

    Letters only, vowel runs collapsed to a single marker, one trailing
    marker dropped; what is left is counted. Never less than 1.
    """
    letters = re.sub(r'[^a-z]', '', text.lower())
    collapsed = re.sub(r'[aeiouy]+', 'a', letters)
    collapsed = re.sub(r'a\Z', '', collapsed)
    return len(collapsed) or 1


def count_headings(text: str) -> dict[str, int]:
    return {level: len(pattern.findall(text)) for level, pattern in HEADING_RES.items()}


def count_internal_links(text: str) -> int:
    links = ANCHOR_RE.findall(text)
    return len([link for link in links if 'http' not in link or 'localhost' in link])


def keyword_density(text: str, keyword: str | None) -> float:
    """Percentage of words that contain the keyword as a substring."""
    if not keyword:
        return 0.0
    words = strip_tags(text).lower().split()
    if not words:
        return 0.0
    kw_lower = keyword.lower()
    hits = len([w for w in words if kw_lower in w])
    return (hits / len(words)) * 100


def heading_structure(text: str) -> str:
    headings = count_headings(text)
    if headings["h1"] == 1 and headings["h2"] >= 2:
        return "Good"
    if headings["h1"] == 1 and headings["h2"] >= 1:
        return "Fair"
    return "Poor"


def _in_band(value: float, low: float, high: float | None) -> bool:
    return value >= low and (high is None or value <= high)


# ── Sub-scorers ──────────────────────────────────────────────────────────────

def score_title(title: str, keyword: str | None = None) -> int:
    cfg = SCORING["title"]
    if not title:
        return 0
    score = 0
    for low, high, points in cfg["length_bands"]:
        if _in_band(len(title), low, high):
            score += points
            break

    if keyword and keyword.lower() in title.lower():
        score += cfg["keyword_points"]
        index = title.lower().find(keyword.lower())
        for max_index, points in cfg["position_bands"]:
            if index <= max_index:
                score += points
                break
    return min(score, 100)


def score_meta_description(meta_description: str | None, keyword: str | None = None) -> int:
    cfg = SCORING["meta_description"]
    if not meta_description:
        return 0
    score = 0
    for low, high, points in cfg["length_bands"]:
        if _in_band(len(meta_description), low, high):
            score += points
            break

    if keyword and keyword.lower() in meta_description.lower():
        score += cfg["keyword_points"]

    if CTA_RE.search(meta_description):
        score += cfg["cta_points"]
    return min(score, 100)


def score_keyword_density(body: str, keyword: str | None = None) -> int:
    cfg = SCORING["keyword_density"]
    if not keyword:
        return cfg["no_keyword_score"]
    density = keyword_density(body, keyword)
    # bands overlap on purpose: the narrower, earlier band wins
    for low, high, low_inclusive, score in cfg["bands"]:
        above_low = density >= low if low_inclusive else density > low
        if above_low and density <= high:
            return score
    return cfg["fallback_score"]


def flesch_reading_ease(body: str) -> float | None:
    plain = strip_tags(body)
    sentences = count_sentences(plain)
    words = count_words(plain)
    if sentences == 0 or words == 0:
        return None
    cfg = SCORING["readability"]
    avg_words_per_sentence = words / sentences
    syllables = count_syllables(plain)
    return (cfg["base"]
            - (cfg["sentence_factor"] * avg_words_per_sentence)
            - (cfg["syllable_factor"] * (syllables / words)))


def score_readability(body: str) -> int:
    cfg = SCORING["readability"]
    flesch = flesch_reading_ease(body)
    if flesch is None:
        return 0
    for min_flesch, score in cfg["bands"]:
        if flesch >= min_flesch:
            return score
    return cfg["floor"]


def score_headings(body: str) -> int:
    cfg = SCORING["headings"]
    headings = count_headings(body)
    score = 0

    if headings["h1"] == 1:
        score += cfg["single_h1_points"]
    elif headings["h1"] > 1:
        score += cfg["multiple_h1_points"]

    h2_min, h2_max = cfg["h2_range"]
    if h2_min <= headings["h2"] <= h2_max:
        score += cfg["h2_range_points"]
    elif headings["h2"] >= 1:
        score += cfg["h2_some_points"]

    if headings["h3"] > 0:
        score += cfg["h3_points"]
    return min(score, 100)


def score_length(body: str) -> int:
    cfg = SCORING["length"]
    wc = count_words(body)
    for low, high, score in cfg["bands"]:
        if _in_band(wc, low, high):
            return score
    return cfg["fallback_score"]


# ── Aggregation and suggestions ──────────────────────────────────────────────

def overall_score(sub_scores: dict[str, int]) -> int:
    weights = SCORING["weights"]
    total = sum(weights[name] * sub_scores[name] for name in weights)
    # exact rational total, rounded half up
    return math.floor(total + Fraction(1, 2))


def generate_suggestions(analysis: SEOAnalysis) -> list[Recommendation]:
    thresholds = SCORING["thresholds"]
    gates = [
        ("title", analysis.title_score < thresholds["title"]),
        ("meta", analysis.meta_score < thresholds["meta"]),
        ("keyword", analysis.keyword_score < thresholds["keyword"]),
        ("internal_links", analysis.metrics.internal_links == 0),
        ("readability", analysis.readability_score < thresholds["readability"]),
    ]
    return [Recommendation(**RECOMMENDATIONS[name]) for name, fired in gates if fired]


def analyze_seo(record) -> SEOAnalysis:
    """Score a content record.

    `record` needs `title`, `body`, `keyword` and `meta_description`
    attributes; missing or empty values fall into the zero/neutral bands.
    """
    title = record.title or ""
    body = record.body or ""
    keyword = record.keyword or None
    meta = record.meta_description or None

    title_score = score_title(title, keyword)
    meta_score = score_meta_description(meta, keyword)
    readability = score_readability(body)

    analysis = SEOAnalysis(
        overall_score=0,
        title_score=title_score,
        meta_score=meta_score,
        keyword_score=score_keyword_density(body, keyword),
        readability_score=readability,
        heading_score=score_headings(body),
        length_score=score_length(body),
        metrics=SEOMetrics(
            keyword_density=keyword_density(body, keyword),
            title_optimization=title_score,
            meta_description=meta_score,
            heading_structure=heading_structure(body),
            readability_score=readability,
            internal_links=count_internal_links(body),
        ),
    )
    analysis.overall_score = overall_score(analysis.sub_scores())
    analysis.suggestions = generate_suggestions(analysis)
    return analysis
