"""Text cleanup that turns article bodies into one-sentence summaries."""
from __future__ import annotations

import re
from typing import List, Tuple

SUMMARY_MAX_LEN = 500

_MARKUP_RULES: List[Tuple[re.Pattern[str], str]] = [
    (re.compile(r"```[\s\S]*?```"), ""),
    (re.compile(r"`[^`]*`"), ""),
    (re.compile(r"!\[[^\]]*\]\([^)]+\)"), ""),
    (re.compile(r"\[([^\]]+)\]\([^)]+\)"), r"\1"),
    (re.compile(r"\*{1,3}([^*\n]+)\*{1,3}"), r"\1"),
    (re.compile(r"__([^_\n]+)__"), r"\1"),
    (re.compile(r"(?<!\w)_([^_\n]+)_(?!\w)"), r"\1"),
    (re.compile(r"^[ \t]*#{1,6}[^\n]*(?:\n|\Z)", re.MULTILINE), ""),
    (re.compile(r"^[ \t]*>\s*", re.MULTILINE), ""),
    (re.compile(r"^[ \t]*[-*+]\s+", re.MULTILINE), ""),
    (re.compile(r"^[ \t]*\d+\.\s+", re.MULTILINE), ""),
    (re.compile(r"<[^>]+>"), ""),
    (re.compile(r"\s+"), " "),
]

# Punctuation is folded into full-width marks in this order; ";" has already
# become a terminator by the time the separator rule runs.
_PUNCTUATION_RULES: List[Tuple[re.Pattern[str], str]] = [
    (re.compile(r"[.;]+"), "。"),
    (re.compile(r"[!?]+"), "！"),
    (re.compile(r"[,，]+"), "，"),
    (re.compile(r"[:：]+"), "："),
    (re.compile(r"[;；]+"), "；"),
]
_DECORATIVE = re.compile(r"[\"'`~^_*@#$%&+=<>()\[\]{}（）【】|\\/]")
_AROUND_FULLWIDTH = re.compile(r"\s*([，、：；。！？])\s*")
_TERMINATORS = re.compile(r"[。！？!?…]+")
_TRAILING_SEPARATORS = re.compile(r"[，、：；\s]+$")

_CODE_KEYWORDS = re.compile(r"\b(import|export|const|let|var|function|interface|class|return|new)\b")


def strip_markup(text: str) -> str:
    """Remove markdown/HTML noise and collapse whitespace to single spaces."""
    if not text:
        return ""
    cleaned = str(text)
    for pattern, replacement in _MARKUP_RULES:
        cleaned = pattern.sub(replacement, cleaned)
    return cleaned.strip()


def to_declarative_sentence(text: str, max_len: int = SUMMARY_MAX_LEN) -> str:
    """Fold ``text`` into one sentence of at most ``max_len`` characters ending in ``。``.

    Sentence boundaries become ``，`` so that multiple sentences read as a single
    clause. Empty input yields an empty string; callers supply their own fallback.
    """
    if max_len < 1:
        raise ValueError("max_len must be a positive integer")
    if not text or not text.strip():
        return ""

    # Newlines and tabs would split the quoted scalar written to front matter.
    sentence = re.sub(r"\s+", " ", str(text))
    for pattern, replacement in _PUNCTUATION_RULES:
        sentence = pattern.sub(replacement, sentence)
    sentence = _DECORATIVE.sub("", sentence)
    sentence = _AROUND_FULLWIDTH.sub(r"\1", sentence)

    clauses = [part.strip() for part in _TERMINATORS.split(sentence)]
    merged = "，".join(part for part in clauses if part)
    merged = re.sub(r" {2,}", " ", merged)
    merged = re.sub(r"，{2,}", "，", merged).strip()

    merged = merged[: max_len - 1]
    merged = _TRAILING_SEPARATORS.sub("", merged)
    if not merged and max_len > 1:
        return ""
    return merged if merged.endswith("。") else f"{merged}。"


def looks_like_code(text: str) -> bool:
    """Return True when ``text`` scores two or more on simple source-code signals."""
    if not text:
        return False
    score = 0
    if re.search(r"```[\s\S]*?```", text):
        score += 2
    if re.search(r"`[^`]+`", text):
        score += 1
    if _CODE_KEYWORDS.search(text):
        score += 2
    if re.search(r"\w+\s*=>", text):
        score += 1
    if re.search(r"\w+\.\w+", text):
        score += 1
    if len(re.findall(r"[{}();\[\]]", text)) >= 3:
        score += 1
    return score >= 2


def limit_body(body: str, max_chars: int) -> str:
    if max_chars <= 0:
        return body
    return body[:max_chars]


def preview_text(text: str, max_chars: int = 120) -> str:
    """Single-line preview used in prompts and log messages."""
    collapsed = re.sub(r"\s+", " ", text or "").strip()
    if len(collapsed) > max_chars:
        return collapsed[:max_chars] + "…"
    return collapsed
