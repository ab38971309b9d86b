"""Line-level front matter handling for markdown articles.

Blocks are kept as raw text rather than round-tripped through a YAML dumper so
that every field other than ``summary`` keeps its exact formatting. PyYAML is
only used to decode scalar values.
"""
from __future__ import annotations

import re
from typing import List, Optional, Tuple

import yaml

_FRONT_MATTER_DELIMITER = "---"
_SUMMARY_FIELD = "summary"

_BLOCK_RE = re.compile(r"---\r?\n(?:.*?\r?\n)??---[ \t]*(?:\r?\n|\Z)", re.DOTALL)
_BLANK_LINES_RE = re.compile(r"(?:[ \t]*\r?\n)*")
_SUMMARY_LINE_RE = re.compile(r"^summary\s*:\s*(?P<value>.*)$", re.IGNORECASE)
_TITLE_LINE_RE = re.compile(r"^title\s*:\s*(?P<value>.*)$", re.IGNORECASE)
_BLOCK_SCALAR_RE = re.compile(r"^[|>][+-]?\d*\s*(?:#.*)?$")

_YAML_KEY_RE = re.compile(r"^\s*[A-Za-z_][\w-]*\s*:")
_YAML_LIST_ITEM_RE = re.compile(r"^\s*-\s+\S")
_YAML_COMMENT_RE = re.compile(r"^\s*#")
_CODE_FENCE_RE = re.compile(r"^\s*```")


def split_front_matter(content: str) -> Tuple[str, str]:
    """Return ``(block, body)`` for a markdown document.

    The block includes both delimiters and the line break after the closing one.
    Two adjacent blocks, a known artifact of older writers, are merged into one.
    Documents without front matter yield an empty block and the full text as body.
    """
    if content.startswith("\ufeff"):
        content = content[1:]
    first = _BLOCK_RE.match(content)
    if not first:
        return "", content

    block = first.group(0)
    tail = content[first.end():]
    gap = _BLANK_LINES_RE.match(tail)
    second = _BLOCK_RE.match(tail, gap.end() if gap else 0)
    if second:
        block = merge_front_matter_blocks(block, second.group(0))
        tail = tail[second.end():]
    return block, tail


def join_front_matter(block: str, body: str) -> str:
    if not block:
        return body
    if not block.endswith("\n"):
        block = f"{block}{_line_ending(block)}"
    return block + body


def merge_front_matter_blocks(first: str, second: str) -> str:
    """Concatenate the inner lines of two blocks, dropping any ``summary`` entries."""
    lines = _without_summary(_inner_lines(first)) + _without_summary(_inner_lines(second))
    return _render_block(lines, _line_ending(first))


def read_summary(block: str) -> Optional[str]:
    """Return the top-level ``summary`` value, or ``None`` when the key is absent."""
    lines = _inner_lines(block)
    for idx, line in enumerate(lines):
        match = _SUMMARY_LINE_RE.match(line)
        if not match:
            continue
        value = match.group("value")
        if _BLOCK_SCALAR_RE.match(value.strip()):
            return _decode_block_scalar(line, _continuation(lines, idx + 1))
        return _decode_scalar(value)
    return None


def has_summary(block: str) -> bool:
    return read_summary(block) is not None


def read_title(block: str) -> str:
    inner = _inner_lines(block)
    if not inner:
        return ""
    try:
        metadata = yaml.safe_load("\n".join(inner))
    except yaml.YAMLError:
        metadata = None
    if isinstance(metadata, dict):
        title = metadata.get("title")
        return str(title).strip() if title is not None else ""

    for line in inner:
        match = _TITLE_LINE_RE.match(line)
        if match:
            return _decode_scalar(match.group("value"))
    return ""


def upsert_summary(block: str, summary: str) -> str:
    """Place ``summary`` as the last field of ``block`` and drop stray non-YAML lines.

    An existing ``summary`` entry is removed together with its indented
    continuation lines, so a folded or literal scalar never leaks into the
    preceding key. The block's own line ending is kept.
    """
    summary_line = f"{_SUMMARY_FIELD}: {quote_scalar(summary)}"
    if not block:
        return _render_block([summary_line], "\n")

    kept: List[str] = []
    for line in _without_summary(_inner_lines(block)):
        if _CODE_FENCE_RE.match(line):
            continue
        if _is_yaml_line(line) or (kept and line[:1] in (" ", "\t")):
            kept.append(line)
    kept.append(summary_line)
    return _render_block(kept, _line_ending(block))


def quote_scalar(text: str) -> str:
    escaped = (text or "").replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _without_summary(lines: List[str]) -> List[str]:
    """Drop top-level ``summary`` keys and the indented or blank lines under them."""
    kept: List[str] = []
    in_summary = False
    for line in lines:
        if _SUMMARY_LINE_RE.match(line):
            in_summary = True
            continue
        if in_summary and (not line.strip() or line[:1] in (" ", "\t")):
            continue
        in_summary = False
        kept.append(line)
    return kept


def _continuation(lines: List[str], start: int) -> List[str]:
    collected: List[str] = []
    for line in lines[start:]:
        if line.strip() and line[:1] not in (" ", "\t"):
            break
        collected.append(line)
    return collected


def _is_yaml_line(line: str) -> bool:
    return bool(
        not line.strip()
        or _YAML_KEY_RE.match(line)
        or _YAML_LIST_ITEM_RE.match(line)
        or _YAML_COMMENT_RE.match(line)
    )


def _inner_lines(block: str) -> List[str]:
    lines = block.splitlines()
    if not lines or lines[0].strip() != _FRONT_MATTER_DELIMITER:
        return []
    for idx in range(1, len(lines)):
        if lines[idx].strip() == _FRONT_MATTER_DELIMITER:
            return lines[1:idx]
    return lines[1:]


def _line_ending(block: str) -> str:
    return "\r\n" if "\r\n" in block else "\n"


def _render_block(lines: List[str], newline: str) -> str:
    return newline.join([_FRONT_MATTER_DELIMITER, *lines, _FRONT_MATTER_DELIMITER]) + newline


def _decode_block_scalar(key_line: str, continuation: List[str]) -> str:
    try:
        decoded = yaml.safe_load("\n".join([key_line, *continuation]))
    except yaml.YAMLError:
        decoded = None
    if isinstance(decoded, dict):
        value = next(iter(decoded.values()), None)
        if isinstance(value, str):
            return value.strip()
    return " ".join(line.strip() for line in continuation if line.strip())


def _decode_scalar(raw: str) -> str:
    value = raw.strip()
    if value[:1] in ('"', "'"):
        try:
            decoded = yaml.safe_load(value)
        except yaml.YAMLError:
            decoded = None
        if isinstance(decoded, str):
            return decoded.strip()
        return value.strip("\"'").strip()
    return value
