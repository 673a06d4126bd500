from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Any

import yaml

from ..errors import ValidationError
from .models import CodeBlock


FRONTMATTER_RE = re.compile(r"^\ufeff?---\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)", re.DOTALL)
FENCE_RE = re.compile(r"^( {0,3})(`{3,}|~{3,})(.*)$")


@dataclass(frozen=True)
class MarkdownDocument:
    frontmatter: dict[str, Any]
    body: str
    body_line: int = 1


def split_frontmatter(md: str) -> MarkdownDocument:
    match = FRONTMATTER_RE.match(md)
    if not match:
        return MarkdownDocument(frontmatter={}, body=md)

    try:
        data = yaml.safe_load(match.group(1) or "") or {}
    except yaml.YAMLError:
        data = {}

    if not isinstance(data, dict):
        data = {}

    return MarkdownDocument(frontmatter=data, body=md[match.end() :], body_line=_body_line(md, match))


def read_frontmatter(md: str, source_path: str) -> MarkdownDocument:
    """Strict variant of :func:`split_frontmatter`.

    Raises ``ValidationError`` when the frontmatter block is absent, is not
    valid YAML, or does not hold a mapping.
    """
    match = FRONTMATTER_RE.match(md)
    if not match:
        raise ValidationError(f"{source_path}: missing YAML frontmatter")

    try:
        data = yaml.safe_load(match.group(1) or "")
    except yaml.YAMLError as exc:
        raise ValidationError(f"{source_path}: invalid YAML frontmatter") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError(f"{source_path}: frontmatter must be a mapping")

    return MarkdownDocument(frontmatter=data, body=md[match.end() :], body_line=_body_line(md, match))


def _body_line(md: str, match: re.Match[str]) -> int:
    return md.count("\n", 0, match.end()) + 1


def scan_code_blocks(body: str, first_line: int = 1) -> list[CodeBlock]:
    blocks: list[CodeBlock] = []
    fence: str | None = None
    info = ""
    start = 0
    content: list[str] = []

    for offset, line in enumerate(body.splitlines()):
        match = FENCE_RE.match(line)
        if fence is None:
            if not match:
                continue
            marker, rest = match.group(2), match.group(3).strip()
            if marker.startswith("`") and "`" in rest:
                continue
            fence, info, start, content = marker, rest, first_line + offset, []
            continue

        if match and match.group(2)[0] == fence[0] and len(match.group(2)) >= len(fence) and not match.group(3).strip():
            blocks.append(CodeBlock(_language(info), info, "\n".join(content), start))
            fence = None
            continue
        content.append(line)

    if fence is not None:
        blocks.append(CodeBlock(_language(info), info, "\n".join(content), start, closed=False))
    return blocks


def _language(info: str) -> str | None:
    if not info:
        return None
    token = info.split()[0].strip("{}").lstrip(".")
    return token.lower() or None


def extract_sections(md: str, heading_level: int = 2) -> dict[str, str]:
    prefix = "#" * heading_level + " "
    sections: dict[str, list[str]] = {}
    current: str | None = None
    in_fence = False

    for line in md.splitlines():
        if FENCE_RE.match(line):
            in_fence = not in_fence
        if not in_fence and line.startswith(prefix):
            current = line[len(prefix) :].strip()
            sections[current] = []
            continue
        if current is not None:
            sections[current].append(line)

    return {name: "\n".join(lines).strip() for name, lines in sections.items()}


def normalize_tags(tags: Any) -> list[str]:
    if isinstance(tags, list):
        return [str(tag) for tag in tags]
    if isinstance(tags, str):
        return [tags]
    return []
