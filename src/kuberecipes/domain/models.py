from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class CodeBlock:
    language: str | None
    info: str
    content: str
    line: int
    closed: bool = True


@dataclass(frozen=True)
class RecipeDocument:
    path: Path
    slug: str
    frontmatter: dict[str, Any]
    body: str
    body_line: int = 1

