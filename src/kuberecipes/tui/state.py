from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class RecipeInfo:
    slug: str
    title: str
    path: Path
    category: str | None = None
    difficulty: str | None = None
    tags: list[str] = field(default_factory=list)
    draft: bool = False

    def display(self) -> str:
        marker = " (draft)" if self.draft else ""
        category = f"[{self.category}] " if self.category else ""
        return f"{category}{self.title}{marker}"
