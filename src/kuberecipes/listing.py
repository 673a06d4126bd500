from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any, Optional

from .config import EffectiveConfig
from .corpus import recipe_paths, slug_for
from .domain import normalize_tags, split_frontmatter
from .paths import resolve_site_paths
from .schema import parse_date


def list_recipes(
    cfg: EffectiveConfig,
    tag: Optional[str],
    category: Optional[str],
    difficulty: Optional[str] = None,
    include_drafts: bool = False,
) -> list[dict[str, Any]]:
    recipes_dir = resolve_site_paths(cfg).recipes_dir
    recipes: list[dict[str, Any]] = []

    for path in recipe_paths(recipes_dir):
        data = _parse_frontmatter(path)
        if not data:
            continue
        draft = data.get("draft") is True
        if draft and not include_drafts:
            continue
        tags = normalize_tags(data.get("tags"))
        if tag and tag not in tags:
            continue
        if category and str(data.get("category", "")).lower() != category.lower():
            continue
        if difficulty and str(data.get("difficulty", "intermediate")).lower() != difficulty.lower():
            continue
        published = parse_date(data.get("publishDate"))
        recipes.append(
            {
                "slug": slug_for(path, recipes_dir),
                "title": _text(data.get("title")),
                "path": str(path),
                "category": _text(data.get("category")),
                "difficulty": _text(data.get("difficulty", "intermediate")),
                "tags": tags,
                "draft": draft,
                "publishDate": published.isoformat() if published else None,
            }
        )
    recipes.sort(key=lambda rec: rec["slug"])
    return recipes


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _parse_frontmatter(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return {}
    return split_frontmatter(text).frontmatter
