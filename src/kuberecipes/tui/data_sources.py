from __future__ import annotations

from difflib import SequenceMatcher
from pathlib import Path

from ..config import EffectiveConfig, LintSettings
from ..domain import extract_sections, split_frontmatter
from ..lint import lint_text
from ..listing import list_recipes
from .state import RecipeInfo


def load_recipes(cfg: EffectiveConfig) -> list[RecipeInfo]:
    recipes: list[RecipeInfo] = []
    for rec in list_recipes(cfg, None, None, include_drafts=True):
        path = Path(rec.get("path", ""))
        recipes.append(
            RecipeInfo(
                slug=str(rec.get("slug")),
                title=str(rec.get("title") or path.stem),
                path=path,
                category=None if rec.get("category") is None else str(rec.get("category")),
                difficulty=None if rec.get("difficulty") is None else str(rec.get("difficulty")),
                tags=list(rec.get("tags") or []),
                draft=bool(rec.get("draft")),
            )
        )
    return recipes


def unique_tags(recipes: list[RecipeInfo]) -> list[str]:
    found: set[str] = set()
    for rec in recipes:
        found.update(rec.tags)
    return sorted(tag for tag in found if tag)


def fuzzy_filter(items: list[object], query: str, key) -> list[object]:
    q = query.strip().lower()
    if not q:
        return items

    scored: list[tuple[float, object]] = []
    for item in items:
        text = str(key(item)).lower()
        score = 1.0 if q in text else SequenceMatcher(None, q, text).ratio()
        if score >= 0.2:
            scored.append((score, item))

    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [item for _, item in scored]


def filter_recipes(recipes: list[RecipeInfo], tag: str | None, query: str) -> list[RecipeInfo]:
    if tag:
        recipes = [rec for rec in recipes if tag in rec.tags]
    if query:
        recipes = fuzzy_filter(recipes, query, lambda rec: f"{rec.title} {rec.slug}")
    return recipes


def recipe_details(
    recipe: RecipeInfo,
    backlinks: dict[str, list[str]],
    known_slugs: set[str],
    settings: LintSettings | None = None,
) -> str:
    try:
        text = recipe.path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return f"{recipe.path}: cannot read file ({exc.__class__.__name__})"

    doc = split_frontmatter(text)
    front = doc.frontmatter
    lines = [
        str(front.get("title") or recipe.title),
        "",
        str(front.get("description") or ""),
        "",
        f"slug:        {recipe.slug}",
        f"category:    {front.get('category', '-')}",
        f"difficulty:  {front.get('difficulty', 'intermediate')}",
        f"time:        {front.get('timeToComplete', '15 minutes')}",
        f"kubernetes:  {front.get('kubernetesVersion', '1.28+')}",
        f"tags:        {', '.join(recipe.tags) or '-'}",
    ]

    related = front.get("relatedRecipes")
    if isinstance(related, list) and related:
        lines.append(f"related:     {', '.join(str(item) for item in related)}")
    sources = backlinks.get(recipe.slug, [])
    if sources:
        lines.append(f"linked from: {', '.join(sources)}")

    sections = list(extract_sections(doc.body))
    if sections:
        lines.append("")
        lines.append("Sections")
        lines.extend(f"  - {name}" for name in sections)

    issues = lint_text(text, str(recipe.path), known_slugs, settings, slug=recipe.slug)
    lines.append("")
    if issues:
        lines.append(f"Lint ({len(issues)})")
        for issue in issues:
            where = f"L{issue.line} " if issue.line else ""
            lines.append(f"  {issue.severity}: {where}[{issue.rule}] {issue.message}")
    else:
        lines.append("Lint: clean")
    return "\n".join(lines)
