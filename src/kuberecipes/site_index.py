from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
import json
from pathlib import Path
import sys
from typing import Any

from .config import EffectiveConfig
from .corpus import Corpus, load_corpus
from .domain import extract_sections
from .errors import ValidationError
from .paths import resolve_site_paths
from .schema import RecipeMeta, coerce_meta
from .validate import validate_recipe


@dataclass(frozen=True)
class IndexResult:
    path: Path
    count: int
    data: dict[str, Any]


def build_index(
    cfg: EffectiveConfig,
    include_drafts: bool = False,
    dry_run: bool = False,
    verbose: bool = False,
) -> IndexResult:
    paths = resolve_site_paths(cfg)
    corpus = load_corpus(cfg)
    if corpus.failures:
        raise ValidationError(corpus.failures[min(corpus.failures)])
    duplicates = corpus.duplicate_slugs()
    if duplicates:
        slug, dupes = next(iter(duplicates.items()))
        names = ", ".join(path.name for path in dupes)
        raise ValidationError(f"{dupes[0]}: [duplicate-slug] slug {slug!r} is defined by {names}")

    known = corpus.known_slugs
    metas: dict[str, RecipeMeta] = {}
    for doc in corpus.documents:
        text = doc.path.read_text(encoding="utf-8")
        validate_recipe(text, str(doc.path), known, cfg.lint, slug=doc.slug)
        meta = coerce_meta(doc.frontmatter, str(doc.path))
        if meta.draft and not include_drafts:
            if verbose:
                print(f"skip draft: {doc.slug}", file=sys.stderr)
            continue
        metas[doc.slug] = meta

    data = render_index(corpus, metas, cfg.site_url)
    if not dry_run:
        paths.build_dir.mkdir(parents=True, exist_ok=True)
        paths.index_path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
        if verbose:
            print(f"wrote {len(metas)} recipe(s) to {paths.index_path}", file=sys.stderr)

    return IndexResult(path=paths.index_path, count=len(metas), data=data)


def render_index(corpus: Corpus, metas: dict[str, RecipeMeta], site_url: str) -> dict[str, Any]:
    backlinks = corpus.backlinks()
    ordered = sorted(metas.items(), key=lambda item: item[0])
    ordered.sort(key=lambda item: item[1].publish_date, reverse=True)

    recipes: list[dict[str, Any]] = []
    tags: dict[str, list[str]] = {}
    categories: dict[str, list[str]] = {}
    for slug, meta in ordered:
        doc = corpus.get(slug)
        entry = meta.to_frontmatter()
        entry["slug"] = slug
        entry["url"] = recipe_url(site_url, meta.category, slug)
        entry["backlinks"] = [src for src in backlinks.get(slug, []) if src in metas]
        entry["sections"] = list(extract_sections(doc.body)) if doc else []
        recipes.append(entry)
        for tag in dict.fromkeys(meta.tags):
            tags.setdefault(tag, []).append(slug)
        categories.setdefault(meta.category, []).append(slug)

    return {
        "site": site_url,
        "generated": datetime.now(timezone.utc).isoformat(timespec="seconds"),
        "recipes": recipes,
        "tags": {tag: sorted(slugs) for tag, slugs in sorted(tags.items())},
        "categories": {name: sorted(slugs) for name, slugs in sorted(categories.items())},
    }


def recipe_url(site_url: str, category: str, slug: str) -> str:
    base = site_url.rstrip("/")
    return f"{base}/recipes/{category}/{slug}/"
