from __future__ import annotations

from dataclasses import dataclass, field
from difflib import SequenceMatcher
from itertools import combinations
from pathlib import Path
import re

from .config import EffectiveConfig
from .corpus import Corpus, load_corpus, recipe_paths, slug_for
from .errors import MissingFileError
from .paths import resolve_site_paths


STOPWORDS = {"a", "an", "and", "for", "in", "kubernetes", "k8s", "of", "on", "the", "to", "with", "using", "how"}


@dataclass(frozen=True)
class DuplicatePair:
    first: str
    second: str
    score: float

    def format(self) -> str:
        return f"{self.score:.2f}  {self.first} <-> {self.second}"


@dataclass
class PruneResult:
    removed: list[Path] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    dangling: dict[str, list[str]] = field(default_factory=dict)


def normalize_title(title: str) -> str:
    words = re.findall(r"[a-z0-9]+", title.lower())
    return " ".join(word for word in words if word not in STOPWORDS)


def find_duplicates(corpus: Corpus, threshold: float = 0.85) -> list[DuplicatePair]:
    titles: dict[str, str] = {}
    for doc in corpus.documents:
        title = doc.frontmatter.get("title")
        if isinstance(title, str) and title.strip():
            titles[doc.slug] = normalize_title(title) or title.strip().lower()

    pairs: list[DuplicatePair] = []
    for (slug_a, title_a), (slug_b, title_b) in combinations(sorted(titles.items()), 2):
        if title_a == title_b:
            score = 1.0
        else:
            score = SequenceMatcher(None, title_a, title_b).ratio()
        if score >= threshold:
            pairs.append(DuplicatePair(slug_a, slug_b, round(score, 4)))

    pairs.sort(key=lambda pair: (-pair.score, pair.first, pair.second))
    return pairs


def prune_recipes(cfg: EffectiveConfig, slugs: list[str], dry_run: bool = False) -> PruneResult:
    recipes_dir = resolve_site_paths(cfg).recipes_dir
    by_slug: dict[str, list[Path]] = {}
    for path in recipe_paths(recipes_dir):
        by_slug.setdefault(slug_for(path, recipes_dir), []).append(path)

    result = PruneResult()
    pruned: set[str] = set()
    for slug in dict.fromkeys(slugs):
        paths = by_slug.get(slug)
        if not paths:
            result.missing.append(slug)
            continue
        pruned.add(slug)
        for path in paths:
            if not dry_run:
                try:
                    path.unlink()
                except OSError as exc:
                    raise MissingFileError(f"Failed to remove {path}") from exc
            result.removed.append(path)

    if pruned:
        result.dangling = _dangling_references(load_corpus(cfg), pruned)
    return result


def _dangling_references(corpus: Corpus, pruned: set[str]) -> dict[str, list[str]]:
    dangling: dict[str, list[str]] = {}
    for target, sources in corpus.backlinks().items():
        if target not in pruned:
            continue
        remaining = [src for src in sources if src not in pruned]
        if remaining:
            dangling[target] = remaining
    return dangling
