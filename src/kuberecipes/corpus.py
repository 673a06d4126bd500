from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .config import EffectiveConfig
from .domain import RecipeDocument, read_frontmatter
from .errors import KubeRecipesError, MissingFileError
from .paths import resolve_site_paths
from .schema import RecipeMeta, coerce_meta


RECIPE_SUFFIXES = (".md", ".mdx")


@dataclass
class Corpus:
    recipes_dir: Path
    documents: list[RecipeDocument] = field(default_factory=list)
    failures: dict[Path, str] = field(default_factory=dict)

    @property
    def slugs(self) -> set[str]:
        return {doc.slug for doc in self.documents}

    @property
    def known_slugs(self) -> set[str]:
        return self.slugs | {slug_for(path, self.recipes_dir) for path in self.failures}

    def get(self, slug: str) -> RecipeDocument | None:
        for doc in self.documents:
            if doc.slug == slug:
                return doc
        return None

    def duplicate_slugs(self) -> dict[str, list[Path]]:
        by_slug: dict[str, list[Path]] = {}
        for doc in self.documents:
            by_slug.setdefault(doc.slug, []).append(doc.path)
        return {slug: paths for slug, paths in sorted(by_slug.items()) if len(paths) > 1}

    def metas(self) -> dict[str, RecipeMeta]:
        out: dict[str, RecipeMeta] = {}
        for doc in self.documents:
            try:
                out[doc.slug] = coerce_meta(doc.frontmatter, str(doc.path))
            except KubeRecipesError:
                continue
        return out

    def backlinks(self) -> dict[str, list[str]]:
        links: dict[str, set[str]] = {}
        for doc in self.documents:
            related = doc.frontmatter.get("relatedRecipes")
            if not isinstance(related, list):
                continue
            for target in related:
                if isinstance(target, str) and target != doc.slug:
                    links.setdefault(target, set()).add(doc.slug)
        return {slug: sorted(sources) for slug, sources in sorted(links.items())}


def recipe_paths(recipes_dir: Path) -> list[Path]:
    if not recipes_dir.exists():
        return []
    return sorted(path for path in recipes_dir.rglob("*") if path.is_file() and path.suffix in RECIPE_SUFFIXES)


def slug_for(path: Path, recipes_dir: Path) -> str:
    rel = path.relative_to(recipes_dir)
    return rel.with_suffix("").as_posix()


def load_recipe(path: Path, recipes_dir: Path) -> RecipeDocument:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise MissingFileError(f"Recipe not readable: {path}") from exc

    doc = read_frontmatter(text, str(path))
    return RecipeDocument(
        path=path,
        slug=slug_for(path, recipes_dir),
        frontmatter=doc.frontmatter,
        body=doc.body,
        body_line=doc.body_line,
    )


def load_corpus(cfg: EffectiveConfig) -> Corpus:
    recipes_dir = resolve_site_paths(cfg).recipes_dir
    corpus = Corpus(recipes_dir=recipes_dir)
    for path in recipe_paths(recipes_dir):
        try:
            corpus.documents.append(load_recipe(path, recipes_dir))
        except KubeRecipesError as exc:
            corpus.failures[path] = str(exc)
    return corpus
