"""Frontmatter schema for recipe articles.

Mirrors the site's content collection definition: field names stay in the
camelCase the site generator reads, while :class:`RecipeMeta` exposes them as
Python attributes with defaults applied.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from .errors import ValidationError


CATEGORIES = (
    "networking",
    "storage",
    "security",
    "deployments",
    "observability",
    "troubleshooting",
    "autoscaling",
    "gitops",
    "helm",
)
DIFFICULTIES = ("beginner", "intermediate", "advanced")

DEFAULT_DIFFICULTY = "intermediate"
DEFAULT_TIME_TO_COMPLETE = "15 minutes"
DEFAULT_KUBERNETES_VERSION = "1.28+"
DEFAULT_AUTHOR = "Luca Berton"

REQUIRED_FIELDS = ("title", "description", "category", "tags", "publishDate")
STRING_FIELDS = ("timeToComplete", "kubernetesVersion", "author")
LIST_FIELDS = ("prerequisites", "relatedRecipes", "tags")
KNOWN_FIELDS = frozenset(
    {
        "draft",
        "title",
        "description",
        "category",
        "difficulty",
        "timeToComplete",
        "kubernetesVersion",
        "prerequisites",
        "relatedRecipes",
        "tags",
        "publishDate",
        "updatedDate",
        "author",
        "image",
    }
)


@dataclass(frozen=True)
class FieldProblem:
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


@dataclass(frozen=True)
class RecipeImage:
    src: str
    alt: str


@dataclass(frozen=True)
class RecipeMeta:
    title: str
    description: str
    category: str
    tags: list[str]
    publish_date: date
    draft: bool = False
    difficulty: str = DEFAULT_DIFFICULTY
    time_to_complete: str = DEFAULT_TIME_TO_COMPLETE
    kubernetes_version: str = DEFAULT_KUBERNETES_VERSION
    prerequisites: list[str] = field(default_factory=list)
    related_recipes: list[str] = field(default_factory=list)
    updated_date: date | None = None
    author: str = DEFAULT_AUTHOR
    image: RecipeImage | None = None

    def to_frontmatter(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "draft": self.draft,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "difficulty": self.difficulty,
            "timeToComplete": self.time_to_complete,
            "kubernetesVersion": self.kubernetes_version,
            "prerequisites": list(self.prerequisites),
            "relatedRecipes": list(self.related_recipes),
            "tags": list(self.tags),
            "publishDate": self.publish_date.isoformat(),
            "author": self.author,
        }
        if self.updated_date is not None:
            data["updatedDate"] = self.updated_date.isoformat()
        if self.image is not None:
            data["image"] = {"src": self.image.src, "alt": self.image.alt}
        return data


def parse_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def frontmatter_problems(data: dict[str, Any]) -> list[FieldProblem]:
    problems: list[FieldProblem] = []

    for key in REQUIRED_FIELDS:
        if key not in data or data[key] is None:
            problems.append(FieldProblem(key, "required field is missing"))

    for key in ("title", "description"):
        value = data.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            problems.append(FieldProblem(key, "must be a string"))
        elif not value.strip():
            problems.append(FieldProblem(key, "must not be empty"))

    if "draft" in data and not isinstance(data["draft"], bool):
        problems.append(FieldProblem("draft", "must be true or false"))

    _check_enum(data, "category", CATEGORIES, problems)
    _check_enum(data, "difficulty", DIFFICULTIES, problems)

    for key in STRING_FIELDS:
        if key in data and not isinstance(data[key], str):
            problems.append(FieldProblem(key, "must be a string"))

    for key in LIST_FIELDS:
        value = data.get(key)
        if value is None:
            continue
        if not isinstance(value, list):
            problems.append(FieldProblem(key, "must be a list of strings"))
            continue
        for idx, item in enumerate(value):
            if not isinstance(item, str) or not item.strip():
                problems.append(FieldProblem(f"{key}[{idx}]", "must be a non-empty string"))

    for key in ("publishDate", "updatedDate"):
        value = data.get(key)
        if value is None:
            continue
        if parse_date(value) is None:
            problems.append(FieldProblem(key, f"not a valid date: {value!r}"))

    image = data.get("image")
    if image is not None:
        if not isinstance(image, dict):
            problems.append(FieldProblem("image", "must be a mapping with src and alt"))
        else:
            for key in ("src", "alt"):
                if not isinstance(image.get(key), str):
                    problems.append(FieldProblem(f"image.{key}", "must be a string"))

    return problems


def _check_enum(data: dict[str, Any], key: str, allowed: tuple[str, ...], problems: list[FieldProblem]) -> None:
    if key not in data or data[key] is None:
        return
    if data[key] not in allowed:
        problems.append(FieldProblem(key, f"{data[key]!r} is not one of {', '.join(allowed)}"))


def unknown_fields(data: dict[str, Any]) -> list[str]:
    return sorted(str(key) for key in data if key not in KNOWN_FIELDS)


def coerce_meta(data: dict[str, Any], source_path: str) -> RecipeMeta:
    problems = frontmatter_problems(data)
    if problems:
        details = "; ".join(str(problem) for problem in problems)
        raise ValidationError(f"{source_path}: invalid frontmatter ({details})")

    image = data.get("image")
    return RecipeMeta(
        title=data["title"].strip(),
        description=data["description"].strip(),
        category=data["category"],
        tags=list(data["tags"]),
        publish_date=parse_date(data["publishDate"]),
        draft=data.get("draft", False),
        difficulty=data.get("difficulty") or DEFAULT_DIFFICULTY,
        time_to_complete=data.get("timeToComplete", DEFAULT_TIME_TO_COMPLETE),
        kubernetes_version=data.get("kubernetesVersion", DEFAULT_KUBERNETES_VERSION),
        prerequisites=list(data.get("prerequisites") or []),
        related_recipes=list(data.get("relatedRecipes") or []),
        updated_date=parse_date(data.get("updatedDate")),
        author=data.get("author", DEFAULT_AUTHOR),
        image=RecipeImage(src=image["src"], alt=image["alt"]) if image else None,
    )
