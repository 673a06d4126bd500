from __future__ import annotations

from datetime import date
from pathlib import Path
import re
import unicodedata
from typing import Any

import yaml

from .schema import CATEGORIES, DEFAULT_AUTHOR, DEFAULT_DIFFICULTY, DIFFICULTIES
from .errors import ValidationError


def slugify(title: str) -> str:
    text = unicodedata.normalize("NFKD", title).encode("ascii", "ignore").decode("ascii")
    text = re.sub(r"[^a-zA-Z0-9]+", "-", text.lower()).strip("-")
    return text


def render_recipe_template(title: str, category: str, **kwargs: Any) -> str:
    if category not in CATEGORIES:
        raise ValidationError(f"Unknown category {category!r} (expected one of {', '.join(CATEGORIES)})")
    difficulty = kwargs.get("difficulty") or DEFAULT_DIFFICULTY
    if difficulty not in DIFFICULTIES:
        raise ValidationError(f"Unknown difficulty {difficulty!r} (expected one of {', '.join(DIFFICULTIES)})")

    publish_date = kwargs.get("publish_date") or date.today()
    front: dict[str, Any] = {
        "title": title,
        "description": kwargs.get("description") or f"How to {title[:1].lower()}{title[1:]} in Kubernetes.",
        "category": category,
        "difficulty": difficulty,
        "timeToComplete": kwargs.get("time_to_complete") or "15 minutes",
        "kubernetesVersion": kwargs.get("kubernetes_version") or "1.28+",
        "prerequisites": list(kwargs.get("prerequisites") or []),
        "relatedRecipes": list(kwargs.get("related") or []),
        "tags": list(kwargs.get("tags") or [category]),
        "publishDate": publish_date.isoformat() if isinstance(publish_date, date) else str(publish_date),
        "author": kwargs.get("author") or DEFAULT_AUTHOR,
    }
    if kwargs.get("draft"):
        front["draft"] = True

    lines = ["---", yaml.safe_dump(front, sort_keys=False, allow_unicode=True).rstrip(), "---", ""]
    lines.append("## The Problem")
    lines.append("")
    lines.append("")
    lines.append("## The Solution")
    lines.append("")
    lines.append("```yaml")
    lines.append("apiVersion: v1")
    lines.append("kind: ConfigMap")
    lines.append("metadata:")
    lines.append(f"  name: {slugify(title) or 'example'}")
    lines.append("```")
    lines.append("")
    lines.append("```bash")
    lines.append("kubectl apply -f manifest.yaml")
    lines.append("```")
    lines.append("")
    lines.append("## Verification")
    lines.append("")
    lines.append("## Key Takeaways")
    lines.append("- ")
    return "\n".join(lines) + "\n"


def write_template_file(content: str, filename: str, cwd: str) -> str:
    path = Path(cwd) / filename
    if path.exists():
        raise FileExistsError(f"File already exists: {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return str(path)
