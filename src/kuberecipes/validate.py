from __future__ import annotations

from .config import LintSettings
from .errors import ValidationError
from .lint import ERROR, lint_text


def validate_recipe(
    md: str,
    source_path: str,
    known_slugs: set[str] | None = None,
    settings: LintSettings | None = None,
    slug: str | None = None,
) -> None:
    errors = [
        issue
        for issue in lint_text(md, source_path, known_slugs, settings, slug=slug)
        if issue.severity == ERROR
    ]
    if not errors:
        return
    details = "; ".join(f"[{issue.rule}] {issue.message}" for issue in errors)
    raise ValidationError(f"{source_path}: {details}")

