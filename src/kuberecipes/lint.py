from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

import yaml

from .config import EffectiveConfig, LintSettings
from .corpus import recipe_paths, slug_for
from .domain import FRONTMATTER_RE, scan_code_blocks
from .errors import MissingFileError
from .paths import resolve_site_paths
from .schema import frontmatter_problems, parse_date, unknown_fields


ERROR = "error"
WARNING = "warning"


@dataclass(frozen=True)
class Issue:
    path: str
    rule: str
    message: str
    line: int | None = None
    severity: str = ERROR

    def format(self) -> str:
        location = f"{self.path}:{self.line}" if self.line else self.path
        return f"{location}: {self.severity} [{self.rule}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "line": self.line,
            "rule": self.rule,
            "severity": self.severity,
            "message": self.message,
        }


@dataclass
class LintReport:
    issues: list[Issue] = field(default_factory=list)
    files_checked: int = 0

    @property
    def errors(self) -> list[Issue]:
        return [issue for issue in self.issues if issue.severity == ERROR]

    @property
    def warnings(self) -> list[Issue]:
        return [issue for issue in self.issues if issue.severity == WARNING]

    @property
    def ok(self) -> bool:
        return not self.errors

    def summary(self) -> str:
        return (
            f"{self.files_checked} file(s) checked, "
            f"{len(self.errors)} error(s), {len(self.warnings)} warning(s)"
        )

    def format_lines(self) -> list[str]:
        return [issue.format() for issue in self.issues]


def lint_text(
    md: str,
    source_path: str,
    known_slugs: set[str] | None = None,
    settings: LintSettings | None = None,
    slug: str | None = None,
) -> list[Issue]:
    settings = settings or LintSettings()
    issues: list[Issue] = []

    match = FRONTMATTER_RE.match(md)
    if not match:
        issues.append(Issue(source_path, "frontmatter-missing", "missing YAML frontmatter", line=1))
        body, body_line = md, 1
        data: dict[str, Any] | None = None
    else:
        body = md[match.end() :]
        body_line = md.count("\n", 0, match.end()) + 1
        data = _load_frontmatter(match.group(1) or "", source_path, issues)

    if data is not None:
        issues.extend(_frontmatter_issues(data, source_path, known_slugs, settings, slug))
    issues.extend(_fence_issues(body, body_line, source_path, settings))

    return _filter(issues, settings)


def _load_frontmatter(raw: str, source_path: str, issues: list[Issue]) -> dict[str, Any] | None:
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        line = None
        mark = getattr(exc, "problem_mark", None)
        if mark is not None:
            line = mark.line + 2
        issues.append(Issue(source_path, "frontmatter-yaml", f"invalid YAML frontmatter: {_yaml_problem(exc)}", line=line))
        return None
    if data is None:
        data = {}
    if not isinstance(data, dict):
        issues.append(Issue(source_path, "frontmatter-mapping", "frontmatter must be a mapping", line=1))
        return None
    return data


def _yaml_problem(exc: yaml.YAMLError) -> str:
    problem = getattr(exc, "problem", None)
    return str(problem) if problem else exc.__class__.__name__


def _frontmatter_issues(
    data: dict[str, Any],
    source_path: str,
    known_slugs: set[str] | None,
    settings: LintSettings,
    slug: str | None,
) -> list[Issue]:
    issues = [Issue(source_path, "schema", str(problem), line=1) for problem in frontmatter_problems(data)]

    if settings.warn_unknown_fields:
        for key in unknown_fields(data):
            issues.append(Issue(source_path, "unknown-field", f"unknown frontmatter key {key!r}", line=1, severity=WARNING))

    tags = data.get("tags")
    if isinstance(tags, list):
        for tag in _repeated(tags):
            issues.append(Issue(source_path, "tags-duplicate", f"tag {tag!r} listed more than once", line=1, severity=WARNING))

    published = parse_date(data.get("publishDate"))
    updated = parse_date(data.get("updatedDate"))
    if published and updated and updated < published:
        issues.append(
            Issue(
                source_path,
                "dates-order",
                f"updatedDate {updated.isoformat()} is before publishDate {published.isoformat()}",
                line=1,
                severity=WARNING,
            )
        )

    related = data.get("relatedRecipes")
    if isinstance(related, list):
        for target in _repeated(related):
            issues.append(
                Issue(source_path, "related-duplicate", f"related recipe {target!r} listed more than once", line=1, severity=WARNING)
            )
        for target in dict.fromkeys(item for item in related if isinstance(item, str) and item.strip()):
            if slug is not None and target == slug:
                issues.append(Issue(source_path, "related-self", "recipe lists itself as related", line=1, severity=WARNING))
                continue
            if known_slugs is not None and target not in known_slugs:
                issues.append(Issue(source_path, "related-missing", f"related recipe {target!r} does not exist", line=1))

    return issues


def _fence_issues(body: str, body_line: int, source_path: str, settings: LintSettings) -> list[Issue]:
    issues: list[Issue] = []
    for block in scan_code_blocks(body, first_line=body_line):
        if not block.closed:
            issues.append(Issue(source_path, "fence-unclosed", "code fence is never closed", line=block.line))
        if block.language is None:
            issues.append(Issue(source_path, "fence-language", "code fence has no language tag", line=block.line))
        elif settings.languages and block.language not in settings.languages:
            issues.append(
                Issue(
                    source_path,
                    "fence-language-unknown",
                    f"code fence language {block.language!r} is not in the allowed list",
                    line=block.line,
                    severity=WARNING,
                )
            )
    return issues


def _repeated(values: Iterable[Any]) -> list[Any]:
    seen: set[str] = set()
    repeated: list[Any] = []
    for value in values:
        key = str(value)
        if key in seen and value not in repeated:
            repeated.append(value)
        seen.add(key)
    return repeated


def _filter(issues: list[Issue], settings: LintSettings) -> list[Issue]:
    if not settings.disable:
        return issues
    disabled = set(settings.disable)
    return [issue for issue in issues if issue.rule not in disabled]


def lint_corpus(cfg: EffectiveConfig, only: Iterable[Path] | None = None) -> LintReport:
    recipes_dir = resolve_site_paths(cfg).recipes_dir
    all_paths = recipe_paths(recipes_dir)
    slugs: dict[str, list[Path]] = {}
    for path in all_paths:
        slugs.setdefault(slug_for(path, recipes_dir), []).append(path)

    targets = _targets(all_paths, only)
    report = LintReport(files_checked=len(targets))
    titles: dict[str, list[Path]] = {}

    for path in targets:
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise MissingFileError(f"Recipe not readable: {path}") from exc

        slug = _slug_or_none(path, recipes_dir)
        report.issues.extend(lint_text(text, str(path), set(slugs), cfg.lint, slug=slug))

        title = _title_key(text)
        if title:
            titles.setdefault(title, []).append(path)

    corpus_issues: list[Issue] = []
    target_set = {path.resolve() for path in targets}
    for slug, paths in sorted(slugs.items()):
        if len(paths) > 1 and target_set.intersection(path.resolve() for path in paths):
            names = ", ".join(path.name for path in paths)
            corpus_issues.append(Issue(str(paths[0]), "duplicate-slug", f"slug {slug!r} is defined by {names}"))
    for paths in titles.values():
        if len(paths) > 1:
            others = ", ".join(str(path) for path in paths[1:])
            corpus_issues.append(
                Issue(str(paths[0]), "duplicate-title", f"title also used by {others}", line=1, severity=WARNING)
            )
    report.issues.extend(_filter(corpus_issues, cfg.lint))
    return report


def _targets(all_paths: list[Path], only: Iterable[Path] | None) -> list[Path]:
    if only is None:
        return list(all_paths)
    targets: list[Path] = []
    seen: set[Path] = set()
    for path in only:
        path = Path(path)
        if not path.is_file():
            raise MissingFileError(f"Recipe not found: {path}")
        if path.resolve() in seen:
            continue
        seen.add(path.resolve())
        targets.append(path)
    return targets


def _slug_or_none(path: Path, recipes_dir: Path) -> str | None:
    try:
        return slug_for(path.resolve(), recipes_dir.resolve())
    except ValueError:
        return None


def _title_key(text: str) -> str | None:
    match = FRONTMATTER_RE.match(text)
    if not match:
        return None
    try:
        data = yaml.safe_load(match.group(1) or "")
    except yaml.YAMLError:
        return None
    if not isinstance(data, dict) or not isinstance(data.get("title"), str):
        return None
    return " ".join(data["title"].lower().split()) or None
