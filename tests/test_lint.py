from __future__ import annotations

from pathlib import Path

import pytest

from kuberecipes.config import LintSettings, resolve_config
from kuberecipes.errors import MissingFileError
from kuberecipes.lint import lint_corpus, lint_text
from tests.utils import make_site, recipe_md


def _rules(issues) -> list[str]:
    return [issue.rule for issue in issues]


def test_lint_text_clean() -> None:
    assert lint_text(recipe_md(), "r.md") == []


def test_lint_text_missing_frontmatter() -> None:
    issues = lint_text("# Title\n\n```yaml\nkind: Pod\n```\n", "r.md")
    assert _rules(issues) == ["frontmatter-missing"]
    assert issues[0].format() == "r.md:1: error [frontmatter-missing] missing YAML frontmatter"


def test_lint_text_invalid_yaml_reports_line() -> None:
    issues = lint_text("---\ntitle: ok\nbad: [unclosed\n---\n", "r.md")
    assert _rules(issues) == ["frontmatter-yaml"]
    assert issues[0].line is not None


def test_lint_text_frontmatter_not_mapping() -> None:
    assert _rules(lint_text("---\n- a\n---\n", "r.md")) == ["frontmatter-mapping"]


def test_lint_text_schema_problems() -> None:
    md = "---\ntitle: ''\ndescription: d\ncategory: nope\ntags: [a]\npublishDate: '2024-01-01'\n---\n"
    issues = lint_text(md, "r.md")
    assert _rules(issues) == ["schema", "schema"]
    assert all(issue.severity == "error" for issue in issues)


def test_lint_text_fence_rules_use_file_lines() -> None:
    body = "## Steps\n\n```\nkubectl get pods\n```\n\n```yaml\nkind: Pod\n"
    issues = lint_text(recipe_md(body=body), "r.md")
    assert _rules(issues) == ["fence-language", "fence-unclosed"]
    # frontmatter occupies lines 1-8, blank line 9, body starts at 10
    assert [issue.line for issue in issues] == [12, 16]


def test_lint_text_language_allow_list() -> None:
    body = "```toml\na = 1\n```\n"
    settings = LintSettings(languages=("yaml", "bash"))
    issues = lint_text(recipe_md(body=body), "r.md", settings=settings)
    assert _rules(issues) == ["fence-language-unknown"]
    assert issues[0].severity == "warning"


def test_lint_text_related_rules() -> None:
    md = recipe_md(related=["known", "ghost", "known", "me"])
    issues = lint_text(md, "me.md", known_slugs={"known", "me"}, slug="me")
    assert _rules(issues) == ["related-duplicate", "related-missing", "related-self"]
    severities = {issue.rule: issue.severity for issue in issues}
    assert severities["related-missing"] == "error"
    assert severities["related-self"] == "warning"


def test_lint_text_related_unchecked_without_slugs() -> None:
    assert lint_text(recipe_md(related=["ghost"]), "r.md") == []


def test_lint_text_warnings() -> None:
    extra = "updatedDate: '2023-01-01'\nseoTitle: x"
    md = recipe_md(extra=extra).replace("  - testing", "  - testing\n  - testing")
    issues = lint_text(md, "r.md", settings=LintSettings(warn_unknown_fields=True))
    assert sorted(_rules(issues)) == ["dates-order", "tags-duplicate", "unknown-field"]
    assert all(issue.severity == "warning" for issue in issues)


def test_lint_text_disable_rules() -> None:
    body = "```\nplain\n```\n"
    settings = LintSettings(disable=("fence-language",))
    assert lint_text(recipe_md(body=body), "r.md", settings=settings) == []


def test_lint_corpus_example_is_clean(example_site: Path, tmp_path: Path, temp_home: Path) -> None:
    cfg = resolve_config({"site_root": str(example_site), "project": str(tmp_path)})
    report = lint_corpus(cfg)
    assert report.files_checked == 4
    assert report.issues == []
    assert report.ok
    assert report.summary() == "4 file(s) checked, 0 error(s), 0 warning(s)"


def test_lint_corpus_cross_file_rules(tmp_path: Path, temp_home: Path) -> None:
    make_site(
        tmp_path,
        {
            "a.md": recipe_md("Same Title", related=["b", "zzz"]),
            "b.md": recipe_md("same  title"),
            "c.md": recipe_md("C"),
            "c.mdx": recipe_md("C mdx"),
        },
    )
    report = lint_corpus(resolve_config({"project": str(tmp_path)}))
    rules = _rules(report.issues)
    assert "related-missing" in rules
    assert "duplicate-slug" in rules
    assert "duplicate-title" in rules
    assert not report.ok
    assert len(report.warnings) == 1


def test_lint_corpus_only_checks_given_files(tmp_path: Path, temp_home: Path) -> None:
    recipes_dir = make_site(
        tmp_path,
        {
            "a.md": recipe_md("A", related=["b"]),
            "b.md": "no frontmatter\n",
        },
    )
    cfg = resolve_config({"project": str(tmp_path)})
    report = lint_corpus(cfg, [recipes_dir / "a.md"])
    assert report.files_checked == 1
    assert report.issues == []

    with pytest.raises(MissingFileError):
        lint_corpus(cfg, [recipes_dir / "nope.md"])


def test_lint_corpus_relative_paths_see_slug_collisions(tmp_path: Path, temp_home: Path, monkeypatch) -> None:
    make_site(tmp_path, {"c.md": recipe_md("C"), "c.mdx": recipe_md("C mdx")})
    cfg = resolve_config({"project": str(tmp_path)})
    monkeypatch.chdir(tmp_path)
    relative = Path("src/content/recipes/c.md")
    report = lint_corpus(cfg, [relative])
    assert _rules(report.issues) == ["duplicate-slug"]

    report = lint_corpus(cfg, [relative, tmp_path / "src" / "content" / "recipes" / "c.md"])
    assert report.files_checked == 1
    assert "duplicate-title" not in _rules(report.issues)


def test_lint_text_requires_frontmatter_on_first_line() -> None:
    assert _rules(lint_text("\n\n" + recipe_md(), "r.md")) == ["frontmatter-missing"]
