from __future__ import annotations

import argparse
import json
import os
import sys
from collections.abc import Callable
from pathlib import Path

from .config import EffectiveConfig, config_to_toml, resolve_config
from .corpus import load_corpus
from .duplicates import find_duplicates, prune_recipes
from .errors import (
    ConfigError,
    MissingFileError,
    ValidationError,
    KubeRecipesError,
    WatchError,
)
from .lint import lint_corpus
from .listing import list_recipes
from .paths import resolve_site_paths
from .schema import CATEGORIES, DIFFICULTIES
from .site_index import build_index
from .templates import render_recipe_template, slugify, write_template_file
from .watch import watch_corpus


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.tui or not args.command:
        return _cmd_tui(args)

    handlers: dict[str, Callable[[argparse.Namespace], int]] = {
        "lint": _cmd_lint,
        "list": _cmd_list,
        "index": _cmd_index,
        "new-recipe": _cmd_new_recipe,
        "duplicates": _cmd_duplicates,
        "prune": _cmd_prune,
        "watch": _cmd_watch,
        "init": _cmd_init,
        "config": _cmd_config,
    }

    handler = handlers.get(args.command)
    if handler is None:  # pragma: no cover
        return 1  # pragma: no cover

    try:
        return handler(args)
    except KubeRecipesError as exc:
        print(str(exc), file=sys.stderr)
        return _exit_code(exc)
    except FileExistsError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130


def _common_parser(default: object = None) -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False, argument_default=default)
    common.add_argument("--site", dest="site_root")
    common.add_argument("--project")
    common.add_argument("--profile")
    common.add_argument("--content-dir")
    common.add_argument("--build-dir")
    common.add_argument("--site-url")
    common.add_argument("--tui-header-icon")
    common.add_argument("--tui-layout")
    common.add_argument("--tui-density")
    return common


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kuberecipes", parents=[_common_parser()])
    # Options given after the command override those given before it.
    common = _common_parser(argparse.SUPPRESS)
    parser.add_argument("--tui", action="store_true", help="Launch interactive recipe browser")
    sub = parser.add_subparsers(dest="command")

    lint = sub.add_parser("lint", parents=[common])
    lint.add_argument("paths", nargs="*")
    lint.add_argument("--json", action="store_true")
    lint.add_argument("--quiet", action="store_true", help="Only print errors")

    listing = sub.add_parser("list", parents=[common])
    listing.add_argument("--tag")
    listing.add_argument("--category", choices=CATEGORIES)
    listing.add_argument("--difficulty", choices=DIFFICULTIES)
    listing.add_argument("--drafts", action="store_true")
    listing.add_argument("--json", action="store_true")

    index = sub.add_parser("index", parents=[common])
    index.add_argument("--drafts", action="store_true")
    index.add_argument("--dry-run", action="store_true")
    index.add_argument("--verbose", action="store_true")

    new_recipe = sub.add_parser("new-recipe", parents=[common])
    new_recipe.add_argument("--title", required=True)
    new_recipe.add_argument("--category", required=True, choices=CATEGORIES)
    new_recipe.add_argument("--slug")
    new_recipe.add_argument("--description")
    new_recipe.add_argument("--difficulty", choices=DIFFICULTIES)
    new_recipe.add_argument("--tag", dest="tags", action="append")
    new_recipe.add_argument("--related", action="append")
    new_recipe.add_argument("--author")
    new_recipe.add_argument("--draft", action="store_true")

    duplicates = sub.add_parser("duplicates", parents=[common])
    duplicates.add_argument("--threshold", type=float, default=0.85)

    prune = sub.add_parser("prune", parents=[common])
    prune.add_argument("slugs", nargs="*")
    prune.add_argument("--yes", action="store_true")
    prune.add_argument("--dry-run", action="store_true")

    watch = sub.add_parser("watch", parents=[common])
    watch.add_argument("--debounce", type=int, default=400)
    watch.add_argument("--verbose", action="store_true")

    init = sub.add_parser("init")
    init.add_argument("path", nargs="?", default=".")
    init.add_argument("--force", action="store_true")

    sub.add_parser("config", parents=[common])

    return parser


def _cmd_lint(args: argparse.Namespace) -> int:
    cfg = _resolve_cfg(args)
    only = [Path(path) for path in args.paths] if args.paths else None
    report = lint_corpus(cfg, only)
    if args.json:
        payload = {
            "ok": report.ok,
            "files_checked": report.files_checked,
            "issues": [issue.to_dict() for issue in report.issues],
        }
        print(json.dumps(payload, indent=2))
    else:
        issues = report.errors if args.quiet else report.issues
        for issue in issues:
            print(issue.format())
        print(report.summary(), file=sys.stderr)
    if report.ok:
        return 0
    return _exit_code(ValidationError())


def _cmd_list(args: argparse.Namespace) -> int:
    cfg = _resolve_cfg(args)
    recipes = list_recipes(cfg, args.tag, args.category, args.difficulty, include_drafts=args.drafts)
    if args.json:
        print(json.dumps(recipes, indent=2))
    else:
        for rec in recipes:
            print(f"{rec.get('slug')}: {rec.get('title')}")
    return 0


def _cmd_index(args: argparse.Namespace) -> int:
    cfg = _resolve_cfg(args)
    result = build_index(cfg, include_drafts=args.drafts, dry_run=args.dry_run, verbose=args.verbose)
    if args.dry_run:
        print(json.dumps(result.data, indent=2, ensure_ascii=False))
    else:
        print(result.path)
    return 0


def _cmd_new_recipe(args: argparse.Namespace) -> int:
    cfg = _resolve_cfg(args)
    slug = args.slug or slugify(args.title)
    if not slug:
        raise ValidationError(f"Cannot derive a slug from title {args.title!r}; pass --slug")
    content = render_recipe_template(
        args.title,
        args.category,
        description=args.description,
        difficulty=args.difficulty,
        tags=args.tags,
        related=args.related,
        author=args.author,
        draft=args.draft,
    )
    recipes_dir = resolve_site_paths(cfg).recipes_dir
    path = write_template_file(content, f"{slug}.md", str(recipes_dir))
    print(path)
    return 0


def _cmd_duplicates(args: argparse.Namespace) -> int:
    cfg = _resolve_cfg(args)
    pairs = find_duplicates(load_corpus(cfg), threshold=args.threshold)
    for pair in pairs:
        print(pair.format())
    if not pairs:
        print("No duplicate candidates found.", file=sys.stderr)
    return 0


def _cmd_prune(args: argparse.Namespace) -> int:
    cfg = _resolve_cfg(args)
    slugs = list(args.slugs) or list(cfg.prune.slugs)
    if not slugs:
        raise ConfigError("No slugs to prune (pass slugs or set [prune] slugs in kuberecipes.toml)")

    preview = prune_recipes(cfg, slugs, dry_run=True)
    for path in preview.removed:
        print(f"remove {path}")
    for slug in preview.missing:
        print(f"already removed {slug}")

    if args.dry_run or not preview.removed:
        _print_dangling(preview.dangling)
        return 0

    if not args.yes:
        answer = input("Remove these recipes? [y/N]: ").strip().lower()
        if answer not in ("y", "yes"):
            print("Aborted.")
            return 1

    result = prune_recipes(cfg, slugs)
    print(f"Removed {len(result.removed)} file(s).")
    _print_dangling(result.dangling)
    return 0


def _print_dangling(dangling: dict[str, list[str]]) -> None:
    for target, sources in dangling.items():
        print(f"{target} is still listed in relatedRecipes of: {', '.join(sources)}", file=sys.stderr)


def _cmd_watch(args: argparse.Namespace) -> int:
    cfg = _resolve_cfg(args)
    watch_corpus(cfg, debounce_ms=args.debounce, verbose=args.verbose)
    return 0


def _cmd_init(args: argparse.Namespace) -> int:
    root = os.path.abspath(args.path)
    os.makedirs(root, exist_ok=True)
    _ensure_dir(root, os.path.join("src", "content", "recipes"))
    _ensure_dir(root, "build")
    config_path = os.path.join(root, "kuberecipes.toml")
    if os.path.exists(config_path) and not args.force:
        raise ConfigError(f"{config_path} already exists (use --force to overwrite)")
    with open(config_path, "w", encoding="utf-8") as fh:
        fh.write(
            """content_dir = \"src/content/recipes\"\nbuild_dir = \"build\"\nsite_url = \"https://kubernetes.recipes/\"\n\n[lint]\n# warn_unknown_fields = true\n# languages = [\"yaml\", \"bash\", \"json\", \"go\", \"python\", \"mermaid\"]\n# disable = []\n\n[prune]\n# slugs = []\n"""
        )
    print(config_path)
    return 0


def _cmd_config(args: argparse.Namespace) -> int:
    cfg = _resolve_cfg(args)
    print(config_to_toml(cfg))
    return 0


def _cmd_tui(args: argparse.Namespace) -> int:
    from .tui import run_tui

    return run_tui(_cli_args_dict(args))


def _resolve_cfg(args: argparse.Namespace) -> EffectiveConfig:
    return resolve_config(_cli_args_dict(args))


def _ensure_dir(root: str, name: str) -> None:
    path = os.path.join(root, name)
    os.makedirs(path, exist_ok=True)


def _cli_args_dict(args: argparse.Namespace) -> dict[str, object]:
    return vars(args).copy()


def _exit_code(exc: KubeRecipesError) -> int:
    if isinstance(exc, ConfigError):
        return 2
    if isinstance(exc, MissingFileError):
        return 3
    if isinstance(exc, ValidationError):
        return 4
    if isinstance(exc, WatchError):
        return 6
    return 1
