from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
import os
import tomllib
from typing import Any, Optional

from .errors import ConfigError


DEFAULT_CONTENT_DIR = "src/content/recipes"
DEFAULT_SITE_URL = "https://kubernetes.recipes/"


@dataclass(frozen=True)
class LintSettings:
    warn_unknown_fields: bool = False
    languages: tuple[str, ...] = ()
    disable: tuple[str, ...] = ()


@dataclass(frozen=True)
class PruneConfig:
    slugs: tuple[str, ...] = ()


@dataclass(frozen=True)
class TuiConfig:
    header_icon: str = "⎈"
    layout: str = "auto"
    density: str = "cozy"


@dataclass(frozen=True)
class EffectiveConfig:
    site_root: str
    content_dir: str
    build_dir: str
    site_url: str
    default_project: Optional[str]
    lint: LintSettings
    prune: PruneConfig
    tui: TuiConfig
    project_dir: str = field(default=".")


def _config_root() -> Path:
    return Path(os.path.expanduser("~/.config/kuberecipes"))


def load_global_config() -> dict[str, Any]:
    path = _config_root() / "config.toml"
    if not path.exists():
        return {}
    return _load_toml(path)


def load_profile(profile: str) -> Optional[str]:
    path = _config_root() / "projects.d" / f"{profile}.toml"
    if not path.exists():
        return None
    data = _load_toml(path)
    project = data.get("project")
    if not project:
        raise ConfigError(f"Profile {profile!r} missing 'project' key")
    return str(project)


def load_project_config(project_dir: str) -> dict[str, Any]:
    path = Path(project_dir) / "kuberecipes.toml"
    if not path.exists():
        return {}
    return _load_toml(path)


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except OSError as exc:
        raise ConfigError(f"Failed to read config: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in config: {path}") from exc


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def merge_config(cli: dict[str, Any], project: dict[str, Any], global_cfg: dict[str, Any]) -> dict[str, Any]:
    merged = _deep_merge(global_cfg, project)
    return _deep_merge(merged, cli)


def resolve_config(cli_args: dict[str, Any]) -> EffectiveConfig:
    global_cfg = load_global_config()
    profile = cli_args.get("profile")
    project_dir = cli_args.get("project")
    if not project_dir and profile:
        project_dir = load_profile(profile)
    if not project_dir:
        project_dir = global_cfg.get("default_project") or os.getcwd()

    project_cfg = load_project_config(project_dir)

    cli_cfg = _cli_to_dict(cli_args)
    merged = merge_config(cli_cfg, project_cfg, global_cfg)

    site_root = merged.get("site_root") or project_dir
    lint_cfg = _section(merged, "lint")
    prune_cfg = _section(merged, "prune")

    return EffectiveConfig(
        site_root=str(site_root),
        content_dir=str(merged.get("content_dir", DEFAULT_CONTENT_DIR)),
        build_dir=str(merged.get("build_dir", "build")),
        site_url=str(merged.get("site_url", DEFAULT_SITE_URL)),
        default_project=merged.get("default_project"),
        lint=LintSettings(
            warn_unknown_fields=bool(lint_cfg.get("warn_unknown_fields", False)),
            languages=_string_list(lint_cfg.get("languages"), "lint.languages", lower=True),
            disable=_string_list(lint_cfg.get("disable"), "lint.disable"),
        ),
        prune=PruneConfig(slugs=_string_list(prune_cfg.get("slugs"), "prune.slugs")),
        tui=TuiConfig(
            header_icon=str(merged.get("tui_header_icon", "⎈")),
            layout=_normalize_tui_layout(merged.get("tui_layout", "auto")),
            density=_normalize_tui_density(merged.get("tui_density", "cozy")),
        ),
        project_dir=str(project_dir),
    )


def _section(merged: dict[str, Any], name: str) -> dict[str, Any]:
    value = merged.get(name, {})
    if not isinstance(value, dict):
        raise ConfigError(f"[{name}] must be a table")
    return value


def _string_list(value: Any, key: str, lower: bool = False) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{key} must be a list of strings")
    if lower:
        return tuple(item.strip().lower() for item in value)
    return tuple(item.strip() for item in value)


def _cli_to_dict(cli_args: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key in ("site_root", "content_dir", "build_dir", "site_url", "default_project"):
        if cli_args.get(key) is not None:
            out[key] = cli_args[key]

    for key in ("tui_header_icon", "tui_layout", "tui_density"):
        if cli_args.get(key) is not None:
            out[key] = cli_args[key]

    return out


def config_to_toml(cfg: EffectiveConfig) -> str:
    lines = [
        f"site_root = {cfg.site_root!r}",
        f"content_dir = {cfg.content_dir!r}",
        f"build_dir = {cfg.build_dir!r}",
        f"site_url = {cfg.site_url!r}",
    ]
    if cfg.default_project:
        lines.append(f"default_project = {cfg.default_project!r}")
    lines.append(f"tui_header_icon = {cfg.tui.header_icon!r}")
    lines.append(f"tui_layout = {cfg.tui.layout!r}")
    lines.append(f"tui_density = {cfg.tui.density!r}")
    lines.append("")
    lines.append("[lint]")
    lines.append(f"warn_unknown_fields = {'true' if cfg.lint.warn_unknown_fields else 'false'}")
    lines.append(f"languages = {_toml_list(cfg.lint.languages)}")
    lines.append(f"disable = {_toml_list(cfg.lint.disable)}")
    lines.append("")
    lines.append("[prune]")
    lines.append(f"slugs = {_toml_list(cfg.prune.slugs)}")
    return "\n".join(lines) + "\n"


def _toml_list(values: tuple[str, ...]) -> str:
    return "[" + ", ".join(repr(value) for value in values) + "]"


def _normalize_tui_layout(value: Any) -> str:
    text = str(value or "").strip().lower()
    if text in {"auto", "compact", "normal", "wide"}:
        return text
    return "auto"


def _normalize_tui_density(value: Any) -> str:
    text = str(value or "").strip().lower()
    if text in {"cozy", "compact"}:
        return text
    return "cozy"
