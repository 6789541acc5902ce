import logging
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from pathlib import Path

import yaml

from velcro.errors import ConfigError
from velcro.utils.script_injector import InjectionPoint, OrderingPolicy

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "velcro.yaml"


@dataclass(frozen=True)
class Dirs:
    pages: str
    posts: str
    assets: str
    styles: str
    scripts: str
    components: str


@dataclass(frozen=True)
class ScriptSettings:
    order: OrderingPolicy
    global_points: frozenset[InjectionPoint]
    extensions: tuple[str, ...]


@dataclass(frozen=True)
class SiteConfig:
    output_dir: str
    draft_prefix: str
    dirs: Dirs
    scripts: ScriptSettings


@lru_cache
def load_defaults() -> dict:
    data = resources.files("velcro.loaders").joinpath("defaults.yaml").read_text(encoding="utf-8")
    return yaml.safe_load(data)


def _section(raw: dict, name: str) -> dict:
    value = raw.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{name}' must be a mapping, got {type(value).__name__}")
    return value


def _path(value, key: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"'{key}' must be a non-empty path, got {value!r}")
    return value


def _names(value, key: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) and v.strip() for v in value):
        raise ConfigError(f"'{key}' must be a list of names, got {value!r}")
    return value


def parse_site_config(raw: dict | None) -> SiteConfig:
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Site config must be a mapping, got {type(raw).__name__}")

    defaults = load_defaults()
    dirs = {**defaults["dirs"], **_section(raw, "dirs")}
    scripts = {**defaults["scripts"], **_section(raw, "scripts")}

    if not isinstance(scripts["order"], str):
        raise ConfigError(f"'scripts.order' must be a name, got {scripts['order']!r}")
    try:
        order = OrderingPolicy.from_name(scripts["order"])
        points = frozenset(
            InjectionPoint.from_name(p) for p in _names(scripts["global_points"], "scripts.global_points")
        )
    except ValueError as err:
        raise ConfigError(str(err)) from err

    extensions = tuple(
        ext if ext.startswith(".") else f".{ext}"
        for ext in _names(scripts["extensions"], "scripts.extensions")
    )

    draft_prefix = raw.get("draft_prefix", defaults["draft_prefix"]) or ""
    if not isinstance(draft_prefix, str):
        raise ConfigError(f"'draft_prefix' must be a string, got {draft_prefix!r}")

    return SiteConfig(
        output_dir=_path(raw.get("output_dir", defaults["output_dir"]), "output_dir"),
        draft_prefix=draft_prefix,
        dirs=Dirs(**{key: _path(dirs[key], f"dirs.{key}") for key in Dirs.__dataclass_fields__}),
        scripts=ScriptSettings(order=order, global_points=points, extensions=extensions),
    )


def load_site_config(root: Path) -> SiteConfig:
    path = Path(root) / CONFIG_FILENAME
    if not path.exists():
        logger.warning("No %s found in %s, using defaults", CONFIG_FILENAME, root)
        return parse_site_config({})

    logger.info("Loading site config from %s", path)
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as err:
        raise ConfigError(f"Invalid YAML in {path}: {err}") from err
    return parse_site_config(raw)
