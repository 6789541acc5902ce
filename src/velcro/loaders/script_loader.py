import logging
from pathlib import Path
from typing import Iterable

from velcro.errors import BuildError
from velcro.utils.script_injector import (
    HOOK_STEMS,
    ContentPage,
    GlobalScript,
    InjectionPoint,
    Snippet,
)

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = (".js", ".mjs")


def find_hook(directory: Path, stem: str, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> Path | None:
    for ext in extensions:
        path = directory / f"{stem}{ext}"
        if path.is_file():
            return path
    return None


def find_hooks(directory: Path, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> dict[str, Path]:
    """Hook files present in ``directory``, keyed by stem."""
    extensions = tuple(extensions)
    found = {stem: find_hook(directory, stem, extensions) for stem in HOOK_STEMS}
    return {stem: path for stem, path in found.items() if path is not None}


def load_snippet(path: Path | None) -> Snippet | None:
    if path is None or not path.exists():
        return None
    logger.debug("Loading script %s", path)
    try:
        body = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as err:
        raise BuildError(f"Script {path} is not valid UTF-8: {err}") from err
    return Snippet(body=body, source=path)


def load_page(post_dir: Path, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> ContentPage:
    hooks = find_hooks(post_dir, extensions)
    # ContentPage fields are named after the hook stems
    return ContentPage(
        slug=post_dir.name,
        **{stem: load_snippet(hooks.get(stem)) for stem in HOOK_STEMS},
    )


def load_global_script(
    scripts_dir: Path,
    points: Iterable[InjectionPoint] = (InjectionPoint.POST_LOAD,),
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
) -> GlobalScript:
    snippet = None
    if scripts_dir.is_dir():
        snippet = load_snippet(find_hook(scripts_dir, "index", extensions))
    if snippet is None:
        logger.debug("No global script in %s", scripts_dir)
    return GlobalScript(snippet=snippet, points=frozenset(points))
