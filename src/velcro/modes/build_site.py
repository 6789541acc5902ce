# Default Libraries
import logging
import re
import shutil
from dataclasses import dataclass, field
from pathlib import Path

# Local Imports
from velcro.errors import BuildError, CircularIncludeError, ComponentNotFoundError
from velcro.loaders.script_loader import load_global_script, load_page
from velcro.loaders.site_loader import SiteConfig
from velcro.utils.html_injector import inject_plan
from velcro.utils.script_injector import GlobalScript, InjectionPlan, resolve

logger = logging.getLogger(__name__)

INCLUDE_PATTERN = re.compile(r'<!--\s*include\s*=\s*"(@[^"]+)"\s*-->')
COMPONENT_PREFIX = "@components/"

_HEAD_OPEN = re.compile(r"<head(\s[^>]*)?>", re.IGNORECASE)
_HEAD_CLOSE = re.compile(r"</head>", re.IGNORECASE)
_BODY_OPEN = re.compile(r"<body(\s[^>]*)?>", re.IGNORECASE)
_BODY_CLOSE = re.compile(r"</body>", re.IGNORECASE)


def read_html(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as err:
        raise BuildError(f"{path} is not valid UTF-8: {err}") from err


@dataclass
class BuildReport:
    posts: list[str] = field(default_factory=list)
    drafts: list[str] = field(default_factory=list)
    pages: int = 0


def process_includes(content: str, components_dir: Path, visited: set[Path] | None = None) -> str:
    """Expand ``<!-- include="@components/name" -->`` markers recursively.

    ``@content`` and any other ``@`` include are left in place.
    """
    if visited is None:
        visited = set()

    def _replace(match: re.Match) -> str:
        include_path = match.group(1)
        if not include_path.startswith(COMPONENT_PREFIX):
            return match.group(0)

        name = include_path[len(COMPONENT_PREFIX):]
        if name.endswith(".html"):
            name = name[: -len(".html")]
        component = components_dir / f"{name}.html"

        if component in visited:
            raise CircularIncludeError(
                f"circular include detected: component {name!r} is included multiple times"
            )
        try:
            raw = read_html(component)
        except FileNotFoundError as err:
            raise ComponentNotFoundError(f"failed to read component {name!r}: {err}") from err

        visited.add(component)
        try:
            return process_includes(raw, components_dir, visited)
        finally:
            visited.discard(component)

    return INCLUDE_PATTERN.sub(_replace, content)


def validate_html(content: str, file_path: Path) -> None:
    has_head_open = bool(_HEAD_OPEN.search(content))
    has_body_open = bool(_BODY_OPEN.search(content))

    if has_head_open and not _HEAD_CLOSE.search(content):
        logger.warning("Unclosed <head> tag detected in %s", file_path)
    if has_body_open and not _BODY_CLOSE.search(content):
        logger.warning("Unclosed <body> tag detected in %s", file_path)
    if not has_head_open:
        logger.warning("Missing <head> tag in %s", file_path)


def render_html(src: Path, components_dir: Path, plan: InjectionPlan | None = None) -> str:
    processed = process_includes(read_html(src), components_dir)
    validate_html(processed, src)
    if plan is not None:
        processed = inject_plan(processed, plan)
    return processed


def process_directory(src: Path, dst: Path, components_dir: Path, plan: InjectionPlan | None = None) -> None:
    """Copy ``src`` into ``dst``; HTML files are rendered on the way."""
    for path in sorted(src.rglob("*")):
        target = dst / path.relative_to(src)
        if path.is_dir():
            target.mkdir(parents=True, exist_ok=True)
            continue

        target.parent.mkdir(parents=True, exist_ok=True)
        if path.suffix == ".html":
            logger.debug("Rendering %s -> %s", path, target)
            target.write_text(render_html(path, components_dir, plan), encoding="utf-8")
        else:
            shutil.copy2(path, target)


def post_dirs(config: SiteConfig, root: Path) -> list[Path]:
    posts_dir = root / config.dirs.posts
    if not posts_dir.is_dir():
        return []
    return sorted(p for p in posts_dir.iterdir() if p.is_dir())


def is_draft(post_dir: Path, config: SiteConfig) -> bool:
    return bool(config.draft_prefix) and post_dir.name.startswith(config.draft_prefix)


def load_site_global_script(config: SiteConfig, root: Path) -> GlobalScript:
    return load_global_script(
        root / config.dirs.scripts,
        points=config.scripts.global_points,
        extensions=config.scripts.extensions,
    )


def build_posts(config: SiteConfig, root: Path, report: BuildReport) -> None:
    output_posts = root / config.output_dir / "posts"
    components_dir = root / config.dirs.components
    global_script = load_site_global_script(config, root)

    for post_dir in post_dirs(config, root):
        if is_draft(post_dir, config):
            logger.info("Skipping draft %s", post_dir.name)
            report.drafts.append(post_dir.name)
            continue

        page = load_page(post_dir, config.scripts.extensions)
        plan = resolve(page, global_script, config.scripts.order)
        logger.debug(
            "Post %s: %d pre-load, %d post-load snippets",
            page.slug, len(plan.pre_stage), len(plan.post_stage),
        )

        out_dir = output_posts / page.slug
        out_dir.mkdir(parents=True, exist_ok=True)
        process_directory(post_dir, out_dir, components_dir, plan)
        report.posts.append(page.slug)


def build_pages(config: SiteConfig, root: Path, report: BuildReport) -> None:
    pages_dir = root / config.dirs.pages
    if not pages_dir.is_dir():
        return
    output_dir = root / config.output_dir
    output_dir.mkdir(parents=True, exist_ok=True)
    process_directory(pages_dir, output_dir, root / config.dirs.components)
    report.pages = sum(1 for p in pages_dir.rglob("*.html") if p.is_file())


def copy_section(config: SiteConfig, root: Path, source: str, name: str) -> None:
    source_dir = root / source
    if not source_dir.is_dir():
        return
    output_dir = root / config.output_dir / name
    output_dir.mkdir(parents=True, exist_ok=True)
    process_directory(source_dir, output_dir, root / config.dirs.components)


def build_site(config: SiteConfig, root: Path) -> BuildReport:
    root = Path(root)
    report = BuildReport()

    logger.info("Building posts...")
    build_posts(config, root, report)

    logger.info("Building pages...")
    build_pages(config, root, report)

    for source, name in (
        (config.dirs.assets, "assets"),
        (config.dirs.scripts, "scripts"),
        (config.dirs.styles, "styles"),
    ):
        logger.info("Building %s...", name)
        copy_section(config, root, source, name)

    return report
