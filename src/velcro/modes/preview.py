# Default Libraries
import asyncio
import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path

# Local Imports
from velcro.errors import PostNotFoundError
from velcro.loaders.script_loader import load_page
from velcro.loaders.site_loader import SiteConfig
from velcro.modes.build_site import load_site_global_script, post_dirs, render_html
from velcro.pydoll_extensions import TabWrapper
from velcro.utils.cdp_injector import apply_plan
from velcro.utils.script_injector import InjectionPlan, resolve

logger = logging.getLogger(__name__)

BLANK_PAGE = "<!DOCTYPE html>\n<html>\n<head></head>\n<body></body>\n</html>\n"


@dataclass(frozen=True)
class PreviewPage:
    slug: str
    html: str
    plan: InjectionPlan


def find_post(config: SiteConfig, root: Path, slug: str) -> Path:
    for post_dir in post_dirs(config, root):
        if post_dir.name == slug:
            return post_dir
    raise PostNotFoundError(f"No post named {slug!r} in {root / config.dirs.posts}")


def prepare_preview(config: SiteConfig, root: Path, slug: str) -> PreviewPage:
    """Read everything the preview needs from disk, before any browser starts.

    The page is rendered with its includes but without inline <script> tags.
    """
    root = Path(root)
    post_dir = find_post(config, root, slug)
    page = load_page(post_dir, config.scripts.extensions)
    plan = resolve(page, load_site_global_script(config, root), config.scripts.order)

    source = post_dir / "index.html"
    if source.is_file():
        html = render_html(source, root / config.dirs.components)
    else:
        logger.warning("%s has no index.html, previewing its scripts on a blank page", slug)
        html = BLANK_PAGE
    return PreviewPage(slug=slug, html=html, plan=plan)


async def preview(browser, page: PreviewPage, timeout: int = 30):
    """Open a prepared post in Chrome and run its hooks live.

    Pre-load snippets are registered through CDP before navigation and
    post-load snippets are evaluated once the load event fires.
    """
    with tempfile.TemporaryDirectory(prefix="velcro-preview-") as tmp:
        preview_file = Path(tmp) / "index.html"
        preview_file.write_text(page.html, encoding="utf-8")

        tab = TabWrapper(await browser.start())
        plan = page.plan
        print(f"Previewing {page.slug}: {len(plan.pre_stage)} pre-load, {len(plan.post_stage)} post-load scripts")
        await apply_plan(tab, plan, preview_file.as_uri())

        print("Preview loaded. Ctrl+C to exit.")
        try:
            await asyncio.wait_for(asyncio.Event().wait(), timeout=timeout)
        except asyncio.TimeoutError:
            print("Time limit reached, closing preview.")
