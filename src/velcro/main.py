#Default Libraries
import argparse
import asyncio
import signal
from pathlib import Path

# Pydoll Imports
from pydoll.browser.chromium import Chrome

#Local Imports
from velcro.loaders.script_loader import find_hooks
from velcro.loaders.site_loader import load_site_config
from velcro.modes.build_site import build_site, is_draft, post_dirs
from velcro.modes.init_site import init_site
from velcro.modes.preview import prepare_preview, preview
from velcro.utils.make_chrome_options import make_chrome_options

def build_parser() -> argparse.ArgumentParser:
    p   = argparse.ArgumentParser(prog="velcro", description="A small static blog generator")
    p.add_argument("-v", "--verbose", action="store_true", help="verbose output")
    sub = p.add_subparsers(dest="cmd", required=True)

    init = sub.add_parser("init", help="initialize a new blog from the default template")
    init.add_argument("name", help="name of the blog folder to create")

    build = sub.add_parser("build", help="build the blog into a static site")
    build.add_argument("--root", type=Path, default=Path("."), help="blog root directory")

    lst = sub.add_parser("list", help="show posts and their scripts")
    lst.add_argument("--root", type=Path, default=Path("."), help="blog root directory")

    prev = sub.add_parser("preview", help="open a post in Chrome with its scripts applied")
    prev.add_argument("slug", help="post folder name")
    prev.add_argument("--root", type=Path, default=Path("."), help="blog root directory")
    prev.add_argument("--headless", action="store_true", help="run Chrome headless")
    prev.add_argument("--timeout", type=int, default=30, help="Time before automatic exit (seconds)")

    return p

def list_posts(root: Path) -> None:
    config = load_site_config(root)
    for post_dir in post_dirs(config, root):
        hooks = list(find_hooks(post_dir, config.scripts.extensions))
        flags = " (draft)" if is_draft(post_dir, config) else ""
        print(f"{post_dir.name:30} {', '.join(hooks) or '-'}{flags}")

def _make_shutdown_handler(task):
    def _handler():
        task.cancel()
    return _handler

async def run_preview(args) -> None:
    config = load_site_config(args.root)
    page = prepare_preview(config, args.root, args.slug)

    loop = asyncio.get_running_loop()
    current = asyncio.current_task()
    loop.add_signal_handler(signal.SIGINT,  _make_shutdown_handler(current))
    loop.add_signal_handler(signal.SIGTERM, _make_shutdown_handler(current))

    options = await make_chrome_options(headless=args.headless)
    try:
        async with Chrome(options=options) as browser:
            await preview(browser, page, timeout=args.timeout)
    except asyncio.CancelledError:
        pass
    except ConnectionError:
        print("Chrome disconnected, exiting.")
    finally:
        loop.remove_signal_handler(signal.SIGINT)
        loop.remove_signal_handler(signal.SIGTERM)

async def app(args):
    if args.cmd == "init":
        site_dir = init_site(args.name)
        print("Blog initialized successfully!\n")
        print("Getting started with your new blog")
        print(f"1. cd {site_dir}")
        print("2. velcro build")
        print("3. velcro preview example-post-one")
        return

    if args.cmd == "list":
        list_posts(args.root)
        return

    if args.cmd == "build":
        config = load_site_config(args.root)
        report = build_site(config, args.root)
        print(
            f"Built {len(report.posts)} posts and {report.pages} pages "
            f"into {args.root / config.output_dir}"
        )
        if report.drafts:
            print(f"Skipped drafts: {', '.join(report.drafts)}")
        return

    await run_preview(args)
