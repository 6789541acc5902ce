# Default Libraries
import logging
import re
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path

# Local Imports
from velcro.errors import InitError

logger = logging.getLogger(__name__)

SITE_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")
TEMPLATE_PACKAGE = "velcro"
TEMPLATE_DIR = "init_template"


def _copy_tree(node: Traversable, dest: Path) -> None:
    for child in node.iterdir():
        if child.name.endswith(".gitkeep"):
            continue
        target = dest / child.name
        if child.is_dir():
            logger.debug("Creating directory %s", target)
            target.mkdir(parents=True, exist_ok=True)
            _copy_tree(child, target)
        else:
            logger.debug("Copying file %s", target)
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(child.read_bytes())


def init_site(name: str, parent: Path = Path(".")) -> Path:
    logger.debug("Validating site name %s", name)
    if not SITE_NAME_PATTERN.fullmatch(name):
        raise InitError("The site name must contain only A-Z, a-z, 0-9, hyphens, and underscores")

    site_dir = Path(parent) / name
    if site_dir.exists():
        raise InitError(f"A folder named {name!r} already exists")

    logger.info("Initializing your Velcro blog in %s", site_dir)
    site_dir.mkdir(parents=True)
    _copy_tree(resources.files(TEMPLATE_PACKAGE).joinpath(TEMPLATE_DIR), site_dir)
    return site_dir
