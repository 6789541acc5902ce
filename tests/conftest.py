from pathlib import Path

import pytest

from velcro.modes.init_site import init_site


@pytest.fixture
def site(tmp_path) -> Path:
    return init_site("blog", tmp_path)


@pytest.fixture
def make_post(site):
    def _make_post(slug: str, files: dict) -> Path:
        post_dir = site / "src" / "posts" / slug
        post_dir.mkdir(parents=True, exist_ok=True)
        for name, content in files.items():
            (post_dir / name).write_text(content, encoding="utf-8")
        return post_dir
    return _make_post
