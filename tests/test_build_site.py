import pytest

from velcro.errors import BuildError, CircularIncludeError, ComponentNotFoundError
from velcro.loaders.site_loader import load_site_config, parse_site_config
from velcro.modes.build_site import build_site, process_includes, validate_html

PAGE = "<html><head></head><body>{}</body></html>"


def _read(path):
    return path.read_text(encoding="utf-8")


def test_build_scaffolded_site(site):
    report = build_site(load_site_config(site), site)

    assert report.posts == ["example-post-one"]
    assert report.pages == 1

    dist = site / "dist"
    post_html = _read(dist / "posts" / "example-post-one" / "index.html")
    preload_at = post_html.index("Hello from preload.js!")
    global_at = post_html.index("Hello from GLOBAL index.js!")
    local_at = post_html.index("Hello from LOCAL index.js!")
    assert preload_at < post_html.index("<title>")
    assert post_html.index("</main>") < global_at < local_at < post_html.index("</body>")
    assert "<header>" in post_html
    assert "include=" not in post_html

    home = _read(dist / "index.html")
    assert "<header>" in home
    assert "data-velcro-stage" not in home

    assert (dist / "styles" / "main.css").is_file()
    assert (dist / "scripts" / "index.js").is_file()


def test_local_scripts_stay_with_their_post(site, make_post):
    make_post("second", {"index.html": PAGE.format("second"), "preload.js": "secondOnly();"})

    build_site(load_site_config(site), site)

    first = _read(site / "dist" / "posts" / "example-post-one" / "index.html")
    second = _read(site / "dist" / "posts" / "second" / "index.html")
    assert "secondOnly();" not in first
    assert "Hello from LOCAL index.js!" not in second
    assert "Hello from GLOBAL index.js!" in second


def test_local_first_order(site):
    (site / "velcro.yaml").write_text("scripts:\n  order: local-first\n", encoding="utf-8")

    build_site(load_site_config(site), site)

    html = _read(site / "dist" / "posts" / "example-post-one" / "index.html")
    assert html.index("Hello from LOCAL index.js!") < html.index("Hello from GLOBAL index.js!")


def test_drafts_are_skipped(site, make_post):
    make_post("_wip", {"index.html": PAGE.format("wip")})

    report = build_site(load_site_config(site), site)

    assert report.drafts == ["_wip"]
    assert not (site / "dist" / "posts" / "_wip").exists()


def test_post_without_scripts_is_copied_verbatim(site, make_post):
    (site / "src" / "scripts" / "index.js").unlink()
    make_post("plain", {"index.html": PAGE.format("plain")})

    build_site(load_site_config(site), site)

    assert _read(site / "dist" / "posts" / "plain" / "index.html") == PAGE.format("plain")


def test_missing_sections_are_skipped(tmp_path):
    report = build_site(parse_site_config({}), tmp_path)

    assert report.posts == []
    assert report.pages == 0


def test_nested_components(tmp_path):
    components = tmp_path / "components"
    components.mkdir()
    (components / "outer.html").write_text('<div><!-- include="@components/inner.html" --></div>', encoding="utf-8")
    (components / "inner.html").write_text("<span>inner</span>", encoding="utf-8")

    html = process_includes('<!-- include="@components/outer" --><!-- include="@components/inner" -->', components)

    assert html == "<div><span>inner</span></div><span>inner</span>"


def test_content_and_unknown_includes_are_kept(tmp_path):
    text = '<!-- include="@content" --><!-- include="@partials/x" -->'

    assert process_includes(text, tmp_path) == text


def test_circular_include_raises(tmp_path):
    (tmp_path / "a.html").write_text('<!-- include="@components/b" -->', encoding="utf-8")
    (tmp_path / "b.html").write_text('<!-- include="@components/a" -->', encoding="utf-8")

    with pytest.raises(CircularIncludeError):
        process_includes('<!-- include="@components/a" -->', tmp_path)


def test_missing_component_raises(tmp_path):
    with pytest.raises(ComponentNotFoundError) as excinfo:
        process_includes('<!-- include = "@components/ghost" -->', tmp_path)
    assert "ghost" in str(excinfo.value)


def test_validate_html_warnings(tmp_path, caplog):
    validate_html("<head><body><p>x</p>", tmp_path / "broken.html")

    messages = [record.getMessage() for record in caplog.records]
    assert any("Unclosed <head>" in m for m in messages)
    assert any("Unclosed <body>" in m for m in messages)


def test_validate_html_missing_head(tmp_path, caplog):
    validate_html("<p>x</p>", tmp_path / "fragment.html")

    assert "Missing <head> tag" in caplog.text


def test_non_utf8_component_raises_build_error(tmp_path):
    (tmp_path / "latin.html").write_bytes(b"<p>caf\xe9</p>")

    with pytest.raises(BuildError) as excinfo:
        process_includes('<!-- include="@components/latin" -->', tmp_path)
    assert "latin.html" in str(excinfo.value)
