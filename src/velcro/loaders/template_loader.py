import re
from functools import lru_cache
from importlib import resources

from velcro.utils.script_injector import InjectionPoint

_CLOSING_SCRIPT = re.compile(r"</(script)", re.IGNORECASE)

@lru_cache
def _load_raw_template(name: str) -> str:
    template = resources.files("velcro.templates").joinpath(name)
    if not template.is_file():
        raise FileNotFoundError(f"Template {name} not found in velcro/templates")
    return template.read_text(encoding="utf-8")

def render_template(name: str, **kwargs) -> str:
    return _load_raw_template(name).format(**kwargs)

def render_script_tag(point: InjectionPoint, body: str) -> str:
    # "</script" inside a body would end the tag early
    safe_body = _CLOSING_SCRIPT.sub(r"<\\/\1", body)
    return render_template("script_tag.html", stage=point.value, body=safe_body)
