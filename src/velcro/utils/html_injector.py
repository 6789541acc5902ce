import re

from velcro.loaders.template_loader import render_script_tag
from velcro.utils.script_injector import InjectionPlan, InjectionPoint

_HEAD_OPEN = re.compile(r"<head(\s[^>]*)?>", re.IGNORECASE)
_HEAD_CLOSE = re.compile(r"</head\s*>", re.IGNORECASE)
_HTML_OPEN = re.compile(r"<html(\s[^>]*)?>", re.IGNORECASE)
_BODY_CLOSE = re.compile(r"</body\s*>", re.IGNORECASE)
# <meta charset="..."> or <meta http-equiv="Content-Type" content="...; charset=...">
_META_CHARSET = re.compile(r"<meta\s[^>]*charset[^>]*>", re.IGNORECASE)


def _tags(plan: InjectionPlan, point: InjectionPoint) -> str:
    return "\n".join(render_script_tag(point, body) for body in plan.stage(point))


def _pre_load_anchor(html: str) -> int | None:
    head = _HEAD_OPEN.search(html)
    if head is None:
        html_tag = _HTML_OPEN.search(html)
        return html_tag.end() if html_tag else None

    # the charset declaration must stay within the first 1024 bytes
    head_close = _HEAD_CLOSE.search(html, head.end())
    end = head_close.start() if head_close else len(html)
    meta = _META_CHARSET.search(html, head.end(), end)
    return meta.end() if meta else head.end()


def _insert_pre_load(html: str, tags: str) -> str:
    at = _pre_load_anchor(html)
    if at is None:
        return f"{tags}\n{html}"
    return f"{html[:at]}\n{tags}{html[at:]}"


def _insert_post_load(html: str, tags: str) -> str:
    # last </body>; earlier ones can only sit inside inline strings
    matches = list(_BODY_CLOSE.finditer(html))
    if not matches:
        return f"{html}\n{tags}\n"
    at = matches[-1].start()
    return f"{html[:at]}{tags}\n{html[at:]}"


def inject_plan(html: str, plan: InjectionPlan) -> str:
    """Embed the plan's snippets as inline <script> tags.

    PRE_LOAD tags open the <head> (after its charset declaration, if any) so
    they run before any content is parsed; POST_LOAD tags go right before
    </body>.
    """
    if plan.pre_stage:
        html = _insert_pre_load(html, _tags(plan, InjectionPoint.PRE_LOAD))
    if plan.post_stage:
        html = _insert_post_load(html, _tags(plan, InjectionPoint.POST_LOAD))
    return html
