"""
Resolves which script snippets a post page receives, and in what order.

A post may own a ``preload`` script (PRE_LOAD) and an ``index`` script
(POST_LOAD). The site may own one global script that is active at one or
both points. Resolution is a pure lookup: nothing here touches the disk.
"""
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable


class InjectionPoint(Enum):
    PRE_LOAD = "pre-load"
    POST_LOAD = "post-load"

    @classmethod
    def from_name(cls, name: str) -> "InjectionPoint":
        key = name.strip().lower().replace("_", "-")
        for point in cls:
            if point.value == key:
                return point
        raise ValueError(f"Unknown injection point {name!r}")


class OrderingPolicy(Enum):
    GLOBAL_FIRST = "global-first"
    LOCAL_FIRST = "local-first"

    @classmethod
    def from_name(cls, name: str) -> "OrderingPolicy":
        key = name.strip().lower().replace("_", "-")
        for policy in cls:
            if policy.value == key:
                return policy
        raise ValueError(f"Unknown ordering policy {name!r}")


# File stem -> injection point. "preload.js" runs before content, "index.js" after.
HOOK_STEMS: dict[str, InjectionPoint] = {
    "preload": InjectionPoint.PRE_LOAD,
    "index": InjectionPoint.POST_LOAD,
}


@dataclass(frozen=True)
class Snippet:
    """Opaque script text. ``source`` is only kept for log messages."""

    body: str
    source: Path | None = None


@dataclass(frozen=True)
class ContentPage:
    slug: str
    preload: Snippet | None = None
    index: Snippet | None = None

    def local(self, point: InjectionPoint) -> Snippet | None:
        if point is InjectionPoint.PRE_LOAD:
            return self.preload
        return self.index


@dataclass(frozen=True)
class GlobalScript:
    snippet: Snippet | None = None
    points: frozenset[InjectionPoint] = field(
        default_factory=lambda: frozenset({InjectionPoint.POST_LOAD})
    )

    def at(self, point: InjectionPoint) -> Snippet | None:
        if self.snippet is None or point not in self.points:
            return None
        return self.snippet


@dataclass(frozen=True)
class InjectionPlan:
    pre_stage: tuple[str, ...] = ()
    post_stage: tuple[str, ...] = ()

    def stage(self, point: InjectionPoint) -> tuple[str, ...]:
        if point is InjectionPoint.PRE_LOAD:
            return self.pre_stage
        return self.post_stage

    def is_empty(self) -> bool:
        return not self.pre_stage and not self.post_stage


NO_GLOBAL_SCRIPT = GlobalScript()


def _stage(
    point: InjectionPoint,
    page: ContentPage,
    global_script: GlobalScript,
    order: OrderingPolicy,
) -> tuple[str, ...]:
    global_part = global_script.at(point)
    local_part = page.local(point)

    if order is OrderingPolicy.GLOBAL_FIRST:
        ordered = (global_part, local_part)
    else:
        ordered = (local_part, global_part)

    return tuple(snippet.body for snippet in ordered if snippet is not None)


def resolve(
    page: ContentPage,
    global_script: GlobalScript = NO_GLOBAL_SCRIPT,
    order: OrderingPolicy = OrderingPolicy.GLOBAL_FIRST,
) -> InjectionPlan:
    """Build the ordered snippet lists for both injection points of ``page``.

    A missing local or global snippet simply contributes nothing to its stage.
    """
    return InjectionPlan(
        pre_stage=_stage(InjectionPoint.PRE_LOAD, page, global_script, order),
        post_stage=_stage(InjectionPoint.POST_LOAD, page, global_script, order),
    )


def resolve_many(
    pages: Iterable[ContentPage],
    global_script: GlobalScript = NO_GLOBAL_SCRIPT,
    order: OrderingPolicy = OrderingPolicy.GLOBAL_FIRST,
) -> dict[str, InjectionPlan]:
    return {page.slug: resolve(page, global_script, order) for page in pages}
