import pytest

from velcro.utils.script_injector import (
    ContentPage,
    GlobalScript,
    InjectionPlan,
    InjectionPoint,
    OrderingPolicy,
    Snippet,
    resolve,
    resolve_many,
)

PRELOAD = "console.log('Hello from preload.js!');"
LOCAL = "console.log('Hello from LOCAL index.js!');"
GLOBAL = "console.log('Hello from GLOBAL index.js!');"


def test_no_scripts_resolves_to_empty_stages():
    plan = resolve(ContentPage("empty"))

    assert plan.pre_stage == ()
    assert plan.post_stage == ()
    assert plan.is_empty()


def test_only_global_script_lands_at_its_point():
    plan = resolve(ContentPage("bare"), GlobalScript(Snippet(GLOBAL)))

    assert plan.pre_stage == ()
    assert plan.post_stage == (GLOBAL,)


def test_global_script_at_both_points():
    both = frozenset({InjectionPoint.PRE_LOAD, InjectionPoint.POST_LOAD})
    plan = resolve(ContentPage("bare"), GlobalScript(Snippet(GLOBAL), points=both))

    assert plan.pre_stage == (GLOBAL,)
    assert plan.post_stage == (GLOBAL,)


def test_global_script_without_points_is_inactive():
    plan = resolve(ContentPage("bare"), GlobalScript(Snippet(GLOBAL), points=frozenset()))

    assert plan.is_empty()


def test_example_post_one_scenario():
    page = ContentPage("example-post-one", preload=Snippet(PRELOAD), index=Snippet(LOCAL))

    plan = resolve(page, GlobalScript(Snippet(GLOBAL)))

    assert list(plan.pre_stage) == [PRELOAD]
    assert list(plan.post_stage) == [GLOBAL, LOCAL]


def test_local_first_policy_reverses_each_stage():
    both = frozenset({InjectionPoint.PRE_LOAD, InjectionPoint.POST_LOAD})
    page = ContentPage("p", preload=Snippet(PRELOAD), index=Snippet(LOCAL))

    plan = resolve(page, GlobalScript(Snippet(GLOBAL), points=both), OrderingPolicy.LOCAL_FIRST)

    assert plan.pre_stage == (PRELOAD, GLOBAL)
    assert plan.post_stage == (LOCAL, GLOBAL)


def test_resolve_is_idempotent():
    page = ContentPage("p", preload=Snippet(PRELOAD), index=Snippet(LOCAL))
    global_script = GlobalScript(Snippet(GLOBAL))

    assert resolve(page, global_script) == resolve(page, global_script)


def test_pages_never_see_each_others_local_scripts():
    first = ContentPage("first", index=Snippet("first();"))
    second = ContentPage("second", preload=Snippet("second();"))

    plans = resolve_many([first, second], GlobalScript(Snippet(GLOBAL)))

    assert plans["first"] == InjectionPlan(pre_stage=(), post_stage=(GLOBAL, "first();"))
    assert plans["second"] == InjectionPlan(pre_stage=("second();",), post_stage=(GLOBAL,))


def test_snippet_bodies_pass_through_untouched():
    body = "if (a < b && c > d) { alert(`${x}`) }\n// </script>"
    plan = resolve(ContentPage("p", index=Snippet(body)))

    assert plan.stage(InjectionPoint.POST_LOAD) == (body,)


@pytest.mark.parametrize("name, expected", [
    ("pre-load", InjectionPoint.PRE_LOAD),
    ("POST_LOAD", InjectionPoint.POST_LOAD),
    (" post-load ", InjectionPoint.POST_LOAD),
])
def test_injection_point_from_name(name, expected):
    assert InjectionPoint.from_name(name) is expected


def test_unknown_names_raise():
    with pytest.raises(ValueError):
        InjectionPoint.from_name("during-load")
    with pytest.raises(ValueError):
        OrderingPolicy.from_name("random")
