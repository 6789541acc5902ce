from velcro.pydoll_extensions import TabWrapper
from velcro.utils.script_injector import InjectionPlan

async def apply_plan(tab: TabWrapper, plan: InjectionPlan, url: str) -> None:
    # PRE_LOAD must be registered before navigation to run ahead of the page
    for script in plan.pre_stage:
        await tab.inject_script(script)

    await tab.go_to_loaded(url)

    for script in plan.post_stage:
        await tab.evaluate(script)
