# Default Libraries
import asyncio
import logging

# Pydoll Imports
from pydoll.browser.tab import Tab
from pydoll.commands.page_commands import PageCommands
from pydoll.commands.runtime_commands import RuntimeCommands
from pydoll.protocol.page.events import PageEvent

logger = logging.getLogger(__name__)


class TabWrapper():
    def __init__(self, real_tab: Tab):
        self._tab = real_tab

    async def go_to_loaded(self, url: str):
        """Navigate and wait for the page's load event."""
        if not self._tab.page_events_enabled:
            await self._tab.enable_page_events()

        fut = asyncio.get_running_loop().create_future()
        async def on_load(_event):
            if not fut.done():
                fut.set_result(None)
        await self._tab.on(PageEvent.LOAD_EVENT_FIRED, on_load, temporary=True)

        await self._tab._execute_command(PageCommands.navigate(url))
        await fut

    async def evaluate(self, expression: str):
        resp = await self._tab._execute_command(
            RuntimeCommands.evaluate(
                expression=expression,
                return_by_value=True
            )
        )
        result = resp["result"]
        if "exceptionDetails" in result:
            logger.warning("Script raised in page: %s", result["exceptionDetails"].get("text"))
        return result["result"].get("value")

    async def inject_script(self, script: str):
        """Run ``script`` in every new document before its own scripts."""
        await self._tab._execute_command(
            PageCommands.add_script_to_evaluate_on_new_document(
                source=script,
                run_immediately=False
            )
        )

    def __getattr__(self, name):
        return getattr(self._tab, name)
