from __future__ import annotations
import asyncio
import enum
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Tuple
from urllib.parse import urlencode

import zendriver
from zendriver import cdp

from .config import cfg, chrome_arguments, editor_root, is_ci
from .errors import EditorScriptError, NotFound, SessionError
from .scripts import call_expression

BrowserStarter = Callable[..., Awaitable[Any]]


class ScreenDirection(enum.IntEnum):
    """Horizontal direction of the editor; multiply x offsets by it."""

    RTL = -1
    LTR = 1


@dataclass(frozen=True)
class DocumentLocations:
    """file:// URLs of the documents a test may open."""

    block_factory: str
    code_demo: str
    playground: str

    @classmethod
    def from_root(cls, root: Optional[str] = None) -> "DocumentLocations":
        base = Path(root or editor_root()).resolve()
        return cls(
            block_factory=(base / "demos" / "blockfactory" / "index.html").as_uri(),
            code_demo=(base / "demos" / "code" / "index.html").as_uri(),
            playground=(base / "tests" / "playground.html").as_uri(),
        )

    def playground_url(self, toolbox: Optional[str] = None) -> str:
        """Playground URL, optionally selecting a toolbox definition."""
        if not toolbox:
            return self.playground
        return f"{self.playground}?{urlencode({'toolbox': toolbox})}"


def launch_options(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Keyword arguments for zendriver.start() in the current environment."""
    ci = is_ci(environ)
    return {
        "headless": ci,
        "sandbox": not ci,
        "browser_args": chrome_arguments(environ),
    }


def _split_evaluate_response(response: Any) -> Tuple[Any, Any]:
    """Normalize a Runtime.evaluate reply into (remote_object, exception_details)."""
    if isinstance(response, tuple):
        remote_object = response[0] if response else None
        details = response[1] if len(response) > 1 else None
        return remote_object, details
    if isinstance(response, dict):
        return response.get("result"), response.get("exceptionDetails")
    return response, None


def _remote_value(remote_object: Any) -> Any:
    if remote_object is None:
        return None
    if isinstance(remote_object, dict):
        return remote_object.get("value")
    return getattr(remote_object, "value", None)


def _describe_exception(details: Any) -> str:
    exception = getattr(details, "exception", None)
    description = getattr(exception, "description", None)
    if description:
        return str(description)
    text = getattr(details, "text", None)
    if isinstance(details, dict):
        text = details.get("text")
    return str(text or "script raised an exception")


async def query_selector(target: Any, selector: str) -> Any:
    """``target.query_selector`` with transport failures raised as SessionError.

    ``target`` is a tab or an element. zendriver already answers None when
    nothing matches, so anything raised here means the session is unusable.
    """
    try:
        return await target.query_selector(selector)
    except Exception as exc:
        raise SessionError(f"query for {selector!r} failed: {exc}") from exc


async def query_selector_all(target: Any, selector: str) -> List[Any]:
    try:
        return await target.query_selector_all(selector)
    except Exception as exc:
        raise SessionError(f"query for {selector!r} failed: {exc}") from exc


class EditorSession:
    """The one remote browser a test run drives, with explicit lifecycle.

    ``ensure()`` starts Chrome lazily and is idempotent; ``open(url)`` makes sure
    a browser exists and points its main tab at ``url``; ``teardown()`` stops
    the browser so the next ``ensure()`` starts a fresh one.
    """

    def __init__(
        self,
        *,
        environ: Optional[Mapping[str, str]] = None,
        starter: Optional[BrowserStarter] = None,
    ):
        self._environ = environ
        self._starter: BrowserStarter = starter or zendriver.start
        self._browser: Any = None
        self._tab: Any = None

    @property
    def started(self) -> bool:
        return self._browser is not None

    @property
    def browser(self) -> Any:
        if self._browser is None:
            raise SessionError("no browser is running; call ensure() or open() first")
        return self._browser

    @property
    def tab(self) -> Any:
        """Tab showing the current target document."""
        if self._tab is None:
            raise SessionError("no document is open; call open(url) first")
        return self._tab

    async def ensure(self) -> Any:
        """Return the running browser, starting one if needed."""
        if self._browser is not None:
            return self._browser

        options = launch_options(self._environ)
        logging.getLogger(__name__).info(
            "Starting browser (headless=%s, args=%s)",
            options["headless"],
            " ".join(options["browser_args"]),
        )
        try:
            self._browser = await self._starter(**options)
        except Exception as exc:
            raise SessionError(f"could not start the browser: {exc}") from exc
        return self._browser

    async def navigate(self, url: str) -> Any:
        """Load ``url`` in the main tab of the running browser."""
        logging.getLogger(__name__).info("Opening %s", url)
        self._tab = await self.browser.get(url)
        return self._tab

    async def open(self, url: str) -> Any:
        await self.ensure()
        return await self.navigate(url)

    async def teardown(self) -> None:
        """Stop the browser. A no-op when nothing was started."""
        browser, self._browser, self._tab = self._browser, None, None
        if browser is None:
            return
        logging.getLogger(__name__).info("Stopping browser")
        await browser.stop()

    async def execute(self, script: str, *args: Any) -> Any:
        """Evaluate a JavaScript function in the document and return its value."""
        expression = call_expression(script, *args)
        tab = self.tab
        try:
            response = await tab.send(
                cdp.runtime.evaluate(
                    expression=expression,
                    return_by_value=True,
                    await_promise=False,
                )
            )
        except Exception as exc:
            raise SessionError(f"Runtime.evaluate failed: {exc}") from exc
        remote_object, exception_details = _split_evaluate_response(response)
        if exception_details is not None:
            raise EditorScriptError(
                _describe_exception(exception_details), expression=expression
            )
        return _remote_value(remote_object)

    async def __aenter__(self) -> "EditorSession":
        await self.ensure()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.teardown()


SCREEN_DIRECTION = """
function () {
  return Blockly.getMainWorkspace().RTL ? -1 : 1;
}
"""


async def screen_direction(session: EditorSession) -> ScreenDirection:
    """Direction the main workspace is currently laid out in."""
    return ScreenDirection(int(await session.execute(SCREEN_DIRECTION)))


async def switch_rtl(session: EditorSession) -> None:
    """Switch the playground to right-to-left via its options form."""
    form = await query_selector(session.tab, "#options > select:nth-child(1)")
    if form is None:
        raise NotFound("playground direction selector not found")
    options = await query_selector_all(form, "option")
    if len(options) < 2:
        raise NotFound("playground direction selector has no RTL option")
    await options[1].select_option()
    await asyncio.sleep(cfg.RTL_SETTLE_S)
