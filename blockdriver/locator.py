"""Resolve editor objects (categories, flyout blocks, workspace blocks) to elements.

Only the existence waits for toolbox categories poll; every other lookup runs
once and raises NotFound when nothing matches.
"""
from __future__ import annotations
import asyncio
import logging
from typing import TYPE_CHECKING, Any, Optional, Union

from .config import cfg
from .errors import NotFound, ResolutionError
from .gestures.dispatchers import click_element
from .scripts import FLYOUT_BLOCK_ID_BY_TYPE, SURFACE_BLOCK_ID_BY_TYPE, script_error
from .session import query_selector, query_selector_all
from .utils import wait_until

if TYPE_CHECKING:
    from .session import EditorSession

CATEGORY_SELECTOR = ".blocklyToolboxCategory"
# The flyout canvas interleaves each block with a separator after two leading
# children, so block n is child 3 + 2n. This mirrors the editor's current DOM
# layout; prefer find_block_by_type_in_category when the block type is known.
FLYOUT_SLOT_SELECTOR = ".blocklyFlyout .blocklyBlockCanvas > g:nth-child({slot})"


def _id_selector(block_id: str) -> str:
    escaped = block_id.replace("\\", "\\\\").replace('"', '\\"')
    return f'[data-id="{escaped}"]'


def tag_block_id(element: Any, block_id: str) -> Any:
    """Remember which block an element belongs to."""
    setattr(element, "block_id", block_id)
    return element


def block_id_of(element: Any) -> Optional[str]:
    """Block id of a resolved element: its tag, else its data-id attribute."""
    tagged = getattr(element, "block_id", None)
    if isinstance(tagged, str) and tagged:
        return tagged
    attrs = getattr(element, "attrs", None)
    if attrs is not None and hasattr(attrs, "get"):
        value = attrs.get("data-id")
        if isinstance(value, str) and value:
            return value
    return None


def flyout_slot(n: int) -> int:
    if n < 0:
        raise ValueError(f"block index must be >= 0, got {n}")
    return cfg.FLYOUT_FIRST_BLOCK_SLOT + cfg.FLYOUT_SLOT_STRIDE * n


async def resolve_by_id(session: "EditorSession", block_id: str) -> Any:
    """Element of the block with ``block_id``, tagged with that id."""
    if not block_id:
        raise ResolutionError("no block id to resolve")
    element = await query_selector(session.tab, _id_selector(block_id))
    if element is None:
        raise NotFound(f"no element for block {block_id!r}")
    return tag_block_id(element, block_id)


async def find_category(
    session: "EditorSession", name: str, *, timeout_seconds: Optional[float] = None
) -> Any:
    """Toolbox category whose label contains ``name``, waiting for it to exist."""
    if not name:
        raise ValueError("category name must not be empty")

    async def _probe():
        for element in await query_selector_all(session.tab, CATEGORY_SELECTOR):
            if name in (element.text_all or ""):
                return element
        return None

    category = await wait_until(
        _probe,
        description=f"toolbox category {name!r}",
        timeout_seconds=timeout_seconds,
    )
    logging.getLogger(__name__).debug("Found toolbox category %r", name)
    return category


async def open_category(session: "EditorSession", category: Union[str, Any]) -> Any:
    """Click a category (element or name) so its flyout opens."""
    if isinstance(category, str):
        category = await find_category(session, category)
    await click_element(session.tab, category)
    await asyncio.sleep(cfg.FLYOUT_SETTLE_S)
    return category


async def find_nth_block_in_category(
    session: "EditorSession", category: Union[str, Any], n: int
) -> Any:
    """The n-th (0-indexed) block shown in a category's flyout."""
    selector = FLYOUT_SLOT_SELECTOR.format(slot=flyout_slot(n))
    await open_category(session, category)
    block = await query_selector(session.tab, selector)
    if block is None:
        raise NotFound(f"no block #{n} in the flyout ({selector})")
    return block


async def find_block_by_type_in_category(
    session: "EditorSession", category_name: Optional[str], block_type: str
) -> Any:
    """First flyout block of ``block_type``.

    ``category_name`` of None or "" means the toolbox has no categories and the
    flyout is always open.
    """
    if category_name:
        await open_category(session, category_name)
    result = await session.execute(FLYOUT_BLOCK_ID_BY_TYPE, block_type)
    error = script_error(result)
    if error:
        raise NotFound(error)
    return await resolve_by_id(session, result["id"])


async def find_block_by_type_on_surface(
    session: "EditorSession", block_type: str, ordinal: int = 0
) -> Any:
    """Block of ``block_type`` at ``ordinal`` on the main workspace, nested ones included."""
    result = await session.execute(SURFACE_BLOCK_ID_BY_TYPE, block_type, ordinal)
    error = script_error(result)
    if error:
        raise NotFound(error)
    return await resolve_by_id(session, result["id"])
