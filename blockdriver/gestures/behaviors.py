from __future__ import annotations
import asyncio
import logging
from typing import TYPE_CHECKING, Any, Optional, Union

from ..config import cfg
from ..errors import ResolutionError
from ..inspector import selected_element
from ..locator import (
    block_id_of,
    find_block_by_type_in_category,
    find_nth_block_in_category,
    resolve_by_id,
)
from ..session import query_selector, query_selector_all
from ..utils import wait_until
from .dispatchers import click_element, drag_between
from .geometry import ConnectionLike, DeltaLike, ScreenPoint, as_delta, element_center, point_of

if TYPE_CHECKING:
    from ..session import EditorSession

BlockLike = Union[str, Any]


async def drag_element_by(
    session: "EditorSession", element: Any, delta: DeltaLike
) -> ScreenPoint:
    """Drag an element from its centre by ``delta``; returns the drop point."""
    offset = as_delta(delta)
    start = await element_center(session.tab, element)
    end = start + offset
    await drag_between(session.tab, start, end)
    return end


async def drag_from_flyout(
    session: "EditorSession", flyout_element: Any, delta: DeltaLike
) -> Any:
    """Drag a flyout block onto the workspace and return the new block's element.

    Dropping a flyout block creates exactly one block and selects it, so the
    selection is the new block.
    """
    await drag_element_by(session, flyout_element, delta)
    return await selected_element(session)


async def drag_block_type_from_flyout(
    session: "EditorSession",
    category_name: Optional[str],
    block_type: str,
    delta: DeltaLike,
) -> Any:
    flyout_block = await find_block_by_type_in_category(
        session, category_name, block_type
    )
    return await drag_from_flyout(session, flyout_block, delta)


async def drag_nth_block_from_flyout(
    session: "EditorSession", category_name: str, n: int, delta: DeltaLike
) -> Any:
    flyout_block = await find_nth_block_in_category(session, category_name, n)
    return await drag_from_flyout(session, flyout_block, delta)


def _block_id(block: BlockLike) -> str:
    if isinstance(block, str):
        return block
    block_id = block_id_of(block)
    if not block_id:
        raise ResolutionError("element is not tagged with a block id")
    return block_id


async def connect_by_drag(
    session: "EditorSession",
    dragged: BlockLike,
    dragged_connection: ConnectionLike,
    target: BlockLike,
    target_connection: ConnectionLike,
    mutator_block_id: Optional[str] = None,
    drag_origin: Any = None,
) -> None:
    """Drag ``dragged`` so its connection lands on the target's connection.

    Blocks are elements resolved by id or plain block ids. Only the endpoints
    are computed here; snapping the two connections together is left to the
    editor. Inside a mutator the visible element to drag differs from the
    logical block, so ``drag_origin`` must name it.
    """
    dragged_id = _block_id(dragged)
    target_id = _block_id(target)

    dragged_point = await point_of(
        session, dragged_id, dragged_connection, mutator_block_id
    )
    target_point = await point_of(session, target_id, target_connection, mutator_block_id)
    delta = target_point - dragged_point

    if mutator_block_id:
        if drag_origin is None:
            raise ResolutionError(
                "drag_origin is required to drag a block inside a mutator"
            )
        handle = drag_origin
    elif drag_origin is not None:
        handle = drag_origin
    elif isinstance(dragged, str):
        handle = await resolve_by_id(session, dragged)
    else:
        handle = dragged

    logging.getLogger(__name__).debug(
        "Connecting %s %s -> %s %s by (%.1f, %.1f)",
        dragged_id,
        dragged_connection,
        target_id,
        target_connection,
        delta.dx,
        delta.dy,
    )
    await drag_element_by(session, handle, delta)


async def right_click_and_select(
    session: "EditorSession", block_element: Any, item_text: str
) -> None:
    """Open a block's context menu and click the item labelled ``item_text``.

    The click goes to the block's first text element rather than its centre,
    which may fall into a hole such as an empty statement input.
    """

    async def _text_element():
        return await query_selector(block_element, ".blocklyText")

    click_target = await wait_until(_text_element, description="block text element")
    await click_element(session.tab, click_target, button_name="right")

    async def _menu_item():
        for element in await query_selector_all(session.tab, "div"):
            if (element.text_all or "").strip() == item_text:
                return element
        return None

    item = await wait_until(_menu_item, description=f"context menu item {item_text!r}")
    await click_element(session.tab, item)
    await asyncio.sleep(cfg.MENU_SETTLE_S)
