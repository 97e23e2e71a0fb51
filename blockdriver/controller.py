from __future__ import annotations
from typing import Any, List, Optional

from . import inspector, locator
from .gestures import behaviors
from .gestures.geometry import ConnectionLike, DeltaLike, ScreenPoint, point_of
from .session import EditorSession


class EditorController:
    """Tiny façade binding the locator, gesture and inspector calls to one session."""

    def __init__(self, session: EditorSession):
        self.session = session

    async def open(self, url: str) -> "EditorController":
        await self.session.open(url)
        return self

    # --- lookups ---
    async def category(self, name: str) -> Any:
        return await locator.find_category(self.session, name)

    async def flyout_block(self, category_name: Optional[str], block_type: str) -> Any:
        return await locator.find_block_by_type_in_category(
            self.session, category_name, block_type
        )

    async def workspace_block(self, block_type: str, ordinal: int = 0) -> Any:
        return await locator.find_block_by_type_on_surface(
            self.session, block_type, ordinal
        )

    async def block(self, block_id: str) -> Any:
        return await locator.resolve_by_id(self.session, block_id)

    async def connection_point(
        self,
        block_id: str,
        connection: ConnectionLike,
        mutator_block_id: Optional[str] = None,
    ) -> ScreenPoint:
        return await point_of(self.session, block_id, connection, mutator_block_id)

    # --- gestures ---
    async def drag_from_flyout(
        self, category_name: Optional[str], block_type: str, delta: DeltaLike
    ) -> Any:
        return await behaviors.drag_block_type_from_flyout(
            self.session, category_name, block_type, delta
        )

    async def connect(
        self,
        dragged: Any,
        dragged_connection: ConnectionLike,
        target: Any,
        target_connection: ConnectionLike,
        mutator_block_id: Optional[str] = None,
        drag_origin: Any = None,
    ) -> None:
        await behaviors.connect_by_drag(
            self.session,
            dragged,
            dragged_connection,
            target,
            target_connection,
            mutator_block_id=mutator_block_id,
            drag_origin=drag_origin,
        )

    async def context_menu(self, block_element: Any, item_text: str) -> None:
        await behaviors.right_click_and_select(self.session, block_element, item_text)

    # --- inspection ---
    async def selected_id(self) -> Optional[str]:
        return await inspector.selected_id(self.session)

    async def blocks(self) -> List[inspector.BlockRef]:
        return await inspector.all_blocks(self.session)

    async def block_count(self) -> int:
        return await inspector.block_count(self.session)
