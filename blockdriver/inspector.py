from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, List, Optional

from .errors import NotFound, ResolutionError
from .gestures.geometry import (
    ConnectionLike,
    ConnectionName,
    connection_from_script,
    parse_connection,
)
from .locator import resolve_by_id
from .scripts import ALL_BLOCKS, CONNECTION_TARGET, SELECTED_ID, script_error

if TYPE_CHECKING:
    from .session import EditorSession


@dataclass(frozen=True)
class BlockRef:
    """Identity of a block: its type tag and unique id."""

    block_type: str
    block_id: str


@dataclass(frozen=True)
class ConnectionRef:
    """The connection on the far side of a link."""

    block_id: str
    connection: ConnectionName


async def selected_id(session: "EditorSession") -> Optional[str]:
    return await session.execute(SELECTED_ID)


async def selected_element(session: "EditorSession") -> Any:
    block_id = await selected_id(session)
    if not block_id:
        raise NotFound("no block is selected")
    return await resolve_by_id(session, block_id)


async def all_blocks(session: "EditorSession") -> List[BlockRef]:
    """Snapshot of every block on the main workspace as plain (type, id) pairs."""
    rows = await session.execute(ALL_BLOCKS) or []
    return [BlockRef(block_type=row["type"], block_id=row["id"]) for row in rows]


async def block_count(session: "EditorSession") -> int:
    return len(await all_blocks(session))


async def connection_target(
    session: "EditorSession",
    block_id: str,
    connection: ConnectionLike,
    mutator_block_id: Optional[str] = None,
) -> Optional[ConnectionRef]:
    """What a block's connection is attached to, or None when it is free."""
    name = parse_connection(connection)
    result = await session.execute(
        CONNECTION_TARGET, block_id, name.to_script(), mutator_block_id
    )
    error = script_error(result)
    if error:
        raise ResolutionError(error)
    if not result.get("connected"):
        return None
    if not result.get("kind"):
        raise ResolutionError(
            f"block {block_id} is linked to an unrecognised connection on {result['blockId']}"
        )
    return ConnectionRef(
        block_id=result["blockId"],
        connection=connection_from_script(result["kind"], result.get("name")),
    )


async def is_connected(
    session: "EditorSession",
    block_id: str,
    connection: ConnectionLike,
    target_block_id: str,
    target_connection: ConnectionLike,
    mutator_block_id: Optional[str] = None,
) -> bool:
    """True when the two connections are attached to each other."""
    target = await connection_target(session, block_id, connection, mutator_block_id)
    return target == ConnectionRef(target_block_id, parse_connection(target_connection))
