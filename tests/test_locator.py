"""Tests for resolving categories and blocks to elements."""

from unittest.mock import AsyncMock

import pytest

from blockdriver.errors import NotFound, ResolutionError, SessionError
from blockdriver.locator import (
    CATEGORY_SELECTOR,
    block_id_of,
    find_block_by_type_in_category,
    find_block_by_type_on_surface,
    find_category,
    find_nth_block_in_category,
    flyout_slot,
    resolve_by_id,
    tag_block_id,
)
from blockdriver.scripts import FLYOUT_BLOCK_ID_BY_TYPE, SURFACE_BLOCK_ID_BY_TYPE


class TestSlots:
    def test_first_blocks(self):
        assert [flyout_slot(n) for n in range(4)] == [3, 5, 7, 9]

    def test_negative(self):
        with pytest.raises(ValueError):
            flyout_slot(-1)


class TestBlockIds:
    def test_tag_wins(self, tab):
        element = tab.element(attrs={"data-id": "from-dom"})
        tag_block_id(element, "tagged")
        assert block_id_of(element) == "tagged"

    def test_data_id_fallback(self, tab):
        assert block_id_of(tab.element(attrs={"data-id": "abc"})) == "abc"
        assert block_id_of(tab.element()) is None


class TestResolveById:
    @pytest.mark.asyncio
    async def test_tags_element(self, session, tab):
        element = tab.element()
        tab.query_selector.return_value = element

        resolved = await resolve_by_id(session, 'a"b')

        assert resolved is element
        assert resolved.block_id == 'a"b'
        tab.query_selector.assert_awaited_once_with('[data-id="a\\"b"]')

    @pytest.mark.asyncio
    async def test_missing(self, session):
        with pytest.raises(NotFound, match="xyz"):
            await resolve_by_id(session, "xyz")

    @pytest.mark.asyncio
    async def test_empty_id(self, session):
        with pytest.raises(ResolutionError):
            await resolve_by_id(session, "")

    @pytest.mark.asyncio
    async def test_dead_session(self, session, tab):
        tab.query_selector.side_effect = ConnectionResetError("websocket closed")

        with pytest.raises(SessionError, match="websocket closed"):
            await resolve_by_id(session, "abc")


class TestFindCategory:
    """Tests for find_category."""

    @pytest.mark.asyncio
    async def test_matches_by_substring(self, session, tab):
        logic, loops = tab.element("Logic"), tab.element("Loops")
        tab.query_selector_all.return_value = [logic, loops]

        assert await find_category(session, "Loop") is loops
        tab.query_selector_all.assert_awaited_with(CATEGORY_SELECTOR)

    @pytest.mark.asyncio
    async def test_waits_for_category(self, session, tab):
        """The toolbox may render after the page loads, so the lookup polls."""
        math = tab.element("Math")
        tab.query_selector_all.side_effect = [[], [], [math]]

        assert await find_category(session, "Math", timeout_seconds=1.0) is math
        assert tab.query_selector_all.await_count == 3

    @pytest.mark.asyncio
    async def test_empty_name(self, session, tab):
        tab.query_selector_all.return_value = [tab.element("Logic")]

        with pytest.raises(ValueError):
            await find_category(session, "")
        tab.query_selector_all.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_dead_session_is_not_retried(self, session, tab):
        tab.query_selector_all.side_effect = ConnectionResetError("websocket closed")

        with pytest.raises(SessionError):
            await find_category(session, "Logic", timeout_seconds=1.0)
        assert tab.query_selector_all.await_count == 1

    @pytest.mark.asyncio
    async def test_times_out(self, session, tab):
        tab.query_selector_all.return_value = [tab.element("Logic")]

        with pytest.raises(NotFound, match="Variables"):
            await find_category(session, "Variables", timeout_seconds=0.02)


class TestFlyoutBlocks:
    @pytest.mark.asyncio
    async def test_nth_block_opens_category(self, session, tab):
        category = tab.element("Math", box=(0.0, 100.0, 80.0, 20.0))
        block = tab.element()
        tab.query_selector.return_value = block

        assert await find_nth_block_in_category(session, category, 1) is block

        tab.query_selector.assert_awaited_once_with(
            ".blocklyFlyout .blocklyBlockCanvas > g:nth-child(5)"
        )
        press = [e for e in tab.mouse_events() if e["type"] == "mousePressed"]
        assert [(e["x"], e["y"]) for e in press] == [(40.0, 110.0)]

    @pytest.mark.asyncio
    async def test_nth_block_missing(self, session, tab):
        with pytest.raises(NotFound, match="#4"):
            await find_nth_block_in_category(session, tab.element("Math"), 4)

    @pytest.mark.asyncio
    async def test_by_type(self, session, tab):
        category = tab.element("Text")
        tab.query_selector_all.return_value = [category]
        flyout_block = tab.element()
        tab.query_selector.return_value = flyout_block
        session.execute = AsyncMock(return_value={"id": "flyout-7"})

        result = await find_block_by_type_in_category(session, "Text", "text_print")

        assert result.block_id == "flyout-7"
        session.execute.assert_awaited_once_with(FLYOUT_BLOCK_ID_BY_TYPE, "text_print")
        assert len(tab.mouse_events()) == 3

    @pytest.mark.asyncio
    async def test_by_type_without_categories(self, session, tab):
        """A toolbox without categories has an always-open flyout; nothing is clicked."""
        tab.query_selector.return_value = tab.element()
        session.execute = AsyncMock(return_value={"id": "f1"})

        await find_block_by_type_in_category(session, None, "math_number")

        assert tab.mouse_events() == []
        tab.query_selector_all.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_by_type_missing(self, session, tab):
        session.execute = AsyncMock(
            return_value={"error": "no block of type nope in the flyout"}
        )
        with pytest.raises(NotFound, match="nope"):
            await find_block_by_type_in_category(session, "", "nope")


class TestSurfaceBlocks:
    @pytest.mark.asyncio
    async def test_ordinal(self, session, tab):
        tab.query_selector.return_value = tab.element()
        session.execute = AsyncMock(return_value={"id": "b2"})

        result = await find_block_by_type_on_surface(session, "controls_if", 1)

        assert result.block_id == "b2"
        session.execute.assert_awaited_once_with(
            SURFACE_BLOCK_ID_BY_TYPE, "controls_if", 1
        )

    @pytest.mark.asyncio
    async def test_ordinal_out_of_range(self, session):
        session.execute = AsyncMock(
            return_value={"error": "found 1 blocks of type controls_if, wanted #3"}
        )
        with pytest.raises(NotFound, match="wanted #3"):
            await find_block_by_type_on_surface(session, "controls_if", 3)
