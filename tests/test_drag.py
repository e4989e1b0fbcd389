"""
Tests for the drag-insertion resolver.

Fixture layout (slide 0):
  row 0: column 0 = [id-3 title, id-4 paragraph, id-5 image] | column 1 = [id-6 spacer]
  row 1: column 0 = []
"""
import pytest

from slideeditor.controller.drag import (
    AddBlockAtCommand, BlockHover, ColumnAddress, ColumnHover, DragPhase, DragSession, DropPosition,
    InsertionIndicator, MoveBlockCommand, PaletteItem, Rect, ReorderBlocksCommand, insertion_index,
    parse_drag_source, parse_hover, plan_drop, resolve_insertion,
)
from slideeditor.controller import mutations
from slideeditor.model.schema import BlockType


def _ids(state, slide, row, column):
    return [b.id for b in state.project.slides[slide].rows[row].columns[column].items]


HOVERED = Rect(top=100, left=0, width=200, height=40)  # centre at y=120


# ---------------------------------------------------------------------------
# Ids and geometry
# ---------------------------------------------------------------------------

class TestAddressing:

    def test_rect_center(self):
        assert HOVERED.center_y == 120

    def test_column_address_round_trip(self):
        address = ColumnAddress(0, 1, 2)
        assert address.droppable_id == "column-0-1-2"
        assert ColumnAddress.parse("column-0-1-2") == address

    @pytest.mark.parametrize("raw", ["column-0-1", "column-a-b-c", "col-0-1-2", "column-0-1-2-3"])
    def test_column_address_rejects(self, raw):
        assert ColumnAddress.parse(raw) is None

    def test_palette_item(self):
        item = PaletteItem(2, BlockType.IMAGE)
        assert item.drag_id == "palette-2-image"
        assert PaletteItem.parse("palette-2-image") == item

    @pytest.mark.parametrize("raw", ["palette-x-title", "palette-0-video", "palette-0", "block-0-title"])
    def test_palette_item_rejects(self, raw):
        assert PaletteItem.parse(raw) is None

    def test_parse_drag_source(self):
        assert parse_drag_source("palette-0-spacer") == PaletteItem(0, BlockType.SPACER)
        assert parse_drag_source("id-3") == "id-3"
        assert parse_drag_source("palette-0-video") is None
        assert parse_drag_source("") is None

    def test_parse_hover(self):
        assert parse_hover("column-0-0-1") == ColumnHover(ColumnAddress(0, 0, 1))
        assert parse_hover("id-4", HOVERED) == BlockHover("id-4", HOVERED)
        assert parse_hover(None) is None


# ---------------------------------------------------------------------------
# Pure resolution
# ---------------------------------------------------------------------------

class TestResolveInsertion:

    def test_column_space_appends(self):
        indicator = resolve_insertion(None, ColumnHover(ColumnAddress(0, 1, 0)))
        assert indicator == InsertionIndicator(None, DropPosition.APPEND, ColumnAddress(0, 1, 0))
        assert indicator.insert_after is True

    def test_above_centre_is_before(self):
        dragged = Rect(top=90, left=0, width=200, height=20)  # centre 100
        indicator = resolve_insertion(dragged, BlockHover("id-4", HOVERED))
        assert indicator == InsertionIndicator("id-4", DropPosition.BEFORE)
        assert indicator.insert_after is False

    def test_below_centre_is_after(self):
        dragged = Rect(top=125, left=0, width=200, height=20)  # centre 135
        assert resolve_insertion(dragged, BlockHover("id-4", HOVERED)).position == DropPosition.AFTER

    def test_exact_centre_is_after(self):
        dragged = Rect(top=110, left=0, width=200, height=20)
        assert resolve_insertion(dragged, BlockHover("id-4", HOVERED)).position == DropPosition.AFTER

    def test_unknown_dragged_geometry_falls_back_to_after(self):
        assert resolve_insertion(None, BlockHover("id-4", HOVERED)).position == DropPosition.AFTER

    def test_nothing_to_resolve(self):
        assert resolve_insertion(None, None) is None
        assert resolve_insertion(HOVERED, BlockHover("id-4", None)) is None

    def test_repeatable(self):
        hover = BlockHover("id-4", HOVERED)
        dragged = Rect(top=0, left=0, width=10, height=10)
        assert resolve_insertion(dragged, hover) == resolve_insertion(dragged, hover)


class TestInsertionIndex:

    def test_indices(self, filled_state):
        column = filled_state.project.slides[0].rows[0].columns[0]
        assert insertion_index(column, InsertionIndicator("id-4", DropPosition.BEFORE)) == 1
        assert insertion_index(column, InsertionIndicator("id-4", DropPosition.AFTER)) == 2
        assert insertion_index(column, InsertionIndicator(None, DropPosition.APPEND)) == 3
        assert insertion_index(column, InsertionIndicator("id-6", DropPosition.AFTER)) is None


# ---------------------------------------------------------------------------
# Drop planning
# ---------------------------------------------------------------------------

class TestPlanDrop:

    def test_palette_onto_block(self, filled_state):
        command = plan_drop(
            filled_state, PaletteItem(0, BlockType.SPACER), InsertionIndicator("id-3", DropPosition.AFTER)
        )
        assert command == AddBlockAtCommand(0, 0, 0, BlockType.SPACER, 1)

    def test_palette_into_column_space(self, filled_state):
        indicator = InsertionIndicator(None, DropPosition.APPEND, ColumnAddress(0, 1, 0))
        command = plan_drop(filled_state, PaletteItem(1, BlockType.TITLE), indicator)
        assert command == AddBlockAtCommand(0, 1, 0, BlockType.TITLE, 0)

    def test_palette_is_confined_to_its_row(self, filled_state):
        indicator = InsertionIndicator("id-3", DropPosition.BEFORE)
        assert plan_drop(filled_state, PaletteItem(1, BlockType.TITLE), indicator) is None

    def test_column_on_other_slide_is_rejected(self, filled_state):
        indicator = InsertionIndicator(None, DropPosition.APPEND, ColumnAddress(3, 0, 0))
        assert plan_drop(filled_state, "id-3", indicator) is None

    def test_missing_column_is_rejected(self, filled_state):
        indicator = InsertionIndicator(None, DropPosition.APPEND, ColumnAddress(0, 1, 2))
        assert plan_drop(filled_state, "id-3", indicator) is None

    def test_same_column_reorder_down(self, filled_state):
        # index is taken on the column as it looks before the drag
        command = plan_drop(filled_state, "id-3", InsertionIndicator("id-4", DropPosition.AFTER))
        assert command == ReorderBlocksCommand(0, 0, 0, 0, 2)
        assert _ids(command.apply(filled_state), 0, 0, 0) == ["id-4", "id-5", "id-3"]

    def test_same_column_reorder_before_next(self, filled_state):
        command = plan_drop(filled_state, "id-3", InsertionIndicator("id-5", DropPosition.BEFORE))
        assert command == ReorderBlocksCommand(0, 0, 0, 0, 2)

    def test_same_column_reorder_past_end_is_clamped(self, filled_state):
        command = plan_drop(filled_state, "id-4", InsertionIndicator("id-5", DropPosition.AFTER))
        assert command == ReorderBlocksCommand(0, 0, 0, 1, 3)
        assert _ids(command.apply(filled_state), 0, 0, 0) == ["id-3", "id-5", "id-4"]

    def test_same_column_reorder_up(self, filled_state):
        command = plan_drop(filled_state, "id-5", InsertionIndicator("id-3", DropPosition.BEFORE))
        assert command == ReorderBlocksCommand(0, 0, 0, 2, 0)
        assert _ids(command.apply(filled_state), 0, 0, 0) == ["id-5", "id-3", "id-4"]

    def test_cross_column_move(self, filled_state):
        command = plan_drop(filled_state, "id-6", InsertionIndicator("id-4", DropPosition.BEFORE))
        assert command == MoveBlockCommand(0, 0, 1, "id-6", 0, 0, 1)
        state = command.apply(filled_state)
        assert _ids(state, 0, 0, 0) == ["id-3", "id-6", "id-4", "id-5"]
        assert state.selected_block_id == "id-6"

    def test_append_into_other_row(self, filled_state):
        indicator = InsertionIndicator(None, DropPosition.APPEND, ColumnAddress(0, 1, 0))
        assert plan_drop(filled_state, "id-4", indicator) == MoveBlockCommand(0, 0, 0, "id-4", 1, 0, 0)

    def test_unknown_source_or_target(self, filled_state):
        indicator = InsertionIndicator("id-4", DropPosition.AFTER)
        assert plan_drop(filled_state, "ghost", indicator) is None
        assert plan_drop(filled_state, "id-3", InsertionIndicator("ghost", DropPosition.AFTER)) is None
        assert plan_drop(filled_state, None, indicator) is None
        assert plan_drop(filled_state, "id-3", None) is None


# ---------------------------------------------------------------------------
# Interaction state machine
# ---------------------------------------------------------------------------

class TestDragSession:

    def test_idle_ignores_events(self, filled_state):
        session = DragSession()
        assert session.phase == DragPhase.IDLE
        assert session.over(BlockHover("id-4", HOVERED)) is None
        assert session.drop(filled_state) is filled_state
        session.cancel()
        assert session.phase == DragPhase.IDLE

    def test_over_is_idempotent(self):
        session = DragSession()
        session.start("id-3")
        hover = BlockHover("id-4", HOVERED)
        first = session.over(hover, Rect(0, 0, 10, 10))
        second = session.over(hover, Rect(0, 0, 10, 10))
        assert first == second == InsertionIndicator("id-4", DropPosition.BEFORE)
        assert session.insert_after is False

    def test_unresolvable_hover_keeps_previous_indicator(self):
        session = DragSession()
        session.start("id-3")
        session.over(ColumnHover(ColumnAddress(0, 1, 0)))
        assert session.over(BlockHover("id-4", None)).position == DropPosition.APPEND
        assert session.insert_after is True

    def test_leaving_all_targets_clears_indicator(self):
        session = DragSession()
        session.start("id-3")
        session.over(ColumnHover(ColumnAddress(0, 1, 0)))
        assert session.over(None) is None
        assert session.indicator is None

    def test_cancel_discards_everything(self, filled_state):
        session = DragSession()
        session.start("id-3")
        session.over(ColumnHover(ColumnAddress(0, 1, 0)))
        session.cancel()
        assert session.phase == DragPhase.CANCELLED
        assert session.indicator is None
        assert session.drop(filled_state) is filled_state

    def test_drop_commits_move(self, filled_state):
        session = DragSession()
        session.start("id-3")
        session.over(ColumnHover(ColumnAddress(0, 1, 0)))
        state = session.drop(filled_state)
        assert session.phase == DragPhase.RESOLVED
        assert session.indicator is None
        assert _ids(state, 0, 1, 0) == ["id-3"]

    def test_drop_without_target_changes_nothing(self, filled_state):
        session = DragSession()
        session.start("id-3")
        assert session.drop(filled_state) is filled_state
        assert session.phase == DragPhase.RESOLVED

    def test_palette_drop(self, filled_state, id_factory):
        session = DragSession()
        session.start(PaletteItem(0, BlockType.PARAGRAPH).drag_id)
        session.over(BlockHover("id-5", HOVERED), Rect(top=0, left=0, width=10, height=10))
        state = session.drop(filled_state)
        items = state.project.slides[0].rows[0].columns[0].items
        assert [b.type for b in items] == [
            BlockType.TITLE, BlockType.PARAGRAPH, BlockType.PARAGRAPH, BlockType.IMAGE,
        ]
        assert state.selected_block_id == items[2].id

    def test_restart_after_resolution(self, filled_state):
        session = DragSession()
        session.start("id-3")
        session.drop(filled_state)
        session.start("id-4")
        assert session.phase == DragPhase.DRAGGING
        assert session.source == "id-4"

    def test_drop_conserves_blocks(self, filled_state):
        state = mutations.add_row(filled_state, 0)
        session = DragSession()
        session.start("id-6")
        session.over(ColumnHover(ColumnAddress(0, 2, 0)))
        after = session.drop(state)
        assert sorted(b.id for r in after.project.slides[0].rows for c in r.columns for b in c.items) == \
            sorted(b.id for r in state.project.slides[0].rows for c in r.columns for b in c.items)
