from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QObject, Signal

from slideeditor.controller import mutations
from slideeditor.controller.drag import DragSession, InsertionIndicator, Rect, parse_hover
from slideeditor.controller.mutations import BlockUpdate
from slideeditor.model.schema import Block, BlockType, LayoutType, Project, Slide
from slideeditor.model.state import (
    BlockLocation, EditorState, find_block_location, get_selected_block, set_current_slide, set_drag_insert_after,
    set_selected_block,
)

logger = logging.getLogger(__name__)


class EditorStore(QObject):
    """
    Central state store with signals for view sync.

    Holds one EditorState snapshot; every command runs the matching pure
    reducer and swaps the snapshot. Signals fire only for the parts that
    actually changed, so a no-op command triggers no re-render.
    """
    project_changed = Signal(object)
    current_slide_changed = Signal(int)
    selection_changed = Signal(object)
    indicator_changed = Signal(object)

    def __init__(self, state: Optional[EditorState] = None) -> None:
        super().__init__()
        self._state = state if state is not None else EditorState.initial()
        self._drag = DragSession()

    # --- queries ---
    @property
    def state(self) -> EditorState:
        return self._state

    @property
    def project(self) -> Project:
        return self._state.project

    @property
    def current_slide_index(self) -> int:
        return self._state.current_slide_index

    @property
    def current_slide(self) -> Optional[Slide]:
        return self._state.current_slide

    @property
    def selected_block_id(self) -> Optional[str]:
        return self._state.selected_block_id

    @property
    def indicator(self) -> Optional[InsertionIndicator]:
        return self._drag.indicator

    def selected_block(self) -> Optional[Block]:
        return get_selected_block(self._state)

    def locate_block(self, block_id: str, slide_index: Optional[int] = None) -> Optional[BlockLocation]:
        """Row/column/item of a block on the given (default: current) slide."""
        if slide_index is None:
            slide_index = self._state.current_slide_index
        slides = self._state.project.slides
        if not 0 <= slide_index < len(slides):
            return None
        return find_block_location(slides[slide_index], block_id)

    # --- snapshot swap ---
    def replace_state(self, new_state: EditorState) -> None:
        old = self._state
        if new_state is old:
            return
        self._state = new_state
        if new_state.project is not old.project:
            self.project_changed.emit(new_state.project)
        if new_state.current_slide_index != old.current_slide_index:
            self.current_slide_changed.emit(new_state.current_slide_index)
        if new_state.selected_block_id != old.selected_block_id:
            self.selection_changed.emit(new_state.selected_block_id)

    # --- selection ---
    def set_current_slide(self, index: int) -> None:
        self.replace_state(set_current_slide(self._state, index))

    def set_selected_block(self, block_id: Optional[str]) -> None:
        self.replace_state(set_selected_block(self._state, block_id))

    # --- slides ---
    def add_slide(self, layout: LayoutType = LayoutType.ONE_COLUMN) -> None:
        self.replace_state(mutations.add_slide(self._state, layout))

    def duplicate_slide(self, index: int) -> None:
        self.replace_state(mutations.duplicate_slide(self._state, index))

    def delete_slide(self, index: int) -> None:
        self.replace_state(mutations.delete_slide(self._state, index))

    def reorder_slides(self, from_index: int, to_index: int) -> None:
        self.replace_state(mutations.reorder_slides(self._state, from_index, to_index))

    # --- rows ---
    def add_row(self, slide_index: int, layout: LayoutType = LayoutType.ONE_COLUMN) -> None:
        self.replace_state(mutations.add_row(self._state, slide_index, layout))

    def remove_row(self, slide_index: int, row_index: int) -> None:
        self.replace_state(mutations.remove_row(self._state, slide_index, row_index))

    def update_row_layout(self, slide_index: int, row_index: int, layout: LayoutType) -> None:
        self.replace_state(mutations.update_row_layout(self._state, slide_index, row_index, layout))

    # --- blocks ---
    def add_block(self, slide_index: int, row_index: int, column_index: int, block_type: BlockType) -> None:
        self.replace_state(mutations.add_block(self._state, slide_index, row_index, column_index, block_type))

    def add_block_at(
        self, slide_index: int, row_index: int, column_index: int, block_type: BlockType, insert_index: float
    ) -> None:
        self.replace_state(
            mutations.add_block_at(self._state, slide_index, row_index, column_index, block_type, insert_index)
        )

    def update_block(
        self, slide_index: int, row_index: int, column_index: int, block_id: str, update: BlockUpdate
    ) -> None:
        self.replace_state(
            mutations.update_block(self._state, slide_index, row_index, column_index, block_id, update)
        )

    def delete_block(self, slide_index: int, row_index: int, column_index: int, block_id: str) -> None:
        self.replace_state(mutations.delete_block(self._state, slide_index, row_index, column_index, block_id))

    def reorder_blocks(
        self, slide_index: int, row_index: int, column_index: int, from_index: int, to_index: int
    ) -> None:
        self.replace_state(
            mutations.reorder_blocks(self._state, slide_index, row_index, column_index, from_index, to_index)
        )

    def move_block(
        self,
        slide_index: int,
        from_row_index: int,
        from_column_index: int,
        block_id: str,
        to_row_index: int,
        to_column_index: int,
        to_index: int,
    ) -> None:
        self.replace_state(
            mutations.move_block(
                self._state, slide_index, from_row_index, from_column_index,
                block_id, to_row_index, to_column_index, to_index,
            )
        )

    # --- drag & drop ---
    def begin_drag(self, drag_id: str) -> None:
        previous = self._drag.indicator
        self._drag.start(drag_id)
        self._clear_indicator(previous)

    def drag_over(
        self,
        over_id: Optional[str],
        over_rect: Optional[Rect] = None,
        dragged_rect: Optional[Rect] = None,
    ) -> Optional[InsertionIndicator]:
        previous = self._drag.indicator
        indicator = self._drag.over(parse_hover(over_id, over_rect), dragged_rect)
        if indicator != previous:
            self._publish_indicator(indicator)
        return indicator

    def end_drag(self) -> None:
        previous = self._drag.indicator
        self.replace_state(self._drag.drop(self._state))
        self._clear_indicator(previous)

    def cancel_drag(self) -> None:
        previous = self._drag.indicator
        self._drag.cancel()
        self._clear_indicator(previous)

    def _clear_indicator(self, previous: Optional[InsertionIndicator]) -> None:
        """Reset the drag flag; tell views only if an indicator was showing."""
        self.replace_state(set_drag_insert_after(self._state, False))
        if previous is not None:
            self.indicator_changed.emit(None)

    def _publish_indicator(self, indicator: Optional[InsertionIndicator]) -> None:
        insert_after = indicator is not None and indicator.insert_after
        self.replace_state(set_drag_insert_after(self._state, insert_after))
        self.indicator_changed.emit(indicator)
