"""
Drag-Insertion Resolver
=======================
Works out *where* a dragged block would land, without touching the document
until the gesture is dropped.

Why is this file needed?
------------------------
1. Decoupling: Drag libraries report raw ids and rectangles. This module turns
   them into an InsertionIndicator (target block + before/after/append) and,
   on drop, into one concrete engine command.
2. Cheap & idempotent: Drag-over fires on every pointer move. Resolving is a
   midpoint comparison only, and recomputing the same indicator has no side
   effects.
3. Explicit lifecycle: DragSession is a small state machine
   (idle -> dragging -> resolved | cancelled) in place of loose callbacks.

Drag/drop ids produced by the host:
    palette-{row}-{type}       a not-yet-placed block type (palette button)
    column-{s}-{r}-{c}         the empty space of a column
    <block id>                 an existing block
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
import logging
from typing import Optional, Union

from slideeditor import config
from slideeditor.controller import mutations
from slideeditor.model.schema import BlockType, Column
from slideeditor.model.state import EditorState, find_block_location

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------------------
# Geometry & addressing
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class Rect:
    """Bounding rectangle in screen coordinates (y grows downwards)."""
    top: float
    left: float
    width: float
    height: float

    @property
    def center_y(self) -> float:
        return self.top + self.height / 2


class DropPosition(StrEnum):
    BEFORE = "before"
    AFTER = "after"
    APPEND = "append"


class DragPhase(StrEnum):
    IDLE = "idle"
    DRAGGING = "dragging"
    RESOLVED = "resolved"
    CANCELLED = "cancelled"


def _parse_ints(parts: list[str]) -> Optional[list[int]]:
    try:
        return [int(p) for p in parts]
    except ValueError:
        return None


@dataclass(frozen=True)
class ColumnAddress:
    slide_index: int
    row_index: int
    column_index: int

    @property
    def droppable_id(self) -> str:
        return f"{config.COLUMN_ID_PREFIX}{self.slide_index}-{self.row_index}-{self.column_index}"

    @staticmethod
    def parse(droppable_id: str) -> Optional[ColumnAddress]:
        if not droppable_id.startswith(config.COLUMN_ID_PREFIX):
            return None
        parts = droppable_id[len(config.COLUMN_ID_PREFIX):].split("-")
        numbers = _parse_ints(parts) if len(parts) == 3 else None
        if numbers is None:
            return None
        return ColumnAddress(*numbers)


@dataclass(frozen=True)
class PaletteItem:
    """A block type dragged out of a row's palette, not yet placed."""
    row_index: int
    block_type: BlockType

    @property
    def drag_id(self) -> str:
        return f"{config.PALETTE_ID_PREFIX}{self.row_index}-{self.block_type.value}"

    @staticmethod
    def parse(drag_id: str) -> Optional[PaletteItem]:
        if not drag_id.startswith(config.PALETTE_ID_PREFIX):
            return None
        row_part, _, type_part = drag_id[len(config.PALETTE_ID_PREFIX):].partition("-")
        numbers = _parse_ints([row_part])
        if numbers is None or type_part not in {t.value for t in BlockType}:
            return None
        return PaletteItem(row_index=numbers[0], block_type=BlockType(type_part))


DragSource = Union[PaletteItem, str]


def parse_drag_source(drag_id: str) -> Optional[DragSource]:
    """A PaletteItem for palette ids, otherwise the id of an existing block."""
    if drag_id.startswith(config.PALETTE_ID_PREFIX):
        return PaletteItem.parse(drag_id)
    return drag_id or None


@dataclass(frozen=True)
class ColumnHover:
    """Pointer is over the empty space of a column."""
    column: ColumnAddress


@dataclass(frozen=True)
class BlockHover:
    """Pointer is over a placed block. `rect` is None when the host has no geometry for it."""
    block_id: str
    rect: Optional[Rect] = None


HoverTarget = Union[ColumnHover, BlockHover]


def parse_hover(over_id: Optional[str], rect: Optional[Rect] = None) -> Optional[HoverTarget]:
    """Build a hover target from a raw droppable id."""
    if not over_id:
        return None
    address = ColumnAddress.parse(over_id)
    if address is not None:
        return ColumnHover(address)
    return BlockHover(over_id, rect)


@dataclass(frozen=True)
class InsertionIndicator:
    """
    Answer to "where would this drop land".
    `column` is only set for append (the target block identifies its own column otherwise).
    """
    target_block_id: Optional[str]
    position: DropPosition
    column: Optional[ColumnAddress] = None

    @property
    def insert_after(self) -> bool:
        return self.position != DropPosition.BEFORE


# ------------------------------------------------------------------------------
# Pure resolution
# ------------------------------------------------------------------------------
def resolve_insertion(dragged_rect: Optional[Rect], hovered: Optional[HoverTarget]) -> Optional[InsertionIndicator]:
    """
    Compare the dragged item's vertical midpoint with the hovered block's
    centre. Returns None when there is nothing to resolve against.
    """
    if hovered is None:
        return None
    if isinstance(hovered, ColumnHover):
        return InsertionIndicator(None, DropPosition.APPEND, hovered.column)
    if hovered.rect is None:
        return None

    hovered_center = hovered.rect.center_y
    dragged_center = dragged_rect.center_y if dragged_rect is not None else hovered_center
    position = DropPosition.BEFORE if dragged_center < hovered_center else DropPosition.AFTER
    return InsertionIndicator(hovered.block_id, position)


def insertion_index(column: Column, indicator: InsertionIndicator) -> Optional[int]:
    """Concrete index in `column`; None if the target block is not in it."""
    if indicator.position == DropPosition.APPEND:
        return len(column.items)
    pos = column.index_of(indicator.target_block_id)
    if pos == -1:
        return None
    return pos + (1 if indicator.insert_after else 0)


# ------------------------------------------------------------------------------
# Drop commands
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class AddBlockAtCommand:
    slide_index: int
    row_index: int
    column_index: int
    block_type: BlockType
    insert_index: int

    def apply(self, state: EditorState) -> EditorState:
        return mutations.add_block_at(
            state, self.slide_index, self.row_index, self.column_index, self.block_type, self.insert_index
        )


@dataclass(frozen=True)
class ReorderBlocksCommand:
    slide_index: int
    row_index: int
    column_index: int
    from_index: int
    to_index: int

    def apply(self, state: EditorState) -> EditorState:
        return mutations.reorder_blocks(
            state, self.slide_index, self.row_index, self.column_index, self.from_index, self.to_index
        )


@dataclass(frozen=True)
class MoveBlockCommand:
    slide_index: int
    from_row_index: int
    from_column_index: int
    block_id: str
    to_row_index: int
    to_column_index: int
    to_index: int

    def apply(self, state: EditorState) -> EditorState:
        return mutations.move_block(
            state,
            self.slide_index,
            self.from_row_index,
            self.from_column_index,
            self.block_id,
            self.to_row_index,
            self.to_column_index,
            self.to_index,
        )


DropCommand = Union[AddBlockAtCommand, ReorderBlocksCommand, MoveBlockCommand]


def _drop_column(state: EditorState, indicator: InsertionIndicator) -> Optional[tuple[int, int, Column]]:
    """(row, column, Column) on the current slide the indicator points into."""
    slide = state.current_slide
    if slide is None:
        return None
    if indicator.position == DropPosition.APPEND:
        address = indicator.column
        if address is None or address.slide_index != state.current_slide_index:
            return None
        if not 0 <= address.row_index < len(slide.rows):
            return None
        row = slide.rows[address.row_index]
        if not 0 <= address.column_index < len(row.columns):
            return None
        return address.row_index, address.column_index, row.columns[address.column_index]

    loc = find_block_location(slide, indicator.target_block_id)
    if loc is None:
        return None
    return loc.row_index, loc.column_index, slide.rows[loc.row_index].columns[loc.column_index]


def plan_drop(
    state: EditorState,
    source: Optional[DragSource],
    indicator: Optional[InsertionIndicator],
) -> Optional[DropCommand]:
    """
    Translate the final indicator into one engine command, or None when the
    drop has no valid target.
    """
    if source is None or indicator is None:
        return None
    target = _drop_column(state, indicator)
    if target is None:
        return None
    to_row, to_col, column = target
    index = insertion_index(column, indicator)
    if index is None:
        return None
    s_idx = state.current_slide_index

    if isinstance(source, PaletteItem):
        # Palette buttons only feed the row they belong to
        if to_row != source.row_index:
            return None
        return AddBlockAtCommand(s_idx, to_row, to_col, source.block_type, index)

    origin = find_block_location(state.current_slide, source)
    if origin is None:
        return None
    if (origin.row_index, origin.column_index) == (to_row, to_col):
        return ReorderBlocksCommand(s_idx, to_row, to_col, origin.item_index, index)
    return MoveBlockCommand(s_idx, origin.row_index, origin.column_index, source, to_row, to_col, index)


# ------------------------------------------------------------------------------
# Interaction state machine
# ------------------------------------------------------------------------------
class DragSession:
    """
    One drag gesture at a time: start() -> over()* -> drop() | cancel().
    Only drop() produces a new EditorState; everything else is bookkeeping.
    """

    def __init__(self) -> None:
        self.phase: DragPhase = DragPhase.IDLE
        self.source: Optional[DragSource] = None
        self.indicator: Optional[InsertionIndicator] = None

    @property
    def insert_after(self) -> bool:
        return self.indicator is not None and self.indicator.insert_after

    def start(self, drag_id: str) -> None:
        if self.phase == DragPhase.DRAGGING:
            logger.debug(f"Drag already in progress; restarting with '{drag_id}'.")
        self.phase = DragPhase.DRAGGING
        self.source = parse_drag_source(drag_id)
        self.indicator = None

    def over(self, hovered: Optional[HoverTarget], dragged_rect: Optional[Rect] = None) -> Optional[InsertionIndicator]:
        """Recompute the indicator for the current hover. Safe to call repeatedly."""
        if self.phase != DragPhase.DRAGGING:
            return None
        if hovered is None:
            self.indicator = None
            return None
        resolved = resolve_insertion(dragged_rect, hovered)
        if resolved is not None:
            self.indicator = resolved
        return self.indicator

    def cancel(self) -> None:
        if self.phase != DragPhase.DRAGGING:
            logger.debug(f"cancel() ignored in phase '{self.phase}'.")
            return
        self._finish(DragPhase.CANCELLED)

    def drop(self, state: EditorState) -> EditorState:
        """Commit the gesture. Returns `state` itself when the drop has no valid target."""
        if self.phase != DragPhase.DRAGGING:
            logger.debug(f"drop() ignored in phase '{self.phase}'.")
            return state
        command = plan_drop(state, self.source, self.indicator)
        self._finish(DragPhase.RESOLVED)
        if command is None:
            logger.debug("Drop without a valid target; nothing changed.")
            return state
        logger.debug(f"Drop resolved to {command}.")
        return command.apply(state)

    def _finish(self, phase: DragPhase) -> None:
        self.phase = phase
        self.source = None
        self.indicator = None
