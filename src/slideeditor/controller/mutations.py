"""
Structural Mutation Engine
==========================
Pure reducer functions that turn one EditorState into the next.

Why is this file needed?
------------------------
1. Single write path: Slides, rows and blocks are only ever changed here.
   Views read the snapshot; controllers call these functions and hand the
   result back to the store.
2. Copy-on-write: Only the touched slide/row/column is rebuilt. Untouched
   siblings keep their identity, so a host can skip re-rendering them.
3. Totality: No operation raises. Out-of-range destination indices are
   clamped; addressing something that does not exist (slide, row, column or
   block id) returns the *same* state object, which callers can detect with
   an identity check.

Every result passes through normalize_state(), which keeps the current slide
index in range and drops a selection that no longer points at a block on the
current slide.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, replace
import logging
from typing import Any, Mapping, Optional, Sequence, Union

from slideeditor.model.defaults import IdFactory, create_default_block, create_default_row, \
    create_default_slide, create_empty_columns
from slideeditor.model.schema import (
    Block, BlockType, Column, LayoutType, Project, Row, Slide, Styles, TextAlign, style_field_names,
)
from slideeditor.model.state import EditorState, normalize_state
from slideeditor.utils import clamp, new_id

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------------------
# Block updates (one patch type per block variant)
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class TextBlockUpdate:
    """Patch for title and paragraph blocks."""
    content: Optional[str] = None
    styles: Optional[Mapping[str, Any]] = None


@dataclass(frozen=True)
class ImageBlockUpdate:
    src: Optional[str] = None
    styles: Optional[Mapping[str, Any]] = None


@dataclass(frozen=True)
class SpacerBlockUpdate:
    styles: Optional[Mapping[str, Any]] = None


BlockUpdate = Union[TextBlockUpdate, ImageBlockUpdate, SpacerBlockUpdate]


# ------------------------------------------------------------------------------
# Copy-on-write path helpers
# ------------------------------------------------------------------------------
def _in_range(seq: Sequence[Any], index: int) -> bool:
    return isinstance(index, int) and 0 <= index < len(seq)


def _replaced(seq: Sequence[Any], index: int, value: Any) -> tuple:
    items = list(seq)
    items[index] = value
    return tuple(items)


def _slide_at(project: Project, s_idx: int) -> Optional[Slide]:
    if not _in_range(project.slides, s_idx):
        return None
    return project.slides[s_idx]


def _row_at(project: Project, s_idx: int, r_idx: int) -> Optional[Row]:
    slide = _slide_at(project, s_idx)
    if slide is None or not _in_range(slide.rows, r_idx):
        return None
    return slide.rows[r_idx]


def _column_at(project: Project, s_idx: int, r_idx: int, c_idx: int) -> Optional[Column]:
    row = _row_at(project, s_idx, r_idx)
    if row is None or not _in_range(row.columns, c_idx):
        return None
    return row.columns[c_idx]


def _with_slide(project: Project, s_idx: int, slide: Slide) -> Project:
    return replace(project, slides=_replaced(project.slides, s_idx, slide))


def _with_row(project: Project, s_idx: int, r_idx: int, row: Row) -> Project:
    slide = project.slides[s_idx]
    return _with_slide(project, s_idx, replace(slide, rows=_replaced(slide.rows, r_idx, row)))


def _with_column(project: Project, s_idx: int, r_idx: int, c_idx: int, column: Column) -> Project:
    row = project.slides[s_idx].rows[r_idx]
    return _with_row(project, s_idx, r_idx, replace(row, columns=_replaced(row.columns, c_idx, column)))


def _commit(state: EditorState, project: Project, **changes: Any) -> EditorState:
    return normalize_state(state, replace(state, project=project, **changes))


def _coerce_block_type(block_type: Any) -> Optional[BlockType]:
    try:
        return BlockType(block_type)
    except ValueError:
        logger.debug(f"Unknown block type '{block_type}'.")
        return None


def _coerce_layout(layout: Any) -> Optional[LayoutType]:
    try:
        return LayoutType(layout)
    except ValueError:
        logger.debug(f"Unknown row layout '{layout}'.")
        return None


# ------------------------------------------------------------------------------
# Slide-level operations
# ------------------------------------------------------------------------------
def add_slide(
    state: EditorState,
    layout: LayoutType = LayoutType.ONE_COLUMN,
    id_factory: IdFactory = new_id,
) -> EditorState:
    """Append a default slide and make it current."""
    layout = _coerce_layout(layout) or LayoutType.ONE_COLUMN
    slides = state.project.slides + (create_default_slide(layout, id_factory),)
    logger.debug(f"Added slide {len(slides) - 1}.")
    return _commit(state, Project(slides=slides), current_slide_index=len(slides) - 1)


def duplicate_slide(state: EditorState, index: int, id_factory: IdFactory = new_id) -> EditorState:
    """
    Insert a deep copy of slide `index` right after it and make it current.
    The copy gets a new slide id; nested row and block ids are kept.
    """
    slide = _slide_at(state.project, index)
    if slide is None:
        logger.debug(f"duplicate_slide: no slide at {index}.")
        return state

    clone = replace(copy.deepcopy(slide), id=id_factory())
    slides = list(state.project.slides)
    slides.insert(index + 1, clone)
    logger.debug(f"Duplicated slide {index} as '{clone.id}'.")
    return _commit(state, Project(slides=tuple(slides)), current_slide_index=index + 1)


def delete_slide(state: EditorState, index: int) -> EditorState:
    """Remove a slide. The last remaining slide is never removed."""
    slides = state.project.slides
    if len(slides) <= 1:
        logger.debug("delete_slide: refusing to delete the last slide.")
        return state
    if not _in_range(slides, index):
        logger.debug(f"delete_slide: no slide at {index}.")
        return state

    remaining = slides[:index] + slides[index + 1:]
    current = min(state.current_slide_index, len(remaining) - 1)
    logger.debug(f"Deleted slide {index}.")
    return _commit(state, Project(slides=remaining), current_slide_index=current)


def reorder_slides(state: EditorState, from_index: int, to_index: int) -> EditorState:
    """Move a slide and make its new position current."""
    slides = list(state.project.slides)
    if not _in_range(slides, from_index):
        logger.debug(f"reorder_slides: no slide at {from_index}.")
        return state

    moved = slides.pop(from_index)
    to_index = clamp(to_index, 0, len(slides))
    if to_index == from_index and state.current_slide_index == to_index:
        return state
    slides.insert(to_index, moved)
    return _commit(state, Project(slides=tuple(slides)), current_slide_index=to_index)


# ------------------------------------------------------------------------------
# Row-level operations
# ------------------------------------------------------------------------------
def add_row(
    state: EditorState,
    slide_index: int,
    layout: LayoutType = LayoutType.ONE_COLUMN,
    id_factory: IdFactory = new_id,
) -> EditorState:
    slide = _slide_at(state.project, slide_index)
    layout = _coerce_layout(layout)
    if slide is None or layout is None:
        return state

    new_slide = replace(slide, rows=slide.rows + (create_default_row(layout, id_factory),))
    return _commit(state, _with_slide(state.project, slide_index, new_slide))


def remove_row(state: EditorState, slide_index: int, row_index: int) -> EditorState:
    """Remove a row. A slide may be left with no rows at all."""
    slide = _slide_at(state.project, slide_index)
    if slide is None or not _in_range(slide.rows, row_index):
        return state

    rows = slide.rows[:row_index] + slide.rows[row_index + 1:]
    return _commit(state, _with_slide(state.project, slide_index, replace(slide, rows=rows)))


def update_row_layout(state: EditorState, slide_index: int, row_index: int, layout: LayoutType) -> EditorState:
    """
    Switch a row's layout and reconcile its columns: growing appends empty
    columns, shrinking truncates from the end together with their blocks.
    """
    row = _row_at(state.project, slide_index, row_index)
    layout = _coerce_layout(layout)
    if row is None or layout is None:
        return state
    if row.layout == layout and len(row.columns) == layout.column_count:
        return state

    target = layout.column_count
    columns = row.columns
    if target > len(columns):
        columns = columns + create_empty_columns(target - len(columns))
    elif target < len(columns):
        dropped = sum(len(col.items) for col in columns[target:])
        if dropped:
            # TODO: product has not confirmed that shrinking may discard blocks without a prompt
            logger.warning(
                f"Row '{row.id}' shrunk to {target} column(s); {dropped} block(s) in the removed columns were discarded."
            )
        columns = columns[:target]

    new_row = replace(row, layout=layout, columns=columns)
    return _commit(state, _with_row(state.project, slide_index, row_index, new_row))


# ------------------------------------------------------------------------------
# Block-level operations
# ------------------------------------------------------------------------------
def add_block(
    state: EditorState,
    slide_index: int,
    row_index: int,
    column_index: int,
    block_type: BlockType,
    id_factory: IdFactory = new_id,
) -> EditorState:
    """Append a new default block to a column and select it."""
    return add_block_at(state, slide_index, row_index, column_index, block_type, float("inf"), id_factory)


def add_block_at(
    state: EditorState,
    slide_index: int,
    row_index: int,
    column_index: int,
    block_type: BlockType,
    insert_index: float,
    id_factory: IdFactory = new_id,
) -> EditorState:
    """Insert a new default block at clamp(insert_index, 0, len(items)) and select it."""
    column = _column_at(state.project, slide_index, row_index, column_index)
    block_type = _coerce_block_type(block_type)
    if column is None or block_type is None:
        logger.debug(f"add_block_at: no column at ({slide_index}, {row_index}, {column_index}).")
        return state

    block = create_default_block(block_type, id_factory)
    items = list(column.items)
    items.insert(clamp(insert_index, 0, len(items)), block)
    project = _with_column(state.project, slide_index, row_index, column_index, Column(items=tuple(items)))
    logger.debug(f"Added {block_type} block '{block.id}'.")
    return _commit(state, project, selected_block_id=block.id)


def _merge_styles(styles: Styles, patch: Optional[Mapping[str, Any]]) -> Styles:
    if not patch:
        return styles
    allowed = style_field_names(type(styles))
    clean = {key: val for key, val in patch.items() if key in allowed}
    ignored = set(patch) - set(clean)
    if ignored:
        logger.debug(f"Ignoring style fields {sorted(ignored)} for {type(styles).__name__}.")
    if "align" in clean:
        try:
            clean["align"] = TextAlign(clean["align"])
        except ValueError:
            logger.debug(f"Ignoring invalid alignment '{clean['align']}'.")
            del clean["align"]
    if not clean:
        return styles
    return replace(styles, **clean)


def _merge_block(block: Block, update: BlockUpdate) -> Block:
    """
    Apply `update` only if it belongs to the block's variant; otherwise the
    block comes back unchanged.
    """
    match block.type:
        case BlockType.TITLE | BlockType.PARAGRAPH:
            if not isinstance(update, TextBlockUpdate):
                return block
            content = block.content if update.content is None else update.content
            merged = replace(block, content=content, styles=_merge_styles(block.styles, update.styles))
        case BlockType.IMAGE:
            if not isinstance(update, ImageBlockUpdate):
                return block
            src = block.src if update.src is None else update.src
            merged = replace(block, src=src, styles=_merge_styles(block.styles, update.styles))
        case BlockType.SPACER:
            if not isinstance(update, SpacerBlockUpdate):
                return block
            merged = replace(block, styles=_merge_styles(block.styles, update.styles))
        case _:
            return block
    return block if merged == block else merged


def update_block(
    state: EditorState,
    slide_index: int,
    row_index: int,
    column_index: int,
    block_id: str,
    update: BlockUpdate,
) -> EditorState:
    """Merge a variant-matched patch into the block `block_id` of one column."""
    column = _column_at(state.project, slide_index, row_index, column_index)
    if column is None:
        return state
    pos = column.index_of(block_id)
    if pos == -1:
        logger.debug(f"update_block: '{block_id}' not found.")
        return state

    current = column.items[pos]
    merged = _merge_block(current, update)
    if merged is current:
        logger.debug(f"update_block: {type(update).__name__} has no effect on {current.type} block '{block_id}'.")
        return state

    new_column = Column(items=_replaced(column.items, pos, merged))
    return _commit(state, _with_column(state.project, slide_index, row_index, column_index, new_column))


def delete_block(state: EditorState, slide_index: int, row_index: int, column_index: int, block_id: str) -> EditorState:
    """Remove a block; clears the selection if it was the selected one."""
    column = _column_at(state.project, slide_index, row_index, column_index)
    if column is None or column.index_of(block_id) == -1:
        return state

    new_column = Column(items=tuple(b for b in column.items if b.id != block_id))
    selected = None if state.selected_block_id == block_id else state.selected_block_id
    project = _with_column(state.project, slide_index, row_index, column_index, new_column)
    logger.debug(f"Deleted block '{block_id}'.")
    return _commit(state, project, selected_block_id=selected)


def reorder_blocks(
    state: EditorState,
    slide_index: int,
    row_index: int,
    column_index: int,
    from_index: int,
    to_index: float,
) -> EditorState:
    """Move a block inside one column (splice out, splice in)."""
    column = _column_at(state.project, slide_index, row_index, column_index)
    if column is None or not _in_range(column.items, from_index):
        return state

    items = list(column.items)
    moved = items.pop(from_index)
    to_index = clamp(to_index, 0, len(items))
    if to_index == from_index:
        return state
    items.insert(to_index, moved)
    project = _with_column(state.project, slide_index, row_index, column_index, Column(items=tuple(items)))
    return _commit(state, project)


def move_block(
    state: EditorState,
    slide_index: int,
    from_row_index: int,
    from_column_index: int,
    block_id: str,
    to_row_index: int,
    to_column_index: int,
    to_index: float,
) -> EditorState:
    """
    Remove a block from its column and insert it into the destination column
    at clamp(to_index, 0, len(items)). The moved block becomes selected.
    """
    source = _column_at(state.project, slide_index, from_row_index, from_column_index)
    if source is None or _column_at(state.project, slide_index, to_row_index, to_column_index) is None:
        logger.debug("move_block: source or destination column does not exist.")
        return state
    pos = source.index_of(block_id)
    if pos == -1:
        logger.debug(f"move_block: '{block_id}' not in source column.")
        return state

    items = list(source.items)
    moved = items.pop(pos)
    project = _with_column(state.project, slide_index, from_row_index, from_column_index, Column(items=tuple(items)))

    # Re-read: source and destination may share a row
    destination = project.slides[slide_index].rows[to_row_index].columns[to_column_index]
    dest_items = list(destination.items)
    dest_items.insert(clamp(to_index, 0, len(dest_items)), moved)
    project = _with_column(project, slide_index, to_row_index, to_column_index, Column(items=tuple(dest_items)))

    logger.debug(
        f"Moved block '{block_id}' from ({from_row_index}, {from_column_index}) to ({to_row_index}, {to_column_index})."
    )
    return _commit(state, project, selected_block_id=moved.id)
