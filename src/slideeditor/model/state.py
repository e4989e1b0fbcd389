"""
Editor State (Data Model)
=========================
This module defines the snapshot the editor works on.

Why is this file needed?
------------------------
1. State Management: One immutable EditorState holds the document together
   with the view state (current slide, selected block, drag flag).
2. Invariants: normalize_state() is the single place where the view state is
   reconciled with the document after every change.
3. Queries: Views and controllers locate blocks through the helpers here
   instead of walking the tree themselves.

Classes:
    BlockLocation: (row, column, item) address of a block inside a slide.
    EditorState: The snapshot container.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
import logging
from typing import Iterator, Optional

from slideeditor.model.defaults import IdFactory, create_default_project
from slideeditor.model.schema import Block, LayoutType, Project, Slide
from slideeditor.utils import clamp, new_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlockLocation:
    row_index: int
    column_index: int
    item_index: int


@dataclass(frozen=True)
class EditorState:
    """
    Immutable snapshot of the editor. Replace it, never mutate it.
    """
    project: Project
    current_slide_index: int = 0
    selected_block_id: Optional[str] = None
    # Last "insert after" answer published by the drag resolver
    drag_insert_after: bool = False

    @classmethod
    def initial(
        cls,
        layout: LayoutType = LayoutType.ONE_COLUMN,
        id_factory: IdFactory = new_id,
    ) -> EditorState:
        return cls(project=create_default_project(layout, id_factory))

    @property
    def current_slide(self) -> Optional[Slide]:
        slides = self.project.slides
        if 0 <= self.current_slide_index < len(slides):
            return slides[self.current_slide_index]
        return None


# ------------------------------------------------------------------------------
# Queries
# ------------------------------------------------------------------------------
def get_project(state: EditorState) -> Project:
    return state.project


def current_slide(state: EditorState) -> Optional[Slide]:
    return state.current_slide


def find_block_location(slide: Optional[Slide], block_id: Optional[str]) -> Optional[BlockLocation]:
    """Locate a block by id within one slide."""
    if slide is None or block_id is None:
        return None
    for r_idx, row in enumerate(slide.rows):
        for c_idx, column in enumerate(row.columns):
            i_idx = column.index_of(block_id)
            if i_idx != -1:
                return BlockLocation(r_idx, c_idx, i_idx)
    return None


def find_block(slide: Optional[Slide], block_id: Optional[str]) -> Optional[Block]:
    loc = find_block_location(slide, block_id)
    if loc is None:
        return None
    return slide.rows[loc.row_index].columns[loc.column_index].items[loc.item_index]


def get_selected_block(state: EditorState) -> Optional[Block]:
    return find_block(state.current_slide, state.selected_block_id)


def iter_blocks(project: Project) -> Iterator[Block]:
    for slide in project.slides:
        for row in slide.rows:
            for column in row.columns:
                yield from column.items


def count_blocks(project: Project) -> int:
    return sum(1 for _ in iter_blocks(project))


def block_ids(project: Project) -> list[str]:
    """All block ids in document order (duplicates across slides are kept)."""
    return [block.id for block in iter_blocks(project)]


# ------------------------------------------------------------------------------
# Invariants
# ------------------------------------------------------------------------------
def normalize_state(previous: EditorState, candidate: EditorState) -> EditorState:
    """
    Reconcile the view state of `candidate` with its document.

    - current_slide_index is clamped into the slide range.
    - Moving to another slide clears the selection, including when the index
      stays put but a different slide now sits at it.
    - The selection must reference a block on the current slide.
    """
    n_slides = len(candidate.project.slides)
    index = clamp(candidate.current_slide_index, 0, max(n_slides - 1, 0))
    selected = candidate.selected_block_id

    slide = candidate.project.slides[index] if n_slides else None
    shown_before = previous.current_slide
    if index != previous.current_slide_index:
        selected = None
    elif slide is not None and shown_before is not None and slide.id != shown_before.id:
        selected = None
    if selected is not None and find_block_location(slide, selected) is None:
        logger.debug(f"Selection '{selected}' no longer on slide {index}; clearing it.")
        selected = None

    if index == candidate.current_slide_index and selected == candidate.selected_block_id:
        return candidate
    return replace(candidate, current_slide_index=index, selected_block_id=selected)


# ------------------------------------------------------------------------------
# Selection / view reducers
# ------------------------------------------------------------------------------
def set_current_slide(state: EditorState, index: int) -> EditorState:
    """Switch slides. Always clears the block selection."""
    n_slides = len(state.project.slides)
    index = clamp(index, 0, max(n_slides - 1, 0))
    if index == state.current_slide_index and state.selected_block_id is None:
        return state
    return replace(state, current_slide_index=index, selected_block_id=None)


def set_selected_block(state: EditorState, block_id: Optional[str]) -> EditorState:
    if block_id == state.selected_block_id:
        return state
    if block_id is not None and find_block_location(state.current_slide, block_id) is None:
        logger.debug(f"Cannot select '{block_id}': not on the current slide.")
        return state
    return replace(state, selected_block_id=block_id)


def set_drag_insert_after(state: EditorState, insert_after: bool) -> EditorState:
    if state.drag_insert_after == insert_after:
        return state
    return replace(state, drag_insert_after=insert_after)
