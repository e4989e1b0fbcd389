"""
Pytest Configuration and Fixtures
"""
import itertools
from typing import Callable

import pytest
from PySide6.QtCore import QCoreApplication

from slideeditor.controller import mutations
from slideeditor.model.schema import BlockType, LayoutType
from slideeditor.model.state import EditorState


@pytest.fixture(scope="session")
def qapp() -> QCoreApplication:
    """One Qt core application for tests that touch signals."""
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    return app


@pytest.fixture
def id_factory() -> Callable[[], str]:
    """Deterministic ids: id-1, id-2, ..."""
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def empty_state(id_factory) -> EditorState:
    """One slide, one one-column row, empty column."""
    return EditorState.initial(id_factory=id_factory)


@pytest.fixture
def filled_state(empty_state, id_factory) -> EditorState:
    """
    Slide 0: row 0 (two columns) holding [title, paragraph, image] | [spacer],
    row 1 (one column) empty. Nothing selected.
    """
    state = mutations.update_row_layout(empty_state, 0, 0, LayoutType.TWO_COLUMNS)
    for block_type in (BlockType.TITLE, BlockType.PARAGRAPH, BlockType.IMAGE):
        state = mutations.add_block(state, 0, 0, 0, block_type, id_factory=id_factory)
    state = mutations.add_block(state, 0, 0, 1, BlockType.SPACER, id_factory=id_factory)
    state = mutations.add_row(state, 0, LayoutType.ONE_COLUMN, id_factory=id_factory)
    return EditorState(project=state.project)

