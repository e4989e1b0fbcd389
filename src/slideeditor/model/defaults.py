"""
Default Entity Factories
========================
Pure constructors for schema-valid entities. Each call stamps a fresh id from
the injected id factory and fills in the default style values from
slideeditor.config. None of these read existing document state.
"""
from __future__ import annotations

from typing import Callable

from slideeditor import config
from slideeditor.model.schema import (
    Block, BlockType, Column, ImageBlock, ImageStyles, LayoutType, ParagraphBlock, Project, Row, Slide,
    SpacerBlock, SpacerStyles, TextAlign, TextBlock, TextStyles, TitleBlock,
)
from slideeditor.utils import new_id

IdFactory = Callable[[], str]


def create_default_text_block(kind: BlockType, id_factory: IdFactory = new_id) -> TextBlock:
    """Title defaults to a larger font size than paragraph."""
    kind = BlockType(kind)
    match kind:
        case BlockType.TITLE:
            return TitleBlock(
                id=id_factory(),
                content=config.TITLE_CONTENT,
                styles=_text_styles(config.TITLE_FONT_SIZE),
            )
        case BlockType.PARAGRAPH:
            return ParagraphBlock(
                id=id_factory(),
                content=config.PARAGRAPH_CONTENT,
                styles=_text_styles(config.PARAGRAPH_FONT_SIZE),
            )
        case _:
            raise ValueError(f"'{kind}' is not a text block type.")


def _text_styles(font_size: int) -> TextStyles:
    return TextStyles(
        font_size=font_size,
        align=TextAlign.LEFT,
        color=config.TEXT_COLOR,
        margin_top=config.TEXT_MARGIN_TOP,
        margin_bottom=config.TEXT_MARGIN_BOTTOM,
    )


def create_default_image_block(id_factory: IdFactory = new_id) -> ImageBlock:
    return ImageBlock(
        id=id_factory(),
        src=config.IMAGE_SRC,
        styles=ImageStyles(
            width=config.IMAGE_WIDTH,
            height=config.IMAGE_HEIGHT,
            border_radius=config.IMAGE_BORDER_RADIUS,
        ),
    )


def create_default_spacer_block(id_factory: IdFactory = new_id) -> SpacerBlock:
    return SpacerBlock(id=id_factory(), styles=SpacerStyles(height=config.SPACER_HEIGHT))


def create_default_block(block_type: BlockType, id_factory: IdFactory = new_id) -> Block:
    """Dispatch on the block tag."""
    block_type = BlockType(block_type)
    match block_type:
        case BlockType.TITLE | BlockType.PARAGRAPH:
            return create_default_text_block(block_type, id_factory)
        case BlockType.IMAGE:
            return create_default_image_block(id_factory)
        case BlockType.SPACER:
            return create_default_spacer_block(id_factory)


def create_empty_columns(count: int) -> tuple[Column, ...]:
    return tuple(Column() for _ in range(count))


def create_default_row(layout: LayoutType = LayoutType.ONE_COLUMN, id_factory: IdFactory = new_id) -> Row:
    layout = LayoutType(layout)
    return Row(id=id_factory(), layout=layout, columns=create_empty_columns(layout.column_count))


def create_default_slide(layout: LayoutType = LayoutType.ONE_COLUMN, id_factory: IdFactory = new_id) -> Slide:
    return Slide(id=id_factory(), rows=(create_default_row(layout, id_factory),))


def create_default_project(layout: LayoutType = LayoutType.ONE_COLUMN, id_factory: IdFactory = new_id) -> Project:
    """A project holding a single default slide."""
    return Project(slides=(create_default_slide(layout, id_factory),))
