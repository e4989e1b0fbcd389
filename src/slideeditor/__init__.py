"""Announcement slide builder core: document model, mutation engine and drag resolver."""
from slideeditor.model.schema import (
    Block, BlockType, Column, ImageBlock, ImageStyles, LayoutType, ParagraphBlock, Project, Row, Slide,
    SpacerBlock, SpacerStyles, TextAlign, TextStyles, TitleBlock, column_count_of,
)
from slideeditor.model.state import EditorState

__all__ = [
    "Block", "BlockType", "Column", "EditorState", "ImageBlock", "ImageStyles", "LayoutType", "ParagraphBlock",
    "Project", "Row", "Slide", "SpacerBlock", "SpacerStyles", "TextAlign", "TextStyles", "TitleBlock",
    "column_count_of",
]
