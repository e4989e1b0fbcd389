"""
Slide Document Schema
=====================
Defines the entity tree edited by the announcement slide builder:
Project -> Slides -> Rows -> Columns -> Blocks.

Every entity is a frozen dataclass holding tuples, so a Project is an
immutable snapshot. Editing means building a new snapshot (see
slideeditor.controller.mutations); nothing here is ever changed in place.

The serialized form mirrors the JSON the builder downloads: camelCase keys,
a "type" tag on every block, and optional text styles omitted while unset.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import StrEnum
from typing import Any, ClassVar, Dict, Optional, Tuple, Union


# ------------------------------------------------------------------------------
# Enums
# ------------------------------------------------------------------------------
class BlockType(StrEnum):
    TITLE = "title"
    PARAGRAPH = "paragraph"
    IMAGE = "image"
    SPACER = "spacer"


class LayoutType(StrEnum):
    """Column-count mode of a Row."""
    ONE_COLUMN = "one-column"
    TWO_COLUMNS = "two-columns"
    THREE_COLUMNS = "three-columns"

    @property
    def column_count(self) -> int:
        return _COLUMN_COUNTS[self]


_COLUMN_COUNTS: Dict[LayoutType, int] = {
    LayoutType.ONE_COLUMN: 1,
    LayoutType.TWO_COLUMNS: 2,
    LayoutType.THREE_COLUMNS: 3,
}


def column_count_of(layout: LayoutType) -> int:
    return LayoutType(layout).column_count


class TextAlign(StrEnum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


# ------------------------------------------------------------------------------
# Styles
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class TextStyles:
    font_size: int
    align: TextAlign
    color: str
    margin_top: int
    margin_bottom: int
    # Optional attributes stay None until the user sets them
    background_color: Optional[str] = None
    bold: Optional[bool] = None
    italic: Optional[bool] = None
    underline: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "fontSize": self.font_size,
            "align": self.align.value,
            "color": self.color,
            "marginTop": self.margin_top,
            "marginBottom": self.margin_bottom,
        }
        optional = {
            "backgroundColor": self.background_color,
            "bold": self.bold,
            "italic": self.italic,
            "underline": self.underline,
        }
        data.update({key: val for key, val in optional.items() if val is not None})
        return data

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> TextStyles:
        return TextStyles(
            font_size=data["fontSize"],
            align=TextAlign(data["align"]),
            color=data["color"],
            margin_top=data["marginTop"],
            margin_bottom=data["marginBottom"],
            background_color=data.get("backgroundColor"),
            bold=data.get("bold"),
            italic=data.get("italic"),
            underline=data.get("underline"),
        )


@dataclass(frozen=True)
class ImageStyles:
    width: int
    height: int
    border_radius: int

    def to_dict(self) -> Dict[str, Any]:
        return {"width": self.width, "height": self.height, "borderRadius": self.border_radius}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> ImageStyles:
        return ImageStyles(width=data["width"], height=data["height"], border_radius=data["borderRadius"])


@dataclass(frozen=True)
class SpacerStyles:
    height: int

    def to_dict(self) -> Dict[str, Any]:
        return {"height": self.height}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> SpacerStyles:
        return SpacerStyles(height=data["height"])


Styles = Union[TextStyles, ImageStyles, SpacerStyles]


def style_field_names(styles_cls: type) -> frozenset[str]:
    """Python-side field names a style patch may touch."""
    return frozenset(f.name for f in fields(styles_cls))


# ------------------------------------------------------------------------------
# Blocks (closed sum type)
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class BaseBlock:
    """Common shape of every block: a globally unique id and a type tag."""
    id: str

    type: ClassVar[BlockType]

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "type": self.type.value}


@dataclass(frozen=True)
class TextBlockBase(BaseBlock):
    """Title and paragraph share content + text styles."""
    content: str
    styles: TextStyles

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["content"] = self.content
        data["styles"] = self.styles.to_dict()
        return data


@dataclass(frozen=True)
class TitleBlock(TextBlockBase):
    type: ClassVar[BlockType] = BlockType.TITLE


@dataclass(frozen=True)
class ParagraphBlock(TextBlockBase):
    type: ClassVar[BlockType] = BlockType.PARAGRAPH


@dataclass(frozen=True)
class ImageBlock(BaseBlock):
    src: str
    styles: ImageStyles

    type: ClassVar[BlockType] = BlockType.IMAGE

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["src"] = self.src
        data["styles"] = self.styles.to_dict()
        return data


@dataclass(frozen=True)
class SpacerBlock(BaseBlock):
    styles: SpacerStyles

    type: ClassVar[BlockType] = BlockType.SPACER

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["styles"] = self.styles.to_dict()
        return data


TextBlock = Union[TitleBlock, ParagraphBlock]
Block = Union[TitleBlock, ParagraphBlock, ImageBlock, SpacerBlock]


def block_from_dict(data: Dict[str, Any]) -> Block:
    """Factory method to deserialize into the correct block variant."""
    block_type = BlockType(data["type"])
    match block_type:
        case BlockType.TITLE:
            return TitleBlock(id=data["id"], content=data["content"], styles=TextStyles.from_dict(data["styles"]))
        case BlockType.PARAGRAPH:
            return ParagraphBlock(id=data["id"], content=data["content"], styles=TextStyles.from_dict(data["styles"]))
        case BlockType.IMAGE:
            return ImageBlock(id=data["id"], src=data["src"], styles=ImageStyles.from_dict(data["styles"]))
        case BlockType.SPACER:
            return SpacerBlock(id=data["id"], styles=SpacerStyles.from_dict(data["styles"]))


# ------------------------------------------------------------------------------
# Containers
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class Column:
    """A vertical slot of a Row. No identity; addressed by (slide, row, column)."""
    items: Tuple[Block, ...] = ()

    def index_of(self, block_id: str) -> int:
        """Position of the block with block_id, or -1."""
        for i, block in enumerate(self.items):
            if block.id == block_id:
                return i
        return -1

    def to_dict(self) -> Dict[str, Any]:
        return {"items": [block.to_dict() for block in self.items]}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Column:
        return Column(items=tuple(block_from_dict(item) for item in data["items"]))


@dataclass(frozen=True)
class Row:
    """
    A horizontal section. len(columns) always equals layout.column_count.
    """
    id: str
    layout: LayoutType
    columns: Tuple[Column, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "layout": self.layout.value,
            "columns": [column.to_dict() for column in self.columns],
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Row:
        layout = LayoutType(data["layout"])
        columns = tuple(Column.from_dict(col) for col in data["columns"])
        if len(columns) != layout.column_count:
            raise ValueError(
                f"Row '{data['id']}' has {len(columns)} columns but layout '{layout}' "
                f"requires {layout.column_count}."
            )
        return Row(id=data["id"], layout=layout, columns=columns)


@dataclass(frozen=True)
class Slide:
    id: str
    rows: Tuple[Row, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "rows": [row.to_dict() for row in self.rows]}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Slide:
        return Slide(id=data["id"], rows=tuple(Row.from_dict(row) for row in data["rows"]))


@dataclass(frozen=True)
class Project:
    """Root aggregate; an ordered sequence of slides with no identity of its own."""
    slides: Tuple[Slide, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"slides": [slide.to_dict() for slide in self.slides]}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Project:
        return Project(slides=tuple(Slide.from_dict(slide) for slide in data["slides"]))
