#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/panfilter/ast/nodes.py
"""AST node classes for converter documents.

This module defines the closed node hierarchy produced by decoding a
document converter's JSON output. Every node is an immutable value: the
classes are frozen dataclasses, sequence fields are normalized to tuples
and metadata mappings to read-only copies on construction, so two trees compare equal exactly when they have the same
structure whether they were built from lists or tuples.

Node Hierarchy
--------------
All nodes inherit from the base Node class and support the visitor pattern.

Containers:
    - Document, Meta, Citation

Metadata values (MetaValue):
    - MetaMap, MetaList, MetaBool, MetaString, MetaInlines, MetaBlocks

Block-level nodes (Block):
    - Plain, Para, CodeBlock, RawBlock, BlockQuote
    - OrderedList, BulletList, DefinitionList
    - Header, HorizontalRule, Table, Div, Null

Inline nodes (Inline):
    - Str, Emph, Strong, Strikeout, Superscript, Subscript, SmallCaps
    - Quoted, Cite, Code, Space, SoftBreak, LineBreak
    - Math, RawInline, Link, Image, Span

Supporting values that are not nodes themselves: Attr, Target,
ListAttributes and the enumerations ListNumberStyle, ListNumberDelim,
Alignment, QuoteType, MathType and CitationMode.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from enum import Enum
from types import MappingProxyType
from typing import Any

Format = str


def _freeze(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    if isinstance(value, Mapping):
        return MappingProxyType(dict(value))
    return value


class _Frozen:
    """Normalize sequence fields to nested tuples and mappings to read-only views."""

    def __post_init__(self) -> None:
        for f in fields(self):  # type: ignore[arg-type]
            object.__setattr__(self, f.name, _freeze(getattr(self, f.name)))


# ============================================================================
# Enumerations
# ============================================================================


class ListNumberStyle(str, Enum):
    """Numbering style of an ordered list."""

    DEFAULT = "DefaultStyle"
    EXAMPLE = "Example"
    DECIMAL = "Decimal"
    LOWER_ROMAN = "LowerRoman"
    UPPER_ROMAN = "UpperRoman"
    LOWER_ALPHA = "LowerAlpha"
    UPPER_ALPHA = "UpperAlpha"


class ListNumberDelim(str, Enum):
    """Delimiter around ordered list numbers."""

    DEFAULT = "DefaultDelim"
    PERIOD = "Period"
    ONE_PAREN = "OneParen"
    TWO_PARENS = "TwoParens"


class Alignment(str, Enum):
    """Table column alignment."""

    LEFT = "AlignLeft"
    RIGHT = "AlignRight"
    CENTER = "AlignCenter"
    DEFAULT = "AlignDefault"


class QuoteType(str, Enum):
    SINGLE = "SingleQuote"
    DOUBLE = "DoubleQuote"


class MathType(str, Enum):
    DISPLAY = "DisplayMath"
    INLINE = "InlineMath"


class CitationMode(str, Enum):
    """How a citation is rendered relative to its author."""

    AUTHOR_IN_TEXT = "AuthorInText"
    SUPPRESS_AUTHOR = "SuppressAuthor"
    NORMAL = "NormalCitation"


# ============================================================================
# Supporting values
# ============================================================================


@dataclass(frozen=True)
class Attr(_Frozen):
    """HTML-like attributes attached to blocks and inlines.

    Parameters
    ----------
    identifier : str, default = ""
        Element identifier
    classes : tuple of str, default = ()
        Class names, in source order
    attributes : tuple of (str, str), default = ()
        Key-value pairs, in source order (not sorted, duplicates allowed)

    """

    identifier: str = ""
    classes: tuple[str, ...] = ()
    attributes: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class Target(_Frozen):
    """Destination of a Link or Image: a URL and a title."""

    url: str
    title: str = ""


@dataclass(frozen=True)
class ListAttributes(_Frozen):
    """Start number, numbering style and delimiter of an ordered list."""

    start: int = 1
    style: ListNumberStyle = ListNumberStyle.DEFAULT
    delim: ListNumberDelim = ListNumberDelim.DEFAULT


# ============================================================================
# Base classes
# ============================================================================


class Node(_Frozen, ABC):
    """Base class for all AST nodes.

    All document nodes inherit from this base class and support the visitor
    pattern for traversal and rewriting.

    """

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """
        pass


class MetaValue(Node):
    """Base class for document metadata values."""


class Block(Node):
    """Base class for block-level nodes."""


class Inline(Node):
    """Base class for inline nodes."""


# ============================================================================
# Containers
# ============================================================================


@dataclass(frozen=True)
class Meta(Node):
    """Document metadata: a mapping of unique keys to metadata values.

    Parameters
    ----------
    entries : mapping of str to MetaValue, default = empty mapping
        Metadata entries, copied into a read-only mapping. Insertion order is
        irrelevant; encoding sorts keys.

    """

    entries: Mapping[str, MetaValue] = field(default_factory=dict)

    def __hash__(self) -> int:
        return hash(tuple(sorted(self.entries.items())))

    def get(self, key: str, default: MetaValue | None = None) -> MetaValue | None:
        """Return the value stored under ``key``, or ``default``."""
        return self.entries.get(key, default)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this metadata mapping."""
        return visitor.visit_meta(self)


@dataclass(frozen=True)
class Document(Node):
    """Root document node.

    Parameters
    ----------
    meta : Meta, default = empty Meta
        Document metadata
    blocks : tuple of Block, default = ()
        Top-level blocks in document order

    Examples
    --------
    >>> doc = Document(blocks=[Header(1, Attr("title"), [Str("Title")])])
    >>> doc.blocks[0].level
    1

    """

    meta: Meta = field(default_factory=Meta)
    blocks: tuple[Block, ...] = ()

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this document.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_document method

        Returns
        -------
        Any
            Result from visitor.visit_document(self)

        """
        return visitor.visit_document(self)


@dataclass(frozen=True)
class Citation(Node):
    """A single citation inside a Cite inline.

    Parameters
    ----------
    id : str
        Citation key
    prefix : tuple of Inline, default = ()
        Text placed before the citation
    suffix : tuple of Inline, default = ()
        Text placed after the citation (page numbers and the like)
    mode : CitationMode, default = CitationMode.NORMAL
        Citation rendering mode
    note_num : int, default = 0
        Footnote number the citation appears in
    hash : int, default = 0
        Converter-assigned disambiguation hash

    """

    id: str
    prefix: tuple[Inline, ...] = ()
    suffix: tuple[Inline, ...] = ()
    mode: CitationMode = CitationMode.NORMAL
    note_num: int = 0
    hash: int = 0

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this citation."""
        return visitor.visit_citation(self)


# ============================================================================
# Metadata values
# ============================================================================


@dataclass(frozen=True)
class MetaMap(MetaValue):
    """Nested metadata mapping."""

    entries: Mapping[str, MetaValue] = field(default_factory=dict)

    def __hash__(self) -> int:
        return hash(tuple(sorted(self.entries.items())))

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this metadata map."""
        return visitor.visit_meta_map(self)


@dataclass(frozen=True)
class MetaList(MetaValue):
    """Ordered list of metadata values."""

    items: tuple[MetaValue, ...] = ()

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this metadata list."""
        return visitor.visit_meta_list(self)


@dataclass(frozen=True)
class MetaBool(MetaValue):
    value: bool

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_meta_bool(self)


@dataclass(frozen=True)
class MetaString(MetaValue):
    text: str

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_meta_string(self)


@dataclass(frozen=True)
class MetaInlines(MetaValue):
    """Metadata value holding inline content, e.g. a formatted title."""

    content: tuple[Inline, ...] = ()

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this metadata value."""
        return visitor.visit_meta_inlines(self)


@dataclass(frozen=True)
class MetaBlocks(MetaValue):
    """Metadata value holding block content, e.g. an abstract."""

    blocks: tuple[Block, ...] = ()

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this metadata value."""
        return visitor.visit_meta_blocks(self)


# ============================================================================
# Block-level Nodes
# ============================================================================


@dataclass(frozen=True)
class Plain(Block):
    """Inline content not wrapped in a paragraph (e.g. a tight list item)."""

    content: tuple[Inline, ...] = ()

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this block."""
        return visitor.visit_plain(self)


@dataclass(frozen=True)
class Para(Block):
    """Paragraph node.

    Parameters
    ----------
    content : tuple of Inline, default = ()
        Inline content of the paragraph

    """

    content: tuple[Inline, ...] = ()

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this paragraph.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_para method

        Returns
        -------
        Any
            Result from visitor.visit_para(self)

        """
        return visitor.visit_para(self)


Paragraph = Para


@dataclass(frozen=True)
class CodeBlock(Block):
    """Code block with attributes (language classes, identifier)."""

    attr: Attr
    text: str

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this code block."""
        return visitor.visit_code_block(self)


@dataclass(frozen=True)
class RawBlock(Block):
    """Raw content passed through untouched to one output format."""

    format: Format
    text: str

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this raw block."""
        return visitor.visit_raw_block(self)


@dataclass(frozen=True)
class BlockQuote(Block):
    """Block quote containing nested blocks."""

    blocks: tuple[Block, ...] = ()

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this block quote."""
        return visitor.visit_block_quote(self)


@dataclass(frozen=True)
class OrderedList(Block):
    """Ordered list.

    Parameters
    ----------
    attributes : ListAttributes
        Start number, numbering style and delimiter
    items : tuple of tuple of Block
        List items, each a sequence of blocks

    """

    attributes: ListAttributes
    items: tuple[tuple[Block, ...], ...] = ()

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this ordered list."""
        return visitor.visit_ordered_list(self)


@dataclass(frozen=True)
class BulletList(Block):
    """Bullet list; each item is a sequence of blocks."""

    items: tuple[tuple[Block, ...], ...] = ()

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this bullet list."""
        return visitor.visit_bullet_list(self)


@dataclass(frozen=True)
class DefinitionList(Block):
    """Definition list.

    Parameters
    ----------
    items : tuple of (term, definitions)
        Each term is a sequence of inlines; each term has one or more
        definitions, and each definition is a sequence of blocks.

    """

    items: tuple[tuple[tuple[Inline, ...], tuple[tuple[Block, ...], ...]], ...] = ()

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this definition list."""
        return visitor.visit_definition_list(self)


@dataclass(frozen=True)
class Header(Block):
    """Section header.

    Parameters
    ----------
    level : int
        Header level, 1 or greater
    attr : Attr
        Header attributes (identifier, classes, key-value pairs)
    content : tuple of Inline, default = ()
        Header text

    Raises
    ------
    ValueError
        If level is less than 1

    """

    level: int
    attr: Attr
    content: tuple[Inline, ...] = ()

    def __post_init__(self) -> None:
        """Validate that the header level is positive."""
        super().__post_init__()
        if self.level < 1:
            raise ValueError(f"Header level must be positive, got {self.level}")

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this header.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_header method

        Returns
        -------
        Any
            Result from visitor.visit_header(self)

        """
        return visitor.visit_header(self)


@dataclass(frozen=True)
class HorizontalRule(Block):
    def accept(self, visitor: Any) -> Any:
        return visitor.visit_horizontal_rule(self)


@dataclass(frozen=True)
class Table(Block):
    """Table node.

    Parameters
    ----------
    caption : tuple of Inline
        Table caption
    alignments : tuple of Alignment
        Per-column alignment
    widths : tuple of float
        Per-column relative width (0 when the converter left it unspecified)
    headers : tuple of tuple of Block
        Header cells, one per column
    rows : tuple of tuple of tuple of Block
        Body rows, each a sequence of cells

    Notes
    -----
    ``alignments``, ``widths`` and ``headers`` must have the same length (the
    column count). This is not checked on construction; decoding rejects wire
    input that violates it.

    """

    caption: tuple[Inline, ...] = ()
    alignments: tuple[Alignment, ...] = ()
    widths: tuple[float, ...] = ()
    headers: tuple[tuple[Block, ...], ...] = ()
    rows: tuple[tuple[tuple[Block, ...], ...], ...] = ()

    @property
    def column_count(self) -> int:
        """Number of columns, as given by the alignment row."""
        return len(self.alignments)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this table."""
        return visitor.visit_table(self)


@dataclass(frozen=True)
class Div(Block):
    """Generic block container with attributes."""

    attr: Attr
    blocks: tuple[Block, ...] = ()

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this div."""
        return visitor.visit_div(self)


@dataclass(frozen=True)
class Null(Block):
    """Block that renders to nothing."""

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_null(self)


# ============================================================================
# Inline Nodes
# ============================================================================


@dataclass(frozen=True)
class Str(Inline):
    """Plain text run.

    Parameters
    ----------
    text : str
        Text content; runs are split at spaces by the converter

    """

    text: str

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this text.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_str method

        Returns
        -------
        Any
            Result from visitor.visit_str(self)

        """
        return visitor.visit_str(self)


@dataclass(frozen=True)
class Emph(Inline):
    """Emphasized (italic) text."""

    content: tuple[Inline, ...] = ()

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this emphasis."""
        return visitor.visit_emph(self)


@dataclass(frozen=True)
class Strong(Inline):
    """Strongly emphasized (bold) text."""

    content: tuple[Inline, ...] = ()

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this strong emphasis."""
        return visitor.visit_strong(self)


@dataclass(frozen=True)
class Strikeout(Inline):
    content: tuple[Inline, ...] = ()

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_strikeout(self)


@dataclass(frozen=True)
class Superscript(Inline):
    content: tuple[Inline, ...] = ()

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_superscript(self)


@dataclass(frozen=True)
class Subscript(Inline):
    content: tuple[Inline, ...] = ()

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_subscript(self)


@dataclass(frozen=True)
class SmallCaps(Inline):
    content: tuple[Inline, ...] = ()

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_small_caps(self)


@dataclass(frozen=True)
class Quoted(Inline):
    """Quoted text; the quote marks themselves are not part of the content."""

    quote_type: QuoteType
    content: tuple[Inline, ...] = ()

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this quotation."""
        return visitor.visit_quoted(self)


@dataclass(frozen=True)
class Cite(Inline):
    """Citation group.

    Parameters
    ----------
    citations : tuple of Citation
        The citations in the group
    content : tuple of Inline, default = ()
        The citation as it appeared in the source text

    """

    citations: tuple[Citation, ...]
    content: tuple[Inline, ...] = ()

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this citation group."""
        return visitor.visit_cite(self)


@dataclass(frozen=True)
class Code(Inline):
    """Inline code span."""

    attr: Attr
    text: str

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this code span."""
        return visitor.visit_code(self)


@dataclass(frozen=True)
class Space(Inline):
    def accept(self, visitor: Any) -> Any:
        return visitor.visit_space(self)


@dataclass(frozen=True)
class SoftBreak(Inline):
    def accept(self, visitor: Any) -> Any:
        return visitor.visit_soft_break(self)


@dataclass(frozen=True)
class LineBreak(Inline):
    """Hard line break."""

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_line_break(self)


@dataclass(frozen=True)
class Math(Inline):
    """TeX math, displayed or inline."""

    math_type: MathType
    text: str

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this math."""
        return visitor.visit_math(self)


@dataclass(frozen=True)
class RawInline(Inline):
    """Raw inline content for one output format."""

    format: Format
    text: str

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this raw inline."""
        return visitor.visit_raw_inline(self)


@dataclass(frozen=True)
class Link(Inline):
    """Hyperlink.

    Parameters
    ----------
    attr : Attr
        Link attributes
    content : tuple of Inline
        Link text
    target : Target
        Destination URL and title

    """

    attr: Attr
    content: tuple[Inline, ...]
    target: Target

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this link."""
        return visitor.visit_link(self)


@dataclass(frozen=True)
class Image(Inline):
    """Image; ``content`` is the alternative text."""

    attr: Attr
    content: tuple[Inline, ...]
    target: Target

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this image."""
        return visitor.visit_image(self)


@dataclass(frozen=True)
class Span(Inline):
    """Generic inline container with attributes."""

    attr: Attr
    content: tuple[Inline, ...] = ()

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this span."""
        return visitor.visit_span(self)


BLOCK_TYPES: tuple[type[Block], ...] = (
    Plain,
    Para,
    CodeBlock,
    RawBlock,
    BlockQuote,
    OrderedList,
    BulletList,
    DefinitionList,
    Header,
    HorizontalRule,
    Table,
    Div,
    Null,
)

INLINE_TYPES: tuple[type[Inline], ...] = (
    Str,
    Emph,
    Strong,
    Strikeout,
    Superscript,
    Subscript,
    SmallCaps,
    Quoted,
    Cite,
    Code,
    Space,
    SoftBreak,
    LineBreak,
    Math,
    RawInline,
    Link,
    Image,
    Span,
)

META_VALUE_TYPES: tuple[type[MetaValue], ...] = (
    MetaMap,
    MetaList,
    MetaBool,
    MetaString,
    MetaInlines,
    MetaBlocks,
)
