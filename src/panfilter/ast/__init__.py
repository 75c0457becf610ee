#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/panfilter/ast/__init__.py
"""Abstract Syntax Tree (AST) module for converter documents.

This module provides an immutable, typed representation of the documents a
document converter exchanges with external filters, plus the machinery to
move them across the wire and rewrite them.

The module consists of several components:

- nodes: AST node classes (metadata values, blocks, inlines, citations)
- visitors: Visitor pattern interface every node dispatches to
- serialization: wire codec between nodes and the converter's JSON format
- walk: type-directed bottom-up rewriting of whole trees

Examples
--------
Basic usage:

    >>> from panfilter.ast import Document, Header, Para, Str, Attr, NodeKind, walk, encode_json
    >>> doc = Document(blocks=[
    ...     Header(2, Attr(), [Str("Title")]),
    ...     Para([Str("Hello")]),
    ... ])
    >>> shouted = walk(doc, NodeKind.INLINE, lambda n: Str(n.text.upper()) if isinstance(n, Str) else n)
    >>> wire_text = encode_json(shouted)

"""

from __future__ import annotations

from panfilter.ast.nodes import (
    BLOCK_TYPES,
    INLINE_TYPES,
    META_VALUE_TYPES,
    Alignment,
    Attr,
    Block,
    BlockQuote,
    BulletList,
    Citation,
    CitationMode,
    Cite,
    Code,
    CodeBlock,
    DefinitionList,
    Div,
    Document,
    Emph,
    Header,
    HorizontalRule,
    Image,
    Inline,
    LineBreak,
    Link,
    ListAttributes,
    ListNumberDelim,
    ListNumberStyle,
    Math,
    MathType,
    Meta,
    MetaBlocks,
    MetaBool,
    MetaInlines,
    MetaList,
    MetaMap,
    MetaString,
    MetaValue,
    Node,
    Null,
    OrderedList,
    Para,
    Paragraph,
    Plain,
    Quoted,
    QuoteType,
    RawBlock,
    RawInline,
    SmallCaps,
    SoftBreak,
    Space,
    Span,
    Str,
    Strikeout,
    Strong,
    Subscript,
    Superscript,
    Table,
    Target,
)
from panfilter.ast.serialization import (
    WireDecoder,
    WireEncoder,
    decode,
    decode_block,
    decode_citation,
    decode_inline,
    decode_json,
    decode_meta_value,
    encode,
    encode_block,
    encode_citation,
    encode_inline,
    encode_json,
    encode_meta_value,
)
from panfilter.ast.visitors import NodeVisitor
from panfilter.ast.walk import (
    BlockWalker,
    CitationWalker,
    InlineWalker,
    MetaValueWalker,
    NodeKind,
    Walker,
    walk,
)

__all__ = [
    # Nodes
    "Node",
    "MetaValue",
    "Block",
    "Inline",
    "Document",
    "Meta",
    "Citation",
    "Attr",
    "Target",
    "ListAttributes",
    # Enumerations
    "Alignment",
    "CitationMode",
    "ListNumberDelim",
    "ListNumberStyle",
    "MathType",
    "QuoteType",
    # Metadata values
    "MetaMap",
    "MetaList",
    "MetaBool",
    "MetaString",
    "MetaInlines",
    "MetaBlocks",
    # Blocks
    "Plain",
    "Para",
    "Paragraph",
    "CodeBlock",
    "RawBlock",
    "BlockQuote",
    "OrderedList",
    "BulletList",
    "DefinitionList",
    "Header",
    "HorizontalRule",
    "Table",
    "Div",
    "Null",
    # Inlines
    "Str",
    "Emph",
    "Strong",
    "Strikeout",
    "Superscript",
    "Subscript",
    "SmallCaps",
    "Quoted",
    "Cite",
    "Code",
    "Space",
    "SoftBreak",
    "LineBreak",
    "Math",
    "RawInline",
    "Link",
    "Image",
    "Span",
    "BLOCK_TYPES",
    "INLINE_TYPES",
    "META_VALUE_TYPES",
    # Visitors and walking
    "NodeVisitor",
    "NodeKind",
    "Walker",
    "BlockWalker",
    "InlineWalker",
    "CitationWalker",
    "MetaValueWalker",
    "walk",
    # Serialization
    "WireDecoder",
    "WireEncoder",
    "decode",
    "decode_json",
    "encode",
    "encode_json",
    "decode_block",
    "decode_inline",
    "decode_meta_value",
    "decode_citation",
    "encode_block",
    "encode_inline",
    "encode_meta_value",
    "encode_citation",
]
