#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/panfilter/ast/serialization.py
"""Wire codec between the AST and the converter's JSON format.

The wire format is fixed by the document converter (pandoc-types 1.16
JSON). A document is a two-element array ``[meta, blocks]``; metadata is
wrapped in ``{"unMeta": {...}}``; union values are tagged objects
``{"t": <tag>, "c": <payload>}``.

Encoding rules:

- Single-payload variants put the payload directly in ``c``
  (``{"t": "Str", "c": "hello"}``).
- Multi-field variants put an array of fields, in declaration order, in
  ``c`` (``{"t": "Header", "c": [1, attr, inlines]}``).
- Nullary inlines and the enumerations ListNumberStyle, ListNumberDelim,
  Alignment, QuoteType and MathType use ``{"t": <tag>, "c": []}``.
- CitationMode and the content-free blocks HorizontalRule and Null are bare
  strings.
- Citations are plain objects with the field names in
  ``CITATION_FIELD_NAMES`` (the mode field name is configurable).
- Metadata keys are always written in sorted order.

Decoding accepts both nullary forms everywhere and reports every malformed
value with a DecodeError naming the failure kind and its location. Input
nested deeper than ``MAX_NESTING_DEPTH`` block, inline or metadata levels
is rejected as ``type-mismatch``.

Examples
--------
Decode, modify and re-encode:

    >>> from panfilter.ast.serialization import decode_json, encode_json
    >>> doc = decode_json('[{"unMeta":{}},[{"t":"Para","c":[{"t":"Str","c":"Hi"}]}]]')
    >>> doc.blocks[0].content[0].text
    'Hi'
    >>> encode_json(doc)
    '[{"unMeta": {}}, [{"t": "Para", "c": [{"t": "Str", "c": "Hi"}]}]]'

"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any, Callable, TypeVar

from panfilter.ast.nodes import (
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
    Null,
    OrderedList,
    Para,
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
from panfilter.constants import MAX_NESTING_DEPTH, MAX_UINT, META_KEY, PAYLOAD_KEY, TAG_KEY
from panfilter.exceptions import DecodeError, DecodeErrorKind
from panfilter.options import CodecOptions

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

# Block variants written as bare strings
_BARE_BLOCKS: dict[str, type[Block]] = {"HorizontalRule": HorizontalRule, "Null": Null}

# Inline variants written as {"t": tag, "c": []}
_NULLARY_INLINES: dict[str, type[Inline]] = {"Space": Space, "SoftBreak": SoftBreak, "LineBreak": LineBreak}

# Enumerations written as bare strings; all others use the tagged form
_BARE_ENUMS: tuple[type[Enum], ...] = (CitationMode,)


def _tagged(tag: str, payload: Any) -> dict[str, Any]:
    return {TAG_KEY: tag, PAYLOAD_KEY: payload}


def _child(path: str, key: int | str) -> str:
    return f"{path}/{key}"


# ============================================================================
# Encoding
# ============================================================================


class WireEncoder:
    """Encode AST nodes as JSON-compatible Python values.

    Encoding is total: any well-formed tree encodes without error.

    Parameters
    ----------
    options : CodecOptions or None, default = None
        Codec options; only ``citation_mode_key`` affects encoding

    """

    def __init__(self, options: CodecOptions | None = None):
        """Initialize the encoder with codec options."""
        self.options = options or CodecOptions()
        self._citation_fields = self.options.citation_field_names
        self._block_encoders: dict[type, Callable[[Any], Any]] = {
            Plain: lambda n: _tagged("Plain", self.encode_inlines(n.content)),
            Para: lambda n: _tagged("Para", self.encode_inlines(n.content)),
            CodeBlock: lambda n: _tagged("CodeBlock", [self.encode_attr(n.attr), n.text]),
            RawBlock: lambda n: _tagged("RawBlock", [n.format, n.text]),
            BlockQuote: lambda n: _tagged("BlockQuote", self.encode_blocks(n.blocks)),
            OrderedList: self._encode_ordered_list,
            BulletList: lambda n: _tagged("BulletList", self._encode_block_lists(n.items)),
            DefinitionList: self._encode_definition_list,
            Header: lambda n: _tagged("Header", [n.level, self.encode_attr(n.attr), self.encode_inlines(n.content)]),
            HorizontalRule: lambda n: "HorizontalRule",
            Table: self._encode_table,
            Div: lambda n: _tagged("Div", [self.encode_attr(n.attr), self.encode_blocks(n.blocks)]),
            Null: lambda n: "Null",
        }
        self._inline_encoders: dict[type, Callable[[Any], Any]] = {
            Str: lambda n: _tagged("Str", n.text),
            Emph: lambda n: _tagged("Emph", self.encode_inlines(n.content)),
            Strong: lambda n: _tagged("Strong", self.encode_inlines(n.content)),
            Strikeout: lambda n: _tagged("Strikeout", self.encode_inlines(n.content)),
            Superscript: lambda n: _tagged("Superscript", self.encode_inlines(n.content)),
            Subscript: lambda n: _tagged("Subscript", self.encode_inlines(n.content)),
            SmallCaps: lambda n: _tagged("SmallCaps", self.encode_inlines(n.content)),
            Quoted: lambda n: _tagged("Quoted", [self.encode_enum(n.quote_type), self.encode_inlines(n.content)]),
            Cite: lambda n: _tagged(
                "Cite", [[self.encode_citation(c) for c in n.citations], self.encode_inlines(n.content)]
            ),
            Code: lambda n: _tagged("Code", [self.encode_attr(n.attr), n.text]),
            Space: lambda n: _tagged("Space", []),
            SoftBreak: lambda n: _tagged("SoftBreak", []),
            LineBreak: lambda n: _tagged("LineBreak", []),
            Math: lambda n: _tagged("Math", [self.encode_enum(n.math_type), n.text]),
            RawInline: lambda n: _tagged("RawInline", [n.format, n.text]),
            Link: lambda n: _tagged(
                "Link", [self.encode_attr(n.attr), self.encode_inlines(n.content), self.encode_target(n.target)]
            ),
            Image: lambda n: _tagged(
                "Image", [self.encode_attr(n.attr), self.encode_inlines(n.content), self.encode_target(n.target)]
            ),
            Span: lambda n: _tagged("Span", [self.encode_attr(n.attr), self.encode_inlines(n.content)]),
        }
        self._meta_encoders: dict[type, Callable[[Any], Any]] = {
            MetaMap: lambda n: _tagged("MetaMap", self._encode_entries(n.entries)),
            MetaList: lambda n: _tagged("MetaList", [self.encode_meta_value(v) for v in n.items]),
            MetaBool: lambda n: _tagged("MetaBool", n.value),
            MetaString: lambda n: _tagged("MetaString", n.text),
            MetaInlines: lambda n: _tagged("MetaInlines", self.encode_inlines(n.content)),
            MetaBlocks: lambda n: _tagged("MetaBlocks", self.encode_blocks(n.blocks)),
        }

    def encode_document(self, document: Document) -> list[Any]:
        """Encode a Document as ``[meta, blocks]``."""
        return [self.encode_meta(document.meta), self.encode_blocks(document.blocks)]

    def encode_meta(self, meta: Meta) -> dict[str, Any]:
        return {META_KEY: self._encode_entries(meta.entries)}

    def encode_meta_value(self, value: MetaValue) -> dict[str, Any]:
        return self._meta_encoders[type(value)](value)

    def encode_block(self, block: Block) -> Any:
        return self._block_encoders[type(block)](block)

    def encode_inline(self, inline: Inline) -> dict[str, Any]:
        return self._inline_encoders[type(inline)](inline)

    def encode_blocks(self, blocks: tuple[Block, ...]) -> list[Any]:
        return [self.encode_block(block) for block in blocks]

    def encode_inlines(self, inlines: tuple[Inline, ...]) -> list[dict[str, Any]]:
        return [self.encode_inline(inline) for inline in inlines]

    def encode_citation(self, citation: Citation) -> dict[str, Any]:
        """Encode a Citation as a plain object using the configured field names."""
        names = self._citation_fields
        return {
            names["id"]: citation.id,
            names["prefix"]: self.encode_inlines(citation.prefix),
            names["suffix"]: self.encode_inlines(citation.suffix),
            names["mode"]: self.encode_enum(citation.mode),
            names["note_num"]: citation.note_num,
            names["hash"]: citation.hash,
        }

    @staticmethod
    def encode_enum(member: Enum) -> Any:
        if isinstance(member, _BARE_ENUMS):
            return member.value
        return _tagged(member.value, [])

    @staticmethod
    def encode_attr(attr: Attr) -> list[Any]:
        return [attr.identifier, list(attr.classes), [[key, value] for key, value in attr.attributes]]

    @staticmethod
    def encode_target(target: Target) -> list[str]:
        return [target.url, target.title]

    def _encode_entries(self, entries: Mapping[str, MetaValue]) -> dict[str, Any]:
        return {key: self.encode_meta_value(entries[key]) for key in sorted(entries)}

    def _encode_block_lists(self, items: tuple[tuple[Block, ...], ...]) -> list[list[Any]]:
        return [self.encode_blocks(item) for item in items]

    def _encode_ordered_list(self, node: OrderedList) -> dict[str, Any]:
        attributes = node.attributes
        list_attributes = [attributes.start, self.encode_enum(attributes.style), self.encode_enum(attributes.delim)]
        return _tagged("OrderedList", [list_attributes, self._encode_block_lists(node.items)])

    def _encode_definition_list(self, node: DefinitionList) -> dict[str, Any]:
        items = [[self.encode_inlines(term), self._encode_block_lists(definitions)] for term, definitions in node.items]
        return _tagged("DefinitionList", items)

    def _encode_table(self, node: Table) -> dict[str, Any]:
        return _tagged(
            "Table",
            [
                self.encode_inlines(node.caption),
                [self.encode_enum(alignment) for alignment in node.alignments],
                [float(width) for width in node.widths],
                self._encode_block_lists(node.headers),
                [self._encode_block_lists(row) for row in node.rows],
            ],
        )


# ============================================================================
# Decoding
# ============================================================================


class WireDecoder:
    """Decode JSON-compatible Python values into AST nodes.

    Every decode method takes the value and its location (a ``/``-separated
    path used in error messages) and raises DecodeError on malformed input.
    The decoder counts block, inline and metadata nesting and rejects
    documents deeper than ``MAX_NESTING_DEPTH``.

    Parameters
    ----------
    options : CodecOptions or None, default = None
        Codec options; only ``citation_mode_key`` affects decoding

    """

    def __init__(self, options: CodecOptions | None = None):
        """Initialize the decoder with codec options."""
        self.options = options or CodecOptions()
        self._citation_fields = self.options.citation_field_names
        self._depth = 0
        self._block_decoders: dict[str, Callable[[Any, str], Block]] = {
            "Plain": lambda c, p: Plain(self.decode_inlines(c, p)),
            "Para": lambda c, p: Para(self.decode_inlines(c, p)),
            "CodeBlock": self._decode_code_block,
            "RawBlock": lambda c, p: RawBlock(*self._decode_format_text(c, p, "RawBlock")),
            "BlockQuote": lambda c, p: BlockQuote(self.decode_blocks(c, p)),
            "OrderedList": self._decode_ordered_list,
            "BulletList": lambda c, p: BulletList(self._decode_block_lists(c, p)),
            "DefinitionList": self._decode_definition_list,
            "Header": self._decode_header,
            "Table": self._decode_table,
            "Div": self._decode_div,
        }
        self._inline_decoders: dict[str, Callable[[Any, str], Inline]] = {
            "Str": lambda c, p: Str(_expect_str(c, p)),
            "Emph": lambda c, p: Emph(self.decode_inlines(c, p)),
            "Strong": lambda c, p: Strong(self.decode_inlines(c, p)),
            "Strikeout": lambda c, p: Strikeout(self.decode_inlines(c, p)),
            "Superscript": lambda c, p: Superscript(self.decode_inlines(c, p)),
            "Subscript": lambda c, p: Subscript(self.decode_inlines(c, p)),
            "SmallCaps": lambda c, p: SmallCaps(self.decode_inlines(c, p)),
            "Quoted": self._decode_quoted,
            "Cite": self._decode_cite,
            "Code": self._decode_code,
            "Math": self._decode_math,
            "RawInline": lambda c, p: RawInline(*self._decode_format_text(c, p, "RawInline")),
            "Link": lambda c, p: Link(*self._decode_link_like(c, p, "Link")),
            "Image": lambda c, p: Image(*self._decode_link_like(c, p, "Image")),
            "Span": self._decode_span,
        }
        self._meta_decoders: dict[str, Callable[[Any, str], MetaValue]] = {
            "MetaMap": lambda c, p: MetaMap(self._decode_entries(c, p)),
            "MetaList": lambda c, p: MetaList(
                tuple(self.decode_meta_value(v, _child(p, i)) for i, v in enumerate(_expect_list(c, p)))
            ),
            "MetaBool": lambda c, p: MetaBool(_expect_bool(c, p)),
            "MetaString": lambda c, p: MetaString(_expect_str(c, p)),
            "MetaInlines": lambda c, p: MetaInlines(self.decode_inlines(c, p)),
            "MetaBlocks": lambda c, p: MetaBlocks(self.decode_blocks(c, p)),
        }

    # Entry points

    def decode_document(self, value: Any) -> Document:
        """Decode a ``[meta, blocks]`` array into a Document.

        The top-level shape is checked before any node is decoded.
        """
        if not isinstance(value, list) or len(value) != 2:
            got = f"array of length {len(value)}" if isinstance(value, list) else _type_name(value)
            raise DecodeError(
                f"Document must be a 2-element array [meta, blocks], got {got}", DecodeErrorKind.NOT_AN_ARRAY, ""
            )
        meta_value, blocks_value = value
        meta = self.decode_meta(meta_value, "/0")
        blocks = self.decode_blocks(blocks_value, "/1")
        return Document(meta=meta, blocks=blocks)

    def decode_meta(self, value: Any, path: str = "") -> Meta:
        obj = _expect_object(value, path)
        if META_KEY not in obj:
            raise DecodeError(f"Metadata object is missing '{META_KEY}'", DecodeErrorKind.MISSING_TAG, path)
        return Meta(self._decode_entries(obj[META_KEY], _child(path, META_KEY)))

    def _descend(self, path: str) -> None:
        self._depth += 1
        if self._depth > MAX_NESTING_DEPTH:
            self._depth -= 1
            raise DecodeError(
                f"Document nesting exceeds {MAX_NESTING_DEPTH} levels", DecodeErrorKind.TYPE_MISMATCH, path
            )

    def decode_meta_value(self, value: Any, path: str = "") -> MetaValue:
        self._descend(path)
        try:
            tag, payload = self._split_tagged(value, path, "MetaValue", self._meta_decoders, {})
            return self._meta_decoders[tag](payload, _child(path, PAYLOAD_KEY))
        finally:
            self._depth -= 1

    def decode_block(self, value: Any, path: str = "") -> Block:
        self._descend(path)
        try:
            tag, payload = self._split_tagged(value, path, "Block", self._block_decoders, _BARE_BLOCKS)
            if tag in _BARE_BLOCKS:
                return _BARE_BLOCKS[tag]()
            return self._block_decoders[tag](payload, _child(path, PAYLOAD_KEY))
        finally:
            self._depth -= 1

    def decode_inline(self, value: Any, path: str = "") -> Inline:
        self._descend(path)
        try:
            tag, payload = self._split_tagged(value, path, "Inline", self._inline_decoders, _NULLARY_INLINES)
            if tag in _NULLARY_INLINES:
                return _NULLARY_INLINES[tag]()
            return self._inline_decoders[tag](payload, _child(path, PAYLOAD_KEY))
        finally:
            self._depth -= 1

    def decode_blocks(self, value: Any, path: str = "") -> tuple[Block, ...]:
        return tuple(self.decode_block(item, _child(path, i)) for i, item in enumerate(_expect_list(value, path)))

    def decode_inlines(self, value: Any, path: str = "") -> tuple[Inline, ...]:
        return tuple(self.decode_inline(item, _child(path, i)) for i, item in enumerate(_expect_list(value, path)))

    def decode_citation(self, value: Any, path: str = "") -> Citation:
        """Decode a Citation object using the configured field names."""
        obj = _expect_object(value, path)
        names = self._citation_fields
        for attribute, key in names.items():
            if key not in obj:
                raise DecodeError(
                    f"Citation is missing field '{key}' ({attribute})", DecodeErrorKind.MISSING_TAG, path
                )
        return Citation(
            id=_expect_str(obj[names["id"]], _child(path, names["id"])),
            prefix=self.decode_inlines(obj[names["prefix"]], _child(path, names["prefix"])),
            suffix=self.decode_inlines(obj[names["suffix"]], _child(path, names["suffix"])),
            mode=self.decode_enum(obj[names["mode"]], _child(path, names["mode"]), CitationMode),
            note_num=_expect_int(obj[names["note_num"]], _child(path, names["note_num"])),
            hash=_expect_int(obj[names["hash"]], _child(path, names["hash"])),
        )

    def decode_enum(self, value: Any, path: str, enum_cls: type[E]) -> E:
        """Decode an enumeration given either as a bare string or a tagged object."""
        members = {member.value: member for member in enum_cls}  # type: ignore[attr-defined]
        tag, _ = self._split_tagged(value, path, enum_cls.__name__, {}, members)
        return members[tag]

    @staticmethod
    def decode_attr(value: Any, path: str) -> Attr:
        identifier, classes, attributes = _expect_tuple(value, path, 3, "Attr")
        pairs = []
        for i, pair in enumerate(_expect_list(attributes, _child(path, 2))):
            pair_path = _child(_child(path, 2), i)
            key, item = _expect_tuple(pair, pair_path, 2, "attribute pair")
            pairs.append((_expect_str(key, _child(pair_path, 0)), _expect_str(item, _child(pair_path, 1))))
        return Attr(
            identifier=_expect_str(identifier, _child(path, 0)),
            classes=tuple(
                _expect_str(cls, _child(_child(path, 1), i)) for i, cls in enumerate(_expect_list(classes, _child(path, 1)))
            ),
            attributes=tuple(pairs),
        )

    @staticmethod
    def decode_target(value: Any, path: str) -> Target:
        url, title = _expect_tuple(value, path, 2, "Target")
        return Target(_expect_str(url, _child(path, 0)), _expect_str(title, _child(path, 1)))

    # Tag handling

    def _split_tagged(
        self,
        value: Any,
        path: str,
        union: str,
        payload_tags: dict[str, Any],
        nullary_tags: dict[str, Any],
    ) -> tuple[str, Any]:
        """Return ``(tag, payload)`` for a union value in either encoding form.

        Nullary variants may be a bare string or a tagged object whose payload
        is absent or an empty array. Other variants must be tagged objects
        carrying a payload.
        """
        if isinstance(value, str):
            if value in nullary_tags:
                return value, None
            if value in payload_tags:
                raise DecodeError(
                    f"{union} variant '{value}' requires a payload but was given as a bare string",
                    DecodeErrorKind.MISSING_TAG,
                    path,
                )
            raise DecodeError(f"Unknown {union} tag '{value}'", DecodeErrorKind.UNKNOWN_TAG, path)

        if not isinstance(value, dict):
            raise DecodeError(
                f"Expected a tagged {union} object, got {_type_name(value)}", DecodeErrorKind.TYPE_MISMATCH, path
            )
        if TAG_KEY not in value:
            raise DecodeError(f"{union} object is missing its tag field '{TAG_KEY}'", DecodeErrorKind.MISSING_TAG, path)
        tag = value[TAG_KEY]
        if not isinstance(tag, str):
            raise DecodeError(
                f"{union} tag must be a string, got {_type_name(tag)}", DecodeErrorKind.TYPE_MISMATCH, _child(path, TAG_KEY)
            )

        if tag in nullary_tags:
            if PAYLOAD_KEY in value and value[PAYLOAD_KEY] != []:
                raise DecodeError(
                    f"{union} variant '{tag}' takes no fields, got payload {value[PAYLOAD_KEY]!r}",
                    DecodeErrorKind.ARITY_MISMATCH,
                    _child(path, PAYLOAD_KEY),
                )
            return tag, None
        if tag not in payload_tags:
            raise DecodeError(f"Unknown {union} tag '{tag}'", DecodeErrorKind.UNKNOWN_TAG, _child(path, TAG_KEY))
        if PAYLOAD_KEY not in value:
            raise DecodeError(
                f"{union} variant '{tag}' is missing its payload field '{PAYLOAD_KEY}'",
                DecodeErrorKind.MISSING_TAG,
                path,
            )
        return tag, value[PAYLOAD_KEY]

    # Blocks

    def _decode_block_lists(self, value: Any, path: str) -> tuple[tuple[Block, ...], ...]:
        return tuple(self.decode_blocks(item, _child(path, i)) for i, item in enumerate(_expect_list(value, path)))

    def _decode_code_block(self, payload: Any, path: str) -> CodeBlock:
        attr, text = _expect_tuple(payload, path, 2, "CodeBlock")
        return CodeBlock(self.decode_attr(attr, _child(path, 0)), _expect_str(text, _child(path, 1)))

    def _decode_format_text(self, payload: Any, path: str, tag: str) -> tuple[str, str]:
        fmt, text = _expect_tuple(payload, path, 2, tag)
        return _expect_str(fmt, _child(path, 0)), _expect_str(text, _child(path, 1))

    def _decode_ordered_list(self, payload: Any, path: str) -> OrderedList:
        attributes, items = _expect_tuple(payload, path, 2, "OrderedList")
        attr_path = _child(path, 0)
        start, style, delim = _expect_tuple(attributes, attr_path, 3, "ListAttributes")
        list_attributes = ListAttributes(
            start=_expect_int(start, _child(attr_path, 0)),
            style=self.decode_enum(style, _child(attr_path, 1), ListNumberStyle),
            delim=self.decode_enum(delim, _child(attr_path, 2), ListNumberDelim),
        )
        return OrderedList(list_attributes, self._decode_block_lists(items, _child(path, 1)))

    def _decode_definition_list(self, payload: Any, path: str) -> DefinitionList:
        items = []
        for i, item in enumerate(_expect_list(payload, path)):
            item_path = _child(path, i)
            term, definitions = _expect_tuple(item, item_path, 2, "definition list item")
            items.append(
                (
                    self.decode_inlines(term, _child(item_path, 0)),
                    self._decode_block_lists(definitions, _child(item_path, 1)),
                )
            )
        return DefinitionList(tuple(items))

    def _decode_header(self, payload: Any, path: str) -> Header:
        level, attr, content = _expect_tuple(payload, path, 3, "Header")
        return Header(
            _expect_int(level, _child(path, 0), minimum=1),
            self.decode_attr(attr, _child(path, 1)),
            self.decode_inlines(content, _child(path, 2)),
        )

    def _decode_table(self, payload: Any, path: str) -> Table:
        caption, alignments, widths, headers, rows = _expect_tuple(payload, path, 5, "Table")
        decoded_alignments = tuple(
            self.decode_enum(a, _child(_child(path, 1), i), Alignment)
            for i, a in enumerate(_expect_list(alignments, _child(path, 1)))
        )
        decoded_widths = tuple(
            _expect_float(w, _child(_child(path, 2), i)) for i, w in enumerate(_expect_list(widths, _child(path, 2)))
        )
        decoded_headers = self._decode_block_lists(headers, _child(path, 3))
        columns = len(decoded_alignments)
        if len(decoded_widths) != columns or len(decoded_headers) != columns:
            raise DecodeError(
                f"Table has {columns} alignments, {len(decoded_widths)} widths and "
                f"{len(decoded_headers)} header cells; all three must agree",
                DecodeErrorKind.ARITY_MISMATCH,
                path,
            )
        rows_path = _child(path, 4)
        decoded_rows = tuple(
            self._decode_block_lists(row, _child(rows_path, i)) for i, row in enumerate(_expect_list(rows, rows_path))
        )
        return Table(
            caption=self.decode_inlines(caption, _child(path, 0)),
            alignments=decoded_alignments,
            widths=decoded_widths,
            headers=decoded_headers,
            rows=decoded_rows,
        )

    def _decode_div(self, payload: Any, path: str) -> Div:
        attr, blocks = _expect_tuple(payload, path, 2, "Div")
        return Div(self.decode_attr(attr, _child(path, 0)), self.decode_blocks(blocks, _child(path, 1)))

    # Inlines

    def _decode_quoted(self, payload: Any, path: str) -> Quoted:
        quote_type, content = _expect_tuple(payload, path, 2, "Quoted")
        return Quoted(
            self.decode_enum(quote_type, _child(path, 0), QuoteType), self.decode_inlines(content, _child(path, 1))
        )

    def _decode_cite(self, payload: Any, path: str) -> Cite:
        citations, content = _expect_tuple(payload, path, 2, "Cite")
        citations_path = _child(path, 0)
        return Cite(
            tuple(
                self.decode_citation(c, _child(citations_path, i))
                for i, c in enumerate(_expect_list(citations, citations_path))
            ),
            self.decode_inlines(content, _child(path, 1)),
        )

    def _decode_code(self, payload: Any, path: str) -> Code:
        attr, text = _expect_tuple(payload, path, 2, "Code")
        return Code(self.decode_attr(attr, _child(path, 0)), _expect_str(text, _child(path, 1)))

    def _decode_math(self, payload: Any, path: str) -> Math:
        math_type, text = _expect_tuple(payload, path, 2, "Math")
        return Math(self.decode_enum(math_type, _child(path, 0), MathType), _expect_str(text, _child(path, 1)))

    def _decode_link_like(self, payload: Any, path: str, tag: str) -> tuple[Attr, tuple[Inline, ...], Target]:
        attr, content, target = _expect_tuple(payload, path, 3, tag)
        return (
            self.decode_attr(attr, _child(path, 0)),
            self.decode_inlines(content, _child(path, 1)),
            self.decode_target(target, _child(path, 2)),
        )

    def _decode_span(self, payload: Any, path: str) -> Span:
        attr, content = _expect_tuple(payload, path, 2, "Span")
        return Span(self.decode_attr(attr, _child(path, 0)), self.decode_inlines(content, _child(path, 1)))

    # Metadata

    def _decode_entries(self, value: Any, path: str) -> dict[str, MetaValue]:
        obj = _expect_object(value, path)
        return {key: self.decode_meta_value(item, _child(path, key)) for key, item in obj.items()}


# ============================================================================
# Leaf checks
# ============================================================================


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _mismatch(expected: str, value: Any, path: str) -> DecodeError:
    return DecodeError(f"Expected {expected}, got {_type_name(value)}", DecodeErrorKind.TYPE_MISMATCH, path)


def _expect_list(value: Any, path: str) -> list[Any]:
    if not isinstance(value, list):
        raise _mismatch("an array", value, path)
    return value


def _expect_object(value: Any, path: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise _mismatch("an object", value, path)
    return value


def _expect_tuple(value: Any, path: str, arity: int, what: str) -> list[Any]:
    items = _expect_list(value, path)
    if len(items) != arity:
        raise DecodeError(
            f"{what} expects {arity} fields, got {len(items)}", DecodeErrorKind.ARITY_MISMATCH, path
        )
    return items


def _expect_str(value: Any, path: str) -> str:
    if not isinstance(value, str):
        raise _mismatch("a string", value, path)
    return value


def _expect_bool(value: Any, path: str) -> bool:
    if not isinstance(value, bool):
        raise _mismatch("a boolean", value, path)
    return value


def _expect_int(value: Any, path: str, minimum: int = 0, maximum: int = MAX_UINT) -> int:
    """Check an integer field; integral floats such as ``2.0`` are accepted."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _mismatch("an integer", value, path)
    if isinstance(value, float):
        if not value.is_integer():
            raise DecodeError(f"Expected an integer, got {value!r}", DecodeErrorKind.TYPE_MISMATCH, path)
        value = int(value)
    if not minimum <= value <= maximum:
        raise DecodeError(
            f"Integer {value} is outside the representable range [{minimum}, {maximum}]",
            DecodeErrorKind.TYPE_MISMATCH,
            path,
        )
    return value


def _expect_float(value: Any, path: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _mismatch("a number", value, path)
    return float(value)


# ============================================================================
# Module-level API
# ============================================================================


def decode(value: Any, options: CodecOptions | None = None) -> Document:
    """Decode a parsed wire value into a Document.

    Parameters
    ----------
    value : Any
        The JSON value as produced by ``json.loads``
    options : CodecOptions or None, default = None
        Codec options

    Returns
    -------
    Document
        The decoded document

    Raises
    ------
    DecodeError
        If the value is not a well-formed document. ``error.kind`` tells
        which check failed and ``error.path`` where.

    """
    document = WireDecoder(options).decode_document(value)
    logger.debug("Decoded document with %d blocks and %d metadata keys", len(document.blocks), len(document.meta.entries))
    return document


def decode_json(text: str | bytes, options: CodecOptions | None = None) -> Document:
    """Parse wire text and decode it into a Document.

    Raises
    ------
    DecodeError
        If the text is not valid JSON, bytes are not valid UTF-8 (both kind
        ``type-mismatch``), or the value does not describe a well-formed
        document

    """
    try:
        value = json.loads(text)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Invalid JSON: {e}", DecodeErrorKind.TYPE_MISMATCH, "", original_error=e) from e
    except UnicodeDecodeError as e:
        raise DecodeError(
            f"Input is not valid {e.encoding}: {e.reason}", DecodeErrorKind.TYPE_MISMATCH, "", original_error=e
        ) from e
    except RecursionError as e:
        raise DecodeError("Invalid JSON: nesting too deep", DecodeErrorKind.TYPE_MISMATCH, "", original_error=e) from e
    return decode(value, options)


def encode(document: Document, options: CodecOptions | None = None) -> list[Any]:
    """Encode a Document as a JSON-compatible value ``[meta, blocks]``.

    Metadata keys are emitted in sorted order, so equal documents always
    encode identically.
    """
    return WireEncoder(options).encode_document(document)


def encode_json(document: Document, options: CodecOptions | None = None) -> str:
    """Encode a Document as wire text.

    Parameters
    ----------
    document : Document
        The document to encode
    options : CodecOptions or None, default = None
        Codec options; ``indent`` and ``ensure_ascii`` control the JSON text

    Returns
    -------
    str
        JSON text accepted by the document converter

    """
    options = options or CodecOptions()
    return json.dumps(encode(document, options), indent=options.indent, ensure_ascii=options.ensure_ascii)


def decode_block(value: Any, options: CodecOptions | None = None) -> Block:
    """Decode a single Block value."""
    return WireDecoder(options).decode_block(value)


def decode_inline(value: Any, options: CodecOptions | None = None) -> Inline:
    """Decode a single Inline value."""
    return WireDecoder(options).decode_inline(value)


def decode_meta_value(value: Any, options: CodecOptions | None = None) -> MetaValue:
    """Decode a single MetaValue."""
    return WireDecoder(options).decode_meta_value(value)


def decode_citation(value: Any, options: CodecOptions | None = None) -> Citation:
    """Decode a single Citation object."""
    return WireDecoder(options).decode_citation(value)


def encode_block(block: Block, options: CodecOptions | None = None) -> Any:
    """Encode a single Block."""
    return WireEncoder(options).encode_block(block)


def encode_inline(inline: Inline, options: CodecOptions | None = None) -> dict[str, Any]:
    """Encode a single Inline."""
    return WireEncoder(options).encode_inline(inline)


def encode_meta_value(value: MetaValue, options: CodecOptions | None = None) -> dict[str, Any]:
    """Encode a single MetaValue."""
    return WireEncoder(options).encode_meta_value(value)


def encode_citation(citation: Citation, options: CodecOptions | None = None) -> dict[str, Any]:
    """Encode a single Citation."""
    return WireEncoder(options).encode_citation(citation)
