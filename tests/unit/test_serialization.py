#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the wire codec."""
import json

import pytest
from hypothesis import given
from utils import documents, nested_emph_wire

from panfilter.ast import (
    Alignment,
    Attr,
    Citation,
    CitationMode,
    Cite,
    Document,
    Emph,
    Header,
    HorizontalRule,
    LineBreak,
    Link,
    ListAttributes,
    ListNumberDelim,
    ListNumberStyle,
    Meta,
    MetaBool,
    MetaList,
    MetaMap,
    MetaString,
    Null,
    OrderedList,
    Para,
    Plain,
    Quoted,
    QuoteType,
    SoftBreak,
    Space,
    Str,
    Table,
    Target,
)
from panfilter.ast.serialization import (
    WireDecoder,
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
from panfilter.constants import MAX_NESTING_DEPTH
from panfilter.exceptions import DecodeError, DecodeErrorKind
from panfilter.options import CodecOptions


def _str(text: str) -> dict:
    return {"t": "Str", "c": text}


def _wire(*blocks, meta=None) -> list:
    return [{"unMeta": meta or {}}, list(blocks)]


@pytest.mark.unit
class TestEncoding:
    """Test the exact wire shape of encoded nodes."""

    def test_simple_document(self) -> None:
        """Test encoding a one-paragraph document to text."""
        doc = Document(blocks=[Para([Str("Hi")])])

        assert encode_json(doc) == '[{"unMeta": {}}, [{"t": "Para", "c": [{"t": "Str", "c": "Hi"}]}]]'

    def test_single_payload_variant(self) -> None:
        """Test that a newtype payload goes directly in the payload field."""
        assert encode_inline(Str("x")) == {"t": "Str", "c": "x"}
        assert encode_inline(Emph([Str("x")])) == {"t": "Emph", "c": [_str("x")]}

    def test_tuple_payload_variant(self) -> None:
        """Test that multi-field payloads are arrays in field order."""
        header = Header(2, Attr("id", ["c"], [("k", "v")]), [Str("T")])

        assert encode_block(header) == {"t": "Header", "c": [2, ["id", ["c"], [["k", "v"]]], [_str("T")]]}

    @pytest.mark.parametrize("inline, tag", [(Space(), "Space"), (SoftBreak(), "SoftBreak"), (LineBreak(), "LineBreak")])
    def test_nullary_inlines_use_empty_payload(self, inline, tag) -> None:
        """Test that nullary inlines carry an empty payload array."""
        assert encode_inline(inline) == {"t": tag, "c": []}

    def test_content_free_blocks_are_bare_strings(self) -> None:
        """Test that HorizontalRule and Null encode as bare tag strings."""
        assert encode_block(HorizontalRule()) == "HorizontalRule"
        assert encode_block(Null()) == "Null"

    def test_enumerations_in_payloads(self) -> None:
        """Test the tagged-object form of enumeration values."""
        quoted = Quoted(QuoteType.DOUBLE, [Str("x")])

        assert encode_inline(quoted) == {"t": "Quoted", "c": [{"t": "DoubleQuote", "c": []}, [_str("x")]]}

    def test_ordered_list_attributes(self) -> None:
        """Test the [start, style, delim] triple of an ordered list."""
        ordered = OrderedList(
            ListAttributes(3, ListNumberStyle.DECIMAL, ListNumberDelim.PERIOD), [[Plain([Str("a")])]]
        )

        assert encode_block(ordered) == {
            "t": "OrderedList",
            "c": [
                [3, {"t": "Decimal", "c": []}, {"t": "Period", "c": []}],
                [[{"t": "Plain", "c": [_str("a")]}]],
            ],
        }

    def test_table_layout(self) -> None:
        """Test the five-field table payload."""
        table = Table(
            caption=[],
            alignments=[Alignment.CENTER],
            widths=[0.5],
            headers=[[Plain([Str("h")])]],
            rows=[[[Plain([Str("c")])]]],
        )

        assert encode_block(table) == {
            "t": "Table",
            "c": [
                [],
                [{"t": "AlignCenter", "c": []}],
                [0.5],
                [[{"t": "Plain", "c": [_str("h")]}]],
                [[[{"t": "Plain", "c": [_str("c")]}]]],
            ],
        }

    def test_link_target(self) -> None:
        """Test that a link target is a [url, title] pair."""
        link = Link(Attr(), [Str("x")], Target("https://example.com", "Ex"))

        assert encode_inline(link)["c"][2] == ["https://example.com", "Ex"]

    def test_citation_field_names(self) -> None:
        """Test the wire field names of a citation."""
        citation = Citation("doe99", [Str("see")], [], CitationMode.SUPPRESS_AUTHOR, 2, 5)

        assert encode_citation(citation) == {
            "citationId": "doe99",
            "citationPrefix": [_str("see")],
            "citationSuffix": [],
            "citationMode": "SuppressAuthor",
            "citationNoteNum": 2,
            "citationHash": 5,
        }

    def test_lowercase_citation_mode_key(self) -> None:
        """Test selecting the lower-case citation mode field name."""
        options = CodecOptions(citation_mode_key="citationmode")
        encoded = encode_citation(Citation("doe99"), options)

        assert encoded["citationmode"] == "NormalCitation"
        assert "citationMode" not in encoded

    def test_meta_values(self) -> None:
        """Test the tagged encoding of metadata values."""
        assert encode_meta_value(MetaBool(False)) == {"t": "MetaBool", "c": False}
        assert encode_meta_value(MetaList([MetaString("a")])) == {
            "t": "MetaList",
            "c": [{"t": "MetaString", "c": "a"}],
        }

    def test_meta_keys_are_sorted(self) -> None:
        """Test that metadata keys are written in sorted order."""
        doc = Document(meta=Meta({"zeta": MetaBool(True), "alpha": MetaMap({"y": MetaBool(True), "b": MetaBool(False)})}))
        encoded = encode(doc)

        assert list(encoded[0]["unMeta"]) == ["alpha", "zeta"]
        assert list(encoded[0]["unMeta"]["alpha"]["c"]) == ["b", "y"]

    def test_meta_insertion_order_does_not_change_output(self) -> None:
        """Test that documents differing only in key order encode identically."""
        first = Document(meta=Meta({"b": MetaString("2"), "a": MetaString("1"), "c": MetaString("3")}))
        second = Document(meta=Meta({"c": MetaString("3"), "a": MetaString("1"), "b": MetaString("2")}))

        assert encode_json(first) == encode_json(second)

    def test_non_ascii_is_written_verbatim(self) -> None:
        """Test that non-ASCII text is not escaped by default."""
        doc = Document(blocks=[Plain([Str("naïve")])])

        assert "naïve" in encode_json(doc)
        assert "na\\u00efve" in encode_json(doc, CodecOptions(ensure_ascii=True))

    def test_indent_option(self) -> None:
        """Test pretty-printed output."""
        text = encode_json(Document(), CodecOptions(indent=2))

        assert text.startswith("[\n  {")


@pytest.mark.unit
class TestDecoding:
    """Test decoding well-formed wire values."""

    def test_simple_document(self) -> None:
        """Test decoding a one-paragraph document from text."""
        doc = decode_json('[{"unMeta":{}},[{"t":"Para","c":[{"t":"Str","c":"Hi"}]}]]')

        assert doc == Document(blocks=[Para([Str("Hi")])])

    @pytest.mark.parametrize("value", [{"t": "Space", "c": []}, {"t": "Space"}, "Space"])
    def test_nullary_inline_forms(self, value) -> None:
        """Test that every encoding of a nullary inline is accepted."""
        assert decode_inline(value) == Space()

    @pytest.mark.parametrize("value", ["HorizontalRule", {"t": "HorizontalRule", "c": []}, {"t": "HorizontalRule"}])
    def test_content_free_block_forms(self, value) -> None:
        """Test that content-free blocks decode from either form."""
        assert decode_block(value) == HorizontalRule()

    @pytest.mark.parametrize("value", ["DoubleQuote", {"t": "DoubleQuote", "c": []}])
    def test_enumeration_forms(self, value) -> None:
        """Test that enumerations decode from a bare string or a tagged object."""
        inline = decode_inline({"t": "Quoted", "c": [value, []]})

        assert inline == Quoted(QuoteType.DOUBLE, [])

    def test_citation_mode_tagged_form(self) -> None:
        """Test that a tagged citation mode is accepted too."""
        value = {
            "citationId": "x",
            "citationPrefix": [],
            "citationSuffix": [],
            "citationMode": {"t": "AuthorInText", "c": []},
            "citationNoteNum": 0,
            "citationHash": 0,
        }

        assert decode_citation(value).mode is CitationMode.AUTHOR_IN_TEXT

    def test_integral_float_is_accepted(self) -> None:
        """Test that integer fields accept integral floats."""
        header = decode_block({"t": "Header", "c": [2.0, ["", [], []], []]})

        assert header.level == 2
        assert isinstance(header.level, int)

    def test_meta_map(self) -> None:
        """Test decoding nested metadata."""
        value = {"t": "MetaMap", "c": {"k": {"t": "MetaString", "c": "v"}}}

        assert decode_meta_value(value) == MetaMap({"k": MetaString("v")})

    def test_cite(self) -> None:
        """Test decoding a Cite inline with its citations."""
        value = {
            "t": "Cite",
            "c": [
                [
                    {
                        "citationId": "doe99",
                        "citationPrefix": [],
                        "citationSuffix": [_str("p. 4")],
                        "citationMode": "NormalCitation",
                        "citationNoteNum": 1,
                        "citationHash": 0,
                    }
                ],
                [_str("@doe99")],
            ],
        }

        assert decode_inline(value) == Cite(
            [Citation("doe99", suffix=[Str("p. 4")], note_num=1)], [Str("@doe99")]
        )

    def test_bytes_input(self) -> None:
        """Test that UTF-8 encoded bytes are accepted."""
        doc = decode_json('[{"unMeta":{}},[{"t":"Plain","c":[{"t":"Str","c":"é"}]}]]'.encode("utf-8"))

        assert doc.blocks[0].content[0] == Str("é")


@pytest.mark.unit
class TestRoundTrip:
    """Test that decoding inverts encoding."""

    def test_sample_document_round_trip(self, sample_document) -> None:
        """Test a document that uses every variant."""
        assert decode_json(encode_json(sample_document)) == sample_document

    def test_wire_text_round_trip(self, sample_wire) -> None:
        """Test that re-encoding decoded text reproduces it byte for byte."""
        assert encode_json(decode_json(sample_wire)) == sample_wire

    def test_lowercase_citation_round_trip(self, sample_document) -> None:
        """Test the round trip with the lower-case citation mode key."""
        options = CodecOptions(citation_mode_key="citationmode")

        assert decode_json(encode_json(sample_document, options), options) == sample_document

    @given(documents)
    def test_round_trip_property(self, doc) -> None:
        """Test decode(encode(doc)) == doc for generated documents."""
        assert decode(json.loads(encode_json(doc))) == doc


@pytest.mark.unit
class TestDecodeErrors:
    """Test that malformed input is reported, never guessed around."""

    def _assert_error(self, value, kind: DecodeErrorKind, path: str | None = None) -> DecodeError:
        with pytest.raises(DecodeError) as exc_info:
            decode(value)
        assert exc_info.value.kind is kind
        if path is not None:
            assert exc_info.value.path == path
        return exc_info.value

    @pytest.mark.parametrize("value", [{}, [], [{"unMeta": {}}], [{"unMeta": {}}, [], []], "doc", None])
    def test_not_an_array(self, value) -> None:
        """Test top-level values that are not a two-element array."""
        self._assert_error(value, DecodeErrorKind.NOT_AN_ARRAY)

    def test_missing_tag(self) -> None:
        """Test a tagged object without its tag field."""
        self._assert_error(_wire({"c": []}), DecodeErrorKind.MISSING_TAG, "/1/0")

    def test_missing_payload(self) -> None:
        """Test a payload-carrying variant without its payload field."""
        self._assert_error(_wire({"t": "Para"}), DecodeErrorKind.MISSING_TAG, "/1/0")

    def test_payload_variant_as_bare_string(self) -> None:
        """Test a payload-carrying variant written as a bare string."""
        self._assert_error(_wire("Para"), DecodeErrorKind.MISSING_TAG)

    def test_unknown_block_tag(self) -> None:
        """Test a tag that is not a Block variant."""
        error = self._assert_error(_wire({"t": "Paragraph", "c": []}), DecodeErrorKind.UNKNOWN_TAG)
        assert "Paragraph" in str(error)

    def test_inline_tag_in_block_position(self) -> None:
        """Test that tags are checked against the union expected at that position."""
        self._assert_error(_wire({"t": "Str", "c": "x"}), DecodeErrorKind.UNKNOWN_TAG)

    def test_unknown_enumeration_tag(self) -> None:
        """Test an unknown quote type."""
        value = _wire({"t": "Para", "c": [{"t": "Quoted", "c": ["TripleQuote", []]}]})
        self._assert_error(value, DecodeErrorKind.UNKNOWN_TAG)

    def test_arity_mismatch(self) -> None:
        """Test a tuple payload with the wrong number of fields."""
        value = _wire({"t": "Header", "c": [1, ["", [], []]]})
        self._assert_error(value, DecodeErrorKind.ARITY_MISMATCH, "/1/0/c")

    def test_nullary_with_payload(self) -> None:
        """Test a nullary variant carrying a non-empty payload."""
        value = _wire({"t": "Plain", "c": [{"t": "Space", "c": ["x"]}]})
        self._assert_error(value, DecodeErrorKind.ARITY_MISMATCH)

    def test_string_where_integer_expected(self) -> None:
        """Test a header level given as a string."""
        value = _wire({"t": "Header", "c": ["1", ["", [], []], []]})
        self._assert_error(value, DecodeErrorKind.TYPE_MISMATCH, "/1/0/c/0")

    @pytest.mark.parametrize("level", [0, -3, 1.5, True])
    def test_unrepresentable_header_level(self, level) -> None:
        """Test header levels that are not positive integers."""
        value = _wire({"t": "Header", "c": [level, ["", [], []], []]})
        self._assert_error(value, DecodeErrorKind.TYPE_MISMATCH)

    def test_negative_list_start(self) -> None:
        """Test an ordered list start number below zero."""
        value = _wire({"t": "OrderedList", "c": [[-1, "Decimal", "Period"], []]})
        self._assert_error(value, DecodeErrorKind.TYPE_MISMATCH, "/1/0/c/0/0")

    def test_table_column_mismatch(self) -> None:
        """Test a table whose alignments, widths and headers disagree in length."""
        table = {
            "t": "Table",
            "c": [[], ["AlignLeft", "AlignRight"], [0.0], [[], []], []],
        }
        error = self._assert_error(_wire(table), DecodeErrorKind.ARITY_MISMATCH, "/1/0/c")
        assert "must agree" in str(error)

    def test_payload_type_mismatch(self) -> None:
        """Test a Str payload that is not a string."""
        self._assert_error(_wire({"t": "Plain", "c": [{"t": "Str", "c": 3}]}), DecodeErrorKind.TYPE_MISMATCH)

    def test_missing_unmeta(self) -> None:
        """Test a metadata object without its wrapper key."""
        self._assert_error([{}, []], DecodeErrorKind.MISSING_TAG, "/0")

    def test_error_path_for_nested_node(self) -> None:
        """Test that the error location points at the offending node."""
        value = _wire({"t": "BlockQuote", "c": [{"t": "Para", "c": [_str("ok"), {"t": "Bogus", "c": []}]}]})
        error = self._assert_error(value, DecodeErrorKind.UNKNOWN_TAG, "/1/0/c/0/c/1/t")
        assert "(at /1/0/c/0/c/1/t)" in str(error)

    def test_citation_mode_key_is_enforced(self) -> None:
        """Test that a citation using the other mode key spelling is rejected."""
        value = {
            "citationId": "x",
            "citationPrefix": [],
            "citationSuffix": [],
            "citationmode": "NormalCitation",
            "citationNoteNum": 0,
            "citationHash": 0,
        }
        with pytest.raises(DecodeError) as exc_info:
            decode_citation(value)
        assert exc_info.value.kind is DecodeErrorKind.MISSING_TAG
        assert decode_citation(value, CodecOptions(citation_mode_key="citationmode")).id == "x"

    def test_invalid_json_text(self) -> None:
        """Test text that is not JSON at all."""
        with pytest.raises(DecodeError) as exc_info:
            decode_json("[{")
        assert exc_info.value.kind is DecodeErrorKind.TYPE_MISMATCH
        assert isinstance(exc_info.value.original_error, json.JSONDecodeError)

    def test_invalid_utf8_bytes(self) -> None:
        """Test that undecodable bytes are reported as malformed input."""
        with pytest.raises(DecodeError) as exc_info:
            decode_json(b'[{"unMeta": {}}, [{"t": "Plain", "c": [{"t": "Str", "c": "\xff"}]}]]')
        assert exc_info.value.kind is DecodeErrorKind.TYPE_MISMATCH
        assert isinstance(exc_info.value.original_error, UnicodeDecodeError)


@pytest.mark.unit
class TestNestingDepth:
    """Test the limit on block, inline and metadata nesting."""

    def test_deepest_accepted_document(self) -> None:
        """Test that a Para, nested Emph and a Str up to the limit decode."""
        doc = decode_json(nested_emph_wire(MAX_NESTING_DEPTH - 2))

        node = doc.blocks[0].content[0]
        for _ in range(MAX_NESTING_DEPTH - 2):
            assert isinstance(node, Emph)
            node = node.content[0]
        assert node == Str("deep")

    def test_one_level_too_deep(self) -> None:
        """Test that one more level is rejected."""
        with pytest.raises(DecodeError) as exc_info:
            decode_json(nested_emph_wire(MAX_NESTING_DEPTH - 1))
        assert exc_info.value.kind is DecodeErrorKind.TYPE_MISMATCH
        assert "nesting" in str(exc_info.value)

    def test_far_too_deep(self) -> None:
        """Test that deep input accepted by the JSON parser is reported, not a crash."""
        text = nested_emph_wire(300)
        json.loads(text)

        with pytest.raises(DecodeError) as exc_info:
            decode_json(text)
        assert exc_info.value.kind is DecodeErrorKind.TYPE_MISMATCH

    def test_nested_metadata(self) -> None:
        """Test that metadata nesting counts toward the limit."""
        value = {"t": "MetaString", "c": "x"}
        for _ in range(MAX_NESTING_DEPTH):
            value = {"t": "MetaList", "c": [value]}

        with pytest.raises(DecodeError):
            decode([{"unMeta": {"k": value}}, []])

    def test_decoder_reusable_after_error(self) -> None:
        """Test that a rejected document does not affect the next decode."""
        decoder = WireDecoder()
        with pytest.raises(DecodeError):
            decoder.decode_document(json.loads(nested_emph_wire(MAX_NESTING_DEPTH)))

        doc = decoder.decode_document(json.loads(nested_emph_wire(MAX_NESTING_DEPTH - 2)))
        assert isinstance(doc.blocks[0].content[0], Emph)
