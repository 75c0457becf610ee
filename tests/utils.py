"""Test utilities for the panfilter test suite.

Provides a sample document covering every node variant and Hypothesis
strategies for generating well-formed trees.
"""

from hypothesis import strategies as st

from panfilter.ast import (
    Alignment,
    Attr,
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
from panfilter.constants import MAX_UINT


def nested_emph_wire(levels: int) -> str:
    """Return wire text for a Para holding ``levels`` nested Emph around one Str."""
    inner = '{"t": "Emph", "c": [' * levels + '{"t": "Str", "c": "deep"}' + "]}" * levels
    return '[{"unMeta": {}}, [{"t": "Para", "c": [' + inner + "]}]]"


def nested_emph(levels: int) -> Inline:
    """Build ``levels`` nested Emph nodes around one Str without recursion."""
    node: Inline = Str("deep")
    for _ in range(levels):
        node = Emph([node])
    return node


def make_sample_document() -> Document:
    """Build a document that contains every node variant at least once."""
    citation = Citation(
        id="doe99",
        prefix=[Str("see")],
        suffix=[Str("p."), Space(), Str("4")],
        mode=CitationMode.AUTHOR_IN_TEXT,
        note_num=1,
        hash=7,
    )
    meta = Meta(
        {
            "title": MetaInlines([Str("A"), Space(), Emph([Str("title")])]),
            "draft": MetaBool(True),
            "version": MetaString("2"),
            "abstract": MetaBlocks([Para([Str("Summary")])]),
            "authors": MetaList([MetaMap({"name": MetaString("Doe"), "email": MetaString("doe@example.com")})]),
        }
    )
    blocks = [
        Header(1, Attr("intro", ["unnumbered"], [("lang", "en")]), [Str("Intro")]),
        Para(
            [
                Str("Hello"),
                Space(),
                Strong([Str("bold")]),
                SoftBreak(),
                Strikeout([Str("gone")]),
                Superscript([Str("2")]),
                Subscript([Str("i")]),
                SmallCaps([Str("caps")]),
                LineBreak(),
                Quoted(QuoteType.DOUBLE, [Str("quoted")]),
                Quoted(QuoteType.SINGLE, [Str("single")]),
                Cite([citation], [Str("@doe99")]),
                Code(Attr(classes=["python"]), "x = 1"),
                Math(MathType.INLINE, "e^x"),
                Math(MathType.DISPLAY, "\\int f"),
                RawInline("html", "<br>"),
                Link(Attr(), [Str("link")], Target("https://example.com", "Example")),
                Image(Attr("fig"), [Str("alt")], Target("img.png")),
                Span(Attr(classes=["note"]), [Str("span")]),
            ]
        ),
        Plain([Str("plain")]),
        CodeBlock(Attr(classes=["sh"]), "echo hi"),
        RawBlock("latex", "\\newpage"),
        BlockQuote([Para([Str("quote")])]),
        OrderedList(
            ListAttributes(3, ListNumberStyle.LOWER_ROMAN, ListNumberDelim.ONE_PAREN),
            [[Plain([Str("one")])], [Plain([Str("two")]), BulletList([[Plain([Str("nested")])]])]],
        ),
        BulletList([[Para([Str("item")])]]),
        DefinitionList([([Str("term")], [[Para([Str("definition")])]])]),
        Header(2, Attr("details"), [Str("Details")]),
        HorizontalRule(),
        Table(
            caption=[Str("Caption")],
            alignments=[Alignment.LEFT, Alignment.DEFAULT],
            widths=[0.5, 0.0],
            headers=[[Plain([Str("Name")])], [Plain([Str("Value")])]],
            rows=[[[Plain([Str("a")])], [Plain([Str("1")])]], [[], [Plain([Str("2")])]]],
        ),
        Div(Attr("box", ["warning"]), [Para([Str("inside")]), Header(3, Attr(), [Str("Deep")])]),
        Null(),
    ]
    return Document(meta=meta, blocks=blocks)


# Hypothesis strategies

texts = st.text(max_size=8)
uints = st.integers(min_value=0, max_value=MAX_UINT)
attrs = st.builds(
    Attr,
    identifier=texts,
    classes=st.lists(texts, max_size=2),
    attributes=st.lists(st.tuples(texts, texts), max_size=2),
)
targets = st.builds(Target, url=texts, title=texts)

inline_leaves = st.one_of(
    st.builds(Str, texts),
    st.builds(Code, attrs, texts),
    st.builds(Space),
    st.builds(SoftBreak),
    st.builds(LineBreak),
    st.builds(Math, st.sampled_from(MathType), texts),
    st.builds(RawInline, texts, texts),
)


def _extend_inlines(children):
    content = st.lists(children, max_size=3)
    citations = st.builds(
        Citation,
        id=texts,
        prefix=content,
        suffix=content,
        mode=st.sampled_from(CitationMode),
        note_num=uints,
        hash=uints,
    )
    return st.one_of(
        st.builds(Emph, content),
        st.builds(Strong, content),
        st.builds(Strikeout, content),
        st.builds(Superscript, content),
        st.builds(Subscript, content),
        st.builds(SmallCaps, content),
        st.builds(Quoted, st.sampled_from(QuoteType), content),
        st.builds(Cite, st.lists(citations, min_size=1, max_size=2), content),
        st.builds(Link, attrs, content, targets),
        st.builds(Image, attrs, content, targets),
        st.builds(Span, attrs, content),
    )


inlines = st.recursive(inline_leaves, _extend_inlines, max_leaves=8)
inline_seqs = st.lists(inlines, max_size=3)

list_attributes = st.builds(
    ListAttributes,
    start=uints,
    style=st.sampled_from(ListNumberStyle),
    delim=st.sampled_from(ListNumberDelim),
)

block_leaves = st.one_of(
    st.builds(Plain, inline_seqs),
    st.builds(Para, inline_seqs),
    st.builds(CodeBlock, attrs, texts),
    st.builds(RawBlock, texts, texts),
    st.builds(Header, st.integers(min_value=1, max_value=6), attrs, inline_seqs),
    st.builds(HorizontalRule),
    st.builds(Null),
)


@st.composite
def _tables(draw, cells):
    columns = draw(st.integers(min_value=0, max_value=3))
    return Table(
        caption=draw(inline_seqs),
        alignments=draw(st.lists(st.sampled_from(Alignment), min_size=columns, max_size=columns)),
        widths=draw(st.lists(st.floats(min_value=0.0, max_value=1.0), min_size=columns, max_size=columns)),
        headers=draw(st.lists(cells, min_size=columns, max_size=columns)),
        rows=draw(st.lists(st.lists(cells, min_size=columns, max_size=columns), max_size=2)),
    )


def _extend_blocks(children):
    content = st.lists(children, max_size=2)
    items = st.lists(content, max_size=2)
    return st.one_of(
        st.builds(BlockQuote, content),
        st.builds(OrderedList, list_attributes, items),
        st.builds(BulletList, items),
        st.builds(DefinitionList, st.lists(st.tuples(inline_seqs, items), max_size=2)),
        st.builds(Div, attrs, content),
        _tables(content),
    )


blocks = st.recursive(block_leaves, _extend_blocks, max_leaves=6)

meta_leaves = st.one_of(
    st.builds(MetaBool, st.booleans()),
    st.builds(MetaString, texts),
    st.builds(MetaInlines, inline_seqs),
    st.builds(MetaBlocks, st.lists(blocks, max_size=2)),
)
meta_values = st.recursive(
    meta_leaves,
    lambda children: st.one_of(
        st.builds(MetaMap, st.dictionaries(texts, children, max_size=2)),
        st.builds(MetaList, st.lists(children, max_size=2)),
    ),
    max_leaves=4,
)

documents = st.builds(
    Document,
    meta=st.builds(Meta, st.dictionaries(texts, meta_values, max_size=3)),
    blocks=st.lists(blocks, max_size=3),
)
