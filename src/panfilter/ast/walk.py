#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/panfilter/ast/walk.py
"""Type-directed rewriting of document trees.

A walk threads a transform that operates on exactly one kind of node
(Document, Meta, MetaValue, Block, Inline or Citation) through a whole
tree. Traversal is bottom-up and total: the children of every node are
walked first, then the rebuilt node is handed to the transform if it is of
the target kind. Composite nodes are transformed too, so an Inline walk sees
``Emph`` after its inner ``Str`` nodes have been rewritten.

Examples
--------
Uppercase all text, including text nested in emphasis:

    >>> from panfilter.ast.nodes import Emph, Str
    >>> from panfilter.ast.walk import NodeKind, walk
    >>> def shout(node):
    ...     return Str(node.text.upper()) if isinstance(node, Str) else node
    >>> walk(Emph([Str("hi")]), NodeKind.INLINE, shout)
    Emph(content=(Str(text='HI'),))

Demote deep headers to emphasized paragraphs:

    >>> from panfilter.ast.nodes import Header, Para
    >>> def behead(block):
    ...     if isinstance(block, Header) and block.level >= 2:
    ...         return Para([Emph(block.content)])
    ...     return block
    >>> new_doc = walk(doc, NodeKind.BLOCK, behead)

"""

from __future__ import annotations

import logging
from dataclasses import replace
from enum import Enum
from typing import Any, Callable, Mapping, Sequence, TypeVar

from panfilter.ast.nodes import (
    Block,
    BlockQuote,
    BulletList,
    Citation,
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
    Math,
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
    Plain,
    Quoted,
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
)
from panfilter.ast.visitors import NodeVisitor
from panfilter.exceptions import TransformError

logger = logging.getLogger(__name__)

N = TypeVar("N", bound=Node)
Transform = Callable[[Any], Any]


class NodeKind(str, Enum):
    """The node kinds a walk can target."""

    DOCUMENT = "document"
    META = "meta"
    META_VALUE = "meta_value"
    BLOCK = "block"
    INLINE = "inline"
    CITATION = "citation"

    @property
    def node_type(self) -> type[Node]:
        """Base class every node of this kind is an instance of."""
        return _KIND_TYPES[self]

    @classmethod
    def resolve(cls, kind: NodeKind | str | type) -> NodeKind:
        """Resolve a kind given as a NodeKind, its value, or a node base class.

        Parameters
        ----------
        kind : NodeKind, str or type
            ``NodeKind.INLINE``, ``"inline"`` and ``Inline`` all name the
            same kind

        Returns
        -------
        NodeKind
            The resolved kind

        Raises
        ------
        ValueError
            If ``kind`` does not name a walkable node kind

        """
        if isinstance(kind, cls):
            return kind
        if isinstance(kind, str):
            normalized = kind.strip().lower().replace("-", "_")
            try:
                return cls(normalized)
            except ValueError:
                raise ValueError(
                    f"Unknown node kind {kind!r}; expected one of {', '.join(k.value for k in cls)}"
                ) from None
        if isinstance(kind, type):
            for member, node_type in _KIND_TYPES.items():
                if kind is node_type:
                    return member
        raise ValueError(f"Cannot walk over {kind!r}; expected a NodeKind, its name, or a node base class")


_KIND_TYPES: dict[NodeKind, type[Node]] = {
    NodeKind.DOCUMENT: Document,
    NodeKind.META: Meta,
    NodeKind.META_VALUE: MetaValue,
    NodeKind.BLOCK: Block,
    NodeKind.INLINE: Inline,
    NodeKind.CITATION: Citation,
}


def _transform_name(transform: Transform) -> str:
    return getattr(transform, "__qualname__", None) or type(transform).__name__


class Walker(NodeVisitor):
    """Rebuild a tree bottom-up, passing nodes of one kind through a transform.

    Each ``visit_*`` method rebuilds its node from walked children and then
    calls ``_finish``, which applies the transform when the node is of the
    target kind. Subclasses fix the target kind and declare which child
    positions can contain it; positions that cannot are returned as-is.

    Parameters
    ----------
    transform : callable
        Function taking one node of the target kind and returning a node of
        the same kind. Exceptions it raises propagate unchanged.

    """

    kind: NodeKind
    descend_into_blocks: bool = True
    descend_into_inlines: bool = True
    descend_into_meta: bool = True

    def __init__(self, transform: Transform):
        """Initialize the walker with the transform to apply."""
        self.transform = transform
        self.transform_name = _transform_name(transform)

    def walk(self, node: N) -> N:
        """Walk a single node and return its rewritten replacement."""
        return node.accept(self)

    def _finish(self, node: Node) -> Any:
        if not isinstance(node, self.kind.node_type):
            return node
        return _check_result(self.transform(node), self.kind, self.transform)

    # Child position helpers

    def _blocks(self, blocks: Sequence[Block]) -> tuple[Block, ...]:
        if not self.descend_into_blocks:
            return tuple(blocks)
        return tuple(self.walk(block) for block in blocks)

    def _block_lists(self, items: Sequence[Sequence[Block]]) -> tuple[tuple[Block, ...], ...]:
        return tuple(self._blocks(item) for item in items)

    def _inlines(self, inlines: Sequence[Inline]) -> tuple[Inline, ...]:
        if not self.descend_into_inlines:
            return tuple(inlines)
        return tuple(self.walk(inline) for inline in inlines)

    def _entries(self, entries: Mapping[str, MetaValue]) -> dict[str, MetaValue]:
        return {key: self.walk(value) for key, value in entries.items()}

    # Containers

    def visit_document(self, node: Document) -> Any:
        meta = self.walk(node.meta) if self.descend_into_meta else node.meta
        return self._finish(Document(meta=meta, blocks=self._blocks(node.blocks)))

    def visit_meta(self, node: Meta) -> Any:
        return self._finish(Meta(self._entries(node.entries)))

    def visit_citation(self, node: Citation) -> Any:
        return self._finish(
            replace(node, prefix=self._inlines(node.prefix), suffix=self._inlines(node.suffix))
        )

    # Metadata values

    def visit_meta_map(self, node: MetaMap) -> Any:
        return self._finish(MetaMap(self._entries(node.entries)))

    def visit_meta_list(self, node: MetaList) -> Any:
        return self._finish(MetaList(tuple(self.walk(item) for item in node.items)))

    def visit_meta_bool(self, node: MetaBool) -> Any:
        return self._finish(node)

    def visit_meta_string(self, node: MetaString) -> Any:
        return self._finish(node)

    def visit_meta_inlines(self, node: MetaInlines) -> Any:
        return self._finish(MetaInlines(self._inlines(node.content)))

    def visit_meta_blocks(self, node: MetaBlocks) -> Any:
        return self._finish(MetaBlocks(self._blocks(node.blocks)))

    # Blocks

    def visit_plain(self, node: Plain) -> Any:
        return self._finish(Plain(self._inlines(node.content)))

    def visit_para(self, node: Para) -> Any:
        return self._finish(Para(self._inlines(node.content)))

    def visit_code_block(self, node: CodeBlock) -> Any:
        return self._finish(node)

    def visit_raw_block(self, node: RawBlock) -> Any:
        return self._finish(node)

    def visit_block_quote(self, node: BlockQuote) -> Any:
        return self._finish(BlockQuote(self._blocks(node.blocks)))

    def visit_ordered_list(self, node: OrderedList) -> Any:
        return self._finish(OrderedList(node.attributes, self._block_lists(node.items)))

    def visit_bullet_list(self, node: BulletList) -> Any:
        return self._finish(BulletList(self._block_lists(node.items)))

    def visit_definition_list(self, node: DefinitionList) -> Any:
        items = tuple((self._inlines(term), self._block_lists(definitions)) for term, definitions in node.items)
        return self._finish(DefinitionList(items))

    def visit_header(self, node: Header) -> Any:
        return self._finish(Header(node.level, node.attr, self._inlines(node.content)))

    def visit_horizontal_rule(self, node: HorizontalRule) -> Any:
        return self._finish(node)

    def visit_table(self, node: Table) -> Any:
        return self._finish(
            Table(
                caption=self._inlines(node.caption),
                alignments=node.alignments,
                widths=node.widths,
                headers=self._block_lists(node.headers),
                rows=tuple(self._block_lists(row) for row in node.rows),
            )
        )

    def visit_div(self, node: Div) -> Any:
        return self._finish(Div(node.attr, self._blocks(node.blocks)))

    def visit_null(self, node: Null) -> Any:
        return self._finish(node)

    # Inlines

    def visit_str(self, node: Str) -> Any:
        return self._finish(node)

    def visit_emph(self, node: Emph) -> Any:
        return self._finish(Emph(self._inlines(node.content)))

    def visit_strong(self, node: Strong) -> Any:
        return self._finish(Strong(self._inlines(node.content)))

    def visit_strikeout(self, node: Strikeout) -> Any:
        return self._finish(Strikeout(self._inlines(node.content)))

    def visit_superscript(self, node: Superscript) -> Any:
        return self._finish(Superscript(self._inlines(node.content)))

    def visit_subscript(self, node: Subscript) -> Any:
        return self._finish(Subscript(self._inlines(node.content)))

    def visit_small_caps(self, node: SmallCaps) -> Any:
        return self._finish(SmallCaps(self._inlines(node.content)))

    def visit_quoted(self, node: Quoted) -> Any:
        return self._finish(Quoted(node.quote_type, self._inlines(node.content)))

    def visit_cite(self, node: Cite) -> Any:
        citations = tuple(self.walk(citation) for citation in node.citations)
        return self._finish(Cite(citations, self._inlines(node.content)))

    def visit_code(self, node: Code) -> Any:
        return self._finish(node)

    def visit_space(self, node: Space) -> Any:
        return self._finish(node)

    def visit_soft_break(self, node: SoftBreak) -> Any:
        return self._finish(node)

    def visit_line_break(self, node: LineBreak) -> Any:
        return self._finish(node)

    def visit_math(self, node: Math) -> Any:
        return self._finish(node)

    def visit_raw_inline(self, node: RawInline) -> Any:
        return self._finish(node)

    def visit_link(self, node: Link) -> Any:
        return self._finish(Link(node.attr, self._inlines(node.content), node.target))

    def visit_image(self, node: Image) -> Any:
        return self._finish(Image(node.attr, self._inlines(node.content), node.target))

    def visit_span(self, node: Span) -> Any:
        return self._finish(Span(node.attr, self._inlines(node.content)))


class BlockWalker(Walker):
    """Apply a Block transform everywhere blocks occur.

    Inline content never contains blocks, so inline sequences are not
    entered.
    """

    kind = NodeKind.BLOCK
    descend_into_inlines = False


class InlineWalker(Walker):
    """Apply an Inline transform everywhere inlines occur.

    This includes metadata values holding inlines or blocks, and the
    prefixes and suffixes of citations.
    """

    kind = NodeKind.INLINE


class CitationWalker(Walker):
    """Apply a Citation transform to every citation of every Cite inline."""

    kind = NodeKind.CITATION


class MetaValueWalker(Walker):
    """Apply a MetaValue transform through nested MetaMap and MetaList values.

    Metadata values never occur inside blocks or inlines, so the document
    body and the content of MetaInlines/MetaBlocks are left untouched.
    """

    kind = NodeKind.META_VALUE
    descend_into_blocks = False
    descend_into_inlines = False


_WALKERS: dict[NodeKind, type[Walker]] = {
    NodeKind.BLOCK: BlockWalker,
    NodeKind.INLINE: InlineWalker,
    NodeKind.CITATION: CitationWalker,
    NodeKind.META_VALUE: MetaValueWalker,
}


def _check_result(result: Any, kind: NodeKind, transform: Transform) -> Any:
    if not isinstance(result, kind.node_type):
        name = _transform_name(transform)
        raise TransformError(
            f"Transform {name} must return a {kind.node_type.__name__} node, got {type(result).__name__}",
            transform_name=name,
        )
    return result


def _walk_document_kind(tree: Any, transform: Transform) -> Any:
    if isinstance(tree, Document):
        return _check_result(transform(tree), NodeKind.DOCUMENT, transform)
    return tree


def _walk_meta_kind(tree: Any, transform: Transform) -> Any:
    if isinstance(tree, Document):
        return Document(meta=_check_result(transform(tree.meta), NodeKind.META, transform), blocks=tree.blocks)
    if isinstance(tree, Meta):
        return _check_result(transform(tree), NodeKind.META, transform)
    return tree


def walk(tree: Any, kind: NodeKind | str | type, transform: Transform) -> Any:
    """Apply ``transform`` to every node of ``kind`` in ``tree``.

    Parameters
    ----------
    tree : Node or sequence of Node
        The tree to rewrite. A list or tuple of nodes is walked element-wise
        and returned as a tuple.
    kind : NodeKind, str or type
        Target kind: ``NodeKind.BLOCK``, ``"block"`` or ``Block`` (and so on
        for document, meta, meta_value, inline and citation)
    transform : callable
        Pure function from one node of the target kind to a node of the same
        kind. It is applied bottom-up to every node of that kind, composite
        nodes included. For the document and meta kinds it is applied once,
        to the top-level node, without recursion.

    Returns
    -------
    Node or tuple of Node
        The rewritten tree. The input is not modified.

    Raises
    ------
    TransformError
        If the transform returns something other than a node of the target
        kind, or the tree is nested too deeply to walk. Decoded documents are
        limited to ``MAX_NESTING_DEPTH`` levels and always walk.
    ValueError
        If ``kind`` does not name a walkable node kind
    TypeError
        If ``tree`` is neither a node nor a sequence of nodes

    Notes
    -----
    Any exception raised by ``transform`` aborts the walk and propagates to
    the caller unchanged, except RecursionError, which is reported as
    TransformError. Because trees are immutable and rebuilt rather
    than modified, no partially rewritten tree is ever visible.

    """
    target = NodeKind.resolve(kind)

    if isinstance(tree, (list, tuple)):
        return tuple(walk(item, target, transform) for item in tree)
    if not isinstance(tree, Node):
        raise TypeError(f"Cannot walk {type(tree).__name__}; expected a node or a sequence of nodes")

    logger.debug("Walking %s for %s nodes with %s", type(tree).__name__, target.value, _transform_name(transform))

    if target is NodeKind.DOCUMENT:
        return _walk_document_kind(tree, transform)
    if target is NodeKind.META:
        return _walk_meta_kind(tree, transform)
    try:
        return _WALKERS[target](transform).walk(tree)
    except RecursionError as e:
        raise TransformError(
            f"Tree is nested too deeply to walk with {_transform_name(transform)}",
            transform_name=_transform_name(transform),
            original_error=e,
        ) from e
