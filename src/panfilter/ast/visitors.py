#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/panfilter/ast/visitors.py
"""Visitor pattern implementation for AST traversal.

Every node class dispatches ``accept`` to exactly one ``visit_*`` method
here. All methods are abstract, so adding a node variant forces every
concrete visitor to handle it.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from panfilter.ast.nodes import (
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


class NodeVisitor(ABC):
    """Abstract base class for AST node visitors.

    Subclasses implement one ``visit_*`` method per node class. The return
    value is up to the visitor; rewriting visitors return new nodes.

    Examples
    --------
    Visitor that counts Str nodes, delegating everything else to a
    rebuilding base:

        >>> from panfilter.ast.walk import InlineWalker
        >>> class StrCounter(InlineWalker):
        ...     def __init__(self):
        ...         super().__init__(lambda node: node)
        ...         self.count = 0
        ...
        ...     def visit_str(self, node):
        ...         self.count += 1
        ...         return node
        >>> counter = StrCounter()
        >>> _ = counter.walk(document)

    """

    # Containers

    @abstractmethod
    def visit_document(self, node: Document) -> Any:
        """Visit a Document node.

        Parameters
        ----------
        node : Document
            The document node to visit

        Returns
        -------
        Any
            Result of processing this node

        """
        pass

    @abstractmethod
    def visit_meta(self, node: Meta) -> Any:
        """Visit the document's Meta mapping."""
        pass

    @abstractmethod
    def visit_citation(self, node: Citation) -> Any:
        """Visit a Citation inside a Cite inline."""
        pass

    # Metadata values

    @abstractmethod
    def visit_meta_map(self, node: MetaMap) -> Any:
        pass

    @abstractmethod
    def visit_meta_list(self, node: MetaList) -> Any:
        pass

    @abstractmethod
    def visit_meta_bool(self, node: MetaBool) -> Any:
        pass

    @abstractmethod
    def visit_meta_string(self, node: MetaString) -> Any:
        pass

    @abstractmethod
    def visit_meta_inlines(self, node: MetaInlines) -> Any:
        pass

    @abstractmethod
    def visit_meta_blocks(self, node: MetaBlocks) -> Any:
        pass

    # Blocks

    @abstractmethod
    def visit_plain(self, node: Plain) -> Any:
        """Visit a Plain block."""
        pass

    @abstractmethod
    def visit_para(self, node: Para) -> Any:
        """Visit a Para block.

        Parameters
        ----------
        node : Para
            The paragraph node to visit

        Returns
        -------
        Any
            Result of processing this node

        """
        pass

    @abstractmethod
    def visit_code_block(self, node: CodeBlock) -> Any:
        """Visit a CodeBlock."""
        pass

    @abstractmethod
    def visit_raw_block(self, node: RawBlock) -> Any:
        """Visit a RawBlock."""
        pass

    @abstractmethod
    def visit_block_quote(self, node: BlockQuote) -> Any:
        """Visit a BlockQuote."""
        pass

    @abstractmethod
    def visit_ordered_list(self, node: OrderedList) -> Any:
        """Visit an OrderedList."""
        pass

    @abstractmethod
    def visit_bullet_list(self, node: BulletList) -> Any:
        """Visit a BulletList."""
        pass

    @abstractmethod
    def visit_definition_list(self, node: DefinitionList) -> Any:
        """Visit a DefinitionList."""
        pass

    @abstractmethod
    def visit_header(self, node: Header) -> Any:
        """Visit a Header block.

        Parameters
        ----------
        node : Header
            The header node to visit

        Returns
        -------
        Any
            Result of processing this node

        """
        pass

    @abstractmethod
    def visit_horizontal_rule(self, node: HorizontalRule) -> Any:
        pass

    @abstractmethod
    def visit_table(self, node: Table) -> Any:
        """Visit a Table block."""
        pass

    @abstractmethod
    def visit_div(self, node: Div) -> Any:
        """Visit a Div block."""
        pass

    @abstractmethod
    def visit_null(self, node: Null) -> Any:
        pass

    # Inlines

    @abstractmethod
    def visit_str(self, node: Str) -> Any:
        """Visit a Str inline.

        Parameters
        ----------
        node : Str
            The text node to visit

        Returns
        -------
        Any
            Result of processing this node

        """
        pass

    @abstractmethod
    def visit_emph(self, node: Emph) -> Any:
        pass

    @abstractmethod
    def visit_strong(self, node: Strong) -> Any:
        pass

    @abstractmethod
    def visit_strikeout(self, node: Strikeout) -> Any:
        pass

    @abstractmethod
    def visit_superscript(self, node: Superscript) -> Any:
        pass

    @abstractmethod
    def visit_subscript(self, node: Subscript) -> Any:
        pass

    @abstractmethod
    def visit_small_caps(self, node: SmallCaps) -> Any:
        pass

    @abstractmethod
    def visit_quoted(self, node: Quoted) -> Any:
        """Visit a Quoted inline."""
        pass

    @abstractmethod
    def visit_cite(self, node: Cite) -> Any:
        """Visit a Cite inline."""
        pass

    @abstractmethod
    def visit_code(self, node: Code) -> Any:
        """Visit an inline Code span."""
        pass

    @abstractmethod
    def visit_space(self, node: Space) -> Any:
        pass

    @abstractmethod
    def visit_soft_break(self, node: SoftBreak) -> Any:
        pass

    @abstractmethod
    def visit_line_break(self, node: LineBreak) -> Any:
        pass

    @abstractmethod
    def visit_math(self, node: Math) -> Any:
        """Visit a Math inline."""
        pass

    @abstractmethod
    def visit_raw_inline(self, node: RawInline) -> Any:
        """Visit a RawInline."""
        pass

    @abstractmethod
    def visit_link(self, node: Link) -> Any:
        """Visit a Link inline."""
        pass

    @abstractmethod
    def visit_image(self, node: Image) -> Any:
        """Visit an Image inline."""
        pass

    @abstractmethod
    def visit_span(self, node: Span) -> Any:
        """Visit a Span inline."""
        pass
