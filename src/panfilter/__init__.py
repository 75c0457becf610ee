"""panfilter - Typed document trees and filters for document converter JSON.

Document converters such as pandoc can pipe a document through external
filter programs as JSON. panfilter decodes that JSON into an immutable,
typed tree, lets a filter rewrite every node of one kind with a plain
function, and encodes the result back in the converter's format.

Key Features
------------
- Immutable AST covering metadata, blocks, inlines and citations
- Lossless wire codec with precise, located decode errors
- Type-directed bottom-up walks over whole documents
- A filter driver (``panfilter``) with config-file and environment defaults

Requirements
------------
- Python 3.10+

Examples
--------
Write a filter script:

    >>> from panfilter import Emph, Header, Para, run_filter
    >>> def behead(block):
    ...     if isinstance(block, Header) and block.level >= 2:
    ...         return Para([Emph(block.content)])
    ...     return block
    >>> if __name__ == "__main__":
    ...     run_filter("block", behead)

Rewrite a decoded document directly:

    >>> from panfilter import NodeKind, Str, decode_json, encode_json, walk
    >>> doc = decode_json(wire_text)
    >>> doc = walk(doc, NodeKind.INLINE, lambda n: Str(n.text.upper()) if isinstance(n, Str) else n)
    >>> wire_text = encode_json(doc)

"""

__version__ = "1.0.0"

from panfilter.ast import *  # noqa: F401,F403
from panfilter.ast import __all__ as _ast_all
from panfilter.exceptions import DecodeError, DecodeErrorKind, PanfilterError, TransformError, ValidationError
from panfilter.filter import apply_filter, apply_filters, run_filter, transform_document
from panfilter.filters import BUILTIN_FILTERS, FilterSpec, behead, filter_kind, get_filter, to_upper
from panfilter.options import CodecOptions

__all__ = [
    "__version__",
    *_ast_all,
    # Filter API
    "apply_filter",
    "apply_filters",
    "run_filter",
    "transform_document",
    # Built-in filters
    "BUILTIN_FILTERS",
    "FilterSpec",
    "behead",
    "filter_kind",
    "get_filter",
    "to_upper",
    # Options
    "CodecOptions",
    # Exceptions
    "PanfilterError",
    "DecodeError",
    "DecodeErrorKind",
    "TransformError",
    "ValidationError",
]
