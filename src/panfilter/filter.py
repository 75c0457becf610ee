#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/panfilter/filter.py
"""Filter API: decode wire text, walk it with a transform, encode the result.

A document converter runs an external filter by piping a document to it as
JSON and reading the rewritten document back. The helpers here implement
that round trip for one transform (``apply_filter``), for a sequence of
transforms over the same document (``apply_filters``), and over text
streams (``run_filter``).

Failures never produce output: the result is encoded only after every walk
has succeeded.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Any, Callable, Iterable

from panfilter.ast.nodes import Document
from panfilter.ast.serialization import decode_json, encode_json
from panfilter.ast.walk import NodeKind, walk
from panfilter.options import CodecOptions

logger = logging.getLogger(__name__)

Transform = Callable[[Any], Any]
FilterStep = tuple[NodeKind | str | type, Transform]


def apply_filter(
    wire_text: str | bytes,
    kind: NodeKind | str | type,
    transform: Transform,
    options: CodecOptions | None = None,
) -> str:
    """Run one transform over a wire-format document.

    Parameters
    ----------
    wire_text : str or bytes
        The document as JSON text
    kind : NodeKind, str or type
        The kind of node ``transform`` operates on
    transform : callable
        Function from one node of ``kind`` to a node of the same kind
    options : CodecOptions or None, default = None
        Codec options used for both decoding and encoding

    Returns
    -------
    str
        The rewritten document as JSON text

    Raises
    ------
    DecodeError
        If ``wire_text`` is not a well-formed document
    TransformError
        If the transform returns a node of the wrong kind

    Any other exception raised by ``transform`` propagates unchanged.

    Examples
    --------
        >>> from panfilter.filters import to_upper
        >>> apply_filter('[{"unMeta":{}},[{"t":"Plain","c":[{"t":"Str","c":"hi"}]}]]', "inline", to_upper)
        '[{"unMeta": {}}, [{"t": "Plain", "c": [{"t": "Str", "c": "HI"}]}]]'

    """
    return apply_filters(wire_text, [(kind, transform)], options)


def apply_filters(
    wire_text: str | bytes,
    steps: Iterable[FilterStep],
    options: CodecOptions | None = None,
) -> str:
    """Run several walk passes over one decoded document.

    Each step is a ``(kind, transform)`` pair; passes run in order and each
    sees the output of the previous one. The document is decoded once and
    encoded once.
    """
    options = options or CodecOptions()
    document = decode_json(wire_text, options)
    document = transform_document(document, steps)
    return encode_json(document, options)


def transform_document(document: Document, steps: Iterable[FilterStep]) -> Document:
    """Apply ``(kind, transform)`` walk passes to an already decoded document."""
    for index, (kind, transform) in enumerate(steps):
        target = NodeKind.resolve(kind)
        logger.debug("Filter pass %d: %s transform over %s nodes", index + 1, _name(transform), target.value)
        document = walk(document, target, transform)
    return document


def run_filter(
    kind: NodeKind | str | type,
    transform: Transform,
    stdin: IO[str] | None = None,
    stdout: IO[str] | None = None,
    options: CodecOptions | None = None,
) -> None:
    """Read a document from ``stdin``, filter it, and write it to ``stdout``.

    This is the entry point for a filter script invoked by a document
    converter::

        if __name__ == "__main__":
            run_filter("block", behead)

    The whole input is read before anything is written, so a failing
    transform leaves ``stdout`` untouched.

    Parameters
    ----------
    kind : NodeKind, str or type
        The kind of node ``transform`` operates on
    transform : callable
        Function from one node of ``kind`` to a node of the same kind
    stdin : text stream, optional
        Input stream (default: ``sys.stdin``)
    stdout : text stream, optional
        Output stream (default: ``sys.stdout``)
    options : CodecOptions or None, default = None
        Codec options

    """
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout

    wire_text = stdin.read()
    logger.debug("Read %d characters of input", len(wire_text))
    result = apply_filter(wire_text, kind, transform, options)
    stdout.write(result)
    stdout.flush()


def _name(transform: Transform) -> str:
    return getattr(transform, "__qualname__", None) or type(transform).__name__
