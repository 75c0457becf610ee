#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/panfilter/filters.py
"""Built-in filters and filter lookup.

A filter is a transform paired with the kind of node it operates on. The
driver looks filters up by name:

- a built-in name such as ``"upper"`` or ``"behead"``
- a filter registered by an installed package under the
  ``panfilter.filters`` entry point group
- a ``module:function`` reference to any importable function

Functions referenced directly carry their kind with the ``filter_kind``
decorator, or the caller supplies it explicitly.

Examples
--------
Write a filter module usable as ``panfilter mypkg.filters:drop_math``:

    >>> from panfilter.filters import filter_kind
    >>> from panfilter.ast import Math, Str
    >>> @filter_kind("inline")
    ... def drop_math(node):
    ...     return Str(node.text) if isinstance(node, Math) else node

"""

from __future__ import annotations

import importlib
import importlib.metadata
import logging
from dataclasses import dataclass
from typing import Any, Callable

from panfilter.ast.nodes import Block, Emph, Header, Inline, Para, Str
from panfilter.ast.walk import NodeKind
from panfilter.exceptions import ValidationError

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "panfilter.filters"

Transform = Callable[[Any], Any]


@dataclass(frozen=True)
class FilterSpec:
    """A named transform and the node kind it operates on."""

    name: str
    kind: NodeKind
    transform: Transform
    description: str = ""


def filter_kind(kind: NodeKind | str | type) -> Callable[[Transform], Transform]:
    """Mark a transform with the node kind it operates on.

    Parameters
    ----------
    kind : NodeKind, str or type
        The node kind, e.g. ``"block"`` or ``Inline``

    Returns
    -------
    callable
        Decorator storing the resolved kind on the function as
        ``panfilter_kind``

    """
    resolved = NodeKind.resolve(kind)

    def decorator(transform: Transform) -> Transform:
        transform.panfilter_kind = resolved  # type: ignore[attr-defined]
        return transform

    return decorator


@filter_kind(NodeKind.INLINE)
def to_upper(inline: Inline) -> Inline:
    """Uppercase the text of every Str inline."""
    if isinstance(inline, Str):
        return Str(inline.text.upper())
    return inline


@filter_kind(NodeKind.BLOCK)
def behead(block: Block) -> Block:
    """Turn headers of level 2 and deeper into emphasized paragraphs.

    ``Header(level, attr, inlines)`` with ``level >= 2`` becomes
    ``Para([Emph(inlines)])``; the header's attributes are dropped. Level 1
    headers and all other blocks are returned unchanged.
    """
    if isinstance(block, Header) and block.level >= 2:
        return Para([Emph(block.content)])
    return block


BUILTIN_FILTERS: dict[str, FilterSpec] = {
    "upper": FilterSpec("upper", NodeKind.INLINE, to_upper, "Uppercase all text"),
    "behead": FilterSpec("behead", NodeKind.BLOCK, behead, "Turn level 2+ headers into emphasized paragraphs"),
}


def discover_plugin_filters() -> dict[str, FilterSpec]:
    """Load filters registered under the ``panfilter.filters`` entry point group.

    Each entry point must load to a FilterSpec or to a function marked with
    ``filter_kind``. Entry points that fail to load are logged and skipped.
    """
    discovered: dict[str, FilterSpec] = {}
    for entry_point in importlib.metadata.entry_points(group=ENTRY_POINT_GROUP):
        try:
            loaded = entry_point.load()
        except Exception as e:
            logger.warning("Failed to load filter plugin %r: %s", entry_point.name, e)
            continue

        if isinstance(loaded, FilterSpec):
            discovered[entry_point.name] = loaded
        elif callable(loaded) and hasattr(loaded, "panfilter_kind"):
            discovered[entry_point.name] = FilterSpec(
                entry_point.name, loaded.panfilter_kind, loaded, (loaded.__doc__ or "").strip()
            )
        else:
            logger.warning("Filter plugin %r is neither a FilterSpec nor a kind-marked function", entry_point.name)
    logger.debug("Discovered %d filter plugins", len(discovered))
    return discovered


def list_filters() -> dict[str, FilterSpec]:
    """Return built-in and plugin filters by name; built-ins win on conflicts."""
    filters = discover_plugin_filters()
    filters.update(BUILTIN_FILTERS)
    return filters


def get_filter(name: str, kind: NodeKind | str | type | None = None) -> FilterSpec:
    """Look up a filter by name or ``module:function`` reference.

    Parameters
    ----------
    name : str
        Built-in or plugin filter name, or ``module:function``
    kind : NodeKind, str, type or None, default = None
        Node kind to use instead of the filter's own

    Returns
    -------
    FilterSpec
        The resolved filter

    Raises
    ------
    ValidationError
        If the name cannot be resolved, the reference does not point to a
        callable, or no node kind is known for it

    """
    override = _resolve_kind(kind) if kind is not None else None

    if ":" not in name:
        filters = BUILTIN_FILTERS if name in BUILTIN_FILTERS else list_filters()
        if name not in filters:
            available = ", ".join(sorted(list_filters()))
            raise ValidationError(
                f"Unknown filter {name!r}; available: {available} (or use module:function)",
                parameter_name="filter",
                parameter_value=name,
            )
        spec = filters[name]
        if override is not None and override is not spec.kind:
            return FilterSpec(spec.name, override, spec.transform, spec.description)
        return spec

    transform = _import_reference(name)
    resolved_kind = override or getattr(transform, "panfilter_kind", None)
    if resolved_kind is None:
        raise ValidationError(
            f"Filter {name!r} does not declare a node kind; pass one explicitly or mark it with @filter_kind",
            parameter_name="kind",
        )
    return FilterSpec(name, NodeKind.resolve(resolved_kind), transform, (transform.__doc__ or "").strip())


def _resolve_kind(kind: NodeKind | str | type) -> NodeKind:
    try:
        return NodeKind.resolve(kind)
    except ValueError as e:
        raise ValidationError(str(e), parameter_name="kind", parameter_value=kind, original_error=e) from e


def _import_reference(reference: str) -> Transform:
    module_name, _, attribute = reference.partition(":")
    if not module_name or not attribute:
        raise ValidationError(
            f"Filter reference {reference!r} must have the form module:function",
            parameter_name="filter",
            parameter_value=reference,
        )
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ValidationError(
            f"Cannot import filter module {module_name!r}: {e}",
            parameter_name="filter",
            parameter_value=reference,
            original_error=e,
        ) from e

    target: Any = module
    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise ValidationError(
                f"Module {module_name!r} has no attribute {attribute!r}",
                parameter_name="filter",
                parameter_value=reference,
                original_error=e,
            ) from e
    if not callable(target):
        raise ValidationError(
            f"Filter reference {reference!r} is not callable", parameter_name="filter", parameter_value=reference
        )
    logger.debug("Resolved filter reference %s", reference)
    return target
