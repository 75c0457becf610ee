#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Options for the wire codec.

Options are frozen dataclasses; use ``create_updated`` to derive a modified
copy.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from panfilter.constants import (
    CITATION_FIELD_NAMES,
    CITATION_MODE_KEYS,
    DEFAULT_CITATION_MODE_KEY,
    DEFAULT_JSON_ENSURE_ASCII,
    DEFAULT_JSON_INDENT,
    CitationModeKey,
)
from panfilter.exceptions import ValidationError


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class CodecOptions(CloneFrozenMixin):
    """Options for decoding and encoding the wire format.

    Parameters
    ----------
    citation_mode_key : {"citationMode", "citationmode"}, default = "citationMode"
        Wire field name carrying a citation's mode. Older converter versions
        spell it in lower case; pick whichever the converter in use expects.
        The same name is required when decoding.
    indent : int or None, default = None
        JSON indentation used by ``encode_json``. None gives compact output,
        which is what document converters emit.
    ensure_ascii : bool, default = False
        Whether ``encode_json`` escapes non-ASCII characters

    Examples
    --------
    Talk to a converter that expects the lower-case citation field:
        >>> options = CodecOptions(citation_mode_key="citationmode")

    Pretty-print output while debugging:
        >>> options = CodecOptions().create_updated(indent=2)

    """

    citation_mode_key: CitationModeKey = field(
        default=DEFAULT_CITATION_MODE_KEY,
        metadata={"help": "Wire field name for a citation's mode", "choices": list(CITATION_MODE_KEYS)},
    )
    indent: int | None = field(
        default=DEFAULT_JSON_INDENT,
        metadata={"help": "JSON indentation spaces (None for compact)", "type": int},
    )
    ensure_ascii: bool = field(
        default=DEFAULT_JSON_ENSURE_ASCII,
        metadata={"help": "Escape non-ASCII characters in JSON output"},
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValidationError
            If any field value is outside its valid range.

        """
        if self.citation_mode_key not in CITATION_MODE_KEYS:
            raise ValidationError(
                f"citation_mode_key must be one of {', '.join(CITATION_MODE_KEYS)}, got {self.citation_mode_key!r}",
                parameter_name="citation_mode_key",
                parameter_value=self.citation_mode_key,
            )
        if self.indent is not None and (isinstance(self.indent, bool) or self.indent < 0):
            raise ValidationError(
                f"indent must be a non-negative integer or None, got {self.indent!r}",
                parameter_name="indent",
                parameter_value=self.indent,
            )

    @property
    def citation_field_names(self) -> dict[str, str]:
        """Citation attribute to wire field mapping for these options."""
        names = dict(CITATION_FIELD_NAMES)
        names["mode"] = self.citation_mode_key
        return names
