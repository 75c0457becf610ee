#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the panfilter library.

Constants are organized by category:
1. Type Definitions
2. Wire Format Keys and Field Names
3. Codec Defaults
4. Configuration Discovery
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

CitationModeKey = Literal["citationMode", "citationmode"]
JsonIndent = int | None

# =============================================================================
# Wire Format Keys and Field Names
# =============================================================================

# Tagged objects look like {"t": <tag>, "c": <payload>}
TAG_KEY = "t"
PAYLOAD_KEY = "c"

# Metadata is wrapped in {"unMeta": {...}}
META_KEY = "unMeta"

# Citation attribute name -> wire field name. The mode field is filled in
# from CodecOptions.citation_mode_key.
CITATION_FIELD_NAMES: dict[str, str] = {
    "id": "citationId",
    "prefix": "citationPrefix",
    "suffix": "citationSuffix",
    "mode": "citationMode",
    "note_num": "citationNoteNum",
    "hash": "citationHash",
}

CITATION_MODE_KEYS: tuple[str, ...] = ("citationMode", "citationmode")

# Unsigned integer fields are 64-bit on the wire
MAX_UINT = 2**64 - 1

# =============================================================================
# Codec Defaults
# =============================================================================

DEFAULT_CITATION_MODE_KEY: CitationModeKey = "citationMode"
DEFAULT_JSON_INDENT: JsonIndent = None
DEFAULT_JSON_ENSURE_ASCII = False

# Deepest block/inline/metadata nesting the decoder accepts. Decoding and
# walking recurse once per level, so this keeps both well inside the
# interpreter recursion limit.
MAX_NESTING_DEPTH = 100

# =============================================================================
# Configuration Discovery
# =============================================================================

CONFIG_FILENAMES = [".panfilter.toml", ".panfilter.yaml", ".panfilter.yml", ".panfilter.json", "pyproject.toml"]
ENV_PREFIX = "PANFILTER_"

# CLI exit codes
EXIT_SUCCESS = 0
EXIT_TRANSFORM_ERROR = 1
EXIT_VALIDATION_ERROR = 2
EXIT_DECODE_ERROR = 3
