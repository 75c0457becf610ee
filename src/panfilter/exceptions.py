#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the panfilter library.

This module defines the exception classes raised while decoding wire-format
documents, walking them with caller-supplied transforms, and loading
configuration.

Exception Hierarchy
-------------------
- PanfilterError (base exception)

  - ValidationError (option/config validation)

  - DecodeError (malformed or schema-violating wire input)

  - TransformError (transform returned the wrong kind of node, or a filter
    signalled failure)

"""

from __future__ import annotations

from enum import Enum
from typing import Any


class DecodeErrorKind(str, Enum):
    """Classification of wire-format decode failures."""

    NOT_AN_ARRAY = "not-an-array"
    MISSING_TAG = "missing-tag"
    UNKNOWN_TAG = "unknown-tag"
    ARITY_MISMATCH = "arity-mismatch"
    TYPE_MISMATCH = "type-mismatch"


class PanfilterError(Exception):
    """Base exception class for all panfilter-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(PanfilterError):
    """Exception raised for invalid options or configuration values.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class DecodeError(PanfilterError):
    """Exception raised when wire-format input cannot be decoded.

    Decoding never substitutes defaults for malformed input; every structural
    problem is reported through this exception.

    Parameters
    ----------
    message : str
        Description of the decode failure
    kind : DecodeErrorKind or str
        Which class of failure occurred
    path : str, default = ""
        Location of the offending value, as a ``/``-separated path from the
        top-level value (``""`` is the top-level value itself)
    original_error : Exception, optional
        The underlying exception, e.g. a ``json.JSONDecodeError``

    Attributes
    ----------
    kind : DecodeErrorKind
        Which class of failure occurred
    path : str
        Location of the offending value

    """

    def __init__(
        self,
        message: str,
        kind: DecodeErrorKind | str,
        path: str = "",
        original_error: Exception | None = None,
    ):
        """Initialize the decode error."""
        location = path or "/"
        super().__init__(f"{message} (at {location})", original_error)
        self.kind = DecodeErrorKind(kind)
        self.path = path


class TransformError(PanfilterError):
    """Exception raised when a walk transform misbehaves.

    The walk engine raises this when a transform returns something that is
    not a node of the walk's target kind. Filters may also raise it to abort
    a walk deliberately; it propagates to the caller unchanged.

    Parameters
    ----------
    message : str
        Description of the transform failure
    transform_name : str, optional
        Name of the transform that failed
    original_error : Exception, optional
        The underlying exception that caused the transform failure

    Attributes
    ----------
    transform_name : str or None
        Name of the transform that failed

    """

    def __init__(self, message: str, transform_name: str | None = None, original_error: Exception | None = None):
        """Initialize the transform error."""
        super().__init__(message, original_error)
        self.transform_name = transform_name
