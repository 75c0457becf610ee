"""Pytest configuration and shared fixtures for the panfilter test suite.

This module provides shared fixtures, test configuration, and utilities
that are used across the entire test suite.
"""

import json

import pytest
from utils import make_sample_document

from panfilter.ast import Document
from panfilter.ast.serialization import encode_json

# Configure Hypothesis for property-based testing
try:
    from hypothesis import HealthCheck, Phase, Verbosity, settings

    # Register custom Hypothesis profiles
    settings.register_profile(
        "ci", max_examples=200, verbosity=Verbosity.verbose, suppress_health_check=[HealthCheck.too_slow]
    )
    settings.register_profile("dev", max_examples=50, suppress_health_check=[HealthCheck.too_slow])
    settings.register_profile(
        "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
    )

    # Load profile from environment or use default
    import os

    profile = os.getenv("HYPOTHESIS_PROFILE", "dev")
    settings.load_profile(profile)
except ImportError:
    # Hypothesis not installed, skip configuration
    pass


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture
def sample_document() -> Document:
    """Provide a document that uses every node variant.

    Returns
    -------
    Document
        Document covering all metadata, block and inline variants.

    """
    return make_sample_document()


@pytest.fixture
def sample_wire(sample_document: Document) -> str:
    """Provide the wire encoding of ``sample_document``."""
    return encode_json(sample_document)


@pytest.fixture
def header_wire() -> str:
    """Provide a small wire document with headers of levels 1 to 3."""
    return json.dumps(
        [
            {"unMeta": {}},
            [
                {"t": "Header", "c": [1, ["top", [], []], [{"t": "Str", "c": "Top"}]]},
                {"t": "Header", "c": [2, ["sub", [], []], [{"t": "Str", "c": "Sub"}]]},
                {"t": "Para", "c": [{"t": "Str", "c": "body"}, {"t": "Space", "c": []}, {"t": "Str", "c": "text"}]},
                {"t": "Header", "c": [3, ["", [], []], [{"t": "Str", "c": "Deep"}]]},
            ],
        ]
    )
