# -*- coding: utf-8 -*-
"""
Pytest configuration and fixtures.
"""
import pytest
from fastapi.testclient import TestClient

from text_prep.api import app
from text_prep.models import NormalizationOptions


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def options():
    """Default normalization options."""
    return NormalizationOptions()


@pytest.fixture
def make_options():
    """Factory for options built from snake_case keyword overrides."""

    def _make(**overrides):
        return NormalizationOptions(**overrides)

    return _make
