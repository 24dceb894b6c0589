"""Pytest configuration and fixtures for query string parser tests."""

from typing import Any, Dict

import pytest
from dotenv import load_dotenv

from mongoqs import MongoQS

# Load environment variables
load_dotenv()


@pytest.fixture
def mqs() -> MongoQS:
    """Parser with default options."""
    return MongoQS()


@pytest.fixture
def query() -> Dict[str, Any]:
    """Empty filter for builders to write into."""
    return {}


@pytest.fixture(scope="session")
def places_query_string():
    """Query string exercising scalar, array and custom fields together."""
    return "name=^Vatn&visits[]=>40&visits[]=<10000&type=!hut&near=6.13037,61.00607,7000,1000"
