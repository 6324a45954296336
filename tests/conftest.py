"""
Shared fixtures: in-memory stores, the sample catalog and fake Gemini clients.
"""

import importlib.util
from pathlib import Path
from types import SimpleNamespace

import pytest

from cloudmentor.context import SessionContext
from cloudmentor.gateway import InMemoryGateway, Tables


PROJECT_ROOT = Path(__file__).parent.parent
CATALOG_PATH = PROJECT_ROOT / "data" / "catalog.yaml"


def _load_seed_module():
    module_spec = importlib.util.spec_from_file_location(
        "seed_catalog", PROJECT_ROOT / "scripts" / "seed_catalog.py"
    )
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


seed_catalog = _load_seed_module()


# -----------------------------------------------------------------------------
# Store fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def gateway():
    return InMemoryGateway()


@pytest.fixture
def catalog_data():
    return seed_catalog.load_catalog(CATALOG_PATH)


@pytest.fixture
def seeded_gateway(gateway, catalog_data):
    seed_catalog.seed(gateway, catalog_data)
    return gateway


@pytest.fixture
def tables(seeded_gateway):
    return Tables.from_gateway(seeded_gateway)


@pytest.fixture
def context():
    return SessionContext(user_id="demo-student", email="student@example.com")


@pytest.fixture
def buddy_context():
    return SessionContext(user_id="study-buddy", email="buddy@example.com")


# -----------------------------------------------------------------------------
# Fake Gemini client
# -----------------------------------------------------------------------------

class FakeModels:
    """Stands in for genai.Client().models."""

    def __init__(self, chunks=(), fail_at=None, text="", error=None):
        self.chunks = list(chunks)
        self.fail_at = fail_at
        self.text = text
        self.error = error
        self.stream_calls = []
        self.generate_calls = []

    def generate_content_stream(self, model, contents, config):
        self.stream_calls.append({"model": model, "contents": contents, "config": config})
        for idx, chunk in enumerate(self.chunks):
            if idx == self.fail_at:
                raise ConnectionError("connection reset")
            yield SimpleNamespace(text=chunk)
        if self.fail_at is not None and self.fail_at >= len(self.chunks):
            raise ConnectionError("connection reset")

    def generate_content(self, model, contents, config):
        self.generate_calls.append({"model": model, "contents": contents, "config": config})
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text, candidates=None)


class FakeGenaiClient:
    def __init__(self, **kwargs):
        self.models = FakeModels(**kwargs)


@pytest.fixture
def fake_genai():
    return FakeGenaiClient


@pytest.fixture
def seeder():
    """The seed_catalog script module."""
    return seed_catalog
