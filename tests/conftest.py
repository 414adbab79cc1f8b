"""
Shared pytest fixtures for all tests.
"""

import os
import shutil
import tempfile

import pytest


def make_record(record_id, text, lang, **extra):
    """Build a raw Tatoeba search result."""
    record = {"id": record_id, "text": text, "lang": lang}
    record.update(extra)
    return record


def make_pair(english_id, english, spanish_id, spanish):
    """Build an English result with one direct Spanish translation."""
    return make_record(
        english_id,
        english,
        "eng",
        directTranslations=[{"id": spanish_id, "text": spanish, "lang": "spa"}],
    )


@pytest.fixture
def translation_entries():
    """Equivalent Spanish and French entries used by the shape tests."""
    return [
        {"id": 2, "text": "Hola", "lang": "spa"},
        {"sentence": {"id": 3, "text": "Salut", "lang": "fra"}},
    ]


@pytest.fixture
def hello_record():
    return make_pair(1, "Hello", 2, "Hola")


@pytest.fixture
def temp_output_dir():
    """Create a temporary directory for seed and JSON output."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    # Cleanup
    if os.path.exists(temp_dir):
        shutil.rmtree(temp_dir)
