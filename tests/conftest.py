"""Shared test fixtures for all tests."""

from dataclasses import dataclass
from uuid import UUID

import pytest
from pydantic import BaseModel, Field

from solrbridge.config import SolrSettings
from solrbridge.core.documents import InputDocument
from solrbridge.core.models import ConnectionConfig

# ============================================================================
# Test Data Constants
# ============================================================================


SOLR_URL = "http://solr.test:8983/solr/books"


# ============================================================================
# Sample Records
# ============================================================================


class BookRecord(BaseModel):
    """Pydantic record mapped to Solr fields by alias."""

    id: str
    title: str
    author_name: str | None = Field(default=None, alias="author_s")
    year: int | None = Field(default=None, alias="year_i")


@dataclass
class PaperRecord:
    """Dataclass record mapped to Solr fields by name."""

    id: UUID
    title: str
    journal: str | None = None


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_fields() -> dict[str, object]:
    """A flat field map."""
    return {
        "id": "978-0134093413",
        "title": "Clean Code",
        "subjects": ["Programming", "Software Engineering"],
        "year": 2008,
    }


@pytest.fixture
def sample_document(sample_fields: dict[str, object]) -> InputDocument:
    """An input document built from the sample field map."""
    return InputDocument(sample_fields)


@pytest.fixture
def sample_books() -> list[BookRecord]:
    """Two pydantic records."""
    return [
        BookRecord(id="1", title="Solr in Action", author_s="Trey Grainger", year_i=2014),
        BookRecord(id="2", title="Relevant Search"),
    ]


@pytest.fixture
def sample_paper() -> PaperRecord:
    """A dataclass record."""
    return PaperRecord(
        id=UUID("12345678-1234-5678-1234-567812345678"),
        title="The Anatomy of a Large-Scale Hypertextual Web Search Engine",
    )


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture
def connection_config() -> ConnectionConfig:
    """Connection config without credentials."""
    return ConnectionConfig(server_address=SOLR_URL)


@pytest.fixture
def mock_settings() -> SolrSettings:
    """Create mock settings for testing."""
    return SolrSettings(
        _env_file=None,
        server_url=SOLR_URL,
        username="solr",
        password="SolrRocks",
        timeout=5.0,
        debug=True,
        log_level="DEBUG",
    )


@pytest.fixture
def mock_settings_minimal() -> SolrSettings:
    """Create minimal settings without credentials."""
    return SolrSettings(_env_file=None, server_url=SOLR_URL)


@pytest.fixture
def solr_url() -> str:
    """Base URL of the mocked Solr core."""
    return SOLR_URL
