"""Tests for webpage_loader.models."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from webpage_loader.models import Document, FetchedPage, LoaderOptions


def _make_page(**overrides) -> FetchedPage:
    defaults = {
        "source_url": "https://example.com/page.html",
        "final_url": "https://example.com/page.html",
        "fetched_at": datetime(2026, 1, 1, tzinfo=timezone.utc),
        "status": 200,
        "content_hash": "abc",
        "text": "<html></html>",
    }
    defaults.update(overrides)
    return FetchedPage(**defaults)


class TestDocument:
    def test_source_from_metadata(self):
        doc = Document(page_content="hi", metadata={"source": "https://example.com"})
        assert doc.source == "https://example.com"

    def test_source_missing(self):
        assert Document(page_content="hi").source is None

    def test_metadata_defaults_independent(self):
        a = Document(page_content="a")
        b = Document(page_content="b")
        assert a.metadata is not b.metadata

    def test_frozen(self):
        doc = Document(page_content="hi")
        with pytest.raises(ValidationError):
            doc.page_content = "changed"

    def test_metadata_read_only(self):
        doc = Document(page_content="x", metadata={"source": "a"})
        with pytest.raises(TypeError):
            doc.metadata["source"] = "b"
        assert doc.metadata["source"] == "a"

    def test_default_metadata_read_only(self):
        doc = Document(page_content="x")
        with pytest.raises(TypeError):
            doc.metadata["source"] = "b"

    def test_metadata_detached_from_input(self):
        meta = {"source": "a"}
        doc = Document(page_content="x", metadata=meta)
        meta["source"] = "b"
        assert doc.source == "a"

    def test_equality_with_same_metadata(self):
        a = Document(page_content="x", metadata={"source": "a"})
        b = Document(page_content="x", metadata={"source": "a"})
        assert a == b

    def test_json_dump(self):
        doc = Document(page_content="hi", metadata={"source": "x"})
        assert doc.model_dump(mode="json") == {"page_content": "hi", "metadata": {"source": "x"}}


class TestFetchedPage:
    def test_is_success_for_200(self):
        assert _make_page(status=200).is_success is True

    def test_is_success_false_for_404(self):
        assert _make_page(status=404).is_success is False


class TestLoaderOptions:
    def test_empty_options(self):
        opts = LoaderOptions()
        assert opts.timeout is None
        assert opts.max_attempts is None
        assert opts.encoding is None
        assert opts.headers == {}

    def test_non_positive_timeout_rejected(self):
        with pytest.raises(ValidationError):
            LoaderOptions(timeout=0)

    def test_zero_attempts_rejected(self):
        with pytest.raises(ValidationError):
            LoaderOptions(max_attempts=0)

    def test_known_encoding_accepted(self):
        assert LoaderOptions(encoding="latin-1").encoding == "latin-1"

    def test_unknown_encoding_rejected(self):
        with pytest.raises(ValidationError, match="Unknown encoding"):
            LoaderOptions(encoding="bogus")

    def test_unknown_encoding_is_value_error(self):
        with pytest.raises(ValueError):
            LoaderOptions(encoding="bogus")
