"""Document loaders: turn a web page or a text file into Documents."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, List, Optional, Union

import httpx
import soupsieve
from bs4 import BeautifulSoup

from .config import Settings, get_settings
from .fetch import fetch_page, validate_url
from .models import Document, LoaderOptions
from .text_splitter import RecursiveCharacterTextSplitter, TextSplitter

logger = logging.getLogger(__name__)


class BaseLoader(ABC):
    """Common interface for loaders."""

    @abstractmethod
    def load(self) -> List[Document]:
        """Load the source into a list of Documents."""

    def _default_splitter(self) -> TextSplitter:
        return RecursiveCharacterTextSplitter()

    def load_and_split(self, splitter: Optional[TextSplitter] = None) -> List[Document]:
        """Load documents and split them into chunks.

        Uses a RecursiveCharacterTextSplitter when no splitter is given.
        """
        return (splitter or self._default_splitter()).split_documents(self.load())


class WebPageLoader(BaseLoader):
    """Load the text of a web page, optionally narrowed by a CSS selector.

    Each call to :meth:`load` issues one GET request (plus retries on
    transient failures) and returns a single Document whose content is the
    concatenated text of every element matching ``selector``, in document
    order. Nothing is cached between calls.

    Example:
        >>> loader = WebPageLoader("https://about.google/commitments/", selector="h1")
        >>> loader.load()[0].page_content.strip()
        'Committed to significantly improving the lives of as many people as possible.'
    """

    def __init__(
        self,
        url: str,
        options: Optional[LoaderOptions] = None,
        selector: Optional[str] = None,
        *,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.url = validate_url(url)
        self.options = options or LoaderOptions()
        self.settings = settings or get_settings()
        self.selector = selector or self.settings.default_selector
        # Raises soupsieve.SelectorSyntaxError for malformed selectors.
        self._compiled = soupsieve.compile(self.selector)
        self.transport = transport

    def scrape(self) -> BeautifulSoup:
        """Fetch the page and return its parsed tree."""
        page = fetch_page(
            self.url,
            settings=self.settings,
            options=self.options,
            transport=self.transport,
        )
        return BeautifulSoup(page.text, "lxml")

    def _extract_text(self, soup: BeautifulSoup) -> str:
        matches = self._compiled.select(soup)
        if not matches and self.selector == "body":
            # Parsed tree has no <body>.
            return soup.get_text()
        logger.debug("Selector %r matched %d element(s) on %s", self.selector, len(matches), self.url)
        return "".join(el.get_text() for el in matches)

    def load(self) -> List[Document]:
        """Fetch the page and return one Document with the selected text.

        Raises:
            httpx.HTTPStatusError: On a non-success status.
            httpx.TransportError: When the page cannot be reached.
        """
        soup = self.scrape()
        text = self._extract_text(soup)
        if not text.strip():
            logger.warning("No text extracted from %s with selector %r", self.url, self.selector)
        return [Document(page_content=text, metadata={"source": self.url})]

    def _default_splitter(self) -> TextSplitter:
        return RecursiveCharacterTextSplitter(
            chunk_size=self.settings.chunk_size,
            chunk_overlap=self.settings.chunk_overlap,
        )


class TextFileLoader(BaseLoader):
    """Load a plaintext file as a single Document."""

    def __init__(self, path: Union[str, Path], encoding: str = "utf-8") -> None:
        self.path = Path(path)
        self.encoding = encoding

    def load(self) -> List[Document]:
        text = self.path.read_text(encoding=self.encoding)
        logger.info("Loaded %s (%d chars)", self.path, len(text))
        return [Document(page_content=text, metadata={"source": str(self.path)})]


def load_all(
    urls: Iterable[str],
    *,
    selector: Optional[str] = None,
    options: Optional[LoaderOptions] = None,
    settings: Optional[Settings] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> List[Document]:
    """Load multiple URLs sequentially with the same selector and options.

    The first failing URL raises; documents loaded before it are discarded.
    """
    s = settings or get_settings()
    docs: List[Document] = []
    for url in urls:
        loader = WebPageLoader(url, options, selector, settings=s, transport=transport)
        docs.extend(loader.load())
    return docs
