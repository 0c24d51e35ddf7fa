"""Split document text into fixed-size, overlapping chunks."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, List, Mapping, Optional

from .models import Document

logger = logging.getLogger(__name__)


def _split_on_separator(text: str, separator: str, keep_separator: bool) -> List[str]:
    """Split ``text`` on a literal separator; "" splits into characters."""
    if not separator:
        return list(text)
    if keep_separator:
        parts = re.split(f"({re.escape(separator)})", text)
        # Re-attach each separator to the piece that follows it.
        splits = [parts[0]] + [parts[i] + parts[i + 1] for i in range(1, len(parts) - 1, 2)]
    else:
        splits = text.split(separator)
    return [s for s in splits if s != ""]


class TextSplitter(ABC):
    """Base splitter: merges small pieces into chunks of at most ``chunk_size``.

    Subclasses decide how text is cut into pieces (:meth:`split_text`); this
    class owns the merge step, the overlap bookkeeping and document handling.
    """

    def __init__(
        self,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
        length_function: Callable[[str], int] = len,
        keep_separator: bool = False,
        strip_whitespace: bool = True,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        if chunk_overlap < 0:
            raise ValueError(f"chunk_overlap must be >= 0, got {chunk_overlap}")
        if chunk_overlap > chunk_size:
            raise ValueError(
                f"chunk_overlap ({chunk_overlap}) is larger than chunk_size ({chunk_size})"
            )
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.length_function = length_function
        self.keep_separator = keep_separator
        self.strip_whitespace = strip_whitespace

    @abstractmethod
    def split_text(self, text: str) -> List[str]:
        """Cut ``text`` into chunks; subclasses decide where to cut."""

    def _warn_if_oversized(self, size: int) -> None:
        if size > self.chunk_size:
            logger.warning(
                "Created a chunk of size %d, which is longer than chunk_size %d",
                size, self.chunk_size,
            )

    def _join(self, pieces: List[str], separator: str) -> Optional[str]:
        text = separator.join(pieces)
        if self.strip_whitespace:
            text = text.strip()
        return text or None

    def _merge_splits(self, splits: Iterable[str], separator: str) -> List[str]:
        """Greedily pack ``splits`` into chunks, carrying a tail of overlap."""
        sep_len = self.length_function(separator)
        chunks: List[str] = []
        current: List[str] = []
        total = 0

        for piece in splits:
            piece_len = self.length_function(piece)
            joined_len = total + piece_len + (sep_len if current else 0)

            if joined_len > self.chunk_size and current:
                self._warn_if_oversized(total)
                chunk = self._join(current, separator)
                if chunk is not None:
                    chunks.append(chunk)

                # Drop pieces from the front until the remainder fits the overlap
                # and leaves room for the incoming piece.
                while total > self.chunk_overlap or (
                    total + piece_len + (sep_len if current else 0) > self.chunk_size
                    and total > 0
                ):
                    total -= self.length_function(current[0]) + (sep_len if len(current) > 1 else 0)
                    current = current[1:]

            current.append(piece)
            total += piece_len + (sep_len if len(current) > 1 else 0)

        self._warn_if_oversized(total)
        chunk = self._join(current, separator)
        if chunk is not None:
            chunks.append(chunk)
        return chunks

    def create_documents(
        self,
        texts: List[str],
        metadatas: Optional[List[Mapping[str, Any]]] = None,
    ) -> List[Document]:
        """Split each text and wrap every chunk in a Document."""
        if metadatas is not None and len(metadatas) != len(texts):
            raise ValueError(
                f"Got {len(metadatas)} metadatas for {len(texts)} texts"
            )
        metas = metadatas or [{} for _ in texts]
        docs: List[Document] = []
        for text, meta in zip(texts, metas):
            for chunk in self.split_text(text):
                docs.append(Document(page_content=chunk, metadata=dict(meta)))
        return docs

    def split_documents(self, documents: Iterable[Document]) -> List[Document]:
        """Split documents, copying each parent's metadata onto its chunks."""
        docs = list(documents)
        chunks = self.create_documents(
            [d.page_content for d in docs],
            metadatas=[d.metadata for d in docs],
        )
        logger.info("Split %d document(s) into %d chunk(s)", len(docs), len(chunks))
        return chunks


class CharacterTextSplitter(TextSplitter):
    """Split on a single separator, then merge pieces up to ``chunk_size``."""

    def __init__(self, separator: str = "\n\n", **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.separator = separator

    def split_text(self, text: str) -> List[str]:
        splits = _split_on_separator(text, self.separator, self.keep_separator)
        merge_sep = "" if self.keep_separator else self.separator
        return self._merge_splits(splits, merge_sep)


class RecursiveCharacterTextSplitter(TextSplitter):
    """Try separators in order, recursing into pieces that are still too long.

    With the default separators this keeps paragraphs, then lines, then words
    together for as long as possible; ``""`` is the last resort and cuts
    between characters.
    """

    DEFAULT_SEPARATORS = ("\n\n", "\n", " ", "")

    def __init__(self, separators: Optional[List[str]] = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.separators = list(separators) if separators else list(self.DEFAULT_SEPARATORS)

    def _split_text(self, text: str, separators: List[str]) -> List[str]:
        separator = separators[-1]
        remaining: List[str] = []
        for i, sep in enumerate(separators):
            if sep == "" or sep in text:
                separator = sep
                remaining = separators[i + 1:]
                break

        splits = _split_on_separator(text, separator, self.keep_separator)
        merge_sep = "" if self.keep_separator else separator

        out: List[str] = []
        good: List[str] = []
        for piece in splits:
            if self.length_function(piece) < self.chunk_size:
                good.append(piece)
                continue
            if good:
                out.extend(self._merge_splits(good, merge_sep))
                good = []
            if remaining:
                out.extend(self._split_text(piece, remaining))
            else:
                self._warn_if_oversized(self.length_function(piece))
                out.append(piece)
        if good:
            out.extend(self._merge_splits(good, merge_sep))
        return out

    def split_text(self, text: str) -> List[str]:
        return self._split_text(text, self.separators)
