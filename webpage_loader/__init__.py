"""webpage-loader — load web pages and text files as documents."""

from .config import Settings, get_settings
from .fetch import fetch_page
from .loaders import BaseLoader, TextFileLoader, WebPageLoader, load_all
from .models import Document, FetchedPage, LoaderOptions
from .text_splitter import CharacterTextSplitter, RecursiveCharacterTextSplitter, TextSplitter

__all__ = [
    "Settings",
    "get_settings",
    "fetch_page",
    "BaseLoader",
    "WebPageLoader",
    "TextFileLoader",
    "load_all",
    "Document",
    "FetchedPage",
    "LoaderOptions",
    "TextSplitter",
    "CharacterTextSplitter",
    "RecursiveCharacterTextSplitter",
]
