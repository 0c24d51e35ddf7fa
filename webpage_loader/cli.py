"""Command-line interface for webpage-loader."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List

import httpx
import soupsieve

from .config import get_settings
from .loaders import BaseLoader, TextFileLoader, WebPageLoader
from .models import Document, LoaderOptions
from .text_splitter import CharacterTextSplitter, RecursiveCharacterTextSplitter, TextSplitter

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    p = argparse.ArgumentParser(
        prog="webpage-loader",
        description="Load web pages or text files as documents and split them into chunks.",
    )
    p.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    sub = p.add_subparsers(dest="cmd", required=True)

    # --- load ---
    load = sub.add_parser("load", help="Fetch a page and print its documents as JSON")
    load.add_argument("url", help="http(s) URL to load")
    load.add_argument("--selector", default=None, help="CSS selector (default: body)")
    load.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds")
    load.add_argument("--encoding", default=None, help="Force decoding of the response body")

    # --- split ---
    split = sub.add_parser("split", help="Load a page or file and print its chunks as JSON")
    source = split.add_mutually_exclusive_group(required=True)
    source.add_argument("--url", default=None, help="http(s) URL to load")
    source.add_argument("--file", default=None, help="Plaintext file to load")
    split.add_argument("--selector", default=None, help="CSS selector, with --url only")
    split.add_argument("--chunk-size", type=int, default=None, help="Maximum chunk length")
    split.add_argument("--chunk-overlap", type=int, default=None, help="Overlap between chunks")
    split.add_argument(
        "--separator",
        default=None,
        help="Split on this single separator instead of the recursive defaults",
    )

    return p


def _configure_logging(verbose: bool) -> None:
    """Set up root logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def _build_splitter(args: argparse.Namespace) -> TextSplitter:
    s = get_settings()
    kwargs = {
        "chunk_size": args.chunk_size if args.chunk_size is not None else s.chunk_size,
        "chunk_overlap": args.chunk_overlap if args.chunk_overlap is not None else s.chunk_overlap,
    }
    if args.separator is not None:
        return CharacterTextSplitter(separator=args.separator, **kwargs)
    return RecursiveCharacterTextSplitter(**kwargs)


def _print_documents(docs: List[Document]) -> None:
    print(json.dumps([d.model_dump(mode="json") for d in docs], indent=2, ensure_ascii=False))


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.cmd == "split" and args.file and args.selector:
        parser.error("--selector can only be used with --url")
    _configure_logging(args.verbose)

    try:
        if args.cmd == "load":
            options = LoaderOptions(timeout=args.timeout, encoding=args.encoding)
            _print_documents(WebPageLoader(args.url, options, args.selector).load())
            return 0

        if args.cmd == "split":
            loader: BaseLoader
            if args.url:
                loader = WebPageLoader(args.url, selector=args.selector)
            else:
                loader = TextFileLoader(args.file)
            _print_documents(loader.load_and_split(_build_splitter(args)))
            return 0
    except (httpx.HTTPError, soupsieve.SelectorSyntaxError, ValueError, OSError) as exc:
        logger.error("%s failed: %s", args.cmd, exc)
        return 1

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
