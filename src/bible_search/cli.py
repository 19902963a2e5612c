"""Command-line access to the compiled corpus."""

from __future__ import annotations

import argparse
import logging
import sys

from bible_search.compiler import CompilationError
from bible_search.engine import ScriptureEngine
from bible_search.sitemap import SITE_URL


def _lookup(engine: ScriptureEngine, args: argparse.Namespace) -> int:
    passage = engine.get_passage(args.reference, annotated=args.annotated)
    if passage is None:
        print(f"'{args.reference}' is not a valid Bible reference.", file=sys.stderr)
        return 1
    print(passage.label)
    for v in passage.verses:
        print(f"{v.verse} {v.text}")
    return 0


def _search(engine: ScriptureEngine, args: argparse.Namespace) -> int:
    for m in engine.search(args.query, args.limit):
        print(f"{m.label}\t{m.text}")
    return 0


def _sitemap(engine: ScriptureEngine, args: argparse.Namespace) -> int:
    if args.xml:
        sys.stdout.write(engine.sitemap_xml(args.base_url))
    else:
        for path in engine.sitemap():
            print(path)
    return 0


def _check(engine: ScriptureEngine, args: argparse.Namespace) -> int:
    print(
        f"{len(engine.store)} verses, "
        f"{len(engine.list_books())} books, "
        f"{len(engine.store.chapters())} chapters"
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="bible-search",
        description="Look up and search Bible verses",
    )
    parser.add_argument(
        "--corpus",
        metavar="PATH",
        help="Word corpus file (default: $CORPUS_PATH)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("lookup", help="Print the verses of a reference")
    p.add_argument("reference", help='e.g. "John 3:16"')
    p.add_argument("--annotated", action="store_true", help="Mark italic words")
    p.set_defaults(func=_lookup)

    p = sub.add_parser("search", help="Search by reference or words")
    p.add_argument("query")
    p.add_argument("--limit", type=int, default=None)
    p.set_defaults(func=_search)

    p = sub.add_parser("sitemap", help="Print every book and chapter path")
    p.add_argument("--xml", action="store_true", help="Render sitemap XML")
    p.add_argument("--base-url", default=SITE_URL)
    p.set_defaults(func=_sitemap)

    p = sub.add_parser("check", help="Compile the corpus and report counts")
    p.set_defaults(func=_check)

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        engine = ScriptureEngine.load(args.corpus)
    except (CompilationError, RuntimeError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    return args.func(engine, args)


if __name__ == "__main__":
    sys.exit(main())
