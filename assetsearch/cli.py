"""
Command-line interface for the asset search engine.

Loads a JSON catalog, builds an index and runs one query against it:

    assetsearch data/assets.json search btc --limit 5
    assetsearch data/assets.json suggest et
    assetsearch data/assets.json popular
    assetsearch data/assets.json stats
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .catalog import load_catalog
from .contracts.models import SearchOptions
from .contracts.settings import Settings
from .index.errors import AssetIndexError
from .obs.logging import configure_logging
from .retriever.search_service import SearchIndexService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Asset Search Engine")
    parser.add_argument("catalog", help="Path to a JSON asset catalog")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    parser.add_argument(
        "--include-inactive", action="store_true", help="Include inactive assets"
    )

    sub = parser.add_subparsers(dest="command", required=True)

    search = sub.add_parser("search", help="Rank assets for a query")
    search.add_argument("query")
    search.add_argument("--limit", type=int, default=None, help="Maximum results")
    search.add_argument("--min-score", type=float, default=None, help="Minimum score")
    search.add_argument("--no-fuzzy", action="store_true", help="Disable fuzzy bonus")

    suggest = sub.add_parser("suggest", help="Autocomplete a prefix")
    suggest.add_argument("query")
    suggest.add_argument("--limit", type=int, default=10, help="Maximum suggestions")

    sub.add_parser("popular", help="List popular search symbols")
    sub.add_parser("stats", help="Print index statistics")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    config = Settings(log_level="DEBUG") if args.verbose else Settings()
    configure_logging(config)

    try:
        assets = load_catalog(args.catalog)
        service = SearchIndexService(config)
        service.build_index(assets)
    except (OSError, json.JSONDecodeError, AssetIndexError) as e:
        logger.error(f"Failed to load catalog {args.catalog}: {e}")
        return 1

    if args.command == "search":
        options = SearchOptions(
            limit=args.limit,
            min_score=args.min_score,
            include_inactive=args.include_inactive,
            fuzzy_match=not args.no_fuzzy,
        )
        for result in service.search(args.query, options):
            print(
                json.dumps(
                    {
                        "id": result.asset.id,
                        "symbol": result.asset.symbol,
                        "score": round(result.score, 4),
                        "match_type": result.match_type.value,
                        "match_text": result.match_text,
                    },
                    ensure_ascii=False,
                )
            )
    elif args.command == "suggest":
        for suggestion in service.get_suggestions(
            args.query, args.limit, include_inactive=args.include_inactive
        ):
            print(suggestion)
    elif args.command == "popular":
        for symbol in service.get_popular_searches(include_inactive=args.include_inactive):
            print(symbol)
    elif args.command == "stats":
        print(json.dumps(service.get_index_stats().model_dump(), indent=2))

    return 0


if __name__ == "__main__":
    sys.exit(main())
