#!/usr/bin/env python3
"""
Build a search index from a JSON catalog and report its statistics.

Usage: python scripts/build_index.py [data/assets.json]
"""

import json
import sys
from pathlib import Path

from assetsearch.catalog import load_catalog
from assetsearch.obs.logging import configure_logging
from assetsearch.retriever.search_service import SearchIndexService

if __name__ == "__main__":
    configure_logging()
    catalog = Path(sys.argv[1] if len(sys.argv) > 1 else "data/assets.json")

    service = SearchIndexService()
    service.build_index(load_catalog(catalog))
    service.store.verify()

    stats = service.get_index_stats()
    print(json.dumps(stats.model_dump(), indent=2))
    print(f"[OK] Index built from {catalog.resolve()} with {stats.total_entries} assets")
