"""
In-memory index store for asset search.

This module keeps the master map of index entries together with the four
inverted indices (symbol, name, category, tag) and is the only place that
mutates them, so the consistency invariant between the five structures is
enforced here.
"""

import copy
import logging
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Union

from pydantic import ValidationError

from ..contracts.models import Asset, IndexEntry, IndexStats
from ..contracts.settings import Settings, settings as default_settings
from .errors import DuplicateAssetError, IndexInconsistencyError, InvalidAssetError
from .text import normalize, tokenize

logger = logging.getLogger(__name__)

FIELDS = ("symbol", "name", "category", "tag")

AssetLike = Union[Asset, Mapping[str, Any]]


def coerce_asset(record: AssetLike) -> Asset:
    """Validate a catalog record into an ``Asset``.

    Raises:
        InvalidAssetError: If the record is missing ``id``/``symbol`` or is
            otherwise malformed
    """
    if isinstance(record, Asset):
        if not record.id or not record.symbol:
            raise InvalidAssetError(f"Asset record missing id or symbol: {record!r}")
        return record
    try:
        return Asset.model_validate(record)
    except ValidationError as e:
        raise InvalidAssetError(f"Malformed asset record: {e}") from e


class IndexStore:
    """Master map plus four inverted indices over the asset catalog."""

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings
        self.entries_by_id: Dict[str, IndexEntry] = {}
        self.symbol_index: Dict[str, List[str]] = {}
        self.name_index: Dict[str, List[str]] = {}
        self.category_index: Dict[str, List[str]] = {}
        self.tag_index: Dict[str, List[str]] = {}
        self.generation = 0

    def __len__(self) -> int:
        return len(self.entries_by_id)

    def __contains__(self, asset_id: object) -> bool:
        return asset_id in self.entries_by_id

    def get(self, asset_id: str) -> Optional[IndexEntry]:
        return self.entries_by_id.get(asset_id)

    def entries(self) -> Iterator[IndexEntry]:
        """Iterate entries in insertion order."""
        return iter(list(self.entries_by_id.values()))

    def field_index(self, field: str) -> Dict[str, List[str]]:
        """Return the inverted index for ``field`` (symbol, name, category, tag)."""
        indices = {
            "symbol": self.symbol_index,
            "name": self.name_index,
            "category": self.category_index,
            "tag": self.tag_index,
        }
        try:
            return indices[field]
        except KeyError:
            raise ValueError(f"Unknown index field: {field}") from None

    # Maintenance

    def build_index(self, assets: Iterable[AssetLike]) -> None:
        """Replace the index contents with ``assets``.

        Every record is validated before anything is cleared, so a rejected
        batch leaves the current index untouched.

        Args:
            assets: Asset models or catalog dictionaries

        Raises:
            InvalidAssetError: On a malformed record or a repeated id
        """
        validated: List[Asset] = []
        seen = set()
        for record in assets:
            asset = coerce_asset(record)
            if asset.id in seen:
                raise InvalidAssetError(f"Duplicate asset id in catalog: {asset.id}")
            seen.add(asset.id)
            validated.append(asset)

        logger.info(f"Building search index for {len(validated)} assets")
        self.clear_index()
        for asset in validated:
            self.add_to_index(asset)
        logger.info(f"Search index built with {len(self.entries_by_id)} entries")

    def add_to_index(self, record: AssetLike) -> IndexEntry:
        """Index a single asset.

        Raises:
            InvalidAssetError: If the record is malformed
            DuplicateAssetError: If the id is already indexed
        """
        asset = coerce_asset(record)
        if asset.id in self.entries_by_id:
            raise DuplicateAssetError(asset.id)

        entry = self._create_entry(asset)
        self.entries_by_id[asset.id] = entry

        self._file(self.symbol_index, entry.symbol_key, asset.id)
        self._file(self.name_index, entry.name_key, asset.id)
        self._file(self.category_index, entry.category_key, asset.id)
        for tag_key in entry.tag_keys:
            self._file(self.tag_index, tag_key, asset.id)

        self.generation += 1
        logger.debug(f"Indexed asset {asset.id} with {len(entry.tokens)} tokens")
        return entry

    def remove_from_index(self, asset_id: str) -> bool:
        """Remove an asset; unknown ids are ignored.

        Returns:
            True if an entry was removed

        Raises:
            IndexInconsistencyError: If the entry is not filed where it should be
        """
        entry = self.entries_by_id.pop(asset_id, None)
        if entry is None:
            return False

        self._unfile(self.symbol_index, "symbol", entry.symbol_key, asset_id)
        self._unfile(self.name_index, "name", entry.name_key, asset_id)
        self._unfile(self.category_index, "category", entry.category_key, asset_id)
        for tag_key in entry.tag_keys:
            self._unfile(self.tag_index, "tag", tag_key, asset_id)

        self.generation += 1
        logger.debug(f"Removed asset {asset_id} from index")
        return True

    def update_index(self, record: AssetLike) -> IndexEntry:
        """Re-index an asset from its current field values."""
        asset = coerce_asset(record)
        self.remove_from_index(asset.id)
        return self.add_to_index(asset)

    def clear_index(self) -> None:
        self.entries_by_id.clear()
        self.symbol_index.clear()
        self.name_index.clear()
        self.category_index.clear()
        self.tag_index.clear()
        self.generation += 1

    # Consistency

    def verify(self) -> None:
        """Check that the inverted indices and the master map agree.

        Raises:
            IndexInconsistencyError: On the first divergence found
        """
        expected: Dict[str, Dict[str, List[str]]] = {field: {} for field in FIELDS}
        for asset_id, entry in self.entries_by_id.items():
            keys = [
                ("symbol", entry.symbol_key),
                ("name", entry.name_key),
                ("category", entry.category_key),
            ] + [("tag", tag_key) for tag_key in entry.tag_keys]
            for field, key in keys:
                if key:
                    expected[field].setdefault(key, []).append(asset_id)

        for field in FIELDS:
            actual = self.field_index(field)
            for key, ids in actual.items():
                if not ids:
                    self._fail(f"{field} index holds empty key '{key}'")
                if sorted(ids) != sorted(expected[field].get(key, [])):
                    self._fail(
                        f"{field} index key '{key}' holds {ids}, "
                        f"entries expect {expected[field].get(key, [])}"
                    )
            missing = set(expected[field]) - set(actual)
            if missing:
                self._fail(f"{field} index missing keys: {sorted(missing)}")

    def resolve(self, asset_id: str) -> IndexEntry:
        """Fetch the entry for an id found in an inverted index.

        Raises:
            IndexInconsistencyError: If the id has no master-map entry
        """
        entry = self.entries_by_id.get(asset_id)
        if entry is None:
            self._fail(f"Asset '{asset_id}' is in an inverted index but not indexed")
        return entry

    # Introspection

    def snapshot(self) -> Dict[str, Any]:
        """Copy of the index structures, with entries reduced to their derived fields."""
        return {
            "entries": {
                asset_id: {
                    "searchable_text": entry.searchable_text,
                    "tokens": list(entry.tokens),
                    "weight": entry.weight,
                }
                for asset_id, entry in self.entries_by_id.items()
            },
            "symbol": copy.deepcopy(self.symbol_index),
            "name": copy.deepcopy(self.name_index),
            "category": copy.deepcopy(self.category_index),
            "tag": copy.deepcopy(self.tag_index),
        }

    def stats(self) -> IndexStats:
        total = len(self.entries_by_id)
        total_tokens = sum(len(entry.tokens) for entry in self.entries_by_id.values())
        return IndexStats(
            total_entries=total,
            symbol_entries=len(self.symbol_index),
            name_entries=len(self.name_index),
            category_entries=len(self.category_index),
            tag_entries=len(self.tag_index),
            average_tokens_per_entry=total_tokens / total if total > 0 else 0.0,
        )

    # Internals

    def _create_entry(self, asset: Asset) -> IndexEntry:
        parts = [asset.symbol, asset.name, asset.category, *asset.tags]
        searchable_text = normalize(" ".join(parts))
        tokens = tokenize(searchable_text, self.config.min_token_length)

        factors = self.config.entry_weights
        weight = 1.0
        if asset.is_favorite:
            weight *= factors.get("favorite", 1.0)
        if asset.trending:
            weight *= factors.get("trending", 1.0)
        if asset.is_popular:
            weight *= factors.get("popular", 1.0)

        # A tag that repeats after normalization is filed once
        tag_keys = list(dict.fromkeys(normalize(tag) for tag in asset.tags))

        return IndexEntry(
            id=asset.id,
            asset=asset,
            searchable_text=searchable_text,
            tokens=tokens,
            weight=weight,
            symbol_key=normalize(asset.symbol),
            name_key=normalize(asset.name),
            category_key=normalize(asset.category),
            tag_keys=tag_keys,
        )

    @staticmethod
    def _file(index: Dict[str, List[str]], key: str, asset_id: str) -> None:
        # Values that normalize to nothing are not searchable
        if key:
            index.setdefault(key, []).append(asset_id)

    def _unfile(
        self, index: Dict[str, List[str]], field: str, key: str, asset_id: str
    ) -> None:
        if not key:
            return
        ids = index.get(key)
        if not ids or asset_id not in ids:
            self._fail(f"Asset '{asset_id}' missing from {field} index key '{key}'")
        ids.remove(asset_id)
        if not ids:
            del index[key]

    @staticmethod
    def _fail(msg: str) -> None:
        logger.error(f"Index invariant violated: {msg}")
        raise IndexInconsistencyError(msg)
