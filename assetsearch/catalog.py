"""
Asset catalog loading.

Reads a JSON array of asset records, as exported by the asset catalog, into
validated ``Asset`` models ready for ``build_index``.
"""

import json
import logging
from pathlib import Path
from typing import List, Union

from .contracts.models import Asset
from .index.errors import InvalidAssetError
from .index.store import coerce_asset

logger = logging.getLogger(__name__)


def load_catalog(path: Union[str, Path]) -> List[Asset]:
    """Load asset records from a JSON file.

    The file holds either a list of records or an object with an ``assets``
    list.

    Args:
        path: Path to the catalog JSON file

    Returns:
        Validated assets in file order

    Raises:
        InvalidAssetError: If the file layout or any record is invalid
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict) and "assets" in data:
        data = data["assets"]
    if not isinstance(data, list):
        raise InvalidAssetError(f"{path} must contain a list of asset records")

    assets = [coerce_asset(record) for record in data]
    logger.info(f"Loaded {len(assets)} assets from {path}")
    return assets
