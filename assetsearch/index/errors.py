"""
Index error definitions.

This module defines typed exceptions for the index store. Lookups of unknown
ids are not errors; only malformed input and broken invariants are raised.
"""


class AssetIndexError(Exception):
    """Base exception for index failures.

    Args:
        code: Error code identifying the type of failure
        msg: Human-readable error message
    """

    def __init__(self, code: str, msg: str):
        self.code = code
        self.msg = msg
        super().__init__(f"{code}: {msg}")

    def __str__(self) -> str:
        return f"{self.code}: {self.msg}"


class InvalidAssetError(AssetIndexError):
    """Raised when an asset record cannot be indexed."""

    def __init__(self, msg: str):
        super().__init__("INVALID_ASSET", msg)


class DuplicateAssetError(AssetIndexError):
    """Raised when adding an id that is already indexed."""

    def __init__(self, asset_id: str):
        self.asset_id = asset_id
        super().__init__(
            "DUPLICATE_ASSET",
            f"Asset '{asset_id}' is already indexed; remove or update it instead",
        )


class IndexInconsistencyError(AssetIndexError):
    """Raised when the inverted indices and the master map diverge."""

    def __init__(self, msg: str):
        super().__init__("INDEX_INCONSISTENT", msg)
