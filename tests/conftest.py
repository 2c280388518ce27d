import pytest

from assetsearch.contracts.models import Asset
from assetsearch.contracts.settings import Settings
from assetsearch.retriever.search_service import SearchIndexService


@pytest.fixture
def config():
    return Settings()


@pytest.fixture
def make_asset():
    """Factory for assets with neutral defaults."""

    def _make(asset_id, symbol, **fields):
        fields.setdefault("name", "")
        fields.setdefault("type", "index")
        fields.setdefault("category", "")
        return Asset(id=asset_id, symbol=symbol, **fields)

    return _make


@pytest.fixture
def btc():
    return Asset(
        id="btc-usdt",
        symbol="BTC/USDT",
        name="Bitcoin",
        type="crypto",
        category="layer1",
        tags=["blockchain"],
    )


@pytest.fixture
def eth():
    return Asset(
        id="eth-usdt",
        symbol="ETH/USDT",
        name="Ethereum",
        type="crypto",
        category="layer1",
        tags=["smart contracts", "defi"],
    )


@pytest.fixture
def service(config, btc, eth):
    svc = SearchIndexService(config)
    svc.build_index([btc, eth])
    return svc
