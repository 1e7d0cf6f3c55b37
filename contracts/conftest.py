import pytest
import requests

from odd_even_client import get_algod, get_kmd, localnet_accounts
from odd_even_config import NetworkConfig


def _healthy(url: str) -> bool:
    try:
        return requests.get(url, timeout=5).status_code == 200
    except requests.RequestException:
        return False


@pytest.fixture(scope="session")
def network():
    net = NetworkConfig.from_env()
    if not _healthy(f"{net.algod_address}/health"):
        pytest.skip(f"LocalNet algod not reachable at {net.algod_address}")
    return net


@pytest.fixture(scope="session")
def algod(network):
    return get_algod(network)


@pytest.fixture(scope="session")
def accounts(network):
    """owner (judge), player odd, player even."""
    return localnet_accounts(get_kmd(network), count=3)
