"""
Pytest Configuration - shared fixtures for order signing tests.
Fixed addresses and keys so every digest in the suite is reproducible.
"""

import pytest

from deusd_signing.keys import ED25519, SECP256K1, key_provider_from_private_key
from deusd_signing.schemas import Order, OrderType, RewardClaimPayload

PACKAGE_ID = "0xd3d9fa3b654479e9cf8c9d63fad475a4ec70efb5bf310de94908ea227ee3afaf"
OTHER_PACKAGE_ID = "0x0000000000000000000000000000000000000000000000000000000000000abc"
BENEFACTOR = "0xc3a73e4ea73a30baabb4959bbf74dd3a7fd5cea6ce17bee3bc39717adbe60a2f"
OTHER_ADDRESS = "0x00000000000000000000000000000000000000000000000000000000000000aa"

SECP256K1_KEY = "0x" + "11" * 32
ED25519_KEY = "0x" + "22" * 32


@pytest.fixture
def sample_order() -> Order:
    """The reference MINT order."""
    return Order(
        kind=OrderType.MINT,
        expiry=1789000000,
        nonce=1,
        benefactor=BENEFACTOR,
        beneficiary=BENEFACTOR,
        collateral_type="0x2::sui::SUI",
        collateral_amount=1,
        deusd_amount=1000000000,
    )


@pytest.fixture
def sample_claim() -> RewardClaimPayload:
    return RewardClaimPayload(pool="0x5", receiver=BENEFACTOR, amount=10, nonce=7)


@pytest.fixture
def secp_provider():
    return key_provider_from_private_key(SECP256K1_KEY, SECP256K1)


@pytest.fixture
def ed_provider():
    return key_provider_from_private_key(ED25519_KEY, ED25519)


@pytest.fixture(params=[SECP256K1, ED25519])
def any_provider(request, secp_provider, ed_provider):
    return secp_provider if request.param == SECP256K1 else ed_provider


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "deterministic: marks tests as deterministic")
    config.addinivalue_line("markers", "vectors: fixed byte vectors shared with the on-chain verifier")
