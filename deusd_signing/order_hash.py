"""
Domain separator derivation and order hashing.

The minting module recomputes both on chain; every byte here must match:

    domain_separator = keccak256(address_bytes(package) || "deusd_minting")
    order_hash = keccak256(
        domain_separator || "deusd_order" || u8 kind || u64 expiry || u64 nonce
        || address benefactor || address beneficiary
        || vector<u8> type_name(collateral) || u64 collateral_amount || u64 deusd_amount
    )

Labels are raw ASCII, not length-prefixed. Field order is fixed.
"""
import logging

from eth_utils import keccak

from deusd_signing.bcs import BcsWriter
from deusd_signing.errors import EncodingError
from deusd_signing.schemas import Order, OrderType
from deusd_signing.type_tag import canonical_type_tag

logger = logging.getLogger(__name__)

# Two distinct labels; collapsing them breaks verification on chain.
MINTING_DOMAIN_LABEL = "deusd_minting"
ORDER_DOMAIN_LABEL = "deusd_order"

DIGEST_LENGTH = 32


def calculate_domain_separator(package_id: str) -> bytes:
    """keccak256 of the package address bytes followed by the minting label."""
    data = (
        BcsWriter()
        .write_address(package_id, "package_id")
        .write_raw(MINTING_DOMAIN_LABEL.encode("ascii"), "domain_label")
        .to_bytes()
    )
    separator = keccak(data)
    logger.debug("[DOMAIN] package=%s separator=%s", package_id, separator.hex())
    return separator


def encode_order(order: Order, domain_separator: bytes) -> bytes:
    """Exact preimage of the order hash."""
    if not isinstance(domain_separator, (bytes, bytearray)) or len(domain_separator) != DIGEST_LENGTH:
        raise EncodingError(
            f"domain_separator must be {DIGEST_LENGTH} bytes",
            {"field": "domain_separator", "value": repr(domain_separator)},
        )

    # type_name::get<T>() string for the collateral, as a vector<u8>
    collateral_type = canonical_type_tag(order.collateral_type).encode("utf-8")

    w = BcsWriter()
    w.write_raw(domain_separator, "domain_separator")
    w.write_raw(ORDER_DOMAIN_LABEL.encode("ascii"), "order_label")
    w.write_u8(int(order.kind), "kind")
    w.write_u64(order.expiry, "expiry")
    w.write_u64(order.nonce, "nonce")
    w.write_address(order.benefactor, "benefactor")
    w.write_address(order.beneficiary, "beneficiary")
    w.write_bytes_vector(collateral_type, "collateral_type")
    w.write_u64(order.collateral_amount, "collateral_amount")
    w.write_u64(order.deusd_amount, "deusd_amount")
    return w.to_bytes()


def hash_order(order: Order, domain_separator: bytes) -> bytes:
    """keccak256 digest the verifier signs against."""
    preimage = encode_order(order, domain_separator)
    digest = keccak(preimage)
    logger.info(
        "[ORDER] kind=%s nonce=%s digest=%s",
        OrderType(order.kind).name, order.nonce, digest.hex(),
    )
    logger.debug("[ORDER] preimage=%s", preimage.hex())
    return digest
