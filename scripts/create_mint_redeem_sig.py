#!/usr/bin/env python3
"""
Create a mint/redeem order signature from environment config.

Order fields come from ORDER_* env vars (defaults reproduce the reference
MINT order). Prints digest, public key, signer address and signature as JSON.
"""
import json
import os
import sys
import time

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from deusd_signing.config import build_signer, load_config, redacted
from deusd_signing.errors import (
    ConfigurationError,
    DeusdSigningError,
    KeyUnavailable,
    create_structured_error_response,
)
from deusd_signing.logs import setup_logging
from deusd_signing.schemas import Order, OrderType


def order_from_env(default_address: str) -> Order:
    kind = os.getenv("ORDER_KIND", "MINT").strip().upper()
    expiry = os.getenv("ORDER_EXPIRY")
    return Order(
        kind=OrderType[kind],
        expiry=int(expiry) if expiry else int(time.time()) + 10 * 60,  # 10 minutes from now
        nonce=int(os.getenv("ORDER_NONCE", "1")),
        benefactor=os.getenv("ORDER_BENEFACTOR", default_address),
        beneficiary=os.getenv("ORDER_BENEFICIARY") or os.getenv("ORDER_BENEFACTOR", default_address),
        collateral_type=os.getenv("ORDER_COLLATERAL_TYPE", "0x2::sui::SUI"),
        collateral_amount=int(os.getenv("ORDER_COLLATERAL_AMOUNT", "1")),
        deusd_amount=int(os.getenv("ORDER_DEUSD_AMOUNT", "1000000000")),
    )


def main() -> int:
    setup_logging(log_dir=os.getenv("LOG_DIR"))
    cfg = load_config()
    print(json.dumps(redacted(cfg), indent=2), file=sys.stderr)

    try:
        signer = build_signer(cfg)
        if signer.key_provider is None:
            # Without a key there is no default benefactor and nothing to sign with
            raise KeyUnavailable("Keypair not provided", {"field": "OWNER_KEY"})
        try:
            order = order_from_env(signer.key_provider.sui_address())
        except KeyError as e:
            raise ConfigurationError(
                f"Unknown ORDER_KIND {e}; expected one of {[k.name for k in OrderType]}",
                {"field": "ORDER_KIND"},
            ) from e
        except ValueError as e:
            # pydantic.ValidationError is a ValueError
            raise ConfigurationError(f"Invalid order input: {e}", {"field": "ORDER_*"}) from e
        signed = signer.sign_order(order)
    except DeusdSigningError as e:
        print(json.dumps(create_structured_error_response(e), indent=2), file=sys.stderr)
        return 1

    out = signed.to_dict()
    out["signer_address"] = signer.key_provider.sui_address()
    print(json.dumps(out, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
