"""
Order signer bound to one deUSD minting deployment.

Holds the package id, its cached domain separator and an optional key
provider. Produces the (order, public key, signature) tuple the ledger
client submits, and can render it as a `deusd_minting::mint` call
description. Nothing here talks to the network.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from deusd_signing.bcs import BcsWriter, normalize_address, ser_address, ser_bytes_vector, ser_u64
from deusd_signing.errors import EncodingError
from deusd_signing.keys import KeyProvider, sign_digest
from deusd_signing.order_hash import calculate_domain_separator, hash_order
from deusd_signing.schemas import MintingObjects, Order, OrderType, RouteConfig

logger = logging.getLogger(__name__)

MINTING_MODULE = "deusd_minting"
CLOCK_OBJECT_ID = "0x6"


@dataclass(frozen=True)
class CallArg:
    """Either a shared/owned object id or BCS-encoded pure bytes."""
    kind: str  # "object" | "pure"
    value: Union[str, bytes]

    @classmethod
    def object(cls, object_id: str) -> "CallArg":
        return cls("object", normalize_address(object_id, "object_id"))

    @classmethod
    def pure(cls, data: bytes) -> "CallArg":
        return cls("pure", bytes(data))


@dataclass(frozen=True)
class MoveCall:
    target: str
    type_arguments: Tuple[str, ...]
    arguments: Tuple[CallArg, ...]


@dataclass(frozen=True)
class SignedOrder:
    order: Order
    digest: bytes
    public_key: bytes
    signature: bytes
    scheme: str

    def to_dict(self) -> dict:
        return {
            "order": self.order.model_dump(mode="json"),
            "digest": "0x" + self.digest.hex(),
            "public_key": "0x" + self.public_key.hex(),
            "signature": "0x" + self.signature.hex(),
            "scheme": self.scheme,
        }


class OrderSigner:
    """Hashes and signs orders for a single package deployment."""

    def __init__(self, package_id: str, key_provider: Optional[KeyProvider] = None):
        self.package_id = normalize_address(package_id, "package_id")
        self.key_provider = key_provider
        # Written once here, read-only afterwards
        self._domain_separator = calculate_domain_separator(self.package_id)
        logger.info("[SIGNER] package=%s domain_separator=%s", self.package_id, self._domain_separator.hex())

    @property
    def domain_separator(self) -> bytes:
        return self._domain_separator

    def for_package(self, package_id: str) -> "OrderSigner":
        """Same key, different deployment."""
        return OrderSigner(package_id, self.key_provider)

    def hash_order(self, order: Order) -> bytes:
        return hash_order(order, self._domain_separator)

    def sign_order(self, order: Order) -> SignedOrder:
        digest = self.hash_order(order)
        signature = sign_digest(digest, self.key_provider)
        return SignedOrder(
            order=order,
            digest=digest,
            public_key=self.key_provider.public_key(),
            signature=signature,
            scheme=self.key_provider.scheme,
        )

    def build_mint_call(self, signed: SignedOrder, objects: MintingObjects, route: RouteConfig) -> MoveCall:
        """Argument list of `deusd_minting::mint<Collateral>`, pure values BCS-encoded."""
        order = signed.order
        if order.kind != OrderType.MINT:
            raise EncodingError(
                "Only MINT orders can be rendered as a mint call",
                {"field": "kind", "value": int(order.kind)},
            )

        route_addresses = BcsWriter().write_address_vector(route.addresses, "route.addresses").to_bytes()
        route_ratios = BcsWriter().write_u64_vector(route.ratios, "route.ratios").to_bytes()

        arguments: List[CallArg] = [
            CallArg.object(objects.management_id),
            CallArg.object(objects.locked_funds_management_id),
            CallArg.object(objects.deusd_config_id),
            CallArg.object(objects.global_config_id),
            CallArg.pure(ser_u64(order.expiry, "expiry")),
            CallArg.pure(ser_u64(order.nonce, "nonce")),
            CallArg.pure(ser_address(order.benefactor, "benefactor")),
            CallArg.pure(ser_address(order.beneficiary, "beneficiary")),
            CallArg.pure(ser_u64(order.collateral_amount, "collateral_amount")),
            CallArg.pure(ser_u64(order.deusd_amount, "deusd_amount")),
            CallArg.pure(route_addresses),
            CallArg.pure(route_ratios),
            CallArg.pure(ser_bytes_vector(signed.public_key, "public_key")),
            CallArg.pure(ser_bytes_vector(signed.signature, "signature")),
            CallArg.object(CLOCK_OBJECT_ID),
        ]
        return MoveCall(
            target=f"{self.package_id}::{MINTING_MODULE}::mint",
            type_arguments=(order.collateral_type,),
            arguments=tuple(arguments),
        )
