"""
Reward claim payloads for the distributor module.

The payload is the BCS struct (pool: address, receiver: address,
amount: u64, nonce: u128). The controller signs keccak256 of those bytes;
the claimant submits the raw payload bytes together with the signature.
"""
import logging
from dataclasses import dataclass

from eth_utils import keccak

from deusd_signing.bcs import BcsWriter, normalize_address, ser_bytes_vector
from deusd_signing.keys import KeyProvider, sign_digest
from deusd_signing.schemas import RewardClaimPayload
from deusd_signing.signer import CallArg, MoveCall
from deusd_signing.type_tag import canonical_type_tag

logger = logging.getLogger(__name__)

DISTRIBUTOR_MODULE = "distributor"


@dataclass(frozen=True)
class SignedRewardClaim:
    payload: RewardClaimPayload
    payload_bytes: bytes
    digest: bytes
    public_key: bytes
    signature: bytes
    scheme: str


def encode_reward_claim(payload: RewardClaimPayload) -> bytes:
    return (
        BcsWriter()
        .write_address(payload.pool, "pool")
        .write_address(payload.receiver, "receiver")
        .write_u64(payload.amount, "amount")
        .write_u128(payload.nonce, "nonce")
        .to_bytes()
    )


def hash_reward_claim(payload: RewardClaimPayload) -> bytes:
    digest = keccak(encode_reward_claim(payload))
    logger.info("[REWARD] pool=%s nonce=%s digest=%s", payload.pool, payload.nonce, digest.hex())
    return digest


def sign_reward_claim(payload: RewardClaimPayload, provider: KeyProvider) -> SignedRewardClaim:
    payload_bytes = encode_reward_claim(payload)
    digest = keccak(payload_bytes)
    signature = sign_digest(digest, provider)
    return SignedRewardClaim(
        payload=payload,
        payload_bytes=payload_bytes,
        digest=digest,
        public_key=provider.public_key(),
        signature=signature,
        scheme=provider.scheme,
    )


def build_claim_rewards_call(
    package_id: str, pool_id: str, reward_coin_type: str, signed: SignedRewardClaim
) -> MoveCall:
    """`distributor::claim_rewards<Coin>(pool, payload, signature)` against the `pool_id` object."""
    package_id = normalize_address(package_id, "package_id")
    pool_id = normalize_address(pool_id, "pool_id")
    # Validates the coin type; the ledger client takes it as given
    canonical_type_tag(reward_coin_type)
    return MoveCall(
        target=f"{package_id}::{DISTRIBUTOR_MODULE}::claim_rewards",
        type_arguments=(reward_coin_type,),
        arguments=(
            CallArg.object(pool_id),
            CallArg.pure(ser_bytes_vector(signed.payload_bytes, "payload")),
            CallArg.pure(ser_bytes_vector(signed.signature, "signature")),
        ),
    )
