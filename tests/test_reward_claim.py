"""
Reward claim tests - payload layout, hashing and claim call rendering.
"""

import pytest
from eth_utils import keccak

from deusd_signing.bcs import address_bytes
from deusd_signing.errors import EncodingError, KeyUnavailable, MalformedTypeTag
from deusd_signing.keys import verify_signature
from deusd_signing.order_hash import calculate_domain_separator, encode_order
from deusd_signing.reward_claim import (
    build_claim_rewards_call, encode_reward_claim, hash_reward_claim, sign_reward_claim,
)
from deusd_signing.schemas import RewardClaimPayload

from conftest import BENEFACTOR, PACKAGE_ID


class TestRewardClaim:

    @pytest.mark.vectors
    def test_payload_layout(self):
        payload = RewardClaimPayload(pool="0x5", receiver="0x6", amount=10, nonce=1 << 64)
        expected = (
            address_bytes("0x5")
            + address_bytes("0x6")
            + bytes.fromhex("0a00000000000000")
            + bytes.fromhex("00000000000000000100000000000000")
        )
        assert encode_reward_claim(payload) == expected
        assert hash_reward_claim(payload) == keccak(expected)

    def test_no_order_label_in_payload(self, sample_claim):
        assert b"deusd" not in encode_reward_claim(sample_claim)

    @pytest.mark.parametrize("update", [
        {"pool": "0x7"}, {"receiver": "0x8"}, {"amount": 11}, {"nonce": 8},
    ])
    def test_field_sensitivity(self, sample_claim, update):
        assert hash_reward_claim(sample_claim.model_copy(update=update)) != hash_reward_claim(sample_claim)

    @pytest.mark.parametrize("field,value", [("amount", 1 << 64), ("nonce", 1 << 128), ("nonce", -1)])
    def test_width_violations(self, sample_claim, field, value):
        with pytest.raises(EncodingError) as exc:
            encode_reward_claim(sample_claim.model_copy(update={field: value}))
        assert exc.value.details["field"] == field

    def test_sign_roundtrip(self, sample_claim, any_provider):
        signed = sign_reward_claim(sample_claim, any_provider)
        assert signed.payload_bytes == encode_reward_claim(sample_claim)
        assert signed.digest == hash_reward_claim(sample_claim)
        assert verify_signature(signed.scheme, signed.digest, signed.signature, signed.public_key)

    def test_claim_digest_never_collides_with_order_digest(self, sample_claim, sample_order):
        order_preimage = encode_order(sample_order, calculate_domain_separator(PACKAGE_ID))
        assert encode_reward_claim(sample_claim) != order_preimage

    def test_sign_without_key(self, sample_claim):
        with pytest.raises(KeyUnavailable):
            sign_reward_claim(sample_claim, None)


class TestClaimCall:

    def test_call_layout(self, sample_claim, secp_provider):
        signed = sign_reward_claim(sample_claim, secp_provider)
        call = build_claim_rewards_call(PACKAGE_ID, "0x5", "0x2::sui::SUI", signed)
        assert call.target == f"{PACKAGE_ID}::distributor::claim_rewards"
        assert call.type_arguments == ("0x2::sui::SUI",)
        pool, payload, signature = call.arguments
        assert pool.kind == "object" and pool.value == "0x" + "0" * 63 + "5"
        assert payload.value == bytes([len(signed.payload_bytes)]) + signed.payload_bytes
        assert signature.value == bytes([64]) + signed.signature
        assert len(signed.payload_bytes) == 88
        assert BENEFACTOR[2:] in signed.payload_bytes.hex()

    def test_pool_object_comes_from_pool_id(self, sample_claim, secp_provider):
        signed = sign_reward_claim(sample_claim, secp_provider)
        call = build_claim_rewards_call(PACKAGE_ID, "0xABC", "0x2::sui::SUI", signed)
        assert call.arguments[0].value == "0x" + "0" * 61 + "abc"
        # The signed payload is untouched by the pool argument
        assert call.arguments[1].value[1:] == signed.payload_bytes

    def test_bad_pool_id(self, sample_claim, secp_provider):
        signed = sign_reward_claim(sample_claim, secp_provider)
        with pytest.raises(EncodingError) as exc:
            build_claim_rewards_call(PACKAGE_ID, "0xzz", "0x2::sui::SUI", signed)
        assert exc.value.details["field"] == "pool_id"

    def test_bad_coin_type(self, sample_claim, secp_provider):
        signed = sign_reward_claim(sample_claim, secp_provider)
        with pytest.raises(MalformedTypeTag):
            build_claim_rewards_call(PACKAGE_ID, "0x5", "0x2::sui", signed)
