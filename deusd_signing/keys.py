"""
Key providers for the two ledger signature schemes.

Secp256k1: SHA-256 prehash, deterministic ECDSA with low-S, 64-byte r||s,
           33-byte compressed public key (eth_keys).
ED25519:   signs the message directly, 64-byte signature, 32-byte public
           key (cryptography).

The on-chain verifier is handed (public_key, signature) and the digest it
recomputes itself; `verify_signature` mirrors that check locally.
"""
import hashlib
import logging
from typing import Optional, Protocol, runtime_checkable

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519
from eth_keys import keys
from eth_keys.exceptions import BadSignature, ValidationError
from hexbytes import HexBytes

from deusd_signing.errors import ConfigurationError, KeyUnavailable

logger = logging.getLogger(__name__)

ED25519 = "ED25519"
SECP256K1 = "Secp256k1"

# Ledger address = blake2b256(flag || public_key)
SCHEME_FLAGS = {ED25519: 0x00, SECP256K1: 0x01}

PRIVATE_KEY_LENGTH = 32
SIGNATURE_LENGTH = 64


def normalize_scheme(scheme: str) -> str:
    s = (scheme or "").strip().lower()
    if s == "ed25519":
        return ED25519
    if s == "secp256k1":
        return SECP256K1
    raise ConfigurationError(
        f"Unsupported signature scheme: {scheme!r}",
        {"field": "scheme", "value": scheme},
    )


def sui_address(scheme: str, public_key: bytes) -> str:
    flag = SCHEME_FLAGS[normalize_scheme(scheme)]
    h = hashlib.blake2b(bytes([flag]) + bytes(public_key), digest_size=32)
    return "0x" + h.hexdigest()


@runtime_checkable
class KeyProvider(Protocol):
    scheme: str

    def sign(self, message: bytes) -> bytes: ...
    def public_key(self) -> bytes: ...
    def sui_address(self) -> str: ...


class Secp256k1KeyProvider:
    scheme = SECP256K1

    def __init__(self, private_key: bytes):
        self._sk = keys.PrivateKey(bytes(private_key))

    def sign(self, message: bytes) -> bytes:
        msg_hash = hashlib.sha256(bytes(message)).digest()
        # eth_keys returns canonical low-S signatures; v is not transmitted
        sig = self._sk.sign_msg_hash(msg_hash)
        return sig.r.to_bytes(32, "big") + sig.s.to_bytes(32, "big")

    def public_key(self) -> bytes:
        return self._sk.public_key.to_compressed_bytes()

    def sui_address(self) -> str:
        return sui_address(self.scheme, self.public_key())


class Ed25519KeyProvider:
    scheme = ED25519

    def __init__(self, private_key: bytes):
        self._sk = ed25519.Ed25519PrivateKey.from_private_bytes(bytes(private_key))

    def sign(self, message: bytes) -> bytes:
        return self._sk.sign(bytes(message))

    def public_key(self) -> bytes:
        return self._sk.public_key().public_bytes(
            serialization.Encoding.Raw,
            serialization.PublicFormat.Raw,
        )

    def sui_address(self) -> str:
        return sui_address(self.scheme, self.public_key())


def key_provider_from_private_key(key: str, scheme: str = SECP256K1) -> KeyProvider:
    """Build a provider from a 32-byte hex secret (0x prefix optional)."""
    scheme = normalize_scheme(scheme)
    try:
        raw = bytes(HexBytes(key))
    except (ValueError, TypeError) as e:
        raise ConfigurationError("Private key is not valid hex", {"field": "private_key"}) from e
    if len(raw) != PRIVATE_KEY_LENGTH:
        raise ConfigurationError(
            f"Private key must be {PRIVATE_KEY_LENGTH} bytes, got {len(raw)}",
            {"field": "private_key", "length": len(raw)},
        )
    try:
        provider = Secp256k1KeyProvider(raw) if scheme == SECP256K1 else Ed25519KeyProvider(raw)
    except (ValidationError, ValueError) as e:
        raise ConfigurationError("Provided key is invalid", {"field": "private_key", "scheme": scheme}) from e
    logger.info("[KEYS] loaded %s signer address=%s", scheme, provider.sui_address())
    return provider


def sign_digest(digest: bytes, provider: Optional[KeyProvider]) -> bytes:
    """Sign a digest; fails with KeyUnavailable when no key is configured."""
    if provider is None:
        raise KeyUnavailable("Keypair not provided", {"digest": bytes(digest).hex()})
    signature = provider.sign(digest)
    logger.debug("[KEYS] signed digest=%s scheme=%s", bytes(digest).hex(), provider.scheme)
    return signature


def _verify_secp256k1(message: bytes, signature: bytes, public_key: bytes) -> bool:
    try:
        pub = keys.PublicKey.from_compressed_bytes(bytes(public_key))
        r = int.from_bytes(signature[:32], "big")
        s = int.from_bytes(signature[32:], "big")
        # v only matters for recovery; verification uses r, s
        sig = keys.Signature(vrs=(0, r, s))
        return pub.verify_msg_hash(hashlib.sha256(bytes(message)).digest(), sig)
    except (BadSignature, ValidationError, ValueError):
        return False


def _verify_ed25519(message: bytes, signature: bytes, public_key: bytes) -> bool:
    try:
        pub = ed25519.Ed25519PublicKey.from_public_bytes(bytes(public_key))
        pub.verify(bytes(signature), bytes(message))
        return True
    except (InvalidSignature, ValueError):
        return False


def verify_signature(scheme: str, message: bytes, signature: bytes, public_key: bytes) -> bool:
    """Local mirror of the on-chain check. Never raises on malformed bytes."""
    if len(signature) != SIGNATURE_LENGTH:
        return False
    if normalize_scheme(scheme) == SECP256K1:
        return _verify_secp256k1(message, signature, public_key)
    return _verify_ed25519(message, signature, public_key)
