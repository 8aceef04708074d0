# config.py
from dataclasses import dataclass
from typing import Literal, Optional
import os, sys
from dotenv import load_dotenv

from deusd_signing.errors import ConfigurationError
from deusd_signing.keys import KeyProvider, key_provider_from_private_key, normalize_scheme
from deusd_signing.schemas import MintingObjects
from deusd_signing.signer import OrderSigner

Network = Literal["mainnet", "testnet", "devnet", "localnet"]

FULLNODE_URLS = {
    "mainnet": "https://fullnode.mainnet.sui.io:443",
    "testnet": "https://fullnode.testnet.sui.io:443",
    "devnet": "https://fullnode.devnet.sui.io:443",
    "localnet": "http://127.0.0.1:9000",
}

@dataclass(frozen=True)
class SignerConfig:
    network: Network
    rpc_url: str
    package_id: str
    private_key: Optional[str]   # owner key; None for hash-only use
    wallet_scheme: str

@dataclass(frozen=True)
class AppConfig:
    signer: SignerConfig
    objects: Optional[MintingObjects]

def _require(name: str) -> str:
    v = os.getenv(name)
    if not v:
        print(f"[CONFIG] Missing env var: {name}", file=sys.stderr)
        raise SystemExit(2)
    return v

def _load_objects() -> Optional[MintingObjects]:
    names = (
        "DEUSD_MINTING_MANAGEMENT_ID",
        "LOCKED_FUNDS_MANAGEMENT_ID",
        "DEUSD_CONFIG_ID",
        "GLOBAL_CONFIG_ID",
    )
    values = [os.getenv(n) for n in names]
    if not any(values):
        return None
    if not all(values):
        missing = [n for n, v in zip(names, values) if not v]
        raise SystemExit(f"[CONFIG] Minting object ids partially set, missing: {', '.join(missing)}")
    return MintingObjects(
        management_id=values[0],
        locked_funds_management_id=values[1],
        deusd_config_id=values[2],
        global_config_id=values[3],
    )

def load_config(dotenv_path: Optional[str] = None) -> AppConfig:
    load_dotenv(dotenv_path)  # local runs; deployments pass envs directly

    network = os.getenv("SUI_NETWORK", "testnet").lower()
    if network not in FULLNODE_URLS:
        raise SystemExit(f"[CONFIG] SUI_NETWORK must be one of {', '.join(FULLNODE_URLS)}")

    scheme = os.getenv("OWNER_WALLET_SCHEME", "Secp256k1")
    try:
        scheme = normalize_scheme(scheme)
    except ConfigurationError:
        raise SystemExit(f"[CONFIG] OWNER_WALLET_SCHEME must be ED25519 or Secp256k1, got {scheme!r}")

    return AppConfig(
        signer=SignerConfig(
            network=network,
            rpc_url=os.getenv("SUI_RPC_URL") or FULLNODE_URLS[network],
            package_id=_require("DEUSD_PACKAGE_ID"),
            private_key=os.getenv("OWNER_KEY") or None,
            wallet_scheme=scheme,
        ),
        objects=_load_objects(),
    )

def build_signer(cfg: AppConfig) -> OrderSigner:
    """Construct the signer explicitly from config; no process-wide singleton."""
    provider: Optional[KeyProvider] = None
    if cfg.signer.private_key:
        provider = key_provider_from_private_key(cfg.signer.private_key, cfg.signer.wallet_scheme)
    return OrderSigner(cfg.signer.package_id, provider)

def redacted(cfg: AppConfig) -> dict:
    pkg = cfg.signer.package_id
    return {
        "signer": {
            "network": cfg.signer.network,
            "rpc_url": cfg.signer.rpc_url,
            "package_id": pkg[:6] + "..." + pkg[-4:],
            "private_key": "***redacted***" if cfg.signer.private_key else None,
            "wallet_scheme": cfg.signer.wallet_scheme,
        },
        "objects": cfg.objects.model_dump() if cfg.objects else None,
    }
