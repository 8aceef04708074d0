"""
Struct type tags as the ledger runtime reflects them.

`type_name::get<T>()` on chain yields `<64 hex digits>::<module>::<name>`:
address zero-padded and lowercase, no 0x prefix. Collateral types given by
callers ("0x2::sui::SUI") are re-rendered into that exact string before
hashing.
"""
from dataclasses import dataclass

from deusd_signing.bcs import ADDRESS_HEX_LENGTH
from deusd_signing.errors import MalformedTypeTag

SEPARATOR = "::"

_HEX_DIGITS = set("0123456789abcdef")


@dataclass(frozen=True)
class StructTypeTag:
    address: str
    module: str
    name: str


def trim_0x_prefix(address: str) -> str:
    return address[2:] if address.startswith(("0x", "0X")) else address


def normalize_type_address(address: str) -> str:
    """Zero-padded lowercase hex, without 0x."""
    hex_part = trim_0x_prefix(address.strip()).lower()
    if not hex_part or len(hex_part) > ADDRESS_HEX_LENGTH or not set(hex_part) <= _HEX_DIGITS:
        raise MalformedTypeTag(
            f"Invalid address in type tag: {address!r}",
            {"field": "address", "value": address},
        )
    return hex_part.rjust(ADDRESS_HEX_LENGTH, "0")


def parse_struct_type(type_tag: str) -> StructTypeTag:
    """Split "0x123::module::Name" into its three parts."""
    if not isinstance(type_tag, str):
        raise MalformedTypeTag(
            f"Type tag must be a string, got {type(type_tag).__name__}",
            {"field": "collateral_type", "value": repr(type_tag)},
        )
    parts = type_tag.split(SEPARATOR)
    if len(parts) != 3:
        raise MalformedTypeTag(
            f'Invalid struct type format: {type_tag}. Expected format: "0x123::module::Name"',
            {"field": "collateral_type", "value": type_tag, "parts": len(parts)},
        )
    address, module, name = parts
    if not module or not name:
        raise MalformedTypeTag(
            f"Empty module or name in type tag: {type_tag}",
            {"field": "collateral_type", "value": type_tag},
        )
    return StructTypeTag(address=address, module=module, name=name)


def struct_type_string(tag: StructTypeTag) -> str:
    return SEPARATOR.join((normalize_type_address(tag.address), tag.module, tag.name))


def canonical_type_tag(type_tag: str) -> str:
    """Canonical on-chain rendering of a type tag string. Idempotent."""
    return struct_type_string(parse_struct_type(type_tag))
