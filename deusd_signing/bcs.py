"""
Canonical binary encoder (BCS) for values the on-chain verifier re-encodes.

Integers are little-endian in their declared width, addresses are their raw
32 bytes, and variable-length sequences carry a ULEB128 length prefix.
Callers sequence the fields; the writer only guarantees each value has one
valid byte form.
"""
from typing import Iterable, List

from deusd_signing.errors import EncodingError

ADDRESS_LENGTH = 32
ADDRESS_HEX_LENGTH = ADDRESS_LENGTH * 2

U64_MAX = (1 << 64) - 1
U128_MAX = (1 << 128) - 1

_HEX_DIGITS = set("0123456789abcdef")


def _check_uint(value: int, bits: int, field: str) -> int:
    # bool is an int subclass; reject it so True never encodes as 1
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingError(
            f"{field} must be an unsigned integer, got {type(value).__name__}",
            {"field": field, "value": repr(value), "bits": bits},
        )
    if value < 0 or value >= (1 << bits):
        raise EncodingError(
            f"{field} does not fit in u{bits}: {value}",
            {"field": field, "value": value, "bits": bits},
        )
    return value


def uleb128_encode(n: int, field: str = "length") -> bytes:
    """
    Encode a length prefix as ULEB128 (7 bits per byte, MSB continuation).

        0   -> b'\\x00'
        127 -> b'\\x7f'
        128 -> b'\\x80\\x01'
    """
    n = _check_uint(n, 32, field)
    out = bytearray()
    while True:
        to_write = n & 0x7F
        n >>= 7
        if n:
            out.append(to_write | 0x80)
        else:
            out.append(to_write)
            return bytes(out)


def normalize_address(address: str, field: str = "address") -> str:
    """Lowercase, zero-pad to 64 hex digits and prefix with 0x."""
    if not isinstance(address, str):
        raise EncodingError(
            f"{field} must be a hex string, got {type(address).__name__}",
            {"field": field, "value": repr(address)},
        )
    hex_part = address.strip().lower()
    if hex_part.startswith("0x"):
        hex_part = hex_part[2:]
    if not hex_part or len(hex_part) > ADDRESS_HEX_LENGTH or not set(hex_part) <= _HEX_DIGITS:
        raise EncodingError(
            f"{field} is not a valid {ADDRESS_LENGTH}-byte address: {address!r}",
            {"field": field, "value": address},
        )
    return "0x" + hex_part.rjust(ADDRESS_HEX_LENGTH, "0")


def address_bytes(address: str, field: str = "address") -> bytes:
    """Raw 32-byte form of an address."""
    return bytes.fromhex(normalize_address(address, field)[2:])


class BcsWriter:
    """
    Append-only buffer of canonically encoded values.

    Each write_* validates its value before touching the buffer, so a failed
    write leaves previously written bytes intact and appends nothing.
    """

    __slots__ = ("_buf",)

    def __init__(self) -> None:
        self._buf = bytearray()

    def write_raw(self, data: bytes, field: str = "raw") -> "BcsWriter":
        """Append bytes as-is, without a length prefix."""
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise EncodingError(
                f"{field} must be bytes, got {type(data).__name__}",
                {"field": field, "value": repr(data)},
            )
        self._buf += bytes(data)
        return self

    def write_uleb128(self, n: int, field: str = "length") -> "BcsWriter":
        self._buf += uleb128_encode(n, field)
        return self

    def write_u8(self, value: int, field: str = "u8") -> "BcsWriter":
        self._buf += _check_uint(value, 8, field).to_bytes(1, "little")
        return self

    def write_u64(self, value: int, field: str = "u64") -> "BcsWriter":
        self._buf += _check_uint(value, 64, field).to_bytes(8, "little")
        return self

    def write_u128(self, value: int, field: str = "u128") -> "BcsWriter":
        self._buf += _check_uint(value, 128, field).to_bytes(16, "little")
        return self

    def write_address(self, address: str, field: str = "address") -> "BcsWriter":
        self._buf += address_bytes(address, field)
        return self

    def write_bytes_vector(self, data: bytes, field: str = "bytes") -> "BcsWriter":
        """vector<u8>: ULEB128 length then the bytes."""
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise EncodingError(
                f"{field} must be bytes, got {type(data).__name__}",
                {"field": field, "value": repr(data)},
            )
        data = bytes(data)
        prefix = uleb128_encode(len(data), field)
        self._buf += prefix + data
        return self

    def write_address_vector(self, addresses: Iterable[str], field: str = "addresses") -> "BcsWriter":
        encoded: List[bytes] = [
            address_bytes(a, f"{field}[{i}]") for i, a in enumerate(addresses)
        ]
        self._buf += uleb128_encode(len(encoded), field) + b"".join(encoded)
        return self

    def write_u64_vector(self, values: Iterable[int], field: str = "values") -> "BcsWriter":
        encoded: List[bytes] = [
            _check_uint(v, 64, f"{field}[{i}]").to_bytes(8, "little") for i, v in enumerate(values)
        ]
        self._buf += uleb128_encode(len(encoded), field) + b"".join(encoded)
        return self

    def __len__(self) -> int:
        return len(self._buf)

    def to_bytes(self) -> bytes:
        return bytes(self._buf)


# Single-value helpers for pure call arguments

def ser_u8(value: int, field: str = "u8") -> bytes:
    return BcsWriter().write_u8(value, field).to_bytes()


def ser_u64(value: int, field: str = "u64") -> bytes:
    return BcsWriter().write_u64(value, field).to_bytes()


def ser_address(address: str, field: str = "address") -> bytes:
    return BcsWriter().write_address(address, field).to_bytes()


def ser_bytes_vector(data: bytes, field: str = "bytes") -> bytes:
    return BcsWriter().write_bytes_vector(data, field).to_bytes()
