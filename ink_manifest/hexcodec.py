"""
Conversion between the wire form of the compiled module payload and bytes.

The payload travels as a JSON string of hex digits, optionally prefixed with
``0x``. Decoding accepts either digit case; encoding always emits the
canonical form: ``0x`` followed by lowercase digits.
"""
from __future__ import annotations

import binascii

HEX_PREFIX = "0x"


class HexDecodeError(ValueError):
    def __init__(self, value: str, reason: str):
        super().__init__(f"failed to decode hex string: {value}: {reason}")
        self.value = value
        self.reason = reason


def strip_hex_prefix(text: str) -> str:
    if text[:2].lower() == HEX_PREFIX:
        return text[2:]
    return text


def hex_to_bytes(text: str) -> bytes:
    digits = strip_hex_prefix(text)
    if not digits.isascii():
        raise HexDecodeError(text, "Non-hexadecimal digit found")
    try:
        return binascii.unhexlify(digits)
    except binascii.Error as e:
        raise HexDecodeError(text, str(e)) from e


def bytes_to_hex(data: bytes) -> str:
    return HEX_PREFIX + binascii.hexlify(bytes(data)).decode("ascii")
