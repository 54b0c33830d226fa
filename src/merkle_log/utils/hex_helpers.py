"""
Hex String Utilities

Helpers for rendering digests and proof paths as hex strings (log records,
reprs) and for parsing hex-encoded digests back into bytes.
"""

from typing import Iterable, List, Optional


def bytes_to_hex(data: bytes, prefix: bool = True) -> str:
    """
    Convert bytes to a hex string.

    Args:
        data: Bytes to convert
        prefix: Whether to include '0x' prefix

    Returns:
        Hex string representation

    Examples:
        >>> bytes_to_hex(b'\\x12\\x34')
        "0x1234"
        >>> bytes_to_hex(b'\\x12\\x34', prefix=False)
        "1234"
    """
    hex_str = bytes(data).hex()
    return f"0x{hex_str}" if prefix else hex_str


def short_hex(data: bytes, length: int = 8) -> str:
    """Abbreviated hex form of a digest for log lines."""
    hex_str = bytes(data).hex()
    if len(hex_str) <= length:
        return hex_str
    return f"{hex_str[:length]}.."


def hex_to_bytes(hex_str: str, expected_bytes: Optional[int] = None) -> bytes:
    """
    Convert a hex string to bytes.

    Args:
        hex_str: Hex string (with or without '0x' prefix)
        expected_bytes: Optional expected byte length for validation

    Returns:
        Bytes representation of the hex string

    Raises:
        ValueError: If the string is not valid hex or has the wrong length

    Examples:
        >>> hex_to_bytes("0x1234")
        b'\\x12\\x34'
    """
    if hex_str.startswith("0x"):
        hex_str = hex_str[2:]

    # Pad to even length
    if len(hex_str) % 2 == 1:
        hex_str = "0" + hex_str

    data = bytes.fromhex(hex_str)
    if expected_bytes is not None and len(data) != expected_bytes:
        raise ValueError(f"Expected {expected_bytes} bytes, got {len(data)} bytes")
    return data


def format_path(path: Iterable[bytes]) -> List[str]:
    """Render each digest of a proof path as a short hex string."""
    return [short_hex(p) for p in path]
