"""
Utility Functions

Hex rendering and parsing helpers shared by the tree, proof and logging code.
"""

from .hex_helpers import (
    bytes_to_hex,
    short_hex,
    hex_to_bytes,
    format_path,
)

__all__ = [
    'bytes_to_hex',
    'short_hex',
    'hex_to_bytes',
    'format_path',
]
