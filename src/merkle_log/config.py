"""
Merkle Log Configuration

Settings are read from the environment (optionally seeded from a local
.env file) and validated with pydantic. The only tunable today is the hash
algorithm backing leaf and node digests.

Environment:
    MERKLE_HASH_ALGORITHM: hashlib algorithm name (default: sha256)
"""

import hashlib
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from .constants import DEFAULT_HASH_ALGORITHM, HASH_ALGORITHM_ENV

# Load environment variables
load_dotenv()


def validate_algorithm(name: str) -> str:
    """
    Check that a hashlib algorithm exists and has a fixed digest size.

    Args:
        name: Algorithm name as accepted by hashlib.new

    Returns:
        The normalized (lower-case) algorithm name

    Raises:
        ValueError: If the algorithm is unknown or variable-length (SHAKE)
    """
    normalized = name.strip().lower()
    try:
        digest_size = hashlib.new(normalized).digest_size
    except (ValueError, TypeError):
        raise ValueError(f"Unknown algorithm: {name}") from None
    if digest_size == 0:
        raise ValueError(f"Algorithm has no fixed digest size: {name}")
    return normalized


class MerkleSettings(BaseModel):
    """
    Runtime settings for Merkle tree hashing.

    Attributes:
        hash_algorithm: hashlib algorithm used for leaf and node digests
    """
    hash_algorithm: str = Field(
        default=DEFAULT_HASH_ALGORITHM,
        description="hashlib algorithm used for leaf and node digests",
    )

    @field_validator("hash_algorithm")
    @classmethod
    def check_hash_algorithm(cls, v):
        return validate_algorithm(v)


def load_settings() -> MerkleSettings:
    """Build settings from the current environment."""
    return MerkleSettings(
        hash_algorithm=os.getenv(HASH_ALGORITHM_ENV, DEFAULT_HASH_ALGORITHM)
    )
