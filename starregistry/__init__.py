# starregistry/__init__.py
"""
starregistry — append-only, hash-linked registry of star ownership claims.
Each entry is gated by a time-boxed challenge signed with the owner's wallet key.
"""

from starregistry.chain.blockchain import Blockchain
from starregistry.core.config import RegistryConfig
from starregistry.core.errors import (
    AppendRejected,
    DecodeError,
    ExpiredChallenge,
    MalformedChallenge,
    SignatureVerificationFailed,
    StarRegistryError,
)
from starregistry.core.types import Block, Defect, StarRecord
from starregistry.crypto.signing import WalletKey
from starregistry.registry import StarRegistry

__version__ = "0.1.0-dev"

__all__ = [
    "AppendRejected",
    "Block",
    "Blockchain",
    "DecodeError",
    "Defect",
    "ExpiredChallenge",
    "MalformedChallenge",
    "RegistryConfig",
    "SignatureVerificationFailed",
    "StarRecord",
    "StarRegistry",
    "StarRegistryError",
    "WalletKey",
]
