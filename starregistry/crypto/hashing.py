# starregistry/crypto/hashing.py
import hashlib
from typing import Any, Dict, Optional

from starregistry.core.canon import canonical_json


def hash_payload(block: Any) -> Dict[str, Any]:
    """Every block field except the digest itself, keyed by wire name."""
    return {
        "height": block.height,
        "previousBlockHash": block.previous_block_hash,
        "timestamp": block.timestamp,
        "body": block.body,
    }


def block_hash(block: Any) -> str:
    """hex(sha256(canonical_json(fields without hash)))"""
    return hashlib.sha256(canonical_json(hash_payload(block))).hexdigest()


def short_hash(value: Optional[str], n: int = 12) -> str:
    if not value:
        return "—"
    return value[:n]
