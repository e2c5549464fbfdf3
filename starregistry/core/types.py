# starregistry/core/types.py
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from starregistry.core.encoding import decode_body, encode_body
from starregistry.core.errors import DecodeError
from starregistry.crypto.hashing import block_hash

GENESIS_RECORD: Dict[str, Any] = {"owner": None, "star": "Genesis Block"}


@dataclass(frozen=True)
class StarRecord:
    """Decoded ownership claim carried in a non-genesis block body."""
    owner: str
    signature: str
    message: str
    star: Any

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "StarRecord":
        try:
            return cls(
                owner=record["owner"],
                signature=record["signature"],
                message=record["message"],
                star=record["star"],
            )
        except KeyError as e:
            raise DecodeError(f"Star record missing field {e}") from e

    def to_dict(self) -> dict:
        return {
            "owner": self.owner,
            "signature": self.signature,
            "message": self.message,
            "star": self.star,
        }


@dataclass(frozen=True)
class Defect:
    """A chain integrity violation found by whole-chain validation."""
    height: int
    message: str
    category: str = "hash"  # "hash", "linkage" or "height"


@dataclass(frozen=True)
class Block:
    """
    One entry in the registry chain.

    Built from a body only; the chain seals it, which fills in height, linkage,
    timestamp and the digest over all of those plus the body.
    """
    body: str
    height: Optional[int] = None
    hash: Optional[str] = None
    previous_block_hash: Optional[str] = None
    timestamp: Optional[int] = None

    @classmethod
    def genesis(cls) -> "Block":
        return cls(body=encode_body(GENESIS_RECORD))

    @classmethod
    def for_star(cls, owner: str, signature: str, message: str, star: Any) -> "Block":
        record = StarRecord(owner=owner, signature=signature, message=message, star=star)
        return cls(body=encode_body(record.to_dict()))

    @property
    def is_sealed(self) -> bool:
        return self.hash is not None

    @property
    def is_genesis(self) -> bool:
        return self.height == 0

    def seal(self, height: int, previous_block_hash: Optional[str], timestamp: int) -> "Block":
        """Return a copy with linkage fields set and the digest computed over them."""
        if self.is_sealed:
            raise ValueError(f"Block at height {self.height} is already sealed")
        unsealed = replace(
            self,
            height=height,
            previous_block_hash=previous_block_hash,
            timestamp=timestamp,
        )
        return replace(unsealed, hash=block_hash(unsealed))

    def decode_body(self) -> Dict[str, Any]:
        """Decoded body record. Genesis yields the sentinel literal."""
        record = decode_body(self.body)
        if self.is_genesis:
            return dict(GENESIS_RECORD)
        return record

    def star_record(self) -> Optional[StarRecord]:
        if self.is_genesis:
            return None
        return StarRecord.from_record(self.decode_body())

    def self_validate(self) -> bool:
        """True iff the stored digest matches one recomputed over the other fields."""
        if self.hash is None:
            return False
        try:
            return block_hash(self) == self.hash
        except Exception:
            # unhashable field values count as a mismatch
            return False

    def to_dict(self) -> dict:
        return {
            "height": self.height,
            "hash": self.hash,
            "previousBlockHash": self.previous_block_hash,
            "timestamp": self.timestamp,
            "body": self.body,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Block":
        if not isinstance(d, dict):
            raise DecodeError(f"Block record must be an object, got {type(d).__name__}")
        try:
            return cls(
                body=d["body"],
                height=d.get("height"),
                hash=d.get("hash"),
                previous_block_hash=d.get("previousBlockHash"),
                timestamp=d.get("timestamp"),
            )
        except KeyError as e:
            raise DecodeError(f"Block record missing field {e}") from e
