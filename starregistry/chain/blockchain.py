# starregistry/chain/blockchain.py
import json
import logging
import threading
import time
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from starregistry.core.errors import AppendRejected, DecodeError
from starregistry.core.types import Block, Defect
from starregistry.verify.verifier import ChainValidator

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class Blockchain:
    """
    Owns the ordered, hash-linked list of blocks.
    Seeds the genesis block on construction; afterwards the chain only grows through append().
    All mutation happens under a single lock; reads work on snapshot copies.
    """

    def __init__(self, clock: Optional[Clock] = None, validator: Optional[ChainValidator] = None):
        self._clock: Clock = clock or time.time
        self._validator = validator or ChainValidator()
        self._lock = threading.Lock()
        self._blocks: List[Block] = []
        self._initialize_chain()

    def _initialize_chain(self) -> None:
        genesis = Block.genesis().seal(height=0, previous_block_hash=None, timestamp=self._now())
        self._blocks.append(genesis)
        logger.debug("Genesis block created: %s", genesis.hash)

    def _now(self) -> int:
        return int(self._clock())

    @property
    def length(self) -> int:
        with self._lock:
            return len(self._blocks)

    @property
    def tip(self) -> Block:
        with self._lock:
            return self._blocks[-1]

    def get_height(self) -> int:
        with self._lock:
            return len(self._blocks) - 1

    def append(self, block: Block) -> Block:
        """
        Seal ``block`` on top of the current tip and commit it.
        The prospective chain is validated before the list is touched; any defect
        raises AppendRejected and leaves the chain as it was.
        """
        if block.is_sealed:
            raise ValueError("Cannot append an already-sealed block")

        with self._lock:
            tip = self._blocks[-1]
            sealed = block.seal(
                height=len(self._blocks),
                previous_block_hash=tip.hash,
                timestamp=self._now(),
            )

            defects = self._validator.validate(self._blocks + [sealed]).defects
            if defects:
                logger.warning("Rejected block at height %d: %d defects", sealed.height, len(defects))
                raise AppendRejected(defects, height=sealed.height)

            self._blocks.append(sealed)

        logger.info("Appended block %d (%s)", sealed.height, sealed.hash)
        return sealed

    def get_chain(self) -> List[Block]:
        """Returns copy of the full chain (immutable view)"""
        with self._lock:
            return self._blocks.copy()

    def validate_chain(self) -> List[Defect]:
        return self._validator.validate(self.get_chain()).defects

    def get_block_by_height(self, height: int) -> Optional[Block]:
        if not isinstance(height, int) or isinstance(height, bool) or height < 0:
            return None
        chain = self.get_chain()
        if height >= len(chain):
            return None
        block = chain[height]
        return block if block.height == height else None

    def get_block_by_hash(self, block_hash: str) -> Optional[Block]:
        for block in self.get_chain():
            if block.hash == block_hash:
                return block
        return None

    # ── snapshot interchange (in-memory only, not persistence)

    def to_records(self) -> List[Dict[str, Any]]:
        return [b.to_dict() for b in self.get_chain()]

    @classmethod
    def from_records(cls, records: Iterable[Dict[str, Any]], clock: Optional[Clock] = None) -> "Blockchain":
        """
        Rebuild a chain from exported records exactly as given.
        Nothing is re-sealed, so validate_chain() reports any tampering in the data.
        """
        blocks = [Block.from_dict(r) for r in records]
        if not blocks:
            raise ValueError("Cannot rebuild a chain from zero records")
        chain = cls(clock=clock)
        with chain._lock:
            chain._blocks = blocks
        return chain


def write_snapshot(chain: Blockchain, path: Union[str, Path]) -> int:
    """Write the chain as JSONL (one block per line). Returns the number of blocks written."""
    records = chain.to_records()
    with open(path, "w", encoding="utf-8") as f:
        for record in records:
            json.dump(record, f, separators=(",", ":"))
            f.write("\n")
    return len(records)


def read_snapshot(path: Union[str, Path], clock: Optional[Clock] = None) -> Blockchain:
    records = []
    with open(path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError as e:
                raise DecodeError(f"Line {lineno} is not valid JSON: {e}") from e
    return Blockchain.from_records(records, clock=clock)
