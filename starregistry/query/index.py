# starregistry/query/index.py
from typing import List, Tuple

from starregistry.chain.blockchain import Blockchain
from starregistry.core.types import Block, StarRecord


class StarIndex:
    """Owner-indexed read views over a chain snapshot."""

    def __init__(self, chain: Blockchain):
        self.chain = chain

    def _owned(self, address: str) -> List[Tuple[Block, StarRecord]]:
        # every body is decoded before anything is returned; a DecodeError aborts the whole query
        decoded = [(block, block.decode_body()) for block in self.chain.get_chain()]
        return [
            (block, StarRecord.from_record(record))
            for block, record in decoded
            if not block.is_genesis and record.get("owner") == address
        ]

    def get_stars_by_wallet_address(self, address: str) -> List[StarRecord]:
        return [record for _, record in self._owned(address)]

    def get_blocks_by_wallet_address(self, address: str) -> List[Block]:
        return [block for block, _ in self._owned(address)]
