# starregistry/registry.py
from typing import Any, Callable, List, Optional

from starregistry.chain.blockchain import Blockchain
from starregistry.core.config import RegistryConfig
from starregistry.core.types import Block, Defect, StarRecord
from starregistry.query.index import StarIndex
from starregistry.verify.ownership import OwnershipVerifier


class StarRegistry:
    """
    The registry's public operation set.
    Front ends (HTTP, CLI, ...) translate to and from these calls.
    """

    def __init__(
        self,
        config: Optional[RegistryConfig] = None,
        clock: Optional[Callable[[], float]] = None,
        chain: Optional[Blockchain] = None,
    ):
        self.config = config or RegistryConfig.from_env()
        self.chain = chain or Blockchain(clock=clock)
        self.verifier = OwnershipVerifier(self.chain, config=self.config, clock=clock)
        self.index = StarIndex(self.chain)

    def get_chain_height(self) -> int:
        return self.chain.get_height()

    def request_message_ownership_verification(self, address: str) -> str:
        return self.verifier.request_message(address)

    def submit_star(self, address: str, message: str, signature: str, star: Any) -> Block:
        return self.verifier.submit_star(address, message, signature, star)

    def get_block_by_hash(self, block_hash: str) -> Optional[Block]:
        return self.chain.get_block_by_hash(block_hash)

    def get_block_by_height(self, height: int) -> Optional[Block]:
        return self.chain.get_block_by_height(height)

    def get_stars_by_wallet_address(self, address: str) -> List[StarRecord]:
        return self.index.get_stars_by_wallet_address(address)

    def validate_chain(self) -> List[Defect]:
        return self.chain.validate_chain()
