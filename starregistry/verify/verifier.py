# starregistry/verify/verifier.py
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from starregistry.core.types import Block, Defect

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    defects: List[Defect] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.defects

    @property
    def first_defect(self) -> Optional[Defect]:
        return self.defects[0] if self.defects else None

    def __bool__(self):
        return self.is_valid

    def __str__(self):
        if self.is_valid:
            return "Chain is valid ✓"
        lines = [f"Validation FAILED ({len(self.defects)} defects):"]
        for d in self.defects:
            lines.append(f"  • [{d.height}] {d.category}: {d.message}")
        return "\n".join(lines)


class ChainValidator:
    """
    Whole-chain integrity check.
    Reports every defect rather than stopping at the first one.
    """

    def validate(self, chain: Sequence[Block]) -> ValidationResult:
        result = ValidationResult()

        for i, block in enumerate(chain):
            height = block.height if block.height is not None else i

            # 1. Position
            if block.height != i:
                result.defects.append(Defect(height, f"Block at index {i} claims height {block.height}", "height"))

            # 2. Digest
            if not block.self_validate():
                result.defects.append(Defect(height, f"Invalid Block: {height}", "hash"))

            # 3. Linkage
            if i == 0:
                if block.previous_block_hash is not None:
                    result.defects.append(Defect(height, "Genesis block must not have a previous hash", "linkage"))
            elif block.previous_block_hash != chain[i - 1].hash:
                result.defects.append(
                    Defect(height, f"Previous Block Hash does not match for Block: {height}", "linkage")
                )

        if result.defects:
            logger.warning("Chain validation found %d defects", len(result.defects))
        return result
