# starregistry/verify/ownership.py
import logging
import time
from typing import Any, Callable, Optional

from starregistry.chain.blockchain import Blockchain
from starregistry.core.config import RegistryConfig
from starregistry.core.errors import ExpiredChallenge, MalformedChallenge, SignatureVerificationFailed
from starregistry.core.types import Block
from starregistry.crypto.signing import recover_address

logger = logging.getLogger(__name__)


def parse_challenge_time(message: str) -> Optional[int]:
    """Issuance time (Unix seconds) embedded in ``<address>:<seconds>:<suffix>``, or None if unreadable."""
    parts = str(message).split(":")
    if len(parts) < 3:
        return None
    raw = parts[1].removeprefix("-")
    if not (raw.isascii() and raw.isdigit()):
        return None
    return int(parts[1])


class OwnershipVerifier:
    """
    Gatekeeper for new stars.

    Hands out challenges that embed their own issuance time, so nothing is kept
    server-side. A submission is accepted only if its challenge is still inside
    the window and the signature over it recovers to the submitting address.
    """

    def __init__(
        self,
        chain: Blockchain,
        config: Optional[RegistryConfig] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.chain = chain
        self.config = config or RegistryConfig()
        self._clock = clock or time.time

    def request_message(self, address: str) -> str:
        return f"{address}:{int(self._clock())}:{self.config.challenge_suffix}"

    def check_expiry(self, message: str) -> int:
        """Seconds since the challenge was issued; raises ExpiredChallenge past the window."""
        issued = parse_challenge_time(message)
        if issued is None:
            logger.info("Unreadable challenge: %r", message)
            raise MalformedChallenge(message, self.config.challenge_window_seconds)
        elapsed = int(self._clock()) - issued
        if elapsed >= self.config.challenge_window_seconds:
            logger.info("Expired challenge: %.0fs old", elapsed)
            raise ExpiredChallenge(elapsed, self.config.challenge_window_seconds)
        return elapsed

    def check_signature(self, address: str, message: str, signature: str) -> None:
        try:
            recovered = recover_address(message, signature)
        except Exception as e:
            logger.info("Unverifiable signature for %s: %s", address, e)
            raise SignatureVerificationFailed(address, f"malformed signature ({e})") from e
        if recovered.lower() != str(address).lower():
            logger.info("Signature for %s recovered to %s", address, recovered)
            raise SignatureVerificationFailed(address, "signer does not match address")

    def submit_star(self, address: str, message: str, signature: str, star: Any) -> Block:
        """
        Register ``star`` for ``address``.
        Expiry is checked first; the signature is only verified for live challenges
        whose payload encodes cleanly. AppendRejected from the chain propagates unchanged.
        """
        self.check_expiry(message)
        block = Block.for_star(owner=address, signature=signature, message=message, star=star)
        self.check_signature(address, message, signature)
        return self.chain.append(block)
