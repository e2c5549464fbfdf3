# starregistry/core/errors.py
"""
Exception taxonomy for the star registry.

Chain integrity problems are not raised directly: they are reported as
``Defect`` values by chain validation, and only wrapped in ``AppendRejected``
when they stop an append.
"""

from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from starregistry.core.types import Defect


class StarRegistryError(Exception):
    """Base class for every error raised by starregistry."""


class DecodeError(StarRegistryError, ValueError):
    """A block body could not be decoded."""


class ExpiredChallenge(StarRegistryError):
    def __init__(self, elapsed_seconds: float, window_seconds: int):
        self.elapsed_seconds = elapsed_seconds
        self.window_seconds = window_seconds
        super().__init__(
            f"Challenge expired: {elapsed_seconds / 60:.1f} minutes elapsed "
            f"(window is {window_seconds / 60:g} minutes)"
        )


class MalformedChallenge(ExpiredChallenge):
    """The challenge carries no readable issuance time, so it can never be inside the window."""

    def __init__(self, message: str, window_seconds: int):
        self.challenge = message
        self.elapsed_seconds = None
        self.window_seconds = window_seconds
        StarRegistryError.__init__(self, f"Malformed ownership challenge: {message!r}")


class SignatureVerificationFailed(StarRegistryError):
    def __init__(self, address: str, reason: str = ""):
        self.address = address
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Signature verification failed for {address}{detail}")


class AppendRejected(StarRegistryError):
    """The prospective chain failed validation; carries every defect found."""

    def __init__(self, defects: List["Defect"], height: Optional[int] = None):
        self.defects = list(defects)
        self.height = height
        lines = [f"Append rejected ({len(self.defects)} defects):"]
        for d in self.defects:
            lines.append(f"  • [{d.height}] {d.category}: {d.message}")
        super().__init__("\n".join(lines))
