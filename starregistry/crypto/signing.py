# starregistry/crypto/signing.py
"""
Wallet message signing (EIP-191 ``personal_sign``) via eth-account.

Only verification is needed by the registry itself; the signing helpers exist
for tests, demos and the CLI, standing in for an external wallet.
"""

from dataclasses import dataclass

from eth_account import Account
from eth_account.messages import encode_defunct


@dataclass(frozen=True)
class WalletKey:
    """Throwaway local wallet: address plus hex private key."""
    address: str
    private_key: str

    @classmethod
    def generate(cls) -> "WalletKey":
        acct = Account.create()
        key = acct.key.hex()
        return cls(address=acct.address, private_key=key if key.startswith("0x") else "0x" + key)

    @classmethod
    def from_private_key(cls, private_key: str) -> "WalletKey":
        acct = Account.from_key(private_key)
        return cls(address=acct.address, private_key=private_key)

    def sign(self, message: str) -> str:
        return sign_message(self.private_key, message)


def sign_message(private_key: str, message: str) -> str:
    """Sign a text message; returns the 65-byte signature as 0x-prefixed hex."""
    signed = Account.sign_message(encode_defunct(text=message), private_key=private_key)
    sig = signed.signature.hex()
    return sig if sig.startswith("0x") else "0x" + sig


def recover_address(message: str, signature: str) -> str:
    """Address that produced ``signature`` over ``message``. Raises on malformed input."""
    sig = bytes.fromhex(str(signature).removeprefix("0x"))
    return str(Account.recover_message(encode_defunct(text=message), signature=sig))
