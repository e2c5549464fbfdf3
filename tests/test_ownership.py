# tests/test_ownership.py
import pytest

from starregistry.chain.blockchain import Blockchain
from starregistry.core.config import RegistryConfig
from starregistry.core.errors import (
    AppendRejected,
    DecodeError,
    ExpiredChallenge,
    MalformedChallenge,
    SignatureVerificationFailed,
)
from starregistry.crypto.signing import WalletKey, recover_address, sign_message
from starregistry.verify.ownership import OwnershipVerifier, parse_challenge_time

T0 = 1_760_000_000


class FakeClock:
    def __init__(self, now: float = T0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def chain(clock):
    return Blockchain(clock=clock)


@pytest.fixture
def verifier(chain, clock):
    return OwnershipVerifier(chain, clock=clock)


@pytest.fixture
def alice():
    return WalletKey.generate()


@pytest.fixture
def bob():
    return WalletKey.generate()


STAR = {"dec": "68° 52' 56.9", "ra": "16h 29m 1.0s", "story": "Testing the star registry"}


def test_request_message_format(verifier, alice):
    message = verifier.request_message(alice.address)
    assert message == f"{alice.address}:{T0}:starRegistry"
    assert parse_challenge_time(message) == T0


def test_request_message_custom_suffix(chain, clock, alice):
    v = OwnershipVerifier(chain, config=RegistryConfig(challenge_suffix="skyRegistry"), clock=clock)
    assert v.request_message(alice.address).endswith(":skyRegistry")


def test_request_message_has_no_side_effects(verifier, chain, alice):
    verifier.request_message(alice.address)
    assert chain.get_height() == 0


def test_signing_helpers(verifier, alice, bob):
    message = "hello stars"
    sig = sign_message(alice.private_key, message)
    assert sig.startswith("0x")
    assert recover_address(message, sig) == alice.address
    verifier.check_signature(alice.address, message, sig)
    verifier.check_signature(alice.address.lower(), message, sig)
    with pytest.raises(SignatureVerificationFailed):
        verifier.check_signature(bob.address, message, sig)
    with pytest.raises(SignatureVerificationFailed):
        verifier.check_signature(alice.address, message, "0xdeadbeef")
    assert WalletKey.from_private_key(alice.private_key).address == alice.address

def test_submit_star_within_window(verifier, chain, clock, alice):
    genesis = chain.tip
    message = verifier.request_message(alice.address)
    clock.now += 60

    block = verifier.submit_star(alice.address, message, alice.sign(message), STAR)

    assert block.height == 1
    assert block.previous_block_hash == genesis.hash
    assert block.decode_body() == {
        "owner": alice.address,
        "signature": alice.sign(message),
        "message": message,
        "star": STAR,
    }
    assert chain.get_height() == 1


def test_expired_after_ten_minutes(verifier, chain, clock, alice):
    message = verifier.request_message(alice.address)
    clock.now += 10 * 60

    with pytest.raises(ExpiredChallenge) as exc_info:
        verifier.submit_star(alice.address, message, alice.sign(message), STAR)
    assert exc_info.value.elapsed_seconds == 600
    assert chain.get_height() == 0


def test_expiry_boundary(verifier, chain, clock, alice):
    message = verifier.request_message(alice.address)

    clock.now = T0 + 299
    verifier.submit_star(alice.address, message, alice.sign(message), STAR)

    clock.now = T0 + 300
    with pytest.raises(ExpiredChallenge):
        verifier.submit_star(alice.address, message, alice.sign(message), STAR)
    assert chain.get_height() == 1


def test_expired_skips_signature_check(verifier, clock, alice, monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("signature must not be checked for an expired challenge")

    monkeypatch.setattr("starregistry.verify.ownership.recover_address", fail)
    message = verifier.request_message(alice.address)
    clock.now += 6 * 60

    with pytest.raises(ExpiredChallenge):
        verifier.submit_star(alice.address, message, "0xnot-even-hex", STAR)


def test_expired_even_with_bad_signature(verifier, clock, alice, bob):
    message = verifier.request_message(alice.address)
    clock.now += 5 * 60
    with pytest.raises(ExpiredChallenge):
        verifier.submit_star(alice.address, message, bob.sign(message), STAR)


def test_configurable_window(chain, clock, alice):
    v = OwnershipVerifier(chain, config=RegistryConfig(challenge_window_seconds=30), clock=clock)
    message = v.request_message(alice.address)
    clock.now += 30
    with pytest.raises(ExpiredChallenge):
        v.submit_star(alice.address, message, alice.sign(message), STAR)


def test_wrong_signer(verifier, chain, alice, bob):
    message = verifier.request_message(alice.address)
    with pytest.raises(SignatureVerificationFailed) as exc_info:
        verifier.submit_star(alice.address, message, bob.sign(message), STAR)
    assert exc_info.value.address == alice.address
    assert chain.get_height() == 0


def test_signature_over_other_message(verifier, alice):
    message = verifier.request_message(alice.address)
    with pytest.raises(SignatureVerificationFailed):
        verifier.submit_star(alice.address, message, alice.sign(message + "x"), STAR)


@pytest.mark.parametrize("signature", ["", "0x", "0xdeadbeef", "not-hex-at-all", "0x" + "00" * 65])
def test_malformed_signature(verifier, chain, alice, signature):
    message = verifier.request_message(alice.address)
    with pytest.raises(SignatureVerificationFailed):
        verifier.submit_star(alice.address, message, signature, STAR)
    assert chain.get_height() == 0


def test_corrupted_signature(verifier, alice):
    message = verifier.request_message(alice.address)
    sig = alice.sign(message)
    corrupted = sig[:10] + ("0" if sig[10] != "0" else "1") + sig[11:]
    with pytest.raises(SignatureVerificationFailed):
        verifier.submit_star(alice.address, message, corrupted, STAR)


@pytest.mark.parametrize("message", [
    "",
    "no-colons",
    "0xA:later:starRegistry",
    "0xA:123",
    "0xA:1_760_000_000:starRegistry",
    "0xA: 1760000000 :starRegistry",
    "0xA:١٧٦٠٠٠٠٠٠٠:starRegistry",
    "0xA:+1760000000:starRegistry",
])
def test_unreadable_challenge_counts_as_expired(verifier, chain, alice, message):
    with pytest.raises(ExpiredChallenge) as exc_info:
        verifier.submit_star(alice.address, message, alice.sign(message or "x"), STAR)
    assert isinstance(exc_info.value, MalformedChallenge)
    assert exc_info.value.window_seconds == 300
    assert chain.get_height() == 0


def test_challenge_time_parsing():
    assert parse_challenge_time(f"0xA:{T0}:starRegistry") == T0
    assert parse_challenge_time("0xA:-5:starRegistry") == -5
    assert parse_challenge_time("0xA:1_760_000_000:starRegistry") is None
    assert parse_challenge_time("0xA::starRegistry") is None


@pytest.mark.parametrize("star", [
    {"n": 2 ** 64 + 1},
    {"n": float("nan")},
    {"n": float("inf")},
    {"nested": [1, {"deep": -(2 ** 60)}]},
    {"raw": b"bytes"},
])
def test_unrepresentable_star_rejected(verifier, chain, alice, star, monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("signature must not be checked for an unencodable star")

    monkeypatch.setattr("starregistry.verify.ownership.recover_address", fail)
    message = verifier.request_message(alice.address)
    with pytest.raises(DecodeError):
        verifier.submit_star(alice.address, message, alice.sign(message), star)
    assert chain.get_height() == 0


def test_large_safe_integer_star_roundtrips(verifier, alice):
    star = {"n": 2 ** 53 - 1, "m": -(2 ** 53 - 1), "f": 0.1}
    message = verifier.request_message(alice.address)
    block = verifier.submit_star(alice.address, message, alice.sign(message), star)
    assert block.star_record().star == star


def test_append_rejected_propagates(verifier, chain, alice):
    from dataclasses import replace

    message = verifier.request_message(alice.address)
    verifier.submit_star(alice.address, message, alice.sign(message), STAR)
    chain._blocks[1] = replace(chain._blocks[1], timestamp=0)

    message = verifier.request_message(alice.address)
    with pytest.raises(AppendRejected) as exc_info:
        verifier.submit_star(alice.address, message, alice.sign(message), STAR)
    assert [d.height for d in exc_info.value.defects] == [1]
    assert chain.get_height() == 1
