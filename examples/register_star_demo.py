# examples/register_star_demo.py
# Run with: poetry run python examples/register_star_demo.py
#
# Walks the full ownership protocol with throwaway wallets, then tampers
# with a committed block to show what chain validation reports.

from dataclasses import replace

from starregistry import AppendRejected, ExpiredChallenge, SignatureVerificationFailed, StarRegistry, WalletKey
from starregistry.chain.blockchain import write_snapshot
from starregistry.core.encoding import encode_body


if __name__ == "__main__":
    registry = StarRegistry()
    alice = WalletKey.generate()
    bob = WalletKey.generate()

    # 1. Happy path
    for story in ["First star I ever named", "The one over the lake"]:
        challenge = registry.request_message_ownership_verification(alice.address)
        block = registry.submit_star(
            alice.address, challenge, alice.sign(challenge),
            {"dec": "68° 52' 56.9", "ra": "16h 29m 1.0s", "story": story},
        )
        print(f"Registered block {block.height}: {block.hash}")

    # 2. Bob signs Alice's challenge
    challenge = registry.request_message_ownership_verification(alice.address)
    try:
        registry.submit_star(alice.address, challenge, bob.sign(challenge), {"story": "not mine"})
    except SignatureVerificationFailed as e:
        print(f"Rejected: {e}")

    # 3. Stale challenge
    stale = f"{bob.address}:1000000000:starRegistry"
    try:
        registry.submit_star(bob.address, stale, bob.sign(stale), {"story": "too late"})
    except ExpiredChallenge as e:
        print(f"Rejected: {e}")

    print(f"Alice owns {len(registry.get_stars_by_wallet_address(alice.address))} stars")
    print(f"Chain height {registry.get_chain_height()}, defects: {registry.validate_chain()}")
    print(f"Snapshot: {write_snapshot(registry.chain, 'demo-chain.jsonl')} blocks -> demo-chain.jsonl")

    # 4. Tamper with block 1 and try to keep going
    original = registry.get_block_by_height(1)
    record = original.decode_body()
    record["star"]["story"] = "HACKED STORY"
    registry.chain._blocks[1] = replace(original, body=encode_body(record))

    for defect in registry.validate_chain():
        print(f"Defect at height {defect.height}: {defect.category}: {defect.message}")

    challenge = registry.request_message_ownership_verification(bob.address)
    try:
        registry.submit_star(bob.address, challenge, bob.sign(challenge), {"story": "on a broken chain"})
    except AppendRejected as e:
        print(e)
