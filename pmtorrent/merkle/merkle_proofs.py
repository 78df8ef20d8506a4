"""
Partial-root reconstruction.

A verifier holding a trusted root, one leaf and the proof returned by
MerkleTree.get_proof() can recompute the root with O(height) digests and
never needs the full tree.
"""
from __future__ import annotations

from typing import Any, Callable, Sequence, TypeVar

from pmtorrent.crypto.hashing import Hasher, as_bytes, hash_concat
from pmtorrent.merkle.merkle_tree import next_pow2, parent_index
from pmtorrent.schemas.errors import InvalidIdxError, MerkleError


H = TypeVar("H")


def root_from_partial(
    hasher: Hasher[H],
    leaf: Any,
    leaf_idx: int,
    leaf_count: int,
    proof: Sequence[H],
    leaf_hash: Callable[[Any], H] | None = None,
) -> H:
    """
    Recompute a tree root from one leaf and its proof.

    Algorithm:
    1. Digest the leaf (leaf_hash, or hasher.digest(as_bytes(leaf)))
    2. For each proof hash, bottom-up:
       - current node index even: acc = digest(acc + sibling)
       - current node index odd:  acc = digest(sibling + acc)
       - move to the parent with the flat-array parent formula
    3. The final accumulator is the root

    Args:
        hasher: Digest capability the tree was built with
        leaf: The leaf value (bytes-like, str, or __bytes__ object)
        leaf_idx: Position of the leaf on the leaf level
        leaf_count: Real or padded leaf count; padded to a power of two
        proof: Sibling hashes from MerkleTree.get_proof()
        leaf_hash: Optional override for hashing the leaf

    Returns:
        The reconstructed root

    Raises:
        InvalidIdxError: If leaf_idx is outside the leaf level, or the
                         proof length does not match the tree height
    """
    padded_count = next_pow2(leaf_count)
    node_count = 2 * padded_count - 1
    expected_len = padded_count.bit_length() - 1

    if leaf_idx < 0 or leaf_idx >= padded_count:
        raise InvalidIdxError(
            f"Leaf index {leaf_idx} out of range for {padded_count} leaves",
            idx=leaf_idx,
        )
    if len(proof) != expected_len:
        raise InvalidIdxError(
            f"Proof must hold {expected_len} hashes for {padded_count} leaves, "
            f"got {len(proof)}",
            idx=leaf_idx,
            details={"proof_len": len(proof)},
        )

    acc = leaf_hash(leaf) if leaf_hash is not None else hasher.digest(as_bytes(leaf))
    idx = leaf_idx

    for sibling in proof:
        if idx % 2 == 0:
            acc = hash_concat(hasher, acc, sibling)
        else:
            acc = hash_concat(hasher, sibling, acc)
        idx = parent_index(node_count, idx)

    return acc


def verify_partial(
    hasher: Hasher[H],
    trusted_root: H,
    leaf: Any,
    leaf_idx: int,
    leaf_count: int,
    proof: Sequence[H],
    leaf_hash: Callable[[Any], H] | None = None,
) -> bool:
    """
    Check that a leaf and its proof reproduce a trusted root.

    Returns:
        True if the reconstructed root equals trusted_root, False otherwise
        (including malformed proofs or out-of-range indices)
    """
    try:
        root = root_from_partial(hasher, leaf, leaf_idx, leaf_count, proof, leaf_hash)
    except MerkleError:
        return False
    return root == trusted_root


__all__ = ["root_from_partial", "verify_partial"]
