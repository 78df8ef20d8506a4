"""
Merkle Tree Engine
Generic flat-array Merkle tree construction, proof extraction and
partial-root reconstruction.

This module provides:
- MerkleTree: array-backed tree, generic over leaf type and hash kind
- LeafPolicy: STRICT (power-of-two leaves only) or PADDED (filler leaves)
- root_from_partial: recompute a root from one leaf and its proof
- verify_partial: boolean check of a leaf + proof against a trusted root

Usage:
    from pmtorrent.crypto import Sha256Hasher
    from pmtorrent.merkle import MerkleTree, LeafPolicy, root_from_partial

    hasher = Sha256Hasher()
    tree = MerkleTree.build(hasher, leaves, policy=LeafPolicy.PADDED)
    proof = tree.get_proof(2)
    assert root_from_partial(hasher, leaves[2], 2, len(leaves), proof) == tree.root
"""
from .merkle_tree import (
    LeafPolicy,
    MerkleTree,
    is_pow_of_two,
    next_pow2,
    parent_index,
    sibling_index,
)
from .merkle_proofs import root_from_partial, verify_partial


__all__ = [
    "LeafPolicy",
    "MerkleTree",
    "is_pow_of_two",
    "next_pow2",
    "parent_index",
    "sibling_index",
    "root_from_partial",
    "verify_partial",
]
