"""
Merkle Tree Engine
Generic, array-backed binary hash tree: construction, index arithmetic
and proof extraction.

This module provides:
- LeafPolicy: how a non-power-of-two leaf count is treated
- MerkleTree: flat-array tree generic over leaf type and hash kind
- next_pow2 / is_pow_of_two helpers

Layout (Hard Contract):
    The tree is one contiguous sequence of hashes, bottom-up and level by
    level. Positions [0, L) hold the leaf level in leaf order, the next
    L/2 positions hold the level above, and so on up to the root, which
    is always the last element. Total length is 2L - 1.

    For 6 real leaves padded to L = 8 (F = filler):

        index:  0  1  2  3  4  5  6  7 | 8  9  10 11 | 12 13 | 14
        level:  a  b  c  d  e  f  F  F | ab cd ef FF | abcd efFF | root

Index Arithmetic:
    sibling(i) = i + 1 if i is even else i - 1
    parent(i)  = N - (N - i - 1 + i % 2) // 2,  where N = len(tree)

Leaf Policies:
    STRICT - leaf count must already be a power of two (else LeafCountError)
    PADDED - leaf hashes are padded up to the next power of two with the
             hasher's filler hash before the inner levels are built
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Generic, Iterator, Sequence, TypeVar

from pmtorrent.crypto.hashing import Hasher, as_bytes, hash_concat
from pmtorrent.schemas.errors import InvalidIdxError, LeafCountError


logger = logging.getLogger(__name__)

H = TypeVar("H")


class LeafPolicy(str, Enum):
    """Leaf-count policy for tree construction."""
    STRICT = "strict"
    PADDED = "padded"


def is_pow_of_two(n: int) -> bool:
    """Check whether n is a positive power of two."""
    return n > 0 and (n & (n - 1)) == 0


def next_pow2(n: int) -> int:
    """
    Smallest power of two greater than or equal to n.

    Example:
        >>> [next_pow2(n) for n in (1, 4, 6, 9)]
        [1, 4, 8, 16]
    """
    if n <= 1:
        return 1
    return 1 << (n - 1).bit_length()


def parent_index(node_count: int, idx: int) -> int:
    """Parent position of idx in a flat tree of node_count nodes."""
    return node_count - (node_count - idx - 1 + idx % 2) // 2


def sibling_index(idx: int) -> int:
    """Sibling position of idx (its pair partner on the same level)."""
    return idx + 1 if idx % 2 == 0 else idx - 1


class MerkleTree(Generic[H]):
    """
    An immutable Merkle tree stored as a flat sequence of hashes.

    Use MerkleTree.build() to construct one from leaves. The constructor
    accepts an already laid-out node sequence and only checks its shape.

    Example:
        >>> tree = MerkleTree.build(Sha256Hasher(), [b"a", b"b", b"c", b"d"])
        >>> len(tree), tree.height()
        (7, 3)
        >>> proof = tree.get_proof(2)
    """

    def __init__(self, nodes: Sequence[H]) -> None:
        if len(nodes) == 0 or not is_pow_of_two(len(nodes) + 1):
            raise LeafCountError(
                f"A flat tree must hold 2L - 1 nodes, got {len(nodes)}",
                count=len(nodes),
            )
        self._nodes: tuple[H, ...] = tuple(nodes)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def build(
        cls,
        hasher: Hasher[H],
        leaves: Sequence[Any],
        policy: LeafPolicy = LeafPolicy.STRICT,
        leaf_hash: Callable[[Any], H] | None = None,
    ) -> "MerkleTree[H]":
        """
        Build a tree from leaves.

        Algorithm:
        1. Hash every leaf (leaf_hash, or hasher.digest(as_bytes(leaf)))
        2. Under PADDED, append filler hashes up to the next power of two
        3. Repeatedly halve the current level, digesting sibling pairs,
           appending each finished level to the flat array
        4. Append the single remaining hash (the root)

        Args:
            hasher: Digest capability used for every level
            leaves: Leaves in leaf-index order
            policy: STRICT or PADDED leaf-count policy
            leaf_hash: Optional override for hashing a single leaf

        Returns:
            The built MerkleTree

        Raises:
            LeafCountError: If there are no leaves, or a level is not a
                            power of two under STRICT
        """
        current_level = cls._build_first_level(hasher, leaves, policy, leaf_hash)
        nodes: list[H] = []

        # Every level holds half the nodes of the previous one.
        while len(current_level) > 1:
            level = cls._build_inner_level(hasher, current_level)
            nodes.extend(current_level)
            current_level = level

        # The root, skipped by the loop.
        nodes.extend(current_level)

        logger.debug(
            "Built merkle tree: %d leaves (%d real), %d nodes",
            len(nodes) // 2 + 1, len(leaves), len(nodes),
        )
        return cls(nodes)

    @staticmethod
    def _build_first_level(
        hasher: Hasher[H],
        leaves: Sequence[Any],
        policy: LeafPolicy,
        leaf_hash: Callable[[Any], H] | None,
    ) -> list[H]:
        if len(leaves) == 0:
            raise LeafCountError("Cannot build a tree without leaves", count=0)

        if policy == LeafPolicy.STRICT and not is_pow_of_two(len(leaves)):
            raise LeafCountError(
                f"Leaf count must be a power of two, got {len(leaves)}",
                count=len(leaves),
            )

        if leaf_hash is None:
            hashes = [hasher.digest(as_bytes(leaf)) for leaf in leaves]
        else:
            hashes = [leaf_hash(leaf) for leaf in leaves]

        if policy == LeafPolicy.PADDED:
            padded_count = next_pow2(len(hashes))
            hashes.extend(hasher.filler() for _ in range(padded_count - len(hashes)))

        return hashes

    @staticmethod
    def _build_inner_level(hasher: Hasher[H], previous_level: Sequence[H]) -> list[H]:
        if not is_pow_of_two(len(previous_level)):
            raise LeafCountError(
                f"Level size must be a power of two, got {len(previous_level)}",
                count=len(previous_level),
            )

        return [
            hash_concat(hasher, previous_level[i], previous_level[i + 1])
            for i in range(0, len(previous_level), 2)
        ]

    # ------------------------------------------------------------------
    # Shape
    # ------------------------------------------------------------------

    @property
    def nodes(self) -> tuple[H, ...]:
        return self._nodes

    @property
    def root(self) -> H:
        return self._nodes[-1]

    def leaf_count(self) -> int:
        """Number of leaf positions, filler leaves included."""
        return (len(self._nodes) + 1) // 2

    def height(self) -> int:
        """Number of levels, leaf level and root included."""
        return self.leaf_count().bit_length()

    def __len__(self) -> int:
        return len(self._nodes)

    def __getitem__(self, idx: int) -> H:
        return self._nodes[idx]

    def __iter__(self) -> Iterator[H]:
        return iter(self._nodes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MerkleTree):
            return NotImplemented
        return self._nodes == other._nodes

    def __hash__(self) -> int:
        return hash(self._nodes)

    def __repr__(self) -> str:
        return f"MerkleTree(leaves={self.leaf_count()}, nodes={len(self._nodes)})"

    # ------------------------------------------------------------------
    # Index arithmetic and proofs
    # ------------------------------------------------------------------

    def _node(self, idx: int) -> H:
        if idx < 0 or idx >= len(self._nodes):
            raise InvalidIdxError(
                f"Node index {idx} out of range for {len(self._nodes)} nodes",
                idx=idx,
            )
        return self._nodes[idx]

    def sibling_of(self, idx: int) -> tuple[H, int]:
        """
        Return the sibling hash and position of node idx.

        Raises:
            InvalidIdxError: If idx is outside the tree, or is the root
                             (which has no sibling)
        """
        self._node(idx)
        s_idx = sibling_index(idx)
        return self._node(s_idx), s_idx

    def parent_of(self, idx: int) -> tuple[H, int]:
        """
        Return the parent hash and position of node idx.

        Raises:
            InvalidIdxError: If idx is outside the tree, or is the root
                             (which has no parent)
        """
        self._node(idx)
        p_idx = parent_index(len(self._nodes), idx)
        return self._node(p_idx), p_idx

    def get_proof(self, idx: int) -> list[H]:
        """
        Collect the sibling hashes proving leaf idx against the root.

        Returns exactly height() - 1 hashes ordered from the leaf level up
        to (but excluding) the root.

        Raises:
            InvalidIdxError: If idx is not a leaf position
        """
        if idx < 0 or idx >= self.leaf_count():
            raise InvalidIdxError(
                f"Leaf index {idx} out of range for {self.leaf_count()} leaves",
                idx=idx,
            )

        proof: list[H] = []
        for _ in range(self.height() - 1):
            s_hash, s_idx = self.sibling_of(idx)
            _, p_idx = self.parent_of(s_idx)
            proof.append(s_hash)
            idx = p_idx

        return proof


__all__ = [
    "LeafPolicy",
    "MerkleTree",
    "is_pow_of_two",
    "next_pow2",
    "parent_index",
    "sibling_index",
]
