# merkle_tree.py
"""
Binary Merkle tree over Digest leaves, using hash_utils.merge for parents.

The tree is stored as an arena of levels; parent/child/sibling relations are
plain index arithmetic:

- levels[0]  = leaves
- levels[1]  = parents of leaves
- ...
- levels[-1] = [root]

The node at index i on one level has parent i // 2 and sibling i ^ 1.
"""

from typing import List, Sequence, Tuple

from hash_utils import Digest, merge


class MerkleTree:
    """
    Binary Merkle tree (arity = 2).

    Height is ceil(log2(len(leaves))); a level with an odd number of nodes
    duplicates its last node.
    """

    def __init__(self, leaves: Sequence[Digest]) -> None:
        if len(leaves) == 0:
            raise ValueError("Tree must have at least one leaf")
        self.leaves: Tuple[Digest, ...] = tuple(leaves)
        self.levels: List[List[Digest]] = []
        self._build_tree()

    def _build_tree(self) -> None:
        """
        Build the full tree bottom-up.

        For odd number of nodes, duplicate the last node.
        """
        level = list(self.leaves)
        self.levels.append(level)

        while len(level) > 1:
            next_level = []
            for i in range(0, len(level), 2):
                left = level[i]
                if i + 1 < len(level):
                    right = level[i + 1]
                else:
                    right = left
                next_level.append(merge(left, right))
            self.levels.append(next_level)
            level = next_level

    @property
    def depth(self) -> int:
        """Number of hashing levels between the leaves and the root."""
        return len(self.levels) - 1

    def root(self) -> Digest:
        """
        Return the root digest of the tree.
        """
        return self.levels[-1][0]

    def opening(self, index: int) -> Tuple[List[Digest], List[int]]:
        """
        Compute the Merkle opening (siblings, positions) for a given leaf index.

        Returns: (siblings, positions)
        - siblings[h] = sibling digest at height h (0 = leaf level, up to depth-1)
        - positions[h] = 0 if our node was the LEFT child at that level,
                         1 if it was the RIGHT child.

        Example for a tree with leaves [A, B, C, D] and opening(2):

                    root
                   /    \\
                 N1       N2
                /  \\     /  \\
               A    B   C    D

        - positions[0] = 0, siblings[0] = D
        - positions[1] = 1, siblings[1] = N1
        """
        if index < 0 or index >= len(self.leaves):
            raise IndexError("Leaf index out of range")

        siblings: List[Digest] = []
        positions: List[int] = []

        idx = index
        for level in range(self.depth):
            layer = self.levels[level]
            sib_idx = idx ^ 1
            if sib_idx >= len(layer):
                sib = layer[idx]
            else:
                sib = layer[sib_idx]

            siblings.append(sib)
            positions.append(idx % 2)
            idx //= 2

        return siblings, positions

    def prove(self, index: int) -> List[Digest]:
        """
        Merkle path for a leaf: the leaf itself followed by one sibling per
        level, depth + 1 digests in total.

        The sibling side at level h is bit h of the index.
        """
        siblings, _ = self.opening(index)
        return [self.leaves[index]] + siblings


def verify_path(root: Digest, index: int, path: Sequence[Digest]) -> bool:
    """
    Recompute the root from a path returned by MerkleTree.prove.

    Args:
        root: expected root
        index: leaf index the path was produced for
        path: [leaf, sibling_0, ..., sibling_{depth-1}]

    Returns:
        True if hashing the path bottom-up reproduces root
    """
    if not path:
        return False
    needle = path[0]
    for h, sibling in enumerate(path[1:]):
        if (index >> h) & 1 == 0:
            needle = merge(needle, sibling)
        else:
            needle = merge(sibling, needle)
    return needle == root
