# rescue.py
"""
Rescue-Prime style permutation over the Goldilocks field.

State: 12 field elements
- capacity: indices 0..3
- rate:     indices 4..11 (the digest is read from 4..7)

One round applies, in order:
1. S-box:          x -> x^ALPHA on every element
2. Mixing layer:   multiply by the 12x12 matrix MDS
3. Constants:      add ARK1[round]
4. Inverse S-box:  x -> x^INV_ALPHA on every element
5. Mixing layer:   multiply by MDS
6. Constants:      add ARK2[round]

Every step is a bijection on the field, so the whole round can be undone
exactly (inverse_permute_round) using only the public constants below. The
same permutation drives the sponge hash in hash_utils.py and the nullifier
derivation in the execution trace.

All tables are computed once at import and exposed as tuples.
"""

from hashlib import shake_256
from typing import List, Sequence, Tuple

from goldilocks import FIELD_MODULUS, add, exp, inv, mul, sub

STATE_WIDTH = 12
CAPACITY_WIDTH = 4
RATE_WIDTH = 8
DIGEST_SIZE = 4
NUM_ROUNDS = 7

# Index ranges inside the 12-element state
CAPACITY_RANGE = slice(0, 4)
DIGEST_RANGE = slice(4, 8)

ALPHA = 7
# ALPHA^-1 mod (p - 1)
INV_ALPHA = 10540996611094048183

SECURITY_LEVEL = 128

# First row of the circulant mixing matrix
MDS_FIRST_ROW = (7, 23, 8, 26, 13, 10, 9, 7, 6, 22, 21, 8)

Matrix = Tuple[Tuple[int, ...], ...]


def _circulant(first_row: Sequence[int]) -> Matrix:
    n = len(first_row)
    return tuple(
        tuple(first_row[(j - i) % n] for j in range(n)) for i in range(n)
    )


def _invert_matrix(matrix: Matrix) -> Matrix:
    """
    Gauss-Jordan inversion over the field.

    Raises:
        ValueError: if the matrix is singular
    """
    n = len(matrix)
    # Augment [M | I]
    a = [list(row) + [1 if i == j else 0 for j in range(n)] for i, row in enumerate(matrix)]

    for col in range(n):
        pivot = col
        while pivot < n and a[pivot][col] % FIELD_MODULUS == 0:
            pivot += 1
        if pivot == n:
            raise ValueError("mixing matrix is singular")
        a[col], a[pivot] = a[pivot], a[col]

        scale = inv(a[col][col])
        a[col] = [mul(v, scale) for v in a[col]]

        for r in range(n):
            if r != col and a[r][col]:
                factor = a[r][col]
                a[r] = [sub(v, mul(factor, p)) for v, p in zip(a[r], a[col])]

    return tuple(tuple(row[n:]) for row in a)


def _round_constants() -> Tuple[Matrix, Matrix]:
    """
    Draw 2 * STATE_WIDTH * NUM_ROUNDS constants from SHAKE-256.

    Follows the Rescue-Prime parameter script: the seed string names the
    field, width, capacity and security level, and each constant is read from
    ceil(log2(p) / 8) + 1 little-endian bytes reduced mod p.
    """
    bytes_per_int = (FIELD_MODULUS.bit_length() + 7) // 8 + 1
    count = 2 * STATE_WIDTH * NUM_ROUNDS
    seed = "Rescue-XLIX(%i,%i,%i,%i)" % (
        FIELD_MODULUS,
        STATE_WIDTH,
        CAPACITY_WIDTH,
        SECURITY_LEVEL,
    )
    stream = shake_256(seed.encode("ascii")).digest(bytes_per_int * count)

    constants = [
        int.from_bytes(stream[i * bytes_per_int : (i + 1) * bytes_per_int], "little")
        % FIELD_MODULUS
        for i in range(count)
    ]

    ark1 = []
    ark2 = []
    for r in range(NUM_ROUNDS):
        base = 2 * r * STATE_WIDTH
        ark1.append(tuple(constants[base : base + STATE_WIDTH]))
        ark2.append(tuple(constants[base + STATE_WIDTH : base + 2 * STATE_WIDTH]))
    return tuple(ark1), tuple(ark2)


MDS: Matrix = _circulant(MDS_FIRST_ROW)
INV_MDS: Matrix = _invert_matrix(MDS)
ARK1, ARK2 = _round_constants()


# MIXING LAYER
# ============================================================


def _mat_vec(matrix: Matrix, state: Sequence[int]) -> List[int]:
    return [
        sum(m * s for m, s in zip(row, state)) % FIELD_MODULUS for row in matrix
    ]


def apply_mds(state: Sequence[int]) -> List[int]:
    return _mat_vec(MDS, state)


def apply_inv_mds(state: Sequence[int]) -> List[int]:
    return _mat_vec(INV_MDS, state)


# ROUND FUNCTION
# ============================================================


def permute_round(state: Sequence[int], round_index: int) -> List[int]:
    """
    Apply one round of the permutation.

    Args:
        state: 12 field elements (not modified)
        round_index: 0..NUM_ROUNDS-1, selects ARK1/ARK2 rows

    Returns:
        the new 12-element state
    """
    if len(state) != STATE_WIDTH:
        raise ValueError(f"state must have {STATE_WIDTH} elements, got {len(state)}")

    s = [exp(x, ALPHA) for x in state]
    s = apply_mds(s)
    s = [add(x, c) for x, c in zip(s, ARK1[round_index])]

    s = [exp(x, INV_ALPHA) for x in s]
    s = apply_mds(s)
    s = [add(x, c) for x, c in zip(s, ARK2[round_index])]
    return s


def inverse_permute_round(state: Sequence[int], round_index: int) -> List[int]:
    """
    Undo permute_round: steps 6 -> 1 with subtraction, INV_MDS and the two
    exponents swapped.

    inverse_permute_round(permute_round(s, r), r) == s for every s and r.
    """
    if len(state) != STATE_WIDTH:
        raise ValueError(f"state must have {STATE_WIDTH} elements, got {len(state)}")

    s = [sub(x, c) for x, c in zip(state, ARK2[round_index])]
    s = apply_inv_mds(s)
    s = [exp(x, ALPHA) for x in s]

    s = [sub(x, c) for x, c in zip(s, ARK1[round_index])]
    s = apply_inv_mds(s)
    s = [exp(x, INV_ALPHA) for x in s]
    return s


def permute(state: Sequence[int]) -> List[int]:
    """
    Full permutation: rounds 0..NUM_ROUNDS-1.
    """
    s = list(state)
    for r in range(NUM_ROUNDS):
        s = permute_round(s, r)
    return s
