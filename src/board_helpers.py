"""Core board helpers for the 8x8 calendar bitboard."""

from __future__ import annotations

from functools import lru_cache
from typing import Iterable, List, Tuple

# =========================
# Board configuration
# =========================
N = 8
NUM_SQUARES = N * N  # 64
FULL_BOARD_MASK = (1 << NUM_SQUARES) - 1

# Plus-shaped neighbourhood of cell 9 (row 1, col 1): cells 1, 8, 10 and 17.
NEIGHBOR_PATTERN = 0x020502
NEIGHBOR_CENTER = 9

COLUMN_0_MASK = 0x0101010101010101
COLUMN_7_MASK = 0x8080808080808080

# =========================
# Index / coord helpers
# =========================
def index_to_row_col(index: int) -> Tuple[int, int]:
    """Convert a linear index into (row, col)."""
    return divmod(index, N)


def row_col_to_index(row: int, col: int) -> int:
    """Convert (row, col) into a linear index."""
    return row * N + col

# =========================
# Bit helpers
# =========================
def count_set_bits(value: int) -> int:
    """Return the number of set bits in value."""
    return bin(value).count("1")


def iter_set_bits(mask: int) -> Iterable[int]:
    """Yield set bit positions from a bitmask."""
    while mask:
        least_significant_bit = mask & -mask
        yield least_significant_bit.bit_length() - 1
        mask ^= least_significant_bit


def indices_to_bitmask(indices: Iterable[int]) -> int:
    """Convert an iterable of indices into a bitmask."""
    mask = 0
    for index in indices:
        mask |= 1 << index
    return mask


def bitmask_to_indices(mask: int) -> Tuple[int, ...]:
    """Convert a bitmask into a tuple of indices."""
    return tuple(index for index in range(NUM_SQUARES) if (mask >> index) & 1)

# =========================
# Cell-set operations
# =========================
def bitboard(value: int) -> int:
    """Validate raw bits as a 64-bit board mask."""
    if not 0 <= value <= FULL_BOARD_MASK:
        raise ValueError(f"board mask out of range: {value:#x}")
    return value


def bitboard_not(mask: int) -> int:
    """Complement of a board mask, kept to 64 bits."""
    return ~mask & FULL_BOARD_MASK


def bitboard_mul(left: int, right: int) -> int:
    """Wrapping 64-bit multiply (only used for hashing experiments)."""
    return (left * right) & FULL_BOARD_MASK


def intersects(left: int, right: int) -> bool:
    """Return True if the two masks share any cell."""
    return left & right != 0

# =========================
# Gap detection
# =========================
@lru_cache(maxsize=1)
def build_neighbor_masks() -> List[int]:
    """Shift NEIGHBOR_PATTERN onto every cell, without wrapping across rows."""
    masks: List[int] = []
    for index in range(NUM_SQUARES):
        if index < NEIGHBOR_CENTER:
            pattern = NEIGHBOR_PATTERN >> (NEIGHBOR_CENTER - index)
        else:
            pattern = (NEIGHBOR_PATTERN << (index - NEIGHBOR_CENTER)) & FULL_BOARD_MASK

        _, col = index_to_row_col(index)
        if col == 0:
            pattern &= ~COLUMN_7_MASK
        elif col == N - 1:
            pattern &= ~COLUMN_0_MASK
        masks.append(pattern)
    return masks


NEIGHBOR_MASKS = build_neighbor_masks()


def has_small_gaps(mask: int) -> bool:
    """
    Return True if some free cell has no free neighbour.

    Every piece covers at least four cells, so a lone free cell can never be
    filled. Larger unreachable pockets are not detected.
    """
    free = ~mask & FULL_BOARD_MASK
    for index in iter_set_bits(free):
        if free & NEIGHBOR_MASKS[index] == 0:
            return True
    return False
