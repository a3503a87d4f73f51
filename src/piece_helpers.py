"""Piece shapes, their orientations, and precomputed board placements."""

from __future__ import annotations

import logging
from enum import Enum
from functools import lru_cache
from typing import Dict, List, Sequence, Tuple

from board_helpers import N, count_set_bits, iter_set_bits

# =========================
# Piece configuration
# =========================
PIECE_COLS = 4
PIECE_ROWS = 4  # 16-bit shapes; 32-bit shapes use 8 rows
ROW_MASK = 0xF

LOGGER = logging.getLogger(__name__)

# =========================
# Shape helpers
# =========================
def _check_shape(shape: int, rows: int) -> None:
    if rows not in (4, 8):
        raise ValueError(f"unsupported piece height: {rows}")
    if not 0 <= shape < 1 << (PIECE_COLS * rows):
        raise ValueError(f"shape {shape:#x} does not fit a {PIECE_COLS}x{rows} grid")


def _columns_from(first_col: int, rows: int) -> int:
    """Mask of local columns first_col..3 over every row."""
    row_bits = (ROW_MASK << first_col) & ROW_MASK
    mask = 0
    for row in range(rows):
        mask |= row_bits << (PIECE_COLS * row)
    return mask


def piece_width(shape: int, rows: int = PIECE_ROWS) -> int:
    """Occupied width (1-4). Assumes the shape is aligned."""
    for width in range(1, PIECE_COLS):
        if shape & _columns_from(width, rows) == 0:
            return width
    return PIECE_COLS


def piece_height(shape: int, rows: int = PIECE_ROWS) -> int:
    """Occupied height (1-rows). Assumes the shape is aligned."""
    for height in range(1, rows):
        if shape >> (PIECE_COLS * height) == 0:
            return height
    return rows


def align_piece(shape: int, rows: int = PIECE_ROWS) -> int:
    """
    Shift a shape so it touches the lowest-order column and row.

    ```
    . . . .        X X X .
    . X X X   ->   X X . .
    . X X .        . . . .
    . . . .        . . . .
    ```
    """
    _check_shape(shape, rows)
    if shape == 0:
        return 0
    first_col = _columns_from(0, rows) & ~_columns_from(1, rows)
    while shape & first_col == 0:
        shape >>= 1
    while shape & ROW_MASK == 0:
        shape >>= PIECE_COLS
    return shape


def rotate_piece(shape: int, rows: int = PIECE_ROWS) -> int:
    """Rotate 90 degrees clockwise: (x, y) -> (3 - y, x)."""
    _check_shape(shape, rows)
    if shape >> (PIECE_COLS * PIECE_COLS):
        raise ValueError(f"shape {shape:#x} needs a 4x4 footprint to rotate")
    rotated = 0
    for index in iter_set_bits(shape):
        y, x = divmod(index, PIECE_COLS)
        rotated |= 1 << (PIECE_COLS * x + 3 - y)
    return align_piece(rotated, rows)


def flip_piece(shape: int, rows: int = PIECE_ROWS) -> int:
    """Horizontal mirror: (x, y) -> (3 - x, y)."""
    _check_shape(shape, rows)
    flipped = 0
    for index in iter_set_bits(shape):
        y, x = divmod(index, PIECE_COLS)
        flipped |= 1 << (PIECE_COLS * y + 3 - x)
    return align_piece(flipped, rows)


def piece_to_bitboard(shape: int, x: int, y: int, rows: int = PIECE_ROWS) -> int:
    """Place an aligned shape on the 8x8 board with its origin at column x, row y."""
    if x < 0 or y < 0 or x + piece_width(shape, rows) > N or y + piece_height(shape, rows) > N:
        raise ValueError(f"shape {shape:#x} does not fit at ({x}, {y})")
    widened = 0
    for row in range(rows):
        widened |= ((shape >> (PIECE_COLS * row)) & ROW_MASK) << (N * row)
    return widened << (y * N + x)

# =========================
# Orientation sets
# =========================
class Symmetry(Enum):
    """How many distinct orientations a piece has, and how to reach them."""

    FIXED = "fixed"  # 1: every transform gives the same shape
    HALF_TURN = "half_turn"  # 2: rectangle-like
    ROTATIONS = "rotations"  # 4: mirror image equals some rotation
    FOLDED_REFLECTIONS = "folded_reflections"  # 4: two turns times two mirror images
    ALL = "all"  # 8


def _four_turns(shape: int) -> List[int]:
    turns = [shape]
    for _ in range(3):
        turns.append(rotate_piece(turns[-1]))
    return turns


def build_orientations(shape: int, symmetry: Symmetry) -> Tuple[int, ...]:
    """Return the distinct orientations of a canonical shape."""
    shape = align_piece(shape)
    if symmetry is Symmetry.FIXED:
        orientations = [shape]
    elif symmetry is Symmetry.HALF_TURN:
        orientations = [shape, rotate_piece(shape)]
    elif symmetry is Symmetry.ROTATIONS:
        orientations = _four_turns(shape)
    elif symmetry is Symmetry.FOLDED_REFLECTIONS:
        turned = rotate_piece(shape)
        mirrored = flip_piece(turned)
        orientations = [shape, turned, mirrored, rotate_piece(mirrored)]
    else:
        orientations = _four_turns(shape) + _four_turns(flip_piece(shape))

    if len(set(orientations)) != len(orientations):
        raise ValueError(f"shape {shape:#x} repeats orientations under {symmetry.name}")
    return tuple(orientations)

# =========================
# Piece library
# =========================
PIECES_BASE: Dict[str, Tuple[int, Symmetry]] = {
    "RECT": (0x0077, Symmetry.HALF_TURN),
    "U": (0x0313, Symmetry.ROTATIONS),
    "CORNER": (0x0117, Symmetry.ROTATIONS),
    "TALL_S": (0x0326, Symmetry.FOLDED_REFLECTIONS),
    "TALL_L": (0x001F, Symmetry.ALL),
    "LONG_Z": (0x003E, Symmetry.ALL),
    "UNEVEN_T": (0x002F, Symmetry.ALL),
    "SIX": (0x0331, Symmetry.ALL),
    "TALL_T": (0x0227, Symmetry.ROTATIONS),
    "W": (0x0631, Symmetry.ROTATIONS),
    "H": (0x0175, Symmetry.ALL),
    "SQUARE": (0x0033, Symmetry.FIXED),
    "LINE": (0x000F, Symmetry.HALF_TURN),
    "Z": (0x0036, Symmetry.FOLDED_REFLECTIONS),
    "L": (0x0017, Symmetry.ALL),
    "T": (0x0027, Symmetry.ROTATIONS),
}

PIECE_NAMES = list(PIECES_BASE.keys())


def piece_cell_count(name: str) -> int:
    """Number of cells covered by a library piece."""
    return count_set_bits(PIECES_BASE[name][0])


@lru_cache(maxsize=1)
def build_piece_orientations() -> Dict[str, Tuple[int, ...]]:
    """Orientation set of every library piece, computed once."""
    return {
        name: build_orientations(shape, symmetry)
        for name, (shape, symmetry) in PIECES_BASE.items()
    }


PIECE_ORIENTATIONS = build_piece_orientations()


def placements_for_orientations(orientations: Sequence[int]) -> Tuple[int, ...]:
    """Expand orientations into board masks, in orientation, x, y order."""
    placements: List[int] = []
    for orientation in orientations:
        width = piece_width(orientation)
        height = piece_height(orientation)
        for x in range(N + 1 - width):
            for y in range(N + 1 - height):
                placements.append(piece_to_bitboard(orientation, x, y))
    return tuple(placements)


@lru_cache(maxsize=1)
def precompute_piece_placements() -> Dict[str, Tuple[int, ...]]:
    """Precompute every on-board placement of each library piece."""
    placements = {
        name: placements_for_orientations(orientations)
        for name, orientations in PIECE_ORIENTATIONS.items()
    }
    LOGGER.debug(
        "precomputed %s placements for %s pieces",
        sum(len(masks) for masks in placements.values()),
        len(placements),
    )
    return placements


ALL_PLACEMENTS = precompute_piece_placements()
