"""Text and image rendering of calendar solutions."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

import cv2
import numpy as np

from board_helpers import N, NUM_SQUARES, index_to_row_col, iter_set_bits
from solver_helpers import PartialSolution, Solution

LOGGER = logging.getLogger(__name__)

FREE_CHAR = "."
BLOCKED_CHAR = "#"

PALETTE = [
    (231, 76, 60),
    (46, 204, 113),
    (52, 152, 219),
    (155, 89, 182),
    (241, 196, 15),
    (230, 126, 34),
    (26, 188, 156),
    (149, 165, 166),
    (52, 73, 94),
    (192, 57, 43),
]


def piece_letter(piece_index: int) -> str:
    return chr(ord("A") + piece_index)


def _render_cells(pieces: Sequence[int], blocked_mask: Optional[int]) -> str:
    cells: List[str] = [FREE_CHAR] * NUM_SQUARES
    if blocked_mask is not None:
        for index in iter_set_bits(blocked_mask):
            cells[index] = BLOCKED_CHAR
    for piece_index, placement in enumerate(pieces):
        letter = piece_letter(piece_index)
        for index in iter_set_bits(placement):
            cells[index] = letter
    return "\n".join(" ".join(cells[row * N:(row + 1) * N]) for row in range(N))


def render_solution_text(solution: Solution, blocked_mask: Optional[int] = None) -> str:
    """One letter per piece index (A, B, ...), rows top to bottom."""
    return _render_cells(solution.pieces, blocked_mask)


def render_partial_text(state: PartialSolution) -> str:
    """Placed pieces by letter, every other occupied cell as BLOCKED_CHAR."""
    return _render_cells(state.pieces, state.combined)


def render_solution_image(
    blocked_mask: int,
    solution: Solution,
    out_path: str,
    labels: Optional[Dict[int, str]] = None,
    cell_size: int = 80,
    margin: int = 20,
) -> None:
    """Render a board image with off-grid cells, pieces, and uncovered labels."""
    board_size = cell_size * N
    img_size = board_size + margin * 2
    img = np.full((img_size, img_size, 3), 255, dtype=np.uint8)

    covered = 0
    for placement in solution.pieces:
        covered |= placement

    # Fill piece placements
    for idx, placement in enumerate(solution.pieces):
        color = PALETTE[idx % len(PALETTE)]
        for cell_index in iter_set_bits(placement):
            row, col = index_to_row_col(cell_index)
            x1 = margin + col * cell_size + 2
            y1 = margin + row * cell_size + 2
            x2 = margin + (col + 1) * cell_size - 2
            y2 = margin + (row + 1) * cell_size - 2
            cv2.rectangle(img, (x1, y1), (x2, y2), color, -1)

    # Grey out cells that are not part of the board
    for cell_index in iter_set_bits(blocked_mask):
        if labels is not None and cell_index in labels:
            continue
        row, col = index_to_row_col(cell_index)
        x1 = margin + col * cell_size
        y1 = margin + row * cell_size
        cv2.rectangle(img, (x1, y1), (x1 + cell_size, y1 + cell_size), (60, 60, 60), -1)

    # Label the cells left showing
    if labels:
        for cell_index, label in labels.items():
            if covered >> cell_index & 1:
                continue
            row, col = index_to_row_col(cell_index)
            x = margin + col * cell_size + cell_size // 5
            y = margin + row * cell_size + (cell_size * 3) // 5
            cv2.putText(img, label, (x, y), cv2.FONT_HERSHEY_SIMPLEX, 0.8, (0, 0, 0), 2)

    # Draw grid
    for i in range(N + 1):
        x = margin + i * cell_size
        y = margin + i * cell_size
        cv2.line(img, (x, margin), (x, margin + board_size), (0, 0, 0), 2)
        cv2.line(img, (margin, y), (margin + board_size, y), (0, 0, 0), 2)

    if not cv2.imwrite(out_path, img):
        raise OSError(f"failed to write image: {out_path}")
    LOGGER.debug("wrote solution image %s", out_path)
