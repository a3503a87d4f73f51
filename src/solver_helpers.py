"""Depth-first placement search over partial solutions."""

from __future__ import annotations

import logging
from typing import Iterator, List, NamedTuple, Optional, Sequence, Tuple

from board_helpers import FULL_BOARD_MASK, bitboard, has_small_gaps

LOGGER = logging.getLogger(__name__)


class PlacementError(ValueError):
    """A piece cannot be added to a partial solution."""


class PartialSolution(NamedTuple):
    """Occupied cells plus the ordered piece masks placed so far."""

    combined: int
    pieces: Tuple[int, ...]
    capacity: int

    @property
    def count(self) -> int:
        return len(self.pieces)


class Solution(NamedTuple):
    """Piece masks in placement order (not spatial order)."""

    pieces: Tuple[int, ...]


def new_partial_solution(blocked_mask: int, capacity: int) -> PartialSolution:
    """Start a search with blocked cells occupied and no pieces placed."""
    if capacity < 1:
        raise ValueError(f"capacity must be positive, got {capacity}")
    return PartialSolution(bitboard(blocked_mask), (), capacity)


def is_solved(state: PartialSolution) -> bool:
    return len(state.pieces) == state.capacity


def place_piece(state: PartialSolution, placement: int) -> PartialSolution:
    """Return a new state with placement added, or raise PlacementError."""
    if len(state.pieces) >= state.capacity:
        raise PlacementError(f"all {state.capacity} pieces are already placed")
    if placement & state.combined:
        raise PlacementError(f"placement {placement:#018x} overlaps occupied cells")
    return PartialSolution(
        state.combined | placement,
        state.pieces + (placement,),
        state.capacity,
    )


def iter_child_states(
    state: PartialSolution,
    placements: Sequence[int],
    prune: bool = True,
) -> Iterator[PartialSolution]:
    """Yield every legal state reachable by placing the next piece."""
    if len(state.pieces) >= state.capacity:
        raise PlacementError(f"all {state.capacity} pieces are already placed")
    combined = state.combined
    pieces = state.pieces
    capacity = state.capacity
    for placement in placements:
        if placement & combined:
            continue
        merged = combined | placement
        if prune and has_small_gaps(merged):
            continue
        yield PartialSolution(merged, pieces + (placement,), capacity)


def iter_solutions(
    state: PartialSolution,
    piece_placements: Sequence[Sequence[int]],
    max_solutions: Optional[int] = None,
    prune: bool = True,
) -> Iterator[Solution]:
    """
    Yield complete solutions in depth-first order.

    piece_placements[i] lists every board mask for the i-th piece. Children are
    pushed in list order and the most recently pushed state is expanded first,
    so the order of solutions is fixed by the order of the placement lists.
    """
    if len(piece_placements) != state.capacity:
        raise ValueError(
            f"expected placements for {state.capacity} pieces, got {len(piece_placements)}"
        )

    stack: List[PartialSolution] = [state]
    expanded = 0
    pruned = 0
    found = 0
    try:
        while stack:
            board = stack.pop()
            count = len(board.pieces)
            if count == board.capacity:
                found += 1
                yield Solution(board.pieces)
                if max_solutions and found >= max_solutions:
                    return
                continue

            expanded += 1
            for child in iter_child_states(board, piece_placements[count], prune=False):
                if prune and has_small_gaps(child.combined):
                    pruned += 1
                    continue
                stack.append(child)
    finally:
        LOGGER.debug(
            "search expanded %s states, pruned %s states, found %s solutions",
            f"{expanded:,}",
            f"{pruned:,}",
            found,
        )


def solve(
    state: PartialSolution,
    piece_placements: Sequence[Sequence[int]],
    only_first: bool = False,
    prune: bool = True,
) -> List[Solution]:
    """Return all solutions, or at most one when only_first is set."""
    max_solutions = 1 if only_first else None
    return list(iter_solutions(state, piece_placements, max_solutions=max_solutions, prune=prune))


def count_solutions(
    state: PartialSolution,
    piece_placements: Sequence[Sequence[int]],
    max_solutions: Optional[int] = None,
) -> int:
    """Count solutions. Optionally stop after max_solutions."""
    return sum(1 for _ in iter_solutions(state, piece_placements, max_solutions=max_solutions))


def has_solution(state: PartialSolution, piece_placements: Sequence[Sequence[int]]) -> bool:
    return count_solutions(state, piece_placements, max_solutions=1) > 0


def is_complete_solution(solution: Solution, blocked_mask: int, piece_count: int) -> bool:
    """Check that pieces are disjoint, avoid blocked cells, and fill the board."""
    if len(solution.pieces) != piece_count:
        return False
    covered = blocked_mask
    for placement in solution.pieces:
        if placement == 0 or placement & covered:
            return False
        covered |= placement
    return covered == FULL_BOARD_MASK
