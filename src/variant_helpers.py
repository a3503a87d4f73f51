"""Calendar puzzle variants: board shapes, date cells, piece lists."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Callable, Dict, List, NamedTuple, Optional, Tuple, Union

import numpy as np

from board_helpers import bitboard_not, count_set_bits, row_col_to_index
from piece_helpers import ALL_PLACEMENTS, piece_cell_count
from solver_helpers import (
    PartialSolution,
    Solution,
    count_solutions,
    iter_solutions,
    new_partial_solution,
    solve,
)

# =========================
# Board shapes
# =========================
# Standard board (DragonFjord, JarringWords, CreaMakerspace):
#
#   Ja Fe Ma Ap Ma Ju XX XX
#   Ju Au Se Oc No De XX XX
#   01 02 03 04 05 06 07 XX
#   08 09 10 11 12 13 14 XX
#   15 16 17 18 19 20 21 XX
#   22 23 24 25 26 27 28 XX
#   29 30 31 XX XX XX XX XX
#   XX XX XX XX XX XX XX XX
BITBOARD_STANDARD = 0xFFF8_8080_8080_C0C0

# Tetromino board, last day row shifted right:
#
#   XX XX XX XX 29 30 31 XX
#   XX XX XX XX XX XX XX XX
BITBOARD_TETROMINO = 0xFF8F_8080_8080_C0C0

# Weekday board:
#
#   29 30 31 Su Mo Tu We XX
#   XX XX XX XX Th Fr Sa XX
BITBOARD_WEEKDAY = 0x8F80_8080_8080_C0C0

MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
                "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
WEEKDAY_LABELS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

# =========================
# Date cells
# =========================
def month_cell(month: int) -> int:
    """Cell index of a month: Jan-Jun on row 0, Jul-Dec on row 1."""
    if 1 <= month <= 6:
        return row_col_to_index(0, month - 1)
    if 7 <= month <= 12:
        return row_col_to_index(1, month - 7)
    raise ValueError(f"invalid month: {month}")


def day_cell(day_of_month: int) -> int:
    """Cell index of a day of month on the standard board (7 days per row)."""
    if not 1 <= day_of_month <= 31:
        raise ValueError(f"invalid day: {day_of_month}")
    row, col = divmod(day_of_month - 1, 7)
    return row_col_to_index(2 + row, col)


def tetromino_day_cell(day_of_month: int) -> int:
    """Like day_cell, but 29-31 sit at columns 4-6 of the last row."""
    if 29 <= day_of_month <= 31:
        return row_col_to_index(6, day_of_month - 25)
    return day_cell(day_of_month)


def weekday_cell(weekday_from_sunday: int) -> int:
    """Sun-Wed at the end of row 6, Thu-Sat at the end of row 7."""
    if 0 <= weekday_from_sunday <= 3:
        return row_col_to_index(6, 3 + weekday_from_sunday)
    if 4 <= weekday_from_sunday <= 6:
        return row_col_to_index(7, weekday_from_sunday)
    raise ValueError(f"invalid weekday: {weekday_from_sunday}")


def standard_date_cells(day: date) -> int:
    return (1 << month_cell(day.month)) | (1 << day_cell(day.day))


def tetromino_date_cells(day: date) -> int:
    return (1 << month_cell(day.month)) | (1 << tetromino_day_cell(day.day))


def weekday_date_cells(day: date) -> int:
    weekday_from_sunday = (day.weekday() + 1) % 7
    return standard_date_cells(day) | (1 << weekday_cell(weekday_from_sunday))

# =========================
# Variant catalog
# =========================
class UnknownVariantError(ValueError):
    """Variant selector does not name a known puzzle."""


class NoSolutionError(LookupError):
    """No complete placement exists for the requested variant and date."""


class Variant(NamedTuple):
    name: str
    base_mask: int
    pieces: Tuple[str, ...]
    date_cells: Callable[[date], int]
    # Board layout used for labels; must agree with date_cells.
    day_cell: Callable[[int], int]
    weekday_cell: Optional[Callable[[int], int]] = None


VARIANTS: Dict[str, Variant] = {
    variant.name: variant
    for variant in (
        # https://www.dragonfjord.com/product/a-puzzle-a-day/
        Variant(
            "dragonfjord",
            BITBOARD_STANDARD,
            ("RECT", "U", "CORNER", "TALL_S", "TALL_L", "LONG_Z", "UNEVEN_T", "SIX"),
            standard_date_cells,
            day_cell,
        ),
        Variant(
            "jarringwords",
            BITBOARD_STANDARD,
            ("RECT", "U", "CORNER", "TALL_T", "TALL_L", "LONG_Z", "UNEVEN_T", "SIX"),
            standard_date_cells,
            day_cell,
        ),
        Variant(
            "creamakerspace",
            BITBOARD_STANDARD,
            ("H", "U", "CORNER", "W", "TALL_L", "LONG_Z", "UNEVEN_T", "SIX"),
            standard_date_cells,
            day_cell,
        ),
        Variant(
            "tetromino",
            BITBOARD_TETROMINO,
            ("SQUARE", "LINE", "RECT", "U", "CORNER", "Z", "L", "SIX", "T"),
            tetromino_date_cells,
            tetromino_day_cell,
        ),
        Variant(
            "weekday",
            BITBOARD_WEEKDAY,
            ("LINE", "U", "L", "TALL_L", "Z", "LONG_Z", "TALL_S", "TALL_T", "CORNER", "SIX"),
            weekday_date_cells,
            day_cell,
            weekday_cell,
        ),
    )
}

# Host bindings select variants by position.
VARIANT_NAMES = list(VARIANTS.keys())


def get_variant(selector: Union[str, int]) -> Variant:
    """Look up a variant by name or host index."""
    if isinstance(selector, bool):
        raise UnknownVariantError(f"unsupported variant: {selector!r}")
    if isinstance(selector, int):
        if 0 <= selector < len(VARIANT_NAMES):
            return VARIANTS[VARIANT_NAMES[selector]]
        raise UnknownVariantError(f"unsupported variant index: {selector}")
    variant = VARIANTS.get(str(selector).strip().lower())
    if variant is None:
        raise UnknownVariantError(
            f"unsupported variant: {selector!r} (expected one of {', '.join(VARIANT_NAMES)})"
        )
    return variant


def date_cells(variant: Variant, day: date) -> int:
    """Cells that show the date and stay uncovered."""
    cells = variant.date_cells(day)
    if cells & variant.base_mask:
        raise ValueError(f"{day.isoformat()} falls on an off-grid cell of {variant.name}")
    return cells


def blocked_mask(variant: Variant, day: date) -> int:
    return variant.base_mask | date_cells(variant, day)


def initial_state(variant: Variant, day: date) -> PartialSolution:
    return new_partial_solution(blocked_mask(variant, day), len(variant.pieces))


def variant_placements(variant: Variant) -> List[Tuple[int, ...]]:
    return [ALL_PLACEMENTS[name] for name in variant.pieces]


def open_cell_count(variant: Variant, day: date) -> int:
    return count_set_bits(bitboard_not(blocked_mask(variant, day)))


def piece_cell_total(variant: Variant) -> int:
    return sum(piece_cell_count(name) for name in variant.pieces)


def cell_labels(variant: Variant) -> Dict[int, str]:
    """Printed label of every on-grid cell."""
    labels: Dict[int, str] = {}
    for month in range(1, 13):
        labels[month_cell(month)] = MONTH_LABELS[month - 1]
    for day_of_month in range(1, 32):
        labels[variant.day_cell(day_of_month)] = str(day_of_month)
    if variant.weekday_cell is not None:
        for weekday, label in enumerate(WEEKDAY_LABELS):
            labels[variant.weekday_cell(weekday)] = label
    return labels

# =========================
# Solve entry points
# =========================
SOLVE_MODES = ("first", "all", "count", "check")


def solve_once(variant: Variant, day: date) -> Optional[Solution]:
    """First solution in search order, or None."""
    solutions = solve(initial_state(variant, day), variant_placements(variant), only_first=True)
    return solutions[0] if solutions else None


def solve_fully(variant: Variant, day: date) -> List[Solution]:
    return solve(initial_state(variant, day), variant_placements(variant))


def iter_date_solutions(
    variant: Variant, day: date, max_solutions: Optional[int] = None
):
    """Yield solutions for a date lazily."""
    return iter_solutions(
        initial_state(variant, day), variant_placements(variant), max_solutions=max_solutions
    )


def count_for_date(variant: Variant, day: date, max_solutions: Optional[int] = None) -> int:
    return count_solutions(
        initial_state(variant, day), variant_placements(variant), max_solutions=max_solutions
    )


def count_for_variant_date(
    variant_name: str, day: date, max_solutions: Optional[int] = None
) -> int:
    """count_for_date keyed by variant name, for process pools."""
    return count_for_date(get_variant(variant_name), day, max_solutions=max_solutions)


def has_solution_for_date(variant: Variant, day: date) -> bool:
    return count_for_date(variant, day, max_solutions=1) > 0


def solve_date(variant: Union[Variant, str, int], day: date, mode: str = "first"):
    """
    Solve a date in one of SOLVE_MODES.

    first -> Optional[Solution], all -> List[Solution], count -> int,
    check -> bool.
    """
    if not isinstance(variant, Variant):
        variant = get_variant(variant)
    if mode == "first":
        return solve_once(variant, day)
    if mode == "all":
        return solve_fully(variant, day)
    if mode == "count":
        return count_for_date(variant, day)
    if mode == "check":
        return has_solution_for_date(variant, day)
    raise ValueError(f"unknown solve mode: {mode!r} (expected one of {', '.join(SOLVE_MODES)})")


def solve_once_array(day: Union[date, int], variant_index: int) -> np.ndarray:
    """
    First solution as a uint64 array of piece masks.

    day may be a date or milliseconds since the Unix epoch (UTC).
    """
    if isinstance(day, datetime):
        day = day.date()
    elif not isinstance(day, date):
        day = datetime.fromtimestamp(day / 1000, tz=timezone.utc).date()
    variant = get_variant(variant_index)
    solution = solve_once(variant, day)
    if solution is None:
        raise NoSolutionError(f"No solution for variant {variant_index} on {day.isoformat()}")
    return np.array(solution.pieces, dtype=np.uint64)
