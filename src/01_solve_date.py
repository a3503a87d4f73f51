import argparse
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Optional

from path_helpers import IMAGES_DIR, ensure_parent_dir
from render_helpers import render_solution_image, render_solution_text
from variant_helpers import (
    VARIANT_NAMES,
    blocked_mask,
    cell_labels,
    count_for_date,
    get_variant,
    has_solution_for_date,
    iter_date_solutions,
)

LOGGER = logging.getLogger(__name__)

PRINT_MODES = ("first", "summary", "all", "count", "check")


def parse_date(value: str) -> date:
    """Parse YYYY-MM-DD, or MM-DD in the leap year 2020."""
    value = value.strip()
    for prefix in ("", "2020-"):
        try:
            return datetime.strptime(prefix + value, "%Y-%m-%d").date()
        except ValueError:
            continue
    raise argparse.ArgumentTypeError(f"invalid date: {value!r} (expected YYYY-MM-DD or MM-DD)")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Solve the calendar puzzle for one date and print the pieces by letter."
    )
    parser.add_argument(
        "--date",
        type=parse_date,
        default=None,
        help="date as YYYY-MM-DD or MM-DD (default: today)",
    )
    parser.add_argument(
        "--variant",
        default="dragonfjord",
        choices=VARIANT_NAMES,
        help="puzzle variant",
    )
    parser.add_argument(
        "--print",
        dest="print_mode",
        default="first",
        choices=PRINT_MODES,
        help=(
            "first = first solution only (fastest), summary = first solution and count, "
            "all = every solution and count, count = count only, check = solvable or not"
        ),
    )
    parser.add_argument(
        "--image",
        action="store_true",
        help="also render the first solution as a PNG",
    )
    parser.add_argument(
        "--image-out",
        default=None,
        help="PNG output path (default: output/images/<variant>_<MM-DD>.png)",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    try:
        day = args.date or date.today()
        variant = get_variant(args.variant)
        blocked = blocked_mask(variant, day)
        label = f"{day.month:02d}-{day.day:02d}"

        if args.print_mode == "check":
            print(f"{label} solvable: {1 if has_solution_for_date(variant, day) else 0}")
            return

        if args.print_mode == "count":
            print(f"{label} has {count_for_date(variant, day)} solutions")
            return

        print(f"**** {label} ****")
        max_solutions: Optional[int] = 1 if args.print_mode == "first" else None
        first = None
        solution_count = 0
        for solution in iter_date_solutions(variant, day, max_solutions=max_solutions):
            solution_count += 1
            if first is None:
                first = solution
            if args.print_mode == "all" or solution_count == 1:
                print(render_solution_text(solution, blocked_mask=variant.base_mask))
                print()

        if first is None:
            LOGGER.warning("no solution for %s on %s", variant.name, day.isoformat())
        elif args.image or args.image_out:
            out_path = Path(args.image_out) if args.image_out else IMAGES_DIR / f"{variant.name}_{label}.png"
            ensure_parent_dir(out_path)
            render_solution_image(blocked, first, str(out_path), labels=cell_labels(variant))
            LOGGER.info("wrote: %s", out_path)

        if args.print_mode != "first":
            print(f"{label} has {solution_count} solutions")
    except Exception:
        LOGGER.exception("Failed to solve date")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
