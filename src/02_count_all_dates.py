import argparse
import csv
import logging
import os
import statistics
import time
from concurrent.futures import ProcessPoolExecutor
from datetime import date, timedelta
from functools import partial
from pathlib import Path
from typing import Iterator, List, Optional

from path_helpers import OUTPUT_DIR, ensure_parent_dir
from variant_helpers import VARIANT_NAMES, WEEKDAY_LABELS, count_for_variant_date

LOGGER = logging.getLogger(__name__)

FIELDNAMES = ["date", "month", "day", "weekday", "solution_count"]


def iter_year_dates(year: int) -> Iterator[date]:
    """Every date of a calendar year in order."""
    day = date(year, 1, 1)
    while day.year == year:
        yield day
        day += timedelta(days=1)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Count solutions for every date of a year and write them to a CSV."
    )
    parser.add_argument(
        "--variant",
        default="dragonfjord",
        choices=VARIANT_NAMES,
        help="puzzle variant",
    )
    parser.add_argument(
        "--year",
        type=int,
        default=2020,
        help="calendar year (a leap year covers Feb 29; weekdays depend on it)",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="output CSV path (default: output/02_<variant>_solution_counts.csv)",
    )
    parser.add_argument(
        "--max-solutions",
        type=int,
        default=0,
        help="early exit after N solutions per date (0 means full count)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=0,
        help="number of worker processes (0 = cpu count, 1 = no multiprocessing)",
    )
    parser.add_argument(
        "--chunksize",
        type=int,
        default=4,
        help="task chunksize for multiprocessing",
    )
    parser.add_argument("--progress-every", type=int, default=30, help="progress interval")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    try:
        max_solutions: Optional[int] = args.max_solutions if args.max_solutions and args.max_solutions > 0 else None
        output_path = Path(args.output) if args.output else OUTPUT_DIR / f"02_{args.variant}_solution_counts.csv"
        ensure_parent_dir(output_path)

        days = list(iter_year_dates(args.year))
        total = len(days)

        worker_count = args.workers if args.workers >= 0 else 0
        if worker_count == 0:
            worker_count = os.cpu_count() or 1
        use_multiprocessing = worker_count > 1

        start_time = time.time()
        processed = 0
        counts: List[int] = []
        unsolvable: List[str] = []

        solver = partial(count_for_variant_date, args.variant, max_solutions=max_solutions)

        with open(output_path, "w", newline="") as output_file:
            writer = csv.DictWriter(output_file, fieldnames=FIELDNAMES)
            writer.writeheader()

            executor: Optional[ProcessPoolExecutor] = None
            try:
                if use_multiprocessing:
                    executor = ProcessPoolExecutor(max_workers=worker_count)
                    results = executor.map(solver, days, chunksize=max(args.chunksize, 1))
                else:
                    results = (solver(day) for day in days)

                for day, solution_count in zip(days, results):
                    processed += 1
                    counts.append(solution_count)
                    if solution_count == 0:
                        unsolvable.append(day.isoformat())

                    writer.writerow(
                        {
                            "date": day.isoformat(),
                            "month": day.month,
                            "day": day.day,
                            "weekday": WEEKDAY_LABELS[(day.weekday() + 1) % 7],
                            "solution_count": solution_count,
                        }
                    )

                    if args.progress_every and processed % args.progress_every == 0:
                        elapsed = time.time() - start_time
                        rate = processed / elapsed if elapsed > 0 else 0.0
                        eta = (total - processed) / rate if rate else 0
                        LOGGER.info(
                            "[%s/%s] %.2f%% | %.2f dates/s | ETA %.1f min",
                            processed,
                            total,
                            (processed / total) * 100 if total > 0 else 0.0,
                            rate,
                            eta / 60,
                        )
            finally:
                if executor is not None:
                    executor.shutdown(wait=True)

        elapsed = time.time() - start_time
        LOGGER.info("=== DONE ===")
        LOGGER.info("variant: %s", args.variant)
        LOGGER.info("processed: %s", processed)
        LOGGER.info("total solutions: %s", f"{sum(counts):,}")
        LOGGER.info("min solution_count: %s", min(counts))
        LOGGER.info("max solution_count: %s", max(counts))
        LOGGER.info("median solution_count: %s", statistics.median(counts))
        if unsolvable:
            LOGGER.warning("unsolvable dates: %s", ", ".join(unsolvable))
        LOGGER.info("time: %.1f min", elapsed / 60)
        LOGGER.info("wrote: %s", output_path)
    except Exception:
        LOGGER.exception("Failed to count solutions")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
