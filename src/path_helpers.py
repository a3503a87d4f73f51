"""Shared path helpers for scripts."""

from __future__ import annotations

from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = BASE_DIR.parent
OUTPUT_DIR = PROJECT_ROOT / "output"
IMAGES_DIR = OUTPUT_DIR / "images"


def ensure_parent_dir(path: Path) -> Path:
    """Ensure the directory holding path exists and return path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    return path
