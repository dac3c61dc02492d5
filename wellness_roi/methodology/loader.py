"""Load and validate benchmark constant records from JSON files."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path

from wellness_roi.methodology.schema import BenchmarkConstants

# Default directory for benchmark config files
_CONFIG_DIR = Path(__file__).parent / "configs"


def load_benchmarks(file_path: Path | None = None) -> BenchmarkConstants:
    """Load and validate a benchmark record from a JSON file.

    If no path is provided, loads the default UK record.
    """
    if file_path is None:
        file_path = _CONFIG_DIR / "uk_wellness_v1.json"

    if not file_path.exists():
        raise FileNotFoundError(f"Benchmark config not found: {file_path}")

    with open(file_path, "r") as f:
        raw = json.load(f)

    return BenchmarkConstants.model_validate(raw)


@lru_cache(maxsize=1)
def get_default_benchmarks() -> BenchmarkConstants:
    """Load the default UK corporate wellness benchmarks."""
    return load_benchmarks()
