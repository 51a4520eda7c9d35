"""
Close price loading from CSV files for offline replay.
"""

import csv
from pathlib import Path
from typing import List

from ..observability.logger import get_logger

logger = get_logger(__name__)


def load_close_prices(path: str, column: str = "close") -> List[float]:
    """
    Load close prices from a CSV file with a header row.

    Rows are returned in file order (oldest first). Rows with an empty
    cell in `column` are skipped.

    Args:
        path: CSV file path.
        column: Header name of the close price column.

    Returns:
        List of close prices.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the column is missing or a value is not a number.
    """
    filepath = Path(path)
    if not filepath.exists():
        raise FileNotFoundError(f"Price file not found: {path}")

    prices: List[float] = []
    skipped = 0

    with open(filepath, "r", newline="") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None or column not in reader.fieldnames:
            raise ValueError(
                f"Column '{column}' not found in {path} (columns: {reader.fieldnames})"
            )

        for line_no, row in enumerate(reader, start=2):
            raw = (row.get(column) or "").strip()
            if not raw:
                skipped += 1
                continue
            try:
                prices.append(float(raw))
            except ValueError:
                raise ValueError(
                    f"Invalid price {raw!r} in {path} line {line_no}"
                ) from None

    if skipped:
        logger.warning(f"Skipped {skipped} rows without a close price", path=str(filepath))

    logger.info(f"Loaded {len(prices)} close prices", path=str(filepath), column=column)
    return prices
