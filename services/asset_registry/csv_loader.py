"""
CSV file loading utilities for the default asset universe.
"""

import csv
import os
from pathlib import Path
from typing import List, Dict, Iterator, Optional, Any

from core.logging import get_market_data_logger_safe

logger = get_market_data_logger_safe("asset_csv_loader")

DEFAULT_ASSETS_CSV = Path(__file__).resolve().parent / "assets.csv"

REQUIRED_FIELDS = ["symbol", "name", "sector", "price"]


class AssetCSVLoader:
    """
    Loads and parses asset listing files.

    Expected columns are ``symbol,name,sector,price``. Lines starting with
    ``#`` are comments; the header row is optional.
    """

    def __init__(self, csv_file_path: Optional[str] = None):
        self.csv_file_path = Path(csv_file_path) if csv_file_path else DEFAULT_ASSETS_CSV
        self.validate_file_exists()

    def validate_file_exists(self) -> None:
        """Validate that the CSV file exists and is readable."""
        if not self.csv_file_path.exists():
            raise FileNotFoundError(f"CSV file not found: {self.csv_file_path}")

        if not self.csv_file_path.is_file():
            raise ValueError(f"Path is not a file: {self.csv_file_path}")

        if not os.access(self.csv_file_path, os.R_OK):
            raise PermissionError(f"Cannot read CSV file: {self.csv_file_path}")

    def load_assets(self) -> List[Dict[str, Any]]:
        """
        Load all valid asset rows from the CSV file.

        Returns:
            List of dictionaries with ``symbol``, ``name``, ``sector`` and a
            float ``price``

        Raises:
            FileNotFoundError: If CSV file doesn't exist
        """
        assets = list(self.iter_assets())
        logger.info("Loaded asset listings", count=len(assets), path=str(self.csv_file_path))
        return assets

    def iter_assets(self) -> Iterator[Dict[str, Any]]:
        with open(self.csv_file_path, "r", encoding="utf-8") as file:
            lines = [
                line.strip() for line in file
                if line.strip() and not line.strip().startswith("#")
            ]

        if not lines:
            logger.warning("No data found in CSV file", path=str(self.csv_file_path))
            return

        has_header = lines[0].lower().startswith("symbol")
        if has_header:
            reader = csv.DictReader(lines)
        else:
            reader = csv.DictReader(lines, fieldnames=REQUIRED_FIELDS)

        for row_num, row in enumerate(reader, start=1):
            if self._validate_row(row, row_num):
                yield self._clean_row(row)

    def _validate_row(self, row: Dict[str, str], row_num: int) -> bool:
        for field in REQUIRED_FIELDS:
            if not (row.get(field) or "").strip():
                logger.warning("Skipping asset row with missing field", row=row_num, field=field)
                return False

        try:
            price = float(row["price"].strip())
        except ValueError:
            logger.warning("Skipping asset row with invalid price", row=row_num, price=row["price"])
            return False

        if price <= 0:
            logger.warning("Skipping asset row with non-positive price", row=row_num, price=price)
            return False

        return True

    def _clean_row(self, row: Dict[str, str]) -> Dict[str, Any]:
        return {
            "symbol": row["symbol"].strip().upper(),
            "name": row["name"].strip(),
            "sector": row["sector"].strip(),
            "price": float(row["price"].strip()),
        }
