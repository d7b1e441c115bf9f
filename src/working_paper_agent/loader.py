"""CSV trial balance loader."""

import csv
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from working_paper_agent.models import TrialBalanceRow

logger = structlog.get_logger(__name__)

SUPPORTED_SUFFIXES = (".csv",)


class TrialBalanceLoadError(Exception):
    """A trial balance file could not be loaded."""

    def __init__(self, path: str | Path, message: str):
        super().__init__(message)
        self.path = str(path)


class UnsupportedFileError(TrialBalanceLoadError):
    """File type is not supported."""

    pass


class EmptyTrialBalanceError(TrialBalanceLoadError):
    """File parsed but contained no data rows."""

    pass


@dataclass
class TrialBalanceDocument:
    """A loaded trial balance and the path it came from."""

    name: str
    rows: list[TrialBalanceRow] = field(default_factory=list)


def load_trial_balance(path: str | Path) -> TrialBalanceDocument:
    """Load a CSV trial balance into an ordered list of row dicts.

    The header row defines the column names. Empty lines are skipped, but a
    line holding only delimiters is kept as a row of empty strings. Values
    past the header width are dropped with a warning. Values are kept as
    strings, exactly as they appear in the file.

    Args:
        path: Path to a ``.csv`` file.

    Returns:
        TrialBalanceDocument with one row per account line.

    Raises:
        UnsupportedFileError: The file is not a CSV file.
        EmptyTrialBalanceError: The file has no data rows.
        TrialBalanceLoadError: The file could not be read.
    """
    file_path = Path(path)
    if file_path.suffix.lower() not in SUPPORTED_SUFFIXES:
        raise UnsupportedFileError(
            path,
            f"Unsupported file type: {path}. Only CSV files are supported.",
        )

    try:
        # utf-8-sig drops the BOM spreadsheet exports like to prepend
        with file_path.open(newline="", encoding="utf-8-sig") as f:
            reader = csv.DictReader(f)
            rows: list[TrialBalanceRow] = []
            for row in reader:
                # DictReader files values past the header width under the None key
                extra = row.pop(None, None)
                if extra:
                    logger.warning(
                        "trial_balance_extra_fields",
                        path=str(path),
                        line=reader.line_num,
                        dropped=len(extra),
                    )
                rows.append(row)
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise TrialBalanceLoadError(path, f"Could not read {path}: {e}") from e

    if not rows:
        raise EmptyTrialBalanceError(
            path,
            f"No data found in file: {path}. Please check the file content.",
        )

    logger.info("trial_balance_loaded", path=str(path), rows=len(rows))
    return TrialBalanceDocument(name=str(path), rows=rows)
