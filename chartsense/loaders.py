"""Dataset file loading for the CLI (CSV, Excel, JSON) via pandas."""

import csv
import json
from pathlib import Path
from typing import Optional

import pandas as pd

from chartsense.core import constants
from chartsense.core.exceptions import DataLoadError, UnsupportedFormatError
from chartsense.core.logging_config import get_logger

logger = get_logger(__name__)


def detect_delimiter(file_path: str, sample_size: int = 8192) -> str:
    """
    Auto-detect the delimiter used in a CSV file.

    Returns the detected delimiter or ',' if detection fails.
    """
    encodings = ['utf-8', 'utf-8-sig', 'cp1252', 'latin-1']

    for encoding in encodings:
        try:
            with open(file_path, 'r', newline='', encoding=encoding) as f:
                sample = f.read(sample_size)
            dialect = csv.Sniffer().sniff(sample, delimiters=',\t|;')
            return dialect.delimiter
        except UnicodeDecodeError:
            continue
        except csv.Error:
            break

    return ','


def detect_encoding(file_path: str) -> str:
    """First common encoding that decodes the head of the file; utf-8 otherwise."""
    for encoding in ['utf-8', 'utf-8-sig', 'cp1252', 'latin-1']:
        try:
            with open(file_path, 'r', encoding=encoding) as f:
                f.read(8192)
            return encoding
        except UnicodeDecodeError:
            continue
    return 'utf-8'


def detect_format(file_path: str) -> str:
    """
    Map a file extension to a loader format.

    Raises:
        UnsupportedFormatError: For extensions outside FILE_EXTENSION_MAP
    """
    extension = Path(file_path).suffix.lower()
    file_format = constants.FILE_EXTENSION_MAP.get(extension)
    if file_format is None:
        raise UnsupportedFormatError(
            file_path,
            format=extension.lstrip('.') or 'unknown',
            supported_formats=constants.SUPPORTED_FILE_FORMATS
        )
    return file_format


def _read_json(file_path: str) -> pd.DataFrame:
    with open(file_path, 'r', encoding='utf-8') as f:
        parsed = json.load(f)
    # A single object is treated as a one-row table
    records = parsed if isinstance(parsed, list) else [parsed]
    if not all(isinstance(r, dict) for r in records):
        raise ValueError("JSON data must be an object or an array of objects")
    return pd.DataFrame.from_records(records)


def load_dataframe(
    file_path: str,
    file_format: Optional[str] = None,
    delimiter: Optional[str] = None,
    sample: Optional[int] = None
) -> pd.DataFrame:
    """
    Load a dataset file into a DataFrame.

    Args:
        file_path: Path to the data file
        file_format: csv, excel or json; detected from the extension if omitted
        delimiter: CSV delimiter; sniffed if omitted
        sample: Keep only the first N rows

    Returns:
        Loaded DataFrame

    Raises:
        DataLoadError: If the file is missing or cannot be parsed
        UnsupportedFormatError: If the format is not supported
    """
    path = Path(file_path)
    if not path.exists():
        raise DataLoadError(f"File not found: {file_path}", file_path=str(file_path))

    file_format = (file_format or detect_format(str(path))).lower()
    if file_format not in constants.SUPPORTED_FILE_FORMATS:
        raise UnsupportedFormatError(str(path), format=file_format,
                                     supported_formats=constants.SUPPORTED_FILE_FORMATS)

    try:
        if file_format == 'csv':
            delimiter = delimiter or detect_delimiter(str(path))
            encoding = detect_encoding(str(path))
            if delimiter != ',':
                logger.info(f"Auto-detected delimiter: {repr(delimiter)}")
            df = pd.read_csv(path, delimiter=delimiter, encoding=encoding, nrows=sample, low_memory=False)
        elif file_format == 'excel':
            df = pd.read_excel(path, sheet_name=0, nrows=sample)
        else:
            df = _read_json(str(path))
            if sample is not None:
                df = df.head(sample)
    except pd.errors.EmptyDataError:
        logger.warning(f"Empty data file: {file_path}")
        return pd.DataFrame()
    except (pd.errors.ParserError, ValueError, UnicodeDecodeError, OSError, ImportError) as e:
        raise DataLoadError(f"Failed to load {file_path}: {e}", file_path=str(file_path), original_exception=e)

    logger.info(f"Loaded {len(df):,} rows x {len(df.columns)} columns from {file_path}")
    return df
