import pandas as pd
from pathlib import Path
from typing import Optional, Union, TextIO

from losreport.config import DATA_CONFIG, get_available_data_path, logger
from losreport.data.schema import strip_text
from losreport.data.validators import validate_dataset
from losreport.errors import InvalidInputError


class DataNotFoundError(FileNotFoundError):
    pass


def get_data_path() -> str:
    path = get_available_data_path()
    if path is None:
        raise DataNotFoundError("No data file found. Run: python run.py generate")
    return path


class DataSource:
    """
    Caller-owned handle on the admissions CSV.

    The file is opened on ``open()`` (or on entering the ``with`` block) and
    released on ``close()``, including when the body raises.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None, encoding: Optional[str] = None):
        self.path = Path(path) if path is not None else Path(get_data_path())
        self.encoding = encoding or DATA_CONFIG.encoding
        self._handle: Optional[TextIO] = None

    @property
    def is_open(self) -> bool:
        return self._handle is not None and not self._handle.closed

    def open(self) -> "DataSource":
        if not self.path.exists():
            raise DataNotFoundError(f"Data file not found: {self.path}")
        if not self.is_open:
            self._handle = open(self.path, "r", encoding=self.encoding, newline="")
            logger.info(f"Opened data source {self.path.name}")
        return self

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None
            logger.info(f"Closed data source {self.path.name}")

    def read_frame(self) -> pd.DataFrame:
        if not self.is_open:
            raise RuntimeError("Data source is not open")
        self._handle.seek(0)
        return pd.read_csv(self._handle, sep=DATA_CONFIG.csv_separator)

    def __enter__(self) -> "DataSource":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def load_data(
    source: Optional[Union[DataSource, str, Path]] = None,
    validate: bool = True
) -> pd.DataFrame:
    """
    Load admission records.

    Args:
        source: An open DataSource, or a path. Paths are opened and closed here.
        validate: If True, reject unknown categories and malformed values.

    Returns:
        pd.DataFrame with one row per admission, categorical values stripped.

    Raises:
        DataNotFoundError: If the file does not exist.
        InvalidInputError: If validation finds errors.
    """
    if isinstance(source, DataSource):
        df = source.read_frame()
        name = source.path.name
    else:
        with DataSource(source) as owned:
            df = owned.read_frame()
            name = owned.path.name

    logger.info(f"Loaded {name}: {len(df)} rows, {len(df.columns)} columns")

    for col in [DATA_CONFIG.admission_column, DATA_CONFIG.severity_column, DATA_CONFIG.stay_column]:
        if col in df.columns:
            df[col] = strip_text(df[col])

    if validate:
        report = validate_dataset(df)
        for issue in report.issues:
            if issue.severity != "error":
                logger.warning(f"{issue.column}: {issue.message}")
        if not report.is_valid:
            details = "; ".join(f"{i.column}: {i.message}" for i in report.errors)
            raise InvalidInputError(f"Invalid admission data in {name}: {details}")

    return df
