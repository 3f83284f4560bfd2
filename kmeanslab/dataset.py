"""Dataset loaders that turn the supported files into in-memory data frames."""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import islice
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from kmeanslab.logger import get_logger

PathLike = Union[str, Path]

IRIS_MAX_ROWS = 150
RICE_MAX_ROWS = 3809
HTRU2_MAX_ROWS = 17898
WESAD_MAX_ROWS = 4558554

RICE_HEADER_LINES = 16
WESAD_END_OF_HEADER = "# EndOfHeader"
WESAD_FIELDS = 10

IRIS_FEATURES = ("SepalLengthCm", "SepalWidthCm", "PetalLengthCm", "PetalWidthCm")
RICE_FEATURES = (
    "PerimeterReal",
    "MajorAxisLengthReal",
    "MinorAxisLengthReal",
    "EccentricityReal",
    "ConvexArea",
    "ExtentReal",
)
HTRU2_FEATURES = (
    "profileMean",
    "profileStdev",
    "profileSkewness",
    "profileKurtosis",
    "dmMean",
    "dmStdev",
    "dmSkewness",
    "dmKurtosis",
)
WESAD_FEATURES = ("ECG", "EDA", "EMG", "TEMP", "XYZ", "RESPIRATION")


@dataclass
class Dataframe:
    """A named table of numeric feature rows."""

    name: str
    data: list[list[float]]
    features: list[str]
    max_rows: int
    max_columns: int
    num_features: int
    start_column: int
    end_column: int


class UnknownDatasetError(ValueError):
    """Raised when a dataset name is not one of the supported datasets."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown dataset: {name}")
        self.name = name


def _read_csv_rows(
    lines: Iterable[tuple[int, str]],
    path: PathLike,
    num_features: int,
    leading_id: bool,
    limit: int,
) -> list[list[float]]:
    """Parse comma-separated rows of features followed by a label column."""
    width = num_features + (1 if leading_id else 0)
    rows: list[list[float]] = []
    for lineno, line in lines:
        if len(rows) >= limit:
            break
        text = line.strip()
        if not text:
            continue
        parts = text.split(",", width)
        if len(parts) < width:
            raise ValueError(
                f"{path}:{lineno}: expected {width} numeric fields, got {len(parts)}"
            )
        try:
            if leading_id:
                int(parts[0])
                values = [float(part) for part in parts[1:width]]
            else:
                values = [float(part) for part in parts[:width]]
        except ValueError as exc:
            raise ValueError(f"{path}:{lineno}: malformed row: {text!r}") from exc
        rows.append(values)
    return rows


def _load_csv(
    filename: PathLike,
    *,
    skip: int,
    num_features: int,
    leading_id: bool,
    limit: int,
) -> list[list[float]]:
    with open(filename, "r", encoding="utf-8") as handle:
        lines = islice(enumerate(handle, start=1), skip, None)
        rows = _read_csv_rows(lines, filename, num_features, leading_id, limit)
    get_logger().debug("Loaded %d rows", len(rows))
    return rows


def load_iris(filename: PathLike) -> Dataframe:
    """Load the Iris CSV: a header line, then id, four features and a species."""
    rows = _load_csv(
        filename,
        skip=1,
        num_features=len(IRIS_FEATURES),
        leading_id=True,
        limit=IRIS_MAX_ROWS,
    )
    return Dataframe(
        name="iris",
        data=rows,
        features=list(IRIS_FEATURES),
        max_rows=len(rows),
        max_columns=6,
        num_features=len(IRIS_FEATURES),
        start_column=1,
        end_column=len(IRIS_FEATURES),
    )


def load_rice(filename: PathLike) -> Dataframe:
    """Load the rice ARFF file: sixteen header lines, then six features and a class."""
    rows = _load_csv(
        filename,
        skip=RICE_HEADER_LINES,
        num_features=len(RICE_FEATURES),
        leading_id=False,
        limit=RICE_MAX_ROWS,
    )
    return Dataframe(
        name="rice",
        data=rows,
        features=list(RICE_FEATURES),
        max_rows=len(rows),
        max_columns=7,
        num_features=len(RICE_FEATURES),
        start_column=0,
        end_column=len(RICE_FEATURES),
    )


def load_htru2(filename: PathLike) -> Dataframe:
    """Load the HTRU2 CSV: no header, eight features and a class per line."""
    rows = _load_csv(
        filename,
        skip=0,
        num_features=len(HTRU2_FEATURES),
        leading_id=False,
        limit=HTRU2_MAX_ROWS,
    )
    return Dataframe(
        name="htru2",
        data=rows,
        features=list(HTRU2_FEATURES),
        max_rows=len(rows),
        max_columns=9,
        num_features=len(HTRU2_FEATURES),
        start_column=0,
        end_column=len(HTRU2_FEATURES) - 1,
    )


def _parse_wesad_line(line: str) -> Optional[list[int]]:
    tokens = line.split()[:WESAD_FIELDS]
    if len(tokens) < WESAD_FIELDS:
        return None
    try:
        return [int(token) for token in tokens]
    except ValueError:
        return None


def load_wesad(filename: PathLike) -> Dataframe:
    """Load a WESAD RespiBAN text file, keeping the first six channels of each sample."""
    num_features = len(WESAD_FEATURES)
    rows: list[list[float]] = []
    with open(filename, "r", encoding="utf-8") as handle:
        for line in handle:
            if line.startswith(WESAD_END_OF_HEADER):
                break
        for line in handle:
            if len(rows) >= WESAD_MAX_ROWS:
                break
            values = _parse_wesad_line(line)
            if values is None:
                continue
            channels = values[2:]
            rows.append([float(value) for value in channels[:num_features]])
    get_logger().debug("Loaded %d rows from WESAD dataset", len(rows))
    return Dataframe(
        name="wesad",
        data=rows,
        features=list(WESAD_FEATURES),
        max_rows=len(rows),
        max_columns=6,
        num_features=num_features,
        start_column=0,
        end_column=num_features,
    )


_DATASETS: dict[str, tuple[str, Callable[[PathLike], Dataframe], str]] = {
    "iris": ("Iris", load_iris, "Iris.csv"),
    "rice": ("Rice", load_rice, "data/rice/Rice_Cammeo_Osmancik.arff"),
    "htru2": ("htru2", load_htru2, "data/htru2/HTRU_2.csv"),
    "wesad": ("wesad", load_wesad, "data/wesad/WESAD/S4/S4_respiban.txt"),
}


def load_dataset(name: str, base_dir: Optional[PathLike] = None) -> Dataframe:
    """Load a dataset by name from its usual location under base_dir."""
    try:
        title, loader, relative = _DATASETS[name]
    except KeyError:
        get_logger().error("Unknown dataset: %s", name)
        raise UnknownDatasetError(name) from None
    get_logger().debug("Loading %s dataset...", title)
    root = Path(base_dir) if base_dir is not None else Path(".")
    return loader(root / relative)