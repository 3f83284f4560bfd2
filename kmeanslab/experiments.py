"""Per-experiment results and CSV snapshots of k-means runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

from kmeanslab.dataset import Dataframe
from kmeanslab.logger import get_logger

PathLike = Union[str, Path]

DEFAULT_DIRECTORY = "experiments"
RESULT_HEADER = "iteration,dataset,time,converged_at"


@dataclass
class Experiment:
    """Timing and convergence of one k-means run, with its final clustering."""

    number: int
    execution_time: float = 0.0
    convergence_iteration: int = 0
    centroids: list[list[float]] = field(default_factory=list, repr=False)
    assignments: list[int] = field(default_factory=list, repr=False)


def _csv_row(label: str, dataset: str, values: Iterable[float], cluster: int) -> str:
    cells = [label, dataset, *(f"{value:f}" for value in values), str(cluster)]
    return ",".join(cells) + "\n"


def save_iteration_data(
    centroids: Sequence[Sequence[float]],
    assignments: Sequence[int],
    df: Dataframe,
    iteration: int,
    exp_number: int,
    directory: PathLike = DEFAULT_DIRECTORY,
) -> Optional[Path]:
    """Write every point with its cluster, then every centroid, to a CSV file.

    Returns the path written, or None when the file could not be written.
    """
    log = get_logger()
    path = Path(directory) / (
        f"{df.name}_experiment_{exp_number}_iteration_{iteration:03d}.csv"
    )
    features = list(df.features[: df.num_features])
    if not features:
        log.error("No features found in dataframe")
        return None

    try:
        with open(path, "w", encoding="utf-8", newline="") as out:
            out.write(f"point_id,dataset,{','.join(features)},cluster\n")
            for index, (point, cluster) in enumerate(
                zip(df.data[: df.max_rows], assignments)
            ):
                out.write(
                    _csv_row(str(index), df.name, point[: df.num_features], cluster)
                )
            for index, centroid in enumerate(centroids):
                out.write(
                    _csv_row(f"c{index}", df.name, centroid[: df.num_features], index)
                )
    except OSError:
        log.error("Failed to open file for iteration data: %s", str(path))
        return None

    log.debug("Saved iteration %d data to %s", iteration, str(path))
    return path


def save_experiment(
    experiments: Iterable[Experiment],
    dataset_name: str,
    directory: PathLike = DEFAULT_DIRECTORY,
) -> Optional[Path]:
    """Write the timing and convergence of each experiment to a result CSV.

    Returns the path written, or None when the file could not be written.
    """
    path = Path(directory) / f"{dataset_name}_experiment_result.csv"
    try:
        with open(path, "w", encoding="utf-8", newline="") as out:
            out.write(RESULT_HEADER + "\n")
            for index, experiment in enumerate(experiments):
                out.write(
                    f"{index},{dataset_name},{experiment.execution_time:f},"
                    f"{experiment.convergence_iteration}\n"
                )
    except OSError:
        get_logger().error("Failed to open file for iteration data: %s", str(path))
        return None
    return path