"""Lloyd's k-means clustering over a Dataframe, optionally split across threads."""

from __future__ import annotations

import math
import random
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Iterator, Optional, Sequence, TypeVar, Union

from kmeanslab.dataset import Dataframe
from kmeanslab.experiments import DEFAULT_DIRECTORY, Experiment, save_iteration_data
from kmeanslab.logger import get_logger

CONVERGENCE_THRESHOLD = 1e-6

T = TypeVar("T")
PathLike = Union[str, Path]


def euclidean_distance(point1: Sequence[float], point2: Sequence[float]) -> float:
    """Straight-line distance between two points over their shared features."""
    return math.sqrt(sum((a - b) * (a - b) for a, b in zip(point1, point2)))


def _spans(count: int, workers: Optional[int]) -> Iterator[tuple[int, int]]:
    parts = max(1, min(workers or 1, count))
    size, extra = divmod(count, parts)
    start = 0
    for part in range(parts):
        end = start + size + (1 if part < extra else 0)
        yield start, end
        start = end


def _map_spans(
    work: Callable[[int, int], T], count: int, workers: Optional[int]
) -> list[T]:
    spans = list(_spans(count, workers))
    if len(spans) == 1:
        return [work(*spans[0])]
    with ThreadPoolExecutor(max_workers=len(spans)) as pool:
        return list(pool.map(lambda span: work(*span), spans))


def init_centroids(
    df: Dataframe,
    k: int,
    exp_number: int = 0,
    rng: Optional[random.Random] = None,
) -> list[list[float]]:
    """Pick k rows of the data at random (with repetition) as starting centroids."""
    if k < 1:
        raise ValueError(f"k must be positive, got {k}")
    if df.max_rows < 1:
        raise ValueError("cannot initialise centroids from an empty dataframe")
    log = get_logger()
    log.debug("Initializing centroids randomly...")
    if rng is None:
        rng = random.Random(int(time.time()) + exp_number)
    centroids = [
        list(df.data[rng.randrange(df.max_rows)][: df.num_features]) for _ in range(k)
    ]
    log.debug("Centroids initialized!")
    return centroids


def assign_points(
    df: Dataframe,
    centroids: Sequence[Sequence[float]],
    workers: Optional[int] = None,
) -> list[int]:
    """Index of the nearest centroid for each row; ties go to the lower index."""
    get_logger().debug("Updating assignments...")
    rows = df.data[: df.max_rows]
    width = df.num_features
    trimmed = [centroid[:width] for centroid in centroids]

    def nearest(point: Sequence[float]) -> int:
        best, best_distance = -1, math.inf
        for index, centroid in enumerate(trimmed):
            distance = euclidean_distance(point[:width], centroid)
            if distance < best_distance:
                best, best_distance = index, distance
        return best

    def work(start: int, end: int) -> list[int]:
        return [nearest(point) for point in rows[start:end]]

    return [a for part in _map_spans(work, len(rows), workers) for a in part]


def update_centroids(
    df: Dataframe,
    centroids: Sequence[Sequence[float]],
    assignments: Sequence[int],
    workers: Optional[int] = None,
) -> list[list[float]]:
    """Mean of the rows assigned to each centroid; empty clusters keep their centroid."""
    log = get_logger()
    log.debug("Updating centroids...")
    k = len(centroids)
    width = df.num_features
    rows = df.data[: df.max_rows]
    if len(assignments) < len(rows):
        raise ValueError(
            f"{len(assignments)} assignments given for {len(rows)} rows"
        )

    def work(start: int, end: int) -> tuple[list[list[float]], list[int]]:
        sums = [[0.0] * width for _ in range(k)]
        counts = [0] * k
        for point, cluster in zip(rows[start:end], assignments[start:end]):
            if not 0 <= cluster < k:
                raise ValueError(f"assignment {cluster} outside 0..{k - 1}")
            counts[cluster] += 1
            sums[cluster] = [s + v for s, v in zip(sums[cluster], point[:width])]
        return sums, counts

    totals = [[0.0] * width for _ in range(k)]
    counts = [0] * k
    for part_sums, part_counts in _map_spans(work, len(rows), workers):
        for cluster in range(k):
            counts[cluster] += part_counts[cluster]
            totals[cluster] = [
                a + b for a, b in zip(totals[cluster], part_sums[cluster])
            ]

    updated = [
        [value / count for value in total] if count else list(centroid)
        for centroid, total, count in zip(centroids, totals, counts)
    ]
    log.debug("Centroids updated!")
    return updated


def has_converged(
    current: Sequence[Sequence[float]],
    previous: Sequence[Sequence[float]],
    threshold: float = CONVERGENCE_THRESHOLD,
) -> bool:
    """True when no coordinate moved by more than threshold."""
    return all(
        abs(a - b) <= threshold
        for now, before in zip(current, previous)
        for a, b in zip(now, before)
    )


def kmeans(
    df: Dataframe,
    k: int,
    max_iter: int,
    exp_number: int = 0,
    debug: bool = False,
    workers: Optional[int] = None,
    output_dir: PathLike = DEFAULT_DIRECTORY,
) -> Experiment:
    """Cluster df into k groups, stopping at convergence or after max_iter rounds.

    With debug set, each round's points and centroids are saved under output_dir.
    """
    log = get_logger()
    start = time.perf_counter()
    log.debug("Running k-means with k=%d and maxIter=%d...", k, max_iter)

    centroids = init_centroids(df, k, exp_number)
    assignments: list[int] = []
    iteration = 0
    remaining = max_iter

    while remaining > 0:
        assignments = assign_points(df, centroids, workers)
        if debug:
            save_iteration_data(
                centroids, assignments, df, iteration, exp_number, output_dir
            )
        previous = centroids
        centroids = update_centroids(df, centroids, assignments, workers)
        if has_converged(centroids, previous, CONVERGENCE_THRESHOLD):
            log.debug("Convergence achieved after %d iterations.", iteration + 1)
            break
        remaining -= 1
        log.debug("Max iterations left: %d", remaining)
        iteration += 1

    elapsed = time.perf_counter() - start
    log.debug("K-means completed!")
    return Experiment(
        number=exp_number,
        execution_time=elapsed,
        convergence_iteration=iteration,
        centroids=centroids,
        assignments=assignments,
    )