"""Command line entry point: run repeated k-means experiments on a named dataset."""

from __future__ import annotations

import re
import sys
from typing import Optional, Sequence, TextIO

from kmeanslab.dataset import UnknownDatasetError, load_dataset
from kmeanslab.experiments import Experiment, save_experiment
from kmeanslab.kmeans import kmeans
from kmeanslab.logformat import ROOT_HANDLER_NAME, Level
from kmeanslab.logger import get_logger

PROG = "kmeanslab"
LOG_FILE = "kmeans.log"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _atoi(text: str) -> int:
    """Leading integer of text, or 0 when there is none."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def _usage(err: TextIO) -> None:
    err.write(
        f"Usage: {PROG} <dataset> <num_exp> <clusters> <max_iterations> [debug]\n"
        "  dataset (str): dataset to use\n"
        "  num_exp (int+): number of experiments to run\n"
        "  clusters (int+): k number of clusters to separate the data\n"
        "  max_iterations (int+): Maximum number of iterations\n"
        "if the algorithm does not converge\n"
        "  debug: 0 (off) or 1 (on), default is 0\n"
    )


def _run(dataset: str, num_exp: int, k: int, max_iter: int, debug: bool) -> int:
    log = get_logger()
    log.info("loading %s dataset...", dataset)
    try:
        df = load_dataset(dataset)
    except UnknownDatasetError:
        return 1
    except OSError as exc:
        sys.stderr.write(f"Error while opening the file: {exc}\n")
        return 1
    except ValueError as exc:
        sys.stderr.write(f"Error while reading the dataset: {exc}\n")
        return 1
    log.info("Dataset loaded!")

    log.info("Running k-means...")
    experiments: list[Experiment] = []
    try:
        for number in range(num_exp):
            log.debug("Running experiment %d...", number)
            experiments.append(kmeans(df, k, max_iter, number, debug))
    except ValueError as exc:
        sys.stderr.write(f"{exc}\n")
        return 1
    log.info("k-means finished!")

    for number, experiment in enumerate(experiments, start=1):
        log.info("Experiment %d took %f", number, experiment.execution_time)

    if not debug:
        save_experiment(experiments, df.name)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Parse the arguments, set up logging and run the experiments."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not 4 <= len(args) <= 6:
        _usage(sys.stderr)
        return 1

    dataset = args[0]
    num_exp = _atoi(args[1])
    k = _atoi(args[2])
    max_iter = _atoi(args[3])
    debug_flag = _atoi(args[4]) if len(args) >= 5 else 0
    if debug_flag not in (0, 1):
        sys.stderr.write("Debug must be 0 or 1\n")
        return 1
    debug = debug_flag == 1

    log = get_logger()
    saved_handlers = list(log.handlers)
    root = saved_handlers[0]
    root_was_quiet = root.quiet
    opened: list[TextIO] = []
    try:
        log.set_attribute(ROOT_HANDLER_NAME, "quiet", True)
        if debug:
            try:
                handler = log.add_file_handler(LOG_FILE, "a", Level.DEBUG, "file1")
                opened.append(handler.stream)
            except OSError:
                sys.stderr.write(f"Unable to open log file: {LOG_FILE}\n")
            log.add_stream_handler(None, Level.DEBUG, "console")
        else:
            log.add_stream_handler(None, Level.INFO, "console")
        return _run(dataset, num_exp, k, max_iter, debug)
    finally:
        for stream in opened:
            stream.close()
        log.handlers[:] = saved_handlers
        root.quiet = root_was_quiet


if __name__ == "__main__":
    sys.exit(main())