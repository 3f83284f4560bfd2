# kmeanslab

kmeanslab runs repeated k-means clustering experiments on a few tabular
datasets. For each run it records how long the run took and the iteration at
which it stopped. Three small threading demos come with it. It has no
dependencies beyond the Python standard library and needs Python 3.10 or later.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Running k-means experiments

```
kmeanslab <dataset> <num_exp> <clusters> <max_iterations> [debug]
```

- `dataset`: one of `iris`, `rice`, `htru2`, `wesad`
- `num_exp`: the number of experiments to run
- `clusters`: the number of clusters `k`
- `max_iterations`: the iteration limit for a run that does not converge
- `debug`: `0` (off, the default) or `1` (on)

The numeric arguments are read by their leading digits, so a value such as
`abc` counts as `0`. If the number of arguments is wrong, the command prints a
usage message and exits with status 1. It also exits with status 1 when
`debug` is neither `0` nor `1`, when the dataset name is unknown, when the
dataset file cannot be opened or parsed, or when `clusters` is below 1.

The dataset files are not included. They are read relative to the working
directory:

| name    | file                                  | features kept |
|---------|---------------------------------------|---------------|
| `iris`  | `Iris.csv`                            | 4 (after a header line and an id column) |
| `rice`  | `data/rice/Rice_Cammeo_Osmancik.arff` | 6 (after 16 header lines) |
| `htru2` | `data/htru2/HTRU_2.csv`               | 8 (no header) |
| `wesad` | `data/wesad/WESAD/S4/S4_respiban.txt` | the first 6 channels, after the `# EndOfHeader` line |

Each experiment picks its starting centroids at random from the rows, seeded
from the current time plus the experiment number. It then alternates between
assigning every point to its nearest centroid and moving each centroid to the
mean of its points. It stops when no centroid coordinate moves by more than
`1e-6`, or when the iteration limit is reached. A centroid that receives no
points stays where it is.

Log messages go to standard error: INFO and above normally, DEBUG and above
with debug on.

Output is written to the `experiments/` directory, which must already exist.
If a file cannot be written, an error is logged and the run carries on.

- With debug off, `experiments/<dataset>_experiment_result.csv` holds one line
  per experiment, with the columns `iteration,dataset,time,converged_at`.
- With debug on, no result file is written. Instead, every iteration of every
  experiment is saved as
  `experiments/<dataset>_experiment_<n>_iteration_<iii>.csv`. Each of these
  files lists every point with its assigned cluster, then the centroids as
  rows labelled `c0`, `c1`, and so on. Log lines are also appended to
  `kmeans.log`.

Example:

```
kmeanslab iris 10 3 100 0
```

## Using it as a library

```python
from kmeanslab.dataset import load_dataset
from kmeanslab.kmeans import kmeans
from kmeanslab.experiments import save_experiment

df = load_dataset("iris", ".")
results = [kmeans(df, 3, 100, n, False, 1, "experiments") for n in range(5)]
save_experiment(results, df.name, "experiments")
```

- `kmeanslab.dataset`: `Dataframe`, the loaders `load_iris`, `load_rice`,
  `load_htru2` and `load_wesad`, and `load_dataset(name, base_dir)`. An
  unknown name raises `UnknownDatasetError`, which is a `ValueError`, and a
  malformed row raises `ValueError`.
- `kmeanslab.kmeans`: `kmeans(df, k, max_iter, exp_number, debug, workers,
  output_dir)` returns an `Experiment`, which carries the final centroids and
  assignments. The individual steps are also available: `init_centroids`,
  `assign_points`, `update_centroids`, `has_converged` and
  `euclidean_distance`. Pass `workers` to split the assignment and update
  steps across that many threads.
- `kmeanslab.experiments`: `Experiment`, `save_iteration_data` and
  `save_experiment`. Both save functions return the path they wrote, or
  `None` if the file could not be written.
- `kmeanslab.logger` and `kmeanslab.logformat`: the logger used throughout.
  `get_logger()` returns a process-wide `Logger`, which has a root handler
  plus any handlers added with `add_stream_handler` or `add_file_handler`
  (at most 29 handlers in all). Handler settings are changed with
  `set_attribute`. The formatters are `color_fmt1`, `color_fmt2`,
  `no_color_fmt1` and `no_color_fmt2`.

## Threading demos

```
kmeanslab-producer-consumer [--producers N] [--consumers N] [--max-produced N]
                            [--max-queue N] [--delay SECONDS] [--seed N]
```

Producer threads (200 by default) fill a bounded stack (7 slots by default)
with random values, and consumer threads (200 by default) empty it. The run
stops once 17 items, by default, have been produced and consumed. Each
producer waits `--delay` seconds (0.1 by default) after inserting an item.

```
kmeanslab-token-ring [--threads N]
```

A chain of dependent tasks runs on a team of threads (4 by default). Each
task increments a shared token in a fixed order and prints a line. The final
token value is printed at the end.

```
kmeanslab-hello [MESSAGE ...] [--world]
```

Starts one thread per message (two default greetings if none are given).
Each thread prints its message and returns `Finished!` to the main thread,
which prints what each thread returned. `--world` prints a single
`Hello, World!` instead.