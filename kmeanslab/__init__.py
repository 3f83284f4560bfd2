"""K-means clustering experiments on tabular datasets, with a small logger and threading demos."""

__version__ = "0.1.0"