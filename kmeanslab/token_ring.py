"""Pass a token through a chain of dependent tasks on a small worker team."""

from __future__ import annotations

import argparse
import itertools
import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from contextlib import nullcontext
from typing import Callable, Optional, Sequence, TextIO, TypeVar

NUM_THREADS = 4
SUBTASKS = 3
ROUNDS = 3

T = TypeVar("T")


class _Ring:
    def __init__(self, out: TextIO) -> None:
        self.out = out
        self.token = 0
        self.task = 0

    def say(self, text: str) -> None:
        self.out.write(text + "\n")


def run(out: Optional[TextIO] = None, workers: int = NUM_THREADS) -> int:
    """Run the task chain on a team of workers threads; return the final token."""
    if workers < 1:
        raise ValueError(f"workers must be positive, got {workers}")
    if out is None:
        out = sys.stdout
    ring = _Ring(out)
    local = threading.local()
    ids = itertools.count(1)

    def init() -> None:
        local.tid = next(ids)

    def tid() -> int:
        return getattr(local, "tid", 0)

    pool_cm = (
        ThreadPoolExecutor(max_workers=workers - 1, initializer=init)
        if workers > 1
        else nullcontext(None)
    )
    with pool_cm as pool:

        def execute(fn: Callable[[], T]) -> T:
            return fn() if pool is None else pool.submit(fn).result()

        def first() -> None:
            ring.say(f"[{ring.task}] executed by thread {tid()}, token = {ring.token}")
            ring.task += 1
            ring.token = 0

        def header() -> int:
            me = tid()
            ring.say(f"[{ring.task}] executed by thread {me}, token = {ring.token}")
            return me

        def child(index: int) -> Callable[[], None]:
            def body() -> None:
                ring.say(
                    f"[{ring.task}][{index}] executed by thread {tid()}, "
                    f"token = {ring.token}"
                )
                ring.token += 1

            return body

        def finish(parent: int) -> None:
            for index in range(SUBTASKS):
                execute(child(index))
            ring.say(f"[{ring.task}] executed by thread {parent}, token = {ring.token}")
            ring.task += 1
            ring.token += 1

        execute(first)
        for _ in range(ROUNDS):
            finish(execute(header))

        ring.task = 0
        finish(header())

    ring.say(f"Final token value = {ring.token}")
    return ring.token


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the token chain and print each step."""
    parser = argparse.ArgumentParser(description="Token passing through dependent tasks.")
    parser.add_argument("--threads", type=int, default=NUM_THREADS)
    args = parser.parse_args(argv)
    try:
        run(sys.stdout, args.threads)
    except ValueError as exc:
        sys.stderr.write(f"{exc}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())