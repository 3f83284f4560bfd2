"""Bounded-stack producer/consumer demonstration with many threads."""

from __future__ import annotations

import argparse
import random
import sys
import threading
import time
from dataclasses import dataclass, field
from typing import Optional, Sequence, TextIO

MAX_PRODUCED = 17
MAX_QUEUE = 7
NUM_PRODUCERS = 200
NUM_CONSUMERS = 200
DELAY = 0.1


@dataclass
class Stats:
    """Counts at the end of a run, with the values produced and consumed in order."""

    produced: int = 0
    consumed: int = 0
    available: int = 0
    produced_items: list[int] = field(default_factory=list)
    consumed_items: list[int] = field(default_factory=list)


class _Workshop:
    def __init__(
        self,
        max_produced: int,
        max_queue: int,
        delay: float,
        out: TextIO,
        seed: Optional[int],
    ) -> None:
        self.max_produced = max_produced
        self.max_queue = max_queue
        self.delay = delay
        self.out = out
        self.rng = random.Random(seed)
        self.queue: list[int] = []
        self.stats = Stats()
        self.lock = threading.Lock()
        self.space = threading.Condition(self.lock)
        self.items = threading.Condition(self.lock)
        self.printed = 0
        self.printed_lock = threading.Lock()

    def say(self, text: str) -> None:
        self.out.write(text + "\n")

    def insert(self, tid: int, item: int) -> None:
        self.queue.append(item)
        self.stats.produced += 1
        self.stats.produced_items.append(item)
        self.say(
            f"[{tid}] producing item:{self.stats.produced}, value:{item}, "
            f"queued:{len(self.queue)} "
        )
        if self.delay:
            time.sleep(self.delay)

    def extract(self, tid: int) -> int:
        self.stats.consumed += 1
        self.say(
            f"[{tid}] consuming item:{self.stats.consumed}, value:{self.queue[-1]}, "
            f"queued:{len(self.queue) - 1} "
        )
        item = self.queue.pop()
        self.stats.consumed_items.append(item)
        return item

    def process(self, tid: int, item: int) -> None:
        with self.printed_lock:
            number = self.printed
            self.printed += 1
        self.say(f"[{tid}] Printed:{number}, value:{item}, queued:{len(self.queue)} ")

    def producer(self, tid: int) -> None:
        while True:
            item = self.rng.randrange(1000)
            with self.lock:
                if self.stats.produced >= self.max_produced:
                    self.space.notify_all()
                    break
                while (
                    len(self.queue) == self.max_queue
                    and self.stats.produced < self.max_produced
                ):
                    self.say(
                        f"[{tid}] Queue full waiting consumers... "
                        f"(produced: {self.stats.produced})"
                    )
                    self.space.wait()
                if self.stats.produced >= self.max_produced:
                    break
                self.insert(tid, item)
                self.items.notify()
                if self.stats.produced >= self.max_produced:
                    self.space.notify_all()
        self.say(f"[{tid}] Producer exit...")

    def consumer(self, tid: int) -> None:
        while True:
            with self.lock:
                if self.stats.consumed >= self.max_produced:
                    break
                while not self.queue:
                    if self.stats.consumed >= self.max_produced:
                        return
                    self.say(f"[{tid}] No item available. Waiting producers...")
                    self.items.wait()
                item = self.extract(tid)
                self.space.notify()
                if self.stats.consumed >= self.max_produced:
                    self.items.notify_all()
            self.process(tid, item)
        self.say(f"[{tid}] Consumer exit...")


def run(
    num_producers: int = NUM_PRODUCERS,
    num_consumers: int = NUM_CONSUMERS,
    max_produced: int = MAX_PRODUCED,
    max_queue: int = MAX_QUEUE,
    delay: float = DELAY,
    out: Optional[TextIO] = None,
    seed: Optional[int] = None,
) -> Stats:
    """Run producers and consumers until max_produced items have passed through."""
    if max_queue < 1:
        raise ValueError(f"max_queue must be positive, got {max_queue}")
    if max_produced < 0:
        raise ValueError(f"max_produced must not be negative, got {max_produced}")
    if max_produced > 0 and (num_producers < 1 or num_consumers < 1):
        raise ValueError("at least one producer and one consumer are needed")
    if out is None:
        out = sys.stdout
    shop = _Workshop(max_produced, max_queue, delay, out, seed)

    producers = [
        threading.Thread(target=shop.producer, args=(tid,), name=f"producer-{tid}")
        for tid in range(num_producers)
    ]
    consumers = [
        threading.Thread(target=shop.consumer, args=(tid,), name=f"consumer-{tid}")
        for tid in range(num_consumers)
    ]
    for thread in producers + consumers:
        thread.start()
    for thread in producers + consumers:
        thread.join()

    stats = shop.stats
    stats.available = len(shop.queue)
    out.write(
        f"Exiting main thread. Produced {stats.produced}, consumed {stats.consumed}, "
        f"available {stats.available}\n"
    )
    return stats


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the demonstration with the default or given sizes."""
    parser = argparse.ArgumentParser(description="Producer/consumer demonstration.")
    parser.add_argument("--producers", type=int, default=NUM_PRODUCERS)
    parser.add_argument("--consumers", type=int, default=NUM_CONSUMERS)
    parser.add_argument("--max-produced", type=int, default=MAX_PRODUCED)
    parser.add_argument("--max-queue", type=int, default=MAX_QUEUE)
    parser.add_argument("--delay", type=float, default=DELAY)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args(argv)
    try:
        run(
            args.producers,
            args.consumers,
            args.max_produced,
            args.max_queue,
            args.delay,
            sys.stdout,
            args.seed,
        )
    except ValueError as exc:
        sys.stderr.write(f"{exc}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())