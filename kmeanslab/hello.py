"""Greeting demonstrations: threads that print a message and hand back a result."""

from __future__ import annotations

import argparse
import sys
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Iterable, Optional, Sequence, TextIO

DEFAULT_MESSAGES = ("Hello from Thread 1", "Hello from Thread 2")
RESULT = "Finished!"


def print_message(message: str, out: Optional[TextIO] = None) -> str:
    """Print what the thread says and return its completion text."""
    if out is None:
        out = sys.stdout
    out.write(f"Thread says: {message}\n")
    return RESULT


def run(
    messages: Iterable[str] = DEFAULT_MESSAGES, out: Optional[TextIO] = None
) -> list[str]:
    """Start one thread per message, join them all and report what each returned."""
    if out is None:
        out = sys.stdout
    messages = list(messages)
    results: list[str] = []
    if messages:
        with ThreadPoolExecutor(max_workers=len(messages)) as pool:
            futures: list[Future[str]] = []
            for number, message in enumerate(messages, start=1):
                try:
                    futures.append(pool.submit(print_message, message, out))
                except RuntimeError as exc:
                    raise RuntimeError(f"Error creating thread {number}: {exc}") from exc
            results = [future.result() for future in futures]
    for number, result in enumerate(results, start=1):
        out.write(f"Thread {number} returned: {result}\n")
    out.write("Main thread exiting.\n")
    return results


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Greet from threads, or just say hello to the world with --world."""
    parser = argparse.ArgumentParser(description="Threaded greetings.")
    parser.add_argument("messages", nargs="*", help="one message per thread")
    parser.add_argument("--world", action="store_true", help="print a single greeting")
    args = parser.parse_args(argv)
    if args.world:
        sys.stdout.write("Hello, World!\n")
        return 0
    try:
        run(args.messages or DEFAULT_MESSAGES, sys.stdout)
    except RuntimeError as exc:
        sys.stderr.write(f"{exc}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())