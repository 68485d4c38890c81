from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display with tqdm (TTY only).

In non-TTY environments (CI, pipes) no bar is created, so no ANSI control
sequences end up in captured output.
"""

__all__ = [
    "ProgressTracker",
    "PhaseIndicator",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ProgressTracker:
    """Per-entry progress bar for candidate evaluation."""

    def __init__(self, total: int, *, description: str = "Validating entries", enabled: bool = True) -> None:
        """Initialize progress tracker.

        Args:
            total: Number of candidate entries to evaluate
            description: Description for the progress bar
            enabled: False forces the bar off even on a TTY
        """
        self.total = total
        self.description = description
        self.processed = 0

        self.enabled = enabled and is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total,
                desc=description,
                unit="entry",
                disable=False,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def advance(self, n: int = 1) -> None:
        self.processed += n
        if self.enabled and self.pbar is not None:
            self.pbar.update(n)

    def set_postfix(self, **kwargs: Any) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.set_postfix(**kwargs)

    def close(self) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


class PhaseIndicator:
    """One-line status for short phases (e.g. source indexing).

    Indexing is a single fast pass and does not need a full bar.
    """

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled and is_tty_enabled()

    def start(self, label: str) -> None:
        if self.enabled:
            print(f"  {label}", end="", flush=True)

    def finish(self, success: bool = True, count: int = 0) -> None:
        if self.enabled:
            status = "✓" if success else "✗"
            if count > 0:
                print(f" - {count} records {status}")
            else:
                print(f" {status}")
