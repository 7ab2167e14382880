"""Concurrency patterns."""

from fxlive.core.patterns.cancellation import CancellationToken, run_cancellable

__all__ = ["CancellationToken", "run_cancellable"]
