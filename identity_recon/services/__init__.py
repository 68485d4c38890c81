"""Run orchestration: reconciliation runs, caching, progress and summary output."""
