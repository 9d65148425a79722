"""Command-line helpers for running DKAN test, lint and fixture tooling."""

from __future__ import annotations

__version__ = "0.1.0"
