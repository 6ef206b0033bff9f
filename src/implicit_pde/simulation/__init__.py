"""Batch execution of parameter sweeps."""

from .runner import run_all

__all__ = ["run_all"]
