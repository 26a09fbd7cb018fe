"""Setuptools build hooks for bayesnet."""

from __future__ import annotations

from setuptools import setup

# Metadata lives in pyproject.toml; the package is pure Python, so the
# default wheel command produces a ``py3-none-any`` wheel.
setup()
