"""
Top‑level package for the Composition Store API.

This file makes ``composition_store`` a Python package so that
modules within ``app`` can be imported using fully qualified names
like ``composition_store.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
