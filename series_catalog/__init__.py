"""Normalize, reorder, and commit ordered section catalogs.

This package loads a content backend's sections and their heterogeneous
components into one ordered model, lets a caller move components and series
around, and serializes the resulting order back into the backend's commit
payload. The ``catalog`` console script drives it from the command line.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from series_catalog import main
>>> main()  # doctest: +SKIP
>>> from series_catalog import app
>>> app.name  # doctest: +SKIP
('catalog',)
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
