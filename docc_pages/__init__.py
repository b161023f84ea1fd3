"""Render compiled documentation archives into static HTML sites.

The package turns the render-node JSON and navigation index of a compiled
documentation archive into self-contained pages that work from
``file://`` and on any static host.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from docc_pages import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
