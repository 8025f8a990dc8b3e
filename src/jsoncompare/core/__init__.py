"""jsoncompare core: path grammar, identity-aware differ, path conversion and highlight classification.

Everything in this package is a pure function over in-memory trees. It has
no dependency on typer, does no file I/O and never configures logging.
"""
from __future__ import annotations
