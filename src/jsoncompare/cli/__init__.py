"""jsoncompare CLI: typer commands over the core library."""
from __future__ import annotations


def __getattr__(name: str) -> object:
    if name == "app":
        from jsoncompare.cli.commands import app
        return app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["app"]
