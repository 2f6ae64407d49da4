"""PhysViz CLI."""

from physviz.cli.main import app

__all__ = ["app"]
