"""yarnbox - Run yarn builds in isolated, reproducible containers."""

__version__ = "0.1.0"
