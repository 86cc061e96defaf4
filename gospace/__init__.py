"""gospace - manage vendored source trees in a package-oriented workspace root."""

__version__ = "0.1.0"
