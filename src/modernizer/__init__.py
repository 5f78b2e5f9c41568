"""Baseline Modernizer - Track legacy web patterns and modernization progress."""

try:
    from ._version import __version__
except ImportError:
    try:
        from importlib.metadata import version

        __version__ = version("baseline-modernizer")
    except Exception:
        __version__ = "0.0.0+unknown"
