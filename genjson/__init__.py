"""genjson - JSON reader/writer generator for Python data models."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("genjson")
except PackageNotFoundError:
    __version__ = "(local)"
