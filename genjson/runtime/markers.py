"""Decorators that mark model classes for codec generation.

The generator finds these by reading source, so they only record the
requested directions on the class. Both ``@generate_reader`` and
``@generate_reader()`` are accepted.
"""

from typing import Any

MARKERS_ATTR = "__genjson_markers__"


def _marker(*directions: str) -> Any:
    def mark(cls: Any = None) -> Any:
        if cls is None:
            return mark
        markers = set(getattr(cls, MARKERS_ATTR, ()))
        markers.update(directions)
        setattr(cls, MARKERS_ATTR, frozenset(markers))
        return cls

    return mark


generate_reader = _marker("reader")
generate_reader.__doc__ = "Generate a JSON reader for the decorated class."

generate_writer = _marker("writer")
generate_writer.__doc__ = "Generate a JSON writer for the decorated class."

generate_json = _marker("reader", "writer")
generate_json.__doc__ = "Generate both a JSON reader and a JSON writer for the decorated class."
