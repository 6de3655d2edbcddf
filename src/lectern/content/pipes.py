"""Value pipes for delimited-text content.

A text field written as ``key|pipe: value`` stores ``pipe(value)``
under ``key``. Sites add their own pipes with ``@site.pipe()``.
"""

from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from lectern.markdown import render_markdown

type Pipe = Callable[[str], Any]

DEFAULT_PIPES: Mapping[str, Pipe] = MappingProxyType(
    {
        "markdown": render_markdown,
        "strip": str.strip,
        "lower": str.lower,
        "upper": str.upper,
    }
)
