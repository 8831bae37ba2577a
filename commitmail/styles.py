"""Inline CSS lookup for mail markup.

Mail clients ignore stylesheets, so every element carries its own ``style``
attribute. The declarations live in a nested JSON document; each nested object
becomes a dotted name (``commit.message.block``) whose value is the
concatenation of that object's own string properties.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

logger = logging.getLogger(__name__)


class Styles:
    """Read-only map of dotted style names to CSS declarations."""

    def __init__(self, styles: Mapping[str, str] | None = None):
        self._styles = dict(styles or {})

    @classmethod
    def from_mapping(cls, tree: Mapping[str, Any]) -> "Styles":
        flat: dict[str, str] = {}

        def parse(path: str, node: Mapping[str, Any]) -> str:
            own = ""
            for key, value in node.items():
                if isinstance(value, str):
                    own += f"{key}:{value};"
                elif isinstance(value, Mapping):
                    name = f"{path}.{key}" if path else key
                    flat[name] = parse(name, value)
                else:
                    logger.warning("Unexpected type for %s in styles, ignoring", key)
            return own

        parse("", tree)
        return cls(flat)

    @classmethod
    def load(cls, path: str | Path) -> "Styles":
        with open(path, encoding="utf-8") as fh:
            tree = json.load(fh)
        if not isinstance(tree, Mapping):
            raise ValueError(f"styles file {path} must hold a JSON object")
        return cls.from_mapping(tree)

    def get(self, *names: str) -> str:
        """Concatenate the declarations of ``names``; unknown names add nothing."""
        return "".join(self._styles.get(name, "") for name in names)

    __call__ = get

    def __contains__(self, name: object) -> bool:
        return name in self._styles
