"""Build expressions: `${...}` references such as `${project.artifactId}`."""

from __future__ import annotations

import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

_EXPR_PATTERN = re.compile(r"\$\$\{|\$\{([^{}]+)\}")
_WHOLE_EXPR = re.compile(r"\$\{([^{}]+)\}")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def snake_case(name: str) -> str:
    """Convert a camelCase name to snake_case (artifactId -> artifact_id)."""
    return _CAMEL_BOUNDARY.sub(r"_\1", name).lower()


class Expressions:
    """Evaluate `${...}` references against a dict of variables."""

    def __init__(self, variables: dict[str, Any] | None = None) -> None:
        self._variables = variables or {}

    def _segment(self, current: Any, name: str) -> Any:
        try:
            return current[name]
        except (KeyError, TypeError, IndexError):
            pass

        for attr in dict.fromkeys((name, snake_case(name))):
            try:
                return getattr(current, attr)
            except AttributeError:
                continue

        raise LookupError(name)

    def lookup(self, ref: str) -> Any:
        """Return the value of a dotted reference like `project.version`."""
        current: Any = self._variables

        for part in ref.split("."):
            try:
                current = self._segment(current, part)
            except LookupError:
                raise ValueError(f"undefined variable '{ref}'") from None

        if callable(current) and not isinstance(current, type):
            current = current()

        return current

    def evaluate(self, text: str) -> Any:
        """Evaluate all references in a single string.

        A string consisting of exactly one reference yields the referenced
        value unchanged; otherwise each reference is replaced by its string
        form. `$${` produces a literal `${`.
        """
        if "${" not in text:
            return text

        whole = _WHOLE_EXPR.fullmatch(text)
        if whole:
            return self.lookup(whole.group(1).strip())

        def _substitute(m: re.Match[str]) -> str:
            if m.group(1) is None:
                return "${"
            return str(self.lookup(m.group(1).strip()))

        return _EXPR_PATTERN.sub(_substitute, text)

    def interpolate(self, obj: Any) -> Any:
        """Evaluate references in obj, descending into dicts and lists."""
        if isinstance(obj, dict):
            return {key: self.interpolate(value) for key, value in obj.items()}
        if isinstance(obj, list):
            return [self.interpolate(item) for item in obj]
        if isinstance(obj, str):
            return self.evaluate(obj)
        return obj
