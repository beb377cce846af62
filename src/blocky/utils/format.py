"""
Format template engine for block display strings.

A template is plain text with named ``{placeholder}`` substitution points,
e.g. ``"{average}° avg, {max}° max"``. Literal braces are written ``{{`` and
``}}``. Templates are parsed once when a block is built so that typos fail
at startup rather than on the first update.
"""

import logging
from typing import Any, Mapping, Tuple

from .errors import FormatParseError, FormatRenderError

logger = logging.getLogger(__name__)

LITERAL = "literal"
PLACEHOLDER = "placeholder"


class FormatTemplate:
    """
    Parsed, immutable display template.

    Example:
        >>> template = FormatTemplate.parse("{a}-{b}")
        >>> template.render({"a": "x", "b": "y"})
        'x-y'
    """

    __slots__ = ("_source", "_tokens")

    def __init__(self, source: str, tokens: Tuple[Tuple[str, str], ...]):
        self._source = source
        self._tokens = tokens

    @classmethod
    def parse(cls, template: str) -> "FormatTemplate":
        """
        Split a template string into literal and placeholder tokens.

        Args:
            template: Raw template string from configuration

        Returns:
            Parsed FormatTemplate

        Raises:
            FormatParseError: On an unterminated, empty or nested placeholder,
                or a stray closing brace
        """
        tokens = []
        literal = []
        i = 0
        length = len(template)

        while i < length:
            char = template[i]

            if char == "{":
                if template.startswith("{{", i):
                    literal.append("{")
                    i += 2
                    continue

                end = template.find("}", i + 1)
                if end == -1:
                    raise FormatParseError(template, f"unterminated placeholder at offset {i}")

                name = template[i + 1 : end]
                if "{" in name:
                    raise FormatParseError(template, f"nested placeholder at offset {i}")
                if not name.strip():
                    raise FormatParseError(template, f"empty placeholder at offset {i}")

                if literal:
                    tokens.append((LITERAL, "".join(literal)))
                    literal = []
                tokens.append((PLACEHOLDER, name.strip()))
                i = end + 1

            elif char == "}":
                if template.startswith("}}", i):
                    literal.append("}")
                    i += 2
                    continue
                raise FormatParseError(template, f"unmatched '}}' at offset {i}")

            else:
                literal.append(char)
                i += 1

        if literal:
            tokens.append((LITERAL, "".join(literal)))

        return cls(template, tuple(tokens))

    @property
    def source(self) -> str:
        """The template string this was parsed from."""
        return self._source

    @property
    def placeholders(self) -> Tuple[str, ...]:
        """Placeholder names in the order they appear."""
        return tuple(value for kind, value in self._tokens if kind == PLACEHOLDER)

    def render(self, values: Mapping[str, Any]) -> str:
        """
        Substitute placeholder values into the template.

        Args:
            values: Mapping of placeholder name to value (converted with str())

        Returns:
            Rendered string

        Raises:
            FormatRenderError: If a referenced placeholder has no value
        """
        parts = []
        for kind, value in self._tokens:
            if kind == LITERAL:
                parts.append(value)
                continue
            try:
                parts.append(str(values[value]))
            except KeyError:
                raise FormatRenderError(value) from None
        return "".join(parts)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FormatTemplate):
            return NotImplemented
        return self._tokens == other._tokens

    def __hash__(self) -> int:
        return hash(self._tokens)

    def __repr__(self) -> str:
        return f"<FormatTemplate({self._source!r})>"
