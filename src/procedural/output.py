"""
Output accumulator for engine passes.

An Output holds the user-visible result of one pass. Its content is one of
three variants, chosen from the initial value:

- text (``str``): appends join with a separator
- sequence (``list``): appends push values
- record (``dict``): blends merge keys

Numbers, booleans and anything else are scalar content, which only
supports ``set_content`` and ``get``.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any

from .core.logging import get_logger
from .errors import UnsupportedAppendError

logger = get_logger(__name__)


class ContentType(str, Enum):
    """Output content variant."""

    TEXT = "text"
    SEQUENCE = "sequence"
    RECORD = "record"
    SCALAR = "scalar"


def content_type_of(value: Any) -> ContentType:
    """Classify a content value into its variant."""
    if isinstance(value, str):
        return ContentType.TEXT
    if isinstance(value, list):
        return ContentType.SEQUENCE
    if isinstance(value, dict):
        return ContentType.RECORD
    return ContentType.SCALAR


def copy_content(value: Any) -> Any:
    """Shallow-copy compound content so passes never share a base object."""
    if isinstance(value, list):
        return list(value)
    if isinstance(value, dict):
        return dict(value)
    return value


class Output:
    """
    Mutable result of a pass.

    ``again`` re-invokes the bound continuation (normally the engine's
    ``run``) and blends the fresh Output into this one, which is how
    callers compose several passes into one result:

        text = engine.run().again("\\n").again("\\n").get()
    """

    def __init__(
        self,
        content: Any = "",
        again: Callable[..., Output] | None = None,
        strict: bool = True,
    ) -> None:
        """
        Initialize the accumulator.

        Args:
            content: Initial content (text, list, dict or scalar)
            again: Continuation producing a new Output from a fresh pass
            strict: Raise on unsupported appends/blends instead of ignoring them
        """
        self._content = content
        self._again = again
        self._strict = strict

    @property
    def content_type(self) -> ContentType:
        return content_type_of(self._content)

    def append(self, value: Any, separator: str = " ") -> Output:
        """
        Append a value to the content.

        Text content gets ``separator`` before the value unless it is empty.
        Sequence content gets the value pushed.

        Raises:
            UnsupportedAppendError: Record or scalar content (strict mode)
        """
        kind = self.content_type
        if kind is ContentType.TEXT:
            prefix = separator if self._content else ""
            self._content = f"{self._content}{prefix}{value}"
        elif kind is ContentType.SEQUENCE:
            self._content.append(value)
        else:
            self._reject(kind)
        return self

    def blend(self, other: Output | Any, separator: str = "") -> Output:
        """
        Merge another output (or raw content) into this one.

        Text is concatenated with ``separator``, sequences are concatenated,
        records are shallow-merged with ``other`` overriding.

        Raises:
            UnsupportedAppendError: Mismatched or scalar content (strict mode)
        """
        incoming = other.get() if isinstance(other, Output) else other
        kind = self.content_type
        incoming_kind = content_type_of(incoming)

        if kind is not incoming_kind:
            self._reject(kind, f"cannot blend {incoming_kind.value} content")
        elif kind is ContentType.TEXT:
            self._content = f"{self._content}{separator}{incoming}"
        elif kind is ContentType.SEQUENCE:
            self._content.extend(incoming)
        elif kind is ContentType.RECORD:
            self._content.update(incoming)
        else:
            self._reject(kind)
        return self

    def set_content(self, value: Any) -> Output:
        """Replace the whole content."""
        self._content = value
        return self

    def set_field(self, key: Any, value: Any) -> Output:
        """
        Replace one field of record content (or one index of sequence content).

        Raises:
            TypeError: Content is text or scalar
        """
        kind = self.content_type
        if kind not in (ContentType.RECORD, ContentType.SEQUENCE):
            raise TypeError(f"Cannot set a field on {kind.value} content")
        self._content[key] = value
        return self

    def get(self) -> Any:
        """Return the content (by reference for lists and dicts)."""
        return self._content

    def again(self, separator: str = "", *args: Any) -> Output:
        """
        Run one more pass and blend its output into this one.

        Args:
            separator: Separator used when blending text content
            *args: Forwarded to the continuation

        Returns:
            self, for chaining
        """
        if self._again is None:
            return self
        return self.blend(self._again(*args), separator)

    def _reject(self, kind: ContentType, reason: str | None = None) -> None:
        if self._strict:
            raise UnsupportedAppendError(kind.value, reason)
        logger.warning(
            f"Ignoring unsupported append on {kind.value} content"
            + (f": {reason}" if reason else "")
        )

    def __str__(self) -> str:
        return str(self._content)

    def __repr__(self) -> str:
        return f"Output({self._content!r})"
