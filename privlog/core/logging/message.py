"""Privacy-aware log messages.

A message is built from an ordered sequence of tokens: literal text and
interpolated values, each value tagged with a ``PrivacyLevel``. Building
produces the rendered text, with redaction applied unless disclosure is
allowed, plus the list of raw segments so a privileged consumer can
re-render the message later without re-evaluating the original values.

Usage:
    from privlog.core.logging.message import build, hashed, private

    message = build(["Login by: ", private(email)], disclosure_allowed=False)
    message.final_text      # "Login by: 🔒"
    message.segments[1]     # Segment(text="user@example.com", privacy=PRIVATE)
"""
import hashlib
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .privacy import PrivacyLevel

# Same marker for every private field
REDACTION_MARKER = "🔒"


@dataclass(frozen=True, slots=True)
class Literal:
    """Literal text of a template, always public."""

    text: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "text", str(self.text))


@dataclass(frozen=True, slots=True)
class Value:
    """An interpolated value, already rendered to text."""

    text: str
    privacy: PrivacyLevel = PrivacyLevel.PUBLIC

    def __post_init__(self) -> None:
        object.__setattr__(self, "text", str(self.text))
        object.__setattr__(self, "privacy", PrivacyLevel.coerce(self.privacy))

    @classmethod
    def of(cls, value: Any, privacy: PrivacyLevel | str | None = None) -> "Value":
        """Render any object with ``str()`` and tag it."""
        return cls(str(value), PrivacyLevel.coerce(privacy))


Token = Literal | Value


def public(value: Any) -> Value:
    return Value.of(value, PrivacyLevel.PUBLIC)


def private(value: Any) -> Value:
    return Value.of(value, PrivacyLevel.PRIVATE)


def hashed(value: Any) -> Value:
    return Value.of(value, PrivacyLevel.HASHED)


@dataclass(frozen=True, slots=True)
class Segment:
    """A rendered token and its privacy level. Holds the raw text."""

    text: str
    privacy: PrivacyLevel = PrivacyLevel.PUBLIC


def hash_text(text: str) -> str:
    """Return the lowercase SHA-256 hex digest of the UTF-8 bytes of text."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def effective_fragment(
    text: str, privacy: PrivacyLevel, disclosure_allowed: bool
) -> str:
    """Return what a value contributes to the rendered text.

    Args:
    ----
        text: Raw rendered value
        privacy: Privacy level of the value
        disclosure_allowed: Whether the current context bypasses redaction

    Returns:
    -------
        The raw text, the redaction marker or the hex digest of the text

    """
    if disclosure_allowed or privacy is PrivacyLevel.PUBLIC:
        return text
    if privacy is PrivacyLevel.PRIVATE:
        return REDACTION_MARKER
    return hash_text(text)


@dataclass(frozen=True, slots=True)
class Message:
    """Immutable log message.

    Attributes
    ----------
        final_text: The rendered text, redacted according to the disclosure
            policy that was in effect when the message was built
        segments: Raw rendered tokens with their privacy levels, in template
            order

    """

    final_text: str = ""
    segments: tuple[Segment, ...] = field(default_factory=tuple)

    def __str__(self) -> str:
        return self.final_text

    @classmethod
    def from_literal(cls, text: str) -> "Message":
        return cls(final_text=text, segments=(Segment(text, PrivacyLevel.PUBLIC),))

    @classmethod
    def from_value(cls, value: Any) -> "Message":
        return cls.from_literal(str(value))

    @classmethod
    def coerce(cls, message: Any, disclosure_allowed: bool = False) -> "Message":
        """Turn a Message, a string or a token sequence into a Message.

        Bytes and mappings are rendered whole with ``str()`` rather than
        iterated as tokens.
        """
        if isinstance(message, Message):
            return message
        if isinstance(message, str):
            return cls.from_literal(message)
        if isinstance(message, (Literal, Value)):
            return build([message], disclosure_allowed)
        if isinstance(message, MessageBuilder):
            return message.build(disclosure_allowed)
        if isinstance(message, (bytes, bytearray, Mapping)):
            return cls.from_value(message)
        if isinstance(message, Iterable):
            return build(message, disclosure_allowed)
        return cls.from_value(message)

    def render(self, disclosure_allowed: bool) -> str:
        """Re-render the stored segments under another disclosure policy."""
        return "".join(
            effective_fragment(segment.text, segment.privacy, disclosure_allowed)
            for segment in self.segments
        )

    @property
    def revealed(self) -> str:
        """The message with every value disclosed."""
        return "".join(segment.text for segment in self.segments)

    @property
    def has_redactions(self) -> bool:
        return any(segment.privacy.is_not_public for segment in self.segments)


def build(tokens: Iterable[Any], disclosure_allowed: bool) -> Message:
    """Build a message from an ordered token sequence.

    Plain strings are accepted as literals. Objects that are neither a
    token nor a string are skipped, so a malformed template yields a
    partial message instead of an error, and anything that is not
    iterable, None included, yields an empty message.

    Args:
    ----
        tokens: Literal and Value tokens in template order
        disclosure_allowed: When true, every value is rendered verbatim

    Returns:
    -------
        The built Message

    """
    if not isinstance(tokens, Iterable):
        return Message()

    fragments: list[str] = []
    segments: list[Segment] = []

    for token in tokens:
        if isinstance(token, str):
            token = Literal(token)

        if isinstance(token, Literal):
            segments.append(Segment(token.text, PrivacyLevel.PUBLIC))
            fragments.append(token.text)
        elif isinstance(token, Value):
            segments.append(Segment(token.text, token.privacy))
            fragments.append(
                effective_fragment(token.text, token.privacy, disclosure_allowed)
            )

    return Message(final_text="".join(fragments), segments=tuple(segments))


class MessageBuilder:
    """Accumulates tokens and builds a Message.

    Example:
    -------
        builder = MessageBuilder()
        builder.append_literal("User ID: ").append_value(user_id, privacy="hashed")
        message = builder.build(disclosure_allowed=False)

    """

    def __init__(self, tokens: Iterable[Token] | None = None) -> None:
        self._tokens: list[Token] = []
        if not isinstance(tokens, Iterable):
            return
        for token in tokens:
            self._append(token)

    def _append(self, token: Any) -> None:
        if isinstance(token, str):
            token = Literal(token)
        if isinstance(token, (Literal, Value)):
            self._tokens.append(token)

    def append_literal(self, text: str) -> "MessageBuilder":
        self._tokens.append(Literal(str(text)))
        return self

    def append_value(
        self, value: Any, privacy: PrivacyLevel | str | None = None
    ) -> "MessageBuilder":
        self._tokens.append(Value.of(value, privacy))
        return self

    def __iadd__(self, token: Any) -> "MessageBuilder":
        self._append(token)
        return self

    def __len__(self) -> int:
        return len(self._tokens)

    @property
    def tokens(self) -> tuple[Token, ...]:
        return tuple(self._tokens)

    def build(self, disclosure_allowed: bool) -> Message:
        return build(self._tokens, disclosure_allowed)
