"""Message templates with ``{name}`` placeholders.

Templates are parsed once when the catalog is built. Rendering then only
walks the segments, no string scanning happens per request.

There is no escape syntax for braces. A ``{`` without a later ``}`` is
kept as literal text.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Literal:
    """Text copied verbatim into the rendered message."""

    text: str


@dataclass(frozen=True, slots=True)
class Placeholder:
    """A named slot substituted at render time."""

    name: str


Segment = Literal | Placeholder

MessageTemplate = tuple[Segment, ...]


def parse(raw: str) -> MessageTemplate:
    """Split ``raw`` into literal and placeholder segments.

    Example:
        parse("Hello, {name}!")
        # (Literal("Hello, "), Placeholder("name"), Literal("!"))
    """
    segments: list[Segment] = []
    rest = raw

    while rest:
        start = rest.find("{")
        if start == -1:
            segments.append(Literal(rest))
            break

        end = rest.find("}", start + 1)
        if end == -1:
            # Unterminated placeholder degrades to plain text
            segments.append(Literal(rest))
            break

        if start > 0:
            segments.append(Literal(rest[:start]))
        segments.append(Placeholder(rest[start + 1 : end]))
        rest = rest[end + 1 :]

    return tuple(segments)


def template_source(template: MessageTemplate) -> str:
    """Rebuild the raw template text, placeholders written back as ``{name}``."""
    parts: list[str] = []
    for segment in template:
        if isinstance(segment, Placeholder):
            parts.append(f"{{{segment.name}}}")
        else:
            parts.append(segment.text)
    return "".join(parts)


def placeholders(template: MessageTemplate) -> list[str]:
    """Names of the placeholders in order of appearance."""
    return [s.name for s in template if isinstance(s, Placeholder)]
