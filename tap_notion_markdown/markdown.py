"""Small markdown fragment builders used by the serializers.

Every helper takes already-rendered inline text and returns a single
markdown fragment. Nothing here knows about Notion objects.
"""

from __future__ import annotations


def h1(text: str) -> str:
    return f"# {text}"


def h2(text: str) -> str:
    return f"## {text}"


def h3(text: str) -> str:
    return f"### {text}"


def bold(text: str) -> str:
    return f"**{text}**"


def italic(text: str) -> str:
    return f"*{text}*"


def strikethrough(text: str) -> str:
    return f"~~{text}~~"


def underline(text: str) -> str:
    return f"<u>{text}</u>"


def inline_code(text: str) -> str:
    return f"`{text}`"


def anchor(text: str, href: str) -> str:
    return f"[{text}]({href})"


def image(alt: str, src: str) -> str:
    return f"![{alt}]({src})"


def bullet(text: str, number: int | None = None) -> str:
    """Return a list item, numbered when ``number`` is given."""
    marker = f"{number}." if number is not None else "-"
    return f"{marker} {text}"


def todo(text: str, checked: bool) -> str:
    mark = "x" if checked else " "
    return f"- [{mark}] {text}"


def quote(text: str) -> str:
    return f"> {text}"


def code_block(text: str, language: str = "") -> str:
    return f"```{language}\n{text}\n```"


def equation_block(expression: str) -> str:
    return f"$$\n{expression}\n$$"


def hr() -> str:
    return "---"


def indent(text: str, depth: int = 0, unit: str = "\t") -> str:
    """Indent every line of ``text`` by ``depth`` units.

    Multi-line fragments such as fenced code keep their shape under a nested
    list item.
    """
    if depth <= 0:
        return text
    prefix = unit * depth
    return "\n".join(prefix + line for line in text.split("\n"))
