"""Body templates with ``$[com.example.Name]`` type reference markers."""

from __future__ import annotations

import re

from unitgen.config import QualifiedName
from unitgen.source import SourceBuilder
from unitgen.writer import UnitWriter

_REFERENCE = re.compile(r"\$\[([^\]\s]+)\]")


def template_references(text: str) -> list[QualifiedName]:
    """Return the distinct type references in a template, in order of appearance."""
    seen: dict[QualifiedName, None] = {}
    for match in _REFERENCE.finditer(text):
        seen.setdefault(QualifiedName.parse(match.group(1)), None)
    return list(seen)


def render_template(text: str, target: SourceBuilder | UnitWriter) -> None:
    """Append ``text`` to ``target``, resolving every reference marker.

    Literal ``%`` characters are escaped, so templates are plain Java.
    Raises ValueError for a marker that does not name a type.
    """
    parts: list[str] = []
    args: list[QualifiedName] = []
    pos = 0
    for match in _REFERENCE.finditer(text):
        parts.append(text[pos:match.start()].replace("%", "%%"))
        parts.append("%s")
        args.append(QualifiedName.parse(match.group(1)))
        pos = match.end()
    parts.append(text[pos:].replace("%", "%%"))
    target.add("".join(parts), *args)
