"""Formatters that turn an assembled unit body into canonical source text."""

from __future__ import annotations

import logging
import subprocess
from typing import Protocol

import tree_sitter

from unitgen.config import GeneratorConfig
from unitgen.errors import FormatterError
from unitgen.languages.java import JavaAnalyser

logger = logging.getLogger(__name__)


class Formatter(Protocol):
    def format_source(self, source: str) -> str:
        """Return formatted source, or raise FormatterError."""
        ...


_BLOCK_COMMENT = "*/"
_TEXT_BLOCK = '"""'


def _scan_line(line: str, open_until: str | None = None) -> tuple[int, int, str | None]:
    """Return (leading closing braces, net brace change, construct still open after the line).

    Braces inside literals, text blocks and comments are ignored. ``open_until``
    is the terminator of a block comment (``*/``) or text block (``\"\"\"``)
    left open by an earlier line.
    """
    leading = 0
    net = 0
    seen_code = False
    quote = None
    i = 0
    while i < len(line):
        ch = line[i]
        if open_until:
            if open_until == _TEXT_BLOCK and ch == "\\":
                i += 2
            elif line.startswith(open_until, i):
                i += len(open_until)
                open_until = None
            else:
                i += 1
            continue
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
            i += 1
            continue
        if line.startswith("//", i):
            break
        if line.startswith("/*", i):
            open_until = _BLOCK_COMMENT
            i += 2
            continue
        if line.startswith(_TEXT_BLOCK, i):
            open_until = _TEXT_BLOCK
            seen_code = True
            i += len(_TEXT_BLOCK)
            continue
        if ch in "\"'":
            quote = ch
            seen_code = True
        elif ch == "{":
            net += 1
            seen_code = True
        elif ch == "}":
            net -= 1
            if not seen_code:
                leading += 1
        elif not ch.isspace():
            seen_code = True
        i += 1
    return leading, net, open_until


class JavaFormatter:
    """Syntax-checks with tree-sitter, then re-indents by brace depth."""

    def __init__(self, indent: str = "  ") -> None:
        self.indent = indent
        self._analyser = JavaAnalyser()
        self._parser = tree_sitter.Parser(self._analyser.get_language())

    def format_source(self, source: str) -> str:
        tree = self._parser.parse(source.encode("utf-8"))
        error_line = self._analyser.first_error_line(tree)
        if error_line is not None:
            raise FormatterError("Generated source does not parse", line=error_line)

        lines: list[str] = []
        depth = 0
        open_until = None
        blank_pending = False
        for raw in source.splitlines():
            if open_until == _TEXT_BLOCK:
                # Text block content is kept as written, minus trailing whitespace
                _, net, open_until = _scan_line(raw, open_until)
                lines.append(raw.rstrip())
                depth = max(depth + net, 0)
                continue

            stripped = raw.strip()
            if not stripped:
                # Leading blanks are dropped, runs of blanks collapse to one
                blank_pending = bool(lines)
                continue

            continues_comment = open_until == _BLOCK_COMMENT
            leading, net, open_until = _scan_line(stripped, open_until)
            if continues_comment:
                prefix = " " if stripped.startswith("*") else ""
                text = self.indent * depth + prefix + stripped
            else:
                text = self.indent * max(depth - leading, 0) + stripped

            if blank_pending:
                lines.append("")
                blank_pending = False
            lines.append(text)
            depth = max(depth + net, 0)

        if not lines:
            return ""
        return "\n".join(lines) + "\n"


class GoogleJavaFormatter:
    """Runs the google-java-format executable on the source."""

    def __init__(self, executable: str = "google-java-format", timeout: float = 60.0) -> None:
        self.executable = executable
        self.timeout = timeout

    def format_source(self, source: str) -> str:
        try:
            result = subprocess.run(
                [self.executable, "-"],
                input=source,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            logger.warning(f"Formatter executable not found: {self.executable}")
            raise FormatterError(f"{self.executable} not found") from e
        except subprocess.TimeoutExpired as e:
            raise FormatterError(f"{self.executable} timed out after {self.timeout}s") from e
        if result.returncode != 0:
            raise FormatterError(result.stderr.strip() or f"{self.executable} failed")
        return result.stdout


def get_formatter(config: GeneratorConfig) -> Formatter:
    """Pick the formatter named by ``config.formatter``."""
    if config.formatter == "basic":
        return JavaFormatter()
    if config.formatter == "google-java-format":
        return GoogleJavaFormatter(config.formatter_executable)
    raise ValueError(f"Unknown formatter {config.formatter!r}")
