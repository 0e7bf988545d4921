"""Core data types and configuration for unitgen."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class BindingKind(str, Enum):
    IMPLICIT = "implicit"
    EXPLICIT = "explicit"


class TypeKind(str, Enum):
    CLASS = "Class"
    INTERFACE = "Interface"
    ENUM = "Enum"
    RECORD = "Record"
    ANNOTATION = "Annotation"


@dataclass(frozen=True)
class QualifiedName:
    """A type identified by its package path and its nested-class path.

    ``simple_names`` runs outer to inner, so ``com.example.Outer.Inner`` has
    package ``("com", "example")`` and simple names ``("Outer", "Inner")``.
    """
    package: tuple[str, ...]
    simple_names: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "package", tuple(self.package))
        object.__setattr__(self, "simple_names", tuple(self.simple_names))
        if not self.simple_names:
            raise ValueError("QualifiedName needs at least one simple name")
        for segment in self.package + self.simple_names:
            if not segment:
                raise ValueError(f"Empty segment in {self.package!r} / {self.simple_names!r}")

    @classmethod
    def of(cls, package: str, *simple_names: str) -> QualifiedName:
        """Build from a dotted package name ('' for the unnamed package)."""
        segments = tuple(package.split(".")) if package else ()
        return cls(segments, simple_names)

    @classmethod
    def parse(cls, text: str) -> QualifiedName:
        """Parse ``com.example.Outer.Inner`` or ``com.example:Outer.Inner``.

        Without a colon, the first segment starting with an upper-case letter
        begins the simple names.
        """
        text = text.strip()
        if ":" in text:
            package, _, names = text.partition(":")
            return cls.of(package, *names.split("."))
        segments = text.split(".")
        for i, segment in enumerate(segments):
            if segment[:1].isupper():
                return cls(tuple(segments[:i]), tuple(segments[i:]))
        raise ValueError(f"No type name found in {text!r}")

    @property
    def package_name(self) -> str:
        return ".".join(self.package)

    @property
    def top_level_name(self) -> str:
        return self.simple_names[0]

    @property
    def simple_name(self) -> str:
        return self.simple_names[-1]

    @property
    def nested_path(self) -> str:
        return ".".join(self.simple_names)

    @property
    def is_top_level(self) -> bool:
        return len(self.simple_names) == 1

    def top_level(self) -> QualifiedName:
        if self.is_top_level:
            return self
        return QualifiedName(self.package, self.simple_names[:1])

    def nested(self, simple_name: str) -> QualifiedName:
        return QualifiedName(self.package, self.simple_names + (simple_name,))

    def __str__(self) -> str:
        return ".".join(self.package + self.simple_names)


@dataclass(frozen=True)
class Binding:
    simple_name: str
    qualified_name: QualifiedName
    kind: BindingKind


@dataclass
class SourceFile:
    """A source file discovered under one of the source roots."""
    path: str
    root: str
    language: str
    size: int = 0


@dataclass
class TypeDeclaration:
    """Top-level type declared in a scanned source file."""
    name: str
    package: str
    kind: TypeKind
    file: str
    line: int


@dataclass
class GeneratorConfig:
    source_roots: list[str] = field(default_factory=list)
    output_dir: str | None = None
    formatter: str = "basic"
    formatter_executable: str = "google-java-format"
    builtin_packages: list[str] = field(default_factory=lambda: ["java.lang"])
    features: dict[str, str] = field(default_factory=dict)
    exclude_patterns: list[str] = field(default_factory=list)
    max_file_size: int = 1_000_000  # 1MB
    dry_run: bool = False
    verbose: bool = False
    quiet: bool = False
