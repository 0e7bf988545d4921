"""unitgen - Generate Java compilation units with collision-free imports."""

from unitgen.config import Binding, BindingKind, QualifiedName
from unitgen.errors import FilerError, FormatterError, GenerationError
from unitgen.graph.import_resolver import ImportResolver
from unitgen.source import Excerpt, SourceBuilder, TemplateExcerpt
from unitgen.writer import UnitWriter

__version__ = "0.1.0"
__all__ = [
    "Binding",
    "BindingKind",
    "Excerpt",
    "FilerError",
    "FormatterError",
    "GenerationError",
    "ImportResolver",
    "QualifiedName",
    "SourceBuilder",
    "TemplateExcerpt",
    "UnitWriter",
]
