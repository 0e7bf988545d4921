"""End-to-end tests for UnitWriter."""

from __future__ import annotations

import io

import pytest

from unitgen.config import QualifiedName, TypeDeclaration, TypeKind
from unitgen.errors import FilerError, FormatterError, GenerationError
from unitgen.features import FeatureSet, FeatureType
from unitgen.filer import MemoryFiler
from unitgen.graph.symbol_table import PackageSymbolTable
from unitgen.source import TemplateExcerpt
from unitgen.writer import UnitWriter, WriterState

FOO = QualifiedName.of("com.x", "Foo")
BAR = QualifiedName.of("com.x", "Bar")
Y_BAZ = QualifiedName.of("com.y", "Baz")
Z_BAZ = QualifiedName.of("com.z", "Baz")

HEADER = "// Autogenerated code. Do not modify.\npackage com.x;\n\n"


def _table(*names: tuple[str, str]) -> PackageSymbolTable:
    table = PackageSymbolTable()
    for package, name in names:
        table.add(TypeDeclaration(
            name=name, package=package, kind=TypeKind.CLASS,
            file=f"{package.replace('.', '/')}/{name}.java", line=1,
        ))
    return table


class _FailingFormatter:
    def format_source(self, source: str) -> str:
        raise FormatterError("boom", line=3)


class _IdentityFormatter:
    def __init__(self) -> None:
        self.seen: list[str] = []

    def format_source(self, source: str) -> str:
        self.seen.append(source)
        return source


class _BrokenFiler:
    def create_source_file(self, name, originating=None):
        raise OSError("disk full")


class _FailingLookup:
    def types_in_package(self, package):
        raise RuntimeError("lookup unavailable")


class _FailingSink(io.StringIO):
    def write(self, text):
        raise OSError("write failed")


class _FailingSinkFiler:
    def __init__(self) -> None:
        self.sink = _FailingSink()

    def create_source_file(self, name, originating=None):
        return self.sink


class TestEndToEnd:
    def test_sibling_short_and_external_imported(self):
        filer = MemoryFiler()
        unit = UnitWriter(filer, FOO, symbols=_table(("com.x", "Bar"), ("com.x", "Foo")))
        unit.add_line("public class Foo {")
        unit.add_line("private %s bar;", BAR)
        unit.add_line("private %s baz;", Y_BAZ)
        unit.add_line("}")
        unit.close()

        assert filer.sources["com.x.Foo"] == (
            HEADER
            + "import com.y.Baz;\n"
            + "\n"
            + "public class Foo {\n"
            + "  private Bar bar;\n"
            + "  private Baz baz;\n"
            + "}\n"
        )

    def test_two_classes_with_same_simple_name(self):
        filer = MemoryFiler()
        unit = UnitWriter(filer, FOO)
        unit.add_line("class Foo {")
        unit.add_line("%s a;", Y_BAZ)
        unit.add_line("%s b;", Z_BAZ)
        unit.add_line("%s c;", Z_BAZ)
        unit.add_line("}")
        unit.close()

        source = filer.sources["com.x.Foo"]
        assert source.count("import ") == 1
        assert "import com.y.Baz;\n" in source
        assert "  Baz a;\n" in source
        assert "  com.z.Baz b;\n" in source
        assert "  com.z.Baz c;\n" in source

    def test_no_imports_means_no_import_block(self):
        filer = MemoryFiler()
        unit = UnitWriter(filer, FOO, symbols=_table(("com.x", "Bar")))
        unit.add_line("public class Foo {")
        unit.add_line("%s bar;", BAR)
        unit.add_line("}")
        unit.close()

        assert filer.sources["com.x.Foo"] == HEADER + "public class Foo {\n  Bar bar;\n}\n"

    def test_imports_sorted(self):
        filer = MemoryFiler()
        unit = UnitWriter(filer, FOO)
        unit.add_line("class Foo {")
        for name in ("org.b.Zeta", "com.a.Alpha", "java.util.List"):
            unit.add_line("%s f%s;", QualifiedName.parse(name), len(name))
        unit.add_line("}")
        unit.close()

        source = filer.sources["com.x.Foo"]
        assert source.startswith(
            HEADER
            + "import com.a.Alpha;\n"
            + "import java.util.List;\n"
            + "import org.b.Zeta;\n"
            + "\n"
        )

    def test_sibling_shadows_external_type(self):
        filer = MemoryFiler()
        unit = UnitWriter(filer, FOO, symbols=_table(("com.x", "Baz")))
        unit.add_line("class Foo { %s baz; }", Y_BAZ)
        unit.close()

        source = filer.sources["com.x.Foo"]
        assert "import" not in source
        assert "class Foo { com.y.Baz baz; }\n" in source

    def test_nested_classes_claim_their_names(self):
        filer = MemoryFiler()
        builder = FOO.nested("Builder")
        unit = UnitWriter(filer, FOO, [builder])
        unit.add_line("class Foo {")
        unit.add_line("static class Builder {}")
        unit.add_line("%s newBuilder() { return new %s(); }", builder, builder)
        unit.add_line("%s other;", QualifiedName.of("com.other", "Builder"))
        unit.add_line("}")
        unit.close()

        source = filer.sources["com.x.Foo"]
        assert "import" not in source
        assert "  Builder newBuilder() { return new Builder(); }\n" in source
        assert "  com.other.Builder other;\n" in source

    def test_nested_class_registered_before_sibling(self):
        # A nested class and a package sibling share a simple name: the
        # nested class is registered first and wins.
        filer = MemoryFiler()
        nested = FOO.nested("Value")
        unit = UnitWriter(filer, FOO, [nested], symbols=_table(("com.x", "Value")))
        unit.add_line("class Foo {")
        unit.add_line("%s a;", nested)
        unit.add_line("%s b;", QualifiedName.of("com.x", "Value"))
        unit.add_line("}")
        unit.close()

        source = filer.sources["com.x.Foo"]
        assert "  Value a;\n" in source
        assert "  com.x.Value b;\n" in source

    def test_unit_shadows_external_type_of_same_name(self):
        filer = MemoryFiler()
        unit = UnitWriter(filer, FOO)
        unit.add_line("class Foo { %s f; %s g; }", FOO, QualifiedName.of("com.y", "Foo"))
        unit.close()
        assert "class Foo { Foo f; com.y.Foo g; }\n" in filer.sources["com.x.Foo"]

    def test_sub_builder_participates_in_imports(self):
        filer = MemoryFiler()
        unit = UnitWriter(filer, FOO)
        method = unit.sub_builder()
        method.add_line("void use(%s value) {}", Y_BAZ)
        unit.add_line("class Foo {")
        unit.add("%s", method)
        unit.add_excerpt(TemplateExcerpt("%s other;\n", Z_BAZ))
        unit.add_line("}")
        unit.close()

        source = filer.sources["com.x.Foo"]
        assert "import com.y.Baz;\n" in source
        assert "  void use(Baz value) {}\n" in source
        assert "  com.z.Baz other;\n" in source

    def test_unnamed_package_has_no_package_line(self):
        filer = MemoryFiler()
        unit = UnitWriter(filer, QualifiedName.of("", "Main"))
        unit.add_line("class Main {}")
        unit.close()
        assert filer.sources["Main"] == "// Autogenerated code. Do not modify.\n\nclass Main {}\n"

    def test_body_is_formatted(self):
        filer = MemoryFiler()
        unit = UnitWriter(filer, FOO)
        unit.add_line("class Foo {")
        unit.add_line("        void f() {")
        unit.add_line("return;")
        unit.add_line("    }")
        unit.add_line("}")
        unit.close()
        assert filer.sources["com.x.Foo"] == HEADER + "class Foo {\n  void f() {\n    return;\n  }\n}\n"

    def test_custom_formatter_receives_raw_body(self):
        formatter = _IdentityFormatter()
        filer = MemoryFiler()
        unit = UnitWriter(filer, FOO, formatter=formatter)
        unit.add("class Foo {  }")
        unit.close()
        assert formatter.seen == ["class Foo {  }"]
        assert filer.sources["com.x.Foo"] == HEADER + "class Foo {  }"

    def test_features_reach_body_generation(self):
        level = FeatureType("source_level", default=8, parse=int)
        unit = UnitWriter(MemoryFiler(), FOO, features=FeatureSet({"source_level": "11"}))
        assert unit.feature(level) == 11
        assert unit.sub_builder().feature(level) == 11

    def test_originating_passed_to_filer(self):
        filer = MemoryFiler()
        UnitWriter(filer, FOO, originating="Foo.template").close()
        assert filer.originating["com.x.Foo"] == "Foo.template"


class TestLifecycle:
    def test_state_transitions(self):
        unit = UnitWriter(MemoryFiler(), FOO)
        assert unit.state == WriterState.OPEN
        unit.add_line("class Foo {}")
        unit.close()
        assert unit.state == WriterState.CLOSED
        assert unit.closed
        assert unit.resolver.frozen

    def test_double_close_is_error(self):
        unit = UnitWriter(MemoryFiler(), FOO)
        unit.add_line("class Foo {}")
        unit.close()
        with pytest.raises(GenerationError):
            unit.close()

    def test_append_after_close_is_error(self):
        unit = UnitWriter(MemoryFiler(), FOO)
        unit.add_line("class Foo {}")
        unit.close()
        with pytest.raises(GenerationError):
            unit.add_line("%s x;", Y_BAZ)

    def test_sub_builder_resolve_after_close_is_error(self):
        unit = UnitWriter(MemoryFiler(), FOO)
        sub = unit.sub_builder()
        unit.add_line("class Foo {}")
        unit.close()
        with pytest.raises(GenerationError):
            sub.add("%s", Y_BAZ)

    def test_imports_property(self):
        unit = UnitWriter(MemoryFiler(), FOO)
        unit.add_line("class Foo { %s a; %s b; }", Y_BAZ, Z_BAZ)
        assert unit.imports == ["com.y.Baz"]

    def test_context_manager_closes(self):
        filer = MemoryFiler()
        with UnitWriter(filer, FOO) as unit:
            unit.add_line("class Foo { %s a; }", Y_BAZ)
        assert unit.closed
        assert filer.sinks["com.x.Foo"].closed
        assert "import com.y.Baz;" in filer.sources["com.x.Foo"]

    def test_context_manager_releases_sink_on_error(self):
        filer = MemoryFiler()
        with pytest.raises(KeyError):
            with UnitWriter(filer, FOO) as unit:
                unit.add_line("class Foo {")
                raise KeyError("body generation failed")
        assert unit.closed
        assert filer.sinks["com.x.Foo"].closed
        assert filer.sources["com.x.Foo"] == HEADER


class TestErrors:
    def test_formatter_failure_is_fatal_and_releases_sink(self):
        filer = MemoryFiler()
        unit = UnitWriter(filer, FOO, formatter=_FailingFormatter())
        unit.add_line("class Foo { %s a; }", Y_BAZ)
        with pytest.raises(GenerationError) as excinfo:
            unit.close()
        assert isinstance(excinfo.value.__cause__, FormatterError)
        assert filer.sinks["com.x.Foo"].closed
        assert unit.closed

    def test_syntax_error_in_body_is_fatal(self):
        filer = MemoryFiler()
        unit = UnitWriter(filer, FOO)
        unit.add_line("class Foo { void f( }")
        with pytest.raises(GenerationError):
            unit.close()
        assert filer.sinks["com.x.Foo"].closed

    def test_duplicate_target_is_filer_error(self):
        filer = MemoryFiler()
        UnitWriter(filer, FOO)
        with pytest.raises(FilerError) as excinfo:
            UnitWriter(filer, FOO)
        assert not isinstance(excinfo.value, GenerationError)

    def test_symbol_lookup_failure_releases_sink(self):
        filer = MemoryFiler()
        with pytest.raises(RuntimeError, match="lookup unavailable"):
            UnitWriter(filer, FOO, symbols=_FailingLookup())
        assert filer.sinks["com.x.Foo"].closed

    def test_unnamed_package_reference_after_namesake_is_fatal(self):
        filer = MemoryFiler()
        unit = UnitWriter(filer, FOO)
        unit.add_line("class Foo { %s a; }", Y_BAZ)
        with pytest.raises(GenerationError):
            unit.add_line("%s b;", QualifiedName.of("", "Baz"))
        unit.abort()
        assert filer.sinks["com.x.Foo"].closed

    def test_sink_creation_io_failure_is_generation_error(self):
        with pytest.raises(GenerationError) as excinfo:
            UnitWriter(_BrokenFiler(), FOO)
        assert isinstance(excinfo.value.__cause__, OSError)

    def test_preamble_write_failure_closes_sink(self):
        filer = _FailingSinkFiler()
        with pytest.raises(GenerationError):
            UnitWriter(filer, FOO)
        assert filer.sink.closed
