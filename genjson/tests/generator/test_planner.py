"""Tests for representation selection, error synthesis and per-model planning."""

import pytest

from genjson.generator import GenerationFailure, GeneratorConfig, SymbolTable, scan_source
from genjson.generator.errors import (
    DependencyFailedError,
    ErrorNameCollisionError,
    InvalidOverrideError,
    InvalidRepresentationError,
    MissingCodecError,
    ReservedNameError,
    UnresolvedTypeError,
)
from genjson.generator.pipeline import generate_from_symbols
from genjson.generator.planner import plan_models, prune_dependents
from genjson.generator.representation import select_representation
from genjson.generator.taxonomy import synthesize_errors
from genjson.generator.types import (
    DelegateInvalid,
    Direction,
    ObjectRepresentation,
    ParameterDelegate,
    ShapeMismatch,
)


def _model(source):
    (model,) = scan_source(source, "app.models")
    return model


def _symbols(source):
    return SymbolTable(scan_source(source, "app.models"))


def _failures(failures):
    return {f.model: type(f.error) for f in failures}


def describe_select_representation():
    def defaults_to_object(expect):
        model = _model("@generate_json\nclass Item:\n    id: int\n")
        expect(select_representation(model, Direction.READER)) == ObjectRepresentation()
        expect(select_representation(model, Direction.WRITER)) == ObjectRepresentation()

    def applies_ignore_list_to_writer_only(expect):
        model = _model(
            "@generate_json\nclass User:\n    id: int\n    password: str\n"
            "    json_writer_ignore = ['password']\n"
        )
        expect(select_representation(model, Direction.READER)) == ObjectRepresentation()
        writer = select_representation(model, Direction.WRITER)
        expect(writer) == ObjectRepresentation(ignored=frozenset({"password"}))

    def uses_parameter_delegate(expect):
        model = _model(
            "@generate_json\nclass Phone:\n    value: str\n    json_representation = 'parameter'\n"
        )
        expect(select_representation(model, Direction.READER)) == ParameterDelegate()
        expect(select_representation(model, Direction.WRITER)) == ParameterDelegate()

    def lets_direction_override_shared_setting(expect):
        model = _model(
            "@generate_json\nclass Phone:\n    value: str\n"
            "    json_representation = 'parameter'\n"
            "    json_reader_representation = 'object'\n"
        )
        expect(select_representation(model, Direction.READER)) == ObjectRepresentation()
        expect(select_representation(model, Direction.WRITER)) == ParameterDelegate()

    def rejects_delegate_without_single_field(expect):
        model = _model(
            "@generate_json\nclass Pair:\n    a: int\n    b: int\n"
            "    json_representation = 'parameter'\n"
        )
        with pytest.raises(InvalidRepresentationError) as exc:
            select_representation(model, Direction.READER)
        expect("exactly one field" in str(exc.value)) == True

    def rejects_unknown_ignored_fields(expect):
        model = _model(
            "@generate_writer\nclass User:\n    id: int\n    json_writer_ignore = ['token', 'pw']\n"
        )
        with pytest.raises(InvalidRepresentationError) as exc:
            select_representation(model, Direction.WRITER)
        expect("pw, token" in str(exc.value)) == True


def describe_synthesize_errors():
    def names_object_errors_per_field(expect):
        model = _model("@generate_json\nclass Item:\n    id: int\n    display_name: str\n")
        errors = synthesize_errors(model, ObjectRepresentation())
        expect(errors.enum_name) == "ItemReaderError"
        expect([v.name for v in errors.variants]) == [
            "ItemNotJsonObject",
            "ItemIdMissingError",
            "ItemIdInvalidError",
            "ItemDisplayNameMissingError",
            "ItemDisplayNameInvalidError",
        ]
        expect(errors.shape_mismatch()) == ShapeMismatch("Item")
        expect(errors.missing("display_name").name) == "ItemDisplayNameMissingError"

    def names_delegate_error(expect):
        model = _model("@generate_json\nclass PhoneNumber:\n    value: str\n")
        errors = synthesize_errors(model, ParameterDelegate())
        expect(errors.variants) == (DelegateInvalid("PhoneNumber"),)
        expect(errors.shape_mismatch()) == None

    def has_only_shape_error_without_fields(expect):
        model = _model("@generate_json\nclass Empty:\n    pass\n")
        errors = synthesize_errors(model, ObjectRepresentation())
        expect([v.name for v in errors.variants]) == ["EmptyNotJsonObject"]

    def rejects_colliding_names(expect):
        model = _model("@generate_json\nclass User:\n    user_id: int\n    userId: int\n")
        with pytest.raises(ErrorNameCollisionError):
            synthesize_errors(model, ObjectRepresentation())


ISOLATION_MODELS = """
@generate_json
class Item:
    id: int

@generate_json
class Broken:
    when: datetime

@generate_json
class Holder:
    broken: list[Broken]

@generate_json
class Outer:
    holder: Holder | None
    item: Item

@generate_reader
class ReadOnly:
    value: int

@generate_json
class UsesReadOnly:
    value: ReadOnly

@generate_json
class BadOverride:
    value: int
    value_reader = "read_value"
"""


def describe_plan_models():
    def plans_fields_in_order(expect):
        symbols = _symbols("@generate_json\nclass Item:\n    id: int\n    name: str\n")
        plans, failures = plan_models(symbols, Direction.READER)
        expect(failures) == []
        expect([fp.field.name for fp in plans[0].fields]) == ["id", "name"]
        expect(plans[0].errors.enum_name) == "ItemReaderError"

    def leaves_ignored_fields_out_of_writer(expect):
        symbols = _symbols(
            "@generate_json\nclass User:\n    id: int\n    password: str\n"
            "    json_writer_ignore = ['password']\n"
        )
        (plan,), _ = plan_models(symbols, Direction.WRITER)
        expect([fp.field.name for fp in plan.fields]) == ["id"]
        expect(plan.errors) == None

    def records_model_dependencies(expect):
        symbols = _symbols(
            "@generate_json\nclass Item:\n    id: int\n\n"
            "@generate_json\nclass Cart:\n    items: list[Item]\n    saved: dict[str, Item]\n"
        )
        plans, _ = plan_models(symbols, Direction.READER)
        expect(plans[1].dependencies) == ("Item",)

    def isolates_failing_models(expect):
        symbols = _symbols(ISOLATION_MODELS)
        plans, failures = plan_models(symbols, Direction.READER)
        expect([plan.name for plan in plans]) == ["Item", "ReadOnly", "UsesReadOnly"]
        expect(_failures(failures)) == {
            "Broken": UnresolvedTypeError,
            "BadOverride": InvalidOverrideError,
            "Holder": DependencyFailedError,
            "Outer": DependencyFailedError,
        }

    def drops_models_referring_to_missing_codecs(expect):
        symbols = _symbols(ISOLATION_MODELS)
        plans, failures = plan_models(symbols, Direction.WRITER)
        expect([plan.name for plan in plans]) == ["Item", "BadOverride"]
        failed = _failures(failures)
        expect(failed["UsesReadOnly"]) == MissingCodecError
        expect("ReadOnly" in failed) == False

    def names_the_failing_field(expect):
        symbols = _symbols(ISOLATION_MODELS)
        _, failures = plan_models(symbols, Direction.READER)
        outer = next(f for f in failures if f.model == "Outer")
        expect(outer.error.field) == "holder"
        expect(outer.error.target) == "Holder"
        expect(outer.message) == "Outer.holder: depends on Holder, which failed to generate"


def describe_prune_dependents():
    def follows_dependencies_transitively(expect):
        symbols = _symbols(
            "@generate_json\nclass A:\n    b: B\n\n"
            "@generate_json\nclass B:\n    c: list[C]\n\n"
            "@generate_json\nclass C:\n    value: int\n\n"
            "@generate_json\nclass D:\n    value: int\n"
        )
        plans, _ = plan_models(symbols, Direction.WRITER)
        kept, dropped = prune_dependents(plans, {"C"}, Direction.WRITER)
        expect([plan.name for plan in kept]) == ["D"]
        expect(sorted(f.model for f in dropped)) == ["A", "B"]
        expect(all(isinstance(f, GenerationFailure) for f in dropped)) == True

    def keeps_self_referencing_models(expect):
        symbols = _symbols("@generate_json\nclass Node:\n    children: list[Node]\n")
        plans, failures = plan_models(symbols, Direction.READER)
        expect(failures) == []
        expect(plans[0].dependencies) == ("Node",)


def describe_generate_from_symbols():
    def renders_surviving_models(expect):
        result = generate_from_symbols(
            _symbols(ISOLATION_MODELS), GeneratorConfig(dest_package="app.json")
        )
        expect(result.ok) == False
        expect(result.readers) == ["Item", "ReadOnly", "UsesReadOnly"]
        expect(result.writers) == ["Item", "BadOverride"]
        expect(sorted(result.files)) == ["__init__.py", "readers.py", "writers.py"]

        readers = result.files["readers.py"]
        expect("class ItemReader(_rt.JsonReader[Item, ItemReaderError]):" in readers) == True
        expect("BrokenReader" in readers) == False
        expect("OuterReader" in readers) == False
        expect("from app.models import Item, ReadOnly, UsesReadOnly" in readers) == True
        for source in result.files.values():
            compile(source, "<generated>", "exec")

    def reports_each_failure_once_per_direction(expect):
        result = generate_from_symbols(
            _symbols(ISOLATION_MODELS), GeneratorConfig(dest_package="app.json")
        )
        keys = [(f.model, f.direction) for f in result.failures]
        expect(len(keys)) == len(set(keys))
        expect(("Broken", Direction.READER) in keys) == True
        expect(("Broken", Direction.WRITER) in keys) == True

    def uses_configured_module_names(expect):
        config = GeneratorConfig(
            dest_package="app.json",
            runtime_import="app.vendor.genjson_runtime",
            readers_module="decoders",
            writers_module="encoders",
        )
        result = generate_from_symbols(
            _symbols("@generate_json\nclass Item:\n    id: int\n"), config
        )
        expect(sorted(result.files)) == ["__init__.py", "decoders.py", "encoders.py"]
        expect("from .decoders import READERS" in result.files["__init__.py"]) == True
        expect("import app.vendor.genjson_runtime as _rt" in result.files["decoders.py"]) == True

    def renders_models_without_fields(expect):
        result = generate_from_symbols(
            _symbols("@generate_json\nclass Empty:\n    pass\n"),
            GeneratorConfig(dest_package="app.json"),
        )
        expect(result.ok) == True
        expect("return _rt.Success(Empty())" in result.files["readers.py"]) == True
        expect("return {}" in result.files["writers.py"]) == True


def describe_generated_names():
    def keep_extractors_of_similar_names_apart(expect):
        result = generate_from_symbols(
            _symbols(
                "@generate_json\nclass A_b:\n    c: int\n\n"
                "@generate_json\nclass A:\n    b_c: str\n"
            ),
            GeneratorConfig(dest_package="app.json"),
        )
        expect(result.ok) == True
        readers = result.files["readers.py"]
        expect("_A_b__c = _rt.ObjectValueExtractor(" in readers) == True
        expect("_A__b_c = _rt.ObjectValueExtractor(" in readers) == True

    def reject_model_clashing_with_another_models_extractor(expect):
        result = generate_from_symbols(
            _symbols(
                "@generate_json\nclass A:\n    _b: int\n\n"
                "@generate_json\nclass A_:\n    b: int\n"
            ),
            GeneratorConfig(dest_package="app.json"),
        )
        expect(result.readers) == ["A"]
        (failure,) = result.failures
        expect(failure.model) == "A_"
        expect(isinstance(failure.error, ReservedNameError)) == True
        expect("_A___b" in failure.message) == True

    def reject_model_named_like_generated_class(expect):
        result = generate_from_symbols(
            _symbols(
                "@generate_json\nclass Item:\n    id: int\n\n"
                "@generate_json\nclass ItemReader:\n    name: str\n\n"
                "@generate_json\nclass Basket:\n    reader: ItemReader\n"
            ),
            GeneratorConfig(dest_package="app.json"),
        )
        expect(result.readers) == ["Item"]
        expect(result.writers) == ["Item", "ItemReader", "Basket"]
        expect(_failures(result.failures)) == {
            "ItemReader": ReservedNameError,
            "Basket": DependencyFailedError,
        }

    @pytest.mark.parametrize("name", ["READERS", "value", "_Hidden"])
    def reject_reserved_model_names(expect, name):
        result = generate_from_symbols(
            _symbols(f"@generate_json\nclass {name}:\n    id: int\n"),
            GeneratorConfig(dest_package="app.json"),
        )
        expect(result.readers) == []
        expect(result.writers) == []
        expect(all(isinstance(f.error, ReservedNameError) for f in result.failures)) == True
