"""Tests for the direct and sectioned dispatch strategies."""

from types import SimpleNamespace

import pytest

from flexvalidator import (
    Assume,
    ConfigurationError,
    DirectValidator,
    EngineConfig,
    ProtocolError,
    RuleInfo,
    SectionedValidator,
    Validator,
    section,
)
from flexvalidator.rules import Outcome

RULE_A = RuleInfo("rule-a", "Section A rule")
RULE_B = RuleInfo("rule-b", "Section B rule")


def name_required(ctx, model):
    ctx.start("id-1", "Name required")
    if model.name is None:
        ctx.fail()
    ctx.complete(Assume.PASS)


def section_a(ctx, model):
    ctx.start(RULE_A)
    ctx.complete(Assume.PASS)


def section_b(ctx, model):
    ctx.start(RULE_B)
    ctx.complete(Assume.FAIL)


def broken_section(ctx, model):
    ctx.start(RuleInfo("broken", "Never resolved"))
    ctx.complete()


class TestDirectValidator:
    """Test the single-procedure strategy."""

    def test_name_required_fails_on_missing_name(self):
        result = DirectValidator(name_required).validate(SimpleNamespace(name=None))
        assert "id-1" in [rule.guid for rule in result.failed]
        assert not result.is_valid

    def test_name_required_passes_on_name(self):
        result = DirectValidator(name_required).validate(SimpleNamespace(name="x"))
        assert "id-1" in [rule.guid for rule in result.passed]
        assert result.is_valid

    def test_subclass_rules_method(self):
        class PersonValidator(DirectValidator):
            def rules(self, ctx, model):
                name_required(ctx, model)

        validator = PersonValidator()
        assert validator.name == "PersonValidator"
        assert validator.validate(SimpleNamespace(name=None)).outcome_of("id-1") is Outcome.FAILED

    def test_name_defaults_to_procedure_name(self):
        assert DirectValidator(name_required).name == "name_required"

    def test_missing_procedure(self):
        with pytest.raises(ConfigurationError):
            DirectValidator()

    def test_has_no_sections(self):
        validator = DirectValidator(name_required)
        assert validator.sections == ()
        with pytest.raises(ConfigurationError, match="unknown section"):
            validator.validate_section("anything", SimpleNamespace(name="x"))

    def test_multiple_models(self):
        def same_name(ctx, left, right):
            ctx.start("same", "Names match")
            if left.name != right.name:
                ctx.fail()
            ctx.complete(Assume.PASS)

        validator = DirectValidator(same_name)
        assert validator.validate(SimpleNamespace(name="a"), SimpleNamespace(name="a")).is_valid
        assert not validator.validate(SimpleNamespace(name="a"), SimpleNamespace(name="b")).is_valid

    def test_early_return_short_circuits(self):
        def guarded(ctx, model):
            ctx.start("present", "Model present")
            if model is None:
                ctx.fail()
            ctx.complete(Assume.PASS)
            if ctx.failed("present"):
                return
            name_required(ctx, model)

        validator = DirectValidator(guarded)
        assert [r.guid for r in validator.validate(None)] == ["present"]
        assert [r.guid for r in validator.validate(SimpleNamespace(name="x"))] == ["present", "id-1"]

    def test_satisfies_protocol(self):
        assert isinstance(DirectValidator(name_required), Validator)


class TestSectionedValidator:
    """Test the named-section strategy."""

    @pytest.fixture
    def validator(self):
        return SectionedValidator([("A", section_a), ("B", section_b)], name="ab")

    def test_validate_runs_all_sections_in_order(self, validator):
        result = validator.validate(object())
        assert [r.guid for r in result] == ["rule-a", "rule-b"]

    def test_validate_section_runs_only_that_section(self, validator):
        result = validator.validate_section("A", object())
        assert [r.guid for r in result] == ["rule-a"]
        assert result.is_valid

    def test_sections_are_enumerable(self, validator):
        assert validator.sections == ("A", "B")
        assert "A" in validator
        assert "C" not in validator

    def test_unknown_section(self, validator):
        with pytest.raises(ConfigurationError, match="unknown section 'C'"):
            validator.validate_section("C", object())

    def test_section_isolated_from_defective_section(self):
        validator = SectionedValidator({"A": section_a, "broken": broken_section})

        result = validator.validate_section("A", object())
        assert [r.guid for r in result] == ["rule-a"]

        with pytest.raises(ProtocolError, match="rule left unresolved"):
            validator.validate(object())

    def test_protocol_error_propagates_from_section(self):
        validator = SectionedValidator({"broken": broken_section})
        with pytest.raises(ProtocolError):
            validator.validate_section("broken", object())

    def test_rule_left_open_by_section(self):
        def forgets_complete(ctx, model):
            ctx.start(RULE_A)
            ctx.fail()

        validator = SectionedValidator({"forgetful": forgets_complete, "B": section_b})
        with pytest.raises(ProtocolError, match="rule left open by section 'forgetful'"):
            validator.validate(object())

    def test_duplicate_section_rejected(self):
        with pytest.raises(ConfigurationError, match="duplicate section 'A'"):
            SectionedValidator([("A", section_a), ("A", section_b)])

    def test_duplicate_section_overwrite_allowed_by_config(self):
        validator = SectionedValidator(
            [("A", section_a), ("B", section_b), ("A", section_b)],
            config=EngineConfig(allow_section_overwrite=True),
        )
        assert validator.sections == ("A", "B")
        assert [r.guid for r in validator.validate_section("A", object())] == ["rule-b"]

    def test_non_callable_procedure_rejected(self):
        with pytest.raises(ConfigurationError):
            SectionedValidator({"A": "not callable"})

    def test_registry_is_read_only(self, validator):
        with pytest.raises(TypeError):
            validator._sections["C"] = section_a

    def test_empty_validator_is_valid(self):
        result = SectionedValidator().validate(object())
        assert result.is_valid
        assert len(result) == 0

    def test_validate_is_idempotent(self, validator):
        model = object()
        assert validator.validate(model) == validator.validate(model)

    def test_satisfies_protocol(self, validator):
        assert isinstance(validator, Validator)


class TestSectionDecorator:
    """Test class-based section registration."""

    class PairValidator(SectionedValidator):
        @section("first")
        def check_first(self, ctx, model):
            section_a(ctx, model)

        def helper(self):
            return "not a section"

        @section("second")
        def check_second(self, ctx, model):
            section_b(ctx, model)

    def test_sections_in_definition_order(self):
        validator = self.PairValidator()
        assert validator.sections == ("first", "second")
        assert validator.name == "PairValidator"

    def test_decorated_then_argument_sections(self):
        validator = self.PairValidator({"third": section_a}, config=EngineConfig(allow_section_overwrite=True))
        assert validator.sections == ("first", "second", "third")

    def test_argument_cannot_duplicate_decorated_section(self):
        with pytest.raises(ConfigurationError, match="duplicate section 'first'"):
            self.PairValidator({"first": section_b})

    def test_subclass_override_keeps_position(self):
        class Override(self.PairValidator):
            @section("first")
            def check_first(self, ctx, model):
                section_b(ctx, model)

        validator = Override()
        assert validator.sections == ("first", "second")
        assert [r.guid for r in validator.validate_section("first", object())] == ["rule-b"]

    def test_subclass_override_without_decorator_drops_section(self):
        class Drop(self.PairValidator):
            def check_second(self, ctx, model):
                pass

        assert Drop().sections == ("first",)

    def test_end_to_end_two_sections(self):
        validator = self.PairValidator()
        model = SimpleNamespace()

        full = validator.validate(model)
        assert {r.guid for r in full} == {"rule-a", "rule-b"}

        only_first = validator.validate_section("first", model)
        assert [r.guid for r in only_first] == ["rule-a"]

    @pytest.mark.parametrize("bad_name", [123, "", None])
    def test_invalid_section_name(self, bad_name):
        with pytest.raises(ConfigurationError, match="non-empty string"):
            section(bad_name)
