"""
Unit Tests for Vitals Plausibility Validation
"""
import pytest

from carewatch.core.scoring import Vitals
from carewatch.core.validation import VitalsPlausibilityValidator, ViolationType


@pytest.fixture
def validator() -> VitalsPlausibilityValidator:
    return VitalsPlausibilityValidator()


class TestVitalsPlausibilityValidator:
    """Hard-limit and pairing checks."""

    def test_normal_vitals_valid(self, validator):
        result = validator.validate(Vitals(
            temperature=36.8, pulse=72, systolic_bp=120, diastolic_bp=80,
            oxygen_saturation=98, respiratory_rate=14,
        ))
        assert result.is_valid
        assert result.violations == []
        assert result.validated_count == 6

    def test_empty_vitals_valid(self, validator):
        result = validator.validate(Vitals())
        assert result.is_valid
        assert result.validated_count == 0

    def test_typo_temperature_impossible(self, validator):
        result = validator.validate(Vitals(temperature=389))

        assert not result.is_valid
        assert result.violations[0].vital == "temperature"
        assert result.violations[0].violation_type == ViolationType.IMPOSSIBLE_VALUE
        assert result.violations[0].expected_range == (25.0, 45.0)

    def test_oxygen_over_100_impossible(self, validator):
        result = validator.validate(Vitals(oxygen_saturation=101))
        assert not result.is_valid

    def test_abnormal_but_possible_is_valid(self, validator):
        # Scored as abnormal, but physically possible
        result = validator.validate(Vitals(temperature=40.5, pulse=130, oxygen_saturation=85))
        assert result.is_valid

    def test_swapped_blood_pressure(self, validator):
        result = validator.validate(Vitals(systolic_bp=70, diastolic_bp=120))

        assert not result.is_valid
        types = [v.violation_type for v in result.violations]
        assert ViolationType.INTERNAL_CONTRADICTION in types

    def test_lone_systolic_is_informational(self, validator):
        result = validator.validate(Vitals(systolic_bp=150))

        assert result.is_valid
        assert len(result.violations) == 1
        assert result.violations[0].violation_type == ViolationType.INCOMPLETE_PAIR
        assert result.violations[0].vital == "diastolic_bp"

    def test_violation_to_dict(self, validator):
        result = validator.validate(Vitals(pulse=400))
        data = result.violations[0].to_dict()

        assert result.messages() == [result.violations[0].message]
        assert data["vital"] == "pulse"
        assert data["type"] == "impossible_value"
        assert data["actual_value"] == 400
        assert data["expected_range"] == [20.0, 300.0]

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_reading_impossible(self, validator, value):
        result = validator.validate(Vitals(temperature=value))

        assert not result.is_valid
        assert result.violations[0].vital == "temperature"
        assert result.violations[0].violation_type == ViolationType.IMPOSSIBLE_VALUE

    def test_validation_count(self, validator):
        validator.validate(Vitals())
        validator.validate(Vitals(pulse=70))
        assert validator.validation_count == 2
