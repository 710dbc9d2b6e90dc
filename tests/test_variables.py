"""
Tests for tabatmo.variables
"""

import pytest

from tabatmo.errors import UnsupportedVariableError, VariableBindingError
from tabatmo.variables import (
    DEFAULT_DEPENDENT_VARIABLES,
    DependentVariable,
    IndependentVariable,
    VariableRegistry,
)


class TestParse:

    def test_strings(self):
        assert DependentVariable.parse("Density") is DependentVariable.DENSITY
        assert DependentVariable.parse("specific-heat ratio") is \
            DependentVariable.SPECIFIC_HEAT_RATIO
        assert IndependentVariable.parse(" time ") is IndependentVariable.TIME

    def test_members_pass_through(self):
        assert IndependentVariable.parse(IndependentVariable.LATITUDE) is \
            IndependentVariable.LATITUDE

    def test_unknown(self):
        with pytest.raises(VariableBindingError):
            IndependentVariable.parse("height")
        with pytest.raises(VariableBindingError):
            DependentVariable.parse(IndependentVariable.ALTITUDE)


class TestDefaults:

    def test_default_lists(self):
        reg = VariableRegistry()
        assert reg.dependent_variables == DEFAULT_DEPENDENT_VARIABLES
        assert reg.independent_variables == (IndependentVariable.ALTITUDE,)
        assert reg.dimensions == 1

    def test_default_slots(self):
        reg = VariableRegistry()
        assert reg.slot(DependentVariable.DENSITY) == 0
        assert reg.slot("pressure") == 1
        assert reg.slot("temperature") == 2


class TestSlots:

    def test_permutation(self):
        reg = VariableRegistry(["pressure", "density", "temperature"])
        assert reg.slot("density") == 1
        assert reg.slot("pressure") == 0

    def test_unsupported(self):
        reg = VariableRegistry(["density"])
        with pytest.raises(UnsupportedVariableError) as info:
            reg.slot("temperature")
        assert info.value.variable is DependentVariable.TEMPERATURE
        assert "density" in str(info.value)

    def test_axis_index(self):
        reg = VariableRegistry(independent_variables=["latitude", "altitude"])
        assert reg.axis_index("altitude") == 1
        assert reg.axis_index(IndependentVariable.LATITUDE) == 0
        assert reg.axis_index("time") is None

    def test_single_string(self):
        reg = VariableRegistry("temperature", "altitude")
        assert reg.dependent_variables == (DependentVariable.TEMPERATURE,)


class TestValidation:

    def test_duplicate_dependent(self):
        with pytest.raises(VariableBindingError):
            VariableRegistry(["density", "density"])

    def test_duplicate_independent(self):
        with pytest.raises(VariableBindingError):
            VariableRegistry(independent_variables=["altitude", "altitude"])

    def test_empty_list(self):
        with pytest.raises(VariableBindingError):
            VariableRegistry([])

    def test_four_axes_allowed(self):
        reg = VariableRegistry(independent_variables=["time", "latitude",
                                                      "longitude", "altitude"])
        assert reg.dimensions == 4

    def test_registry_is_frozen(self):
        reg = VariableRegistry()
        with pytest.raises(AttributeError):
            reg.dependent_variables = ()


class TestBindColumns:

    def test_single_file(self):
        reg = VariableRegistry(["temperature", "density", "pressure"])
        binding = reg.bind_columns([3])
        assert binding[DependentVariable.TEMPERATURE] == (0, 0)
        assert binding[DependentVariable.PRESSURE] == (0, 2)

    def test_one_file_per_variable(self):
        reg = VariableRegistry()
        binding = reg.bind_columns([1, 1, 1])
        assert binding[DependentVariable.DENSITY] == (0, 0)
        assert binding[DependentVariable.PRESSURE] == (1, 0)
        assert binding[DependentVariable.TEMPERATURE] == (2, 0)

    def test_mixed_files(self):
        reg = VariableRegistry(["density", "pressure", "temperature", "molar_mass"])
        binding = reg.bind_columns([2, 2])
        assert binding[DependentVariable.TEMPERATURE] == (1, 0)
        assert binding[DependentVariable.MOLAR_MASS] == (1, 1)

    def test_count_mismatch(self):
        reg = VariableRegistry()
        with pytest.raises(VariableBindingError):
            reg.bind_columns([4])
        with pytest.raises(VariableBindingError):
            reg.bind_columns([1, 1])
