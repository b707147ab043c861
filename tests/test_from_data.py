"""
Tests for building models from query data with from_data().
"""

import pytest
from collections import namedtuple
from types import SimpleNamespace

from pydantic import BaseModel

from activemodels import (
    BuildMode,
    InvalidArgumentError,
    Model,
    PropertyDefinition,
    after_load,
)


class Pair(Model):
    """Two plain properties."""

    properties = {
        "a": "int",
        "b": "int",
    }


class PairWithDefault(Model):
    """Two properties, the second with a default."""

    properties = {
        "a": "int",
        "b": ("int", 0),
    }


class Record(Model):
    """Typical row-backed model."""

    properties = {
        "id": "int",
        "name": "string",
        "price": "float",
        "active": "bool",
        "tags": "array",
    }


class Tagged(Model):
    """Model whose values need custom casts."""

    @classmethod
    def define_properties(cls):
        return {
            "id": PropertyDefinition().type("int").nullable(),
            "tags": PropertyDefinition()
                .type("array")
                .cast_with(lambda value, definition: value.split(",")),
            "either": PropertyDefinition().type("int", "bool"),
            "when": PropertyDefinition().type("datetime.date").nullable(),
        }


class Loaded(Model):
    """Model counting after_load calls."""

    properties = {
        "id": "int",
    }

    loads: list = []

    @after_load
    def record_load(self):
        Loaded.loads.append(self.id)


class TestStrictnessMatrix:
    """Test the build modes against schema {a, b} and data {a, c}."""

    data = {"a": 1, "c": 2}

    def test_strict_fails(self):
        """STRICT rejects the extra key."""
        with pytest.raises(InvalidArgumentError, match="extra keys: c"):
            Pair.from_data(self.data, BuildMode.STRICT)

    def test_strict_reports_missing(self):
        """STRICT rejects missing keys too."""
        with pytest.raises(InvalidArgumentError, match="missing keys: b"):
            Pair.from_data({"a": 1}, BuildMode.STRICT)

    def test_ignore_missing_still_rejects_extra(self):
        """IGNORE_MISSING alone still rejects extra keys."""
        with pytest.raises(InvalidArgumentError, match="extra keys: c"):
            Pair.from_data(self.data, BuildMode.IGNORE_MISSING)

    def test_ignore_missing_and_extra(self):
        """Combined flags tolerate both."""
        pair = Pair.from_data(self.data, BuildMode.IGNORE_MISSING | BuildMode.IGNORE_EXTRA)

        assert pair.to_dict() == {"a": 1}
        assert not pair.is_set("b")

    def test_ignore_extra_rejects_missing(self):
        """IGNORE_EXTRA (the default) rejects missing keys without a default."""
        with pytest.raises(InvalidArgumentError, match="missing keys: b"):
            Pair.from_data(self.data)

    def test_ignore_extra_accepts_missing_with_default(self):
        """Missing keys with a default are not an error."""
        pair = PairWithDefault.from_data(self.data)

        assert pair.to_dict() == {"a": 1, "b": 0}

    def test_integer_modes(self):
        """Plain integers work as modes."""
        pair = Pair.from_data(self.data, 3)

        assert pair.to_dict() == {"a": 1}

    def test_strict_missing_key_scenario(self):
        """STRICT construction from {id} for schema {id, name} cites name."""
        with pytest.raises(InvalidArgumentError, match="name"):
            Record.from_data({"id": 1}, BuildMode.STRICT)


class TestDataShapes:
    """Test the accepted data shapes."""

    row = {"id": 1, "name": "Lamp", "price": 5.99, "active": True, "tags": ["a"]}

    def test_mapping(self):
        """Mappings are used directly."""
        assert Record.from_data(self.row).to_dict() == self.row

    def test_object(self):
        """Objects contribute their public attributes."""
        assert Record.from_data(SimpleNamespace(**self.row)).to_dict() == self.row

    def test_named_tuple(self):
        """Named tuples are converted with their fields."""
        Row = namedtuple("Row", self.row.keys())

        assert Record.from_data(Row(**self.row)).to_dict() == self.row

    def test_pydantic_model(self):
        """Pydantic models are dumped."""
        class RowSchema(BaseModel):
            id: int
            name: str
            price: float
            active: bool
            tags: list

        assert Record.from_data(RowSchema(**self.row)).to_dict() == self.row

    def test_model(self):
        """Other models contribute their values."""
        assert Record.from_data(Record(self.row)).to_dict() == self.row

    @pytest.mark.parametrize("data", [42, "row", None])
    def test_unsupported_data(self, data):
        """Scalars are rejected."""
        with pytest.raises(InvalidArgumentError, match="Query data must be an object or mapping"):
            Record.from_data(data)


class TestCasting:
    """Test casting of raw query values."""

    def test_string_row(self):
        """Database strings are cast to the declared scalar types."""
        record = Record.from_data({
            "id": "1",
            "name": 42,
            "price": "5.99",
            "active": "1",
            "tags": "a",
        })

        assert record.to_dict() == {"id": 1, "name": "42", "price": 5.99, "active": True, "tags": ["a"]}

    @pytest.mark.parametrize("raw,expected", [
        ("0", False),
        ("", False),
        ("false", False),
        ("no", False),
        ("true", True),
        ("yes", True),
        (1, True),
        (0, False),
        (2, True),
        (0.0, False),
        ("abc", False),
    ])
    def test_bool_casts(self, raw, expected):
        """Booleans accept common string and integer spellings."""
        record = Record.from_data({"id": 1, "name": "x", "price": 1.0, "active": raw, "tags": []})

        assert record.active is expected

    @pytest.mark.parametrize("raw,expected", [(1.9, 1), (-1.9, -1), ("1.9", 1)])
    def test_int_casts_truncate(self, raw, expected):
        """Fractional numbers and numeric strings truncate toward zero."""
        record = Record.from_data({"id": raw, "name": "x", "price": 1.0, "active": True, "tags": []})

        assert record.id == expected
        assert type(record.id) is int

    def test_non_numeric_int_rejected(self):
        """Strings that are not numbers still cannot become integers."""
        with pytest.raises(InvalidArgumentError, match="'id'"):
            Record.from_data({"id": "one", "name": "x", "price": 1.0, "active": True, "tags": []})

    @pytest.mark.parametrize("raw,expected", [(True, "1"), (False, ""), (1.5, "1.5")])
    def test_string_casts(self, raw, expected):
        """Booleans become "1" or the empty string; numbers their text."""
        record = Record.from_data({"id": 1, "name": raw, "price": 1.0, "active": True, "tags": []})

        assert record.name == expected

    def test_int_to_float(self):
        """Integers are cast to floats for float properties."""
        record = Record.from_data({"id": 1, "name": "x", "price": 5, "active": True, "tags": []})

        assert record.price == 5.0
        assert isinstance(record.price, float)

    def test_tuple_to_array(self):
        """Tuples become lists."""
        record = Record.from_data({"id": 1, "name": "x", "price": 1.0, "active": True, "tags": ("a", "b")})

        assert record.tags == ["a", "b"]

    def test_uncastable_value(self):
        """Values that cannot be cast are rejected with the key."""
        with pytest.raises(InvalidArgumentError, match="'price'"):
            Record.from_data({"id": 1, "name": "x", "price": "cheap", "active": True, "tags": []})

    def test_none_passes_through(self):
        """None is not cast; nullable properties accept it."""
        record = Record.from_data({"id": 1, "name": None, "price": None, "active": None, "tags": None})

        assert record.is_set("name")
        assert record.name is None

    def test_custom_cast(self):
        """A definition's cast method is preferred over built-in casts."""
        tagged = Tagged.from_data({"tags": "a,b", "either": 1, "when": None}, BuildMode.IGNORE_MISSING)

        assert tagged.tags == ["a", "b"]

    def test_multiple_types_without_cast(self):
        """Union types cannot be cast without a cast method."""
        with pytest.raises(InvalidArgumentError, match="multiple types"):
            Tagged.from_data({"tags": [], "either": "1", "when": None}, BuildMode.IGNORE_MISSING)

    def test_named_type_without_cast(self):
        """Named types cannot be cast without a cast method."""
        with pytest.raises(InvalidArgumentError, match="Unexpected type"):
            Tagged.from_data({"tags": [], "either": 1, "when": "2024-01-01"}, BuildMode.IGNORE_MISSING)

    def test_cast_value_for_property(self):
        """cast_value_for_property() can be called directly."""
        definition = Record.get_property_definition("id")

        assert Record.cast_value_for_property(definition, "12", "id") == 12


class TestPersistedState:
    """Test the state of models built from data."""

    def test_primary_value_commits(self):
        """Models with a primary value are clean and persisted."""
        record = Record.from_data({"id": "1", "name": "x", "price": 1.0, "active": True, "tags": []})

        assert record.is_clean()
        assert record.is_persisted()
        assert record.get_original("id") == 1

    def test_without_primary_value(self):
        """Models without a primary value are new."""
        tagged = Tagged.from_data({"tags": [], "either": 1}, BuildMode.IGNORE_MISSING)

        assert not tagged.is_persisted()
        assert tagged.get_original() == {"tags": [], "either": 1}

    def test_after_load_hooks(self):
        """after_load hooks run for every model built from data."""
        Loaded.loads.clear()

        Loaded.from_data({"id": 1})
        Loaded.from_data({"id": 2})

        assert Loaded.loads == [1, 2]
