"""
Tests for the process-wide configuration.
"""

import pytest

from activemodels import (
    Config,
    ConfigurationError,
    InvalidArgumentError,
    Model,
    ReadOnlyPropertyError,
)


class TestHookPrefix:
    """Test the hook prefix setting."""

    def test_unset_prefix(self):
        """Reading the prefix before it is set raises."""
        with pytest.raises(ConfigurationError, match="Config.set_hook_prefix"):
            Config.get_hook_prefix()

    def test_set_prefix(self):
        """The prefix can be set once and namespaces hook names."""
        Config.set_hook_prefix("my_plugin")

        assert Config.get_hook_prefix() == "my_plugin"
        assert Config.hook_name("model_saved") == "my_plugin/model_saved"

    def test_set_twice(self):
        """Setting the prefix a second time raises."""
        Config.set_hook_prefix("first")

        with pytest.raises(ConfigurationError, match="already been called and set to first"):
            Config.set_hook_prefix("second")

        assert Config.get_hook_prefix() == "first"

    @pytest.mark.parametrize("prefix", ["", "My Plugin", "plugin/name", "UPPER"])
    def test_invalid_prefix(self, prefix):
        """Prefixes are limited to lowercase letters, numbers, underscores and dashes."""
        with pytest.raises(InvalidArgumentError, match="Hook prefix must only contain"):
            Config.set_hook_prefix(prefix)

        with pytest.raises(ConfigurationError):
            Config.get_hook_prefix()

    @pytest.mark.parametrize("prefix", ["plugin", "my-plugin", "plugin_2"])
    def test_valid_prefix(self, prefix):
        """Valid prefixes are accepted."""
        Config.set_hook_prefix(prefix)

        assert Config.get_hook_prefix() == prefix


class TestExceptionClasses:
    """Test overriding the raised exception classes."""

    def test_defaults(self):
        """The library exceptions are used by default."""
        assert Config.get_invalid_argument_exception() is InvalidArgumentError
        assert Config.get_readonly_property_exception() is ReadOnlyPropertyError

    def test_invalid_argument_subclass(self):
        """Subclasses of InvalidArgumentError are accepted and raised."""
        class AppInvalidArgument(InvalidArgumentError):
            pass

        Config.set_invalid_argument_exception(AppInvalidArgument)

        with pytest.raises(AppInvalidArgument, match="boom"):
            Config.raise_invalid_argument("boom")

    def test_readonly_subclass(self):
        """Subclasses of ReadOnlyPropertyError are accepted and raised."""
        class AppReadOnly(ReadOnlyPropertyError):
            pass

        Config.set_readonly_property_exception(AppReadOnly)

        with pytest.raises(AppReadOnly, match="boom"):
            Config.raise_readonly_property("boom")

    @pytest.mark.parametrize("exception_class", [ValueError, Exception, "InvalidArgumentError", None])
    def test_rejects_unrelated_invalid_argument_class(self, exception_class):
        """Only InvalidArgumentError subclasses are accepted."""
        with pytest.raises(InvalidArgumentError, match="must extend InvalidArgumentError"):
            Config.set_invalid_argument_exception(exception_class)

        assert Config.get_invalid_argument_exception() is InvalidArgumentError

    @pytest.mark.parametrize("exception_class", [AttributeError, InvalidArgumentError, 42])
    def test_rejects_unrelated_readonly_class(self, exception_class):
        """Only ReadOnlyPropertyError subclasses are accepted."""
        with pytest.raises(InvalidArgumentError, match="must extend ReadOnlyPropertyError"):
            Config.set_readonly_property_exception(exception_class)

    def test_models_raise_configured_class(self):
        """Models raise the configured class for unknown properties."""
        class AppInvalidArgument(InvalidArgumentError):
            pass

        class Widget(Model):
            properties = {"name": "string"}

        Config.set_invalid_argument_exception(AppInvalidArgument)

        with pytest.raises(AppInvalidArgument, match="Property color does not exist."):
            Widget(color="red")


class TestReset:
    """Test restoring the defaults."""

    def test_reset(self):
        """reset() clears the prefix and restores the exception classes."""
        class AppInvalidArgument(InvalidArgumentError):
            pass

        Config.set_hook_prefix("plugin")
        Config.set_invalid_argument_exception(AppInvalidArgument)

        Config.reset()

        assert Config.get_invalid_argument_exception() is InvalidArgumentError
        with pytest.raises(ConfigurationError):
            Config.get_hook_prefix()
