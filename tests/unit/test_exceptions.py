"""Tests for the exception hierarchy."""

import pytest

from fastapi_userauth.exceptions import (
    CallbackResultError,
    ConfigurationError,
    UserAuthError,
)


class TestHierarchy:
    def test_base_is_exception(self) -> None:
        assert issubclass(UserAuthError, Exception)

    @pytest.mark.parametrize("exc_class", [ConfigurationError, CallbackResultError])
    def test_subclasses_inherit_base(self, exc_class: type[Exception]) -> None:
        assert issubclass(exc_class, UserAuthError)

    def test_siblings_are_distinct(self) -> None:
        assert not issubclass(ConfigurationError, CallbackResultError)
        assert not issubclass(CallbackResultError, ConfigurationError)


class TestBehavior:
    @pytest.mark.parametrize("exc_class", [UserAuthError, ConfigurationError, CallbackResultError])
    def test_message_preserved(self, exc_class: type[Exception]) -> None:
        error = exc_class("something went wrong")
        assert str(error) == "something went wrong"

    def test_catch_by_base(self) -> None:
        with pytest.raises(UserAuthError):
            raise ConfigurationError("login_path and logout_path must differ")

    def test_chaining(self) -> None:
        original = TypeError("not a tuple")
        try:
            try:
                raise original
            except TypeError as exc:
                raise CallbackResultError("bad result") from exc
        except CallbackResultError as error:
            assert error.__cause__ is original

    @pytest.mark.parametrize("exc_class", [UserAuthError, ConfigurationError, CallbackResultError])
    def test_has_docstring(self, exc_class: type[Exception]) -> None:
        assert exc_class.__doc__
