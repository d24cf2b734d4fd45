"""例外クラスのテスト."""

import pytest

from sqlrec.exceptions import (
    ArgumentError,
    ConfigurationError,
    NullValueError,
    SqlrecError,
    StatementError,
)


class TestExceptionHierarchy:
    """例外クラスの継承関係を検証する."""

    def test_sqlrec_error_is_exception(self) -> None:
        assert issubclass(SqlrecError, Exception)

    def test_argument_error_is_sqlrec_error(self) -> None:
        assert issubclass(ArgumentError, SqlrecError)

    def test_statement_error_is_sqlrec_error(self) -> None:
        assert issubclass(StatementError, SqlrecError)

    def test_null_value_error_is_statement_error(self) -> None:
        assert issubclass(NullValueError, StatementError)

    def test_configuration_error_is_not_sqlrec_error(self) -> None:
        """設定エラーは回復可能なエラーとして捕捉されない."""
        assert not issubclass(ConfigurationError, SqlrecError)


class TestExceptionCatch:
    """基底例外で子例外をキャッチできることを検証する."""

    def test_catch_argument_error_as_sqlrec_error(self) -> None:
        with pytest.raises(SqlrecError):
            raise ArgumentError("too few args")

    def test_catch_null_value_error_as_statement_error(self) -> None:
        with pytest.raises(StatementError):
            raise NullValueError("null")


class TestArgumentError:
    """ArgumentError の属性."""

    def test_message(self) -> None:
        err = ArgumentError("Expecting #2 arg. Got: 1 args.", position=2, supplied=1)
        assert str(err) == "Expecting #2 arg. Got: 1 args."

    def test_position_and_supplied(self) -> None:
        err = ArgumentError("bad", position=3, supplied=5)
        assert err.position == 3
        assert err.supplied == 5

    def test_defaults(self) -> None:
        err = ArgumentError("bad")
        assert err.position is None
        assert err.supplied == 0
