"""Tests for custom exception hierarchy."""

from parcel_engine.exceptions import (
    ConfigurationError,
    ConflictError,
    ParcelEngineError,
    ValidationError,
)


class TestExceptionHierarchy:
    """Test exception inheritance chain."""

    def test_parcel_engine_error_is_exception(self) -> None:
        assert isinstance(ParcelEngineError("test"), Exception)

    def test_validation_error_is_parcel_engine_error(self) -> None:
        assert isinstance(ValidationError("test"), ParcelEngineError)

    def test_conflict_error_is_parcel_engine_error(self) -> None:
        assert isinstance(ConflictError("test"), ParcelEngineError)

    def test_configuration_error_is_parcel_engine_error(self) -> None:
        assert isinstance(ConfigurationError("test"), ParcelEngineError)

    def test_exception_message(self) -> None:
        err = ValidationError("surface must be > 0, got -5")
        assert str(err) == "surface must be > 0, got -5"


class TestConflictError:
    """Tests for ConflictError payload."""

    def test_piece_numbers_default_empty(self) -> None:
        assert ConflictError("duplicate").piece_numbers == []

    def test_piece_numbers_kept(self) -> None:
        err = ConflictError("B01, B02 already exist", piece_numbers=["B01", "B02"])

        assert err.piece_numbers == ["B01", "B02"]
        assert str(err) == "B01, B02 already exist"
