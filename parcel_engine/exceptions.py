"""Custom exception hierarchy for parcel-engine."""


class ParcelEngineError(Exception):
    """Base exception for all parcel-engine errors."""


class ValidationError(ParcelEngineError):
    """Raised when an input value violates a numeric or structural rule."""


class ConflictError(ParcelEngineError):
    """Raised when a piece number already exists in its batch.

    The engine never checks uniqueness itself; persistence layers raise this
    when a commit collides with an existing piece.
    """

    def __init__(self, message: str, piece_numbers: list[str] | None = None) -> None:
        super().__init__(message)
        self.piece_numbers = piece_numbers or []


class ConfigurationError(ParcelEngineError):
    """Raised when configuration is invalid or missing."""
