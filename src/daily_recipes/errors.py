"""Exceptions raised by the recipe generation pipeline."""


class RecipeError(Exception):
    """Base class for every generation failure the caller can recover from."""


class UnknownProviderError(RecipeError):
    """The provider identifier is not one of the supported providers."""

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"Unknown AI provider: {provider}")


class TransportError(RecipeError):
    """The provider could not be reached (connection, DNS, timeout)."""


class ProviderResponseError(RecipeError):
    """The provider answered, but not with a usable response envelope."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class RecipeParseError(RecipeError):
    """The provider's content is not a parseable JSON object."""


class RecipeValidationError(RecipeError):
    """The parsed recipe is missing a required field or has an invalid one."""

    def __init__(self, field: str, message: str | None = None):
        self.field = field
        super().__init__(message or f"Missing required field: {field}")
