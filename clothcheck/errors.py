"""Exceptions raised by the ClothCheck bot."""


class ClothCheckError(Exception):
    """Base class for errors raised by this package."""


class ConfigurationError(ClothCheckError):
    """A required setting is missing or malformed."""


class WeatherLookupError(ClothCheckError):
    """The weather service answered with an error or an unusable body."""


class InvalidPostbackError(ClothCheckError, ValueError):
    """A postback payload is not of the form `<temperature>&<label>`."""
