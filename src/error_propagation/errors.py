class ErrorPropagationError(ValueError):
    """Base class for every error raised by this package."""


class InputError(ErrorPropagationError):
    """The call itself is malformed: a missing expression or a bad variable entry."""


class ExpressionError(ErrorPropagationError):
    """The expression could not be parsed, differentiated or evaluated."""


class ConfigurationError(ErrorPropagationError):
    """An engine was constructed with an unknown setting."""
