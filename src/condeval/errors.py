class CondEvalError(Exception):
    """Base exception for all condeval errors.

    All other exceptions in this package inherit from this class,
    allowing callers to catch all condeval-related errors with
    a single except clause.

    Notes:
        These exceptions are only raised while conditions are being
        defined, loaded, or registered. Evaluation (``compare``,
        ``resolve``, ``validate``, ``evaluate``) never raises.
    """


class ConditionConfigError(CondEvalError):
    """Raised when a condition definition is invalid.

    Common causes:
        - Missing or empty ``name``
        - ``required_context_keys`` is not a sequence of strings
        - ``resolver`` is set but not callable
    """


class DuplicateConditionError(ConditionConfigError):
    """Raised when a condition name is registered twice.

    The exception message contains the duplicated condition name.
    """


class UnknownConditionError(CondEvalError):
    """Raised by ``ConditionRegistry.require()`` for an unregistered name."""


class ConditionLoadError(CondEvalError):
    """Raised when condition definitions cannot be loaded or parsed.

    Common causes:
        - Invalid JSON syntax in the source
        - File not found or unreadable
        - ``conditions`` is neither a mapping nor a list
        - A condition entry fails validation (wraps ``ConditionConfigError``)
        - Unsupported source type passed to ``load_conditions()``
    """
