"""
Exceptions raised by the style engine.

Only structurally impossible input is an error. Sparse or unscored input is
absorbed and shows up as lower confidence instead.
"""


class InvalidInputError(ValueError):
    """Raised for caller-correctable input: empty sample, bad tone, empty prompt."""
    pass


class InvalidSampleError(InvalidInputError):
    """Raised when a writing sample contains no usable text."""
    pass


class GenerationError(RuntimeError):
    """Raised by the generator boundary after all attempts have failed."""
    pass
