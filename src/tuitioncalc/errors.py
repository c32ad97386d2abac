"""Exception types raised by the tuition engine.

Validation problems are user-correctable and carry the user-facing
messages. Degenerate calculations (no paid weeks, no class days) do not
raise; they return zero results instead.
"""


class CatalogError(ValueError):
    """Raised when a catalog payload cannot be read or is not a mapping."""


class UnknownCourseError(KeyError):
    """Raised when a course key is not present in the catalog.

    Attributes:
        course_key: The key that was looked up.
    """

    def __init__(self, course_key: str):
        self.course_key = course_key
        super().__init__(course_key)

    def __str__(self) -> str:
        return f"Unknown course: {self.course_key!r}"


class InvalidLineItemError(ValueError):
    """Raised when a cart line item fails validation.

    Attributes:
        errors: The individual validation errors, in the order found.
    """

    def __init__(self, errors: list):
        self.errors = list(errors)
        super().__init__("\n".join(error.message for error in self.errors))

    @property
    def messages(self) -> list[str]:
        return [error.message for error in self.errors]


class QuoteError(ValueError):
    """Raised when a quote cannot be rendered (no student name, empty cart)."""
