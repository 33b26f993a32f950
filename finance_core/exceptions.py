"""Domain-specific exceptions for the finance tracker core."""

class ValidationError(ValueError):
    """Raised when provided data does not meet validation requirements."""


class RecordNotFoundError(LookupError):
    """Raised when a transaction or category cannot be located."""


class CategoryInUseError(ValidationError):
    """Raised when a category is still referenced by one or more transactions."""

    def __init__(self, category_id: str, usage: int) -> None:
        super().__init__(
            f"Category {category_id} is used by {usage} transaction(s); "
            "delete or reassign them first"
        )
        self.category_id = category_id
        self.usage = usage


class PersistenceError(IOError):
    """Raised when the persistence layer encounters unrecoverable issues."""
