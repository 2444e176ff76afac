class InvalidArgument(ValueError):
    """Raised before any fetch when a lookup is called with unusable arguments."""


class ExpressionError(InvalidArgument):
    def __init__(self, message: str, text: str = "", pos: int | None = None):
        self.text = text
        self.pos = pos
        if pos is not None:
            message = f"{message} at position {pos}"
        super().__init__(message)


class UntranslatablePredicate(TypeError):
    """A backend cannot express the predicate in its own query language."""

    def __init__(self, predicate, backend: str = "sql"):
        self.predicate = predicate
        self.backend = backend
        super().__init__(f"Cannot translate {predicate!r} to {backend}")
