"""Domain errors."""


class InvalidArgument(ValueError):
    """Input outside the domain of a progress computation."""
