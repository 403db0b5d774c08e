"""Exceptions shared by the layout pipeline and the config loader."""


class LayoutConfigError(ValueError):
    """Raised when the line width or page height is not a positive integer."""
