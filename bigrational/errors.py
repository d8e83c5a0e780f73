"""Exceptions raised by :mod:`bigrational`."""


class FormatError(ValueError):
    """Raised when a string is not a valid decimal literal."""

    def __init__(self, text: str) -> None:
        super().__init__(f"{text!r} is not a valid decimal literal")
        self.text = text


__all__ = ["FormatError"]
