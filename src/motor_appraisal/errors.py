from __future__ import annotations


class InvalidInput(ValueError):
    """Raised by strict normalization; ``field`` names the rejected input field."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message
