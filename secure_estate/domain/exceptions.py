"""Root of the secure_estate exception tree.

The well-being and authorization errors in ``domain/errors`` derive
from SecureEstateError.
"""


class SecureEstateError(Exception):
    def __init__(self, message: str = "") -> None:
        super().__init__(message)
