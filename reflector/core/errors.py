"""
Domain exceptions raised by the scoring core.

Insufficient data and unknown identifiers are not errors: they produce
degraded outputs. Only violations of the documented input contract raise.
"""


class InvalidResponseError(ValueError):
    """A response value outside the 1-7 scale reached the scorer."""

    def __init__(self, item_id: str, value: object):
        self.item_id = item_id
        self.value = value
        super().__init__(
            f"Response value for item '{item_id}' must be a number between 1 and 7, "
            f"got {value!r}"
        )


class ResponseOwnershipError(ValueError):
    """A response belonging to another user was added to a user's response set."""

    pass
