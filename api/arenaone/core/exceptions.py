"""Exceptions raised by the availability engine and repositories.

Input problems are exceptions. Booking conflicts are not: they come back as
verdict values with a reason code (see services.coach_availability).
"""


class InvalidInput(ValueError):
    """Raised when caller-supplied input cannot be interpreted."""

    kind = "InvalidInput"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidFormat(InvalidInput):
    kind = "InvalidFormat"


class InvalidDateValues(InvalidInput):
    kind = "InvalidDateValues"


class InvalidTimezone(InvalidInput):
    kind = "InvalidTimezone"


class InvalidTimeFormat(InvalidInput):
    kind = "InvalidTimeFormat"


class InvalidWindow(InvalidInput):
    kind = "InvalidWindow"


class NotFound(LookupError):
    """Raised by a repository when a club, court or coach does not exist."""

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")
