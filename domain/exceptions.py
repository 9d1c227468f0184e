"""Domain Exceptions"""


class InvalidBookingError(ValueError):
    """A booking request breaks a business rule (dates, notice window, availability)"""


class ReferenceNotFoundError(LookupError):
    """A customer or vehicle key does not exist in the catalog"""

    def __init__(self, kind: str, key: str):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} not found: {key}")


class MalformedRecordError(ValueError):
    """A persisted record line could not be parsed"""
