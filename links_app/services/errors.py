"""Domain errors returned inside ``Left`` values by the link service."""


class LinkError(Exception):
    """Base class for expected link failures."""

    message = "Link error"

    def __init__(self, message: str = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class InvalidLinkError(LinkError):
    message = "Invalid link"


class InvalidIdError(LinkError):
    message = "Invalid link id"


class LinkNotFoundError(LinkError):
    message = "Link not found"
