"""Domain errors."""


class ArchiveError(Exception):
    """Base error for the archive."""


class ValidationError(ArchiveError, ValueError):
    """Input was rejected before any state mutation."""


class AttachmentRejected(ValidationError):
    """Attachment failed the size or type gate."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"'{name}': {reason}")
        self.name = name
        self.reason = reason
