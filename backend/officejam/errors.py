"""Error taxonomy shared by the queue engine, gateway and HTTP layer"""


class QueueError(Exception):
    """Base class for all OfficeJam errors"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(QueueError):
    """Malformed reference, unparseable id, duplicate id or unknown command"""


class NotFoundError(QueueError):
    """The referenced queue entry (or history record / remote item) does not exist"""


class StoreError(QueueError):
    """Persistence failure; logged, never reported to clients"""


class MetadataError(QueueError):
    """The external metadata catalog could not be reached or answered badly"""
