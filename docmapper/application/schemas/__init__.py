from .transport import FailedDocument, TransportResponse

__all__ = [
    "FailedDocument",
    "TransportResponse",
]
