"""Abstract transport interface: the port for the remote document service.

The mapper never talks to the network itself. Every remote call goes
through an implementation of this interface, passed in by the caller.
"""

from abc import ABC, abstractmethod
from typing import Any

from docmapper.application.schemas import TransportResponse


class Transport(ABC):
    """Port: the four blocking calls the mapper needs from the document service."""

    @abstractmethod
    def create(self, type_name: str, payload: dict[str, Any]) -> TransportResponse:
        """Create one document in the ``type_name`` collection.

        Returns:
            A response with ``created_documents`` on success, or
            ``failed_documents`` carrying validation errors.
        """
        ...

    @abstractmethod
    def read(
        self,
        type_name: str,
        filter: dict[str, Any] | None = None,
        query: dict[str, Any] | None = None,
    ) -> TransportResponse:
        """Read the documents matching ``filter``.

        ``query`` holds options such as ``limit``, ``sort`` or ``gzip``.
        """
        ...

    @abstractmethod
    def update(
        self, type_name: str, filter: dict[str, Any], payload: dict[str, Any]
    ) -> TransportResponse:
        """Set the fields in ``payload`` on every document matching ``filter``."""
        ...

    @abstractmethod
    def delete(self, type_name: str, filter: dict[str, Any]) -> TransportResponse:
        """Delete the documents matching ``filter``; ``deleted`` reports the outcome."""
        ...
