"""Pydantic model of the document service's response envelope."""

from typing import Any

from pydantic import BaseModel, Field


class FailedDocument(BaseModel):
    """A document the service refused to create, with per-field errors."""

    validation_errors: dict[str, Any] = Field(default_factory=dict, alias="validationErrors")

    model_config = {"populate_by_name": True, "extra": "allow"}


class TransportResponse(BaseModel):
    """Structured response returned by every ``Transport`` call.

    Only the keys relevant to the verb are populated: ``documents`` on read,
    ``created_documents``/``failed_documents`` on create, ``deleted`` on
    delete. ``message`` carries the reason of a generic failure.
    """

    success: bool = False
    documents: list[dict[str, Any]] = Field(default_factory=list)
    created_documents: list[dict[str, Any]] = Field(default_factory=list, alias="createdDocuments")
    failed_documents: list[FailedDocument] = Field(default_factory=list, alias="failedDocuments")
    deleted: bool = False
    message: str | None = None

    model_config = {"populate_by_name": True, "extra": "allow"}

    @classmethod
    def failure(cls, message: str) -> "TransportResponse":
        return cls(success=False, message=message)

    @property
    def created_id(self) -> Any:
        """Identifier of the first created document, if any."""
        if not self.created_documents:
            return None
        return self.created_documents[0].get("id")

    def validation_errors(self) -> dict[str, Any]:
        """Validation errors of the first failed document, if any."""
        if self.failed_documents:
            return self.failed_documents[0].validation_errors
        return {}
