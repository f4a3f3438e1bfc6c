"""Domain-specific exceptions, independent of any transport."""

from collections.abc import Iterable


class UnknownRelationError(Exception):
    """Raised when attaching a child record whose type has no declared relation on the parent."""

    def __init__(self, owner_type: str, child_type: str):
        self.owner_type = owner_type
        self.child_type = child_type
        super().__init__(
            f"Trying to add a related '{child_type}' to '{owner_type}', "
            f"which declares no relation to that type"
        )


class RelationSaveFailedError(Exception):
    """Raised when a cascaded save of a related record fails.

    Aborts the save of the owning record. ``failed_fields`` holds the field
    names that failed validation on the child record(s).
    """

    def __init__(self, owner_type: str, relation: str, failed_fields: Iterable[str]):
        self.owner_type = owner_type
        self.relation = relation
        self.failed_fields = list(failed_fields)
        super().__init__(
            f"Could not save relation '{relation}' of '{owner_type}' due to "
            f"validation errors ({', '.join(self.failed_fields)})"
        )


class RemoteError(Exception):
    """Raised when the document service reports a generic failure on read."""

    def __init__(self, type_name: str, message: str | None = None):
        self.type_name = type_name
        self.message = message or "Generic error"
        super().__init__(f"Database error on '{type_name}': {self.message}")


class UnknownRecordTypeError(Exception):
    """Raised when a record type name is not present in the type registry."""

    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(f"Record type '{type_name}' is not registered")


class DuplicateRecordTypeError(Exception):
    """Raised when registering a second record class under an existing type name."""

    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(f"Record type '{type_name}' is already registered")


class SchemaDefinitionError(Exception):
    """Raised when a record type definition in a schema document is malformed."""

    def __init__(self, type_name: str, reason: str):
        self.type_name = type_name
        self.reason = reason
        super().__init__(f"Invalid definition of record type '{type_name}': {reason}")
