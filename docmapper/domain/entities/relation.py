"""Relation declarations between record types."""

from dataclasses import dataclass
from enum import Enum


class Cardinality(str, Enum):
    """How many child records a relation field holds."""

    ONE = "one"
    MANY = "many"


@dataclass(frozen=True)
class Relation:
    """A declared association from one record type to another.

    ``target`` is the registered type name of the child type. When left
    empty it is filled in with the relation's field name when the owning
    record class is defined. ``inverse`` names the field on the child type
    that points back at the owner; a relation with an inverse is
    bidirectional.
    """

    cardinality: Cardinality
    target: str | None = None
    inverse: str | None = None

    @classmethod
    def one(cls, target: str | None = None, inverse: str | None = None) -> "Relation":
        return cls(Cardinality.ONE, target, inverse)

    @classmethod
    def many(cls, target: str | None = None, inverse: str | None = None) -> "Relation":
        return cls(Cardinality.MANY, target, inverse)

    @property
    def is_many(self) -> bool:
        return self.cardinality is Cardinality.MANY

    @property
    def is_bidirectional(self) -> bool:
        return self.inverse is not None
