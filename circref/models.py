from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, Hashable, List, Optional, Set
from datetime import datetime
from uuid import uuid4

Identifier = Hashable

PATH_SEPARATOR = " → "


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Person(_Frozen):
    id: Identifier = Field(default_factory=uuid4)
    name: str = ""
    email: Optional[str] = None


class Transaction(_Frozen):
    id: Identifier = Field(default_factory=uuid4)
    payer_id: Optional[Identifier] = None
    payee_id: Optional[Identifier] = None
    amount: float = 0.0
    date: datetime = Field(default_factory=datetime.now)


class Group(_Frozen):
    id: Identifier = Field(default_factory=uuid4)
    name: str = ""
    member_ids: Set[Identifier] = Field(default_factory=set)
    # Nested groups; empty in the base data model.
    subgroup_ids: Set[Identifier] = Field(default_factory=set)


class Subscription(_Frozen):
    id: Identifier = Field(default_factory=uuid4)
    name: str = ""
    person_id: Optional[Identifier] = None
    shared_with_ids: List[Identifier] = Field(default_factory=list)


class Snapshot(_Frozen):
    """Point-in-time copy of every collection a detection pass reads."""
    people: List[Person] = Field(default_factory=list)
    transactions: List[Transaction] = Field(default_factory=list)
    groups: List[Group] = Field(default_factory=list)
    subscriptions: List[Subscription] = Field(default_factory=list)

    @property
    def people_by_id(self) -> Dict[Identifier, Person]:
        return {p.id: p for p in self.people}


class ReferenceType(str, Enum):
    SELF_REFERENCE = "Self Reference"
    TRANSACTION_CHAIN = "Transaction Chain"
    GROUP_MEMBERSHIP = "Group Membership"
    SUBSCRIPTION_CHAIN = "Subscription Chain"


class CircularPath(_Frozen):
    type: ReferenceType
    entity_ids: List[Identifier]
    entity_names: List[str]

    @property
    def path_description(self) -> str:
        return PATH_SEPARATOR.join(self.entity_names)

    @property
    def cycle_length(self) -> int:
        return len(self.entity_ids)


class CircularReferenceResult(_Frozen):
    has_circular_references: bool = False
    circular_paths: List[CircularPath] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    @classmethod
    def from_findings(cls, circular_paths: List[CircularPath], warnings: List[str]) -> "CircularReferenceResult":
        return cls(
            has_circular_references=bool(circular_paths),
            circular_paths=list(circular_paths),
            warnings=list(warnings),
        )

    @classmethod
    def merge(cls, *results: "CircularReferenceResult") -> "CircularReferenceResult":
        """Concatenate paths and warnings in argument order."""
        return cls(
            has_circular_references=any(r.has_circular_references for r in results),
            circular_paths=[p for r in results for p in r.circular_paths],
            warnings=[w for r in results for w in r.warnings],
        )

    @property
    def summary(self) -> str:
        if self.circular_paths:
            return f"Found {len(self.circular_paths)} circular reference(s)"
        return "No circular references detected"

    @property
    def detailed_report(self) -> str:
        lines = [
            "=== Circular Reference Detection Report ===",
            "",
            f"Status: {'Issues Found' if self.has_circular_references else 'Clean'}",
            f"Circular Paths: {len(self.circular_paths)}",
            f"Warnings: {len(self.warnings)}",
            "",
        ]

        if self.circular_paths:
            lines.append("=== Circular Paths ===")
            for i, path in enumerate(self.circular_paths, start=1):
                lines.append(f"{i}. {path.type.value} (length: {path.cycle_length})")
                lines.append(f"   Path: {path.path_description}")
                lines.append("")

        if self.warnings:
            lines.append("=== Warnings ===")
            lines.extend(f"- {warning}" for warning in self.warnings)
            lines.append("")

        return "\n".join(lines)
