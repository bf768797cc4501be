"""VPC link data models: desired spec, observed state, and patch operations."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

STATUS_PENDING = "PENDING"
STATUS_AVAILABLE = "AVAILABLE"
STATUS_DELETING = "DELETING"
STATUS_FAILED = "FAILED"


class ResourceSpec(BaseModel):
    """Desired state of a VPC link as declared by the caller."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    description: str | None = None
    targets: frozenset[str]

    @field_validator("targets")
    @classmethod
    def validate_targets(cls, v: frozenset[str]) -> frozenset[str]:
        if not v:
            raise ValueError("at least one target ARN is required")
        if any(not arn for arn in v):
            raise ValueError("target ARNs must be non-empty strings")
        return v

    @classmethod
    def from_state(cls, state: RemoteResourceState) -> ResourceSpec:
        """The desired state an observed remote state corresponds to."""
        return cls(name=state.name, description=state.description, targets=state.targets)

    def with_changes(
        self,
        *,
        name: str | None = None,
        description: str | None = None,
        targets: Iterable[str] | None = None,
        add_targets: Iterable[str] = (),
        remove_targets: Iterable[str] = (),
    ) -> ResourceSpec:
        """Return a copy with overrides applied.

        ``description=""`` clears the description; ``None`` keeps it.
        ``targets`` replaces the whole set before additions and removals apply.
        """
        new_targets = set(self.targets if targets is None else targets)
        new_targets |= set(add_targets)
        new_targets -= set(remove_targets)
        return ResourceSpec(
            name=self.name if name is None else name,
            description=self.description if description is None else description,
            targets=frozenset(new_targets),
        )


class RemoteResourceState(BaseModel):
    """VPC link as reported by the control plane."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    status: str
    name: str = ""
    description: str | None = None
    targets: frozenset[str] = Field(default_factory=frozenset, alias="targetArns")
    status_message: str | None = Field(default=None, alias="statusMessage")

    def summary(self) -> dict[str, Any]:
        """Flat view for table output."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description or "",
            "status": self.status,
            "status_message": self.status_message or "",
            "targets": ", ".join(sorted(self.targets)),
        }


class PatchOp(str, enum.Enum):
    ADD = "add"
    REMOVE = "remove"
    REPLACE = "replace"


class PatchOperation(BaseModel):
    """A single JSON-pointer style patch against a VPC link."""

    model_config = ConfigDict(frozen=True)

    op: PatchOp
    path: str
    value: str | None = None

    @model_validator(mode="after")
    def check_value(self) -> PatchOperation:
        if self.op is PatchOp.REMOVE and self.value is not None:
            raise ValueError("remove operations carry no value")
        if self.op is not PatchOp.REMOVE and self.value is None:
            raise ValueError(f"{self.op.value} operations require a value")
        return self

    def to_api(self) -> dict[str, str]:
        data = {"op": self.op.value, "path": self.path}
        if self.value is not None:
            data["value"] = self.value
        return data
