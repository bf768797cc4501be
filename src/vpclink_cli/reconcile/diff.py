"""Minimal patch computation between two VPC link specs.

Scalar fields that differ become one ``replace`` each. The target set is
diffed element-wise: one ``remove`` per ARN that disappeared and one ``add``
per ARN that appeared, addressed by escaped JSON-pointer segments.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from vpclink_cli.models.vpc_link import PatchOp, PatchOperation, ResourceSpec

TARGETS_PREFIX = "/targetArns"
SCALAR_PATHS = (
    ("name", "/name"),
    ("description", "/description"),
)


def escape_json_pointer(segment: str) -> str:
    """Escape one JSON-pointer segment (RFC 6901). ``~`` must go first."""
    return segment.replace("~", "~0").replace("/", "~1")


@dataclass(frozen=True)
class SetDiff:
    """Elements to add and remove to turn one set into another."""

    additions: frozenset[str]
    removals: frozenset[str]

    def __bool__(self) -> bool:
        return bool(self.additions or self.removals)


def diff_set(previous: Iterable[str], desired: Iterable[str]) -> SetDiff:
    old = frozenset(previous)
    new = frozenset(desired)
    return SetDiff(additions=new - old, removals=old - new)


def compute_patches(previous: ResourceSpec, desired: ResourceSpec) -> list[PatchOperation]:
    """Return the patch list transforming *previous* into *desired*.

    An unset description and an empty one compare equal; clearing a
    description is a ``replace`` with ``""``, never a ``remove``.
    """
    operations: list[PatchOperation] = []

    for field, path in SCALAR_PATHS:
        old = getattr(previous, field) or ""
        new = getattr(desired, field) or ""
        if old != new:
            operations.append(PatchOperation(op=PatchOp.REPLACE, path=path, value=new))

    targets = diff_set(previous.targets, desired.targets)
    for arn in sorted(targets.removals):
        operations.append(PatchOperation(
            op=PatchOp.REMOVE,
            path=f"{TARGETS_PREFIX}/{escape_json_pointer(arn)}",
        ))
    for arn in sorted(targets.additions):
        operations.append(PatchOperation(
            op=PatchOp.ADD,
            path=f"{TARGETS_PREFIX}/{escape_json_pointer(arn)}",
            value=arn,
        ))

    return operations
