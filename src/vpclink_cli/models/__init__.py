"""Pydantic data models for the control-plane API."""

from vpclink_cli.models.common import ErrorResponse
from vpclink_cli.models.vpc_link import (
    STATUS_AVAILABLE,
    STATUS_DELETING,
    STATUS_FAILED,
    STATUS_PENDING,
    PatchOp,
    PatchOperation,
    RemoteResourceState,
    ResourceSpec,
)

__all__ = [
    "ErrorResponse",
    "PatchOp",
    "PatchOperation",
    "RemoteResourceState",
    "ResourceSpec",
    "STATUS_AVAILABLE",
    "STATUS_DELETING",
    "STATUS_FAILED",
    "STATUS_PENDING",
]
