"""Pydantic models for the pod template carried by a TApp.

Only the fields the hash views touch are declared. Everything else in the
manifest is kept as an extra field so it still takes part in hashing.
"""

from typing import Any, Optional

from kubernetes.client import ApiClient
from pydantic import BaseModel, Field


class Container(BaseModel):
    """A container or init container entry."""

    name: str
    image: Optional[str] = None
    imagePullPolicy: Optional[str] = Field(default=None, alias="image_pull_policy")

    class Config:
        populate_by_name = True
        extra = "allow"


class ObjectMeta(BaseModel):
    """Template metadata. ``labels`` doubles as the hash store."""

    name: Optional[str] = None
    labels: Optional[dict[str, str]] = None
    annotations: Optional[dict[str, str]] = None

    class Config:
        populate_by_name = True
        extra = "allow"


class PodSpec(BaseModel):
    """Pod spec with ordered container lists."""

    containers: list[Container] = Field(default_factory=list)
    initContainers: Optional[list[Container]] = Field(default=None, alias="init_containers")
    restartPolicy: Optional[str] = Field(default=None, alias="restart_policy")
    dnsPolicy: Optional[str] = Field(default=None, alias="dns_policy")

    class Config:
        populate_by_name = True
        extra = "allow"


class PodTemplateSpec(BaseModel):
    """Pod template: metadata plus pod spec."""

    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: PodSpec = Field(default_factory=PodSpec)

    class Config:
        populate_by_name = True
        extra = "allow"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PodTemplateSpec":
        """Create template from a manifest dictionary (camelCase or snake_case)."""
        return cls.model_validate(data)

    @classmethod
    def from_k8s(cls, template: Any) -> "PodTemplateSpec":
        """Create template from a kubernetes client ``V1PodTemplateSpec``."""
        return cls.from_dict(ApiClient().sanitize_for_serialization(template))

    def to_dict(self) -> dict[str, Any]:
        """Convert to a manifest dictionary using Kubernetes field names."""
        return self.model_dump(mode="json", exclude_none=True)
