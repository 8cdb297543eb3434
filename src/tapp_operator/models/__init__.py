"""Models for the TApp pod template."""

from .template import Container, ObjectMeta, PodSpec, PodTemplateSpec

__all__ = ["Container", "ObjectMeta", "PodSpec", "PodTemplateSpec"]
