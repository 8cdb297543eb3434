"""Hashing utilities for pod template change detection.

Three fingerprints of a pod template are kept in its labels:

- ``template-hash``: metadata and spec, so it moves on almost any edit.
- ``uniq-hash``: spec with container images blanked, so it stays put on
  image-only edits (in-place update is possible).
- ``spec-hash``: full spec including images, metadata excluded.

Each value is the decimal form of a 64-bit FNV-1 hash over a canonical JSON
encoding of the view.
"""

import json
import logging
from typing import Any, Optional

from ..constants import HASH_LABEL_KEYS, SPEC_HASH_KEY, TEMPLATE_HASH_KEY, UNIQ_HASH_KEY
from ..models.template import PodSpec, PodTemplateSpec

logger = logging.getLogger(__name__)

FNV64_OFFSET_BASIS = 0xCBF29CE484222325
FNV64_PRIME = 0x100000001B3
_MASK64 = 0xFFFFFFFFFFFFFFFF


def fnv1_64(data: bytes) -> int:
    """Compute the 64-bit FNV-1 hash of ``data``."""
    h = FNV64_OFFSET_BASIS
    for byte in data:
        h = (h * FNV64_PRIME) & _MASK64
        h ^= byte
    return h


def _prune(obj: Any) -> Any:
    # None-valued entries and absent keys must hash the same
    if hasattr(obj, "model_dump"):
        obj = obj.model_dump(mode="json", exclude_none=True)
    if isinstance(obj, dict):
        return {k: _prune(v) for k, v in obj.items() if v is not None}
    if isinstance(obj, (list, tuple)):
        return [_prune(v) for v in obj]
    return obj


def canonical_json(obj: Any) -> str:
    """Encode ``obj`` as canonical JSON (sorted keys, compact, no nulls).

    Pydantic models, at any depth, are dumped using Kubernetes field names.
    """
    return json.dumps(
        _prune(obj),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )


def deep_hash_object(obj: Any) -> int:
    """Hash a finite, acyclic structure into an unsigned 64-bit integer."""
    return fnv1_64(canonical_json(obj).encode("utf-8", "surrogatepass"))


def generate_template_hash(template: PodTemplateSpec) -> str:
    """Hash metadata (minus template/uniq hash labels) together with the spec."""
    meta = template.metadata.model_copy(deep=True)
    if meta.labels is not None:
        meta.labels.pop(TEMPLATE_HASH_KEY, None)
        meta.labels.pop(UNIQ_HASH_KEY, None)
        if not meta.labels:
            meta.labels = None
    return str(deep_hash_object({"metadata": meta, "spec": template.spec}))


def generate_uniq_hash(template: PodTemplateSpec) -> str:
    """Hash the spec with every container image blanked."""
    spec: PodSpec = template.spec.model_copy(deep=True)
    if spec.initContainers is not None:
        for container in spec.initContainers:
            container.image = ""
    for container in spec.containers:
        container.image = ""
    return str(deep_hash_object(spec))


def generate_spec_hash(template: PodTemplateSpec) -> str:
    """Hash the full spec, images included."""
    return str(deep_hash_object(template.spec))


class TemplateHasher:
    """Sets and reads the hash labels of a pod template.

    Holds no state; one instance can be shared across threads as long as a
    single template is not mutated concurrently.
    """

    def set_template_hash(self, template: PodTemplateSpec) -> bool:
        """Store the template hash in labels.

        Returns True if the label was missing or stale and has been written.
        """
        return self._set(template, TEMPLATE_HASH_KEY, generate_template_hash(template))

    def get_template_hash(self, labels: Optional[dict[str, str]]) -> str:
        return _lookup(labels, TEMPLATE_HASH_KEY)

    def set_uniq_hash(self, template: PodTemplateSpec) -> bool:
        """Store the hash of the spec without container images in labels.

        Returns True if the label was missing or stale and has been written.
        """
        return self._set(template, UNIQ_HASH_KEY, generate_uniq_hash(template))

    def get_uniq_hash(self, labels: Optional[dict[str, str]]) -> str:
        return _lookup(labels, UNIQ_HASH_KEY)

    def set_spec_hash(self, template: PodTemplateSpec) -> bool:
        """Store the hash of the spec with container images in labels.

        Returns True if the label was missing or stale and has been written.
        """
        return self._set(template, SPEC_HASH_KEY, generate_spec_hash(template))

    def get_spec_hash(self, labels: Optional[dict[str, str]]) -> str:
        return _lookup(labels, SPEC_HASH_KEY)

    def hash_labels(self) -> list[str]:
        """Return the label keys this hasher owns."""
        return list(HASH_LABEL_KEYS)

    def _set(self, template: PodTemplateSpec, key: str, expected: str) -> bool:
        current = _lookup(template.metadata.labels, key)
        if current == expected:
            return False
        if template.metadata.labels is None:
            template.metadata.labels = {}
        template.metadata.labels[key] = expected
        logger.debug(f"Set {key}={expected} (was {current!r})")
        return True


def _lookup(labels: Optional[dict[str, str]], key: str) -> str:
    if not labels:
        return ""
    return labels.get(key, "")


default_hasher = TemplateHasher()
