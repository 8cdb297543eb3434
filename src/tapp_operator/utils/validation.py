"""Validation utilities for TApp pod templates."""

from ..models.template import PodTemplateSpec


def validate_template(template: PodTemplateSpec, path: str = "spec.template") -> list[str]:
    """Validate a pod template before its hashes are stamped.

    Args:
        template: Parsed pod template
        path: Field path used as prefix in messages

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    if not template.spec.containers:
        errors.append(f"{path}.spec.containers must contain at least one container")

    seen: set[str] = set()
    groups = [
        ("initContainers", template.spec.initContainers or []),
        ("containers", template.spec.containers),
    ]
    for field, containers in groups:
        for i, container in enumerate(containers):
            if not container.name:
                errors.append(f"{path}.spec.{field}[{i}].name is required")
                continue
            if container.name in seen:
                errors.append(f"{path}.spec.{field}[{i}].name '{container.name}' is duplicated")
            seen.add(container.name)

            if not container.image:
                errors.append(f"{path}.spec.{field}[{i}].image is required")

    return errors
