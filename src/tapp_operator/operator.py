"""TApp hash operator - kopf handlers for the TApp CRD.

Keeps the template/uniq/spec hash labels on a TApp's pod templates current.
Deciding between in-place update and recreate is left to the TApp controller
that reads these labels.
"""

import logging
from collections.abc import Mapping
from typing import Any

import kopf
from pydantic import ValidationError

from .constants import (
    API_GROUP,
    API_VERSION,
    PLURAL,
    RETRY_DELAY,
    SPEC_HASH_KEY,
    STORAGE_PREFIX,
    TEMPLATE_HASH_KEY,
    UNIQ_HASH_KEY,
)
from .models.template import PodTemplateSpec
from .utils.hashing import TemplateHasher, default_hasher
from .utils.validation import validate_template

logger = logging.getLogger(__name__)


@kopf.on.startup()
def configure(settings: kopf.OperatorSettings, **_: Any) -> None:
    """Configure operator settings on startup."""
    settings.posting.level = logging.INFO
    settings.watching.connect_timeout = 60
    settings.watching.server_timeout = 300
    settings.persistence.progress_storage = kopf.AnnotationsProgressStorage(
        prefix=STORAGE_PREFIX
    )
    settings.persistence.diffbase_storage = kopf.AnnotationsDiffBaseStorage(
        prefix=STORAGE_PREFIX
    )
    logger.info("TApp hash operator started")


@kopf.on.create(API_GROUP, API_VERSION, PLURAL)
async def create_tapp(
    body: dict[str, Any],
    spec: dict[str, Any],
    name: str,
    namespace: str,
    logger: logging.Logger,
    patch: kopf.Patch,
    **_: Any,
) -> dict[str, Any]:
    """Stamp hash labels on the templates of a newly created TApp."""
    logger.info(f"Stamping hashes on new TApp: {namespace}/{name}")
    return _reconcile(body, spec, name, namespace, logger, patch)


@kopf.on.update(API_GROUP, API_VERSION, PLURAL)
async def update_tapp(
    body: dict[str, Any],
    spec: dict[str, Any],
    name: str,
    namespace: str,
    logger: logging.Logger,
    patch: kopf.Patch,
    **_: Any,
) -> dict[str, Any]:
    """Refresh hash labels after a TApp changed.

    Our own label patch triggers this handler again; the second pass finds
    nothing stale and patches nothing.
    """
    logger.info(f"Checking hashes on updated TApp: {namespace}/{name}")
    return _reconcile(body, spec, name, namespace, logger, patch)


def stamp_hashes(
    template: PodTemplateSpec, hasher: TemplateHasher = default_hasher
) -> dict[str, str]:
    """Set all three hash labels on ``template``.

    Returns the labels that were written (empty if all were current).
    The template hash covers the spec-hash label, so it is set last.
    """
    changed: dict[str, str] = {}
    if hasher.set_spec_hash(template):
        changed[SPEC_HASH_KEY] = hasher.get_spec_hash(template.metadata.labels)
    if hasher.set_uniq_hash(template):
        changed[UNIQ_HASH_KEY] = hasher.get_uniq_hash(template.metadata.labels)
    if hasher.set_template_hash(template):
        changed[TEMPLATE_HASH_KEY] = hasher.get_template_hash(template.metadata.labels)
    return changed


def _reconcile(
    body: dict[str, Any],
    spec: dict[str, Any],
    name: str,
    namespace: str,
    logger: logging.Logger,
    patch: kopf.Patch,
) -> dict[str, Any]:
    """Stamp hashes on spec.template and every spec.templatePool entry."""
    try:
        template_data = spec.get("template")
        if template_data is None:
            logger.error("spec.template is missing")
            raise kopf.PermanentError("spec.template is required")

        pool_data = spec.get("templatePool") or {}
        if not isinstance(pool_data, Mapping):
            logger.error("spec.templatePool is not a mapping")
            raise kopf.PermanentError("spec.templatePool must be a mapping")

        # Parse everything before touching the patch, so a bad pool entry
        # leaves the resource unchanged.
        template = _parse_template(template_data, "spec.template", logger)
        pool = {
            pool_name: _parse_template(data, f"spec.templatePool.{pool_name}", logger)
            for pool_name, data in pool_data.items()
        }

        changed = stamp_hashes(template)
        if changed:
            patch.spec["template"] = {"metadata": {"labels": changed}}
            logger.info(f"Updated template hashes of {namespace}/{name}: {changed}")
        else:
            logger.debug(f"Template hashes of {namespace}/{name} are current")

        pool_patch = {}
        for pool_name, pool_template in pool.items():
            pool_changed = stamp_hashes(pool_template)
            if pool_changed:
                pool_patch[pool_name] = {"metadata": {"labels": pool_changed}}
                logger.info(
                    f"Updated spec.templatePool.{pool_name} hashes of "
                    f"{namespace}/{name}: {pool_changed}"
                )
        if pool_patch:
            patch.spec["templatePool"] = pool_patch

        labels = template.metadata.labels
        return {
            "templateHash": default_hasher.get_template_hash(labels),
            "uniqHash": default_hasher.get_uniq_hash(labels),
            "specHash": default_hasher.get_spec_hash(labels),
            "observedGeneration": body["metadata"].get("generation", 1),
        }

    except kopf.PermanentError:
        raise
    except Exception as e:
        logger.error(f"Failed to stamp hashes on TApp {namespace}/{name}: {e}")
        raise kopf.TemporaryError(str(e), delay=RETRY_DELAY)


def _parse_template(data: Any, path: str, logger: logging.Logger) -> PodTemplateSpec:
    """Parse and validate a pod template, failing permanently if it is bad."""
    try:
        template = PodTemplateSpec.from_dict(data)
    except ValidationError as e:
        logger.error(f"Invalid {path}: {e}")
        raise kopf.PermanentError(f"Invalid {path}: {e}")

    validation_errors = validate_template(template, path)
    if validation_errors:
        error_msg = "; ".join(validation_errors)
        logger.error(f"Validation failed: {error_msg}")
        raise kopf.PermanentError(f"Validation failed: {error_msg}")

    return template
