"""Constants for the TApp hash operator."""

# CRD identifiers
API_GROUP = "apps.tkestack.io"
API_VERSION = "v1"
PLURAL = "tapps"
KIND = "TApp"

# Hash label keys.
# TEMPLATE_HASH_KEY tracks any change to the pod template; when it differs the
# pod is either recreated or updated in place, depending on UNIQ_HASH_KEY.
TEMPLATE_HASH_KEY = "template-hash"
# UNIQ_HASH_KEY ignores container images, so it stays put on image-only edits
# and the pod can be updated in place.
UNIQ_HASH_KEY = "uniq-hash"
# SPEC_HASH_KEY covers the pod spec including images, but not metadata.
SPEC_HASH_KEY = "spec-hash"

HASH_LABEL_KEYS = (TEMPLATE_HASH_KEY, UNIQ_HASH_KEY, SPEC_HASH_KEY)

# kopf state storage
STORAGE_PREFIX = "tapp-hash.tkestack.io"

# Retry delay for transient handler failures (seconds)
RETRY_DELAY = 30
