"""Utility functions for the TApp hash operator."""

from .hashing import TemplateHasher, default_hasher, deep_hash_object
from .validation import validate_template

__all__ = [
    "TemplateHasher",
    "default_hasher",
    "deep_hash_object",
    "validate_template",
]
