"""
Entity and identifier types.

Import from here rather than from the submodule:

    from restdao.models import Resource, StringIdentifier
"""

from restdao.models.base import (
    IdentifiableEntity,
    Identifier,
    Resource,
    StringIdentifier,
    identifiers_equal,
)

__all__ = [
    "IdentifiableEntity",
    "Identifier",
    "Resource",
    "StringIdentifier",
    "identifiers_equal",
]
