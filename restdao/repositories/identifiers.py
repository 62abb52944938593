"""
Identifier generation for entities that were never persisted.
"""

import uuid
from abc import ABC, abstractmethod
from typing import Any

from restdao.models.base import Identifier


class IdentifierGenerator(ABC):
    """Produces a fresh identifier for an entity that has none."""

    @abstractmethod
    def generate(self, entity: Any) -> Identifier:
        """
        Generate an identifier for the given entity.

        Args:
            entity (Any): Entity about to be inserted

        Returns:
            Identifier: New identifier
        """


class UUIDIdentifierGenerator(IdentifierGenerator):
    """Generates random 128-bit (version 4) UUIDs."""

    def generate(self, entity: Any) -> uuid.UUID:
        return uuid.uuid4()
