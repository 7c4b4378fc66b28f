"""
Core interfaces and abstract base classes for the Roster service.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Iterable, List, Optional, TypeVar

from .enums import Collection


T = TypeVar('T')


class Repository(ABC, Generic[T]):
    """Abstract base class for repositories."""
    
    @abstractmethod
    def save(self, entity: T) -> T:
        """Save a new entity."""
        pass
    
    @abstractmethod
    def find_by_id(self, entity_id: str) -> Optional[T]:
        """Find entity by ID."""
        pass
    
    @abstractmethod
    def find_all(self, filters: Optional[Dict[str, Any]] = None) -> List[T]:
        """Find all entities matching filters."""
        pass

    @abstractmethod
    def find_by_ids(self, entity_ids: Iterable[str]) -> Dict[str, T]:
        """Find every entity whose ID is in ``entity_ids``, keyed by ID."""
        pass


class NameResolver(ABC):
    """Resolves a weak reference to the display name of its target."""

    @abstractmethod
    def name_of(self, collection: Collection, ref_id: Optional[str]) -> Optional[str]:
        """Return the referenced record's name, or None if it does not resolve."""
        pass


class MappingNameResolver(NameResolver):
    """Name resolver over prefetched ``{collection: {id: name}}`` maps."""

    def __init__(self, names: Optional[Dict[Collection, Dict[str, str]]] = None):
        self._names = names or {}

    def name_of(self, collection: Collection, ref_id: Optional[str]) -> Optional[str]:
        if ref_id is None:
            return None
        return self._names.get(collection, {}).get(ref_id)
