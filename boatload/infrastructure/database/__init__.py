from .models import Key, Record, StoredEntity
from .repositories import EntityRepository

__all__ = ["EntityRepository", "Key", "Record", "StoredEntity"]
