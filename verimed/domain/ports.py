# verimed/domain/ports.py
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from .models import RegistryProduct


class CachePort(ABC):
    @abstractmethod
    async def get(self, key: str): ...
    @abstractmethod
    async def set(self, key: str, value: Any, ttl: float = 43200): ...
    @abstractmethod
    async def delete(self, key: str) -> bool: ...

    async def cleanup(self) -> int:
        return 0

    async def get_stats(self) -> Dict[str, Any]:
        return {"size": 0, "keys": []}


class RegistryLookupPort(ABC):
    """
    Kontrak registry eksternal. Boleh raise apa saja (network/timeout);
    RegistryService yang membungkusnya jadi RegistryLookupError.
    """
    @abstractmethod
    async def search_by_text(self, query: str) -> List[RegistryProduct]: ...

    @abstractmethod
    async def lookup_by_registration_number(self, code: str) -> Optional[RegistryProduct]: ...

    @abstractmethod
    async def lookup_by_name(self, name: str) -> Optional[RegistryProduct]: ...

    async def health_check(self) -> bool:
        return True
