from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class KeyValueStorage(Protocol):
    """
    Async string key-value medium shared by history, credentials and preferences.

    Implementations raise StorageQuotaExceeded when a write does not fit and
    StorageError for any other backend fault.
    """

    async def get(self, key: str) -> Optional[str]:
        ...

    async def set(self, key: str, value: str) -> None:
        ...

    async def remove(self, key: str) -> None:
        ...

    async def close(self) -> None:
        ...


def encoded_size(value: str) -> int:
    return len(value.encode("utf-8"))
