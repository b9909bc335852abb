"""Protocol for durable client-side key-value storage."""

from typing import Optional, Protocol


class KeyValueStore(Protocol):
    """String key-value storage, the way a browser's local storage behaves.

    Implementations may raise ``OSError`` on I/O failure; callers treat
    storage errors as non-fatal.
    """

    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value or ``None`` if missing."""
        ...

    def set_item(self, key: str, value: str) -> None:
        """Store a value."""
        ...

    def remove_item(self, key: str) -> None:
        """Delete a value if present."""
        ...
