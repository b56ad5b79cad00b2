"""
Base class for object storage systems driven by the benchmark.
"""

import logging

logger = logging.getLogger(__name__)


class ObjectStorageSystem:
    """Minimal read/write capability the benchmark needs from a backend.

    Subclasses acquire their transport in ``__aenter__`` and release it in
    ``__aexit__``. A single instance is shared by every worker coroutine, so
    ``read``/``write`` must tolerate concurrent calls.
    """

    service_type = "base"

    def __init__(self, prefix: str = ""):
        self.prefix = prefix or ""

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        return None

    def object_path(self, key: str) -> str:
        """Full object name for a key, with the configured prefix applied."""
        if not self.prefix:
            return key
        return f"{self.prefix.rstrip('/')}/{key}"

    async def read(self, key: str) -> int:
        """Fetch an object fully and return the number of bytes received."""
        raise NotImplementedError

    async def write(self, key: str, payload: bytes) -> int:
        """Store an object fully and return the number of bytes accepted."""
        raise NotImplementedError

    async def delete(self, key: str) -> None:
        """Remove an object. Deleting a missing object is not an error."""
        raise NotImplementedError

    async def verify_connection(self) -> bool:
        """Check that the backend is reachable."""
        return True

    def __repr__(self) -> str:
        return f"{type(self).__name__}(prefix='{self.prefix}')"
