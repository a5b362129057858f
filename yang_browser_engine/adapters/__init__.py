"""Infrastructure adapter exports."""

from .transport import HttpxTransport
from .yang_repository import YangRepositoryAdapter

__all__ = ["HttpxTransport", "YangRepositoryAdapter"]
