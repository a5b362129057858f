"""Router namespace exports for FastAPI include hooks."""

from . import health, listing, local, nsp

__all__ = ["health", "listing", "local", "nsp"]
