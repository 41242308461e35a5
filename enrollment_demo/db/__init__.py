from .connection import create_client, open_session
from .session import CatalogSession

__all__ = ["CatalogSession", "create_client", "open_session"]
