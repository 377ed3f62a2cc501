from .errors import ConfigError, KnowledgeError, PortalError, UpstreamError, ValidationError
from .pipeline import QueryPipeline
from .store import PortalStore

__all__ = [
    "ConfigError",
    "KnowledgeError",
    "PortalError",
    "PortalStore",
    "QueryPipeline",
    "UpstreamError",
    "ValidationError",
]
