from .config import Settings
from .handler import ShortenerHandler, lambda_handler
from .store import Mapping, MappingStore

__all__ = ["Mapping", "MappingStore", "Settings", "ShortenerHandler", "lambda_handler"]
