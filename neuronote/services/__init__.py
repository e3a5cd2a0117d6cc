from .suggestions import SuggestionService
from .workspace import Workspace

__all__ = ["SuggestionService", "Workspace"]
