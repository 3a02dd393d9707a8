from .document import Document, SearchMatch
from .row import Row
from .syntax import Highlight, SyntaxProfile, select_syntax

__all__ = ["Document", "Highlight", "Row", "SearchMatch", "SyntaxProfile", "select_syntax"]
