"""Wikipedia geosearch, page details and place search."""

from .service import WikipediaService

__all__ = ["WikipediaService"]
