"""Style resolution engine."""

from .style_resolver import ResolvedStyles, StyleResolver, StyleResolverService, resolve_styles

__all__ = ["ResolvedStyles", "StyleResolver", "StyleResolverService", "resolve_styles"]
