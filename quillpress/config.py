"""Configuration objects shared by the resolver, the renderer and the CLI."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class ResolverConfig:
    """Options for a style resolution pass."""

    warn_on_missing_class: bool = True


@dataclass(frozen=True)
class RenderConfig:
    """Options for the PDF renderer.

    ``page_size_fallback`` is used when a page sequence names a page master
    that the style sheet does not define.
    """

    page_size_fallback: str = "A4"
    base_font: str = "Helvetica"
    base_font_size: float = 12.0
    leading_factor: float = 1.2
    image_root: Optional[Path] = None
    font_root: Optional[Path] = None
    title_fallback: str = "PDF Dokument"

    def resolve_image_path(self, path: str) -> Path:
        candidate = Path(path)
        if candidate.is_absolute() or self.image_root is None:
            return candidate
        return Path(self.image_root) / candidate
