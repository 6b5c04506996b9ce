"""Named font definitions referenced by ``text_style_name``."""

from __future__ import annotations

from dataclasses import dataclass

from ..exceptions import StyleError

FONT_WEIGHT_NORMAL = "400"
FONT_WEIGHT_BOLD = "700"
FONT_STYLE_NORMAL = "normal"
FONT_STYLE_ITALIC = "italic"
DEFAULT_FONT_SIZE = 12


@dataclass(frozen=True, slots=True)
class TextStyle:
    """A named combination of font family, size, weight and style."""

    name: str
    font_size: str
    font_family_name: str
    font_weight: str
    font_style: str

    def __post_init__(self) -> None:
        for attr in ("name", "font_size", "font_family_name", "font_weight", "font_style"):
            value = getattr(self, attr)
            if value is None or not str(value).strip():
                raise StyleError("TextStyle field must not be empty", f"{attr} of '{self.name}'")

    @property
    def is_bold(self) -> bool:
        return self.font_weight.strip().lower() in ("bold", FONT_WEIGHT_BOLD, "800", "900")

    @property
    def is_italic(self) -> bool:
        return self.font_style.strip().lower() in ("italic", "oblique")

    @property
    def size_points(self) -> float:
        text = self.font_size.strip().lower()
        if text.endswith("pt"):
            text = text[:-2]
        try:
            return float(text)
        except ValueError:
            return float(DEFAULT_FONT_SIZE)

    @staticmethod
    def _size(size: float) -> str:
        if size < 1:
            size = DEFAULT_FONT_SIZE
        return f"{size:g}pt"

    @classmethod
    def normal(cls, name: str, family: str, size: float) -> "TextStyle":
        return cls(name, cls._size(size), family, FONT_WEIGHT_NORMAL, FONT_STYLE_NORMAL)

    @classmethod
    def bold(cls, name: str, family: str, size: float) -> "TextStyle":
        return cls(name, cls._size(size), family, FONT_WEIGHT_BOLD, FONT_STYLE_NORMAL)

    @classmethod
    def italic(cls, name: str, family: str, size: float) -> "TextStyle":
        return cls(name, cls._size(size), family, FONT_WEIGHT_NORMAL, FONT_STYLE_ITALIC)

    @classmethod
    def bold_italic(cls, name: str, family: str, size: float) -> "TextStyle":
        return cls(name, cls._size(size), family, FONT_WEIGHT_BOLD, FONT_STYLE_ITALIC)
