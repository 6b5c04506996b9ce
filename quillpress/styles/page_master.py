"""
Page master styles: page geometry, margins, header/footer extents and columns.

Page sequences reference a page master through their ``style_class``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..exceptions import StyleError
from ..utils.units import to_cm, validate_dimension

logger = logging.getLogger(__name__)


class PageSize(Enum):
    """Predefined page sizes as (width, height)."""

    A3_PORTRAIT = ("29.7cm", "42cm")
    A3_LANDSCAPE = ("42cm", "29.7cm")
    A4_PORTRAIT = ("21cm", "29.7cm")
    A4_LANDSCAPE = ("29.7cm", "21cm")
    A5_PORTRAIT = ("14.8cm", "21cm")
    A5_LANDSCAPE = ("21cm", "14.8cm")
    LETTER_PORTRAIT = ("8.5in", "11in")
    LETTER_LANDSCAPE = ("11in", "8.5in")

    @property
    def width(self) -> str:
        return self.value[0]

    @property
    def height(self) -> str:
        return self.value[1]


_DIMENSIONS = (
    "page_height",
    "page_width",
    "margin",
    "margin_top",
    "margin_bottom",
    "margin_left",
    "margin_right",
    "header_extent",
    "footer_extent",
    "column_gap",
)


@dataclass(slots=True)
class PageMasterStyle:
    """
    Geometry of a page.

    With ``auto_adjust_margins`` on, top and bottom margins are never smaller
    than the header and footer extents, so body content cannot overlap them.
    Use :meth:`force_margin_top` / :meth:`force_margin_bottom` to override.
    """

    name: str
    page_height: str = "29.7cm"
    page_width: str = "21cm"
    margin: Optional[str] = None
    margin_top: Optional[str] = "2cm"
    margin_bottom: Optional[str] = "2cm"
    margin_left: Optional[str] = "2.5cm"
    margin_right: Optional[str] = "2.5cm"
    header_extent: Optional[str] = "0cm"
    footer_extent: Optional[str] = "0cm"
    column_count: Optional[str] = "1"
    column_gap: Optional[str] = "0cm"
    auto_adjust_margins: bool = field(default=True)

    def __post_init__(self) -> None:
        if self.name is None or not str(self.name).strip():
            raise StyleError("PageMasterStyle 'name' is required")
        for attr in _DIMENSIONS:
            setattr(self, attr, validate_dimension(getattr(self, attr), attr))
        if self.margin is not None:
            for side in ("margin_top", "margin_bottom", "margin_left", "margin_right"):
                setattr(self, side, self.margin)
        self._apply_margin_rules()
        self._check_columns()

    @classmethod
    def from_page_size(
        cls,
        name: str,
        page_size: PageSize = PageSize.A4_PORTRAIT,
        header_extent: str = "1.5cm",
        footer_extent: str = "1.5cm",
        **kwargs,
    ) -> "PageMasterStyle":
        return cls(
            name=name,
            page_width=page_size.width,
            page_height=page_size.height,
            header_extent=header_extent,
            footer_extent=footer_extent,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Mutators that keep the margin rules
    # ------------------------------------------------------------------

    def set_page_size(self, page_size: PageSize) -> None:
        self.page_width = page_size.width
        self.page_height = page_size.height

    def set_margin_top(self, value: Optional[str]) -> None:
        self.margin_top = validate_dimension(value, "margin_top")
        self._apply_margin_rules()

    def set_margin_bottom(self, value: Optional[str]) -> None:
        self.margin_bottom = validate_dimension(value, "margin_bottom")
        self._apply_margin_rules()

    def set_header_extent(self, value: Optional[str]) -> None:
        self.header_extent = validate_dimension(value, "header_extent")
        self._apply_margin_rules()

    def set_footer_extent(self, value: Optional[str]) -> None:
        self.footer_extent = validate_dimension(value, "footer_extent")
        self._apply_margin_rules()

    def force_margin_top(self, value: Optional[str]) -> None:
        self.margin_top = validate_dimension(value, "margin_top")
        self.auto_adjust_margins = False

    def force_margin_bottom(self, value: Optional[str]) -> None:
        self.margin_bottom = validate_dimension(value, "margin_bottom")
        self.auto_adjust_margins = False

    def set_columns(self, count: Optional[str], gap: Optional[str] = None) -> None:
        self.column_count = count
        if gap is not None:
            self.column_gap = validate_dimension(gap, "column_gap")
        self._check_columns()

    # ------------------------------------------------------------------

    def validate(self) -> None:
        """Re-check name and every dimension; raises :class:`StyleError`."""
        if self.name is None or not str(self.name).strip():
            raise StyleError("PageMasterStyle 'name' is required")
        for attr in _DIMENSIONS:
            validate_dimension(getattr(self, attr), attr)

    @property
    def columns(self) -> int:
        return int(self.column_count or 1)

    def _apply_margin_rules(self) -> None:
        if not self.auto_adjust_margins:
            return
        if self.margin_top is None:
            self.margin_top = self.header_extent
        elif self.header_extent is not None and to_cm(self.margin_top) < to_cm(self.header_extent):
            logger.warning(
                "margin_top (%s) is smaller than header_extent (%s); adjusting margin_top. "
                "Use force_margin_top to keep the overlap.",
                self.margin_top,
                self.header_extent,
            )
            self.margin_top = self.header_extent

        if self.margin_bottom is None:
            self.margin_bottom = self.footer_extent
        elif self.footer_extent is not None and to_cm(self.margin_bottom) < to_cm(self.footer_extent):
            logger.warning(
                "margin_bottom (%s) is smaller than footer_extent (%s); adjusting margin_bottom. "
                "Use force_margin_bottom to keep the overlap.",
                self.margin_bottom,
                self.footer_extent,
            )
            self.margin_bottom = self.footer_extent

    def _check_columns(self) -> None:
        if self.column_count is None:
            self.column_count, self.column_gap = "1", "0cm"
            return
        try:
            count = int(str(self.column_count))
        except ValueError:
            logger.warning("Invalid column_count '%s'; using a single column", self.column_count)
            self.column_count, self.column_gap = "1", "0cm"
            return
        if count <= 1:
            self.column_count, self.column_gap = "1", "0cm"
        else:
            self.column_count = str(count)
