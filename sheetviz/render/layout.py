"""Page geometry and pagination for PDF reports.

All coordinates are millimetres from the top-left corner of the page. Text
``y`` values are baselines.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..core.enums import Orientation, PageSize
from ..visuals.charts import RasterImage

PT_TO_MM = 25.4 / 72

PAGE_SIZES: dict[PageSize, tuple[float, float]] = {
    PageSize.A4: (210.0, 297.0),
    PageSize.LETTER: (215.9, 279.4),
    PageSize.LEGAL: (215.9, 355.6),
}

MARGIN = 20.0
TITLE_Y = 20.0
DATE_Y = 30.0
RULE_Y = 35.0
FIRST_CHART_Y = 50.0
CAPTION_GAP = 10.0
CHART_SPACING = 30.0

TITLE_FONT = 18
DATE_FONT = 12
CAPTION_FONT = 14
SECTION_FONT = 16


def page_dimensions(size: PageSize | str, orientation: Orientation | str) -> tuple[float, float]:
    """Return (width, height) in mm; landscape swaps the sides."""
    width, height = PAGE_SIZES[PageSize(size)]
    if Orientation(orientation) is Orientation.LANDSCAPE:
        return height, width
    return width, height


@dataclass(frozen=True)
class TextBlock:
    x: float
    y: float
    text: str
    font_size: int
    bold: bool = False

    @property
    def top(self) -> float:
        return self.y - self.font_size * PT_TO_MM


@dataclass(frozen=True)
class ImageBlock:
    x: float
    y: float
    width: float
    height: float
    image: RasterImage
    alt: str = ""


@dataclass(frozen=True)
class RuleBlock:
    x1: float
    x2: float
    y: float


@dataclass
class Page:
    width: float
    height: float
    texts: list[TextBlock] = field(default_factory=list)
    images: list[ImageBlock] = field(default_factory=list)
    rules: list[RuleBlock] = field(default_factory=list)


class PdfLayout:
    """Flows a title block and chart images onto fixed-size pages."""

    def __init__(self, size: PageSize | str, orientation: Orientation | str) -> None:
        self.width, self.height = page_dimensions(size, orientation)
        self.pages: list[Page] = []
        self.cursor = MARGIN
        self.add_page()

    @property
    def current(self) -> Page:
        return self.pages[-1]

    @property
    def content_width(self) -> float:
        return self.width - 2 * MARGIN

    def add_page(self) -> Page:
        page = Page(width=self.width, height=self.height)
        self.pages.append(page)
        self.cursor = MARGIN
        return page

    def add_title_block(self, title: str, generated_on: str) -> None:
        self.current.texts.append(TextBlock(MARGIN, TITLE_Y, title, TITLE_FONT, bold=True))
        self.current.texts.append(
            TextBlock(MARGIN, DATE_Y, f"Generated on {generated_on}", DATE_FONT)
        )
        self.current.rules.append(RuleBlock(MARGIN, self.width - MARGIN, RULE_Y))
        self.cursor = FIRST_CHART_Y

    def add_section(self, heading: str, detail: str | None = None) -> None:
        """Emit a divider page for a group of charts."""
        self.add_page()
        self.current.texts.append(TextBlock(MARGIN, TITLE_Y, heading, SECTION_FONT, bold=True))
        if detail:
            self.current.texts.append(TextBlock(MARGIN, DATE_Y, detail, DATE_FONT))
        self.current.rules.append(RuleBlock(MARGIN, self.width - MARGIN, RULE_Y))
        self.add_page()

    @property
    def max_image_height(self) -> float:
        """Tallest image that fits below a caption on a fresh page."""
        return self.height - MARGIN - CAPTION_GAP - MARGIN

    def image_size(self, image: RasterImage) -> tuple[float, float]:
        """Page-fitting width and proportional height for ``image``.

        Images are as wide as the content area unless that would make them
        taller than a page allows, in which case both sides shrink.
        """
        width = self.content_width
        if image.width_px <= 0:
            return width, 0.0
        height = image.height_px * width / image.width_px
        if height > self.max_image_height:
            width *= self.max_image_height / height
            height = self.max_image_height
        return width, height

    def add_chart(self, caption: str, image: RasterImage) -> ImageBlock:
        width, height = self.image_size(image)
        if self.cursor + height + CHART_SPACING > self.height:
            self.add_page()

        self.current.texts.append(TextBlock(MARGIN, self.cursor, caption, CAPTION_FONT))
        left = MARGIN + (self.content_width - width) / 2
        block = ImageBlock(left, self.cursor + CAPTION_GAP, width, height, image, alt=caption)
        self.current.images.append(block)
        self.cursor += height + CHART_SPACING
        return block
