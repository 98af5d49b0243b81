"""
Common data structures shared across layers.

- Rectangle: half-open crop window given by two corners
- ROI: x/y/width/height region, as sent by clients that think in sizes
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class Rectangle(BaseModel):
    """
    Half-open rectangular region [x0, x1) x [y0, y1).

    (0, 0) is the top-left pixel. The model accepts any integers so that
    degenerate or out-of-bounds regions reach the crop validation and are
    reported with the specific error kind.
    """

    model_config = ConfigDict(frozen=True)

    x0: int = Field(..., description="Left edge (inclusive)")
    y0: int = Field(..., description="Top edge (inclusive)")
    x1: int = Field(..., description="Right edge (exclusive)")
    y1: int = Field(..., description="Bottom edge (exclusive)")

    @classmethod
    def from_coords(cls, x0: int, y0: int, x1: int, y1: int) -> "Rectangle":
        """Create Rectangle from corner coordinates, no normalization."""
        return cls(x0=x0, y0=y0, x1=x1, y1=y1)

    @classmethod
    def from_roi(cls, x: int, y: int, width: int, height: int) -> "Rectangle":
        """Create Rectangle from an origin and a size."""
        return cls(x0=x, y0=y, x1=x + width, y1=y + height)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Rectangle":
        return cls(
            x0=int(data["x0"]),
            y0=int(data["y0"]),
            x1=int(data["x1"]),
            y1=int(data["y1"]),
        )

    @property
    def width(self) -> int:
        return self.x1 - self.x0

    @property
    def height(self) -> int:
        return self.y1 - self.y0

    @property
    def is_degenerate(self) -> bool:
        return self.x0 >= self.x1 or self.y0 >= self.y1

    def fits_within(self, image_width: int, image_height: int) -> bool:
        """Check that the region lies inside an image of the given size."""
        return (
            self.x0 >= 0
            and self.y0 >= 0
            and self.x1 <= image_width
            and self.y1 <= image_height
        )

    def translate(self, dx: int, dy: int) -> "Rectangle":
        """Shift the region by (dx, dy)."""
        return Rectangle(x0=self.x0 + dx, y0=self.y0 + dy, x1=self.x1 + dx, y1=self.y1 + dy)

    def as_tuple(self) -> tuple[int, int, int, int]:
        return (self.x0, self.y0, self.x1, self.y1)

    def to_dict(self) -> Dict[str, int]:
        """Convert to dictionary for service layer compatibility."""
        return {"x0": self.x0, "y0": self.y0, "x1": self.x1, "y1": self.y1}


class ROI(BaseModel):
    """Region of Interest expressed as origin plus size."""

    x: int = Field(..., description="X coordinate")
    y: int = Field(..., description="Y coordinate")
    width: int = Field(..., description="Width")
    height: int = Field(..., description="Height")

    def to_rectangle(self) -> Rectangle:
        return Rectangle.from_roi(self.x, self.y, self.width, self.height)
