"""Header value object."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Header(BaseModel):
    """Ordered header lines found at the start of an object.

    ``lines`` keep their line terminator. A header is complete only when every
    configured pattern matched during a single scan.
    """

    model_config = ConfigDict(frozen=True)

    lines: tuple[str, ...] = ()
    is_complete: bool = False

    @property
    def has_header(self) -> bool:
        return len(self.lines) > 0

    @property
    def is_partial(self) -> bool:
        return self.has_header and not self.is_complete

    @property
    def is_propagatable(self) -> bool:
        """True when the header may be cached and fanned out."""
        return self.has_header and self.is_complete
