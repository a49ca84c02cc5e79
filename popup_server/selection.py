"""Current color/size choice for an open popup."""

from typing import Optional

from .models import Selection


class SelectionState:
    """Holds the shopper's choice. No I/O."""

    def __init__(self) -> None:
        self.color: Optional[str] = None
        self.size: Optional[str] = None

    def set_color(self, value: Optional[str]) -> None:
        self.color = value or None

    def set_size(self, value: Optional[str]) -> None:
        self.size = value or None

    def is_complete(self) -> bool:
        return bool(self.color) and bool(self.size)

    def reset(self) -> None:
        self.color = None
        self.size = None

    def snapshot(self) -> Selection:
        """Copy of the current choice, safe to hold across awaits."""
        return Selection(color=self.color, size=self.size)
