"""
Unit state needed by movement resolution.

Stats such as attack, defense and recruitment cost belong to the caller;
the core only tracks identity and the per-turn movement budget.
"""

from dataclasses import dataclass, field
from typing import Optional
import uuid


@dataclass(eq=False)
class Unit:
    """A movable unit. Equality is identity."""
    name: str
    max_movement: int
    current_movement: Optional[int] = None  # None: start at max_movement
    has_moved: bool = False
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])

    def __post_init__(self):
        if self.current_movement is None:
            self.current_movement = self.max_movement

    def can_move(self) -> bool:
        return self.current_movement > 0

    def can_afford(self, cost: int) -> bool:
        return self.current_movement >= cost

    def spend_movement(self, cost: int):
        """Deduct the cost of tiles entered."""
        self.current_movement -= cost
        self.has_moved = True

    def reset_movement(self):
        """Restore the full budget (start of turn)."""
        self.current_movement = self.max_movement
        self.has_moved = False

    def __repr__(self):
        return f"Unit({self.name}, {self.current_movement}/{self.max_movement} MP)"
