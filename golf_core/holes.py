from typing import Optional

from . import config
from .schemas import Course, Hole


class HoleIndex:
    """Acceso a los hoyos de un campo por número de hoyo (no por posición)."""

    def __init__(self, course: Optional[Course]):
        self.course = course
        self._by_number = {h.number: h for h in course.holes} if course else {}

    def __contains__(self, number: int) -> bool:
        return number in self._by_number

    def __len__(self) -> int:
        return len(self._by_number)

    def get(self, number: int) -> Optional[Hole]:
        return self._by_number.get(number)

    def par(self, number: int, default: Optional[int] = None) -> Optional[int]:
        h = self.get(number)
        return h.par if h else default

    def yardage(self, number: int, default: int = 0) -> int:
        h = self.get(number)
        return h.yardage if h else default

    def difficulty(self, number: int) -> Optional[int]:
        h = self.get(number)
        return h.difficulty_rank if h else None

    def front_nine_par(self, default: int = config.NINE_HOLE_PAR) -> int:
        front = [h.par for n, h in self._by_number.items() if n <= 9]
        return sum(front) if front else default
