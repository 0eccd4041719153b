from typing import Dict, List, Optional, Tuple

EMPTY = '.'
MARK_X = 'X'
MARK_O = 'O'

Coord = Tuple[int, int]

# Axis steps scanned by check_win, in order
DIRECTIONS: Tuple[Coord, ...] = ((1, 0), (0, 1), (1, 1), (1, -1))


class Board:
    """Sparse, unbounded grid of marks.

    Only the ``size`` x ``size`` working area is materialised on reset; every
    other coordinate reads as empty until something is written there.
    """

    def __init__(self, size: int = 20, win_length: int = 5):
        self.size = size
        self.win_length = win_length
        self._cells: Dict[Coord, str] = {}
        self.reset(size)

    def reset(self, size: Optional[int] = None) -> None:
        if size is not None:
            self.size = size
        self._cells = {(x, y): EMPTY for x in range(self.size) for y in range(self.size)}

    def get(self, x: int, y: int) -> str:
        return self._cells.get((x, y), EMPTY)

    def set(self, x: int, y: int, mark: str) -> None:
        # Callers check occupancy first
        self._cells[(x, y)] = mark

    def is_empty(self, x: int, y: int) -> bool:
        return self.get(x, y) == EMPTY

    def check_win(self, x: int, y: int) -> Optional[List[Coord]]:
        """Return the winning line through (x, y), ordered end to end, or None.

        Walks both ways along each axis while neighbours carry the same mark as
        the origin cell. The first axis reaching ``win_length`` wins.
        """
        mark = self.get(x, y)
        if mark not in (MARK_X, MARK_O):
            return None

        for dx, dy in DIRECTIONS:
            behind: List[Coord] = []
            i, j = x - dx, y - dy
            while self.get(i, j) == mark:
                behind.append((i, j))
                i, j = i - dx, j - dy

            ahead: List[Coord] = []
            i, j = x + dx, y + dy
            while self.get(i, j) == mark:
                ahead.append((i, j))
                i, j = i + dx, j + dy

            if len(behind) + 1 + len(ahead) >= self.win_length:
                return list(reversed(behind)) + [(x, y)] + ahead

        return None

    def first_empty_cell(self) -> Optional[Coord]:
        """Row-major scan of the working area; cells outside it are never picked."""
        for x in range(self.size):
            for y in range(self.size):
                if self.get(x, y) == EMPTY:
                    return (x, y)
        return None

    def to_dict(self) -> Dict[str, str]:
        return {f"{x},{y}": mark for (x, y), mark in self._cells.items()}
