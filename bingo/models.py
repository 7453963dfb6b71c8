"""
Data Models
===========
Pydantic models for the bingo simulation and its reports.
All report models are serializable to JSON for programmatic consumers.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterator, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field


# ─── Enums ────────────────────────────────────────────────────────────────────


class CellStatus(str, Enum):
    """Whether a cell's value has been called."""
    UNMARKED = "unmarked"
    MARKED = "marked"


class AnomalyType(str, Enum):
    """Structural issues detected while validating a parsed game."""
    NON_SQUARE_CARD = "non_square_card"
    DIMENSION_MISMATCH = "dimension_mismatch"
    DUPLICATE_CELL_VALUE = "duplicate_cell_value"
    UNREACHABLE_CARD = "unreachable_card"


class Severity(str, Enum):
    WARNING = "warning"
    ERROR = "error"


# ─── Cell ─────────────────────────────────────────────────────────────────────


class Cell(BaseModel):
    """A single numeric value on a card plus its marked status."""
    value: int = Field(ge=0)
    status: CellStatus = CellStatus.UNMARKED

    @property
    def is_marked(self) -> bool:
        return self.status == CellStatus.MARKED

    def mark(self):
        self.status = CellStatus.MARKED


# ─── Card Status ──────────────────────────────────────────────────────────────


class Unsolved(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["unsolved"] = "unsolved"


class Solved(BaseModel):
    """
    Terminal card status. Carries the call that completed a line and the
    sum of the values still unmarked right after that call.
    """
    model_config = ConfigDict(frozen=True)

    kind: Literal["solved"] = "solved"
    call: int
    sum: int

    @computed_field
    @property
    def score(self) -> int:
        """Puzzle answer: triggering call times unmarked sum."""
        return self.call * self.sum


CardStatus = Union[Unsolved, Solved]


# ─── Card ─────────────────────────────────────────────────────────────────────


class Card(BaseModel):
    """
    A square grid of cells, row-major.
    Once solved, the status latches: later calls can still mark cells
    but never replace the recorded call or sum.
    """
    cells: list[list[Cell]] = Field(default_factory=list)
    status: CardStatus = Field(default_factory=Unsolved, discriminator="kind")

    @property
    def is_solved(self) -> bool:
        return isinstance(self.status, Solved)

    @property
    def side(self) -> int:
        return len(self.cells)

    @property
    def dimensions(self) -> tuple[int, int]:
        """(row count, widest row)."""
        return len(self.cells), max((len(row) for row in self.cells), default=0)

    @property
    def is_square(self) -> bool:
        return all(len(row) == self.side for row in self.cells)

    @property
    def marked_count(self) -> int:
        return sum(1 for row in self.cells for cell in row if cell.is_marked)

    def rows(self) -> list[list[Cell]]:
        return [list(row) for row in self.cells]

    def columns(self) -> list[list[Cell]]:
        return [list(column) for column in zip(*self.cells)]

    def values(self) -> list[int]:
        return [cell.value for row in self.cells for cell in row]

    def total(self) -> int:
        return sum(self.values())

    def unmarked_sum(self) -> int:
        return sum(
            cell.value
            for row in self.cells
            for cell in row
            if not cell.is_marked
        )

    def mark_value(self, value: int) -> CardStatus:
        """
        Mark the first cell (row-major) holding ``value`` and check whether
        its row or column is now complete.

        Returns:
            The card status after the call.
        """
        position = self._find(value)
        if position is None:
            return self.status

        y, x = position
        self.cells[y][x].mark()

        if not self.is_solved and self._completes_line(y, x):
            self.status = Solved(call=value, sum=self.unmarked_sum())

        return self.status

    def reset(self):
        for row in self.cells:
            for cell in row:
                cell.status = CellStatus.UNMARKED
        self.status = Unsolved()

    def _find(self, value: int) -> Optional[tuple[int, int]]:
        for y, row in enumerate(self.cells):
            for x, cell in enumerate(row):
                if cell.value == value:
                    return y, x
        return None

    def _completes_line(self, y: int, x: int) -> bool:
        if all(cell.is_marked for cell in self.cells[y]):
            return True
        # A row too short to reach column x leaves that column incomplete
        return all(
            x < len(row) and row[x].is_marked
            for row in self.cells
        )


# ─── Game ─────────────────────────────────────────────────────────────────────


class Win(BaseModel):
    """One card completing a line during a replay."""
    model_config = ConfigDict(frozen=True)

    card_index: int = Field(ge=0)
    call_index: int = Field(ge=0)
    status: Solved


class Game(BaseModel):
    """
    The call sequence and the cards it is played against, both in input
    order. Replaying mutates the cards; call ``reset()`` before replaying
    the same game with a different policy.
    """
    calls: list[int] = Field(default_factory=list)
    cards: list[Card] = Field(min_length=1)

    @property
    def side(self) -> int:
        return self.cards[0].side

    @property
    def is_solved(self) -> bool:
        return all(card.is_solved for card in self.cards)

    def first_win(self) -> Optional[Win]:
        """First card to complete a line; lower card index wins a tie."""
        for call_index, call in enumerate(self.calls):
            for card_index, card in enumerate(self.cards):
                status = card.mark_value(call)
                if isinstance(status, Solved):
                    return Win(
                        card_index=card_index,
                        call_index=call_index,
                        status=status,
                    )
        return None

    def find_winning_call(self) -> CardStatus:
        win = self.first_win()
        return win.status if win else Unsolved()

    def iter_wins(self) -> Iterator[Win]:
        """
        Replay the calls, skipping cards that are already solved, and
        yield every win in the order it happens. Stops once every card
        has won.
        """
        win_count = 0
        card_count = len(self.cards)

        for call_index, call in enumerate(self.calls):
            for card_index, card in enumerate(self.cards):
                if card.is_solved:
                    continue

                status = card.mark_value(call)
                if isinstance(status, Solved):
                    yield Win(
                        card_index=card_index,
                        call_index=call_index,
                        status=status,
                    )
                    win_count += 1
                    if win_count == card_count:
                        return

    def last_win(self) -> Optional[Win]:
        last = None
        for win in self.iter_wins():
            last = win
        return last

    def find_last_winner(self) -> Optional[Solved]:
        win = self.last_win()
        return win.status if win else None

    def reset(self):
        """Return every cell to unmarked and every card to unsolved."""
        for card in self.cards:
            card.reset()


# ─── Reports ──────────────────────────────────────────────────────────────────


class Anomaly(BaseModel):
    """A structural anomaly detected in a parsed game."""
    type: AnomalyType
    severity: Severity
    message: str
    card_index: Optional[int] = None


class ValidationReport(BaseModel):
    """Post-parse validation report."""
    card_count: int = 0
    call_count: int = 0
    side: Optional[int] = None
    duplicate_calls: list[int] = Field(default_factory=list)
    anomalies: list[Anomaly] = Field(default_factory=list)

    @computed_field
    @property
    def is_valid(self) -> bool:
        return not any(a.severity == Severity.ERROR for a in self.anomalies)

    @computed_field
    @property
    def anomaly_breakdown(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for anomaly in self.anomalies:
            counts[anomaly.type.value] = counts.get(anomaly.type.value, 0) + 1
        return counts


class SolveResult(BaseModel):
    """
    Complete output of a solve run: both answers and the winning cards.
    This is the top-level JSON structure printed by ``solve --json-output``.
    """
    first_win: Optional[Win] = None
    last_win: Optional[Win] = None
    validation: ValidationReport = Field(default_factory=ValidationReport)

    @computed_field
    @property
    def part_one(self) -> Optional[int]:
        return self.first_win.status.score if self.first_win else None

    @computed_field
    @property
    def part_two(self) -> Optional[int]:
        return self.last_win.status.score if self.last_win else None
