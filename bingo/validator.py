"""
Validation Engine
=================
Post-parse validation and reporting.

After parsing a game, generates a report:
    - Card and call counts
    - Card side length
    - Non-square cards and cards whose dimensions differ from the first
    - Duplicate values on a card
    - Cards that can never win with the given calls
    - Values called more than once

Never silently ignores failures.
"""

from __future__ import annotations

import logging
from collections import Counter

from .models import (
    Anomaly,
    AnomalyType,
    Card,
    Game,
    Severity,
    ValidationReport,
)

logger = logging.getLogger(__name__)


class ValidationEngine:
    """
    Validates a parsed game and produces a report.
    """

    def validate(self, game: Game) -> ValidationReport:
        """
        Run full validation on a parsed game.

        Args:
            game: Freshly parsed game (before any calls are replayed).

        Returns:
            ValidationReport with all detected issues.
        """
        report = ValidationReport(
            card_count=len(game.cards),
            call_count=len(game.calls),
            side=game.side,
        )

        call_counts = Counter(game.calls)
        report.duplicate_calls = sorted(
            value for value, count in call_counts.items() if count > 1
        )

        expected = game.cards[0].dimensions
        called = set(call_counts)

        for index, card in enumerate(game.cards):
            if not card.is_square:
                rows, width = card.dimensions
                report.anomalies.append(Anomaly(
                    type=AnomalyType.NON_SQUARE_CARD,
                    severity=Severity.ERROR,
                    card_index=index,
                    message=f"Card {index} is {rows}x{width}, not square",
                ))

            if card.dimensions != expected:
                report.anomalies.append(Anomaly(
                    type=AnomalyType.DIMENSION_MISMATCH,
                    severity=Severity.ERROR,
                    card_index=index,
                    message=(
                        f"Card {index} is {card.dimensions[0]}x"
                        f"{card.dimensions[1]}, expected "
                        f"{expected[0]}x{expected[1]}"
                    ),
                ))

            duplicates = sorted(
                value
                for value, count in Counter(card.values()).items()
                if count > 1
            )
            if duplicates:
                report.anomalies.append(Anomaly(
                    type=AnomalyType.DUPLICATE_CELL_VALUE,
                    severity=Severity.WARNING,
                    card_index=index,
                    message=f"Card {index} repeats values {duplicates}",
                ))

            if not self._can_win(card, called):
                report.anomalies.append(Anomaly(
                    type=AnomalyType.UNREACHABLE_CARD,
                    severity=Severity.WARNING,
                    card_index=index,
                    message=f"Card {index} has no line covered by the calls",
                ))

        self._log_report(report)
        return report

    def _can_win(self, card: Card, called: set[int]) -> bool:
        lines = card.rows() + card.columns()
        return any(
            line and all(cell.value in called for cell in line)
            for line in lines
        )

    def _log_report(self, report: ValidationReport):
        logger.info(
            f"Validated game: {report.card_count} cards "
            f"({report.side}x{report.side}), {report.call_count} calls"
        )
        if report.duplicate_calls:
            logger.info(f"Values called more than once: {report.duplicate_calls}")

        for anomaly in report.anomalies:
            logger.warning(f"{anomaly.type.value}: {anomaly.message}")
