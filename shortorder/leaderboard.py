"""Running records across the days of one session."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Leaderboard:
    best_day_served: int = 0
    best_day_earnings: int = 0
    total_earnings: int = 0
    total_customers_served: int = 0
    total_days_played: int = 0


def create_leaderboard() -> Leaderboard:
    return Leaderboard()


def record_day_result(board: Leaderboard, served: int, earnings: int) -> Leaderboard:
    """Fold one closed day into the records; best-day fields only ever rise."""
    return Leaderboard(
        best_day_served=max(board.best_day_served, served),
        best_day_earnings=max(board.best_day_earnings, earnings),
        total_earnings=board.total_earnings + earnings,
        total_customers_served=board.total_customers_served + served,
        total_days_played=board.total_days_played + 1,
    )
