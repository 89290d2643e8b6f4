from __future__ import annotations

from shortorder.leaderboard import Leaderboard, create_leaderboard, record_day_result


def test_new_leaderboard_is_blank():
    assert create_leaderboard() == Leaderboard(0, 0, 0, 0, 0)


def test_record_day_result_keeps_bests_and_totals():
    board = create_leaderboard()
    board = record_day_result(board, served=6, earnings=48)
    board = record_day_result(board, served=4, earnings=52)
    board = record_day_result(board, served=0, earnings=0)

    assert board.best_day_served == 6
    assert board.best_day_earnings == 52
    assert board.total_earnings == 100
    assert board.total_customers_served == 10
    assert board.total_days_played == 3


def test_record_day_result_leaves_the_original_untouched():
    board = create_leaderboard()
    record_day_result(board, served=3, earnings=24)
    assert board.total_days_played == 0
