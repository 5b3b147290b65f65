"""Behavioural tests for full-history rating replay."""

from __future__ import annotations

from math import exp, pi, sqrt

import pytest

from domain.ratings.common import DOUBLES_FORMAT, PENDING_STATUS, PoolGameResult
from domain.ratings.glicko2.calculator import (
    GLICKO2_SCALE,
    Glicko2Parameters,
    RatingIntegrityError,
    solve_volatility,
)
from domain.ratings.replay import (
    compute_final_ratings,
    compute_rating_history,
    replay_games,
    replay_order,
)


def _game(
    game_id: str,
    side_a: str,
    side_b: str,
    winner: str,
    *,
    played_on: str = "2024-01-01",
    created_at: str | None = None,
    game_format: str = "8-ball",
    status: str = "verified",
) -> PoolGameResult:
    return PoolGameResult(
        game_id=game_id,
        played_on=played_on,
        created_at=created_at or f"{played_on}T12:00:00",
        side_a=side_a,
        side_b=side_b,
        winner=winner,
        game_format=game_format,
        status=status,
    )


def _reference_update(
    rating: float,
    rd: float,
    volatility: float,
    opponent_rating: float,
    opponent_rd: float,
    score: float,
) -> tuple[float, float]:
    mu = (rating - 1500.0) / GLICKO2_SCALE
    phi = rd / GLICKO2_SCALE
    opp_mu = (opponent_rating - 1500.0) / GLICKO2_SCALE
    opp_phi = opponent_rd / GLICKO2_SCALE

    g_opp = 1.0 / sqrt(1.0 + 3.0 * opp_phi * opp_phi / (pi * pi))
    expected = 1.0 / (1.0 + exp(-g_opp * (mu - opp_mu)))
    v = 1.0 / (g_opp * g_opp * expected * (1.0 - expected))
    delta = v * g_opp * (score - expected)

    sigma_prime = solve_volatility(phi=phi, sigma=volatility, delta=delta, v=v, tau=0.5, epsilon=1e-6)
    phi_star = sqrt(phi * phi + sigma_prime * sigma_prime)
    phi_prime = 1.0 / sqrt(1.0 / (phi_star * phi_star) + 1.0 / v)
    mu_prime = mu + phi_prime * phi_prime * g_opp * (score - expected)
    return mu_prime * GLICKO2_SCALE + 1500.0, phi_prime * GLICKO2_SCALE


def test_default_players_single_game_matches_formula() -> None:
    ratings = compute_final_ratings([_game("g1", "A", "B", "A")])

    expected_a = _reference_update(1500.0, 350.0, 0.06, 1500.0, 350.0, 1.0)
    expected_b = _reference_update(1500.0, 350.0, 0.06, 1500.0, 350.0, 0.0)

    a, b = ratings["A"], ratings["B"]
    assert a.rating == pytest.approx(expected_a[0], abs=1e-6)
    assert a.rd == pytest.approx(expected_a[1], abs=1e-6)
    assert b.rating == pytest.approx(expected_b[0], abs=1e-6)
    assert b.rd == pytest.approx(expected_b[1], abs=1e-6)
    assert a.rating == pytest.approx(1662.31, abs=0.5)
    assert a.rd == pytest.approx(290.32, abs=0.5)
    assert a.rating - 1500.0 == pytest.approx(1500.0 - b.rating)
    assert (a.wins, a.losses, a.streak) == (1, 0, 1)
    assert (b.wins, b.losses, b.streak) == (0, 1, -1)
    assert a.volatility == pytest.approx(0.06)


def test_single_loss_new_player_defaults() -> None:
    ratings = compute_final_ratings([_game("g1", "A", "B", "A")])

    assert "C" not in ratings
    loser = ratings["B"]
    assert loser.rating < 1500.0
    assert loser.wins == 0
    assert loser.losses == 1
    assert loser.streak == -1


def test_streak_resets_and_flips_sign() -> None:
    games = [
        _game("g1", "A", "B", "A", created_at="2024-01-01T10:00:00"),
        _game("g2", "A", "B", "A", created_at="2024-01-01T11:00:00"),
        _game("g3", "A", "B", "B", created_at="2024-01-01T12:00:00"),
    ]
    ratings = compute_final_ratings(games)

    assert ratings["A"].streak == -1
    assert (ratings["A"].wins, ratings["A"].losses) == (2, 1)
    assert ratings["B"].streak == 1

    ratings = compute_final_ratings(games[:2])
    assert ratings["A"].streak == 2
    assert ratings["B"].streak == -2


def test_ineligible_games_do_not_change_results() -> None:
    verified = [
        _game("g1", "A", "B", "A", created_at="2024-01-01T10:00:00"),
        _game("g2", "B", "C", "C", played_on="2024-01-02"),
    ]
    with_pending = verified + [
        _game("p1", "A", "C", "C", created_at="2024-01-01T11:00:00", status=PENDING_STATUS),
        _game("p2", "D", "A", "D", played_on="2023-12-31", status="rejected"),
    ]

    assert compute_final_ratings(with_pending) == compute_final_ratings(verified)
    assert compute_rating_history(with_pending) == compute_rating_history(verified)
    assert "D" not in compute_final_ratings(with_pending)


def test_replay_is_deterministic() -> None:
    games = [
        _game("g1", "A", "B", "A"),
        _game("g2", "A & B", "C & D", "C & D", played_on="2024-01-03", game_format=DOUBLES_FORMAT),
        _game("g3", "C", "A", "A", played_on="2024-01-02"),
    ]
    assert compute_final_ratings(games) == compute_final_ratings(games)
    assert compute_rating_history(games) == compute_rating_history(games)


def test_input_order_does_not_matter() -> None:
    games = [
        _game("g1", "A", "B", "A", created_at="2024-01-01T09:00:00"),
        _game("g2", "B", "C", "B", created_at="2024-01-01T10:30:00"),
        _game("g3", "C", "A", "C", created_at="2024-01-01T18:45:00"),
        _game("g4", "A", "B", "B", played_on="2024-01-02"),
    ]

    assert compute_final_ratings(list(reversed(games))) == compute_final_ratings(games)
    assert compute_rating_history(list(reversed(games))) == compute_rating_history(games)


def test_same_day_order_follows_creation_timestamp() -> None:
    first = _game("g1", "A", "B", "A", created_at="2024-01-01T10:00:00")
    second = _game("g2", "B", "C", "B", created_at="2024-01-01T11:00:00")
    swapped_second = _game("g2", "B", "C", "B", created_at="2024-01-01T09:00:00")

    in_order = compute_final_ratings([first, second])
    swapped = compute_final_ratings([first, swapped_second])

    assert in_order["B"].rating != pytest.approx(swapped["B"].rating)


def test_date_is_the_primary_sort_key() -> None:
    late_day = _game("g1", "A", "B", "A", played_on="2024-01-02", created_at="2024-01-01T08:00:00")
    early_day = _game("g2", "A", "B", "B", played_on="2024-01-01", created_at="2024-01-05T08:00:00")

    assert [game.game_id for game in replay_order([late_day, early_day])] == ["g2", "g1"]
    assert compute_final_ratings([late_day, early_day])["A"].streak == 1


def test_malformed_winner_is_equivalent_to_omitting_the_game() -> None:
    good = _game("g1", "A", "B", "A", created_at="2024-01-01T10:00:00")
    malformed = _game("g2", "A", "B", "Nobody", created_at="2024-01-01T11:00:00")

    assert compute_final_ratings([good, malformed]) == compute_final_ratings([good])
    assert compute_final_ratings([malformed]) == {}
    assert "g2" not in compute_rating_history([good, malformed])


def test_doubles_with_default_players_is_symmetric() -> None:
    games = [
        _game("g1", "A & B", "C & D", "A & B", game_format=DOUBLES_FORMAT),
        _game("g2", "E & F", "G & H", "G & H", played_on="2024-01-02", game_format=DOUBLES_FORMAT),
    ]
    ratings = compute_final_ratings(games)
    singles = compute_final_ratings([_game("s1", "X", "Y", "X")])

    assert ratings["A"].rating == ratings["B"].rating
    assert ratings["C"].rating == ratings["D"].rating
    assert ratings["G"].rating == ratings["A"].rating
    assert ratings["E"].rating == ratings["C"].rating
    assert ratings["A"].rating - 1500.0 == pytest.approx(1500.0 - ratings["C"].rating)
    assert ratings["A"].rating == pytest.approx(singles["X"].rating)
    assert ratings["A"].rd == pytest.approx(ratings["D"].rd)


def test_history_delta_matches_final_rating_for_single_game() -> None:
    game = _game("g1", "A", "B", "A")

    history = compute_rating_history([game])
    final = compute_final_ratings([game])

    assert set(history) == {"g1"}
    assert history["g1"]["A"].delta == pytest.approx(final["A"].rating - 1500.0)
    assert history["g1"]["A"].rating == pytest.approx(final["A"].rating)
    assert history["g1"]["B"].delta == pytest.approx(final["B"].rating - 1500.0)


def test_history_delta_is_relative_to_previous_game() -> None:
    games = [
        _game("g1", "A", "B", "A", created_at="2024-01-01T10:00:00"),
        _game("g2", "A", "C", "A", created_at="2024-01-01T11:00:00"),
    ]
    history = compute_rating_history(games)

    assert history["g2"]["A"].delta == pytest.approx(history["g2"]["A"].rating - history["g1"]["A"].rating)
    assert history["g2"]["C"].delta == pytest.approx(history["g2"]["C"].rating - 1500.0)


def test_replay_result_counts_processed_and_skipped_games() -> None:
    result = replay_games(
        [
            _game("g1", "A", "B", "A"),
            _game("g2", "A", "B", "", played_on="2024-01-02"),
            _game("g3", "A", "B", "B", status=PENDING_STATUS),
        ]
    )
    assert result.processed_games == 1
    assert result.skipped_games == 1
    assert result.history == {}


def test_custom_parameters_are_injected() -> None:
    ratings = compute_final_ratings(
        [_game("g1", "A", "B", "A")],
        Glicko2Parameters(initial_rating=1200.0, initial_rd=200.0),
    )
    assert ratings["A"].rating > 1200.0
    assert ratings["B"].rating < 1200.0
    assert ratings["A"].rd < 200.0


def test_nan_parameters_surface_as_integrity_error() -> None:
    with pytest.raises(RatingIntegrityError):
        compute_final_ratings([_game("g1", "A", "B", "A")], Glicko2Parameters(initial_rating=float("nan")))
