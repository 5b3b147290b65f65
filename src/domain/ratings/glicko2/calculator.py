"""Glicko-2 primitives: scale conversion, g/E, the volatility solve and one-period updates."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from math import exp, isfinite, log, pi, sqrt
from typing import Final

logger = logging.getLogger(__name__)

GLICKO2_SCALE: Final[float] = 173.7178
DEFAULT_RATING: Final[float] = 1500.0


class RatingIntegrityError(ValueError):
    """Raised when rating inputs are not finite numbers the update can work with."""


class VolatilityConvergenceError(RuntimeError):
    """Raised when the volatility root-find exceeds its iteration bound."""


@dataclass(frozen=True)
class Glicko2Parameters:
    initial_rating: float = 1500.0
    initial_rd: float = 350.0
    initial_volatility: float = 0.06
    tau: float = 0.5
    epsilon: float = 1e-6
    max_iterations: int = 1_000


@dataclass(frozen=True)
class Glicko2OpponentResult:
    opponent_rating: float
    opponent_rd: float
    score: float


def _to_mu(rating: float) -> float:
    return (rating - DEFAULT_RATING) / GLICKO2_SCALE


def _to_phi(rd: float) -> float:
    return rd / GLICKO2_SCALE


def _from_mu(mu: float) -> float:
    return (mu * GLICKO2_SCALE) + DEFAULT_RATING


def _from_phi(phi: float) -> float:
    return phi * GLICKO2_SCALE


def g(phi: float) -> float:
    """Discount applied to an opponent whose rating is uncertain."""
    return 1.0 / sqrt(1.0 + ((3.0 * (phi**2)) / (pi**2)))


def expected(mu: float, opp_mu: float, opp_phi: float) -> float:
    """Probability of beating the opponent, on the internal Glicko-2 scale."""
    exponent = -g(opp_phi) * (mu - opp_mu)
    if exponent >= 0.0:
        exp_term = exp(-exponent)
        return exp_term / (1.0 + exp_term)
    exp_term = exp(exponent)
    return 1.0 / (1.0 + exp_term)


def calculate_expected_score(
    *,
    rating: float,
    rd: float,
    opponent_rating: float,
    opponent_rd: float,
) -> float:
    """Compute expected score for one side under Glicko-2."""
    return expected(
        _to_mu(rating),
        _to_mu(opponent_rating),
        _to_phi(opponent_rd),
    )


def solve_volatility(
    *,
    phi: float,
    sigma: float,
    delta: float,
    v: float,
    tau: float = 0.5,
    epsilon: float = 1e-6,
    max_iterations: int = 1_000,
) -> float:
    """Find the new volatility with the Illinois variant of regula falsi.

    ``A`` starts at ``ln(sigma**2)``; ``B`` is ``ln(delta**2 - phi**2 - v)`` when that
    is defined, otherwise the first ``a - k * tau`` where ``f`` stops being negative.
    """
    a = log(sigma**2)

    def f(x: float) -> float:
        ex = exp(x)
        numerator = ex * ((delta**2) - (phi**2) - v - ex)
        denominator = 2.0 * ((phi**2) + v + ex) ** 2
        return (numerator / denominator) - ((x - a) / (tau**2))

    a_value = a
    if (delta**2) > ((phi**2) + v):
        b_value = log((delta**2) - (phi**2) - v)
    else:
        k = 1
        b_value = a_value - (k * tau)
        while f(b_value) < 0.0:
            k += 1
            if k > max_iterations:
                logger.error(
                    "volatility bracket search exceeded %d steps (phi=%r sigma=%r delta=%r v=%r)",
                    max_iterations,
                    phi,
                    sigma,
                    delta,
                    v,
                )
                raise VolatilityConvergenceError("Glicko-2 volatility solve failed to bracket root.")
            b_value = a_value - (k * tau)

    f_a = f(a_value)
    f_b = f(b_value)
    iterations = 0
    while abs(b_value - a_value) > epsilon:
        iterations += 1
        if iterations > max_iterations:
            logger.error(
                "volatility iteration did not converge after %d steps (A=%r B=%r)",
                max_iterations,
                a_value,
                b_value,
            )
            raise VolatilityConvergenceError("Glicko-2 volatility solve did not converge.")
        if f_b == f_a:
            c_value = (a_value + b_value) / 2.0
        else:
            c_value = a_value + (((a_value - b_value) * f_a) / (f_b - f_a))
        f_c = f(c_value)
        if f_c * f_b < 0.0:
            a_value = b_value
            f_a = f_b
        else:
            f_a /= 2.0
        b_value = c_value
        f_b = f_c

    return exp(a_value / 2.0)


def _check_finite(**values: float) -> None:
    for name, value in values.items():
        if not isfinite(value):
            raise RatingIntegrityError(f"{name}={value!r} is not a finite number")


def update_glicko2_player(
    *,
    rating: float,
    rd: float,
    volatility: float,
    results: Sequence[Glicko2OpponentResult],
    tau: float = 0.5,
    epsilon: float = 1e-6,
    max_iterations: int = 1_000,
) -> tuple[float, float, float]:
    """Update one player for one Glicko-2 rating period."""
    _check_finite(rating=rating, rd=rd, volatility=volatility)
    if volatility <= 0.0:
        raise RatingIntegrityError(f"volatility={volatility!r} must be > 0")
    if not results:
        return rating, rd, volatility

    mu = _to_mu(rating)
    phi = _to_phi(rd)

    g_terms: list[float] = []
    e_terms: list[float] = []
    score_minus_e_terms: list[float] = []
    for result in results:
        _check_finite(
            opponent_rating=result.opponent_rating,
            opponent_rd=result.opponent_rd,
            score=result.score,
        )
        opp_mu = _to_mu(result.opponent_rating)
        opp_phi = _to_phi(result.opponent_rd)
        g_term = g(opp_phi)
        expected_score = expected(mu, opp_mu, opp_phi)
        g_terms.append(g_term)
        e_terms.append(expected_score)
        score_minus_e_terms.append(result.score - expected_score)

    v_inverse = 0.0
    for g_term, expected_score in zip(g_terms, e_terms):
        v_inverse += (g_term**2) * expected_score * (1.0 - expected_score)
    if v_inverse <= 0.0 or not isfinite(v_inverse):
        raise RatingIntegrityError(
            f"estimated variance is undefined (rating={rating!r}, rd={rd!r}); "
            "expected score saturated at 0 or 1"
        )

    v = 1.0 / v_inverse
    improvement = sum(g_term * score_minus_e for g_term, score_minus_e in zip(g_terms, score_minus_e_terms))
    sigma_prime = solve_volatility(
        phi=phi,
        sigma=volatility,
        delta=v * improvement,
        v=v,
        tau=tau,
        epsilon=epsilon,
        max_iterations=max_iterations,
    )

    phi_star = sqrt((phi**2) + (sigma_prime**2))
    phi_prime = 1.0 / sqrt((1.0 / (phi_star**2)) + (1.0 / v))
    mu_prime = mu + (phi_prime**2) * improvement

    return _from_mu(mu_prime), _from_phi(phi_prime), sigma_prime


__all__ = [
    "DEFAULT_RATING",
    "GLICKO2_SCALE",
    "Glicko2OpponentResult",
    "Glicko2Parameters",
    "RatingIntegrityError",
    "VolatilityConvergenceError",
    "calculate_expected_score",
    "expected",
    "g",
    "solve_volatility",
    "update_glicko2_player",
]
