"""Tests for gcd, the sieve and trial-division factorisation."""

import pytest

from algorithms.number_theory import gcd, prime_factorization, sieve
from conftest import drain


class TestGCD:
    """Euclid's algorithm."""

    def test_classic(self):
        """gcd(48, 18) = 6 in three remainder steps plus the final one."""
        steps, result = drain(gcd(48, 18))
        assert result == 6
        assert [s.values for s in steps] == [(48, 18), (18, 12), (12, 6), (6, 0)]

    @pytest.mark.parametrize("a,b,expected", [(0, 0, 0), (0, 5, 5), (7, 0, 7), (17, 5, 1)])
    def test_edge_cases(self, a, b, expected):
        """Zero operands and coprime pairs."""
        _, result = drain(gcd(a, b))
        assert result == expected


class TestSieve:
    """Sieve of Eratosthenes."""

    def test_primes_to_30(self):
        """The primes up to 30."""
        steps, result = drain(sieve(30))
        assert result == [2, 3, 5, 7, 11, 13, 17, 19, 23, 29]
        assert steps[-1].current is None

    def test_crossing_starts_at_square(self):
        """The first multiple crossed out for each prime is its square."""
        steps, _ = drain(sieve(30))
        crossed = [s.current for s in steps if s.delay_factor == 0.3]
        assert crossed[0] == 4
        assert 9 in crossed and 6 in crossed
        assert len(crossed) == len(set(crossed))

    @pytest.mark.parametrize("limit", [0, 1])
    def test_tiny_limits(self, limit):
        """No primes below 2."""
        _, result = drain(sieve(limit))
        assert result == []


class TestFactorization:
    """Trial division."""

    @pytest.mark.parametrize("n,factors", [(360, [2, 2, 2, 3, 3, 5]), (97, [97]), (1, []), (49, [7, 7])])
    def test_factors(self, n, factors):
        """Factors come back ascending, with multiplicity."""
        _, result = drain(prime_factorization(n))
        assert result == factors

    def test_failed_probes_are_short(self):
        """A divisor that does not divide gets a half-length snapshot."""
        steps, _ = drain(prime_factorization(15))
        assert [(s.current, s.delay_factor) for s in steps] == [(2, 0.5), (3, 1.0), (5, 1.0)]
