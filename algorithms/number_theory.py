"""
number_theory.py — Mathematical Algorithms
===========================================
    gcd(a, b)               – Euclid's remainder loop
    sieve(limit)            – Sieve of Eratosthenes, crossing from p²
    prime_factorization(n)  – trial division up to √n
"""

from typing import Generator, List

from algorithms.step import NumberStep


def gcd(a: int, b: int) -> Generator[NumberStep, None, int]:
    """One snapshot per remainder step; gcd(0, 0) is 0."""
    while b:
        yield NumberStep((a, b), b, f"gcd({a}, {b}) = gcd({b}, {a} mod {b} = {a % b})")
        a, b = b, a % b
    yield NumberStep((a, b), a, f"remainder is 0, gcd = {a}")
    return a


def sieve(limit: int) -> Generator[NumberStep, None, List[int]]:
    """
    values[i] is True while i is still a prime candidate.  A snapshot when
    each prime is found and a short one (0.3) per crossed-out multiple.
    """
    flags = [True] * (limit + 1)
    flags[0] = False
    if limit >= 1:
        flags[1] = False
    yield NumberStep(tuple(flags), None, f"every number 2..{limit} starts as a candidate")

    p = 2
    while p * p <= limit:
        if flags[p]:
            yield NumberStep(tuple(flags), p, f"{p} is prime; cross out its multiples from {p * p}")
            for m in range(p * p, limit + 1, p):
                if flags[m]:
                    flags[m] = False
                    yield NumberStep(tuple(flags), m, f"{m} = {p} × {m // p} is not prime", 0.3)
        p += 1

    primes = [i for i, is_p in enumerate(flags) if is_p]
    yield NumberStep(tuple(flags), None, f"{len(primes)} primes up to {limit}")
    return primes


def prime_factorization(n: int) -> Generator[NumberStep, None, List[int]]:
    """Prime factors with multiplicity, ascending.  values holds factors found so far."""
    factors: List[int] = []
    rest, d = n, 2
    while d * d <= rest:
        if rest % d == 0:
            rest //= d
            factors.append(d)
            yield NumberStep(tuple(factors), d, f"{d} divides; {rest} left")
        else:
            yield NumberStep(tuple(factors), d, f"{d} does not divide {rest}", 0.5)
            d += 1
    if rest > 1:
        factors.append(rest)
        yield NumberStep(tuple(factors), rest, f"{rest} is prime")
    return factors
