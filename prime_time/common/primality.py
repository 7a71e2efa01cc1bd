"""Exact primality test over unbounded integers."""
from math import isqrt


def is_prime(n: int) -> bool:
    """
    Decide whether n is prime by plain trial division.

    Every candidate divisor from 2 up to isqrt(n) + 1 is tried, so the answer
    is exact for any size of n (and slow for large primes).

    :param int n: Number to test, any sign and magnitude

    :return: True if n is prime
    :rtype: bool
    """
    if n <= 1:
        return False
    if n <= 3:
        return True

    for i in range(2, isqrt(n) + 2):
        if n % i == 0:
            return False
    return True
