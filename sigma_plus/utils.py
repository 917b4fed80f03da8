"""
Utility Functions
=================

Algebraic glue shared by the prover and the verifier.

Key Operations:
- Digit decomposition: index i <-> its m base-n digits
- Pedersen vector commitment: g^r · ∏ h_k^{v_k} (written additively)
- Double commitment: g^s · h0^v · h1^r
- Powers of a scalar: 1, x, x^2, ...

Digit convention:
-----------------
Digits are least-significant first: digits[j] = (i // n^j) mod n. The
response for digit position j and digit value d lives at f_full[j·n + d].
"""

from typing import List, Sequence

from .groups import GroupOps, Point, Scalar, ScalarField


def decompose(i: int, n: int, m: int) -> List[int]:
    """
    Express index ``i`` in base ``n`` with exactly ``m`` digits.

    Parameters
    ----------
    i : int
        The index, 0 <= i < n^m
    n : int
        The digit base (n >= 2)
    m : int
        The number of digits (m >= 1)

    Returns
    -------
    List[int]
        [i_0, i_1, ..., i_{m-1}], least-significant digit first

    Raises
    ------
    ValueError
        If the base or digit count is invalid, or i is outside [0, n^m)

    Examples
    --------
    >>> decompose(3, 2, 3)
    [1, 1, 0]
    >>> decompose(14, 4, 2)
    [2, 3]
    """
    if n < 2:
        raise ValueError(f"Digit base n={n} must be at least 2")
    if m < 1:
        raise ValueError(f"Digit count m={m} must be at least 1")
    if i < 0 or i >= n ** m:
        raise ValueError(f"Index i={i} must be in [0, {n}^{m})")

    digits = []
    for _ in range(m):
        i, digit = divmod(i, n)
        digits.append(digit)
    return digits


def recompose(digits: Sequence[int], n: int) -> int:
    """Inverse of ``decompose``: Σ digits[j] · n^j."""
    value = 0
    for digit in reversed(digits):
        if not 0 <= digit < n:
            raise ValueError(f"Digit {digit} out of range for base {n}")
        value = value * n + digit
    return value


def powers(field: ScalarField, x: Scalar, count: int) -> List[Scalar]:
    """[1, x, x^2, ..., x^{count-1}]"""
    result = []
    x_k = field.one()
    for _ in range(count):
        result.append(x_k)
        x_k = field.mul(x_k, x)
    return result


def commit(group: GroupOps, g: Point, h: Sequence[Point],
           values: Sequence[Scalar], r: Scalar) -> Point:
    """
    Pedersen vector commitment.

    Formula:
    --------
    commit(v, r) = g·r + Σ_k h_k·v_k

    Parameters
    ----------
    group : GroupOps
        The group
    g : Point
        Blinding generator
    h : Sequence[Point]
        Value generators; at least len(values) of them
    values : Sequence[Scalar]
        The committed vector
    r : Scalar
        The blinding factor

    Returns
    -------
    Point
        The commitment
    """
    if len(h) < len(values):
        raise ValueError(f"Need at least {len(values)} generators, got {len(h)}")
    return group.multiexp([g] + list(h[:len(values)]), [r] + list(values))


def double_commit(group: GroupOps, g: Point, s: Scalar, h0: Point, v: Scalar,
                  h1: Point, r: Scalar) -> Point:
    """Double-blinded Pedersen commitment g·s + h0·v + h1·r."""
    return group.multiexp([g, h0, h1], [s, v, r])
