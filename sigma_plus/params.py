"""
Public Parameter Generation
===========================

Derives the generators the proof system needs:

- g: blinding generator of every Pedersen commitment
- h_0, ..., h_{L-1} with L = max(2, n·m):
    h_0, h_1 are the value/blinding generators of the double commitment
    g·s + h_0·v + h_1·r, and the full list commits to the m×n digit tables
    (A, B, C, D)

Generators are hashed into the group from a public seed, so nobody knows a
discrete-log relation between them and every party can recompute them. No
trusted setup is involved.
"""

from .config import config
from .errors import ParameterError
from .groups import setup


def generator_count(n: int, m: int) -> int:
    """Number of h generators needed for parameters (n, m)."""
    return max(2, n * m)


def keygen_params(n: int = None, m: int = None, backend: dict = None, seed: bytes = None) -> dict:
    """
    Generate public parameters for digit base n and digit count m.

    Parameters
    ----------
    n : int, optional
        The digit base (n >= 2). Defaults to config.n.
    m : int, optional
        The digit count (m >= 1). Defaults to config.m.
    backend : dict, optional
        The result of groups.setup(). Defaults to setup(config.curve).
    seed : bytes, optional
        Domain-separation seed. Defaults to config.generator_seed.

    Returns
    -------
    dict
        A dictionary containing:
        - 'curve': The curve name
        - 'field': The ScalarField capability
        - 'group': The GroupOps capability
        - 'n', 'm': The digit base and count
        - 'N': The anonymity set capacity n^m
        - 'g': The generator g
        - 'h': List of max(2, n·m) generators

    Examples
    --------
    >>> params = keygen_params(n=2, m=3, backend=setup('secp256k1'))
    >>> params['N']
    8
    """
    n = config.n if n is None else n
    m = config.m if m is None else m
    if n < 2:
        raise ParameterError(f"Digit base n={n} must be at least 2")
    if m < 1:
        raise ParameterError(f"Digit count m={m} must be at least 1")

    backend = backend or setup(config.curve)
    seed = config.generator_seed if seed is None else seed
    group = backend['group']

    g = group.hash_to_point(seed + b"/g")
    h = [group.hash_to_point(seed + b"/h/" + k.to_bytes(4, 'big')) for k in range(generator_count(n, m))]

    return {
        'curve': backend['curve'],
        'field': backend['field'],
        'group': group,
        'n': n,
        'm': m,
        'N': n ** m,
        'g': g,
        'h': h,
    }
