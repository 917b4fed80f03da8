"""
Algebraic Capabilities and Backend Setup
========================================

The verifier never touches curve arithmetic directly. It is handed two
capability objects at construction time:

- a ``ScalarField``: the exponent field Z_q of the group
- a ``GroupOps``: the prime-order group itself, written additively

Any pair of objects providing these methods can be injected. Two backends
ship with the package:

- ``secp256k1``: the ``ecdsa`` library's SECP256k1 curve (default)
- ``BN254`` / ``MNT224`` / ``SS512``: G1 and ZR of a charm-crypto ``PairingGroup``

Scalars and points are whatever native objects the backend uses
(plain ``int`` for secp256k1, charm ``ZR``/``G1`` elements for pairing
groups); only the capability objects know how to combine them.
"""

from typing import Any, Protocol, Sequence, runtime_checkable

from .errors import ParameterError

Scalar = Any
Point = Any

PAIRING_CURVES = ('BN254', 'MNT224', 'SS512')


@runtime_checkable
class ScalarField(Protocol):
    """Exponent field of a prime-order group."""

    order: int
    size: int

    def zero(self) -> Scalar: ...
    def one(self) -> Scalar: ...
    def from_int(self, value: int) -> Scalar: ...
    def to_int(self, a: Scalar) -> int: ...
    def add(self, a: Scalar, b: Scalar) -> Scalar: ...
    def sub(self, a: Scalar, b: Scalar) -> Scalar: ...
    def mul(self, a: Scalar, b: Scalar) -> Scalar: ...
    def neg(self, a: Scalar) -> Scalar: ...
    def eq(self, a: Scalar, b: Scalar) -> bool: ...
    def is_zero(self, a: Scalar) -> bool: ...
    def is_member(self, a: Scalar) -> bool: ...
    def random(self) -> Scalar: ...
    def hash_to_scalar(self, data: bytes) -> Scalar: ...
    def to_bytes(self, a: Scalar) -> bytes: ...
    def from_bytes(self, data: bytes) -> Scalar: ...


@runtime_checkable
class GroupOps(Protocol):
    """Prime-order group, additive notation."""

    size: int

    def identity(self) -> Point: ...
    def generator(self) -> Point: ...
    def add(self, p: Point, q: Point) -> Point: ...
    def mul(self, p: Point, s: Scalar) -> Point: ...
    def eq(self, p: Point, q: Point) -> bool: ...
    def is_member(self, p: Point) -> bool: ...
    def is_identity(self, p: Point) -> bool: ...
    def hash_to_point(self, data: bytes) -> Point: ...
    def multiexp(self, points: Sequence[Point], scalars: Sequence[Scalar]) -> Point: ...
    def to_bytes(self, p: Point) -> bytes: ...
    def from_bytes(self, data: bytes) -> Point: ...


def setup(curve_name: str = 'secp256k1') -> dict:
    """
    Initialize the scalar field and group for the named curve.

    Parameters
    ----------
    curve_name : str, optional
        ``'secp256k1'`` (default) or one of the charm pairing curves
        ``'BN254'``, ``'MNT224'``, ``'SS512'``.

    Returns
    -------
    dict
        A dictionary containing:
        - 'curve': The curve name
        - 'field': The ``ScalarField`` capability
        - 'group': The ``GroupOps`` capability

    Notes
    -----
    The charm backend is imported lazily so that the secp256k1 backend works
    without charm-crypto installed.

    Examples
    --------
    >>> params = setup('secp256k1')
    >>> field, group = params['field'], params['group']
    >>> P = group.mul(group.generator(), field.random())
    """
    if curve_name.lower() == 'secp256k1':
        from .secp256k1 import Secp256k1Field, Secp256k1Group
        field, group = Secp256k1Field(), Secp256k1Group()
    elif curve_name in PAIRING_CURVES:
        from .pairing import pairing_backend
        field, group = pairing_backend(curve_name)
    else:
        raise ParameterError(f"Unknown curve {curve_name!r}; expected secp256k1 or one of {PAIRING_CURVES}")

    return {
        'curve': curve_name,
        'field': field,
        'group': group,
    }
