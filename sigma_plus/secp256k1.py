"""
secp256k1 Backend
=================

Binds the ``ScalarField`` / ``GroupOps`` capabilities to the ``ecdsa``
library's SECP256k1 curve.

Representation:
- Scalars are Python ``int`` values in [0, q)
- Points are ``ecdsa.ellipticcurve.PointJacobi`` objects; the identity is
  ``ecdsa.ellipticcurve.INFINITY``

Encoding:
- Scalars: 32-byte big-endian, canonical (value < q)
- Points: 33-byte SEC1 compressed; the identity is 33 zero bytes

secp256k1 has cofactor 1, so every point on the curve is in the prime-order
group and the membership test is the curve equation.
"""

import hashlib
from typing import Sequence

from ecdsa import SECP256k1
from ecdsa.ellipticcurve import INFINITY, PointJacobi
from ecdsa.errors import MalformedPointError
from ecdsa.numbertheory import jacobi, square_root_mod_prime
from ecdsa.util import randrange

from .errors import DecodeError

SCALAR_SIZE = 32
POINT_SIZE = 33
IDENTITY_BYTES = b"\x00" * POINT_SIZE


class Secp256k1Field:
    """Scalar field Z_q of secp256k1, scalars are plain ints."""

    def __init__(self):
        self.order = SECP256k1.order
        self.size = SCALAR_SIZE

    def zero(self) -> int:
        return 0

    def one(self) -> int:
        return 1

    def from_int(self, value: int) -> int:
        return value % self.order

    def to_int(self, a: int) -> int:
        return a

    def add(self, a: int, b: int) -> int:
        return (a + b) % self.order

    def sub(self, a: int, b: int) -> int:
        return (a - b) % self.order

    def mul(self, a: int, b: int) -> int:
        return (a * b) % self.order

    def neg(self, a: int) -> int:
        return -a % self.order

    def eq(self, a: int, b: int) -> bool:
        return a == b

    def is_zero(self, a: int) -> bool:
        return a == 0

    def is_member(self, a) -> bool:
        return isinstance(a, int) and 0 <= a < self.order

    def random(self) -> int:
        # uniform in [1, q) from os.urandom
        return randrange(self.order)

    def hash_to_scalar(self, data: bytes) -> int:
        return int.from_bytes(hashlib.sha256(data).digest(), 'big') % self.order

    def to_bytes(self, a: int) -> bytes:
        return a.to_bytes(SCALAR_SIZE, 'big')

    def from_bytes(self, data: bytes) -> int:
        if len(data) != SCALAR_SIZE:
            raise DecodeError(f"scalar must be {SCALAR_SIZE} bytes, got {len(data)}")
        value = int.from_bytes(data, 'big')
        if value >= self.order:
            raise DecodeError("scalar encoding is not reduced modulo the group order")
        return value


class Secp256k1Group:
    """The secp256k1 point group, additive notation."""

    def __init__(self):
        self.curve = SECP256k1.curve
        self.order = SECP256k1.order
        self.size = POINT_SIZE
        self._generator = SECP256k1.generator

    def identity(self):
        return INFINITY

    def generator(self):
        return self._generator

    def is_identity(self, p) -> bool:
        return p is INFINITY or p == INFINITY

    def add(self, p, q):
        if self.is_identity(p):
            return q
        if self.is_identity(q):
            return p
        return p + q

    def mul(self, p, s: int):
        if s == 0 or self.is_identity(p):
            return INFINITY
        return p * s

    def eq(self, p, q) -> bool:
        p_inf, q_inf = self.is_identity(p), self.is_identity(q)
        if p_inf or q_inf:
            return p_inf and q_inf
        return p == q

    def is_member(self, p) -> bool:
        if p is INFINITY:
            return True
        if not isinstance(p, PointJacobi):
            return False
        if self.is_identity(p):
            return True
        x, y = p.x(), p.y()
        prime = self.curve.p()
        if not (0 <= x < prime and 0 <= y < prime):
            return False
        return self.curve.contains_point(x, y)

    def hash_to_point(self, data: bytes):
        """
        Map ``data`` to a point with unknown discrete logarithm.

        Try-and-increment: x = SHA-256(data || counter) until x^3 + 7 is a
        square, taking the even root.
        """
        prime = self.curve.p()
        counter = 0
        while True:
            digest = hashlib.sha256(data + counter.to_bytes(4, 'big')).digest()
            x = int.from_bytes(digest, 'big') % prime
            alpha = (pow(x, 3, prime) + self.curve.a() * x + self.curve.b()) % prime
            if alpha != 0 and jacobi(alpha, prime) == 1:
                y = square_root_mod_prime(alpha, prime)
                if y & 1:
                    y = prime - y
                return PointJacobi(self.curve, x, y, 1, self.order)
            counter += 1

    def multiexp(self, points: Sequence, scalars: Sequence[int]):
        if len(points) != len(scalars):
            raise ValueError(f"points and scalars must have same length: {len(points)} != {len(scalars)}")

        result = INFINITY
        for p, s in zip(points, scalars):
            result = self.add(result, self.mul(p, s))
        return result

    def to_bytes(self, p) -> bytes:
        if self.is_identity(p):
            return IDENTITY_BYTES
        return p.to_bytes('compressed')

    def from_bytes(self, data: bytes):
        if len(data) != POINT_SIZE:
            raise DecodeError(f"point must be {POINT_SIZE} bytes, got {len(data)}")
        if data == IDENTITY_BYTES:
            return INFINITY
        if int.from_bytes(data[1:], 'big') >= self.curve.p():
            raise DecodeError("point x-coordinate is not reduced")
        try:
            p = PointJacobi.from_bytes(self.curve, data, valid_encodings=('compressed',), order=self.order)
        except MalformedPointError as e:
            raise DecodeError(f"invalid point encoding: {e}") from e
        # x >= p would otherwise decode to the same point as x - p
        if p.to_bytes('compressed') != data:
            raise DecodeError("non-canonical point encoding")
        return p
