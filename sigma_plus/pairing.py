"""
Pairing-Group Backend
=====================

Binds the ``ScalarField`` / ``GroupOps`` capabilities to G1 and ZR of a
charm-crypto ``PairingGroup``. Only G1 is used: the proof system needs a
prime-order group, not the pairing.

According to charm-crypto documentation:
- Group operations use * for the group law and ** for exponentiation
- group.init(G1, 1) is the identity element
- group.hash(data, ZR) / group.hash(data, G1) hash bytes into ZR / G1
- group.serialize(elem) / group.deserialize(data) round-trip elements

This module translates that multiplicative notation into the additive
calls the verifier makes.
"""

from typing import Sequence, Tuple

from charm.toolbox.pairinggroup import PairingGroup, ZR, G1

from .errors import DecodeError


class PairingField:
    """ZR of a charm pairing group."""

    def __init__(self, group: PairingGroup):
        self.group = group
        self.order = int(group.order())
        self.size = (self.order.bit_length() + 7) // 8

    def zero(self):
        return self.group.init(ZR, 0)

    def one(self):
        return self.group.init(ZR, 1)

    def from_int(self, value: int):
        return self.group.init(ZR, value % self.order)

    def to_int(self, a) -> int:
        return int(a) % self.order

    def add(self, a, b):
        return a + b

    def sub(self, a, b):
        return a - b

    def mul(self, a, b):
        return a * b

    def neg(self, a):
        return -a

    def eq(self, a, b) -> bool:
        return self.to_int(a) == self.to_int(b)

    def is_zero(self, a) -> bool:
        return self.to_int(a) == 0

    def is_member(self, a) -> bool:
        try:
            return self.group.ismember(a)
        except TypeError:
            return False

    def random(self):
        while True:
            a = self.group.random(ZR)
            if not self.is_zero(a):
                return a

    def hash_to_scalar(self, data: bytes):
        return self.group.hash(data, ZR)

    def to_bytes(self, a) -> bytes:
        return self.to_int(a).to_bytes(self.size, 'big')

    def from_bytes(self, data: bytes):
        if len(data) != self.size:
            raise DecodeError(f"scalar must be {self.size} bytes, got {len(data)}")
        value = int.from_bytes(data, 'big')
        if value >= self.order:
            raise DecodeError("scalar encoding is not reduced modulo the group order")
        return self.group.init(ZR, value)


class PairingG1:
    """G1 of a charm pairing group, additive notation."""

    def __init__(self, group: PairingGroup, generator_seed: bytes = b"sigma-plus/pairing/g1"):
        self.group = group
        self._identity = group.init(G1, 1)
        self._generator = group.hash(generator_seed, G1)
        self.size = len(group.serialize(self._generator))

    def identity(self):
        return self._identity

    def generator(self):
        return self._generator

    def is_identity(self, p) -> bool:
        return p == self._identity

    def add(self, p, q):
        return p * q

    def mul(self, p, s):
        return p ** s

    def eq(self, p, q) -> bool:
        return p == q

    def is_member(self, p) -> bool:
        try:
            return self.group.ismember(p)
        except TypeError:
            return False

    def hash_to_point(self, data: bytes):
        return self.group.hash(data, G1)

    def multiexp(self, points: Sequence, scalars: Sequence):
        if len(points) != len(scalars):
            raise ValueError(f"points and scalars must have same length: {len(points)} != {len(scalars)}")

        result = self.group.init(G1, 1)
        for base, exp in zip(points, scalars):
            result *= base ** exp
        return result

    def to_bytes(self, p) -> bytes:
        if self.is_identity(p):
            return b"\x00" * self.size
        data = self.group.serialize(p)
        if len(data) != self.size:
            raise DecodeError(f"unexpected G1 encoding length {len(data)}")
        return data

    def from_bytes(self, data: bytes):
        if len(data) != self.size:
            raise DecodeError(f"point must be {self.size} bytes, got {len(data)}")
        if data == b"\x00" * self.size:
            return self._identity
        try:
            p = self.group.deserialize(data)
        except Exception as e:
            # charm reports malformed input with assorted exception types
            raise DecodeError(f"invalid G1 encoding: {e}") from e
        if p is None or self.group.serialize(p) != data:
            raise DecodeError("non-canonical G1 encoding")
        return p


def pairing_backend(group_name: str = 'BN254') -> Tuple[PairingField, PairingG1]:
    """
    Build the (field, group) capability pair for a charm pairing curve.

    Parameters
    ----------
    group_name : str, optional
        The pairing curve identifier, e.g. 'BN254', 'MNT224', 'SS512'.

    Returns
    -------
    tuple
        (PairingField, PairingG1) sharing one ``PairingGroup``
    """
    group = PairingGroup(group_name)
    return PairingField(group), PairingG1(group)
