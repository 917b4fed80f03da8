"""
Proof Record
============

``SigmaPlusProof`` is the data a prover hands to a verifier. It is created
once and never mutated; sequences are stored as tuples.

Fields (n = digit base, m = digit count):
- A, B, C, D: commitments to the blinders, the digit bits and their products
- f: m·(n-1) digit responses (the response for digit value 0 is implied)
- Gk, Qk: m group elements each, one per power of the challenge
- ZA, ZC: blinding responses for the A/B and C/D openings
- zV, zR: responses for the double commitment of the hidden coin
"""

from dataclasses import dataclass, replace
from typing import List, Tuple

from .groups import Point, Scalar


@dataclass(frozen=True)
class SigmaPlusProof:
    A: Point
    B: Point
    C: Point
    D: Point
    f: Tuple[Scalar, ...]
    Gk: Tuple[Point, ...]
    Qk: Tuple[Point, ...]
    ZA: Scalar
    ZC: Scalar
    zV: Scalar
    zR: Scalar

    def __post_init__(self):
        object.__setattr__(self, 'f', tuple(self.f))
        object.__setattr__(self, 'Gk', tuple(self.Gk))
        object.__setattr__(self, 'Qk', tuple(self.Qk))

    def group_elements(self) -> List[Point]:
        """All group-valued fields in challenge binding order: A, B, C, D, Gk, Qk."""
        return [self.A, self.B, self.C, self.D, *self.Gk, *self.Qk]

    def scalars(self) -> List[Scalar]:
        return [*self.f, self.ZA, self.ZC, self.zV, self.zR]

    def has_shape(self, n: int, m: int) -> bool:
        return len(self.f) == m * (n - 1) and len(self.Gk) == m and len(self.Qk) == m

    def with_changes(self, **changes) -> "SigmaPlusProof":
        """Copy of this proof with some fields replaced."""
        return replace(self, **changes)
