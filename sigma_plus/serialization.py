"""
Proof wire layout
Fixed-width serialization of SigmaPlusProof, using the backend's canonical encodings

Layout: A || B || C || D || f[0..m(n-1)) || Gk[0..m) || Qk[0..m) || ZA || ZC || zV || zR

n and m are protocol parameters agreed out of band; they are not part of the encoding.
"""

from typing import List

from .errors import DecodeError
from .groups import GroupOps, ScalarField
from .proof import SigmaPlusProof


def proof_size(n: int, m: int, field: ScalarField, group: GroupOps) -> int:
    """Encoded size in bytes of a proof for parameters (n, m)"""
    num_points = 4 + 2 * m
    num_scalars = m * (n - 1) + 4
    return num_points * group.size + num_scalars * field.size


def serialize_proof(proof: SigmaPlusProof, field: ScalarField, group: GroupOps) -> bytes:
    """Serialize a proof into its fixed-width byte layout"""
    parts = [group.to_bytes(p) for p in (proof.A, proof.B, proof.C, proof.D)]
    parts += [field.to_bytes(s) for s in proof.f]
    parts += [group.to_bytes(p) for p in proof.Gk]
    parts += [group.to_bytes(p) for p in proof.Qk]
    parts += [field.to_bytes(s) for s in (proof.ZA, proof.ZC, proof.zV, proof.zR)]
    return b"".join(parts)


class _Reader:
    """Sequential reader over a byte string"""

    def __init__(self, data: bytes):
        self.data = data
        self.offset = 0

    def take(self, size: int) -> bytes:
        chunk = self.data[self.offset:self.offset + size]
        self.offset += size
        return chunk

    def points(self, group: GroupOps, count: int) -> List:
        return [group.from_bytes(self.take(group.size)) for _ in range(count)]

    def scalars(self, field: ScalarField, count: int) -> List:
        return [field.from_bytes(self.take(field.size)) for _ in range(count)]


def deserialize_proof(data: bytes, n: int, m: int, field: ScalarField, group: GroupOps) -> SigmaPlusProof:
    """
    Parse a proof serialized for parameters (n, m).

    Raises DecodeError if the length is wrong or any field is not a canonical
    encoding. Identity points decode successfully; rejecting them is the
    verifier's job.
    """
    expected = proof_size(n, m, field, group)
    if len(data) != expected:
        raise DecodeError(f"proof must be {expected} bytes for n={n}, m={m}, got {len(data)}")

    reader = _Reader(bytes(data))
    A, B, C, D = reader.points(group, 4)
    f = reader.scalars(field, m * (n - 1))
    Gk = reader.points(group, m)
    Qk = reader.points(group, m)
    ZA, ZC, zV, zR = reader.scalars(field, 4)

    return SigmaPlusProof(A=A, B=B, C=C, D=D, f=f, Gk=Gk, Qk=Qk, ZA=ZA, ZC=ZC, zV=zV, zR=zR)
