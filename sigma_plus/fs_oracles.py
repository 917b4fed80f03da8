"""
Fiat-Shamir Random Oracles
===========================

Hash functions that replace the interactive verifier's random coins.

Random Oracles:
---------------
- challenge: the proof challenge x, bound to an ordered list of group elements
- batch_weights: per-proof weights y_t for deterministic batch verification

Domain Separation:
------------------
Each oracle uses a different prefix:
- challenge uses prefix b"SIGMA+/CHALLENGE"
- batch_weights uses prefix b"SIGMA+/BATCH-WEIGHTS"

Group elements and scalars are absorbed through their canonical fixed-width
encodings, so prover and verifier derive identical values on any platform.
"""

import hashlib
from typing import List, Sequence

from .groups import GroupOps, Point, Scalar, ScalarField
from .proof import SigmaPlusProof
from .serialization import serialize_proof

CHALLENGE_PREFIX = b"SIGMA+/CHALLENGE"
WEIGHTS_PREFIX = b"SIGMA+/BATCH-WEIGHTS"


def _serialize_for_hash(group: GroupOps, prefix: bytes, elements: Sequence[Point], context: bytes = b"") -> bytes:
    """
    Serialize a prefix, length-prefixed context and group elements for hashing.

    The element count is included so that lists of different lengths never
    produce the same input.
    """
    result = prefix
    result += len(context).to_bytes(4, 'big') + context
    result += len(elements).to_bytes(4, 'big')
    for elem in elements:
        result += group.to_bytes(elem)
    return result


def challenge(field: ScalarField, group: GroupOps, elements: Sequence[Point], context: bytes = b"") -> Scalar:
    """
    Random oracle for the proof challenge x.

    Parameters
    ----------
    field : ScalarField
        The scalar field
    group : GroupOps
        The group
    elements : Sequence[Point]
        Group elements to bind, in protocol order
    context : bytes, optional
        Extra binding data (e.g. a transaction hash)

    Returns
    -------
    Scalar
        x = H(prefix || context || elements) mapped into the field

    Notes
    -----
    Prover and verifier must call this with the same elements in the same
    order: A, B, C, D, Gk[0..m), Qk[0..m).
    """
    return field.hash_to_scalar(_serialize_for_hash(group, CHALLENGE_PREFIX, elements, context))


def proof_challenge(field: ScalarField, group: GroupOps, proof: SigmaPlusProof, context: bytes = b"") -> Scalar:
    """Challenge for a single proof: binds A, B, C, D, Gk, Qk."""
    return challenge(field, group, proof.group_elements(), context)


def aggregate_challenge(field: ScalarField, group: GroupOps, proofs: Sequence[SigmaPlusProof],
                        context: bytes = b"") -> Scalar:
    """
    One challenge shared by several proofs, as used with ``batchverify``.

    Binds every proof's A, B, C, D, Gk, Qk, proof by proof.
    """
    elements = []
    for proof in proofs:
        elements.extend(proof.group_elements())
    return challenge(field, group, elements, context)


def batch_weights(field: ScalarField, group: GroupOps, commitments: Sequence[Point], x: Scalar,
                  serials: Sequence[Scalar], proofs: Sequence[SigmaPlusProof]) -> List[Scalar]:
    """
    Deterministic random oracle for the batch weights (y_1, ..., y_M).

    Every batch input is absorbed (commitments, challenge, serials and the
    serialized proofs), so a prover cannot choose proofs after seeing the
    weights, and every node derives the same weights.

    Parameters
    ----------
    field : ScalarField
        The scalar field
    group : GroupOps
        The group
    commitments : Sequence[Point]
        The anonymity set
    x : Scalar
        The shared challenge
    serials : Sequence[Scalar]
        Per-proof serial numbers
    proofs : Sequence[SigmaPlusProof]
        The proofs in the batch

    Returns
    -------
    List[Scalar]
        One nonzero weight per proof
    """
    base_input = _serialize_for_hash(group, WEIGHTS_PREFIX, commitments)
    base_input += field.to_bytes(x)
    for serial in serials:
        base_input += field.to_bytes(serial)
    for proof in proofs:
        base_input += serialize_proof(proof, field, group)
    seed = hashlib.sha256(base_input).digest()

    weights = []
    counter = 0
    while len(weights) < len(proofs):
        y = field.hash_to_scalar(seed + counter.to_bytes(8, 'big'))
        counter += 1
        if not field.is_zero(y):
            weights.append(y)
    return weights
