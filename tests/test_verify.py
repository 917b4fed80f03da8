"""
Tests for single-proof verification.

Covers completeness over several (n, m), partial anonymity sets, and the
rejection paths: shape, membership, degenerate challenge, A/B/C/D
consistency and the main equation.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest
from ecdsa.ellipticcurve import INFINITY, PointJacobi

from sigma_plus import FailureKind, SigmaPlusVerifier, serialize_proof
from sigma_plus.errors import ParameterError
from sigma_plus.fs_oracles import proof_challenge
from sigma_plus.serialization import proof_size


@pytest.fixture(scope="module")
def system(make_system):
    """n=2, m=3: anonymity sets of up to 8 coins."""
    return make_system(2, 3)


@pytest.fixture(scope="module")
def honest(system, make_anonymity_set):
    """A valid proof for index 3 of a full set of 8 commitments."""
    commitments, openings = make_anonymity_set(system, 8, [3])
    _, v, r = openings[3]
    proof = system['prover'].prove(commitments, 3, v, r)
    return commitments, proof


# ============================================================================
# Completeness
# ============================================================================

def test_verify_positive(system, honest):
    """A proof for index 3 of a full set verifies."""
    commitments, proof = honest
    assert system['verifier'].verify(commitments, proof), "Honest proof should verify"

    result = system['verifier'].check(commitments, proof)
    assert result.ok and result.kind is None
    assert bool(result)


@pytest.mark.parametrize("n,m,l", [(2, 1, 1), (2, 3, 0), (2, 3, 7), (3, 2, 4), (4, 2, 15)])
def test_verify_positive_parameters(make_system, make_anonymity_set, n, m, l):
    """Completeness over several digit bases and digit counts."""
    system = make_system(n, m)
    commitments, openings = make_anonymity_set(system, n ** m, [l])
    _, v, r = openings[l]

    proof = system['prover'].prove(commitments, l, v, r)
    assert system['verifier'].verify(commitments, proof), f"Proof for n={n}, m={m}, l={l} should verify"


@pytest.mark.parametrize("size,l", [(1, 0), (5, 0), (5, 4), (6, 2), (6, 5), (7, 6)])
def test_verify_positive_partial_set(system, make_anonymity_set, size, l):
    """Sets smaller than n^m verify, including a proof for the last commitment."""
    commitments, openings = make_anonymity_set(system, size, [l])
    _, v, r = openings[l]

    proof = system['prover'].prove(commitments, l, v, r)
    assert system['verifier'].verify(commitments, proof), f"Proof for l={l} of {size} should verify"


def test_verify_with_explicit_challenge(system, honest):
    """Passing the recomputed challenge explicitly gives the same answer."""
    commitments, proof = honest
    x = proof_challenge(system['field'], system['group'], proof)
    assert system['verifier'].verify(commitments, proof, challenge=x)


def test_verify_with_context(system, make_anonymity_set):
    """A proof bound to a context only verifies under that context's challenge."""
    field, group = system['field'], system['group']
    commitments, openings = make_anonymity_set(system, 8, [5])
    _, v, r = openings[5]

    proof = system['prover'].prove(commitments, 5, v, r, context=b"tx-1")
    x = proof_challenge(field, group, proof, context=b"tx-1")

    assert system['verifier'].verify(commitments, proof, challenge=x)
    assert not system['verifier'].verify(commitments, proof), "Default challenge differs from context challenge"


def test_verify_from_threads(system, honest):
    """One verifier instance can be shared between threads."""
    commitments, proof = honest
    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(lambda _: system['verifier'].verify(commitments, proof), range(4)))
    assert all(results)


# ============================================================================
# Equation failures
# ============================================================================

def test_verify_negative_wrong_challenge(system, honest):
    """A different challenge breaks the A/B/C/D identity."""
    commitments, proof = honest
    field = system['field']
    x = proof_challenge(field, system['group'], proof)

    result = system['verifier'].check(commitments, proof, challenge=field.add(x, field.one()))
    assert not result.ok
    assert result.kind is FailureKind.CONSISTENCY


def test_verify_negative_tampered_zv(system, honest):
    """Changing zV leaves every check but the main equation intact."""
    commitments, proof = honest
    field = system['field']
    tampered = proof.with_changes(zV=field.add(proof.zV, field.one()))

    result = system['verifier'].check(commitments, tampered)
    assert not result.ok
    assert result.kind is FailureKind.EQUATION


def test_verify_negative_corrupted_zv_bytes(system, honest):
    """Flipping the last byte of zV in wire format is rejected."""
    commitments, proof = honest
    field, group = system['field'], system['group']
    data = bytearray(serialize_proof(proof, field, group))

    zv_end = proof_size(2, 3, field, group) - 2 * field.size
    data[zv_end - 1] ^= 0x01

    assert system['verifier'].verify_serialized(commitments, bytes(data)) is False


def test_verify_negative_different_set(system, honest, make_anonymity_set):
    """The proof does not transfer to a set without the prover's coin."""
    _, proof = honest
    other, _ = make_anonymity_set(system, 8, [])

    result = system['verifier'].check(other, proof)
    assert result.kind is FailureKind.EQUATION


def test_verify_negative_replaced_coin(system, honest):
    """Replacing the prover's coin in the set breaks the equation."""
    commitments, proof = honest
    field = system['field']
    modified = list(commitments)
    modified[3] = system['prover'].commit_coin(field.zero(), field.random(), field.random())

    assert not system['verifier'].verify(modified, proof)


def test_verify_negative_truncated_set(system, honest):
    """Dropping commitments after the prover's index changes the padding."""
    commitments, proof = honest
    assert not system['verifier'].verify(commitments[:6], proof)


def test_verify_negative_nonzero_serial(system, make_anonymity_set):
    """A coin with nonzero serial does not open to zero; the prover refuses it."""
    field = system['field']
    commitments, openings = make_anonymity_set(system, 8, [2], serials=[field.from_int(42)])
    _, v, r = openings[2]

    with pytest.raises(ParameterError):
        system['prover'].prove(commitments, 2, v, r)


# ============================================================================
# Structural failures
# ============================================================================

def test_verify_negative_degenerate_response(system, honest):
    """A stored response equal to the challenge is rejected."""
    commitments, proof = honest
    x = proof_challenge(system['field'], system['group'], proof)

    degenerate = proof.with_changes(f=(x,) + proof.f[1:])
    result = system['verifier'].check(commitments, degenerate)
    assert result.kind is FailureKind.DEGENERATE_CHALLENGE

    result = system['verifier'].check(commitments, degenerate, challenge=x)
    assert result.kind is FailureKind.DEGENERATE_CHALLENGE


def test_verify_negative_off_curve_point(system, honest):
    """A point that is not on the curve is rejected before any arithmetic."""
    commitments, proof = honest
    off_curve = PointJacobi(system['group'].curve, 1, 1, 1)

    result = system['verifier'].check(commitments, proof.with_changes(A=off_curve))
    assert result.kind is FailureKind.MEMBERSHIP


@pytest.mark.parametrize("field_name", ["A", "B", "C", "D"])
def test_verify_negative_identity_point(system, honest, field_name):
    commitments, proof = honest
    result = system['verifier'].check(commitments, proof.with_changes(**{field_name: INFINITY}))
    assert result.kind is FailureKind.MEMBERSHIP


def test_verify_negative_identity_in_gk_qk(system, honest):
    commitments, proof = honest
    gk = (INFINITY,) + proof.Gk[1:]
    qk = proof.Qk[:-1] + (INFINITY,)

    assert system['verifier'].check(commitments, proof.with_changes(Gk=gk)).kind is FailureKind.MEMBERSHIP
    assert system['verifier'].check(commitments, proof.with_changes(Qk=qk)).kind is FailureKind.MEMBERSHIP


@pytest.mark.parametrize("field_name", ["ZA", "ZC", "zV", "zR"])
def test_verify_negative_zero_scalar(system, honest, field_name):
    """Zero responses are rejected as non-members."""
    commitments, proof = honest
    result = system['verifier'].check(commitments, proof.with_changes(**{field_name: 0}))
    assert result.kind is FailureKind.MEMBERSHIP


def test_verify_negative_zero_f(system, honest):
    commitments, proof = honest
    result = system['verifier'].check(commitments, proof.with_changes(f=proof.f[:-1] + (0,)))
    assert result.kind is FailureKind.MEMBERSHIP


def test_verify_negative_unreduced_scalar(system, honest):
    commitments, proof = honest
    q = system['field'].order
    result = system['verifier'].check(commitments, proof.with_changes(ZA=proof.ZA + q))
    assert result.kind is FailureKind.MEMBERSHIP


def test_verify_negative_wrong_shape(system, honest):
    """Proofs whose f, Gk or Qk lengths do not match (n, m) are rejected."""
    commitments, proof = honest
    verifier = system['verifier']

    assert verifier.check(commitments, proof.with_changes(f=proof.f[:-1])).kind is FailureKind.SHAPE
    assert verifier.check(commitments, proof.with_changes(Gk=proof.Gk[:-1])).kind is FailureKind.SHAPE
    assert verifier.check(commitments, proof.with_changes(Qk=proof.Qk + proof.Qk[:1])).kind is FailureKind.SHAPE


def test_verify_negative_set_size(system, honest):
    """Empty sets and sets larger than n^m are rejected."""
    commitments, proof = honest
    verifier = system['verifier']

    assert verifier.check([], proof).kind is FailureKind.SHAPE
    assert verifier.check(list(commitments) + [commitments[0]], proof).kind is FailureKind.SHAPE


def test_verify_negative_proof_for_other_parameters(make_system, honest):
    """A proof for (2, 3) is the wrong shape for a (4, 2) verifier."""
    commitments, proof = honest
    other = make_system(4, 2)
    assert other['verifier'].check(commitments, proof).kind is FailureKind.SHAPE


def test_verify_serialized_wrong_length(system, honest):
    commitments, proof = honest
    data = serialize_proof(proof, system['field'], system['group'])

    assert system['verifier'].check_serialized(commitments, data[:-1]).kind is FailureKind.SHAPE
    assert system['verifier'].check_serialized(commitments, data + b"\x00").kind is FailureKind.SHAPE


def test_verify_serialized_identity_encoding(system, honest):
    """An identity point decodes but is rejected by the membership check."""
    commitments, proof = honest
    group = system['group']
    data = bytearray(serialize_proof(proof, system['field'], group))
    data[0:group.size] = b"\x00" * group.size

    assert system['verifier'].check_serialized(commitments, bytes(data)).kind is FailureKind.MEMBERSHIP


# ============================================================================
# Construction
# ============================================================================

def test_verifier_rejects_bad_parameters(system):
    params = system['params']
    field, group, g, h = params['field'], params['group'], params['g'], params['h']

    with pytest.raises(ParameterError):
        SigmaPlusVerifier(field, group, g, h, 1, 3)
    with pytest.raises(ParameterError):
        SigmaPlusVerifier(field, group, g, h, 2, 0)
    with pytest.raises(ParameterError):
        SigmaPlusVerifier(field, group, g, h[:5], 2, 3)
    with pytest.raises(ValueError):
        SigmaPlusVerifier(field, group, g, h, 2, 3, weight_mode="sometimes")


def test_verifier_capacity(system):
    assert system['verifier'].capacity == 8
