"""
Tests for batch verification.

Several coins of one anonymity set are spent with proofs that share one
challenge; each proof is checked against the set shifted by its serial.
"""

import pytest

from sigma_plus import FailureKind
from sigma_plus.config import WeightMode
from sigma_plus.fs_oracles import aggregate_challenge, batch_weights, challenge


def spend(system, commitments, spends, context=b""):
    """
    Prove every (l, serial, v, r) in ``spends`` under one shared challenge.

    Returns (x, serials, proofs).
    """
    field, group, prover = system['field'], system['group'], system['prover']

    states = []
    for l, serial, v, r in spends:
        states.append(prover.prove_initial(prover.offset_commitments(commitments, serial), l, v, r))

    elements = []
    for state in states:
        elements.extend(state.group_elements())
    x = challenge(field, group, elements, context)

    proofs = [prover.prove_final(state, x) for state in states]
    return x, [serial for _, serial, _, _ in spends], proofs


@pytest.fixture(scope="module", params=["random", "deterministic"])
def system(request, make_system):
    return make_system(2, 3, weight_mode=request.param)


@pytest.fixture(scope="module")
def batch(system, make_anonymity_set):
    """Three coins at indices 1, 4 and 6 of a full set, spent together."""
    field = system['field']
    indices = [1, 4, 6]
    serials = [field.random() for _ in indices]
    commitments, openings = make_anonymity_set(system, 8, indices, serials=serials)

    spends = [(l,) + openings[l] for l in indices]
    x, serials, proofs = spend(system, commitments, spends)
    return commitments, x, serials, proofs


# ============================================================================
# Completeness
# ============================================================================

def test_batchverify_positive(system, batch):
    commitments, x, serials, proofs = batch
    assert system['verifier'].batchverify(commitments, x, serials, proofs), "Honest batch should verify"


def test_batchverify_single_proof(system, batch):
    commitments, x, serials, proofs = batch
    assert system['verifier'].batchverify(commitments, x, serials[:1], proofs[:1])


def test_batchverify_shared_challenge_matches_aggregate(system, batch):
    """The prover's shared challenge is the aggregate challenge over the final proofs."""
    _, x, _, proofs = batch
    assert system['field'].eq(aggregate_challenge(system['field'], system['group'], proofs), x)


@pytest.mark.parametrize("size,indices", [(6, [2, 5]), (5, [4]), (1, [0])])
def test_batchverify_partial_set(system, make_anonymity_set, size, indices):
    field = system['field']
    serials = [field.random() for _ in indices]
    commitments, openings = make_anonymity_set(system, size, indices, serials=serials)

    x, serials, proofs = spend(system, commitments, [(l,) + openings[l] for l in indices])
    assert system['verifier'].batchverify(commitments, x, serials, proofs)


@pytest.mark.parametrize("l", [0, 3, 5])
def test_batchverify_matches_verify(system, make_anonymity_set, l):
    """
    A batch of one agrees with single verification against the shifted set,
    for valid and invalid proofs alike.
    """
    field = system['field']
    prover, verifier = system['prover'], system['verifier']
    serial = field.random()
    commitments, openings = make_anonymity_set(system, 6, [l], serials=[serial])

    x, serials, proofs = spend(system, commitments, [(l,) + openings[l]])
    shifted = prover.offset_commitments(commitments, serial)

    assert verifier.verify(shifted, proofs[0], challenge=x)
    assert verifier.batchverify(commitments, x, serials, proofs)

    bad = proofs[0].with_changes(zR=field.add(proofs[0].zR, field.one()))
    assert not verifier.verify(shifted, bad, challenge=x)
    assert not verifier.batchverify(commitments, x, serials, [bad])


# ============================================================================
# Rejection
# ============================================================================

def test_batchverify_negative_empty_set(system, batch):
    _, x, serials, proofs = batch
    result = system['verifier'].check_batch([], x, serials, proofs)
    assert not result.ok
    assert result.kind is FailureKind.SHAPE


def test_batchverify_negative_empty_batch(system, batch):
    commitments, x, _, _ = batch
    result = system['verifier'].check_batch(commitments, x, [], [])
    assert result.kind is FailureKind.SHAPE


def test_batchverify_negative_serial_count(system, batch):
    commitments, x, serials, proofs = batch
    result = system['verifier'].check_batch(commitments, x, serials[:2], proofs)
    assert result.kind is FailureKind.SHAPE


def test_batchverify_negative_wrong_serial(system, batch):
    """A proof checked against another coin's serial fails the batch equation."""
    commitments, x, serials, proofs = batch
    swapped = [serials[1], serials[0], serials[2]]

    result = system['verifier'].check_batch(commitments, x, swapped, proofs)
    assert result.kind is FailureKind.EQUATION


def test_batchverify_negative_wrong_challenge(system, batch):
    commitments, x, serials, proofs = batch
    field = system['field']
    result = system['verifier'].check_batch(commitments, field.add(x, field.one()), serials, proofs)
    assert result.kind is FailureKind.CONSISTENCY
    assert result.index == 0


def test_batchverify_negative_tampered_proof(system, batch):
    """One bad proof sinks the whole batch."""
    commitments, x, serials, proofs = batch
    field = system['field']
    tampered = list(proofs)
    tampered[2] = proofs[2].with_changes(zV=field.add(proofs[2].zV, field.one()))

    result = system['verifier'].check_batch(commitments, x, serials, tampered)
    assert result.kind is FailureKind.EQUATION


def test_batchverify_negative_degenerate_proof_index(system, batch):
    """Per-proof checks report the position of the offending proof."""
    commitments, x, serials, proofs = batch
    tampered = list(proofs)
    tampered[1] = proofs[1].with_changes(f=(x,) + proofs[1].f[1:])

    result = system['verifier'].check_batch(commitments, x, serials, tampered)
    assert result.kind is FailureKind.DEGENERATE_CHALLENGE
    assert result.index == 1


def test_batchverify_negative_bad_shape_index(system, batch):
    commitments, x, serials, proofs = batch
    tampered = list(proofs)
    tampered[2] = proofs[2].with_changes(Gk=proofs[2].Gk[:-1])

    result = system['verifier'].check_batch(commitments, x, serials, tampered)
    assert result.kind is FailureKind.SHAPE
    assert result.index == 2


def test_batchverify_negative_unreduced_serial(system, batch):
    commitments, x, serials, proofs = batch
    bad = list(serials)
    bad[0] = serials[0] + system['field'].order

    result = system['verifier'].check_batch(commitments, x, bad, proofs)
    assert result.kind is FailureKind.MEMBERSHIP
    assert result.index == 0


# ============================================================================
# Batch weights
# ============================================================================

def test_weight_mode(system):
    assert system['verifier'].weight_mode in (WeightMode.RANDOM, WeightMode.DETERMINISTIC)


def test_batch_weights_reproducible(system, batch):
    """Deterministic weights depend only on the batch inputs."""
    commitments, x, serials, proofs = batch
    field, group = system['field'], system['group']

    first = batch_weights(field, group, commitments, x, serials, proofs)
    second = batch_weights(field, group, commitments, x, serials, proofs)
    assert first == second
    assert len(first) == len(proofs)
    assert all(not field.is_zero(y) for y in first)


def test_batch_weights_bind_inputs(system, batch):
    commitments, x, serials, proofs = batch
    field, group = system['field'], system['group']

    base = batch_weights(field, group, commitments, x, serials, proofs)
    assert batch_weights(field, group, commitments, x, serials[::-1], proofs) != base
    assert batch_weights(field, group, commitments[:-1], x, serials, proofs) != base
    assert batch_weights(field, group, commitments, x, serials[:2], proofs[:2]) != base[:2]
