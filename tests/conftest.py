"""
Shared fixtures: backends, parameter sets and anonymity-set builders.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from sigma_plus import SigmaPlusProver, SigmaPlusVerifier, keygen_params, setup


@pytest.fixture(scope="session")
def backend():
    """secp256k1 field and group."""
    return setup('secp256k1')


@pytest.fixture(scope="session")
def make_system(backend):
    """
    Factory for (params, prover, verifier) bundles, cached per (n, m, weight_mode).
    """
    cache = {}

    def _make(n, m, weight_mode='random'):
        key = (n, m, weight_mode)
        if key not in cache:
            params = keygen_params(n=n, m=m, backend=backend)
            cache[key] = {
                'params': params,
                'field': params['field'],
                'group': params['group'],
                'n': n,
                'm': m,
                'prover': SigmaPlusProver.from_params(params),
                'verifier': SigmaPlusVerifier.from_params(params, weight_mode=weight_mode),
            }
        return cache[key]

    return _make


@pytest.fixture(scope="session")
def make_anonymity_set():
    """
    Factory for an anonymity set of random coins with known openings at chosen indices.

    Returns the commitments and, per chosen index, the (serial, v, r) opening.
    """

    def _make(system, size, indices, serials=None):
        field = system['field']
        prover = system['prover']

        commitments = [prover.commit_coin(field.random(), field.random(), field.random()) for _ in range(size)]
        openings = {}
        for t, l in enumerate(indices):
            s = field.zero() if serials is None else serials[t]
            v, r = field.random(), field.random()
            commitments[l] = prover.commit_coin(s, v, r)
            openings[l] = (s, v, r)
        return commitments, openings

    return _make
