"""
Sigma+ One-out-of-Many Proofs
=============================

Verifier (and reference prover) for the Sigma+/Lelantus one-out-of-many
zero-knowledge proof: a spender shows that a hidden coin is one of a public
anonymity set of commitments without revealing which one or its value.

The verifier is generic over the algebra: it is handed a scalar-field and a
group capability object at construction (see ``groups``). Backends are
provided for secp256k1 (via ``ecdsa``) and for G1 of charm-crypto pairing
groups.

Modules:
--------
- groups: Capability protocols and backend setup
- secp256k1 / pairing: Concrete backends
- params: Generator derivation (g, h_0 ... h_{L-1})
- fs_oracles: Fiat-Shamir challenge and deterministic batch weights
- utils: Digit decomposition, Pedersen and double commitments
- proof / serialization: Proof record and its wire layout
- verify: SigmaPlusVerifier (verify, batchverify, diagnostics)
- prover: Reference prover
- config: Environment-driven defaults

Usage:
------
    from sigma_plus import setup, keygen_params, SigmaPlusProver, SigmaPlusVerifier

    params = keygen_params(n=2, m=3, backend=setup('secp256k1'))
    prover = SigmaPlusProver.from_params(params)
    verifier = SigmaPlusVerifier.from_params(params)

    proof = prover.prove(commitments, l, v, r)
    assert verifier.verify(commitments, proof)
"""

__version__ = "0.1.0"

from .errors import FailureKind, VerifyResult
from .groups import setup
from .params import keygen_params
from .proof import SigmaPlusProof
from .prover import SigmaPlusProver
from .serialization import deserialize_proof, serialize_proof
from .utils import decompose, recompose
from .verify import SigmaPlusVerifier

__all__ = [
    'setup', 'keygen_params', 'SigmaPlusProof', 'SigmaPlusProver', 'SigmaPlusVerifier',
    'serialize_proof', 'deserialize_proof', 'decompose', 'recompose', 'FailureKind', 'VerifyResult',
]
