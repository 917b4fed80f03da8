"""
Sigma+ Verification
===================

Verifier for one-out-of-many ("Sigma+/Lelantus") proofs: a proof shows that
one commitment of a public anonymity set opens to zero in its g-component,
without revealing which one.

Verification pipeline (single proof):
-------------------------------------
1. Shape: |f| = m(n-1), |Gk| = |Qk| = m, 1 <= N <= n^m
2. Membership: group fields on-curve and not the identity, scalars nonzero
3. Challenge: x = H(A, B, C, D, Gk, Qk) unless supplied by the caller
4. compute_fs: rebuild the m×n response table, f_{j,0} = x - Σ_{i>0} f_{j,i};
   reject any stored response equal to x
5. abcd_checks: B·x + A + C·x + D = commit(f + f(x-f), ZA + ZC)
6. Main equation:
       Σ_i f_i·C_i - Σ_k x^k·(Gk_k + Qk_k) = h0·zV + h1·zR
   where f_i = ∏_j f_{j, i_j} over the base-n digits of i

Batch verification folds M proofs sharing one anonymity set and one
challenge into a single multi-exponentiation, each proof weighted by an
independent nonzero y_t (Schwartz-Zippel): a false proof survives the
combined check only with probability about 1/q.

Anonymity sets smaller than n^m:
--------------------------------
The prover pads the set to n^m entries by repeating the last commitment.
The verifier folds the padded indices into the coefficient of the last
commitment:

    Σ_{i>=s} ∏_j f_{j,i_j} = ∏_j f_{j,s_j}
                             + Σ_j (Σ_{t>s_j} f_{j,t}) · x^j · ∏_{k>j} f_{k,s_k}

with s = N-1, using the fact that every row of the response table sums to x.
For N = n^m this is just the product for index n^m - 1.

All failures are reported as False by verify/batchverify; check and
check_batch return a VerifyResult with the failure kind for diagnostics.
"""

import logging
from typing import List, Optional, Sequence

from .config import WeightMode, config
from .errors import (
    ConsistencyError, DecodeError, DegenerateChallengeError, EquationError, MembershipError,
    ParameterError, ShapeError, VerificationError, VerifyResult,
)
from .fs_oracles import batch_weights, proof_challenge
from .groups import GroupOps, Point, Scalar, ScalarField
from .params import generator_count
from .proof import SigmaPlusProof
from .serialization import deserialize_proof, proof_size
from .utils import commit, decompose, double_commit, powers

logger = logging.getLogger(__name__)


class SigmaPlusVerifier:
    """
    Stateless verifier for Sigma+ one-out-of-many proofs.

    The instance only carries immutable configuration, so one verifier can
    be shared between threads.

    Parameters
    ----------
    field : ScalarField
        The scalar field capability
    group : GroupOps
        The group capability
    g : Point
        Blinding generator
    h : Sequence[Point]
        At least max(2, n·m) generators; h[0], h[1] are the double-commitment
        generators
    n : int
        Digit base
    m : int
        Digit count
    weight_mode : WeightMode or str, optional
        How batchverify draws its weights. Defaults to config.weight_mode.
    """

    def __init__(self, field: ScalarField, group: GroupOps, g: Point, h: Sequence[Point],
                 n: int, m: int, weight_mode=None):
        if n < 2:
            raise ParameterError(f"Digit base n={n} must be at least 2")
        if m < 1:
            raise ParameterError(f"Digit count m={m} must be at least 1")
        if len(h) < generator_count(n, m):
            raise ParameterError(f"Need at least {generator_count(n, m)} h generators, got {len(h)}")

        self.field = field
        self.group = group
        self.g = g
        self.h = tuple(h)
        self.n = n
        self.m = m
        self.weight_mode = config.weight_mode if weight_mode is None else WeightMode(weight_mode)

    @classmethod
    def from_params(cls, params: dict, weight_mode=None) -> "SigmaPlusVerifier":
        """Build a verifier from the dict returned by params.keygen_params()."""
        return cls(params['field'], params['group'], params['g'], params['h'],
                   params['n'], params['m'], weight_mode=weight_mode)

    @property
    def capacity(self) -> int:
        return self.n ** self.m

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def verify(self, commitments: Sequence[Point], proof: SigmaPlusProof,
               challenge: Optional[Scalar] = None) -> bool:
        """
        Verify a single proof against the anonymity set ``commitments``.

        Parameters
        ----------
        commitments : Sequence[Point]
            The anonymity set, 1 <= len <= n^m
        proof : SigmaPlusProof
            The proof
        challenge : Scalar, optional
            Externally fixed challenge. If None, x is recomputed from the
            proof's A, B, C, D, Gk, Qk.

        Returns
        -------
        bool
            True if the proof is valid
        """
        return self.check(commitments, proof, challenge).ok

    def batchverify(self, commitments: Sequence[Point], challenge: Scalar,
                    serials: Sequence[Scalar], proofs: Sequence[SigmaPlusProof]) -> bool:
        """
        Verify several proofs sharing one anonymity set and one challenge.

        Proof t is checked against the set shifted by its serial number,
        {C_i - g·serials[t]}, i.e. it shows that some C_i commits to
        serials[t] in its g-component.

        Parameters
        ----------
        commitments : Sequence[Point]
            The shared anonymity set
        challenge : Scalar
            The challenge all proofs were answered with
        serials : Sequence[Scalar]
            One serial number per proof
        proofs : Sequence[SigmaPlusProof]
            The proofs

        Returns
        -------
        bool
            True if every proof is valid (up to the batching soundness error)
        """
        return self.check_batch(commitments, challenge, serials, proofs).ok

    def verify_serialized(self, commitments: Sequence[Point], data: bytes,
                          challenge: Optional[Scalar] = None) -> bool:
        """Decode a proof in wire format and verify it; undecodable bytes are rejected."""
        return self.check_serialized(commitments, data, challenge).ok

    def check(self, commitments: Sequence[Point], proof: SigmaPlusProof,
              challenge: Optional[Scalar] = None) -> VerifyResult:
        """Like verify, but report why a proof was rejected."""
        try:
            self._verify(commitments, proof, challenge)
        except VerificationError as e:
            return self._rejected(e)
        return VerifyResult.success()

    def check_batch(self, commitments: Sequence[Point], challenge: Scalar,
                    serials: Sequence[Scalar], proofs: Sequence[SigmaPlusProof]) -> VerifyResult:
        """Like batchverify, but report why the batch was rejected."""
        try:
            self._batchverify(commitments, challenge, serials, proofs)
        except VerificationError as e:
            return self._rejected(e)
        return VerifyResult.success()

    def check_serialized(self, commitments: Sequence[Point], data: bytes,
                         challenge: Optional[Scalar] = None) -> VerifyResult:
        expected = proof_size(self.n, self.m, self.field, self.group)
        if len(data) != expected:
            return self._rejected(ShapeError(f"proof must be {expected} bytes, got {len(data)}"))
        try:
            proof = deserialize_proof(data, self.n, self.m, self.field, self.group)
        except DecodeError as e:
            return self._rejected(MembershipError(str(e)))
        return self.check(commitments, proof, challenge)

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    def shape_checks(self, commitments: Sequence[Point], proof: SigmaPlusProof, index: Optional[int] = None):
        if not commitments:
            raise ShapeError("anonymity set is empty", index)
        if len(commitments) > self.capacity:
            raise ShapeError(f"anonymity set has {len(commitments)} entries, capacity is {self.capacity}", index)
        if not isinstance(proof, SigmaPlusProof):
            raise ShapeError(f"expected SigmaPlusProof, got {type(proof).__name__}", index)
        if not proof.has_shape(self.n, self.m):
            raise ShapeError(
                f"proof shape |f|={len(proof.f)}, |Gk|={len(proof.Gk)}, |Qk|={len(proof.Qk)} "
                f"does not match n={self.n}, m={self.m}", index)

    def membership_checks(self, proof: SigmaPlusProof, index: Optional[int] = None):
        for k, p in enumerate(proof.group_elements()):
            if not self.group.is_member(p):
                raise MembershipError(f"group element {k} is not a valid group member", index)
            if self.group.is_identity(p):
                raise MembershipError(f"group element {k} is the identity", index)

        for k, s in enumerate(proof.f):
            if not self.field.is_member(s) or self.field.is_zero(s):
                raise MembershipError(f"response f[{k}] is zero or not a field element", index)

        for name in ('ZA', 'ZC', 'zV', 'zR'):
            s = getattr(proof, name)
            if not self.field.is_member(s) or self.field.is_zero(s):
                raise MembershipError(f"response {name} is zero or not a field element", index)

    def compute_fs(self, proof: SigmaPlusProof, x: Scalar, index: Optional[int] = None) -> List[Scalar]:
        """
        Rebuild the full m×n response table from the m(n-1) stored responses.

        Entry j·n + i is the response for digit position j and digit value i;
        the entry for i = 0 is x minus the sum of the others, so every row
        sums to x.
        """
        F = self.field
        for k, f_k in enumerate(proof.f):
            if F.eq(f_k, x):
                raise DegenerateChallengeError(f"response f[{k}] equals the challenge", index)

        stored = self.n - 1
        f_full = []
        for j in range(self.m):
            row = list(proof.f[j * stored:(j + 1) * stored])
            rest = F.zero()
            for f_ji in row:
                rest = F.add(rest, f_ji)
            f_full.append(F.sub(x, rest))
            f_full.extend(row)
        return f_full

    def abcd_checks(self, proof: SigmaPlusProof, x: Scalar, f_full: Sequence[Scalar],
                    index: Optional[int] = None):
        """B·x + A + C·x + D must equal commit(f + f(x-f), ZA + ZC)."""
        F, G = self.field, self.group
        f_plus_f_prime = [F.add(f, F.mul(f, F.sub(x, f))) for f in f_full]
        right = commit(G, self.g, self.h, f_plus_f_prime, F.add(proof.ZA, proof.ZC))
        left = G.multiexp([proof.B, proof.A, proof.C, proof.D], [x, F.one(), x, F.one()])
        if not G.eq(left, right):
            raise ConsistencyError("A/B/C/D commitment identity does not hold", index)

    # ------------------------------------------------------------------
    # Equation terms
    # ------------------------------------------------------------------

    def _digits(self, N: int) -> List[List[int]]:
        return [decompose(i, self.n, self.m) for i in range(N)]

    def _coefficients(self, f_full: Sequence[Scalar], x_powers: Sequence[Scalar],
                      digits: Sequence[Sequence[int]]) -> List[Scalar]:
        """Per-commitment exponents f_i; the last one also covers the padded indices."""
        F, n = self.field, self.n
        coefficients = []
        for I in digits[:-1]:
            f_i = F.one()
            for j, d in enumerate(I):
                f_i = F.mul(f_i, f_full[j * n + d])
            coefficients.append(f_i)
        coefficients.append(self._tail_coefficient(f_full, x_powers, digits[-1]))
        return coefficients

    def _tail_coefficient(self, f_full: Sequence[Scalar], x_powers: Sequence[Scalar],
                          s: Sequence[int]) -> Scalar:
        """Σ_{i >= s} ∏_j f_{j,i_j}, for s the digits of the last commitment index."""
        F, n, m = self.field, self.n, self.m

        # suffix[j] = ∏_{k>j} f_{k,s_k}
        suffix = [None] * m
        product = F.one()
        for j in reversed(range(m)):
            suffix[j] = product
            product = F.mul(product, f_full[j * n + s[j]])

        coefficient = product
        for j in range(m):
            tail = F.zero()
            for i in range(s[j] + 1, n):
                tail = F.add(tail, f_full[j * n + i])
            coefficient = F.add(coefficient, F.mul(F.mul(tail, x_powers[j]), suffix[j]))
        return coefficient

    def _gq_term(self, proof: SigmaPlusProof, x_powers: Sequence[Scalar]) -> Point:
        """-Σ_k x^k · (Gk[k] + Qk[k])"""
        neg_powers = [self.field.neg(x_k) for x_k in x_powers]
        return self.group.multiexp(list(proof.Gk) + list(proof.Qk), neg_powers + neg_powers)

    def _opening(self, proof: SigmaPlusProof) -> Point:
        return double_commit(self.group, self.g, self.field.zero(), self.h[0], proof.zV, self.h[1], proof.zR)

    def _weights(self, commitments, x, serials, proofs) -> List[Scalar]:
        if self.weight_mode is WeightMode.DETERMINISTIC:
            return batch_weights(self.field, self.group, commitments, x, serials, proofs)
        return [self.field.random() for _ in proofs]

    # ------------------------------------------------------------------
    # Pipelines
    # ------------------------------------------------------------------

    def _verify(self, commitments, proof, challenge):
        F, G = self.field, self.group
        self.shape_checks(commitments, proof)
        self.membership_checks(proof)

        if challenge is None:
            x = proof_challenge(F, G, proof)
        elif F.is_member(challenge):
            x = challenge
        else:
            raise ShapeError("challenge is not a field element")

        f_full = self.compute_fs(proof, x)
        self.abcd_checks(proof, x, f_full)

        x_powers = powers(F, x, self.m)
        coefficients = self._coefficients(f_full, x_powers, self._digits(len(commitments)))
        t1 = G.multiexp(list(commitments), coefficients)
        t2 = self._gq_term(proof, x_powers)

        if not G.eq(G.add(t1, t2), self._opening(proof)):
            raise EquationError("verification equation does not hold")

    def _batchverify(self, commitments, x, serials, proofs):
        F, G = self.field, self.group
        if not commitments:
            raise ShapeError("anonymity set is empty")
        if not proofs:
            raise ShapeError("batch contains no proofs")
        if len(serials) != len(proofs):
            raise ShapeError(f"{len(serials)} serials for {len(proofs)} proofs")
        if not F.is_member(x):
            raise ShapeError("challenge is not a field element")
        for t, serial in enumerate(serials):
            if not F.is_member(serial):
                raise MembershipError("serial is not a field element", t)

        f_tables = []
        for t, proof in enumerate(proofs):
            self.shape_checks(commitments, proof, t)
            self.membership_checks(proof, t)
            f_full = self.compute_fs(proof, x, t)
            self.abcd_checks(proof, x, f_full, t)
            f_tables.append(f_full)

        y = self._weights(commitments, x, serials, proofs)
        x_powers = powers(F, x, self.m)
        digits = self._digits(len(commitments))

        aggregated = [F.zero()] * len(commitments)
        t2 = G.identity()
        right = G.identity()
        exp = F.zero()
        for t, proof in enumerate(proofs):
            e = F.zero()
            for i, f_i in enumerate(self._coefficients(f_tables[t], x_powers, digits)):
                aggregated[i] = F.add(aggregated[i], F.mul(f_i, y[t]))
                e = F.add(e, f_i)

            exp = F.add(exp, F.mul(e, F.mul(serials[t], y[t])))
            t2 = G.add(t2, G.mul(self._gq_term(proof, x_powers), y[t]))
            right = G.add(right, G.mul(self._opening(proof), y[t]))

        right = G.add(right, G.mul(self.g, exp))
        t1 = G.multiexp(list(commitments), aggregated)

        if not G.eq(G.add(t1, t2), right):
            raise EquationError(f"batch equation over {len(proofs)} proofs does not hold")

    def _rejected(self, error: VerificationError) -> VerifyResult:
        result = VerifyResult.failure(error)
        if result.index is None:
            logger.debug("proof rejected (%s): %s", result.kind.value, result.detail)
        else:
            logger.debug("batch rejected at proof %d (%s): %s", result.index, result.kind.value, result.detail)
        return result
