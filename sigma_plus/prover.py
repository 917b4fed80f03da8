"""
Proof Generation
================

Reference prover for Sigma+ one-out-of-many proofs. It produces the fixtures
the verifier is tested and benchmarked against.

Statement:
----------
Given an anonymity set (C_0, ..., C_{N-1}) and an index l with
C_l = h0·v + h1·r (a commitment to zero in its g-component), prove
knowledge of (l, v, r) without revealing l.

Protocol (two moves, made non-interactive with Fiat-Shamir):
------------------------------------------------------------
prove_initial:
    σ_{j,i} = [l_j == i]                  (digit bits of l)
    a_{j,i} random, a_{j,0} = -Σ_{i>0} a_{j,i}
    A = commit(a, rA)            B = commit(σ, rB)
    C = commit(a(1-2σ), rC)      D = commit(-a², rD)
    p_k(X) = ∏_j (σ_{j,k_j} X + a_{j,k_j}),  p_{k,j} = coefficient of X^j
    Gk_j = Σ_k p_{k,j}·C_k - h1·γ_j
    Qk_j = h0·ρ_j + h1·τ_j + h1·γ_j
prove_final (challenge x):
    f_{j,i} = σ_{j,i} x + a_{j,i}   for i > 0
    ZA = rB x + rA,  ZC = rC x + rD
    zV = v x^m - Σ_j ρ_j x^j,  zR = r x^m - Σ_j τ_j x^j

Sets with fewer than n^m entries are padded by repeating the last commitment.
"""

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from .errors import ParameterError
from .fs_oracles import challenge
from .groups import GroupOps, Point, Scalar, ScalarField
from .params import generator_count
from .proof import SigmaPlusProof
from .utils import commit, decompose, double_commit, powers


@dataclass
class ProverState:
    """Secret state kept between prove_initial and prove_final."""

    A: Point
    B: Point
    C: Point
    D: Point
    Gk: List[Point]
    Qk: List[Point]
    sigma: List[Scalar]
    a: List[Scalar]
    rA: Scalar
    rB: Scalar
    rC: Scalar
    rD: Scalar
    rho: List[Scalar]
    tau: List[Scalar]
    v: Scalar
    r: Scalar

    def group_elements(self) -> List[Point]:
        return [self.A, self.B, self.C, self.D, *self.Gk, *self.Qk]


def _poly(coeffs) -> np.poly1d:
    # object dtype keeps the full-width Python ints
    return np.poly1d(np.array(coeffs, dtype=object))


class SigmaPlusProver:
    """
    Prover matching ``SigmaPlusVerifier`` for the same (field, group, g, h, n, m).
    """

    def __init__(self, field: ScalarField, group: GroupOps, g: Point, h: Sequence[Point], n: int, m: int):
        if n < 2 or m < 1:
            raise ParameterError(f"Invalid parameters n={n}, m={m}")
        if len(h) < generator_count(n, m):
            raise ParameterError(f"Need at least {generator_count(n, m)} h generators, got {len(h)}")
        self.field = field
        self.group = group
        self.g = g
        self.h = tuple(h)
        self.n = n
        self.m = m

    @classmethod
    def from_params(cls, params: dict) -> "SigmaPlusProver":
        return cls(params['field'], params['group'], params['g'], params['h'], params['n'], params['m'])

    def commit_coin(self, s: Scalar, v: Scalar, r: Scalar) -> Point:
        """Coin commitment g·s + h0·v + h1·r."""
        return double_commit(self.group, self.g, s, self.h[0], v, self.h[1], r)

    def offset_commitments(self, commitments: Sequence[Point], serial: Scalar) -> List[Point]:
        """The set {C_i - g·serial}, in which a coin with this serial opens to zero."""
        shift = self.group.mul(self.g, self.field.neg(serial))
        return [self.group.add(C, shift) for C in commitments]

    def prove_initial(self, commitments: Sequence[Point], l: int, v: Scalar, r: Scalar) -> ProverState:
        """
        First move: commit to the digits of l and to the polynomial coefficients.

        Parameters
        ----------
        commitments : Sequence[Point]
            The anonymity set, 1 <= N <= n^m
        l : int
            Index of the prover's commitment
        v : Scalar
            First blinder of commitments[l]
        r : Scalar
            Second blinder of commitments[l]

        Returns
        -------
        ProverState
            Partial proof plus the secrets prove_final needs
        """
        F, G = self.field, self.group
        n, m = self.n, self.m
        N = n ** m
        if not 1 <= len(commitments) <= N:
            raise ParameterError(f"Anonymity set must have 1..{N} entries, got {len(commitments)}")
        if not 0 <= l < len(commitments):
            raise ParameterError(f"Index l={l} outside the anonymity set")
        if not G.eq(commitments[l], double_commit(G, self.g, F.zero(), self.h[0], v, self.h[1], r)):
            raise ParameterError(f"commitments[{l}] is not h0·v + h1·r")

        padded = list(commitments) + [commitments[-1]] * (N - len(commitments))

        rA, rB, rC, rD = (F.random() for _ in range(4))

        # Commit to zero-sum blinders
        a = []
        for _ in range(m):
            row = [F.random() for _ in range(n - 1)]
            first = F.zero()
            for a_ji in row:
                first = F.sub(first, a_ji)
            a.extend([first] + row)

        # Commit to decomposition bits
        l_digits = decompose(l, n, m)
        sigma = [F.one() if l_digits[j] == i else F.zero() for j in range(m) for i in range(n)]

        one, two = F.one(), F.from_int(2)
        c = [F.mul(a_k, F.sub(one, F.mul(two, s_k))) for a_k, s_k in zip(a, sigma)]
        d = [F.neg(F.mul(a_k, a_k)) for a_k in a]

        A = commit(G, self.g, self.h, a, rA)
        B = commit(G, self.g, self.h, sigma, rB)
        C = commit(G, self.g, self.h, c, rC)
        D = commit(G, self.g, self.h, d, rD)

        p = self._coefficient_table(sigma, a)

        rho = [F.random() for _ in range(m)]
        tau = [F.random() for _ in range(m)]
        Gk, Qk = [], []
        for j in range(m):
            gamma = F.random()
            column = [F.from_int(p[k][j]) for k in range(N)]
            blind = G.mul(self.h[1], gamma)
            Gk.append(G.add(G.multiexp(padded, column), G.mul(self.h[1], F.neg(gamma))))
            Qk.append(G.add(double_commit(G, self.g, F.zero(), self.h[0], rho[j], self.h[1], tau[j]), blind))

        return ProverState(A=A, B=B, C=C, D=D, Gk=Gk, Qk=Qk, sigma=sigma, a=a,
                           rA=rA, rB=rB, rC=rC, rD=rD, rho=rho, tau=tau, v=v, r=r)

    def _coefficient_table(self, sigma: Sequence[Scalar], a: Sequence[Scalar]) -> List[List[int]]:
        """
        p[k][j] = coefficient of X^j in ∏_j (σ_{j,k_j} X + a_{j,k_j}), for every k < n^m.

        Uses numpy polynomial multiplication over integers reduced mod q.
        """
        F = self.field
        n, m = self.n, self.m
        q = F.order
        sigma_int = [F.to_int(s) for s in sigma]
        a_int = [F.to_int(x) for x in a]

        table = []
        for k in range(n ** m):
            P_X = _poly([1])
            for j, d in enumerate(decompose(k, n, m)):
                # numpy poly1d uses descending powers: [X^1, X^0]
                P_X = P_X * _poly([sigma_int[j * n + d], a_int[j * n + d]])
                P_X = _poly([int(c) % q for c in P_X.coeffs])
            table.append([int(P_X[j]) % q for j in range(m)])
        return table

    def prove_final(self, state: ProverState, x: Scalar) -> SigmaPlusProof:
        """Second move: answer challenge x."""
        F = self.field
        n, m = self.n, self.m

        f = []
        for j in range(m):
            for i in range(1, n):
                k = j * n + i
                f.append(F.add(F.mul(state.sigma[k], x), state.a[k]))

        ZA = F.add(F.mul(state.rB, x), state.rA)
        ZC = F.add(F.mul(state.rC, x), state.rD)

        x_powers = powers(F, x, m + 1)
        zV = F.mul(state.v, x_powers[m])
        zR = F.mul(state.r, x_powers[m])
        for j in range(m):
            zV = F.sub(zV, F.mul(state.rho[j], x_powers[j]))
            zR = F.sub(zR, F.mul(state.tau[j], x_powers[j]))

        return SigmaPlusProof(A=state.A, B=state.B, C=state.C, D=state.D, f=f,
                              Gk=state.Gk, Qk=state.Qk, ZA=ZA, ZC=ZC, zV=zV, zR=zR)

    def prove(self, commitments: Sequence[Point], l: int, v: Scalar, r: Scalar,
              context: bytes = b"") -> SigmaPlusProof:
        """Non-interactive proof; x = H(A, B, C, D, Gk, Qk) as recomputed by the verifier."""
        state = self.prove_initial(commitments, l, v, r)
        x = challenge(self.field, self.group, state.group_elements(), context)
        return self.prove_final(state, x)
