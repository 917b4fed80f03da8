"""
Performance Benchmark
=====================

Timing and memory measurements for Sigma+ proofs:
- proof generation for several (n, m)
- single verification vs. batch verification per proof
- proof size on the wire
- peak memory of one verification

Run:
    python doc/performance_benchmark.py [--curve secp256k1] [--runs 5]
"""

import argparse
import json
import os
import sys
import time
import tracemalloc
from typing import Dict, List, Tuple

import numpy as np

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sigma_plus import SigmaPlusProver, SigmaPlusVerifier, keygen_params, serialize_proof, setup
from sigma_plus.fs_oracles import challenge


class PerformanceBenchmark:
    """Benchmark harness over one backend."""

    def __init__(self, curve='secp256k1', weight_mode='random'):
        print(f"🔧 Initializing benchmark (curve: {curve}, weights: {weight_mode})...")
        self.backend = setup(curve)
        self.field = self.backend['field']
        self.group = self.backend['group']
        self.weight_mode = weight_mode
        self.results = {}
        self.memory_results = {}

    def measure_time(self, func, *args, num_runs=10, **kwargs) -> Tuple[float, float, any]:
        """
        Mean and standard deviation of the run time of func (seconds).

        Returns:
            (mean, std, result of the last run)
        """
        times = []
        result = None
        for _ in range(num_runs):
            start = time.perf_counter()
            result = func(*args, **kwargs)
            times.append(time.perf_counter() - start)

        times = np.array(times)
        return float(times.mean()), float(times.std()), result

    def measure_memory(self, func, *args, **kwargs) -> Tuple[float, any]:
        """Peak memory of func in MB"""
        tracemalloc.start()
        result = func(*args, **kwargs)
        _, peak = tracemalloc.get_traced_memory()
        tracemalloc.stop()
        return peak / 1024 / 1024, result

    def _system(self, n, m):
        params = keygen_params(n=n, m=m, backend=self.backend)
        return (SigmaPlusProver.from_params(params),
                SigmaPlusVerifier.from_params(params, weight_mode=self.weight_mode))

    def _anonymity_set(self, prover, size, indices, serials):
        F = self.field
        commitments = [prover.commit_coin(F.random(), F.random(), F.random()) for _ in range(size)]
        openings = {}
        for l, s in zip(indices, serials):
            v, r = F.random(), F.random()
            commitments[l] = prover.commit_coin(s, v, r)
            openings[l] = (v, r)
        return commitments, openings

    def _batch(self, prover, commitments, openings, serials):
        states = [prover.prove_initial(prover.offset_commitments(commitments, s), l, *openings[l])
                  for l, s in zip(openings, serials)]
        elements = []
        for state in states:
            elements.extend(state.group_elements())
        x = challenge(self.field, self.group, elements)
        return x, [prover.prove_final(state, x) for state in states]

    def benchmark_proofs(self, parameters: List[Tuple[int, int]], num_runs=10):
        print(f"\n📊 Proof generation (each test repeated {num_runs} times)")
        print("=" * 60)

        results, std_devs = {}, {}
        for n, m in parameters:
            print(f"  n={n}, m={m}...", end=" ", flush=True)
            prover, _ = self._system(n, m)
            N = n ** m
            commitments, openings = self._anonymity_set(prover, N, [N // 2], [self.field.zero()])
            avg_time, std_dev, _ = self.measure_time(prover.prove, commitments, N // 2, *openings[N // 2],
                                                     num_runs=num_runs)
            results[f"{n}^{m}"] = avg_time
            std_devs[f"{n}^{m}"] = std_dev
            print(f"✓ {avg_time*1000:.2f} ± {std_dev*1000:.2f} ms")

        self.results['prove'] = results
        self.results['prove_std'] = std_devs
        return results

    def benchmark_verification(self, parameters: List[Tuple[int, int]], batch_sizes: List[int], num_runs=10):
        """Single verification against batch verification, per proof."""
        print(f"\n📊 Verification (each test repeated {num_runs} times)")
        print("=" * 60)

        results: Dict[str, Dict[str, float]] = {}
        for n, m in parameters:
            prover, verifier = self._system(n, m)
            N = n ** m
            key = f"{n}^{m}"
            results[key] = {}

            for M in batch_sizes:
                if M > N:
                    continue
                indices = list(range(0, N, max(1, N // M)))[:M]
                serials = [self.field.random() for _ in indices]
                commitments, openings = self._anonymity_set(prover, N, indices, serials)
                x, proofs = self._batch(prover, commitments, openings, serials)

                print(f"  n={n}, m={m}, M={M}...", end=" ", flush=True)
                shifted = prover.offset_commitments(commitments, serials[0])
                single, _, ok_single = self.measure_time(verifier.verify, shifted, proofs[0], x, num_runs=num_runs)
                batch, _, ok_batch = self.measure_time(verifier.batchverify, commitments, x, serials, proofs,
                                                       num_runs=num_runs)
                assert ok_single and ok_batch, "benchmark proofs must verify"

                results[key]["single"] = single
                results[key][f"batch_{M}_per_proof"] = batch / M
                print(f"✓ single {single*1000:.2f} ms, batch {batch/M*1000:.2f} ms/proof")

        self.results['verification'] = results
        return results

    def benchmark_memory(self, parameters: List[Tuple[int, int]]):
        print("\n📊 Peak memory of one verification")
        print("=" * 60)

        for n, m in parameters:
            prover, verifier = self._system(n, m)
            N = n ** m
            commitments, openings = self._anonymity_set(prover, N, [0], [self.field.zero()])
            proof = prover.prove(commitments, 0, *openings[0])

            peak, _ = self.measure_memory(verifier.verify, commitments, proof)
            self.memory_results[f"{n}^{m}"] = peak
            print(f"  n={n}, m={m}: {peak:.3f} MB")

    def benchmark_bandwidth(self, parameters: List[Tuple[int, int]]):
        print("\n📊 Proof size")
        print("=" * 60)

        results = {}
        for n, m in parameters:
            prover, _ = self._system(n, m)
            commitments, openings = self._anonymity_set(prover, 1, [0], [self.field.zero()])
            proof = prover.prove(commitments, 0, *openings[0])
            size = len(serialize_proof(proof, self.field, self.group))
            results[f"{n}^{m}"] = size
            print(f"  n={n}, m={m}: {size} B")

        self.results['bandwidth'] = results
        return results

    def run_all_benchmarks(self, parameters: List[Tuple[int, int]] = None, num_runs: int = 10):
        if parameters is None:
            parameters = [(2, 3), (4, 2), (2, 6), (4, 3)]

        print("\n" + "=" * 60)
        print("🚀 Starting benchmarks")
        print(f"   Each test is repeated {num_runs} times")
        print("=" * 60)

        self.benchmark_proofs(parameters, num_runs)
        self.benchmark_verification(parameters, [1, 4, 8], num_runs)
        self.benchmark_memory(parameters)
        self.benchmark_bandwidth(parameters)

        print("\n" + "=" * 60)
        print("✅ Benchmarks finished")
        print("=" * 60)

    def save_results(self, filename='benchmark_results.json'):
        os.makedirs(os.path.dirname(filename) or '.', exist_ok=True)
        with open(filename, 'w') as f:
            json.dump({'timing': self.results, 'memory': self.memory_results}, f, indent=2)
        print(f"\n💾 Results saved to {filename}")


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description="Sigma+ proof benchmarks")
    parser.add_argument('--curve', default='secp256k1')
    parser.add_argument('--weights', default='random', choices=['random', 'deterministic'])
    parser.add_argument('--runs', type=int, default=5)
    parser.add_argument('--output', default='benchmark_results.json')
    args = parser.parse_args()

    benchmark = PerformanceBenchmark(args.curve, args.weights)
    benchmark.run_all_benchmarks(num_runs=args.runs)
    benchmark.save_results(args.output)
