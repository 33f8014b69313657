"""
Tabu search engine for the capacitated VRP.
Explores neighborhoods of the incumbent while a bounded FIFO memory of
recently rejected solutions prevents cycling.
"""

import logging
import random
import time
from collections import Counter, deque
from typing import List, Dict, Optional, Iterable, Tuple

from tabu_vrp.algorithms.types import Transformation, NeighborhoodKind
from tabu_vrp.algorithms.neighborhood import NeighborhoodBuilder
from tabu_vrp.core.validators import ConfigValidator
from tabu_vrp.models.solution import Solution
from tabu_vrp.config import TABU_CONFIG

logger = logging.getLogger(__name__)


class TabuMemory:
    """
    Bounded FIFO memory of forbidden solutions.

    Solutions are stored by signature so membership follows solution
    equality. Once full, each insertion evicts the oldest entry.
    """

    def __init__(self, capacity: int):
        if capacity < 0:
            raise ValueError("Tabu capacity must be non-negative")
        self.capacity = capacity
        self._queue: deque = deque()
        self._counts: Counter = Counter()

    def add(self, solution: Solution):
        """Append one solution, evicting the oldest entry when over capacity."""
        if self.capacity == 0:
            return
        signature = solution.signature()
        self._queue.append(signature)
        self._counts[signature] += 1
        while len(self._queue) > self.capacity:
            evicted = self._queue.popleft()
            self._counts[evicted] -= 1
            if self._counts[evicted] == 0:
                del self._counts[evicted]

    def extend(self, solutions: Iterable[Solution]):
        for solution in solutions:
            self.add(solution)

    def filter(self, candidates: List[Solution]) -> List[Solution]:
        """Keep candidates that are not tabu, preserving order."""
        return [c for c in candidates if c.signature() not in self._counts]

    def entries(self) -> List[Tuple]:
        """Stored signatures, oldest first."""
        return list(self._queue)

    def clear(self):
        self._queue.clear()
        self._counts.clear()

    def __contains__(self, solution: Solution) -> bool:
        return solution.signature() in self._counts

    def __len__(self) -> int:
        return len(self._queue)


class TabuSearch:
    """Tabu search driver."""

    def __init__(self, config: Optional[Dict] = None, seed: Optional[int] = None):
        """
        Initialize tabu search.

        Args:
            config: Tabu parameters overriding TABU_CONFIG
            seed: Random seed (falls back to config['seed'])
        """
        self.config = TABU_CONFIG.copy()
        if config:
            self.config.update(config)
        ConfigValidator.validate_tabu_config(self.config)

        self.transformation = Transformation.parse(self.config['transformation'])
        self.kind = NeighborhoodKind.parse(self.config['neighborhood_kind'])
        self.seed = seed if seed is not None else self.config.get('seed')
        self.rng = random.Random(self.seed)
        self.builder = NeighborhoodBuilder(
            rng=self.rng,
            meta_exchange_attempts=self.config['meta_exchange_attempts'],
            meta_exchange_probability=self.config['meta_exchange_probability'],
        )

        self.tabu = TabuMemory(self.config['tabu_capacity'])
        self.best_solution: Optional[Solution] = None
        self.history: List[Dict] = []
        self.execution_time = 0.0
        self.stats = {}

    def run(self, initial: Solution) -> Solution:
        """
        Run the search from an initial solution.

        Args:
            initial: Starting solution (not modified)

        Returns:
            Best solution found
        """
        max_iterations = self.config['max_iterations']
        neighborhood_size = self.config['neighborhood_size']
        log_every = self.config.get('log_every') or 0

        best = initial.copy()
        best.recompute_global_cost()
        best_cost = best.global_cost
        swap_partner: Optional[Solution] = None

        self.tabu.clear()
        self.history = []
        self.stats = {
            'iterations': max_iterations,
            'improvements': 0,
            'skipped_iterations': 0,
            'candidates_generated': 0,
            'candidates_filtered': 0,
            'initial_cost': best_cost,
            'last_improvement_iteration': None,
        }

        logger.info(
            f"Tabu search: T={self.tabu.capacity}, M={max_iterations}, N={neighborhood_size}, "
            f"transformation={self.transformation.value}, kind={self.kind.value}, "
            f"initial cost={best_cost:.2f}"
        )
        start_time = time.time()

        for iteration in range(max_iterations):
            candidates = self.builder.neighborhood(
                best, self.transformation, self.kind, neighborhood_size, swap_partner
            )
            allowed = self.tabu.filter(candidates)
            self.stats['candidates_generated'] += len(candidates)
            self.stats['candidates_filtered'] += len(candidates) - len(allowed)

            if not allowed:
                self.stats['skipped_iterations'] += 1
                self._record(iteration, best_cost, None, len(candidates), 0, False)
                continue

            chosen = min(allowed, key=lambda s: s.global_cost)
            improved = chosen.global_cost < best_cost

            if chosen.global_cost > best_cost:
                self.tabu.extend(allowed)
            elif improved:
                best = chosen
                best_cost = chosen.global_cost
                swap_partner = chosen.copy()
                self.stats['improvements'] += 1
                self.stats['last_improvement_iteration'] = iteration
                logger.debug(f"Iteration {iteration}: new best {best_cost:.2f}")

            self._record(iteration, best_cost, chosen.global_cost,
                         len(candidates), len(allowed), improved)

            if log_every and (iteration + 1) % log_every == 0:
                logger.info(
                    f"Iteration {iteration + 1}/{max_iterations}: best={best_cost:.2f}, "
                    f"tabu size={len(self.tabu)}"
                )

        self.execution_time = time.time() - start_time
        self.best_solution = best
        self.stats['best_cost'] = best_cost

        logger.info(
            f"Tabu search finished in {self.execution_time:.2f}s: "
            f"best cost={best_cost:.2f}, improvements={self.stats['improvements']}, "
            f"skipped iterations={self.stats['skipped_iterations']}"
        )
        return best

    def _record(self, iteration: int, best_cost: float, candidate_cost: Optional[float],
                generated: int, allowed: int, improved: bool):
        self.history.append({
            'iteration': iteration,
            'best_cost': best_cost,
            'candidate_cost': candidate_cost,
            'generated': generated,
            'filtered': generated - allowed,
            'tabu_size': len(self.tabu),
            'improved': improved,
        })

    def get_statistics(self) -> Dict:
        """Get search execution statistics."""
        stats = dict(self.stats)
        stats['execution_time'] = self.execution_time
        stats['tabu_size'] = len(self.tabu)
        return stats


def tabu_search(initial: Solution,
                tabu_capacity: int,
                max_iterations: int,
                neighborhood_size: int,
                transformation: Transformation = Transformation.SWAP,
                kind: NeighborhoodKind = NeighborhoodKind.BASIC,
                seed: Optional[int] = None,
                **options) -> Solution:
    """
    Convenience function to run a tabu search.

    Args:
        initial: Starting solution
        tabu_capacity: Maximum tabu memory size (T)
        max_iterations: Number of iterations (M)
        neighborhood_size: Candidates per iteration (N)
        transformation: Route transformation
        kind: Neighborhood kind
        seed: Random seed
        **options: Other TABU_CONFIG overrides (e.g. meta_exchange_attempts)

    Returns:
        Best solution found
    """
    config = dict(options)
    config.update({
        'tabu_capacity': tabu_capacity,
        'max_iterations': max_iterations,
        'neighborhood_size': neighborhood_size,
        'transformation': transformation,
        'neighborhood_kind': kind,
    })
    return TabuSearch(config, seed=seed).run(initial)
