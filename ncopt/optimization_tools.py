"""Utility classes and functionalities loosely related to optimization:
ranking of candidates, the incumbent solution and parallel evaluation.
"""
from multiprocessing.pool import ThreadPool
import numpy as np
from .utilities.utils import BlancClass as _BlancClass

def rank_candidates(fitness, feasible=None):
    """return indices sorting candidates best first, that is, feasible
    before infeasible and, within each group, larger `fitness` first.

    `nan` values rank behind all other values of their group, as in
    `numpy.sort`. Ties keep their original order.

    >>> from ncopt.optimization_tools import rank_candidates
    >>> rank_candidates([1., 5., 3., 9.], [True, False, True, False]).tolist()
    [2, 0, 3, 1]
    >>> rank_candidates([1., float("nan"), 3.]).tolist()
    [2, 0, 1]

    """
    fitness = np.asarray(fitness, dtype=float)
    if feasible is None:
        feasible = np.ones(len(fitness), dtype=bool)
    feasible = np.asarray(feasible, dtype=bool)
    # lexsort sorts by the last key first, nan of -fitness sorts last
    return np.lexsort((-fitness, ~feasible))

class BestSolution(object):
    """container to keep track of the best feasible solution seen.

    Better solutions have larger ``f``-values. Only feasible solutions
    are taken into account.

    >>> from ncopt.optimization_tools import BestSolution
    >>> best = BestSolution([0., 0.])
    >>> best.update([[1, 1], [2, 2]], [-2, -8], [True, True], evals=2)
    True
    >>> best.update([[0, 0]], [0], [False], evals=3)
    False
    >>> best.last.x, float(best.last.f)  # top-ranked of the last update
    ([0, 0], 0.0)
    >>> best.get()
    ([1, 1], -2.0, 1)

    """
    def __init__(self, x=None, f=-np.inf, evals=None):
        """initialize the best solution with ``x``, ``f``, and ``evals``.
        """
        self.x = x
        self.f = f if f is not None and not np.isnan(f) else -np.inf
        self.evals = evals
        self.evalsall = evals
        self.last = _BlancClass()
        self.last.x = x
        self.last.f = f
    def update(self, arx, arf, feasible=None, evals=None):
        """check for a better feasible solution in list ``arx``, return
        `True` if the best solution was replaced.

        Based on the largest corresponding value in ``arf`` among the
        solutions with a `True` entry in ``feasible``, by default all.
        ``evals`` is the number of evaluations after ``arx`` was
        evaluated.
        """
        arf = np.asarray(arf, dtype=float)
        if feasible is None:
            feasible = np.ones(len(arf), dtype=bool)
        if evals:
            self.evalsall = evals
        idx = rank_candidates(arf, feasible)
        if not len(idx):
            return False
        i = int(idx[0])
        self.last.x, self.last.f = arx[i], arf[i]
        if feasible[i] and arf[i] > self.f:
            self.x, self.f = arx[i], float(arf[i])
            self.evals = None if not evals else evals - len(arf) + i + 1
            return True
        return False
    def get(self):
        """return ``(x, f, evals)`` """
        return self.x, self.f, self.evals

class EvalParallel(object):
    """A class and context manager for parallel evaluations.

    Evaluates the objective and the feasibility of a list of solutions on
    a pool of threads, returning the results in the order of the
    solutions. To be used with the `with` statement (otherwise
    `terminate` needs to be called to free resources)::

        with EvalParallel(problem, 4) as eval_all:
            fvals, feasible = eval_all(X)

    Each call of ``problem`` writes only its own result slot. With
    `number_of_threads` ``<= 1`` solutions are evaluated sequentially in
    the calling thread and no pool is created.

    >>> import ncopt
    >>> problem = ncopt.OptProb(ncopt.ff.neg_sphere, ncopt.BoxConstraints(0, 1))
    >>> with ncopt.optimization_tools.EvalParallel(problem, 3) as eval_all:
    ...     eval_all([[0, 1], [2, 0], [1, 1]])
    ([-1.0, -4.0, -2.0], [True, False, True])

    """
    def __init__(self, problem=None, number_of_threads=None):
        self.problem = problem
        self.processes = number_of_threads
        self._pool = None

    @property
    def pool(self):
        """the thread pool, created on first use"""
        if self._pool is None and self.processes and self.processes > 1:
            self._pool = ThreadPool(self.processes)
        return self._pool

    def __call__(self, solutions, problem=None):
        """evaluate a list/sequence of solution-"vectors", return a `tuple`
        of lists ``(fitness_values, feasibility_flags)``.

        `problem` is called like ``problem(x) -> (f, is_feasible)``,
        by default ``self.problem`` is used.
        """
        problem = problem or self.problem
        if problem is None:
            raise ValueError('problem was never given')
        if self.pool is None:
            results = [problem(x) for x in solutions]
        else:
            results = self.pool.map(problem, solutions)
        return [r[0] for r in results], [r[1] for r in results]

    def terminate(self):
        """free allocated processing pool"""
        if self._pool is not None:
            self._pool.terminate()
            self._pool.join()
            self._pool = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.terminate()
