# -*- coding: utf-8 -*-
"""versatile container for test objective functions.

All functions with a ``neg_`` prefix and `kbf` are to be maximized,
`sphere`, `elli` and `rosen` are their minimization counterparts to be
used with `ncopt.fmin`. For the time being this is probably best used
like::

    from ncopt.fitness_functions import ff

"""
import numpy as np
from numpy import isscalar, sum

class QuadraticObjective(object):
    """concave quadratic ``-sum(a * (x - b)**2)`` with maximum zero at
    ``x == b``.

    >>> from ncopt.fitness_functions import QuadraticObjective
    >>> f = QuadraticObjective([1, 2], [3, -1])
    >>> assert f([3, -1]) == 0
    >>> f([4, 0])
    -3.0

    """
    def __init__(self, a, b):
        self.a = np.asarray(a, dtype=float)
        self.b = np.asarray(b, dtype=float)
    def __call__(self, x):
        return -float(sum(self.a * (np.asarray(x) - self.b)**2))
    evaluate = __call__

class FitnessFunctions(object):
    """collection of objective functions.

    >>> from ncopt.fitness_functions import ff
    >>> ff.neg_sphere([1, 2]), ff.sphere([1, 2])
    (-5.0, 5.0)
    >>> ff.neg_rosen([0, 0])
    -1.0
    >>> assert ff.kbf_feasible([1.5, 1.5]) and not ff.kbf_feasible([0.5, 1])

    """
    def sphere(self, x):
        """Sphere (squared norm) test objective function"""
        return float(sum(np.asarray(x, dtype=float)**2))
    def neg_sphere(self, x):
        """negative sphere, maximum zero at zero"""
        return -self.sphere(x)
    def elli(self, x, cond=1e6):
        """Ellipsoid test objective function"""
        x = np.asarray(x, dtype=float)
        N = len(x)
        return float(sum(cond**(np.arange(N) / (N - 1.)) * x**2)
                     if N > 1 else sum(x**2))
    def neg_elli(self, x, cond=1e6):
        return -self.elli(x, cond)
    def rosen(self, x, alpha=1e2):
        """Rosenbrock test objective function"""
        x = [x] if isscalar(x[0]) else x  # scalar into list
        x = np.asarray(x, dtype=float)
        f = [float(sum(alpha * (x[:-1]**2 - x[1:])**2 + (1. - x[:-1])**2))
             for x in x]
        return f if len(f) > 1 else f[0]  # 1-element-list into scalar
    def neg_rosen(self, x, alpha=1e2):
        """negative Rosenbrock, ``-inf`` in dimension one where the
        function is undefined"""
        if len(x) < 2:
            return -np.inf
        return -self.rosen(x, alpha)
    def quadratic(self, a, b):
        """return the concave `QuadraticObjective` ``-sum(a * (x - b)**2)``"""
        return QuadraticObjective(a, b)
    def kbf(self, x):
        """Keane's bump function, multimodal, to be maximized subject to
        `kbf_feasible`"""
        x = np.asarray(x, dtype=float)
        sum_ix2 = sum(np.arange(1, len(x) + 1) * x**2)
        return float(np.abs(sum(np.cos(x)**4) - 2 * np.prod(np.cos(x)**2))
                     / sum_ix2**0.5)
    def kbf_feasible(self, x):
        """constraints of Keane's bump function, ``0 <= x <= 10``,
        ``prod(x) > 0.75`` and ``sum(x) < 7.5 * len(x)``"""
        x = np.asarray(x, dtype=float)
        return bool(np.all((0 <= x) & (x <= 10)) and np.prod(x) > 0.75
                    and sum(x) < 15 * len(x) / 2)

ff = FitnessFunctions()
