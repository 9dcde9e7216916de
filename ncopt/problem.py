# -*- coding: utf-8 -*-
"""Optimization problem, an objective function to be maximized and an
optional boolean feasibility predicate.
"""
import numpy as np
from .options_parameters import ConfigurationError

def _as_function(fun, method_names, name):
    """return the bound method of `fun` with the first name found in
    `method_names` or `fun` itself if callable"""
    for method_name in method_names:
        method = getattr(fun, method_name, None)
        if callable(method):
            return method
    if callable(fun):
        return fun
    raise ConfigurationError('%s must be callable or have a method in %s,'
                             ' found %s' % (name, str(method_names), repr(fun)))

class OptProb(object):
    """evaluate fitness and feasibility of candidate solutions.

    `objective` is a callable ``x -> float`` or an object with method
    ``evaluate`` or ``f``. `constraints` is `None` (all solutions are
    feasible) or a callable ``x -> bool`` or an object with method
    ``is_feasible`` or ``g``.

    The values are not validated, in particular `nan` is passed on.

    >>> import ncopt
    >>> problem = ncopt.OptProb(ncopt.ff.neg_sphere,
    ...                         ncopt.BoxConstraints([0, 0], [10, 10]))
    >>> problem([1, 2])
    (-5.0, True)
    >>> problem.is_feasible([-1, 2])
    False
    >>> ncopt.OptProb(lambda x: x[0]).is_feasible([-1e99])
    True

    """
    def __init__(self, objective, constraints=None):
        self.objective = objective
        self.constraints = constraints
        self._f = _as_function(objective, ('evaluate', 'f'), 'objective')
        self._g = (None if constraints is None else
                   _as_function(constraints, ('is_feasible', 'g'), 'constraints'))

    def evaluate(self, x):
        """return the objective function value of `x`"""
        return float(self._f(x))
    f = evaluate

    def is_feasible(self, x):
        """return `True` if `x` satisfies the constraints"""
        if self._g is None:
            return True
        return bool(self._g(x))

    def __call__(self, x):
        """return ``(self.evaluate(x), self.is_feasible(x))``"""
        return self.evaluate(x), self.is_feasible(x)

class BoxConstraints(object):
    """feasibility predicate ``lower <= x <= upper`` element-wise.

    Bounds are scalars or vectors, `None` or ``inf`` values mean unbounded.

    >>> from ncopt.problem import BoxConstraints
    >>> box = BoxConstraints(0, 10)
    >>> box([0, 10]), box([-1e-9, 5]), box.is_feasible([3, 11])
    (True, False, False)
    >>> BoxConstraints([0, None], [1, None])([0.5, -1e9])
    True

    """
    def __init__(self, lower=None, upper=None):
        self.lower = self._as_bound(lower, -np.inf)
        self.upper = self._as_bound(upper, np.inf)
        if np.any(self.lower > self.upper):
            raise ConfigurationError('lower bound %s exceeds upper bound %s'
                                     % (str(self.lower), str(self.upper)))

    @staticmethod
    def _as_bound(bound, default):
        if bound is None:
            return np.asarray(default, dtype=float)
        if np.isscalar(bound):
            return np.asarray(bound, dtype=float)
        return np.asarray([default if b is None else b for b in bound],
                          dtype=float)

    def is_feasible(self, x):
        x = np.asarray(x, dtype=float)
        return bool(np.all((self.lower <= x) & (x <= self.upper)))
    __call__ = is_feasible
