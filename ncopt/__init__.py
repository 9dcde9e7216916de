# -*- coding: utf-8 -*-
"""Package `ncopt` implements the CMA-ES (Covariance Matrix Adaptation
Evolution Strategy) as core of a non-convex optimization library.

CMA-ES is a stochastic optimizer for robust non-linear non-convex
derivative- and function-value-free numerical optimization.

In `ncopt`, CMA-ES searches for a maximizer (a solution x in
:math:`R^n`) of an objective function f under an optional feasibility
predicate g. Feasible candidate solutions rank before infeasible ones
and, within each group, larger f-values rank first. Only a feasible
solution can become the incumbent best solution.

Interfaces:

- functions `fmax` and `fmin`:
    run a complete maximization or minimization of the passed objective
    function with CMA-ES and return ``(xbest, fbest, es)``.
- class `CMAES`:
    allows for maximization such that the control of the iteration loop
    remains with the user, via `CMAES.step` and `CMAES.state`.
- class `NonConvexOpt`:
    runs the algorithm named in a `Config`, given as `dict` or JSON
    string, until an iteration or tolerance criterion is met.

`ncopt` relies on `numpy` only.

Testing
=======
From the system shell::

    python -m ncopt.test -h
    python -m ncopt.test
    python -m pytest  # with setup.cfg in the current folder

Example
=======
From a python shell::

    import ncopt
    help(ncopt.CMAES)
    ncopt.CMAESOptions('verb')  # display verbosity options
    xbest, fbest, es = ncopt.fmax(ncopt.ff.neg_rosen, 5 * [0.1], 0.5)
    es = ncopt.CMAES(5 * [0.1], 0.5, ncopt.ff.neg_elli).optimize(500)
    es.result.xfavorite  # mean solution
    problem = ncopt.OptProb(ncopt.ff.neg_sphere, ncopt.BoxConstraints(1, 10))
    state = ncopt.NonConvexOpt({'opt_conf': {'max_iter': 200},
                                'alg_conf': {'CMAES': {'popsize': 20}}},
                               3 * [5], problem.evaluate,
                               problem.is_feasible).run()

:See also: `fmax`, `CMAES`, `CMAESOptions`, `NonConvexOpt`, `Config`

:License: BSD 3-Clause

"""
__license__ = "BSD 3-clause"

from . import (evolution_strategy, fitness_functions, interfaces, logger,
               optimization_tools, options_parameters, problem,
               recombination_weights, sampler, sigma_adaptation, solver,
               utilities,
               )
# from . import test  # gives a warning with python -m ncopt.test
test = 'type "import ncopt.test" to access the `test` module of `ncopt`'
from .fitness_functions import ff
from .evolution_strategy import CMAES, fmax, fmin
from .options_parameters import (CMAESOptions, Config, ConfigurationError,
                                 cmaes_default_options_)
from .problem import OptProb, BoxConstraints
from .logger import CMAESDataLogger
from .solver import NonConvexOpt

__version__ = "0.1.0"
