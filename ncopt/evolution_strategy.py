# -*- coding: utf-8 -*-
"""CMA-ES (evolution strategy) for maximization, the main sub-module of
`ncopt` implementing in particular `CMAES`, `fmax` and `fmin`.
"""
import collections
import sys
import numpy as np
from . import interfaces
from .interfaces import State
from .logger import CMAESDataLogger
from .optimization_tools import BestSolution, EvalParallel, rank_candidates
from .options_parameters import (CMAESOptions, CMAESParameters, Config,
                                 ConfigurationError)
from .problem import OptProb
from .sampler import GaussEigenSampler
from .sigma_adaptation import CMAAdaptSigmaCSA
from .utilities.utils import ElapsedWCTime

__all__ = ['CMAES', 'CMAESResult', 'fmax', 'fmin']

class CMAESResult(collections.namedtuple(
    'CMAESResult', [
        'xbest',
        'fbest',
        'evals_best',
        'evaluations',
        'iterations',
        'xfavorite',
        'stds',
        'stop',
    ])):
    """A results tuple from `CMAES` property ``result``.

    This tuple contains in the given position and as attribute

    - 0 ``xbest`` best feasible solution evaluated, ``x0`` if none
    - 1 ``fbest`` objective function value of best solution, ``-inf``
      if no feasible solution was seen
    - 2 ``evals_best`` evaluation count when ``xbest`` was evaluated
    - 3 ``evaluations`` evaluations overall done
    - 4 ``iterations``
    - 5 ``xfavorite`` distribution mean, to be considered as current
      best estimate of the optimum
    - 6 ``stds`` effective standard deviations ``sigma * diag(C)**0.5``
    - 7 ``stop`` termination conditions in a dictionary

    The top-ranked candidate of the last completed iteration can be
    accessed via attribute ``best.last`` of the `CMAES` instance.
    """

class CMAES(interfaces.OptimizationAlgorithm):
    """CMA-ES stochastic optimizer class with ask-and-tell folded into
    a single `step`, maximizing the objective of an `OptProb`.

    Calling Sequence
    ================

        ``es = CMAES(x0, sigma0, problem, options)``

    Arguments
    =========
    `x0`
        initial solution, starting point, a non-empty list or array of
        finite values. The initial population consists of copies of
        `x0`, none of which is evaluated.
    `sigma0`
        initial standard deviation, a finite positive number. If `None`,
        the option ``sigma0`` is used.
    `problem`
        an `OptProb` instance or anything `OptProb` accepts as objective,
        for example a function ``x -> float`` to be maximized.
    `options`
        a `dict` of options, see `CMAESOptions`. Values may be strings
        evaluated with ``N`` and ``popsize`` known, like ``'4 + 3 * N'``.

    Main interface / usage
    ======================
    The interface is inherited from the generic `OptimizationAlgorithm`
    class (see also there). An object instance is generated from::

        es = ncopt.CMAES(8 * [0.5], 0.2, problem)

    The least verbose interface is via the optimize method::

        es.optimize(100)
        print(es.result)

    More verbose the iteration loop reads::

        while es.state().generation < 100:
            es.step()
            es.logger.add()  # write data to the in-memory logger
            es.disp()

    Each `step` samples ``popsize`` candidates ``mean + sigma * B (D * z)``,
    evaluates objective and feasibility (in parallel threads with option
    ``eval_parallel``), ranks feasible before infeasible candidates and
    larger before smaller values, and updates mean, evolution paths,
    covariance matrix, its eigendecomposition and step-size.

    Example
    =======
    >>> import ncopt
    >>> problem = ncopt.OptProb(ncopt.ff.quadratic([1, 1], [1, 2]))
    >>> with ncopt.CMAES([0, 0], 1.0, problem,
    ...                  {'popsize': 100, 'seed': 1}) as es:
    ...     for _ in range(300):
    ...         es.step()
    >>> s = es.state()
    >>> assert abs(s.best_x[0] - 1) < 1e-3 and abs(s.best_x[1] - 2) < 1e-3
    >>> assert s.best_f <= 0 and s.generation == 300
    >>> es.result.evaluations
    30000

    Before the first step, the state shows the unevaluated initial
    population:

    >>> es = ncopt.CMAES([1, 2, 3], 0.5, ncopt.ff.neg_sphere, {'popsize': 4})
    >>> s = es.state()
    >>> s.population.tolist()[0], s.fitness.tolist(), s.generation
    ([1.0, 2.0, 3.0], [-inf, -inf, -inf, -inf], 0)
    >>> s.best_x.tolist(), s.best_f
    ([1.0, 2.0, 3.0], -inf)

    Invalid parameters raise a `ConfigurationError` at construction:

    >>> try:
    ...     ncopt.CMAES([1, 2], -1, ncopt.ff.neg_sphere)
    ... except ncopt.ConfigurationError as e:
    ...     print(e)
    initial step-size sigma0=-1 must be finite and positive

    :See also: `fmax`, `fmin`, `CMAESOptions`, `ncopt.solver.NonConvexOpt`

    """
    def __init__(self, x0, sigma0=None, problem=None, options=None):
        """see class `CMAES`"""
        self.opts = CMAESOptions(dict(options or {})).complement()
        try:
            x0 = np.array(x0, dtype=float)
        except (TypeError, ValueError) as e:
            raise ConfigurationError('x0 must be a vector of numbers: %s' % str(e))
        if x0.ndim != 1 or len(x0) < 1:
            raise ConfigurationError('x0 must be a non-empty one-dimensional'
                                     ' vector, found shape %s' % str(x0.shape))
        if not np.all(np.isfinite(x0)):
            raise ConfigurationError('x0 must have finite values, found %s'
                                     % str(x0))
        self.N = N = len(x0)
        self.opts.evalall({'N': N})
        opts = self.opts

        if sigma0 is None:
            sigma0 = opts['sigma0']
        try:
            valid_sigma0 = np.isfinite(sigma0) and sigma0 > 0
        except TypeError:
            valid_sigma0 = False
        if not valid_sigma0:
            raise ConfigurationError('initial step-size sigma0=%s must be'
                                     ' finite and positive' % str(sigma0))
        if problem is None:
            raise ConfigurationError('an objective function is needed')
        self.problem = problem if isinstance(problem, OptProb) else OptProb(problem)

        self.sp = CMAESParameters(N, opts['popsize'], opts['num_parents'])
        try:
            self.rng = np.random.default_rng(opts['seed'])
        except (TypeError, ValueError) as e:
            raise ConfigurationError('invalid seed=%s: %s' % (repr(opts['seed']), str(e)))

        self.x0 = x0
        self.mean = x0.copy()
        self.mean_old = x0.copy()
        self.sigma0 = self.sigma = float(sigma0)
        self.pc = np.zeros(N)
        self.sm = GaussEigenSampler(N, self.rng,
                                    eigen_maxiter=opts['eigen_maxiter'],
                                    eigen_tol=opts['eigen_tol'],
                                    eigen_floor=opts['eigen_floor'],
                                    verbose=opts['verbose'])
        self.adapt_sigma = CMAAdaptSigmaCSA()
        self.adapt_sigma.initialize(self)

        self.countiter = 0
        self.countevals = 0
        self.pop = np.tile(x0, (self.sp.popsize, 1))
        self.fit = np.full(self.sp.popsize, -np.inf)
        self.feasible = np.zeros(self.sp.popsize, dtype=bool)
        self.best = BestSolution(x0.copy(), -np.inf, 0)
        self.evaluator = EvalParallel(self.problem, int(opts['eval_parallel'] or 0))
        self.logger = CMAESDataLogger(opts['verb_log']).register(self)
        self.timer = ElapsedWCTime()
        self.times_displayed = 0
        self._print_init_message()

    @classmethod
    def from_conf(cls, conf, x0, problem):
        """return a `CMAES` instance from a `dict` of options, where
        ``initial_sigma`` and ``population_size`` are accepted for
        ``sigma0`` and ``popsize``, or from a `Config` instance.

        >>> import ncopt
        >>> es = ncopt.CMAES.from_conf({'initial_sigma': 2, 'population_size': 6},
        ...                            [0, 0], ncopt.ff.neg_sphere)
        >>> es.sigma, es.sp.popsize, es.sp.mu
        (2.0, 6, 3)

        """
        if isinstance(conf, Config):
            if conf.algorithm != cls.__name__:
                raise ConfigurationError('configuration is for %s not for %s'
                                         % (conf.algorithm, cls.__name__))
            options = dict(conf.alg_options)
        else:
            options = dict((Config.aliases.get(k, k), v)
                           for k, v in dict(conf or {}).items())
        return cls(x0, None, problem, options)

    def _print_init_message(self):
        if self.opts['verb_disp'] > 0 and self.opts['verbose'] > 0:
            w = self.sp.weights
            print('(%d_w,%d)-CMA-ES (mu_w=%2.1f,w_1=%d%%) in dimension %d (seed=%s)'
                  % (self.sp.mu, self.sp.popsize, self.sp.mueff,
                     int(100 * w[0]), self.N, str(self.opts['seed'])))

    @property
    def B(self):
        """eigenvectors of ``C`` as columns"""
        return self.sm.B

    @property
    def D(self):
        """square roots of the eigenvalues of ``C``"""
        return self.sm.D

    @property
    def C(self):
        """covariance matrix"""
        return self.sm.C

    @property
    def ps(self):
        """isotropic evolution path"""
        return self.adapt_sigma.ps

    @property
    def popsize(self):
        return self.sp.popsize

    def step(self):
        """sample, evaluate and rank a new population and update the
        distribution parameters, that is, conduct one iteration.

        The incumbent `best` is replaced only by a feasible and strictly
        better candidate.
        """
        sp = self.sp
        mu = sp.mu
        weights = sp.weights.asarray

        # sample all random numbers in the calling thread
        arz = self.sm.sample(sp.popsize)
        pop = self.mean + self.sigma * arz
        fit, feasible = self.evaluator(pop)
        fit = np.asarray(fit, dtype=float)
        feasible = np.asarray(feasible, dtype=bool)
        self.countevals += sp.popsize

        self.ranking = rank_candidates(fit, feasible)
        parents = pop[self.ranking[:mu]]
        self.mean_old = self.mean
        self.mean = np.dot(weights, parents)

        # evolution paths use B and D of the previous iteration
        hsig = self.adapt_sigma.hsig(self)
        y = (self.mean - self.mean_old) / self.sigma
        self.pc = ((1 - sp.cc) * self.pc +
                   hsig * np.sqrt(sp.cc * (2 - sp.cc) * sp.mueff) * y)
        self.sm.update(self.pc, (parents - self.mean_old) / self.sigma,
                       weights, sp.c1, sp.cmu)
        self.sm.decompose()
        self.adapt_sigma.update(self)

        self.pop, self.fit, self.feasible = pop, fit, feasible
        self.best.update(pop, fit, feasible, self.countevals)
        self.countiter += 1

    def state(self):
        """return a `State` with copies of the current data"""
        return State(best_x=np.array(self.best.x, dtype=float),
                     best_f=self.best.f,
                     population=self.pop.copy(),
                     fitness=self.fit.copy(),
                     feasible=self.feasible.copy(),
                     generation=self.countiter)

    @property
    def result(self):
        """return a `CMAESResult` `namedtuple`.

        :See: `CMAESResult` or try ``help(...result)`` on the ``result``
            property of an `CMAES` instance or on the `CMAESResult`
            instance itself.

        """
        return CMAESResult(np.array(self.best.x, dtype=float),
                           self.best.f,
                           self.best.evals,
                           self.countevals,
                           self.countiter,
                           self.mean.copy(),
                           self.sigma * self.sm.variances**0.5,
                           self.stop())

    def disp_annotation(self):
        """print annotation line for `disp` ()"""
        print('Iterat #Fevals   function value  axis ratio  sigma  min&max std  t[m:s]')
        sys.stdout.flush()

    def disp(self, modulo=None):
        """print current state variables in a single-line.

        Prints only if ``countiter % modulo == 0``, the annotation line
        before the first and then before every tenth printed line.

        :See also: `disp_annotation`.
        """
        if modulo is None:
            modulo = self.opts['verb_disp']
        if not modulo or self.countiter < 1 or self.countiter % modulo:
            return self
        if self.times_displayed % 10 == 0:
            self.disp_annotation()
        self.times_displayed += 1
        toc = self.timer.elapsed
        stime = str(int(toc // 60)) + ':' + ("%2.1f" % (toc % 60)).rjust(4, '0')
        stds = self.sigma * self.sm.variances**0.5
        print(' '.join((repr(self.countiter).rjust(5),
                        repr(self.countevals).rjust(6),
                        '%.15e' % self.fit[self.ranking[0]],
                        '%4.1e' % (self.D.max() / self.D.min()),
                        '%6.2e' % self.sigma,
                        '%6.0e' % min(stds),
                        '%6.0e' % max(stds),
                        stime)))
        sys.stdout.flush()
        return self

    def close(self):
        """free the evaluation thread pool, if any"""
        self.evaluator.terminate()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

def fmax(objective, x0, sigma0, constraints=None, options=None, max_iter=None):
    """functional interface to `CMAES` for maximization of `objective`
    under the feasibility predicate `constraints`.

    Return ``(xbest, fbest, es)``, where ``fbest`` is ``-inf`` if no
    feasible solution was found. `max_iter` defaults to
    ``100 + 150 * (N + 3)**2 // popsize**0.5``.

    >>> import ncopt
    >>> xbest, fbest, es = ncopt.fmax(ncopt.ff.neg_rosen, [0, 0], 0.5,
    ...                               options={'popsize': 10, 'seed': 5})
    >>> assert fbest > -1e-8 and all(abs(xbest - 1) < 1e-3)
    >>> assert es.countiter == 100 + 150 * 25 // 10**0.5

    """
    problem = OptProb(objective, constraints)
    with CMAES(x0, sigma0, problem, options) as es:
        if max_iter is None:
            max_iter = 100 + 150 * (es.N + 3)**2 // es.sp.popsize**0.5
        es.optimize(int(max_iter))
    return np.array(es.best.x, dtype=float), es.best.f, es

def fmin(objective, x0, sigma0, constraints=None, options=None, max_iter=None):
    """minimize `objective` by maximizing its negation with `fmax`.

    Return ``(xbest, fbest, es)``, ``fbest`` is the minimal value found,
    ``inf`` if no feasible solution was found.

    >>> import ncopt
    >>> xbest, fbest, es = ncopt.fmin(ncopt.ff.sphere, 3 * [1], 1,
    ...                               ncopt.BoxConstraints(-5, 5),
    ...                               {'popsize': 20, 'seed': 2}, 300)
    >>> assert all(abs(xbest) <= 5) and 0 <= fbest < 1e-8

    """
    evaluate = OptProb(objective).evaluate
    def negated_objective(x):
        return -evaluate(x)
    xbest, fbest, es = fmax(negated_objective, x0, sigma0, constraints,
                            options, max_iter)
    return xbest, -fbest, es
