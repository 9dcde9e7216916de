# -*- coding: utf-8 -*-
"""dispatcher `NonConvexOpt` to run the algorithm named in a `Config`
with iteration and tolerance based termination.
"""
import numpy as np
from . import interfaces
from .evolution_strategy import CMAES
from .options_parameters import Config, ConfigurationError
from .problem import OptProb

algorithms = {'CMAES': CMAES}
"""registry of algorithm classes by their configuration name"""

class NonConvexOpt(interfaces.OptimizationAlgorithm):
    """run the algorithm of a `Config` on ``objective`` under
    ``constraints`` until `stop` returns a non-empty `dict`.

    `config` is a `Config` instance, a `dict` or a JSON string like::

        {"opt_conf": {"max_iter": 100, "rtol": 1e-8, "atol": 1e-8},
         "alg_conf": {"CMAES": {"population_size": 20, "initial_sigma": 1}}}

    Termination is with ``{'max_iter': max_iter}`` after ``max_iter``
    iterations or with ``{'tolfun': (atol, rtol)}`` when the best
    feasible value changed by no more than ``atol + rtol * |f|`` during
    ``tolfun_iterations`` consecutive iterations, where tolerances are
    only checked from iteration ``rtol_max_iter_fraction * max_iter`` on.

    >>> import ncopt
    >>> opt = ncopt.NonConvexOpt('''{"opt_conf": {"max_iter": 10},
    ...         "alg_conf": {"CMAES": {"population_size": 8, "seed": 1}}}''',
    ...     [1, 1], ncopt.ff.neg_sphere, ncopt.BoxConstraints(0, 2))
    >>> s = opt.run()
    >>> s.generation, opt.stop()
    (10, {'max_iter': 10})
    >>> assert all(s.best_x >= 0) and s.best_f > -2

    """
    def __init__(self, config, x0, objective, constraints=None):
        if isinstance(config, str):
            config = Config.from_json(config)
        elif isinstance(config, dict):
            config = Config.from_dict(config)
        elif not isinstance(config, Config):
            raise ConfigurationError('config must be a Config, dict or JSON'
                                     ' string, found %s' % repr(config))
        self.config = config
        self.opts = config.opt_conf.evalall()
        self._check_options()
        try:
            algorithm_class = algorithms[config.algorithm]
        except KeyError:
            raise ConfigurationError('unknown algorithm "%s", known are %s'
                                     % (config.algorithm, str(sorted(algorithms))))
        self.problem = OptProb(objective, constraints)
        self.algorithm = algorithm_class.from_conf(config, x0, self.problem)
        self.iterations = 0
        self._best_f_prev = None
        self._tolfun_count = 0

    def _check_options(self):
        opts = self.opts
        for key in ('max_iter', 'tolfun_iterations'):
            try:
                valid = (not isinstance(opts[key], bool) and
                         int(opts[key]) == opts[key] and opts[key] >= 0)
            except (TypeError, ValueError, OverflowError):
                valid = False
            if not valid:
                raise ConfigurationError('%s=%s must be a non-negative integer'
                                         % (key, repr(opts[key])))
            opts[key] = int(opts[key])
        for key in ('atol', 'rtol', 'rtol_max_iter_fraction'):
            if not isinstance(opts[key], (int, float)) or not opts[key] >= 0:
                raise ConfigurationError('%s=%s must be a non-negative number'
                                         % (key, repr(opts[key])))
        if not opts['rtol_max_iter_fraction'] <= 1:
            raise ConfigurationError('rtol_max_iter_fraction=%s must be in [0, 1]'
                                     % repr(opts['rtol_max_iter_fraction']))

    def step(self):
        """advance the algorithm by one iteration and record the change
        of the best value"""
        self.algorithm.step()
        self.iterations += 1
        logger = getattr(self.algorithm, 'logger', None)
        if logger is not None:
            logger.add()
        best_f = self.algorithm.state().best_f
        prev = self._best_f_prev
        if (prev is not None and np.isfinite(best_f) and np.isfinite(prev) and
                abs(best_f - prev) <= self.opts['atol'] + self.opts['rtol'] * abs(prev)):
            self._tolfun_count += 1
        else:
            self._tolfun_count = 0
        self._best_f_prev = best_f

    def state(self):
        return self.algorithm.state()

    def stop(self):
        """return satisfied termination conditions in a dictionary"""
        opts = self.opts
        if self.iterations >= opts['max_iter']:
            return {'max_iter': opts['max_iter']}
        if (self.iterations >= opts['rtol_max_iter_fraction'] * opts['max_iter'] and
                self._tolfun_count >= opts['tolfun_iterations'] > 0):
            return {'tolfun': (opts['atol'], opts['rtol'])}
        return {}

    def disp(self, modulo=None):
        return self.algorithm.disp(modulo)

    @property
    def result(self):
        return self.algorithm.result._replace(stop=self.stop())

    def run(self, callback=None, verb_disp=None):
        """iterate until `stop` and return the final `State`"""
        try:
            self.optimize(callback=callback, verb_disp=verb_disp)
        finally:
            close = getattr(self.algorithm, 'close', None)
            if close is not None:
                close()
        return self.state()
