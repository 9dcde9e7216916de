# -*- coding: utf-8 -*-
"""Options, configuration and strategy parameters for `ncopt`.

`CMAESOptions` are the options of `ncopt.CMAES`, `OptOptions` those of
the dispatcher `ncopt.solver.NonConvexOpt`, `Config` bundles both as
read from a `dict` or JSON string, and `CMAESParameters` holds the
strategy parameters derived from dimension and population size.
"""
import json
import numpy as np
from .utilities import utils
from .utilities.math import Mh
from .recombination_weights import RecombinationWeights

class ConfigurationError(ValueError):
    """invalid option value or an invalid combination of option values,
    raised before any optimization takes place"""

def cmaes_default_options_(  # to get keyword completion back
    eigen_floor='1e-20  # lower bound for the eigenvalues of C, D >= eigen_floor**0.5',
    eigen_maxiter='20  # maximal number of power iterations per eigenpair',
    eigen_tol='1e-12  # stop power iteration when the Rayleigh quotient changes by less',
    eval_parallel='0  # number of threads to evaluate the population, values <= 1 evaluate sequentially',
    num_parents='max((1, popsize // 2))  # parents selection parameter mu',
    popsize='100  # population size, AKA lambda, number of new solutions per iteration',
    seed='None  # int or None, seed of the numpy.random.Generator owned by the instance',
    sigma0='0.3  # initial step-size, used when CMAES is called without sigma0',
    verbose='1  #v verbosity e.g. of numerical recovery notes (>=2), -9 is maximally quiet',
    verb_disp='0  #v verbosity: display console output every verb_disp iteration, 0 for never',
    verb_log='1  #v verbosity: record data in es.logger every verb_log iteration, 0 for never',
    ):
    """use this function to get keyword completion for `CMAESOptions`.

    ``ncopt.CMAESOptions('substr')`` provides even substring search.

    returns default options as a `dict` (not a `CMAESOptions` `dict`).
    """
    return dict(locals())

def opt_default_options_(
    atol='1e-6  # absolute tolerance of the change of best f',
    max_iter='1000  # maximal number of iterations',
    rtol='1e-6  # relative tolerance of the change of best f',
    rtol_max_iter_fraction='0  # tolerances are checked only after this fraction of max_iter',
    tolfun_iterations='10  # number of consecutive iterations within the tolerances to stop',
    ):
    """use this function to get keyword completion for `OptOptions`.

    returns default options as a `dict`.
    """
    return dict(locals())

options_environment = {'inf': np.inf, 'max': max, 'min': min, 'int': int}
"""names, besides ``N`` and ``popsize``, that option strings may use"""

def safe_str(s):
    """return a string safe to `eval` or raise a `ConfigurationError`.

    Only the names in `options_environment`, ``N``, ``popsize``, ``True``,
    ``False`` and ``None`` are accepted, such that all default option
    values pass and, for example, ``'3 * N'`` can be used.

    >>> from ncopt.options_parameters import safe_str
    >>> safe_str('max((1, popsize // 2))  # comment')
    ' max ((1,  popsize  // 2))'

    """
    known_words = dict([k, k] for k in
                       ['True', 'False', 'None', 'N', 'popsize'] +
                       list(options_environment))
    try:
        return utils.safe_str(s.split('#')[0].strip(), known_words)
    except ValueError as e:
        raise ConfigurationError(str(e))

class CMAESOptions(dict):
    """a dictionary with the available options and their default values
    for class `ncopt.CMAES`.

    ``CMAESOptions()`` returns a `dict` with all available options and
    their default values with a comment string.

    ``CMAESOptions('eigen')`` returns a subset of recognized options that
    contain 'eigen' in their keyword name or (default) value or
    description.

    ``CMAESOptions(opts)`` returns the subset of recognized options in
    ``dict(opts)``.

    Option values can be "written" in a string and, when passed to
    `ncopt.CMAES`, are evaluated using "N" and "popsize" as known values
    for dimension and population size. All default option values are
    given as such a string.

    Example
    -------
    >>> import ncopt
    >>> opts = ncopt.CMAESOptions()
    >>> opts.set('verb_disp', 10)  #doctest: +ELLIPSIS
    {...}
    >>> opts['popsize'] = '4 + 3 * N'
    >>> opts.evalall({'N': 2})['popsize'], opts['num_parents']
    (10, 5)

    Keys can be abbreviated as long as they remain unique, otherwise a
    `ConfigurationError`, which is a `ValueError`, is raised:

    >>> assert ncopt.CMAESOptions({'pop': 9}) == {'popsize': 9}
    >>> try:
    ...     ncopt.CMAESOptions({'eigen': 9})
    ... except ValueError as e:
    ...     print(type(e).__name__)
    ConfigurationError

    :See also: `CMAESParameters`, `OptOptions`

    """
    @staticmethod
    def defaults():
        """return a dictionary with default option values and description"""
        return cmaes_default_options

    @classmethod
    def versatile_options(cls):
        """return list of options that can be changed at any time (not
        only be initialized).

        The string ' #v ' in the default value indicates a versatile
        option that can be changed any time, however a string will not
        necessarily be evaluated again.

        """
        return tuple(sorted(k for (k, v) in cls.defaults().items()
                            if v.find(' #v ') > 0))

    def check(self, options=None):
        """check for unknown or ambiguous keys"""
        validated_keys = []
        original_keys = []
        if options is None:
            options = self
        for key in options:
            correct_key = self.corrected_key(key)
            if correct_key is None:
                raise ConfigurationError('%s is not a valid option.\n'
                                         'Valid options are %s' %
                                         (key, str(sorted(self.defaults()))))
            if correct_key in validated_keys:
                if key == correct_key:
                    key = original_keys[validated_keys.index(key)]
                raise ConfigurationError("%s was not a unique key for %s option"
                                         % (key, correct_key))
            validated_keys.append(correct_key)
            original_keys.append(key)
        return self

    def __init__(self, s=None, **kwargs):
        """return an options instance.

        Return default options if ``s is None and not kwargs``,
        or all options whose name or description contains `s`, if
        `s` is a (search) string (case is disregarded in the match),
        or with entries from dictionary `s` as options,
        or with kwargs as options if ``s is None``,
        in any of the latter cases not complemented with default options.

        """
        if s is None and not kwargs:
            super(CMAESOptions, self).__init__(self.defaults())
            s = 'nocheck'
        elif utils.is_str(s):
            super(CMAESOptions, self).__init__(type(self)().match(s))
            s = 'nocheck'
        elif isinstance(s, dict):
            if kwargs:
                raise ValueError('Dictionary argument must be the only argument')
            super(CMAESOptions, self).__init__(s)
        elif kwargs and s is None:
            super(CMAESOptions, self).__init__(kwargs)
        else:
            raise ValueError('The first argument must be a string or a dict'
                             ' or a keyword argument or `None`')
        if s != 'nocheck':
            self.check()
            for key in list(self.keys()):
                correct_key = self.corrected_key(key)
                if key != correct_key:
                    self[correct_key] = self.pop(key)
        self._lock_setting = False

    def set(self, dic, val=None, force=False):
        """assign versatile options.

        Method `versatile_options` () gives the versatile options, others
        can only be set before the options are evaluated by `evalall`.

        Arguments
        ---------
            `dic`
                either a dictionary or a key. In the latter
                case, `val` must be provided
            `val`
                value for `key`, approximate match is sufficient
            `force`
                force setting of non-versatile options, use with caution

        """
        if val is not None:  # dic is a key in this case
            dic = {dic: val}
        for key_original, val in list(dict(dic).items()):
            key = self.corrected_key(key_original)
            if key is None:
                raise ConfigurationError('%s is not a valid option'
                                         % key_original)
            if (not self._lock_setting or
                key in self.versatile_options() or
                force):
                self[key] = val
            else:
                utils.print_warning('key ' + str(key_original) +
                      ' ignored (not recognized as versatile)',
                               'set', type(self).__name__)
        return self  # to allow o = CMAESOptions(o).set(new)

    def complement(self):
        """add all missing options with their default values"""
        self.check()
        for key in self.defaults():
            if key not in self:
                self[key] = self.defaults()[key]
        return self

    def __call__(self, key, default=None, loc=None):
        """evaluate and return the value of option `key` on the fly, or
        return those options whose name or description contains `key`,
        case disregarded.

        For ``loc==None``, `self` is used as environment but this does not
        define ``N``.

        :See: `eval()`, `evalall()`

        """
        try:
            val = self[key]
        except KeyError:
            return self.match(key)
        if loc is None:
            loc = self
        try:
            if utils.is_str(val):
                val = eval(safe_str(val), dict(options_environment), dict(loc))
            elif val is None and default is not None:
                val = eval(safe_str(default), dict(options_environment), dict(loc))
        except (NameError, SyntaxError, TypeError, ZeroDivisionError) as e:
            raise ConfigurationError('option %s=%s could not be evaluated: %s'
                                     % (key, repr(self[key]), str(e)))
        return val

    def corrected_key(self, key):
        """return the matching valid key, if ``key.lower()`` is a unique
        starting sequence to identify the valid key, ``else None``

        """
        allowed_keys = dict([s.lower(), s] for s in self.defaults())
        key = key.lower()
        if key in allowed_keys:
            return allowed_keys[key]
        matching_keys = [k for k in allowed_keys if k.startswith(key)]
        return allowed_keys[matching_keys[0]] if len(matching_keys) == 1 else None

    def eval(self, key, default=None, loc=None, correct_key=True):
        """Evaluates and sets the specified option value in
        environment `loc`. Many options need ``N`` to be defined in
        `loc`, some need `popsize`.

        :See: `evalall()`, `__call__`

        """
        if correct_key:
            key = self.corrected_key(key)
        self[key] = self(key, default, loc)
        return self[key]

    def evalall(self, loc=None, defaults=None):
        """Evaluates all option values in environment `loc`, which must
        define ``N``, missing options are complemented with their
        defaults.

        :See: `eval()`

        """
        self.complement()
        if defaults is None:
            defaults = self.defaults()
        loc = dict(loc or {})
        if 'popsize' in defaults:
            loc['popsize'] = self('popsize', defaults['popsize'], loc)
        for k in list(self.keys()):
            self.eval(k, defaults[k], loc)
        self._lock_setting = True
        return self

    def match(self, s=''):
        """return all options that match, in the name or the description,
        with string `s`, case is disregarded.

        Example: ``ncopt.CMAESOptions().match('verb')`` returns the
        verbosity options.

        """
        match = s.lower()
        res = {}
        for k in sorted(self):
            s = str(k) + '=\'' + str(self[k]) + '\''
            if match in s.lower():
                res[k] = self[k]
        return type(self)(res)

    def pprint(self, linebreak=80):
        for i in sorted(self.items()):
            s = str(i[0]) + "='" + str(i[1]) + "'"
            a = s.split(' ')

            # print s in chunks
            line = ''  # start entire to the left
            while a:
                while a and len(line) + len(a[0]) < linebreak:
                    line += ' ' + a.pop(0)
                print(line)
                line = '        '  # tab for subsequent lines

class OptOptions(CMAESOptions):
    """options of the dispatcher `ncopt.solver.NonConvexOpt`, termination
    by iteration budget and by tolerances on the change of the best
    function value.

    >>> from ncopt.options_parameters import OptOptions
    >>> opts = OptOptions({'rtol': '1e-8', 'max_iter': 10}).evalall()
    >>> opts['rtol'], opts['max_iter'], opts['atol']
    (1e-08, 10, 1e-06)

    """
    @staticmethod
    def defaults():
        return opt_default_options

cmaes_default_options = cmaes_default_options_()
opt_default_options = opt_default_options_()

class Config(object):
    """configuration of a `ncopt.solver.NonConvexOpt` run, with
    dispatcher options in `opt_conf` and the options of exactly one
    algorithm in `alg_conf`, like::

        {
            "opt_conf": {"max_iter": 10, "rtol": "1e-8", "atol": "1e-8"},
            "alg_conf": {"CMAES": {"initial_sigma": 1.0,
                                   "population_size": 100}}
        }

    Numbers may be given as strings. The keys ``population_size``,
    ``initial_sigma`` and ``num_parents`` are accepted for the `CMAES`
    options ``popsize``, ``sigma0`` and ``num_parents``.

    >>> from ncopt.options_parameters import Config
    >>> conf = Config.from_json('''{"opt_conf": {"max_iter": 10},
    ...     "alg_conf": {"CMAES": {"population_size": 20}}}''')
    >>> conf.algorithm, conf.alg_options['popsize'], conf.opt_conf['max_iter']
    ('CMAES', 20, 10)
    >>> Config.from_json(conf.to_json()).to_dict() == conf.to_dict()
    True

    """
    aliases = {'population_size': 'popsize', 'initial_sigma': 'sigma0'}

    def __init__(self, opt_conf=None, alg_conf=None):
        try:
            self.opt_conf = OptOptions(dict(opt_conf or {}))
        except (TypeError, ValueError) as e:
            raise ConfigurationError('invalid "opt_conf": %s' % str(e))
        if not isinstance(alg_conf, dict) or len(alg_conf) != 1:
            raise ConfigurationError('"alg_conf" must have exactly one'
                                     ' algorithm entry, found %s'
                                     % repr(alg_conf))
        self.algorithm, options = list(alg_conf.items())[0]
        if not isinstance(options, dict):
            raise ConfigurationError('options of %s must be a dict, found %s'
                                     % (self.algorithm, repr(options)))
        self.alg_options = CMAESOptions(dict(
            (self.aliases.get(k, k), v) for k, v in options.items()))

    @property
    def alg_conf(self):
        return {self.algorithm: self.alg_options}

    @classmethod
    def from_dict(cls, dic):
        """return a `Config` from a `dict` with keys ``opt_conf`` and
        ``alg_conf``"""
        unknown = set(dic) - set(['opt_conf', 'alg_conf'])
        if unknown:
            raise ConfigurationError('unknown configuration keys %s'
                                     % str(sorted(unknown)))
        return cls(dic.get('opt_conf'), dic.get('alg_conf'))

    @classmethod
    def from_json(cls, s):
        try:
            dic = json.loads(s)
        except json.JSONDecodeError as e:
            raise ConfigurationError('invalid JSON configuration: %s' % str(e))
        if not isinstance(dic, dict):
            raise ConfigurationError('JSON configuration must be an object')
        return cls.from_dict(dic)

    def to_dict(self):
        return {'opt_conf': dict(self.opt_conf),
                'alg_conf': {self.algorithm: dict(self.alg_options)}}

    def to_json(self, indent=4):
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

class CMAESParameters(object):
    """strategy parameters like population size and learning rates.

    Parameters depend on the dimension `N`, the population size and the
    number of parents `mu` only and do not change during the run.

    The log-rank weights use the rank base ``max(popsize, 2 * mu)``,
    which is larger than ``popsize`` when ``mu > popsize / 2`` and keeps
    all `mu` weights positive:

    >>> from ncopt.options_parameters import CMAESParameters
    >>> sp = CMAESParameters(2, 10, 8)
    >>> assert len(sp.weights) == 8 and min(sp.weights) > 0

    Example
    -------
    >>> from ncopt.options_parameters import CMAESParameters
    >>> sp = CMAESParameters(2, 10, 4)
    >>> sp.disp()  #doctest: +ELLIPSIS
    {'N': 2,
     'c1': 0.14...,
     'cc': 0.61...,
     'chiN': 1.25...,
     'cmu': 0.14...,
     'cs': 0.50...,
     'damps': 1.50...,
     'mu': 4,
     'mueff': 3.01...,
     'popsize': 10,
     'weights': [0.468...,
                 0.277...,
                 0.166...,
                 0.087...]}

    An invalid combination raises a `ConfigurationError`:

    >>> try:
    ...     CMAESParameters(2, 3, 4)
    ... except ValueError as e:
    ...     print(e)
    number of parents mu=4 must be in [1, popsize=3]

    :See: `CMAESOptions`, `ncopt.CMAES`

    """
    def __init__(self, N, popsize, mu=None):
        """Compute strategy parameters as a function of dimension,
        population size and number of parents"""
        if mu is None:
            mu = max((1, popsize // 2))
        for name, val in (('dimension N', N), ('popsize', popsize),
                          ('number of parents mu', mu)):
            if isinstance(val, bool) or int(val) != val:
                raise ConfigurationError('%s=%s must be an integer'
                                         % (name, repr(val)))
        self.N = N = int(N)
        self.popsize = int(popsize)
        """number of candidate solutions per iteration, AKA population size"""
        self.mu = mu = int(mu)
        if N < 1:
            raise ConfigurationError('dimension N=%d must be >= 1' % N)
        if self.popsize < 1:
            raise ConfigurationError('popsize=%d must be >= 1' % self.popsize)
        if not 1 <= mu <= self.popsize:
            raise ConfigurationError('number of parents mu=%d must be in'
                                     ' [1, popsize=%d]' % (mu, self.popsize))
        self.weights = RecombinationWeights(mu, self.popsize)
        self.mueff = mueff = self.weights.mueff

        self.cc = (4 + mueff / N) / (N + 4 + 2 * mueff / N)
        self.cs = (mueff + 2) / (N + mueff + 5)
        self.c1 = 2 / ((N + 1.3)**2 + mueff)
        self.cmu = min((1 - self.c1,
                        2 * (mueff - 2 + 1 / mueff) / ((N + 2)**2 + mueff)))
        self.damps = 1 + 2 * max((0, ((mueff - 1) / (N + 1))**0.5 - 1)) + self.cs
        self.chiN = Mh.chiN(N)

    @property
    def lam(self):
        """alias for `popsize`, AKA lambda"""
        return self.popsize

    def disp(self):
        utils.pprint(self.__dict__)
