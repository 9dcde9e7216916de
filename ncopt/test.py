#!/usr/bin/env python
"""test module of `ncopt` package.

Usage::

    python -m ncopt.test -h    # print this docstring
    python -m ncopt.test       # doctest all (listed) files
    python -m ncopt.test list  # list files to be doctested
    python -m ncopt.test interfaces.py [file2 [file3 [...]]] # doctest only these

or equivalently by passing Python code::

    python -c "import ncopt.test; ncopt.test.main()"  # doctest all (listed) files
    python -c "import ncopt.test; ncopt.test.main('list')"  # show files in doctest list
    python -c "import ncopt.test; help(ncopt.test)"  # print this docstring

File(name)s are interpreted within the package. Without a filename
argument, all files from attribute `files_for_doctest` are tested.

The same doctests are collected by ``python -m pytest`` as configured in
``setup.cfg``.
"""
import os, sys
import doctest

files_for_doctest = ['evolution_strategy.py',
                     'fitness_functions.py',
                     'interfaces.py',
                     'logger.py',
                     'optimization_tools.py',
                     'options_parameters.py',
                     'problem.py',
                     'recombination_weights.py',
                     'sampler.py',
                     'sigma_adaptation.py',
                     'solver.py',
                     'test.py',
                     os.path.join('utilities', 'math.py'),
                     os.path.join('utilities', 'utils.py'),
    ]

def various_doctests():
    """various doc tests.

    This function describes test cases and might in future become
    helpful as an experimental tutorial as well. The main testing feature
    at the moment is by doctest with ``ncopt.test.main()`` in a Python
    shell or by ``python -m ncopt.test`` in a system shell.

    Unconstrained convergence on the negated sphere from ``[5, 5]``,
    for several seeds:

    >>> import numpy as np
    >>> import ncopt
    >>> for seed in range(1, 6):
    ...     es = ncopt.CMAES([5, 5], 1.0, ncopt.ff.neg_sphere,
    ...                      {'popsize': 20, 'num_parents': 10, 'seed': seed})
    ...     assert es.optimize(50).state().best_f > -0.01, seed

    The same via the dispatcher with a JSON configuration:

    >>> opt = ncopt.NonConvexOpt('''{
    ...     "opt_conf": {"max_iter": 50, "tolfun_iterations": 0},
    ...     "alg_conf": {"CMAES": {"population_size": 20, "num_parents": 10,
    ...                            "initial_sigma": 1.0, "seed": 7}}}''',
    ...     [5, 5], ncopt.ff.neg_sphere)
    >>> s = opt.run()
    >>> assert s.generation == 50 and s.best_f > -0.01
    >>> opt.result.stop
    {'max_iter': 50}

    Incumbent gating with box constraints, starting outside of the box.
    A feasible solution must have been seen before the incumbent changes
    and the incumbent value never decreases:

    >>> box = ncopt.BoxConstraints([0, 0], [10, 10])
    >>> es = ncopt.CMAES([-2, -2], 1.0, ncopt.OptProb(ncopt.ff.neg_sphere, box),
    ...                  {'popsize': 20, 'num_parents': 10, 'seed': 4})
    >>> fs = []
    >>> for g in range(10):
    ...     es.step()
    ...     s = es.state()
    ...     assert s.best_f == -np.inf or box(s.best_x), s.best_x
    ...     assert s.best_f == -np.inf or any(s.feasible) or fs[-1] == s.best_f
    ...     fs.append(s.best_f)
    >>> assert all(f1 <= f2 for f1, f2 in zip(fs[:-1], fs[1:]))

    Without any feasible solution the incumbent is ``x0`` with ``-inf``:

    >>> es = ncopt.CMAES([1, 1], 0.1, ncopt.OptProb(ncopt.ff.neg_sphere,
    ...                                             lambda x: False),
    ...                  {'popsize': 6, 'seed': 1}).optimize(5)
    >>> es.state().best_x.tolist(), es.state().best_f, es.result.evals_best
    ([1.0, 1.0], -inf, 0)

    Recombination weights of ``lambda=10, mu=4`` as regression values:

    >>> sp = ncopt.options_parameters.CMAESParameters(2, 10, 4)
    >>> np.round(sp.weights, 3).tolist(), round(float(sp.mueff), 2)
    ([0.468, 0.278, 0.166, 0.087], 3.01)
    >>> assert abs(sum(sp.weights) - 1) < 1e-12
    >>> assert all(np.diff(sp.weights) < 0) and min(sp.weights) > 0

    Eigendecomposition of a diagonal covariance matrix recovers the axis
    lengths and a signed permutation of the identity:

    >>> from ncopt.utilities.math import power_eigh
    >>> evals, B = power_eigh(np.diag([4., 1.]), np.random.default_rng(3))
    >>> np.round(evals**0.5, 6).tolist()
    [2.0, 1.0]
    >>> assert np.allclose(np.abs(B), np.eye(2), atol=1e-6)
    >>> assert set(np.round(np.abs(B).sum(axis=0), 6)) == {1.0}

    A negative eigenvalue enters with its absolute value, a vanishing
    spectrum is raised to the floor, eigenvalues remain positive:

    >>> evals, B = power_eigh([[1., 2.], [2., 1.]], np.random.default_rng(4))
    >>> assert np.allclose(evals, [3, 1]) and min(evals) > 0
    >>> power_eigh(np.zeros((2, 2)), floor=1e-20)[0].tolist()
    [1e-20, 1e-20]

    The first generation leaves the rank-one path ``pc`` unchanged and
    sigma changes at most by the factor ``exp(1)`` per generation:

    >>> es = ncopt.CMAES([0, 0], 1.0, ncopt.ff.neg_sphere,
    ...                  {'popsize': 20, 'num_parents': 10, 'seed': 1})
    >>> es.step()
    >>> es.pc.tolist()
    [0.0, 0.0]
    >>> for g in range(30):
    ...     sigma = es.sigma
    ...     es.step()
    ...     assert es.sigma / sigma <= np.exp(1) * (1 + 1e-12)

    >>> sm = ncopt.sampler.GaussEigenSampler([1., 2.], np.random.default_rng(5))
    >>> sm.decompose()
    >>> assert np.allclose(sorted(sm.D), [1, 2])

    Symmetry and positive definiteness of the covariance matrix,
    positive step-size and population size during a run on an
    ill-conditioned function:

    >>> es = ncopt.CMAES(5 * [1], 0.5, ncopt.ff.neg_elli,
    ...                  {'popsize': 12, 'seed': 2})
    >>> for g in range(60):
    ...     es.step()
    ...     assert np.array_equal(es.C, es.C.T)
    ...     assert min(es.D) > 0 and es.sigma > 0
    ...     assert es.state().population.shape == (12, 5)
    >>> assert es.countevals == 60 * 12 and es.state().generation == 60

    Dimension one and a single parent work:

    >>> es = ncopt.CMAES([3.], 1, ncopt.ff.neg_sphere,
    ...                  {'popsize': 6, 'seed': 1}).optimize(100)
    >>> assert es.state().best_f > -1e-6
    >>> es = ncopt.CMAES([3., 1.], 1, ncopt.ff.neg_sphere,
    ...                  {'popsize': 5, 'num_parents': 1, 'seed': 1}).optimize(100)
    >>> assert es.sp.weights == [1.0] and es.state().best_f > -1e-4
    >>> es = ncopt.CMAES([3., 1.], 1, ncopt.ff.neg_sphere,
    ...                  {'popsize': 1, 'seed': 1}).optimize(20)
    >>> assert es.sp.mu == 1 and np.all(np.isfinite(es.C))

    `nan` function values rank last and never become the incumbent:

    >>> def nan_right(x):
    ...     return np.nan if x[0] > 0 else -sum(np.square(x))
    >>> es = ncopt.CMAES([-1, 1], 1, nan_right,
    ...                  {'popsize': 10, 'seed': 6}).optimize(30)
    >>> assert np.isfinite(es.state().best_f) and es.state().best_x[0] <= 0
    >>> assert np.all(np.isfinite(es.mean)) and np.all(np.isfinite(es.C))

    The random number generator is owned by the instance, the same seed
    gives the same run, sequentially or in parallel threads:

    >>> def run(**options):
    ...     options.update(popsize=8, seed=11)
    ...     with ncopt.CMAES(3 * [1], 0.5, ncopt.ff.neg_rosen, options) as es:
    ...         return es.optimize(30).state()
    >>> s1, s2, s3 = run(), run(), run(eval_parallel=3)
    >>> assert np.array_equal(s1.population, s2.population)
    >>> assert np.array_equal(s1.population, s3.population)
    >>> assert s1.best_f == s3.best_f

    Termination of the dispatcher by tolerance:

    >>> opt = ncopt.NonConvexOpt({'opt_conf': {'atol': 0.1, 'tolfun_iterations': 3},
    ...                           'alg_conf': {'CMAES': {'popsize': 10, 'seed': 1}}},
    ...                          [0.01, 0.01], ncopt.ff.neg_sphere)
    >>> s = opt.run()
    >>> s.generation, opt.stop()
    (4, {'tolfun': (0.1, 1e-06)})

    Invalid configurations raise a `ConfigurationError`, which is a
    `ValueError`, before any evaluation:

    >>> def raises(fun, *args):
    ...     try:
    ...         fun(*args)
    ...     except ncopt.ConfigurationError as e:
    ...         return str(e).splitlines()[0]
    >>> raises(ncopt.CMAES, [1, 2], 1, ncopt.ff.neg_sphere, {'popsize': 0})
    'popsize=0 must be >= 1'
    >>> raises(ncopt.CMAES, [1, 2], 1, ncopt.ff.neg_sphere,
    ...        {'popsize': 4, 'num_parents': 5})
    'number of parents mu=5 must be in [1, popsize=4]'
    >>> raises(ncopt.CMAES, [], 1, ncopt.ff.neg_sphere)
    'x0 must be a non-empty one-dimensional vector, found shape (0,)'
    >>> raises(ncopt.CMAES, [1, 2], float('nan'), ncopt.ff.neg_sphere)
    'initial step-size sigma0=nan must be finite and positive'
    >>> raises(ncopt.CMAES, [1, 2], 1, ncopt.ff.neg_sphere, {'tolx': 1})
    'tolx is not a valid option.'
    >>> print(raises(ncopt.CMAES, [1, 2], 1, ncopt.ff.neg_sphere,
    ...              {'popsize': 'import os'}))  #doctest: +ELLIPSIS
    "import os" is not a safe string (known words are ...
    >>> raises(ncopt.Config.from_dict, {'alg_conf': {'CMAES': {}, 'PSO': {}}})
    '"alg_conf" must have exactly one algorithm entry, found {\\'CMAES\\': {}, \\'PSO\\': {}}'
    >>> raises(ncopt.NonConvexOpt, {'alg_conf': {'PSO': {}}}, [1], ncopt.ff.neg_sphere)
    'unknown algorithm "PSO", known are [\\'CMAES\\']'
    >>> raises(ncopt.Config.from_json, '{"opt_conf": ')  #doctest: +ELLIPSIS
    'invalid JSON configuration: ...'
    >>> raises(ncopt.NonConvexOpt, {'opt_conf': {'max_iter': -1},
    ...                             'alg_conf': {'CMAES': {}}}, [1], ncopt.ff.neg_sphere)
    'max_iter=-1 must be a non-negative integer'

    """

def doctest_files(file_list=files_for_doctest, **kwargs):
    """doctest all (listed) files of the `ncopt` package.

    Details: accepts ``verbose`` and all other keyword arguments that
    `doctest.testfile` would accept, while negative ``verbose`` values
    are passed as 0.
    """
    if isinstance(file_list, str):
        file_list = [file_list]
    verbosity_here = kwargs.get('verbose', 0)
    if verbosity_here < 0:
        kwargs['verbose'] = 0
    failures = 0
    for file_ in file_list:
        file_ = file_.strip().strip(os.path.sep)
        if file_.startswith('ncopt' + os.path.sep):
            file_ = file_[6:]
        if verbosity_here >= 0:
            print('doctesting %s ...' % file_,
                  ' ' * (max(len(_file) for _file in file_list) -
                         len(file_)),
                  end="")
            sys.stdout.flush()
        report = doctest.testfile(file_, package=__package__, **kwargs)
        failures += report[0]
        if verbosity_here >= 0:
            print(report)
    return failures

def get_version():
    """return the version string from ``__init__.py`` without import"""
    with open(os.path.join(os.path.dirname(__file__), '__init__.py')) as f:
        for line in f.readlines():
            if line.startswith('__version__'):
                return line.split('=')[1].strip().strip('"\'')
    return ""

def main(*args, **kwargs):
    """test the `ncopt` package.

    The first argument can be '-h' or '--help' or 'list' to list all
    files to be tested. Otherwise, arguments can be file(name)s to be
    tested, where names are interpreted relative to the package root
    and a leading 'ncopt' + path separator is ignored.

    By default all files are tested.

    :See also: ``python -c "import ncopt.test; help(ncopt.test)"``
    """
    if len(args) > 0:
        if args[0].startswith(('-h', '--h')):
            print(__doc__)
            sys.exit(0)
        elif args[0].startswith('list'):
            for file_ in files_for_doctest:
                print(file_)
            sys.exit(0)
    else:
        v = get_version()
        print("doctesting `ncopt` package%s by calling `doctest_files`:"
              % ((" (v%s)" % v) if v else ""))
    return doctest_files(args if args else files_for_doctest, **kwargs)

if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:]) > 0)
