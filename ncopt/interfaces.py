"""Very few interface defining base class definitions"""
import collections

State = collections.namedtuple('State', ['best_x', 'best_f', 'population',
                                         'fitness', 'feasible', 'generation'])
State.__doc__ = """read-only view of an optimizer after a generation.

``best_x`` and ``best_f`` are the incumbent, the best feasible solution
seen so far, ``population`` is the ``lambda x n`` array of the last
generation with ``fitness`` values and boolean ``feasible`` flags, and
``generation`` is the number of completed generations."""

class OptimizationAlgorithm(object):
    """abstract base class for an optimizer that is advanced one
    generation at a time and maximizes the objective.

    Relevant methods are `step`, `state`, `optimize` and `stop`. Only
    `optimize` is fully implemented in this base class.

    Examples
    --------
    The shortest example uses the inherited method
    `OptimizationAlgorithm.optimize`::

        import ncopt
        es = ncopt.CMAES(8 * [0.1], 0.5, ncopt.ff.neg_elli).optimize(100)
        print(es.state().best_f)

    Virtually the same example can be written with an explicit loop
    instead of using `optimize`::

        optim = ncopt.CMAES(9 * [0.5], 0.3, ncopt.ff.neg_elli)
        while optim.state().generation < 100:
            optim.step()         # do all the real work
            optim.disp(20)       # display info every 20th iteration

        print('best f-value =', optim.state().best_f)

    """
    def step(self):
        """abstract method, conduct one generation (iteration)"""
        raise NotImplementedError('method step() must be implemented in derived class')
    def state(self):
        """abstract method, return a `State` `namedtuple`"""
        raise NotImplementedError('method state() must be implemented in derived class')
    def stop(self):
        """return satisfied termination conditions in a dictionary like
        ``{'termination reason': value, ...}`` or ``{}``.

        The base class never terminates, termination by tolerances is
        decided by `ncopt.solver.NonConvexOpt`.
        """
        return {}
    def disp(self, modulo=None):
        """abstract method, display some iteration info when
        ``self.countiter % modulo < 1``, using a reasonable
        default for `modulo` if ``modulo is None``.
        """
    @property
    def result(self):
        """abstract property, contain ``(x, f(x), ...)``, that is, the
        maximizer, its function value, ...
        """
        raise NotImplementedError('result property is not implemented')

    def optimize(self, iterations=None, callback=None, verb_disp=None):
        """call `step` `iterations` times or until `stop` returns a
        non-empty `dict`.

        Arguments
        ---------
        ``iterations``: number
            number of (maximal) iterations, `None` means until `stop`.
        ``verb_disp``: number
            print to screen every ``verb_disp`` iteration, if `None`
            the value of the ``verb_disp`` option is "inherited", if
            available.
        ``callback``: callable or list of callables
            callback function called like ``callback(self)`` or
            a list of call back functions called in the same way. If
            available, ``self.logger.add`` is added to this list.

        ``return self``, that is, the `OptimizationAlgorithm` instance.

        Example
        -------
        >>> import ncopt
        >>> es = ncopt.CMAES([3, 4], 1, ncopt.ff.neg_sphere,
        ...                  options={'popsize': 10, 'seed': 3, 'verbose': -9}
        ...                 ).optimize(80, verb_disp=40)  #doctest: +ELLIPSIS
        Iterat #Fevals   function value  axis ratio  sigma  min&max std  t[m:s]
           40    400 ...
           80    800 ...
        >>> assert es.state().best_f > -1e-6

        """
        if iterations is None and type(self).stop is OptimizationAlgorithm.stop:
            raise ValueError('iterations must be given, %s never stops'
                             % type(self).__name__)
        callback = self._prepare_callback_list(callback)

        citer = 0
        while not self.stop():
            if iterations is not None and citer >= iterations:
                break
            citer += 1
            self.step()  # all the work is done here
            for f in callback:
                f(self)
            self.disp(verb_disp)  # disp does nothing if not overwritten
        return self

    def _prepare_callback_list(self, callback):  # helper function
        """return a list of callbacks including ``self.logger.add``.

        ``callback`` can be a `callable` or a `list` (or iterable) of
        callables. Otherwise a `ValueError` exception is raised.
        """
        if callback is None:
            callback = []
        if callable(callback):
            callback = [callback]
        try:
            callback = list(callback)
        except TypeError:
            raise ValueError("""callback argument must be a `callable` or
                an iterable (e.g. a list) of callables, it was %s"""
                             % str(callback))
        for c in callback:
            if not callable(c):
                raise ValueError("callback argument %s is not callable"
                                 % str(c))
        logger = getattr(self, 'logger', None)
        if logger is not None:
            callback.append(logger.add)
        return callback

class StatisticalModelSamplerWithZeroMeanBaseClass(object):
    """yet versatile base class for the sampler of `ncopt.CMAES`
    """
    def sample(self, number):
        """return array of ``number`` i.i.d. samples as rows"""
        raise NotImplementedError

    def update(self, *args, **kwargs):
        """update the distribution from samples and learning rates"""
        raise NotImplementedError

    def norm(self, x):
        """return Mahalanobis norm of `x` w.r.t. the statistical model"""
        return sum(self.transform_inverse(x)**2)**0.5
    @property
    def condition_number(self):
        raise NotImplementedError
    @property
    def covariance_matrix(self):
        raise NotImplementedError
    @property
    def variances(self):
        """vector of coordinate-wise (marginal) variances"""
        raise NotImplementedError

    def transform_inverse(self, x):
        raise NotImplementedError

class BaseDataLogger(object):
    """abstract base class for a data logger that can be used with an
    `OptimizationAlgorithm`.

    Details: attribute `modulo` is used in `add`.
    """

    def __init__(self):
        self.optim = None
        """object instance to be logging data from"""
        self._data = None
        """`dict` of logged data"""

    def register(self, optim, *args, **kwargs):
        """register an optimizer ``optim``, only needed if method `add` is
        called without passing the ``optim`` argument
        """
        self.optim = optim
        return self

    def add(self, optim=None, more_data=None, **kwargs):
        """abstract method, add a "data point" from the state of ``optim``
        into the logger.

        The argument ``optim`` can be omitted if ``optim`` was
        ``register`` ()-ed before, acts like an event handler
        """
        raise NotImplementedError

    def disp(self, *args, **kwargs):
        """abstract method, display some data trace"""
        print('method BaseDataLogger.disp() not implemented, to be done in subclass ' + str(type(self)))

    @property
    def data(self):
        """logged data in a dictionary"""
        return self._data
