# -*- coding: utf-8 -*-
"""logger class `CMAESDataLogger` to record the state of an `ncopt.CMAES`
run in memory.
"""
import numpy as np
from . import interfaces
from .utilities import utils

class CMAESDataLogger(interfaces.BaseDataLogger):
    """data logger for class `ncopt.CMAES` which keeps all data in
    memory, no files are written.

    The logger is identified by its attribute `data`, a `dict` of
    `numpy` arrays with one row per logged iteration:

    ``'iteration', 'evals', 'fbest', 'fbestever', 'sigma', 'axis_ratio'``
        scalar entries
    ``'mean', 'D', 'stds'``
        vectors, the distribution mean, the square roots of the
        eigenvalues of ``C`` and the coordinate-wise standard deviations
        ``sigma * diag(C)**0.5``.

    Example
    -------
    >>> import ncopt
    >>> es = ncopt.CMAES(3 * [1], 1, ncopt.ff.neg_sphere,
    ...                  options={'popsize': 8, 'seed': 1, 'verb_log': 2})
    >>> es = es.optimize(10)
    >>> es.logger.data['iteration'].tolist()
    [1.0, 2.0, 3.0, 5.0, 7.0, 9.0]
    >>> es.logger.data['mean'].shape
    (6, 3)
    >>> es.logger.disp([0, -1])  #doctest: +ELLIPSIS
    Iterat Nfevals  function value    axis ratio maxstd  minstd
        1       8 ...
        9      72 ...

    """
    scalar_keys = ('iteration', 'evals', 'fbest', 'fbestever', 'sigma',
                   'axis_ratio')
    vector_keys = ('mean', 'D', 'stds')

    def __init__(self, modulo=1):
        """`modulo` defines the logging frequency, zero means never"""
        super(CMAESDataLogger, self).__init__()
        self.modulo = modulo
        self.counter = 0
        """number of calls to `add`"""
        self.registered = False
        self._rows = dict((key, []) for key in self.scalar_keys + self.vector_keys)

    @property
    def data(self):
        """`dict` of logged data as `numpy` arrays"""
        return dict((key, np.asarray(rows, dtype=float))
                    for key, rows in self._rows.items())

    def register(self, es, modulo=None):
        """register an `ncopt.CMAES` instance ``es``"""
        self.optim = es
        if modulo is not None:
            self.modulo = modulo
        self.registered = True
        return self

    def add(self, es=None, more_data=None, modulo=None):
        """append logging data from `CMAES` instance `es`, if
        ``number_of_times_called % modulo`` equals to zero, never if
        ``modulo==0``. The first three calls are always logged.

        ``more_data`` is a `dict` of additional scalar entries.
        """
        mod = modulo if modulo is not None else self.modulo
        self.counter += 1
        if not mod or (self.counter > 3 and (self.counter - 1) % mod):
            return self
        if es is None:
            if self.optim is None:
                raise AttributeError('call `add` with argument `es` or'
                                     ' ``register(es)`` before ``add()``')
            es = self.optim
        elif not self.registered:
            self.register(es)

        D = np.asarray(es.D)
        row = {'iteration': es.countiter,
               'evals': es.countevals,
               'fbest': es.best.last.f,
               'fbestever': es.best.f,
               'sigma': es.sigma,
               'axis_ratio': max(D) / min(D),
               'mean': es.mean,
               'D': D,
               'stds': es.sigma * es.sm.variances**0.5}
        for key in more_data or {}:
            if key not in self._rows:
                self._rows[key] = [np.nan] * len(self._rows['iteration'])
        row.update(more_data or {})
        for key, rows in self._rows.items():
            rows.append(np.array(row.get(key, np.nan), dtype=float))
        return self

    def disp(self, idx=100):
        """display selected rows of the logged data.

        Arguments
        ---------
           `idx`
               indices corresponding to rows in the data;
               if idx is a scalar (int), the first two, then every idx-th,
               and the last three rows are displayed. Too large index
               values are removed.

        """
        dat = self.data
        ndata = len(dat['iteration'])
        if not ndata:
            utils.print_message('no data logged yet', 'disp', 'CMAESDataLogger')
            return
        if np.isscalar(idx):
            if idx:
                idx = np.r_[0, 1, idx:ndata - 3:idx, -3:0]
            else:
                idx = np.r_[0, 1, -3:0]
        idx = np.asarray(idx, dtype=int)
        idx = idx[idx < ndata]
        idx = idx[-idx <= ndata]
        self.disp_header()
        for i in sorted(set(i % ndata for i in idx)):
            print('%5d' % dat['iteration'][i] + ' %7d' % dat['evals'][i] +
                  ' %.14e' % dat['fbestever'][i] + ' %5.1e' % dat['axis_ratio'][i] +
                  ' %6.2e' % max(dat['stds'][i]) + ' %6.2e' % min(dat['stds'][i]))

    def disp_header(self):
        heading = 'Iterat Nfevals  function value    axis ratio maxstd  minstd'
        print(heading)
