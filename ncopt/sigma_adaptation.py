"""step-size adaptation, cumulative step-size adaptation (CSA) with the
`hsig` gate for the rank-one update of `ncopt.CMAES`
"""
import numpy as np
from .utilities import utils
def _norm(x): return np.sqrt(np.sum(np.square(x)))

class CMAAdaptSigmaCSA(object):
    """CSA cumulative step-size adaptation AKA path length control.

    The isotropic evolution path ``ps`` accumulates the mean shifts
    ``C**-0.5 (mean - mean_old) / sigma`` and sigma is increased when
    ``ps`` is longer than expected under random selection, that is,
    longer than ``chiN``, and decreased otherwise.

    Details: `hsig` or `_update_ps` must be called before the sampling
    distribution is changed. `_update_ps` uses the `ncopt.CMAES`
    attributes ``mean``, ``mean_old``, ``sigma``, ``countiter``, ``N``,
    ``sp`` and ``sm.transform_inverse``.
    """
    def __init__(self, **kwargs):
        """postpone initialization to a method call where dimension and mueff should be known.

        """
        self.is_initialized = False
        self.delta = 1
        "cumulated effect of adaptation, sigma / sigma0"
    def initialize(self, es):
        """set parameters and state variable based on dimension,
        mueff and possibly further options.

        """
        self.cs = es.sp.cs
        self.damps = es.sp.damps
        self.chiN = es.sp.chiN
        self.mueff = es.sp.mueff
        self.max_delta_log_sigma = 1  # sigma increases at most by the factor e
        self.ps = np.zeros(es.N)
        self._ps_updated_iteration = -1
        self.is_initialized = True
        return self
    def _update_ps(self, es):
        """update the isotropic evolution path once per iteration."""
        if not self.is_initialized:
            self.initialize(es)
        if self._ps_updated_iteration == es.countiter:
            return
        z = es.sm.transform_inverse((es.mean - es.mean_old) / es.sigma)
        self.ps = ((1 - self.cs) * self.ps +
                   np.sqrt(self.cs * (2 - self.cs) * self.mueff) * z)
        self._ps_updated_iteration = es.countiter
    def hsig(self, es):
        """return "OK-signal" for rank-one update, `True` (OK) or `False`
        (stall rank-one update), based on the length of an evolution path

        ``es.countiter`` is the number of completed iterations. In the
        first iteration the bias correction is zero and the signal is
        `False`, hence ``es.pc`` remains zero.

        >>> import numpy as np
        >>> import ncopt
        >>> es = ncopt.CMAES([0, 0], 1.0, ncopt.ff.neg_sphere,
        ...                  {'popsize': 20, 'num_parents': 10, 'seed': 1})
        >>> es.step()
        >>> assert np.all(es.pc == 0) and np.any(es.adapt_sigma.ps != 0)
        >>> es = es.optimize(10)
        >>> assert np.any(es.pc != 0)

        """
        self._update_ps(es)
        correction = np.sqrt(1 - (1 - self.cs)**(2 * es.countiter))
        if not correction * self.chiN > 0:
            return False
        return bool(_norm(self.ps) / (correction * self.chiN) < 1.4)
    def update2(self, es, **kwargs):
        """call ``self._update_ps(es)`` and update self.delta.

        Return change factor of self.delta, which is one when the change
        cannot be computed. The factor is at most ``exp(1)``:

        >>> import numpy as np
        >>> import ncopt
        >>> es = ncopt.CMAES(3 * [0], 1.0, ncopt.ff.neg_sphere, {'popsize': 6})
        >>> csa = es.adapt_sigma
        >>> csa.ps = 1e6 * np.ones(3)
        >>> csa._ps_updated_iteration = es.countiter  # keep ps as is
        >>> csa.update(es)
        >>> assert abs(es.sigma - np.exp(1)) < 1e-12
        >>> csa.ps = np.zeros(3)
        >>> csa.update(es)
        >>> assert es.sigma < np.exp(1)

        """
        delta_old = self.delta
        self._update_ps(es)
        verbose = es.opts['verbose']
        if not self.chiN:
            if verbose >= 2:
                utils.print_message('sigma update skipped, chiN is zero',
                                    'update2', 'CMAAdaptSigmaCSA',
                                    es.countiter, verbose)
            return 1.
        s = _norm(self.ps) / self.chiN - 1
        s *= self.cs / self.damps
        if not np.isfinite(s):
            if verbose >= 2:
                utils.print_message('sigma update skipped, exponent is %s' % str(s),
                                    'update2', 'CMAAdaptSigmaCSA',
                                    es.countiter, verbose)
            return 1.
        s_clipped = min((s, self.max_delta_log_sigma))
        self.delta *= np.exp(s_clipped)
        if s_clipped != s and verbose >= 2:
            utils.print_message('sigma change np.exp(' + str(s) + ') = ' + str(np.exp(s)) +
                          ' clipped to np.exp(' + str(self.max_delta_log_sigma) + ')',
                          'update2', 'CMAAdaptSigmaCSA', es.countiter, verbose)
        return self.delta / delta_old
    def update(self, es, **kwargs):
        """call ``self._update_ps(es)`` and update ``es.sigma``."""
        es.sigma *= self.update2(es, **kwargs)
