# -*- coding: utf-8 -*-
"""`RecombinationWeights` is a list of recombination weights for the CMA-ES.

The dependency chain is

lambda, mu -> weights -> mueff -> cc, cs, c1, cmu, damps

where only the `mu` best of `lambda` candidate solutions obtain a
(strictly positive) weight.

"""
import math
import numpy as np

class RecombinationWeights(list):
    """a list of `mu` strictly decreasing positive (recombination) weight
    values which sum to one.

    To be used in the update of the mean and of the covariance matrix C
    in CMA-ES as ``w_i``::

        m <- sum w_i x_i:lambda
        C <- (1 - c1 - cmu) C + c1 ... + cmu sum w_i y_i y_i^T

    where ``x_i:lambda`` is the i-th best of lambda solutions.

    Class attributes/properties:

    - ``mu``: number of weights, alias for ``len(self)``
    - ``lambda_``: population size the weights were computed for
    - ``mueff``: variance effective number of weights, i.e.
      ``1 / sum([self[i]**2 for i in range(self.mu)])``
    - `asarray`: alias for ``np.asarray(self)``

    Usage:

    >>> from ncopt.recombination_weights import RecombinationWeights
    >>> weights = RecombinationWeights(4, 10)
    >>> print('weights = [%s]' % ', '.join("%.3f" % w for w in weights))
    weights = [0.468, 0.278, 0.166, 0.087]
    >>> print("sum=%.2f, mu=%d, mueff=%.2f" % (sum(weights), weights.mu,
    ...                                         weights.mueff))
    sum=1.00, mu=4, mueff=3.01

    A single parent gets the full weight:

    >>> RecombinationWeights(1, 1)
    [1.0]

    When more than half of the population is selected, the rank base is
    increased to ``2 * mu`` such that all weights remain positive:

    >>> weights = RecombinationWeights(5, 6)
    >>> assert all(w > 0 for w in weights) and weights.lambda_ == 6
    >>> assert weights == RecombinationWeights(5, 10)

    Reference: Hansen 2016, arXiv:1604.00772.
    """
    def __init__(self, mu, lambda_=None):
        """return recombination weights `list`, post condition is
        ``sum(self) == 1`` and ``len(self) == mu``.

        The raw shape of weight ``i`` is ``log((lambda_ + 1) / 2) -
        log(i + 1)`` where ``lambda_`` is replaced by ``2 * mu`` when
        smaller. Weights are strictly decreasing.

        :param `mu`: number of weights, AKA number of parents. Alternatively,
            a list of "raw" weights can be provided.
        :param `lambda_`: population size, by default ``2 * mu``.

        """
        weights = mu
        try:
            mu = len(weights)
        except TypeError:  # create from scratch
            if mu < 1:
                raise ValueError("number of weights must be >=1, was %s"
                                 % str(mu))
            base = max((lambda_ or 0, 2 * mu))
            weights = [math.log((base + 1) / 2.) - math.log(i + 1)
                       for i in range(mu)]  # raw shape
        if mu < 1:
            raise ValueError("number of weights must be >=1, was %d" % mu)
        self.lambda_ = lambda_ if lambda_ is not None else 2 * mu
        if self.lambda_ < mu:
            raise ValueError("population size lambda_=%d must not be"
                             " smaller than mu=%d" % (self.lambda_, mu))
        list.__init__(self, weights)
        self.set_attributes_from_weights()

    def set_attributes_from_weights(self, weights=None, do_asserts=True):
        """make the class attribute values consistent with weights, in
        case after (re-)setting the weights from input parameter ``weights``,
        post condition is ``sum(self) == 1``.

        Weights must be non-increasing and strictly positive.
        """
        if weights is not None:
            self[:] = weights
        weights = self
        if not weights[-1] > 0:
            raise ValueError(
                "all weights must be >0 but the last was %f" % weights[-1])
        ssum = sum(weights)
        for i in range(len(self)):
            self[i] /= ssum
        # variance-effectiveness of sum^mu w_i x_i
        self.mueff = 1**2 / sum(w**2 for w in weights)
        not do_asserts or self.do_asserts()
        return self

    def do_asserts(self):
        """assert consistency.

        Assert:

        - attribute values of ``mu, mueff``
        - positivity and monotonicity of weights
        - sum of weights to be one

        """
        weights = self
        assert 1 >= weights[0] >= weights[-1] > 0
        assert all(weights[i] > weights[i+1]
                        for i in range(len(weights) - 1))  # monotony
        assert 1 - 1e-12 < sum(weights) < 1 + 1e-12
        assert 1 <= self.mueff <= self.mu * (1 + 1e-12)
        assert (self.mueff / 1.001 < 1 / sum(w**2 for w in weights)
                < 1.001 * self.mueff)

    @property
    def mu(self):
        """alias for ``len(self)``"""
        return len(self)
    @property
    def asarray(self):
        """return weights as numpy array"""
        return np.asarray(self)
