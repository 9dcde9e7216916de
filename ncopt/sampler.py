"""Multi-variate normal sampler with full covariance matrix and its
eigendecomposition by power iteration, used by `ncopt.CMAES`.
"""
import numpy as np
from .utilities.utils import print_message
from .utilities.math import Mh, power_eigh, symmetrize
from .interfaces import StatisticalModelSamplerWithZeroMeanBaseClass

class GaussEigenSampler(StatisticalModelSamplerWithZeroMeanBaseClass):
    """Multi-variate normal distribution with zero mean.

    Provides methods to `sample` from and `update` a multi-variate
    normal distribution with zero mean and full covariance matrix ``C``
    and to `decompose` ``C`` into ``B diag(D**2) B^T`` with `power_eigh`.

    :param dimension: (required) define the dimensionality (attribute
        ``dimension``) of the normal distribution. If ``dimension`` is a
        vector, it sets the diagonal of the initial covariance matrix.

    :param rng: `numpy.random.Generator` used for sampling and for the
        start vectors of the power iteration.

    :param eigen_maxiter, eigen_tol, eigen_floor: passed to `power_eigh`.

    >>> import numpy as np
    >>> from ncopt.sampler import GaussEigenSampler
    >>> g = GaussEigenSampler(2, np.random.default_rng(4))
    >>> assert g.sample(3).shape == (3, 2)
    >>> assert g.norm([1, 0]) == 1
    >>> g.update(np.zeros(2), [[2., 0.]], [1.], c1=0, cmu=0.5)
    >>> g.decompose()
    >>> assert np.allclose(g.variances, [2.5, 0.5])
    >>> assert np.allclose(g.D, [2.5**0.5, 0.5**0.5])
    >>> assert np.allclose(g.condition_number, 5)

    """
    def __init__(self, dimension, rng=None,
                 eigen_maxiter=20,
                 eigen_tol=1e-12,
                 eigen_floor=1e-20,
                 verbose=1):
        try:
            self.dimension = len(dimension)
            standard_deviations = np.asarray(dimension, dtype=float)
        except TypeError:
            self.dimension = dimension
            standard_deviations = np.ones(dimension)
        self.rng = rng if rng is not None else np.random.default_rng()
        self.eigen_maxiter = eigen_maxiter
        self.eigen_tol = eigen_tol
        self.eigen_floor = eigen_floor
        self.verbose = verbose
        self.C = np.diag(standard_deviations**2)
        "covariance matrix"
        self.B = np.eye(self.dimension)
        "columns, B.T[i] == B[:, i], are eigenvectors of C"
        self.D = np.array(standard_deviations)
        "axis lengths, roots of eigenvalues, in decreasing order after `decompose`"
        self.count_tell = 0
        self.count_eigen = 0

    @property
    def variances(self):
        return np.diag(self.C)

    @property
    def covariance_matrix(self):
        return self.C

    def sample(self, number):
        """return ``number`` samples ``B (D * z)`` with ``z ~ N(0, I)`` as
        rows of an array, all drawn at once from ``self.rng``"""
        arz = self.rng.standard_normal((number, self.dimension))
        return np.dot(self.B, (self.D * arz).T).T

    def update(self, pc, vectors, weights, c1, cmu):
        """update ``C`` with decay, rank-one and rank-mu term::

            C <- (1 - c1 - cmu) C + c1 pc pc^T + cmu sum_k w_k y_k y_k^T

        where ``vectors`` are the rows ``y_k``. The update is computed
        for the upper triangle and mirrored, then ``C`` is symmetrized.
        """
        pc = np.asarray(pc, dtype=float)
        vectors = np.asarray(vectors, dtype=float)  # row vectors
        weights = np.asarray(weights, dtype=float)
        assert len(weights) == len(vectors)
        C = (1 - c1 - cmu) * self.C
        C += c1 * np.outer(pc, pc)
        C += cmu * np.dot(weights * vectors.T, vectors)
        upper = np.triu(C)
        self.C = symmetrize(upper + np.triu(upper, 1).T)
        self.count_tell += 1

    def decompose(self):
        """eigen-decompose ``self.C`` thereby updating ``self.B`` and
        ``self.D`` and reconstruct ``C = B diag(D**2) B^T``.

        Eigenvalues below ``eigen_floor`` are set to the floor, ``self.C``
        is symmetric afterwards.
        """
        asymmetry = Mh.max_asymmetry(self.C)
        if asymmetry > 0 and self.verbose >= 2:
            print_message('covariance matrix asymmetry %e removed' % asymmetry,
                          'decompose', 'GaussEigenSampler', self.count_eigen,
                          verbose=self.verbose)
        evals, self.B = power_eigh(symmetrize(self.C), self.rng,
                                   maxiter=self.eigen_maxiter,
                                   tol=self.eigen_tol,
                                   floor=self.eigen_floor)
        if self.verbose >= 2 and np.any(evals <= self.eigen_floor):
            print_message('%d eigenvalue(s) set to the floor value %e'
                          % (np.sum(evals <= self.eigen_floor), self.eigen_floor),
                          'decompose', 'GaussEigenSampler', self.count_eigen,
                          verbose=self.verbose)
        self.D = evals**0.5
        self.C = symmetrize(np.dot(self.B * evals, self.B.T))
        self.count_eigen += 1

    def transform_inverse(self, x):
        """apply inverse linear transformation ``C**-0.5`` to `x`."""
        return np.dot(self.B, np.dot(self.B.T, x) / self.D)

    @property
    def condition_number(self):
        return (max(self.D) / min(self.D))**2

    def norm(self, x):
        """compute the Mahalanobis norm that is induced by the
        statistical model / sample distribution, specifically by
        covariance matrix ``C``. The expected Mahalanobis norm is
        about ``sqrt(dimension)``.
        """
        return sum((np.dot(self.B.T, x) / self.D)**2)**0.5
