# -*- coding: utf-8 -*-
""" various math utilities, notably `power_eigh` and a collection of simple
functions in `Mh`
"""
import numpy as np

def symmetrize(C):
    """return ``(C + C.T) / 2``, which is exactly symmetric.

    >>> import numpy as np
    >>> from ncopt.utilities.math import symmetrize
    >>> C = symmetrize(np.array([[1., 2.], [2.000001, 3.]]))
    >>> assert C[0, 1] == C[1, 0]

    """
    C = np.asarray(C, dtype=float)
    return (C + C.T) / 2

def _orthonormalized(v, basis):
    """return `v` minus its projection onto the columns of `basis`,
    normalized to length one.

    Gram-Schmidt is applied twice. If `v` lies in the span of `basis`,
    the coordinate direction with the largest orthogonal residual is
    used instead.
    """
    for _ in range(2):
        v = v - np.dot(basis, np.dot(basis.T, v))
    norm = np.sqrt(np.dot(v, v))
    if not norm > 1e-8:
        residuals = np.eye(len(v)) - np.dot(basis, basis.T)
        j = np.argmax(np.sum(residuals**2, axis=0))
        v = residuals[:, j]
        for _ in range(2):
            v = v - np.dot(basis, np.dot(basis.T, v))
        norm = np.sqrt(np.dot(v, v))
    return v / norm

def power_eigh(C, rng=None, maxiter=20, tol=1e-12, floor=1e-20):
    """eigendecomposition of a symmetric matrix by power iteration with
    Hotelling's deflation, return ``(EVals, Basis)``, the eigenvalues in
    decreasing order and an orthonormal basis of the corresponding
    eigenvectors, where

        ``Basis[:, i]``
            is the i-th eigenvector with eigenvalue ``EVals[i]``

    Eigenpairs are extracted one after the other. Each starts from a
    uniform random vector in ``[-1, 1]**n`` drawn from `rng`, which is kept
    orthogonal to the eigenvectors found before. The power iteration on the
    deflated matrix stops after `maxiter` iterations or when the Rayleigh
    quotient changes by less than `tol`. Returned eigenvalues are
    ``max(abs(eigenvalue), floor)``, hence positive, while the deflation
    uses the signed estimate.

    Much slower than `numpy.linalg.eigh` and, with a small `maxiter`,
    only approximate when eigenvalues are close.

    >>> import numpy as np
    >>> from ncopt.utilities.math import power_eigh
    >>> evals, B = power_eigh(np.diag([4., 1.]), np.random.default_rng(1))
    >>> assert np.allclose(evals, [4, 1])
    >>> assert np.allclose(np.abs(B), np.eye(2), atol=1e-5)
    >>> C = np.array([[2., 1., 0], [1., 2., 0], [0, 0, 0.5]])
    >>> evals, B = power_eigh(C, np.random.default_rng(2), maxiter=200)
    >>> assert np.allclose(evals, [3, 1, 0.5], atol=1e-6)
    >>> assert np.allclose(np.dot(B.T, B), np.eye(3))
    >>> assert np.allclose(np.dot(B * evals, B.T), C, atol=1e-5)

    """
    C = np.asarray(C, dtype=float)
    if C.ndim != 2 or C.shape[0] != C.shape[1]:
        raise ValueError("matrix must be square, its shape was %s"
                         % str(C.shape))
    if rng is None:
        rng = np.random.default_rng()
    n = C.shape[0]
    deflated = np.array(C, copy=True)
    B = np.zeros((n, n))
    evals = np.zeros(n)
    for i in range(n):
        found = B[:, :i]
        v = _orthonormalized(2 * rng.random(n) - 1, found)
        eigenvalue = 0.0
        previous = -np.inf
        for _ in range(maxiter):
            w = np.dot(deflated, v)
            norm = np.sqrt(np.dot(w, w))
            if not norm > 1e-10:  # remaining spectrum is (numerically) zero
                break
            v = _orthonormalized(w / norm, found)
            eigenvalue = np.dot(v, np.dot(deflated, v))
            if abs(eigenvalue - previous) < tol:
                break
            previous = eigenvalue
        if not np.isfinite(eigenvalue):
            eigenvalue = 0.0
        evals[i] = max((abs(eigenvalue), floor))
        B[:, i] = v
        deflated -= eigenvalue * np.outer(v, v)
    return evals, B

class MathHelperFunctions(object):
    """static convenience math helper functions"""
    @staticmethod
    def max_asymmetry(C):
        """return ``max(abs(C - C.T))``"""
        C = np.asarray(C)
        return np.max(np.abs(C - C.T)) if C.size else 0.0
    @staticmethod
    def chiN(dimension):
        """approximation of the expectation of norm(randn(dimension)),
        ``N**0.5 * (1 - 1 / (4 N) + 1 / (21 N**2))``.

        >>> from ncopt.utilities.math import Mh
        >>> assert abs(Mh.chiN(1) - 0.7978845608) < 0.02
        >>> assert abs(Mh.chiN(100) - 9.975) < 1e-3

        """
        N = dimension
        return N**0.5 * (1 - 1. / (4 * N) + 1. / (21 * N**2))

Mh = MathHelperFunctions
