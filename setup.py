#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""setup for ncopt package distribution.

To run the tests from the code folder::

    pip install -e .[test]
    python -m ncopt.test
    python -m pytest

Check distribution and project description::

    python setup.py sdist bdist_wheel
    twine check dist/*

"""
from setuptools import setup

def _read_init(field):
    """return the version or the docstring from ``ncopt/__init__.py``
    without importing the package, which needs `numpy`"""
    with open('ncopt/__init__.py') as f:
        text = f.read()
    if field == '__doc__':
        return text.split('"""')[1]
    for line in text.splitlines():
        if line.startswith(field):
            return line.split('=')[1].strip().strip('"\'')
    raise ValueError('%s not found in ncopt/__init__.py' % field)

setup(name="ncopt",
      long_description=_read_init('__doc__'),
      long_description_content_type='text/x-rst',
      version=_read_init('__version__'),
      description="CMA-ES, Covariance Matrix Adaptation " +
                  "Evolution Strategy for constrained non-convex " +
                  "maximization in Python",
      license="BSD",
      classifiers=[
          "Intended Audience :: Science/Research",
          "Intended Audience :: Education",
          "Topic :: Scientific/Engineering",
          "Topic :: Scientific/Engineering :: Mathematics",
          "Operating System :: OS Independent",
          "Programming Language :: Python :: 3",
          "Development Status :: 3 - Alpha",
          "Environment :: Console",
          "License :: OSI Approved :: BSD License",
      ],
      keywords=["optimization", "CMA-ES", "cmaes", "non-convex"],
      packages=["ncopt", "ncopt.utilities"],
      python_requires=">=3.8",
      install_requires=["numpy"],
      extras_require={
            "test": ["pytest"],
      },
      )
