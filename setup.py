#!/usr/bin/python3

from setuptools import find_packages, setup

# -----------------------------------------------------------------------------
# constants

VERSION = '0.1.0'

# -----------------------------------------------------------------------------
# dependencies

INSTALL_REQUIRES = []

EXTRAS_REQUIRE = {
    "test": [
        "pytest",
        "pytest-mock",
    ],
}

# ----------------------------------------------------------------------------
# COMMON SETUP CONFIG

common = {
    "name": "oclkit",
    "version": VERSION,
    "description": "Runtime invariants, pre/postconditions and derived attributes for Python classes.",
    "python_requires": ">=3.8",
}


setup(
    **common,
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=INSTALL_REQUIRES,
    extras_require=EXTRAS_REQUIRE,
    entry_points={
        "console_scripts": [
            "oclkit = oclkit.cli:main",
        ],
    },
)
