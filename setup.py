#!/usr/bin/env python3
"""
Hash Store Setup Script
=======================
Allows installation of the hash-store package.

Usage:
    pip install -e .           # Development install
    pip install -e .[test]     # Development install with test tools
    pip install .              # Regular install
"""

from setuptools import setup, find_packages

setup(
    name="hash-store",
    version="1.0.0",
    packages=find_packages(include=["hash_store", "hash_store.*"]),
    python_requires=">=3.10",
    install_requires=[
        "redis>=5.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "hash-store=hash_store.cli:main",
        ],
    },
)
