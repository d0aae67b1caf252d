#!/usr/bin/env python3
"""
keyed-state Setup Script
========================
Allows installation of the keyed-state package.

Usage:
    pip install -e .           # Development install
    pip install -e .[test]     # Development install with test tools
"""

from setuptools import setup, find_packages

setup(
    name="keyed-state",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
        ],
    },
)
