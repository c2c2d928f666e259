#!/usr/bin/env python3
"""
Setup script for recordconfig package.
"""

from setuptools import setup, find_packages

setup(
    name="recordconfig",
    version="0.1.0",
    description="Persist dataclass records as sections of a JSON or INI config document",
    author="recordconfig Team",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.10",
    install_requires=[
        "rich>=13.0",
        "typer>=0.9",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "recordconfig=recordconfig.cli.main:run",
        ],
    },
)
