# SPDX-FileCopyrightText: 2025 shamir257 contributors
# SPDX-License-Identifier: MIT

from setuptools import find_packages, setup

setup(
    name="shamir257",
    version="0.1.0",
    description="Shamir's secret sharing over GF(257) with JSON-line shares",
    author="shamir257 contributors",
    license="MIT",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.8",
    install_requires=[
        "click<9.0,>=8.1",
        "cryptography>=38.0.4",
    ],
    extras_require={
        # dev / тестирование
        "test": [
            "pytest>=8.0.0",
            "pytest-cov>=5.0.0",
            "pytest-timeout>=2.3.0",
            "hypothesis>=6.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "shamir257=shamir257.cli:main",
        ],
    },
)
