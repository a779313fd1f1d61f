# SPDX-License-Identifier: LGPL-3.0-or-later
from setuptools import setup, find_packages

setup(
    name="winereg",
    version="0.1.0",
    description="Offline reader/writer for Wine prefix registry hives (system.reg, user.reg, regedit exports)",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[l.strip() for l in open("requirements.txt", encoding="utf-8") if l.strip() and not l.startswith("#")],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-cov>=4.1",
        ],
    },
)
