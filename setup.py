#!/usr/bin/env python

# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

# -*- encoding: utf-8 -*-

from glob import glob
from os.path import basename
from os.path import splitext

from setuptools import find_packages
from setuptools import setup

setup(
    name="chordal",
    version="0.0.0",
    license="GPL-3.0-or-later",
    description="Modal key-chord interpreter: type C-x C-s as x s",
    long_description="Rewrites a stream of plain key presses into modifier-prefixed key sequences and resolves them against a prefix keymap.",
    author="Rose Davidson",
    author_email="rose@metaclassical.com",
    packages=find_packages("src"),
    package_dir={"": "src"},
    py_modules=[splitext(basename(path))[0] for path in glob("src/*.py")],
    include_package_data=True,
    zip_safe=False,
    classifiers=[
        # complete classifier list: http://pypi.python.org/pypi?%3Aaction=list_classifiers
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: Implementation :: CPython",
        "Topic :: Text Editors :: Emacs",
    ],
    keywords=["keybindings", "modal editing", "key chords"],
    python_requires=">=3.11",
    install_requires=[
        "cattrs>=22.1.0",
        "msgspec>=0.18.0",
        "pygtrie>=2.4.2",
        "tomli>=1.1.0",
        "trio>=0.22.0",
        "trio-util>=0.7.0",
    ],
    tests_require=["pytest>=6.2.4", "pytest-trio>=0.8.0"],
    extras_require={
        "test": ["pytest>=6.2.4", "pytest-trio>=0.8.0"],
    },
    entry_points={
        "console_scripts": [
            "chordal-describe = chordal.scripts:describe_cli",
            "chordal-replay = chordal.scripts:replay_cli",
        ],
    },
)
