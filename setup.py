#!/usr/bin/env python
import re

from setuptools import find_packages, setup

with open("src/psd_layout/version.py") as f:
    version = re.search(r'__version__ = "(.+)"', f.read()).group(1)

setup(
    name="psd-layout",
    version=version,
    description="Read Adobe Photoshop PSD files into a layer document model",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.9",
    install_requires=[
        "attrs>=23.1.0",
        "numpy",
        "Pillow>=10.3.0",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
