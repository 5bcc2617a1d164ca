"""
Setup script for inelastic_mc package.

Installation:
    pip install -e .
"""

from setuptools import setup, find_packages

setup(
    name="inelastic_mc",
    version="0.1.0",
    description="Electron-impact ionisation cross-sections and Monte Carlo sampling for H, He and H2",
    author="William Comaskey",
    packages=find_packages(include=["inelastic_mc", "inelastic_mc.*"]),
    package_data={"inelastic_mc.config": ["defaults.yaml"]},
    python_requires=">=3.10",
    install_requires=[
        "numpy>=1.24",
        "scipy>=1.10",
        "matplotlib>=3.7",
        "numba>=0.58",
        "pyyaml>=6.0",
        "tqdm>=4.65",
    ],
    extras_require={
        "dev": ["pytest>=7.3", "black>=23.0", "mypy>=1.3", "ipython>=8.12"],
        "all": ["pytest>=7.3"],
    },
)
