"""
Setup script for supervised random walk training package.
"""

from setuptools import setup, find_packages

setup(
    name="srw_training",
    version="1.0.0",
    description="Supervised random walk with restart: learning edge-feature weights by SGD",
    author="SRW Team",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"config": ["default.yaml"]},
    python_requires=">=3.9",
    install_requires=[
        "torch>=2.0.0",
        "networkx>=3.0",
        "numpy>=1.23.0",
        "pyyaml>=6.0",
        "scikit-learn>=1.2.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.3.0",
        ],
    },
)
