from setuptools import setup, find_packages
import os

setup(
    name="GAUSStools",
    version="0.1.0",
    author="GAUSStools contributors",
    description="A toolkit (JIT compiled) for Sturm bisection eigenvalues of symmetric tridiagonal matrices and Gauss quadrature",
    long_description=open("README.md").read() if os.path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Topic :: Scientific/Engineering :: Mathematics",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
    install_requires=[
        # Core scientific computing dependencies
        "numpy>=1.22.0",
        "scipy>=1.7.0",  # special.jn_zeros for the Laguerre zero estimates
        # JIT compilation and parallelization (get_thread_id needs 0.57)
        "numba>=0.57.0",
        "joblib>=1.0.0",
    ],
    extras_require={
        # Test suite
        "test": [
            "pytest>=7.0",
        ],
        # Documentation tools
        "docs": [
            "sphinx>=4.0",
            "sphinx-rtd-theme>=1.0",
            "numpydoc>=1.1",
        ],
        # Complete installation with all optional features
        "all": [
            "pytest>=7.0",
            "black>=21.0",
            "sphinx>=4.0",
            "sphinx-rtd-theme>=1.0",
            "numpydoc>=1.1",
        ],
    },
    include_package_data=True,
    package_data={
        "GAUSStools": ["*.txt", "*.md"],
    },
    zip_safe=False,
)
