from setuptools import setup, find_packages

setup(
    name="tri_performance",
    version="1.0.0",
    packages=find_packages(exclude=["tests"]),
    install_requires=[
        "pandas>=2.0.0",
        "numpy>=1.24.0",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["tri-performance=tri_performance.cli:main"],
    },
    python_requires=">=3.8",
)
