from setuptools import setup, find_packages

setup(
    name="bookie",
    version="0.4.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "pandas",
        "numpy",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "bookie=bookie.cli:main",
        ],
    },
    description="Itemized, per-account, per-date and total reports from a plain-text ledger",
    python_requires=">=3.8",
)
