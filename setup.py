from setuptools import setup, find_packages

setup(
    name="CorrSys",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "numpy",
        "pandas",
        "scipy",
    ],
    extras_require={
        "test": ["pytest"],
    },
    python_requires=">=3.8",
    description="Theoretical correlations for correlated systems of statistical equations",
)
