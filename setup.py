from setuptools import find_packages, setup


setup(
    name="hcp_lattice",
    version="0.1.0",
    description="Occupancy core for HCP lattice particle simulation",
    packages=find_packages(include=["HCP", "HCP.*"]),
    python_requires=">=3.10",
    install_requires=[
        "numpy",
        "numba",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
