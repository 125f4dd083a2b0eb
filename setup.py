from setuptools import setup, find_packages

setup(
    name="diffractx",
    version="0.1.0",
    description="DiffractX: A Python toolkit for wave diffraction behind breakwaters",
    packages=find_packages(exclude=("tests",)),
    python_requires=">=3.10",
    install_requires=[
        "numpy>=1.20",
        "scipy>=1.7",
        "pandas>=1.3",
        "matplotlib>=3.4",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
)
