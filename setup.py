from setuptools import find_packages, setup

with open("README.rst") as f:
    long_description = f.read()

setup(
    name="idfexp",
    version="1.0.0",
    description="Evaluate scripts with expressions of IDF grid files",
    long_description=long_description,
    license="MIT",
    packages=find_packages(),
    package_dir={"idfexp": "idfexp"},
    test_suite="idfexp.tests",
    python_requires=">=3.10",
    install_requires=[
        "dask",
        "Jinja2",
        "loguru",
        "numba",
        "numpy",
        "xarray>=0.11",
    ],
    extras_require={
        "test": ["pytest", "pytest-cov"],
        "dev": ["black", "pytest", "pytest-cov", "sphinx", "sphinx_rtd_theme"],
    },
    entry_points={"console_scripts": ["idfexp=idfexp.cli:main"]},
    classifiers=[
        # https://pypi.python.org/pypi?%3Aaction=list_classifiers
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Hydrology",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: Implementation :: CPython",
    ],
    keywords="imod idf raster grid expression groundwater",
)
