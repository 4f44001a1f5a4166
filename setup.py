"""
Setup script for mapgeo package
Geometry engine for partitioning overlapping neighborhood polygons
"""
from setuptools import setup, find_packages
from pathlib import Path

# Read README for long description
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

setup(
    name="mapgeo",
    version="0.1.0",
    description="MECE partitioning, simplification and spatial queries for neighborhood polygons",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Scientific/Engineering :: GIS",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
    ],
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.10",
    install_requires=[
        # Core scientific stack
        "numpy>=1.20",
        # Geospatial
        "shapely>=2.0,<3.0",
    ],
    extras_require={
        "dev": [
            "black>=22.0",
            "isort>=5.0",
            "pytest>=7.0",
            "pytest-cov>=3.0",
            # independent convex hull oracle in tests
            "scipy>=1.7,<2.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "mapgeo-mece=mapgeo.neighborhoods.cli:main",
        ],
    },
    include_package_data=True,
    zip_safe=False,
)
