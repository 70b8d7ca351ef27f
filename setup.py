from setuptools import setup, find_packages
import os

# Import version from GeoReverse/__init__.py
import re
with open(os.path.join('GeoReverse', '__init__.py'), 'r') as f:
    version = re.search(r"__version__\s*=\s*'(.*)'", f.read()).group(1)

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="GeoReverse",
    version=version,
    description="Offline reverse geocoding of coordinates to the nearest GeoNames city",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    packages=find_packages(include=["GeoReverse", "GeoReverse.*"]),
    include_package_data=True,
    package_data={
        "GeoReverse": ["data/*.csv"],
    },
    python_requires=">=3.8",
    install_requires=[
        "pandas>=1.4.0",
        "flask>=2.2.0",
        "click>=8.0.0",
        "PyYAML>=5.4",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "georeverse=GeoReverse.__main__:main",
        ],
    },
)
