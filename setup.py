#!/usr/bin/env python3
"""
Setup script for obs-tool package.
"""

from setuptools import setup, find_packages
import os


# Read the README file for long description
def read_readme():
    """Read the README file."""
    readme_path = os.path.join(os.path.dirname(__file__), "README.md")
    if os.path.exists(readme_path):
        with open(readme_path, "r", encoding="utf-8") as f:
            return f.read()
    return "obs-tool - A Python client for the Open Build Service API"


setup(
    name="obs-tool",
    version="0.1.0",
    description="A Python client and command line for the Open Build Service REST/XML API",
    long_description=read_readme(),
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: Software Development :: Build Tools",
    ],
    python_requires=">=3.11",
    install_requires=[
        "httpx>=0.24.0",
        "pydantic>=2.0.0",
        "click>=8.0.0",
        "lxml>=4.9.0",
        "keyring>=23.0.0",
    ],
    extras_require={
        "http2": [
            "h2>=4.0.0",
        ],
        "dev": [
            "pytest>=6.0",
            "pytest-cov>=2.0",
            "pytest-mock>=3.6",
            "respx>=0.20.0",
            "black>=21.0",
            "flake8>=3.8",
            "mypy>=0.800",
            "pylint>=2.8",
            "pre-commit>=3.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "obs-tool=obs_tool.cli:main",
        ],
    },
    include_package_data=True,
    zip_safe=False,
)
