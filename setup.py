"""Retro Calculator - terminal arithmetic with history."""
from setuptools import setup, find_packages

setup(
    name="retrocalc",
    version="1.0.0",
    description="Retro-styled terminal calculator with step display and history",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    package_data={
        "retrocalc": ["templates/*"],
    },
    install_requires=[
        "click>=8.1.0",
        "jinja2>=3.1.0",
        "rich>=13.0.0",
        "questionary>=2.0.0",
    ],
    extras_require={
        "dev": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "retrocalc=retrocalc.cli:main",
            "rcalc=retrocalc.cli:main",  # Short alias
        ],
    },
    python_requires=">=3.10",
)
