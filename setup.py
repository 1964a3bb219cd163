"""Setup script for the Tool-Output Intelligence Layer"""

from setuptools import setup, find_packages

setup(
    name="tool-output-intel",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "pyyaml>=5.4",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    python_requires=">=3.8",
    author="Tool Intel Team",
    description="Structured signals from build output, test output and live terminal sessions",
    entry_points={
        "console_scripts": [
            "tool-intel=tool_intel.main:main",
        ],
    },
)
