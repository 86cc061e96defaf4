from setuptools import setup, find_packages

setup(
    name="gospace",
    version="0.1.0",
    description="Manage vendored source trees and workspace metadata in a package-oriented build root.",
    author="gospace developers",
    license="GPL-3.0",
    packages=find_packages(exclude=("tests", "tests.*")),
    python_requires=">=3.8",
    install_requires=[
        "rich>=13.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "gospace=gospace.modules.cli:main",
        ],
    },
)
