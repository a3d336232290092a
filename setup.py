"""
Setup script for the circle-royale package.

Installs the circle_royale runtime from src/ together with its SQLite
schema, and exposes the demo as the ``circle-royale`` console script.
"""

from setuptools import setup, find_packages

setup(
    name="circle-royale",
    version="1.0.0",
    description="Circle Royale - shrinking circle arena event runtime",
    author="Circle Royale Maintainers",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "python-dotenv>=1.0.0",
        "pydantic>=2.5.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
        "dev": [
            "pytest>=7.0",
            "build",
            "wheel",
        ],
    },
    package_data={
        "circle_royale._event": ["schema.sql"],
    },
    entry_points={
        "console_scripts": [
            "circle-royale=circle_royale.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
