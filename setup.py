"""
Setup script for kg-dashboard: force-directed layout and analytics for knowledge-graph snapshots
"""

from setuptools import setup, find_packages

setup(
    name="kg-dashboard",
    version="1.0.0",
    description="Force-directed layout and graph analytics for knowledge-graph dashboards",
    long_description="Layout engine, graph analytics and Neo4j snapshot loading behind an interactive knowledge-graph dashboard",
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src", exclude=["tests*"]),
    python_requires=">=3.8",
    install_requires=[
        # Core dependencies
        "neo4j>=5.13.0",
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        "python-dotenv>=1.0.0",

        # Layout and analytics
        "numpy>=1.24.0",
        "networkx>=3.0",

        # Visualization
        "matplotlib>=3.6.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-mock>=3.10.0",
            "black>=22.0.0",
            "isort>=5.10.0",
            "mypy>=1.0.0",
            "flake8>=4.0.0",
        ],
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-mock>=3.10.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "kgdash=kgdash.cli:main",
        ],
    },
    author="kg-dashboard Team",
    license="MIT",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Visualization",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    keywords="knowledge-graph force-layout graph-analytics neo4j visualization",
)
