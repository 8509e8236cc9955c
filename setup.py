# setup.py
from setuptools import setup, find_packages

setup(
    name="lesson_scout",
    version="0.1.0",
    description="Incremental crawler of a paginated lessons site",
    packages=find_packages(exclude=("tests", "tests.*")),
    install_requires=[
        "aiohttp>=3.9",
        "click>=8.1",
        "playwright>=1.40",
        "pydantic>=2.5",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "beautifulsoup4>=4.12",
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": ["lesson_scout=lesson_scout.cli:cli"],
    },
    python_requires=">=3.11",
)
