"""Setup configuration for the Hyphen-ated helper Discord bot."""

from setuptools import setup, find_packages

setup(
    name="hyphenated-helper",
    version="0.0.1",
    description="A Discord bot that helps moderate the Hyphen-ated question channels",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.11",
    install_requires=[
        "py-cord>=2.4",
        "python-dotenv>=1.0",
        "PyYAML>=6.0",
        "prompt_toolkit>=3.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
        ],
    },
    entry_points={
        "console_scripts": [
            "hyphenated-helper=hyphenated_helper.main:main",
        ],
    },
)
