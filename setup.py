from setuptools import setup, find_packages

setup(
    name="docoracle",
    version="0.3.0",
    description="Equivalence oracles synthesized from free-text API documentation",
    author="docoracle contributors",
    license="MIT",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "pyyaml>=6.0",
        "jsonschema>=4.20.0",
        "networkx>=3.2.1",
        "nltk>=3.8.1",
        "click>=8.1.7",
        "tqdm>=4.66.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "docoracle=docoracle.cli:main",
        ],
    },
    python_requires=">=3.8",
)
