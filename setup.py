# setup.py
from setuptools import setup, find_packages

setup(
    name="lexicon-schema",            # the *distribution* name on PyPI
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),  # will find lexicon_schema/
    install_requires=["regex"],       # grapheme-cluster segmentation (\X)
    python_requires=">=3.9",
    description="Validation of JSON-like data against ATProto lexicon schemas",
    license="Apache-2.0",
)
