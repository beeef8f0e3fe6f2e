#!/usr/bin/env python3

import sys
from pathlib import Path

from setuptools import setup, find_packages

UTF_ENCODING = "utf-8"

REQUIRED_MAJOR = 3
REQUIRED_MINOR = 9

ROOT_DIR = Path(__file__).parent.resolve()


def _get_version() -> str:
    version_file = ROOT_DIR.joinpath("objcat").joinpath("version.py")
    with open(version_file, encoding=UTF_ENCODING) as file:
        for line in file.read().splitlines():
            if line.startswith("__version__"):
                delim = '"' if '"' in line else "'"
                return line.split(delim)[1]
    raise RuntimeError(f"Unable to find version string in {version_file}")


# Check for python version
if sys.version_info < (REQUIRED_MAJOR, REQUIRED_MINOR):
    error = (
        "Your version of python ({major}.{minor}) is too old. You need "
        "python >= {required_major}.{required_minor}."
    ).format(
        major=sys.version_info.major,
        minor=sys.version_info.minor,
        required_minor=REQUIRED_MINOR,
        required_major=REQUIRED_MAJOR,
    )
    sys.exit(error)

# Read in README.md for our long_description
with open(ROOT_DIR.joinpath("README.md"), encoding=UTF_ENCODING) as f:
    long_description = f.read()

setup(
    name="objcat",
    version=_get_version(),
    description="Concatenate objects from S3-compatible storage or AIStore to standard output, with parallel range reads.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="AIStore Team",
    author_email="aistore@exchange.nvidia.com",
    keywords=[
        "AIStore",
        "S3",
        "Object Storage",
    ],
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3 :: Only",
    ],
    license="MIT",
    python_requires=">=3.9",
    packages=find_packages(exclude=("tests", "tests.*")),
    install_requires=[
        "requests",
        "urllib3>=1.26",
        "tenacity>=8.2",
        "pydantic>=2",
        "msgspec>=0.15",
        "humanize>=4",
        "humanfriendly>=10.0",
        "boto3",
        "botocore",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "objcat=objcat.cli:main",
        ],
    },
)
