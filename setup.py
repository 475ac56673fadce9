from pathlib import Path

from setuptools import find_packages
from setuptools import setup


HERE = Path(__file__).resolve().parent


def get_long_description():
    readme = HERE / "README.md"
    if not readme.exists():
        return ""
    return readme.read_text(encoding="utf-8")


setup(
    name="telehttp",
    version="0.1.0",
    description="OpenTelemetry client spans and trace context propagation for httpx requests",
    long_description=get_long_description(),
    long_description_content_type="text/markdown",
    license="BSD-3-Clause",
    packages=find_packages(exclude=["tests*"]),
    package_data={
        "telehttp": ["py.typed"],
    },
    zip_safe=False,
    python_requires=">=3.9",
    install_requires=[
        "envier~=0.6",
        "httpx>=0.25",
        "opentelemetry-api>=1.15",
        "wrapt>=1.14",
    ],
    extras_require={
        "test": [
            "mock",
            "opentelemetry-sdk>=1.15",
            "pytest",
            "pytest-asyncio",
        ],
    },
    classifiers=[
        "Programming Language :: Python",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Topic :: System :: Monitoring",
    ],
)
