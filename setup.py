from __future__ import annotations

from setuptools import find_namespace_packages, setup

setup(
    name="psddecode",
    version="0.1.0",
    description="Decode Photoshop PSD files into RGB pixel buffers and metadata",
    python_requires=">=3.10",
    packages=find_namespace_packages(include=["psddecode", "psddecode.*"]),
    install_requires=[
        "numpy>=1.23",
        "Pillow>=9.1",
    ],
    extras_require={
        "test": ["pytest>=7"],
        "bench": ["pytest>=7", "pytest-benchmark>=4"],
    },
    entry_points={"console_scripts": ["psddecode=psddecode.__main__:main"]},
)
