# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

from setuptools import setup, find_packages

setup(
    name="svreport",
    version="0.1.0",
    description="SystemVerilog module hierarchy reporter",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    packages=find_packages(include=["svreport", "svreport.*"]),
    install_requires=[
        "click>=8.2",
        "pydantic>=2.0",
        "pydantic-settings>=2.0",
        "PyYAML>=6.0",
        "rich>=13.0",
        "tree-sitter>=0.24.0",
        "tree-sitter-verilog>=1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    classifiers=[
        "Development Status :: 2 - Pre-Alpha",
        "Programming Language :: Python",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX :: Linux",
    ],
    license="MIT",
    entry_points={
        'console_scripts': [
            'svreport=svreport.cli:main',
        ],
    },
    python_requires=">=3.10",
)
