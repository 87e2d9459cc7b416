"""
ephemeralpy: Allocation-Free Temporary Records for Python

A compile-time rewriter that hoists ephemeral({...}) dict literals at hot
call sites into one pre-declared, reused dict per site:
1. Call-site validation with located diagnostics
2. Structural scope resolution (module, def, generator, lambda)
3. Per-scope, collision-free binding names
4. Scope-kind driven declaration placement
5. In-place rewrite over the standard library ast
"""

from setuptools import setup, find_packages

setup(
    name="ephemeralpy",
    version="1.0.0",
    description="Hoist per-call temporary dict literals into reused, pre-declared dicts",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    author="ephemeralpy developers",
    python_requires=">=3.10",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[],
    extras_require={
        "dev": [
            "pytest>=7.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "ephemeralpy=ephemeralpy.cli:main",
        ]
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Compilers",
        "Topic :: Software Development :: Code Generators",
    ],
)
