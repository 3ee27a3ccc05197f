"""Setup configuration for ghprod"""

from setuptools import setup, find_packages

setup(
    name="ghprod",
    version="0.1.0",
    description=(
        "CLI tool for GitHub pull request productivity metrics: PR counts, "
        "time to merge/close, and net code-size change per contributor."
    ),
    author="ghprod Contributors",
    author_email="",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "requests>=2.28.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "black>=22.0",
            "flake8>=4.0",
            "mypy>=0.950",
        ],
    },
    entry_points={
        "console_scripts": [
            "ghprod=ghprod.main:main",
        ],
    },
)
