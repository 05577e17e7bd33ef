"""
Setup script for drill-scheduler.

Drill scheduler is the adaptive practice engine for recall drills. It
decides which item to present next and keeps a per-item model of:

1. Memory - a half-life forgetting curve per item
2. Speed - smoothed response latency and automaticity
3. Exploration - a bias toward unseen and under-practiced items
"""

from setuptools import find_packages, setup

setup(
    name="drill-scheduler",
    version="1.0.0",
    description="Adaptive practice scheduler with half-life forgetting and speed modeling",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="learning spaced-repetition adaptive drill education",
)
