from setuptools import setup, find_packages

setup(
    name="horizon-radar",
    version="0.1.0",
    description="Cloud Release Radar - Match vendor release notes to your billed SKUs",
    author="Yoshi Kondo",
    author_email="yoshi@example.com",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "httpx>=0.26.0",
        "fastapi>=0.109.0",
        "uvicorn>=0.27.0",
        "python-multipart>=0.0.9",
        "pydantic>=2.5.0",
        "typer>=0.9.0",
        "rich>=13.7.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "tests": [
            "pytest>=7.4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "horizon=horizon.cli:app",
        ],
    },
    python_requires=">=3.10",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
