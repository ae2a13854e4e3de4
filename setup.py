from setuptools import setup, find_packages

setup(
    name="healthprobe",
    version="1.0.0",
    description="Host resource and HTTP endpoint health probe",
    author="Boris Vereš",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "psutil>=5.9.0",            # For host resource counters
        "aiohttp>=3.8.0",           # For HTTP client
        "pydantic>=2.0.0",
        "prometheus-client>=0.17.0",
    ],
    extras_require={
        "dev": [
            "pytest>=6.0.0",
            "pytest-asyncio>=0.21.0",
            "black>=21.0.0",
            "isort>=5.0.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "healthprobe=healthprobe.main:run",
        ]
    }
)
