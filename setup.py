from setuptools import setup, find_packages

setup(
    name="vfr_notams",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "requests>=2.25.1",
        "python-dateutil>=2.8.1",
        "shapely>=2.0",
    ],
    extras_require={
        "dev": [
            "pytest>=6.0",
            "black>=21.0",
            "mypy>=0.900",
            "flake8>=3.9.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "vfr-notams=vfr_notams.cli:main",
        ]
    },
    description="Curated VFR NOTAM lists for a region: filtering, waypoint ranking and binary caching",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
    ],
    python_requires=">=3.8",
)
