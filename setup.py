from setuptools import setup, find_packages

# Read the contents of README.md for the long description
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Define the requirements, excluding any commented-out lines
requirements = [
    "click>=8.1",
    "python-dotenv>=1.0",
    "PyYAML>=6.0",
    "rich>=13.0",
]

setup(
    name="opdoc",
    version="0.1.0",
    description="Command-line usage text and graph XML templates from processing operator descriptors",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "docs"]),
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=8.0"],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
        "Environment :: Console",
        "Topic :: Software Development :: Documentation",
    ],
    python_requires=">=3.9",
    entry_points={
        "console_scripts": [
            "opdoc=opdoc.cli:cli",
        ],
    },
    package_data={
        "opdoc": ["templates/*.txt", "operators/*.yaml"],
    },
    include_package_data=True,
    keywords=[
        "command-line usage",
        "processing graph",
        "operator descriptors",
        "CLI",
    ],
    license="MIT",
)
