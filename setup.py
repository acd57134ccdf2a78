from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="eraprofile",
    version="0.0.1",
    author="Peter Cotton",
    author_email="",
    description="Date profiles over eras and a yearly period cycle",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/petercotton/eraprofile",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    package_data={
        'eraprofile.eras': ['data/*.csv', 'data/*.parquet'],
        'eraprofile.patterns': ['data/*.yaml'],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
    install_requires=[
        "pandas>=1.3.0",
        "rapidfuzz>=2.0.0",
        "pyarrow>=10.0.0",
        "python-dateutil>=2.8.0",
        "pyyaml>=6.0",
    ],
    extras_require={
        "dev": ["pytest>=7.0.0"],
    },
)
