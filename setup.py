from setuptools import setup, find_packages


with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="testreport",
    version="0.1.0",
    description="HTML test reports from JUnit XML results and coverage CSV exports.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"testreport.schemas": ["*.json"]},
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=["PyYAML", "jsonschema"],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["testreport=testreport.cli:main"]},
)
