from setuptools import setup, find_packages


with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="mepgraph",
    version="0.1.0",
    author="Andrey Golovanov",
    description="Traverse MEP system connectivity and export system graphs.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"mepgraph": ["schemas/*.json"]},
    python_requires=">=3.10",
    install_requires=[
        "networkx",
        "PyYAML",
        "jsonschema",
        "lxml",
    ],
    extras_require={"test": ["pytest"]},
    tests_require=["pytest"],
    entry_points={
        "console_scripts": [
            "mepgraph=mepgraph.cli:main",
        ],
    },
)
