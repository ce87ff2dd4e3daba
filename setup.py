from setuptools import setup, find_packages
from pathlib import Path


def read_readme():
    this_directory = Path(__file__).parent
    readme_file = this_directory / 'README.md'
    if readme_file.exists():
        return readme_file.read_text(encoding='utf-8')
    return ""


setup(
    name="mysql-adaptor",
    version="0.1.0",
    description="MySQL insert, upsert and raw SQL operations for sequential state pipelines.",
    long_description=read_readme(),
    long_description_content_type='text/markdown',
    packages=find_packages(include=["mysql_adaptor", "mysql_adaptor.*"]),
    python_requires=">=3.11",
    install_requires=[
        "pydantic>=2.5",
        "jinja2>=3.1",
        "PyMySQL>=1.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.21",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: Database",
    ],
    keywords="mysql pipeline etl upsert",
)
