from setuptools import find_packages, setup

setup(
    name="crm-reconciler",
    version="0.1.0",
    packages=find_packages(exclude=["reconciler.tests"]),
    python_requires=">=3.10",
    install_requires=[
        "click",
        "python-dotenv",
        "pandas",
        "requests"
    ],
    extras_require={"dev": ["pytest"]},
    entry_points={"console_scripts": ["reconciler=reconciler.cli.main:cli"]},
)
