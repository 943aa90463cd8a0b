from setuptools import find_packages, setup

setup(
    name="licensekit",
    version="1.3.0",
    packages=find_packages(exclude=["tests", "tests.*", "examples", "examples.*"]),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2",
        "cryptography",
        "click",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "licensekit=licensekit.cli:cli",
        ],
    },
)
