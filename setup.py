from setuptools import setup, find_packages

setup(
    name="uiauto-finders",
    version="1.0.0",
    packages=find_packages(include=["uiauto_finders", "uiauto_finders.*"]),
    install_requires=[
        "pyyaml>=5.4",
        "jsonschema>=4.0.0",
    ],
    extras_require={
        "tests": ["pytest>=7.0"],
    },
    python_requires=">=3.8",
    package_data={
        "uiauto_finders": ["schemas/*.json"],
    },
    entry_points={
        "console_scripts": [
            "uiauto-find=uiauto_finders.cli:main",
        ],
    },
)
