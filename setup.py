# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="folderviz",
    version="1.0.0",
    description="Build, reorganize and export folder/file structures",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["folderviz", "folderviz.*"]),
    install_requires=[],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        'console_scripts': [
            'folderviz=folderviz.interface.cli.app:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
