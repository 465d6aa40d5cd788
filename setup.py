# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="assetpathdumper",
    version="0.1.0",
    description="Dump Unity container paths and the object types stored under them",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["assetpathdumper*"]),
    python_requires=">=3.9",
    install_requires=[
        "UnityPy",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'assetpathdumper=assetpathdumper.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
