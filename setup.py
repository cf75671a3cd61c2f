# setup.py
from setuptools import setup

setup(
    name="MapDiff",
    version="0.1.0",
    description="List nodes whose type changed between two voxel map snapshots",
    python_requires=">=3.8",
    packages=["world", "engine", "common", "tools"],
    py_modules=["mapdiff"],
    install_requires=[],
    extras_require={"test": ["pytest"]},
    entry_points={
        "console_scripts": [
            "mapdiff = mapdiff:main",
            "mapdiff-dump-block = tools.dump_block:main",
        ],
    },
)
