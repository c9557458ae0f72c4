from setuptools import find_packages, setup

# Reaction databases are not shipped, point database_directory in the
# configuration to a folder holding MCMv32.db, MCMv331.db and MCM-GECKO-A.db.
setup(
    name="tuvrxns",
    version="0.4.0",
    description="Consistent TUV photolysis reaction numbering for TUV input files, DSMACC and wiki tables",
    package_dir={"": "src"},
    packages=find_packages("src"),
    package_data={"tuvrxns": ["data/*.md"]},
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "pandas",
        "pydantic>=2",
        "pyyaml",
    ],
    extras_require={"test": ["pytest"]},
)
