import setuptools

setuptools.setup(
    name="feather",
    version="0.1.0",
    package_dir={"": "src"},
    packages=setuptools.find_namespace_packages(where="src", include=["feather*"]),
    package_data={"feather.models": ["*.yaml"]},
    python_requires=">=3.10",
    install_requires=[
        "numpy",
        "pydantic>=2",
        "pyvista",
        "rich",
        "ruamel.yaml",
    ],
    extras_require={"test": ["pytest"]},
    entry_points={
        "console_scripts": [
            "feather=feather.__main__:main",
        ],
    },
)
