from setuptools import find_packages, setup

setup(
    name="error-propagation",
    version="0.1.0",
    author="J. Scheffer",
    description="A Python package for propagating measurement errors through symbolic expressions",
    packages=find_packages("src"),
    package_dir={"": "src"},
    python_requires=">=3.10",
    install_requires=["sympy", "uncertainties", "numpy", "tqdm"],
    extras_require={
        "notebook": ["ipywidgets"],
        "test": ["pytest"],
    },
)
