from setuptools import setup, find_packages

setup(
    name="price-analysis-engine",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["models", "exceptions", "config", "engine", "run_analysis"],
    install_requires=[
        "numpy",
        "pandas",
        "scipy",
        "torch",
        "matplotlib",
        "seaborn",
        "tqdm",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["run-analysis=run_analysis:main"],
    },
    python_requires=">=3.8",
)
