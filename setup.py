from setuptools import setup, find_packages

setup(
    name="url_directory",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "aiohttp",
        "beautifulsoup4",
        "tqdm",
        "pyyaml",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "url-directory=url_directory.main:run",
        ],
    },
)
