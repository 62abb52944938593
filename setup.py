from setuptools import setup, find_packages

setup(
    name="restdao",
    version="0.1.0",
    packages=find_packages(include=["restdao", "restdao.*"]),
    python_requires=">=3.9",
    install_requires=[
        "fastapi",
        "sqlalchemy>=2.0",
        "pydantic>=2.0",
        "pydantic-settings",
    ],
    extras_require={
        "postgres": [
            "psycopg2-binary",
        ],
        "test": [
            "pytest",
            "httpx",
            "pytest-cov",
        ],
    },
)
