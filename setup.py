from setuptools import setup, find_packages

setup(
    name="generic-repository",
    version="0.1.0",
    description="Generic CRUD repository over SQLAlchemy sessions",
    packages=find_packages(include=["generic_repository", "generic_repository.*"]),
    python_requires=">=3.9",
    install_requires=[
        "sqlalchemy[asyncio]>=2.0",
        "aiosqlite",
        "psycopg2-binary",
        "fastapi",
        "pydantic",
        "pydantic-settings",
        "python-dotenv",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "httpx",
        ],
    },
)
