# setup.py
from setuptools import find_packages, setup

setup(
    name="lab-equipment-reservations",
    version="0.1.0",
    packages=find_packages(include=["labreserve", "labreserve.*"]),
    include_package_data=True,
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.110",
        "uvicorn[standard]>=0.27",
        "SQLAlchemy[asyncio]>=2.0",
        "asyncpg>=0.29",
        "alembic>=1.13",
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
        "structlog>=24.1",
        "sentry-sdk>=1.40",
        "slowapi>=0.1.9",
        "limits>=3.7",
        "PyJWT>=2.8",
        "Werkzeug>=3.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
            "httpx>=0.27",
            "python-dotenv>=1.0",
        ],
    },
)
