from setuptools import setup, find_packages

setup(
    name="studybeats_backend",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "fastapi",
        "uvicorn",
        "sqlalchemy",
        "pydantic",
        "pydantic-settings",
        "python-dotenv",
        "spotipy",
        "requests",
        "aiohttp",
        "PyJWT",
        "bcrypt",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "httpx",
        ],
    },
    python_requires=">=3.9",
)
