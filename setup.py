"""Install campus accounts package."""

from setuptools import setup, find_packages

setup(
    name='campus-accounts',
    version='0.1.0',
    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.9',
    install_requires=[
        "fastapi",
        "python-multipart",
        "sqlalchemy>=2.0",
        "pydantic>=2",
        "pyjwt",
        "pytz",
        "python-json-logger",
        "boto3",
    ],
    extras_require={
        'mysql': [
            "mysqlclient",
        ],
        'test': [
            "pytest",
            "pytest-asyncio",
            "httpx",
        ]
    },
    zip_safe=False
)
