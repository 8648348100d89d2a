"""Smoke tests: interpreter and installed stack match pyproject.toml."""

import importlib
import sys
from importlib.metadata import version

import pytest

from secure_estate import __version__


def _major_minor(dist: str) -> tuple[int, int]:
    major, minor = version(dist).split(".")[:2]
    return int(major), int(minor)


def test_python_311_or_higher() -> None:
    # asyncio.wait_for raises the builtin TimeoutError from 3.11 on
    assert sys.version_info >= (3, 11)


@pytest.mark.parametrize(
    "module",
    [
        "fastapi",
        "uvicorn",
        "pydantic",
        "structlog",
        "sqlalchemy.ext.asyncio",
        "asyncpg",
        "httpx",
        "dotenv",
        "hypothesis",
    ],
)
def test_runtime_dependency_importable(module: str) -> None:
    importlib.import_module(module)


@pytest.mark.parametrize(
    ("dist", "floor"),
    [("pydantic", (2, 5)), ("sqlalchemy", (2, 0)), ("structlog", (24, 1))],
)
def test_dependency_floor(dist: str, floor: tuple[int, int]) -> None:
    assert _major_minor(dist) >= floor, f"{dist} {version(dist)} is older than {floor}"


def test_package_version_is_semver() -> None:
    assert len(__version__.split(".")) == 3


async def test_wait_for_raises_builtin_timeout() -> None:
    import asyncio

    with pytest.raises(TimeoutError):
        await asyncio.wait_for(asyncio.sleep(1), timeout=0.01)
