from __future__ import annotations

from pathlib import Path

from setuptools import find_packages, setup  # type: ignore[import-untyped]

ROOT = Path(__file__).parent


def _read_requirements(name: str = "requirements.txt") -> list[str]:
    requirements_path = ROOT / name
    if not requirements_path.exists():
        return []
    lines = requirements_path.read_text(encoding="utf-8").splitlines()
    return [line.strip() for line in lines if line.strip() and not line.strip().startswith("#")]


setup(
    name="agri-tools-gateway",
    version="1.0.0",
    description="REST and JSON-RPC gateway for crop price data and web search",
    python_requires=">=3.11",
    packages=find_packages(exclude=("tests", "tests.*")),
    include_package_data=True,
    install_requires=_read_requirements(),
    extras_require={"test": _read_requirements("requirements-dev.txt")},
    entry_points={"console_scripts": ["agri-gateway=server.http.app:main"]},
)
