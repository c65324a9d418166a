"""
db/config.py

Where the clinic database URL comes from.

Lookup order: DATABASE_URL, then CLOUD_DATABASE_URL when ENVIRONMENT names a
hosted deployment, then LOCAL_DATABASE_URL. Values from `.env` and
`.env.local` fill in variables the process environment does not set.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
ENV_FILES: tuple[str, ...] = (".env", ".env.local")
HOSTED_ENVIRONMENTS = frozenset({"prod", "production", "staging", "cloud"})


def parse_env_file(path: Path) -> dict[str, str]:
    """
    Read `KEY=VALUE` lines. Comments, blank lines and an `export ` prefix
    are tolerated; surrounding quotes are removed from values.
    """

    values: dict[str, str] = {}
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        key = key.strip()
        if key:
            values[key] = value.strip().strip("\"'")
    return values


def load_env_files(project_root: Path = PROJECT_ROOT) -> None:
    """Copy `.env` values into os.environ without overriding existing ones."""
    for filename in ENV_FILES:
        env_path = project_root / filename
        if env_path.is_file():
            for key, value in parse_env_file(env_path).items():
                os.environ.setdefault(key, value)


def _as_psycopg_url(url: str) -> str:
    scheme, sep, rest = url.partition("://")
    if sep and scheme in {"postgres", "postgresql"}:
        return f"postgresql+psycopg://{rest}"
    return url


def resolve_database_url(environ: Mapping[str, str] | None = None) -> str:
    """
    Return the first configured URL, rewritten for the psycopg driver.

    Raises RuntimeError when no candidate variable is set.
    """

    if environ is None:
        load_env_files()
        environ = os.environ

    candidates = ["DATABASE_URL"]
    if environ.get("ENVIRONMENT", "local").strip().lower() in HOSTED_ENVIRONMENTS:
        candidates.append("CLOUD_DATABASE_URL")
    candidates.append("LOCAL_DATABASE_URL")

    for name in candidates:
        url = environ.get(name, "").strip()
        if url:
            return _as_psycopg_url(url)

    raise RuntimeError(
        f"No clinic database URL configured. Set one of: {', '.join(candidates)}."
    )
