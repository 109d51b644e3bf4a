"""
origin.py — Descubre la URL del remote "origin".

Lee .git/config línea por línea en vez de usar configparser: el
formato de git no es INI estricto (subsecciones entre comillas, keys
repetidas) y solo necesitamos una línea.

Algoritmo:
    1. Avanzar hasta la línea que contiene [remote "origin"]
    2. Seguir hasta la primera línea que contenga "url" o que abra
       otra sección ("[...")
    3. Si ganó "url": devolver lo que está después del primer "="

Uso:
    from ghdeploy.publishing.origin import get_remote_origin, repository_name
    url = get_remote_origin(Path.cwd())   # "https://github.com/user/site.git"
    repository_name(url)                  # "site"
"""

from __future__ import annotations

from pathlib import Path

from ghdeploy.utils.logger import get_logger

logger = get_logger("ghdeploy.origin")

GIT_CONFIG_PATH = Path(".git") / "config"
ORIGIN_MARKER = '[remote "origin"]'


class OriginNotFoundError(LookupError):
    """No hay remote origin (o su url) en .git/config."""


def get_remote_origin(repo_root: str | Path) -> str:
    """
    Obtiene la URL del remote origin leyendo <repo_root>/.git/config.

    Args:
        repo_root: Raíz del repositorio local.

    Returns:
        La URL, sin espacios alrededor.

    Raises:
        FileNotFoundError: Si no existe .git/config.
        OriginNotFoundError: Si no hay sección origin, o si aparece otra
            sección (o el fin del archivo) antes de la línea url.
    """
    config_path = Path(repo_root) / GIT_CONFIG_PATH

    with open(config_path, "r", encoding="utf-8") as f:
        lines = (line.rstrip("\n") for line in f)

        if not any(ORIGIN_MARKER in line for line in lines):
            raise OriginNotFoundError(
                f"No se encontró {ORIGIN_MARKER} en {config_path}"
            )

        # El generador sigue justo después del marcador
        for line in lines:
            if "url" in line:
                _, sep, url = line.partition("=")
                if sep:
                    logger.info(f"Remote origin: {url.strip()}")
                    return url.strip()
                break
            if line.lstrip().startswith("["):
                break

    raise OriginNotFoundError(
        f"No se encontró la url del remote origin en {config_path}"
    )


def repository_name(remote_url: str) -> str:
    """
    Nombre del repositorio a partir de su URL.

    "https://host/group/Name.git" → "Name"
    "git@host:group/Name"         → "Name"
    "Name.git"                    → "Name"  (sin "/" se devuelve todo)
    """
    name = remote_url.removesuffix(".git")
    return name.rsplit("/", 1)[-1]
