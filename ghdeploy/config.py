"""
config.py — Carga y gestiona la configuración de ghdeploy.

Fuentes, de menor a mayor prioridad:
1. Valores por defecto de las dataclasses
2. ghdeploy.yaml (se busca hacia arriba desde el directorio actual)
3. Variables de entorno (GHDEPLOY_REMOTE_URL, GHDEPLOY_BRANCH), con .env
4. Opciones de la CLI (las aplica cli.py, no este módulo)

¿Por qué YAML + .env?
    - ghdeploy.yaml: valores que se versionan (dist, rama, entry file)
    - .env: valores locales que no se suben (ej: una URL con token)

Ejemplo de ghdeploy.yaml:

    deploy:
      dist_dir: build
      branch: gh-pages
      remote_url: ${DEPLOY_REMOTE}
    logging:
      file: logs/ghdeploy.log

Uso:
    from ghdeploy.config import load_config
    config = load_config()
    print(config.deploy.branch)  # "gh-pages"
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

CONFIG_FILENAME = "ghdeploy.yaml"


# ============================================================
# Dataclasses de configuración
# ============================================================

@dataclass
class DeployConfig:
    """Qué se publica y a dónde."""
    dist_dir: str = "dist"
    branch: str = "gh-pages"
    entry_file: str = "index.html"
    rewrite_assets: bool = True
    commit_message: str = "Update {branch}"
    # Vacío = leer el origin de .git/config
    remote_url: str = ""


@dataclass
class LoggingConfig:
    """Salida de logs."""
    file: str = ""
    verbose: bool = False


@dataclass
class AppConfig:
    """Configuración completa de la aplicación."""
    deploy: DeployConfig = field(default_factory=DeployConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# ============================================================
# Funciones de carga
# ============================================================

def _resolve_env_vars(value: str) -> str:
    """
    Resuelve ${VARIABLE} en un string con el valor del entorno.

    Si la variable no existe se deja el placeholder tal cual.
    """
    patron = re.compile(r"\$\{(\w+)\}")

    def reemplazar(match: re.Match) -> str:
        return os.environ.get(match.group(1), match.group(0))

    return patron.sub(reemplazar, value)


def _resolve_env_recursive(data: Any) -> Any:
    """Resuelve variables de entorno recursivamente en un dict/list."""
    if isinstance(data, str):
        return _resolve_env_vars(data)
    elif isinstance(data, dict):
        return {k: _resolve_env_recursive(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_resolve_env_recursive(item) for item in data]
    return data


def _dict_to_dataclass(data: dict, cls: type) -> Any:
    """Convierte un dict a dataclass ignorando keys desconocidas."""
    campos_validos = {f.name for f in cls.__dataclass_fields__.values()}
    datos_filtrados = {k: v for k, v in data.items() if k in campos_validos}
    return cls(**datos_filtrados)


def _find_config_dir(start: Path | None = None) -> Path:
    """
    Busca hacia arriba el directorio que contiene ghdeploy.yaml.

    Si no lo encuentra, devuelve el directorio de inicio.
    """
    current = (start or Path.cwd()).resolve()
    for parent in [current] + list(current.parents):
        if (parent / CONFIG_FILENAME).exists():
            return parent
    return current


def load_config(config_path: Path | None = None) -> AppConfig:
    """
    Carga la configuración completa de ghdeploy.

    Pasos:
    1. Carga .env (si existe junto a ghdeploy.yaml)
    2. Lee ghdeploy.yaml, o usa valores por defecto si no hay archivo
    3. Resuelve ${VARIABLES}
    4. Convierte cada sección a su dataclass
    5. Aplica overrides de entorno

    Args:
        config_path: Ruta explícita al YAML. Si es None, se busca.

    Returns:
        AppConfig listo para usar.

    Raises:
        yaml.YAMLError: Si el archivo existe pero no es YAML válido.
    """
    proyecto_dir = config_path.parent if config_path else _find_config_dir()
    env_path = proyecto_dir / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    if config_path is None:
        config_path = proyecto_dir / CONFIG_FILENAME

    raw_config: dict = {}
    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            raw_config = yaml.safe_load(f) or {}

    config_resuelto = _resolve_env_recursive(raw_config)

    app_config = AppConfig(
        deploy=_dict_to_dataclass(
            config_resuelto.get("deploy") or {}, DeployConfig
        ),
        logging=_dict_to_dataclass(
            config_resuelto.get("logging") or {}, LoggingConfig
        ),
    )

    # Paso 5: overrides de entorno
    remote_env = os.environ.get("GHDEPLOY_REMOTE_URL", "")
    if remote_env:
        app_config.deploy.remote_url = remote_env
    branch_env = os.environ.get("GHDEPLOY_BRANCH", "")
    if branch_env:
        app_config.deploy.branch = branch_env

    return app_config
