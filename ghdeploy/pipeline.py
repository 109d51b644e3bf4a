"""
pipeline.py — Orquesta el deploy completo.

    origin → (rewrite de index.html) → publish a la rama

Es una tubería estrictamente secuencial: cada etapa bloquea hasta
terminar y cualquier excepción sube tal cual a quien llamó. Si algo
falla a mitad, el filesystem queda como lo dejó el último paso exitoso.

Uso:
    from ghdeploy.pipeline import run_deploy
    result = run_deploy(Path.cwd(), load_config())
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ghdeploy.config import AppConfig
from ghdeploy.publishing.asset_rewriter import RewriteReport, rewrite_entry_file
from ghdeploy.publishing.branch_publisher import BranchPublisher, PublishResult
from ghdeploy.publishing.origin import get_remote_origin
from ghdeploy.utils.logger import get_logger

logger = get_logger("ghdeploy.pipeline")


@dataclass
class DeployResult:
    """Lo que produjo cada etapa del deploy."""
    remote_url: str
    rewrite: RewriteReport | None
    publish: PublishResult


def resolve_remote(cwd: Path, config: AppConfig) -> str:
    """URL del origin: la de la config si existe, si no la de .git/config."""
    if config.deploy.remote_url:
        logger.info(f"Usando remote_url de la configuración: {config.deploy.remote_url}")
        return config.deploy.remote_url
    return get_remote_origin(cwd)


def run_deploy(
    cwd: str | Path,
    config: AppConfig,
    *,
    rewrite: bool | None = None,
    dry_run: bool = False,
) -> DeployResult:
    """
    Ejecuta resolve → rewrite → publish.

    Args:
        cwd: Raíz del proyecto (donde están .git/ y dist/).
        config: Configuración efectiva (ya con overrides de la CLI).
        rewrite: Fuerza o desactiva el rewrite; None usa la config.
        dry_run: Reescribe sin guardar y publica sin ejecutar git.

    Returns:
        DeployResult con el detalle de cada etapa.
    """
    cwd = Path(cwd)
    dist_dir = cwd / config.deploy.dist_dir
    do_rewrite = config.deploy.rewrite_assets if rewrite is None else rewrite

    logger.step(1, 3, "Resolviendo remote origin")
    remote_url = resolve_remote(cwd, config)

    report = None
    if do_rewrite:
        logger.step(2, 3, f"Reescribiendo {config.deploy.entry_file}")
        report = rewrite_entry_file(
            dist_dir,
            remote_url,
            entry_file=config.deploy.entry_file,
            dry_run=dry_run,
        )
    else:
        logger.step(2, 3, "Rewrite de assets desactivado")

    logger.step(3, 3, f"Publicando {dist_dir} en {config.deploy.branch}")
    publish_result = BranchPublisher(dist_dir).publish(
        remote_url,
        config.deploy.branch,
        message_template=config.deploy.commit_message,
        dry_run=dry_run,
    )

    return DeployResult(remote_url=remote_url, rewrite=report, publish=publish_result)
