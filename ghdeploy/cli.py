"""
cli.py — Punto de entrada de ghdeploy.

Comandos:
    ghdeploy deploy                  → origin + rewrite + push a gh-pages
    ghdeploy deploy --no-rewrite     → publica dist/ sin tocar index.html
    ghdeploy deploy --dry-run -v     → muestra el plan sin ejecutar git
    ghdeploy origin                  → imprime la URL del origin
    ghdeploy rewrite                 → solo reescribe index.html
    ghdeploy config --show           → muestra la configuración efectiva
    ghdeploy health                  → verifica git, .git/config y dist/

Un deploy exitoso termina con status 0 y sin output (salvo -v).
El primer error se imprime en stderr y el proceso sale con status 1.

Desde código (testing):
    from click.testing import CliRunner
    from ghdeploy.cli import main
    CliRunner().invoke(main, ["deploy", "--dry-run"])
"""

from __future__ import annotations

import shutil
import sys
from pathlib import Path
from typing import NoReturn

import click
import yaml
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ghdeploy import __version__
from ghdeploy.config import AppConfig, load_config
from ghdeploy.pipeline import DeployResult, resolve_remote, run_deploy
from ghdeploy.publishing.asset_rewriter import rewrite_entry_file
from ghdeploy.publishing.branch_publisher import PublishError, render_commit_message
from ghdeploy.publishing.origin import (
    GIT_CONFIG_PATH,
    OriginNotFoundError,
    repository_name,
)
from ghdeploy.utils.logger import (
    configure_file_logging,
    console,
    get_logger,
    set_verbose,
)

logger = get_logger("ghdeploy.cli")

# Errores que terminan el proceso con status 1
# ValueError cubre UnicodeDecodeError y commit_message inválido
FATAL_ERRORS = (OriginNotFoundError, PublishError, OSError, ValueError, yaml.YAMLError)


@click.group()
@click.version_option(version=__version__, prog_name="ghdeploy")
def main():
    """Publica un build estático en la rama gh-pages del origin."""
    pass


@main.command()
@click.option("--dist", "dist_dir", default=None, help="Directorio del build (default: dist)")
@click.option("--branch", "-b", default=None, help="Rama destino (default: gh-pages)")
@click.option("--entry", "entry_file", default=None, help="HTML raíz (default: index.html)")
@click.option(
    "--no-rewrite",
    is_flag=True,
    default=False,
    help="No anteponer el nombre del repo a los assets",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Calcula todo pero no escribe index.html ni ejecuta git",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Muestra cada paso")
def deploy(
    dist_dir: str | None,
    branch: str | None,
    entry_file: str | None,
    no_rewrite: bool,
    dry_run: bool,
    verbose: bool,
):
    """Publica dist/ en la rama destino del origin."""
    cfg = _load(verbose)
    _apply_overrides(cfg, dist_dir, branch, entry_file)

    try:
        result = run_deploy(
            Path.cwd(),
            cfg,
            rewrite=False if no_rewrite else None,
            dry_run=dry_run,
        )
    except FATAL_ERRORS as e:
        _fail(e)

    if verbose:
        _show_summary(result)


@main.command()
def origin():
    """Imprime la URL del remote origin y el nombre del repo."""
    cfg = _load(False)
    try:
        url = resolve_remote(Path.cwd(), cfg)
    except FATAL_ERRORS as e:
        _fail(e)

    console.print(url, highlight=False, soft_wrap=True)
    console.print(repository_name(url), highlight=False, soft_wrap=True)


@main.command()
@click.option("--dist", "dist_dir", default=None, help="Directorio del build (default: dist)")
@click.option("--entry", "entry_file", default=None, help="HTML raíz (default: index.html)")
@click.option("--dry-run", is_flag=True, default=False, help="No escribe el archivo")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Muestra el resultado")
def rewrite(dist_dir: str | None, entry_file: str | None, dry_run: bool, verbose: bool):
    """Antepone el nombre del repo a los assets de index.html."""
    cfg = _load(verbose)
    _apply_overrides(cfg, dist_dir, None, entry_file)

    try:
        url = resolve_remote(Path.cwd(), cfg)
        report = rewrite_entry_file(
            Path.cwd() / cfg.deploy.dist_dir,
            url,
            entry_file=cfg.deploy.entry_file,
            dry_run=dry_run,
        )
    except FATAL_ERRORS as e:
        _fail(e)

    logger.success(
        f"{report.insertions} inserciones en {report.lines_changed} líneas "
        f"de {report.entry_path}"
    )


@main.command()
@click.option("--show", is_flag=True, help="Muestra la configuración efectiva")
def config(show: bool):
    """Gestiona la configuración de ghdeploy."""
    cfg = _load(False)

    if show:
        tabla = Table(title="Configuración de ghdeploy")
        tabla.add_column("Parámetro", style="cyan")
        tabla.add_column("Valor", style="green")

        tabla.add_row("dist_dir", cfg.deploy.dist_dir)
        tabla.add_row("branch", cfg.deploy.branch)
        tabla.add_row("entry_file", cfg.deploy.entry_file)
        tabla.add_row("rewrite_assets", str(cfg.deploy.rewrite_assets))
        tabla.add_row("commit_message", cfg.deploy.commit_message)
        tabla.add_row("remote_url", cfg.deploy.remote_url or "(de .git/config)")
        tabla.add_row("log file", cfg.logging.file or "(desactivado)")

        console.print(tabla)


@main.command()
def health():
    """Verifica que todo esté listo para publicar."""
    cfg = _load(True)
    cwd = Path.cwd()
    errores = []

    # 1. git en PATH
    if shutil.which("git"):
        logger.success("git: encontrado en PATH")
    else:
        errores.append("git no está en PATH")
        logger.error("git: NO encontrado en PATH")

    # 2. .git/config + origin
    config_path = cwd / GIT_CONFIG_PATH
    if config_path.exists():
        logger.success(f"{GIT_CONFIG_PATH}: encontrado")
    elif not cfg.deploy.remote_url:
        errores.append(f"{GIT_CONFIG_PATH} no existe")
        logger.error(f"{GIT_CONFIG_PATH}: NO existe")

    try:
        url = resolve_remote(cwd, cfg)
        logger.success(f"origin: {url} (repo: {repository_name(url)})")
    except FATAL_ERRORS as e:
        errores.append(f"origin: {e}")
        logger.error(f"origin: {e}")

    # 3. dist/ + entry file
    dist_path = cwd / cfg.deploy.dist_dir
    if dist_path.is_dir():
        logger.success(f"{cfg.deploy.dist_dir}/: existe")
        entry_path = dist_path / cfg.deploy.entry_file
        if entry_path.is_file():
            logger.success(f"{cfg.deploy.entry_file}: existe")
        elif cfg.deploy.rewrite_assets:
            errores.append(f"Falta {entry_path}")
            logger.error(f"{cfg.deploy.entry_file}: NO existe")
        else:
            logger.warning(f"{cfg.deploy.entry_file}: NO existe (rewrite desactivado)")
    else:
        errores.append(f"No existe {dist_path}")
        logger.error(f"{cfg.deploy.dist_dir}/: NO existe (¿corriste el build?)")

    if errores:
        console.print(
            Panel(
                "\n".join(f"- {escape(e)}" for e in errores),
                title="Problemas encontrados",
                border_style="red",
            )
        )
        sys.exit(1)

    console.print(
        Panel("Todo listo para publicar", title="Estado", border_style="green")
    )


# ============================================================
# Funciones auxiliares (privadas)
# ============================================================

def _load(verbose: bool) -> AppConfig:
    """Carga la config y prepara el logging según lo que diga."""
    try:
        cfg = load_config()
        # Un template roto debe fallar antes de tocar index.html
        render_commit_message(cfg.deploy.commit_message, cfg.deploy.branch)
    except (yaml.YAMLError, ValueError) as e:
        _fail(e)
    set_verbose(verbose or cfg.logging.verbose)
    configure_file_logging(cfg.logging.file)
    return cfg


def _apply_overrides(
    cfg: AppConfig,
    dist_dir: str | None,
    branch: str | None,
    entry_file: str | None,
) -> None:
    """Las opciones de la CLI ganan sobre el YAML y el entorno."""
    if dist_dir:
        cfg.deploy.dist_dir = dist_dir
    if branch:
        cfg.deploy.branch = branch
    if entry_file:
        cfg.deploy.entry_file = entry_file


def _fail(error: Exception) -> NoReturn:
    """Imprime el error y termina con status 1."""
    logger.error(str(error) or error.__class__.__name__)
    sys.exit(1)


def _show_summary(result: DeployResult) -> None:
    """Resumen después de publicar (solo con -v)."""
    lineas = [
        f"[bold]Remote:[/bold] {escape(result.remote_url)}",
        f"[bold]Rama:[/bold] {result.publish.branch}",
    ]
    if result.rewrite is not None:
        lineas.append(
            f"[bold]Assets:[/bold] {result.rewrite.insertions} referencias con "
            f"prefijo {result.rewrite.repo_name}/"
        )
    if result.publish.dry_run:
        lineas.append("[bold]Modo:[/bold] dry-run (no se ejecutó git)")
    else:
        pasos = ", ".join(step.value for step in result.publish.steps_run)
        lineas.append(f"[bold]Pasos:[/bold] {pasos}")

    console.print(Panel("\n".join(lineas), title="Deploy", border_style="green"))
