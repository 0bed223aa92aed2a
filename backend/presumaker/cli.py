"""
Comandos de línea de comandos
Proyecto: PresuMaker (Generador de Presupuestos)

    presumaker seed-users [--reset]
    presumaker render presupuesto.json [-o salida.pdf] [--html] [--no-open]
"""

import asyncio
import logging
import webbrowser
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError

from presumaker.core.config import settings
from presumaker.schemas.budget import CompleteBudget

logger = logging.getLogger(__name__)


@click.group()
@click.option("--log-level", default=None, help="Nivel de logging (por defecto el de settings).")
def cli(log_level: Optional[str]):
    """PresuMaker - Generador de Presupuestos."""
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# ----------------------------------------------------------------------
# Usuarios
# ----------------------------------------------------------------------

async def _seed_users(reset: bool) -> int:
    from presumaker.core.database import AsyncSessionLocal, close_db, create_tables
    from presumaker.services.auth_service import AuthService

    await create_tables(drop_existing=reset)
    async with AsyncSessionLocal() as session:
        users = await AuthService().seed_users(session, settings.seed_users)
        await session.commit()

    await close_db()
    return len(users)


@cli.command("seed-users")
@click.option("--reset", is_flag=True, help="Elimina y vuelve a crear las tablas.")
def seed_users_command(reset: bool):
    """Crea las tablas y da de alta los usuarios de PRESUMAKER_SEED_USERS."""
    if not settings.seed_users:
        click.echo("PRESUMAKER_SEED_USERS está vacío: no hay usuarios para dar de alta.")
    count = asyncio.run(_seed_users(reset))
    click.echo(f"Usuarios guardados: {count}")


# ----------------------------------------------------------------------
# Documento
# ----------------------------------------------------------------------

@cli.command("render")
@click.argument("budget_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Archivo de salida (por defecto junto al JSON).",
)
@click.option("--html", "as_html", is_flag=True, help="Genera HTML en lugar de PDF.")
@click.option("--open/--no-open", "open_viewer", default=True, help="Abre el documento al terminar.")
def render_command(budget_file: Path, output: Optional[Path], as_html: bool, open_viewer: bool):
    """Genera el documento de un presupuesto guardado como JSON."""
    from presumaker.services.pdf_service import PdfService

    try:
        budget = CompleteBudget.model_validate_json(budget_file.read_text(encoding="utf-8"))
    except ValidationError as e:
        raise click.ClickException(f"Presupuesto inválido:\n{e}")

    suffix = ".html" if as_html else ".pdf"
    output = output or budget_file.with_suffix(suffix)
    service = PdfService()

    try:
        if as_html:
            output.write_text(service.render_html(budget, budget.totals), encoding="utf-8")
        else:
            output.write_bytes(service.generate_budget_pdf(budget, budget.totals))
    except Exception:
        logger.exception("Error al generar el documento desde %s", budget_file)
        raise click.ClickException("No se pudo generar el documento.")

    click.echo(f"Documento generado: {output}")

    if open_viewer:
        # Entrega al visor del sistema; no se espera resultado
        if not webbrowser.open(output.resolve().as_uri()):
            logger.warning("No hay un visor disponible para abrir %s", output)


if __name__ == "__main__":
    cli()
