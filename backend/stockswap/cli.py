"""StockSwap CLI — maintenance runbooks and service launcher.

Invariants:
    - `maintenance` exits 1 when any step fails; remaining steps are skipped
    - `--cleanup` swaps every system's plan to its cleanup list
    - `serve` runs one service per process on its configured port
"""

import asyncio
import logging
from typing import Optional

import typer
from rich import print

from stockswap.config import Settings, get_settings
from stockswap.core.domain_types import MaintenanceMode, ServiceName
from stockswap.core.errors import StockSwapError
from stockswap.infrastructure.integrations import (
    SimulatedDatabase,
    SimulatedObjectStore,
    SimulatedQueue,
)
from stockswap.infrastructure.observability import setup_logging
from stockswap.services.maintenance_runner import MaintenanceRunner

logger = logging.getLogger(__name__)

app = typer.Typer(help="StockSwap services and maintenance CLI")


def build_runner(settings: Settings) -> MaintenanceRunner:
    scale = settings.maintenance_delay_scale
    return MaintenanceRunner(
        database=SimulatedDatabase(scale, settings.deadlock_probability),
        queue=SimulatedQueue(scale),
        object_store=SimulatedObjectStore(scale),
        topics=tuple(settings.kafka_topics_to_clean),
    )


@app.command()
def maintenance(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    cleanup: bool = typer.Option(False, "--cleanup", "-c", help="Run maintenance in cleanup mode"),
):
    """
    Run database, kafka and s3 maintenance in order
    """
    settings = get_settings()
    setup_logging("DEBUG" if verbose else settings.log_level, settings.log_format, "maintenance")
    mode = MaintenanceMode.CLEANUP if cleanup else MaintenanceMode.RUN

    print("[green]🚧 Running maintenance[/green]")
    if cleanup:
        print("[yellow]🔧 Cleanup mode[/yellow]")
    try:
        report = asyncio.run(build_runner(settings).run(mode))
    except StockSwapError as e:
        logger.error(f"Maintenance aborted: {e.message}", extra={"error_code": e.code})
        print(f"[red]❌ Maintenance failed: {e.message}[/red]")
        raise typer.Exit(code=1)

    if verbose:
        for step in report.completed:
            print(f"[green]✅ {step.system.value}: {step.operation}[/green]")
    print("[green]🎉 Maintenance completed[/green]")


@app.command()
def serve(
    service: ServiceName = typer.Argument(..., help="Service to run"),
    host: Optional[str] = typer.Option(None, help="Bind address"),
    port: Optional[int] = typer.Option(None, help="Port (defaults per service)"),
):
    """
    Run the trading or user service with uvicorn
    """
    import uvicorn

    settings = get_settings()
    if service == ServiceName.TRADING:
        target, default_port = "stockswap.main:trading_app", settings.trading_port
    else:
        target, default_port = "stockswap.main:user_app", settings.user_port
    print(f"[blue]Starting {service.value} service on port {port or default_port}[/blue]")
    uvicorn.run(target, host=host or settings.host, port=port or default_port)


if __name__ == "__main__":
    app()
