"""
Main CLI application
"""
import typer
from pathlib import Path
from typing import Optional

from rich.table import Table

from ...core.exceptions import ProxSwapError, PrivilegeError
from ...core.logging import setup_logging, get_logger, get_stdout_console, get_stderr_console
from ...domain.configuration import ConfigurationService, ConfigurationStore
from ...infrastructure.redirection import RedsocksController
from ...infrastructure.state import FileConfigurationRepository
from ..config.loader import ConfigLoader, Settings

logger = get_logger(__name__)
stdout_console = get_stdout_console()
stderr_console = get_stderr_console()

# Create main app
app = typer.Typer(
    name="proxswap",
    add_completion=False,
    help="Switch between redsocks proxy chains",
    rich_markup_mode="rich",
)


def create_service(settings: Settings) -> ConfigurationService:
    """Wire store, repository and controller from settings"""
    repository = FileConfigurationRepository(settings.config_dir, settings.chain_dir)
    controller = RedsocksController(
        redirector_bin=settings.redirector_bin,
        nat_chain=settings.nat_chain,
        use_sudo=settings.use_sudo,
        timeout=settings.command_timeout,
    )
    return ConfigurationService(ConfigurationStore(), repository, controller)


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Log file path",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Settings file path (TOML)",
    ),
    config_dir: Optional[Path] = typer.Option(
        None,
        "--config-dir",
        help="Directory holding configuration records",
    ),
):
    """
    ProxSwap - manage and switch redsocks proxy chains
    
    Without a subcommand the interactive interface starts.
    """
    try:
        settings = ConfigLoader().load(
            toml_path=config_file,
            cli_overrides={
                "log_level": log_level,
                "log_file": str(log_file) if log_file else None,
                "config_dir": str(config_dir) if config_dir else None,
            },
        )
    except ProxSwapError as e:
        stderr_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    
    ctx.obj = settings
    
    if ctx.invoked_subcommand is None:
        tui(ctx)
    else:
        setup_logging(level=settings.log_level, log_file=settings.log_file)


@app.command(name="tui")
def tui(ctx: typer.Context):
    """Start the interactive interface"""
    from ..tui.app import ProxSwapApp
    from ..tui.controller import TerminalController
    
    settings = _settings(ctx)
    # The interface owns the terminal, so logs only go to the file
    setup_logging(level=settings.log_level, log_file=settings.default_log_file, console=False)
    
    try:
        service = create_service(settings)
        service.controller.ensure_privileges()
    except PrivilegeError as e:
        stderr_console.print(f"[red]Privilege Error:[/red] {e}")
        raise typer.Exit(1)
    except ProxSwapError as e:
        stderr_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    
    failures = service.load()
    controller = TerminalController(service)
    if failures:
        controller.status = f"{len(failures)} configuration(s) failed to load, see {settings.default_log_file}"
    
    ProxSwapApp(controller).run()


@app.command(name="list")
def list_configurations(ctx: typer.Context):
    """List stored configurations"""
    settings = _settings(ctx)
    try:
        repository = FileConfigurationRepository(settings.config_dir, settings.chain_dir)
    except ProxSwapError as e:
        stderr_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    
    store = ConfigurationStore()
    failures = store.load(repository)
    
    if not len(store):
        stdout_console.print("[yellow]No configurations[/yellow]")
    else:
        table = Table(title="Configurations", show_header=True, header_style="bold cyan")
        table.add_column("Name", style="cyan")
        table.add_column("Proxies", style="green")
        table.add_column("Rules", style="blue")
        
        for config in store:
            table.add_row(
                config.name,
                "\n".join(f"{p.proxy_type} {p.host}:{p.port}" for p in config.proxies),
                "\n".join(f"{r.source_port} → {r.target_port}" for r in config.rules),
            )
        
        stdout_console.print(table)
    
    for failure in failures:
        stderr_console.print(f"[red]Failed to load[/red] {failure}")


@app.command(name="deactivate")
def deactivate(ctx: typer.Context):
    """Stop the redirector and flush NAT rules"""
    settings = _settings(ctx)
    try:
        service = create_service(settings)
        service.controller.ensure_privileges()
        service.deactivate()
    except ProxSwapError as e:
        logger.debug("Deactivation failed", exc_info=True)
        stderr_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    
    stdout_console.print("[green]✓[/green] Redirector stopped and NAT rules flushed")


def run():
    """CLI entry point"""
    app()


if __name__ == "__main__":
    run()
