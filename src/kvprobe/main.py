import signal
import threading
import typer
from typing import List, Optional
from pathlib import Path
from .config import AppConfig
from .connectors.factory import get_connector
from .diagnostics import setup_logger
from .exceptions import ConfigurationError, ConnectionError, RecorderError, UsageError
from .monitor import LatencyMonitor

app = typer.Typer(help="Key-value store latency checker", add_completion=False)

STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)

def _install_signal_handlers(on_stop) -> dict:
    """
    Routes SIGINT/SIGTERM to on_stop so the run ends on the graceful path.
    The first signal puts the previous handlers back, so a second Ctrl-C
    interrupts even a stuck ping. Returns the previous handlers for
    _restore_signal_handlers().
    """
    if threading.current_thread() is not threading.main_thread():
        return {}
    previous = {sig: signal.getsignal(sig) for sig in STOP_SIGNALS}

    def handle(signum, frame):
        _restore_signal_handlers(previous)
        # The main thread may hold the stop event's lock inside wait();
        # calling on_stop() from here could block on it forever
        threading.Thread(target=on_stop, name="kvprobe-stop", daemon=True).start()

    for sig in STOP_SIGNALS:
        signal.signal(sig, handle)
    return previous

def _restore_signal_handlers(previous: dict) -> None:
    for sig, handler in previous.items():
        if handler is not None:
            signal.signal(sig, handler)

@app.command()
def run(
    descriptors: Optional[List[str]] = typer.Argument(None, help="Connection descriptors, one per target", show_default=False),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to configuration file"),
    interval_ms: Optional[int] = typer.Option(None, "--interval-ms", "-i", help="Pause between rounds in milliseconds [default: 1000]"),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", help="Directory for result files [default: Results]"),
    max_ticks: Optional[int] = typer.Option(None, "--max-ticks", help="Stop after this many rounds"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING or ERROR"),
):
    """
    Pings every target once per round and appends the results to a CSV
    file until interrupted.
    """
    try:
        app_config = AppConfig.from_yaml(config) if config else AppConfig()
        app_config = app_config.with_overrides(
            targets=descriptors,
            interval_ms=interval_ms,
            output_dir=output_dir,
            max_ticks=max_ticks,
            log_level=log_level,
        )
    except ConfigurationError as e:
        typer.echo(f"Error loading config: {e}", err=True)
        raise typer.Exit(code=1)

    logger = setup_logger(level=app_config.log_level)
    logger.info("Starting Up")

    monitor = LatencyMonitor(
        app_config.targets,
        logger,
        output_dir=app_config.output_dir,
        interval_ms=app_config.interval_ms,
        connector_factory=get_connector,
    )

    previous = _install_signal_handlers(monitor.stop)
    try:
        monitor.run(max_ticks=app_config.max_ticks)
    except UsageError as e:
        logger.error(str(e))
        raise typer.Exit(code=1)
    except (ConfigurationError, ConnectionError, RecorderError) as e:
        logger.error(f"Startup failed: {e}")
        raise typer.Exit(code=1)
    finally:
        _restore_signal_handlers(previous)

if __name__ == "__main__":
    app()
