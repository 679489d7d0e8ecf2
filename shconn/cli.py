"""
Command line entry point.

Usage:
    shconn                 show the menu and ask for a server
    shconn 11              connect to server 11, asking for the service if needed
    shconn 11 2            connect to server 11 with service 2 (1=ssh, 2=lftp, 3=mount)
    shconn u               unmount the mount directory (same as -u)
    shconn h               show usage and settings (same as -i)

A service id other than a single digit 1-9 is ignored and the service prompt
is shown instead.
"""

import re
import shutil
import signal
import sys
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.markup import escape
from rich.prompt import Prompt
from rich.table import Table
from rich import box

from shconn import __version__, connect, ui
from shconn.config import find_config, load_config
from shconn.errors import (
    ConfigError,
    ConfigNotFoundError,
    ConnectionLaunchError,
    SelectionError,
)
from shconn.layout import ColumnMode, layout, render_grid
from shconn.menu import flatten
from shconn.models import Capability, ConfigTree
from shconn.modes import ModeSelection
from shconn.selector import Resolution, resolve
from shconn.settings import CONFIG_ENV_VAR, USER_CONFIG_PATH, Settings

DIST_CONFIG = Path(__file__).parent / "data" / "shconfig.yml.dist"
EXIT_LAUNCH_FAILED = 127
SERVICE_ID_PATTERN = re.compile(r"[1-9]")


# ------------------------------
# Signal Handling
# ------------------------------
def handle_signal(signum: int, frame) -> None:
    ui.console.print(f"\n[warning]Received signal {signum}. Exiting...[/warning]")
    sys.exit(128 + signum)


# ------------------------------
# Menu
# ------------------------------
def show_menu(tree: ConfigTree, settings: Settings) -> None:
    flattened = flatten(tree, settings.group_step)
    mode = ColumnMode() if settings.auto_columns else ColumnMode(settings.columns)
    grid = layout(flattened.entries, flattened.labels, ui.terminal_width(), mode)
    ui.console.print("Select server to connect to")
    render_grid(grid, ui.console)


def parse_menu_answer(text: str) -> Tuple[Optional[str], Optional[str]]:
    """Split ``"11 2"`` into the server and optional service tokens."""
    tokens = text.split()
    if not tokens:
        return None, None
    return tokens[0], tokens[1] if len(tokens) > 1 else None


def choose_mode(
    resolution: Resolution, preset: Optional[str], settings: Settings
) -> Capability:
    selection = ModeSelection(resolution.capabilities)
    if selection.mode is not None:
        return selection.mode
    if preset is not None:
        return selection.feed(preset)

    indexed = resolution.indexed
    ui.console.print(
        f"Connection type for ([index]{indexed.index}[/index]) "
        f"[name]{escape(indexed.entry.name)}[/name]"
    )
    for line in selection.prompt_lines(settings.input_wait):
        ui.console.print(escape(line))
    return selection.feed(ui.timed_input("> ", settings.input_wait))


# ------------------------------
# Info & setup
# ------------------------------
def show_info(config_path: Optional[Path], settings: Settings) -> None:
    ui.print_banner("shconn", __version__)
    ui.console.print("Usage: shconn [OPTIONS] [SERVER_ID] [SERVICE_ID]\n")
    ui.console.print(
        "If no SERVER_ID is provided a menu with the available servers is displayed.\n"
        "If provided, the menu is skipped and\n"
        " - if only one service is configured for the host it is started directly\n"
        " - if other services are defined a selection for the service is shown\n"
        "If a SERVICE_ID is provided (1=ssh, 2=lftp, 3=mount) "
        "the connection is established immediately.\n"
        "Use 'shconn u' to unmount and 'shconn h' to show this screen.\n"
    )
    if config_path is None:
        ui.print_warning("No configuration file found")
    else:
        ui.console.print(f"Used configuration file [primary]{config_path.resolve()}[/primary]")

    table = Table(title="Settings", box=box.ROUNDED, style="primary")
    table.add_column("Setting", style="info")
    table.add_column("Value")
    for name, value in vars(settings).items():
        table.add_row(name, escape(str(value)))
    ui.console.print(table)


def write_sample_config(target: Path) -> None:
    if target.exists():
        ui.print_warning(f"{target} already exists, leaving it untouched")
        return
    shutil.copyfile(DIST_CONFIG, target)
    ui.print_success(f"Sample configuration written to {target}")


def unmount(mount_dir: str) -> None:
    if not connect.is_mounted(mount_dir):
        ui.print_step(f"Nothing mounted to {mount_dir}")
        return
    if connect.unmount(mount_dir):
        ui.print_success(f"Unmounted {mount_dir}")
    else:
        ui.print_error(f"Failed to unmount {mount_dir}")


# ------------------------------
# CLI
# ------------------------------
@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("server_id", required=False)
@click.argument("service_id", required=False)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help=f"Configuration file (default: ${CONFIG_ENV_VAR}, ~/.shconfig.yml, /etc/.shconfig.yml).",
)
@click.option("-n", "--columns", type=click.IntRange(min=1), help="Fixed number of columns.")
@click.option(
    "--auto-columns/--fixed-columns",
    default=None,
    help="Derive the column count from the terminal width.",
)
@click.option("-g", "--group-step", type=click.IntRange(min=1), help="Index block size per group.")
@click.option(
    "-t",
    "--timeout",
    "input_wait",
    type=click.IntRange(min=0),
    metavar="SECONDS",
    help="Seconds before the service prompt falls back to ssh.",
)
@click.option("-d", "--debug", is_flag=True, help="Enable debug output.")
@click.option("--no-color", is_flag=True, help="Disable colored output.")
@click.option("-u", "--unmount", "do_unmount", is_flag=True, help="Unmount the mount directory and exit.")
@click.option("-i", "--info", is_flag=True, help="Show usage and the configuration in use.")
@click.option("--init-config", is_flag=True, help="Write a sample ~/.shconfig.yml if none exists.")
@click.version_option(version=__version__)
def main(
    server_id: Optional[str],
    service_id: Optional[str],
    config_path: Optional[Path],
    columns: Optional[int],
    auto_columns: Optional[bool],
    group_step: Optional[int],
    input_wait: Optional[int],
    debug: bool,
    no_color: bool,
    do_unmount: bool,
    info: bool,
    init_config: bool,
) -> None:
    """Pick a server from the menu and connect via ssh, lftp or mount."""
    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)
    ui.configure_console(colored=not no_color)
    logger = ui.setup_logging(debug)

    if init_config:
        write_sample_config(USER_CONFIG_PATH.expanduser())
        return

    # "u" and "h" work as positional shortcuts; any other word shows the menu.
    index: Optional[int] = None
    if server_id is not None:
        if server_id.isdecimal():
            index = int(server_id)
        elif server_id in ("u", "U"):
            do_unmount = True
        elif server_id in ("h", "H"):
            info = True
    preset: Optional[str] = None
    if index is not None and service_id is not None:
        if SERVICE_ID_PATTERN.fullmatch(service_id):
            preset = service_id
        else:
            logger.debug(f"Ignoring service id '{service_id}', asking instead")

    tree: Optional[ConfigTree] = None
    found: Optional[Path] = None
    try:
        found = find_config(config_path)
        tree = load_config(found)
    except ConfigNotFoundError as e:
        if not (info or do_unmount):
            ui.print_error(str(e))
            sys.exit(1)
        logger.debug(str(e))
    except ConfigError as e:
        ui.print_error(f"Invalid configuration: {e}")
        sys.exit(1)

    settings = tree.settings if tree is not None else Settings()
    if columns is not None and auto_columns is None:
        auto_columns = False
    settings = settings.override(
        columns=columns,
        auto_columns=auto_columns,
        group_step=group_step,
        input_wait=input_wait,
        debug=True if debug else None,
        colored=False if no_color else None,
    )
    if not settings.colored:
        ui.configure_console(colored=False)
    logger = ui.setup_logging(settings.debug)

    if info:
        show_info(found, settings)
        return
    if do_unmount:
        unmount(settings.mount_dir)
        return

    if index is None:
        show_menu(tree, settings)
        if connect.is_mounted(settings.mount_dir):
            ui.print_warning(f"There's already something mounted to {settings.mount_dir}")
            ui.console.print("Enter u to unmount and exit")
        try:
            answer = Prompt.ask(
                "[primary]Enter your choice[/primary]",
                default="",
                show_default=False,
                console=ui.console,
            )
        except EOFError:
            answer = ""
        first, second = parse_menu_answer(answer)
        if first in ("u", "U"):
            unmount(settings.mount_dir)
            return
        if first is None or not first.isdecimal():
            ui.print_error("Not a valid selection (numbers only)")
            return
        index = int(first)
        preset = second

    try:
        resolution = resolve(tree, index, settings.group_step)
        mode = choose_mode(resolution, preset, settings)
    except SelectionError as e:
        ui.print_error(str(e))
        return

    logger.debug(f"Connecting to '{resolution.entry.name}' via {mode.value}")
    try:
        status = connect.dispatch(mode, resolution.entry, settings.mount_dir)
    except ConnectionLaunchError as e:
        ui.print_error(str(e))
        sys.exit(EXIT_LAUNCH_FAILED)
    sys.exit(status)
