"""
Connection dispatcher.

Thin wrappers around the external programs: ``ssh``, ``lftp``, the mount
helper named in the entry (usually ``sshfs``) and ``umount``. Nothing here
inspects the programs' output; only the exit status is returned.
"""

import logging
import os
import subprocess
from typing import List

from rich.prompt import Confirm

from shconn import ui
from shconn.errors import ConnectionLaunchError
from shconn.models import Capability, Entry, MountSpec

logger = logging.getLogger(__name__)

MOUNT_OPTIONS = (
    "PubkeyAcceptedKeyTypes=+ssh-rsa,allow_other,default_permissions,"
    "uid={uid},gid={gid}"
)


# ------------------------------
# Helpers
# ------------------------------
def elevation() -> List[str]:
    """``sudo`` prefix for mount commands, empty when already root."""
    return [] if os.geteuid() == 0 else ["sudo"]


def run_command(cmd: List[str]) -> int:
    """Run an interactive command and return its exit status."""
    logger.debug(f"Running command: {' '.join(cmd)}")
    try:
        return subprocess.call(cmd)
    except FileNotFoundError as e:
        raise ConnectionLaunchError(cmd[0]) from e


def format_host(address: str) -> str:
    """Bracket IPv6 addresses for use in ``user@host:path``."""
    if ":" in address and not address.startswith("["):
        return f"[{address}]"
    return address


# ------------------------------
# Clients
# ------------------------------
def call_ssh(user: str, address: str) -> int:
    target = f"{user}@{address}"
    ui.print_step(f"Calling ssh {target}")
    return run_command(["ssh", target])


def call_lftp(user: str, address: str) -> int:
    url = f"sftp://{address}"
    ui.print_step(f"Calling lftp -u {user}, {url}")
    return run_command(["lftp", "-u", f"{user},", url])


# ------------------------------
# Mounting
# ------------------------------
def is_mounted(mount_dir: str) -> bool:
    return os.path.ismount(mount_dir)


def unmount(mount_dir: str) -> bool:
    """Unmount ``mount_dir``; True on success."""
    return run_command(elevation() + ["umount", mount_dir]) == 0


def mount_command(spec: MountSpec, address: str, mount_dir: str) -> List[str]:
    options = MOUNT_OPTIONS.format(uid=os.getuid(), gid=os.getgid())
    source = f"{spec.user}@{format_host(address)}:{spec.remote_path}"
    return elevation() + [spec.fs_type, "-v", "-o", options, source, mount_dir]


def call_mount(spec: MountSpec, address: str, mount_dir: str) -> int:
    """
    Mount the entry's remote path on ``mount_dir``.

    When something is already mounted there the user is asked whether to
    unmount it first; declining aborts without mounting.
    """
    if is_mounted(mount_dir):
        ui.print_warning(f"There's already something mounted to {mount_dir}")
        if not Confirm.ask(
            "Should it be unmounted in order to proceed?",
            default=False,
            console=ui.console,
        ):
            ui.print_step("Ok, aborting without mounting")
            return 1
        if not unmount(mount_dir):
            ui.print_error(f"Failed to unmount {mount_dir}")
            return 1

    cmd = mount_command(spec, address, mount_dir)
    ui.print_step(f"Calling {' '.join(cmd)}")
    status = run_command(cmd)
    if status == 0:
        ui.print_success(f"mounted to {mount_dir}")
    return status


# ------------------------------
# Dispatch
# ------------------------------
def dispatch(mode: Capability, entry: Entry, mount_dir: str) -> int:
    """Launch the client for ``mode`` and return its exit status."""
    if mode is Capability.SSH:
        return call_ssh(entry.ssh_user, entry.address)
    if mode is Capability.TRANSFER:
        return call_lftp(entry.transfer_user, entry.address)
    return call_mount(entry.mount, entry.address, mount_dir)
