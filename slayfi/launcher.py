"""
Launcher: Start the application picked in the launcher.

The command runs detached under nohup with its output discarded, so the
launcher can exit right after starting it.
"""

import logging
import subprocess
from subprocess import DEVNULL


def start_program(exec_cmd: str) -> bool:
    """Start ``exec_cmd`` in the background. Returns True if it was spawned."""
    if not exec_cmd or not exec_cmd.strip():
        logging.warning("Launch app: empty exec command")
        return False

    shell_cmd = f"nohup {exec_cmd} > /dev/null 2>&1 &"
    try:
        subprocess.Popen(["sh", "-c", shell_cmd], stdin=DEVNULL, stdout=DEVNULL, stderr=DEVNULL)
    except OSError as exc:
        logging.error("Failed to start program %s: %s", exec_cmd, exc)
        return False

    logging.info("Successfully started program: %s", exec_cmd)
    return True
