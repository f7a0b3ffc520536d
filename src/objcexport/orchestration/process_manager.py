"""
Process tree termination for the build tool subprocess.

Used when the caller stops reading the build tool's output before it exits
(an exception in a listener, KeyboardInterrupt). The build tool is started
in its own session, so its children are reachable as a process group too.
"""

import logging
import os
import signal
from typing import List

import psutil

logger = logging.getLogger(__name__)


class TimeoutConstants:
    """Seconds to wait after each termination phase."""
    TERMINATION_GRACEFUL_TIMEOUT = 3
    TERMINATION_FORCE_TIMEOUT = 2


def terminate_process_tree(pid: int, name: str) -> None:
    """
    Terminate a process and all its descendants, escalating from SIGTERM to SIGKILL.
    """
    if pid <= 0:
        logger.warning(f"Invalid PID {pid} for {name}, skipping termination")
        return

    logger.info(f"Starting termination of {name} (PID: {pid}) and its process tree")

    try:
        parent = psutil.Process(pid)
    except psutil.NoSuchProcess:
        logger.info(f"Process {name} (PID: {pid}) already terminated")
        return
    except psutil.AccessDenied:
        logger.warning(f"Access denied to process {name} (PID: {pid}), attempting force kill")
        _force_kill_process(pid)
        return

    phases = [
        ("graceful", False, TimeoutConstants.TERMINATION_GRACEFUL_TIMEOUT),
        ("force_kill", True, TimeoutConstants.TERMINATION_FORCE_TIMEOUT),
    ]

    for phase_name, force, timeout in phases:
        if not _is_process_alive(parent):
            logger.info(f"Process {name} terminated before phase {phase_name}")
            break

        processes = [parent] + _get_process_children(parent)
        signaled = _signal_processes(processes, force)
        if not signaled:
            continue

        _, still_alive = psutil.wait_procs(signaled, timeout=timeout)
        remaining = [p for p in still_alive if _is_process_alive(p)]
        if not remaining:
            logger.info(f"All processes terminated in phase {phase_name}")
            break
        logger.warning(f"Phase {phase_name}: {len(remaining)} processes still alive")

    _cleanup_process_group(pid, name)
    logger.info(f"Termination process completed for {name} (PID: {pid})")


def _is_process_alive(process: psutil.Process) -> bool:
    try:
        if not process.is_running():
            return False
        return process.status() not in (psutil.STATUS_ZOMBIE, psutil.STATUS_DEAD)
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        return False


def _get_process_children(parent: psutil.Process) -> List[psutil.Process]:
    try:
        return [child for child in parent.children(recursive=True) if _is_process_alive(child)]
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        return []


def _signal_processes(processes: List[psutil.Process], force: bool) -> List[psutil.Process]:
    signaled = []
    for process in processes:
        try:
            if not _is_process_alive(process):
                continue
            if force:
                process.kill()
            else:
                process.terminate()
            signaled.append(process)
            logger.debug(f"Sent {'SIGKILL' if force else 'SIGTERM'} to PID {process.pid}")
        except psutil.NoSuchProcess:
            continue
        except psutil.AccessDenied:
            logger.warning(f"Access denied signaling PID {process.pid}")
    return signaled


def _cleanup_process_group(pid: int, name: str) -> None:
    """Kill whatever is left in the process group led by ``pid``."""
    if not hasattr(os, "killpg"):
        return
    try:
        os.killpg(pid, signal.SIGKILL)
        logger.debug(f"Sent SIGKILL to process group {pid} for {name}")
    except ProcessLookupError:
        pass
    except PermissionError:
        logger.debug(f"No permission to kill process group {pid}")


def _force_kill_process(pid: int) -> None:
    try:
        os.kill(pid, signal.SIGKILL)
        logger.warning(f"Force killed process PID {pid}")
    except ProcessLookupError:
        pass
    except PermissionError as e:
        logger.error(f"Failed to force kill PID {pid}: {e}")
