from __future__ import annotations

import argparse
import logging
import os
from typing import Callable, Optional

from .console import show_banner
from .lib import prompt
from .lib.privileges import PrivilegeError, require_elevated_privileges
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import PipelineResult, StepCtx, run_pipeline
from .settings import Settings, load_settings
from .state import PipelineState, StateError
from .state_store import save_report
from .steps import (
    AppPlatformStep,
    ContainerRuntimeStep,
    GpuDriverStep,
    GpuToolkitStep,
    NetworkInfoStep,
    OptionalToolsStep,
    StorageStep,
    SummaryRebootStep,
    SystemUpdateStep,
)

logger = logging.getLogger(__name__)

TITLE = "Docker Server Automated Setup"


def build_steps():
    return [
        SystemUpdateStep(),
        NetworkInfoStep(),
        StorageStep(),
        GpuDriverStep(),
        ContainerRuntimeStep(),
        GpuToolkitStep(),
        AppPlatformStep(),
        OptionalToolsStep(),
        SummaryRebootStep(),
    ]


def plan_lines(settings: Settings) -> list[str]:
    return [
        "Update system packages",
        f"Configure second drive for Docker storage ({settings.mount_point})",
        f"Install NVIDIA drivers ({settings.nvidia_driver_package})",
        "Install Docker and NVIDIA Container Toolkit",
        "Install CasaOS",
        "Configure everything automatically",
    ]


def run(
    *,
    settings: Settings,
    dry_run: bool = False,
    report_path: Optional[str] = None,
    confirm: Callable[[str], bool] = prompt.confirm,
    ask: Callable[[str], str] = prompt.ask,
    geteuid: Callable[[], int] = os.geteuid,
) -> Optional[PipelineResult]:
    """Run the installer once, top to bottom.

    Returns None when the operator cancels at the first prompt.
    Raises PrivilegeError before any change when not running as root.
    """

    show_banner(TITLE, plan_lines(settings))
    if not confirm("Do you want to continue?"):
        logger.error("Setup cancelled")
        return None

    if dry_run:
        logger.warning("Dry run: commands and file writes are logged, not executed")
    else:
        require_elevated_privileges(geteuid=geteuid)

    state = PipelineState()
    ctx = StepCtx(settings=settings, confirm=confirm, ask=ask, dry_run=dry_run)
    result: Optional[PipelineResult] = None
    try:
        result = run_pipeline(ctx=ctx, state=state, steps=build_steps())
        return result
    finally:
        if report_path:
            save_report(report_path, state, result)


def exit_code(result: Optional[PipelineResult]) -> int:
    if result is None or result.error is None:
        return 0
    return result.error.returncode if result.error.returncode > 0 else 1


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="dockerhost-installer")
    p.add_argument("--config", default=None, help="YAML file overriding default settings")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to installer log")
    p.add_argument("--report", default=None, help="Write a JSON run report to this path")
    p.add_argument("--dry-run", action="store_true", help="Log commands and file writes without executing them")
    p.add_argument("-v", "--verbose", action="store_true", help="Show every command on the console")

    args = p.parse_args(argv)

    configure_logging(
        log_path=args.log,
        console_level=logging.DEBUG if args.verbose else logging.INFO,
    )

    try:
        settings = load_settings(args.config)
    except (OSError, ValueError) as e:
        logger.error("Invalid settings: %s", e)
        return 1

    try:
        result = run(settings=settings, dry_run=bool(args.dry_run), report_path=args.report)
    except PrivilegeError as e:
        logger.error("%s", e)
        return 1
    except StateError:
        logger.exception("Installer failed")
        return 1
    except KeyboardInterrupt:
        logger.error("Interrupted")
        return 130

    return exit_code(result)
