"""Interactive setup wizard - ``lazyzsh`` with no subcommand."""

from __future__ import annotations

import structlog

from lazyzsh.cli._helpers import EXIT_CANCELLED, EXIT_FATAL, EXIT_OK, build_components, check_prereqs
from lazyzsh.config import Settings
from lazyzsh.discovery import WikiDiscovery
from lazyzsh.errors import ConfigWriteError, LazyZshError
from lazyzsh.orchestrator import RunOutcome, RunResult, SetupOrchestrator
from lazyzsh.output import BOLD, RESET, err, info, ok, separator, warn
from lazyzsh.prompts import ConsolePrompter, Prompter
from lazyzsh.runner import CommandRunner

logger = structlog.get_logger()


def _run_orchestrator(
    settings: Settings,
    prompter: Prompter,
    runner: CommandRunner | None,
    discovery: WikiDiscovery | None,
) -> RunResult:
    components = build_components(settings, runner=runner)
    orchestrator = SetupOrchestrator(
        prompter=prompter,
        store=components.store,
        installer=components.installer,
        registry=components.registry,
        settings=settings,
        discovery=discovery,
    )
    return orchestrator.run()


def run_setup(
    settings: Settings,
    *,
    prompter: Prompter | None = None,
    runner: CommandRunner | None = None,
    discovery: WikiDiscovery | None = None,
) -> int:
    """Run the wizard and map its result onto an exit code."""
    print()
    print(f"  {BOLD}🚀 Starting Awesome-Lazy-Zsh setup...{RESET}")
    if settings.dry_run:
        info("Dry run: commands are logged but not executed, nothing is written")
    separator()

    check_prereqs(settings)
    separator()

    if discovery is None and settings.discovery_enabled:
        discovery = WikiDiscovery(timeout=settings.discovery_timeout)

    try:
        result = _run_orchestrator(settings, prompter or ConsolePrompter(), runner, discovery)
    except ConfigWriteError as e:
        logger.error("zshrc_write_failed", error=str(e))
        err(f"Could not write the configuration: {e}")
        return EXIT_FATAL
    except (LazyZshError, OSError, ValueError) as e:
        logger.error("setup_failed", error=str(e))
        err(f"An error occurred during the setup process: {e}")
        return EXIT_FATAL
    finally:
        if discovery is not None:
            discovery.close()

    separator()
    if result.outcome is RunOutcome.CANCELLED:
        warn("Setup cancelled.")
        return EXIT_CANCELLED

    if result.written is not None:
        ok("Setup completed successfully.")
        info("Zsh configuration has been updated. Please restart your terminal.")
    else:
        ok("Done.")
    return EXIT_OK
