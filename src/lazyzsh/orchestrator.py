"""Setup orchestrator - the wizard as an explicit state machine.

Every step handler returns the next ``Step``; ``TRANSITIONS`` lists the legal
successors so each branch can be driven in tests with a scripted prompter.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

import structlog

from lazyzsh.backup import BackupStore
from lazyzsh.config import Settings
from lazyzsh.discovery import WikiDiscovery
from lazyzsh.errors import ConfigWriteError, PromptError, SelectionError
from lazyzsh.fsutil import atomic_write_text
from lazyzsh.installer import ComponentInstaller, InstallOutcome, InstallStatus
from lazyzsh.output import BOLD, RESET, err, header, info, ok, separator, warn
from lazyzsh.prompts import Choice, Prompter, PromptMode, PromptSpec, choices_from
from lazyzsh.registry import ComponentKind, ComponentRegistry
from lazyzsh.synthesizer import AliasMode, FunctionMode, Selection, dedupe, duplicates, render, validate_identifier

logger = structlog.get_logger()

FIND_MORE = "Find more..."


class Step(StrEnum):
    START = "start"
    FRESH_INSTALL = "fresh_install"
    DEFAULT_INSTALL = "default_install"
    BACKUP_RESTORE = "backup_restore"
    BACKUP = "backup"
    RESTORE = "restore"
    SELECT_THEME = "select_theme"
    SELECT_PLUGINS = "select_plugins"
    SELECT_ALIAS_MODE = "select_alias_mode"
    SELECT_FUNCTION_MODE = "select_function_mode"
    INSTALL_COMPONENTS = "install_components"
    SYNTHESIZE = "synthesize"
    DONE = "done"
    CANCELLED = "cancelled"


TERMINAL_STEPS: frozenset[Step] = frozenset({Step.DONE, Step.CANCELLED})

TRANSITIONS: dict[Step, frozenset[Step]] = {
    Step.START: frozenset({Step.FRESH_INSTALL, Step.DEFAULT_INSTALL, Step.BACKUP_RESTORE, Step.CANCELLED}),
    Step.FRESH_INSTALL: frozenset({Step.SELECT_THEME}),
    Step.DEFAULT_INSTALL: frozenset({Step.SELECT_THEME}),
    Step.BACKUP_RESTORE: frozenset({Step.BACKUP, Step.RESTORE, Step.CANCELLED}),
    Step.BACKUP: frozenset({Step.DONE}),
    Step.RESTORE: frozenset({Step.DONE, Step.CANCELLED}),
    Step.SELECT_THEME: frozenset({Step.SELECT_PLUGINS, Step.CANCELLED}),
    Step.SELECT_PLUGINS: frozenset({Step.SELECT_ALIAS_MODE, Step.CANCELLED}),
    Step.SELECT_ALIAS_MODE: frozenset({Step.SELECT_FUNCTION_MODE, Step.CANCELLED}),
    Step.SELECT_FUNCTION_MODE: frozenset({Step.INSTALL_COMPONENTS, Step.CANCELLED}),
    Step.INSTALL_COMPONENTS: frozenset({Step.SYNTHESIZE}),
    Step.SYNTHESIZE: frozenset({Step.DONE, Step.CANCELLED}),
}


class RunOutcome(StrEnum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass
class RunResult:
    outcome: RunOutcome
    selection: Selection | None = None
    installs: list[InstallOutcome] = field(default_factory=list)
    snapshot: Path | None = None
    restored_from: Path | None = None
    written: Path | None = None
    visited: list[Step] = field(default_factory=list)


@dataclass
class _Draft:
    """Answers collected so far; frozen into a ``Selection`` before installing."""

    use_defaults: bool = False
    theme: str = ""
    plugins: list[str] = field(default_factory=list)
    alias_mode: AliasMode = AliasMode.DEFAULT
    function_mode: FunctionMode = FunctionMode.DEFAULT


class SetupOrchestrator:
    """Drives prompts, installs, backup/restore and the final ``.zshrc`` write."""

    def __init__(
        self,
        *,
        prompter: Prompter,
        store: BackupStore,
        installer: ComponentInstaller,
        registry: ComponentRegistry,
        settings: Settings,
        discovery: WikiDiscovery | None = None,
    ) -> None:
        self._prompter = prompter
        self._store = store
        self._installer = installer
        self._registry = registry
        self._settings = settings
        self._discovery = discovery
        self._draft = _Draft()
        self._result = RunResult(outcome=RunOutcome.CANCELLED)
        self._handlers: dict[Step, Callable[[], Step]] = {
            Step.START: self._start,
            Step.FRESH_INSTALL: self._fresh_install,
            Step.DEFAULT_INSTALL: self._default_install,
            Step.BACKUP_RESTORE: self._backup_restore,
            Step.BACKUP: self._backup,
            Step.RESTORE: self._restore,
            Step.SELECT_THEME: self._select_theme,
            Step.SELECT_PLUGINS: self._select_plugins,
            Step.SELECT_ALIAS_MODE: self._select_alias_mode,
            Step.SELECT_FUNCTION_MODE: self._select_function_mode,
            Step.INSTALL_COMPONENTS: self._install_components,
            Step.SYNTHESIZE: self._synthesize,
        }

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------

    def run(self) -> RunResult:
        step = Step.START
        while step not in TERMINAL_STEPS:
            self._result.visited.append(step)
            logger.debug("wizard_step", step=step.value)
            nxt = self._handlers[step]()
            if nxt not in TRANSITIONS[step]:
                msg = f"Illegal wizard transition {step.value} -> {nxt.value}"
                raise RuntimeError(msg)
            step = nxt

        self._result.visited.append(step)
        self._result.outcome = RunOutcome.COMPLETED if step is Step.DONE else RunOutcome.CANCELLED
        logger.info("wizard_finished", outcome=self._result.outcome.value)
        return self._result

    def _ask(self, spec: PromptSpec):
        try:
            return self._prompter.ask(spec)
        except PromptError as e:
            logger.info("prompt_aborted", prompt=spec.name, reason=str(e))
            return None

    # ------------------------------------------------------------------
    # Branch points
    # ------------------------------------------------------------------

    def _start(self) -> Step:
        action = self._ask(
            PromptSpec(
                name="startOption",
                message="What do you want to do?",
                choices=[
                    Choice("Start fresh installation", Step.FRESH_INSTALL),
                    Choice("Default installation", Step.DEFAULT_INSTALL),
                    Choice("Restore/Backup", Step.BACKUP_RESTORE),
                ],
            ),
        )
        if action is None:
            err("No valid option selected. Exiting.")
            return Step.CANCELLED
        return Step(action)

    def _fresh_install(self) -> Step:
        warn("Starting fresh installation...")
        separator()
        self._draft.use_defaults = False
        return Step.SELECT_THEME

    def _default_install(self) -> Step:
        warn("Starting default installation...")
        separator()
        self._draft.use_defaults = True
        return Step.SELECT_THEME

    def _backup_restore(self) -> Step:
        warn("Starting backup/restore process...")
        separator()
        choice = self._ask(
            PromptSpec(
                name="backupOption",
                message="Choose an option:",
                choices=[
                    Choice("Backup .zshrc", Step.BACKUP),
                    Choice("Restore .zshrc from Backup", Step.RESTORE),
                ],
            ),
        )
        if choice is None:
            err("No valid option selected. Exiting.")
            return Step.CANCELLED
        return Step(choice)

    # ------------------------------------------------------------------
    # Backup / restore
    # ------------------------------------------------------------------

    def _backup(self) -> Step:
        info(f"Backing up {self._store.live_path.name}...")
        snapshot = self._store.create_snapshot()
        if snapshot is None:
            warn(f"No {self._store.live_path.name} file found to back up.")
        else:
            ok(f"Backup created at: {snapshot}")
            self._result.snapshot = snapshot
        return Step.DONE

    def _restore(self) -> Step:
        self._store.ensure_store_exists()
        snapshots = list(reversed(self._store.snapshots()))
        if not snapshots:
            warn("No backups found.")
            return Step.DONE

        selected = self._ask(
            PromptSpec(
                name="selectedBackup",
                message="Select a backup file to restore:",
                choices=[
                    Choice(f"{s.name}  {s.created_at.astimezone():%Y-%m-%d %H:%M:%S}", s.path) for s in snapshots
                ],
            ),
        )
        if selected is None:
            warn("No backup selected. Restore operation cancelled.")
            return Step.CANCELLED

        confirmed = self._ask(
            PromptSpec(
                name="confirmRestore",
                message=f"Are you sure you want to restore from {selected}?",
                mode=PromptMode.CONFIRM,
                default=True,
            ),
        )
        if not confirmed:
            warn("Restore operation cancelled by the user.")
            return Step.CANCELLED

        self._store.restore_snapshot(selected)
        self._result.restored_from = Path(selected)
        ok(f"{self._store.live_path.name} restored from backup: {selected}")
        return Step.DONE

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def _discover(self, kind: ComponentKind) -> list[str]:
        if self._discovery is None:
            return []
        info("Fetching the Oh My Zsh wiki...")
        found = self._discovery.themes() if kind is ComponentKind.THEME else self._discovery.plugins()
        valid: list[str] = []
        for name in found:
            try:
                valid.append(validate_identifier(name))
            except SelectionError:
                logger.debug("discovery_name_skipped", name=name)
        if not valid:
            warn("Could not fetch additional options from the Oh My Zsh wiki.")
        return valid

    def _menu(self, kind: ComponentKind) -> list[str]:
        names = self._registry.identifiers(kind)
        if self._discovery is not None:
            names = [*names, FIND_MORE]
        return names

    def _select_theme(self) -> Step:
        if self._draft.use_defaults:
            self._draft.theme = validate_identifier(self._settings.default_theme)
            ok(f"Using default theme: {self._draft.theme}")
            return Step.SELECT_PLUGINS

        theme = self._ask(
            PromptSpec(
                name="selectedTheme",
                message="Choose a theme to apply:",
                choices=choices_from(self._menu(ComponentKind.THEME)),
            ),
        )
        if theme == FIND_MORE:
            extra = self._discover(ComponentKind.THEME)
            theme = None
            if extra:
                theme = self._ask(
                    PromptSpec(name="selectedTheme", message="Select a theme:", choices=choices_from(extra)),
                )
        if theme is None:
            err("No theme selected. Exiting.")
            return Step.CANCELLED

        self._draft.theme = validate_identifier(theme)
        info(f"Selected theme: {BOLD}{self._draft.theme}{RESET}")
        return Step.SELECT_PLUGINS

    def _select_plugins(self) -> Step:
        if self._draft.use_defaults:
            plugins = list(self._settings.default_plugins)
        else:
            picked = self._ask(
                PromptSpec(
                    name="plugins",
                    message="Select plugins to install:",
                    mode=PromptMode.MULTIPLE,
                    choices=choices_from(self._menu(ComponentKind.PLUGIN)),
                ),
            )
            plugins = [p for p in (picked or []) if p != FIND_MORE]
            if picked and FIND_MORE in picked:
                extra = self._discover(ComponentKind.PLUGIN)
                if extra:
                    more = self._ask(
                        PromptSpec(
                            name="plugins",
                            message="Select additional plugins:",
                            mode=PromptMode.MULTIPLE,
                            choices=choices_from(extra),
                        ),
                    )
                    plugins.extend(more or [])

        if not plugins:
            err("No plugins selected. Exiting.")
            return Step.CANCELLED

        for name in plugins:
            validate_identifier(name)
        dups = duplicates(plugins)
        if dups:
            warn(f"Ignoring repeated plugins (first position kept): {', '.join(dups)}")
        self._draft.plugins = dedupe(plugins)
        info(f"Selected plugins: {', '.join(self._draft.plugins)}")
        return Step.SELECT_ALIAS_MODE

    def _select_alias_mode(self) -> Step:
        if self._draft.use_defaults:
            return Step.SELECT_FUNCTION_MODE
        mode = self._ask(
            PromptSpec(
                name="aliasChoice",
                message="Choose alias setup:",
                choices=[Choice("Default Aliases", AliasMode.DEFAULT), Choice("Custom Aliases", AliasMode.CUSTOM)],
            ),
        )
        if mode is None:
            err("No alias setup selected. Exiting.")
            return Step.CANCELLED
        self._draft.alias_mode = AliasMode(mode)
        return Step.SELECT_FUNCTION_MODE

    def _select_function_mode(self) -> Step:
        if self._draft.use_defaults:
            return Step.INSTALL_COMPONENTS
        mode = self._ask(
            PromptSpec(
                name="functionChoice",
                message="Choose function setup:",
                choices=[
                    Choice("Default Functions", FunctionMode.DEFAULT),
                    Choice("Custom Functions", FunctionMode.CUSTOM),
                ],
            ),
        )
        if mode is None:
            err("No function setup selected. Exiting.")
            return Step.CANCELLED
        self._draft.function_mode = FunctionMode(mode)
        return Step.INSTALL_COMPONENTS

    # ------------------------------------------------------------------
    # Install + write
    # ------------------------------------------------------------------

    def _report(self, outcome: InstallOutcome) -> None:
        name = f"{outcome.identifier} {outcome.kind}"
        if outcome.status is InstallStatus.INSTALLED:
            ok(f"{name} installed successfully.")
        elif outcome.status is InstallStatus.ALREADY_INSTALLED:
            info(f"{name} is already installed.")
        elif outcome.status is InstallStatus.BUILTIN and outcome.known:
            info(f"{name} is built into Oh My Zsh, nothing to fetch.")
        elif outcome.status is InstallStatus.BUILTIN:
            warn(f"{name} is not in the registry; assuming it is built in, nothing to fetch.")
        elif outcome.status is InstallStatus.UNMANAGED:
            warn(f"{name}: {outcome.path} exists but is not a git checkout; left as is.")
        elif outcome.status is InstallStatus.FAILED:
            err(f"Error installing {name}: {outcome.error}")

    def _install_components(self) -> Step:
        draft = self._draft
        selection = Selection(
            theme=draft.theme,
            plugins=tuple(draft.plugins),
            alias_mode=draft.alias_mode,
            function_mode=draft.function_mode,
        )
        self._result.selection = selection

        header("Installing components")
        outcomes = self._installer.install_all([selection.theme], ComponentKind.THEME)
        font = self._installer.ensure_font(selection.theme)
        if font.status is not InstallStatus.SKIPPED:
            outcomes.append(font)
        outcomes.extend(self._installer.install_all(selection.plugins, ComponentKind.PLUGIN))

        for outcome in outcomes:
            self._report(outcome)
        failed = [o.identifier for o in outcomes if not o.ok]
        if failed:
            warn(f"{len(failed)} component(s) failed: {', '.join(failed)}. Continuing.")
        self._result.installs = outcomes
        return Step.SYNTHESIZE

    def _synthesize(self) -> Step:
        selection = self._result.selection
        if selection is None:
            msg = "Cannot write the configuration before components were selected"
            raise RuntimeError(msg)
        text = render(selection)
        live = self._store.live_path

        if self._settings.dry_run:
            header(f"Dry run: {live} would contain")
            print(text)
            return Step.DONE

        if live.is_file():
            backup_first = True
            if not self._draft.use_defaults:
                backup_first = self._ask(
                    PromptSpec(
                        name="backupFirst",
                        message=f"Back up existing {live.name} before overwriting?",
                        mode=PromptMode.CONFIRM,
                        default=True,
                    ),
                )
                if backup_first is None:
                    warn("Setup cancelled before writing the configuration.")
                    return Step.CANCELLED
            if backup_first:
                self._result.snapshot = self._store.create_snapshot()
                if self._result.snapshot:
                    ok(f"Backup created at: {self._result.snapshot}")

        try:
            atomic_write_text(live, text + "\n")
        except OSError as e:
            raise ConfigWriteError(f"Could not write {live}: {e}") from e

        self._result.written = live
        logger.info("zshrc_written", path=str(live), plugins=len(selection.plugins), theme=selection.theme)
        ok(f"Configuration written to {live}")
        return Step.DONE
