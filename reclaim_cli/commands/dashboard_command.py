"""
Interactive task dashboard.

Key handling lives in ``DashboardState``, a small state machine with one
transition table per mode, so it can be driven without a terminal. The
prompt_toolkit application only renders the state and forwards key presses.
"""
from enum import Enum
from typing import Callable, Dict, List, Optional

from prompt_toolkit import Application
from prompt_toolkit.filters import Condition
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout import ConditionalContainer, HSplit, Layout, VSplit, Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.layout.dimension import Dimension
from prompt_toolkit.styles import Style
from prompt_toolkit.widgets import Frame

from ..reclaim_api.data_models import Task, TaskFilter
from ..reclaim_api.errors import CliError, OutputError
from ..reclaim_api.http_client import ReclaimClient
from ..utils.logger import get_logger

log = get_logger(__name__)

DASHBOARD_HINT = "j/k move  g/G jump  r refresh  ? help  :q/Esc/Ctrl+C quit"

QUIT_KEYS = frozenset({"escape", "c-c"})
ENTER_KEYS = frozenset({"c-m", "c-j", "enter"})
BACKSPACE_KEYS = frozenset({"c-h", "backspace"})

HELP_TEXT = """Dashboard key bindings

Navigation
  j / Down        Move down
  k / Up          Move up
  g / Home        Jump to first task
  G / End         Jump to last task

Actions
  r               Refresh tasks from API
  ?               Toggle this help

Exit
  :q              Vim-style quit command
  Esc             Quit immediately
  Ctrl+C          Quit immediately

Press ? or Enter to close this panel."""


class DashboardMode(Enum):
    NORMAL = "normal"
    HELP = "help"
    COMMAND = "command"


class AppAction(Enum):
    NONE = "none"
    QUIT = "quit"
    REFRESH = "refresh"


def _plural(count: int) -> str:
    return "" if count == 1 else "s"


class DashboardState:
    """Tasks, selection, mode and status line of the dashboard."""

    def __init__(self, tasks: List[Task], task_filter: TaskFilter = TaskFilter.ACTIVE):
        self.tasks = list(tasks)
        self.task_filter = task_filter
        self.selected: Optional[int] = 0 if self.tasks else None
        self.mode = DashboardMode.NORMAL
        self.command_buffer = ""
        self.status_message: Optional[str] = None

        self._normal_table: Dict[str, Callable[[], AppAction]] = {
            "?": self._open_help,
            ":": self._enter_command_mode,
            "j": self._select_next,
            "down": self._select_next,
            "k": self._select_previous,
            "up": self._select_previous,
            "g": self._select_first,
            "home": self._select_first,
            "G": self._select_last,
            "end": self._select_last,
            "r": lambda: AppAction.REFRESH,
        }
        self._help_table: Dict[str, Callable[[], AppAction]] = {"?": self._close_help}
        self._help_table.update({key: self._close_help for key in ENTER_KEYS})

    @property
    def selected_task(self) -> Optional[Task]:
        if self.selected is None or self.selected >= len(self.tasks):
            return None
        return self.tasks[self.selected]

    def handle_key(self, key: str) -> AppAction:
        """Apply one key press and return what the event loop should do next."""
        if key in QUIT_KEYS:
            return AppAction.QUIT

        if self.mode == DashboardMode.COMMAND:
            return self._handle_command_key(key)

        table = self._help_table if self.mode == DashboardMode.HELP else self._normal_table
        handler = table.get(key)
        return handler() if handler else AppAction.NONE

    def replace_tasks(self, tasks: List[Task]) -> None:
        self.tasks = list(tasks)
        if not self.tasks:
            self.selected = None
        else:
            self.selected = min(self.selected or 0, len(self.tasks) - 1)
        count = len(self.tasks)
        self.status_message = f"Refreshed: {count} task{_plural(count)} loaded."

    def refresh_failed(self, error: Exception) -> None:
        lines = str(error).splitlines()
        first_line = lines[0] if lines else "Refresh failed."
        self.status_message = f"Refresh failed: {first_line}"

    def footer_text(self) -> str:
        if self.mode == DashboardMode.COMMAND:
            return f"Command: {self.command_buffer}"
        return self.status_message or DASHBOARD_HINT

    # -- transitions --------------------------------------------------------

    def _handle_command_key(self, key: str) -> AppAction:
        if key in ENTER_KEYS:
            command = self.command_buffer
            self._leave_command_mode()
            if command == ":q":
                return AppAction.QUIT
            if command == ":":
                self.status_message = "Command cancelled."
            else:
                self.status_message = f"Unknown command: {command}"
            return AppAction.NONE

        if key in BACKSPACE_KEYS:
            self.command_buffer = self.command_buffer[:-1]
            if not self.command_buffer:
                self._leave_command_mode()
                self.status_message = DASHBOARD_HINT
            return AppAction.NONE

        # Named keys ("c-a", "left", ...) are longer than one character.
        if len(key) == 1 and key.isprintable():
            self.command_buffer += key
            if self.command_buffer == ":q":
                return AppAction.QUIT
        return AppAction.NONE

    def _leave_command_mode(self) -> None:
        self.command_buffer = ""
        self.mode = DashboardMode.NORMAL

    def _open_help(self) -> AppAction:
        self.mode = DashboardMode.HELP
        self.status_message = "Help opened. Press ? or Enter to close."
        return AppAction.NONE

    def _close_help(self) -> AppAction:
        self.mode = DashboardMode.NORMAL
        return AppAction.NONE

    def _enter_command_mode(self) -> AppAction:
        self.mode = DashboardMode.COMMAND
        self.command_buffer = ":"
        self.status_message = "Command mode: type :q to quit."
        return AppAction.NONE

    def _select_next(self) -> AppAction:
        if not self.tasks:
            self.selected = None
        elif self.selected is not None and self.selected + 1 < len(self.tasks):
            self.selected += 1
        else:
            self.selected = 0
        return AppAction.NONE

    def _select_previous(self) -> AppAction:
        if not self.tasks:
            self.selected = None
        elif not self.selected:
            self.selected = len(self.tasks) - 1
        else:
            self.selected -= 1
        return AppAction.NONE

    def _select_first(self) -> AppAction:
        self.selected = 0 if self.tasks else None
        return AppAction.NONE

    def _select_last(self) -> AppAction:
        self.selected = len(self.tasks) - 1 if self.tasks else None
        return AppAction.NONE


# --- rendering --------------------------------------------------------------

def header_fragments(state: DashboardState):
    count = len(state.tasks)
    return [
        ("class:header.title", "Reclaim Task Dashboard"),
        ("", f"  |  {count} task{_plural(count)} ({state.task_filter.value})"),
    ]


def task_list_fragments(state: DashboardState):
    if not state.tasks:
        return [("", "No tasks found for this filter.")]

    fragments = []
    for index, task in enumerate(state.tasks):
        line = f"#{task.id:<6} [{(task.status or 'UNKNOWN'):<10}] {task.title} (due: {task.due or '-'})"
        if index == state.selected:
            fragments.append(("class:selected", f">> {line}\n"))
        else:
            fragments.append(("", f"   {line}\n"))
    return fragments


def detail_lines(state: DashboardState) -> List[str]:
    task = state.selected_task
    if task is None:
        return ["No task selected.", "Try pressing r to refresh from the API."]

    lines = [
        f"#{task.id} {task.title}",
        f"status: {task.status or 'UNKNOWN'}",
        f"priority: {task.priority or '-'}",
        f"due: {task.due or '-'}",
    ]
    if task.notes and task.notes.strip():
        lines.extend(["", "notes:"])
        lines.extend(f"  {line}" for line in task.notes.splitlines())
    return lines


def build_application(state: DashboardState, refresh: Callable[[], List[Task]]) -> Application:
    kb = KeyBindings()

    @kb.add(Keys.Any)
    def _(event):
        key = event.key_sequence[0].key
        key = getattr(key, "value", key)
        action = state.handle_key(key)
        if action == AppAction.QUIT:
            event.app.exit()
        elif action == AppAction.REFRESH:
            try:
                state.replace_tasks(refresh())
            except CliError as exc:
                log.debug("Dashboard refresh failed: %s", exc)
                state.refresh_failed(exc)

    body = VSplit([
        Frame(
            Window(FormattedTextControl(lambda: task_list_fragments(state)), wrap_lines=False),
            title="Tasks",
            width=Dimension(weight=45),
        ),
        Frame(
            Window(FormattedTextControl(lambda: "\n".join(detail_lines(state))), wrap_lines=True),
            title="Details",
            width=Dimension(weight=55),
        ),
    ])
    help_panel = ConditionalContainer(
        Frame(Window(FormattedTextControl(HELP_TEXT), wrap_lines=True), title="Help"),
        filter=Condition(lambda: state.mode == DashboardMode.HELP),
    )
    main_panel = ConditionalContainer(body, filter=Condition(lambda: state.mode != DashboardMode.HELP))

    container = HSplit([
        Window(FormattedTextControl(lambda: header_fragments(state)), height=1),
        main_panel,
        help_panel,
        Window(height=1, char="─"),
        Window(FormattedTextControl(lambda: state.footer_text()), height=1),
    ])
    style = Style.from_dict({
        "header.title": "bold",
        "selected": "fg:ansiyellow bold",
    })
    return Application(layout=Layout(container), key_bindings=kb, full_screen=True, style=style)


def run_dashboard(client: ReclaimClient, include_all: bool = False) -> None:
    """Load tasks once, then run the full-screen dashboard until a quit key."""
    task_filter = TaskFilter.ALL if include_all else TaskFilter.ACTIVE
    state = DashboardState(client.list_tasks(task_filter), task_filter)
    app = build_application(state, lambda: client.list_tasks(task_filter))

    # prompt_toolkit restores the terminal on every exit path of run().
    try:
        app.run()
    except CliError:
        raise
    except Exception as exc:
        raise OutputError(f"Dashboard loop failed: {exc}") from exc
