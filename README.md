# taskqueue-tui

State, update logic and rendering for a terminal dashboard over a task queue.
The dashboard has two tabs:

- **Tasks** (`taskqueue_tui.tasks.TasksModel`): a collapsible tree of
  projects, their tasks and each task's actions. Above the tree a summary line
  counts running, pending, done and failed actions. The selected action's
  result is shown inline, and a detail view scrolls through its full output.
  By default only today's work is shown: open tasks keep their unfinished
  actions plus any actions from today, while done and archived tasks appear
  only if they or their actions date from today.
- **Schedules** (`taskqueue_tui.schedules.SchedulesModel`): a table of cron
  schedules that shows whether each one is enabled, its next run and its last
  run. The selected schedule can be enabled, disabled or deleted.

An activity pane shows the last nine log lines, and up to 100 are kept. Lines
reach it through a queue that is fed by `taskqueue_tui.log.LogHandler` (a
`logging.Handler`) or by `taskqueue_tui.log.LogWriter` (an object with a
`write(text)` method). Both drop entries when the queue is full.

## Installation

```
pip install taskqueue-tui
```

To run the test suite:

```
pip install "taskqueue-tui[test]"
pytest
```

## Usage

`taskqueue_tui.app.App` is the root model. It follows an init / update / view
cycle:

- `App.init()` returns a list of commands. Each command is a callable that
  blocks until it produces the next message. The commands load both tabs,
  wait five seconds and yield a `Tick`, wait for the next log entry, and run
  each background job.
- `App.update(msg)` applies a message (`Key`, `WindowSize`, `Tick`,
  `LogEntry`, `BackgroundStatus`, or a tab's load result) and returns a list
  of further commands.
- `App.view()` renders the whole screen as a string with ANSI colours. Once
  the app is quitting it returns an empty string.

```python
import logging
import queue

from taskqueue_tui.app import App, WindowSize
from taskqueue_tui.log import LogHandler
from taskqueue_tui.models import Key

log_queue = queue.Queue(maxsize=100)
logging.getLogger().addHandler(LogHandler(log_queue))

app = App(store, log_queue)
app.update(WindowSize(width=120, height=40))
for command in app.init()[:2]:   # load tasks and schedules
    app.update(command())
app.update(Key("j"))
print(app.view())
```

### The store

You supply `store`. It needs these methods:

- `list_projects(limit)`, `list_tasks_by_project(project_id)` and
  `list_actions(status, task_id, limit)`, which return `Project`, `Task` and
  `Action` records from `taskqueue_tui.models`
- `set_dispatch_enabled(project_id, enabled)`
- `list_schedules(limit)`, which returns `Schedule` records
- `update_schedule_enabled(schedule_id, enabled)` and
  `delete_schedule(schedule_id)`

If a call raises, the models skip the record it was for or treat the result
as empty. They do not crash.

### Optional arguments

- `cron_parser=`: a callable that takes a cron expression and returns an
  object with a `next(base)` method. It must raise `ValueError` for an invalid
  expression. Without it the "Next Run" column shows `?`.
- Background jobs are passed as extra positional arguments, as in
  `App(store, log_queue, job1, job2)`. Each job is called with a
  `threading.Event`, and that event is set when the user quits. If a job
  raises an error that is not a cancellation, the error appears as a status
  line.

### Keys

Keys are passed as `Key(name)`, for example `Key("q")`, `Key("ctrl+c")`,
`Key("tab")`, `Key("enter")`, `Key("esc")`, `Key("up")` or `Key("down")`.

| Key            | Effect                                              |
|----------------|-----------------------------------------------------|
| `j` / `k`      | Move down or up (in the detail view: scroll)        |
| `tab`          | Switch between the Tasks and Schedules tabs         |
| `1` / `2`      | Jump to the Tasks or Schedules tab                  |
| `enter`, space | Expand or collapse a project or task                |
| `v`            | Open the detail view of the selected action's result |
| `o`            | Run `tmux select-window` for the action's session    |
| `f`            | Toggle dispatch for the selected project            |
| `e` / `d`      | Enable or disable, or delete, the selected schedule |
| `q` / `ctrl+c` | Quit (in the detail view, `q` or `esc` goes back)   |

## What this package does not do

It has no command-line program and no terminal event loop. It does not read
the keyboard, put the terminal into raw mode or redraw the screen. Your code
runs the commands, feeds their messages back into `update`, and prints
`view()`. It also has no storage of its own: projects, tasks, actions and
schedules come from the store you provide. Nor does it parse cron expressions
itself.