# agentsesame

Building blocks for a terminal fuzzy finder over the session history of
coding agents (Claude, Codex, Gemini and others). The package holds the
parts of such a finder that do not depend on a particular terminal
library:

- styled text primitives (`Color`, `Modifier`, `Style`, `Span`, `Line`)
  in `agentsesame.text`;
- width-aware string helpers, relative dates, age colours, query
  highlighting and clipboard copying in `agentsesame.utils`;
- a colour theme built from optional hex overrides (`ThemeConfig`,
  `Theme.from_config`) in `agentsesame.theme`;
- the results table layout, header hit-testing and selection state in
  `agentsesame.results_list`;
- configurable key bindings in `agentsesame.keybindings`;
- query and path editing with script-aware word boundaries in
  `agentsesame.editing`;
- the `Session` record, directory scopes, filtering and sorting in
  `agentsesame.sorting`;
- the application state (`App`) that reacts to keys, actions and clicks
  in `agentsesame.app`;
- a self-updater for released binaries in `agentsesame.update`.

It needs Python 3.10 or newer and depends only on `wcwidth`.

## Text helpers

```python
from agentsesame.utils import truncate_to_width, pad_to_width, extract_highlight_terms

truncate_to_width("hello world", 8)    # "hello..."
pad_to_width("ab", 4)                  # "ab  "
extract_highlight_terms('agent:claude "Fix" bug')   # ["fix", "bug"]
```

Widths are measured in terminal cells, so a Chinese character counts as
two. `highlight_spans(text, query, base_color)` splits a string into
`Span`s, marking every ASCII case-insensitive match of the query's terms
bold and reversed. `format_time_ago(dt, now)` gives strings such as
`"just now"`, `"5m ago"`, `"3d ago"` or `"2y ago"`.

## Key bindings

Bindings start from a built-in default table; a user table replaces
whole actions by name. Keys are written like `ctrl+s`, `shift+up`,
`enter` or `backtick`, case-insensitively, and `shift+tab` is read as
back-tab.

```python
from agentsesame.keybindings import KeyBindings, KeyCombo

bindings = KeyBindings.load({"quit": "q"})
bindings.actions_for(KeyCombo.parse("q"))   # (Action.QUIT,)
```

Unknown action names and keys that cannot be parsed are reported as
warnings on standard error and skipped. `KeyBindings.lookup(event)`
takes a `KeyEvent`, keeping only its Control and Shift modifiers.

## Results table

```python
from agentsesame.results_list import compute_column_widths, hit_test_header

widths = compute_column_widths(120)
widths.title_w                         # 58
hit_test_header(0, widths)             # SortColumn.AGENT
```

`ResultsState` keeps the selected row and the scroll offset; moving the
selection is clamped to the number of results, and `ensure_visible`
scrolls so the selected row stays in view.

## Filtering and sorting

`agentsesame.sorting` filters sessions by agent and by a directory
scope (`DirectoryScope.LOCAL` for an exact directory, `PROJECT` for a
case-insensitive substring, `GLOBAL` for none), counts sessions per
agent, and orders them with `sort_sessions`: by search score for
relevance (newest first when there is no query), or by a column with the
score breaking ties. `SortState` holds the column and direction and
switches to relevance when a query appears and back to date when it is
cleared.

## Query editing

`QueryInput` and `PathInput` hold a string and a cursor. Word motion in
`QueryInput` follows script boundaries (Latin letters and digits,
Hiragana, Katakana, Hangul, Han), with each Han character taken as a
word of its own. `PathInput` moves and deletes by `/`-separated segments
and `complete()` completes directory names against the file system the
way a shell does, keeping a leading `~`.

## Application state

`App` ties the pieces together. It has no search engine of its own: it
is given a `search` callable `(query, agent, directory, limit)` that
returns `(session, score)` pairs, and optionally a `relocator`
callable used to move a Claude session to another directory. Sessions
are supplied with `set_sessions`; `handle_key`, `handle_action`,
`scroll_wheel`, `click_row` (a second click within 0.4 seconds resumes
the session) and `click_header` update the state, and the caller reads
back fields such as `filtered`, `selected_session()`, `should_quit` and
`resume_session`.

## Updating

`agentsesame.update.self_update()` asks for the latest published release
with `curl`, downloads the archive for the current platform, verifies
its SHA-256 checksum when one is published, extracts it with `tar` and
replaces the running executable, restoring the old one if the copy
fails. Failures raise `UpdateError`. The release repository is read from
the `ASE_UPDATE_REPO` environment variable.

## What this package does not do

It draws nothing and runs no event loop: there is no terminal screen,
no command-line program, and no rendering of the preview pane. It does
not find, read or index agent session files, and has no search engine;
sessions and search results must be supplied by the caller. Resuming a
session is only recorded in `App.resume_session`; starting the agent is
left to the caller.