# sh21

A small interactive shell for POSIX systems. It reads a line with its own
terminal line editor, splits it into tokens, parses it into commands and
runs them, with support for:

- command lists separated by `;`
- pipelines with `|`
- redirections `>`, `>>`, `<`, descriptor prefixes such as `2>`, and
  descriptor duplication or closing with `>&N` and `>&-`
- `#` comments
- the built-in commands `cd`, `setenv` and `exit`
- programs found through `PATH`

## Installing

```
pip install .
```

## Running

```
sh21
```

The prompt is `myShell$> `. Type `exit` or press Ctrl-D on an empty line
to leave; the shell prints `exit` as it stops.

When standard input is not a terminal, the shell reads commands from it
line by line, without the line editor, and stops at the end of the input.

Commands typed at the terminal are appended to `~/.21sh_history` and read
back from it for history browsing. A few diagnostics of the line editor
are appended to `~/.21sh_log`.

## Line editing

| Key                 | Action                                          |
|---------------------|-------------------------------------------------|
| Left / Right        | move one character                              |
| Shift-Left / Right  | move one word                                   |
| Shift-Up / Down     | move between the lines of a multi-line input    |
| Home / End          | beginning / end of the line                     |
| Up / Down           | walk through history                            |
| Backspace, Ctrl-H   | delete the character before the cursor          |
| Delete              | delete the character under the cursor           |
| Ctrl-D              | delete the character under the cursor; on an empty line, exit |
| Ctrl-W              | cut the word before the cursor                  |
| Ctrl-U              | cut everything before the cursor                |
| Ctrl-K              | cut everything after the cursor                 |
| Ctrl-Y              | paste what was last cut                         |
| Tab                 | complete a file name from the current directory |
| Ctrl-C              | cancel the line                                 |

An unclosed `'` or `"`, or a line ending in a single `\`, continues the
input on a new line with the prompts `quote> `, `dquote> ` or `$> `.
The continuation backslash is dropped when the lines are joined.

## What it does not do

- There is no variable expansion, globbing or quote removal. A quote or
  backslash is kept in the word, and everything after it on the line is
  taken literally into that word.
- Only `cd`, `setenv` and `exit` are built in; there is no `echo`, `env`,
  `unsetenv` or job control.
- A command name containing `/` (such as `./prog` or `/bin/ls`) is not
  run; programs are only started when found through `PATH`.

## Using it as a library

The pieces of the shell can be used on their own:

```python
import os

from sh21.tokens import tokenize
from sh21.parser import parse
from sh21.execute import execute

commands = parse(tokenize("ls -l | wc -l > count.txt"))
status = execute(commands, dict(os.environ))
```

- `sh21.tokens.tokenize(line)` returns a list of `Token` objects.
- `sh21.parser.parse(tokens)` returns a list of `Command` objects, each
  holding a `pipeline` of `SimpleCommand` objects; it raises `ParseError`
  on a misplaced operator.
- `sh21.execute.execute(commands, env)` runs them and returns a `Status`
  code (`sh21.errors.Status`).
- `sh21.shell.run_line(line, env)` does all three steps for a single line,
  and `sh21.shell.run(read_line, env)` runs a loop over any function that
  returns lines, stopping on `exit` or when it raises `EOFError`.
- `sh21.editor.LineBuffer`, `sh21.history.History` and
  `sh21.completion.complete` hold the editing, history and completion
  logic without touching a terminal; `sh21.readline.LineReader` drives
  them from terminal input, and its `feed(data)` method can be given key
  input directly.

## Running the tests

```
pip install .[test]
pytest
```