"""
Interactive CLI adapter for the teleporter console.

Architectural role:
- Exposes the analyze -> edit -> reconstruct workflow in a terminal.
- Delegates every stage transition to `ConsoleController`.

Request lifecycle (per command):
1. Read one line from stdin.
2. Dispatch local commands (`load`, `analyze`, `show`, `edit`, `reconstruct`,
   `back`, `reset`, `history`, `open`, `delete`, `settings`, `set`, `exit`).
3. Print the resulting console state, fallback progress and errors.

Error handling strategy:
- `InvalidTransition` and `FileInputError` are printed, the loop continues.
- EOF and keyboard interrupts terminate the loop without traceback output.

Side effects:
- Reads/writes the settings and history JSON files.
- Writes to stdout for operator feedback.
"""

from dotenv import load_dotenv

load_dotenv()

import sys
import base64
import asyncio

from teleporter.config import configure_logging
from teleporter.core.console import ConsoleController
from teleporter.core.stages import InvalidTransition
from teleporter.ingestion.file_input import FileInputError, load_source_file
from teleporter.storage.history_store import HistoryStore
from teleporter.storage.settings_store import AppSettings, SettingsStore
from teleporter.strategy.resolver import resolve


HELP_TEXT = """Commands:
  load <path>            select a source file
  analyze                extract a blueprint from the file
  show                   print the current stage, blueprint and output
  edit                   replace the blueprint (finish with a single '.' line)
  reconstruct            rebuild an artifact from the blueprint
  back                   return from output to the blueprint
  reset                  clear file, blueprint and output
  history                list past runs
  open <id>              reopen a past run
  delete <id>            delete a past run
  settings               show settings and resolved fallback chains
  set <field> <value>    update one settings field
  exit                   quit
"""

OUTPUT_PREVIEW_CHARS = 500


# =========================================================
# UTF-8 SAFE OUTPUT
# =========================================================

if hasattr(sys.stdout, "reconfigure"):
    try:
        sys.stdout.reconfigure(encoding="utf-8", errors="ignore")
    except Exception:
        pass


# =========================================================
# RENDERING
# =========================================================

def render_output(output_url: str) -> str:
    """Decode text data URLs for display; other locators are shown as-is."""
    prefix = "data:text/plain"
    if output_url.startswith(prefix) and "," in output_url:
        try:
            text = base64.b64decode(output_url.split(",", 1)[1]).decode("utf-8", errors="ignore")
        except ValueError:
            return output_url
        return text
    if output_url.startswith("data:"):
        return output_url[:60] + "... (" + str(len(output_url)) + " chars)"
    return output_url


def print_state(console: ConsoleController):
    snap = console.snapshot()
    print(f"\nStage: {snap['stage']}")
    if snap["file_name"]:
        print(f"File:  {snap['file_name']} ({snap['file_type']})")
    for line in snap["progress"]:
        print(f"  ~ {line}")
    if snap["blueprint"] is not None:
        print("\nBlueprint:\n")
        print(snap["blueprint"])
    if snap["output_url"]:
        print("\nOutput:\n")
        print(render_output(snap["output_url"])[:OUTPUT_PREVIEW_CHARS])
    if snap["error"]:
        print(f"\n[!] {snap['error']}")
    print()


def print_settings(settings: AppSettings):
    for key, value in settings.masked().items():
        print(f"{key}: {value}")

    credentials = settings.credentials()
    for field in ("analyzer_model", "generator_model"):
        model = getattr(settings, field)
        chain = resolve(model, credentials)
        print(f"\n{field} chain ({model}):")
        if not chain:
            print("  (no usable credentials)")
        for strategy in chain:
            print(f"  - {strategy.label}: {strategy.provider}/{strategy.model}")
    print()


def read_multiline() -> str:
    print("Enter blueprint, finish with a single '.' line:")
    lines = []
    while True:
        line = input()
        if line.strip() == ".":
            break
        lines.append(line)
    return "\n".join(lines)


# =========================================================
# MAIN
# =========================================================

def main():
    """
    Run the interactive console loop.

    Error handling strategy:
    - Stage/file errors are printed and the loop continues.
    - EOF/interrupt are handled without stack traces.
    """
    configure_logging()

    settings_store = SettingsStore()
    history_store = HistoryStore()
    console = ConsoleController(settings_store, history_store)

    print("Matter Stream console. (Type 'help' for commands, 'exit' to quit)")
    print("-" * 60)

    while True:

        try:
            line = input("teleporter> ").strip()

        except EOFError:
            print()
            break

        except KeyboardInterrupt:
            print("\nOperation cancelled by user.")
            break

        if not line:
            continue

        command, _, arg = line.partition(" ")
        command = command.lower()
        arg = arg.strip()

        try:
            if command in ("exit", "quit"):
                print("Shutting down.")
                break

            elif command == "help":
                print(HELP_TEXT)

            elif command == "load":
                console.select_file(load_source_file(arg))
                print_state(console)

            elif command == "analyze":
                print("Analyzing...")
                asyncio.run(console.analyze())
                print_state(console)

            elif command == "show":
                print_state(console)

            elif command == "edit":
                console.edit_blueprint(read_multiline())
                print_state(console)

            elif command == "reconstruct":
                print("Reconstructing...")
                asyncio.run(console.reconstruct())
                print_state(console)

            elif command == "back":
                console.back_to_blueprint()
                print_state(console)

            elif command == "reset":
                console.reset()
                print_state(console)

            elif command == "history":
                records = history_store.list_all()
                if not records:
                    print("No history yet.\n")
                for record in records:
                    print(f"{record.id}  {record.original_file_type:<20} {record.prompt[:50]!r}")

            elif command == "open":
                record = history_store.get(arg)
                if record is None:
                    print(f"Unknown history id '{arg}'.\n")
                    continue
                console.load_project(record)
                print_state(console)

            elif command == "delete":
                if history_store.remove(arg):
                    print("Deleted.\n")
                else:
                    print(f"Unknown history id '{arg}'.\n")

            elif command == "settings":
                print_settings(settings_store.load())

            elif command == "set":
                field, _, value = arg.partition(" ")
                if field not in AppSettings().to_dict():
                    print(f"Unknown settings field '{field}'.\n")
                    continue
                settings_store.update(**{field: value.strip()})
                print("Saved.\n")

            else:
                print(f"Unknown command '{command}'. Type 'help'.\n")

        except (InvalidTransition, FileInputError) as e:
            print(f"[!] {e}\n")

        except KeyboardInterrupt:
            print("\nOperation cancelled by user.")


if __name__ == "__main__":
    main()
