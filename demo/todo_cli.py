#!/usr/bin/env python3
"""
ThingsTodo command-line front end.

One-shot mode:
    todo_cli.py add "buy milk"
    todo_cli.py set "buy milk" yes
    todo_cli.py lss false
    todo_cli.py secret encoding

Interactive mode (no command given) shows a numbered action menu and
prompts for each argument.

Exit codes: 0 ok, 1 command/storage error, 2 invalid input.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Callable, Sequence

from thingstodo import (
    ActionType,
    AppSettings,
    Clear,
    CodecError,
    InputError,
    PersistenceError,
    TodoSession,
    create_payload,
    get_codec,
    load_settings,
    parse_command,
    string_to_bool,
)
from thingstodo.commands import ArgumentKind, all_actions

EXIT_OK = 0
EXIT_COMMAND_ERROR = 1
EXIT_INPUT_ERROR = 2

InputFn = Callable[[str], str]

# The debug action stays reachable from one-shot mode but is not offered in the menu.
MENU_ACTIONS = [a for a in all_actions() if a is not ActionType.DEBUG]


def resolve_settings(args: argparse.Namespace) -> AppSettings:
    settings = load_settings(Path(args.config) if args.config else None)
    if args.data_dir is not None:
        settings.data_dir = args.data_dir
    if args.codec is not None:
        settings.default_codec = get_codec(args.codec).name
    if args.oplog is not None:
        settings.oplog_path = args.oplog
    return settings


def _confirm_clear(session: TodoSession, input_fn: InputFn) -> bool:
    n = len(session.store)
    try:
        answer = input_fn(f"This will remove all {n} todos. Are you sure? [y/n] ")
    except EOFError:
        return False
    return bool(string_to_bool(answer))


def run_one_shot(
    settings: AppSettings,
    argv: Sequence[str],
    *,
    assume_yes: bool = False,
    input_fn: InputFn = input,
) -> int:
    try:
        command = parse_command(argv)
    except InputError as exc:
        print(f"[todo] {exc}")
        return EXIT_INPUT_ERROR

    try:
        session = TodoSession.open(settings)
    except (PersistenceError, CodecError) as exc:
        print(f"[todo] Unable to load todo list: {exc}")
        return EXIT_COMMAND_ERROR

    try:
        if isinstance(command, Clear) and not assume_yes and not _confirm_clear(session, input_fn):
            print("[todo] Clear cancelled.")
            return EXIT_OK
        result = session.apply(command)
        print(result.text)
        if not result.ok:
            return EXIT_COMMAND_ERROR
        path = session.save()
        print(f"[todo] {session.summary()} Saved to {path}")
        return EXIT_OK
    except (PersistenceError, CodecError) as exc:
        print(f"[todo] Unable to save todo list: {exc}")
        return EXIT_COMMAND_ERROR
    finally:
        session.close()


def print_menu() -> None:
    print("Please select an option:")
    for i, action in enumerate(MENU_ACTIONS, start=1):
        print(f"  {i}. {action.display_name} ({action.input_string})")
    print(f"  {len(MENU_ACTIONS) + 1}. Exit")


def _prompt_existing(session: TodoSession, label: str, input_fn: InputFn) -> str:
    names = sorted(session.store.names())
    for i, name in enumerate(names, start=1):
        print(f"  {i}. {name}")
    raw = input_fn(f"Select {label} (number or text): ").strip()
    if raw.isdigit() and 1 <= int(raw) <= len(names):
        return names[int(raw) - 1]
    return raw


def prompt_arguments(session: TodoSession, action: ActionType, input_fn: InputFn) -> list[str]:
    """
    Ask for each argument of ``action`` in order, re-asking on invalid input.

    Raises:
        EOFError: Input ended before every argument was given.
    """
    args: list[str] = []
    for arg in sorted(action.arguments, key=lambda a: a.order):
        while True:
            if arg.kind is ArgumentKind.EXISTING:
                value = _prompt_existing(session, arg.name, input_fn)
            elif arg.kind is ArgumentKind.BOOLEAN:
                value = input_fn(f"Enter {arg.name} (y/n): ").strip()
            else:
                value = input_fn(f"Enter {arg.name}: ").strip()
            if arg.validate(value):
                break
            print(f"[todo] Invalid {arg.name} {value!r}, try again.")
        args.append(value)
    return args


def run_interactive(settings: AppSettings, *, input_fn: InputFn = input) -> int:
    try:
        session = TodoSession.open(settings)
    except (PersistenceError, CodecError) as exc:
        print(f"[todo] Unable to load todo list: {exc}")
        return EXIT_COMMAND_ERROR

    try:
        print(f"[todo] {session.summary()}")
        while True:
            print_menu()
            try:
                choice = input_fn("> ").strip()
            except EOFError:
                break
            if not choice.isdigit() or not 1 <= int(choice) <= len(MENU_ACTIONS) + 1:
                print(f"[todo] Invalid selection {choice!r}")
                continue
            if int(choice) == len(MENU_ACTIONS) + 1:
                break

            action = MENU_ACTIONS[int(choice) - 1]
            try:
                command = create_payload(action, prompt_arguments(session, action, input_fn))
            except EOFError:
                print(f"[todo] {action.display_name} cancelled.")
                continue
            except InputError as exc:
                print(f"[todo] {exc}")
                continue
            if isinstance(command, Clear) and not _confirm_clear(session, input_fn):
                print("[todo] Clear cancelled.")
                continue
            print(session.apply(command).text)

        path = session.save()
        print(f"[todo] {session.summary()} Saved to {path}")
        return EXIT_OK
    except (PersistenceError, CodecError) as exc:
        print(f"[todo] Unable to save todo list: {exc}")
        return EXIT_COMMAND_ERROR
    finally:
        session.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="ThingsTodo command-line todo list",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--config", type=str, help="Path to settings JSON file")
    parser.add_argument("--data-dir", type=str, default=None, help="Directory holding data.<ext>")
    parser.add_argument("--codec", type=str, default=None, help="Persistence codec name or extension")
    parser.add_argument("--oplog", type=str, default=None, help="Append a JSONL audit trail to this path")
    parser.add_argument("--yes", action="store_true", help="Do not ask before clearing the list")
    parser.add_argument("command", nargs=argparse.REMAINDER, help="Command word and its arguments")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = resolve_settings(args)
    except (ValueError, LookupError, OSError) as exc:
        print(f"[todo] Invalid settings: {exc}")
        return EXIT_INPUT_ERROR

    if args.command:
        return run_one_shot(settings, args.command, assume_yes=args.yes)
    return run_interactive(settings)


if __name__ == "__main__":
    raise SystemExit(main())
