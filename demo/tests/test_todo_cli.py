#!/usr/bin/env python3

from __future__ import annotations

import contextlib
import io
import json
import sys
import tempfile
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(REPO_ROOT / "demo"))

import todo_cli  # noqa: E402
from thingstodo import get_codec, load_store  # noqa: E402


def _scripted(answers: list[str]):
    it = iter(answers)

    def fake_input(_prompt: str) -> str:
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    return fake_input


class TodoCliOneShotTests(unittest.TestCase):
    def setUp(self) -> None:
        self._td = tempfile.TemporaryDirectory()
        self.root = Path(self._td.name)
        self.config = self.root / "settings.json"
        self.config.write_text(
            json.dumps(
                {
                    "data_dir": str(self.root / "store"),
                    "diagnostic_dir": str(self.root / "diag"),
                    "seed": 4,
                }
            )
        )

    def tearDown(self) -> None:
        self._td.cleanup()

    def _run(self, *argv: str) -> tuple[int, str]:
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            code = todo_cli.main(["--config", str(self.config), *argv])
        return code, out.getvalue()

    def _stored(self) -> dict[str, bool]:
        return load_store(get_codec("MsgPack"), self.root / "store").to_dict()

    def test_add_then_set_persists(self) -> None:
        self.assertEqual(self._run("add", "buy milk")[0], 0)
        self.assertEqual(self._run("set", "buy milk", "yes")[0], 0)
        self.assertEqual(self._stored(), {"buy milk": True})

    def test_list_output(self) -> None:
        self._run("add", "buy milk")
        code, out = self._run("ls")
        self.assertEqual(code, 0)
        self.assertIn("[ ] 'buy milk'", out)

    def test_command_error_exit_code(self) -> None:
        code, out = self._run("rm", "missing")
        self.assertEqual(code, 1)
        self.assertIn("Todo with that name not found", out)

    def test_input_error_exit_code(self) -> None:
        code, out = self._run("set", "buy milk", "sorta")
        self.assertEqual(code, 2)
        self.assertIn("Unable to parse", out)

    def test_unknown_command(self) -> None:
        self.assertEqual(self._run("frobnicate")[0], 2)

    def test_clear_with_yes(self) -> None:
        self._run("add", "a")
        self._run("add", "b")
        self.assertEqual(self._run("--yes", "clear")[0], 0)
        self.assertEqual(self._stored(), {})

    def test_clear_declined(self) -> None:
        self._run("add", "a")
        settings = todo_cli.resolve_settings(
            todo_cli.build_parser().parse_args(["--config", str(self.config)])
        )
        with contextlib.redirect_stdout(io.StringIO()):
            code = todo_cli.run_one_shot(settings, ["clear"], input_fn=_scripted(["n"]))
        self.assertEqual(code, 0)
        self.assertEqual(self._stored(), {"a": False})

    def test_clear_confirmation_at_end_of_input(self) -> None:
        self._run("add", "a")
        settings = todo_cli.resolve_settings(
            todo_cli.build_parser().parse_args(["--config", str(self.config)])
        )
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            code = todo_cli.run_one_shot(settings, ["clear"], input_fn=_scripted([]))
        self.assertEqual(code, 0)
        self.assertIn("Clear cancelled.", out.getvalue())
        self.assertEqual(self._stored(), {"a": False})

    def test_encoding_debug(self) -> None:
        self._run("add", "a")
        code, out = self._run("secret", "encoding")
        self.assertEqual(code, 0)
        self.assertIn("All 5 codecs round-tripped identically.", out)
        self.assertTrue((self.root / "diag" / "Json.dat").exists())

    def test_codec_option(self) -> None:
        self.assertEqual(self._run("--codec", "json", "add", "x")[0], 0)
        self.assertTrue((self.root / "store" / "data.json").exists())

    def test_bad_codec_option(self) -> None:
        self.assertEqual(self._run("--codec", "yaml", "ls")[0], 2)


class TodoCliInteractiveTests(unittest.TestCase):
    def test_menu_session(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            args = todo_cli.build_parser().parse_args(["--data-dir", str(root)])
            settings = todo_cli.resolve_settings(args)
            exit_choice = str(len(todo_cli.MENU_ACTIONS) + 1)
            answers = [
                "1", "buy milk",       # add
                "1", "walk dog",       # add
                "7", "1", "y",         # set first listed item complete
                "4",                   # list
                exit_choice,
            ]
            out = io.StringIO()
            with contextlib.redirect_stdout(out):
                code = todo_cli.run_interactive(settings, input_fn=_scripted(answers))
            self.assertEqual(code, 0)
            stored = load_store(get_codec("MsgPack"), root).to_dict()
            self.assertEqual(stored, {"buy milk": True, "walk dog": False})
            self.assertIn("[X] 'buy milk'", out.getvalue())

    def test_eof_at_argument_prompt_keeps_earlier_commands(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            args = todo_cli.build_parser().parse_args(["--data-dir", str(root)])
            settings = todo_cli.resolve_settings(args)
            out = io.StringIO()
            with contextlib.redirect_stdout(out):
                code = todo_cli.run_interactive(settings, input_fn=_scripted(["1", "buy milk", "1"]))
            self.assertEqual(code, 0)
            self.assertIn("Add cancelled.", out.getvalue())
            self.assertEqual(load_store(get_codec("MsgPack"), root).to_dict(), {"buy milk": False})

    def test_eof_at_clear_confirmation_saves(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            args = todo_cli.build_parser().parse_args(["--data-dir", str(root)])
            settings = todo_cli.resolve_settings(args)
            with contextlib.redirect_stdout(io.StringIO()):
                code = todo_cli.run_interactive(settings, input_fn=_scripted(["1", "keep me", "2"]))
            self.assertEqual(code, 0)
            self.assertEqual(load_store(get_codec("MsgPack"), root).to_dict(), {"keep me": False})

    def test_invalid_argument_is_asked_again(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            args = todo_cli.build_parser().parse_args(["--data-dir", str(root)])
            settings = todo_cli.resolve_settings(args)
            out = io.StringIO()
            answers = ["1", "x", "5", "sorta", "no", str(len(todo_cli.MENU_ACTIONS) + 1)]
            with contextlib.redirect_stdout(out):
                code = todo_cli.run_interactive(settings, input_fn=_scripted(answers))
            self.assertEqual(code, 0)
            self.assertIn("Invalid status 'sorta', try again.", out.getvalue())
            self.assertIn("Incomplete Todos", out.getvalue())

    def test_menu_excludes_debug_action(self) -> None:
        self.assertNotIn(todo_cli.ActionType.DEBUG, todo_cli.MENU_ACTIONS)
        self.assertEqual(len(todo_cli.MENU_ACTIONS), 7)

    def test_eof_exits_and_saves(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            args = todo_cli.build_parser().parse_args(["--data-dir", str(root)])
            settings = todo_cli.resolve_settings(args)
            with contextlib.redirect_stdout(io.StringIO()):
                code = todo_cli.run_interactive(settings, input_fn=_scripted(["1", "x"]))
            self.assertEqual(code, 0)
            self.assertEqual(load_store(get_codec("MsgPack"), root).to_dict(), {"x": False})


if __name__ == "__main__":
    unittest.main()
