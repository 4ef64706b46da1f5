"""
Command payloads and command-line validation.

A command payload is one of eight frozen dataclasses (Add, Clear, Edit,
List, ListFiltered, Remove, SetStatus, Debug). ActionType describes how each
command is spelled on the command line and which arguments it takes;
create_payload() validates raw strings and builds the payload.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Union

from thingstodo.errors import InvalidArgumentError, InvalidCommandError


@dataclass(frozen=True)
class Add:
    name: str


@dataclass(frozen=True)
class Clear:
    pass


@dataclass(frozen=True)
class Edit:
    existing: str
    new_name: str


@dataclass(frozen=True)
class List:
    pass


@dataclass(frozen=True)
class ListFiltered:
    status: bool


@dataclass(frozen=True)
class Remove:
    name: str


@dataclass(frozen=True)
class SetStatus:
    name: str
    status: bool


@dataclass(frozen=True)
class Debug:
    text: str


Command = Union[Add, Clear, Edit, List, ListFiltered, Remove, SetStatus, Debug]

_TRUE_WORDS = {"t", "true", "y", "yes"}
_FALSE_WORDS = {"f", "false", "n", "no"}


def string_to_bool(text: str) -> bool | None:
    """
    Parse a human yes/no answer.

    Returns None when the text is not recognised.

    Example:
        >>> string_to_bool("Yes"), string_to_bool("f"), string_to_bool("maybe")
        (True, False, None)
    """
    word = text.strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    return None


class ArgumentKind(Enum):
    BOOLEAN = "boolean"
    STRING = "string"
    # Names an item already in the store; only non-emptiness is checked here.
    EXISTING = "existing"


@dataclass(frozen=True)
class ActionArgument:
    name: str
    kind: ArgumentKind
    order: int

    def validate(self, text: str) -> bool:
        if self.kind is ArgumentKind.BOOLEAN:
            return string_to_bool(text) is not None
        return bool(text)


class ActionType(Enum):
    ADD = "add"
    CLEAR = "clear"
    EDIT = "edit"
    LIST = "ls"
    LIST_FILTERED = "lss"
    REMOVE = "rm"
    SET = "set"
    DEBUG = "secret"

    @property
    def input_string(self) -> str:
        return self.value

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def arguments(self) -> list[ActionArgument]:
        return list(_ARGUMENTS[self])

    @property
    def arg_count(self) -> int:
        return len(_ARGUMENTS[self])

    def arg_count_error(self, received: int) -> InvalidArgumentError:
        expected = self.arg_count
        return InvalidArgumentError(
            f"Invalid argument count - the {self.input_string!r} command expects {expected} "
            f"argument{'s' if expected != 1 else ''}, but {received} "
            f"{'was' if received == 1 else 'were'} received."
        )


_DISPLAY_NAMES = {
    ActionType.ADD: "Add",
    ActionType.CLEAR: "Clear",
    ActionType.EDIT: "Edit",
    ActionType.LIST: "List",
    ActionType.LIST_FILTERED: "ListType",
    ActionType.REMOVE: "Remove",
    ActionType.SET: "Set",
    ActionType.DEBUG: "Other",
}

_ARGUMENTS: dict[ActionType, tuple[ActionArgument, ...]] = {
    ActionType.ADD: (ActionArgument("todo", ArgumentKind.STRING, 0),),
    ActionType.CLEAR: (),
    ActionType.EDIT: (
        ActionArgument("todo", ArgumentKind.EXISTING, 0),
        ActionArgument("new text", ArgumentKind.STRING, 1),
    ),
    ActionType.LIST: (),
    ActionType.LIST_FILTERED: (ActionArgument("status", ArgumentKind.BOOLEAN, 0),),
    ActionType.REMOVE: (ActionArgument("todo", ArgumentKind.EXISTING, 0),),
    ActionType.SET: (
        ActionArgument("todo", ArgumentKind.EXISTING, 0),
        ActionArgument("status", ArgumentKind.BOOLEAN, 1),
    ),
    ActionType.DEBUG: (ActionArgument("input", ArgumentKind.STRING, 0),),
}


def all_actions() -> list[ActionType]:
    return list(ActionType)


def parse_action(text: str) -> ActionType:
    """
    Map a command word (``add``, ``ls``, ``rm`` ...) to its ActionType.

    Raises:
        InvalidCommandError: If the word is empty or unknown.
    """
    if not text:
        raise InvalidCommandError("Command cannot be empty!")
    try:
        return ActionType(text)
    except ValueError:
        raise InvalidCommandError(f"Unknown command {text!r}") from None


def _parse_bool_arg(raw: str) -> bool:
    value = string_to_bool(raw)
    if value is None:
        raise InvalidArgumentError(f"Unable to parse {raw!r} to valid boolean value.")
    return value


def create_payload(action: ActionType, args: Sequence[str]) -> Command:
    """
    Validate raw argument strings for ``action`` and build its payload.

    Raises:
        InvalidArgumentError: Wrong argument count, empty strings, or an
            unparseable boolean.
    """
    if len(args) != action.arg_count:
        raise action.arg_count_error(len(args))

    if action is ActionType.ADD:
        if not args[0]:
            raise InvalidArgumentError("Unable to add empty todo.")
        return Add(args[0])
    if action is ActionType.CLEAR:
        return Clear()
    if action is ActionType.EDIT:
        existing, new_text = args
        if not existing or not new_text:
            raise InvalidArgumentError("Edit cannot be passed empty strings")
        return Edit(existing, new_text)
    if action is ActionType.LIST:
        return List()
    if action is ActionType.LIST_FILTERED:
        return ListFiltered(_parse_bool_arg(args[0]))
    if action is ActionType.REMOVE:
        if not args[0]:
            raise InvalidArgumentError("Unable to remove empty todo.")
        return Remove(args[0])
    if action is ActionType.SET:
        if not args[0]:
            raise InvalidArgumentError("Unable to set status of empty todo.")
        return SetStatus(args[0], _parse_bool_arg(args[1]))
    return Debug(" ".join(args))


def parse_command(argv: Sequence[str]) -> Command:
    """Parse ``[command, *args]`` into a payload."""
    if not argv:
        raise InvalidCommandError("Command cannot be empty!")
    action = parse_action(argv[0])
    return create_payload(action, list(argv[1:]))


def action_of(command: Command) -> ActionType:
    return _ACTION_OF[type(command)]


_ACTION_OF = {
    Add: ActionType.ADD,
    Clear: ActionType.CLEAR,
    Edit: ActionType.EDIT,
    List: ActionType.LIST,
    ListFiltered: ActionType.LIST_FILTERED,
    Remove: ActionType.REMOVE,
    SetStatus: ActionType.SET,
    Debug: ActionType.DEBUG,
}


__all__ = [
    "Add",
    "Clear",
    "Edit",
    "List",
    "ListFiltered",
    "Remove",
    "SetStatus",
    "Debug",
    "Command",
    "ArgumentKind",
    "ActionArgument",
    "ActionType",
    "all_actions",
    "string_to_bool",
    "parse_action",
    "create_payload",
    "parse_command",
    "action_of",
]
