"""User-level actions offered by the interactive menu."""

from __future__ import annotations

from enum import Enum


class Action(str, Enum):
    PUSH_ALL_FILES = "Push all files"
    GET_DEFINITIONS = "Get definition file"
    GET_ALL_FILE_NAMES = "Get all file names"
    QUIT = "Quit"

    @classmethod
    def labels(cls) -> list[str]:
        return [action.value for action in cls]

    @classmethod
    def from_label(cls, label: str) -> "Action":
        for action in cls:
            if action.value == label:
                return action
        raise ValueError(f"Unknown action: {label!r}")
