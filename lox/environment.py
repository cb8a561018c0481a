from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .errors import LoxRuntimeError
from .tokens import Token


@dataclass
class Frame:
    """One scope: its bindings and the arena index of the enclosing scope."""
    enclosing: Optional[int] = None
    values: Dict[str, Any] = field(default_factory=dict)


class Environment:
    """Arena of scope frames addressed by index.

    Frame 0 is the global scope and lives as long as the arena. Block
    scopes are pushed on entry and released on exit; because blocks nest
    strictly, a released frame is always the most recent one.
    """
    GLOBAL = 0

    def __init__(self):
        self.frames: List[Frame] = [Frame()]

    def __len__(self) -> int:
        return len(self.frames)

    def push(self, enclosing: int) -> int:
        self.frames.append(Frame(enclosing))
        return len(self.frames) - 1

    def release(self, index: int) -> None:
        if index == self.GLOBAL:
            raise ValueError('the global frame cannot be released')
        del self.frames[index:]

    def define(self, frame: int, name: str, value: Any) -> None:
        # Never walks the chain: declarations always land in the given frame.
        self.frames[frame].values[name] = value

    def get(self, frame: int, name: Token) -> Any:
        index: Optional[int] = frame
        while index is not None:
            scope = self.frames[index]
            if name.lexeme in scope.values:
                return scope.values[name.lexeme]
            index = scope.enclosing
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, frame: int, name: Token, value: Any) -> None:
        index: Optional[int] = frame
        while index is not None:
            scope = self.frames[index]
            if name.lexeme in scope.values:
                scope.values[name.lexeme] = value
                return
            index = scope.enclosing
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")
