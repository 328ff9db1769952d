"""
playrunner/engine/arguments.py

Ordered command-line tokens, some of them sensitive.

Sensitive tokens are handed to the launcher verbatim (``to_list``) but every
other way of looking at the vector (``render``, ``str``, ``repr``) replaces
them with ``MASK``.
"""

from __future__ import annotations

import re
import shlex
from dataclasses import dataclass
from typing import Iterator, List, Mapping, Optional, Union

MASK = "********"

_VAR_PATTERN = re.compile(r"\$(?:\{([A-Za-z0-9_.]+)\}|([A-Za-z0-9_]+))")


def expand_env(text: Optional[str], env: Mapping[str, str]) -> Optional[str]:
    """
    Replace ``$NAME`` and ``${NAME}`` with values from ``env``.

    References to unknown variables are left as written.
    """
    if text is None:
        return None

    def _sub(match: re.Match) -> str:
        name = match.group(1) or match.group(2)
        value = env.get(name)
        return match.group(0) if value is None else value

    return _VAR_PATTERN.sub(_sub, text)


@dataclass(frozen=True)
class ArgToken:
    value: str
    masked: bool = False

    def render(self) -> str:
        return MASK if self.masked else self.value

    def __repr__(self) -> str:
        return f"ArgToken({self.render()!r}, masked={self.masked})"


class ArgumentVector:
    """Append-only builder for a runner command line."""

    def __init__(self, *tokens: Union[str, int]):
        self._tokens: List[ArgToken] = []
        for token in tokens:
            self.add(token)

    def add(self, value: Union[str, int]) -> "ArgumentVector":
        self._tokens.append(ArgToken(str(value)))
        return self

    def add_masked(self, value: str) -> "ArgumentVector":
        self._tokens.append(ArgToken(str(value), masked=True))
        return self

    def add_tokenized(self, text: Optional[str]) -> "ArgumentVector":
        """Split ``text`` with POSIX shell quoting rules and append each piece."""
        if text and text.strip():
            for token in shlex.split(text):
                self.add(token)
        return self

    def add_key_value(self, key: str, value: str, masked: bool = False) -> "ArgumentVector":
        pair = f"{key}={value}"
        return self.add_masked(pair) if masked else self.add(pair)

    @property
    def tokens(self) -> List[ArgToken]:
        return list(self._tokens)

    def to_list(self) -> List[str]:
        """Literal argv for the process launcher. Never log this."""
        return [t.value for t in self._tokens]

    def rendered_tokens(self) -> List[str]:
        return [t.render() for t in self._tokens]

    def render(self) -> str:
        return " ".join(shlex.quote(t) if t != MASK else t for t in self.rendered_tokens())

    def __iter__(self) -> Iterator[ArgToken]:
        return iter(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"ArgumentVector({self.rendered_tokens()!r})"
