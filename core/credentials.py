"""API credentials: a literal secret or an ``env:NAME`` indirection."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Optional, Union

ENV_PREFIX = "env:"


@dataclass(frozen=True)
class LiteralCredential:
    secret: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.secret

    def authorization_headers(self) -> dict[str, str]:
        if not self.secret:
            return {}
        return {"Authorization": f"Bearer {self.secret}"}

    def display_value(self) -> str:
        return self.secret

    def resolve(self, lookup: Optional[Callable[[str], Optional[str]]] = None) -> Optional[str]:
        return self.secret or None


@dataclass(frozen=True)
class EnvCredential:
    """Names an environment variable holding the secret.

    Never produces request headers. Only the display layer resolves it.
    """

    variable: str

    @property
    def is_empty(self) -> bool:
        return False

    def authorization_headers(self) -> dict[str, str]:
        return {}

    def display_value(self) -> str:
        return f"{ENV_PREFIX}{self.variable}"

    def resolve(self, lookup: Optional[Callable[[str], Optional[str]]] = None) -> Optional[str]:
        if not self.variable:
            return None
        value = (lookup or os.getenv)(self.variable)
        return value or None


Credential = Union[LiteralCredential, EnvCredential]


def parse_credential(value) -> Credential:
    if isinstance(value, (LiteralCredential, EnvCredential)):
        return value
    text = str(value or "").strip()
    if text.startswith(ENV_PREFIX):
        return EnvCredential(text[len(ENV_PREFIX):].strip())
    return LiteralCredential(text)
