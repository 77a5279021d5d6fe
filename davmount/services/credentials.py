"""
Credential resolution for remote WebDAV accounts.

A remote user's password comes either from an environment variable named
with ``--secret remote:ENVVAR`` or, when no source is declared, from a
hidden interactive prompt.
"""

import logging
import os
from abc import ABC, abstractmethod
from typing import Callable, Dict, Mapping, Optional

from rich.console import Console
from rich.prompt import Prompt

from ..core.exceptions import ConfigError

logger = logging.getLogger(__name__)

PromptFn = Callable[[str], str]


class CredentialResolver(ABC):
    @abstractmethod
    def resolve(self, remote_user: str) -> str:
        """Return the password for ``remote_user`` or raise ConfigError."""
        pass


class EnvironmentCredentialResolver(CredentialResolver):
    """Reads the password from a named environment variable."""

    def __init__(self, env_var: str, environ: Optional[Mapping[str, str]] = None):
        self._env_var = env_var
        self._environ = os.environ if environ is None else environ

    def resolve(self, remote_user: str) -> str:
        password = self._environ.get(self._env_var, "")
        if not password:
            raise ConfigError(f"ENV {self._env_var} is empty for {remote_user}")
        logger.debug(f"Using password from ${self._env_var} for {remote_user}")
        return password


class PromptCredentialResolver(CredentialResolver):
    """Asks the operator, with input echo disabled."""

    def __init__(self, prompt_fn: Optional[PromptFn] = None):
        self._prompt_fn = prompt_fn or _rich_password_prompt

    def resolve(self, remote_user: str) -> str:
        try:
            password = self._prompt_fn(f"Password for Nextcloud user '{remote_user}'")
        except EOFError as e:
            # stdin closed or not a terminal
            raise ConfigError(f"no password entered for {remote_user}") from e
        if not password:
            raise ConfigError(f"empty password for {remote_user}")
        return password


class CredentialService:
    """Selects the resolver for each remote user from the declared sources."""

    def __init__(
        self,
        env_var_by_remote_user: Dict[str, str],
        environ: Optional[Mapping[str, str]] = None,
        prompt_fn: Optional[PromptFn] = None,
    ):
        self._env_var_by_remote_user = dict(env_var_by_remote_user)
        self._environ = environ
        self._prompt = PromptCredentialResolver(prompt_fn)

    def resolver_for(self, remote_user: str) -> CredentialResolver:
        env_var = self._env_var_by_remote_user.get(remote_user)
        if env_var:
            return EnvironmentCredentialResolver(env_var, self._environ)
        return self._prompt

    def resolve_credential(self, remote_user: str) -> str:
        return self.resolver_for(remote_user).resolve(remote_user)


def _rich_password_prompt(message: str) -> str:
    return Prompt.ask(message, password=True, console=Console(stderr=True))
