"""Tagged results of :meth:`~github_strategy.strategy.AuthorizationCodeFlow.authenticate`.

An authentication attempt ends in exactly one of three ways:

- :class:`Redirect` -- the flow is still in progress; send ``response``
  (a ``302`` with ``Set-Cookie``) to the browser and stop.
- :class:`Authenticated` -- the verify function returned ``user``.
- :class:`Failed` -- a :class:`~github_strategy.exceptions.StrategyError`
  ended the attempt.

Hosts can pattern-match on the outcome::

    match await strategy.authenticate(request):
        case Redirect(response=response):
            return response
        case Authenticated(user=user):
            session["user"] = user
        case Failed(error=error):
            log_failure(error.kind)

or call :meth:`unwrap` to get exception-based control flow instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar, Union

import httpx

from github_strategy.exceptions import RedirectRequired, StrategyError

User = TypeVar("User")


@dataclass(frozen=True)
class Redirect:
    response: httpx.Response

    def unwrap(self) -> NoReturn:
        """Raise :class:`~github_strategy.exceptions.RedirectRequired` carrying the response."""
        raise RedirectRequired(self.response)


@dataclass(frozen=True)
class Authenticated(Generic[User]):
    user: User

    def unwrap(self) -> User:
        return self.user


@dataclass(frozen=True)
class Failed:
    error: StrategyError

    def unwrap(self) -> NoReturn:
        raise self.error


Outcome = Union[Redirect, Authenticated[User], Failed]
