"""
Registration Failure Classifier

Maps whatever the live submission raised to one operator-facing
diagnosis. Rules are evaluated top to bottom and the first match wins;
the order is part of the contract (a 50001 body arrives with a 403
status and must still be reported as Missing Access).
"""

from __future__ import annotations

import enum
import errno
import socket
from dataclasses import dataclass
from typing import Callable, Iterator, List, Mapping, Optional, Tuple

from shared.config.registration import invite_url
from shared.logging.logger import get_logger

log = get_logger("discord.failures")

MISSING_ACCESS_CODE = 50001

NETWORK_UNREACHABLE = "ENETUNREACH"
HOST_NOT_FOUND = "ENOTFOUND"
NETWORK_CODES = (NETWORK_UNREACHABLE, HOST_NOT_FOUND)

_UNREACHABLE_ERRNOS = {errno.ENETUNREACH, errno.EHOSTUNREACH}
_NOT_FOUND_GAI = {
    value
    for value in (
        getattr(socket, "EAI_NONAME", None),
        getattr(socket, "EAI_NODATA", None),
    )
    if value is not None
}


class Outcome(enum.Enum):
    SUCCESS = "success"
    CONFIG_ERROR = "config_error"
    VALIDATION_ERROR = "validation_error"
    ACCESS_DENIED = "access_denied"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NETWORK_UNREACHABLE = "network_unreachable"
    UNKNOWN_FAILURE = "unknown_failure"

    @property
    def exit_code(self) -> int:
        return 0 if self is Outcome.SUCCESS else 1


@dataclass(frozen=True)
class Diagnosis:
    outcome: Outcome
    lines: Tuple[str, ...]

    @property
    def message(self) -> str:
        return "\n".join(self.lines)


# --------------------------------------------------
# Error inspection helpers
# --------------------------------------------------

def _error_chain(error: BaseException) -> Iterator[BaseException]:
    """Yield the error followed by its __cause__ / __context__ chain."""
    seen = set()
    current: Optional[BaseException] = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def platform_code(error: BaseException) -> Optional[int]:
    code = getattr(error, "code", None)
    if isinstance(code, int) and not isinstance(code, bool):
        return code

    raw = getattr(error, "raw_error", None)
    if isinstance(raw, Mapping):
        nested = raw.get("code")
        if isinstance(nested, int) and not isinstance(nested, bool):
            return nested
    return None


def http_status(error: BaseException) -> Optional[int]:
    status = getattr(error, "status", None)
    if isinstance(status, int):
        return status

    response = getattr(error, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return status_code
    return None


def network_code(error: BaseException) -> Optional[str]:
    """
    Return ENETUNREACH / ENOTFOUND for a single connection error, or None.
    """
    code = getattr(error, "code", None)
    if isinstance(code, str) and code in NETWORK_CODES:
        return code

    if isinstance(error, socket.gaierror):
        return HOST_NOT_FOUND if error.errno in _NOT_FOUND_GAI else None

    if isinstance(error, OSError) and error.errno in _UNREACHABLE_ERRNOS:
        return NETWORK_UNREACHABLE

    return None


def _leaf_errors(group: BaseExceptionGroup) -> List[BaseException]:
    leaves: List[BaseException] = []
    for inner in group.exceptions:
        if isinstance(inner, BaseExceptionGroup):
            leaves.extend(_leaf_errors(inner))
        else:
            leaves.append(inner)
    return leaves


# --------------------------------------------------
# Predicates
# --------------------------------------------------

def _is_missing_access(error: BaseException) -> bool:
    return platform_code(error) == MISSING_ACCESS_CODE


def _is_unauthorized(error: BaseException) -> bool:
    return http_status(error) == 401


def _is_forbidden(error: BaseException) -> bool:
    return http_status(error) == 403


def _is_unreachable_aggregate(error: BaseException) -> bool:
    for link in _error_chain(error):
        if isinstance(link, BaseExceptionGroup):
            leaves = _leaf_errors(link)
            return bool(leaves) and all(
                any(network_code(e) for e in _error_chain(leaf)) for leaf in leaves
            )
    return False


def _is_unreachable_single(error: BaseException) -> bool:
    return any(
        network_code(link) is not None
        for link in _error_chain(error)
        if not isinstance(link, BaseExceptionGroup)
    )


# --------------------------------------------------
# Messages
# --------------------------------------------------

def _missing_access_lines(
    error: BaseException,
    environ: Optional[Mapping[str, str]],
) -> Tuple[str, ...]:
    lines = [
        "❌ Missing Access (code 50001). Common causes:",
        "   1. The bot is not a member of the guild specified by GUILD_ID.",
        "   2. CLIENT_ID doesn't match the application for the provided bot token.",
        "   3. GUILD_ID points to a server where the bot lacks access.",
        '   4. The bot was invited without the "applications.commands" scope.',
    ]
    hint = invite_url(environ)
    if hint:
        lines.append("   Re-invite the bot using:")
        lines.append(f"     {hint}")
    return tuple(lines)


def _unauthorized_lines(error, environ) -> Tuple[str, ...]:
    return (
        "❌ Unauthorized (401). Double-check DISCORD_TOKEN; "
        "it may be invalid or revoked.",
    )


def _forbidden_lines(error, environ) -> Tuple[str, ...]:
    return (
        '❌ Forbidden (403). Ensure the bot has the "applications.commands" '
        "scope in the target guild.",
    )


def _network_lines(error, environ) -> Tuple[str, ...]:
    return (
        "❌ Network error: unable to reach Discord.",
        "   Check your internet connection, firewall, or proxy settings "
        "and try again.",
    )


def _unknown_lines(error, environ) -> Tuple[str, ...]:
    return (f"❌ Failed to register commands: {error!r}",)


Predicate = Callable[[BaseException], bool]
MessageBuilder = Callable[
    [BaseException, Optional[Mapping[str, str]]], Tuple[str, ...]
]

# Evaluated in order; the first matching predicate decides the outcome.
CLASSIFICATION_RULES: Tuple[Tuple[Predicate, Outcome, MessageBuilder], ...] = (
    (_is_missing_access, Outcome.ACCESS_DENIED, _missing_access_lines),
    (_is_unauthorized, Outcome.UNAUTHORIZED, _unauthorized_lines),
    (_is_forbidden, Outcome.FORBIDDEN, _forbidden_lines),
    (_is_unreachable_aggregate, Outcome.NETWORK_UNREACHABLE, _network_lines),
    (_is_unreachable_single, Outcome.NETWORK_UNREACHABLE, _network_lines),
)


# --------------------------------------------------
# Public API
# --------------------------------------------------

def classify_failure(
    error: BaseException,
    environ: Optional[Mapping[str, str]] = None,
) -> Diagnosis:
    """
    Select the diagnosis for an error raised by the live submission.

    Falls back to UNKNOWN_FAILURE with the raw error in the message.
    """
    for predicate, outcome, build_lines in CLASSIFICATION_RULES:
        if predicate(error):
            log.debug(f"Failure classified as {outcome.name}: {error!r}")
            return Diagnosis(outcome=outcome, lines=build_lines(error, environ))

    log.debug(f"Failure unclassified: {error!r}")
    return Diagnosis(
        outcome=Outcome.UNKNOWN_FAILURE,
        lines=_unknown_lines(error, environ),
    )
