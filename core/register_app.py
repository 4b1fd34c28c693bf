"""
======================================================================
 Guild Command Sync — Version v0.1.0 (Build 2026.10)
Owner: Daniel Clancy
 Copyright © 2026 Brainstream Media Group
======================================================================
"""

"""
Guild command registration entrypoint (one-shot).

This module pushes the declared command catalog to one guild of one
Discord application. It owns:

- .env loading and the configuration gate
- run-mode parsing (dry run / debug)
- the single bulk-replace submission
- failure reporting and the process exit status

IMPORTANT:
- Configuration is validated before the catalog is built
- Exactly one network attempt is made in live mode, never in dry run
- Every failure path prints a diagnosis and exits non-zero
"""

import argparse
import asyncio
import os
import sys
import traceback
from dataclasses import dataclass
from typing import Any, Dict, List, MutableMapping, Optional, Sequence

from dotenv import load_dotenv

from shared.config.registration import (
    DEBUG_ENV,
    ConfigError,
    RegistrationConfig,
    ValidationError,
    is_truthy,
    load_registration_config,
)
from shared.logging.logger import LOG_DIR_ENV, configure_logging, get_logger
from services.discord.commands import build_catalog, serialize_catalog
from services.discord.failures import Outcome, classify_failure
from services.discord.registry import DEFAULT_API_BASE, GuildCommandRegistry

log = get_logger("core.register_app")

API_BASE_ENV = "DISCORD_API_BASE"


# ----------------------------------------------------------------------
# RUN MODE
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class RunMode:
    dry_run: bool = False
    debug: bool = False


DRY_RUN_FLAGS = frozenset({"--dry-run", "--noop", "-n"})
DEBUG_FLAGS = frozenset({"--debug"})
HELP_FLAGS = frozenset({"-h", "--help"})
KNOWN_FLAGS = DRY_RUN_FLAGS | DEBUG_FLAGS | HELP_FLAGS


def _build_parser() -> argparse.ArgumentParser:
    """Parser used only to render --help; flags are matched exactly below."""
    parser = argparse.ArgumentParser(
        prog="register-commands",
        add_help=False,
        description=(
            "Replace the guild's application commands with the "
            "declared command catalog."
        ),
    )
    parser.add_argument(
        "-h",
        "--help",
        action="store_true",
        help="show this help message and exit",
    )
    parser.add_argument(
        "-n",
        "--dry-run",
        "--noop",
        dest="dry_run",
        action="store_true",
        help="list the commands that would be registered; send nothing",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="print raw error details on failure",
    )
    return parser


def _resolve_args(argv: Optional[Sequence[str]]) -> List[str]:
    return sys.argv[1:] if argv is None else list(argv)


def parse_run_mode(
    argv: Optional[Sequence[str]] = None,
    environ: Optional[MutableMapping[str, str]] = None,
) -> RunMode:
    """
    Derive the run mode from exact flag matches.

    Anything else (including forms like --debug=1 or -nv) is ignored
    rather than treated as a usage error.
    """
    env = os.environ if environ is None else environ
    args = set(_resolve_args(argv))

    return RunMode(
        dry_run=bool(args & DRY_RUN_FLAGS),
        debug=bool(args & DEBUG_FLAGS) or is_truthy(env.get(DEBUG_ENV)),
    )


# ----------------------------------------------------------------------
# DISPATCH
# ----------------------------------------------------------------------

def _print_header(config: RegistrationConfig):
    print("📝 Starting command registration…")
    print(f"   • Application ID: {config.application_id}")
    print(f"   • Guild ID: {config.guild_id}")


def _print_debug(error: BaseException):
    details = "".join(
        traceback.format_exception(type(error), error, error.__traceback__)
    )
    print(f"🛠️ Debug details: {error!r}", file=sys.stderr)
    print(details.rstrip(), file=sys.stderr)


async def dispatch(
    config: RegistrationConfig,
    commands: List[Dict[str, Any]],
    mode: RunMode,
    *,
    registry: Optional[GuildCommandRegistry] = None,
    environ: Optional[MutableMapping[str, str]] = None,
) -> Outcome:
    """
    Preview the catalog (dry run) or submit it once (live).
    """

    _print_header(config)

    if mode.dry_run:
        print("ℹ️ Dry run enabled; no request sent to Discord.")
        print("   Commands that would be registered:")
        for command in commands:
            print(f"   • {command['name']}")
        log.info(f"Dry run complete ({len(commands)} commands)")
        return Outcome.SUCCESS

    if registry is None:
        env = os.environ if environ is None else environ
        api_base = (env.get(API_BASE_ENV) or "").strip() or DEFAULT_API_BASE
        registry = GuildCommandRegistry(config, api_base=api_base)

    try:
        await registry.bulk_overwrite(commands)
    except Exception as e:
        diagnosis = classify_failure(e, environ)
        log.warning(f"Command registration failed: {diagnosis.outcome.name}")

        for line in diagnosis.lines:
            print(line, file=sys.stderr)
        if mode.debug:
            _print_debug(e)

        return diagnosis.outcome

    print("✅ Commands registered successfully!")
    print("   Commands should be available immediately in the guild.")
    log.info(f"Registered {len(commands)} commands in guild {config.guild_id}")
    return Outcome.SUCCESS


# ----------------------------------------------------------------------
# MAIN
# ----------------------------------------------------------------------

def _report_config_error(error: ConfigError):
    print("❌ Missing required environment variables:", file=sys.stderr)
    print(f"   {', '.join(error.missing)}", file=sys.stderr)
    print("Create a .env file with these variables set.", file=sys.stderr)


def main(
    argv: Optional[Sequence[str]] = None,
    environ: Optional[MutableMapping[str, str]] = None,
    *,
    registry: Optional[GuildCommandRegistry] = None,
) -> int:
    """
    Run one registration pass and return the process exit status.
    """

    env = os.environ if environ is None else environ
    args = _resolve_args(argv)

    if HELP_FLAGS.intersection(args):
        _build_parser().print_help()
        return Outcome.SUCCESS.exit_code

    mode = parse_run_mode(args, env)
    configure_logging(debug=mode.debug, log_dir=env.get(LOG_DIR_ENV))

    unknown = [arg for arg in args if arg not in KNOWN_FLAGS]
    if unknown:
        log.debug(f"Ignoring unrecognised arguments: {unknown}")

    try:
        config = load_registration_config(env)
    except ConfigError as e:
        _report_config_error(e)
        return Outcome.CONFIG_ERROR.exit_code
    except ValidationError as e:
        print(f"❌ {e}", file=sys.stderr)
        return Outcome.VALIDATION_ERROR.exit_code

    try:
        commands = serialize_catalog(build_catalog())
        outcome = asyncio.run(
            dispatch(config, commands, mode, registry=registry, environ=env)
        )
    except Exception as e:
        print(
            f"❌ Unexpected failure while registering commands: {e!r}",
            file=sys.stderr,
        )
        if mode.debug:
            _print_debug(e)
        return Outcome.UNKNOWN_FAILURE.exit_code

    return outcome.exit_code


# ----------------------------------------------------------------------
# ENTRYPOINT
# ----------------------------------------------------------------------

def run():
    load_dotenv()
    sys.exit(main())


if __name__ == "__main__":
    run()
