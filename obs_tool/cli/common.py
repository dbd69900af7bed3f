"""
Helpers shared by the obs-tool commands.

Every command resolves the connection from the group options, runs its
action against a fresh client and turns failures into log messages and
exit code 1.
"""

import logging
import sys
from typing import Callable

import click

from ..api import ObsClient
from ..exceptions import ObsError
from ..utils import resolve_connection, setup_logging
from ..utils.error_handling import handle_generic_error, handle_obs_error, log_and_exit


def create_client(ctx: click.Context) -> ObsClient:
    """
    Create a client from the group options.

    Options given on the command line win over the environment, which wins
    over the osc configuration file.
    """
    apiurl, user, password = resolve_connection(
        apiurl=ctx.obj["apiurl"],
        user=ctx.obj["user"],
        password=ctx.obj["password"],
        config_path=ctx.obj["config"],
    )
    logging.debug("Connecting to %s as %s", apiurl, user)
    return ObsClient(apiurl, user, password)


def run_with_client(ctx: click.Context, operation: str, action: Callable[[ObsClient], None]) -> None:
    """
    Run ``action`` with a connected client.

    Args:
        ctx: Click context carrying the group options
        operation: Description of the command for error messages
        action: Callable receiving the client
    """
    setup_logging(ctx.obj["debug"], use_wrapping=True)

    client = None
    try:
        client = create_client(ctx)
        action(client)
    except ObsError as e:
        handle_obs_error(e, operation)
        sys.exit(1)
    except ValueError as e:
        # Invalid project, package, repository or file names
        log_and_exit(f"Invalid argument for {operation}: {e}")
    except Exception as e:
        handle_generic_error(e, operation)
        sys.exit(1)
    finally:
        # Ensure client session is properly closed
        if client:
            client.close()
            logging.debug("Client session closed")


__all__ = ["create_client", "run_with_client"]
