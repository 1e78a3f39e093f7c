"""
Hetzner Freezer - Main Entry Point

Simple, clean entry points for freeze, unfreeze and dump operations.

Usage:
    from hetzner_freezer.main import freeze_server, unfreeze_server

    # Freeze a server (returns the dump id, None on failure)
    dump_id = freeze_server('web-1', 'my-project', token)

    # Unfreeze it again from the latest dump
    server = unfreeze_server('web-1', 'my-project', token)
"""

import sys

from hetzner_freezer.core.client import HetznerClient
from hetzner_freezer.core.config import FreezerConfig
from hetzner_freezer.core.exceptions import FreezerError
from hetzner_freezer.orchestration import FreezeOrchestrator, UnfreezeOrchestrator
from hetzner_freezer.utils.logger import log_banner, setup_logging
from hetzner_freezer.utils.signals import setup_signal_handler


def _prepare(title: str, server_name: str, project: str, token: str,
             config: FreezerConfig, debug: bool, client, cancel_event):
    """Set up logging, client and cancellation for one entry point."""
    logger = setup_logging(
        level='DEBUG' if debug else config.log_level,
        log_file=config.log_file,
        debug=debug,
        stream=sys.stderr if config.log_to_stderr else None
    )

    log_banner(logger, title)
    logger.info(f"Server: {server_name}")
    logger.info(f"Project: {project}")
    logger.info("")

    if client is None:
        client = HetznerClient(token, endpoint=config.api_endpoint,
                               timeout=config.request_timeout, logger=logger)
    if cancel_event is None:
        cancel_event = setup_signal_handler(logger)

    return logger, client, cancel_event


def _report_failure(logger, action: str, error: FreezerError, debug: bool):
    logger.error("")
    logger.error(f"Could not {action} server: {error}")
    if debug:
        logger.exception("Full traceback:")


def freeze_server(server_name: str, project: str, token: str,
                  config: FreezerConfig = None, debug: bool = False,
                  client=None, cancel_event=None):
    """
    Freeze a server (dump it, then delete it).

    This will:
    1. Look up the server by name
    2. Shut it down
    3. Create a snapshot image and write the dump
    4. Unassign its floating IPs
    5. Unassign its primary IPv4/IPv6
    6. Delete the server

    Nothing is rolled back on failure.

    Args:
        server_name: Name of the server to freeze
        project: Project name (used in the dump path)
        token: Hetzner Cloud API token
        config: Optional FreezerConfig for advanced settings
        debug: Enable debug logging (default: False)
        client: Optional ControlPlaneClient (default: HetznerClient)
        cancel_event: Optional cancellation event (default: SIGINT/SIGTERM)

    Returns:
        str: The dump id if freeze succeeded, None if it failed

    Example:
        >>> freeze_server('web-1', 'my-project', token)
        '1700000000123456789'
    """
    config = config or FreezerConfig()
    logger, client, cancel_event = _prepare(
        "Hetzner Freezer - Freeze", server_name, project, token,
        config, debug, client, cancel_event)

    try:
        orchestrator = FreezeOrchestrator(
            client=client,
            project=project,
            config=config,
            logger=logger,
            cancel_event=cancel_event
        )
        dump_id = orchestrator.freeze(server_name)
    except FreezerError as e:
        _report_failure(logger, "freeze", e, debug)
        return None

    logger.info("")
    logger.info("=" * 60)
    logger.info("[OK] Freeze completed successfully!")
    logger.info("=" * 60)
    logger.info("")
    logger.info(f"Dump id: {dump_id}")
    logger.info("")
    logger.info("To bring the server back, run:")
    logger.info(f"  hetzner-freezer unfreeze --server-name {server_name} "
                f"--project {project} --token <token> --server-dump-id {dump_id}")
    logger.info("")

    return dump_id


def unfreeze_server(server_name: str, project: str, token: str,
                    dump_id: str = None, config: FreezerConfig = None,
                    debug: bool = False, client=None, cancel_event=None):
    """
    Unfreeze a server (recreate it from a dump).

    This will:
    1. Select the dump (the latest one when dump_id is not given)
    2. Load it and re-resolve its floating IPs
    3. Create the server from the snapshot image
    4. Assign the floating IPs
    5. Attach the private networks

    Args:
        server_name: Name the server was frozen under
        project: Project name (used in the dump path)
        token: Hetzner Cloud API token
        dump_id: Dump to restore (optional)
        config: Optional FreezerConfig for advanced settings
        debug: Enable debug logging (default: False)
        client: Optional ControlPlaneClient (default: HetznerClient)
        cancel_event: Optional cancellation event (default: SIGINT/SIGTERM)

    Returns:
        dict: The created server if unfreeze succeeded, None if it failed
    """
    config = config or FreezerConfig()
    logger, client, cancel_event = _prepare(
        "Hetzner Freezer - Unfreeze", server_name, project, token,
        config, debug, client, cancel_event)

    try:
        orchestrator = UnfreezeOrchestrator(
            client=client,
            project=project,
            config=config,
            logger=logger,
            cancel_event=cancel_event
        )
        server = orchestrator.unfreeze(server_name, dump_id)
    except FreezerError as e:
        _report_failure(logger, "unfreeze", e, debug)
        return None

    logger.info("")
    logger.info("=" * 60)
    logger.info("[OK] Unfreeze completed successfully!")
    logger.info("=" * 60)
    logger.info("")
    logger.info(f"Server {server.get('name')} is back with id {server.get('id')}.")
    logger.info("")

    return server


def dump_server(server_name: str, project: str, token: str,
                config: FreezerConfig = None, debug: bool = False,
                client=None, cancel_event=None):
    """
    Dump a server without shutting it down or deleting it.

    The snapshot of a running server may not be filesystem-consistent.

    Returns:
        str: The dump id if the dump succeeded, None if it failed
    """
    config = config or FreezerConfig()
    logger, client, cancel_event = _prepare(
        "Hetzner Freezer - Dump", server_name, project, token,
        config, debug, client, cancel_event)

    try:
        orchestrator = FreezeOrchestrator(
            client=client,
            project=project,
            config=config,
            logger=logger,
            cancel_event=cancel_event
        )
        dump_id = orchestrator.dump(server_name)
    except FreezerError as e:
        _report_failure(logger, "dump", e, debug)
        return None

    logger.info("")
    logger.info(f"[OK] Dump completed: {dump_id}")
    logger.info("")

    return dump_id
