"""
Hetzner Freezer - Command Line Interface

Usage:
    hetzner-freezer freeze --server-name=<name> --project=<project> --token=<token>
    hetzner-freezer unfreeze --server-name=<name> --project=<project> --token=<token>
        [--server-dump-id=<id>]
    hetzner-freezer dump --server-name=<name> --project=<project> --token=<token>
"""

import argparse
import json
import sys
from typing import Any, Dict

import yaml

from hetzner_freezer.core.config import DEFAULT_OUTPUT_DIR, VERSION, FreezerConfig, create_config
from hetzner_freezer.dump import is_valid_dump_id
from hetzner_freezer.main import dump_server, freeze_server, unfreeze_server


class OutputFormatter:
    """Render a command result as json, yaml or a two-column table."""

    @staticmethod
    def format_output(data: Dict[str, Any], format_type: str = 'table') -> str:
        if format_type == 'json':
            return json.dumps(data, indent=2)
        if format_type == 'yaml':
            return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
        return OutputFormatter.table(data)

    @staticmethod
    def table(data: Dict[str, Any]) -> str:
        key_width = max(len(key) for key in data)
        value_width = max(len(str(value)) for value in data.values())
        rule = "─" * (key_width + 2) + "┼" + "─" * (value_width + 2)

        rows = [f" {key:{key_width}} │ {value}" for key, value in data.items()]
        return "\n".join([rule.replace("┼", "┬")] + rows + [rule.replace("┼", "┴")])


def create_parser() -> argparse.ArgumentParser:
    """
    Create argument parser.

    Returns:
        Configured ArgumentParser
    """

    parser = argparse.ArgumentParser(
        prog='hetzner-freezer',
        description='Freeze Hetzner Cloud servers to a dump and bring them back',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
EXAMPLES
    To freeze a server:
        $ hetzner-freezer freeze --server-name=web-1 --project=shop --token=$HCLOUD_TOKEN

    To unfreeze it from the latest dump:
        $ hetzner-freezer unfreeze --server-name=web-1 --project=shop --token=$HCLOUD_TOKEN
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'hetzner-freezer v{VERSION}'
    )

    subparsers = parser.add_subparsers(
        dest='command',
        required=True,
        help='Available commands'
    )

    # FREEZE COMMAND
    freeze_parser = subparsers.add_parser(
        'freeze',
        help='Dump a server, then delete it',
        description='Shut down a server, snapshot it, record its configuration, '
                    'release its addresses and delete it.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
NOTES
    The dump id is printed when the freeze completes. Nothing is rolled
    back if a step fails; re-run or clean up by hand.
        """
    )
    _add_common_args(freeze_parser)

    # UNFREEZE COMMAND
    unfreeze_parser = subparsers.add_parser(
        'unfreeze',
        help='Recreate a server from a dump',
        description='Create a server from a dump snapshot and re-attach its '
                    'floating IPs and private networks.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
EXAMPLES
    To unfreeze from a specific dump:
        $ hetzner-freezer unfreeze --server-name=web-1 --project=shop \\
            --token=$HCLOUD_TOKEN --server-dump-id=1700000000123456789
        """
    )
    _add_common_args(unfreeze_parser)
    unfreeze_group = unfreeze_parser.add_argument_group('UNFREEZE FLAGS')
    unfreeze_group.add_argument(
        '--server-dump-id',
        metavar='DUMP_ID',
        help='Dump to restore. Default: the latest dump of the server'
    )

    # DUMP COMMAND
    dump_parser = subparsers.add_parser(
        'dump',
        help='Dump a server without deleting it',
        description='Snapshot a server and record its configuration. '
                    'The server keeps running.'
    )
    _add_common_args(dump_parser)

    return parser


def _add_common_args(parser: argparse.ArgumentParser):
    """Add arguments common to all commands."""

    required = parser.add_argument_group('REQUIRED FLAGS')
    required.add_argument(
        '--server-name',
        metavar='NAME',
        required=True,
        help='Hetzner server name'
    )
    required.add_argument(
        '--project',
        metavar='PROJECT',
        required=True,
        help='Hetzner project name (used in the dump path)'
    )
    required.add_argument(
        '--token',
        metavar='TOKEN',
        required=True,
        help='Hetzner Cloud API token'
    )

    optional = parser.add_argument_group('OPTIONAL FLAGS')
    optional.add_argument(
        '--output-dir',
        metavar='DIR',
        default=DEFAULT_OUTPUT_DIR,
        help=f'Root directory for dumps. Default: {DEFAULT_OUTPUT_DIR}'
    )
    optional.add_argument(
        '--action-timeout',
        type=int,
        metavar='SECONDS',
        help='Maximum wait for one remote action in seconds. Default: 600'
    )

    output = parser.add_argument_group('OUTPUT FLAGS')
    output.add_argument(
        '--format',
        metavar='FORMAT',
        choices=['json', 'yaml', 'table', 'disable'],
        default='table',
        help='Output format. One of: json, yaml, table, disable. Default: table'
    )
    output.add_argument(
        '--verbosity',
        metavar='VERBOSITY',
        choices=['debug', 'info', 'warning', 'error', 'critical'],
        default='info',
        help='Logging verbosity. One of: debug, info, warning, error, critical. Default: info'
    )
    output.add_argument(
        '--log-file',
        metavar='LOG_FILE',
        help='Write logs to this file.'
    )
    output.add_argument(
        '--no-progress',
        action='store_true',
        help='Do not show progress bars.'
    )


def validate_args(args: argparse.Namespace) -> bool:
    """
    Validate arguments argparse cannot check on its own.

    Returns:
        True if valid, False with error message
    """
    for flag in ('server_name', 'project', 'token'):
        if not getattr(args, flag).strip():
            print("ERROR: (hetzner-freezer) Invalid value:", file=sys.stderr)
            print(f"  --{flag.replace('_', '-')} must not be empty", file=sys.stderr)
            return False

    if args.action_timeout is not None and args.action_timeout < 1:
        print("ERROR: (hetzner-freezer) Invalid value:", file=sys.stderr)
        print("  --action-timeout must be at least 1 second", file=sys.stderr)
        return False

    dump_id = getattr(args, 'server_dump_id', None)
    if dump_id is not None and not is_valid_dump_id(dump_id):
        print("ERROR: (hetzner-freezer) Invalid value:", file=sys.stderr)
        print(f"  --server-dump-id '{dump_id}' is not a dump directory name", file=sys.stderr)
        return False

    return True


def args_to_config(args: argparse.Namespace) -> FreezerConfig:
    """Convert arguments to FreezerConfig."""
    options = {
        'output_dir': args.output_dir,
        'log_level': args.verbosity.upper(),
        'log_file': args.log_file,
        # json and yaml results must be the only thing on stdout
        'log_to_stderr': args.format in ('json', 'yaml'),
        'show_progress': not args.no_progress,
    }
    if args.action_timeout:
        options['action_timeout'] = args.action_timeout

    return create_config(**options)


def _print_result(args: argparse.Namespace, result: Dict[str, Any]):
    if args.format != 'disable':
        print(OutputFormatter.format_output(result, args.format))


def handle_freeze(args: argparse.Namespace) -> int:
    """Handle freeze command."""
    dump_id = freeze_server(
        server_name=args.server_name,
        project=args.project,
        token=args.token,
        config=args_to_config(args),
        debug=args.verbosity == 'debug'
    )

    if dump_id is None:
        return 1

    _print_result(args, {
        'serverName': args.server_name,
        'project': args.project,
        'dumpId': dump_id,
        'operation': 'freeze',
        'success': True
    })
    return 0


def handle_unfreeze(args: argparse.Namespace) -> int:
    """Handle unfreeze command."""
    server = unfreeze_server(
        server_name=args.server_name,
        project=args.project,
        token=args.token,
        dump_id=args.server_dump_id,
        config=args_to_config(args),
        debug=args.verbosity == 'debug'
    )

    if server is None:
        return 1

    _print_result(args, {
        'serverName': args.server_name,
        'project': args.project,
        'serverId': server.get('id'),
        'operation': 'unfreeze',
        'success': True
    })
    return 0


def handle_dump(args: argparse.Namespace) -> int:
    """Handle dump command."""
    dump_id = dump_server(
        server_name=args.server_name,
        project=args.project,
        token=args.token,
        config=args_to_config(args),
        debug=args.verbosity == 'debug'
    )

    if dump_id is None:
        return 1

    _print_result(args, {
        'serverName': args.server_name,
        'project': args.project,
        'dumpId': dump_id,
        'operation': 'dump',
        'success': True
    })
    return 0


HANDLERS = {
    'freeze': handle_freeze,
    'unfreeze': handle_unfreeze,
    'dump': handle_dump,
}


def main(argv=None) -> int:
    """Main CLI entry point."""

    try:
        parser = create_parser()
        args = parser.parse_args(argv)

        if not validate_args(args):
            return 1

        return HANDLERS[args.command](args)

    except KeyboardInterrupt:
        print("\n\nOperation cancelled by user.", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == '__main__':
    sys.exit(main())
