"""
FakeEnd CLI

Command-line interface for the FakeEnd mock server.

Commands:
    run         - Start the mock server
    document    - Generate markdown documentation for mock endpoints
    generate    - Create a mock definition from a curl command

Examples:
    # Serve mock_server/ on port 4000
    fake-end run

    # Serve another directory on another port
    fake-end run --dir mocks --port 8080

    # Document endpoints
    fake-end document --dir mocks --output API.md

    # Generate a definition from a curl command
    fake-end generate --curl "curl -X POST https://api.example.com/users -d '{\"name\": \"Ada\"}'"
"""

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .common import colorize, method_color
from .common.utils import ANSI_GRAY
from .docs import generate_documentation
from .generate import CurlParseError, generate_mock_from_curl
from .loader import MockDirectoryNotFound, load_endpoints
from .mock import MockServer, MockConfig

DEFAULT_PORT = 4000
DEFAULT_MOCK_DIR = 'mock_server'
DEFAULT_DOC_OUTPUT = 'api-documentation.md'


def _setup_logging(log_level: str):
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(message)s"
    )


def cmd_run(args):
    """
    Load mock definitions and start the mock server.

    Args:
        args: Parsed command-line arguments
    """
    _setup_logging(args.log_level)
    mock_dir = Path(args.dir)
    colors = not args.no_color

    print(f"🔍 Loading mock endpoints from {mock_dir}...")
    try:
        result = load_endpoints(mock_dir)
    except MockDirectoryNotFound:
        print(f"❌ Mock directory \"{mock_dir}\" does not exist.")
        print("   Please create the directory and add YAML files with your mock endpoints.")
        sys.exit(1)

    endpoints = result.endpoints
    if not endpoints:
        print(f"⚠️  No mock endpoints found in {mock_dir}")
        print("   Create YAML files with your mock API definitions to get started.")
    else:
        plural = 's' if len(endpoints) > 1 else ''
        print(f"✅ Loaded {len(endpoints)} mock endpoint{plural}")

    if result.diagnostics:
        print(f"⚠️  Skipped {len(result.diagnostics)} invalid definition(s):")
        for diagnostic in result.diagnostics:
            print(f"   • {diagnostic}")

    config = MockConfig(
        host=args.host,
        port=args.port,
        log_level=args.log_level,
        colors=colors
    )

    try:
        server = MockServer(endpoints, config=config)
    except Exception as e:
        print(f"❌ Failed to start server: {e}")
        sys.exit(1)

    print(f"🚀 Mock server running on http://{args.host}:{args.port}")
    if endpoints:
        print("\n📋 Available endpoints:")
        for endpoint in server.routes.endpoints:
            method = colorize(endpoint.method.value.ljust(6), method_color(endpoint.method), colors)
            print(f"  {method} {colorize(endpoint.full_path, ANSI_GRAY, colors)}")
    print("\nPress Ctrl+C to stop the server\n")

    try:
        server.start()
    except KeyboardInterrupt:
        print("\n\n👋 Mock server stopped")


def cmd_document(args):
    """
    Generate markdown documentation for mock endpoints.

    Args:
        args: Parsed command-line arguments
    """
    _setup_logging(args.log_level)
    print(f"🔍 Loading mock endpoints from {args.dir}...")

    try:
        output = generate_documentation(args.dir, args.output)
    except MockDirectoryNotFound as e:
        print(f"❌ {e}")
        sys.exit(1)
    except OSError as e:
        print(f"❌ Failed to write documentation: {e}")
        sys.exit(1)

    if output is None:
        print(f"⚠️  No mock endpoints found in {args.dir}")
        print("   Create YAML files with your mock API definitions to get started.")
        return

    print(f"📄 Documentation generated: {output.resolve()}")


def cmd_generate(args):
    """
    Create a mock definition from a curl command.

    Args:
        args: Parsed command-line arguments
    """
    _setup_logging(args.log_level)

    if args.curl:
        curl_command = args.curl
    else:
        try:
            curl_command = Path(args.file).read_text(encoding='utf-8')
        except OSError as e:
            print(f"❌ Could not read {args.file}: {e}")
            sys.exit(1)

    print("🔍 Analyzing cURL command...")
    if args.execute:
        print("🚀 Executing cURL command to capture actual response...")

    try:
        file_path, definition = generate_mock_from_curl(curl_command, args.output, execute=args.execute)
    except CurlParseError as e:
        print(f"❌ Failed to generate mock: {e}")
        sys.exit(1)

    print(f"✅ Mock file generated: {file_path}")
    print(f"   Method: {definition['method']}")
    print(f"   Path: {definition['path']}")
    print(f"   Status: {definition['status']}")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for all commands."""
    parser = argparse.ArgumentParser(
        prog='fake-end',
        description="FakeEnd - mock backend APIs using YAML files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Start the mock server
  %(prog)s run --dir mock_server --port 4000

  # Generate documentation
  %(prog)s document --dir mock_server --output api-documentation.md

  # Generate a mock from a curl command
  %(prog)s generate --curl "curl https://api.example.com/users/1"
        """
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    log_levels = ['debug', 'info', 'warning', 'error']

    # --- RUN command ---
    run_parser = subparsers.add_parser('run', help='Start the mock server')
    run_parser.add_argument('-p', '--port', type=int, default=DEFAULT_PORT,
                            help=f'Port to run the server on (default: {DEFAULT_PORT})')
    run_parser.add_argument('-d', '--dir', default=DEFAULT_MOCK_DIR,
                            help=f'Directory containing mock YAML files (default: {DEFAULT_MOCK_DIR})')
    run_parser.add_argument('--host', default='127.0.0.1', help='Host to bind (default: 127.0.0.1)')
    run_parser.add_argument('--log-level', default='info', choices=log_levels,
                            help='Log level (default: info)')
    run_parser.add_argument('--no-color', action='store_true', help='Disable ANSI colors')

    # --- DOCUMENT command ---
    document_parser = subparsers.add_parser('document', help='Generate markdown documentation for mock endpoints')
    document_parser.add_argument('-d', '--dir', default=DEFAULT_MOCK_DIR,
                                 help=f'Directory containing mock YAML files (default: {DEFAULT_MOCK_DIR})')
    document_parser.add_argument('-o', '--output', default=DEFAULT_DOC_OUTPUT,
                                 help=f'Output file for documentation (default: {DEFAULT_DOC_OUTPUT})')
    document_parser.add_argument('--log-level', default='warning', choices=log_levels,
                                 help='Log level (default: warning)')

    # --- GENERATE command ---
    generate_parser = subparsers.add_parser('generate', help='Create a mock definition from a curl command')
    source = generate_parser.add_mutually_exclusive_group(required=True)
    source.add_argument('-c', '--curl', help='cURL command')
    source.add_argument('-f', '--file', help='File containing a cURL command')
    generate_parser.add_argument('-o', '--output', default=DEFAULT_MOCK_DIR,
                                 help=f'Mock directory to write into (default: {DEFAULT_MOCK_DIR})')
    generate_parser.add_argument('--execute', action='store_true',
                                 help='Send the request and use the real response as the mock body')
    generate_parser.add_argument('--log-level', default='warning', choices=log_levels,
                                 help='Log level (default: warning)')

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Dispatch to command handler
    if args.command == 'run':
        cmd_run(args)
    elif args.command == 'document':
        cmd_document(args)
    elif args.command == 'generate':
        cmd_generate(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == '__main__':
    main()
