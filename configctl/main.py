"""
Command line entry point: run a local controller or talk to a running one.
"""
import argparse
import logging
import sys
import threading
from typing import List, Optional

from common.logging import setup_logging
from configctl import config
from configctl.exceptions import ControllerError
from configctl.local import LocalController
from configctl.remote import RemoteController

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Config Controller - shared test environment configuration")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--url", default=config.URL, help="Base URL of a running controller")
    commands = parser.add_subparsers(dest="command", required=True)

    serve = commands.add_parser("serve", help="Run a local controller until interrupted")
    serve.add_argument("--host", default=config.HOST, help="Host to bind")
    serve.add_argument("--port", type=int, default=config.PORT, help="Port to bind (0 = ephemeral)")

    get = commands.add_parser("get", help="Print a value")
    get.add_argument("key")

    get_for = commands.add_parser("get-for", help="Print a prefixed value")
    get_for.add_argument("prefix")
    get_for.add_argument("key")

    set_ = commands.add_parser("set", help="Set a value")
    set_.add_argument("key")
    set_.add_argument("value")

    set_for = commands.add_parser("set-for", help="Set a prefixed value")
    set_for.add_argument("prefix")
    set_for.add_argument("key")
    set_for.add_argument("value")

    add = commands.add_parser("add", help="Set a value or append to it")
    add.add_argument("key")
    add.add_argument("value")
    add.add_argument("--delim", default=",")

    add_for = commands.add_parser("add-for", help="Set a prefixed value or append to it")
    add_for.add_argument("prefix")
    add_for.add_argument("key")
    add_for.add_argument("value")
    add_for.add_argument("--delim", default=",")

    dump = commands.add_parser("dump", help="Print key=value pairs")
    dump.add_argument("keys", nargs="*")

    dump_for = commands.add_parser("dump-for", help="Print prefixed key=value pairs")
    dump_for.add_argument("prefix")
    dump_for.add_argument("keys", nargs="*")

    return parser


def serve(host: str, port: int, stop: Optional[threading.Event] = None) -> int:
    """
    Run a local controller until stop is set or the process is interrupted.
    """
    stop = stop or threading.Event()

    try:
        controller = LocalController(host=host, port=port, logger=logger)
    except ControllerError as e:
        logger.error(f"Failed to start controller: {e}")
        return 1

    print(controller.endpoint, flush=True)

    try:
        while not stop.wait(0.5):
            pass
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    finally:
        controller.close()

    return 0


def run_client(args: argparse.Namespace) -> int:
    """
    Execute one client command against args.url.
    """
    controller = RemoteController(args.url, logger=logger)

    try:
        if args.command in ("get", "get-for"):
            if args.command == "get":
                value, ok = controller.get(args.key)
            else:
                value, ok = controller.get_for(args.prefix, args.key)
            if not ok:
                return 1
            print(value)
        elif args.command == "set":
            controller.set(args.key, args.value)
        elif args.command == "set-for":
            controller.set_for(args.prefix, args.key, args.value)
        elif args.command == "add":
            controller.add(args.key, args.value, args.delim)
        elif args.command == "add-for":
            controller.add_for(args.prefix, args.key, args.value, args.delim)
        elif args.command == "dump":
            for line in controller.dump_env(*args.keys):
                print(line)
        elif args.command == "dump-for":
            for line in controller.dump_env_for(args.prefix, *args.keys):
                print(line)
    finally:
        controller.close()

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # Logs go to stderr so command output stays parseable
    setup_logging("confctl", debug=args.debug or None, stream=sys.stderr)

    if args.command == "serve":
        return serve(args.host, args.port)

    return run_client(args)


if __name__ == "__main__":
    sys.exit(main())
