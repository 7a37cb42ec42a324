"""
Single entry point for relay-bridge config tooling: check, get, watch, version.
"""

import argparse
import json
import sys
import threading

from relay import __version__


def _load(args: argparse.Namespace):
    """Load the config or exit with a clear message; a bad config is fatal."""
    from relay.config import ConfigError, load_config
    from relay.logs import configure_logging

    configure_logging(args.log_level)
    try:
        return load_config(args.conf)
    except OSError as e:
        raise SystemExit(f"Failed to read configuration file: {e}") from e
    except ConfigError as e:
        raise SystemExit(str(e)) from e


def cmd_check(args: argparse.Namespace) -> int:
    """Load and validate the config; print accounts, gateways and blacklist size."""
    config = _load(args)
    values = config.typed_settings()
    accounts = values.accounts()
    print(f"config: {config.path} ({config.document().format})")
    print(f"accounts ({len(accounts)}): {', '.join(accounts) or '-'}")
    enabled = sum(1 for gw in values.gateway if gw.enable)
    print(f"gateways: {len(values.gateway)} ({enabled} enabled)")
    print(f"samechannelgateways: {len(values.same_channel_gateway)}")
    configured, _ = config.get_string_list("general.MediaDownloadBlackList")
    active = config.blacklist_patterns()
    print(f"media download size: {values.general.media_download_size}")
    print(f"media download blacklist: {len(active)} of {len(configured)} pattern(s) active")
    return 0


def cmd_get(args: argparse.Namespace) -> int:
    """Print one key (environment overrides applied) and whether it is set; exit 1 when unset."""
    config = _load(args)
    value, is_set = config.get(args.key)
    print(json.dumps({"key": args.key, "value": value, "set": is_set}, default=str))
    return 0 if is_set else 1


def cmd_watch(args: argparse.Namespace) -> int:
    """Load the config and reload it on every change until interrupted."""
    from relay.config import start_config_watcher

    config = _load(args)
    watcher = start_config_watcher(config)
    stop = threading.Event()
    try:
        stop.wait()
    except KeyboardInterrupt:
        pass
    finally:
        watcher.stop()
    return 0


def cmd_version(_: argparse.Namespace) -> int:
    """Print version."""
    print(__version__)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="relay-bridge",
        description="Relay bridge configuration: check, get, watch, version.",
    )
    parser.add_argument("--log-level", default="INFO", help="DEBUG, INFO, WARNING, ERROR")
    sub = parser.add_subparsers(dest="command", required=True)

    # check
    p_check = sub.add_parser("check", help="Load and validate the config file")
    p_check.add_argument("--conf", default=None, help="Config file (default: $RELAY_CONFIG or relay.toml)")
    p_check.set_defaults(func=cmd_check)

    # get
    p_get = sub.add_parser("get", help="Print a config key, e.g. general.MediaDownloadSize")
    p_get.add_argument("key", help="Dotted key (case-insensitive)")
    p_get.add_argument("--conf", default=None, help="Config file (default: $RELAY_CONFIG or relay.toml)")
    p_get.set_defaults(func=cmd_get)

    # watch
    p_watch = sub.add_parser("watch", help="Load the config and hot reload it until Ctrl-C")
    p_watch.add_argument("--conf", default=None, help="Config file (default: $RELAY_CONFIG or relay.toml)")
    p_watch.set_defaults(func=cmd_watch)

    # version
    p_version = sub.add_parser("version", help="Print version")
    p_version.set_defaults(func=cmd_version)

    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
