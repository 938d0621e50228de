from __future__ import annotations

import argparse
import json
import os
import sys
import time
from pathlib import Path
from typing import Any, Sequence

import yaml
from dotenv import load_dotenv

from pathconf.config import ConfigHandle
from pathconf.errors import InvalidPathError
from pathconf.logging_setup import configure_logging_from_store
from pathconf.migrations import Migrator
from pathconf.nodes import MISSING
from pathconf.store import ConfigStore
from pathconf.watcher import ConfigWatcher

HOME_DIR_ENV_VAR = "PATHCONF_HOME"
DEFAULT_HOME_DIR = Path("~/.pathconf")
DEFAULT_HOME_ENV_NAME = ".env"
SETTINGS_NAME = "settings.yaml"
DEFAULT_SETTINGS = (
    "logging:\n"
    "  level: WARNING\n"
    "  format: simple\n"
    "  file:\n"
    "    enabled: false\n"
    "    path: logs/pathconf.log\n"
)


def _resolve_home_dir(arg_value: str | None) -> Path:
    raw = arg_value or os.getenv(HOME_DIR_ENV_VAR) or str(DEFAULT_HOME_DIR)
    return Path(raw).expanduser().resolve()


def _load_env_layers(home_dir: Path) -> None:
    layers = (
        Path.cwd() / DEFAULT_HOME_ENV_NAME,
        home_dir / DEFAULT_HOME_ENV_NAME,
    )
    seen: set[Path] = set()
    for layer in layers:
        try:
            resolved = layer.resolve()
        except OSError:
            resolved = layer
        if not layer.exists() or resolved in seen:
            continue
        load_dotenv(layer, override=False)
        seen.add(resolved)


def _open_settings(home_dir: Path) -> ConfigStore:
    return ConfigStore(
        ConfigHandle(root_dir=home_dir, relative_path=SETTINGS_NAME),
        default_text=DEFAULT_SETTINGS,
    )


def _parse_value(raw: str) -> Any:
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw


def _render(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return yaml.safe_dump(value, sort_keys=False, allow_unicode=True).rstrip()
    return json.dumps(value)


def _cmd_get(store: ConfigStore, args: argparse.Namespace) -> int:
    value = store.get(args.path, MISSING)
    if value is MISSING:
        print(f"{args.path}: not set", file=sys.stderr)
        return 1
    print(_render(value))
    return 0


def _cmd_set(store: ConfigStore, args: argparse.Namespace) -> int:
    result = store.set(args.path, _parse_value(args.value))
    if not result:
        print(f"Failed to save {result.path}: {result.error}", file=sys.stderr)
        return 1
    return 0


def _cmd_remove(store: ConfigStore, args: argparse.Namespace) -> int:
    if not store.remove(args.path):
        result = store.last_save
        if result is not None and not result:
            print(f"Failed to save {result.path}: {result.error}", file=sys.stderr)
        else:
            print(f"{args.path}: not set", file=sys.stderr)
        return 1
    return 0


def _cmd_keys(store: ConfigStore, args: argparse.Namespace) -> int:
    for key in store.get_keys(args.path):
        print(key)
    return 0


def _cmd_clear(store: ConfigStore, args: argparse.Namespace) -> int:
    if not args.yes:
        print(f"Refusing to clear {store.path} without --yes", file=sys.stderr)
        return 1
    result = store.clear()
    if not result:
        print(f"Failed to save {result.path}: {result.error}", file=sys.stderr)
        return 1
    return 0


def _cmd_migrate(store: ConfigStore, args: argparse.Namespace) -> int:
    version = Migrator(store).migrate()
    if version is None:
        print(f"Could not determine config version of {store.path}", file=sys.stderr)
        return 1
    print(version)
    return 0


def _cmd_watch(store: ConfigStore, args: argparse.Namespace) -> int:
    print(f"Watching {store.path} (Ctrl+C to stop)")
    with ConfigWatcher(store.path, store.request_reload, interval=args.interval):
        try:
            while True:
                time.sleep(args.interval)
                if store.reload_pending:
                    keys = store.get_keys()
                    state = "failed to load" if store.failed else f"{len(keys)} top-level key(s)"
                    print(f"Reloaded {store.path}: {state}")
        except KeyboardInterrupt:
            return 0


COMMANDS = {
    "get": _cmd_get,
    "set": _cmd_set,
    "remove": _cmd_remove,
    "keys": _cmd_keys,
    "clear": _cmd_clear,
    "migrate": _cmd_migrate,
    "watch": _cmd_watch,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Read and edit YAML/JSON config files by dot path")
    parser.add_argument("file", help="Config file (.yml, .yaml or .json)")
    parser.add_argument(
        "--home-dir",
        default=None,
        help=f"Settings directory (default: ${HOME_DIR_ENV_VAR} or {DEFAULT_HOME_DIR})",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    get_cmd = sub.add_parser("get", help="Print the value at PATH")
    get_cmd.add_argument("path")

    set_cmd = sub.add_parser("set", help="Set PATH to VALUE (parsed as YAML)")
    set_cmd.add_argument("path")
    set_cmd.add_argument("value")

    remove_cmd = sub.add_parser("remove", help="Delete PATH")
    remove_cmd.add_argument("path")

    keys_cmd = sub.add_parser("keys", help="List child keys of a section")
    keys_cmd.add_argument("path", nargs="?", default="")

    clear_cmd = sub.add_parser("clear", help="Remove every top-level key")
    clear_cmd.add_argument("--yes", action="store_true", help="Confirm clearing the file")

    sub.add_parser("migrate", help="Ensure config_version is present and print it")

    watch_cmd = sub.add_parser("watch", help="Report external changes to the file")
    watch_cmd.add_argument("--interval", type=float, default=1.0)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    home_dir = _resolve_home_dir(args.home_dir)
    _load_env_layers(home_dir)
    configure_logging_from_store(_open_settings(home_dir))

    try:
        store = ConfigStore(ConfigHandle.from_path(args.file))
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    try:
        return COMMANDS[args.command](store, args)
    except InvalidPathError as exc:
        print(str(exc), file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
