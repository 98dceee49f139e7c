"""circleci-provider CLI — drive the environment-variable lifecycle by hand.

Usage examples::

    circleci-provider --project api create DEPLOY_KEY --value-from-env DEPLOY_KEY
    circleci-provider --project api exists DEPLOY_KEY
    circleci-provider --project api --value-fingerprint "$FP" read DEPLOY_KEY
    circleci-provider -c '{"organization": "acme"}' --project api delete DEPLOY_KEY

Connection settings come from ``--config`` and ``CIRCLECI_*`` environment
variables. Output is the persistable record state, which never contains
the plaintext value.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Any, get_args

from circleci_provider.base.supported_resources import existing_resources

OPERATIONS = ("exists", "create", "read", "delete", "import")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the ``circleci-provider`` CLI.

    Returns:
        Configured :class:`~argparse.ArgumentParser`.
    """
    parser = argparse.ArgumentParser(
        prog="circleci-provider",
        description="Manage CircleCI project environment variables",
    )
    parser.add_argument(
        "--resource", "-r",
        choices=get_args(existing_resources),
        default="circleci_environment_variable",
        help="Resource type",
    )
    parser.add_argument(
        "--project", "-p",
        required=True,
        help="CircleCI project name",
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        default="{}",
        help='JSON config string (e.g. \'{"vcs_type":"github"}\')',
    )
    parser.add_argument(
        "--value-from-env",
        metavar="VAR",
        help="Read the value from this environment variable instead of argv",
    )
    parser.add_argument(
        "--value-fingerprint",
        default="",
        help="Persisted value fingerprint to carry through read/delete/import",
    )
    parser.add_argument(
        "operation",
        choices=OPERATIONS,
        help="Lifecycle operation to perform",
    )
    parser.add_argument(
        "name",
        help="Environment variable name (the record ID)",
    )
    parser.add_argument(
        "value",
        nargs="?",
        help="Value for 'create'",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Parses arguments, configures a client, builds a record and invokes the
    requested lifecycle operation. ``exists`` prints ``true``/``false``;
    other operations print the record state as JSON.

    Args:
        argv: Optional argument list (defaults to ``sys.argv``).
    """
    parser = _build_parser()
    ns = parser.parse_args(argv)

    try:
        config: dict[str, Any] = json.loads(ns.config)
    except json.JSONDecodeError as e:
        print(f"Invalid --config JSON: {e}", file=sys.stderr)
        sys.exit(1)

    value = ns.value
    if ns.value_from_env:
        value = os.environ.get(ns.value_from_env)
        if value is None:
            print(f"Environment variable {ns.value_from_env} is not set", file=sys.stderr)
            sys.exit(1)

    # Lazy-import so --help works without the HTTP stack
    from pydantic import ValidationError as ConfigError

    from circleci_provider.base.exceptions import CircleCIError
    from circleci_provider.provider import configure, resource_factory
    from circleci_provider.resources import EnvironmentVariableState

    try:
        client = configure(config)
    except ConfigError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)

    record = EnvironmentVariableState(
        id="" if ns.operation == "create" else ns.name,
        project=ns.project,
        name="" if ns.operation == "import" else ns.name,
        value=value,
        value_fingerprint=ns.value_fingerprint,
    )

    with client:
        resource = resource_factory(ns.resource, client)
        try:
            if ns.operation == "exists":
                print("true" if resource.exists(record) else "false")
                return
            if ns.operation == "create":
                resource.create(record)
            elif ns.operation == "read":
                resource.read(record)
            elif ns.operation == "delete":
                resource.delete(record)
            elif ns.operation == "import":
                for imported in resource.import_state(record):
                    resource.read(imported)
        except CircleCIError as e:
            print(f"Operation failed: {e}", file=sys.stderr)
            sys.exit(1)

    state = record.state()
    # Omit an unknown fingerprint instead of printing it as "".
    if not state["value_fingerprint"]:
        del state["value_fingerprint"]
    print(json.dumps(state, indent=2))


if __name__ == "__main__":
    main()
