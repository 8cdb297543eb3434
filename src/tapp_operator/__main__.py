"""Entry point for the TApp hash operator.

Usage:
    tapp-operator [--namespace NS ...] [--verbose]

Without --namespace the operator watches TApps in all namespaces.
"""

import argparse
import subprocess
import sys
from typing import Optional


def build_command(args: argparse.Namespace) -> list[str]:
    """Build the ``kopf run`` command line for the parsed arguments."""
    command = [sys.executable, "-m", "kopf", "run", "--standalone"]
    if args.namespace:
        for namespace in args.namespace:
            command += ["--namespace", namespace]
    else:
        command.append("--all-namespaces")
    if args.verbose:
        command.append("--verbose")
    command += ["-m", "tapp_operator.operator"]
    return command


def main(argv: Optional[list[str]] = None):
    """Run the operator using kopf."""
    parser = argparse.ArgumentParser(
        prog="tapp-operator",
        description="Keep pod template hash labels current on TApp resources.",
    )
    parser.add_argument(
        "-n",
        "--namespace",
        action="append",
        help="namespace to watch (repeatable; default: all namespaces)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="verbose kopf logging")
    args = parser.parse_args(argv)

    subprocess.run(build_command(args), check=True)


if __name__ == "__main__":
    main()
