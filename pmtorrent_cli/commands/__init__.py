"""
CLI command modules.
"""

from argparse import Namespace

# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def wants_json(args: Namespace) -> bool:
    """--json on the command line wins, otherwise the configured output format."""
    if getattr(args, "json", None) is not None:
        return bool(args.json)
    config = getattr(args, "runtime_config", None)
    return config is not None and config.output_format == "json"


__all__ = [
    "EXIT_SUCCESS",
    "EXIT_RUNTIME_ERROR",
    "EXIT_VERIFICATION_FAILED",
    "wants_json",
]
