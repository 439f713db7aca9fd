"""
Command-line entry point.

Loads the handler named by _HANDLER (``<module>.<name>``) from the task root,
registers it and runs the invocation loop.
"""

import argparse
import importlib
import logging
import sys
from typing import Callable, List, Optional

from .config import RuntimeConfig, load_config
from .core.exceptions import BootstrapError, ConfigurationError
from .core.logging_config import setup_logging
from .runtime import Runtime

logger = logging.getLogger("bootstrap.cli")


def parse_args(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Function runtime bootstrap")
    parser.add_argument(
        "--task-root", type=str, help="Directory added to sys.path (default: LAMBDA_TASK_ROOT)"
    )
    parser.add_argument(
        "--handler-module",
        type=str,
        help="Module to import instead of the module part of _HANDLER",
    )
    parser.add_argument(
        "--log-config", type=str, help="YAML logging config (default: LOG_CONFIG_PATH)"
    )
    return parser.parse_args(argv)


def load_handler(config: RuntimeConfig, module_name: Optional[str] = None) -> Callable:
    """
    Import the selector's module and return its exported handler.

    Raises:
        ConfigurationError: the module cannot be imported or lacks the attribute
    """
    module_name = module_name or config.handler_module
    try:
        module = importlib.import_module(module_name)
    except Exception as e:
        # Any import-time failure in user code (SyntaxError included) is fatal.
        raise ConfigurationError(f"Unable to import handler module '{module_name}': {e}") from e

    function = getattr(module, config.handler_name, None)
    if function is None:
        raise ConfigurationError(
            f"Handler '{config.handler_name}' is not defined in module '{module_name}'"
        )
    return function


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        config = load_config()
    except ConfigurationError as e:
        setup_logging(args.log_config or "logging.yml")
        logger.error(str(e))
        return 1

    setup_logging(args.log_config or config.LOG_CONFIG_PATH, config.LOG_LEVEL)

    task_root = args.task_root or config.LAMBDA_TASK_ROOT
    if task_root and task_root not in sys.path:
        sys.path.insert(0, task_root)

    try:
        runtime = Runtime(config)
        runtime.register(config.handler_name, load_handler(config, args.handler_module))
        runtime.start()
    except BootstrapError as e:
        logger.error(f"Runtime terminated: {e}", exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
