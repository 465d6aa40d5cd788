from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration merge and
validation, startup checks, pipeline execution and result rendering.
"""

import json
import os
import sys
from typing import List, Optional

from assetpathdumper.core.pipeline.engine import run_pipeline
from assetpathdumper.core.pipeline.validator import validate_config
from assetpathdumper.domain.errors import InvalidInputPath, MissingClassDatabase
from assetpathdumper.domain.models import PipelineResult
from assetpathdumper.infra.logging import LoggingConfig, configure_logging, get_logger
from assetpathdumper.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FATAL = -1
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: 0 on success, -1 for fatal startup conditions, 1 for
             unexpected failures, 130 when interrupted.
    """
    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Logging bootstrap (console on stderr, optional rotating file)
    configure_logging(LoggingConfig(
        level=cli_args.log_level(args),
        console=True,
        log_file=args.log_file,
    ))

    # 3. Configuration merge and normalization
    clean_conf, warnings = validate_config(cli_args.args_to_overrides(args), strict=False)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    # 4. Pre-flight input verification
    input_path = clean_conf["input_path"]
    if not input_path:
        print("No file/directory specified")
        return EXIT_FATAL
    if not os.path.isfile(input_path) and not os.path.isdir(input_path):
        print("Specified file/directory was not found")
        return EXIT_FATAL

    # 5. Pipeline execution phase
    logger.info(f"Targeting input: {input_path}")
    try:
        result = run_pipeline(clean_conf)
    except InvalidInputPath as e:
        print(str(e))
        return EXIT_FATAL
    except MissingClassDatabase as e:
        logger.critical(str(e))
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FATAL
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        print("Interrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED
    except OSError as e:
        logger.critical(f"Cannot write report: {e}", exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_ERROR

    # 6. Output rendering phase
    if args.json_output:
        print(json.dumps(result.summary(), ensure_ascii=False, indent=2))
    else:
        _print_failures(result)

    print("Done")
    return EXIT_OK

# -----------------------------------------------------------------------------
# VIEW RENDERING
# -----------------------------------------------------------------------------

def _print_failures(result: PipelineResult) -> None:
    """List the files that failed inside their failure boundary."""
    if not result.failures:
        return
    print(f"{len(result.failures)} file(s) could not be processed:", file=sys.stderr)
    for failure in result.failures:
        print(f"  - {failure.file_path}: {failure.error}", file=sys.stderr)

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
