# src/cli/validate_files.py

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from incremental.context import MARKER_FILE_NAME, MarkerFileBuildContext, NonIncrementalBuildContext
from layout.resolver import resolve_working_area
from settings.loader import load_settings
from validation.errors import ConfigurationError, ValidationFailure
from validation.runner import run_validation

from .logging_config import configure_logging

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_VALIDATION_FAILED = 1
EXIT_CONFIGURATION_ERROR = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate the content and metadata trees of a content package before it is built."
    )
    parser.add_argument("--basedir", default=".", help="Base directory of the project to validate")
    parser.add_argument("--config", default=None, help="Settings file (default: <basedir>/vault-validate.yaml)")
    parser.add_argument(
        "--goal",
        dest="goals",
        action="append",
        default=None,
        help="Goal requested for this build invocation (repeatable), e.g. 'package' or 'filevault-package:validate-files'",
    )
    parser.add_argument("--classifier", default=None, help="Classifier of the package being built")
    parser.add_argument(
        "--incremental",
        action="store_true",
        help="Incremental build: keep violation markers between runs and never defer to validate-package",
    )
    parser.add_argument(
        "--fail-on-warnings",
        dest="fail_on_validation_warnings",
        action="store_const",
        const=True,
        default=None,
        help="Fail on warnings as well as errors",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.INFO)

    basedir = Path(args.basedir).resolve()
    try:
        settings = load_settings(
            basedir,
            config_path=Path(args.config) if args.config else None,
            overrides={
                "goals": args.goals,
                "classifier": args.classifier,
                "fail_on_validation_warnings": args.fail_on_validation_warnings,
            },
        )
    except ConfigurationError as exc:
        log.error("Invalid configuration: %s", exc)
        return EXIT_CONFIGURATION_ERROR

    if args.incremental:
        work_directory = resolve_working_area(settings.work_directory, settings.classifier, for_writing=True)
        build_context = MarkerFileBuildContext(work_directory / MARKER_FILE_NAME)
    else:
        build_context = NonIncrementalBuildContext()

    try:
        run_validation(settings, build_context)
    except ConfigurationError as exc:
        log.error("Could not execute validation: %s", exc)
        return EXIT_CONFIGURATION_ERROR
    except ValidationFailure as exc:
        log.error("%s", exc)
        return EXIT_VALIDATION_FAILED
    finally:
        if isinstance(build_context, MarkerFileBuildContext):
            build_context.save()
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
