"""Expand command implementation."""

import logging
import sys
from argparse import Namespace
from pathlib import Path
from typing import Dict, List, Optional

from varfilter.config import ConfigStore
from varfilter.directories import Directories
from varfilter.exceptions import FilterError
from varfilter.require import Package, build_require_filter


logger = logging.getLogger(__name__)


def parse_defines(pairs: Optional[List[str]]) -> Dict[str, str]:
    """
    Parse KEY=VALUE pairs.

    Raises:
        ValueError: If a pair has no '=' or an empty key
    """
    values: Dict[str, str] = {}
    for pair in pairs or []:
        if '=' not in pair:
            raise ValueError(f"Invalid define (expected KEY=VALUE): {pair}")
        key, value = pair.split('=', 1)
        if not key:
            raise ValueError(f"Invalid KEY in define: {pair}")
        values[key] = value
    return values


def setup_logging(args: Namespace) -> None:
    log_level = getattr(logging, args.log_level.upper())
    if args.debug:
        log_level = logging.DEBUG
    elif args.quiet:
        log_level = logging.ERROR
    elif args.verbose:
        log_level = logging.INFO

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def expand_templates(args: Namespace) -> int:
    """
    Expand templates given on the command line or in a file.

    Returns:
        0 on success, 1 on usage/IO errors, 2 on filter/config errors
    """
    setup_logging(args)

    if not args.templates and not args.file:
        logger.error("No templates given (pass TEMPLATE arguments or --file)")
        return 1
    if args.templates and args.file:
        logger.error("Pass either TEMPLATE arguments or --file, not both")
        return 1

    try:
        defines = parse_defines(args.define)
        package = None
        if args.package:
            builddir = Path(args.builddir) if args.builddir else None
            package = Package.parse(args.package, builddir)
    except ValueError as e:
        logger.error(str(e))
        return 2

    project_dir = Path(args.project_dir).resolve() if args.project_dir else None
    directories = Directories(project_dir=project_dir)

    try:
        config = ConfigStore.for_project(directories)
        for path in args.config or []:
            if not Path(path).exists():
                logger.error(f"Config file not found: {path}")
                return 1
            config.load(path)
        config.update(defines)

        require_filter = build_require_filter(config, directories)

        if args.file:
            template_path = Path(args.file)
            if not template_path.exists():
                logger.error(f"Template file not found: {template_path}")
                return 1
            logger.info(f"Expanding template file: {template_path}")
            templates = [template_path.read_text(encoding='utf-8')]
        else:
            templates = args.templates

        results = []
        for template in templates:
            if package is not None:
                results.append(require_filter.handle(template, package, strict=args.strict))
            else:
                results.append(require_filter.filter.expand(template, strict=args.strict))

    except FilterError as e:
        logger.error(str(e))
        return e.exit_code

    if args.file:
        sys.stdout.write(results[0])
    else:
        for result in results:
            print(result)

    return 0
