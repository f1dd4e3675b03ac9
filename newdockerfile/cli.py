"""CLI entrypoints for new-dockerfile commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Dict, List, Tuple

from jinja2 import TemplateError

from .config import ConfigError, NewDockerfileConfig, load_config
from .dockerfile import Dockerfile, RuntimeNotDetectedError, UnknownRuntimeError
from .logging import configure_logging, get_logger
from .rendering import TemplateRenderer


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Log every detection decision.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )


def _parse_override(value: str) -> Tuple[str, str]:
    key, sep, item = value.partition("=")
    if not sep or not key.strip():
        raise argparse.ArgumentTypeError(
            f"expected KEY=VALUE, got {value!r}"
        )
    return key.strip(), item


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="new-dockerfile",
        description="Detect a project's runtime and generate a Dockerfile for it.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate a Dockerfile for the project.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_path_argument(generate_parser)
    generate_parser.add_argument(
        "--runtime",
        help="Skip detection and use this runtime (case-insensitive).",
    )
    generate_parser.add_argument(
        "--output",
        help="File name to write inside the project (defaults to Dockerfile).",
    )
    generate_parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the Dockerfile instead of writing it.",
    )
    generate_parser.add_argument(
        "--set",
        dest="overrides",
        metavar="KEY=VALUE",
        action="append",
        type=_parse_override,
        default=[],
        help="Override a template value, e.g. --set InstallMounts='--mount=type=cache,target=/root/.npm '.",
    )

    detect_parser = subparsers.add_parser(
        "detect",
        help="Print the runtime detected for the project.",
    )
    _add_verbose_option(detect_parser, suppress_default=True)
    _add_path_argument(detect_parser)

    runtimes_parser = subparsers.add_parser(
        "runtimes",
        help="List supported runtimes in detection order.",
    )
    _add_verbose_option(runtimes_parser, suppress_default=True)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for new-dockerfile commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))
    logger = get_logger()

    if args.command == "runtimes":
        for name in Dockerfile(logger=logger).runtime_names():
            print(name)
        return

    if args.command == "serve":
        from .service.app import run_service

        run_service(host=args.host, port=args.port)
        return

    project = Path(args.path)
    if not project.is_dir():
        parser.exit(1, f"Project path not found: {project}\n")

    try:
        config = load_config(project)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    dockerfile = Dockerfile(
        logger=logger, renderer=TemplateRenderer(config.templates_dir)
    )

    if args.command == "detect":
        try:
            runtime = dockerfile.match_runtime(project)
        except RuntimeNotDetectedError as exc:
            parser.exit(1, f"{exc}\n")
        print(runtime.name.value)
    elif args.command == "generate":
        _run_generate(parser, args, dockerfile, config, project)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_generate(
    parser: argparse.ArgumentParser,
    args: argparse.Namespace,
    dockerfile: Dockerfile,
    config: NewDockerfileConfig,
    project: Path,
) -> None:
    overrides = _merge_overrides(config.overrides, args.overrides)
    runtime = args.runtime or config.runtime
    output = args.output or config.output
    try:
        if args.stdout:
            contents = dockerfile.generate(project, runtime=runtime, overrides=overrides)
            sys.stdout.write(contents.decode("utf-8"))
            return
        destination = dockerfile.write(
            project, output=output, runtime=runtime, overrides=overrides
        )
    except (UnknownRuntimeError, RuntimeNotDetectedError) as exc:
        parser.exit(1, f"{exc}\n")
    except (OSError, ValueError, TemplateError) as exc:
        parser.exit(
            1,
            f"new-dockerfile generate failed: {exc}\nRun with --verbose for more details.\n",
        )
    print(f"Dockerfile written to {_relativize(destination)}")


def _merge_overrides(
    configured: Dict[str, str], cli_pairs: List[Tuple[str, str]]
) -> Dict[str, str]:
    merged = dict(configured)
    merged.update(cli_pairs)
    return merged


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
