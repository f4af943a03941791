"""Command-line interface for the mht2html converter.

This module provides a CLI tool that turns MHTML web archives into
self-contained HTML files using the mht2html library.

Examples
--------
Basic conversion (HTML written to stdout):
    $ mht2html page.mhtml

Specify output file:
    $ mht2html page.mhtml --out page.html

Convert multiple files:
    $ mht2html *.mht --output-dir ./converted

Process directory recursively with rich output:
    $ mht2html ./archives --recursive --output-dir ./html --rich

Keep scripts out of the flattened page:
    $ mht2html page.mhtml --out page.html --no-inline-scripts

Write a diagnostics report of the inlined resources:
    $ mht2html page.mhtml --out page.html --report report.yaml --report-format yaml

Use environment variables for defaults:
    $ export MHT2HTML_RICH=true
    $ export MHT2HTML_OUTPUT_DIR=./converted
    $ mht2html *.mhtml  # Will use rich output and save to ./converted/
"""

import argparse
import json
import logging
import os
import sys
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import MISSING, dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from mht2html.api import convert_file, html_output_name
from mht2html.constants import DEFAULT_REPORT_FORMAT, ENV_VAR_PREFIX, MHTML_EXTENSIONS
from mht2html.exceptions import Mht2HtmlError, ValidationError
from mht2html.logging_utils import configure_logging
from mht2html.models import AssembledDocument
from mht2html.options import ConversionOptions
from mht2html.session import ConversionSession

logger = logging.getLogger(__name__)

_TRUTHY = ("true", "1", "yes", "on")


@dataclass
class FileOutcome:
    """Result of converting one input file."""

    input_path: str
    output_path: Optional[Path] = None
    error: Optional[str] = None
    document: Optional[AssembledDocument] = None

    @property
    def success(self) -> bool:
        return self.error is None

    def to_report(self) -> Dict[str, Any]:
        report: Dict[str, Any] = {
            "input": self.input_path,
            "output": str(self.output_path) if self.output_path else None,
            "success": self.success,
        }
        if self.error:
            report["error"] = self.error
        if self.document is not None:
            report.update(self.document.to_dict())
        return report


def get_env_var_value(key: str) -> Optional[str]:
    """Get environment variable with MHT2HTML_ prefix.

    Parameters
    ----------
    key : str
        The parameter name (e.g., 'rich', 'output_dir')

    Returns
    -------
    Optional[str]
        Environment variable value or None if not set
    """
    env_key = f"{ENV_VAR_PREFIX}{key.upper().replace('-', '_')}"
    return os.environ.get(env_key)


def apply_env_vars_to_parser(parser: argparse.ArgumentParser) -> None:
    """Apply environment variables as defaults to parser arguments.

    CLI arguments still take precedence over environment variables.
    """
    for action in parser._actions:
        if not action.dest or action.dest in ("help", "version", "input"):
            continue

        env_value = get_env_var_value(action.dest)
        if env_value is None:
            continue

        env_name = f"{ENV_VAR_PREFIX}{action.dest.upper()}"
        if action.nargs == 0 and isinstance(action.const, bool):
            action.default = env_value.lower() in _TRUTHY
        elif action.choices:
            if env_value in action.choices:
                action.default = env_value
            else:
                logger.warning(f"Invalid choice for {env_name}: {env_value}. Choices: {list(action.choices)}")
        elif action.type is not None and action.type is not str:
            try:
                action.default = action.type(env_value)
            except (argparse.ArgumentTypeError, ValueError):
                logger.warning(f"Invalid value for {env_name}: {env_value}")
        else:
            action.default = env_value


def _get_version() -> str:
    """Get the version of the mht2html package."""
    from importlib.metadata import PackageNotFoundError, version

    try:
        return version("mht2html")
    except PackageNotFoundError:
        return "unknown"


def _get_about_info() -> str:
    """Get detailed information about mht2html."""
    return f"""mht2html {_get_version()}

Convert MHTML (.mht/.mhtml) web archives into single, self-contained
HTML files that render without external fetches.

Features:
  • Images inlined as data: URIs
  • Stylesheets and scripts embedded as <style>/<script> blocks
  • base64 and quoted-printable transfer encodings
  • Scroll-safety styling for archived pages
  • JSON/YAML reports of the inlined resources
  • Rich terminal output and progress bars

License: MIT License"""


def positive_int(value: str) -> int:
    """Argparse type accepting strictly positive integers."""
    try:
        ivalue = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"{value} is not a valid integer") from e
    if ivalue <= 0:
        raise argparse.ArgumentTypeError(f"{value} must be a positive integer")
    return ivalue


def add_conversion_option_arguments(parser: argparse.ArgumentParser) -> None:
    """Add one flag per ConversionOptions field, driven by field metadata.

    Every flag defaults to None so that only options given on the command
    line (or through the environment) override an options file.
    """
    group = parser.add_argument_group("conversion options")
    for option_field in fields(ConversionOptions):
        help_text = option_field.metadata.get("help", "")
        default = option_field.default if option_field.default is not MISSING else None

        if isinstance(default, bool):
            if default:
                flag = option_field.metadata.get("cli_negated_name", f"--no-{option_field.name.replace('_', '-')}")
                group.add_argument(
                    flag, dest=option_field.name, action="store_const", const=False, default=None,
                    help=f"Disable: {help_text}",
                )
            else:
                group.add_argument(
                    f"--{option_field.name.replace('_', '-')}", dest=option_field.name,
                    action="store_const", const=True, default=None, help=help_text,
                )
        else:
            group.add_argument(
                f"--{option_field.name.replace('_', '-')}", dest=option_field.name,
                type=positive_int, default=None, metavar="N", help=help_text,
            )


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="mht2html",
        description="Convert MHTML web archives into self-contained HTML files.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "input", nargs="*", help="Input .mht/.mhtml files, directories, glob patterns, or '-' for stdin"
    )
    parser.add_argument("--out", "-o", type=str, help="Output file path (single input only)")
    parser.add_argument("--version", "-v", action="version", version=f"mht2html {_get_version()}")
    parser.add_argument("--about", action="store_true", help="Show detailed information about mht2html and exit")

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", type=str, help="Also write log output to this file")
    parser.add_argument("--trace", action="store_true", help="Timestamped log format with logger names")

    parser.add_argument("--rich", action="store_true", help="Enable rich terminal output with formatting")
    parser.add_argument(
        "--progress",
        action="store_true",
        help="Show progress bar for file conversions (automatically enabled for multiple files)",
    )
    parser.add_argument("--output-dir", type=str, help="Directory to save converted files (for multi-file processing)")
    parser.add_argument("--recursive", "-r", action="store_true", help="Process directories recursively")
    parser.add_argument(
        "--parallel",
        "-p",
        type=positive_int,
        default=1,
        help="Convert files in parallel with this many worker processes",
    )
    parser.add_argument("--skip-errors", action="store_true", help="Continue processing remaining files if one fails")
    parser.add_argument("--no-summary", action="store_true", help="Disable summary output after processing files")

    parser.add_argument("--report", type=str, help="Write a diagnostics report of the inlined resources to this file")
    parser.add_argument(
        "--report-format",
        choices=["json", "yaml"],
        default=DEFAULT_REPORT_FORMAT,
        help="Format of the --report file (default: json)",
    )
    parser.add_argument("--options-json", type=str, help="Load conversion options from a JSON file")

    add_conversion_option_arguments(parser)

    apply_env_vars_to_parser(parser)

    return parser


def load_options_from_json(json_file_path: str) -> dict:
    """Load conversion options from a JSON file.

    Raises
    ------
    argparse.ArgumentTypeError
        If the file cannot be read, is not a JSON object, or names unknown options.
    """
    try:
        with open(json_file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise argparse.ArgumentTypeError(f"Options file not found: {json_file_path}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise argparse.ArgumentTypeError(f"Error reading options file {json_file_path}: {e}") from e

    if not isinstance(data, dict):
        raise argparse.ArgumentTypeError(f"Options file must contain a JSON object: {json_file_path}")

    unknown = set(data) - ConversionOptions.field_names()
    if unknown:
        raise argparse.ArgumentTypeError(f"Unknown option(s) in {json_file_path}: {', '.join(sorted(unknown))}")

    return data


def map_args_to_options(parsed_args: argparse.Namespace, json_options: Optional[dict] = None) -> ConversionOptions:
    """Build ConversionOptions from an options file and command-line flags.

    Raises
    ------
    ValidationError
        If the resulting options are invalid.
    """
    values: Dict[str, Any] = dict(json_options or {})
    for name in ConversionOptions.field_names():
        cli_value = getattr(parsed_args, name, None)
        if cli_value is not None:
            values[name] = cli_value

    try:
        return ConversionOptions(**values)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid conversion options: {e}", original_error=e) from e


def collect_input_files(input_paths: List[str], recursive: bool = False) -> List[Path]:
    """Collect archive files from paths, directories, and glob patterns."""
    files: List[Path] = []

    for input_path_str in input_paths:
        input_path = Path(input_path_str)

        if "*" in input_path_str:
            files.extend(p for p in Path.cwd().glob(input_path_str) if p.suffix.lower() in MHTML_EXTENSIONS)
        elif input_path.is_file():
            files.append(input_path)
        elif input_path.is_dir():
            for ext in MHTML_EXTENSIONS:
                pattern = f"*{ext}"
                files.extend(input_path.rglob(pattern) if recursive else input_path.glob(pattern))
        else:
            logger.warning(f"Path does not exist: {input_path}")

    return sorted(set(files))


def generate_output_path(input_file: Path, output_dir: Optional[Path] = None) -> Path:
    """Generate the HTML output path for an archive."""
    output_name = html_output_name(input_file)
    if output_dir:
        output_dir.mkdir(parents=True, exist_ok=True)
        return output_dir / output_name
    return input_file.parent / output_name


def convert_single_file(input_path: Path, output_path: Optional[Path], options: ConversionOptions) -> FileOutcome:
    """Convert one archive, writing to ``output_path`` or stdout."""
    session = ConversionSession(options=options)
    try:
        document = session.load(input_path)
        if output_path:
            written = session.save(output_path)
            return FileOutcome(str(input_path), written, None, document)
        print(document.html)
        return FileOutcome(str(input_path), None, None, document)
    except Mht2HtmlError as e:
        return FileOutcome(str(input_path), output_path, e.message)


def write_report(outcomes: List[FileOutcome], report_path: str, report_format: str) -> None:
    """Write the per-file diagnostics report as JSON or YAML."""
    payload = {"files": [outcome.to_report() for outcome in outcomes]}
    if report_format == "yaml":
        text = yaml.safe_dump(payload, sort_keys=False, allow_unicode=True)
    else:
        text = json.dumps(payload, indent=2, ensure_ascii=False)

    path = Path(report_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    logger.info(f"Report written to {path}")


def _print_resource_table(console: Any, outcome: FileOutcome) -> None:
    from rich.table import Table

    if outcome.document is None:
        return
    table = Table(title=f"Resources in {Path(outcome.input_path).name}")
    table.add_column("Location", style="cyan", overflow="fold")
    table.add_column("Type", style="magenta")
    table.add_column("Size", justify="right")
    table.add_column("Status")
    for resource in outcome.document.resources:
        table.add_row(
            resource.location or "", resource.content_type, str(len(resource.content)), "[green]inlined[/green]"
        )
    for resource in outcome.document.unreferenced:
        table.add_row(
            resource.location or "", resource.content_type, str(len(resource.content)), "[yellow]unused[/yellow]"
        )
    console.print(table)


def process_with_rich_output(
    files: List[Path], args: argparse.Namespace, options: ConversionOptions
) -> List[FileOutcome]:
    """Process files with rich terminal output."""
    from rich.console import Console
    from rich.panel import Panel
    from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
    from rich.table import Table
    from rich.text import Text

    console = Console(stderr=True)
    output_dir = Path(args.output_dir) if args.output_dir else None

    console.print(
        Panel.fit(Text("mht2html Archive Converter", style="bold cyan"), subtitle=f"Processing {len(files)} file(s)")
    )

    outcomes: List[FileOutcome] = []
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
    ) as progress:
        task_id = progress.add_task("[cyan]Converting files...", total=len(files))

        for file in files:
            output_path = Path(args.out) if args.out and len(files) == 1 else generate_output_path(file, output_dir)
            outcome = convert_single_file(file, output_path, options)
            outcomes.append(outcome)

            if outcome.success:
                console.print(f"[green]✓[/green] {file} → {outcome.output_path}")
            else:
                console.print(f"[red]✗[/red] {file}: {outcome.error}")
                if not args.skip_errors:
                    break

            progress.update(task_id, advance=1)

    if len(files) == 1 and outcomes and outcomes[0].success:
        _print_resource_table(console, outcomes[0])

    if not args.no_summary:
        failed = [o for o in outcomes if not o.success]
        console.print()
        table = Table(title="Conversion Summary")
        table.add_column("Status", style="cyan", no_wrap=True)
        table.add_column("Count", style="magenta")
        table.add_row("✓ Successful", str(len(outcomes) - len(failed)))
        table.add_row("✗ Failed", str(len(failed)))
        table.add_row("Total", str(len(files)))
        console.print(table)

    return outcomes


def process_with_progress_bar(
    files: List[Path], args: argparse.Namespace, options: ConversionOptions
) -> List[FileOutcome]:
    """Process files with a tqdm progress bar."""
    from tqdm import tqdm

    output_dir = Path(args.output_dir) if args.output_dir else None
    outcomes: List[FileOutcome] = []

    with tqdm(files, desc="Converting files", unit="file") as pbar:
        for file in pbar:
            pbar.set_postfix_str(f"Processing {file.name}")
            outcome = convert_single_file(file, generate_output_path(file, output_dir), options)
            outcomes.append(outcome)

            if outcome.success:
                pbar.write(f"Converted {file} -> {outcome.output_path}", file=sys.stderr)
            else:
                pbar.write(f"Error: Failed to convert {file}: {outcome.error}", file=sys.stderr)
                if not args.skip_errors:
                    break

    if not args.no_summary:
        succeeded = sum(1 for o in outcomes if o.success)
        print(f"\nConversion complete: {succeeded}/{len(files)} files successful", file=sys.stderr)

    return outcomes


def process_files_parallel(
    files: List[Path], args: argparse.Namespace, options: ConversionOptions
) -> List[FileOutcome]:
    """Convert files in worker processes; results are reported as they finish."""
    output_dir = Path(args.output_dir) if args.output_dir else None
    outcomes: List[FileOutcome] = []

    with ProcessPoolExecutor(max_workers=args.parallel) as executor:
        futures = {
            executor.submit(convert_single_file, file, generate_output_path(file, output_dir), options): file
            for file in files
        }
        for future in as_completed(futures):
            outcome = future.result()
            outcomes.append(outcome)
            if outcome.success:
                print(f"Converted {outcome.input_path} -> {outcome.output_path}", file=sys.stderr)
            else:
                print(f"Error: Failed to convert {outcome.input_path}: {outcome.error}", file=sys.stderr)
                if not args.skip_errors:
                    for pending in futures:
                        pending.cancel()
                    break

    if not args.no_summary:
        succeeded = sum(1 for o in outcomes if o.success)
        print(f"\nConversion complete: {succeeded}/{len(files)} files successful", file=sys.stderr)

    return outcomes


def _convert_stdin(parsed_args: argparse.Namespace, options: ConversionOptions) -> FileOutcome:
    try:
        stdin_data = sys.stdin.buffer.read()
    except OSError as e:
        return FileOutcome("<stdin>", error=f"Error reading from stdin: {e}")
    if not stdin_data:
        return FileOutcome("<stdin>", error="No data received from stdin")

    try:
        document = convert_file(stdin_data, options)
    except Mht2HtmlError as e:
        return FileOutcome("<stdin>", error=e.message)

    if parsed_args.out:
        output_path = Path(parsed_args.out)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(document.html, encoding="utf-8", newline="")
        except OSError as e:
            return FileOutcome("<stdin>", output_path, f"Failed to write output file: {output_path}: {e}")
        print(f"Converted stdin -> {output_path}", file=sys.stderr)
        return FileOutcome("<stdin>", output_path, None, document)

    print(document.html)
    return FileOutcome("<stdin>", None, None, document)


def _finish(outcomes: List[FileOutcome], parsed_args: argparse.Namespace) -> int:
    if parsed_args.report:
        try:
            write_report(outcomes, parsed_args.report, parsed_args.report_format)
        except (OSError, yaml.YAMLError) as e:
            print(f"Error: Could not write report {parsed_args.report}: {e}", file=sys.stderr)
            return 1
    return 0 if outcomes and all(o.success for o in outcomes) else 1


def main(args: Optional[list[str]] = None) -> int:
    """Run the mht2html command line."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if parsed_args.about:
        print(_get_about_info())
        return 0

    if not parsed_args.input:
        print("Error: Input file is required", file=sys.stderr)
        return 1

    configure_logging(parsed_args.log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)

    json_options = None
    if parsed_args.options_json:
        try:
            json_options = load_options_from_json(parsed_args.options_json)
        except argparse.ArgumentTypeError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    try:
        options = map_args_to_options(parsed_args, json_options)
    except ValidationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    if len(parsed_args.input) == 1 and parsed_args.input[0] == "-":
        outcome = _convert_stdin(parsed_args, options)
        if not outcome.success:
            print(f"Error: {outcome.error}", file=sys.stderr)
        return _finish([outcome], parsed_args)

    files = collect_input_files(parsed_args.input, parsed_args.recursive)
    if not files:
        print("Error: No valid input files found", file=sys.stderr)
        return 1

    if parsed_args.output_dir:
        output_dir_path = Path(parsed_args.output_dir)
        if output_dir_path.exists() and not output_dir_path.is_dir():
            print(f"Error: --output-dir must be a directory, not a file: {parsed_args.output_dir}", file=sys.stderr)
            return 1

    if len(files) > 1 and parsed_args.out and not parsed_args.output_dir:
        print("Warning: --out is ignored for multiple files. Use --output-dir instead.", file=sys.stderr)

    if parsed_args.rich:
        return _finish(process_with_rich_output(files, parsed_args, options), parsed_args)

    if len(files) == 1 and not parsed_args.progress:
        file = files[0]
        if parsed_args.out:
            output_path: Optional[Path] = Path(parsed_args.out)
        elif parsed_args.output_dir:
            output_path = generate_output_path(file, Path(parsed_args.output_dir))
        else:
            output_path = None

        outcome = convert_single_file(file, output_path, options)
        if outcome.success:
            if outcome.output_path:
                print(f"Converted {file} -> {outcome.output_path}", file=sys.stderr)
        else:
            print(f"Error: {outcome.error}", file=sys.stderr)
        return _finish([outcome], parsed_args)

    if parsed_args.parallel > 1:
        return _finish(process_files_parallel(files, parsed_args, options), parsed_args)

    return _finish(process_with_progress_bar(files, parsed_args, options), parsed_args)


if __name__ == "__main__":
    sys.exit(main())
