"""
Main entry point for the Solidity risk scanner.
"""
import sys
import logging
import argparse
from typing import List, Optional, Tuple

from risk_scanner.config import Settings
from risk_scanner.exceptions import AuditError
from risk_scanner.data.example_contracts import get_example, list_examples
from risk_scanner.services.auditor import SolidityAuditor
from risk_scanner.services.copilot import AuditCopilot
from risk_scanner.services.report_generator import ReportGenerator
from risk_scanner.services.risk_scorer import RiskScorer

logger = logging.getLogger(__name__)


def setup_logging(log_level: str, log_file: Optional[str] = None):
    """
    Set up logging configuration.

    Args:
        log_level: Logging level
        log_file: Path to log file
    """
    handlers = [logging.StreamHandler()]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers
    )


def read_source(args) -> Tuple[str, str]:
    """
    Resolve the contract source from --example, --file or stdin.

    Returns:
        Tuple of (source name, source text)
    """
    if args.example:
        example = get_example(args.example)
        if example is None:
            logger.error(f"Unknown example {args.example!r}")
            sys.exit(1)
        return f"{example.id}.sol", example.code

    if args.file and args.file != '-':
        with open(args.file, 'r', encoding='utf-8') as f:
            return args.file, f.read()

    return "<stdin>", sys.stdin.read()


def build_auditor(args, config: Settings) -> SolidityAuditor:
    if args.thresholds:
        config = config.model_copy(update={"risk_thresholds": args.thresholds})
    return SolidityAuditor.from_settings(config)


def analyze(args, config: Settings):
    """
    Audit one contract and write the report.

    Args:
        args: Command line arguments
        config: Application configuration
    """
    source_name, source_text = read_source(args)
    auditor = build_auditor(args, config)

    try:
        audit_result = auditor.audit_source(source_text, args.mode)
    except AuditError as e:
        logger.error(f"Audit failed: {e}")
        sys.exit(1)

    report_format = args.format or config.default_report_format
    report = ReportGenerator().generate(audit_result, report_format, source_name)

    # Write report to file or stdout
    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            f.write(report)
        logger.info(f"Audit report written to {args.output}")
    else:
        print(report)


def show_examples(args, config: Settings):
    """Print the example contract library."""
    for example in list_examples():
        print(f"{example.id:<20} {example.risk_level:<8} {example.name} - {example.description}")


def explain(args, config: Settings):
    """Audit a contract and ask the copilot about the result."""
    source_name, source_text = read_source(args)
    auditor = build_auditor(args, config)

    try:
        audit_result = auditor.audit_source(source_text, args.mode)
        copilot = AuditCopilot(
            audit_result,
            source_text,
            api_key=config.openai_api_key,
            model=config.openai_model,
            api_base_url=config.api_base_url
        )
        print(copilot.ask(args.question))
    except AuditError as e:
        logger.error(f"Explain failed: {e}")
        sys.exit(1)


def _add_source_arguments(parser: argparse.ArgumentParser):
    source = parser.add_mutually_exclusive_group()
    source.add_argument('--file', help='Path to a Solidity file ("-" or omitted reads stdin)')
    source.add_argument('--example', help='Id of a bundled example contract')
    parser.add_argument('--mode', choices=['source', 'address'], default='source',
                        help='How the input should be interpreted')
    parser.add_argument('--thresholds', choices=sorted(RiskScorer.THRESHOLD_TABLES),
                        help='Score-to-level threshold table')


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    parser = argparse.ArgumentParser(description='Solidity Risk Scanner')
    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    analyze_parser = subparsers.add_parser('analyze', help='Audit a contract')
    _add_source_arguments(analyze_parser)
    analyze_parser.add_argument('--output', help='Path to output file')
    analyze_parser.add_argument('--format', choices=ReportGenerator.FORMATS, help='Output format')

    subparsers.add_parser('examples', help='List the bundled example contracts')

    explain_parser = subparsers.add_parser('explain', help='Ask the audit copilot about a contract')
    _add_source_arguments(explain_parser)
    explain_parser.add_argument('--question', default='What are the most serious issues?',
                                help='Question for the copilot')

    args = parser.parse_args(argv)

    # Load configuration
    config = Settings()

    # Set up logging
    setup_logging(config.log_level, config.log_file)

    if args.command == 'analyze':
        analyze(args, config)
    elif args.command == 'examples':
        show_examples(args, config)
    elif args.command == 'explain':
        explain(args, config)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == '__main__':
    main()
