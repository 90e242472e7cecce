"""
Report Distribution Command Line

Emails an exported report to everyone on a distribution list.

Usage:
    # Send with the list and sender configured through the environment
    send-report --subject "Weekly report" --body "Attached." --attachment out/weekly.xlsx

    # Explicit list, body from a file, no email actually sent
    send-report --list recipients.csv --subject "Weekly report" \\
        --body-file body.txt --from reports@example.com --sender-name "Reporting" --dry-run

Exit codes: 0 delivered, 1 load/validation/dispatch failure, 2 usage error.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from config.settings import Settings, get_settings
from notifications.email_provider import NullEmailProvider, create_email_provider
from notifications.notifier import Notifier, NotifierConfig

from .exceptions import ReportDistributionError
from .loader import load_distribution_list

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="send-report",
        description="Email a report to the recipients of a distribution list",
    )
    parser.add_argument("--list", dest="list_path", type=Path, default=None,
                        help="Distribution list file (default: DISTRIBUTION_LIST_PATH)")
    parser.add_argument("--role-column", default=None, help="Header of the role column")
    parser.add_argument("--address-column", default=None, help="Header of the address column")
    parser.add_argument("--delimiter", default=None, help="Field delimiter (detected when omitted)")
    parser.add_argument("--encoding", default=None, help="Distribution list encoding")

    parser.add_argument("--subject", required=True, help="Email subject")
    body = parser.add_mutually_exclusive_group(required=True)
    body.add_argument("--body", default=None, help="Email body text")
    body.add_argument("--body-file", type=Path, default=None, help="File containing the email body text")
    parser.add_argument("--attachment", default=None, help="Report file to attach")

    parser.add_argument("--from", dest="from_address", default=None,
                        help="Sender address (default: SENDER_FROM_ADDRESS)")
    parser.add_argument("--sender-name", default=None,
                        help="Name used in the signature (default: SENDER_SENDER_NAME)")

    parser.add_argument("--provider", choices=["auto", "smtp", "sendgrid", "null"], default=None,
                        help="Mail transport (default: MAIL_PROVIDER)")
    parser.add_argument("--dry-run", action="store_true", help="Log the email instead of sending it")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def configure_logging(verbose: bool, settings: Settings) -> None:
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)


def _parse_delimiter(value: Optional[str]) -> Optional[str]:
    if value == "\\t":
        return "\t"
    return value or None


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(args.verbose, settings)

    dist_settings = settings.distribution
    sender_settings = settings.sender

    list_path = args.list_path or dist_settings.list_path
    if list_path is None:
        parser.error("no distribution list given (use --list or set DISTRIBUTION_LIST_PATH)")

    if args.body_file is not None:
        try:
            body_text = args.body_file.read_text(encoding="utf-8")
        except OSError as e:
            print(f"error: cannot read body file {args.body_file}: {e}", file=sys.stderr)
            return 1
    else:
        body_text = args.body

    if args.dry_run:
        provider = NullEmailProvider()
    else:
        mail_settings = settings.mail
        if args.provider:
            mail_settings = mail_settings.model_copy(update={"provider": args.provider})
        provider = create_email_provider(mail_settings)

    try:
        distribution_list = load_distribution_list(
            list_path,
            role_column=args.role_column or dist_settings.role_column,
            address_column=args.address_column or dist_settings.address_column,
            delimiter=_parse_delimiter(args.delimiter) or dist_settings.delimiter,
            encoding=args.encoding or dist_settings.encoding,
        )
        notifier = Notifier(NotifierConfig(
            distribution_list=distribution_list,
            provider=provider,
            default_from_address=sender_settings.from_address,
            default_sender_name=sender_settings.sender_name,
        ))
        result = notifier.notify(
            subject=args.subject,
            body_text=body_text,
            attachment_path=args.attachment,
            from_address=args.from_address,
            sender_name=args.sender_name,
        )
    except ReportDistributionError as e:
        logger.error(f"{type(e).__name__}: {e}")
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(f"Report sent via {result.provider} (message_id={result.message_id or '-'})")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
