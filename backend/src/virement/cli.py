#!/usr/bin/env python3
"""
Transfer order CLI - generate an order PDF without the API.

Usage:
    virement --account acc1 --supplier 6 --amount 1234.56 --purpose "Facture 118"
    virement --account acc1 --supplier 6 --amount 500 --purpose "Avance" \\
        --letterhead papier_en_tete.pdf --express
    virement --words 1234.56
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from virement.config import get_settings
from virement.domain.errors import MalformedLetterheadError, TransferOrderError
from virement.domain.models import Currency, Letterhead
from virement.domain.numerals import amount_to_words
from virement.infrastructure.directory import AccountDirectory
from virement.services.exporter import FileExporter
from virement.services.generation import TransferOrderService


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the command line."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        datefmt="%H:%M:%S",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate a bank transfer order PDF",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Order on the built-in template
  virement --account acc1 --supplier 6 --amount 1234.56 --purpose "Facture 118"

  # Order printed over a letterhead
  virement --account acc1 --supplier 6 --amount 500 --purpose "Avance" --letterhead entete.pdf

  # List accounts and suppliers
  virement --list

  # Spell an amount only
  virement --words 1234.56
        """,
    )

    parser.add_argument("--account", help="Payer account id")
    parser.add_argument("--supplier", help="Beneficiary (supplier) id")
    parser.add_argument("--amount", help="Amount, e.g. 1234.56 or '1 234,56'")
    parser.add_argument("--purpose", help="Motif du virement")
    parser.add_argument("--currency", default="MAD", help="Currency code (default: MAD)")
    parser.add_argument(
        "--express",
        action="store_true",
        help="Mark the transfer as express",
    )
    parser.add_argument(
        "--letterhead",
        type=Path,
        help="Letterhead PDF to print over (first page is used)",
    )
    parser.add_argument(
        "--output-dir", "-o",
        type=Path,
        default=None,
        help="Where to write the PDF (default: OUTPUT_DIR setting)",
    )
    parser.add_argument(
        "--words",
        metavar="AMOUNT",
        help="Print AMOUNT spelled out in French and exit",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List known accounts and suppliers and exit",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    return parser


def print_directory(directory: AccountDirectory) -> None:
    print("Comptes donneurs d'ordre:")
    for account in directory.list_accounts():
        marker = " [en-tête]" if account.letterhead else ""
        print(f"  {account.id:<6} {account.company_name:<28} {account.rib}{marker}")
    print("Fournisseurs:")
    for supplier in directory.search_beneficiaries():
        print(f"  {supplier.id:<6} {supplier.name:<28} {supplier.rib}")


async def run(args: argparse.Namespace, directory: AccountDirectory) -> Path:
    """Generate one order from parsed arguments; returns the written path."""
    settings = get_settings()

    if args.letterhead:
        if not args.account:
            raise TransferOrderError("--letterhead requires --account")
        directory.attach_letterhead(
            args.account,
            Letterhead(name=args.letterhead.name, content=args.letterhead.read_bytes()),
        )

    service = TransferOrderService(
        directory=directory,
        exporter=FileExporter(args.output_dir or settings.output_dir),
    )
    result = await service.generate(
        payer_account_id=args.account,
        beneficiary_id=args.supplier,
        amount=args.amount,
        purpose=args.purpose,
        express=args.express,
        currency=Currency.from_code(args.currency),
    )
    return result.exported.path


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if args.words is not None:
        try:
            currency = Currency.from_code(args.currency)
            print(amount_to_words(args.words.replace(",", "."), currency.main_unit, currency.sub_unit))
        except (ValueError, ArithmeticError) as e:
            print(f"Error: cannot spell {args.words!r}: {e}", file=sys.stderr)
            return 2
        return 0

    directory = AccountDirectory.with_defaults()

    if args.list:
        print_directory(directory)
        return 0

    try:
        path = asyncio.run(run(args, directory))
    except MalformedLetterheadError as e:
        print(f"Error: the letterhead file appears corrupt ({e.message})", file=sys.stderr)
        return 1
    except (TransferOrderError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
