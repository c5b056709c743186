#!/usr/bin/env python3
"""
Export Ronin wallet holdings to a JSON document.

This script queries a Ronin wallet's RON and ERC-20 balances, its Axie,
land and item NFTs, and its rune and charm balances, and writes one
wallet-balance document per address.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from wallet_export.lib.addresses import to_ronin_address, validate_address
from wallet_export.lib.chain_reader import DEFAULT_RPC_URL, ChainReader
from wallet_export.lib.errors import ValidationError, WalletExportError
from wallet_export.lib.formatters import generate_filename, generate_timestamp, write_snapshot
from wallet_export.lib.models import WalletSnapshot
from wallet_export.lib.ronin_client import DEFAULT_HOST, DEFAULT_MAX_RETRIES, RetryPolicy, RoninRestClient
from wallet_export.lib.wallet_scanner import WalletScanner

VERSION = "0.1.0"

BANNER = f"wallet-export {VERSION} - Ronin wallet balance exporter"

_silent = False


def log(scope: str, message: str) -> None:
    """Log a progress message with a scope prefix."""
    if not _silent:
        print(f"[{scope}] {message}", file=sys.stderr)


def error(scope: str, message: str) -> None:
    """Log an error; errors are printed even in silent mode."""
    print(f"[{scope}] ERROR: {message}", file=sys.stderr)


def report(snapshot: WalletSnapshot) -> None:
    """Log per-category counts for a finished snapshot."""
    scope = to_ronin_address(snapshot.wallet)
    log(scope, f"Found {len(snapshot.fungible)} fungible balances")
    log(scope, f"Found {len(snapshot.axies)} axies")
    log(scope, f"Found {len(snapshot.lands)} lands")
    log(scope, f"Found {len(snapshot.items)} items")
    log(scope, f"Found {len(snapshot.runes)} rune types ({snapshot.rune_total} runes)")
    log(scope, f"Found {len(snapshot.charms)} charm types ({snapshot.charm_total} charms)")


def read_source_file(path: str) -> List[str]:
    """
    Read one address per line, skipping blank lines and # comments.

    Raises:
        OSError: If the file cannot be read
    """
    addresses = []
    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#"):
                addresses.append(line)
    return addresses


def prompt_address() -> str:
    """Ask for a wallet address on stdin."""
    return input("Ronin address: ").strip()


def export_address(
    scanner: WalletScanner,
    raw_address: str,
    output_path: Optional[str] = None,
) -> Optional[str]:
    """
    Validate, scan and write one wallet.

    Returns:
        Path written, or None when writing to stdout

    Raises:
        WalletExportError: If validation or any category fetch fails
    """
    address = validate_address(raw_address)
    log(to_ronin_address(address), "Starting wallet export...")

    snapshot = scanner.build_snapshot(address)
    report(snapshot)

    return write_snapshot(snapshot, output_path)


def export_bulk(
    scanner: WalletScanner,
    addresses: List[str],
    output_dir: Optional[str] = None,
) -> int:
    """
    Export many wallets, isolating each address's failure.

    Args:
        scanner: WalletScanner instance
        addresses: Raw addresses to export
        output_dir: Directory for per-wallet files. If None, writes to stdout.

    Returns:
        Number of addresses that failed
    """
    timestamp = generate_timestamp()
    failures = 0

    for raw_address in addresses:
        output_path = None
        try:
            if output_dir is not None:
                output_path = generate_filename(output_dir, validate_address(raw_address), timestamp)
            written = export_address(scanner, raw_address, output_path)
        except (WalletExportError, OSError) as e:
            error(raw_address, f"{e}. Skipping address.")
            failures += 1
            continue

        if written:
            log(raw_address, f"Results written to: {written}")

    return failures


def build_scanner(host: str, rpc_url: str, max_retries: int, workers: int) -> WalletScanner:
    """Create the index client, chain reader and scanner."""
    client = RoninRestClient(host=host, retry_policy=RetryPolicy(max_retries=max_retries))
    reader = ChainReader(rpc_url)
    return WalletScanner(client, reader, max_workers=workers)


def main(args: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        args: Command line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, 1 for error)
    """
    global _silent

    parser = argparse.ArgumentParser(
        description="Export Ronin wallet holdings to a JSON document.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Export one wallet to stdout
  %(prog)s --address ronin:3759468f9fd589665c8affbe52414ef77f863f72

  # Export every address in a file, one JSON file each
  %(prog)s --source-file wallets.txt --output exports/
        """,
    )

    parser.add_argument(
        "--address",
        help="Wallet address (ronin: or 0x form). Prompted for if omitted.",
    )
    parser.add_argument(
        "--source-file",
        help="File with one address per line (bulk mode)",
    )
    parser.add_argument(
        "--output",
        help="Output file, or output directory in bulk mode. If not specified, outputs to stdout.",
    )
    parser.add_argument(
        "--silent",
        action="store_true",
        help="Suppress banner and progress messages",
    )
    parser.add_argument(
        "--host",
        default=DEFAULT_HOST,
        help=f"Index service URL (default: {DEFAULT_HOST})",
    )
    parser.add_argument(
        "--rpc-url",
        default=DEFAULT_RPC_URL,
        help="Ronin JSON-RPC endpoint (default: $RONIN_RPC_URL or http://localhost:8545)",
    )
    parser.add_argument(
        "--max-retries",
        type=int,
        default=DEFAULT_MAX_RETRIES,
        help=f"Retries for transient index failures (default: {DEFAULT_MAX_RETRIES})",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Concurrent category fetches per wallet (default: 1)",
    )

    parsed_args = parser.parse_args(args)
    _silent = parsed_args.silent

    log("wallet-export", BANNER)

    scanner = build_scanner(
        parsed_args.host,
        parsed_args.rpc_url,
        parsed_args.max_retries,
        max(parsed_args.workers, 1),
    )

    if parsed_args.source_file:
        try:
            addresses = read_source_file(parsed_args.source_file)
        except OSError as e:
            error("wallet-export", f"Cannot read {parsed_args.source_file}: {e}")
            return 1

        if parsed_args.output:
            try:
                Path(parsed_args.output).mkdir(parents=True, exist_ok=True)
            except OSError as e:
                error("wallet-export", f"Cannot create {parsed_args.output}: {e}")
                return 1

        failures = export_bulk(scanner, addresses, parsed_args.output)
        log("wallet-export", f"Exported {len(addresses) - failures} of {len(addresses)} wallets")
        return 1 if failures else 0

    try:
        raw_address = parsed_args.address or prompt_address()
    except EOFError:
        error("wallet-export", "No address given")
        return 1

    try:
        written = export_address(scanner, raw_address, parsed_args.output)
    except ValidationError as e:
        error("wallet-export", str(e))
        return 1
    except WalletExportError as e:
        error(raw_address, str(e))
        return 1
    except OSError as e:
        error("wallet-export", f"Cannot write {parsed_args.output}: {e}")
        return 1

    if written:
        log("wallet-export", f"Results written to: {written}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
