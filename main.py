"""
Main entrypoint: scan every configured chain and write the CSV reports.

Env: MONGODB_URI, MONGODB_DB_NAME, START_TIMESTAMP, <CHAIN>_RPC_URL (BNB, MAINNET,
BNBTESTNET, HOLESKY), optional END_TIMESTAMP, CHAINS, OUTPUT_FILE, EXTRACT_WORKERS.

Equivalent to the installed console script: walletscan [--chain bnb] [--start TS] ...
"""

import sys

# Configure structured logging before other imports that may log
from walletscan.walletscan_logging import get_logger

logger = get_logger("main")


def main() -> int:
    from walletscan.cli import main as cli_main

    logger.info("main_starting", argv=sys.argv[1:])

    return cli_main(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(main())
