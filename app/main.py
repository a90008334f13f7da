"""Main module entrypoint for local runtime execution.

This module validates startup configuration, configures logging, and either
launches the FastAPI service or replays a trade file through the ledger.
"""

import argparse
import json
import logging
from pathlib import Path

import uvicorn
from pydantic import ValidationError

from app.api.routers.portfolio import api_serialize_pnl_breakdown
from app.api.schemas import CreateTradeBody
from app.bootstrap import bootstrap_create_application, bootstrap_create_ledger_services
from app.config import AppSettings, config_load_settings
from app.ledger import InsufficientBalanceError, TradeRecordRequest, TradeValidationError


logger = logging.getLogger(__name__)


def main() -> None:
    """Run selected runtime command with validated startup configuration.

    Returns:
        None: This function does not return a runtime value.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
        SystemExit: Raised with status 1 when a replayed trade is rejected.
    """

    argument_parser = argparse.ArgumentParser(description="FIFO PnL ledger runtime entrypoint")
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="api",
        choices=("api", "replay"),
        help="Runtime command: `api` starts server, `replay` records trades from a JSON file and prints PnL",
        type=str,
    )
    argument_parser.add_argument(
        "--trades-file",
        dest="trades_file",
        type=Path,
        help="JSON array of trade objects for `replay`",
    )
    parsed_arguments = argument_parser.parse_args()

    settings = config_load_settings()
    main_configure_logging(settings)

    if parsed_arguments.command == "replay":
        if parsed_arguments.trades_file is None:
            argument_parser.error("--trades-file is required for `replay`")
        if not main_replay_trades(settings, parsed_arguments.trades_file):
            raise SystemExit(1)
        return

    application = bootstrap_create_application(settings)
    uvicorn.run(
        application,
        host=settings.application_host,
        port=settings.application_port,
        log_level=settings.log_level.lower(),
    )


def main_configure_logging(settings: AppSettings) -> None:
    """Configure root logging from settings.

    Args:
        settings: Validated runtime settings.

    Returns:
        None: Logging is configured as side effect.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def main_replay_trades(settings: AppSettings, trades_file: Path) -> bool:
    """Record trades from a JSON file and print the resulting PnL breakdown.

    Args:
        settings: Validated runtime settings.
        trades_file: Path to a JSON array of trade objects.

    Returns:
        bool: True when every trade was accepted, False on the first rejection.

    Raises:
        OSError: Raised when the file cannot be read.
        ValueError: Raised when the file is not a JSON array.
    """

    trade_payloads = json.loads(trades_file.read_text(encoding="utf-8"))
    if not isinstance(trade_payloads, list):
        raise ValueError(f"{trades_file} must contain a JSON array of trades")

    services = bootstrap_create_ledger_services(settings)
    for index, trade_payload in enumerate(trade_payloads):
        try:
            body = CreateTradeBody.model_validate(trade_payload)
            services.ledger_engine.ledger_record_trade(
                TradeRecordRequest(
                    external_trade_id=body.trade_id,
                    order_id=body.order_id,
                    symbol=body.symbol,
                    side=body.side,
                    price=body.price,
                    quantity=body.quantity,
                    execution_timestamp_utc=body.execution_timestamp,
                )
            )
        except (ValidationError, TradeValidationError, InsufficientBalanceError) as error:
            logger.error("Replay stopped at trade index=%s: %s", index, error)
            return False

    breakdown = services.query_service.query_pnl()
    print(json.dumps(api_serialize_pnl_breakdown(breakdown), indent=2))
    return True


if __name__ == "__main__":
    main()
