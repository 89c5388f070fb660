"""CLI adapter storing a user's exchange credentials and wallet address.

Values are read from PORTFOLIO_USER_ID, EXCHANGE_API_KEY,
EXCHANGE_API_SECRET and WALLET_ADDRESS.
"""

import os

from src.domain.models import Connections
from src.infrastructure.container import build_connection_store
from src.infrastructure.logging.logger import get_app_logger


def main() -> None:
    """Save the configured connections for PORTFOLIO_USER_ID."""
    logger = get_app_logger()
    user_id = os.getenv("PORTFOLIO_USER_ID", "").strip()
    if not user_id:
        logger.warning("PORTFOLIO_USER_ID is required to save connections.")
        return

    connections = Connections(
        exchange_api_key=os.getenv("EXCHANGE_API_KEY") or None,
        exchange_api_secret=os.getenv("EXCHANGE_API_SECRET") or None,
        wallet_address=os.getenv("WALLET_ADDRESS") or None,
    )
    store = build_connection_store()
    store.save_connections(user_id, connections)

    print(
        f"Saved connections for {user_id}: "
        f"exchange={'yes' if connections.has_exchange else 'no'}, "
        f"wallet={connections.wallet_address or 'none'}"
    )


if __name__ == "__main__":  # pragma: no cover
    main()
