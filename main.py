"""
main.py
-------
Entry point for the customer console.

Responsibilities:
    - Initialize the database connection pool and schema.
    - Run the interactive menu until the user exits.
    - Release pooled connections on shutdown.
"""

from db.connection import init_pool, close_pool
from db.init_db import create_tables
from handlers.menu_handler import MenuHandler
from utils.logger import get_logger

logger = get_logger(__name__)


def main() -> None:
    """Initialize the database and run the menu."""

    # ── 1. Database setup ─────────────────────────────────
    logger.info("Initializing database...")
    init_pool()
    try:
        create_tables()

        # ── 2. Menu loop ──────────────────────────────────
        MenuHandler().run()
    except KeyboardInterrupt:
        logger.info("Interrupted by user.")
    finally:
        # ── 3. Cleanup on shutdown ────────────────────────
        close_pool()
        logger.info("Customer console stopped.")


if __name__ == "__main__":
    main()
