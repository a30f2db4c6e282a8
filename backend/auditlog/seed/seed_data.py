"""
Seed data script for the audit log database.
Populates a representative history of logins, product changes and CSV runs.
"""
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from auditlog.audit import record_action
from auditlog.config import get_settings
from auditlog.database import LogStore
from auditlog.models import ActionCode, LogEntry

USERS = [
    (1, "admin@atlas.local"),
    (2, "maria.souza@atlas.local"),
    (3, "joao.lima@atlas.local"),
]

PRODUCTS = [
    ("PRD-0001", "Parafuso Sextavado M8"),
    ("PRD-0002", "Porca Autotravante M8"),
    ("PRD-0003", "Arruela Lisa 8mm"),
    ("PRD-0004", "Chave Combinada 13mm"),
]

SEED_ENTRIES = [
    (ActionCode.USER_LOGIN, "User logged in", 0, None),
    (ActionCode.PRODUCT_CREATE, "Product created", 0, 0),
    (ActionCode.PRODUCT_CREATE, "Product created", 0, 1),
    (ActionCode.USER_LOGIN, "User logged in", 1, None),
    (ActionCode.PRODUCT_UPDATE, "Stock adjusted by +50", 1, 0),
    (ActionCode.PRODUCT_UPDATE, "Stock adjusted by -12", 1, 1),
    (ActionCode.CSV_IMPORT, "Imported 2 products from CSV", 1, None),
    (ActionCode.PRODUCT_CREATE, "Product created", 1, 2),
    (ActionCode.PRODUCT_CREATE, "Product created", 1, 3),
    (ActionCode.USER_LOGOUT, "User logged out", 1, None),
    (ActionCode.USER_LOGIN, "User logged in", 2, None),
    (ActionCode.PRODUCT_DELETE, "Product deleted", 2, 3),
    (ActionCode.CSV_EXPORT, "Exported 3 products to CSV", 2, None),
    (ActionCode.USER_LOGOUT, "User logged out", 2, None),
]


def seed_database(store: LogStore) -> int:
    """Seed the log table with sample history. Returns the number of rows added."""
    with store.session() as session:
        # Check if already seeded
        if session.query(LogEntry).first():
            print("Database already seeded, skipping...")
            return 0

        print("Seeding database...")
        for action, description, user_idx, product_idx in SEED_ENTRIES:
            user_id, user_email = USERS[user_idx]
            product_code, product_name = PRODUCTS[product_idx] if product_idx is not None else (None, None)
            record_action(
                session, action.value, description,
                user_id=user_id, user_email=user_email,
                product_code=product_code, product_name=product_name,
                ip_address="127.0.0.1",
            )

        total = session.query(LogEntry).count()
        print(f"✓ Seeded {total} log entries")
        print("Database seeding complete!")
        return total


if __name__ == "__main__":
    settings = get_settings()
    log_store = LogStore.from_settings(settings)
    log_store.open(create_tables=settings.create_tables)
    try:
        seed_database(log_store)
    finally:
        log_store.close()
