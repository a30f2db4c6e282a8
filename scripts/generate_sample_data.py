#!/usr/bin/env python3
"""
Generate realistic audit traffic against a running audit log API.
Simulates a working day of logins, stock movements and CSV runs.
"""
import argparse
import random

from auditlog.client import LogClient
from auditlog.models import ActionCode

# Configuration
API_URL = "http://localhost:8000"

USERS = [
    (1, "admin@atlas.local"),
    (2, "maria.souza@atlas.local"),
    (3, "joao.lima@atlas.local"),
    (4, "carla.mendes@atlas.local"),
]

PRODUCTS = [
    ("PRD-0001", "Parafuso Sextavado M8"),
    ("PRD-0002", "Porca Autotravante M8"),
    ("PRD-0003", "Arruela Lisa 8mm"),
    ("PRD-0004", "Chave Combinada 13mm"),
    ("PRD-0005", "Fita Isolante 20m"),
    ("PRD-0006", "Luva de Proteção G"),
]

# Relative weight of each action in a typical session
ACTION_WEIGHTS = {
    ActionCode.PRODUCT_UPDATE: 10,
    ActionCode.PRODUCT_CREATE: 3,
    ActionCode.PRODUCT_DELETE: 1,
    ActionCode.CSV_IMPORT: 1,
    ActionCode.CSV_EXPORT: 2,
}


def describe(action: ActionCode, product_name: str) -> str:
    if action == ActionCode.PRODUCT_UPDATE:
        delta = random.choice([-1, 1]) * random.randint(1, 40)
        return f"Stock of {product_name} adjusted by {delta:+d}"
    if action == ActionCode.PRODUCT_CREATE:
        return f"Product {product_name} created"
    if action == ActionCode.PRODUCT_DELETE:
        return f"Product {product_name} deleted"
    if action == ActionCode.CSV_IMPORT:
        return f"Imported {random.randint(5, 120)} products from CSV"
    return f"Exported {random.randint(5, 120)} products to CSV"


def simulate_session(client: LogClient, actions_per_session: int) -> int:
    """Log in, perform a handful of actions, log out. Returns entries recorded."""
    user_id, email = random.choice(USERS)
    ip = f"10.0.0.{random.randint(2, 254)}"
    recorded = 0

    steps = [(ActionCode.USER_LOGIN, None)]
    actions = random.choices(list(ACTION_WEIGHTS), weights=list(ACTION_WEIGHTS.values()), k=actions_per_session)
    steps += [(action, random.choice(PRODUCTS)) for action in actions]
    steps.append((ActionCode.USER_LOGOUT, None))

    for action, product in steps:
        if action in (ActionCode.USER_LOGIN, ActionCode.USER_LOGOUT):
            description = f"User {email} logged {'in' if action == ActionCode.USER_LOGIN else 'out'}"
            code, name = None, None
        elif action in (ActionCode.CSV_IMPORT, ActionCode.CSV_EXPORT):
            description = describe(action, "")
            code, name = None, None
        else:
            code, name = product
            description = describe(action, name)

        entry = client.log_action(
            action.value, description,
            user_id=user_id, user_email=email,
            product_code=code, product_name=name,
            ip_address=ip,
        )
        if entry is not None:
            recorded += 1

    return recorded


def main():
    parser = argparse.ArgumentParser(description="Generate sample audit log traffic")
    parser.add_argument("--url", default=API_URL, help="Audit log API base URL")
    parser.add_argument("--sessions", type=int, default=20, help="Number of user sessions to simulate")
    parser.add_argument("--actions", type=int, default=8, help="Actions per session")
    args = parser.parse_args()

    print("=" * 60)
    print("Sample Audit Log Generator")
    print("=" * 60)

    total = 0
    with LogClient(args.url) as client:
        for i in range(args.sessions):
            count = simulate_session(client, args.actions)
            total += count
            print(f"  Session {i + 1}: recorded {count} entries")

    print(f"\n{'=' * 60}")
    print(f"SUCCESS: Recorded {total:,} log entries")
    print("=" * 60)


if __name__ == "__main__":
    main()
