# -*- coding: utf-8 -*-
"""
seed_parts.py — утилита для инвентаря деталей.

Режимы:
- python seed_parts.py --create    → записать демо-набор, если инвентарь пуст
- python seed_parts.py --reset     → перезаписать снимок демо-набором (ВНИМАНИЕ: текущие данные будут потеряны)
- python seed_parts.py --list      → вывести детали с износом
"""

import argparse

from app import create_app
from extensions import db
from modules.parts.health import health_by_id
from modules.parts.models import InventoryBlob, utcnow
from modules.parts.persistence import SqlBlobGateway
from modules.parts.seed import default_parts
from modules.parts.store import InventoryStore


def print_inventory(store: InventoryStore) -> None:
    parts = store.list()
    health = health_by_id(parts, store.clock())
    for p in parts:
        h = health[p.id]
        print(f"{p.machine_id:<8} {p.name:<24} {h.percentage_used:6.1f}%  {h.status.value:<8} "
              f"{h.days_remaining:>5} days left")
    print(f"Total: {len(parts)}")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Seed or inspect the parts inventory")
    grp = parser.add_mutually_exclusive_group(required=True)
    grp.add_argument("--create", action="store_true", help="записать демо-набор, если данных нет")
    grp.add_argument("--reset", action="store_true", help="перезаписать снимок демо-набором")
    grp.add_argument("--list", action="store_true", help="показать детали и их износ")

    args = parser.parse_args(argv)

    app = create_app({"SEED_DEFAULT_PARTS": False})
    key = app.config["INVENTORY_STORAGE_KEY"]
    with app.app_context():
        # --list только читает: без сида пустая база остаётся пустой
        store = InventoryStore(SqlBlobGateway(key), seed=None if args.list else default_parts)
        store.bootstrap()
        if args.list:
            print_inventory(store)
            return

        if args.create and store.list():
            print(f"✔ Inventory already holds {len(store.list())} parts, nothing to do.")
            return

        print(f"→ Writing demo inventory to {key} …")
        InventoryBlob.query.filter_by(key=key).delete()
        db.session.commit()
        store.bootstrap()
        print(f"✔ Demo inventory written ({len(store.list())} parts, {utcnow():%Y-%m-%d}).")


if __name__ == "__main__":
    main()
