#!/usr/bin/env python3
"""Dataset generation script for join / aggregation performance checks.

Generates a pair of related synthetic CSV tables plus a matching dashboard
config:

- orders.csv    : order_id, customer_id, region, amount, quantity, order_date
- customers.csv : customer_id, segment, country
- dashboard.yml : LEFT join orders -> customers and a few chart specs

Row 1 of each CSV is a title row so the config uses ``header_index: 1``.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd
import yaml

REGIONS = ["north", "south", "east", "west", "central"]
SEGMENTS = ["Consumer", "Corporate", "Home Office"]
COUNTRIES = ["JP", "US", "DE", "FR", "BR", "IN"]


def generate_orders(rows: int, customers: int, seed: int = 42) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    dates = pd.date_range("2023-01-01", "2024-12-31", periods=365)
    return pd.DataFrame({
        "order_id": np.arange(1, rows + 1),
        "customer_id": rng.integers(1, customers + 1, rows),
        "region": rng.choice(REGIONS, rows),
        "amount": np.round(rng.uniform(1, 5000, rows), 2),
        "quantity": rng.integers(1, 50, rows),
        "order_date": pd.Series(rng.choice(dates, rows)).dt.strftime("%Y-%m-%d"),
    })


def generate_customers(customers: int, seed: int = 42) -> pd.DataFrame:
    rng = np.random.default_rng(seed + 1)
    return pd.DataFrame({
        "customer_id": np.arange(1, customers + 1),
        "segment": rng.choice(SEGMENTS, customers),
        "country": rng.choice(COUNTRIES, customers),
    })


def write_with_title(df: pd.DataFrame, path: Path, title: str) -> None:
    """Write CSV with a title row above the header row."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        f.write(title + "\n")
        df.to_csv(f, index=False)


def build_config() -> dict:
    return {
        "name": "Perf dataset",
        "tables": [
            {"id": "orders", "path": "orders.csv", "header_index": 1},
            {"id": "customers", "path": "customers.csv", "header_index": 1},
        ],
        "joins": [
            {
                "id": "orders-customers",
                "left_table": "orders",
                "right_table": "customers",
                "left_key": "customer_id",
                "right_key": "customer_id",
                "kind": "LEFT",
            }
        ],
        "charts": [
            {"id": "by-region", "title": "Sales by region", "kind": "BAR",
             "dimension": "orders.region", "metric": "orders.amount", "aggregation": "SUM"},
            {"id": "by-segment", "title": "Orders by segment", "kind": "PIE",
             "dimension": "customers.segment", "metric": "orders.order_id", "aggregation": "COUNT"},
            {"id": "trend", "title": "Amount trend", "kind": "LINE",
             "dimension": "orders.order_date", "metric": "orders.amount", "aggregation": "NONE"},
            {"id": "avg-amount", "title": "Average order", "kind": "KPI",
             "metric": "orders.amount", "aggregation": "AVERAGE"},
        ],
        "output": {"json": "out/dashboard.json"},
    }


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate synthetic CSV tables for performance checks")
    parser.add_argument("output_dir", type=Path, help="Directory receiving the CSVs and dashboard.yml")
    parser.add_argument("--rows", type=int, default=50_000, help="Order rows (default: 50000)")
    parser.add_argument("--customers", type=int, default=2_000, help="Customer rows (default: 2000)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.rows <= 0 or args.customers <= 0:
        print("Error: --rows and --customers must be positive", file=sys.stderr)
        return 1

    out: Path = args.output_dir
    write_with_title(generate_orders(args.rows, args.customers, args.seed), out / "orders.csv", "Orders export")
    write_with_title(generate_customers(args.customers, args.seed), out / "customers.csv", "Customer master")
    (out / "dashboard.yml").write_text(yaml.safe_dump(build_config(), sort_keys=False), encoding="utf-8")

    print(f"Created dataset in {out}")
    print(f"  orders.csv    : {args.rows:,} rows")
    print(f"  customers.csv : {args.customers:,} rows")
    print("  dashboard.yml : LEFT join + 4 charts")
    return 0


if __name__ == "__main__":
    sys.exit(main())
