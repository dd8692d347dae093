#!/usr/bin/env python3
"""One-off store setup: create the qualification-date attribute and webhooks."""

import argparse
import os
import sys
from pathlib import Path
from typing import Optional

# Lambda code lives under src/; make it importable when run from a checkout.
sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

from repositories.bigcommerce_repo import BigCommerceRepository  # noqa: E402
from utils.error_handling import DirectoryError  # noqa: E402
from utils.signature import TOKEN_HEADER  # noqa: E402

ATTRIBUTE_NAME = "wholesale_offer_qualified_date"
ATTRIBUTE_DISPLAY_NAME = "Wholesale Offer Qualified Date"
DEFAULT_SCOPES = ["store/order/created", "store/cart/converted"]


def create_attribute(repo: BigCommerceRepository) -> None:
    try:
        attr_id = repo.create_customer_attribute(ATTRIBUTE_NAME, ATTRIBUTE_DISPLAY_NAME, "date")
    except DirectoryError as e:
        print(f"Attribute creation failed: {e} {e.detail or ''}")
        sys.exit(1)
    print("Attribute created.")
    if attr_id:
        print(f"Add this to your environment: DATE_ATTRIBUTE_ID={attr_id}")


def create_webhooks(repo: BigCommerceRepository, destination: str, scopes, token: Optional[str] = None) -> None:
    # The store sends these headers verbatim with every delivery.
    headers = {TOKEN_HEADER: token} if token else {}
    for scope in scopes:
        try:
            hook = repo.create_webhook(scope, destination, headers=headers)
        except DirectoryError as e:
            print(f"{scope}: failed ({e} {e.detail or ''})")
            continue
        print(f"{scope} webhook created, id {hook.get('id')}")


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--destination", help="public webhook URL, e.g. https://.../webhook")
    parser.add_argument("--scope", action="append", dest="scopes", help="webhook scope (repeatable)")
    parser.add_argument("--skip-attribute", action="store_true")
    args = parser.parse_args()

    store_hash = os.environ.get("BC_STORE_HASH")
    api_token = os.environ.get("BC_API_TOKEN")
    if not store_hash or not api_token:
        print("BC_STORE_HASH and BC_API_TOKEN must be set")
        sys.exit(1)

    repo = BigCommerceRepository(
        store_hash,
        api_token,
        int(os.environ.get("DATE_ATTRIBUTE_ID") or 0),
        base_url=os.environ.get("BC_API_BASE_URL", "https://api.bigcommerce.com"),
    )

    if not args.skip_attribute:
        create_attribute(repo)

    if args.destination:
        create_webhooks(
            repo,
            args.destination,
            args.scopes or DEFAULT_SCOPES,
            token=os.environ.get("BC_WEBHOOK_SECRET"),
        )


if __name__ == "__main__":
    main()
