#!/usr/bin/env python3
"""
Script to generate the QR card of a dining table.
The QR code contains: {page_url}/table/{table_id}
"""
import sys
from pathlib import Path

import httpx
import qrcode

# Configuration
BASE_URL = "http://localhost:8000"  # Change this to your backend URL
PAGE_URL = "http://localhost:5173"  # Guest page served to phones


def get_table(table_id: int, base_url: str = BASE_URL) -> dict:
    """
    Check the table exists through the API.

    Args:
        table_id: Dining table ID
        base_url: Backend base URL

    Returns:
        Table response
    """
    endpoint = f"{base_url}/api/dining_tables/{table_id}"
    print(f"Fetching table at {endpoint}...")

    try:
        with httpx.Client(timeout=30.0) as client:
            response = client.get(endpoint)
            response.raise_for_status()
            table = response.json()
            print(f"✓ Found table {table['code']} (ID: {table['id']})")
            return table
    except httpx.HTTPStatusError as e:
        print(f"✗ Error fetching table: {e.response.status_code}")
        print(f"  Response: {e.response.text!s}")
        sys.exit(1)
    except httpx.RequestError as e:
        print(f"✗ Request error: {e}")
        sys.exit(1)


def table_page_url(table_id: int, page_url: str = PAGE_URL) -> str:
    return f"{page_url.rstrip('/')}/table/{table_id}"


def generate_qr_code(table: dict, page_url: str = PAGE_URL, output_dir: str = "qr_codes") -> str:
    """
    Generate a QR code with the guest page link of a table.

    Args:
        table: Table response with at least id and code
        page_url: Base URL of the guest page
        output_dir: Folder for the generated images

    Returns:
        Path to the saved QR code image
    """
    link = table_page_url(table["id"], page_url)
    print(f"\nGenerating QR code for: {link}")

    qr_dir = Path(output_dir)
    qr_dir.mkdir(parents=True, exist_ok=True)

    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=4,
    )

    qr.add_data(link)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    output_path = qr_dir / f"table_{table['code']}_qr.png"
    img.save(output_path)

    print(f"✓ QR code saved to: {output_path}")
    print(f"  Page link: {link}")

    return str(output_path)


def main():
    """Main function to generate a table QR card."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Generate the QR card of a dining table"
    )
    parser.add_argument(
        "--table-id",
        type=int,
        required=True,
        help="Dining table ID"
    )
    parser.add_argument(
        "--base-url",
        type=str,
        default=BASE_URL,
        help=f"Backend base URL (default: {BASE_URL})"
    )
    parser.add_argument(
        "--page-url",
        type=str,
        default=PAGE_URL,
        help=f"Guest page base URL (default: {PAGE_URL})"
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="qr_codes",
        help="Folder for QR images (default: qr_codes)"
    )

    args = parser.parse_args()

    table = get_table(args.table_id, args.base_url)
    qr_path = generate_qr_code(table, args.page_url, args.output_dir)

    print(f"\n✓ Done! QR card generated.")
    print(f"  Table: {table['code']}")
    print(f"  QR Code: {qr_path}")


if __name__ == "__main__":
    main()
