#!/usr/bin/env python3
"""Inspect a generated PDF.

Usage:
    python scripts/inspect_pdf.py <pdf_path> [--pages N]

Prints the text PyMuPDF extracts from each page, for checking wrapping and
page breaks by eye.
"""

import argparse
import sys
from pathlib import Path

import fitz  # PyMuPDF


def main():
    parser = argparse.ArgumentParser(description="Print the text of a generated PDF")
    parser.add_argument("pdf_path", help="Path to PDF file")
    parser.add_argument(
        "--pages", type=int, default=5, help="Number of pages to display (default: 5)"
    )
    args = parser.parse_args()

    pdf_path = Path(args.pdf_path)
    if not pdf_path.exists():
        print(f"Error: File not found: {pdf_path}")
        sys.exit(1)

    doc = fitz.open(pdf_path)
    print(f"File: {pdf_path}")
    print(f"Total pages: {doc.page_count}")
    print("=" * 80)

    for page in list(doc)[: args.pages]:
        print(f"\n--- Page {page.number + 1} ---")
        fonts = sorted({font[3] for font in page.get_fonts()})
        print(f"Fonts: {', '.join(fonts) or '(none)'}")
        print()
        for line in page.get_text().splitlines():
            print(f"  {line}")

    doc.close()
    print("\n" + "=" * 80)


if __name__ == "__main__":
    main()
