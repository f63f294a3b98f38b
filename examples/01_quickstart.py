#!/usr/bin/env python3
"""Example: Quickstart: testpattern-draft

Minimal working example: infer draft rule records from a small CSV
sample and print them as YAML.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install testpattern-draft
"""
from __future__ import annotations

from datetime import date

import testpattern_draft as tpd

SAMPLE = """\
Name,Email,Ticket,Signup Date
Ada,ada@example.com,TK-1001,2024-01-02
Bob,bob@example.org,TK-1002,2024-02-03
Cy,cy@example.net,TK-1003,2024-03-04
"""


def main() -> None:
    print(f"testpattern-draft version: {tpd.__version__}")

    # Step 1: Run the pipeline over the sample
    result = tpd.generate_drafts(SAMPLE, date.today())
    print(f"Tabular: {result.document.is_tabular} | headers={result.document.header_names}")

    # Step 2: Inspect what was found
    print("\nBuilt-in detections:")
    for name, detection in result.detections.items():
        print(f"  {name}: score={detection.score} samples={detection.sample_values(3)}")

    print("\nStructural groups:")
    for group in result.structural_groups:
        print(f"  {group.derived_name} [{group.signature}] -> {group.regex}")

    # Step 3: Render the draft records
    print("\nDraft records:")
    print(tpd.records_to_yaml(result.records))


if __name__ == "__main__":
    main()
