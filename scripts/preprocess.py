"""
Convert an FAQ spreadsheet into the JSONL knowledge catalog.

Input: one or more .xlsx/.csv files with one entry per row and columns
  id, title, category, tags, answer, follow_ups
where tags and follow_ups are ';'-separated. Answers keep their line breaks.

Output JSONL schema (one object per line):
{
  "id": str,
  "title": str,
  "category": str,
  "tags": [str, ...],
  "answer": str,
  "followUps": [str, ...]
}

Usage:
  python scripts/preprocess.py --input_dir data --output data/knowledge_base.jsonl
  python scripts/preprocess.py --export_builtin --output data/knowledge_base.jsonl
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Dict, List

import pandas as pd

from chatbot.catalog import KNOWLEDGE_BASE
from chatbot.knowledge import validate_catalog
from chatbot.loader import dump_knowledge_entries, entry_from_record


def _to_str(x: object) -> str:
    if x is None:
        return ""
    if isinstance(x, float) and pd.isna(x):
        return ""
    return str(x).strip()


def _split_list(x: object, lower: bool = False) -> List[str]:
    parts = [part.strip() for part in _to_str(x).split(";")]
    return [part.lower() if lower else part for part in parts if part]


def _build_record(row: pd.Series, row_idx: int, source_name: str) -> Dict:
    return {
        "id": _to_str(row.get("id")) or f"{source_name}-{row_idx}",
        "title": _to_str(row.get("title")),
        "category": _to_str(row.get("category")).lower() or "general",
        "tags": _split_list(row.get("tags"), lower=True),
        "answer": _to_str(row.get("answer")),
        "followUps": _split_list(row.get("follow_ups")),
    }


def process_file(path: Path) -> List[Dict]:
    if path.suffix.lower() == ".csv":
        df = pd.read_csv(path)
    else:
        df = pd.read_excel(path)
    records: List[Dict] = []
    for idx, row in df.iterrows():
        record = _build_record(row, idx, path.stem)
        if not record["answer"]:
            print(f"Skipping {record['id']}: empty answer")
            continue
        records.append(record)
    return records


def main() -> None:
    parser = argparse.ArgumentParser(description="Convert FAQ spreadsheets to a JSONL knowledge catalog.")
    parser.add_argument("--input_dir", default="data", help="Directory containing .xlsx/.csv files")
    parser.add_argument("--output", default="data/knowledge_base.jsonl", help="Output JSONL file path")
    parser.add_argument("--export_builtin", action="store_true", help="Write the built-in catalog instead")
    args = parser.parse_args()

    output_path = Path(args.output)

    if args.export_builtin:
        count = dump_knowledge_entries(KNOWLEDGE_BASE, str(output_path))
        print(f"Wrote {count} entries to {output_path}")
        return

    input_dir = Path(args.input_dir)
    sheets = sorted(p for p in input_dir.iterdir() if p.is_file() and p.suffix.lower() in {".xlsx", ".csv"}) if input_dir.exists() else []
    if not sheets:
        print(f"No .xlsx or .csv files found in {input_dir}")
        return

    all_records: List[Dict] = []
    for f in sheets:
        all_records.extend(process_file(f))

    try:
        validate_catalog(entry_from_record(record) for record in all_records)
    except ValueError as exc:
        print(f"Invalid catalog: {exc}")
        sys.exit(1)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as w:
        for obj in all_records:
            json.dump(obj, w, ensure_ascii=False)
            w.write("\n")

    print(f"Wrote {len(all_records)} entries to {output_path}")


if __name__ == "__main__":
    main()
