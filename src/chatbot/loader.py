import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .catalog import KNOWLEDGE_BASE
from .config import section
from .knowledge import validate_catalog
from .types import KnowledgeEntry


def entry_from_record(record: Dict[str, Any]) -> KnowledgeEntry:
    tags = record.get("tags") or []
    follow_ups = record.get("followUps", record.get("follow_ups")) or []
    return KnowledgeEntry(
        id=str(record.get("id", "")),
        title=str(record.get("title", "")),
        category=str(record.get("category", "")),
        tags=tuple(str(tag).strip() for tag in tags if str(tag).strip()),
        answer=str(record.get("answer", "")),
        follow_ups=tuple(str(item) for item in follow_ups),
    )


def entry_to_record(entry: KnowledgeEntry) -> Dict[str, Any]:
    return {
        "id": entry.id,
        "title": entry.title,
        "category": entry.category,
        "tags": list(entry.tags),
        "answer": entry.answer,
        "followUps": list(entry.follow_ups),
    }


def load_knowledge_entries(path: str) -> List[KnowledgeEntry]:
    data_path = Path(path)
    if not data_path.exists():
        raise FileNotFoundError(f"Knowledge data not found: {data_path}")

    items: List[KnowledgeEntry] = []
    with data_path.open("r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError as exc:
                raise ValueError(f"{data_path}:{line_no}: invalid JSON") from exc
            items.append(entry_from_record(record))
    validate_catalog(items)
    return items


def dump_knowledge_entries(entries: Iterable[KnowledgeEntry], path: str) -> int:
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with output_path.open("w", encoding="utf-8") as w:
        for entry in entries:
            json.dump(entry_to_record(entry), w, ensure_ascii=False)
            w.write("\n")
            count += 1
    return count


def load_catalog(config: Dict[str, Any], data_path: Optional[str] = None) -> List[KnowledgeEntry]:
    source = data_path or section(config, "knowledge").get("source")
    if source:
        return load_knowledge_entries(source)
    return list(KNOWLEDGE_BASE)
