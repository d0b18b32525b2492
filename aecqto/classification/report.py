"""TakeoffTable: ordered, display-ready rows for a merged quantity takeoff."""

from __future__ import annotations

import json
from typing import Any

from aecqto.classification.chapters import ChapterCatalog
from aecqto.classification.codes import item_code
from aecqto.classification.labels import category_label
from aecqto.config import DISPLAY_JOIN
from aecqto.models.classification import ClassifiedRow


class TakeoffTable:
    """Quantity takeoff per (category, type) with classification labels."""

    def __init__(
        self,
        rows: list[ClassifiedRow],
        catalog: ChapterCatalog | None = None,
        language: str = "ca",
    ) -> None:
        self.rows = sorted(
            rows,
            key=lambda r: (r.ifc_category.casefold(), r.type_name.casefold(), r.ifc_category, r.type_name),
        )
        self.catalog = catalog or ChapterCatalog()
        self.language = language

    def row_dict(self, row: ClassifiedRow) -> dict[str, Any]:
        """Flatten one merged row into display fields."""
        record = row.record
        return {
            "ifc_category": row.ifc_category,
            "category_label": category_label(row.ifc_category, self.language),
            "type_name": row.type_name,
            "display_name": row.display_name,
            "instance_count": row.instance_count,
            "sum_length": round(row.sum_length, 3),
            "sum_area": round(row.sum_area, 3),
            "sum_volume": round(row.sum_volume, 3),
            "sum_mass": round(row.sum_mass, 3),
            "marks": DISPLAY_JOIN.join(sorted(row.distinct_marks)),
            "remarks": DISPLAY_JOIN.join(sorted(row.distinct_remarks)),
            "preferred_unit": row.preferred_unit.value,
            "measured_value": round(row.measured_value, 3),
            "chapter": self.catalog.label(record.chapter_code) if record else "",
            "subchapter": self.catalog.label(record.subchapter_code) if record else "",
            "subsubchapter": self.catalog.label(record.subsubchapter_code) if record else "",
            "item_code": item_code(record) if record else None,
            "is_edited": row.is_edited,
            "is_present": row.is_present,
        }

    def totals(self) -> dict[str, float]:
        """Column totals over rows present in the current load."""
        present = [r for r in self.rows if r.is_present]
        return {
            "types": len(present),
            "edited_types": sum(1 for r in present if r.is_edited),
            "instance_count": sum(r.instance_count for r in present),
            "sum_length": round(sum(r.sum_length for r in present), 3),
            "sum_area": round(sum(r.sum_area for r in present), 3),
            "sum_volume": round(sum(r.sum_volume for r in present), 3),
            "sum_mass": round(sum(r.sum_mass for r in present), 3),
        }

    def to_markdown(self) -> str:
        """Render the takeoff as a Markdown table."""
        lines: list[str] = []

        lines.append("# Quantity Takeoff")
        lines.append("")
        lines.append("| Code | Category | Type | Count | Length | Area | Volume | Mass | Unit | Measured | Marks | Remarks |")
        lines.append("|------|----------|------|-------|--------|------|--------|------|------|----------|-------|---------|")
        for row in self.rows:
            d = self.row_dict(row)
            name = d["display_name"]
            if not row.is_present:
                name = f"{name} (not in model)"
            lines.append(
                f"| {d['item_code'] or ''} | {d['category_label']} | {name} | {d['instance_count']} "
                f"| {d['sum_length']:.2f} | {d['sum_area']:.2f} | {d['sum_volume']:.2f} | {d['sum_mass']:.2f} "
                f"| {d['preferred_unit']} | {d['measured_value']:.2f} | {d['marks']} | {d['remarks']} |"
            )
        lines.append("")

        totals = self.totals()
        lines.append(
            f"**Types:** {totals['types']} ({totals['edited_types']} classified) "
            f"**Elements:** {totals['instance_count']}"
        )
        lines.append("")

        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Return dict representation."""
        return {
            "rows": [self.row_dict(r) for r in self.rows],
            "totals": self.totals(),
        }

    def to_json(self) -> str:
        """Return structured JSON."""
        return json.dumps(self.to_dict(), indent=2, default=str)
