"""Tests for classification storage, code assignment, merging and reports."""

from __future__ import annotations

import json

import pytest

from aecqto.classification import (
    ChapterCatalog,
    ClassificationService,
    SQLiteClassificationStore,
    TakeoffTable,
    category_label,
    derive_full_code,
    item_code,
    measured_value_for,
    merge_classifications,
)
from aecqto.classification.merger import coerce_unit
from aecqto.models.classification import ClassificationRecord, PreferredUnit
from aecqto.models.quantities import AggregateGroup


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def store():
    s = SQLiteClassificationStore(":memory:")
    yield s
    s.close()


@pytest.fixture
def service(store):
    return ClassificationService(store)


@pytest.fixture
def wall_group() -> AggregateGroup:
    return AggregateGroup(
        ifc_category="IfcWall",
        type_name="Basic Wall:Ext 300",
        instance_count=4,
        sum_length=22.0,
        sum_area=51.25,
        sum_volume=15.4,
        sum_mass=0.0,
        distinct_marks={"W2", "W1"},
        distinct_remarks={"Check"},
    )


@pytest.fixture
def catalog() -> ChapterCatalog:
    return ChapterCatalog([
        {
            "code": "30",
            "name": "Walls",
            "subchapters": [
                {
                    "code": "30.10",
                    "name": "Masonry",
                    "subsubchapters": [{"code": "30.10.10", "name": "Brick"}],
                },
            ],
        },
        {"code": "40", "name": "Slabs"},
    ])


def _record(type_name: str = "Basic Wall:Ext 300", **kwargs) -> ClassificationRecord:
    data = {"scope_id": "p1", "ifc_category": "IfcWall", "type_name": type_name}
    data.update(kwargs)
    return ClassificationRecord(**data)


# ---------------------------------------------------------------------------
# Code derivation
# ---------------------------------------------------------------------------


class TestDeriveFullCode:
    def test_most_specific_wins(self) -> None:
        assert derive_full_code("30", "30.10", "30.10.10") == "30.10.10"

    def test_clearing_subsubchapter_falls_back(self) -> None:
        assert derive_full_code("30", "30.10", None) == "30.10"
        assert derive_full_code("30", "30.10", "  ") == "30.10"

    def test_chapter_only(self) -> None:
        assert derive_full_code("30", None, None) == "30"

    def test_nothing_selected(self) -> None:
        assert derive_full_code(None, None, None) is None


class TestItemCode:
    def test_subsubchapter_with_order(self) -> None:
        record = _record(subsubchapter_code="30.10.10", display_order=2)
        assert item_code(record) == "30.10.10.02"

    def test_without_subsubchapter(self) -> None:
        record = _record(chapter_code="30", subchapter_code="30.10", full_code="30.10")
        assert item_code(record) == "30.10"

    def test_unclassified(self) -> None:
        assert item_code(_record()) is None


# ---------------------------------------------------------------------------
# SQLite store
# ---------------------------------------------------------------------------


class TestSQLiteStore:
    def test_upsert_assigns_id(self, store) -> None:
        saved = store.upsert(_record(custom_name="Exterior wall"))
        assert saved.id is not None
        assert saved.custom_name == "Exterior wall"

    def test_get_missing(self, store) -> None:
        assert store.get("p1", "IfcWall", "nope") is None

    def test_upsert_updates_in_place(self, store) -> None:
        first = store.upsert(_record(description="a"))
        second = store.upsert(_record(description="b", preferred_unit="M2"))
        assert second.id == first.id
        assert second.description == "b"
        assert second.preferred_unit is PreferredUnit.M2
        assert len(store.list_scope("p1")) == 1

    def test_versions_are_separate(self, store) -> None:
        store.upsert(_record(description="base"))
        store.upsert(_record(version_id="v2", description="v2"))
        assert store.get("p1", "IfcWall", "Basic Wall:Ext 300").description == "base"
        versioned = store.get("p1", "IfcWall", "Basic Wall:Ext 300", version_id="v2")
        assert versioned.description == "v2"
        assert versioned.version_id == "v2"

    def test_list_scope(self, store) -> None:
        store.upsert(_record("B"))
        store.upsert(_record("A"))
        store.upsert(_record("C", scope_id="p2"))
        assert [r.type_name for r in store.list_scope("p1")] == ["A", "B"]
        assert [r.type_name for r in store.list_scope("p2")] == ["C"]

    def test_count_siblings_exact_triple(self, store) -> None:
        store.upsert(_record("A", chapter_code="30", subchapter_code="30.10"))
        store.upsert(_record("B", chapter_code="30", subchapter_code="30.10"))
        store.upsert(_record("C", chapter_code="30", subchapter_code="30.10", subsubchapter_code="30.10.10"))
        store.upsert(_record("D", chapter_code="30"))
        assert store.count_siblings("p1", ("30", "30.10", None)) == 2
        assert store.count_siblings("p1", ("30", "30.10", "30.10.10")) == 1
        assert store.count_siblings("p1", ("30", None, None)) == 1
        assert store.count_siblings("p2", ("30", "30.10", None)) == 0

    def test_count_siblings_exclude(self, store) -> None:
        store.upsert(_record("A", chapter_code="30"))
        store.upsert(_record("B", chapter_code="30"))
        assert store.count_siblings("p1", ("30", None, None), exclude=("IfcWall", "A")) == 1

    def test_delete(self, store) -> None:
        saved = store.upsert(_record())
        assert store.delete(saved.id) is True
        assert store.delete(saved.id) is False
        assert store.get("p1", "IfcWall", "Basic Wall:Ext 300") is None

    def test_file_database_persists(self, tmp_path) -> None:
        path = tmp_path / "qto.db"
        first = SQLiteClassificationStore(path)
        first.upsert(_record(chapter_code="30"))
        first.close()
        second = SQLiteClassificationStore(path)
        assert second.get("p1", "IfcWall", "Basic Wall:Ext 300").chapter_code == "30"
        second.close()


# ---------------------------------------------------------------------------
# ClassificationService
# ---------------------------------------------------------------------------


class TestClassificationService:
    def test_first_in_group_is_one(self, service) -> None:
        saved = service.save(_record(chapter_code="30", subchapter_code="30.10", subsubchapter_code="30.10.10"))
        assert saved.full_code == "30.10.10"
        assert saved.display_order == 1

    def test_second_in_group_is_two(self, service) -> None:
        codes = {"chapter_code": "30", "subchapter_code": "30.10", "subsubchapter_code": "30.10.10"}
        service.save(_record("A", **codes))
        second = service.save(_record("B", **codes))
        assert second.display_order == 2
        assert item_code(second) == "30.10.10.02"

    def test_different_group_restarts(self, service) -> None:
        service.save(_record("A", chapter_code="30", subchapter_code="30.10"))
        other = service.save(_record("B", chapter_code="30", subchapter_code="30.20"))
        assert other.display_order == 1

    def test_resave_does_not_count_itself(self, service) -> None:
        service.save(_record("A", chapter_code="30"))
        again = service.save(_record("A", chapter_code="30", description="edited"))
        assert again.display_order == 1
        assert again.description == "edited"

    def test_clearing_subsubchapter(self, service) -> None:
        service.save(_record(chapter_code="30", subchapter_code="30.10", subsubchapter_code="30.10.10"))
        saved = service.save(_record(chapter_code="30", subchapter_code="30.10", subsubchapter_code=""))
        assert saved.subsubchapter_code is None
        assert saved.full_code == "30.10"

    def test_blank_fields_cleaned(self, service) -> None:
        saved = service.save(_record(chapter_code=" 30 ", custom_name="   "))
        assert saved.chapter_code == "30"
        assert saved.custom_name is None

    def test_measured_value_from_group(self, service, wall_group) -> None:
        saved = service.save(_record(preferred_unit="m2", chapter_code="30"), wall_group)
        assert saved.preferred_unit is PreferredUnit.M2
        assert saved.measured_value == pytest.approx(51.25)
        assert saved.element_count == 4

    def test_resave_counts_later_siblings(self, service) -> None:
        service.save(_record("A", chapter_code="30"))
        service.save(_record("B", chapter_code="30"))
        again = service.save(_record("A", chapter_code="30", description="edited"))
        assert again.display_order == 2

    def test_without_group_same_unit_keeps_value(self, service, wall_group) -> None:
        service.save(_record(preferred_unit="M2"), wall_group)
        saved = service.save(_record(preferred_unit="M2", measured_value=51.25, description="note"))
        assert saved.measured_value == pytest.approx(51.25)

    def test_unit_change_without_group_resets_value(self, service, wall_group) -> None:
        first = service.save(_record(preferred_unit="M2"), wall_group)
        assert first.measured_value == pytest.approx(51.25)
        changed = service.save(first.model_copy(update={"preferred_unit": PreferredUnit.UT}))
        assert changed.preferred_unit is PreferredUnit.UT
        assert changed.measured_value == 0.0

    def test_unit_change_with_group_remeasures(self, service, wall_group) -> None:
        service.save(_record(preferred_unit="M2"), wall_group)
        changed = service.save(_record(preferred_unit="UT"), wall_group)
        assert changed.measured_value == 4.0


# ---------------------------------------------------------------------------
# Units and merging
# ---------------------------------------------------------------------------


class TestUnits:
    def test_coerce(self) -> None:
        assert coerce_unit("m3") is PreferredUnit.M3
        assert coerce_unit(None) is PreferredUnit.UT
        assert coerce_unit(PreferredUnit.KG) is PreferredUnit.KG

    def test_unknown_unit(self) -> None:
        with pytest.raises(ValueError, match="Unknown unit"):
            coerce_unit("ft")

    def test_unknown_unit_on_record(self) -> None:
        with pytest.raises(ValueError):
            _record(preferred_unit="ft")

    @pytest.mark.parametrize(
        ("unit", "expected"),
        [("UT", 4.0), ("ML", 22.0), ("M2", 51.25), ("M3", 15.4), ("KG", 0.0)],
    )
    def test_measured_value_for(self, wall_group, unit, expected) -> None:
        assert measured_value_for(wall_group, unit) == pytest.approx(expected)

    def test_measured_value_without_group(self) -> None:
        assert measured_value_for(None, "M2") == 0.0


class TestMergeClassifications:
    def test_unclassified_group(self, wall_group) -> None:
        rows = merge_classifications({wall_group.key: wall_group}, [])
        assert len(rows) == 1
        row = rows[0]
        assert row.record is None
        assert row.is_edited is False
        assert row.is_present is True
        assert row.preferred_unit is PreferredUnit.UT
        assert row.measured_value == 4.0
        assert row.distinct_marks == {"W1", "W2"}

    def test_classified_group(self, wall_group) -> None:
        record = _record(chapter_code="30", preferred_unit="M2", custom_name="Façana")
        row = merge_classifications({wall_group.key: wall_group}, [record])[0]
        assert row.is_edited is True
        assert row.measured_value == pytest.approx(51.25)
        assert row.display_name == "Façana"

    def test_description_only_is_not_edited(self, wall_group) -> None:
        record = _record(description="note", subsubchapter_code="30.10.10")
        row = merge_classifications({wall_group.key: wall_group}, [record])[0]
        assert row.is_edited is False

    def test_record_without_group_kept(self, wall_group) -> None:
        stale = _record("Old Wall", chapter_code="30", preferred_unit="M2")
        rows = merge_classifications({wall_group.key: wall_group}, [stale])
        assert [r.type_name for r in rows] == ["Basic Wall:Ext 300", "Old Wall"]
        missing = rows[1]
        assert missing.is_present is False
        assert missing.instance_count == 0
        assert missing.measured_value == 0.0
        assert missing.record == stale

    def test_group_sets_not_shared(self, wall_group) -> None:
        row = merge_classifications({wall_group.key: wall_group}, [])[0]
        row.distinct_marks.add("X")
        assert "X" not in wall_group.distinct_marks


# ---------------------------------------------------------------------------
# Catalog, labels, report
# ---------------------------------------------------------------------------


class TestChapterCatalog:
    def test_lookup(self, catalog) -> None:
        assert len(catalog) == 4
        assert "30.10.10" in catalog
        assert catalog.name("30.10") == "Masonry"
        assert catalog.name(None) is None

    def test_label(self, catalog) -> None:
        assert catalog.label("30") == "30 - Walls"
        assert catalog.label("99") == "99"
        assert catalog.label(None) == ""

    def test_from_json(self, tmp_path) -> None:
        path = tmp_path / "chapters.json"
        path.write_text(json.dumps({"chapters": [{"code": "10", "name": "Earthworks"}]}), encoding="utf-8")
        assert ChapterCatalog.from_json(path).label("10") == "10 - Earthworks"

    def test_node_without_code_skipped(self) -> None:
        assert len(ChapterCatalog([{"name": "orphan"}])) == 0


class TestCategoryLabel:
    def test_languages(self) -> None:
        assert category_label("IfcWall") == "Mur"
        assert category_label("IfcWall", "es") == "Muro"
        assert category_label("IfcWall", "en") == "Wall"

    def test_unknown_language_falls_back_to_english(self) -> None:
        assert category_label("IfcSlab", "fr") == "Slab"

    def test_unknown_class(self) -> None:
        assert category_label("IfcTendon") == "IfcTendon"


class TestTakeoffTable:
    @pytest.fixture
    def table(self, wall_group, catalog) -> TakeoffTable:
        slab = AggregateGroup(ifc_category="IfcSlab", type_name="Floor 250", instance_count=2, sum_volume=12.5)
        records = [
            _record(
                chapter_code="30",
                subchapter_code="30.10",
                subsubchapter_code="30.10.10",
                display_order=1,
                preferred_unit="M2",
            ),
            _record("Demolished", chapter_code="40"),
        ]
        rows = merge_classifications({wall_group.key: wall_group, slab.key: slab}, records)
        return TakeoffTable(rows, catalog=catalog, language="es")

    def test_row_order(self, table) -> None:
        assert [r.type_name for r in table.rows] == ["Floor 250", "Basic Wall:Ext 300", "Demolished"]

    def test_row_dict(self, table) -> None:
        d = table.row_dict(table.rows[1])
        assert d["category_label"] == "Muro"
        assert d["chapter"] == "30 - Walls"
        assert d["subsubchapter"] == "30.10.10 - Brick"
        assert d["item_code"] == "30.10.10.01"
        assert d["marks"] == "W1, W2"
        assert d["preferred_unit"] == "M2"
        assert d["measured_value"] == 51.25

    def test_totals_only_present_rows(self, table) -> None:
        totals = table.totals()
        assert totals["types"] == 2
        assert totals["edited_types"] == 1
        assert totals["instance_count"] == 6
        assert totals["sum_volume"] == pytest.approx(27.9)

    def test_markdown(self, table) -> None:
        md = table.to_markdown()
        assert md.startswith("# Quantity Takeoff")
        assert "Demolished (not in model)" in md
        assert "30.10.10.01" in md
        assert "**Elements:** 6" in md

    def test_json(self, table) -> None:
        data = json.loads(table.to_json())
        assert len(data["rows"]) == 3
        assert data["totals"]["types"] == 2
