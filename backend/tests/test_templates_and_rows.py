"""
Tests for the template catalog, form-scoped rows and row search/sort
"""

import json
import pytest

from sheetforms.config import settings
from sheetforms.core.errors import InvalidArgument, Unknown
from sheetforms.models.form import Form
from sheetforms.services.form_rows import build_row, header_cells
from sheetforms.services.row_view import positioned, search_rows, sort_rows
from sheetforms.services.template_service import TemplateService


class TestTemplateService:

    def test_bundled_templates(self):
        templates = TemplateService(settings.templates_path).list_templates()

        assert [t.id for t in templates] == ["contact-list", "inventory", "task-tracker"]
        inventory = templates[1]
        assert inventory.view.searchable is True
        assert inventory.columns[1].options == ["Hardware", "Stationery", "Food", "Other"]
        assert inventory.columns[1].view.filterable is True
        assert inventory.columns[-1].input is False

    def test_empty_directory(self, tmp_path):
        assert TemplateService(tmp_path).list_templates() == []

    def test_defaults_for_optional_fields(self, tmp_path):
        (tmp_path / "minimal.json").write_text(json.dumps({
            "id": "minimal", "name": "Minimal", "columns": [{"name": "Title"}],
        }), encoding='utf-8')

        template = TemplateService(tmp_path).list_templates()[0]

        assert template.description == ""
        assert template.view.layout == "table"
        assert template.columns[0].type == "text"
        assert template.columns[0].input is True

    def test_missing_directory_is_unknown(self, tmp_path):
        with pytest.raises(Unknown):
            TemplateService(tmp_path / "nope").list_templates()

    @pytest.mark.parametrize("content", ["{broken", json.dumps({"name": "No id or columns"})])
    def test_bad_document_is_unknown(self, tmp_path, content):
        (tmp_path / "bad.json").write_text(content, encoding='utf-8')
        with pytest.raises(Unknown):
            TemplateService(tmp_path).list_templates()


@pytest.fixture
def inventory_form():
    return Form(
        id="1700000000000",
        name="Stock",
        template_id="inventory",
        spreadsheet_id="sheet123",
        columns=[
            {"name": "Item", "required": True},
            {"name": "Category", "type": "select", "options": ["Hardware", "Food"]},
            {"name": "Quantity", "type": "number"},
            {"name": "Last checked", "type": "date", "input": False, "editable": False},
        ],
        created_at="2024-01-01T00:00:00Z",
        updated_at="2024-01-01T00:00:00Z",
    )


class TestFormRows:

    def test_cells_follow_input_column_order(self, inventory_form):
        cells = build_row(inventory_form, {"Quantity": 4, "Item": "Bolts", "Category": "Hardware"})
        assert cells == ["Bolts", "Hardware", "4"]

    def test_missing_optional_values_are_blank(self, inventory_form):
        assert build_row(inventory_form, {"Item": "Bolts"}) == ["Bolts", "", ""]

    def test_non_input_and_unknown_values_are_ignored(self, inventory_form):
        cells = build_row(inventory_form, {"Item": "Bolts", "Last checked": "2024-01-01", "Color": "red"})
        assert cells == ["Bolts", "", ""]

    def test_required_and_options_are_reported_together(self, inventory_form):
        with pytest.raises(InvalidArgument) as exc_info:
            build_row(inventory_form, {"Item": "  ", "Category": "Toys"})

        message = exc_info.value.message
        assert "'Item' is required" in message
        assert "'Category' must be one of: Hardware, Food" in message

    def test_header_cells_include_every_column(self, inventory_form):
        assert header_cells(inventory_form) == ["Item", "Category", "Quantity", "Last checked"]


class TestRowView:

    rows = [["Name", "City"], ["Carol", "Osaka"], ["alice"], ["Bob", "Kyoto"]]

    def test_positions_match_read_order(self):
        assert positioned(self.rows) == [
            {'position': 0, 'cells': ["Name", "City"]},
            {'position': 1, 'cells': ["Carol", "Osaka"]},
            {'position': 2, 'cells': ["alice"]},
            {'position': 3, 'cells': ["Bob", "Kyoto"]},
        ]

    def test_header_is_skipped_but_positions_kept(self):
        assert [r['position'] for r in positioned(self.rows, header=True)] == [1, 2, 3]
        assert positioned([["Name"]], header=True) == []

    def test_search_is_case_insensitive(self):
        rows = positioned(self.rows, header=True)
        assert [r['position'] for r in search_rows(rows, "ALI")] == [2]
        assert [r['position'] for r in search_rows(rows, "o")] == [1, 3]
        assert search_rows(rows, "") == rows

    def test_sort_treats_missing_cells_as_empty(self):
        rows = positioned(self.rows, header=True)
        assert [r['position'] for r in sort_rows(rows, 1)] == [2, 3, 1]
        assert [r['position'] for r in sort_rows(rows, 1, descending=True)] == [1, 3, 2]

    def test_sort_without_column_keeps_order(self):
        rows = positioned(self.rows)
        assert sort_rows(rows, None) == rows

    def test_negative_sort_column(self):
        with pytest.raises(InvalidArgument):
            sort_rows(positioned(self.rows), -1)
