"""Build spreadsheet rows from a form's column schema"""
import logging
from typing import Dict, List

from sheetforms.core.errors import InvalidArgument
from sheetforms.models.form import Form

logger = logging.getLogger(__name__)


def build_row(form: Form, values: Dict[str, object]) -> List[str]:
    """
    Turn submitted values into cells in the order of the form's input columns

    Args:
        form: Form whose schema drives the row
        values: Column name -> submitted value

    Returns:
        Cells, missing values as ""
    """
    cells = []
    problems = []
    for column in form.input_columns:
        raw = values.get(column.name)
        value = "" if raw is None else str(raw)

        if column.required and not value.strip():
            problems.append(f"'{column.name}' is required")
        elif value and column.options and value not in column.options:
            problems.append(f"'{column.name}' must be one of: {', '.join(column.options)}")

        cells.append(value)

    unknown = sorted(set(values) - {column.name for column in form.input_columns})
    if unknown:
        logger.debug(f"Ignoring values for non-input columns of form {form.id}: {unknown}")

    if problems:
        raise InvalidArgument("; ".join(problems))
    return cells


def header_cells(form: Form) -> List[str]:
    return [column.name for column in form.columns]
