"""
Row layout for the main and child tables.

Builds rows on the submit path and parses them back on the lookup path,
both from the column tuples in mixintake.config.constants.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence

from mixintake.config.constants import (
    ADMIXTURE_COLUMNS,
    COMMON_COLUMNS,
    DEFAULT_RATIO_CEMENT,
    MIX_COLUMNS,
    OFFICE_USE_COLUMNS,
    OFFICE_USE_START,
    SCM_COLUMNS,
    InputMode,
    main_columns,
)
from mixintake.services.mix_derivation import DerivedMixValues


def _cell(row: Sequence[Any], index: int) -> Any:
    if index < len(row) and row[index] is not None:
        return row[index]
    return ""


def build_main_row(
    mode: InputMode,
    values: Mapping[str, Any],
    record_id: str,
    timestamp: str,
    derived: DerivedMixValues,
) -> List[Any]:
    """
    Lay out one main table row.

    ``values`` is the submission's camelCase field mapping; columns it
    does not carry are written as empty cells.
    """
    cells = dict(values)
    cells.update(
        recordId=record_id,
        timestamp=timestamp,
        wcRatio=derived.wc_ratio,
        mixRatioString=derived.mix_ratio_string,
    )
    return [_blank_if_none(cells.get(column)) for column in main_columns(mode)]


def _blank_if_none(value: Any) -> Any:
    if value is None:
        return ""
    # Enum members (e.g. InputMode) are stored by value
    return getattr(value, "value", value)


def build_child_rows(
    record_id: str,
    timestamp: str,
    client_name: str,
    entries: Sequence[Mapping[str, Any]],
    value_key: str,
) -> List[List[Any]]:
    """Admixture/SCM rows: recordId, timestamp, clientName, index, name, value."""
    return [
        [record_id, timestamp, client_name, index, entry.get("name") or "", entry.get(value_key) or ""]
        for index, entry in enumerate(entries, start=1)
    ]


def parse_main_row(mode: InputMode, row: Sequence[Any]) -> Dict[str, Any]:
    """
    Normalize a stored main row into the form shape.

    Mix fields of the other mode are returned blank so the client can load
    the record into either panel.
    """
    data: Dict[str, Any] = {"inputMode": mode.value}

    for index, column in enumerate(main_columns(mode)):
        data[column] = _cell(row, index)

    for other_mode, columns in MIX_COLUMNS.items():
        if other_mode is mode:
            continue
        for column in columns:
            data[column] = ""

    if data.get("ratioCement", "") == "":
        data["ratioCement"] = str(DEFAULT_RATIO_CEMENT)

    data["officeUse"] = {
        column: _cell(row, OFFICE_USE_START + offset)
        for offset, column in enumerate(OFFICE_USE_COLUMNS)
    }
    return data


def parse_child_rows(rows: Sequence[Sequence[Any]], value_key: str) -> List[Dict[str, Any]]:
    """Child rows to ``{name, <value_key>}`` pairs, skipping blank pairs."""
    columns = ADMIXTURE_COLUMNS if value_key == "dosage" else SCM_COLUMNS
    name_index = columns.index("name")
    value_index = columns.index(value_key)

    entries = []
    for row in rows:
        entry = {"name": _cell(row, name_index), value_key: _cell(row, value_index)}
        if entry["name"] or entry[value_key]:
            entries.append(entry)
    return entries


def record_id_of(row: Optional[Sequence[Any]]) -> str:
    """Trimmed text of the record id cell."""
    if not row:
        return ""
    return str(_cell(row, COMMON_COLUMNS.index("recordId"))).strip()

