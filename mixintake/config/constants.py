"""
System constants: input modes, required fields and the canonical column
layout of every table in the row store.

## Maintenance

The column tuples below are the single schema version shared by the
submit (write) path and the lookup (read) path. Rows already stored in
the tables follow this order, so:

- never reorder or remove a column;
- new columns go after the office-use block of the main tables, or at the
  end of the child tables;
- restart the service after editing this file.
"""

from enum import Enum
from typing import Dict, Optional, Tuple


class InputMode(str, Enum):
    """How a mix design is expressed."""
    KGM3 = "kgm3"    # absolute mass per cubic metre
    RATIO = "ratio"  # parts relative to cement


DEFAULT_INPUT_MODE = InputMode.RATIO

# Accepted spellings of the ``inputMode`` discriminator
INPUT_MODE_ALIASES: Dict[str, InputMode] = {
    "kgm3": InputMode.KGM3,
    "kg": InputMode.KGM3,
    "kg/m3": InputMode.KGM3,
    "ratio": InputMode.RATIO,
}

# Letter carried by application numbers under the ``mode_letter`` scheme
MODE_LETTERS: Dict[InputMode, str] = {
    InputMode.KGM3: "K",
    InputMode.RATIO: "R",
}

# Human label used in "Missing required field (<label> mode)" messages
MODE_LABELS: Dict[InputMode, str] = {
    InputMode.KGM3: "kg/m3",
    InputMode.RATIO: "ratio",
}

# ==================== Required fields ====================

COMMON_REQUIRED_FIELDS: Tuple[str, ...] = (
    "clientName",
    "contactEmail",
    "phoneNumber",
    "organisationType",
    "contactPerson",
    "projectSite",
    "crushDate",
    "concreteType",
    "cementType",
    "slump",
    "ageDays",
    "cubesCount",
    "concreteGrade",
)

MODE_REQUIRED_FIELDS: Dict[InputMode, Tuple[str, ...]] = {
    InputMode.KGM3: ("cementKgm3", "waterKgm3", "fineKgm3", "coarseKgm3"),
    # ratioCement is fixed at 1 on the form and defaults to 1 when absent
    InputMode.RATIO: ("ratioFine", "ratioCoarse", "waterCementRatio"),
}

DEFAULT_RATIO_CEMENT = 1

# ==================== Column layouts ====================

COMMON_COLUMNS: Tuple[str, ...] = (
    "recordId",          # 0  A
    "timestamp",         # 1  B
    "clientName",        # 2  C
    "contactEmail",      # 3  D
    "phoneNumber",       # 4  E
    "organisationType",  # 5  F
    "contactPerson",     # 6  G
    "projectSite",       # 7  H
    "crushDate",         # 8  I
    "concreteType",      # 9  J
    "cementType",        # 10 K
    "slump",             # 11 L
    "ageDays",           # 12 M
    "cubesCount",        # 13 N
    "concreteGrade",     # 14 O
)

MIX_COLUMNS: Dict[InputMode, Tuple[str, ...]] = {
    InputMode.KGM3: (
        "cementKgm3",        # 15 P
        "waterKgm3",         # 16 Q
        "fineKgm3",          # 17 R
        "mediumKgm3",        # 18 S
        "coarseKgm3",        # 19 T
    ),
    InputMode.RATIO: (
        "ratioCement",       # 15 P
        "ratioFine",         # 16 Q
        "ratioMedium",       # 17 R
        "ratioCoarse",       # 18 S
        "waterCementRatio",  # 19 T
    ),
}

DERIVED_COLUMNS: Tuple[str, ...] = (
    "wcRatio",          # 20 U
    "mixRatioString",   # 21 V
    "notes",            # 22 W
)

# Filled in by laboratory staff directly in the table, never by the service
OFFICE_USE_COLUMNS: Tuple[str, ...] = (
    "testedBy",              # 23 X
    "testedDate",            # 24 Y
    "compressiveStrength",   # 25 Z
    "officeRemarks",         # 26 AA
)


def main_columns(mode: InputMode) -> Tuple[str, ...]:
    """Columns written by the service to the main table of ``mode``."""
    return COMMON_COLUMNS + MIX_COLUMNS[mode] + DERIVED_COLUMNS


OFFICE_USE_START = len(main_columns(InputMode.KGM3))  # 23, same for both modes

RECORD_ID_COLUMN = 0

# Uniqueness scope shared by both main tables: an application number is
# stored at most once across kg/m3 and ratio rows
MAIN_KEY_SCOPE = "main"

# Names the kg/m3 main table has carried, matched ignoring case, repeated
# whitespace and slashes
KGM3_SHEET_ALIASES: Tuple[str, ...] = ("Client Master Sheet - kgm3", "Client Master Sheet - kg/m3")

ADMIXTURE_COLUMNS: Tuple[str, ...] = ("recordId", "timestamp", "clientName", "index", "name", "dosage")
SCM_COLUMNS: Tuple[str, ...] = ("recordId", "timestamp", "clientName", "index", "name", "percent")


def resolve_input_mode(value: Optional[object]) -> Optional[InputMode]:
    """
    Map an ``inputMode`` value to an InputMode.

    Returns the default mode for an absent or blank value and ``None`` for
    an unrecognized one.
    """
    if value is None:
        return DEFAULT_INPUT_MODE
    if isinstance(value, InputMode):
        return value
    text = str(value).strip().lower()
    if not text:
        return DEFAULT_INPUT_MODE
    return INPUT_MODE_ALIASES.get(text)
