from mixintake.config.constants import OFFICE_USE_START, InputMode, main_columns
from mixintake.services.mix_derivation import DerivedMixValues
from mixintake.services.sheet_schema import (
    build_child_rows,
    build_main_row,
    parse_child_rows,
    parse_main_row,
    record_id_of,
)


def _values(**kwargs):
    data = {
        "clientName": "Adeyemi Builders Ltd",
        "contactEmail": "site@adeyemi.ng",
        "phoneNumber": "08031234567",
        "organisationType": "Contractor",
        "contactPerson": "Tunde Adeyemi",
        "projectSite": "Akoka",
        "crushDate": "2025-03-14",
        "concreteType": "Normal weight",
        "cementType": "CEM II",
        "slump": 75,
        "ageDays": 28,
        "cubesCount": 3,
        "concreteGrade": "C25/30",
        "notes": "",
        "inputMode": InputMode.KGM3,
    }
    data.update(kwargs)
    return data


def test_main_row_layout_kgm3():
    values = _values(cementKgm3=350, waterKgm3=175, fineKgm3=700, mediumKgm3=None, coarseKgm3=1100)
    row = build_main_row(
        InputMode.KGM3, values, "UNILAG-CL-K000001", "2025-03-14T10:00:00.000Z",
        DerivedMixValues(0.5, "1 : 2.00 : 3.14"),
    )

    assert len(row) == OFFICE_USE_START == 23
    assert row[0] == "UNILAG-CL-K000001"
    assert row[1] == "2025-03-14T10:00:00.000Z"
    assert row[2] == "Adeyemi Builders Ltd"
    assert row[14] == "C25/30"
    assert row[15:20] == [350, 175, 700, "", 1100]
    assert row[20:23] == [0.5, "1 : 2.00 : 3.14", ""]


def test_main_row_layout_ratio():
    values = _values(inputMode=InputMode.RATIO, ratioCement=1, ratioFine=2, ratioCoarse=4, waterCementRatio=0.45)
    row = build_main_row(InputMode.RATIO, values, "UNILAG-CL-R000001", "ts", DerivedMixValues(0.45, "1 : 2.00 : 4.00"))

    assert row[15:20] == [1, 2, "", 4, 0.45]
    assert row[20] == 0.45


def test_parse_main_row_round_trips_form_fields():
    values = _values(cementKgm3=350, waterKgm3=175, fineKgm3=700, mediumKgm3=300, coarseKgm3=1100, notes="n")
    row = build_main_row(InputMode.KGM3, values, "UNILAG-CL-K000001", "ts", DerivedMixValues(0.5, "1 : 2.00 : 0.86 : 3.14"))

    data = parse_main_row(InputMode.KGM3, row)

    assert data["inputMode"] == "kgm3"
    assert data["recordId"] == "UNILAG-CL-K000001"
    assert data["mediumKgm3"] == 300
    assert data["mixRatioString"] == "1 : 2.00 : 0.86 : 3.14"
    assert data["notes"] == "n"
    # other mode's fields are blank, ratio cement keeps its default
    assert data["ratioFine"] == ""
    assert data["waterCementRatio"] == ""
    assert data["ratioCement"] == "1"
    assert data["officeUse"] == {
        "testedBy": "",
        "testedDate": "",
        "compressiveStrength": "",
        "officeRemarks": "",
    }


def test_parse_main_row_reads_office_use_block():
    row = ["UNILAG-CL-R000003"] + [""] * (OFFICE_USE_START - 1) + ["A. Bello", "2025-04-11", 31.5, "OK"]

    data = parse_main_row(InputMode.RATIO, row)

    assert data["officeUse"] == {
        "testedBy": "A. Bello",
        "testedDate": "2025-04-11",
        "compressiveStrength": 31.5,
        "officeRemarks": "OK",
    }


def test_parse_short_row_pads_with_blanks():
    data = parse_main_row(InputMode.RATIO, ["UNILAG-CL-R000001", "ts"])

    assert set(main_columns(InputMode.RATIO)) <= set(data)
    assert data["clientName"] == ""
    assert data["ratioCement"] == "1"


def test_child_rows_are_indexed_from_one():
    rows = build_child_rows(
        "UNILAG-CL-K000001", "ts", "Client",
        [{"name": "Superplasticizer", "dosage": "1.2"}, {"name": "Retarder", "dosage": "0.3"}],
        "dosage",
    )

    assert rows == [
        ["UNILAG-CL-K000001", "ts", "Client", 1, "Superplasticizer", "1.2"],
        ["UNILAG-CL-K000001", "ts", "Client", 2, "Retarder", "0.3"],
    ]


def test_parse_child_rows_skips_blank_pairs():
    rows = [
        ["R1", "ts", "Client", 1, "Fly ash", "20"],
        ["R1", "ts", "Client", 2, "", ""],
        ["R1", "ts", "Client", 3],
    ]

    assert parse_child_rows(rows, "percent") == [{"name": "Fly ash", "percent": "20"}]


def test_record_id_of():
    assert record_id_of([" UNILAG-CL-K000001 ", "ts"]) == "UNILAG-CL-K000001"
    assert record_id_of([]) == ""
    assert record_id_of(None) == ""
    assert record_id_of([None]) == ""
