import pytest

from mixintake.config.constants import InputMode
from mixintake.core.errors import StorageFailureError
from mixintake.services.lookup_service import LookupService, normalize_table_name, resolve_table_name
from mixintake.services.row_store import RowStoreError


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Client Master Sheet - kgm3", "client master sheet - kgm3"),
        ("Client Master Sheet - kg/m3", "client master sheet - kgm3"),
        ("  CLIENT\tMaster   Sheet - KG/M3 ", "client master sheet - kgm3"),
    ],
)
def test_normalize_table_name(name, expected):
    assert normalize_table_name(name) == expected


class TestResolveTableName:
    def test_exact_match_wins(self):
        existing = ["client master sheet - kgm3", "Client Master Sheet - kg/m3"]
        candidates = ["Client Master Sheet - kgm3", "Client Master Sheet - kg/m3"]

        assert resolve_table_name(existing, candidates) == "Client Master Sheet - kg/m3"

    def test_normalized_match(self):
        assert resolve_table_name(["CLIENT MASTER SHEET - KG/M3"], ["Client Master Sheet - kgm3"]) == (
            "CLIENT MASTER SHEET - KG/M3"
        )

    def test_falls_back_to_first_candidate(self):
        assert resolve_table_name(["Client SCMs"], ["Client Master Sheet - kgm3", "Other"]) == (
            "Client Master Sheet - kgm3"
        )


class TestSearchOrder:
    async def test_configured_names_when_store_is_empty(self, row_store, settings):
        service = LookupService(row_store, settings=settings)

        assert await service._search_order() == [
            (InputMode.RATIO, settings.sheet_ratio),
            (InputMode.KGM3, settings.sheet_kgm3),
        ]

    async def test_alias_of_mass_table(self, row_store, settings):
        await row_store.append_rows("Client Master Sheet - kg/m3", [["UNILAG-CL-K000001"]])
        service = LookupService(row_store, settings=settings)

        order = await service._search_order()

        assert order[1] == (InputMode.KGM3, "Client Master Sheet - kg/m3")

    async def test_listing_failure_is_a_storage_error(self, row_store, settings):
        async def broken_list_tables():
            raise RowStoreError("*", "list", "connection reset")

        row_store.list_tables = broken_list_tables
        service = LookupService(row_store, settings=settings)

        with pytest.raises(StorageFailureError):
            await service.lookup("UNILAG-CL-K000001")
