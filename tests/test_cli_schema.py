from unity_client.cli_schema import CLI_TABLE_VIEWS, Column


def test_column_uses_first_present_key():
    column = Column("Size", keys=("sizeTotal", "sizeAllocated"))

    assert column.render({"sizeTotal": None, "sizeAllocated": 5}) == "5"
    assert column.render({}) == ""


def test_created_view_renders_row_in_column_order():
    view = CLI_TABLE_VIEWS["luns.created"]
    row = {
        "session": "unity01",
        "name": "DS1",
        "id": "sv_1",
        "sizeTotal": 10737418240,
        "pools": ["pool_1"],
        "luns": ["sv_1"],
        "snapSchedule": None,
        "isSnapSchedulePaused": False,
    }

    assert [column.render(row) for column in view.columns] == [
        "unity01",
        "DS1",
        "sv_1",
        "10.00",
        "pool_1",
        "sv_1",
        "",
        "No",
    ]
