import pytest

from unity_client.exceptions import UnexpectedResponseError, ValidationError
from unity_client.models import AccessMask, ParameterSet, VMwareLun, size_to_bytes


def test_parameter_set_normalizes_sequences_and_enums():
    params = ParameterSet(
        names=["DS1", "DS2"],
        pool_id="pool_1",
        size=1024,
        host_ids=["Host_1"],
        access_mask="snapshot",
    )

    assert params.names == ("DS1", "DS2")
    assert params.host_ids == ("Host_1",)
    assert params.access_mask is AccessMask.SNAPSHOT
    assert params.is_thin_enabled is True
    assert params.is_compression_enabled is None


def test_single_name_string_becomes_tuple():
    params = ParameterSet(names="DS1", pool_id="pool_1", size=1024)
    assert params.names == ("DS1",)


@pytest.mark.parametrize(
    "overrides",
    [
        {"names": ()},
        {"names": ("DS1", " ")},
        {"pool_id": ""},
        {"size": 0},
        {"size": -5},
        {"size": True},
        {"host_ids": ("Host_1", "")},
        {"access_mask": "ReadWrite"},
        {"tiering_policy": "fastest"},
    ],
)
def test_parameter_set_rejects_invalid_input(overrides):
    values = {"names": ("DS1",), "pool_id": "pool_1", "size": 1024}
    values.update(overrides)

    with pytest.raises(ValidationError):
        ParameterSet(**values)


def test_validation_error_is_value_error():
    with pytest.raises(ValueError):
        ParameterSet(names=(), pool_id="pool_1", size=1)


def test_parameter_set_is_immutable():
    params = ParameterSet(names=("DS1",), pool_id="pool_1", size=1024)
    with pytest.raises(AttributeError):
        params.size = 2048


def test_host_access_grants_share_mask():
    params = ParameterSet(
        names=("DS1",), pool_id="pool_1", size=1024, host_ids=("Host_1", "Host_2"), access_mask="Both"
    )

    grants = params.host_access_grants()

    assert [grant.host_id for grant in grants] == ["Host_1", "Host_2"]
    assert all(grant.access_mask is AccessMask.BOTH for grant in grants)


def test_size_to_bytes_units():
    assert size_to_bytes("10", "gib") == 10 * 1024**3
    assert size_to_bytes(10, "GB") == 10 * 1000**3
    assert size_to_bytes(4096) == 4096


def test_size_to_bytes_invalid_unit():
    with pytest.raises(ValidationError, match="Invalid unit: parsec"):
        size_to_bytes(1, "parsec")


def test_size_to_bytes_invalid_number():
    with pytest.raises(ValidationError):
        size_to_bytes("ten", "gb")


@pytest.mark.parametrize("value", ["nan", "inf", "-Infinity"])
def test_size_to_bytes_rejects_non_finite(value):
    with pytest.raises(ValidationError, match="finite"):
        size_to_bytes(value, "gib")


def test_size_to_bytes_keeps_exact_byte_counts():
    assert size_to_bytes("9007199254740993", "bytes") == 9007199254740993
    assert size_to_bytes("1.5", "kib") == 1536
    assert size_to_bytes("0.5", "gib") == 512 * 1024**2


def test_size_to_bytes_rejects_fractional_bytes():
    with pytest.raises(ValidationError, match="whole number of bytes"):
        size_to_bytes("1.5", "bytes")


@pytest.mark.parametrize("value, unit", [("1e400", "gib"), ("20000000", "tib")])
def test_size_to_bytes_rejects_oversized_values(value, unit):
    with pytest.raises(ValidationError, match="exceeds"):
        size_to_bytes(value, unit)


def test_vmware_lun_from_payload():
    lun = VMwareLun.from_payload(
        {
            "content": {
                "id": "sv_1",
                "name": "DS1",
                "type": 7,
                "sizeTotal": 10737418240,
                "pools": [{"id": "pool_1"}],
                "luns": [{"id": "sv_1"}],
                "snapSchedule": {"id": "sched_1"},
                "isSnapSchedulePaused": True,
                "blockHostAccess": [{"host": {"id": "Host_12"}, "accessMask": 1}],
            }
        },
        session="unity01",
    )

    assert lun.id == "sv_1"
    assert lun.pool_ids == ["pool_1"]
    assert lun.snap_schedule_id == "sched_1"
    assert lun.host_access == [{"host": {"id": "Host_12"}, "accessMask": 1}]
    assert lun.to_row()["session"] == "unity01"


def test_vmware_lun_requires_id():
    with pytest.raises(UnexpectedResponseError):
        VMwareLun.from_payload({"content": {"name": "DS1"}})
