import json

import pytest

from unity_client.builder import build_request_document, resolve_compression_default
from unity_client.models import AccessMask, ParameterSet, TieringPolicy

GIB_10 = 10_737_418_240


def build_params(**overrides):
    values = {"names": ("DS1",), "pool_id": "pool_1", "size": GIB_10}
    values.update(overrides)
    return ParameterSet(**values)


def test_host_access_scenario():
    params = build_params(host_ids=("Host_12",), access_mask=AccessMask.PRODUCTION)

    document = build_request_document(params, "DS1", compression_default=True).to_dict()

    assert document["name"] == "DS1"
    assert document["lunParameters"]["pool"] == {"id": "pool_1"}
    assert document["lunParameters"]["size"] == GIB_10
    assert document["lunParameters"]["hostAccess"] == [
        {"host": {"id": "Host_12"}, "accessMask": "Production"}
    ]
    assert "fastVPParameters" not in document["lunParameters"]
    assert "snapScheduleParameters" not in document
    assert "description" not in document


def test_minimal_document_shape():
    document = build_request_document(build_params(), "DS1", compression_default=False).to_dict()

    assert document == {
        "name": "DS1",
        "lunParameters": {
            "pool": {"id": "pool_1"},
            "size": GIB_10,
            "isCompressionEnabled": False,
            "isThinEnabled": True,
        },
    }


def test_snap_schedule_scenario():
    params = build_params(snap_schedule="sched_1", is_snap_schedule_paused=True)

    document = build_request_document(params, "DS1", compression_default=False).to_dict()

    assert document["snapScheduleParameters"] == {
        "snapSchedule": {"id": "sched_1"},
        "isSnapSchedulePaused": True,
    }


def test_snap_schedule_paused_flag_alone_is_ignored():
    params = build_params(is_snap_schedule_paused=True)

    document = build_request_document(params, "DS1", compression_default=False).to_dict()

    assert "snapScheduleParameters" not in document


def test_snap_schedule_includes_unpaused_state():
    params = build_params(snap_schedule="sched_1")

    document = build_request_document(params, "DS1", compression_default=False).to_dict()

    assert document["snapScheduleParameters"]["isSnapSchedulePaused"] is False


def test_compression_uses_remote_default_when_unbound():
    document = build_request_document(build_params(), "DS1", compression_default=False).to_dict()

    assert document["lunParameters"]["isCompressionEnabled"] is False


def test_explicit_compression_wins_over_default():
    params = build_params(is_compression_enabled=True)

    document = build_request_document(params, "DS1", compression_default=False).to_dict()

    assert document["lunParameters"]["isCompressionEnabled"] is True


def test_unbound_compression_without_default_is_an_error():
    with pytest.raises(ValueError):
        build_request_document(build_params(), "DS1")


@pytest.mark.parametrize("thin", [True, False])
def test_thin_flag_only_sent_when_enabled(thin):
    params = build_params(is_thin_enabled=thin)

    document = build_request_document(params, "DS1", compression_default=False).to_dict()

    assert ("isThinEnabled" in document["lunParameters"]) == thin


def test_tiering_policy_requires_explicit_binding():
    bound = build_params(tiering_policy="autotier_high")

    document = build_request_document(bound, "DS1", compression_default=False).to_dict()

    assert document["lunParameters"]["fastVPParameters"] == {"tieringPolicy": "Autotier_High"}
    assert bound.tiering_policy is TieringPolicy.AUTOTIER_HIGH


def test_host_access_keeps_order_and_duplicates():
    params = build_params(host_ids=("Host_3", "Host_1", "Host_3"), access_mask="Both")

    document = build_request_document(params, "DS1", compression_default=False).to_dict()

    entries = document["lunParameters"]["hostAccess"]
    assert [entry["host"]["id"] for entry in entries] == ["Host_3", "Host_1", "Host_3"]
    assert {entry["accessMask"] for entry in entries} == {"Both"}


def test_empty_description_is_omitted():
    document = build_request_document(
        build_params(description=""), "DS1", compression_default=False
    ).to_dict()

    assert "description" not in document


def test_key_order_is_stable():
    params = build_params(
        description="vmfs datastore",
        tiering_policy=TieringPolicy.LOWEST,
        host_ids=("Host_1",),
        snap_schedule="sched_1",
    )

    document = build_request_document(params, "DS1", compression_default=True).to_dict()

    assert list(document) == ["name", "description", "lunParameters", "snapScheduleParameters"]
    assert list(document["lunParameters"]) == [
        "pool",
        "size",
        "fastVPParameters",
        "isCompressionEnabled",
        "hostAccess",
        "isThinEnabled",
    ]


def test_build_is_idempotent():
    params = build_params(host_ids=("Host_1", "Host_2"), snap_schedule="sched_1")

    first = build_request_document(params, "DS1", compression_default=True)
    second = build_request_document(params, "DS1", compression_default=True)

    assert first == second
    assert json.dumps(first.to_dict()) == json.dumps(second.to_dict())


def test_document_has_no_null_values():
    def walk(value):
        if isinstance(value, dict):
            for item in value.values():
                yield from walk(item)
        elif isinstance(value, list):
            for item in value:
                yield from walk(item)
        else:
            yield value

    document = build_request_document(build_params(), "DS1", compression_default=True).to_dict()

    assert None not in list(walk(document))


class RecordingProbe:
    def __init__(self, result):
        self.result = result
        self.calls = []

    def supports_compression_default(self, session, pool_id):
        self.calls.append((session, pool_id))
        return self.result


def test_probe_only_called_when_compression_unbound():
    probe = RecordingProbe(True)

    assert resolve_compression_default(build_params(), "session", probe) is True
    assert probe.calls == [("session", "pool_1")]

    bound = build_params(is_compression_enabled=False)
    assert resolve_compression_default(bound, "session", probe) is None
    assert len(probe.calls) == 1
