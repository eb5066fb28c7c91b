import pytest

from wmkit.layout import TAGMASK, Client
from wmkit.persist import (
    ClientFields,
    MonitorFields,
    decode_client_fields,
    decode_monitor_fields,
    encode_client_fields,
    encode_monitor_fields,
    layout_index,
    number_clients,
    restore_tags,
)


@pytest.mark.parametrize(
    "fields",
    [
        ClientFields(0, 0, False),
        ClientFields(3, 17, True),
        ClientFields(7, 255, False),
        ClientFields(1, 1, True),
    ],
)
def test_client_fields_round_trip(fields):
    assert decode_client_fields(encode_client_fields(fields)) == fields


@pytest.mark.parametrize(
    "fields",
    [
        MonitorFields(0, 0, False),
        MonitorFields(1, 2, True),
        MonitorFields(7, 15, True),
        MonitorFields(3, 0, False),
    ],
)
def test_monitor_fields_round_trip(fields):
    assert decode_monitor_fields(encode_monitor_fields(fields)) == fields


def test_client_fields_fit_in_32_bits():
    value = encode_client_fields(ClientFields(7, 255, True))
    assert 0 <= value <= 0xFFFFFFFF


def test_monitor_showbar_is_top_bit():
    value = encode_monitor_fields(MonitorFields(0, 0, True))
    assert value >> 31 == 1
    assert value & 0x7FFFFFFF == 0


def test_client_monitor_is_masked():
    decoded = decode_client_fields(encode_client_fields(ClientFields(9, 4, False)))
    assert decoded.monitor == 9 & 0x7
    assert decoded.idx == 4


def test_monitor_fields_do_not_overlap():
    a = encode_monitor_fields(MonitorFields(nmaster=7))
    b = encode_monitor_fields(MonitorFields(layout=15))
    c = encode_monitor_fields(MonitorFields(showbar=True))
    assert a & b == 0 and a & c == 0 and b & c == 0


def test_layout_index_by_identity():
    layouts = [object(), object(), object()]
    assert layout_index(layouts, layouts[2]) == 2
    assert layout_index(layouts, layouts[0]) == 0


def test_layout_index_missing_is_zero():
    layouts = [object(), object()]
    assert layout_index(layouts, object()) == 0


def test_number_clients_assigns_positions():
    clients = [Client(name=str(i)) for i in range(4)]
    assert number_clients(clients) == 4
    assert [c.idx for c in clients] == [1, 2, 3, 4]


def test_number_clients_empty():
    assert number_clients([]) == 0


def test_restore_tags_masks_to_existing_tags():
    assert restore_tags(0xFFFFFFFF) == TAGMASK
    assert restore_tags(0b101) == 0b101
    assert restore_tags(0xF0, 0x30) == 0x30