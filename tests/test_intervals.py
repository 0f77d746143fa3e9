import pickletools
import struct

from carbonstore.intervals import IntervalSet

START = 1322087998
END = 1479767975


def _ops(data):
    return list(pickletools.genops(data + b"."))


def test_layout_length_and_prefix():
    data = IntervalSet(START, END).marshal_pickle()
    assert len(data) == 172
    assert data.startswith(b"(cgraphite.intervals\nIntervalSet\no}(U\tintervals](")
    assert data.endswith(b"ub")


def test_opcode_sequence():
    names = [op.name for op, _, _ in _ops(IntervalSet(START, END).marshal_pickle())]
    assert names == [
        "MARK", "GLOBAL", "OBJ", "EMPTY_DICT", "MARK", "SHORT_BINSTRING",
        "EMPTY_LIST", "MARK", "GLOBAL", "OBJ", "EMPTY_DICT", "MARK",
        "SHORT_BINSTRING", "BINFLOAT", "SHORT_BINSTRING", "BINFLOAT",
        "SHORT_BINSTRING", "BINFLOAT", "SHORT_BINSTRING", "BINFLOAT", "BINFLOAT",
        "TUPLE2", "SETITEMS", "BUILD", "APPEND", "SHORT_BINSTRING", "BINFLOAT",
        "SETITEMS", "BUILD", "STOP",
    ]


def test_globals_and_keys():
    args = [
        arg
        for op, arg, _ in _ops(IntervalSet(START, END).marshal_pickle())
        if op.name in ("GLOBAL", "SHORT_BINSTRING")
    ]
    assert args == [
        "graphite.intervals IntervalSet",
        "intervals",
        "graphite.intervals Interval",
        "start",
        "size",
        "end",
        "tuple",
        "size",
    ]


def test_float_positions_and_values():
    data = IntervalSet(START, END).marshal_pickle()
    floats = [
        (pos, arg) for op, arg, pos in _ops(data) if op.name == "BINFLOAT"
    ]
    assert [pos for pos, _ in floats] == [88, 103, 117, 133, 142, 161]
    size = float(END - START)
    assert [value for _, value in floats] == [
        float(START), size, float(END), float(START), float(END), size
    ]
    assert data[89:97] == struct.pack(">d", float(START))
    assert data[162:170] == struct.pack(">d", size)


def test_only_floats_change_between_intervals():
    first = IntervalSet(START, END).marshal_pickle()
    second = IntervalSet(10, 20).marshal_pickle()
    float_spans = [(89, 97), (104, 112), (118, 126), (134, 142), (143, 151), (162, 170)]
    mask = set()
    for lo, hi in float_spans:
        mask.update(range(lo, hi))
    assert len(first) == len(second)
    assert all(first[i] == second[i] for i in range(len(first)) if i not in mask)


def test_size_wraps_as_32_bit():
    data = IntervalSet(-(2**31), 2**31 - 1).marshal_pickle()
    floats = [arg for op, arg, _ in _ops(data) if op.name == "BINFLOAT"]
    assert floats[1] == -1.0
    assert floats[0] == float(-(2**31))