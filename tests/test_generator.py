import math
import shlex
from datetime import datetime

import pytest

from prefdiff.command import (
    CommandKind,
    encode_value,
    format_float,
    generate,
    generate_command,
    render_script,
)
from prefdiff.command.generator import to_plist_literal
from prefdiff.differ import diff
from prefdiff.protocol.changes import (
    Added,
    ChangeSet,
    DomainChange,
    DomainChangeKind,
    Modified,
    Removed,
)
from prefdiff.protocol.errors import UnsupportedShapeError
from prefdiff.protocol.values import (
    Array,
    Boolean,
    Data,
    Date,
    Dictionary,
    Float,
    Integer,
    String,
    array,
    dictionary,
    to_value,
)

from mocks import make_snapshot


def _command(change, domain="com.example.dock"):
    kind = DomainChangeKind.MODIFIED
    domain_change = DomainChange(domain=domain, kind=kind, changes=(change,))
    return generate_command(domain_change, change)


def test_write_int() -> None:
    command = _command(Modified("tilesize", Integer(36), Integer(48)))

    assert command.kind == CommandKind.WRITE
    assert command.text == "defaults write com.example.dock tilesize -int 48"
    assert not command.degraded
    assert command.note is None


def test_write_bool() -> None:
    command = _command(Added("autohide", Boolean(True)))
    assert command.text == "defaults write com.example.dock autohide -bool true"


def test_delete() -> None:
    command = _command(Removed("legacyFlag", String("x")))

    assert command.kind == CommandKind.DELETE
    assert command.text == "defaults delete com.example.dock legacyFlag"


def test_global_domain_uses_its_name() -> None:
    command = _command(Removed("AppleInterfaceStyle", String("Dark")), domain="NSGlobalDomain")
    assert command.text == "defaults delete NSGlobalDomain AppleInterfaceStyle"


def test_command_points_back_at_its_change() -> None:
    change = Modified("tilesize", Integer(36), Integer(48))
    command = _command(change)
    assert command.change is change
    assert command.domain_change.domain == "com.example.dock"


@pytest.mark.parametrize(
    "value, args",
    [
        (Boolean(False), ["-bool", "false"]),
        (Integer(-3), ["-int", "-3"]),
        (Float(0.5), ["-float", "0.5"]),
        (String("Dark"), ["-string", "Dark"]),
        (String(""), ["-string", ""]),
        (Data(b"\x00\xffab"), ["-data", "00ff6162"]),
        (Date(datetime(2024, 3, 1, 9, 30)), ["-date", "2024-03-01T09:30:00Z"]),
        (array(["a", 1]), ["-array", "-string", "a", "-int", "1"]),
        (Array(), ["-array"]),
        (dictionary({"b": 1, "a": True}), ["-dict", "a", "-bool", "true", "b", "-int", "1"]),
        (Dictionary(), ["-dict"]),
    ],
)
def test_encode_value(value, args) -> None:
    encoded = encode_value(value)
    assert encoded.args == args
    assert not encoded.degraded


@pytest.mark.parametrize(
    "number, text",
    [
        (0.5, "0.5"),
        (3.0, "3.0"),
        (-0.0, "-0.0"),
        (1e-07, "0.0000001"),
        (1e22, "10000000000000000000000.0"),
        (0.1, "0.1"),
        (math.inf, "inf"),
        (-math.inf, "-inf"),
    ],
)
def test_format_float(number, text) -> None:
    assert format_float(number) == text


def test_format_float_round_trips() -> None:
    for number in (0.1, 1 / 3, 123456.789, 2.5e-10):
        assert float(format_float(number)) == number


def test_special_characters_are_quoted() -> None:
    command = _command(Added("my key", String("it's $HOME; rm -rf /")))

    assert shlex.split(command.text) == [
        "defaults", "write", "com.example.dock", "my key", "-string", "it's $HOME; rm -rf /",
    ]


def test_nested_container_is_degraded_not_dropped() -> None:
    value = to_value([{"label": "Safari"}, {"label": "Mail"}])
    command = _command(Added("persistent-apps", value))

    assert command.degraded
    assert "nested" in command.note
    args = shlex.split(command.text)
    assert args[:4] == ["defaults", "write", "com.example.dock", "persistent-apps"]
    assert args[4] == (
        "<array><dict><key>label</key><string>Safari</string></dict>"
        "<dict><key>label</key><string>Mail</string></dict></array>"
    )


def test_non_finite_float_is_degraded() -> None:
    encoded = encode_value(Float(math.nan))
    assert encoded.args == ["-float", "nan"]
    assert encoded.degraded


def test_strict_encoding_raises() -> None:
    with pytest.raises(UnsupportedShapeError):
        encode_value(to_value({"a": [1]}), strict=True)
    with pytest.raises(UnsupportedShapeError):
        encode_value(array([math.inf]), strict=True)


def test_to_plist_literal_escapes() -> None:
    value = to_value({"a<b": ["x & y", 1.5, False, b"\x01"]})
    assert to_plist_literal(value) == (
        "<dict><key>a&lt;b</key><array><string>x &amp; y</string>"
        "<real>1.5</real><false/><data>AQ==</data></array></dict>"
    )


def test_generate_golden(before_snapshot, after_snapshot) -> None:
    commands = generate(diff(before_snapshot, after_snapshot))

    assert [c.text for c in commands if not c.degraded] == [
        "defaults delete NSGlobalDomain AppleInterfaceStyle",
        "defaults write com.example.dock autohide -bool true",
        "defaults delete com.example.dock legacyFlag",
        "defaults write com.example.dock tilesize -int 48",
        "defaults write com.example.newapp launchCount -int 1",
        "defaults write com.example.newapp token -data 00ff6162",
    ]
    [degraded] = [c for c in commands if c.degraded]
    assert degraded.key == "persistent-apps"
    assert len(commands) == 7


def test_generate_one_command_per_change(before_snapshot, after_snapshot) -> None:
    change_set = diff(before_snapshot, after_snapshot)
    commands = generate(change_set)
    assert [(c.domain, c.key) for c in commands] == [
        (dc.domain, change.key) for dc, change in change_set.iter_changes()
    ]


def test_generate_is_deterministic(before_snapshot, after_snapshot) -> None:
    first = generate(diff(before_snapshot, after_snapshot))
    second = generate(diff(before_snapshot, after_snapshot))
    assert [c.text for c in first] == [c.text for c in second]


def test_generate_empty_change_set() -> None:
    assert generate(ChangeSet()) == []


def test_custom_executable() -> None:
    before = make_snapshot({"d": {"k": 1}})
    after = make_snapshot({"d": {"k": 2}})
    [command] = generate(diff(before, after), executable="/usr/bin/defaults")
    assert command.text == "/usr/bin/defaults write d k -int 2"


def test_render_script() -> None:
    commands = [
        _command(Modified("tilesize", Integer(36), Integer(48))),
        _command(Added("apps", to_value([[1]]))),
    ]

    script = render_script(commands)
    lines = script.splitlines()

    assert lines[0] == "#!/bin/sh"
    assert lines[1] == "# 2 preference change(s)"
    assert lines[2] == "defaults write com.example.dock tilesize -int 48"
    assert lines[3].startswith("# WARNING: nested")
    assert lines[4].startswith("defaults write com.example.dock apps ")
    assert script.endswith("\n")


def test_render_script_without_header() -> None:
    command = _command(Removed("legacyFlag", String("x")))
    assert render_script([command], header=False) == "defaults delete com.example.dock legacyFlag\n"


def test_command_to_dict() -> None:
    command = _command(Added("apps", to_value([[1]])))
    data = command.to_dict()

    assert data["kind"] == "WRITE"
    assert data["key"] == "apps"
    assert data["degraded"] is True
    assert "note" in data


def test_nested_date_precision_loss_is_noted() -> None:
    value = to_value([{"when": datetime(2024, 3, 1, 9, 30, 0, 250000)}])

    encoded = encode_value(value)

    assert "<date>2024-03-01T09:30:00Z</date>" in encoded.args[0]
    assert encoded.problems == [
        "nested array written as a plist literal",
        "fractional seconds dropped from nested dates",
    ]


def test_nested_whole_second_date_has_no_extra_note() -> None:
    encoded = encode_value(to_value([{"when": datetime(2024, 3, 1, 9, 30)}]))
    assert encoded.problems == ["nested array written as a plist literal"]


def test_top_level_date_keeps_fractional_seconds() -> None:
    encoded = encode_value(Date(datetime(2024, 3, 1, 9, 30, 0, 250000)))
    assert encoded.args == ["-date", "2024-03-01T09:30:00.25Z"]
    assert not encoded.degraded
