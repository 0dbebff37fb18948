"""Tests for machine description parsing."""

import json
from pathlib import Path

import pytest

from queso.exceptions import MachineSpecError
from queso.models import MachineSpec, OptionSpec, PropertySpec, load_machine_spec, parse_machine_spec
from queso.options import Option
from queso.properties import Property
from queso.settings import Settings

SAMPLE = {
    "executable": "qemu-system-x86_64",
    "options": [
        {"flag": "accel", "name": "kvm"},
        {"flag": "m", "properties": {"size": "1G"}},
        {
            "flag": "drive",
            "properties": [
                {"key": "file", "value": "disk.img"},
                {"key": "if", "value": "virtio"},
                {"key": "read-only", "value": True},
            ],
        },
    ],
}

# Latin-1 byte inside an otherwise valid document
NON_UTF8 = b'{"options": [{"flag": "name", "name": "\xff"}]}'


class TestPropertySpec:
    """Tests for PropertySpec."""

    def test_to_property(self) -> None:
        assert PropertySpec(key="mux", value=True).to_property() == Property("mux", True)

    def test_int_stays_int(self) -> None:
        assert PropertySpec.model_validate({"key": "index", "value": 0}).to_property().arg() == "index=0"

    def test_empty_key_rejected(self) -> None:
        with pytest.raises(ValueError):
            PropertySpec(key="", value=1)


class TestOptionSpec:
    """Tests for OptionSpec."""

    def test_mapping_properties_keep_order(self) -> None:
        spec = OptionSpec.model_validate({"flag": "smp", "properties": {"cpus": 4, "cores": 2, "threads": 2}})
        assert spec.to_option().args_string() == "-smp cpus=4,cores=2,threads=2"

    def test_list_properties_keep_duplicates(self) -> None:
        spec = OptionSpec.model_validate(
            {"flag": "semihosting-config", "properties": [{"key": "arg", "value": "a"}, {"key": "arg", "value": "b"}]}
        )
        assert spec.to_option().args_string() == "-semihosting-config arg=a,arg=b"

    def test_leading_dash(self) -> None:
        spec = OptionSpec(flag="foo", name="bar", leading_dash=False)
        assert spec.to_option() == Option("foo", "bar", leading_dash=False)

    def test_flag_required(self) -> None:
        with pytest.raises(ValueError):
            OptionSpec.model_validate({"name": "kvm"})


class TestParseMachineSpec:
    """Tests for parse_machine_spec()."""

    def test_sample(self) -> None:
        spec = parse_machine_spec(json.dumps(SAMPLE))
        assert spec.executable == "qemu-system-x86_64"
        assert [option.args_string() for option in spec.to_options()] == [
            "-accel kvm",
            "-m size=1G",
            "-drive file=disk.img,if=virtio,read-only=on",
        ]

    def test_to_qemu(self) -> None:
        qemu = parse_machine_spec(json.dumps(SAMPLE)).to_qemu()
        assert qemu.command_line() == (
            "qemu-system-x86_64 -accel kvm -m size=1G -drive file=disk.img,if=virtio,read-only=on"
        )

    def test_executable_from_settings(self) -> None:
        spec = MachineSpec(options=[OptionSpec(flag="S")])
        qemu = spec.to_qemu(Settings(qemu_bin=Path("/opt/qemu-system-aarch64")))
        assert qemu.command() == ["/opt/qemu-system-aarch64", "-S"]

    def test_empty_description(self) -> None:
        assert parse_machine_spec("{}").to_options() == []

    def test_invalid_json(self) -> None:
        with pytest.raises(MachineSpecError) as exc_info:
            parse_machine_spec("{not json", source="vm.json")
        assert exc_info.value.context["source"] == "vm.json"
        assert "vm.json" in exc_info.value.message

    def test_unknown_field(self) -> None:
        with pytest.raises(MachineSpecError):
            parse_machine_spec(json.dumps({"options": [{"flag": "S", "bogus": 1}]}))

    def test_nested_value_rejected(self) -> None:
        with pytest.raises(MachineSpecError):
            parse_machine_spec(json.dumps({"options": [{"flag": "m", "properties": {"size": [1]}}]}))

    def test_bytes(self) -> None:
        spec = parse_machine_spec(json.dumps(SAMPLE).encode())
        assert len(spec.options) == 3

    def test_undecodable_bytes(self) -> None:
        with pytest.raises(MachineSpecError) as exc_info:
            parse_machine_spec(NON_UTF8, source="<stdin>")
        assert exc_info.value.context["source"] == "<stdin>"
        assert "UTF-8" in exc_info.value.message


class TestLoadMachineSpec:
    """Tests for load_machine_spec()."""

    def test_load(self, tmp_path: Path) -> None:
        path = tmp_path / "vm.json"
        path.write_text(json.dumps(SAMPLE))
        assert len(load_machine_spec(path).options) == 3

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(MachineSpecError) as exc_info:
            load_machine_spec(tmp_path / "missing.json")
        assert exc_info.value.context["source"].endswith("missing.json")

    def test_not_utf8(self, tmp_path: Path) -> None:
        path = tmp_path / "vm.json"
        path.write_bytes(NON_UTF8)
        with pytest.raises(MachineSpecError) as exc_info:
            load_machine_spec(path)
        assert exc_info.value.context["source"] == str(path)
        assert exc_info.value.context["position"] == NON_UTF8.index(b"\xff")
