"""
c8run Command-Line Tests
========================

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import pytest


def program(*words: int) -> bytes:
    """Assemble instruction words into a big-endian program image."""
    return b"".join(word.to_bytes(2, "big") for word in words)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep CHIP8_* settings from the caller's environment out of the runs."""
    for name in ("CHIP8_STRICT", "CHIP8_SPRITE_WRAP", "CHIP8_INDEX_WRAP", "CHIP8_SEED"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def draw_rom(tmp_path):
    """Program that draws the "0" glyph at (0, 0) and loops."""
    rom = tmp_path / "zero.ch8"
    rom.write_bytes(program(0x600F, 0xA000, 0x6100, 0xD115, 0x1208))
    return rom


class TestC8Run:
    """Tests for the c8run headless runner."""

    def test_cli_help(self):
        """Test CLI help output."""
        from click.testing import CliRunner
        from chip8_vm.cli.c8run import main

        runner = CliRunner()
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "Run a CHIP-8 program headless" in result.output

    def test_cli_version(self):
        """Test CLI version output."""
        from click.testing import CliRunner
        from chip8_vm.cli.c8run import main

        runner = CliRunner()
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert "1.0.0" in result.output

    def test_cli_prints_screen(self, draw_rom):
        """Final screen is printed as text."""
        from click.testing import CliRunner
        from chip8_vm.cli.c8run import main

        runner = CliRunner()
        result = runner.invoke(main, [str(draw_rom), "-n", "50"])

        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0].startswith("####....")
        assert lines[1].startswith("#..#....")

    def test_cli_registers(self, draw_rom):
        """--registers dumps CPU state."""
        from click.testing import CliRunner
        from chip8_vm.cli.c8run import main

        runner = CliRunner()
        result = runner.invoke(main, [str(draw_rom), "-n", "50", "-q", "-r"])

        assert result.exit_code == 0
        assert "V0=0F" in result.output
        assert "PC=$208" in result.output
        assert "####" not in result.output

    def test_cli_missing_file(self, tmp_path):
        """Missing input is a usage error."""
        from click.testing import CliRunner
        from chip8_vm.cli.c8run import main

        runner = CliRunner()
        result = runner.invoke(main, [str(tmp_path / "missing.ch8")])

        assert result.exit_code == 2

    def test_cli_stack_underflow(self, tmp_path):
        """A program that crashes exits with status 1."""
        from click.testing import CliRunner
        from chip8_vm.cli.c8run import main

        rom = tmp_path / "crash.ch8"
        rom.write_bytes(program(0x00EE))

        runner = CliRunner()
        result = runner.invoke(main, [str(rom), "-q"])

        assert result.exit_code == 1
        assert "stack underflow" in result.output

    def test_cli_lenient_unknown_opcode(self, tmp_path):
        """Unknown opcodes are skipped by default."""
        from click.testing import CliRunner
        from chip8_vm.cli.c8run import main

        rom = tmp_path / "unknown.ch8"
        rom.write_bytes(program(0xFFFF, 0x1202))

        runner = CliRunner()
        result = runner.invoke(main, [str(rom), "-q", "-n", "10"])

        assert result.exit_code == 0

    def test_cli_strict_unknown_opcode(self, tmp_path):
        """--strict turns unknown opcodes into a failure."""
        from click.testing import CliRunner
        from chip8_vm.cli.c8run import main

        rom = tmp_path / "unknown.ch8"
        rom.write_bytes(program(0xFFFF, 0x1202))

        runner = CliRunner()
        result = runner.invoke(main, [str(rom), "-q", "--strict"])

        assert result.exit_code == 1
        assert "unknown opcode 0xFFFF" in result.output

    def test_cli_strict_from_env(self, tmp_path, monkeypatch):
        """CHIP8_STRICT enables strict mode without the flag."""
        from click.testing import CliRunner
        from chip8_vm.cli.c8run import main

        rom = tmp_path / "unknown.ch8"
        rom.write_bytes(program(0xFFFF, 0x1202))
        monkeypatch.setenv("CHIP8_STRICT", "1")

        runner = CliRunner()
        result = runner.invoke(main, [str(rom), "-q"])

        assert result.exit_code == 1

    def test_cli_held_key(self, tmp_path):
        """--key holds a key down for the whole run."""
        from click.testing import CliRunner
        from chip8_vm.cli.c8run import main

        # $200: V0=5 / skip if key V0 held / loop / V1=1 / loop
        rom = tmp_path / "key.ch8"
        rom.write_bytes(program(0x6005, 0xE09E, 0x1204, 0x6101, 0x1208))

        runner = CliRunner()
        result = runner.invoke(main, [str(rom), "-q", "-r", "-k", "5"])
        assert "V1=01" in result.output

        result = runner.invoke(main, [str(rom), "-q", "-r", "--qwerty", "-k", "W"])
        assert "V1=01" in result.output

    def test_cli_bad_key(self, draw_rom):
        """Keys outside the layout are a usage error."""
        from click.testing import CliRunner
        from chip8_vm.cli.c8run import main

        runner = CliRunner()
        result = runner.invoke(main, [str(draw_rom), "-k", "P"])

        assert result.exit_code == 2

    def test_cli_png(self, draw_rom, tmp_path):
        """--png writes a screenshot."""
        pytest.importorskip("PIL")
        from click.testing import CliRunner
        from chip8_vm.cli.c8run import main

        out = tmp_path / "screen.png"

        runner = CliRunner()
        result = runner.invoke(main, [str(draw_rom), "-q", "--png", str(out), "--scale", "2"])

        assert result.exit_code == 0
        assert out.read_bytes()[:4] == b"\x89PNG"
