"""
Interpreter Configuration Tests
===============================

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import dataclasses

import pytest

from chip8_vm.emulator import InterpreterConfig


ENV_VARS = ("CHIP8_STRICT", "CHIP8_SPRITE_WRAP", "CHIP8_INDEX_WRAP", "CHIP8_SEED")


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every CHIP8_* variable."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestInterpreterConfig:
    """Test defaults and environment loading."""

    def test_defaults(self):
        """Lenient, clipped, unmasked, unseeded."""
        config = InterpreterConfig()
        assert config.strict is False
        assert config.sprite_wrap is False
        assert config.index_wrap is False
        assert config.seed is None

    def test_frozen(self):
        """Configs are immutable."""
        config = InterpreterConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.strict = True

    def test_from_env_empty(self, clean_env):
        """No variables gives the defaults."""
        assert InterpreterConfig.from_env() == InterpreterConfig()

    def test_from_env_flags(self, clean_env):
        """Boolean variables accept the usual spellings."""
        clean_env.setenv("CHIP8_STRICT", "1")
        clean_env.setenv("CHIP8_SPRITE_WRAP", "yes")
        clean_env.setenv("CHIP8_INDEX_WRAP", "TRUE")
        config = InterpreterConfig.from_env()
        assert config.strict is True
        assert config.sprite_wrap is True
        assert config.index_wrap is True

    def test_from_env_false(self, clean_env):
        """False spellings keep the flag off."""
        clean_env.setenv("CHIP8_STRICT", "off")
        assert InterpreterConfig.from_env().strict is False

    def test_from_env_seed(self, clean_env):
        """Seeds accept decimal and prefixed forms."""
        clean_env.setenv("CHIP8_SEED", "42")
        assert InterpreterConfig.from_env().seed == 42
        clean_env.setenv("CHIP8_SEED", "0x10")
        assert InterpreterConfig.from_env().seed == 16

    def test_from_env_invalid_ignored(self, clean_env):
        """Unparseable values leave the default in place."""
        clean_env.setenv("CHIP8_STRICT", "maybe")
        clean_env.setenv("CHIP8_SEED", "abc")
        assert InterpreterConfig.from_env() == InterpreterConfig()
