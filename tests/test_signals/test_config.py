"""
Tests for swing configuration: presets, overrides and validation.
"""
import pytest
from swingscan.signals.config import (
    SwingConfig,
    BASE_CONFIG,
    DEFAULT_PRESET,
    PRESET_NAMES,
    normalize_overrides,
    resolve_config,
)
from swingscan.shared.defaults import RSI_MIN, RSI_MAX, REL_VOL_MIN, MAX_STRETCH_PCT
from swingscan.shared.errors import InvalidInput
from swingscan.shared.types import EntryMode


class TestSwingConfig:
    """Test SwingConfig dataclass."""

    def test_base_config_uses_defaults(self):
        """Base config should use centralized defaults."""
        assert BASE_CONFIG.rsi_min == RSI_MIN
        assert BASE_CONFIG.rsi_max == RSI_MAX
        assert BASE_CONFIG.rel_vol_min == REL_VOL_MIN
        assert BASE_CONFIG.max_stretch_pct == MAX_STRETCH_PCT
        assert BASE_CONFIG.entry_mode == EntryMode.PULLBACK
        assert BASE_CONFIG.allow_repeat_entries is False

    def test_reserved_flags_default_on(self):
        """Reserved flags are declared and on by default."""
        assert BASE_CONFIG.require_macd_above0 is True
        assert BASE_CONFIG.use_gap_guard is True
        assert BASE_CONFIG.bb_len == 20

    def test_config_is_frozen(self):
        """Resolved configs cannot be modified."""
        with pytest.raises(Exception):
            BASE_CONFIG.rsi_min = 10.0

    def test_to_dict_serializes_entry_mode(self):
        """to_dict gives entry_mode as its string value."""
        data = resolve_config("balanced").to_dict()
        assert data["entry_mode"] == "breakout"
        assert data["preset"] == "balanced"


class TestConfigValidation:
    """Config validation fails fast with clear errors."""

    def test_rsi_min_must_not_exceed_max(self):
        """rsi_min above rsi_max is rejected."""
        with pytest.raises(InvalidInput, match="must not exceed rsi_max"):
            SwingConfig(rsi_min=70.0, rsi_max=60.0)

    def test_rsi_bounds(self):
        """RSI thresholds must lie in [0, 100]."""
        with pytest.raises(InvalidInput, match=r"\[0, 100\]"):
            SwingConfig(rsi_max=120.0)

    def test_negative_rel_vol(self):
        """Relative volume floor cannot be negative."""
        with pytest.raises(InvalidInput, match="rel_vol_min"):
            SwingConfig(rel_vol_min=-1.0)

    def test_entry_mode_type(self):
        """entry_mode must be an EntryMode, not a string."""
        with pytest.raises(InvalidInput, match="entry_mode"):
            SwingConfig(entry_mode="breakout")

    def test_invalid_input_is_value_error(self):
        """Validation errors are ValueErrors."""
        with pytest.raises(ValueError):
            SwingConfig(atr_mult=-0.5)


class TestPresets:
    """Preset resolution: base, then preset, then caller overrides."""

    def test_all_presets_resolve(self):
        """Every named preset resolves and records its name."""
        for name in PRESET_NAMES:
            config = resolve_config(name)
            assert config.preset == name

    def test_default_preset_is_balanced(self):
        """No preset means balanced."""
        assert DEFAULT_PRESET == "balanced"
        config = resolve_config()
        assert config.rsi_min == 43.0
        assert config.rsi_max == 62.0
        assert config.rel_vol_min == 1.5
        assert config.max_stretch_pct == 12.0
        assert config.entry_mode == EntryMode.BREAKOUT

    def test_manual_equals_base(self):
        """The manual preset adds nothing to the base config."""
        config = resolve_config("manual")
        assert config.to_dict() == {**BASE_CONFIG.to_dict(), "preset": "manual"}

    def test_conservative(self):
        """Conservative uses the pullback gate."""
        config = resolve_config("conservative")
        assert config.entry_mode == EntryMode.PULLBACK
        assert config.near_pct50 == 6.0
        assert config.rel_vol_min == 1.8

    def test_aggressive(self):
        """Aggressive widens the RSI band."""
        config = resolve_config("aggressive")
        assert config.rsi_min == 40.0
        assert config.rsi_max == 65.0
        assert config.rel_vol_min == 1.3

    def test_debug_disables_gates(self):
        """Debug turns every gate off and allows repeats."""
        config = resolve_config("debug")
        assert config.rsi_min == 0.0 and config.rsi_max == 100.0
        assert config.rel_vol_min == 0.0
        assert config.require_price_above50 is False
        assert config.require_trend_aligned is False
        assert config.require_entry_gate is False
        assert config.allow_repeat_entries is True
        assert config.cooldown_bars == 0

    def test_preset_name_case_insensitive(self):
        """Preset names match regardless of case."""
        assert resolve_config("Balanced").preset == "balanced"

    def test_unknown_preset(self):
        """Unknown presets raise InvalidInput."""
        with pytest.raises(InvalidInput, match="Unknown preset"):
            resolve_config("yolo")

    def test_empty_overrides_equal_preset(self):
        """Empty overrides change nothing."""
        assert resolve_config("aggressive", {}) == resolve_config("aggressive")

    def test_caller_override_wins(self):
        """Caller overrides replace preset values field by field."""
        config = resolve_config("conservative", {"rsi_min": 30})
        assert config.rsi_min == 30.0
        assert config.rsi_max == 60.0  # untouched fields keep preset value


class TestOverrides:
    """Override payload validation and coercion."""

    def test_camel_case_keys(self):
        """camelCase keys map onto field names."""
        out = normalize_overrides({"rsiMin": 40, "entryMode": "any", "allowRepeatEntries": True})
        assert out == {"rsi_min": 40.0, "entry_mode": EntryMode.ANY, "allow_repeat_entries": True}

    def test_string_values_coerced(self):
        """String values are coerced to the field type."""
        out = normalize_overrides({"relVolMin": "1.2", "requireEntryGate": "false", "cooldownBars": "3"})
        assert out == {"rel_vol_min": 1.2, "require_entry_gate": False, "cooldown_bars": 3}

    def test_unknown_key(self):
        """Unknown keys are rejected."""
        with pytest.raises(InvalidInput, match="Unknown override"):
            normalize_overrides({"rsiMinimum": 40})

    def test_preset_not_overridable(self):
        """The preset name is not an override."""
        with pytest.raises(InvalidInput):
            normalize_overrides({"preset": "debug"})

    def test_wrong_types(self):
        """Values of the wrong type are rejected with the field name."""
        with pytest.raises(InvalidInput, match="must be a number"):
            normalize_overrides({"rsiMin": "abc"})
        with pytest.raises(InvalidInput, match="must be a boolean"):
            normalize_overrides({"requireTrendAligned": 1.5})
        with pytest.raises(InvalidInput, match="must be an integer"):
            normalize_overrides({"cooldownBars": 2.5})
        with pytest.raises(InvalidInput, match="entry_mode must be one of"):
            normalize_overrides({"entryMode": "sideways"})

    def test_non_mapping(self):
        """Overrides must be a mapping."""
        with pytest.raises(InvalidInput, match="must be a mapping"):
            normalize_overrides(["rsiMin", 40])

    def test_override_producing_invalid_config(self):
        """Overrides are validated after merging."""
        with pytest.raises(InvalidInput, match="must not exceed"):
            resolve_config("balanced", {"rsiMin": 90})
