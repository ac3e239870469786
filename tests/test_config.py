import pytest

from codemark.config import ColorSpec, ConfigurationError, EngineSettings
from codemark.markers import DEFAULT_RULES, HighlightTag, PrefixRule
from codemark.runtime.telemetry import Event


def test_defaults_match_classic_palette() -> None:
    settings = EngineSettings.default()

    assert settings.enabled is True
    assert settings.colors[HighlightTag.HIGHLIGHT] == ColorSpec("#4d4d4d", 0.5)
    assert settings.colors[HighlightTag.DIFF_ADD] == ColorSpec("#2ea043", 0.3)
    assert settings.colors[HighlightTag.DIFF_REMOVE] == ColorSpec("#f85149", 0.3)
    assert settings.prefixes == DEFAULT_RULES


def test_color_spec_normalizes_and_validates() -> None:
    assert ColorSpec("ABCDEF").color == "#abcdef"
    assert ColorSpec("#4D4D4D", 0.5).rgb == (77, 77, 77)
    with pytest.raises(ConfigurationError):
        ColorSpec("#12345")
    with pytest.raises(ConfigurationError):
        ColorSpec("#123456", 1.5)


def test_from_mapping_overlays_flat_keys() -> None:
    settings = EngineSettings.from_mapping(
        {
            "enabled": False,
            "backgroundColor": "#000000",
            "diffAddOpacity": 0.8,
            "showPrefixInReadingMode": True,
        }
    )

    assert settings.enabled is False
    assert settings.colors[HighlightTag.HIGHLIGHT] == ColorSpec("#000000", 0.5)
    assert settings.colors[HighlightTag.DIFF_ADD] == ColorSpec("#2ea043", 0.8)
    assert settings.colors[HighlightTag.DIFF_REMOVE] == ColorSpec("#f85149", 0.3)


def test_from_mapping_rejects_bad_values() -> None:
    with pytest.raises(ConfigurationError):
        EngineSettings.from_mapping({"opacity": -0.1})


def test_duplicate_prefixes_are_rejected() -> None:
    with pytest.raises(ConfigurationError):
        EngineSettings(
            prefixes=(
                PrefixRule(HighlightTag.HIGHLIGHT, "> "),
                PrefixRule(HighlightTag.DIFF_ADD, "> "),
            )
        )


def test_duplicate_tags_are_rejected() -> None:
    with pytest.raises(ConfigurationError):
        EngineSettings(
            prefixes=(
                PrefixRule(HighlightTag.HIGHLIGHT, "> "),
                PrefixRule(HighlightTag.HIGHLIGHT, ">> "),
            )
        )


def test_every_prefix_needs_a_color() -> None:
    with pytest.raises(ConfigurationError):
        EngineSettings(colors={HighlightTag.HIGHLIGHT: ColorSpec("#ffffff")})


def test_overrides_return_new_snapshot() -> None:
    settings = EngineSettings.default()

    disabled = settings.with_overrides(enabled=False)
    recolored = settings.with_color("diff-remove", ColorSpec("#ff0000", 1.0))

    assert settings.enabled is True
    assert disabled.enabled is False
    assert recolored.colors[HighlightTag.DIFF_REMOVE].color == "#ff0000"
    assert settings.colors[HighlightTag.DIFF_REMOVE].color == "#f85149"


def test_matcher_uses_prefix_table() -> None:
    settings = EngineSettings(
        colors={HighlightTag.HIGHLIGHT: ColorSpec("#ffffff")},
        prefixes=(PrefixRule(HighlightTag.HIGHLIGHT, "!! "),),
    )

    assert settings.matcher().match("!! x") is not None
    assert settings.matcher().match(">>>> x") is None


def test_settings_snapshots_are_hashable() -> None:
    first = EngineSettings.default()
    second = EngineSettings.default()
    recolored = first.with_color("highlight", ColorSpec("#000000", 0.5))

    assert hash(first) == hash(second)
    assert len({first, second, recolored}) == 2


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(False, False), ("false", False), ("Off", False), ("yes", True), (True, True)],
)
def test_from_mapping_parses_enabled_flag(raw, expected) -> None:
    assert EngineSettings.from_mapping({"enabled": raw}).enabled is expected


@pytest.mark.parametrize("raw", ["maybe", 1, None])
def test_from_mapping_rejects_non_boolean_enabled(raw) -> None:
    with pytest.raises(ConfigurationError):
        EngineSettings.from_mapping({"enabled": raw})


@pytest.mark.parametrize("raw", ["half", None, True])
def test_non_numeric_opacity_is_a_configuration_error(raw) -> None:
    with pytest.raises(ConfigurationError):
        EngineSettings.from_mapping({"diffAddOpacity": raw})
    with pytest.raises(ConfigurationError):
        ColorSpec("#123456", raw)


def test_unknown_keys_are_reported(monkeypatch) -> None:
    seen: list[tuple] = []
    monkeypatch.setattr(
        "codemark.config.record_event",
        lambda event, **fields: seen.append((event, fields.get("key"))),
    )

    EngineSettings.from_mapping({"codeBlockBg": "#000000", "fontSize": 12})

    assert seen == [(Event.UNKNOWN_KEY, "fontSize")]
