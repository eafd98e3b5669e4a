"""Affect reading, trajectory tracking and cultural grammars."""

import pytest

from percepta.engine.affect.emotion import EmotionAnalyzer, classify_trajectory, visual_emotion
from percepta.engine.context import ColorFeatures, EdgeFeatures, FeatureSet, SpatialFeatures
from percepta.engine.culture.grammar import blend, get_grammar, nearest_color_name, resolve_culture


def _features(temperature: float = 0.5, density: float = 0.0, asymmetry: float = 0.0) -> FeatureSet:
    return FeatureSet(
        edges=EdgeFeatures(density=density, entropy=1.0),
        shapes=[],
        colors=ColorFeatures(temperature=temperature),
        spatial=SpatialFeatures(asymmetry=asymmetry),
        saliency=0.0,
    )


@pytest.mark.parametrize(
    "dv,da,expected",
    [
        (0.0, 0.0, "stable"),
        (0.2, 0.2, "escalating"),
        (-0.2, -0.2, "calming"),
        (0.2, 0.0, "brightening"),
        (-0.2, 0.05, "darkening"),
        (0.0, 0.2, "intensifying"),
        (0.0, -0.2, "relaxing"),
    ],
)
def test_classify_trajectory(dv, da, expected):
    assert classify_trajectory(dv, da) == expected


def test_warmer_palette_reads_more_positive():
    cold = visual_emotion(_features(temperature=0.0))
    warm = visual_emotion(_features(temperature=1.0))
    assert warm.valence > cold.valence


def test_busier_edges_read_more_aroused():
    calm = visual_emotion(_features(density=0.0))
    busy = visual_emotion(_features(density=0.8, asymmetry=0.5))
    assert busy.arousal > calm.arousal


def test_blend_is_seventy_thirty():
    analyzer = EmotionAnalyzer()
    features = _features()
    visual, blended = analyzer.analyze(features, {"valence": 1.0, "arousal": 0.0})
    assert blended.valence == pytest.approx(0.7 * visual.valence + 0.3)
    assert blended.arousal == pytest.approx(0.7 * visual.arousal)
    # missing dominance reads as neutral
    assert blended.dominance == pytest.approx(0.7 * visual.dominance + 0.3 * 0.5)


def test_context_changes_blended_reading():
    features = _features()
    _, happy = EmotionAnalyzer().analyze(features, {"valence": 0.9, "arousal": 0.9})
    _, sad = EmotionAnalyzer().analyze(features, {"valence": 0.1, "arousal": 0.1})
    assert happy.valence > sad.valence
    assert happy.arousal > sad.arousal


def test_no_context_is_neutral():
    analyzer = EmotionAnalyzer()
    visual, blended = analyzer.analyze(_features())
    assert blended.valence == pytest.approx(0.7 * visual.valence + 0.15)


def test_trajectory_follows_history():
    analyzer = EmotionAnalyzer()
    assert analyzer.trajectory() == "stable"
    analyzer.analyze(_features(temperature=0.0))
    _, second = analyzer.analyze(_features(temperature=1.0))
    assert second.trajectory == "brightening"
    assert len(analyzer.history) == 2


def test_history_is_bounded():
    analyzer = EmotionAnalyzer(buffer_size=3)
    for _ in range(5):
        analyzer.analyze(_features())
    assert len(analyzer.history) == 3
    analyzer.reset()
    assert analyzer.history == ()


def test_unknown_culture_falls_back_to_universal():
    assert get_grammar("klingon").name == "universal"
    assert get_grammar(None).name == "universal"
    assert get_grammar(" Japanese ").name == "japanese"


def test_radial_priority():
    assert get_grammar("norse").is_radial
    assert not get_grammar("japanese").is_radial


def test_hybrid_interpolates_weights():
    hybrid = resolve_culture("japanese+norse", 0.5)
    assert hybrid.name == "japanese+norse"
    assert hybrid.significance("tree") == pytest.approx(1.75)
    # absent on one side counts as 1.0
    assert hybrid.significance("water") == pytest.approx(1.15)
    assert hybrid.colors["red"].weight == pytest.approx(1.25)


def test_hybrid_takes_labels_from_dominant_side():
    japanese, norse = get_grammar("japanese"), get_grammar("norse")
    even = blend(japanese, norse, 0.5)
    assert even.label("tree") == "pine"
    assert not even.is_radial
    # silent on the dominant side falls through to the other
    assert even.label("bird") == "raven"

    leaning = blend(japanese, norse, 0.8)
    assert leaning.label("tree") == "yggdrasil"
    assert leaning.is_radial


def test_hybrid_weight_endpoints():
    japanese, norse = get_grammar("japanese"), get_grammar("norse")
    assert blend(japanese, norse, 0.0).significance("tree") == pytest.approx(1.5)
    assert blend(japanese, norse, 1.0).significance("tree") == pytest.approx(2.0)


def test_grammar_defaults():
    universal = get_grammar("universal")
    assert universal.interpret_scene("urban") == ("urban", "general")
    assert universal.label("door") == "door"
    assert universal.shape_weight("hexagon") == 1.0


@pytest.mark.parametrize(
    "rgb,name",
    [((250, 5, 5), "red"), ((10, 10, 240), "blue"), ((250, 250, 250), "white"), ((8, 8, 8), "black")],
)
def test_nearest_color_name(rgb, name):
    assert nearest_color_name(rgb) == name
