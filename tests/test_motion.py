import pytest

from timewise.design.motion import (
    DEFAULT_MOTION,
    MotionSpec,
    cubic_bezier,
    ease_out_quart,
    get_duration_ms,
    get_easing,
    parse_cubic_bezier,
)


def test_duration_tokens():
    assert get_duration_ms("instant") == 150
    assert get_duration_ms("subtle") == 300
    assert get_duration_ms("pronounced") == 1000
    with pytest.raises(KeyError):
        get_duration_ms("glacial")


@pytest.mark.parametrize("name", ["standard", "decelerate", "accelerate", "emphasized", "ease-out", "linear", "ease-out-quart"])
def test_easing_tokens_hit_endpoints(name):
    ease = get_easing(name)
    assert ease(0.0) == pytest.approx(0.0, abs=1e-6)
    assert ease(1.0) == pytest.approx(1.0, abs=1e-6)


def test_unknown_easing_token():
    with pytest.raises(KeyError):
        get_easing("wobbly")


def test_literal_cubic_bezier_string():
    ease = get_easing("cubic-bezier(0, 0, 1, 1)")
    assert ease(0.3) == pytest.approx(0.3, abs=1e-4)


@pytest.mark.parametrize(
    "spec",
    ["cubic-bezier(0,0,1)", "bezier(0,0,1,1)", "cubic-bezier(a,0,1,1)", "cubic-bezier(1.5,0,1,1)"],
)
def test_parse_cubic_bezier_rejects_bad_specs(spec):
    with pytest.raises(ValueError):
        parse_cubic_bezier(spec)


def test_standard_curve_is_monotonic():
    ease = get_easing("standard")
    samples = [ease(i / 50) for i in range(51)]
    assert samples == sorted(samples)


def test_emphasized_overshoots():
    ease = get_easing("emphasized")
    assert max(ease(i / 100) for i in range(101)) > 1.0


def test_ease_out_quart_closed_form():
    assert ease_out_quart(0.5) == pytest.approx(1 - 0.5**4)
    assert ease_out_quart(2.0) == 1.0


def test_custom_motion_spec():
    spec = MotionSpec(durations={"quick": 80}, easings={"flat": "cubic-bezier(0, 0, 1, 1)"})
    assert spec.duration("quick") == 80
    assert spec.easing("flat")(0.5) == pytest.approx(cubic_bezier(0, 0, 1, 1)(0.5))
    assert DEFAULT_MOTION.duration("notification") == 400
