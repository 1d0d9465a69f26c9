"""
Property-based tests for overlay placement using hypothesis.
"""

import pytest
from hypothesis import HealthCheck, assume, given, settings, strategies as st

from chat_pickers.Utils.overlay_positioning import (
    OverlayOptions,
    Rect,
    VerticalAlign,
    compute_overlay_placement,
    compute_overlay_size,
)


@st.composite
def placement_inputs(draw, vertical_align=None):
    """Options, a viewport no smaller than 2*margin + 1, and an anchor at least partly inside it."""
    margin = draw(st.integers(min_value=0, max_value=32))
    options = OverlayOptions(
        margin=margin,
        max_width=draw(st.integers(min_value=1, max_value=800)),
        max_height=draw(st.integers(min_value=1, max_value=800)),
        vertical_align=vertical_align or draw(st.sampled_from(list(VerticalAlign))),
    )
    viewport_width = draw(st.integers(min_value=2 * margin + 1, max_value=3000))
    viewport_height = draw(st.integers(min_value=2 * margin + 1, max_value=3000))
    width = draw(st.integers(min_value=0, max_value=400))
    height = draw(st.integers(min_value=0, max_value=400))
    anchor = Rect(
        top=draw(st.integers(min_value=-height, max_value=viewport_height - 1)),
        left=draw(st.integers(min_value=-width, max_value=viewport_width - 1)),
        width=width,
        height=height,
    )
    return anchor, viewport_width, viewport_height, options


class TestOverlayPlacementProperties:

    @pytest.mark.property
    @settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
    @given(placement_inputs())
    def test_placement_stays_inside_the_viewport(self, inputs):
        anchor, viewport_width, viewport_height, options = inputs
        width, _ = compute_overlay_size(viewport_width, viewport_height, options)

        placement = compute_overlay_placement(anchor, viewport_width, viewport_height, options)

        assert placement.top >= options.margin
        assert placement.left >= options.margin
        # The right edge can only be honoured when the panel fits between the margins
        if width <= viewport_width - 2 * options.margin:
            assert placement.left + width <= viewport_width - options.margin

    @pytest.mark.property
    @settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
    @given(placement_inputs(vertical_align=VerticalAlign.BOTTOM))
    def test_panel_flips_above_when_it_would_overflow(self, inputs):
        anchor, viewport_width, viewport_height, options = inputs
        _, height = compute_overlay_size(viewport_width, viewport_height, options)
        assume(anchor.bottom + options.margin + height > viewport_height - options.margin)
        assume(anchor.top >= 2 * options.margin)

        placement = compute_overlay_placement(anchor, viewport_width, viewport_height, options)

        assert placement.top <= anchor.top - options.margin

    @pytest.mark.property
    @settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
    @given(placement_inputs())
    def test_placement_is_deterministic(self, inputs):
        anchor, viewport_width, viewport_height, options = inputs

        first = compute_overlay_placement(anchor, viewport_width, viewport_height, options)
        second = compute_overlay_placement(anchor, viewport_width, viewport_height, options)

        assert first == second

    @pytest.mark.property
    @settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
    @given(placement_inputs())
    def test_size_never_exceeds_caps(self, inputs):
        _, viewport_width, viewport_height, options = inputs

        width, height = compute_overlay_size(viewport_width, viewport_height, options)

        assert width <= options.max_width
        assert height <= options.max_height
        assert width <= viewport_width * 0.95
        assert height <= viewport_height * 0.85
