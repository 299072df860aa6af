"""Tests for the visual style catalog."""

from workflows.notedraw import Language, VisualStyle, get_all_styles, get_default_style, get_style_config


class TestStyleCatalog:
    def test_every_style_has_a_config(self):
        styles = get_all_styles()
        assert [style.id for style in styles] == list(VisualStyle)

    def test_lookup_by_value(self):
        assert get_style_config("chalkboard").id == VisualStyle.CHALKBOARD
        assert get_style_config(VisualStyle.CUTE).id == VisualStyle.CUTE

    def test_configs_are_complete(self):
        for style in get_all_styles():
            assert style.prompt_keywords
            assert style.color_palette
            assert style.negative_prompt
            assert style.emphasis
            assert style.localized_name(Language.EN)
            assert style.localized_name(Language.ZH)
            assert style.preview_colors

    def test_default_style(self):
        assert get_default_style() == VisualStyle.SKETCH
