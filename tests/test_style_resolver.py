"""
Tests for style resolution.

Each test builds a small style sheet and content tree, resolves it and
inspects the resulting ResolvedStyles mapping.
"""

import logging

import pytest

from quillpress.config import ResolverConfig
from quillpress.engine import ResolvedStyles, StyleResolver, StyleResolverService, resolve_styles
from quillpress.models import (
    BlockImage,
    Document,
    Footnote,
    Headline,
    Hyperlink,
    LayoutTable,
    ListItem,
    Metadata,
    PageNumber,
    PageSequence,
    Paragraph,
    Part,
    Section,
    SimpleList,
    Table,
    TableCell,
    TableRow,
    TableSection,
    TextRun,
)
from quillpress.styles import (
    BlockImageStyleProperties,
    DefaultStyles,
    ElementStyle,
    ElementTargetType,
    LayoutTableStyleProperties,
    PageMasterStyle,
    ParagraphStyleProperties,
    StandardElementType,
    StyleResolverContext,
    StyleSheet,
    TableCellStyleProperties,
    TextRunStyleProperties,
    TextStyle,
)
from quillpress.utils.enums import ListStyleType, PageBreakVariant, TextAlign

pytestmark = pytest.mark.unit


def make_style(name, target, **properties):
    target = ElementTargetType(target)
    return ElementStyle(name, target, target.properties_class(**properties))


def make_sheet(*element_styles, defaults=None):
    return StyleSheet(
        text_styles=[TextStyle.normal("body", "Helvetica", 12)],
        element_styles=list(element_styles),
        page_master_styles=[PageMasterStyle(name="main")],
        default_styles=DefaultStyles.from_mapping(defaults),
    )


def resolve(node, sheet, **kwargs):
    return resolve_styles(node, StyleResolverContext.root(sheet), **kwargs)


def make_document(*body, header=()):
    return Document(Metadata(title="Test"), [PageSequence("main", body=list(body), header=list(header))])


class TestTextBlocks:
    """Test cases for paragraphs, headlines and inline runs."""

    def test_headline_with_style_class(self):
        """Test h1 resolution under a page with no ancestor style."""
        sheet = make_sheet(make_style("h1", "headline", font_size=24, font_weight="bold"))
        headline = Headline(level=1, style_class="h1")

        resolved = resolve(headline, sheet)

        assert resolved[headline].to_dict() == {"font-size": 24, "font-weight": "bold"}

    def test_inline_children_inherit(self):
        sheet = make_sheet(make_style("h1", "headline", font_size=24, text_color="#222222"))
        run = TextRun("Title")
        headline = Headline(level=1, style_class="h1", inline_elements=[run])

        resolved = resolve(headline, sheet)

        assert isinstance(resolved[run], TextRunStyleProperties)
        assert resolved[run].font_size == 24
        assert resolved[run].text_color == "#222222"

    def test_text_run_class_overrides_parent(self):
        sheet = make_sheet(
            make_style("lead", "paragraph", font_size=14, font_style="normal"),
            make_style("em", "text-run", font_style="italic"),
        )
        run = TextRun("really", style_class="em")
        paragraph = Paragraph(inline_elements=[run], style_class="lead")

        resolved = resolve(paragraph, sheet)

        assert resolved[run].font_style == "italic"
        assert resolved[run].font_size == 14

    def test_text_run_ignores_hyperlink_default(self):
        """Test that only hyperlinks fall back to the hyperlink default."""
        sheet = make_sheet(make_style("hyperlink-default", "hyperlink", text_color="#0000FF"))
        run = TextRun("plain")
        link = Hyperlink("link", href="https://example.com")
        paragraph = Paragraph(inline_elements=[run, link])

        resolved = resolve(paragraph, sheet)

        assert resolved[run].text_color is None
        assert resolved[link].text_color == "#0000FF"

    def test_page_number_has_no_style(self):
        page_number = PageNumber()
        run = TextRun("Page ")
        paragraph = Paragraph(inline_elements=[run, page_number])

        resolved = resolve(paragraph, make_sheet())

        assert page_number not in resolved
        assert resolved.get(page_number) is None
        assert len(resolved) == 2
        with pytest.raises(KeyError):
            resolved.style_for(page_number)

    def test_headline_level_default(self):
        sheet = make_sheet(make_style("h2-default", "headline", font_size=18))
        headline = Headline(level=2)

        assert resolve(headline, sheet)[headline].font_size == 18


class TestFallbackChain:
    """Test cases for class lookup, standard-kind defaults and empty bags."""

    def test_unknown_class_uses_configured_default(self, caplog):
        """Test that the result equals default.copy().merge_with(parent)."""
        default = make_style("body-text", "paragraph", font_size=11, text_align=TextAlign.JUSTIFY)
        sheet = make_sheet(default, defaults={"p": "body-text"})
        parent = ParagraphStyleProperties(font_size=20, text_color="#111111")
        context = StyleResolverContext.root(sheet).create_child_context(parent)
        paragraph = Paragraph(style_class="unknown")

        resolved = resolve_styles(paragraph, context)

        assert resolved[paragraph] == default.properties.copy().merge_with(parent)
        assert resolved[paragraph].font_size == 11
        assert resolved[paragraph].text_color == "#111111"
        assert "Style class 'unknown'" in caplog.text

    def test_conventional_default_name(self):
        sheet = make_sheet(make_style("p-default", "paragraph", font_size=10))
        paragraph = Paragraph()

        assert resolve(paragraph, sheet)[paragraph].font_size == 10

    def test_default_names_follow_default_table(self):
        """Test that configured and conventional names are looked up the way the sheet reports them."""
        sheet = make_sheet(
            make_style("chapter-title", "headline", font_size=20),
            make_style("h4-default", "headline", font_size=12),
            defaults={"h3": "chapter-title"},
        )
        chapter = Headline(level=3)
        minor = Headline(level=4)

        resolved = resolve(Section(elements=[chapter, minor]), sheet)

        assert sheet.default_styles.style_name_for(StandardElementType.H3) == "chapter-title"
        assert sheet.default_styles.style_name_for(StandardElementType.H4) == "h4-default"
        assert resolved[chapter].font_size == 20
        assert resolved[minor].font_size == 12

    def test_configured_default_missing(self, caplog):
        sheet = make_sheet(defaults={"p": "nope"})
        paragraph = Paragraph()

        resolved = resolve(paragraph, sheet)

        assert resolved[paragraph].is_empty()
        assert "Default style 'nope'" in caplog.text

    def test_empty_bag_of_right_kind(self, caplog):
        paragraph = Paragraph()
        image = BlockImage(path="logo.png")

        resolved = resolve(Section(elements=[paragraph, image]), make_sheet())

        assert type(resolved[paragraph]) is ParagraphStyleProperties
        assert resolved[paragraph].is_empty()
        assert type(resolved[image]) is BlockImageStyleProperties
        assert not caplog.records

    def test_wrong_kind_falls_through(self, caplog):
        """Test that a class targeting another kind is skipped with a warning."""
        sheet = make_sheet(
            make_style("fancy", "headline", font_size=30),
            make_style("p-default", "paragraph", font_size=10),
        )
        paragraph = Paragraph(style_class="fancy")

        resolved = resolve(paragraph, sheet)

        assert resolved[paragraph].font_size == 10
        assert "targets headline" in caplog.text

    def test_wrong_kind_default_ignored(self, caplog):
        sheet = make_sheet(make_style("ul-default", "paragraph", font_size=10))
        simple_list = SimpleList()

        resolved = resolve(simple_list, sheet)

        assert resolved[simple_list].is_empty()
        assert "Default style 'ul-default'" in caplog.text

    def test_missing_class_quiet_when_configured(self, caplog):
        paragraph = Paragraph(style_class="unknown")
        resolver = StyleResolver(config=ResolverConfig(warn_on_missing_class=False))
        out = ResolvedStyles()

        resolver.resolve(paragraph, StyleResolverContext.root(make_sheet()), out)

        assert paragraph in out
        assert not caplog.records

    def test_injected_defaults_replace_sheet_table(self):
        sheet = make_sheet(
            make_style("p-default", "paragraph", font_size=10),
            make_style("alt", "paragraph", font_size=14),
        )
        paragraph = Paragraph()
        injected = DefaultStyles({StandardElementType.P: "alt"})

        assert resolve(paragraph, sheet)[paragraph].font_size == 10
        assert resolve(paragraph, sheet, default_styles=injected)[paragraph].font_size == 14


class TestContainers:
    """Test cases for sections, parts, lists and layout tables."""

    @pytest.fixture
    def sheet(self):
        return make_sheet(
            make_style("notice-box.note", "section", padding="4pt"),
            make_style("notice-box", "section", padding="1pt", border="1pt solid black"),
        )

    def test_variant_key_first(self, sheet):
        note = Section(style_class="notice-box", variant="note")

        assert resolve(note, sheet)[note].padding == "4pt"

    def test_variant_key_falls_back_to_class(self, sheet, caplog):
        aside = Section(style_class="notice-box", variant="aside")
        plain = Section(style_class="notice-box")

        assert resolve(aside, sheet)[aside].padding == "1pt"
        assert resolve(plain, sheet)[plain].padding == "1pt"
        assert not caplog.records

    def test_section_children_keep_their_own_box(self):
        """Test that a section's break, spacing, padding and border stay on the section."""
        sheet = make_sheet(
            make_style(
                "chapter",
                "section",
                break_before=PageBreakVariant.PAGE,
                space_before="2cm",
                padding="1cm",
                border="1pt solid black",
                background_color="#FFF4F4",
            )
        )
        paragraphs = [Paragraph(inline_elements=[TextRun(text)]) for text in ("one", "two", "three")]
        section = Section(style_class="chapter", elements=paragraphs)

        resolved = resolve(section, sheet)

        assert resolved[section].break_before is PageBreakVariant.PAGE
        for paragraph in paragraphs:
            bag = resolved[paragraph]
            assert bag.break_before is None
            assert bag.space_before is None
            assert bag.padding is None
            assert bag.border is None
            assert bag.background_color == "#FFF4F4"
            assert bag.font_size is None

    def test_part_default(self):
        sheet = make_sheet(make_style("part-default", "part", page_break_before=PageBreakVariant.PAGE))
        part = Part(variant="article")

        assert resolve(part, sheet)[part].page_break_before is PageBreakVariant.PAGE

    def test_list_label_and_elements_share_context(self):
        sheet = make_sheet(
            make_style("items", "list", font_size=11),
            make_style("li-default", "list-item", text_color="#444444"),
        )
        label = TextRun("a)")
        body = Paragraph()
        item = ListItem(elements=[body], label=[label])
        simple_list = SimpleList(items=[item], style_class="items")

        resolved = resolve(simple_list, sheet)

        assert resolved[item].font_size == 11
        for node in (label, body):
            assert resolved[node].font_size == 11
            assert resolved[node].text_color == "#444444"

    def test_ordered_list_default(self):
        sheet = make_sheet(
            make_style("ol-default", "list", list_style_type=ListStyleType.NUMBER),
            make_style("ul-default", "list", list_style_type=ListStyleType.BULLET),
        )
        ordered = SimpleList(ordering="ordered")
        unordered = SimpleList()

        assert resolve(ordered, sheet)[ordered].list_style_type is ListStyleType.NUMBER
        assert resolve(unordered, sheet)[unordered].list_style_type is ListStyleType.BULLET

    def test_layout_table_sides_share_one_context(self):
        sheet = make_sheet(
            make_style("columns", "layout-table", border="1pt solid black", background_color="#EEEEEE")
        )
        left, right = Paragraph(), Paragraph(style_class="missing")
        layout = LayoutTable(element_left=left, element_right=right, style_class="columns")

        resolved = resolve(layout, sheet)

        assert resolved[layout] == LayoutTableStyleProperties(border="1pt solid black", background_color="#EEEEEE")
        assert resolved[left].background_color == resolved[right].background_color == "#EEEEEE"
        assert resolved[left].border is None
        assert resolved[left] is not resolved[right]

    def test_layout_table_with_one_side(self):
        right = Paragraph()
        layout = LayoutTable(element_right=right)

        resolved = resolve(layout, make_sheet())

        assert set(resolved) == {layout, right}


class TestTables:
    """Test cases for the table hierarchy."""

    def test_cell_inherits_table_style(self):
        """Test that a classless cell inherits the table border and keeps its span."""
        sheet = make_sheet(make_style("grid", "table", border="1px"))
        cell = TableCell(colspan=2)
        row = TableRow(cells=[cell])
        section = TableSection(rows=[row])
        table = Table(body=section, style_class="grid")

        resolved = resolve(table, sheet)

        assert isinstance(resolved[cell], TableCellStyleProperties)
        assert resolved[cell].border == "1px"
        assert cell.colspan == 2
        assert row not in resolved
        assert section not in resolved

    def test_all_sections_use_table_context(self):
        sheet = make_sheet(
            make_style("grid", "table", font_size=9),
            make_style("head", "table-cell", font_weight="bold"),
        )
        head_cell = TableCell(style_class="head", elements=[Paragraph()])
        foot_cell = TableCell()
        table = Table(
            header=TableSection(rows=[TableRow(cells=[head_cell])]),
            footer=TableSection(rows=[TableRow(cells=[foot_cell])]),
            style_class="grid",
        )

        resolved = resolve(table, sheet)

        assert resolved[head_cell].font_weight == "bold"
        assert resolved[head_cell].font_size == 9
        assert resolved[foot_cell].font_size == 9
        assert resolved[foot_cell].font_weight is None
        assert resolved[head_cell.elements[0]].font_weight == "bold"


class TestFootnotes:
    """Test cases for two-phase footnote resolution."""

    @pytest.fixture
    def sheet(self):
        return make_sheet(
            make_style("body", "paragraph", font_size=12, text_color="#333333"),
            make_style("fn", "footnote", font_size=9),
        )

    def test_phase_isolation(self, sheet):
        before = TextRun("see")
        note_text = TextRun("source")
        footnote = Footnote(index="1", inline_elements=[note_text], style_class="fn")
        paragraph = Paragraph(inline_elements=[before, footnote], style_class="body")

        resolved = resolve(paragraph, sheet)

        assert resolved[paragraph].font_size == 12
        assert resolved[before].font_size == 12
        assert resolved[footnote].font_size == 9
        assert resolved[note_text].font_size == 9

    def test_body_style_resolved_against_surrounding_text(self, sheet):
        footnote = Footnote(index="1", inline_elements=[TextRun("source")], style_class="fn")
        paragraph = Paragraph(inline_elements=[footnote], style_class="body")

        resolved = resolve(paragraph, sheet)

        assert resolved[footnote].text_color == "#333333"
        assert resolved[footnote.inline_elements[0]].text_color == "#333333"

    def test_footnote_default(self):
        sheet = make_sheet(make_style("footnote-default", "footnote", font_size=8))
        footnote = Footnote(index="2", inline_elements=[TextRun("x")])

        resolved = resolve(Paragraph(inline_elements=[footnote]), sheet)

        assert resolved[footnote].font_size == 8


class TestStyleResolverService:
    """Test cases for whole-document resolution."""

    def test_every_node_except_page_numbers(self, document, style_sheet):
        resolved = StyleResolverService().resolve(document, style_sheet)

        for node in document.iter_nodes():
            if isinstance(node, (PageNumber, TableRow, TableSection)):
                assert node not in resolved
            else:
                assert node in resolved

    def test_areas_start_from_root_context(self):
        sheet = make_sheet(make_style("box", "section", background_color="#EEEEEE"))
        body_paragraph = Paragraph()
        header_paragraph = Paragraph()
        document = make_document(Section(elements=[body_paragraph], style_class="box"), header=[header_paragraph])

        resolved = StyleResolverService().resolve(document, sheet)

        assert resolved[body_paragraph].background_color == "#EEEEEE"
        assert resolved[header_paragraph].background_color is None

    def test_resolution_is_repeatable(self, document, style_sheet):
        service = StyleResolverService()

        first = service.resolve(document, style_sheet)
        second = service.resolve(document, style_sheet)

        assert len(first) == len(second)
        for node, style in first.items():
            assert second[node] == style
            assert second[node] is not style

    def test_tree_is_not_mutated(self, document, style_sheet):
        before = [vars(node).copy() for node in document.iter_nodes()]

        StyleResolverService().resolve(document, style_sheet)

        assert [vars(node) for node in document.iter_nodes()] == before

    def test_injected_defaults(self):
        sheet = make_sheet(
            make_style("p-default", "paragraph", font_size=10),
            make_style("alt", "paragraph", font_size=14),
        )
        paragraph = Paragraph()
        document = make_document(paragraph)
        service = StyleResolverService(default_styles=DefaultStyles({StandardElementType.P: "alt"}))

        assert service.resolve(document, sheet)[paragraph].font_size == 14

    @pytest.mark.parametrize("missing", ["document", "style_sheet"])
    def test_missing_input(self, missing, document, style_sheet, caplog):
        args = {"document": document, "style_sheet": style_sheet, missing: None}

        resolved = StyleResolverService().resolve(**args)

        assert len(resolved) == 0
        assert "skipping style resolution" in caplog.text

    def test_shared_node_warns(self, caplog):
        run = TextRun("twice")
        document = make_document(Paragraph(inline_elements=[run, run]))

        StyleResolverService().resolve(document, make_sheet())

        assert "more than once" in caplog.text

    def test_info_logged(self, document, style_sheet, caplog):
        caplog.set_level(logging.INFO, logger="quillpress")

        StyleResolverService().resolve(document, style_sheet)

        assert "Resolved styles for" in caplog.text
