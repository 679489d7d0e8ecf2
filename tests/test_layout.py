import io
from unittest import TestCase

from rich.console import Console
from rich.text import Text

from data_config import MOUNT, full_tree, make_tree, scenario_tree
from shconn.layout import (
    ColumnMode,
    capability_tag,
    column_count,
    entry_label,
    label_width,
    layout,
    render_grid,
    segment_widths,
)
from shconn.menu import flatten
from shconn.models import Entry, IndexedEntry
from shconn.ui import NORD_THEME


def plain(markup):
    return Text.from_markup(markup).plain


def indexed(index=1, **fields):
    fields.setdefault("ssh_user", "root")
    entry = Entry(key="k", name=fields.pop("name", "Host"), address="h", **fields)
    return IndexedEntry(index=index, entry=entry, group_label="G", column=0, row=0)


class TestEntryLabel(TestCase):
    def test_single_digit_is_padded(self):
        label = entry_label(indexed(3, name="Server"))
        self.assertEqual(plain(label), " (3) Server")

    def test_two_digits_not_padded(self):
        self.assertEqual(plain(entry_label(indexed(11, name="VPN"))), "(11) VPN")

    def test_capability_tag(self):
        self.assertEqual(capability_tag(indexed()), "")
        self.assertEqual(capability_tag(indexed(transfer_user="u")), "(lftp)")
        self.assertEqual(capability_tag(indexed(mount=MOUNT)), "(mount)")
        self.assertEqual(
            capability_tag(indexed(transfer_user="u", mount=MOUNT)), "(lftp,mount)"
        )
        self.assertEqual(
            plain(entry_label(indexed(12, name="NAS", transfer_user="u"))),
            "(12) NAS (lftp)",
        )

    def test_width_excludes_markup(self):
        label = entry_label(indexed(1, name="Server"))
        self.assertIn("[index]", label)
        self.assertEqual(label_width(label), len(" (1) Server"))

    def test_markup_in_name_is_escaped(self):
        label = entry_label(indexed(1, name="[prod] db"))
        self.assertEqual(plain(label), " (1) [prod] db")


class TestColumnCount(TestCase):
    def test_fixed(self):
        self.assertEqual(column_count(ColumnMode(3), 10, 50), 3)

    def test_auto(self):
        self.assertEqual(column_count(ColumnMode(), 100, 20), 5)
        self.assertEqual(column_count(ColumnMode(), 99, 20), 4)

    def test_auto_minimum_one(self):
        self.assertEqual(column_count(ColumnMode(), 10, 50), 1)

    def test_auto_zero_width(self):
        self.assertEqual(column_count(ColumnMode(), 80, 0), 1)


class TestLayout(TestCase):
    def test_segments_wrap_by_column_count(self):
        flattened = flatten(full_tree())
        grid = layout(flattened.entries, flattened.labels, 80, ColumnMode(2))
        self.assertEqual(grid.columns, 2)
        self.assertEqual(len(grid.segments), 2)
        self.assertEqual(grid.segments[0].headers, ("Home", "Work"))
        self.assertEqual(grid.segments[1].headers, ("Cloud",))

    def test_short_columns_are_padded(self):
        flattened = flatten(full_tree())
        grid = layout(flattened.entries, flattened.labels, 80, ColumnMode(2))
        rows = grid.segments[0].rows
        self.assertEqual(len(rows), 3)
        self.assertIsNotNone(rows[0][1])
        self.assertIsNone(rows[1][1])
        self.assertIsNone(rows[2][1])
        self.assertEqual(len(grid.segments[1].rows), 1)

    def test_auto_mode_uses_widest_label(self):
        flattened = flatten(scenario_tree())
        widest = max(label_width(entry_label(e)) for e in flattened.entries)
        grid = layout(flattened.entries, flattened.labels, widest * 2, ColumnMode())
        self.assertEqual(grid.columns, 2)
        self.assertEqual(len(grid.segments), 1)

    def test_narrow_terminal_gives_one_column(self):
        flattened = flatten(scenario_tree())
        grid = layout(flattened.entries, flattened.labels, 5, ColumnMode())
        self.assertEqual(grid.columns, 1)
        self.assertEqual([s.headers for s in grid.segments], [("Home",), ("Remote",)])

    def test_empty_input(self):
        grid = layout([], [], 80, ColumnMode())
        self.assertEqual(grid.columns, 1)
        self.assertEqual(grid.segments, ())

    def test_cells_follow_menu_order(self):
        tree = make_tree(("01A", ["x", "y"]))
        flattened = flatten(tree)
        grid = layout(flattened.entries, flattened.labels, 80, ColumnMode(1))
        cells = [plain(row[0]) for row in grid.segments[0].rows]
        self.assertEqual(cells, [" (1) X", " (2) Y"])


class TestRenderGrid(TestCase):
    def test_render_plain_text(self):
        flattened = flatten(scenario_tree())
        grid = layout(flattened.entries, flattened.labels, 80, ColumnMode(2))
        out = io.StringIO()
        console = Console(file=out, theme=NORD_THEME, width=80, color_system=None)
        render_grid(grid, console)
        text = out.getvalue()
        self.assertIn("Home", text)
        self.assertIn("Remote", text)
        self.assertIn("(1) Server", text)
        self.assertIn("(11) VPN (lftp)", text)
        self.assertNotIn("[index]", text)

    def test_full_width_labels_are_not_shortened(self):
        tree = make_tree(("01Home", ["a" * 30]), ("02Work", ["b" * 30]))
        flattened = flatten(tree)
        widest = max(label_width(entry_label(e)) for e in flattened.entries)
        grid = layout(flattened.entries, flattened.labels, widest * 2, ColumnMode())
        self.assertEqual(grid.columns, 2)
        out = io.StringIO()
        console = Console(
            file=out, theme=NORD_THEME, width=widest * 2, color_system=None
        )
        render_grid(grid, console)
        text = out.getvalue()
        self.assertIn(" (1) A" + "a" * 29, text)
        self.assertIn("(11) B" + "b" * 29, text)
        self.assertNotIn("…", text)

    def test_segment_widths_include_headers(self):
        tree = make_tree(("01Headquarters", ["x"]), ("02B", ["longname"]))
        flattened = flatten(tree)
        grid = layout(flattened.entries, flattened.labels, 80, ColumnMode(2))
        self.assertEqual(
            segment_widths(grid.segments[0]),
            [len("Headquarters"), len("(11) Longname")],
        )
