from unittest import TestCase

from data_config import full_tree, make_tree, scenario_tree
from shconn.errors import EntryNotFoundError, InvalidModeChoiceError, SelectionError
from shconn.menu import flatten
from shconn.models import Capability
from shconn.modes import ModeSelection, ModeState
from shconn.selector import resolve


class TestResolve(TestCase):
    def test_scenario_vpn(self):
        resolution = resolve(scenario_tree(), 11, group_step=10)
        self.assertEqual(resolution.entry.name, "VPN")
        self.assertEqual(resolution.indexed.group_label, "Remote")
        self.assertEqual(
            set(resolution.capabilities), {Capability.SSH, Capability.TRANSFER}
        )

    def test_round_trip(self):
        tree = full_tree()
        for group_step in (10, 100):
            for indexed in flatten(tree, group_step).entries:
                resolution = resolve(tree, indexed.index, group_step)
                self.assertEqual(resolution.indexed, indexed)

    def test_gap_rejected(self):
        tree = make_tree(("01A", ["a", "b", "c"]), ("02B", ["d"]))
        with self.assertRaises(EntryNotFoundError) as ctx:
            resolve(tree, 7, group_step=10)
        self.assertEqual(ctx.exception.index, 7)
        self.assertEqual(resolve(tree, 11).entry.key, "d")

    def test_beyond_last_index(self):
        with self.assertRaises(EntryNotFoundError):
            resolve(scenario_tree(), 12)

    def test_zero_and_negative(self):
        for index in (0, -1):
            with self.assertRaises(EntryNotFoundError):
                resolve(scenario_tree(), index)

    def test_collision_first_entry_wins(self):
        tree = make_tree(("01A", ["a", "b", "c"]), ("02B", ["d"]))
        self.assertEqual(resolve(tree, 3, group_step=2).entry.key, "c")

    def test_not_found_is_a_selection_error(self):
        self.assertTrue(issubclass(EntryNotFoundError, SelectionError))


class TestModeSelection(TestCase):
    def test_ssh_only_resolves_immediately(self):
        selection = ModeSelection((Capability.SSH,))
        self.assertEqual(selection.state, ModeState.RESOLVED)
        self.assertEqual(selection.mode, Capability.SSH)

    def test_single_non_ssh_capability(self):
        selection = ModeSelection((Capability.TRANSFER,))
        self.assertEqual(selection.state, ModeState.RESOLVED)
        self.assertEqual(selection.feed("7"), Capability.TRANSFER)

    def test_multiple_capabilities_await_choice(self):
        selection = ModeSelection((Capability.SSH, Capability.TRANSFER))
        self.assertEqual(selection.state, ModeState.AWAITING)
        self.assertIsNone(selection.mode)

    def test_timeout_defaults_to_ssh(self):
        selection = ModeSelection((Capability.SSH, Capability.TRANSFER))
        self.assertEqual(selection.feed(None), Capability.SSH)
        self.assertEqual(selection.state, ModeState.RESOLVED)

    def test_empty_answer_defaults_to_ssh(self):
        selection = ModeSelection((Capability.SSH, Capability.MOUNT))
        self.assertEqual(selection.feed("  "), Capability.SSH)

    def test_numbering_transfer_before_mount(self):
        selection = ModeSelection((Capability.MOUNT, Capability.TRANSFER, Capability.SSH))
        self.assertEqual(
            selection.options,
            [(1, Capability.SSH), (2, Capability.TRANSFER), (3, Capability.MOUNT)],
        )

    def test_mount_is_second_without_transfer(self):
        selection = ModeSelection((Capability.SSH, Capability.MOUNT))
        self.assertEqual(selection.feed("2"), Capability.MOUNT)

    def test_choose_transfer(self):
        selection = ModeSelection((Capability.SSH, Capability.TRANSFER, Capability.MOUNT))
        self.assertEqual(selection.feed("2"), Capability.TRANSFER)

    def test_choose_mount(self):
        selection = ModeSelection((Capability.SSH, Capability.TRANSFER, Capability.MOUNT))
        self.assertEqual(selection.feed("3"), Capability.MOUNT)

    def test_invalid_choice(self):
        selection = ModeSelection((Capability.SSH, Capability.TRANSFER))
        for answer in ("3", "x", "0"):
            with self.assertRaises(InvalidModeChoiceError):
                selection.feed(answer)
        self.assertEqual(selection.state, ModeState.AWAITING)

    def test_default_without_ssh(self):
        selection = ModeSelection((Capability.TRANSFER, Capability.MOUNT))
        self.assertEqual(selection.feed(None), Capability.TRANSFER)

    def test_prompt_lines(self):
        selection = ModeSelection((Capability.SSH, Capability.TRANSFER))
        self.assertEqual(
            selection.prompt_lines(5),
            [
                "(1) SSH [default - automatically selected in 5 seconds]",
                "(2) LFTP",
            ],
        )

    def test_no_capabilities(self):
        with self.assertRaises(SelectionError):
            ModeSelection(())
