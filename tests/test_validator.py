import random
import unittest

from bytetape import UnmatchedClose, UnmatchedOpen, build_jump_map, validate

FILLER = "+-<>,. \nab#"


def _balanced(rng: random.Random, depth: int = 0) -> str:
    # S -> empty | '[' S ']' | S S, with filler bytes sprinkled in
    choice = rng.random()
    if depth > 4 or choice < 0.3:
        return "".join(rng.choice(FILLER) for _ in range(rng.randint(0, 3)))
    if choice < 0.65:
        return "[" + _balanced(rng, depth + 1) + "]"
    return _balanced(rng, depth + 1) + _balanced(rng, depth + 1)


def _top_level_offsets(text: str) -> list:
    offsets = []
    depth = 0
    for index, ch in enumerate(text):
        if depth == 0:
            offsets.append(index)
        if ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
    offsets.append(len(text))
    return offsets


class ValidatorTests(unittest.TestCase):
    def test_programs_without_brackets_are_valid(self) -> None:
        rng = random.Random(7)
        for _ in range(50):
            text = "".join(rng.choice(FILLER) for _ in range(rng.randint(0, 40)))
            validate(text)
        validate(b"")
        validate(bytes(byte for byte in range(256) if byte not in b"[]"))

    def test_generated_balanced_programs_are_valid(self) -> None:
        rng = random.Random(1234)
        for _ in range(200):
            text = _balanced(rng)
            validate(text)
            jump_map = build_jump_map(text)
            self.assertEqual(len(jump_map), 2 * text.count("["))

    def test_extra_close_reports_location(self) -> None:
        rng = random.Random(99)
        for _ in range(200):
            text = _balanced(rng)
            position = rng.choice(_top_level_offsets(text))
            broken = text[:position] + "]" + text[position:]
            expected_line = broken.count("\n", 0, position) + 1
            expected_column = position - broken.rfind("\n", 0, position)
            with self.assertRaises(UnmatchedClose) as ctx:
                validate(broken)
            self.assertEqual(ctx.exception.position, position)
            self.assertEqual(ctx.exception.line, expected_line)
            self.assertEqual(ctx.exception.column, expected_column)

    def test_missing_trailing_close_is_unmatched_open(self) -> None:
        rng = random.Random(5)
        checked = 0
        while checked < 100:
            text = _balanced(rng).rstrip(FILLER)
            if not text:
                continue
            with self.assertRaises(UnmatchedOpen) as ctx:
                validate(text[:-1])
            self.assertEqual(ctx.exception.count, 1)
            checked += 1

    def test_close_location_on_first_and_second_line(self) -> None:
        with self.assertRaises(UnmatchedClose) as ctx:
            validate("+]")
        self.assertEqual((ctx.exception.line, ctx.exception.column), (1, 2))

        with self.assertRaises(UnmatchedClose) as ctx:
            validate("+[-]\n+]")
        self.assertEqual((ctx.exception.line, ctx.exception.column), (2, 2))
        self.assertEqual(ctx.exception.position, 6)
        self.assertIn("Line 2 Character 2", str(ctx.exception))

    def test_first_failure_wins(self) -> None:
        with self.assertRaises(UnmatchedClose) as ctx:
            validate("]\n]")
        self.assertEqual(ctx.exception.line, 1)

    def test_unmatched_open_count(self) -> None:
        with self.assertRaises(UnmatchedOpen) as ctx:
            validate("[[[-]")
        self.assertEqual(ctx.exception.count, 2)
        self.assertIn("Found 2 opening brackets", str(ctx.exception))


class JumpMapTests(unittest.TestCase):
    def test_nested_pairs(self) -> None:
        self.assertEqual(build_jump_map("[[-]]"), {0: 4, 4: 0, 1: 3, 3: 1})

    def test_sibling_pairs(self) -> None:
        self.assertEqual(build_jump_map("[]x[]"), {0: 1, 1: 0, 3: 4, 4: 3})

    def test_reports_same_errors_as_validate(self) -> None:
        with self.assertRaises(UnmatchedClose) as ctx:
            build_jump_map("+\n-]")
        self.assertEqual((ctx.exception.line, ctx.exception.column), (2, 2))
        with self.assertRaises(UnmatchedOpen) as ctx:
            build_jump_map("[[")
        self.assertEqual(ctx.exception.count, 2)


if __name__ == "__main__":
    unittest.main()
