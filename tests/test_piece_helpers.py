import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from piece_helpers import (
    ALL_PLACEMENTS,
    PIECE_NAMES,
    PIECE_ORIENTATIONS,
    PIECES_BASE,
    Symmetry,
    align_piece,
    build_orientations,
    flip_piece,
    piece_height,
    piece_to_bitboard,
    piece_width,
    placements_for_orientations,
    rotate_piece,
)

EXPECTED_ORIENTATION_COUNTS = {
    Symmetry.FIXED: 1,
    Symmetry.HALF_TURN: 2,
    Symmetry.ROTATIONS: 4,
    Symmetry.FOLDED_REFLECTIONS: 4,
    Symmetry.ALL: 8,
}


class ShapeTransformTests(unittest.TestCase):
    def test_align(self) -> None:
        self.assertEqual(align_piece(0x13), 0x13)
        self.assertEqual(align_piece(0x23 << 2), 0x23)
        self.assertEqual(align_piece(0x37 << 8), 0x37)
        self.assertEqual(align_piece(0x33 << 10), 0x33)
        self.assertEqual(align_piece(0xF880), 0x0F88)
        self.assertEqual(align_piece(0), 0)

    def test_align_is_idempotent(self) -> None:
        for shape in (0x13, 0x8C, 0xF880, 0xCC00):
            aligned = align_piece(shape)
            self.assertEqual(align_piece(aligned), aligned)

    def test_rotate(self) -> None:
        piece = 0x31
        self.assertEqual(rotate_piece(piece), 0x13)
        self.assertEqual(rotate_piece(rotate_piece(piece)), 0x23)
        self.assertEqual(rotate_piece(rotate_piece(rotate_piece(piece))), 0x32)
        self.assertEqual(rotate_piece(rotate_piece(rotate_piece(rotate_piece(piece)))), 0x31)

    def test_flip(self) -> None:
        self.assertEqual(flip_piece(0x13), 0x23)
        self.assertEqual(flip_piece(0x8CEF), 0x137F)
        self.assertEqual(flip_piece(0x8421), 0x1248)
        self.assertEqual(flip_piece(0x1111), 0x1111)

    def test_transform_cycles_on_library(self) -> None:
        for name, orientations in PIECE_ORIENTATIONS.items():
            for shape in orientations:
                with self.subTest(piece=name, shape=hex(shape)):
                    turned = shape
                    for _ in range(4):
                        turned = rotate_piece(turned)
                    self.assertEqual(turned, shape)
                    self.assertEqual(flip_piece(flip_piece(shape)), shape)
                    self.assertEqual(align_piece(shape), shape)

    def test_width_and_height(self) -> None:
        self.assertEqual((piece_width(0x0F), piece_height(0x0F)), (4, 1))
        self.assertEqual((piece_width(0x1111), piece_height(0x1111)), (1, 4))
        self.assertEqual((piece_width(0x77), piece_height(0x77)), (3, 2))
        self.assertEqual((piece_width(0x175), piece_height(0x175)), (3, 3))

    def test_to_bitboard(self) -> None:
        self.assertEqual(piece_to_bitboard(0x23, 0, 0), 0x0203)
        self.assertEqual(piece_to_bitboard(0x23, 1, 0), 0x0406)
        self.assertEqual(piece_to_bitboard(0x23, 0, 1), 0x020300)
        self.assertEqual(piece_to_bitboard(0x23, 1, 1), 0x040600)
        self.assertEqual(piece_to_bitboard(0xFFFF, 0, 0), 0x0F0F0F0F)
        self.assertEqual(piece_to_bitboard(0xAAAA, 4, 4), 0xA0A0A0A000000000)

    def test_to_bitboard_rejects_off_board(self) -> None:
        with self.assertRaises(ValueError):
            piece_to_bitboard(0x23, 7, 0)
        with self.assertRaises(ValueError):
            piece_to_bitboard(0x1111, 0, 5)

    def test_tall_encoding(self) -> None:
        column = 0x11111  # five cells stacked in one column
        self.assertEqual(piece_height(column, rows=8), 5)
        self.assertEqual(piece_width(column, rows=8), 1)
        self.assertEqual(align_piece(column << 12, rows=8), column)
        self.assertEqual(flip_piece(column, rows=8), column)
        self.assertEqual(piece_to_bitboard(column, 2, 3, rows=8), 0x0101010101 << 26)
        with self.assertRaises(ValueError):
            rotate_piece(column, rows=8)
        with self.assertRaises(ValueError):
            align_piece(column)


class OrientationTests(unittest.TestCase):
    def test_library_orientation_counts(self) -> None:
        for name, (_, symmetry) in PIECES_BASE.items():
            with self.subTest(piece=name):
                orientations = PIECE_ORIENTATIONS[name]
                self.assertEqual(len(orientations), EXPECTED_ORIENTATION_COUNTS[symmetry])
                self.assertEqual(len(set(orientations)), len(orientations))

    def test_orientation_order(self) -> None:
        self.assertEqual(build_orientations(0x77, Symmetry.HALF_TURN), (0x77, 0x333))
        self.assertEqual(build_orientations(0x0F, Symmetry.HALF_TURN), (0x0F, 0x1111))
        self.assertEqual(build_orientations(0x31, Symmetry.ROTATIONS), (0x31, 0x13, 0x23, 0x32))
        self.assertEqual(build_orientations(0x33, Symmetry.FIXED), (0x33,))

    def test_eight_orientations_cover_every_transform(self) -> None:
        orientations = build_orientations(0x17, Symmetry.ALL)
        expected = set()
        for start in (0x17, flip_piece(0x17)):
            shape = start
            for _ in range(4):
                expected.add(shape)
                shape = rotate_piece(shape)
        self.assertEqual(set(orientations), expected)
        self.assertEqual(orientations[4], flip_piece(0x17))

    def test_wrong_symmetry_class_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            build_orientations(0x33, Symmetry.ROTATIONS)
        with self.assertRaises(ValueError):
            build_orientations(0x313, Symmetry.ALL)


class PlacementTests(unittest.TestCase):
    def test_line_placements(self) -> None:
        placements = placements_for_orientations((0x0F, 0x1111))
        self.assertEqual(len(placements), 80)
        self.assertEqual(placements[:2], (0x0F, 0x0F00))
        self.assertEqual(len(set(placements)), 80)

    def test_every_library_piece_has_placements(self) -> None:
        self.assertEqual(sorted(ALL_PLACEMENTS), sorted(PIECE_NAMES))
        for name, placements in ALL_PLACEMENTS.items():
            with self.subTest(piece=name):
                self.assertTrue(placements)
                self.assertEqual(len(set(placements)), len(placements))


if __name__ == "__main__":
    unittest.main()
