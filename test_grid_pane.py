import unittest

from grid_pane import GridPane


HEADERS = ["name", "city", "age"]
ROWS = [["Alice", "New York", "30"], ["bob", "Boston", "25"], ["Carol"]]


class GridPaneViewTests(unittest.TestCase):
    def test_cell_text_pads_short_rows(self):
        self.assertEqual(GridPane.cell_text(ROWS[2], 1), "")
        self.assertEqual(GridPane.cell_text(ROWS[0], 1), "New York")

    def test_header_label_marks_sorted_column(self):
        grid = GridPane(HEADERS, ROWS)
        grid.set_view(HEADERS, ROWS, None, sort_column=2, sort_ascending=False)
        self.assertEqual(grid.header_label(2), "age v")
        self.assertEqual(grid.header_label(0), "name")
        grid.set_view(HEADERS, ROWS, None, sort_column=2, sort_ascending=True)
        self.assertEqual(grid.header_label(2), "age ^")

    def test_col_width_is_capped(self):
        rows = [["x" * 100]]
        grid = GridPane(["long"], rows, max_col_width=10)
        self.assertEqual(grid.get_col_width(0), 10)
        grid = GridPane(["a"], [["abc"]])
        self.assertEqual(grid.get_col_width(0), 5)

    def test_cursor_follows_column_when_another_is_hidden(self):
        grid = GridPane(HEADERS, ROWS)
        grid.curr_col = 2
        self.assertEqual(grid.current_column(), 2)
        grid.set_view(HEADERS, ROWS, [0, 2])
        self.assertEqual(grid.current_column(), 2)
        self.assertEqual(grid.curr_col, 1)

    def test_cursor_clamps_when_its_column_is_hidden(self):
        grid = GridPane(HEADERS, ROWS)
        grid.curr_col = 2
        grid.set_view(HEADERS, ROWS, [0, 1])
        self.assertEqual(grid.current_column(), 1)

    def test_no_visible_columns(self):
        grid = GridPane(HEADERS, ROWS)
        grid.set_view(HEADERS, ROWS, [])
        self.assertIsNone(grid.current_column())
        grid.move_right()
        self.assertEqual(grid.curr_col, 0)

    def test_row_moves_stay_inside_page(self):
        grid = GridPane(HEADERS, ROWS)
        grid.move_down(page_end=2)
        grid.move_down(page_end=2)
        self.assertEqual(grid.curr_row, 1)
        grid.move_up(page_start=1)
        self.assertEqual(grid.curr_row, 1)
        grid.move_up()
        self.assertEqual(grid.curr_row, 0)


class GridPaneAdjustViewportTests(unittest.TestCase):
    def _grid(self, count):
        headers = [f"c{i}" for i in range(count)]
        return GridPane(headers, [["0"] * count])

    def test_visible_count_stops_at_available_width(self):
        grid = self._grid(10)
        self.assertEqual(grid.visible_count([4] * 10, 20), 4)
        self.assertEqual(grid.visible_count([50] * 10, 20), 1)

    def test_adjust_col_viewport_shifts_offset_to_cursor(self):
        grid = self._grid(50)
        widths = [4] * 50
        grid.curr_col = 49
        grid.adjust_col_viewport(widths, 40)
        self.assertEqual(grid.col_offset, 49 - 8 + 1)
        self.assertLessEqual(grid.col_offset, grid.curr_col)

        grid.curr_col = 3
        grid.adjust_col_viewport(widths, 40)
        self.assertEqual(grid.col_offset, 3)


if __name__ == "__main__":
    unittest.main()
