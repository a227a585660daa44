"""
Tests for composing the Telegram message from a report payload.
"""

import json

from gmpbot.formatter import ACTION_LINE
from gmpbot.report_builder import format_message


class TestFormatMessage:

    def test_empty_rows(self):
        assert format_message({"reportTableData": []}, "2024-04-05") == (
            "📈 IPOs Closing Today (2024-04-05)\n\nNo IPOs closing today."
        )

    def test_no_rows_closing_today(self):
        data = {"reportTableData": [{"Name": "Bar", "Close": "2024-04-09"}, {"Name": "Baz"}]}
        message = format_message(data, "2024-04-05")
        assert message.endswith("No IPOs closing today.")
        assert "Bar" not in message

    def test_missing_table_falls_back_to_dump(self):
        data = {"message": "maintenance", "reportTableData": None}
        message = format_message(data, "2024-04-05")
        assert message.startswith("📈 IPO GMP Update\n\n")
        assert json.dumps(data, indent=2) in message

    def test_non_dict_payload_falls_back_to_dump(self):
        assert format_message(["a", 1], "2024-04-05") == '📈 IPO GMP Update\n\n[\n  "a",\n  1\n]'
        assert format_message(None, "2024-04-05") == "📈 IPO GMP Update\n\nnull"

    def test_single_row_closing_today(self, closing_row):
        message = format_message({"reportTableData": [closing_row]}, "2024-04-05")
        header, block = message.split("\n\n")
        assert header == "📈 IPOs Closing Today (2024-04-05)"
        assert block.startswith("• Foo")
        assert "  GMP: 50" in block.split("\n")
        assert block.endswith(ACTION_LINE)

    def test_rows_separated_by_blank_line(self, closing_row):
        other = dict(closing_row, Name="Qux")
        skipped = dict(closing_row, Name="Late", **{"~Srt_Close": "2024-04-08"})
        message = format_message({"reportTableData": [closing_row, skipped, other, "junk"]}, "2024-04-05")
        blocks = message.split("\n\n")
        assert len(blocks) == 3
        assert blocks[1].startswith("• Foo")
        assert blocks[2].startswith("• Qux")
        assert "Late" not in message
