"""
Tests for CSV upload parsing and CSV export.
"""

import unittest
from types import SimpleNamespace

from casedash.data import CaseDataParseError, export_csv, parse_case_csv, upload_signature


SAMPLE_CSV = (
    b"State,Date,Confirmed,Active,Recovered,Deaths,Gender,Age\n"
    b"NY,2020-03-01,10,8,1,1,F,25\n"
    b"CA,2020-03-02,4,,0,0,,\n"
    b"\n"
)


class TestParseCaseCsv(unittest.TestCase):

    def test_rows_become_string_records(self):
        result = parse_case_csv(SAMPLE_CSV)
        self.assertEqual(result["fields"][0], "State")
        self.assertEqual(len(result["data"]), 2)
        self.assertEqual(result["data"][0]["Confirmed"], "10")
        self.assertEqual(result["data"][0]["Age"], "25")

    def test_blank_cells_are_empty_strings(self):
        row = parse_case_csv(SAMPLE_CSV)["data"][1]
        self.assertEqual(row["Active"], "")
        self.assertEqual(row["Gender"], "")

    def test_leading_zeros_are_not_coerced(self):
        result = parse_case_csv(b"State,Age\nNY,007\n")
        self.assertEqual(result["data"][0]["Age"], "007")

    def test_utf8_bom_is_stripped_from_header(self):
        result = parse_case_csv(b"\xef\xbb\xbfState,Age\nNY,30\n")
        self.assertEqual(result["fields"], ["State", "Age"])

    def test_missing_columns_are_allowed(self):
        with self.assertLogs("casedash.data", level="INFO"):
            result = parse_case_csv(b"State\nNY\n")
        self.assertEqual(result["data"], [{"State": "NY"}])

    def test_empty_input(self):
        self.assertEqual(parse_case_csv(b""), {"data": [], "fields": []})
        self.assertEqual(parse_case_csv(b"  \n"), {"data": [], "fields": []})

    def test_extra_fields_are_trimmed_and_logged(self):
        with self.assertLogs("casedash.data", level="WARNING") as logs:
            result = parse_case_csv(b"State,Age\nNY,3,extra\n")
        self.assertEqual(result["data"], [{"State": "NY", "Age": "3"}])
        self.assertIn("trimmed", logs.output[0])

    def test_undecodable_bytes_raise_parse_error(self):
        with self.assertRaises(CaseDataParseError):
            parse_case_csv(b"State,Age\n\xff\xfe\xfa,1\n")


class TestUploadSignature(unittest.TestCase):

    def test_same_name_and_size_reupload_is_new(self):
        first = SimpleNamespace(name="cases.csv", size=120, file_id="a1")
        edited = SimpleNamespace(name="cases.csv", size=120, file_id="b2")
        self.assertNotEqual(upload_signature(first), upload_signature(edited))

    def test_same_upload_is_stable(self):
        uploaded = SimpleNamespace(name="cases.csv", size=120, file_id="a1")
        self.assertEqual(upload_signature(uploaded), upload_signature(uploaded))


class TestExportCsv(unittest.TestCase):

    def test_header_and_rows(self):
        records = [{"State": "NY", "Age": "25"}, {"State": "CA", "Age": "40"}]
        lines = export_csv(records).decode("utf-8").splitlines()
        self.assertEqual(lines, ["State,Age", "NY,25", "CA,40"])

    def test_parse_of_export_gives_same_records(self):
        records = parse_case_csv(SAMPLE_CSV)["data"]
        self.assertEqual(parse_case_csv(export_csv(records))["data"], records)


if __name__ == "__main__":
    unittest.main()
