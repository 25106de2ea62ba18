from __future__ import annotations

import unittest

from python_mimeparams.headers import get_boundary, get_field_name, get_file_name, parse_options_header


class TestParseOptionsHeader(unittest.TestCase):
    def test_simple(self) -> None:
        t, p = parse_options_header("application/json")
        self.assertEqual(t, "application/json")
        self.assertEqual(p, {})

    def test_blank(self) -> None:
        t, p = parse_options_header("")
        self.assertEqual(t, "")
        self.assertEqual(p, {})

    def test_none(self) -> None:
        t, p = parse_options_header(None)
        self.assertEqual(t, "")
        self.assertEqual(p, {})

    def test_single_param(self) -> None:
        t, p = parse_options_header("application/json;par=val")
        self.assertEqual(t, "application/json")
        self.assertEqual(p, {"par": "val"})

    def test_single_param_with_spaces(self) -> None:
        t, p = parse_options_header(b"application/json;     par=val")
        self.assertEqual(t, "application/json")
        self.assertEqual(p, {"par": "val"})

    def test_multiple_params(self) -> None:
        t, p = parse_options_header(b"application/json;par=val;asdf=foo")
        self.assertEqual(t, "application/json")
        self.assertEqual(p, {"par": "val", "asdf": "foo"})

    def test_quoted_param(self) -> None:
        t, p = parse_options_header(b'application/json;param="quoted"')
        self.assertEqual(t, "application/json")
        self.assertEqual(p, {"param": "quoted"})

    def test_quoted_param_with_semicolon(self) -> None:
        t, p = parse_options_header(b'application/json;param="quoted;with;semicolons"')
        self.assertEqual(p["param"], "quoted;with;semicolons")

    def test_quoted_param_with_escapes(self) -> None:
        t, p = parse_options_header(b'application/json;param="This \\" is \\" a \\" quote"')
        self.assertEqual(p["param"], 'This " is " a " quote')

    def test_escaped_backslash_before_quote(self) -> None:
        # The escaped backslash must not combine with the following quote.
        t, p = parse_options_header(r'form-data; name="a\\"b"')
        self.assertEqual(p["name"], 'a\\"b')

    def test_handles_ie6_bug(self) -> None:
        t, p = parse_options_header(b'text/plain; filename="C:\\this\\is\\a\\path\\file.txt"')
        self.assertEqual(p["filename"], "file.txt")

    def test_handles_escaped_windows_path(self) -> None:
        t, p = parse_options_header(r'form-data; filename="C:\\tmp\\image.png"')
        self.assertEqual(p["filename"], "image.png")

    def test_handles_unc_path(self) -> None:
        t, p = parse_options_header(r'form-data; filename="\\\\server\\share\\file.txt"')
        self.assertEqual(p["filename"], "file.txt")

    def test_long_backslash_run(self) -> None:
        t, p = parse_options_header(b'application/x-www-form-urlencoded; !="' + b"\\" * 4096 + b'"')
        # Quadratic behaviour here would hang the test.
        self.assertEqual(p["!"], "\\" * 2048)

    def test_handles_rfc_2231(self) -> None:
        t, p = parse_options_header(b"text/plain; param*=us-ascii'en-us'encoded%20message")
        self.assertEqual(p["param"], "encoded message")

    def test_handles_rfc_2047(self) -> None:
        t, p = parse_options_header('form-data; name="file"; filename="=?utf-8?B?4oKsIHJhdGVz?="')
        self.assertEqual(p["filename"], "€ rates")

    def test_case_insensitive(self) -> None:
        t, p = parse_options_header("MULTIPART/FORM-DATA; BOUNDARY=abc")
        self.assertEqual(t, "multipart/form-data")
        self.assertEqual(p, {"boundary": "abc"})

    def test_spaces_around_equals(self) -> None:
        t, p = parse_options_header('form-data; name = "test" ; filename = "file.txt"')
        self.assertEqual(p, {"name": "test", "filename": "file.txt"})

    def test_empty_value(self) -> None:
        t, p = parse_options_header('form-data; name=""')
        self.assertEqual(t, "form-data")
        self.assertEqual(p, {"name": None})


class TestGetBoundary(unittest.TestCase):
    def test_simple(self) -> None:
        self.assertEqual(get_boundary("multipart/form-data; boundary=----WebKitFormBoundary"), b"----WebKitFormBoundary")

    def test_comma_separated(self) -> None:
        self.assertEqual(get_boundary("multipart/mixed, boundary=abc"), b"abc")

    def test_quoted(self) -> None:
        self.assertEqual(get_boundary('multipart/mixed; boundary="a;b"; charset=utf-8'), b"a;b")

    def test_missing(self) -> None:
        self.assertIsNone(get_boundary("multipart/form-data"))
        self.assertIsNone(get_boundary("multipart/form-data; boundary="))
        self.assertIsNone(get_boundary(None))

    def test_name_is_case_insensitive(self) -> None:
        self.assertEqual(get_boundary(b"multipart/form-data; BOUNDARY=xyz"), b"xyz")

    def test_encoded_boundary_outside_latin1(self) -> None:
        self.assertEqual(get_boundary("multipart/form-data; boundary==?utf-8?B?4oKs?="), b"?")
        self.assertEqual(get_boundary("multipart/form-data; boundary*=utf-8''%E2%82%ACx"), b"?x")

    def test_encoded_boundary_in_latin1(self) -> None:
        self.assertEqual(get_boundary("multipart/form-data; boundary*=iso-8859-1''caf%E9"), b"caf\xe9")


class TestGetFileName(unittest.TestCase):
    def test_form_data(self) -> None:
        self.assertEqual(get_file_name('form-data; name="upload"; filename="report.pdf"'), "report.pdf")

    def test_attachment(self) -> None:
        self.assertEqual(get_file_name('Attachment; FILENAME="report.pdf"'), "report.pdf")

    def test_trimmed(self) -> None:
        self.assertEqual(get_file_name('form-data; filename="  spaced.txt  "'), "spaced.txt")

    def test_present_without_value(self) -> None:
        self.assertEqual(get_file_name("form-data; name=upload; filename"), "")
        self.assertEqual(get_file_name('form-data; name=upload; filename=""'), "")

    def test_no_file_name(self) -> None:
        self.assertIsNone(get_file_name('form-data; name="field"'))

    def test_other_disposition(self) -> None:
        self.assertIsNone(get_file_name('inline; filename="report.pdf"'))
        self.assertIsNone(get_file_name(None))

    def test_encoded(self) -> None:
        self.assertEqual(get_file_name("attachment; filename*=UTF-8''na%C3%AFve.txt"), "na\xefve.txt")

    def test_windows_path(self) -> None:
        self.assertEqual(get_file_name(r'form-data; filename="C:\\tmp\\image.png"'), "image.png")


class TestGetFieldName(unittest.TestCase):
    def test_simple(self) -> None:
        self.assertEqual(get_field_name('form-data; name="field"; filename="a.txt"'), "field")

    def test_not_form_data(self) -> None:
        self.assertIsNone(get_field_name('attachment; name="field"'))

    def test_missing(self) -> None:
        self.assertIsNone(get_field_name("form-data"))
        self.assertIsNone(get_field_name("form-data; filename=a.txt"))
