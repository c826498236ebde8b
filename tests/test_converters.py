"""
Unit tests for decoding and encoding project documents.

Heads up: the raw block assertions are whitespace sensitive.
"""

import unittest

from ewp_cli.converters import XMLBridge, decode, encode
from ewp_cli.core.project_model import EwpProject, FileEntry, OpaqueBlock, make_file_entry
from ewp_cli.exceptions import DecodeError, EncodeError, EwpError


SAMPLE = (
    "<project>\n"
    "\t<fileVersion>3</fileVersion>\n"
    "\t<file>\n"
    "\t\t<name>$PROJ_DIR$\\main.cpp</name>\n"
    "\t</file>\n"
    "\t<file>\n"
    "\t\t<name>$PROJ_DIR$\\math.h</name>\n"
    "\t\t<excluded>\n"
    "\t\t\t<configuration>MyConfig</configuration>\n"
    "\t\t\t<configuration>AnotherConfig</configuration>\n"
    "\t\t</excluded>\n"
    "\t</file>\n"
    "\t<configuration>\n"
    "\t\t<content>\n"
    "\t\t\tThis is additional content\n"
    "\t\t</content>\n"
    "\t</configuration>\n"
    "\t<group>\n"
    "\t\t<world>\n"
    "\t\t\thello world\n"
    "\t\t</world>\n"
    "\t</group>\n"
    "</project>\n"
)

CONFIGURATION_RAW = "\n\t\t<content>\n\t\t\tThis is additional content\n\t\t</content>\n\t"
GROUP_RAW = "\n\t\t<world>\n\t\t\thello world\n\t\t</world>\n\t"


class TestDecode(unittest.TestCase):
    """Tests for reading project documents."""

    def test_sample_document(self):
        project = decode(SAMPLE.encode("utf-8"))

        self.assertEqual(project.file_version, 3)
        self.assertEqual(len(project.files), 2)
        self.assertEqual(project.files[0].base_name, "main.cpp")
        self.assertIsNone(project.files[0].exclusions)
        self.assertEqual(project.files[1].base_name, "math.h")
        self.assertEqual(project.files[1].exclusions, ["MyConfig", "AnotherConfig"])

    def test_files_match_constructed_entries(self):
        project = decode(SAMPLE)
        self.assertEqual(project.files[0], make_file_entry("main.cpp"))
        self.assertEqual(project.files[1], make_file_entry("math.h", "MyConfig", "AnotherConfig"))

    def test_opaque_blocks_preserved_exactly(self):
        project = decode(SAMPLE)
        self.assertEqual([b.raw_markup for b in project.configurations], [CONFIGURATION_RAW])
        self.assertEqual([b.raw_markup for b in project.groups], [GROUP_RAW])

    def test_str_and_bytes_agree(self):
        self.assertEqual(decode(SAMPLE), decode(SAMPLE.encode("utf-8")))

    def test_document_order_is_kept(self):
        data = (
            "<project><fileVersion>1</fileVersion>"
            "<file><name>$PROJ_DIR$\\z.c</name></file>"
            "<file><name>$PROJ_DIR$\\a.c</name></file>"
            "</project>"
        )
        project = decode(data)
        self.assertEqual([f.base_name for f in project.files], ["z.c", "a.c"])

    def test_multiple_blocks_in_order(self):
        data = (
            "<project><fileVersion>2</fileVersion>"
            "<configuration><name>Debug</name></configuration>"
            "<group><name>src</name></group>"
            "<configuration><name>Release</name></configuration>"
            "</project>"
        )
        project = decode(data)
        self.assertEqual(
            [b.raw_markup for b in project.configurations],
            ["<name>Debug</name>", "<name>Release</name>"],
        )
        self.assertEqual([b.raw_markup for b in project.groups], ["<name>src</name>"])

    def test_empty_and_self_closing_blocks(self):
        data = "<project><fileVersion>2</fileVersion><configuration/><group></group></project>"
        project = decode(data)
        self.assertEqual(project.configurations, [OpaqueBlock(raw_markup="")])
        self.assertEqual(project.groups, [OpaqueBlock(raw_markup="")])

    def test_block_attributes_with_angle_bracket(self):
        data = '<project><fileVersion>2</fileVersion><group name="a>b"><x/></group></project>'
        project = decode(data)
        self.assertEqual(project.groups[0].raw_markup, "<x/>")

    def test_entities_left_unexpanded_in_blocks(self):
        data = "<project><fileVersion>2</fileVersion><configuration>a &amp; b</configuration></project>"
        project = decode(data)
        self.assertEqual(project.configurations[0].raw_markup, "a &amp; b")

    def test_present_empty_exclusions(self):
        data = (
            "<project><fileVersion>2</fileVersion>"
            "<file><name>$PROJ_DIR$\\a.c</name><excluded></excluded></file>"
            "</project>"
        )
        project = decode(data)
        self.assertEqual(project.files[0].exclusions, [])

    def test_version_whitespace(self):
        project = decode("<project><fileVersion> 4 </fileVersion></project>")
        self.assertEqual(project.file_version, 4)

    def test_declared_encoding(self):
        data = (
            '<?xml version="1.0" encoding="iso-8859-1"?>\n'
            "<project><fileVersion>3</fileVersion>"
            "<configuration><n>caf\xe9</n></configuration>"
            "</project>"
        ).encode("iso-8859-1")
        project = decode(data)
        self.assertEqual(project.encoding, "iso-8859-1")
        self.assertEqual(project.configurations[0].raw_markup, "<n>caf\xe9</n>")

    def test_unknown_elements_ignored(self):
        project = decode("<project><fileVersion>3</fileVersion><extra>x</extra></project>")
        self.assertEqual(project.file_version, 3)
        self.assertEqual(project.files, [])


class TestDecodeErrors(unittest.TestCase):
    """Tests for rejected documents."""

    def test_malformed(self):
        with self.assertRaises(DecodeError):
            decode("<project><fileVersion>3</project>")

    def test_wrong_root(self):
        with self.assertRaises(DecodeError):
            decode("<workspace><fileVersion>3</fileVersion></workspace>")

    def test_missing_version(self):
        with self.assertRaises(DecodeError):
            decode("<project><file><name>a.c</name></file></project>")

    def test_non_integer_version(self):
        with self.assertRaises(DecodeError):
            decode("<project><fileVersion>three</fileVersion></project>")

    def test_version_must_be_ascii_digits(self):
        for text in ("1_0", "\u0663", "0x3", "3.0", ""):
            with self.subTest(text=text):
                with self.assertRaises(DecodeError):
                    decode(f"<project><fileVersion>{text}</fileVersion></project>")

    def test_signed_version(self):
        self.assertEqual(decode("<project><fileVersion>-1</fileVersion></project>").file_version, -1)
        self.assertEqual(decode("<project><fileVersion>+2</fileVersion></project>").file_version, 2)

    def test_utf16_is_rejected(self):
        data = (
            '<?xml version="1.0" encoding="utf-16"?>'
            "<project><fileVersion>3</fileVersion><group><x/></group></project>"
        )
        with self.assertRaises(DecodeError):
            decode(data.encode("utf-16"))

    def test_file_without_name(self):
        with self.assertRaises(DecodeError):
            decode("<project><fileVersion>3</fileVersion><file></file></project>")

    def test_not_a_buffer(self):
        with self.assertRaises(DecodeError):
            decode(42)

    def test_errors_share_base(self):
        with self.assertRaises(EwpError):
            decode(b"")


class TestEncode(unittest.TestCase):
    """Tests for writing project documents."""

    def test_round_trip(self):
        project = decode(SAMPLE)
        self.assertEqual(decode(encode(project)), project)

    def test_round_trip_after_insert(self):
        project = decode(SAMPLE)
        project.insert_file(make_file_entry("foo.cpp", "Release"))
        again = decode(encode(project))

        self.assertEqual(again.files, project.files)
        self.assertEqual(again.configurations[0].raw_markup, CONFIGURATION_RAW)
        self.assertEqual(again.groups[0].raw_markup, GROUP_RAW)

    def test_raw_blocks_emitted_verbatim(self):
        data = encode(decode(SAMPLE))
        self.assertIn(
            ("<configuration>" + CONFIGURATION_RAW + "</configuration>").encode("utf-8"),
            data,
        )
        self.assertIn(("<group>" + GROUP_RAW + "</group>").encode("utf-8"), data)

    def test_element_order(self):
        text = encode(decode(SAMPLE)).decode("utf-8")
        self.assertTrue(text.startswith("<project>"))
        self.assertLess(text.index("<fileVersion>"), text.index("<configuration>"))
        self.assertLess(text.index("<configuration>"), text.index("<group>"))
        self.assertLess(text.index("<group>"), text.index("<file>"))

    def test_exclusion_states(self):
        project = EwpProject(
            file_version=3,
            files=[
                FileEntry(path="$PROJ_DIR$\\absent.c"),
                FileEntry(path="$PROJ_DIR$\\empty.c", exclusions=[]),
                FileEntry(path="$PROJ_DIR$\\some.c", exclusions=["Debug"]),
            ],
        )
        data = encode(project)
        self.assertEqual(data.count(b"<excluded>"), 2)

        files = decode(data).files
        self.assertIsNone(files[0].exclusions)
        self.assertEqual(files[1].exclusions, [])
        self.assertEqual(files[2].exclusions, ["Debug"])

    def test_text_is_escaped(self):
        project = EwpProject(file_version=3, files=[make_file_entry("a&b<c>.c", "R&D")])
        self.assertEqual(decode(encode(project)).files, project.files)

    def test_carriage_return_round_trip(self):
        project = EwpProject(file_version=3, files=[make_file_entry("a\rb.c", "Deb\rug")])
        data = encode(project)
        self.assertIn(b"&#13;", data)
        self.assertEqual(decode(data).files, project.files)

    def test_declared_encoding_round_trip(self):
        project = EwpProject(
            file_version=3,
            configurations=[OpaqueBlock(raw_markup="<n>caf\xe9</n>")],
            encoding="iso-8859-1",
        )
        data = encode(project)
        self.assertTrue(data.startswith(b'<?xml version="1.0" encoding="iso-8859-1"?>'))
        self.assertIn(b"caf\xe9", data)
        self.assertEqual(decode(data), project)

    def test_no_declaration_without_encoding(self):
        data = encode(EwpProject(file_version=3))
        self.assertFalse(data.startswith(b"<?xml"))


class TestEncodeErrors(unittest.TestCase):
    """Tests for models that cannot be written."""

    def test_malformed_block(self):
        project = EwpProject(file_version=3, configurations=[OpaqueBlock(raw_markup="<open>")])
        with self.assertRaises(EncodeError):
            encode(project)

    def test_block_that_splits_element(self):
        project = EwpProject(
            file_version=3,
            groups=[OpaqueBlock(raw_markup="</group><group>")],
        )
        with self.assertRaises(EncodeError):
            encode(project)

    def test_unencodable_text(self):
        project = EwpProject(
            file_version=3,
            files=[make_file_entry("caf\xe9.c")],
            encoding="ascii",
        )
        with self.assertRaises(EncodeError):
            encode(project)


class TestXMLBridge(unittest.TestCase):
    """Tests for raw fragment extraction."""

    def test_only_root_children_are_captured(self):
        bridge = XMLBridge(("configuration",))
        raw = bridge.extract_raw_children(SAMPLE)
        # Configurations nested in <excluded> are not blocks
        self.assertEqual(raw.get("configuration"), [CONFIGURATION_RAW])
        self.assertEqual(raw.get("group"), [])
        self.assertIsNone(raw.declared_encoding)

    def test_multibyte_offsets(self):
        data = "<project><fileVersion>1</fileVersion><group>é中<a/></group></project>"
        raw = XMLBridge().extract_raw_children(data)
        self.assertEqual(raw.get("group"), ["é中<a/>"])


if __name__ == "__main__":
    unittest.main()
