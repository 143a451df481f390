import unittest
from sysdeps.library import Library, parse_flags, OVERRIDE

class TestParseFlags(unittest.TestCase):

    def test_classifies_tokens(self):
        library = Library.from_flags("testlib", "-I/usr/include/testlib -L/usr/lib -ltest -lm -DTEST -DLEVEL=2")
        self.assertEqual(library.include_paths, ["/usr/include/testlib"])
        self.assertEqual(library.lib_paths, ["/usr/lib"])
        self.assertEqual(library.libs, ["test", "m"])
        self.assertEqual(library.defines, {"TEST": None, "LEVEL": "2"})

    def test_separate_values_and_quoting(self):
        library = Library.from_flags("testlib", '-I "/opt/my include" -L /opt/lib -l foo', source=OVERRIDE)
        self.assertEqual(library.include_paths, ["/opt/my include"])
        self.assertEqual(library.lib_paths, ["/opt/lib"])
        self.assertEqual(library.libs, ["foo"])
        self.assertEqual(library.source, OVERRIDE)

    def test_duplicates_collapse(self):
        library = Library.from_flags("testlib", "-lfoo -lfoo -I/a -I/a")
        self.assertEqual(library.libs, ["foo"])
        self.assertEqual(library.include_paths, ["/a"])

    def test_empty_text(self):
        library = Library.from_flags("testlib", "   ")
        self.assertEqual((library.libs, library.lib_paths, library.include_paths, library.defines), ([], [], [], {}))

    def test_strict_rejects_unknown_tokens(self):
        for text in ["-lfoo bogus", "-pthread", "-I", "-L -lfoo", "-D=1", '-I"/unterminated']:
            with self.subTest(text=text):
                with self.assertRaises(ValueError):
                    parse_flags(text, Library(name="x"))

    def test_lenient_ignores_unknown_tokens(self):
        library = parse_flags("-pthread -I/usr/include -Wl,--as-needed -lfoo -L", Library(name="x"), strict=False)
        self.assertEqual(library.include_paths, ["/usr/include"])
        self.assertEqual(library.libs, ["foo"])
        self.assertEqual(library.lib_paths, [])

    def test_lenient_unbalanced_quote_splits_on_whitespace(self):
        library = parse_flags("-I/opt/o'neil/include -lfoo", Library(name="x"), strict=False)
        self.assertEqual(library.include_paths, ["/opt/o'neil/include"])
        self.assertEqual(library.libs, ["foo"])

if __name__ == "__main__":
    unittest.main()
