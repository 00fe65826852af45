import unittest
from enterprise_intel.resolver.aliases import AliasResolver, EMPTY_ALIASES, load_default_aliases, logo_domain
from enterprise_intel.resolver.core import NameMatcher, match_name


class TestNameMatcher(unittest.TestCase):
    def test_alias_beats_containment(self):
        aliases = AliasResolver(aliases={"Google": "Alphabet"})
        # "Alphabet Workforce" comes first, so containment alone would pick it
        m = match_name("Google", ["Alphabet Workforce", "Alphabet"], aliases)
        self.assertEqual(m.name, "Alphabet")
        self.assertEqual(m.reason, "alias")

    def test_exact(self):
        m = match_name("Visa", ["Visa", "Visa Europe"])
        self.assertEqual((m.name, m.reason), ("Visa", "exact"))

    def test_containment_is_first_in_order(self):
        m = match_name("Bank", ["Bank of America", "Deutsche Bank"])
        self.assertEqual((m.name, m.reason), ("Bank of America", "containment"))
        m2 = match_name("Citi Ventures", ["Walmart", "Citi"])
        self.assertEqual(m2.name, "Citi")

    def test_no_alias_no_link(self):
        self.assertIsNone(match_name("JP Morgan", ["JPMorgan Chase"], EMPTY_ALIASES))

    def test_alias_lookup_is_case_sensitive(self):
        aliases = AliasResolver(aliases={"Google": "Alphabet"})
        self.assertIsNone(match_name("google", ["Alphabet"], aliases))

    def test_empty(self):
        self.assertIsNone(NameMatcher(["Walmart"]).match(""))

    def test_names_keep_order(self):
        self.assertEqual(NameMatcher(["b", "a"]).names, ("b", "a"))


class TestAliasTable(unittest.TestCase):
    def test_default_table(self):
        table = load_default_aliases()
        self.assertEqual(table.resolve("Google"), "Alphabet")
        self.assertEqual(table.resolve("JP Morgan"), "JPMorgan Chase")
        self.assertEqual(table.resolve("Unknown Co"), "Unknown Co")
        self.assertIn("Google", table)

    def test_read_only(self):
        table = AliasResolver(aliases={"A": "B"})
        with self.assertRaises(TypeError):
            table.aliases["C"] = "D"

    def test_logo_domain(self):
        table = AliasResolver(logo_domains={"Alphabet": "google.com"})
        self.assertEqual(logo_domain("Alphabet", "abc.xyz", table), "google.com")
        self.assertEqual(logo_domain("Visa", "visa.com"), "visa.com")
        self.assertEqual(logo_domain("Visa", "https://www.visa.com/about"), "www.visa.com")
        self.assertEqual(logo_domain("BNP Paribas Group", None), "bnpparibas.com")


if __name__ == "__main__":
    unittest.main()
