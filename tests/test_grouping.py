import unittest

from enterprise_intel.directory.grouping import (
    detect_parent,
    filter_directory,
    group_subsidiaries,
    is_corporate_unit,
)
from enterprise_intel.directory.models import DirectoryCompany, Partner
from enterprise_intel.resolver.ids import company_id


def c(name, **kw):
    return DirectoryCompany(id=company_id(name), name=name, **kw)


def shape(groups):
    return [(g.company.name, [s.name for s in g.subsidiaries]) for g in groups]


class TestCorporateUnits(unittest.TestCase):
    def test_suffixes(self):
        self.assertTrue(is_corporate_unit("Coinbase Ventures", "Coinbase"))
        self.assertTrue(is_corporate_unit("Fidelity Asset Management", "Fidelity"))
        self.assertTrue(is_corporate_unit("Kraken Digital Asset Exchange", "Kraken"))
        self.assertFalse(is_corporate_unit("PwC India", "PwC"))
        # a marker must be a whole word
        self.assertFalse(is_corporate_unit("Acme Labsolutions", "Acme"))


class TestGrouping(unittest.TestCase):
    def test_coinbase_ventures_stays_separate(self):
        groups = group_subsidiaries([c("Coinbase"), c("Coinbase Ventures")])
        self.assertEqual(shape(groups), [("Coinbase", []), ("Coinbase Ventures", [])])

    def test_pwc_india_grouped(self):
        groups = group_subsidiaries([c("PwC"), c("PwC India"), c("PwC Germany")])
        self.assertEqual(shape(groups), [("PwC", ["PwC India", "PwC Germany"])])

    def test_orphan_surfaced(self):
        self.assertEqual(shape(group_subsidiaries([c("PwC India")])), [("PwC India", [])])

    def test_explicit_parent_filtered_out(self):
        groups = group_subsidiaries([c("Onyx", parent_company="JPMorgan Chase"), c("Circle")])
        self.assertEqual(shape(groups), [("Circle", []), ("Onyx", [])])

    def test_explicit_parent_present(self):
        groups = group_subsidiaries([c("JPMorgan Chase"), c("Onyx", parent_company="JPMorgan Chase")])
        self.assertEqual(shape(groups), [("JPMorgan Chase", ["Onyx"])])

    def test_self_parent_ignored(self):
        self.assertIsNone(detect_parent(c("Circle", parent_company="Circle"), ["Circle"]))

    def test_nested_subsidiary_not_lost(self):
        groups = group_subsidiaries([c("PwC"), c("PwC India"), c("PwC India Mumbai")])
        names = [g.company.name for g in groups] + [s.name for g in groups for s in g.subsidiaries]
        self.assertEqual(sorted(names), ["PwC", "PwC India", "PwC India Mumbai"])

    def test_idempotent(self):
        view = [c("PwC"), c("PwC India"), c("Coinbase"), c("Coinbase Ventures")]
        self.assertEqual(group_subsidiaries(view), group_subsidiaries(list(view)))


class TestFilterDirectory(unittest.TestCase):
    def setUp(self):
        self.companies = [
            c("Bitpanda", region="EU", categories=["Exchange"], description="Vienna broker", added_at="2024-01-01T00:00:00+00:00"),
            c("Rain", region="EMEA", categories=["Payments"], focus="Crypto-First", added_at="2024-03-01T00:00:00+00:00",
              partners=[Partner(name="Visa"), Partner(name="Mastercard")]),
            c("anchorage", region="North America", categories=["Custody"], added_at=None),
        ]

    def test_region_groups(self):
        self.assertEqual([x.name for x in filter_directory(self.companies, region="Europe")], ["Bitpanda"])
        self.assertEqual([x.name for x in filter_directory(self.companies, region="MEA")], ["Rain"])

    def test_category_focus_search(self):
        self.assertEqual([x.name for x in filter_directory(self.companies, category="Custody")], ["anchorage"])
        self.assertEqual([x.name for x in filter_directory(self.companies, focus="Crypto-First")], ["Rain"])
        self.assertEqual([x.name for x in filter_directory(self.companies, search="vienna")], ["Bitpanda"])

    def test_sorts(self):
        self.assertEqual([x.name for x in filter_directory(self.companies)], ["anchorage", "Bitpanda", "Rain"])
        self.assertEqual([x.name for x in filter_directory(self.companies, sort_by="lastAdded")], ["Rain", "Bitpanda", "anchorage"])
        self.assertEqual(filter_directory(self.companies, sort_by="mostPartners")[0].name, "Rain")

    def test_bad_sort(self):
        with self.assertRaises(ValueError):
            filter_directory(self.companies, sort_by="revenue")

    def test_input_untouched(self):
        before = list(self.companies)
        filter_directory(self.companies, sort_by="lastAdded")
        self.assertEqual(self.companies, before)


if __name__ == "__main__":
    unittest.main()
