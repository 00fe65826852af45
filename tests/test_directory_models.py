import unittest
from datetime import datetime, timezone

from enterprise_intel.directory.lists import PRIORITIES, CompanyList, add_entry, new_list, remap_entries
from enterprise_intel.directory.models import (
    CompanyPatch,
    DirectoryCompany,
    Partner,
    apply_patch,
    ensure_bidirectional_partners,
    merge_partners,
    new_company,
    sync_investor_partners,
)

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


class TestSkeleton(unittest.TestCase):
    def test_new_company(self):
        sk = new_company("  Fireblocks Inc ", now=NOW)
        self.assertEqual(sk.id, "c-fireblocks")
        self.assertEqual(sk.name, "Fireblocks Inc")
        self.assertEqual(sk.description, "Fetching intelligence...")
        self.assertEqual(sk.categories, ["Infrastructure"])
        self.assertEqual(sk.headquarters, "Pending...")
        self.assertEqual((sk.region, sk.focus), ("Global", "Crypto-Second"))
        self.assertEqual(sk.added_at, NOW.isoformat())

    def test_empty_name(self):
        with self.assertRaises(ValueError):
            new_company("   ")

    def test_round_trip_camel_case(self):
        d = {"name": "Circle", "parentCompany": "Circle Group", "partners": [{"name": "Visa", "sourceUrl": "u", "type": "Weird"}]}
        company = DirectoryCompany.from_dict(d)
        self.assertEqual(company.id, "c-circle")
        self.assertEqual(company.parent_company, "Circle Group")
        self.assertEqual(company.partners[0].source_url, "u")
        self.assertEqual(company.partners[0].type, "Fortune500Global")
        self.assertEqual(DirectoryCompany.from_dict(company.to_dict()), company)


class TestPatch(unittest.TestCase):
    def setUp(self):
        self.base = DirectoryCompany(
            id="c-circle", name="Circle", description="Issuer", website="circle.com",
            categories=["Stablecoins"], partners=[Partner(name="Visa")],
        )

    def test_empty_values_never_overwrite(self):
        patch = CompanyPatch.from_dict({"description": "  ", "website": None, "categories": [], "partners": []})
        self.assertTrue(patch.is_empty())
        self.assertEqual(apply_patch(self.base, patch), self.base)

    def test_last_non_empty_wins(self):
        patch = CompanyPatch.from_dict({"description": "USDC issuer", "headquarters": "Boston", "categories": ["Payments"]})
        out = apply_patch(self.base, patch)
        self.assertEqual(out.description, "USDC issuer")
        self.assertEqual(out.website, "circle.com")
        self.assertEqual(out.headquarters, "Boston")
        self.assertEqual(out.categories, ["Payments"])

    def test_partners_union_by_name_and_type(self):
        merged = merge_partners(
            [Partner(name="Visa")],
            [Partner(name="visa"), Partner(name="Visa", type="CryptoNative"), Partner(name="Stripe")],
        )
        self.assertEqual([(p.name, p.type) for p in merged], [("Visa", "Fortune500Global"), ("Visa", "CryptoNative"), ("Stripe", "Fortune500Global")])

    def test_funding_investors_become_partners(self):
        patch = CompanyPatch.from_dict({"funding": {"investors": ["a16z", " ", "BlackRock"]}})
        out = apply_patch(self.base, patch)
        self.assertEqual(out.investors, ["a16z", " ", "BlackRock"])
        investors = [p.name for p in out.partners if p.type == "Investor"]
        self.assertEqual(investors, ["a16z", "BlackRock"])
        self.assertEqual(sync_investor_partners(out), out)


class TestBidirectional(unittest.TestCase):
    def test_reverse_links(self):
        circle = DirectoryCompany(id="c-circle", name="Circle", focus="Crypto-First", partners=[Partner(name="Coinbase", type="CryptoNative", description="USDC")])
        coinbase = DirectoryCompany(id="c-coinbase", name="Coinbase")
        visa = DirectoryCompany(id="c-visa", name="Visa", focus="Crypto-Second", partners=[Partner(name="Circle Inc", type="CryptoNative")])
        out = {c.id: c for c in ensure_bidirectional_partners([circle, coinbase, visa])}
        back = out["c-coinbase"].partners
        self.assertEqual([(p.name, p.type, p.description) for p in back], [("Circle", "CryptoNative", "USDC")])
        circle_partners = [(p.name, p.type) for p in out["c-circle"].partners]
        self.assertIn(("Visa", "Fortune500Global"), circle_partners)

    def test_idempotent(self):
        a = DirectoryCompany(id="c-a", name="A", partners=[Partner(name="B", type="CryptoNative")])
        b = DirectoryCompany(id="c-b", name="B")
        once = ensure_bidirectional_partners([a, b])
        self.assertEqual(ensure_bidirectional_partners(once), once)

    def test_shared_id_keeps_every_record_in_order(self):
        a = DirectoryCompany(id="c-a", name="A", partners=[Partner(name="B", type="CryptoNative")])
        b = DirectoryCompany(id="c-b", name="B")
        b_legacy = DirectoryCompany(id="c-b", name="B Inc")
        out = ensure_bidirectional_partners([a, b, b_legacy])
        self.assertEqual([c.name for c in out], ["A", "B", "B Inc"])
        self.assertEqual([p.name for p in out[1].partners], ["A"])
        self.assertEqual(out[2], b_legacy)

    def test_unknown_partner_untouched(self):
        a = DirectoryCompany(id="c-a", name="A", partners=[Partner(name="Walmart")])
        self.assertEqual(ensure_bidirectional_partners([a]), [a])


class TestLists(unittest.TestCase):
    def test_add_and_update_entry(self):
        lst = new_list(" Watch ", now=NOW)
        self.assertTrue(lst.id.startswith("list_"))
        self.assertEqual(lst.name, "Watch")
        lst = add_entry(lst, "c-circle", "issuer", "High", now=NOW)
        lst = add_entry(lst, "c-circle", "issuer", "Critical", now=NOW)
        self.assertEqual([(e.company_id, e.priority) for e in lst.entries], [("c-circle", "Critical")])
        self.assertEqual(CompanyList.from_dict(lst.to_dict()), lst)

    def test_bad_input(self):
        with self.assertRaises(ValueError):
            new_list("")
        with self.assertRaises(ValueError):
            add_entry(new_list("x"), "c-a", priority="Urgent")
        self.assertIn("Medium", PRIORITIES)

    def test_remap_after_merge(self):
        lst = add_entry(add_entry(new_list("x", now=NOW), "c-stale", now=NOW), "c-circle", now=NOW)
        out = remap_entries(lst, {"c-stale": "c-circle"})
        self.assertEqual([e.company_id for e in out.entries], ["c-circle"])
        self.assertIs(remap_entries(lst, {}), lst)


if __name__ == "__main__":
    unittest.main()
