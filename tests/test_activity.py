import unittest

from enterprise_intel.directory.models import Partner
from enterprise_intel.linkage.activity import (
    classify,
    manual_news_item,
    merge_research,
    news_mentions,
    partnership_news_items,
    research_news_items,
)
from enterprise_intel.linkage.models import Initiative, NewsItem, Partnership, ResearchRecord, Status
from enterprise_intel.registry.merger import UnifiedEnterprise
from enterprise_intel.registry.parser import GLOBAL, RegistryRow

ROW = RegistryRow(rank=7, name="Apple", revenue="$383,285", employees=0, scale=GLOBAL)


class TestClassify(unittest.TestCase):
    def test_priority_order(self):
        record = ResearchRecord("Apple", 7, "", [Initiative(title="Pilot")])
        news = [NewsItem(id="n", title="Apple pilots stablecoins")]
        e = UnifiedEnterprise(row=ROW, provenance=GLOBAL, active_partnerships=[Partnership("Circle", "x")], research=record, news_mentions=news)
        self.assertEqual(classify(e), Status.STRATEGIC)
        self.assertEqual(classify(UnifiedEnterprise(row=ROW, provenance=GLOBAL, research=record)), Status.EXPLORING)
        self.assertEqual(classify(UnifiedEnterprise(row=ROW, provenance=GLOBAL, news_mentions=news)), Status.EXPLORING)

    def test_research_without_initiatives_is_evaluating(self):
        record = ResearchRecord("Apple", 7, "nothing yet", [])
        self.assertEqual(classify(UnifiedEnterprise(row=ROW, provenance=GLOBAL, research=record)), Status.EVALUATING)
        self.assertEqual(classify(UnifiedEnterprise(row=ROW, provenance=GLOBAL)), Status.EVALUATING)


class TestMergeResearch(unittest.TestCase):
    def test_new_first_then_surviving_old(self):
        existing = ResearchRecord("Apple", 7, "old summary", [Initiative(title="Pilot A")])
        merged = merge_research(existing, "Apple", 7, {"summary": "new", "initiatives": [{"title": "Pilot B"}]}, now=1.0)
        self.assertEqual([i.title for i in merged.initiatives], ["Pilot B", "Pilot A"])
        self.assertEqual(merged.summary, "new")
        self.assertEqual(merged.last_updated, 1.0)

    def test_same_title_replaced_by_new(self):
        existing = ResearchRecord("Apple", 7, "s", [Initiative(title="Pilot A", description="stale"), Initiative(title="Pilot C")])
        merged = merge_research(existing, "Apple", 7, {"initiatives": [{"title": "Pilot A", "description": "fresh"}]})
        self.assertEqual([i.title for i in merged.initiatives], ["Pilot A", "Pilot C"])
        self.assertEqual(merged.initiatives[0].description, "fresh")
        # missing summary keeps the previous one
        self.assertEqual(merged.summary, "s")

    def test_empty_response_keeps_record(self):
        existing = ResearchRecord("Apple", 7, "s", [Initiative(title="Pilot A")])
        merged = merge_research(existing, "Apple", 7, {})
        self.assertEqual([i.title for i in merged.initiatives], ["Pilot A"])

    def test_first_run(self):
        merged = merge_research(None, "Apple", 7, {"summary": "s", "initiatives": [{"title": "T", "sourceUrl": "https://x"}]})
        self.assertEqual(merged.initiatives[0].source_url, "https://x")


class TestNews(unittest.TestCase):
    def test_mentions_both_directions(self):
        news = [
            NewsItem(id="1", title="JPMorgan Chase tokenizes deposits"),
            NewsItem(id="2", title="Unrelated", related_companies=["JPMorgan Chase Bank"]),
            NewsItem(id="3", title="Chase", related_companies=[]),
            NewsItem(id="4", title="Other", related_companies=["", "Walmart"]),
        ]
        self.assertEqual([n.id for n in news_mentions(news, "JPMorgan Chase")], ["1", "2", "3"])

    def test_research_items(self):
        items = research_news_items("Apple", 7, [Initiative(title="Pilot", date="2024-01-02", source_url="")], stamp=5)
        self.assertEqual(items[0].id, "res-7-5-0")
        self.assertEqual(items[0].title, "Apple: Pilot")
        self.assertEqual(items[0].source, "AI Research")
        self.assertEqual(items[0].url, "#")
        self.assertEqual(items[0].related_companies, ["Apple", "Fortune 500"])

    def test_manual_item(self):
        item = manual_news_item("Apple", "  Apple joins consortium ", url="https://n", stamp=9)
        self.assertEqual(item.id, "manual-news-9")
        self.assertEqual(item.title, "Apple joins consortium")
        self.assertEqual(item.source, "Manual Entry")
        with self.assertRaises(ValueError):
            manual_news_item("Apple", "  ")

    def test_partnership_items_deterministic(self):
        partners = [Partner(name="J.P. Morgan", description="settlement", date="2024-05-01")]
        a = partnership_news_items("Circle Internet", partners)
        b = partnership_news_items("Circle Internet", partners)
        self.assertEqual(a, b)
        self.assertEqual(a[0].id, "ptnr-CircleInternet-JPMorgan")
        self.assertEqual(a[0].source, "Directory Intelligence")


if __name__ == "__main__":
    unittest.main()
