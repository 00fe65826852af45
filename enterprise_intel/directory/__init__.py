"""Company directory.

- models.py: company/partner records, the enrichment patch type and its merge
- grouping.py: filter/sort and parent/subsidiary grouping of a directory view
- duplicates.py: duplicate detection and merge
- lists.py: named watch lists of company ids
"""
