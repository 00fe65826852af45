"""Links the directory to the registries.

- partnerships.py: partner names -> canonical enterprise names
- activity.py: status classification, research merge, news items
- view.py: the per-enterprise view the API serves
"""
