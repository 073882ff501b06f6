"""
CRM Reports
===========
Data-quality and enrichment report summaries for CRM datasets.
"""
