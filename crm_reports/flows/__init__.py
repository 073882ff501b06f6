"""
Flows
=====
Prefect flows: load a report by token, summarize it, emit events.
"""
