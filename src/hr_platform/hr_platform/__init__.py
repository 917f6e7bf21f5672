"""HR Platform package.

Leave-request lifecycle with the vacation balance ledger, and the daily
attendance clock. Organized by feature modules (requests, ledger, attendance,
...) with a thin Flask controller layer over service/repository layers.
"""
