"""
Operator tools: command-line reports over the ledger pipeline.
"""
