"""HTTP surface for the Blossom engines.

The API is stateless: every request carries the log window it wants
analyzed, and nothing is persisted.
"""
