"""Repository layer: SQL for the presets / models / tags tables.

Functions take an open connection and stay thin; embedded JSON columns are
encoded and decoded here so services only see entities.
"""
