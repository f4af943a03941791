#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Shared helpers that are not specific to decoding or assembly."""
